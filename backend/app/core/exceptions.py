"""
Domain errors raised by services

Each carries an HTTP status, a stable machine-readable code and optional
details. The handler in app.main renders them as

    {"success": false, "error": {"code": ..., "message": ..., "details": {...}}}
"""
from typing import Any, Dict, List, Optional


class PageCraftError(Exception):
    status_code: int = 500
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, code: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        if code:
            self.code = code
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": self.message, "details": self.details}


class AuthorizationError(PageCraftError):
    """The caller may not act on this resource"""

    status_code = 403
    code = "NOT_AUTHORIZED"

    def __init__(self, message: str = "Not authorized"):
        super().__init__(message)


class ResourceNotFoundError(PageCraftError):
    status_code = 404
    resource_type = "Resource"

    def __init__(self, resource_id: Any):
        super().__init__(
            f"{self.resource_type} with ID '{resource_id}' not found",
            code=f"{self.resource_type.upper()}_NOT_FOUND",
            details={"resource_type": self.resource_type, "resource_id": str(resource_id)},
        )


class LayoutNotFoundError(ResourceNotFoundError):
    resource_type = "Layout"


class TemplateNotFoundError(ResourceNotFoundError):
    resource_type = "Template"


class ValidationError(PageCraftError):
    """Input the service cannot work with"""

    status_code = 400
    code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        if field:
            details = {"field": field, **(details or {})}
        super().__init__(message, details=details)


class InvalidFileTypeError(ValidationError):
    code = "INVALID_FILE_TYPE"

    def __init__(self, file_type: str, allowed_types: List[str]):
        super().__init__(
            f"File type '{file_type}' not allowed. Allowed: {', '.join(allowed_types)}",
            details={"file_type": file_type, "allowed_types": list(allowed_types)},
        )


class FileTooLargeError(ValidationError):
    status_code = 413
    code = "FILE_TOO_LARGE"

    def __init__(self, size: int, max_size: int):
        super().__init__(
            f"File too large: {size} bytes (max {max_size} bytes)",
            details={"size": size, "max_size": max_size},
        )


class AIServiceError(PageCraftError):
    """The upstream model call failed"""

    status_code = 502
    code = "AI_SERVICE_ERROR"

    def __init__(self, message: str = "AI service is unavailable"):
        super().__init__(message)


class StorageError(PageCraftError):
    code = "STORAGE_ERROR"


def error_response(error: PageCraftError) -> Dict[str, Any]:
    return {"success": False, "error": error.to_dict()}
