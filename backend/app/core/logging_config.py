"""
PageCraft - Logging

One named logger ("pagecraft") shared by the whole backend:
- development: readable single-line records tagged with request/user id
- production: one JSON object per record, extras flattened into it
- optional rotating file handler when LOG_FILE is set

Request and user ids live in context variables set by the request
middleware and the auth dependency, so every record emitted while a
request is served carries them.
"""

import json
import logging
import sys
import traceback
import uuid
from contextvars import ContextVar
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional

from app.core.config import settings

LOGGER_NAME = "pagecraft"
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024

request_id_var: ContextVar[str] = ContextVar("request_id", default="")
user_id_var: ContextVar[str] = ContextVar("user_id", default="")

# Attributes every LogRecord has; anything else arrived through `extra=`
_STANDARD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None)).keys()
) | {"message", "asctime", "request_id", "user_id"}


def get_request_id() -> str:
    return request_id_var.get()


def set_request_id(request_id: str) -> None:
    request_id_var.set(request_id)


def get_user_id() -> str:
    return user_id_var.get()


def set_user_id(user_id: str) -> None:
    user_id_var.set(user_id)


def generate_request_id() -> str:
    """Short id for correlating the log lines of one request"""
    return uuid.uuid4().hex[:8]


class RequestContextFilter(logging.Filter):
    """Stamp request_id / user_id from the current context onto each record"""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = get_request_id() or "-"
        record.user_id = get_user_id() or "-"
        return True


class JSONFormatter(logging.Formatter):
    """Structured records for log aggregation in production"""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.utcnow().isoformat() + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
        }
        for key in ("request_id", "user_id"):
            value = getattr(record, key, "-")
            if value and value != "-":
                entry[key] = value

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc_value, exc_tb = record.exc_info
            entry["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "traceback": traceback.format_exception(exc_type, exc_value, exc_tb),
            }

        entry.update(
            (key, value) for key, value in vars(record).items()
            if key not in _STANDARD_ATTRS and not key.startswith("_")
        )
        return json.dumps(entry, default=str, ensure_ascii=False)


class PageCraftLogger(logging.Logger):
    """Logger with helpers for the events the backend records repeatedly"""

    def log_event(self, event_type: str, message: str, level: int = logging.INFO, **fields: Any) -> None:
        self.log(level, message, extra={"event_type": event_type, **fields})

    def log_request(self, method: str, path: str, status_code: int, duration_ms: float, **fields: Any) -> None:
        level = logging.WARNING if status_code >= 500 else logging.INFO
        self.log_event(
            "http_request",
            f"{method} {path} -> {status_code} ({duration_ms:.2f}ms)",
            level=level,
            http_method=method,
            http_path=path,
            http_status=status_code,
            duration_ms=round(duration_ms, 2),
            **fields,
        )

    def log_auth_event(
        self,
        event: str,
        success: bool,
        user_email: Optional[str] = None,
        reason: Optional[str] = None,
        **fields: Any,
    ) -> None:
        outcome = "ok" if success else f"failed ({reason or 'unknown'})"
        self.log_event(
            "auth",
            f"Auth {event} {outcome}" + (f" for {user_email}" if user_email else ""),
            level=logging.INFO if success else logging.WARNING,
            auth_event=event,
            auth_success=success,
            user_email=user_email,
            failure_reason=reason,
            **fields,
        )

    def log_error_with_context(self, error: Exception, context: Optional[str] = None, **fields: Any) -> None:
        """Error record with traceback; `context` names the operation that failed"""
        self.error(
            f"{context or 'unhandled'} failed: {type(error).__name__}: {error}",
            exc_info=error,
            extra={
                "event_type": "error",
                "error_type": type(error).__name__,
                "error_context": context,
                **fields,
            },
        )

    def log_performance(self, operation: str, duration_ms: float, threshold_ms: float = 1000, **fields: Any) -> None:
        """Warn when an operation is slower than threshold_ms, debug otherwise"""
        slow = duration_ms > threshold_ms
        self.log_event(
            "performance",
            f"Slow: {operation} took {duration_ms:.2f}ms (> {threshold_ms}ms)" if slow
            else f"{operation} took {duration_ms:.2f}ms",
            level=logging.WARNING if slow else logging.DEBUG,
            operation=operation,
            duration_ms=round(duration_ms, 2),
            slow=slow,
            **fields,
        )


def _build_handler(handler: logging.Handler, formatter: logging.Formatter, level: int) -> logging.Handler:
    handler.setLevel(level)
    handler.setFormatter(formatter)
    handler.addFilter(RequestContextFilter())
    return handler


def setup_logging() -> PageCraftLogger:
    """Configure the "pagecraft" logger from settings and return it"""
    logging.setLoggerClass(PageCraftLogger)
    log = logging.getLogger(LOGGER_NAME)
    log.__class__ = PageCraftLogger
    log.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
    log.propagate = False
    log.handlers.clear()

    json_logs = settings.ENVIRONMENT == "production"
    if json_logs:
        console_formatter = file_formatter = JSONFormatter()
    else:
        console_formatter = logging.Formatter("%(levelname)-8s [%(request_id)s] %(message)s")
        file_formatter = logging.Formatter(
            "%(asctime)s | %(levelname)-8s | [%(request_id)s] [%(user_id)s] | "
            "%(module)s.%(funcName)s:%(lineno)d | %(message)s"
        )

    log.addHandler(_build_handler(logging.StreamHandler(sys.stdout), console_formatter, logging.INFO))

    if settings.LOG_FILE:
        log_path = Path(settings.LOG_FILE)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_path,
            maxBytes=LOG_FILE_MAX_BYTES,
            backupCount=10 if json_logs else 5,
            encoding="utf-8",
        )
        log.addHandler(_build_handler(file_handler, file_formatter, logging.DEBUG))

    for noisy in ("httpx", "httpcore", "anthropic", "uvicorn.access", "sqlalchemy.engine", "aiosqlite"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    log.debug(f"Logging ready (env={settings.ENVIRONMENT}, json={json_logs})")
    return log


logger: PageCraftLogger = setup_logging()


__all__ = [
    "logger",
    "setup_logging",
    "get_request_id",
    "set_request_id",
    "get_user_id",
    "set_user_id",
    "generate_request_id",
    "PageCraftLogger",
]
