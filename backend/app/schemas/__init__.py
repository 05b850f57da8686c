# Pydantic schemas
from app.schemas.auth import (
    UserRegister,
    UserLogin,
    RegisterResponse,
    UserResponse,
    LoginResponse,
)
from app.schemas.user import (
    ProfileResponse,
    ProfileUpdate,
    ProfileUpdateResponse,
    PasswordUpdate,
)
from app.schemas.template import (
    TemplateSummary,
    TemplateDetail,
    TemplateListResponse,
    TemplateMatchResponse,
)
from app.schemas.layout import (
    ComponentData,
    BoxData,
    LayoutData,
    ProjectSave,
    LayoutCreate,
    LayoutSummary,
    LayoutResponse,
    LayoutCreateResponse,
    ProjectSaveResponse,
    ProjectLoadResponse,
)
from app.schemas.favorite import FavoriteRequest, FavoriteTemplatesResponse

__all__ = [
    "UserRegister",
    "UserLogin",
    "RegisterResponse",
    "UserResponse",
    "LoginResponse",
    "ProfileResponse",
    "ProfileUpdate",
    "ProfileUpdateResponse",
    "PasswordUpdate",
    "TemplateSummary",
    "TemplateDetail",
    "TemplateListResponse",
    "TemplateMatchResponse",
    "ComponentData",
    "BoxData",
    "LayoutData",
    "ProjectSave",
    "LayoutCreate",
    "LayoutSummary",
    "LayoutResponse",
    "LayoutCreateResponse",
    "ProjectSaveResponse",
    "ProjectLoadResponse",
    "FavoriteRequest",
    "FavoriteTemplatesResponse",
]
