# Authentication module

from app.modules.auth.dependencies import (
    get_current_user,
    get_user_layout,
    security,
)

__all__ = [
    "get_current_user",
    "get_user_layout",
    "security",
]
