"""
Request-scoped auth dependencies

get_current_user resolves the bearer token to an active User; get_user_layout
loads a layout only when it belongs to that user.
"""
import uuid
from typing import Optional

from fastapi import Depends, HTTPException, Path, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db
from app.core.logging_config import set_user_id
from app.core.security import ACCESS_TOKEN_TYPE, decode_token
from app.models.layout import Layout
from app.models.user import User

# auto_error=False: a missing header is answered with 401 below, not HTTPBearer's 403
security = HTTPBearer(auto_error=False)


def _reject(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _subject_of(token: str) -> str:
    """User id carried by a verified access token"""
    claims = decode_token(token)
    if claims.get("type") != ACCESS_TOKEN_TYPE:
        raise _reject("Invalid token type")

    subject = claims.get("sub")
    if not subject:
        raise _reject("Invalid token payload")
    try:
        return str(uuid.UUID(str(subject)))
    except ValueError:
        raise _reject("Invalid user ID format")


async def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db),
) -> User:
    if credentials is None:
        raise _reject("Not authenticated")

    user_id = _subject_of(credentials.credentials)
    user = (await db.execute(select(User).where(User.id == user_id))).scalar_one_or_none()
    if user is None:
        raise _reject("User not found")
    if not user.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="User account is inactive")

    request.state.user_id = user.id
    set_user_id(user.id)
    return user


async def get_user_layout(
    layout_id: str = Path(..., description="Layout ID"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> Layout:
    """The caller's layout; 404 both when it does not exist and when someone else owns it"""
    query = select(Layout).where(Layout.id == layout_id, Layout.user_id == current_user.id)
    layout = (await db.execute(query)).scalar_one_or_none()
    if layout is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Layout not found or no permission")
    return layout
