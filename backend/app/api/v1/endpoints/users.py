"""
User Profile API

The signed-in user's own account: profile overview, profile edits and
password change.
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from app.core.database import get_db
from app.core.security import get_password_hash
from app.core.logging_config import logger
from app.models.layout import Layout
from app.models.template import Template
from app.models.user import User
from app.modules.auth.dependencies import get_current_user
from app.schemas.user import (
    ProfileResponse,
    ProfileUser,
    ProfileLayout,
    ProfileTemplate,
    ProfileUpdate,
    ProfileUpdateResponse,
    PasswordUpdate,
)

router = APIRouter()


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Profile with the user's layouts and published templates"""
    layouts_result = await db.execute(
        select(Layout)
        .where(Layout.user_id == str(current_user.id))
        .order_by(Layout.created_at.desc())
    )
    templates_result = await db.execute(
        select(Template)
        .where(Template.user_id == str(current_user.id))
        .order_by(Template.created_at.desc())
    )

    return ProfileResponse(
        user=ProfileUser.model_validate(current_user),
        layouts=[ProfileLayout.model_validate(layout) for layout in layouts_result.scalars().all()],
        templates=[ProfileTemplate.model_validate(t) for t in templates_result.scalars().all()],
    )


@router.put("/profile", response_model=ProfileUpdateResponse)
async def update_profile(
    update: ProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Update name and/or email"""
    if update.email is not None:
        email = update.email.lower()
        if email != current_user.email:
            result = await db.execute(
                select(User).where(User.email == email, User.id != str(current_user.id))
            )
            if result.scalar_one_or_none():
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail={"message": "Email is already in use", "code": "EMAIL_TAKEN"}
                )
            current_user.email = email

    if update.name is not None:
        current_user.name = update.name.strip() or None

    await db.commit()
    logger.info(f"[Users] Profile updated for {current_user.id}")

    return ProfileUpdateResponse(name=current_user.name, email=current_user.email)


@router.put("/password")
async def update_password(
    update: PasswordUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Replace the user's password"""
    current_user.hashed_password = get_password_hash(update.password)
    await db.commit()

    logger.log_auth_event(event="password_change", success=True, user_email=current_user.email)
    return {"message": "Password updated successfully"}
