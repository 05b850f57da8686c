"""
Favorites API

- POST /favorites            {template_id, action: add|remove}
- GET  /favorites/templates  templates the user has favourited
"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete

from app.core.database import get_db
from app.core.exceptions import ValidationError
from app.core.logging_config import logger
from app.models.favorite import Favorite
from app.models.user import User
from app.modules.auth.dependencies import get_current_user
from app.api.v1.dependencies import get_template_service
from app.schemas.favorite import FavoriteRequest, FavoriteTemplatesResponse
from app.schemas.template import TemplateSummary
from app.services.template_service import TemplateService

router = APIRouter()

ADD = "add"
REMOVE = "remove"


@router.post("")
async def toggle_favorite(
    body: FavoriteRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    templates: TemplateService = Depends(get_template_service),
):
    """Add or remove a favourite; adding twice is a no-op"""
    if body.action not in (ADD, REMOVE):
        raise ValidationError(f"Invalid action '{body.action}', expected 'add' or 'remove'", field="action")

    user_id = str(current_user.id)

    if body.action == REMOVE:
        await db.execute(
            delete(Favorite).where(Favorite.user_id == user_id, Favorite.template_id == body.template_id)
        )
        await db.commit()
        logger.info(f"[Favorites] User {user_id} removed template {body.template_id}")
        return {"message": "Removed from favorites"}

    await templates.get_template(db, body.template_id)

    existing = await db.execute(
        select(Favorite).where(Favorite.user_id == user_id, Favorite.template_id == body.template_id)
    )
    if existing.scalar_one_or_none() is None:
        db.add(Favorite(user_id=user_id, template_id=body.template_id))
        await db.commit()
        logger.info(f"[Favorites] User {user_id} added template {body.template_id}")

    return {"message": "Added to favorites"}


@router.get("/templates", response_model=FavoriteTemplatesResponse)
async def list_favorite_templates(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    """Favourited templates, most recently favourited first"""
    result = await db.execute(
        select(Favorite)
        .where(Favorite.user_id == str(current_user.id))
        .order_by(Favorite.created_at.desc())
    )
    return FavoriteTemplatesResponse(
        templates=[TemplateSummary.model_validate(favorite.template) for favorite in result.scalars().all()]
    )
