"""
Image Upload API

POST /uploads stores one image and, when component_id is given, links it
to that component (which must belong to one of the caller's layouts).
"""
from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from typing import Optional

from app.core.database import get_db
from app.core.logging_config import logger
from app.models.image import Image
from app.models.layout import Box, Component, Layout
from app.models.user import User
from app.modules.auth.dependencies import get_current_user
from app.modules.storage import ImageStorageManager, get_image_storage

router = APIRouter()


async def get_owned_component(db: AsyncSession, component_id: str, user: User) -> Component:
    result = await db.execute(
        select(Component)
        .join(Box, Component.box_id == Box.id)
        .join(Layout, Box.layout_id == Layout.id)
        .where(Component.id == component_id, Layout.user_id == str(user.id))
    )
    component = result.scalar_one_or_none()
    if component is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Component not found"
        )
    return component


@router.post("")
async def upload_image(
    image: Optional[UploadFile] = File(None),
    component_id: Optional[str] = Form(None),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    storage: ImageStorageManager = Depends(get_image_storage),
):
    """Store an image and return its public url"""
    if image is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No file uploaded"
        )

    component = await get_owned_component(db, component_id, current_user) if component_id else None

    stored = await storage.save(image.filename, await image.read())
    record = Image(path=stored.url, size=stored.size)
    db.add(record)

    if component is not None:
        component.image = record
        component.props = {**(component.props or {}), "src": stored.url}

    await db.commit()
    logger.info(
        f"[Uploads] User {current_user.id} uploaded {stored.name}",
        extra={"event_type": "image_uploaded", "component_id": component_id},
    )
    return {"url": stored.url}
