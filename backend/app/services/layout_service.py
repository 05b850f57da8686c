"""
Layout Service - persistence of page designs

Handles:
- Creating a layout by cloning a marketplace template
- Replacing the box/component tree from editor payloads, with image parts
- Saving a new layout, deleting, and loading the latest one
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Mapping, Optional, Sequence, Tuple

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import AuthorizationError, LayoutNotFoundError, ValidationError
from app.core.logging_config import logger
from app.models.image import Image
from app.models.layout import Box, Component, Layout
from app.models.user import User
from app.modules.storage import ImageStorageManager, StoredImage
from app.schemas.layout import BoxData, ComponentData, LayoutData, ProjectSave
from app.services.template_service import TemplateService

# Multipart parts handed over by the endpoints: form key -> (filename, bytes)
FileParts = Mapping[str, Tuple[str, bytes]]

PREVIEW_PART = "preview"


def image_part_key(box_id: Any, file_index: int) -> str:
    return f"image-{box_id}-{file_index}"


def _dimension(value: Any) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value)


def _integer(value: Optional[float]) -> Optional[int]:
    return None if value is None else int(round(value))


def template_boxes(content: Optional[Mapping[str, Any]]) -> List[BoxData]:
    """Parse the boxes of a template content document"""
    if not isinstance(content, Mapping):
        return []
    return [BoxData.model_validate(box) for box in content.get("boxes") or []]


class LayoutService:
    """Service for layouts and their box trees"""

    def __init__(self, storage: ImageStorageManager):
        self.storage = storage
        self._written: List[StoredImage] = []

    # ==================== Image files ====================

    async def _save_file(self, filename: str, data: bytes) -> StoredImage:
        stored = await self.storage.save(filename, data)
        self._written.append(stored)
        return stored

    @asynccontextmanager
    async def _files_rolled_back_on_error(self) -> AsyncIterator[None]:
        """Delete files written inside the block when the block fails"""
        self._written = []
        try:
            yield
        except Exception:
            orphans, self._written = self._written, []
            for stored in orphans:
                await self.storage.delete(stored.name)
            if orphans:
                logger.warning(
                    f"[Layouts] Save failed, removed {len(orphans)} written image(s)",
                    extra={"event_type": "layout_save_rollback", "removed_files": len(orphans)},
                )
            raise
        self._written = []

    # ==================== Box tree ====================

    async def _store_image(self, db: AsyncSession, part: Tuple[str, bytes]) -> Image:
        filename, data = part
        stored = await self._save_file(filename, data)
        image = Image(path=stored.url, size=stored.size)
        db.add(image)
        return image

    async def _build_component(
        self,
        db: AsyncSession,
        box_data: BoxData,
        data: ComponentData,
        sort_order: int,
        files: FileParts,
    ) -> Component:
        props = dict(data.props)
        component = Component(
            type=data.type,
            width=_dimension(data.width),
            height=_integer(data.height),
            column_index=data.column_index,
            sort_order=sort_order,
        )

        if data.file_index is not None:
            part = files.get(image_part_key(box_data.id, data.file_index))
            if part is not None:
                image = await self._store_image(db, part)
                component.image = image
                props["src"] = image.path

        component.props = props
        return component

    async def build_boxes(
        self,
        db: AsyncSession,
        boxes: Sequence[BoxData],
        files: Optional[FileParts] = None,
    ) -> List[Box]:
        """Materialise editor boxes as ORM rows, storing referenced image parts"""
        files = files or {}
        built = []
        for box_order, box_data in enumerate(boxes):
            box = Box(
                position_x=_integer(box_data.position_x) or 0,
                position_y=_integer(box_data.position_y) or 0,
                width=_dimension(box_data.width) or "100%",
                height=_integer(box_data.height),
                columns=box_data.columns,
                sort_order=box_order,
            )
            box.components = [
                await self._build_component(db, box_data, component, order, files)
                for order, component in enumerate(box_data.components)
            ]
            built.append(box)
        return built

    # ==================== Queries ====================

    async def get_layout(self, db: AsyncSession, layout_id: str) -> Layout:
        """Fetch a layout with a fresh box tree"""
        result = await db.execute(
            select(Layout)
            .where(Layout.id == str(layout_id))
            .execution_options(populate_existing=True)
        )
        layout = result.scalar_one_or_none()
        if layout is None:
            raise LayoutNotFoundError(layout_id)
        return layout

    async def list_layouts(self, db: AsyncSession, user: User) -> List[Layout]:
        result = await db.execute(
            select(Layout)
            .where(Layout.user_id == str(user.id))
            .order_by(Layout.created_at.desc())
        )
        return list(result.scalars().all())

    async def load_latest(self, db: AsyncSession, user: User) -> Optional[Layout]:
        """Most recently created layout of the user, None when there is none"""
        result = await db.execute(
            select(Layout)
            .where(Layout.user_id == str(user.id))
            .order_by(Layout.created_at.desc())
            .limit(1)
        )
        return result.scalar_one_or_none()

    # ==================== Commands ====================

    async def create_from_template(
        self,
        db: AsyncSession,
        user: User,
        template_service: TemplateService,
        template_id: int,
    ) -> Layout:
        """Start a new project from a template, copying its boxes and components"""
        template = await template_service.get_template(db, template_id)

        layout = Layout(
            user_id=str(user.id),
            template_id=template.id,
            name=f"{template.name} - New Project",
            description=template.description,
            content=template.content,
        )
        layout.boxes = await self.build_boxes(db, template_boxes(template.content))
        db.add(layout)
        await db.commit()

        logger.info(
            f"[Layouts] Created layout {layout.id} from template {template.id}",
            extra={"event_type": "layout_created", "layout_id": layout.id, "template_id": template.id},
        )
        return layout

    async def update_layout(
        self,
        db: AsyncSession,
        layout: Layout,
        data: LayoutData,
        files: Optional[FileParts] = None,
    ) -> Layout:
        """Replace name, description and the whole box tree of an owned layout"""
        files = files or {}
        if data.name is not None:
            if not data.name.strip():
                raise ValidationError("Layout name cannot be empty", field="name")
            layout.name = data.name.strip()
        if data.description is not None:
            layout.description = data.description

        async with self._files_rolled_back_on_error():
            layout.boxes = await self.build_boxes(db, data.boxes, files)

            preview = files.get(PREVIEW_PART)
            if preview is not None:
                stored = await self._save_file(*preview)
                layout.preview = stored.url

            await db.commit()
        logger.info(
            f"[Layouts] Saved layout {layout.id} with {len(data.boxes)} boxes",
            extra={"event_type": "layout_saved", "layout_id": layout.id},
        )
        return await self.get_layout(db, layout.id)

    async def save_new(
        self,
        db: AsyncSession,
        user: User,
        data: ProjectSave,
        files: Optional[FileParts] = None,
    ) -> Layout:
        """Persist a brand new layout from the editor"""
        layout = Layout(
            user_id=str(user.id),
            name=data.name.strip() or "Untitled",
            description=data.description,
        )
        async with self._files_rolled_back_on_error():
            layout.boxes = await self.build_boxes(db, data.project.boxes, files)
            db.add(layout)
            await db.commit()

        logger.info(
            f"[Projects] Saved new layout {layout.id} for user {user.id}",
            extra={"event_type": "project_saved", "layout_id": layout.id},
        )
        return await self.get_layout(db, layout.id)

    async def delete_layout(self, db: AsyncSession, user: User, layout_id: str) -> None:
        """Delete a layout: 404 when it does not exist, 403 when owned by someone else"""
        layout = await self.get_layout(db, layout_id)
        if str(layout.user_id) != str(user.id):
            raise AuthorizationError("No permission to delete this layout")

        await db.delete(layout)
        await db.commit()
        logger.info(f"[Layouts] Deleted layout {layout_id}", extra={"event_type": "layout_deleted"})


def parse_project_data(raw: Optional[str], model):
    """Validate the JSON projectData form part against a schema"""
    if not isinstance(raw, str) or not raw.strip():
        raise ValidationError("Missing or invalid projectData", field="projectData")
    try:
        return model.model_validate_json(raw)
    except PydanticValidationError as e:
        raise ValidationError(f"Invalid projectData: {e.errors()[0].get('msg', 'malformed')}", field="projectData") from e


async def read_file_parts(form) -> Dict[str, Tuple[str, bytes]]:
    """Read the image-* and preview uploads of a multipart form"""
    parts = {}
    for key, value in form.multi_items():
        if (key.startswith("image-") or key == PREVIEW_PART) and hasattr(value, "read"):
            parts[key] = (value.filename or key, await value.read())
    return parts
