"""
Layouts API

A layout is a user's page design. Reads, updates and exports answer 404
both for missing layouts and for layouts owned by someone else; delete
tells the two apart (404 / 403).
"""
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse, Response
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from app.api.v1.dependencies import get_layout_service, get_template_service
from app.core.database import get_db
from app.core.logging_config import logger
from app.models.layout import Layout
from app.models.user import User
from app.modules.auth.dependencies import get_current_user, get_user_layout
from app.schemas.layout import (
    LayoutCreate,
    LayoutCreateResponse,
    LayoutData,
    LayoutResponse,
    LayoutSummary,
)
from app.services.code_generator import LayoutSnapshot, export_file_name, generate_page_code
from app.services.layout_service import LayoutService, parse_project_data, read_file_parts
from app.services.template_service import TemplateService

router = APIRouter()


@router.post("", response_model=LayoutCreateResponse, status_code=status.HTTP_201_CREATED)
async def create_layout(
    body: LayoutCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    layouts: LayoutService = Depends(get_layout_service),
    templates: TemplateService = Depends(get_template_service),
):
    """Start a new project from a marketplace template"""
    layout = await layouts.create_from_template(db, current_user, templates, body.template_id)
    return LayoutCreateResponse(project_id=str(layout.id))


@router.get("", response_model=List[LayoutSummary])
async def list_layouts(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    layouts: LayoutService = Depends(get_layout_service),
):
    """The current user's layouts, newest first"""
    return await layouts.list_layouts(db, current_user)


@router.get("/{layout_id}", response_model=LayoutResponse)
async def get_layout(layout: Layout = Depends(get_user_layout)):
    """Layout with its ordered boxes and components"""
    return layout


@router.put("/{layout_id}", response_model=LayoutResponse)
async def update_layout(
    request: Request,
    layout: Layout = Depends(get_user_layout),
    db: AsyncSession = Depends(get_db),
    layouts: LayoutService = Depends(get_layout_service),
):
    """
    Save the editor state of a layout.

    Multipart form:
    - projectData: JSON {name, description, boxes}
    - image-<boxId>-<fileIndex>: image for the component with that fileIndex
    - preview: page screenshot
    """
    form = await request.form()
    data = parse_project_data(form.get("projectData"), LayoutData)
    files = await read_file_parts(form)
    return await layouts.update_layout(db, layout, data, files)


@router.delete("/{layout_id}")
async def delete_layout(
    layout_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    layouts: LayoutService = Depends(get_layout_service),
):
    """Delete a layout owned by the current user"""
    await layouts.delete_layout(db, current_user, layout_id)
    return {"message": "Layout deleted successfully"}


@router.get("/{layout_id}/export")
async def export_layout(layout: Layout = Depends(get_user_layout)):
    """Download the layout as a React page (.jsx)"""
    try:
        code = generate_page_code(LayoutSnapshot.from_model(layout))
    except Exception as e:
        logger.log_error_with_context(e, context="layout_export", layout_id=str(layout.id))
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Failed to export layout"},
        )

    filename = export_file_name(layout.name)
    logger.info(f"[Layouts] Exported layout {layout.id} as {filename}")
    return Response(
        content=code,
        media_type="text/javascript",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
