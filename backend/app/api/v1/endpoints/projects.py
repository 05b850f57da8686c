"""
Project save / load API used by the free-form editor

- POST /projects/save  store the editor canvas as a new layout
- GET  /projects/load  boxes of the user's most recent layout
"""
from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.v1.dependencies import get_layout_service
from app.core.database import get_db
from app.models.user import User
from app.modules.auth.dependencies import get_current_user
from app.schemas.layout import BoxResponse, ProjectLoadResponse, ProjectSave, ProjectSaveResponse
from app.services.layout_service import LayoutService, parse_project_data, read_file_parts

router = APIRouter()


@router.post("/save", response_model=ProjectSaveResponse)
async def save_project(
    request: Request,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    layouts: LayoutService = Depends(get_layout_service),
):
    """
    Multipart form:
    - projectData: JSON {name, description, project: {boxes}}
    - image-<boxId>-<fileIndex>: image parts referenced by components
    """
    form = await request.form()
    data = parse_project_data(form.get("projectData"), ProjectSave)
    files = await read_file_parts(form)

    layout = await layouts.save_new(db, current_user, data, files)
    return ProjectSaveResponse(
        layout_id=str(layout.id),
        boxes=[BoxResponse.model_validate(box) for box in layout.boxes],
    )


@router.get("/load", response_model=ProjectLoadResponse)
async def load_project(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
    layouts: LayoutService = Depends(get_layout_service),
):
    """Boxes of the latest layout, empty when the user has none"""
    layout = await layouts.load_latest(db, current_user)
    if layout is None:
        return ProjectLoadResponse(boxes=[])
    return ProjectLoadResponse(boxes=[BoxResponse.model_validate(box) for box in layout.boxes])
