from pydantic import BaseModel, Field, field_validator
from typing import Any, Dict, List, Optional, Union
from datetime import datetime


# ==================== Editor payloads ====================

class ComponentData(BaseModel):
    """Component as sent by the editor; camelCase keys are accepted too"""
    id: Optional[Union[str, int]] = None
    type: str
    width: Optional[Union[str, float]] = None
    height: Optional[float] = None
    props: Dict[str, Any] = Field(default_factory=dict)
    column_index: int = Field(0, alias="columnIndex")
    # Index of the uploaded file part image-<boxId>-<fileIndex>
    file_index: Optional[int] = Field(None, alias="fileIndex")

    class Config:
        populate_by_name = True

    @field_validator("props", mode="before")
    @classmethod
    def default_props(cls, v):
        return v if v is not None else {}


class BoxData(BaseModel):
    """Box as sent by the editor or stored in template content"""
    id: Optional[Union[str, int]] = None
    position_x: float = Field(0, alias="positionX")
    position_y: float = Field(0, alias="positionY")
    width: Union[str, float] = "100%"
    height: Optional[float] = None
    columns: int = 1
    components: List[ComponentData] = Field(default_factory=list)

    class Config:
        populate_by_name = True

    @field_validator("columns", mode="before")
    @classmethod
    def clamp_columns(cls, v):
        try:
            return max(1, int(v))
        except (TypeError, ValueError):
            return 1


class LayoutData(BaseModel):
    """projectData part of PUT /layouts/{id}"""
    name: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    boxes: List[BoxData] = Field(default_factory=list)


class ProjectBody(BaseModel):
    boxes: List[BoxData] = Field(default_factory=list)


class ProjectSave(BaseModel):
    """projectData part of POST /projects/save"""
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    project: ProjectBody = Field(default_factory=ProjectBody)


class LayoutCreate(BaseModel):
    template_id: int = Field(..., alias="templateId")

    class Config:
        populate_by_name = True


# ==================== Responses ====================

class ComponentResponse(BaseModel):
    id: str
    type: str
    width: Optional[str] = None
    height: Optional[int] = None
    props: Dict[str, Any] = {}
    column_index: int = 0
    image_id: Optional[str] = None

    class Config:
        from_attributes = True


class BoxResponse(BaseModel):
    id: str
    position_x: int
    position_y: int
    width: str
    height: Optional[int] = None
    columns: int
    components: List[ComponentResponse] = []

    class Config:
        from_attributes = True


class LayoutSummary(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    template_id: Optional[int] = None
    preview: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class LayoutResponse(LayoutSummary):
    boxes: List[BoxResponse] = []


class LayoutCreateResponse(BaseModel):
    project_id: str


class ProjectSaveResponse(BaseModel):
    layout_id: str
    boxes: List[BoxResponse] = []


class ProjectLoadResponse(BaseModel):
    boxes: List[BoxResponse] = []
