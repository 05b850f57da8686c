from pydantic import BaseModel, Field
from typing import List

from app.schemas.template import TemplateSummary


class FavoriteRequest(BaseModel):
    template_id: int = Field(..., alias="templateId")
    # "add" or "remove"; anything else is rejected with 400 by the service
    action: str

    class Config:
        populate_by_name = True


class FavoriteTemplatesResponse(BaseModel):
    templates: List[TemplateSummary] = []
