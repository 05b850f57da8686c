from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional
from datetime import datetime


class TemplateSummary(BaseModel):
    """Template card as shown in the marketplace and in match results"""
    id: int
    name: str
    description: Optional[str] = None
    thumbnail: Optional[str] = None
    category: str
    keywords: List[str] = []

    class Config:
        from_attributes = True


class TemplateDetail(TemplateSummary):
    content: Optional[Dict[str, Any]] = None
    created_at: datetime


class TemplateListResponse(BaseModel):
    templates: List[TemplateSummary]
    total: int
    page: int
    page_size: int
    total_pages: int
    search_query: str = ""


class TemplateMatchResponse(BaseModel):
    success: bool = True
    templates: List[TemplateSummary] = []
    message: str
    match_type: str = Field("keyword", serialization_alias="matchType")
    matched_categories: List[str] = Field(default_factory=list, serialization_alias="matchedCategories")
