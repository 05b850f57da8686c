"""
Template Marketplace API

- GET  /templates          paginated listing with term search and category
- GET  /templates/{id}     full template including its content
- POST /templates/match    natural-language keyword matching
"""
from fastapi import APIRouter, Body, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession
from typing import Any, Optional

from app.api.v1.dependencies import get_template_service
from app.core.database import get_db
from app.core.logging_config import logger
from app.schemas.template import (
    TemplateDetail,
    TemplateListResponse,
    TemplateMatchResponse,
    TemplateSummary,
)
from app.services.template_service import TemplateService

router = APIRouter()


@router.get("", response_model=TemplateListResponse)
async def list_templates(
    search: Optional[str] = Query(None, description="Whitespace-separated terms matched against name/description"),
    category: Optional[str] = Query(None, description="Category filter, 'all' for none"),
    page: int = Query(1, ge=1),
    page_size: int = Query(12, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    service: TemplateService = Depends(get_template_service),
):
    """List marketplace templates, newest first"""
    result = await service.list_templates(db, search=search, category=category, page=page, page_size=page_size)
    return TemplateListResponse(
        templates=[TemplateSummary.model_validate(t) for t in result["items"]],
        total=result["total"],
        page=result["page"],
        page_size=result["page_size"],
        total_pages=result["total_pages"],
        search_query=result["search_query"],
    )


@router.post("/match", response_model=TemplateMatchResponse)
async def match_templates(
    payload: Any = Body(None),
    db: AsyncSession = Depends(get_db),
    service: TemplateService = Depends(get_template_service),
):
    """Rank templates for a free-text description of the page the user wants"""
    query = payload.get("query") if isinstance(payload, dict) else None
    if not isinstance(query, str) or not query.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Please provide a search keyword"
        )

    try:
        outcome = await service.match_templates(db, query)
    except Exception as e:
        logger.log_error_with_context(e, context="template_match", query=query)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "message": "Template search failed"},
        )

    return TemplateMatchResponse(
        templates=[TemplateSummary.model_validate(t) for t in outcome.templates],
        message=outcome.message,
        matched_categories=list(outcome.matched_categories),
    )


@router.get("/{template_id}", response_model=TemplateDetail)
async def get_template(
    template_id: int,
    db: AsyncSession = Depends(get_db),
    service: TemplateService = Depends(get_template_service),
):
    """Get one template with its layout content"""
    return await service.get_template(db, template_id)
