"""
Template Service - marketplace listing, lookup and keyword search

Handles:
- Paginated listing with term search and category filter
- Single template lookup
- Natural-language matching through KeywordMatcher
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from sqlalchemy import select, and_, or_
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import TemplateNotFoundError
from app.core.logging_config import logger
from app.models.template import Template
from app.services.template_matcher import KeywordMatcher, rank_records
from app.utils.pagination import paginate

NO_MATCH_MESSAGE = "抱歉，暂无相关模板"
ALL_CATEGORIES = "all"


@dataclass
class TemplateMatchOutcome:
    templates: List[Template] = field(default_factory=list)
    matched_categories: Tuple[str, ...] = ()

    @property
    def message(self) -> str:
        if not self.templates:
            return NO_MATCH_MESSAGE
        return f"为您找到 {len(self.templates)} 个相关模板"


class TemplateService:
    """Service for the template marketplace"""

    def __init__(self, matcher: KeywordMatcher):
        self.matcher = matcher

    async def list_templates(
        self,
        db: AsyncSession,
        search: Optional[str] = None,
        category: Optional[str] = None,
        page: int = 1,
        page_size: int = 12,
    ) -> dict:
        """
        List templates newest first.

        Every whitespace-separated term of `search` must appear in the name
        or the description. `category` of None or "all" applies no filter.
        """
        query = select(Template)
        conditions = []

        terms = search.split() if search else []
        for term in terms:
            pattern = f"%{term}%"
            conditions.append(or_(Template.name.ilike(pattern), Template.description.ilike(pattern)))

        if category and category != ALL_CATEGORIES:
            conditions.append(Template.category == category)

        if conditions:
            query = query.where(and_(*conditions))
        query = query.order_by(Template.created_at.desc(), Template.id.desc())

        result = await paginate(db, query, page=page, page_size=page_size)
        result["search_query"] = search or ""
        return result

    async def get_template(self, db: AsyncSession, template_id: int) -> Template:
        result = await db.execute(select(Template).where(Template.id == template_id))
        template = result.scalar_one_or_none()
        if template is None:
            raise TemplateNotFoundError(template_id)
        return template

    async def match_templates(self, db: AsyncSession, query: str) -> TemplateMatchOutcome:
        """
        Rank marketplace templates for a free-text query.

        Blank queries and queries whose ids no longer exist in storage both
        yield an empty outcome.
        """
        match = self.matcher.match(query)
        if match.is_empty:
            logger.info(f"[TemplateMatch] No keyword match for query={query!r}")
            return TemplateMatchOutcome()

        result = await db.execute(
            select(Template).where(Template.id.in_(match.ranked_template_ids))
        )
        templates = rank_records(result.scalars().all(), match.ranked_template_ids)
        if not templates:
            logger.warning(
                f"[TemplateMatch] Matched ids {list(match.ranked_template_ids)} are missing from storage"
            )
            return TemplateMatchOutcome()

        logger.info(
            f"[TemplateMatch] query={query!r} -> {[t.id for t in templates]}",
            extra={"event_type": "template_match", "matched_categories": list(match.matched_categories)},
        )
        return TemplateMatchOutcome(templates=templates, matched_categories=match.matched_categories)
