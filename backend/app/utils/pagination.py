"""
Offset pagination for select() queries
"""
from typing import Any, Dict, Optional

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

MAX_PAGE_SIZE = 100


def clamp_page(page: int, page_size: int) -> tuple:
    """Page numbers start at 1; page_size is kept within 1..MAX_PAGE_SIZE"""
    return max(1, page), min(MAX_PAGE_SIZE, max(1, page_size))


async def paginate(
    db: AsyncSession,
    query: Select,
    page: int = 1,
    page_size: int = 10,
    count_query: Optional[Select] = None,
) -> Dict[str, Any]:
    """
    Run `query` for one page.

    Returns {items, total, page, page_size, total_pages}; total_pages is 1
    for an empty result so clients always have a page to show.
    """
    page, page_size = clamp_page(page, page_size)

    if count_query is None:
        count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total = (await db.execute(count_query)).scalar() or 0

    rows = await db.execute(query.offset((page - 1) * page_size).limit(page_size))

    return {
        "items": list(rows.scalars().all()),
        "total": total,
        "page": page,
        "page_size": page_size,
        "total_pages": max(1, -(-total // page_size)),
    }
