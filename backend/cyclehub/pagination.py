"""
Пагинация списков: limit/offset и сортировка по разрешенным полям
"""

import math
from typing import Any, Dict, Iterable, List, Optional

from fastapi import Query
from sqlalchemy import func, select

from cyclehub.schemas.common import Pagination, PaginationParams


def build_pagination(page: Optional[int] = None, limit: Optional[int] = None,
                     sort: Optional[str] = None, order: str = "desc") -> PaginationParams:
    """Нормализует параметры: page >= 1, 1 <= limit <= 100 (по умолчанию 10)"""
    page = max(1, page or 1)
    limit = min(100, max(1, limit or 10))
    return PaginationParams(page=page, limit=limit, sort=sort, order=order if order in ("asc", "desc") else "desc")


def paginate_result(items: List[Any], total: int, params: PaginationParams) -> Dict[str, Any]:
    return {
        "items": items,
        "pagination": Pagination(
            total=total,
            page=params.page,
            limit=params.limit,
            total_pages=math.ceil(total / params.limit),
            has_next_page=params.page * params.limit < total,
            has_prev_page=params.page > 1,
        ),
    }


def apply_sort(query, model, params: PaginationParams, allowed: Iterable[str]):
    """Сортировка по полю из белого списка, по умолчанию - новые первыми"""
    column = getattr(model, params.sort) if params.sort in set(allowed) else model.created_at
    ordered = column.asc() if params.order == "asc" and params.sort else column.desc()
    return query.order_by(ordered, model.id.desc())


async def fetch_page(db, query, model, params: PaginationParams, allowed_sort: Iterable[str] = ()):
    """Выполняет запрос страницы и подсчет общего количества"""
    total = await db.scalar(select(func.count()).select_from(query.subquery()))
    page_query = apply_sort(query, model, params, allowed_sort).offset(params.offset).limit(params.limit)
    result = await db.execute(page_query)
    return result.scalars().all(), total or 0


def pagination_params(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    sort: Optional[str] = Query(None, max_length=50),
    order: str = Query("desc", pattern="^(asc|desc)$"),
) -> PaginationParams:
    """Dependency: параметры страницы из query-строки"""
    return build_pagination(page, limit, sort, order)
