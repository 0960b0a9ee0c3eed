from typing import Any

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session
from sqlalchemy.sql import Select

from app.interfaces.api.v1.schemas.pagination import PaginationMeta, PaginationParams


def _count(db: Session, query: Select) -> int:
    return db.execute(select(func.count()).select_from(query.order_by(None).subquery())).scalar_one()


def paginate_scalars(
    db: Session,
    base_query: Select,
    params: PaginationParams,
    search_columns: list[Any],
) -> tuple[list[Any], PaginationMeta]:
    filtered_query = base_query
    if params.search is not None and search_columns:
        pattern = f"%{params.search}%"
        filtered_query = base_query.where(or_(*[column.ilike(pattern) for column in search_columns]))

    total = _count(db, base_query)
    filtered_total = _count(db, filtered_query)
    items = list(db.execute(filtered_query.offset(params.offset).limit(params.limit)).scalars().all())

    meta = PaginationMeta(
        offset=params.offset,
        limit=params.limit,
        total=total,
        filtered_total=filtered_total,
        has_next=(params.offset + params.limit) < filtered_total,
        has_prev=params.offset > 0,
    )
    return items, meta
