"""
Offset pagination over SQLModel select statements.
"""

import math
import re
from dataclasses import dataclass
from typing import Generic, Iterable, List, TypeVar

from sqlalchemy import func
from sqlmodel import Session, SQLModel, select
from sqlmodel.sql.expression import SelectOfScalar

from tracker.core.config import settings
from tracker.core.exceptions import InvalidPagination
from tracker.schemas.pagination import PageRequest, PaginationMeta

T = TypeVar("T", bound=SQLModel)

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


@dataclass
class PageResult(Generic[T]):
    """One page of records plus its metadata."""

    data: List[T]
    meta: PaginationMeta


def to_snake_case(name: str) -> str:
    """``createdAt`` -> ``created_at``; snake_case input is returned unchanged."""
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def build_meta(total: int, page: int, limit: int) -> PaginationMeta:
    """Compute page counts for ``total`` matching records."""
    total_pages = math.ceil(total / limit) if total else 0
    return PaginationMeta(
        total=total,
        page=page,
        limit=limit,
        total_pages=total_pages,
        has_next_page=page < total_pages,
        has_previous_page=page > 1,
    )


def validate_page_request(page_request: PageRequest, sortable_fields: Iterable[str]) -> str:
    """
    Check page bounds and resolve the sort field.

    Returns:
        The snake_case attribute name to sort on

    Raises:
        InvalidPagination: page or limit out of range, or unknown sort field
    """
    if page_request.page < 1:
        raise InvalidPagination(f"page must be >= 1, got {page_request.page}")
    if page_request.limit < 1 or page_request.limit > settings.MAX_PAGE_SIZE:
        raise InvalidPagination(
            f"limit must be between 1 and {settings.MAX_PAGE_SIZE}, got {page_request.limit}"
        )

    sort_field = to_snake_case(page_request.sort_by)
    if sort_field not in sortable_fields:
        raise InvalidPagination(f"Cannot sort by '{page_request.sort_by}'")
    return sort_field


def paginate(
    session: Session,
    model: type[T],
    statement: SelectOfScalar[T],
    page_request: PageRequest,
    sortable_fields: Iterable[str],
) -> PageResult[T]:
    """
    Count all rows matched by ``statement`` and fetch the requested page.

    Rows are ordered by the requested column, then by primary key so that
    equal sort values page deterministically.
    """
    sort_field = validate_page_request(page_request, sortable_fields)
    sort_column = getattr(model, sort_field)
    primary_key = getattr(model, "id")

    count_statement = select(func.count()).select_from(statement.subquery())
    total = session.exec(count_statement).one()

    ordered = statement.order_by(
        sort_column.asc() if page_request.ascending else sort_column.desc(),
        primary_key.asc(),
    )
    rows = session.exec(ordered.offset(page_request.offset).limit(page_request.limit)).all()

    return PageResult(data=list(rows), meta=build_meta(total, page_request.page, page_request.limit))
