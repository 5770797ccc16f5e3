"""
Pagination schemas shared by the user and shipment listings.
"""

from pydantic import BaseModel


class PageRequest(BaseModel):
    """Requested page window and ordering. Bounds are checked by the store layer."""

    page: int = 1
    limit: int = 10
    sort_by: str = "createdAt"
    sort_order: str = "desc"

    @property
    def ascending(self) -> bool:
        return self.sort_order.lower() == "asc"

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class PaginationMeta(BaseModel):
    """Pagination metadata returned alongside each page."""

    total: int
    page: int
    limit: int
    total_pages: int
    has_next_page: bool
    has_previous_page: bool
