"""
Tests for pagination helpers.
"""

import pytest

from tracker.core.exceptions import InvalidPagination
from tracker.db.pagination import build_meta, to_snake_case, validate_page_request
from tracker.schemas.pagination import PageRequest


@pytest.mark.parametrize(
    "total, limit, expected_pages",
    [(0, 10, 0), (1, 10, 1), (10, 10, 1), (11, 10, 2), (25, 5, 5), (26, 5, 6)],
)
def test_total_pages_is_ceiling(total: int, limit: int, expected_pages: int) -> None:
    assert build_meta(total, 1, limit).total_pages == expected_pages


def test_next_and_previous_flags() -> None:
    middle = build_meta(total=30, page=2, limit=10)
    last = build_meta(total=30, page=3, limit=10)
    past_end = build_meta(total=30, page=9, limit=10)

    assert (middle.has_next_page, middle.has_previous_page) == (True, True)
    assert (last.has_next_page, last.has_previous_page) == (False, True)
    assert past_end.has_next_page is False


def test_page_request_defaults() -> None:
    request = PageRequest()
    assert (request.page, request.limit, request.sort_by, request.sort_order) == (1, 10, "createdAt", "desc")
    assert request.offset == 0
    assert request.ascending is False


@pytest.mark.parametrize("sort_order, ascending", [("asc", True), ("ASC", True), ("desc", False), ("sideways", False)])
def test_sort_direction(sort_order: str, ascending: bool) -> None:
    assert PageRequest(sort_order=sort_order).ascending is ascending


def test_offset() -> None:
    assert PageRequest(page=3, limit=20).offset == 40


@pytest.mark.parametrize(
    "name, expected",
    [("createdAt", "created_at"), ("created_at", "created_at"), ("estimatedDelivery", "estimated_delivery")],
)
def test_to_snake_case(name: str, expected: str) -> None:
    assert to_snake_case(name) == expected


def test_validate_resolves_sort_field() -> None:
    assert validate_page_request(PageRequest(sort_by="firstName"), {"first_name"}) == "first_name"


def test_validate_rejects_page_below_one() -> None:
    with pytest.raises(InvalidPagination):
        validate_page_request(PageRequest(page=0), {"created_at"})
