"""Offline tests for page slicing and page-size validation."""

from __future__ import annotations

import pytest
from custom_components.stockroom.exceptions import ValidationError
from custom_components.stockroom.pagination import (
    page_count,
    paginate,
    validate_page,
    validate_page_size,
)

ROWS = list(range(1, 24))  # 23 rows


@pytest.mark.parametrize("page_size", [10, 25, 50])
def test_page_lengths_follow_total(page_size: int) -> None:
    pages = page_count(len(ROWS), page_size)
    for page in range(1, pages + 1):
        expected = min(page_size, len(ROWS) - (page - 1) * page_size)
        assert len(paginate(ROWS, page, page_size)) == expected


def test_pages_cover_all_rows_in_order() -> None:
    collected: list[int] = []
    for page in range(1, page_count(len(ROWS), 10) + 1):
        collected.extend(paginate(ROWS, page, 10))
    assert collected == ROWS


def test_page_count() -> None:
    assert page_count(0, 10) == 0
    assert page_count(10, 10) == 1
    assert page_count(11, 10) == 2
    assert page_count(23, 25) == 1


def test_out_of_range_page_is_empty() -> None:
    assert paginate(ROWS, 4, 10) == []
    assert paginate(ROWS, 0, 10) == []
    assert paginate([], 1, 10) == []


@pytest.mark.parametrize("value", [0, 5, 20, 100, True])
def test_validate_page_size_rejects_unknown_sizes(value) -> None:
    with pytest.raises(ValidationError):
        validate_page_size(value)


def test_validate_page_size_accepts_options() -> None:
    assert [validate_page_size(v) for v in (10, 25, 50)] == [10, 25, 50]


@pytest.mark.parametrize("value", [0, -1, "2", True])
def test_validate_page_rejects_non_positive(value) -> None:
    with pytest.raises(ValidationError):
        validate_page(value)
