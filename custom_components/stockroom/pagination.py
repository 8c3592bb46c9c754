"""Page slicing for the item view."""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import TypeVar

from .const import PAGE_SIZE_OPTIONS
from .exceptions import ValidationError

T = TypeVar("T")


def validate_page_size(page_size: int) -> int:
    """Return ``page_size`` if it is one of the allowed options."""

    if isinstance(page_size, bool) or page_size not in PAGE_SIZE_OPTIONS:
        allowed = ", ".join(str(x) for x in PAGE_SIZE_OPTIONS)
        raise ValidationError(f"page_size must be one of: {allowed}")
    return page_size


def validate_page(page: int) -> int:
    if isinstance(page, bool) or not isinstance(page, int) or page < 1:
        raise ValidationError("page must be an integer >= 1")
    return page


def page_count(total: int, page_size: int) -> int:
    """Number of pages needed for ``total`` rows (0 when empty)."""

    if page_size <= 0:
        return 0
    return math.ceil(max(0, total) / page_size)


def paginate(items: Sequence[T], page: int, page_size: int) -> list[T]:
    """Return the 1-indexed ``page`` of ``items``.

    Pages past the end (or below 1) yield an empty list rather than raising.
    """

    if page < 1 or page_size <= 0:
        return []
    start = (page - 1) * page_size
    return list(items[start : start + page_size])
