"""Filtering and sorting of the item collection.

The query engine is a pure pipeline: search, then category, then sort. Each
step returns a new list and never mutates its input. Sorting uses an explicit
comparator per field, resolved once per sort configuration.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from decimal import Decimal
from functools import cmp_to_key
from typing import Any, Final

from .exceptions import ValidationError
from .models import SORT_KEYS, InventoryItem, SortConfig, normalize_text_for_sort

Comparator = Callable[[InventoryItem, InventoryItem], int]


def _is_number(value: Any) -> bool:
    return isinstance(value, int | float | Decimal) and not isinstance(value, bool)


def _numeric_comparator(attr: str) -> Comparator:
    def compare(a: InventoryItem, b: InventoryItem) -> int:
        left = getattr(a, attr)
        right = getattr(b, attr)
        if not (_is_number(left) and _is_number(right)):
            # Mixed or unexpected types compare equal
            return 0
        return (left > right) - (left < right)

    return compare


def _text_comparator(attr: str) -> Comparator:
    def compare(a: InventoryItem, b: InventoryItem) -> int:
        left = getattr(a, attr)
        right = getattr(b, attr)
        if not (isinstance(left, str) and isinstance(right, str)):
            return 0
        left_key = (normalize_text_for_sort(left), left)
        right_key = (normalize_text_for_sort(right), right)
        return (left_key > right_key) - (left_key < right_key)

    return compare


FIELD_COMPARATORS: Final[dict[str, Comparator]] = {
    "id": _text_comparator("id"),
    "name": _text_comparator("name"),
    "quantity": _numeric_comparator("quantity"),
    "price": _numeric_comparator("price"),
    "category": _text_comparator("category"),
    "sku": _text_comparator("sku"),
    "lastUpdated": _text_comparator("last_updated"),
}


def build_comparator(sort: SortConfig | None) -> Comparator | None:
    """Resolve the comparator for ``sort``; ``None`` means keep input order."""

    if sort is None or sort.key is None:
        return None
    base = FIELD_COMPARATORS.get(sort.key)
    if base is None:
        raise ValidationError(f"sort key must be one of: {', '.join(SORT_KEYS)}")
    if sort.direction == "descending":
        return lambda a, b: -base(a, b)
    return base


def matches_search(item: InventoryItem, search_term: str) -> bool:
    """Case-insensitive substring match on name, sku, or category."""

    if not search_term:
        return True
    needle = search_term.casefold()
    return (
        needle in (item.name or "").casefold()
        or needle in (item.sku or "").casefold()
        or needle in (item.category or "").casefold()
    )


def filter_items(
    items: Iterable[InventoryItem], search_term: str = "", category: str = ""
) -> list[InventoryItem]:
    """Apply the search predicate and the exact category predicate."""

    filtered = [it for it in items if matches_search(it, search_term)]
    if category:
        filtered = [it for it in filtered if it.category == category]
    return filtered


def sort_items(
    items: Iterable[InventoryItem],
    sort: SortConfig | None = None,
    *,
    comparator: Comparator | None = None,
) -> list[InventoryItem]:
    """Return a stably sorted copy of ``items``.

    A pre-resolved ``comparator`` takes precedence over ``sort``.
    """

    result = list(items)
    compare = comparator if comparator is not None else build_comparator(sort)
    if compare is None:
        return result
    result.sort(key=cmp_to_key(compare))
    return result


def query(
    items: Iterable[InventoryItem],
    search_term: str = "",
    category: str = "",
    sort: SortConfig | None = None,
    *,
    comparator: Comparator | None = None,
) -> list[InventoryItem]:
    """Derive the ordered view: search, then category, then sort."""

    return sort_items(filter_items(items, search_term, category), sort, comparator=comparator)
