"""Dashboard statistics over the full item collection.

Every reduction runs over the unfiltered collection; the current search,
category and page have no effect on the dashboard.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, localcontext
from typing import Any

from .const import LOW_STOCK_THRESHOLD
from .models import InventoryItem

CENT = Decimal("0.01")


@dataclass(frozen=True)
class DashboardStats:
    total_quantity: int
    unique_sku_count: int
    total_value: Decimal
    low_stock_count: int

    def as_dict(self) -> dict[str, Any]:
        return {
            "total_quantity": self.total_quantity,
            "unique_sku_count": self.unique_sku_count,
            "total_value": format_money(self.total_value),
            "low_stock_count": self.low_stock_count,
            "low_stock_threshold": LOW_STOCK_THRESHOLD,
        }


def is_low_stock(item: InventoryItem, threshold: int = LOW_STOCK_THRESHOLD) -> bool:
    return item.quantity <= threshold


def total_quantity(items: Iterable[InventoryItem]) -> int:
    return sum(int(it.quantity) for it in items)


def unique_sku_count(items: Iterable[InventoryItem]) -> int:
    """Count rows; duplicate sku strings are counted separately."""

    return sum(1 for _ in items)


def total_value(items: Iterable[InventoryItem]) -> Decimal:
    """Sum of quantity * price, unrounded."""

    return sum((Decimal(it.quantity) * it.price for it in items), Decimal("0"))


def low_stock_count(items: Iterable[InventoryItem], threshold: int = LOW_STOCK_THRESHOLD) -> int:
    return sum(1 for it in items if is_low_stock(it, threshold))


def categories(items: Iterable[InventoryItem]) -> list[str]:
    """Distinct categories present, sorted ascending."""

    return sorted({it.category for it in items})


def compute_stats(items: Iterable[InventoryItem]) -> DashboardStats:
    rows = list(items)
    return DashboardStats(
        total_quantity=total_quantity(rows),
        unique_sku_count=unique_sku_count(rows),
        total_value=total_value(rows),
        low_stock_count=low_stock_count(rows),
    )


def format_money(value: Decimal) -> str:
    """Render a currency amount with two decimals and thousands separators."""

    with localcontext() as ctx:
        # Room for every integer digit plus the two cents digits
        ctx.prec = max(ctx.prec, value.adjusted() + 3)
        return f"{value.quantize(CENT, rounding=ROUND_HALF_UP):,.2f}"
