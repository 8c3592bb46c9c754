"""Typed models and serialization helpers for Stockroom.

This module defines the persisted shape of an inventory item, the creation
payload, and the sort configuration used by the query engine. It also owns
the timestamp and id helpers, the fixed seed collection, and the conversion
between items and their persisted JSON form.

The models are framework-agnostic and free of I/O. Higher layers (storage,
controller, WebSocket API) compose these helpers.
"""

from __future__ import annotations

import time
import unicodedata
from collections.abc import Container, Mapping
from dataclasses import dataclass, replace
from datetime import UTC, datetime, timedelta
from decimal import Decimal, InvalidOperation
from typing import Any, Final, Literal, TypedDict

from .exceptions import ValidationError

SortDirection = Literal["ascending", "descending"]
SortKey = Literal["id", "name", "quantity", "price", "category", "sku", "lastUpdated"]

SORT_KEYS: Final[tuple[str, ...]] = (
    "id",
    "name",
    "quantity",
    "price",
    "category",
    "sku",
    "lastUpdated",
)
SORT_DIRECTIONS: Final[tuple[str, ...]] = ("ascending", "descending")

DAY: Final[timedelta] = timedelta(days=1)


@dataclass(frozen=True)
class InventoryItem:
    """Persisted shape for an inventory item.

    Attributes:
        id: Opaque unique id, immutable after creation.
        name: Display name.
        quantity: Units in stock (non-negative).
        price: Unit price (non-negative).
        category: Free-form category label.
        sku: Free-form stock keeping unit.
        last_updated: ISO-8601 UTC timestamp with millisecond precision.
    """

    id: str
    name: str
    quantity: int
    price: Decimal
    category: str
    sku: str
    last_updated: str


class NewInventoryItem(TypedDict):
    """Creation payload for an item; id and timestamp are assigned on add."""

    name: str
    quantity: int
    price: Decimal | float | int | str
    category: str
    sku: str


@dataclass(frozen=True)
class SortConfig:
    """Sort selection for the item view.

    ``key`` is the serialized attribute name (``lastUpdated`` rather than
    ``last_updated``) or ``None`` when no sort column is selected.
    """

    key: SortKey | None = None
    direction: SortDirection = "ascending"

    def toggled(self, key: SortKey) -> SortConfig:
        """Return the config produced by selecting ``key`` in the view.

        Reselecting the current key while ascending flips to descending; any
        other selection sorts ascending.
        """

        if key not in SORT_KEYS:
            raise ValidationError(f"sort key must be one of: {', '.join(SORT_KEYS)}")
        if self.key == key and self.direction == "ascending":
            return SortConfig(key=key, direction="descending")
        return SortConfig(key=key, direction="ascending")

    def as_dict(self) -> dict[str, Any]:
        return {"key": self.key, "direction": self.direction}


DEFAULT_SORT: Final[SortConfig] = SortConfig(key="lastUpdated", direction="descending")


# -----------------------------
# Timestamps and ids
# -----------------------------


def _format_ts(moment: datetime) -> str:
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def iso_utc_now() -> str:
    """Return ISO-8601 UTC timestamp string with milliseconds and 'Z'."""

    return _format_ts(datetime.now(tz=UTC))


def parse_iso_timestamp(ts: str) -> datetime:
    """Parse an ISO-8601 timestamp, accepting a trailing 'Z'.

    Raises ValidationError on bad format.
    """

    if not isinstance(ts, str):
        raise ValidationError("timestamp must be an ISO-8601 string")
    try:
        parsed = datetime.fromisoformat(ts.replace("Z", "+00:00"))
    except ValueError as exc:
        raise ValidationError("timestamp must be an ISO-8601 string") from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def monotonic_timestamp_after(previous_ts: str) -> str:
    """Return a UTC timestamp strictly after ``previous_ts``.

    When the clock has not advanced past the previous value (millisecond
    resolution), bump by one millisecond to keep refreshes monotonic.
    """

    now = datetime.now(tz=UTC)
    now_dt = now.replace(microsecond=now.microsecond // 1000 * 1000)
    try:
        prev_dt = parse_iso_timestamp(previous_ts)
    except ValidationError:
        # Malformed previous value; the current time wins
        return _format_ts(now_dt)
    if now_dt <= prev_dt:
        now_dt = prev_dt + timedelta(milliseconds=1)
    return _format_ts(now_dt)


def mint_item_id(taken: Container[str]) -> str:
    """Mint an id from the current epoch milliseconds.

    Increments past any value already present in ``taken`` so ids never
    collide within a session.
    """

    candidate = time.time_ns() // 1_000_000
    while str(candidate) in taken:
        candidate += 1
    return str(candidate)


# -----------------------------
# Coercion helpers
# -----------------------------


def to_decimal(value: Any, *, field_name: str = "price") -> Decimal:
    """Convert a JSON number or numeric string into a finite Decimal.

    Floats go through ``str`` so ``25.99`` becomes ``Decimal("25.99")``.
    Values are persisted as JSON numbers, so anything a float cannot carry
    back unchanged is rejected.
    """

    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, int | float | str):
        try:
            result = Decimal(str(value))
        except InvalidOperation as exc:
            raise ValidationError(f"{field_name} must be a number") from exc
    else:
        raise ValidationError(f"{field_name} must be a number")
    if not result.is_finite():
        raise ValidationError(f"{field_name} must be a finite number")
    if Decimal(str(float(result))) != result:
        raise ValidationError(f"{field_name} has more precision than can be stored")
    return result


def to_quantity(value: Any) -> int:
    if isinstance(value, bool):
        raise ValidationError("quantity must be an integer")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError as exc:
            raise ValidationError("quantity must be an integer") from exc
    raise ValidationError("quantity must be an integer")


def normalize_text_for_sort(text: str) -> str:
    """Return a case-insensitive, accent-folded string for lexicographic sorting."""

    if not text:
        return ""
    nfkd = unicodedata.normalize("NFKD", text)
    ascii_text = nfkd.encode("ascii", "ignore").decode("ascii")
    collapsed = " ".join(ascii_text.split())
    return collapsed.casefold()


# -----------------------------
# Creation and update helpers
# -----------------------------


def create_item_from_new(
    payload: NewInventoryItem | Mapping[str, Any], *, item_id: str, now: str | None = None
) -> InventoryItem:
    """Build an InventoryItem from a creation payload.

    Field values are taken as given; only numeric fields are coerced into
    their stored types.
    """

    return InventoryItem(
        id=item_id,
        name=str(payload.get("name", "")),
        quantity=to_quantity(payload.get("quantity", 0)),
        price=to_decimal(payload.get("price", 0)),
        category=str(payload.get("category", "")),
        sku=str(payload.get("sku", "")),
        last_updated=now or iso_utc_now(),
    )


def refreshed(item: InventoryItem, previous: InventoryItem) -> InventoryItem:
    """Return ``item`` stamped with a timestamp strictly after ``previous``."""

    return replace(
        item,
        quantity=to_quantity(item.quantity),
        price=to_decimal(item.price),
        last_updated=monotonic_timestamp_after(previous.last_updated),
    )


# -----------------------------
# Serialization
# -----------------------------


def item_to_dict(item: InventoryItem) -> dict[str, Any]:
    """Serialize an item to its persisted JSON form."""

    return {
        "id": item.id,
        "name": item.name,
        "quantity": int(item.quantity),
        "price": float(item.price),
        "category": item.category,
        "sku": item.sku,
        "lastUpdated": item.last_updated,
    }


def item_from_dict(data: Mapping[str, Any]) -> InventoryItem:
    """Deserialize an item from its persisted JSON form.

    Raises ValidationError when the entry is missing an id or carries values
    that cannot be coerced.
    """

    if not isinstance(data, Mapping):
        raise ValidationError("item entry must be an object")
    item_id = data.get("id")
    if item_id is None or item_id == "":
        raise ValidationError("item entry is missing an id")
    return InventoryItem(
        id=str(item_id),
        name=str(data.get("name", "")),
        quantity=to_quantity(data.get("quantity", 0)),
        price=to_decimal(data.get("price", 0)),
        category=str(data.get("category", "")),
        sku=str(data.get("sku", "")),
        last_updated=str(data.get("lastUpdated", "")),
    )


# -----------------------------
# Seed data
# -----------------------------

# (id, name, quantity, price, category, sku, days before load)
_SEED_ROWS: Final[tuple[tuple[str, str, int, str, str, str, int], ...]] = (
    ("1", 'Laptop Pro 15"', 5, "1200.00", "Electronics", "LP15-001", 2),
    ("2", "Wireless Mouse", 150, "25.99", "Accessories", "WM-002", 1),
    ("3", "Mechanical Keyboard", 8, "79.50", "Accessories", "MK-003", 0),
    ("4", "Office Chair Ergonomic", 30, "250.00", "Furniture", "OC-004", 5),
    ("5", '27" 4K Monitor', 15, "350.00", "Electronics", "MON27-4K", 1),
    ("6", "USB-C Hub", 60, "35.00", "Accessories", "USBC-HUB-01", 3),
    ("7", "Standing Desk", 12, "450.00", "Furniture", "STD-DSK-001", 10),
)


def seed_items(now: datetime | None = None) -> list[InventoryItem]:
    """Return a fresh copy of the fallback collection.

    Timestamps are relative to ``now`` (defaults to the current time).
    """

    anchor = now or datetime.now(tz=UTC)
    return [
        InventoryItem(
            id=item_id,
            name=name,
            quantity=quantity,
            price=Decimal(price),
            category=category,
            sku=sku,
            last_updated=_format_ts(anchor - DAY * days_ago),
        )
        for item_id, name, quantity, price, category, sku, days_ago in _SEED_ROWS
    ]
