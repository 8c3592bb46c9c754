"""Offline tests for Stockroom models.

Scenarios:
- seed collection shape and relative timestamps
- persisted field names and JSON-friendly value types
- deserialization coercion and rejection of malformed entries
- monotonic timestamp refresh and id minting
- sort selection toggling
"""

from __future__ import annotations

from dataclasses import FrozenInstanceError
from datetime import UTC, datetime, timedelta
from decimal import Decimal

import pytest
from custom_components.stockroom.exceptions import ValidationError
from custom_components.stockroom.models import (
    DEFAULT_SORT,
    InventoryItem,
    SortConfig,
    create_item_from_new,
    item_from_dict,
    item_to_dict,
    iso_utc_now,
    mint_item_id,
    monotonic_timestamp_after,
    parse_iso_timestamp,
    seed_items,
    to_decimal,
    to_quantity,
)

SEED_QUANTITIES = [5, 150, 8, 30, 15, 60, 12]


def test_seed_items_shape() -> None:
    anchor = datetime(2024, 5, 10, 12, 0, tzinfo=UTC)
    items = seed_items(anchor)

    assert [it.id for it in items] == ["1", "2", "3", "4", "5", "6", "7"]
    assert [it.quantity for it in items] == SEED_QUANTITIES
    assert items[1].name == "Wireless Mouse"
    assert items[1].price == Decimal("25.99")
    # Keyboard is stamped at load time, the desk ten days earlier
    assert items[2].last_updated == "2024-05-10T12:00:00.000Z"
    assert items[6].last_updated == "2024-04-30T12:00:00.000Z"


def test_seed_items_returns_fresh_copies() -> None:
    first = seed_items()
    first.pop(0)
    assert seed_items()[0].quantity == SEED_QUANTITIES[0]


def test_items_are_immutable() -> None:
    item = seed_items()[0]
    with pytest.raises(FrozenInstanceError):
        item.quantity = 999  # type: ignore[misc]


def test_item_to_dict_uses_persisted_field_names() -> None:
    item = InventoryItem(
        id="42",
        name="Cable",
        quantity=3,
        price=Decimal("4.50"),
        category="Accessories",
        sku="CB-1",
        last_updated="2024-01-01T00:00:00.000Z",
    )

    data = item_to_dict(item)

    assert data == {
        "id": "42",
        "name": "Cable",
        "quantity": 3,
        "price": 4.5,
        "category": "Accessories",
        "sku": "CB-1",
        "lastUpdated": "2024-01-01T00:00:00.000Z",
    }


def test_serialize_then_deserialize_yields_equal_items() -> None:
    items = seed_items()
    restored = [item_from_dict(item_to_dict(it)) for it in items]
    assert restored == items


def test_item_from_dict_coerces_numeric_fields() -> None:
    item = item_from_dict(
        {"id": 7, "name": "Desk", "quantity": "12", "price": 450, "category": "F", "sku": "D"}
    )
    assert item.id == "7"
    assert item.quantity == 12
    assert item.price == Decimal("450")
    assert item.last_updated == ""


@pytest.mark.parametrize(
    "entry",
    [
        "not an object",
        {"name": "no id"},
        {"id": "1", "quantity": "many"},
        {"id": "1", "quantity": "--5"},
        {"id": "1", "quantity": "\u00b2"},
        {"id": "1", "price": "free"},
        {"id": "1", "price": True},
        {"id": "1", "price": "NaN"},
    ],
)
def test_item_from_dict_rejects_malformed_entries(entry) -> None:
    with pytest.raises(ValidationError):
        item_from_dict(entry)


def test_to_decimal_goes_through_str_for_floats() -> None:
    assert to_decimal(25.99) == Decimal("25.99")
    assert to_decimal("79.50") == Decimal("79.50")
    assert to_decimal(Decimal("1.5")) == Decimal("1.5")


@pytest.mark.parametrize("price", ["19.999999999999999", "0.12345678901234567890"])
def test_to_decimal_rejects_prices_floats_cannot_carry(price: str) -> None:
    with pytest.raises(ValidationError):
        to_decimal(price)


@pytest.mark.parametrize("price", ["1234.5678", "0.1", "1000000000000000000000000"])
def test_stored_price_survives_serialization(price: str) -> None:
    item = create_item_from_new(
        {"name": "Gauge", "quantity": 1, "price": price, "category": "Tools", "sku": "G-1"},
        item_id="9",
        now="2024-01-01T00:00:00.000Z",
    )
    assert item_from_dict(item_to_dict(item)) == item


def test_to_quantity_accepts_whole_numbers_only() -> None:
    assert to_quantity(5) == 5
    assert to_quantity(5.0) == 5
    with pytest.raises(ValidationError):
        to_quantity(5.5)
    with pytest.raises(ValidationError):
        to_quantity(False)


def test_create_item_from_new_takes_fields_verbatim() -> None:
    item = create_item_from_new(
        {"name": "  Spaced  ", "quantity": 2, "price": 9.99, "category": "X", "sku": "S"},
        item_id="abc",
        now="2024-01-01T00:00:00.000Z",
    )
    assert item.name == "  Spaced  "
    assert item.price == Decimal("9.99")
    assert item.id == "abc"
    assert item.last_updated == "2024-01-01T00:00:00.000Z"


def test_iso_utc_now_has_millisecond_precision() -> None:
    ts = iso_utc_now()
    assert ts.endswith("Z")
    # YYYY-MM-DDTHH:MM:SS.mmmZ
    assert len(ts) == len("2024-01-01T00:00:00.000Z")
    assert parse_iso_timestamp(ts).tzinfo is not None


def test_monotonic_timestamp_after_future_value_bumps_by_one_ms() -> None:
    future = datetime.now(tz=UTC) + timedelta(hours=1)
    future_ts = future.isoformat(timespec="milliseconds").replace("+00:00", "Z")

    bumped = monotonic_timestamp_after(future_ts)

    assert parse_iso_timestamp(bumped) - parse_iso_timestamp(future_ts) == timedelta(
        milliseconds=1
    )


def test_monotonic_timestamp_after_malformed_previous_uses_now() -> None:
    before = datetime.now(tz=UTC) - timedelta(milliseconds=1)
    assert parse_iso_timestamp(monotonic_timestamp_after("garbage")) >= before


def test_mint_item_id_skips_taken_values() -> None:
    first = mint_item_id(set())
    taken = {first, str(int(first) + 1)}
    second = mint_item_id(taken)
    assert second not in taken
    assert second.isdigit()


def test_sort_config_toggles_on_reselect() -> None:
    by_name = SortConfig().toggled("name")
    assert by_name == SortConfig(key="name", direction="ascending")
    assert by_name.toggled("name") == SortConfig(key="name", direction="descending")
    # Descending reselect goes back to ascending
    assert by_name.toggled("name").toggled("name").direction == "ascending"
    # Switching key always starts ascending
    assert DEFAULT_SORT.toggled("price") == SortConfig(key="price", direction="ascending")


def test_sort_config_rejects_unknown_key() -> None:
    with pytest.raises(ValidationError):
        SortConfig().toggled("colour")  # type: ignore[arg-type]
