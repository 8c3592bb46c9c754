"""Offline tests for stockroom.* services.

Scenarios:
- item_create/item_update/item_delete persist through Home Assistant services
- schema rejects negative quantity before the handler runs
- domain errors are logged, not raised, when handlers are called directly
- toggle_theme persists the flipped theme
"""

from __future__ import annotations

import logging
from decimal import Decimal

import pytest
import voluptuous as vol
from custom_components.stockroom.const import DOMAIN
from custom_components.stockroom.services import (
    SCHEMA_ITEM_CREATE,
    service_item_create,
    service_item_delete,
    service_toggle_theme,
)

CREATE_DATA = {
    "name": "Webcam",
    "quantity": 4,
    "price": 59.9,
    "category": "Electronics",
    "sku": "WC-100",
}


def _controller(hass):
    return hass.data[DOMAIN]["controller"]


@pytest.mark.asyncio
async def test_item_create_service(hass, hass_storage, setup_integration) -> None:
    await hass.services.async_call(DOMAIN, "item_create", CREATE_DATA, blocking=True)

    items = _controller(hass).items
    assert len(items) == 8
    assert items[0].name == "Webcam"
    assert items[0].price == Decimal("59.9")
    stored = hass_storage["inventoryItems"]["data"]
    assert stored[0]["sku"] == "WC-100"
    assert len(stored) == 8


@pytest.mark.asyncio
async def test_item_update_service(hass, hass_storage, setup_integration) -> None:
    data = {**CREATE_DATA, "item_id": "2", "name": "Wireless Mouse v2", "quantity": 149}

    await hass.services.async_call(DOMAIN, "item_update", data, blocking=True)

    updated = next(it for it in _controller(hass).items if it.id == "2")
    assert updated.name == "Wireless Mouse v2"
    assert updated.quantity == 149
    assert hass_storage["inventoryItems"]["data"][1]["name"] == "Wireless Mouse v2"


@pytest.mark.asyncio
async def test_item_delete_service(hass, hass_storage, setup_integration) -> None:
    await hass.services.async_call(DOMAIN, "item_delete", {"item_id": "1"}, blocking=True)

    assert [it.id for it in _controller(hass).items] == ["2", "3", "4", "5", "6", "7"]
    assert len(hass_storage["inventoryItems"]["data"]) == 6


@pytest.mark.asyncio
async def test_item_create_rejects_negative_quantity(hass, setup_integration) -> None:
    with pytest.raises(vol.Invalid):
        await hass.services.async_call(
            DOMAIN, "item_create", {**CREATE_DATA, "quantity": -1}, blocking=True
        )
    assert len(_controller(hass).items) == 7


def test_create_schema_accepts_whole_float_quantity() -> None:
    validated = SCHEMA_ITEM_CREATE({**CREATE_DATA, "quantity": 4.0})
    assert validated["quantity"] == 4
    assert validated["price"] == Decimal("59.9")


@pytest.mark.asyncio
async def test_direct_handler_logs_validation_error(hass, setup_integration, caplog) -> None:
    caplog.set_level(logging.WARNING)

    await service_item_create(hass, {**CREATE_DATA, "price": "free"})

    assert len(_controller(hass).items) == 7
    assert any(rec.levelno == logging.WARNING for rec in caplog.records)


@pytest.mark.asyncio
async def test_handler_without_setup_logs_error(hass, caplog) -> None:
    caplog.set_level(logging.ERROR)

    await service_item_delete(hass, {"item_id": "1"})

    assert any("controller not initialized" in rec.getMessage() for rec in caplog.records)


@pytest.mark.asyncio
async def test_toggle_theme_service(hass, hass_storage, setup_integration) -> None:
    await hass.services.async_call(DOMAIN, "toggle_theme", {}, blocking=True)

    # No stored theme and no preference resolves to light, so the toggle lands on dark
    assert _controller(hass).theme == "dark"
    assert hass_storage["theme"]["data"] == "dark"

    await service_toggle_theme(hass, {})
    assert _controller(hass).theme == "light"


def test_create_schema_rejects_price_that_cannot_be_stored() -> None:
    with pytest.raises(vol.Invalid):
        SCHEMA_ITEM_CREATE({**CREATE_DATA, "price": "19.999999999999999"})
