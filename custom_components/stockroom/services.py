"""Service registration and handlers for Stockroom.

Exposes Home Assistant services under the ``stockroom`` domain to create,
update and delete items and to toggle the theme. Input is validated with
voluptuous and operations are delegated to the ``InventoryController``.

Errors from the domain layer are logged with contextual fields and do not
raise stack traces.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any

import voluptuous as vol
from homeassistant.core import HomeAssistant, ServiceCall

from .const import DOMAIN
from .controller import InventoryController
from .exceptions import StorageError, ValidationError
from .models import InventoryItem, to_decimal, to_quantity

LOGGER = logging.getLogger(__name__)


# -----------------------------
# Validation schemas
# -----------------------------


def _quantity(value: Any) -> int:
    try:
        return to_quantity(value)
    except ValidationError as exc:
        raise vol.Invalid(str(exc)) from exc


def _price(value: Any) -> Decimal:
    try:
        return to_decimal(value)
    except ValidationError as exc:
        raise vol.Invalid(str(exc)) from exc


# Number selectors deliver floats; whole floats are accepted as quantities
QUANTITY = vol.All(_quantity, vol.Range(min=0))
PRICE = vol.All(_price, vol.Range(min=0))

# Shared by the item services and the item WebSocket commands
ITEM_FIELDS_SCHEMA: dict[Any, Any] = {
    vol.Required("name"): str,
    vol.Required("quantity"): QUANTITY,
    vol.Required("price"): PRICE,
    vol.Required("category"): str,
    vol.Required("sku"): str,
}

SCHEMA_ITEM_CREATE = vol.Schema(ITEM_FIELDS_SCHEMA)

SCHEMA_ITEM_UPDATE = vol.Schema({vol.Required("item_id"): str, **ITEM_FIELDS_SCHEMA})

SCHEMA_ITEM_DELETE = vol.Schema({vol.Required("item_id"): str})

SCHEMA_TOGGLE_THEME = vol.Schema({})

SERVICES: tuple[str, ...] = ("item_create", "item_update", "item_delete", "toggle_theme")


# -----------------------------
# Internal helpers
# -----------------------------


def _get_controller(hass: HomeAssistant) -> InventoryController:
    bucket = hass.data.get(DOMAIN) or {}
    controller = bucket.get("controller")
    if controller is None:
        raise StorageError("controller not initialized; run integration setup")
    return controller  # type: ignore[return-value]


def _log_domain_error(op: str, context: dict[str, Any], exc: Exception) -> None:
    level = logging.ERROR if isinstance(exc, StorageError) else logging.WARNING
    LOGGER.log(level, str(exc), extra={"domain": DOMAIN, "op": op, **context})


# -----------------------------
# Service handlers (exported for tests)
# -----------------------------


async def service_item_create(hass: HomeAssistant, data: dict) -> None:
    op = "item_create"
    try:
        payload = SCHEMA_ITEM_CREATE(data)
        item = await _get_controller(hass).async_create_item(payload)
        LOGGER.debug(
            "Service item_create created item",
            extra={"domain": DOMAIN, "op": op, "item_id": item.id},
        )
    except vol.Invalid as exc:
        _log_domain_error(op, {"sku": data.get("sku")}, ValidationError(str(exc)))
    except (ValidationError, StorageError) as exc:
        _log_domain_error(op, {"sku": data.get("sku")}, exc)


async def service_item_update(hass: HomeAssistant, data: dict) -> None:
    op = "item_update"
    item_id = data.get("item_id")
    try:
        payload = SCHEMA_ITEM_UPDATE(data)
        item = InventoryItem(
            id=payload["item_id"],
            name=payload["name"],
            quantity=payload["quantity"],
            price=payload["price"],
            category=payload["category"],
            sku=payload["sku"],
            last_updated="",
        )
        await _get_controller(hass).async_update_item(item)
    except vol.Invalid as exc:
        _log_domain_error(op, {"item_id": item_id}, ValidationError(str(exc)))
    except (ValidationError, StorageError) as exc:
        _log_domain_error(op, {"item_id": item_id}, exc)


async def service_item_delete(hass: HomeAssistant, data: dict) -> None:
    op = "item_delete"
    item_id = data.get("item_id")
    try:
        payload = SCHEMA_ITEM_DELETE(data)
        await _get_controller(hass).async_delete_item(payload["item_id"])
    except vol.Invalid as exc:
        _log_domain_error(op, {"item_id": item_id}, ValidationError(str(exc)))
    except (ValidationError, StorageError) as exc:
        _log_domain_error(op, {"item_id": item_id}, exc)


async def service_toggle_theme(hass: HomeAssistant, data: dict) -> None:
    op = "toggle_theme"
    try:
        theme = await _get_controller(hass).async_toggle_theme()
        LOGGER.debug("Theme toggled", extra={"domain": DOMAIN, "op": op, "theme": theme})
    except (ValidationError, StorageError) as exc:
        _log_domain_error(op, {}, exc)


# -----------------------------
# Registration
# -----------------------------


def setup(hass: HomeAssistant) -> None:
    """Register stockroom.* services on Home Assistant."""

    # Idempotent: avoid duplicate registration across reloads
    bucket = hass.data.setdefault(DOMAIN, {})
    if bucket.get("services_registered"):
        return

    async def _item_create(call: ServiceCall) -> None:
        await service_item_create(hass, dict(call.data))

    async def _item_update(call: ServiceCall) -> None:
        await service_item_update(hass, dict(call.data))

    async def _item_delete(call: ServiceCall) -> None:
        await service_item_delete(hass, dict(call.data))

    async def _toggle_theme(call: ServiceCall) -> None:
        await service_toggle_theme(hass, dict(call.data))

    # Home Assistant validates inputs against these schemas before invoking
    # the handler; handlers validate again so they can be called directly.
    hass.services.async_register(DOMAIN, "item_create", _item_create, SCHEMA_ITEM_CREATE)
    hass.services.async_register(DOMAIN, "item_update", _item_update, SCHEMA_ITEM_UPDATE)
    hass.services.async_register(DOMAIN, "item_delete", _item_delete, SCHEMA_ITEM_DELETE)
    hass.services.async_register(DOMAIN, "toggle_theme", _toggle_theme, SCHEMA_TOGGLE_THEME)

    bucket["services_registered"] = True


def unload(hass: HomeAssistant) -> None:
    """Remove stockroom.* services."""

    for service in SERVICES:
        hass.services.async_remove(DOMAIN, service)
    (hass.data.get(DOMAIN) or {}).pop("services_registered", None)
