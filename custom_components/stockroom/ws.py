"""WebSocket command handlers for Stockroom.

Implements the boundary the inventory panel calls into: initial load, view
changes (search, category, sort, page, page size), item CRUD and theme
changes. Adheres to the envelope: input {id, type, ...payload}, output
result_message/error_message.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Any

import voluptuous as vol
from homeassistant.components import websocket_api
from homeassistant.core import HomeAssistant

from .const import (
    DOMAIN,
    INTEGRATION_VERSION,
    PAGE_SIZE_OPTIONS,
    STORAGE_VERSION,
    THEME_DARK,
    THEME_LIGHT,
)
from .controller import InventoryController, ViewResult
from .dashboard import is_low_stock
from .exceptions import StorageError, ValidationError
from .models import SORT_KEYS, InventoryItem, item_to_dict
from .services import ITEM_FIELDS_SCHEMA

LOGGER = logging.getLogger(__name__)


def _controller(hass: HomeAssistant) -> InventoryController:
    bucket = hass.data.get(DOMAIN) or {}
    controller = bucket.get("controller")
    if controller is None:
        raise StorageError("controller not initialized; run integration setup")
    return controller  # type: ignore[return-value]


def _error_code(exc: Exception) -> str:
    if isinstance(exc, ValidationError):
        return "validation_error"
    if isinstance(exc, StorageError):
        return "storage_error"
    return "unknown_error"


def _ctx(op: str, **extra: Any) -> dict[str, Any]:
    """Build a structured logging context for WS operations."""

    base: dict[str, Any] = {"op": op}
    if extra:
        base.update(extra)
    return base


def _error_message(_id: int, exc: Exception, *, context: dict[str, Any]):
    level = logging.ERROR if isinstance(exc, StorageError) else logging.WARNING
    LOGGER.log(level, str(exc), extra={"domain": DOMAIN, **context}, exc_info=True)
    return websocket_api.error_message(_id, _error_code(exc), str(exc))


# -----------------------------
# Unified exception handling for WS handlers
# -----------------------------

_WSHandler = Callable[[HomeAssistant, Any, dict], Awaitable[Any]]


def _context_from_msg(op: str, msg: dict, fields: tuple[str, ...]) -> dict[str, Any]:
    payload: dict[str, Any] = {}
    for field in fields:
        if field not in msg:
            continue
        # Avoid the reserved LogRecord key 'name'
        key = "item_name" if field == "name" else field
        payload[key] = msg.get(field)
    return _ctx(op, **payload)


def ws_guard(op: str, context_fields: tuple[str, ...] = ()) -> Callable[[_WSHandler], _WSHandler]:
    """Decorator to map domain exceptions to unified WS error envelopes."""

    def decorator(func: _WSHandler) -> _WSHandler:
        @wraps(func)
        async def wrapper(hass: HomeAssistant, conn, msg):  # type: ignore[override]
            try:
                return await func(hass, conn, msg)
            except (ValidationError, StorageError) as exc:
                ctx = _context_from_msg(op, msg, context_fields)
                conn.send_message(_error_message(msg.get("id", 0), exc, context=ctx))
                return None

        return wrapper

    return decorator


# -----------------------------
# Serialization helpers
# -----------------------------


def _serialize_item(item: InventoryItem) -> dict[str, Any]:
    data = item_to_dict(item)
    data["low_stock"] = is_low_stock(item)
    return data


def _serialize_view(view: ViewResult) -> dict[str, Any]:
    return {
        "items": [_serialize_item(it) for it in view.items],
        "page": view.page,
        "page_size": view.page_size,
        "page_size_options": list(PAGE_SIZE_OPTIONS),
        "total_pages": view.total_pages,
        "total_filtered": view.total_filtered,
        "search_term": view.search_term,
        "category": view.category,
        "sort": view.sort.as_dict(),
        "stats": view.stats.as_dict(),
        "categories": list(view.categories),
    }


def _send_view(conn, msg: dict, view: ViewResult) -> None:
    conn.send_message(websocket_api.result_message(msg.get("id", 0), _serialize_view(view)))


# -----------------------------
# Utility commands
# -----------------------------


@websocket_api.websocket_command({"type": "stockroom/version"})
@websocket_api.async_response
async def ws_version(hass: HomeAssistant, conn, msg):
    result = {"integration_version": INTEGRATION_VERSION, "storage_version": STORAGE_VERSION}
    conn.send_message(websocket_api.result_message(msg.get("id", 0), result))


@websocket_api.websocket_command(
    {vol.Required("type"): "stockroom/init", vol.Optional("prefers_dark"): bool}
)
@websocket_api.async_response
@ws_guard("init")
async def ws_init(hass: HomeAssistant, conn, msg):
    controller = _controller(hass)
    await controller.async_load_initial()
    theme = await controller.async_load_theme(msg.get("prefers_dark"))
    result = {"view": _serialize_view(controller.view()), "theme": theme}
    conn.send_message(websocket_api.result_message(msg.get("id", 0), result))


# -----------------------------
# View
# -----------------------------


@websocket_api.websocket_command({"type": "stockroom/view"})
@websocket_api.async_response
@ws_guard("view")
async def ws_view(hass: HomeAssistant, conn, msg):
    _send_view(conn, msg, _controller(hass).view())


@websocket_api.websocket_command(
    {vol.Required("type"): "stockroom/view/search", vol.Required("term"): str}
)
@websocket_api.async_response
@ws_guard("view_search", ("term",))
async def ws_view_search(hass: HomeAssistant, conn, msg):
    _send_view(conn, msg, _controller(hass).set_search(msg["term"]))


@websocket_api.websocket_command(
    {vol.Required("type"): "stockroom/view/category", vol.Required("category"): str}
)
@websocket_api.async_response
@ws_guard("view_category", ("category",))
async def ws_view_category(hass: HomeAssistant, conn, msg):
    _send_view(conn, msg, _controller(hass).set_category(msg["category"]))


@websocket_api.websocket_command(
    {vol.Required("type"): "stockroom/view/sort", vol.Required("key"): vol.In(SORT_KEYS)}
)
@websocket_api.async_response
@ws_guard("view_sort", ("key",))
async def ws_view_sort(hass: HomeAssistant, conn, msg):
    _send_view(conn, msg, _controller(hass).set_sort(msg["key"]))


@websocket_api.websocket_command(
    {
        vol.Required("type"): "stockroom/view/page",
        vol.Required("page"): vol.All(int, vol.Range(min=1)),
    }
)
@websocket_api.async_response
@ws_guard("view_page", ("page",))
async def ws_view_page(hass: HomeAssistant, conn, msg):
    _send_view(conn, msg, _controller(hass).set_page(msg["page"]))


@websocket_api.websocket_command(
    {
        vol.Required("type"): "stockroom/view/page_size",
        vol.Required("page_size"): vol.In(PAGE_SIZE_OPTIONS),
    }
)
@websocket_api.async_response
@ws_guard("view_page_size", ("page_size",))
async def ws_view_page_size(hass: HomeAssistant, conn, msg):
    _send_view(conn, msg, _controller(hass).set_page_size(msg["page_size"]))


# -----------------------------
# Items
# -----------------------------


@websocket_api.websocket_command(
    {vol.Required("type"): "stockroom/item/create", **ITEM_FIELDS_SCHEMA}
)
@websocket_api.async_response
@ws_guard("item_create", ("name", "sku"))
async def ws_item_create(hass: HomeAssistant, conn, msg):
    controller = _controller(hass)
    payload = {k: msg[k] for k in ("name", "quantity", "price", "category", "sku")}
    item = await controller.async_create_item(payload)
    result = {"item": _serialize_item(item), "view": _serialize_view(controller.view())}
    conn.send_message(websocket_api.result_message(msg.get("id", 0), result))


@websocket_api.websocket_command(
    {
        vol.Required("type"): "stockroom/item/update",
        vol.Required("item_id"): str,
        **ITEM_FIELDS_SCHEMA,
    }
)
@websocket_api.async_response
@ws_guard("item_update", ("item_id", "name", "sku"))
async def ws_item_update(hass: HomeAssistant, conn, msg):
    controller = _controller(hass)
    item = InventoryItem(
        id=msg["item_id"],
        name=msg["name"],
        quantity=msg["quantity"],
        price=msg["price"],
        category=msg["category"],
        sku=msg["sku"],
        last_updated="",
    )
    await controller.async_update_item(item)
    result = {"view": _serialize_view(controller.view())}
    conn.send_message(websocket_api.result_message(msg.get("id", 0), result))


@websocket_api.websocket_command(
    {vol.Required("type"): "stockroom/item/delete", vol.Required("item_id"): str}
)
@websocket_api.async_response
@ws_guard("item_delete", ("item_id",))
async def ws_item_delete(hass: HomeAssistant, conn, msg):
    controller = _controller(hass)
    await controller.async_delete_item(msg["item_id"])
    result = {"view": _serialize_view(controller.view())}
    conn.send_message(websocket_api.result_message(msg.get("id", 0), result))


# -----------------------------
# Theme
# -----------------------------


@websocket_api.websocket_command({"type": "stockroom/theme/toggle"})
@websocket_api.async_response
@ws_guard("theme_toggle")
async def ws_theme_toggle(hass: HomeAssistant, conn, msg):
    theme = await _controller(hass).async_toggle_theme()
    conn.send_message(websocket_api.result_message(msg.get("id", 0), {"theme": theme}))


@websocket_api.websocket_command(
    {
        vol.Required("type"): "stockroom/theme/set",
        vol.Required("theme"): vol.In([THEME_DARK, THEME_LIGHT]),
    }
)
@websocket_api.async_response
@ws_guard("theme_set", ("theme",))
async def ws_theme_set(hass: HomeAssistant, conn, msg):
    theme = await _controller(hass).async_set_theme(msg["theme"])
    conn.send_message(websocket_api.result_message(msg.get("id", 0), {"theme": theme}))


# -----------------------------
# Registration
# -----------------------------


def setup(hass: HomeAssistant) -> None:
    # Idempotent: avoid duplicate registration across reloads
    bucket = hass.data.setdefault(DOMAIN, {})
    if bucket.get("ws_registered"):
        return

    handlers = [
        ws_version,
        ws_init,
        ws_view,
        ws_view_search,
        ws_view_category,
        ws_view_sort,
        ws_view_page,
        ws_view_page_size,
        ws_item_create,
        ws_item_update,
        ws_item_delete,
        ws_theme_toggle,
        ws_theme_set,
    ]

    for h in handlers:
        websocket_api.async_register_command(hass, h)

    bucket["ws_registered"] = True
