"""Stockroom integration bootstrap.

This module initializes the integration, prepares persistent storage, loads
the inventory collection, and sets up the controller in hass.data.
"""

from __future__ import annotations

import logging

from homeassistant.config_entries import ConfigEntry
from homeassistant.core import HomeAssistant
from homeassistant.helpers import config_validation as cv

from . import services as services_mod
from . import ws as ws_mod
from .const import DOMAIN
from .controller import InventoryController
from .models import InventoryItem
from .storage import DomainStore

LOGGER = logging.getLogger(__name__)


# This integration is config-entry only; no YAML configuration is accepted.
CONFIG_SCHEMA = cv.config_entry_only_config_schema(DOMAIN)


async def async_setup(hass: HomeAssistant, _config: dict) -> bool:
    """Set up the Stockroom domain at Home Assistant startup.

    Initializes an empty domain bucket in hass.data with no side effects.
    """
    hass.data.setdefault(DOMAIN, {})
    return True


async def async_setup_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Set up Stockroom from a config entry."""
    bucket = hass.data.setdefault(DOMAIN, {})

    store = DomainStore(hass)
    controller = InventoryController(store)
    bucket["store"] = store
    bucket["controller"] = controller

    # Load once at setup; the panel's init command reuses this collection
    items = await controller.async_load_initial()
    _log_storage_health(items, storage_key=store.items_key)

    services_mod.setup(hass)
    ws_mod.setup(hass)

    return True


async def async_unload_entry(hass: HomeAssistant, entry: ConfigEntry) -> bool:
    """Unload a config entry.

    Writes are immediate, so there is nothing left to flush; drop the
    services and the in-memory state.
    """

    bucket = hass.data.get(DOMAIN) or {}
    services_mod.unload(hass)

    # WebSocket commands stay registered with Home Assistant; clearing the
    # flag lets a reload re-register them against the new controller.
    bucket.pop("ws_registered", None)
    bucket.pop("controller", None)
    bucket.pop("store", None)
    return True


def _log_storage_health(items: list[InventoryItem], *, storage_key: str) -> None:
    """Log a storage summary after the initial load."""

    level = logging.WARNING if not items else logging.DEBUG
    LOGGER.log(
        level,
        "Storage health: key=%s items=%s",
        storage_key,
        len(items),
        extra={
            "domain": DOMAIN,
            "op": "setup_storage_health",
            "storage_key": storage_key,
            "items_count": len(items),
        },
    )
