"""Persistent storage manager for Stockroom.

Wraps Home Assistant's Store with one store per persisted key.

Data persisted:
    inventoryItems -> [ItemDict, ...]   (full collection, newest first)
    theme          -> "dark" | "light"

Reads never raise: an unreadable items payload is reported as absent so the
repository falls back to seed data. Writes are immediate; a failed write
surfaces as StorageError.
"""

from __future__ import annotations

import logging
import time
from typing import Any

from homeassistant.core import HomeAssistant
from homeassistant.exceptions import HomeAssistantError
from homeassistant.helpers.storage import Store

from .const import (
    DOMAIN,
    STORAGE_KEY_ITEMS,
    STORAGE_KEY_THEME,
    STORAGE_VERSION,
    THEME_DARK,
    THEME_LIGHT,
)
from .exceptions import StorageError

_LOGGER = logging.getLogger(__name__)


class DomainStore:
    """Key-value wrapper around Home Assistant's Store for Stockroom.

    This class centralizes storage access. It should be exposed via
    ``hass.data[DOMAIN]["store"]``.
    """

    def __init__(
        self,
        hass: HomeAssistant,
        *,
        items_key: str = STORAGE_KEY_ITEMS,
        theme_key: str = STORAGE_KEY_THEME,
        version: int = STORAGE_VERSION,
    ) -> None:
        self._hass = hass
        self._items_store: Store[Any] = Store(hass, version, items_key)
        self._theme_store: Store[Any] = Store(hass, version, theme_key)
        self._version = version

    @property
    def version(self) -> int:
        return self._version

    @property
    def items_key(self) -> str:
        return self._items_store.key

    @property
    def theme_key(self) -> str:
        return self._theme_store.key

    async def async_load_items(self) -> list[dict[str, Any]] | None:
        """Load the persisted collection.

        Returns ``None`` when nothing is stored or the payload cannot be read;
        parse failures are logged, never raised.
        """

        try:
            raw = await self._items_store.async_load()
        except (HomeAssistantError, ValueError):
            _LOGGER.error(
                "Failed to read persisted items; falling back to seed data",
                extra={"domain": DOMAIN, "op": "load_items", "storage_key": self.items_key},
                exc_info=True,
            )
            return None
        if raw is None:
            return None
        if not isinstance(raw, list):
            _LOGGER.error(
                "Corrupted items payload: expected list, got %s",
                type(raw).__name__,
                extra={"domain": DOMAIN, "op": "load_items", "storage_key": self.items_key},
            )
            return None
        return raw

    async def async_save_items(self, items: list[dict[str, Any]]) -> None:
        """Persist the full collection immediately."""

        start_time = time.monotonic()
        try:
            await self._items_store.async_save(list(items))
        except Exception as exc:  # mapped to StorageError at the boundary
            _LOGGER.error(
                "Failed to persist items",
                extra={
                    "domain": DOMAIN,
                    "op": "persist_failed",
                    "storage_key": self.items_key,
                    "items_count": len(items),
                },
                exc_info=True,
            )
            raise StorageError("failed to persist items") from exc
        _LOGGER.debug(
            "Items persisted",
            extra={
                "domain": DOMAIN,
                "op": "persist_complete",
                "items_count": len(items),
                "elapsed_ms": int((time.monotonic() - start_time) * 1000),
            },
        )

    async def async_load_theme(self) -> str | None:
        """Return the stored theme literal, or ``None`` when absent or invalid."""

        try:
            raw = await self._theme_store.async_load()
        except (HomeAssistantError, ValueError):
            _LOGGER.warning(
                "Failed to read persisted theme",
                extra={"domain": DOMAIN, "op": "load_theme", "storage_key": self.theme_key},
                exc_info=True,
            )
            return None
        if raw in (THEME_DARK, THEME_LIGHT):
            return raw
        if raw is not None:
            _LOGGER.warning(
                "Ignoring unknown persisted theme %r",
                raw,
                extra={"domain": DOMAIN, "op": "load_theme"},
            )
        return None

    async def async_save_theme(self, theme: str) -> None:
        try:
            await self._theme_store.async_save(theme)
        except Exception as exc:  # mapped to StorageError at the boundary
            _LOGGER.error(
                "Failed to persist theme",
                extra={"domain": DOMAIN, "op": "persist_theme_failed", "theme": theme},
                exc_info=True,
            )
            raise StorageError("failed to persist theme") from exc
