"""Shared fixtures for Stockroom tests.

Home Assistant fixtures (``hass``, ``hass_storage``, ``hass_ws_client``,
``enable_custom_integrations``) are provided by
pytest-homeassistant-custom-component. Core modules are exercised without
them through ``MemoryStore``, an in-memory stand-in for ``DomainStore``.
"""

from __future__ import annotations

from copy import deepcopy
from typing import Any

import pytest
from custom_components.stockroom.const import DOMAIN
from custom_components.stockroom.controller import InventoryController
from custom_components.stockroom.exceptions import StorageError
from pytest_homeassistant_custom_component.common import MockConfigEntry


class MemoryStore:
    """Records every write so tests can assert on persistence."""

    def __init__(self, items: Any = None, theme: str | None = None) -> None:
        self.items = deepcopy(items)
        self.theme = theme
        self.item_writes: list[list[dict[str, Any]]] = []
        self.theme_writes: list[str] = []
        self.item_loads = 0
        self.fail_writes = False

    async def async_load_items(self) -> list[dict[str, Any]] | None:
        self.item_loads += 1
        if not isinstance(self.items, list):
            return None
        return deepcopy(self.items)

    async def async_save_items(self, items: list[dict[str, Any]]) -> None:
        if self.fail_writes:
            raise StorageError("failed to persist items")
        self.item_writes.append(deepcopy(items))
        self.items = deepcopy(items)

    async def async_load_theme(self) -> str | None:
        return self.theme if self.theme in ("dark", "light") else None

    async def async_save_theme(self, theme: str) -> None:
        if self.fail_writes:
            raise StorageError("failed to persist theme")
        self.theme_writes.append(theme)
        self.theme = theme


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def make_store() -> type[MemoryStore]:
    """Factory for stores preloaded with items or a theme."""

    return MemoryStore


@pytest.fixture
async def controller(memory_store: MemoryStore) -> InventoryController:
    """Controller loaded with the seed collection."""

    ctrl = InventoryController(memory_store)
    await ctrl.async_load_initial()
    return ctrl


@pytest.fixture
async def setup_integration(hass, enable_custom_integrations) -> MockConfigEntry:
    """Set up the integration through a config entry."""

    entry = MockConfigEntry(domain=DOMAIN, data={}, title="Stockroom")
    entry.add_to_hass(hass)
    assert await hass.config_entries.async_setup(entry.entry_id)
    await hass.async_block_till_done()
    return entry
