"""In-memory item repository for Stockroom.

This module provides a synchronous repository class holding the session's
authoritative item collection. It implements hydration from a persisted
payload (falling back to seed data), CRUD, and export back to the persisted
form.

The repository is framework-agnostic; persistence is driven by the
controller, which flushes ``export_state()`` after every mutation.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from .const import DOMAIN
from .exceptions import ValidationError
from .models import (
    InventoryItem,
    NewInventoryItem,
    create_item_from_new,
    item_from_dict,
    item_to_dict,
    mint_item_id,
    refreshed,
    seed_items,
)

LOGGER = logging.getLogger(__name__)


class Repository:
    """In-memory collection ordered newest first.

    Notes:
        - Ids handed out during the session are remembered so a deleted id is
          never minted again.
        - Update and remove of unknown ids are no-ops, reported through the
          boolean return value.
    """

    # -----------------------------
    # Lifecycle
    # -----------------------------

    def __init__(self) -> None:
        self._items: list[InventoryItem] = []
        self._issued_ids: set[str] = set()

    @property
    def items(self) -> list[InventoryItem]:
        """Copy of the collection in stored order."""

        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def _index_of(self, item_id: str) -> int | None:
        key = str(item_id)
        for idx, it in enumerate(self._items):
            if it.id == key:
                return idx
        return None

    # -----------------------------
    # Public API — Item operations
    # -----------------------------

    def get_item(self, item_id: str) -> InventoryItem | None:
        idx = self._index_of(item_id)
        return None if idx is None else self._items[idx]

    def add(self, payload: NewInventoryItem | Mapping[str, Any]) -> InventoryItem:
        item_id = mint_item_id(self._issued_ids)
        item = create_item_from_new(payload, item_id=item_id)
        self._issued_ids.add(item_id)
        self._items.insert(0, item)
        LOGGER.debug(
            "Item created",
            extra={"domain": DOMAIN, "op": "add_item", "item_id": item_id},
        )
        return item

    def update(self, item: InventoryItem) -> bool:
        """Replace the stored item with the same id, refreshing its timestamp."""

        idx = self._index_of(item.id)
        if idx is None:
            LOGGER.debug(
                "Update ignored for unknown item",
                extra={"domain": DOMAIN, "op": "update_item", "item_id": item.id},
            )
            return False
        current = self._items[idx]
        self._items[idx] = refreshed(item, current)
        LOGGER.debug(
            "Item updated",
            extra={"domain": DOMAIN, "op": "update_item", "item_id": item.id},
        )
        return True

    def remove(self, item_id: str) -> bool:
        idx = self._index_of(item_id)
        if idx is None:
            LOGGER.debug(
                "Delete ignored for unknown item",
                extra={"domain": DOMAIN, "op": "remove_item", "item_id": str(item_id)},
            )
            return False
        del self._items[idx]
        LOGGER.debug(
            "Item deleted",
            extra={"domain": DOMAIN, "op": "remove_item", "item_id": str(item_id)},
        )
        return True

    # -----------------------------
    # Persistence — export/import
    # -----------------------------

    def export_state(self) -> list[dict[str, Any]]:
        """Serialize the collection to a plain list for storage."""

        return [item_to_dict(it) for it in self._items]

    def load_state(self, data: Any) -> list[InventoryItem]:
        """Replace the collection from a persisted payload.

        A missing payload, or one that is not a list, yields the seed
        collection. Entries that cannot be read are skipped.
        """

        if data is None:
            LOGGER.debug(
                "No persisted items; using seed data",
                extra={"domain": DOMAIN, "op": "load_state"},
            )
            return self._replace(seed_items())
        if not isinstance(data, list):
            LOGGER.error(
                "Persisted items are not a list (got %s); using seed data",
                type(data).__name__,
                extra={"domain": DOMAIN, "op": "load_state"},
            )
            return self._replace(seed_items())

        loaded: list[InventoryItem] = []
        seen: set[str] = set()
        for position, entry in enumerate(data):
            try:
                item = item_from_dict(entry)
            except ValidationError:
                LOGGER.warning(
                    "Failed to load item from persisted state",
                    extra={"domain": DOMAIN, "op": "load_state_items", "position": position},
                    exc_info=True,
                )
                continue
            if item.id in seen:
                LOGGER.warning(
                    "Skipping duplicate item id in persisted state",
                    extra={"domain": DOMAIN, "op": "load_state_items", "item_id": item.id},
                )
                continue
            seen.add(item.id)
            loaded.append(item)
        return self._replace(loaded)

    def _replace(self, items: list[InventoryItem]) -> list[InventoryItem]:
        self._items = list(items)
        self._issued_ids = {it.id for it in self._items}
        return self.items

    @staticmethod
    def from_state(data: Any) -> Repository:
        """Create a Repository instance from a persisted payload."""

        repo = Repository()
        repo.load_state(data)
        return repo
