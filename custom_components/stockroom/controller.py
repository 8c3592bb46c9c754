"""Inventory controller: the single state container behind the UI.

The controller owns the repository, the view state (search term, category
filter, sort selection, page and page size) and the theme flag. View
operations are synchronous and return a freshly derived ``ViewResult``;
mutations are awaited because they flush the whole collection to storage
before returning.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol

from .const import DEFAULT_PAGE_SIZE, DOMAIN, THEME_DARK, THEME_LIGHT
from .dashboard import DashboardStats, categories, compute_stats
from .exceptions import ValidationError
from .models import DEFAULT_SORT, InventoryItem, NewInventoryItem, SortConfig, SortKey
from .pagination import page_count, paginate, validate_page, validate_page_size
from .query import build_comparator, query
from .repository import Repository

LOGGER = logging.getLogger(__name__)


class ItemStore(Protocol):
    """Persistence surface the controller needs (see ``storage.DomainStore``)."""

    async def async_load_items(self) -> list[dict[str, Any]] | None: ...

    async def async_save_items(self, items: list[dict[str, Any]]) -> None: ...

    async def async_load_theme(self) -> str | None: ...

    async def async_save_theme(self, theme: str) -> None: ...


@dataclass(frozen=True)
class ViewResult:
    """Derived view state returned by every view operation."""

    items: list[InventoryItem]
    page: int
    page_size: int
    total_pages: int
    total_filtered: int
    search_term: str
    category: str
    sort: SortConfig
    stats: DashboardStats
    categories: list[str]


class InventoryController:
    """Holds the session collection and the current view selection."""

    def __init__(self, store: ItemStore, *, page_size: int = DEFAULT_PAGE_SIZE) -> None:
        self._store = store
        self._repository = Repository()
        self._load_task: asyncio.Task[list[InventoryItem]] | None = None
        self._search_term = ""
        self._category = ""
        self._sort = DEFAULT_SORT
        self._comparator = build_comparator(DEFAULT_SORT)
        self._page = 1
        self._page_size = validate_page_size(page_size)
        self._theme: str | None = None

    @property
    def loaded(self) -> bool:
        return self._load_task is not None and self._load_task.done()

    @property
    def items(self) -> list[InventoryItem]:
        return self._repository.items

    @property
    def sort(self) -> SortConfig:
        return self._sort

    @property
    def page(self) -> int:
        return self._page

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def theme(self) -> str | None:
        return self._theme

    # -----------------------------
    # Loading
    # -----------------------------

    async def async_load_initial(self) -> list[InventoryItem]:
        """Load the collection once; later calls return the live collection."""

        if self._load_task is None:
            self._load_task = asyncio.create_task(self._async_load())
        await self._load_task
        return self._repository.items

    async def _async_load(self) -> list[InventoryItem]:
        raw = await self._store.async_load_items()
        items = self._repository.load_state(raw)
        LOGGER.debug(
            "Inventory loaded",
            extra={
                "domain": DOMAIN,
                "op": "load_initial",
                "items_count": len(items),
                "from_storage": raw is not None,
            },
        )
        return items

    # -----------------------------
    # Mutations (persisted immediately)
    # -----------------------------

    async def async_create_item(
        self, payload: NewInventoryItem | Mapping[str, Any]
    ) -> InventoryItem:
        await self.async_load_initial()
        item = self._repository.add(payload)
        await self._async_persist("create_item")
        return item

    async def async_update_item(self, item: InventoryItem) -> None:
        await self.async_load_initial()
        self._repository.update(item)
        await self._async_persist("update_item")

    async def async_delete_item(self, item_id: str) -> None:
        await self.async_load_initial()
        self._repository.remove(item_id)
        await self._async_persist("delete_item")

    async def _async_persist(self, op: str) -> None:
        # Full snapshot on every mutation; StorageError propagates to callers
        await self._store.async_save_items(self._repository.export_state())
        LOGGER.debug(
            "Inventory persisted after %s",
            op,
            extra={"domain": DOMAIN, "op": op, "items_count": len(self._repository)},
        )

    # -----------------------------
    # View operations
    # -----------------------------

    def set_search(self, term: str) -> ViewResult:
        self._search_term = term or ""
        return self.view()

    def set_category(self, name: str) -> ViewResult:
        self._category = name or ""
        self._page = 1
        return self.view()

    def set_sort(self, key: SortKey) -> ViewResult:
        self._sort = self._sort.toggled(key)
        self._comparator = build_comparator(self._sort)
        self._page = 1
        return self.view()

    def set_page(self, page: int) -> ViewResult:
        self._page = validate_page(page)
        return self.view()

    def set_page_size(self, page_size: int) -> ViewResult:
        self._page_size = validate_page_size(page_size)
        self._page = 1
        return self.view()

    def view(self) -> ViewResult:
        """Derive the visible page and the dashboard from current state."""

        collection = self._repository.items
        visible = query(collection, self._search_term, self._category, comparator=self._comparator)
        return ViewResult(
            items=paginate(visible, self._page, self._page_size),
            page=self._page,
            page_size=self._page_size,
            total_pages=page_count(len(visible), self._page_size),
            total_filtered=len(visible),
            search_term=self._search_term,
            category=self._category,
            sort=self._sort,
            stats=compute_stats(collection),
            categories=categories(collection),
        )

    # -----------------------------
    # Theme
    # -----------------------------

    async def async_load_theme(self, prefers_dark: bool | None = None) -> str:
        """Resolve the theme: stored value first, then the dark-mode preference."""

        stored = await self._store.async_load_theme()
        if stored is not None:
            self._theme = stored
        else:
            self._theme = THEME_DARK if prefers_dark else THEME_LIGHT
        return self._theme

    async def async_set_theme(self, theme: str) -> str:
        if theme not in (THEME_DARK, THEME_LIGHT):
            raise ValidationError("theme must be 'dark' or 'light'")
        await self._store.async_save_theme(theme)
        self._theme = theme
        LOGGER.debug("Theme set", extra={"domain": DOMAIN, "op": "set_theme", "theme": theme})
        return theme

    async def async_toggle_theme(self) -> str:
        current = self._theme
        if current is None:
            current = await self.async_load_theme()
        return await self.async_set_theme(THEME_LIGHT if current == THEME_DARK else THEME_DARK)
