"""Constants for the Stockroom integration.

Defines the integration domain, storage keys, and the fixed view settings.
"""

from typing import Final

# Integration domain used across all modules
DOMAIN: str = "stockroom"

# Public integration version (kept in sync with manifest.json)
INTEGRATION_VERSION: str = "0.1.0"

# Storage keys under Home Assistant's .storage directory
STORAGE_KEY_ITEMS: Final[str] = "inventoryItems"
STORAGE_KEY_THEME: Final[str] = "theme"
STORAGE_VERSION: Final[int] = 1

# Items at or below this quantity count as low stock
LOW_STOCK_THRESHOLD: Final[int] = 10

PAGE_SIZE_OPTIONS: Final[tuple[int, ...]] = (10, 25, 50)
DEFAULT_PAGE_SIZE: Final[int] = 10

THEME_DARK: Final[str] = "dark"
THEME_LIGHT: Final[str] = "light"
