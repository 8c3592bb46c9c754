"""Exception taxonomy for the Stockroom integration.

Defines a small hierarchy of exceptions used across the controller, services
and the WebSocket API. These extend Home Assistant's HomeAssistantError to
ensure consistent behavior when surfaced through the platform.

Operations on unknown item ids are not errors and have no exception type.
"""

from __future__ import annotations

from homeassistant.exceptions import HomeAssistantError


class StockroomError(HomeAssistantError):
    """Base exception for Stockroom-related errors."""

    def __init__(self, message: str) -> None:
        super().__init__(message)


class ValidationError(StockroomError):
    """Raised when view requests or payloads fall outside the allowed values."""


class StorageError(StockroomError):
    """Raised when writing to persistent storage fails."""
