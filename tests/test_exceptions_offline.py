"""Offline tests for exception taxonomy.

Each test constructs an exception and asserts type relationships and message
round-tripping, ensuring ``str(exc)`` equals the provided message.
"""

from __future__ import annotations

from custom_components.stockroom.exceptions import StockroomError, StorageError, ValidationError
from homeassistant.exceptions import HomeAssistantError


def test_validation_error_message_and_type():
    # ValidationError should subclass StockroomError and preserve message
    message = "quantity must be an integer"
    exc = ValidationError(message)
    assert isinstance(exc, StockroomError)
    assert str(exc) == message


def test_storage_error_message_and_type():
    message = "failed to persist items"
    exc = StorageError(message)
    assert isinstance(exc, StockroomError)
    assert str(exc) == message


def test_base_error_is_home_assistant_error():
    assert issubclass(StockroomError, HomeAssistantError)
