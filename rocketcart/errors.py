"""
Error categories and exceptions.

CartError values double as i18n keys: the user-facing text for each
category lives in rocketcart/i18n/locales/*.json.
"""

from enum import Enum


class CartError(str, Enum):
    """Failure categories reported through the notification channel."""
    ADD_PRODUCT_FAILED = "cart.add_product_failed"
    REMOVE_PRODUCT_FAILED = "cart.remove_product_failed"
    UPDATE_AMOUNT_FAILED = "cart.update_amount_failed"
    INSUFFICIENT_STOCK = "cart.insufficient_stock"


class RocketCartError(Exception):
    """Base class for collaborator failures."""


class InventoryError(RocketCartError):
    """Inventory service unreachable, erroring, or returned an unusable payload."""


class StorageError(RocketCartError):
    """Durable store could not read or write a key."""


__all__ = [
    "CartError",
    "RocketCartError",
    "InventoryError",
    "StorageError",
]
