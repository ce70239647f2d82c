"""rocketcart - device-local shopping cart backed by a remote stock service."""

__version__ = "0.1.0"
