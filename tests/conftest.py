"""Pytest configuration and fixtures"""
import asyncio
import os
from decimal import Decimal
from unittest.mock import AsyncMock, Mock

import pytest

# Keep tests off the real filesystem store and any configured inventory API
os.environ.setdefault("CART_STORAGE_BACKEND", "memory")
os.environ.setdefault("INVENTORY_API_URL", "http://inventory.test")

from rocketcart.cart import CartStore, LineItem, Product, Stock, dump_snapshot
from rocketcart.db import MemoryStore, StorageKeys
from rocketcart.errors import InventoryError
from rocketcart.notifications import ToastQueue


CATALOG = {
    1: {"id": 1, "title": "Tênis de Caminhada Leve Confortável", "price": 179.9,
        "image": "https://rocketseat-cdn.s3-sa-east-1.amazonaws.com/modulo-redux/tenis1.jpg"},
    2: {"id": 2, "title": "Tênis VR Caminhada Confortável Detalhes Couro Masculino", "price": 139.9,
        "image": "https://rocketseat-cdn.s3-sa-east-1.amazonaws.com/modulo-redux/tenis2.jpg"},
    3: {"id": 3, "title": "Tênis Adidas Duramo Lite 2.0", "price": 219.9,
        "image": "https://rocketseat-cdn.s3-sa-east-1.amazonaws.com/modulo-redux/tenis3.jpg"},
}


@pytest.fixture
def stock_levels():
    """Units in stock per product id; tests mutate it freely."""
    return {1: 3, 2: 5, 3: 2}


@pytest.fixture
def mock_inventory(stock_levels):
    """Inventory lookup backed by CATALOG and stock_levels"""
    inventory = Mock()

    async def get_product(product_id):
        # Suspend like a real round trip would
        await asyncio.sleep(0)
        if product_id not in CATALOG:
            raise InventoryError(f"Inventory API error 404 for products/{product_id}")
        return Product.model_validate(CATALOG[product_id])

    async def get_stock(product_id):
        await asyncio.sleep(0)
        if product_id not in stock_levels:
            raise InventoryError(f"Inventory API error 404 for stock/{product_id}")
        return Stock(id=product_id, amount=stock_levels[product_id])

    inventory.get_product = AsyncMock(side_effect=get_product)
    inventory.get_stock = AsyncMock(side_effect=get_stock)
    inventory.aclose = AsyncMock()
    return inventory


@pytest.fixture
def memory_store():
    return MemoryStore()


@pytest.fixture
def toasts():
    return ToastQueue()


@pytest.fixture
def make_item():
    """LineItem for a CATALOG product"""
    def _make(product_id, amount=1):
        return LineItem.from_product(Product.model_validate(CATALOG[product_id]), amount=amount)
    return _make


@pytest.fixture
def seed_cart(memory_store):
    """Persist a cart snapshot before the store is created."""
    def _seed(*items):
        memory_store.set(StorageKeys.CART, dump_snapshot(items))
    return _seed


@pytest.fixture
def make_store(mock_inventory, memory_store, toasts):
    """Build a CartStore over the mocked collaborators."""
    def _make(**kwargs):
        return CartStore(mock_inventory, memory_store, toasts, **kwargs)
    return _make


@pytest.fixture
def sample_product():
    """Sample inventory product payload"""
    return dict(CATALOG[1])


@pytest.fixture
def sample_item():
    return LineItem(
        id=1,
        name="Tênis de Caminhada Leve Confortável",
        price=Decimal("179.9"),
        image_url="https://rocketseat-cdn.s3-sa-east-1.amazonaws.com/modulo-redux/tenis1.jpg",
        amount=2,
    )
