"""Cart package: models, snapshot codec and the cart store."""
from .models import LineItem, Product, ProductId, Stock, dump_snapshot, load_snapshot
from .service import CartStore, build_cart_store

__all__ = [
    "LineItem",
    "Product",
    "ProductId",
    "Stock",
    "dump_snapshot",
    "load_snapshot",
    "CartStore",
    "build_cart_store",
]
