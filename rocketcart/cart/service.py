"""Cart store: in-memory cart mirrored to a durable store, guarded by stock checks."""
import asyncio
from contextlib import nullcontext
from typing import TYPE_CHECKING, Optional

from rocketcart.db import DurableStore, StorageKeys, create_store
from rocketcart.errors import CartError
from rocketcart.i18n import DEFAULT_LANGUAGE, get_text
from rocketcart.logging import get_logger, sanitize_id_for_logging
from rocketcart.notifications import Notification, Notifier
from .models import LineItem, ProductId, dump_snapshot, load_snapshot, normalize_product_id

if TYPE_CHECKING:
    from rocketcart.config import Settings
    from rocketcart.inventory import InventoryLookup

logger = get_logger(__name__)


class CartStore:
    """
    Owns the device's single cart.

    Features:
    - Loads the persisted snapshot on creation (empty if missing or corrupt)
    - Checks stock before every quantity change
    - Commits each change to memory and the durable store together
    - Reports failures as toasts; public operations never raise

    Usage:
        store = CartStore(inventory, storage, notifier)
        await store.add_product(1)
        await store.update_product_amount(1, 3)
        await store.remove_product(1)
        store.cart  # -> (LineItem, ...)
    """

    def __init__(
        self,
        inventory: "InventoryLookup",
        storage: DurableStore,
        notifier: Notifier,
        *,
        storage_key: str = StorageKeys.CART,
        language: str = DEFAULT_LANGUAGE,
        serialize: bool = True,
    ):
        self._inventory = inventory
        self._storage = storage
        self._notifier = notifier
        self._storage_key = storage_key
        self._language = language
        # One mutation at a time, commit included. Without it two
        # operations can read the same snapshot and the later commit wins.
        self._lock: Optional[asyncio.Lock] = asyncio.Lock() if serialize else None
        self._cart: tuple[LineItem, ...] = self._load()

    @property
    def cart(self) -> tuple[LineItem, ...]:
        """Current cart, in insertion order."""
        return self._cart

    def _load(self) -> tuple[LineItem, ...]:
        try:
            raw = self._storage.get(self._storage_key)
        except Exception as e:
            logger.warning(f"Failed to read persisted cart, starting empty: {e}")
            return ()

        if not raw:
            return ()

        try:
            items = load_snapshot(raw)
        except (ValueError, TypeError) as e:
            # Left in storage as is; the next commit overwrites it
            logger.warning(f"Corrupted cart snapshot, starting empty: {e}")
            return ()

        logger.info(f"Loaded cart with {len(items)} item(s)")
        return items

    def _guard(self):
        return self._lock if self._lock is not None else nullcontext()

    def _find(self, snapshot: tuple[LineItem, ...], product_id: ProductId) -> Optional[LineItem]:
        return next((item for item in snapshot if item.id == product_id), None)

    def _commit(self, items: tuple[LineItem, ...]) -> None:
        """Replace the in-memory cart, then mirror it to the durable store."""
        self._cart = items
        try:
            self._storage.set(self._storage_key, dump_snapshot(items))
        except Exception as e:
            # Memory stays authoritative; the next successful commit catches up
            logger.error(f"Failed to persist cart: {e}")

    def _report(self, category: CartError) -> None:
        message = get_text(category.value, self._language)
        try:
            self._notifier.notify(Notification(category=category, message=message))
        except Exception as e:
            logger.error(f"Failed to deliver toast {category.name}: {e}")

    async def add_product(self, product_id: ProductId) -> None:
        """
        Add one unit of a product.

        A product already in the cart goes through update_product_amount
        with amount + 1, so the stock check applies. A new product is
        looked up in the inventory and appended with amount 1.
        """
        product_id = normalize_product_id(product_id)
        async with self._guard():
            snapshot = self._cart
            existing = self._find(snapshot, product_id)
            if existing is not None:
                await self._update_amount(product_id, existing.amount + 1)
                return

            try:
                product = await self._inventory.get_product(product_id)
                item = LineItem.from_product(product)
            except Exception as e:
                logger.warning(
                    f"Add failed for product {sanitize_id_for_logging(product_id)}: {e}"
                )
                self._report(CartError.ADD_PRODUCT_FAILED)
                return

            if item.id != product_id:
                logger.warning(
                    f"Inventory answered product {sanitize_id_for_logging(item.id)} "
                    f"for {sanitize_id_for_logging(product_id)}"
                )
                self._report(CartError.ADD_PRODUCT_FAILED)
                return

            self._commit(snapshot + (item,))

    async def remove_product(self, product_id: ProductId) -> None:
        """Remove a product from the cart; reports a toast if it is not there."""
        product_id = normalize_product_id(product_id)
        async with self._guard():
            snapshot = self._cart
            if self._find(snapshot, product_id) is None:
                logger.info(f"Remove of absent product {sanitize_id_for_logging(product_id)}")
                self._report(CartError.REMOVE_PRODUCT_FAILED)
                return

            self._commit(tuple(item for item in snapshot if item.id != product_id))

    async def aclose(self) -> None:
        """Release the inventory client's connections, if it holds any."""
        aclose = getattr(self._inventory, "aclose", None)
        if aclose is not None:
            await aclose()

    async def update_product_amount(self, product_id: ProductId, amount: int) -> None:
        """
        Set the quantity of a product already in the cart.

        Amounts below 1 are ignored; use remove_product to delete.
        Amounts above the product's stock are refused with a toast.
        Products not in the cart are left out (nothing is inserted).
        """
        product_id = normalize_product_id(product_id)
        async with self._guard():
            await self._update_amount(product_id, amount)

    async def _update_amount(self, product_id: ProductId, amount: int) -> None:
        if isinstance(amount, (int, float)) and amount < 1:
            return

        if isinstance(amount, bool) or not isinstance(amount, int):
            logger.warning(f"Rejected non-integer amount {amount!r}")
            self._report(CartError.UPDATE_AMOUNT_FAILED)
            return

        snapshot = self._cart
        try:
            stock = await self._inventory.get_stock(product_id)
        except Exception as e:
            logger.warning(
                f"Stock lookup failed for product {sanitize_id_for_logging(product_id)}: {e}"
            )
            self._report(CartError.UPDATE_AMOUNT_FAILED)
            return

        if amount > stock.amount:
            logger.info(
                f"Product {sanitize_id_for_logging(product_id)}: "
                f"requested {amount}, {stock.amount} in stock"
            )
            self._report(CartError.INSUFFICIENT_STOCK)
            return

        if self._find(snapshot, product_id) is None:
            logger.debug(f"Amount update for product {sanitize_id_for_logging(product_id)} not in cart")
            return

        self._commit(tuple(
            item.with_amount(amount) if item.id == product_id else item
            for item in snapshot
        ))


def build_cart_store(settings: "Settings", notifier: Notifier) -> CartStore:
    """Wire a CartStore from settings: HTTP inventory client and configured storage."""
    from rocketcart.inventory import InventoryClient

    inventory = InventoryClient(settings.inventory_api_url, timeout=settings.inventory_timeout)
    return CartStore(
        inventory,
        create_store(settings),
        notifier,
        storage_key=settings.storage_key,
        language=settings.language,
        serialize=settings.serialize_mutations,
    )
