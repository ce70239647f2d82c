"""Cart models: line items, inventory payloads and snapshot codec."""
import json
from dataclasses import dataclass, replace
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

ProductId = Union[int, str]


def normalize_product_id(value: ProductId) -> ProductId:
    """
    Canonical form of a product id.

    ASCII numeric strings become ints so that 7 from a JSON body and "7"
    from a URL path name the same product. Other digit characters ("²",
    "٣") stay strings.
    """
    if isinstance(value, str):
        stripped = value.strip()
        if stripped.isascii() and stripped.isdigit():
            return int(stripped)
        return stripped
    return value


def to_decimal(value: Any) -> Decimal:
    """Convert a JSON price (number or string) to Decimal."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool) or value is None:
        raise ValueError(f"Invalid price: {value!r}")
    try:
        # str() first so 179.9 does not become 179.900000000000005684...
        return Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"Invalid price: {value!r}")


class Product(BaseModel):
    """Product description returned by the inventory service."""
    model_config = ConfigDict(populate_by_name=True)

    id: ProductId
    name: str = Field(validation_alias=AliasChoices("name", "title"))
    price: Decimal
    image_url: str = Field(
        default="",
        validation_alias=AliasChoices("image_url", "imageUrl", "image"),
    )


class Stock(BaseModel):
    """Stock record: the most units of a product that can be bought."""
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[ProductId] = Field(
        default=None,
        validation_alias=AliasChoices("id", "productId", "product_id"),
    )
    amount: int = Field(ge=0)


@dataclass(frozen=True)
class LineItem:
    """One product in the cart with its requested quantity."""
    id: ProductId
    name: str
    price: Decimal
    image_url: str
    amount: int

    def __post_init__(self):
        if isinstance(self.id, bool) or not isinstance(self.id, (int, str)):
            raise ValueError(f"Invalid product id: {self.id!r}")
        if isinstance(self.amount, bool) or not isinstance(self.amount, int):
            raise ValueError("amount must be an integer")
        if self.amount < 1:
            raise ValueError("amount must be at least 1")
        object.__setattr__(self, "id", normalize_product_id(self.id))
        object.__setattr__(self, "price", to_decimal(self.price))

    @classmethod
    def from_product(cls, product: Product, amount: int = 1) -> "LineItem":
        """Create a line item from an inventory product description."""
        return cls(
            id=product.id,
            name=product.name,
            price=product.price,
            image_url=product.image_url,
            amount=amount,
        )

    def with_amount(self, amount: int) -> "LineItem":
        """Copy of this item with a different amount."""
        return replace(self, amount=amount)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "price": str(self.price),
            "image_url": self.image_url,
            "amount": self.amount,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "LineItem":
        """
        Create from dictionary.

        Accepts the keys written by the web storefront ("title", "image",
        "imageUrl") as well as our own.
        """
        name = data["name"] if "name" in data else data["title"]
        image_url = data.get("image_url", data.get("imageUrl", data.get("image", "")))
        return cls(
            id=data["id"],
            name=name,
            price=to_decimal(data["price"]),
            image_url=image_url or "",
            amount=data["amount"],
        )


def dump_snapshot(items: Iterable[LineItem]) -> str:
    """Serialize the cart to the persisted JSON form."""
    return json.dumps([item.to_dict() for item in items], ensure_ascii=False)


def load_snapshot(raw: str) -> tuple[LineItem, ...]:
    """
    Parse a persisted snapshot.

    Raises:
        ValueError: invalid JSON, wrong shape, invalid item or duplicate ids
    """
    data = json.loads(raw)
    if not isinstance(data, list):
        raise ValueError("Cart snapshot must be a JSON array")

    items = []
    seen = set()
    for entry in data:
        if not isinstance(entry, dict):
            raise ValueError("Cart snapshot entries must be objects")
        try:
            item = LineItem.from_dict(entry)
        except KeyError as e:
            raise ValueError(f"Cart snapshot entry missing field {e}")
        if item.id in seen:
            raise ValueError(f"Duplicate product id in cart snapshot: {item.id!r}")
        seen.add(item.id)
        items.append(item)
    return tuple(items)
