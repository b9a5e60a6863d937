"""
Cart Store

Ordered cart lines keyed by product + variant, with stock ceilings and
durable persistence.

Every effective mutation writes the whole cart to the key-value store and
notifies subscribers. The cart is rehydrated from the store on
construction; unreadable or malformed stored data gives an empty cart.
"""

import logging
from dataclasses import dataclass, replace
from decimal import Decimal, InvalidOperation
from typing import Any, Callable, Dict, List, Optional

from ..catalog.variants import BaseSelection, VariantSelection
from ..common.constants import CART_STORAGE_KEY, DEFAULT_UNIT_TYPE
from ..common.currency import to_money
from ..models import Product
from ..storage import KeyValueStore

logger = logging.getLogger(__name__)

Listener = Callable[["CartStore"], None]


@dataclass(frozen=True)
class ProductRef:
    """Snapshot of a product as it was when added to the cart."""
    id: str
    name: str
    price: Decimal          # unit price of the selected variant
    stock: int              # stock of the selected variant
    sku: str = ""
    image: str = ""
    unit_type: str = DEFAULT_UNIT_TYPE


@dataclass
class CartLine:
    """One cart line. quantity is always within [1, product.stock]."""
    line_key: str
    product: ProductRef
    quantity: int
    variant_kind: str = "base"   # "base", "size" or "pack"
    variant_id: str = ""
    variant_label: str = ""
    pack_quantity: int = 1

    @property
    def line_total(self) -> Decimal:
        return self.product.price * self.quantity

    def to_dict(self) -> Dict[str, Any]:
        return {
            "lineKey": self.line_key,
            "quantity": self.quantity,
            "product": {
                "id": self.product.id,
                "name": self.product.name,
                "price": str(self.product.price),
                "stock": self.product.stock,
                "sku": self.product.sku,
                "image": self.product.image,
                "unitType": self.product.unit_type,
            },
            "variant": {
                "kind": self.variant_kind,
                "id": self.variant_id,
                "label": self.variant_label,
                "packQuantity": self.pack_quantity,
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CartLine":
        """Rebuild a stored line. Raises KeyError/TypeError/ValueError on bad data."""
        product = data["product"]
        variant = data.get("variant") or {}
        quantity = int(data["quantity"])
        stock = int(product["stock"])
        if quantity <= 0 or stock <= 0:
            raise ValueError(f"Invalid stored quantity {quantity} / stock {stock}")

        return cls(
            line_key=str(data["lineKey"]),
            product=ProductRef(
                id=str(product["id"]),
                name=str(product["name"]),
                price=to_money(Decimal(str(product["price"]))),
                stock=stock,
                sku=product.get("sku") or "",
                image=product.get("image") or "",
                unit_type=product.get("unitType") or DEFAULT_UNIT_TYPE,
            ),
            quantity=min(quantity, stock),
            variant_kind=variant.get("kind") or "base",
            variant_id=variant.get("id") or "",
            variant_label=variant.get("label") or "",
            pack_quantity=int(variant.get("packQuantity") or 1),
        )


def _line_for(product: Product, selection: VariantSelection) -> CartLine:
    kind = selection.kind
    name = product.name
    label = getattr(selection, "label", "")
    if label:
        name = f"{product.name} - {label}"

    return CartLine(
        line_key=selection.line_key(product.id),
        product=ProductRef(
            id=product.id,
            name=name,
            price=selection.price,
            stock=selection.stock,
            sku=product.sku,
            image=product.image,
            unit_type=getattr(selection, "unit_type", product.unit_type),
        ),
        quantity=1,
        variant_kind=kind,
        variant_id=getattr(selection, "id", ""),
        variant_label=label,
        pack_quantity=getattr(selection, "pack_quantity", 1),
    )


class CartStore:
    """
    Cart aggregate for one browsing session.

    Usage:
        cart = CartStore(JsonFileStore("~/.storefront"))
        cart.subscribe(lambda c: print(c.total_items()))
        cart.add_line(product)                 # base price
        cart.add_line(product, selection)      # size or pack variant
        cart.update_quantity(line_key, 3)
        cart.total_price()
    """

    def __init__(self, storage: KeyValueStore, storage_key: str = CART_STORAGE_KEY):
        self.storage = storage
        self.storage_key = storage_key
        self._lines: List[CartLine] = []
        self._listeners: List[Listener] = []
        self._load()

    # ── Persistence ──────────────────────────────────────────────────────────

    def _load(self) -> None:
        stored = self.storage.get(self.storage_key)
        if stored is None:
            return
        if not isinstance(stored, list):
            logger.warning("Stored cart is not a list, starting empty")
            return

        try:
            loaded = [CartLine.from_dict(item) for item in stored]
        except (KeyError, TypeError, ValueError, AttributeError, InvalidOperation) as e:
            logger.warning("Stored cart is corrupt, starting empty: %s", e)
            return

        # One line per key; repeated keys fold into the first occurrence
        lines: Dict[str, CartLine] = {}
        for line in loaded:
            first = lines.get(line.line_key)
            if first is None:
                lines[line.line_key] = line
                continue
            logger.warning("Merging duplicate stored cart line %s", line.line_key)
            first.quantity = min(first.quantity + line.quantity, first.product.stock)

        self._lines = list(lines.values())
        logger.debug("Rehydrated cart with %d lines", len(self._lines))

    def _commit(self) -> None:
        try:
            self.storage.set(self.storage_key, [line.to_dict() for line in self._lines])
        except (OSError, TypeError, ValueError) as e:
            logger.error("Error saving cart: %s", e)

        for listener in list(self._listeners):
            listener(self)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener; returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ── Queries ──────────────────────────────────────────────────────────────

    @property
    def lines(self) -> List[CartLine]:
        """Lines in insertion order (a copy; mutate through the store)."""
        return list(self._lines)

    def get_line(self, line_key: str) -> Optional[CartLine]:
        for line in self._lines:
            if line.line_key == line_key:
                return line
        return None

    def line_quantity(self, line_key: str) -> int:
        line = self.get_line(line_key)
        return line.quantity if line else 0

    def quantity_for(self, product_id: str) -> int:
        """Units of a product already in the cart, across all its variants."""
        return sum(line.quantity for line in self._lines if line.product.id == product_id)

    def total_items(self) -> int:
        return sum(line.quantity for line in self._lines)

    def total_price(self) -> Decimal:
        """Sum of captured unit price x quantity."""
        return sum((line.line_total for line in self._lines), Decimal("0.000"))

    def is_empty(self) -> bool:
        return not self._lines

    def __len__(self) -> int:
        return len(self._lines)

    # ── Mutations ────────────────────────────────────────────────────────────

    def add_line(self, product: Product, selection: Optional[VariantSelection] = None) -> None:
        """
        Add one unit of product (optionally a size/pack variant).

        Out-of-stock products and lines already at their stock ceiling are
        left unchanged.
        """
        if selection is None:
            selection = BaseSelection(price=product.base_price, stock=product.stock_quantity)

        if selection.stock <= 0:
            logger.warning("Cannot add out of stock product %s to cart", product.id)
            return

        line_key = selection.line_key(product.id)
        existing = self.get_line(line_key)

        if existing is not None:
            # Current stock is the ceiling; the captured price stays
            if existing.quantity >= selection.stock:
                logger.warning("Cannot add more of %s than available stock (%d)",
                               line_key, selection.stock)
                return
            existing.quantity += 1
            existing.product = replace(existing.product, stock=selection.stock)
        else:
            self._lines.append(_line_for(product, selection))

        self._commit()

    def update_quantity(self, line_key: str, quantity: int) -> None:
        """Set a line's quantity; <= 0 removes it, otherwise clamped to stock."""
        if quantity <= 0:
            self.remove_line(line_key)
            return

        line = self.get_line(line_key)
        if line is None:
            return

        new_quantity = max(1, min(quantity, line.product.stock))
        if new_quantity == line.quantity:
            return

        line.quantity = new_quantity
        self._commit()

    def remove_line(self, line_key: str) -> None:
        """Remove a line; removing an absent key does nothing."""
        remaining = [line for line in self._lines if line.line_key != line_key]
        if len(remaining) == len(self._lines):
            return
        self._lines = remaining
        self._commit()

    def clear(self) -> None:
        self._lines = []
        self._commit()
