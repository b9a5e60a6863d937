"""
Variant Price Resolver

Resolves the effective unit price and stock of a product from the
shopper's size/pack choice. Resolution precedence, highest first:

1. Pack matching the selected size (or a sizeless pack when no size is set)
2. Size-table entry
3. Base product price and stock

Stale ids (entries removed by a catalog update) fall through to the next
level instead of failing, so resolve() always returns a selection.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Union

from ..common.constants import DEFAULT_UNIT_TYPE
from ..models import PackOption, Product, SizeOption

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BaseSelection:
    price: Decimal
    stock: int

    kind = "base"

    def line_key(self, product_id: str) -> str:
        return product_id


@dataclass(frozen=True)
class SizeSelection:
    id: str
    price: Decimal
    stock: int
    unit_type: str
    label: str

    kind = "size"

    def line_key(self, product_id: str) -> str:
        return f"{product_id}-size-{self.id}"


@dataclass(frozen=True)
class PackSelection:
    id: str
    price: Decimal
    stock: int
    unit_type: str
    label: str
    pack_quantity: int

    kind = "pack"

    def line_key(self, product_id: str) -> str:
        return f"{product_id}-pack-{self.id}"


VariantSelection = Union[BaseSelection, SizeSelection, PackSelection]


def _size_selection(option: SizeOption) -> SizeSelection:
    return SizeSelection(
        id=option.id,
        price=option.price,
        stock=option.stock_quantity,
        unit_type=option.unit_type,
        label=option.size,
    )


def _pack_selection(option: PackOption) -> PackSelection:
    label = option.pack_type
    if option.size:
        label = f"{label} ({option.size})"
    return PackSelection(
        id=option.id,
        price=option.price,
        stock=option.stock_quantity,
        unit_type=option.unit_type or DEFAULT_UNIT_TYPE,
        label=label,
        pack_quantity=option.pack_quantity,
    )


def _find_pack(product: Product, pack_id: str, size: Optional[SizeOption]) -> Optional[PackOption]:
    """
    Find pack_id, preferring a pack scoped to the selected size over a
    sizeless one. Size-scoped packs never match when no size is selected.
    """
    candidates = [pack for pack in product.pack_sizes if pack.id == pack_id]
    if size is not None:
        for pack in candidates:
            if pack.size and pack.size in (size.id, size.size):
                return pack
    for pack in candidates:
        if not pack.size:
            return pack
    return None


def resolve(
    product: Product,
    size_id: Optional[str] = None,
    pack_id: Optional[str] = None,
) -> VariantSelection:
    """
    Resolve the active variant selection for a product.

    Args:
        product: Catalog product
        size_id: Selected size-table id (or legacy size label)
        pack_id: Selected pack id

    Returns:
        PackSelection, SizeSelection or BaseSelection
    """
    size = product.find_size(size_id) if size_id else None
    if size_id and size is None:
        logger.debug("Stale size %r on product %s, ignoring", size_id, product.id)

    if pack_id:
        pack = _find_pack(product, pack_id, size)
        if pack is not None:
            return _pack_selection(pack)
        logger.debug("Pack %r not available for size %r on product %s",
                     pack_id, size_id, product.id)

    if size is not None:
        return _size_selection(size)

    return BaseSelection(price=product.base_price, stock=product.stock_quantity)


def clamp_quantity(quantity: int, stock: int) -> int:
    """Clamp a quantity into [1, stock]; 0 only when nothing is in stock."""
    if stock <= 0:
        return 0
    return max(1, min(quantity, stock))


class VariantPicker:
    """
    Size/pack/quantity selector state for the product detail screen.

    The quantity is kept inside [1, selection.stock] across selection
    changes: switching to a variant with less stock reduces it.

    Usage:
        picker = VariantPicker(product)
        picker.select_size("sz-2")
        picker.set_quantity(5)
        picker.add_to_cart(cart)
    """

    def __init__(self, product: Product, size_id: Optional[str] = None,
                 pack_id: Optional[str] = None):
        self.product = product
        self.size_id = size_id
        self.pack_id = pack_id
        if size_id is None and product.size_table:
            self.size_id = product.size_table[0].id
        self.selection = resolve(product, self.size_id, self.pack_id)
        self.quantity = clamp_quantity(1, self.selection.stock)

    def _reselect(self) -> None:
        self.selection = resolve(self.product, self.size_id, self.pack_id)
        self.quantity = clamp_quantity(self.quantity, self.selection.stock)

    def select_size(self, size_id: Optional[str]) -> VariantSelection:
        self.size_id = size_id or None
        self._reselect()
        return self.selection

    def select_pack(self, pack_id: Optional[str]) -> VariantSelection:
        self.pack_id = pack_id or None
        self._reselect()
        return self.selection

    def set_quantity(self, quantity: int) -> int:
        self.quantity = clamp_quantity(quantity, self.selection.stock)
        return self.quantity

    def increment(self) -> int:
        return self.set_quantity(self.quantity + 1)

    def decrement(self) -> int:
        return self.set_quantity(self.quantity - 1)

    @property
    def unit_price(self) -> Decimal:
        return self.selection.price

    @property
    def line_total(self) -> Decimal:
        return self.selection.price * self.quantity

    def add_to_cart(self, cart) -> int:
        """
        Add the chosen quantity of the active selection to cart.

        Returns the number of units actually added (stock ceilings and
        units already in the cart may reduce it).
        """
        key = self.selection.line_key(self.product.id)
        before = cart.line_quantity(key)
        for _ in range(self.quantity):
            cart.add_line(self.product, self.selection)
        return cart.line_quantity(key) - before
