"""
Catalog data models.

Typed records for categories, products and their size/pack variants,
plus the transforms that build them from backend API payloads. The
transforms are the only place that deals with the loose payload shape:
optional fields get defaults, records without an id or name are rejected.
"""

import logging
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from ..common.constants import (
    DEFAULT_BRAND,
    DEFAULT_UNIT_TYPE,
    PLACEHOLDER_CATEGORY_IMAGE,
    PLACEHOLDER_PRODUCT_IMAGE,
)
from ..common.currency import to_money

logger = logging.getLogger(__name__)


class CatalogRecordError(ValueError):
    """A catalog payload is missing a field the storefront cannot default."""


@dataclass(frozen=True)
class SizeOption:
    """Size-table entry: per-size price and stock override."""
    id: str
    size: str
    price: Decimal
    stock_quantity: int = 0
    unit_type: str = DEFAULT_UNIT_TYPE


@dataclass(frozen=True)
class PackOption:
    """Pack entry, optionally scoped to a single size."""
    id: str
    pack_type: str
    price: Decimal
    pack_quantity: int = 1
    stock_quantity: int = 0
    size: str = ""
    unit_type: str = ""
    sku: str = ""


@dataclass(frozen=True)
class Category:
    """Catalog category. `subcategories` holds child category ids."""
    id: str
    name: str
    slug: str = ""
    image: str = PLACEHOLDER_CATEGORY_IMAGE
    description: str = ""
    parent_id: str = ""
    product_count: int = 0
    subcategories: tuple = ()

    @property
    def has_subcategories(self) -> bool:
        return len(self.subcategories) > 0

    @property
    def is_root(self) -> bool:
        return not self.parent_id


@dataclass(frozen=True)
class Product:
    """
    Catalog product with optional size table and pack sizes.

    `base_price` and `stock_quantity` describe the product without any
    variant selection.
    """
    id: str
    name: str
    base_price: Decimal
    stock_quantity: int = 0
    sku: str = ""
    slug: str = ""
    brand: str = DEFAULT_BRAND
    description: str = ""
    short_description: str = ""
    category_id: str = ""
    image: str = PLACEHOLDER_PRODUCT_IMAGE
    images: tuple = ()
    specifications: Dict[str, str] = field(default_factory=dict, compare=False, hash=False)
    size_table: tuple = ()
    pack_sizes: tuple = ()
    is_active: bool = True

    @property
    def has_sizes(self) -> bool:
        return len(self.size_table) > 0

    @property
    def has_packs(self) -> bool:
        return len(self.pack_sizes) > 0

    @property
    def unit_type(self) -> str:
        """Display unit for the base price ("kg", "m", "piece", ...)."""
        if self.size_table:
            return self.size_table[0].unit_type
        return DEFAULT_UNIT_TYPE

    def find_size(self, size_id: str) -> Optional[SizeOption]:
        """Look up a size entry by id, falling back to its label for legacy rows."""
        for option in self.size_table:
            if option.id == size_id:
                return option
        for option in self.size_table:
            if option.size == size_id:
                return option
        return None


def _require(payload: Dict[str, Any], key: str, kind: str) -> str:
    value = payload.get(key)
    if value is None or str(value).strip() == "":
        raise CatalogRecordError(f"{kind} record without '{key}': {str(payload)[:80]}")
    return str(value)


def _to_int(value: Any) -> int:
    try:
        return int(value or 0)
    except (TypeError, ValueError, OverflowError):
        return 0


def _rows(value: Any, kind: str) -> List[Dict[str, Any]]:
    """Object rows of a nested list; anything else is skipped."""
    if not isinstance(value, (list, tuple)):
        return []
    rows = []
    for row in value:
        if isinstance(row, dict):
            rows.append(row)
        else:
            logger.debug("Skipping %s row that is not an object: %r", kind, row)
    return rows


def _mapping(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def category_from_api(payload: Dict[str, Any]) -> Category:
    """
    Transform a backend category payload.

    Subcategories may arrive as full objects or as bare ids; only ids are kept.
    """
    if not isinstance(payload, dict):
        raise CatalogRecordError(f"Category record is not an object: {payload!r}")

    subcategories = []
    raw_subcategories = payload.get("subcategories")
    if not isinstance(raw_subcategories, (list, tuple)):
        raw_subcategories = []
    for sub in raw_subcategories:
        sub_id = sub.get("id") if isinstance(sub, dict) else sub
        if sub_id:
            subcategories.append(str(sub_id))

    return Category(
        id=_require(payload, "id", "Category"),
        name=_require(payload, "name", "Category"),
        slug=payload.get("slug") or "",
        image=payload.get("imageUrl") or payload.get("image") or PLACEHOLDER_CATEGORY_IMAGE,
        description=payload.get("description") or "",
        parent_id=str(payload.get("parentId") or ""),
        product_count=_to_int(payload.get("productCount") or payload.get("count")),
        subcategories=tuple(subcategories),
    )


def _sizes_from_api(payload: Dict[str, Any]) -> List[SizeOption]:
    sizes = []
    for row in _rows(payload.get("sizeTable"), "size"):
        label = str(row.get("size") or "")
        if not label and not row.get("id"):
            logger.debug("Skipping size row without id or label: %s", row)
            continue
        sizes.append(SizeOption(
            id=str(row.get("id") or label),
            size=label,
            price=to_money(row.get("price")),
            stock_quantity=_to_int(row.get("stockQuantity", row.get("quantity"))),
            unit_type=row.get("unitType") or DEFAULT_UNIT_TYPE,
        ))
    if sizes:
        return sizes

    # Legacy WooCommerce size table (ids are the size labels)
    legacy = _mapping(payload.get("size_table_data") or payload.get("sizeTableData"))
    unit_type = legacy.get("unit_type") or legacy.get("unitType") or DEFAULT_UNIT_TYPE
    for row in _rows(legacy.get("size_table") or legacy.get("sizeTable"), "size"):
        label = str(row.get("size") or "")
        if not label:
            continue
        sizes.append(SizeOption(
            id=label,
            size=label,
            price=to_money(row.get("price")),
            stock_quantity=_to_int(row.get("quantity")),
            unit_type=unit_type,
        ))
    return sizes


def _packs_from_api(payload: Dict[str, Any]) -> List[PackOption]:
    rows = payload.get("packSizes")
    if not rows:
        rows = _mapping(payload.get("packSizeData")).get("packSizes")

    packs = []
    for row in _rows(rows, "pack"):
        if not row.get("id"):
            logger.debug("Skipping pack row without id: %s", row)
            continue
        packs.append(PackOption(
            id=str(row["id"]),
            pack_type=row.get("packType") or "",
            price=to_money(row.get("price")),
            pack_quantity=_to_int(row.get("packQuantity")) or 1,
            stock_quantity=_to_int(row.get("stockQuantity")),
            size=str(row.get("size") or ""),
            unit_type=row.get("unitType") or "",
            sku=row.get("sku") or "",
        ))
    return packs


def product_from_api(payload: Dict[str, Any]) -> Product:
    """Transform a backend product payload into a Product."""
    if not isinstance(payload, dict):
        raise CatalogRecordError(f"Product record is not an object: {payload!r}")

    specifications = {}
    for spec in _rows(payload.get("specifications"), "specification"):
        key = spec.get("specName") or spec.get("key") or spec.get("name")
        if key:
            specifications[key] = str(spec.get("specValue") or spec.get("value") or "")

    image_rows = _rows(payload.get("images"), "image")
    images = tuple(img["imageUrl"] for img in image_rows if img.get("imageUrl"))
    primary = next((img.get("imageUrl") for img in image_rows if img.get("isPrimary")), None)

    category = _mapping(payload.get("category"))

    return Product(
        id=_require(payload, "id", "Product"),
        name=_require(payload, "name", "Product"),
        base_price=to_money(payload.get("basePrice", payload.get("price"))),
        stock_quantity=_to_int(payload.get("stockQuantity", payload.get("stock"))),
        sku=payload.get("sku") or "",
        slug=payload.get("slug") or "",
        brand=payload.get("brand") or DEFAULT_BRAND,
        description=payload.get("description") or "",
        short_description=payload.get("shortDescription") or "",
        category_id=str(payload.get("categoryId") or category.get("id") or ""),
        image=primary or (images[0] if images else PLACEHOLDER_PRODUCT_IMAGE),
        images=images,
        specifications=specifications,
        size_table=tuple(_sizes_from_api(payload)),
        pack_sizes=tuple(_packs_from_api(payload)),
        is_active=bool(payload.get("isActive", True)),
    )


def categories_from_api(payloads: Iterable[Dict[str, Any]]) -> List[Category]:
    """Transform a category list, skipping malformed records."""
    categories = []
    for payload in payloads or []:
        try:
            categories.append(category_from_api(payload))
        except CatalogRecordError as e:
            logger.warning("Skipping category: %s", e)
    return categories


def products_from_api(payloads: Iterable[Dict[str, Any]]) -> List[Product]:
    """Transform a product list, skipping malformed records."""
    products = []
    for payload in payloads or []:
        try:
            products.append(product_from_api(payload))
        except CatalogRecordError as e:
            logger.warning("Skipping product: %s", e)
    return products
