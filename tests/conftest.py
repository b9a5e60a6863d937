"""Shared test fixtures."""

from decimal import Decimal

import pytest

from storefront.common.config_loader import StoreSettings
from storefront.models import Category, Customer, PackOption, Product, SizeOption
from storefront.storage import MemoryStore


@pytest.fixture
def memory_store():
    """Empty in-memory key-value store."""
    return MemoryStore()


@pytest.fixture
def store_settings():
    """Store settings matching config/store.yaml (no file I/O)."""
    return StoreSettings(
        currency="TND",
        decimals=3,
        tax_rate=Decimal("0.19"),
        delivery_fee=Decimal("7.990"),
        free_delivery_threshold=Decimal("100.000"),
    )


@pytest.fixture
def shovel():
    """Plain product with base price only."""
    return Product(
        id="p-shovel",
        name="Steel Shovel",
        base_price=Decimal("10.000"),
        stock_quantity=2,
        sku="SHV-01",
    )


@pytest.fixture
def out_of_stock_product():
    return Product(
        id="p-empty",
        name="Sold Out Hammer",
        base_price=Decimal("25.000"),
        stock_quantity=0,
    )


@pytest.fixture
def cable_product():
    """Product with a size table and sized + sizeless packs."""
    return Product(
        id="p-cable",
        name="Copper Cable",
        base_price=Decimal("3.500"),
        stock_quantity=50,
        sku="CBL",
        size_table=(
            SizeOption(id="sz-1", size="1.5mm", price=Decimal("2.800"), stock_quantity=40, unit_type="m"),
            SizeOption(id="sz-2", size="2.5mm", price=Decimal("4.200"), stock_quantity=5, unit_type="m"),
        ),
        pack_sizes=(
            PackOption(id="pk-roll", pack_type="Roll of 100", price=Decimal("380.000"),
                       pack_quantity=100, stock_quantity=3, size="sz-2", unit_type="m"),
            PackOption(id="pk-box", pack_type="Box of 10", price=Decimal("30.000"),
                       pack_quantity=10, stock_quantity=8),
        ),
    )


@pytest.fixture
def tools_category():
    """Root category with two subcategories."""
    return Category(id="c-tools", name="Tools", subcategories=("c-hand", "c-power"))


@pytest.fixture
def hand_tools_category():
    return Category(id="c-hand", name="Hand Tools", parent_id="c-tools")


@pytest.fixture
def paint_category():
    """Root category without subcategories."""
    return Category(id="c-paint", name="Paint")


@pytest.fixture
def b2c_customer():
    return Customer(id="u-1", email="ali@example.tn", first_name="Ali", last_name="Ben Salah")


@pytest.fixture
def b2b_customer():
    return Customer(
        id="u-2",
        email="buyer@builders.tn",
        company_name="Builders SARL",
        customer_type="B2B",
        financial_limit=Decimal("1000.000"),
        outstanding_balance=Decimal("950.000"),
    )


@pytest.fixture
def product_payload():
    """Backend product payload with size table and pack sizes."""
    return {
        "id": "p-cable",
        "name": "Copper Cable",
        "basePrice": "3.5",
        "stockQuantity": 50,
        "sku": "CBL",
        "brand": "Elec",
        "categoryId": "c-elec",
        "images": [
            {"imageUrl": "https://cdn.example.tn/a.jpg", "isPrimary": False},
            {"imageUrl": "https://cdn.example.tn/b.jpg", "isPrimary": True},
        ],
        "specifications": [{"specName": "Material", "specValue": "Copper"}],
        "sizeTable": [
            {"id": "sz-1", "size": "1.5mm", "price": "2.8", "stockQuantity": 40, "unitType": "m"},
            {"id": "sz-2", "size": "2.5mm", "price": "4.2", "stockQuantity": 5, "unitType": "m"},
        ],
        "packSizes": [
            {"id": "pk-roll", "packType": "Roll of 100", "packQuantity": 100,
             "size": "sz-2", "unitType": "m", "price": "380", "stockQuantity": 3},
        ],
    }
