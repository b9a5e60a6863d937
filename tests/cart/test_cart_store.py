"""Tests for storefront/cart/cart_store.py"""

import json
from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from storefront.cart import CartLine, CartStore
from storefront.catalog import resolve
from storefront.common.constants import CART_STORAGE_KEY
from storefront.models import Product, SizeOption
from storefront.storage import MemoryStore


@pytest.fixture
def cart(memory_store):
    return CartStore(memory_store)


class TestAddLine:
    def test_add_base_product(self, cart, shovel):
        cart.add_line(shovel)
        line = cart.get_line("p-shovel")
        assert line.quantity == 1
        assert line.product.price == Decimal("10.000")
        assert line.variant_kind == "base"

    def test_repeat_add_increments(self, cart, shovel):
        cart.add_line(shovel)
        cart.add_line(shovel)
        assert len(cart) == 1
        assert cart.total_items() == 2

    def test_add_beyond_stock_is_capped(self, cart, shovel):
        for _ in range(5):
            cart.add_line(shovel)
        assert cart.line_quantity("p-shovel") == 2
        assert cart.total_price() == Decimal("20.000")

    def test_out_of_stock_not_added(self, cart, out_of_stock_product):
        cart.add_line(out_of_stock_product)
        assert cart.is_empty()

    def test_size_line(self, cart, cable_product):
        cart.add_line(cable_product, resolve(cable_product, size_id="sz-2"))
        line = cart.get_line("p-cable-size-sz-2")
        assert line.product.name == "Copper Cable - 2.5mm"
        assert line.product.price == Decimal("4.200")
        assert line.product.stock == 5
        assert line.product.unit_type == "m"
        assert line.variant_kind == "size"
        assert line.variant_id == "sz-2"

    def test_pack_line(self, cart, cable_product):
        cart.add_line(cable_product, resolve(cable_product, size_id="sz-2", pack_id="pk-roll"))
        line = cart.get_line("p-cable-pack-pk-roll")
        assert line.pack_quantity == 100
        assert line.product.stock == 3

    def test_variants_are_separate_lines(self, cart, cable_product):
        cart.add_line(cable_product)
        cart.add_line(cable_product, resolve(cable_product, size_id="sz-1"))
        cart.add_line(cable_product, resolve(cable_product, size_id="sz-2"))
        assert [line.line_key for line in cart.lines] == [
            "p-cable", "p-cable-size-sz-1", "p-cable-size-sz-2",
        ]
        assert cart.quantity_for("p-cable") == 3

    def test_price_captured_at_add_time(self, cart, shovel):
        cart.add_line(shovel)
        # A later catalog price change does not touch the existing line
        cheaper = Product(id=shovel.id, name=shovel.name,
                          base_price=Decimal("5.000"), stock_quantity=2)
        cart.add_line(cheaper)
        assert cart.get_line("p-shovel").product.price == Decimal("10.000")

    def test_increment_uses_current_stock(self, cart, shovel):
        cart.add_line(shovel)
        cart.add_line(shovel)
        restocked = Product(id=shovel.id, name=shovel.name,
                            base_price=Decimal("12.000"), stock_quantity=5)
        cart.add_line(restocked)
        line = cart.get_line("p-shovel")
        assert line.quantity == 3
        assert line.product.stock == 5
        assert line.product.price == Decimal("10.000")

    def test_increment_stops_at_lowered_stock(self, cart, cable_product):
        selection = resolve(cable_product, size_id="sz-1")
        for _ in range(3):
            cart.add_line(cable_product, selection)
        low = Product(id="p-cable", name="Copper Cable", base_price=Decimal("3.500"),
                      stock_quantity=50, size_table=(SizeOption(id="sz-1", size="1.5mm",
                                                     price=Decimal("2.800"), stock_quantity=3),))
        cart.add_line(low, resolve(low, size_id="sz-1"))
        assert cart.line_quantity("p-cable-size-sz-1") == 3


class TestUpdateQuantity:
    def test_set_quantity(self, cart, cable_product):
        cart.add_line(cable_product)
        cart.update_quantity("p-cable", 12)
        assert cart.line_quantity("p-cable") == 12

    def test_clamped_to_stock(self, cart, shovel):
        cart.add_line(shovel)
        cart.update_quantity("p-shovel", 99)
        assert cart.line_quantity("p-shovel") == 2

    def test_zero_removes(self, cart, shovel):
        cart.add_line(shovel)
        cart.update_quantity("p-shovel", 0)
        assert cart.get_line("p-shovel") is None

    def test_negative_removes(self, cart, shovel):
        cart.add_line(shovel)
        cart.update_quantity("p-shovel", -1)
        assert cart.is_empty()

    def test_unknown_key_ignored(self, cart):
        cart.update_quantity("nope", 3)
        assert cart.is_empty()


class TestRemoveAndClear:
    def test_remove_line(self, cart, shovel, cable_product):
        cart.add_line(shovel)
        cart.add_line(cable_product)
        cart.remove_line("p-shovel")
        assert [line.line_key for line in cart.lines] == ["p-cable"]

    def test_remove_missing_is_noop(self, cart, shovel):
        cart.add_line(shovel)
        listener = MagicMock()
        cart.subscribe(listener)
        cart.remove_line("nope")
        listener.assert_not_called()

    def test_clear(self, cart, shovel):
        cart.add_line(shovel)
        cart.clear()
        assert cart.is_empty()
        assert cart.total_price() == Decimal("0.000")


class TestTotals:
    def test_totals(self, cart, shovel, cable_product):
        cart.add_line(shovel)
        cart.add_line(shovel)
        cart.add_line(cable_product, resolve(cable_product, size_id="sz-2"))
        assert cart.total_items() == 3
        assert cart.total_price() == Decimal("24.200")

    def test_lines_is_copy(self, cart, shovel):
        cart.add_line(shovel)
        cart.lines.clear()
        assert len(cart) == 1


class TestSubscribers:
    def test_notified_on_change(self, cart, shovel):
        listener = MagicMock()
        cart.subscribe(listener)
        cart.add_line(shovel)
        listener.assert_called_once_with(cart)

    def test_not_notified_at_stock_ceiling(self, cart, shovel):
        cart.add_line(shovel)
        cart.add_line(shovel)
        listener = MagicMock()
        cart.subscribe(listener)
        cart.add_line(shovel)
        listener.assert_not_called()

    def test_unsubscribe(self, cart, shovel):
        listener = MagicMock()
        unsubscribe = cart.subscribe(listener)
        unsubscribe()
        unsubscribe()
        cart.add_line(shovel)
        listener.assert_not_called()


class TestPersistence:
    def test_saved_on_change(self, memory_store, shovel):
        cart = CartStore(memory_store)
        cart.add_line(shovel)
        stored = json.loads(memory_store.data[CART_STORAGE_KEY])
        assert stored[0]["lineKey"] == "p-shovel"
        assert stored[0]["product"]["price"] == "10.000"

    def test_rehydrated(self, memory_store, cable_product):
        cart = CartStore(memory_store)
        cart.add_line(cable_product, resolve(cable_product, size_id="sz-2", pack_id="pk-roll"))
        cart.add_line(cable_product, resolve(cable_product, size_id="sz-2", pack_id="pk-roll"))

        restored = CartStore(memory_store)
        line = restored.get_line("p-cable-pack-pk-roll")
        assert line.quantity == 2
        assert line.product.price == Decimal("380.000")
        assert line.variant_kind == "pack"
        assert line.pack_quantity == 100

    def test_corrupt_json_gives_empty_cart(self):
        cart = CartStore(MemoryStore({CART_STORAGE_KEY: "[{\"lineKey\": "}))
        assert cart.is_empty()

    def test_wrong_shape_gives_empty_cart(self):
        cart = CartStore(MemoryStore({CART_STORAGE_KEY: json.dumps({"items": []})}))
        assert cart.is_empty()

    def test_malformed_line_gives_empty_cart(self):
        stored = [{"lineKey": "p-1", "quantity": 1, "product": {"id": "p-1"}}]
        cart = CartStore(MemoryStore({CART_STORAGE_KEY: json.dumps(stored)}))
        assert cart.is_empty()

    def test_stored_quantity_clamped_to_stock(self):
        stored = [{
            "lineKey": "p-1",
            "quantity": 9,
            "product": {"id": "p-1", "name": "Nail", "price": "0.2", "stock": 4},
        }]
        cart = CartStore(MemoryStore({CART_STORAGE_KEY: json.dumps(stored)}))
        assert cart.line_quantity("p-1") == 4
        assert cart.get_line("p-1").product.price == Decimal("0.200")

    def test_duplicate_stored_keys_merged(self):
        line = {
            "lineKey": "p-1",
            "quantity": 2,
            "product": {"id": "p-1", "name": "Nail", "price": "0.2", "stock": 5},
        }
        other = dict(line, quantity=4, product=dict(line["product"], price="0.3"))
        cart = CartStore(MemoryStore({CART_STORAGE_KEY: json.dumps([line, other])}))
        assert len(cart) == 1
        assert cart.line_quantity("p-1") == 5
        assert cart.get_line("p-1").product.price == Decimal("0.200")

        cart.remove_line("p-1")
        assert cart.is_empty()

    def test_write_failure_keeps_memory_state(self, shovel):
        storage = MagicMock()
        storage.get.return_value = None
        storage.set.side_effect = OSError("disk full")
        cart = CartStore(storage)
        cart.add_line(shovel)
        assert cart.line_quantity("p-shovel") == 1


class TestCartLine:
    def test_from_dict_rejects_zero_quantity(self):
        with pytest.raises(ValueError):
            CartLine.from_dict({
                "lineKey": "p-1",
                "quantity": 0,
                "product": {"id": "p-1", "name": "Nail", "price": "1", "stock": 4},
            })

    def test_line_total(self, memory_store, cable_product):
        cart = CartStore(memory_store)
        cart.add_line(cable_product, resolve(cable_product, size_id="sz-1"))
        cart.update_quantity("p-cable-size-sz-1", 3)
        assert cart.get_line("p-cable-size-sz-1").line_total == Decimal("8.400")
