"""Tests for scripts/storefront_cli.py"""

from unittest.mock import MagicMock

import pytest

from scripts import storefront_cli as cli
from storefront.auth import AuthSession
from storefront.cart import CartStore
from storefront.catalog import ProductPage
from storefront.checkout import CheckoutService


@pytest.fixture
def client():
    c = MagicMock()
    c.last_error = None
    return c


@pytest.fixture
def cart(memory_store):
    return CartStore(memory_store)


@pytest.fixture
def service(cart, client, store_settings):
    return CheckoutService(cart, AuthSession(client, MagicMock()), client, store_settings)


class TestParser:
    def test_cart_add(self):
        args = cli.build_parser().parse_args(
            ["cart", "add", "p-cable", "--size", "sz-2", "--quantity", "3"]
        )
        assert args.command == "cart"
        assert args.cart_command == "add"
        assert args.product_id == "p-cable"
        assert args.size == "sz-2"
        assert args.pack is None
        assert args.quantity == 3

    def test_checkout_defaults(self):
        args = cli.build_parser().parse_args(["checkout"])
        assert args.payment == "cash"
        assert args.notes == ""

    def test_log_file_option(self):
        args = cli.build_parser().parse_args(["--log-file", "/tmp/sf.log", "categories"])
        assert args.log_file == "/tmp/sf.log"

    def test_unknown_payment_rejected(self):
        with pytest.raises(SystemExit):
            cli.build_parser().parse_args(["checkout", "--payment", "cheque"])


class TestCartCommand:
    def test_add_limited_by_stock(self, client, cart, service, shovel, capsys):
        client.get_product.return_value = shovel
        args = cli.build_parser().parse_args(["cart", "add", "p-shovel", "--quantity", "5"])

        assert cli.cmd_cart(args, client, cart, service) == 0

        out = capsys.readouterr().out
        assert "Added 2 (limited by stock)." in out
        assert "20.000 TND" in out
        assert cart.line_quantity("p-shovel") == 2

    def test_add_unknown_product(self, client, cart, service, capsys):
        client.get_product.return_value = None
        client.last_error = "API request failed: 404"
        args = cli.build_parser().parse_args(["cart", "add", "p-gone"])

        assert cli.cmd_cart(args, client, cart, service) == 1
        assert "Failed to load product: API request failed: 404" in capsys.readouterr().out

    def test_set_and_clear(self, client, cart, service, shovel, capsys):
        cart.add_line(shovel)
        cli.cmd_cart(cli.build_parser().parse_args(["cart", "set", "p-shovel", "2"]),
                     client, cart, service)
        assert cart.line_quantity("p-shovel") == 2

        cli.cmd_cart(cli.build_parser().parse_args(["cart", "clear"]), client, cart, service)
        assert "Your basket is empty." in capsys.readouterr().out


class TestProductsCommand:
    def test_shows_units_in_cart(self, client, cart, shovel, capsys):
        client.get_products_by_category.return_value = ProductPage([shovel], 1, 1)
        cart.add_line(shovel)
        args = cli.build_parser().parse_args(["products", "c-tools"])

        assert cli.cmd_products(args, client, cart) == 0
        assert "(1 in cart)" in capsys.readouterr().out
