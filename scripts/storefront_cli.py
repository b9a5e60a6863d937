#!/usr/bin/env python3
"""
Storefront CLI

Browse the catalog, manage a local cart and check out against the
storefront backend. The cart and session live in a JSON data directory
so they survive between runs.

Usage:
    # Sign in (stores the session token)
    python3 scripts/storefront_cli.py login --email buyer@example.tn

    # Browse
    python3 scripts/storefront_cli.py categories
    python3 scripts/storefront_cli.py product <product-id> --size <size-id>

    # Cart
    python3 scripts/storefront_cli.py cart add <product-id> --pack <pack-id> --quantity 3
    python3 scripts/storefront_cli.py cart show
    python3 scripts/storefront_cli.py cart remove <line-key>

    # Checkout (order for B2C, quotation for B2B)
    python3 scripts/storefront_cli.py checkout --payment cash

Environment (.env supported):
    STOREFRONT_API_URL   Backend API root (default from config/api.yaml)
    STOREFRONT_DATA_DIR  Cart/session directory (default: ~/.storefront)
    STOREFRONT_LOG_FILE  Optional log file (same as --log-file)
"""

import argparse
import getpass
import logging
import os
import sys

from dotenv import load_dotenv

# Add project root to path for proper package imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from storefront.auth import AuthError, AuthSession
from storefront.cart import CartStore
from storefront.catalog import StorefrontAPIClient, VariantPicker
from storefront.checkout import CheckoutService
from storefront.common.config_loader import load_api_settings, load_store_settings
from storefront.common.currency import format_price
from storefront.common.log_config import setup_logging
from storefront.storage import JsonFileStore

load_dotenv()

logger = logging.getLogger(__name__)


def print_cart(cart: CartStore, service: CheckoutService) -> None:
    if cart.is_empty():
        print("Your basket is empty.")
        return

    for line in cart.lines:
        print(f"  {line.line_key:<40} {line.product.name[:40]:<40} "
              f"x{line.quantity:<3} {format_price(line.line_total):>16}")

    totals = service.totals()
    rate = service.settings.tax_rate * 100
    print("-" * 104)
    print(f"  Items:     {cart.total_items()}")
    print(f"  Subtotal:  {format_price(totals.subtotal)}")
    print(f"  Tax ({rate:.0f}%): {format_price(totals.tax)}")
    print(f"  Delivery:  {'Free' if not totals.delivery else format_price(totals.delivery)}")
    print(f"  Total:     {format_price(totals.total)}")


def cmd_login(args, session: AuthSession) -> int:
    password = args.password or getpass.getpass("Password: ")
    try:
        customer = session.login({"email": args.email, "password": password})
    except AuthError as e:
        print(f"ERROR: {e}")
        return 1
    print(f"Signed in as {customer.display_name} ({customer.customer_type})")
    return 0


def cmd_categories(client: StorefrontAPIClient) -> int:
    categories = client.get_categories(root_only=True)
    if categories is None:
        print(f"ERROR: Failed to load categories: {client.last_error}")
        return 1
    for category in categories:
        subs = f"  [{len(category.subcategories)} subcategories]" if category.has_subcategories else ""
        print(f"  {category.id:<36} {category.name}{subs}")
    return 0


def cmd_products(args, client: StorefrontAPIClient, cart: CartStore) -> int:
    page = client.get_products_by_category(args.category_id, page=args.page)
    if page is None:
        print(f"ERROR: Failed to load products: {client.last_error}")
        return 1
    for product in page.products:
        in_cart = cart.quantity_for(product.id)
        badge = f"  ({in_cart} in cart)" if in_cart else ""
        print(f"  {product.id:<36} {product.name[:50]:<50} "
              f"{format_price(product.base_price):>14}  stock {product.stock_quantity}{badge}")
    print(f"\nPage {args.page}/{page.total_pages} ({page.total_products} products)")
    return 0


def cmd_product(args, client: StorefrontAPIClient) -> int:
    product = client.get_product(args.product_id)
    if product is None:
        print(f"ERROR: Failed to load product: {client.last_error}")
        return 1

    picker = VariantPicker(product, size_id=args.size, pack_id=args.pack)
    selection = picker.selection

    print(f"{product.name}  ({product.brand}, SKU {product.sku or 'N/A'})")
    print(f"  Price:  {format_price(selection.price)} per {getattr(selection, 'unit_type', product.unit_type)}")
    print(f"  Stock:  {selection.stock}  [{selection.kind}]")
    for size in product.size_table:
        print(f"  size  {size.id:<20} {size.size:<12} {format_price(size.price):>14}  stock {size.stock_quantity}")
    for pack in product.pack_sizes:
        scope = f" ({pack.size})" if pack.size else ""
        print(f"  pack  {pack.id:<20} {pack.pack_type}{scope:<12} {format_price(pack.price):>14}  "
              f"stock {pack.stock_quantity}")
    return 0


def cmd_cart(args, client: StorefrontAPIClient, cart: CartStore, service: CheckoutService) -> int:
    if args.cart_command == "add":
        product = client.get_product(args.product_id)
        if product is None:
            print(f"ERROR: Failed to load product: {client.last_error}")
            return 1
        picker = VariantPicker(product, size_id=args.size, pack_id=args.pack)
        picker.set_quantity(args.quantity)
        added = picker.add_to_cart(cart)
        if added == 0:
            print("Nothing added (out of stock or already at the stock limit).")
        elif added < args.quantity:
            print(f"Added {added} (limited by stock).")
        else:
            print(f"Added {added}.")
    elif args.cart_command == "remove":
        cart.remove_line(args.line_key)
    elif args.cart_command == "set":
        cart.update_quantity(args.line_key, args.quantity)
    elif args.cart_command == "clear":
        cart.clear()

    print_cart(cart, service)
    return 0


def cmd_checkout(args, service: CheckoutService) -> int:
    print_cart(service.cart, service)
    credit = service.check_credit()
    if credit.exceeded:
        print(f"\nWARNING: {credit.message}")

    outcome = service.submit(payment_method=args.payment, notes=args.notes)
    if not outcome.ok:
        print(f"\nERROR: {outcome.error}")
        return 1

    result = outcome.result
    print(f"\n{result.kind.capitalize()} #{result.number}")
    print(f"  Status: {result.status}")
    print(f"  Total:  {format_price(result.total)}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Hardware store storefront CLI")
    parser.add_argument("--data-dir", default=os.environ.get("STOREFRONT_DATA_DIR", "~/.storefront"),
                        help="Directory for cart and session files")
    parser.add_argument("--verbose", action="store_true")
    parser.add_argument("--quiet", action="store_true")
    parser.add_argument("--log-file", default=os.environ.get("STOREFRONT_LOG_FILE"),
                        help="Also write a timestamped log to this file")
    sub = parser.add_subparsers(dest="command", required=True)

    login = sub.add_parser("login", help="Sign in as a customer")
    login.add_argument("--email", required=True)
    login.add_argument("--password", help="Prompted when omitted")

    sub.add_parser("logout", help="Sign out")
    sub.add_parser("categories", help="List root categories")

    products = sub.add_parser("products", help="List products in a category")
    products.add_argument("category_id")
    products.add_argument("--page", type=int, default=1)

    product = sub.add_parser("product", help="Show a product and resolve its variant price")
    product.add_argument("product_id")
    product.add_argument("--size")
    product.add_argument("--pack")

    cart = sub.add_parser("cart", help="Manage the local cart")
    cart_sub = cart.add_subparsers(dest="cart_command", required=True)
    cart_sub.add_parser("show")
    cart_sub.add_parser("clear")
    add = cart_sub.add_parser("add")
    add.add_argument("product_id")
    add.add_argument("--size")
    add.add_argument("--pack")
    add.add_argument("--quantity", type=int, default=1)
    remove = cart_sub.add_parser("remove")
    remove.add_argument("line_key")
    set_qty = cart_sub.add_parser("set")
    set_qty.add_argument("line_key")
    set_qty.add_argument("quantity", type=int)

    checkout = sub.add_parser("checkout", help="Submit the cart")
    checkout.add_argument("--payment", choices=["cash", "card"], default="cash")
    checkout.add_argument("--notes", default="")

    return parser


def main() -> int:
    args = build_parser().parse_args()
    setup_logging(verbose=args.verbose, quiet=args.quiet, log_file=args.log_file)

    api_settings = load_api_settings()
    store_settings = load_store_settings()
    storage = JsonFileStore(args.data_dir)

    with StorefrontAPIClient(api_settings.base_url, timeout=api_settings.timeout) as client:
        session = AuthSession(client, storage)
        cart = CartStore(storage)
        service = CheckoutService(cart, session, client, store_settings)

        if args.command == "login":
            return cmd_login(args, session)

        if args.command in ("logout", "checkout") and not session.restore():
            print("ERROR: Not signed in. Run the 'login' command first.")
            return 1

        if args.command == "logout":
            session.logout()
            print("Signed out.")
            return 0
        if args.command == "categories":
            return cmd_categories(client)
        if args.command == "products":
            return cmd_products(args, client, cart)
        if args.command == "product":
            return cmd_product(args, client)
        if args.command == "cart":
            return cmd_cart(args, client, cart, service)
        if args.command == "checkout":
            return cmd_checkout(args, service)

    return 1


if __name__ == "__main__":
    sys.exit(main())
