"""
Storefront Application

Top-level object wiring the cart, navigation, auth session, API client
and checkout together. Screens read view data from here; user actions
call the methods below.

Data loading follows navigation: after each dispatched event the app
loads what the new screen needs. A response is committed only if the
screen still shows the id it was requested for, so a late response never
overwrites a newer screen. Failed loads set `load_error`; retry() repeats
the last load.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from .auth import AuthError, AuthSession
from .cart import CartStore
from .catalog import StorefrontAPIClient, VariantPicker
from .checkout import CheckoutOutcome, CheckoutService
from .common.config_loader import StoreSettings
from .models import Category, OrderSummary, Product, SubmissionResult
from .navigation import (
    Back,
    GoHome,
    LoginSucceeded,
    NavigationStore,
    OpenAccount,
    OpenBasket,
    OpenCheckout,
    OrderCompleted,
    Screen,
    ScreenState,
    SelectCategory,
    SelectProduct,
    SelectSubcategory,
    ShowLogin,
    back as back_target,
    screen_title,
)
from .storage import KeyValueStore

logger = logging.getLogger(__name__)


@dataclass
class ViewData:
    """Data loaded for the current screen."""
    categories: List[Category] = field(default_factory=list)
    subcategories: List[Category] = field(default_factory=list)
    products: List[Product] = field(default_factory=list)
    product: Optional[Product] = None
    picker: Optional[VariantPicker] = None
    confirmation: Optional[SubmissionResult] = None
    checkout_error: Optional[str] = None
    orders: List[OrderSummary] = field(default_factory=list)
    quotations: List[OrderSummary] = field(default_factory=list)


class StorefrontApp:
    """
    Storefront application shell.

    Usage:
        app = StorefrontApp(client, storage, settings)
        app.start()
        app.login({"email": "a@b.tn", "password": "..."})
        app.select_category("cat-1")
        app.select_product("p-1")
        app.add_to_cart()
        app.open_checkout()
        app.place_order("cash")
    """

    def __init__(
        self,
        client: StorefrontAPIClient,
        storage: KeyValueStore,
        settings: StoreSettings,
    ):
        self.client = client
        self.settings = settings
        self.cart = CartStore(storage)
        self.session = AuthSession(client, storage)
        self.navigation = NavigationStore()
        self.checkout = CheckoutService(self.cart, self.session, client, settings)

        self.view = ViewData()
        self.all_categories: List[Category] = []
        self.load_error: Optional[str] = None
        self._last_load: Optional[Callable[[], None]] = None

        self.navigation.subscribe(self._on_navigate)

    # ── Lifecycle ────────────────────────────────────────────────────────────

    def start(self) -> ScreenState:
        """Restore the session, load categories and show home (or login)."""
        if self.session.restore():
            self.navigation.dispatch(GoHome())
        else:
            self.navigation.dispatch(ShowLogin())
        return self.state

    @property
    def state(self) -> ScreenState:
        return self.navigation.state

    @property
    def title(self) -> str:
        return screen_title(self.state, self.settings.store_name)

    @property
    def show_back(self) -> bool:
        return self.state.screen not in (Screen.HOME, Screen.LOGIN)

    def dispatch(self, event) -> ScreenState:
        """Dispatch a navigation event, redirecting to login when signed out."""
        if not self.session.is_authenticated and not isinstance(event, ShowLogin):
            return self.navigation.dispatch(ShowLogin())
        return self.navigation.dispatch(event)

    # ── Data loading ─────────────────────────────────────────────────────────

    def _load(self, loader: Callable[[], None]) -> None:
        self._last_load = loader
        self.load_error = None
        loader()

    def retry(self) -> None:
        """Repeat the last failed (or last) data load."""
        if self._last_load is not None:
            self._load(self._last_load)

    def _fail(self, what: str) -> None:
        detail = self.client.last_error
        self.load_error = f"Failed to load {what}" + (f": {detail}" if detail else "")
        logger.error("%s", self.load_error)

    def _is_current(self, screen: Screen, attr: str, requested_id: Optional[str]) -> bool:
        state = self.state
        return state.screen == screen and getattr(state, attr) == requested_id

    def _load_all_categories(self) -> None:
        categories = self.client.get_categories()
        if categories is None:
            self._fail("categories")
            return
        self.all_categories = categories
        self.view.categories = [c for c in categories if c.is_root]

    def _load_subcategories(self, category_id: str) -> None:
        subcategories = self.client.get_subcategories(category_id)
        if not self._is_current(Screen.SUBCATEGORY_LIST, "selected_category_id", category_id):
            logger.debug("Ignoring stale subcategories for %s", category_id)
            return
        if subcategories is None:
            self._fail("subcategories")
            return
        self.view.subcategories = subcategories

    def _load_products(self, category_id: str) -> None:
        page = self.client.get_products_by_category(category_id)
        if not self._is_current(Screen.CATEGORY_LIST, "selected_category_id", category_id):
            logger.debug("Ignoring stale product list for %s", category_id)
            return
        if page is None:
            self._fail("products")
            return
        self.view.products = page.products

    def _load_product(self, product_id: str) -> None:
        product = self.client.get_product(product_id)
        if not self._is_current(Screen.PRODUCT_DETAIL, "selected_product_id", product_id):
            logger.debug("Ignoring stale product %s", product_id)
            return
        if product is None:
            self._fail("product")
            return
        self.view.product = product
        self.view.picker = VariantPicker(product)

    def _load_account(self) -> None:
        # Quotations exist only for B2B customers
        customer = self.session.customer
        with_quotations = customer is not None and customer.is_b2b
        orders = self.client.get_my_orders()
        quotations = self.client.get_my_quotations() if with_quotations else []
        if self.state.screen != Screen.ACCOUNT:
            logger.debug("Ignoring stale account history")
            return
        if orders is None:
            self._fail("orders")
            return
        if quotations is None:
            self._fail("quotations")
            return
        self.view.orders = orders
        self.view.quotations = quotations

    def _on_navigate(self, old: ScreenState, new: ScreenState) -> None:
        self.load_error = None
        screen = new.screen

        if screen == Screen.HOME and not self.all_categories:
            self._load(self._load_all_categories)
        elif screen == Screen.SUBCATEGORY_LIST and new.selected_category_id:
            category_id = new.selected_category_id
            self.view.subcategories = []
            self._load(lambda: self._load_subcategories(category_id))
        elif screen == Screen.CATEGORY_LIST and new.selected_category_id:
            category_id = new.selected_category_id
            self.view.products = []
            self._load(lambda: self._load_products(category_id))
        elif screen == Screen.PRODUCT_DETAIL and new.selected_product_id:
            product_id = new.selected_product_id
            self.view.product = None
            self.view.picker = None
            self._load(lambda: self._load_product(product_id))
        elif screen == Screen.ACCOUNT:
            self.view.orders = []
            self.view.quotations = []
            self._load(self._load_account)

        if screen == Screen.CHECKOUT:
            self.view.checkout_error = None

    # ── Navigation actions ───────────────────────────────────────────────────

    def find_category(self, category_id: str) -> Optional[Category]:
        for category in self.all_categories + self.view.subcategories:
            if category.id == category_id:
                return category
        return None

    def select_category(self, category_id: str) -> ScreenState:
        category = self.find_category(category_id)
        if category is None:
            logger.warning("Unknown category %s", category_id)
            return self.state
        return self.dispatch(SelectCategory(category))

    def select_subcategory(self, subcategory: Category) -> ScreenState:
        return self.dispatch(SelectSubcategory(subcategory))

    def select_product(self, product_id: str) -> ScreenState:
        return self.dispatch(SelectProduct(product_id))

    def back(self) -> ScreenState:
        """Go back; a parent listing known only by id gets its Category when loaded."""
        target = back_target(self.state)
        if (
            self.session.is_authenticated
            and target.screen == Screen.SUBCATEGORY_LIST
            and target.current_category is None
            and target.selected_category_id
        ):
            parent = self.find_category(target.selected_category_id)
            if parent is not None and parent.has_subcategories:
                return self.dispatch(SelectCategory(parent))
        return self.dispatch(Back())

    def go_home(self) -> ScreenState:
        return self.dispatch(GoHome())

    def open_basket(self) -> ScreenState:
        return self.dispatch(OpenBasket())

    def open_checkout(self) -> ScreenState:
        return self.dispatch(OpenCheckout())

    def open_account(self) -> ScreenState:
        return self.dispatch(OpenAccount())

    def search_categories(self, query: str) -> List[Category]:
        """Root categories whose name or description contains query."""
        roots = [c for c in self.all_categories if c.is_root]
        query = query.strip().lower()
        if not query:
            return roots
        return [
            c for c in roots
            if query in c.name.lower() or query in c.description.lower()
        ]

    # ── Auth ─────────────────────────────────────────────────────────────────

    def login(self, credentials: Dict[str, str]) -> Optional[str]:
        """Sign in; returns an error message or None on success."""
        try:
            self.session.login(credentials)
        except AuthError as e:
            return str(e)
        self.navigation.dispatch(LoginSucceeded())
        return None

    def logout(self) -> ScreenState:
        self.session.logout()
        return self.navigation.dispatch(ShowLogin())

    # ── Cart & checkout ──────────────────────────────────────────────────────

    def add_to_cart(self) -> int:
        """Add the product-detail picker's selection; returns units added."""
        picker = self.view.picker
        if picker is None:
            return 0
        added = picker.add_to_cart(self.cart)
        picker.set_quantity(1)
        return added

    def available_stock(self) -> int:
        """Units of the picker's selection not yet in the cart."""
        picker = self.view.picker
        if picker is None:
            return 0
        selection = picker.selection
        in_cart = self.cart.line_quantity(selection.line_key(picker.product.id))
        return max(0, selection.stock - in_cart)

    def quick_add(self, product: Product) -> None:
        """Add one unit at base price from a product grid."""
        self.cart.add_line(product)

    def place_order(self, payment_method: str = "cash", notes: str = "") -> CheckoutOutcome:
        """
        Submit the cart. On failure the shopper stays on checkout with the
        error shown inline; on success the confirmation screen is shown.
        """
        outcome = self.checkout.submit(payment_method, notes)
        if not outcome.ok:
            self.view.checkout_error = outcome.error
            return outcome

        self.view.checkout_error = None
        self.view.confirmation = outcome.result
        self.navigation.dispatch(OrderCompleted())
        return outcome
