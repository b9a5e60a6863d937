"""
Navigation state and events.

ScreenState is immutable: every navigation produces a new state, so a
breadcrumb field can only survive a transition when the transition
explicitly keeps it.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional

from ..models import Category


class Screen(str, Enum):
    HOME = "home"
    CATEGORY_LIST = "categoryList"          # product grid of one category
    SUBCATEGORY_LIST = "subcategoryList"
    PRODUCT_DETAIL = "productDetail"
    BASKET = "basket"
    CHECKOUT = "checkout"
    CONFIRMATION = "confirmation"
    LOGIN = "login"
    ACCOUNT = "account"


@dataclass(frozen=True)
class ScreenState:
    """
    Current screen plus breadcrumb context.

    parent_category is only set when current_category was reached through
    a subcategory listing.
    """
    screen: Screen = Screen.LOGIN
    selected_category_id: Optional[str] = None
    selected_subcategory_id: Optional[str] = None
    selected_product_id: Optional[str] = None
    current_category: Optional[Category] = None
    parent_category: Optional[Category] = None

    def with_screen(self, screen: Screen) -> "ScreenState":
        """Forward move inside the same branch: keep every breadcrumb field."""
        return replace(self, screen=screen)


# ── Events ───────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class SelectCategory:
    category: Category


@dataclass(frozen=True)
class SelectSubcategory:
    subcategory: Category


@dataclass(frozen=True)
class SelectProduct:
    product_id: str


@dataclass(frozen=True)
class Back:
    pass


@dataclass(frozen=True)
class GoHome:
    pass


@dataclass(frozen=True)
class OpenBasket:
    pass


@dataclass(frozen=True)
class OpenCheckout:
    pass


@dataclass(frozen=True)
class OpenAccount:
    pass


@dataclass(frozen=True)
class ShowLogin:
    pass


@dataclass(frozen=True)
class LoginSucceeded:
    pass


@dataclass(frozen=True)
class OrderCompleted:
    pass
