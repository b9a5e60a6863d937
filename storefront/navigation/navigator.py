"""
Navigator

Pure transition function over ScreenState. Back navigation is recomputed
from the current state alone (no history stack): the breadcrumb fields
decide whether "up" means a subcategory listing or home.
"""

from dataclasses import replace
from typing import Optional

from ..models import Category
from .state import (
    Back,
    GoHome,
    LoginSucceeded,
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
)

HOME = ScreenState(screen=Screen.HOME)


def _subcategory_list(category: Category) -> ScreenState:
    return ScreenState(
        screen=Screen.SUBCATEGORY_LIST,
        selected_category_id=category.id,
        current_category=category,
    )


def _up_from_category(state: ScreenState) -> Optional[ScreenState]:
    """Listing one level above a category listing, or None at the top."""
    current = state.current_category
    if state.parent_category is not None:
        return _subcategory_list(state.parent_category)
    if current is not None and current.has_subcategories:
        return _subcategory_list(current)
    return None


def _up_from_product(state: ScreenState) -> Optional[ScreenState]:
    current = state.current_category
    if state.parent_category is None and current is not None and current.parent_id:
        # Parent known only by id; the app resolves it when it can
        return ScreenState(
            screen=Screen.SUBCATEGORY_LIST,
            selected_category_id=current.parent_id,
        )
    return _up_from_category(state)


def back(state: ScreenState) -> ScreenState:
    """Resolve the target of the Back action (first matching rule wins)."""
    screen = state.screen

    if screen == Screen.PRODUCT_DETAIL:
        if state.selected_subcategory_id and state.parent_category is not None:
            return _subcategory_list(state.parent_category)
        return _up_from_product(state) or HOME

    if screen == Screen.CATEGORY_LIST:
        return _up_from_category(state) or HOME

    if screen == Screen.CHECKOUT:
        return state.with_screen(Screen.BASKET)

    if screen == Screen.LOGIN:
        # Entry point, nothing to go back to
        return state

    # subcategoryList, basket, confirmation, account, home
    return HOME


def navigate(event, state: ScreenState) -> ScreenState:
    """
    Apply a navigation event to state and return the new state.

    Raises:
        TypeError: If event is not a navigation event
    """
    if isinstance(event, SelectCategory):
        category = event.category
        screen = Screen.SUBCATEGORY_LIST if category.has_subcategories else Screen.CATEGORY_LIST
        return ScreenState(
            screen=screen,
            selected_category_id=category.id,
            current_category=category,
        )

    if isinstance(event, SelectSubcategory):
        sub = event.subcategory
        return ScreenState(
            screen=Screen.CATEGORY_LIST,
            selected_category_id=sub.id,
            selected_subcategory_id=sub.id,
            current_category=sub,
            parent_category=state.current_category,
        )

    if isinstance(event, SelectProduct):
        return replace(state, screen=Screen.PRODUCT_DETAIL, selected_product_id=event.product_id)

    if isinstance(event, Back):
        return back(state)

    if isinstance(event, OpenBasket):
        return state.with_screen(Screen.BASKET)

    if isinstance(event, OpenCheckout):
        return state.with_screen(Screen.CHECKOUT)

    if isinstance(event, OpenAccount):
        return state.with_screen(Screen.ACCOUNT)

    if isinstance(event, OrderCompleted):
        return state.with_screen(Screen.CONFIRMATION)

    if isinstance(event, (GoHome, LoginSucceeded)):
        return HOME

    if isinstance(event, ShowLogin):
        return ScreenState(screen=Screen.LOGIN)

    raise TypeError(f"Unknown navigation event: {event!r}")


def screen_title(state: ScreenState, store_name: str = "Hardware Store") -> str:
    """Header title for a state. Derived on every call, never cached."""
    fixed = {
        Screen.BASKET: "Shopping Basket",
        Screen.CHECKOUT: "Checkout",
        Screen.CONFIRMATION: "Order Confirmed",
        Screen.LOGIN: "Customer Login",
        Screen.ACCOUNT: "My Account",
    }
    if state.screen in fixed:
        return fixed[state.screen]

    current = state.current_category
    if state.screen == Screen.SUBCATEGORY_LIST and current is not None:
        return f"{current.name} - Subcategories"

    if state.screen == Screen.CATEGORY_LIST and current is not None:
        if state.parent_category is not None:
            return f"{state.parent_category.name} > {current.name}"
        return current.name

    if state.screen == Screen.PRODUCT_DETAIL and state.selected_product_id:
        return "Product Details"

    return store_name
