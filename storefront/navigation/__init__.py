"""
Screen navigation.

Modules:
    state     - ScreenState, Screen and navigation events
    navigator - Pure navigate()/back() transitions and title derivation
    store     - NavigationStore (dispatch + subscribers)
"""

from .navigator import back, navigate, screen_title
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
from .store import NavigationStore

__all__ = [
    'Back',
    'GoHome',
    'LoginSucceeded',
    'NavigationStore',
    'OpenAccount',
    'OpenBasket',
    'OpenCheckout',
    'OrderCompleted',
    'Screen',
    'ScreenState',
    'SelectCategory',
    'SelectProduct',
    'SelectSubcategory',
    'ShowLogin',
    'back',
    'navigate',
    'screen_title',
]
