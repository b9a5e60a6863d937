"""Tests for storefront/navigation/store.py"""

from unittest.mock import MagicMock

from storefront.navigation import (
    GoHome,
    NavigationStore,
    OpenBasket,
    Screen,
    ScreenState,
    SelectCategory,
)


class TestNavigationStore:
    def test_starts_on_login(self):
        assert NavigationStore().state.screen == Screen.LOGIN

    def test_custom_initial_state(self):
        store = NavigationStore(ScreenState(screen=Screen.HOME))
        assert store.state.screen == Screen.HOME

    def test_dispatch_updates_state(self, tools_category):
        store = NavigationStore()
        new = store.dispatch(SelectCategory(tools_category))
        assert store.state is new
        assert new.screen == Screen.SUBCATEGORY_LIST

    def test_listener_gets_old_and_new(self):
        store = NavigationStore()
        listener = MagicMock()
        store.subscribe(listener)
        old = store.state
        new = store.dispatch(GoHome())
        listener.assert_called_once_with(old, new)

    def test_unchanged_state_not_broadcast(self):
        store = NavigationStore(ScreenState(screen=Screen.HOME))
        listener = MagicMock()
        store.subscribe(listener)
        store.dispatch(GoHome())
        listener.assert_not_called()

    def test_unsubscribe(self):
        store = NavigationStore()
        listener = MagicMock()
        unsubscribe = store.subscribe(listener)
        unsubscribe()
        store.dispatch(OpenBasket())
        listener.assert_not_called()

    def test_title_follows_state(self, paint_category):
        store = NavigationStore()
        assert store.title == "Customer Login"
        store.dispatch(SelectCategory(paint_category))
        assert store.title == "Paint"
