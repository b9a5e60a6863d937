"""Shopping cart aggregate."""

from .cart_store import CartLine, CartStore, ProductRef

__all__ = ['CartLine', 'CartStore', 'ProductRef']
