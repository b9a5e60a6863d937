"""
Catalog access and variant pricing.

Modules:
    api_client - REST client for the storefront backend
    variants   - Base/size/pack price resolution and quantity picker
"""

from .api_client import ProductPage, StorefrontAPIClient
from .variants import (
    BaseSelection,
    PackSelection,
    SizeSelection,
    VariantPicker,
    VariantSelection,
    clamp_quantity,
    resolve,
)

__all__ = [
    # API Client
    'ProductPage',
    'StorefrontAPIClient',
    # Variants
    'BaseSelection',
    'PackSelection',
    'SizeSelection',
    'VariantPicker',
    'VariantSelection',
    'clamp_quantity',
    'resolve',
]
