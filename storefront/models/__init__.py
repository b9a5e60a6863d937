"""
Data models for the storefront.

Typed records at the API boundary, with explicit transforms from payloads.
"""

from .catalog import (
    CatalogRecordError,
    Category,
    PackOption,
    Product,
    SizeOption,
    categories_from_api,
    category_from_api,
    product_from_api,
    products_from_api,
)
from .customer import Customer, OrderSummary, SubmissionResult, summaries_from_api

__all__ = [
    'CatalogRecordError',
    'Category',
    'Customer',
    'OrderSummary',
    'PackOption',
    'Product',
    'SizeOption',
    'SubmissionResult',
    'categories_from_api',
    'category_from_api',
    'product_from_api',
    'products_from_api',
    'summaries_from_api',
]
