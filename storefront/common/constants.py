"""
Shared constants for the storefront.

Single source of truth for storage keys, customer types and statuses.
"""

# Durable storage keys
CART_STORAGE_KEY = "hardware-store-cart"
TOKEN_STORAGE_KEY = "customer_token"
USER_STORAGE_KEY = "customer_user"
REFRESH_TOKEN_STORAGE_KEY = "customer_refresh_token"

# Customer types and roles
CUSTOMER_TYPE_B2B = "B2B"
CUSTOMER_TYPE_B2C = "B2C"
CUSTOMER_ROLE = "CUSTOMER"

# Submission statuses assumed when the server omits one
ORDER_DEFAULT_STATUS = "PENDING"
QUOTATION_DRAFT_STATUS = "DRAFT"
QUOTATION_PENDING_STATUS = "PENDING_APPROVAL"

# Display fallbacks
DEFAULT_UNIT_TYPE = "piece"
DEFAULT_BRAND = "Generic"
PLACEHOLDER_PRODUCT_IMAGE = "/placeholder-product.jpg"
PLACEHOLDER_CATEGORY_IMAGE = "/placeholder-category.jpg"
