"""
Hardware Store Storefront

Modules:
    models      - Catalog and customer records (with API payload transforms)
    common      - Shared utilities (config loader, currency, logging)
    storage     - Durable key-value storage for cart and session
    catalog     - Backend API client and variant price resolution
    cart        - Cart aggregate with stock ceilings and persistence
    navigation  - Screen state machine with breadcrumb-aware back navigation
    auth        - Customer session
    checkout    - Totals, credit checks, order/quotation submission
    app         - Application shell wiring everything together
"""
