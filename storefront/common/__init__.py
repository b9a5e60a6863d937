# Common utilities
from .config_loader import (
    APISettings,
    StoreSettings,
    load_api_settings,
    load_config,
    load_store_settings,
)
from .currency import format_amount, format_price, to_money
from .log_config import setup_logging
