"""
Configuration Loader

Loads YAML configuration files for store settings (currency, tax,
delivery) and backend API settings.
"""

import os
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Any, Dict

import yaml


@dataclass(frozen=True)
class StoreSettings:
    """Commercial settings shared by basket and checkout."""
    store_name: str = "Hardware Store"
    currency: str = "TND"
    decimals: int = 3
    tax_rate: Decimal = Decimal("0.19")
    delivery_fee: Decimal = Decimal("7.990")
    free_delivery_threshold: Decimal = Decimal("100.000")
    payment_methods: Dict[str, str] = field(default_factory=lambda: {
        "cash": "CASH_ON_DELIVERY",
        "card": "CREDIT_CARD",
    })


@dataclass(frozen=True)
class APISettings:
    """Backend API connection settings."""
    base_url: str = "http://localhost:3001/api"
    timeout: int = 30


def _get_config_dir() -> Path:
    """Get the config directory path."""
    # Try relative to this file first
    module_dir = Path(__file__).parent.parent.parent
    config_dir = module_dir / 'config'

    if config_dir.exists():
        return config_dir

    # Try current working directory
    cwd_config = Path.cwd() / 'config'
    if cwd_config.exists():
        return cwd_config

    raise FileNotFoundError(
        f"Config directory not found. Tried: {config_dir}, {cwd_config}"
    )


def load_config(filename: str) -> Dict[str, Any]:
    """
    Load a YAML configuration file.

    Args:
        filename: Name of the config file (e.g., 'store.yaml')

    Returns:
        Parsed YAML content as dictionary (empty dict for an empty file)

    Raises:
        FileNotFoundError: If config file doesn't exist
    """
    config_path = _get_config_dir() / filename

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        return yaml.safe_load(f) or {}


def parse_store_settings(config: Dict[str, Any]) -> StoreSettings:
    """
    Build StoreSettings from a parsed store.yaml mapping.

    Missing keys keep their defaults. Numbers go through str() so that
    YAML floats become exact Decimals (0.19 -> Decimal("0.19")).
    """
    defaults = StoreSettings()
    currency = config.get('currency') or {}
    delivery = config.get('delivery') or {}

    return StoreSettings(
        store_name=config.get('store_name', defaults.store_name),
        currency=currency.get('code', defaults.currency),
        decimals=int(currency.get('decimals', defaults.decimals)),
        tax_rate=Decimal(str(config.get('tax_rate', defaults.tax_rate))),
        delivery_fee=Decimal(str(delivery.get('fee', defaults.delivery_fee))),
        free_delivery_threshold=Decimal(
            str(delivery.get('free_threshold', defaults.free_delivery_threshold))
        ),
        payment_methods=dict(config.get('payment_methods') or defaults.payment_methods),
    )


def load_store_settings() -> StoreSettings:
    """
    Load commercial store settings.

    Returns:
        StoreSettings parsed from config/store.yaml

    Example:
        StoreSettings(currency='TND', decimals=3, tax_rate=Decimal('0.19'), ...)
    """
    return parse_store_settings(load_config('store.yaml'))


def load_api_settings() -> APISettings:
    """
    Load backend API settings.

    STOREFRONT_API_URL in the environment overrides base_url from
    config/api.yaml.
    """
    config = load_config('api.yaml')
    defaults = APISettings()
    base_url = os.environ.get('STOREFRONT_API_URL') or config.get('base_url', defaults.base_url)

    return APISettings(
        base_url=base_url.rstrip('/'),
        timeout=int(config.get('timeout', defaults.timeout)),
    )
