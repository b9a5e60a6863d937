"""
Checkout Pricing

Totals and credit-limit checks. One tax rate (from config/store.yaml)
is used for both basket and checkout.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional

from ..cart import CartLine
from ..common.config_loader import StoreSettings
from ..common.currency import to_money
from ..models import Customer

ZERO = Decimal("0.000")


@dataclass(frozen=True)
class CheckoutTotals:
    subtotal: Decimal
    tax: Decimal
    delivery: Decimal
    total: Decimal

    @classmethod
    def from_lines(cls, lines: Iterable[CartLine], settings: StoreSettings) -> "CheckoutTotals":
        """
        Compute totals for cart lines.

        Delivery is free above the configured threshold (and for an empty cart).
        """
        subtotal = to_money(sum((line.line_total for line in lines), ZERO))
        tax = to_money(subtotal * settings.tax_rate)
        if subtotal == ZERO or subtotal > settings.free_delivery_threshold:
            delivery = ZERO
        else:
            delivery = to_money(settings.delivery_fee)
        return cls(
            subtotal=subtotal,
            tax=tax,
            delivery=delivery,
            total=to_money(subtotal + tax + delivery),
        )


@dataclass(frozen=True)
class CreditCheck:
    """Outcome of comparing a B2B customer's exposure with their limit."""
    exceeded: bool
    financial_limit: Optional[Decimal] = None
    outstanding: Decimal = ZERO
    anticipated_outstanding: Decimal = ZERO

    @property
    def message(self) -> str:
        if not self.exceeded:
            return ""
        return (
            f"This order brings your outstanding balance to {self.anticipated_outstanding} "
            f"which exceeds your credit limit of {self.financial_limit}. "
            f"It will be submitted for approval."
        )


def check_credit(customer: Optional[Customer], order_total: Decimal) -> CreditCheck:
    """
    Flag B2B customers whose outstanding balance plus this order would
    exceed their financial limit. Customers without a limit are never flagged.
    """
    if customer is None or not customer.is_b2b or customer.financial_limit is None:
        return CreditCheck(exceeded=False)

    anticipated = to_money(customer.outstanding_balance + order_total)
    return CreditCheck(
        exceeded=anticipated > customer.financial_limit,
        financial_limit=customer.financial_limit,
        outstanding=customer.outstanding_balance,
        anticipated_outstanding=anticipated,
    )
