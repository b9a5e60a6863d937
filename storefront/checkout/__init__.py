"""
Checkout: totals, credit checks, order/quotation submission.
"""

from .pricing import CheckoutTotals, CreditCheck, check_credit
from .service import CheckoutOutcome, CheckoutService

__all__ = [
    'CheckoutOutcome',
    'CheckoutService',
    'CheckoutTotals',
    'CreditCheck',
    'check_credit',
]
