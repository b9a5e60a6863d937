"""
Checkout Service

Submits the cart as a B2C order or a B2B quotation.

B2B customers go through quotations (administrator approval). A credit
limit overrun is reported as a warning only: the server decides. On any
failure the cart is left intact and the error is returned for inline
display; on success the cart is cleared.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from ..auth import AuthSession
from ..cart import CartStore
from ..catalog.api_client import StorefrontAPIClient
from ..common.config_loader import StoreSettings
from ..common.constants import (
    ORDER_DEFAULT_STATUS,
    QUOTATION_DRAFT_STATUS,
    QUOTATION_PENDING_STATUS,
)
from ..models import SubmissionResult
from .pricing import CheckoutTotals, CreditCheck, check_credit

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CheckoutOutcome:
    """Result of a checkout attempt; exactly one of result/error is set."""
    result: Optional[SubmissionResult] = None
    error: Optional[str] = None
    credit: CreditCheck = CreditCheck(exceeded=False)

    @property
    def ok(self) -> bool:
        return self.result is not None


class CheckoutService:
    """
    Usage:
        service = CheckoutService(cart, session, client, settings)
        service.totals()
        service.check_credit().exceeded
        outcome = service.submit(payment_method="cash")
    """

    def __init__(
        self,
        cart: CartStore,
        session: AuthSession,
        client: StorefrontAPIClient,
        settings: StoreSettings,
    ):
        self.cart = cart
        self.session = session
        self.client = client
        self.settings = settings
        # (request body, draft) of a quotation created but not yet submitted
        self._pending_draft: Optional[Tuple[Dict[str, Any], Dict[str, Any]]] = None

    def totals(self) -> CheckoutTotals:
        return CheckoutTotals.from_lines(self.cart.lines, self.settings)

    def check_credit(self) -> CreditCheck:
        return check_credit(self.session.customer, self.totals().total)

    def build_payload(self, payment_method: str, notes: str = "") -> Dict[str, Any]:
        """
        Build the order/quotation request body.

        Raises:
            ValueError: If payment_method is not configured
        """
        if payment_method not in self.settings.payment_methods:
            raise ValueError(f"Unknown payment method: {payment_method}")

        items = []
        for line in self.cart.lines:
            item: Dict[str, Any] = {
                "productId": line.product.id,
                "quantity": line.quantity,
                "price": float(line.product.price),
            }
            if line.variant_kind == "size":
                item["selectedSize"] = line.variant_label
                item["selectedUnitType"] = line.product.unit_type
            items.append(item)

        return {
            "items": items,
            "paymentMethod": self.settings.payment_methods[payment_method],
            "notes": notes,
        }

    def _submit_order(self, payload: Dict[str, Any]) -> Optional[SubmissionResult]:
        response = self.client.create_order(payload)
        if not response:
            return None
        return SubmissionResult(
            kind="order",
            id=str(response.get("id", "")),
            number=response.get("orderNumber") or str(response.get("id", "")),
            status=response.get("status") or ORDER_DEFAULT_STATUS,
        )

    def _submit_quotation(self, payload: Dict[str, Any]) -> Optional[SubmissionResult]:
        quotation_payload = dict(payload)
        quotation_payload["items"] = [
            {**item, "unitPrice": item["price"]} for item in payload["items"]
        ]

        # A draft whose submit step failed is reused for the same request
        draft = None
        if self._pending_draft is not None:
            pending_payload, pending = self._pending_draft
            if pending_payload == quotation_payload:
                draft = pending
                logger.info("Retrying submit of draft quotation %s", pending.get("id"))
            else:
                logger.warning("Cart changed, leaving draft quotation %s unsubmitted",
                               pending.get("id"))
            self._pending_draft = None

        if draft is None:
            draft = self.client.create_quotation(quotation_payload)
            if not draft:
                return None

        quotation_id = str(draft.get("id", ""))
        status = draft.get("status") or QUOTATION_PENDING_STATUS
        if status == QUOTATION_DRAFT_STATUS:
            submitted = self.client.submit_quotation(quotation_id)
            if not submitted:
                self._pending_draft = (quotation_payload, draft)
                return None
            status = submitted.get("status") or QUOTATION_PENDING_STATUS

        return SubmissionResult(
            kind="quotation",
            id=quotation_id,
            number=draft.get("quotationNumber") or quotation_id,
            status=status,
        )

    def submit(self, payment_method: str = "cash", notes: str = "") -> CheckoutOutcome:
        """Submit the cart. Never raises for server or network failures."""
        customer = self.session.customer
        if not self.session.is_authenticated or customer is None:
            return CheckoutOutcome(error="Please login to place an order")

        if self.cart.is_empty():
            return CheckoutOutcome(
                error="Your cart is empty. Please add items before placing an order."
            )

        totals = self.totals()
        credit = check_credit(customer, totals.total)
        if credit.exceeded:
            logger.warning("Credit limit exceeded for %s: %s > %s",
                           customer.email, credit.anticipated_outstanding, credit.financial_limit)

        try:
            payload = self.build_payload(payment_method, notes)
        except ValueError as e:
            return CheckoutOutcome(error=str(e), credit=credit)

        if customer.is_b2b:
            result = self._submit_quotation(payload)
        else:
            result = self._submit_order(payload)

        if result is None:
            error = self.client.last_error or "Failed to process order. Please try again."
            logger.error("Checkout failed for %s: %s", customer.email, error)
            return CheckoutOutcome(error=error, credit=credit)

        result = SubmissionResult(
            kind=result.kind,
            id=result.id,
            number=result.number,
            status=result.status,
            total=totals.total,
            credit_limit_exceeded=credit.exceeded,
        )
        logger.info("Submitted %s %s (%s)", result.kind, result.number, result.status)
        self.cart.clear()
        return CheckoutOutcome(result=result, credit=credit)
