"""
Customer and submission data models.

Pure data classes for the authenticated customer, the result of an
order or quotation submission and the account history rows.
"""

import logging
from dataclasses import asdict, dataclass
from decimal import Decimal
from typing import Any, Dict, List, Optional

from ..common.constants import CUSTOMER_TYPE_B2B, CUSTOMER_TYPE_B2C
from ..common.currency import to_money

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Customer:
    """Authenticated customer with commercial terms."""
    id: str
    email: str
    role: str = "CUSTOMER"
    first_name: str = ""
    last_name: str = ""
    phone: str = ""
    company_name: str = ""
    customer_type: str = CUSTOMER_TYPE_B2C
    financial_limit: Optional[Decimal] = None
    outstanding_balance: Decimal = Decimal("0.000")

    @property
    def is_b2b(self) -> bool:
        return self.customer_type == CUSTOMER_TYPE_B2B

    @property
    def display_name(self) -> str:
        name = f"{self.first_name} {self.last_name}".strip()
        return name or self.email

    @property
    def available_credit(self) -> Optional[Decimal]:
        if self.financial_limit is None:
            return None
        return self.financial_limit - self.outstanding_balance

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "Customer":
        """Build a Customer from an /auth payload. Raises ValueError without id/email."""
        if not isinstance(payload, dict) or not payload.get("id") or not payload.get("email"):
            raise ValueError("Customer record requires 'id' and 'email'")

        limit = payload.get("financialLimit")
        return cls(
            id=str(payload["id"]),
            email=payload["email"],
            role=payload.get("role") or "CUSTOMER",
            first_name=payload.get("firstName") or "",
            last_name=payload.get("lastName") or "",
            phone=payload.get("phone") or "",
            company_name=payload.get("companyName") or "",
            customer_type=(payload.get("customerType") or CUSTOMER_TYPE_B2C).upper(),
            financial_limit=to_money(limit) if limit is not None else None,
            outstanding_balance=to_money(
                payload.get("outstandingBalance", payload.get("currentOutstanding"))
            ),
        )

    def to_api(self) -> Dict[str, Any]:
        """Inverse of from_api, used when persisting the session."""
        return {
            "id": self.id,
            "email": self.email,
            "role": self.role,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "phone": self.phone,
            "companyName": self.company_name,
            "customerType": self.customer_type,
            "financialLimit": str(self.financial_limit) if self.financial_limit is not None else None,
            "outstandingBalance": str(self.outstanding_balance),
        }


@dataclass(frozen=True)
class SubmissionResult:
    """Server acknowledgement of an order or quotation."""
    kind: str               # "order" or "quotation"
    id: str
    number: str
    status: str             # consumed verbatim by the confirmation screen
    total: Decimal = Decimal("0.000")
    credit_limit_exceeded: bool = False

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class OrderSummary:
    """One row of the account screen's order or quotation history."""
    kind: str               # "order" or "quotation"
    id: str
    number: str
    status: str
    total: Decimal = Decimal("0.000")
    item_count: int = 0
    created_at: str = ""

    @classmethod
    def from_api(cls, payload: Dict[str, Any], kind: str) -> "OrderSummary":
        """Build a history row. Raises ValueError without an id."""
        if not isinstance(payload, dict) or not payload.get("id"):
            raise ValueError(f"{kind.capitalize()} record requires 'id'")

        items = payload.get("items")
        counts = payload.get("_count")
        if isinstance(counts, dict) and counts.get("items") is not None:
            count = counts["items"]
        else:
            count = len(items) if isinstance(items, list) else 0

        return cls(
            kind=kind,
            id=str(payload["id"]),
            number=str(payload.get(f"{kind}Number") or payload["id"]),
            status=payload.get("status") or "",
            total=to_money(payload.get("totalAmount", payload.get("total"))),
            item_count=int(count),
            created_at=payload.get("createdAt") or "",
        )


def summaries_from_api(payload: Any, kind: str) -> List[OrderSummary]:
    """
    Transform a history listing, skipping bad records.

    Accepts a bare list or a page object holding the list under "orders"
    or "quotations".
    """
    if isinstance(payload, dict):
        payload = payload.get(f"{kind}s")
    if not isinstance(payload, list):
        return []

    summaries = []
    for row in payload:
        try:
            summaries.append(OrderSummary.from_api(row, kind))
        except (TypeError, ValueError) as e:
            logger.warning("Skipping %s record: %s", kind, e)
    return summaries
