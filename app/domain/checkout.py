"""Checkout Submission Adapter.

Turns a valid selection plus customer details into the request expected by
the subscription-creation endpoint, calls it exactly once, and interprets
the outcome.  Local problems come back as a ``SubmissionResult`` rather than
an exception so the caller can show them next to the basket.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Protocol

from app.domain.exceptions import IncompleteCustomizationError, SubmissionFailedError
from app.domain.rule_engine import NO_PLAN_SELECTED, RuleEngine
from app.domain.selection import SelectionState

logger = logging.getLogger(__name__)

CONFIRMED = "confirmed"
INCOMPLETE = "incomplete"
FAILED = "failed"


class CheckoutGateway(Protocol):
    """The order-creation collaborator (``StoreClient`` over HTTP)."""

    def submit_subscription(self, payload: dict) -> dict:
        """Create the subscription; raise ``SubmissionFailedError`` on failure."""


@dataclass
class CustomerDetails:
    name: str
    email: str
    phone: str
    address: str
    delivery_instructions: str | None = None
    password: str | None = None

    def to_dict(self) -> dict:
        payload = {
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "address": self.address,
        }
        if self.delivery_instructions:
            payload["delivery_instructions"] = self.delivery_instructions
        if self.password:
            payload["password"] = self.password
        return payload


@dataclass
class CheckoutConfirmation:
    subscription_id: int
    status: str
    next_delivery_date: str | None
    monthly_price: str | None
    links: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_response(cls, data: dict) -> "CheckoutConfirmation":
        """Raise ``SubmissionFailedError`` when the reply carries no subscription id."""
        subscription_id = data.get("id") if isinstance(data, dict) else None
        if subscription_id is None:
            raise SubmissionFailedError("The store did not confirm the subscription. Please try again.")
        links = {"subscription": f"/store/subscriptions/{subscription_id}"}
        if data.get("customer_id"):
            links["my_subscriptions"] = f"/store/customers/{data['customer_id']}/subscriptions"
        return cls(
            subscription_id=subscription_id,
            status=data.get("status", "active"),
            next_delivery_date=data.get("next_delivery_date"),
            monthly_price=data.get("monthly_price"),
            links=links,
        )


@dataclass
class SubmissionResult:
    status: str
    confirmation: CheckoutConfirmation | None = None
    message: str = ""
    errors: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.status == CONFIRMED


class CheckoutSubmissionAdapter:
    """Submits a customised plan through a ``CheckoutGateway``."""

    def __init__(self, gateway: CheckoutGateway, rule_engine: RuleEngine | None = None):
        self._gateway = gateway
        self._rule_engine = rule_engine or RuleEngine()

    def build_payload(
        self,
        selection: SelectionState,
        customer: CustomerDetails,
        create_account: bool = False,
        customer_id: int | None = None,
    ) -> dict:
        """Checkout request body.  ``customer_id`` is sent for a signed-in customer."""
        if selection.plan is None:
            raise IncompleteCustomizationError([NO_PLAN_SELECTED])
        payload = {
            "plan_id": selection.plan.id,
            "items": selection.to_payload_items(),
            "customer": customer.to_dict(),
            "create_account": create_account,
        }
        if customer_id:
            payload["customer_id"] = customer_id
        return payload

    def submit(
        self,
        selection: SelectionState,
        customer: CustomerDetails,
        create_account: bool = False,
        customer_id: int | None = None,
    ) -> SubmissionResult:
        """Submit once.  The selection is cleared only on success."""
        try:
            self._rule_engine.validate(selection)
        except IncompleteCustomizationError as err:
            return SubmissionResult(
                status=INCOMPLETE, message=err.message, errors=err.violations,
            )

        payload = self.build_payload(selection, customer, create_account, customer_id)
        try:
            data = self._gateway.submit_subscription(payload)
            confirmation = CheckoutConfirmation.from_response(data)
        except SubmissionFailedError as err:
            logger.warning("Checkout failed for plan id=%s: %s", payload["plan_id"], err.message)
            return SubmissionResult(status=FAILED, message=err.message)

        selection.clear()
        logger.info("Checkout confirmed for subscription id=%s", confirmation.subscription_id)
        return SubmissionResult(
            status=CONFIRMED,
            confirmation=confirmation,
            message="Your subscription has been created",
        )
