"""Subscription service — core checkout workflow orchestration.

Flow: resolve plan → rebuild selection → RuleEngine.validate() →
PricingEngine.quote() → persist.  Client-computed totals are never trusted;
everything is recomputed here from the stored plan and product prices.
"""

import logging
from datetime import date, timedelta

from flask import current_app

from app.domain.exceptions import ResourceNotFoundError, ValidationError
from app.domain.pricing_engine import PricingEngine
from app.domain.rule_engine import RuleEngine
from app.domain.selection import SelectionState
from app.domain.models import SubscriptionItem
from app.repositories.plan_repository import PlanRepository
from app.repositories.product_repository import ProductRepository
from app.repositories.subscription_repository import SubscriptionRepository
from app.services.customer_service import CustomerService
from app.services.product_service import ProductService

logger = logging.getLogger(__name__)

# Allowed status changes: current -> reachable statuses.
STATUS_TRANSITIONS = {
    "active": {"paused", "cancelled"},
    "paused": {"active", "cancelled"},
    "cancelled": set(),
}


class SubscriptionService:
    """Orchestrates quotes and subscription creation with the rule and pricing engines."""

    def __init__(self):
        self._sub_repo = SubscriptionRepository()
        self._plan_repo = PlanRepository()
        self._product_repo = ProductRepository()
        self._product_svc = ProductService()
        self._customer_svc = CustomerService()
        self._rule_engine = RuleEngine()
        self._pricing_engine = PricingEngine()

    def quote(self, slug: str, items: list[dict]) -> dict:
        """Validate and price a proposed basket without persisting anything."""
        plan = self._plan_repo.get_by_slug(slug)
        if not plan:
            raise ResourceNotFoundError("SubscriptionPlan", slug)

        selection, _ = self._build_selection(plan, items)
        errors = self._rule_engine.get_validation_errors(selection)
        breakdown = self._pricing_engine.quote(selection.plan, selection)
        return {
            "valid": not errors,
            "errors": errors,
            "breakdown": breakdown.to_dict(),
        }

    def create_subscription(
        self,
        plan_id: int,
        items: list[dict],
        customer_id: int | None = None,
        customer: dict | None = None,
        create_account: bool = False,
        password: str | None = None,
    ) -> dict:
        """Create a subscription.

        Steps:
          1. Validate the plan exists
          2. Rebuild the selection from stored products (availability, stock)
          3. Run the rule engine against the plan's rules
          4. Price via the pricing engine
          5. Resolve or create the customer
          6. Persist subscription and items, decrement stock
        """
        plan = self._plan_repo.get_by_id(plan_id)
        if not plan:
            raise ResourceNotFoundError("SubscriptionPlan", plan_id)

        selection, products = self._build_selection(plan, items)

        # --- Rule validation ---
        self._rule_engine.validate(selection)

        # --- Pricing ---
        breakdown = self._pricing_engine.quote(selection.plan, selection)

        # --- Customer ---
        owner = self._customer_svc.resolve_checkout_customer(
            customer_id, customer, create_account, password,
        )

        # --- Persist ---
        start = date.today()
        delivery_days = current_app.config.get("NEXT_DELIVERY_DAYS", 7)
        subscription = self._sub_repo.create(
            customer_id=owner.id,
            plan_id=plan.id,
            plan_name=plan.name,
            status="active",
            start_date=start,
            next_delivery_date=start + timedelta(days=delivery_days),
            monthly_price=breakdown.total,
            cost_breakdown=breakdown.to_dict(),
        )
        self._create_items(subscription, selection, products)
        self._sub_repo.commit()

        logger.info(
            "Subscription created id=%s customer=%s plan=%s total=%s",
            subscription.id, owner.id, plan.id, breakdown.total,
        )
        return subscription.to_dict()

    def get_subscription(self, subscription_id: int) -> dict:
        """Fetch a subscription by ID."""
        return self._get_or_raise(subscription_id).to_dict()

    def list_subscriptions(self, status: str | None = None) -> list[dict]:
        """List subscriptions with an optional status filter."""
        return [s.to_dict() for s in self._sub_repo.filter_subscriptions(status)]

    def update_status(self, subscription_id: int, status: str) -> dict:
        """Move a subscription to ``status`` if the transition is allowed."""
        subscription = self._get_or_raise(subscription_id)
        current = subscription.status

        if status == current:
            raise ValidationError(f"Subscription is already {current}")
        if status not in STATUS_TRANSITIONS.get(current, set()):
            raise ValidationError(
                f"Cannot change subscription from '{current}' to '{status}'",
                details={"current_status": current, "requested_status": status},
            )

        subscription = self._sub_repo.update(subscription, status=status)
        self._sub_repo.commit()
        logger.info("Subscription id=%s status changed to '%s'", subscription_id, status)
        return subscription.to_dict()

    def pause(self, subscription_id: int) -> dict:
        return self.update_status(subscription_id, "paused")

    def resume(self, subscription_id: int) -> dict:
        return self.update_status(subscription_id, "active")

    def cancel(self, subscription_id: int) -> dict:
        return self.update_status(subscription_id, "cancelled")

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _get_or_raise(self, subscription_id: int):
        subscription = self._sub_repo.get_by_id(subscription_id)
        if not subscription:
            raise ResourceNotFoundError("UserSubscription", subscription_id)
        return subscription

    def _build_selection(self, plan, items: list[dict]):
        """Rebuild a ``SelectionState`` for ``plan`` from stored product data."""
        quantities: dict[int, int] = {}
        for item in items:
            quantities[item["product_id"]] = quantities.get(item["product_id"], 0) + item["quantity"]
        products = self._product_svc.resolve_purchasable(quantities)

        selection = SelectionState(plan.to_definition())
        for item in items:
            selection.add_item(products[item["product_id"]].to_ref(), item["quantity"])
        return selection, products

    def _create_items(self, subscription, selection: SelectionState, products: dict) -> None:
        """Create SubscriptionItem records and take the quantities out of stock."""
        from app.extensions import db

        for item in selection.items:
            db.session.add(
                SubscriptionItem(
                    subscription_id=subscription.id,
                    product_id=item.product.id,
                    quantity=item.quantity,
                    unit_price=item.product.price,
                ),
            )
            self._product_repo.decrement_stock(products[item.product.id], item.quantity)
