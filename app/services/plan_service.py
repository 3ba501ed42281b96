"""Plan service — use-case orchestration for subscription plans."""

import logging

from app.domain.exceptions import ConflictError, ResourceNotFoundError, ValidationError
from app.domain.models import PlanCustomizableRule, PlanFixedItem
from app.repositories.plan_repository import PlanRepository
from app.repositories.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class PlanService:
    """Manages subscription plans with their fixed items and rules."""

    def __init__(self):
        self._plan_repo = PlanRepository()
        self._product_repo = ProductRepository()

    def create_plan(
        self,
        name: str,
        slug: str,
        price,
        description: str = "",
        image_url: str | None = None,
        fixed_items: list[dict] | None = None,
        customizable_rules: list[dict] | None = None,
    ) -> dict:
        """Create a plan; ``slug`` must be unique and fixed products must exist."""
        self._ensure_slug_free(slug)
        fixed_items = fixed_items or []
        self._ensure_products_exist(fixed_items)

        plan = self._plan_repo.create(
            name=name,
            slug=slug,
            price=price,
            description=description,
            image_url=image_url,
        )
        self._replace_children(plan, fixed_items, customizable_rules or [])
        self._plan_repo.commit()
        logger.info("Created plan id=%s slug='%s'", plan.id, slug)
        return plan.to_dict()

    def update_plan(
        self,
        plan_id: int,
        fixed_items: list[dict] | None = None,
        customizable_rules: list[dict] | None = None,
        **fields,
    ) -> dict:
        """Update plan fields and replace its fixed items and rules when given."""
        plan = self._get_or_raise(plan_id)

        if "slug" in fields and fields["slug"] != plan.slug:
            self._ensure_slug_free(fields["slug"])
        if fixed_items is not None:
            self._ensure_products_exist(fixed_items)

        plan = self._plan_repo.update(plan, **fields)
        if fixed_items is not None or customizable_rules is not None:
            self._replace_children(
                plan,
                fixed_items if fixed_items is not None else [i.to_dict() for i in plan.fixed_items],
                customizable_rules if customizable_rules is not None
                else [r.to_dict() for r in plan.customizable_rules],
            )
        self._plan_repo.commit()
        logger.info("Updated plan id=%s", plan_id)
        return plan.to_dict()

    def delete_plan(self, plan_id: int) -> None:
        """Delete a plan that no live subscription references."""
        plan = self._get_or_raise(plan_id)
        live = self._plan_repo.count_live_subscriptions(plan_id)
        if live:
            raise ConflictError(
                "Plan has active subscriptions and cannot be deleted",
                details={"live_subscriptions": live},
            )
        self._plan_repo.delete(plan)
        self._plan_repo.commit()
        logger.info("Deleted plan id=%s", plan_id)

    def get_all_plans(self) -> list[dict]:
        return [p.to_dict() for p in self._plan_repo.get_all()]

    def get_plan(self, plan_id: int) -> dict:
        """Fetch a single plan by ID."""
        return self._get_or_raise(plan_id).to_dict()

    def get_plan_by_slug(self, slug: str) -> dict:
        """Fetch a single plan by slug."""
        plan = self._plan_repo.get_by_slug(slug)
        if not plan:
            raise ResourceNotFoundError("SubscriptionPlan", slug)
        return plan.to_dict()

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _get_or_raise(self, plan_id: int):
        plan = self._plan_repo.get_by_id(plan_id)
        if not plan:
            raise ResourceNotFoundError("SubscriptionPlan", plan_id)
        return plan

    def _ensure_slug_free(self, slug: str) -> None:
        if self._plan_repo.get_by_slug(slug):
            raise ConflictError(f"Slug '{slug}' is already in use", details={"slug": slug})

    def _ensure_products_exist(self, fixed_items: list[dict]) -> None:
        product_ids = [item["product_id"] for item in fixed_items]
        if not product_ids:
            return
        found = {p.id for p in self._product_repo.get_many_by_ids(product_ids)}
        missing = sorted(set(product_ids) - found)
        if missing:
            raise ValidationError(
                f"Products not found: {missing}",
                details={"missing_product_ids": missing},
            )

    def _replace_children(self, plan, fixed_items: list[dict], rules: list[dict]) -> None:
        """Swap the plan's fixed items and rules for the given ones."""
        plan.fixed_items.clear()
        plan.customizable_rules.clear()
        self._plan_repo.update(plan)

        for item in fixed_items:
            plan.fixed_items.append(
                PlanFixedItem(product_id=item["product_id"], quantity=item.get("quantity", 1)),
            )
        for rule in rules:
            plan.customizable_rules.append(
                PlanCustomizableRule(
                    product_type=rule["product_type"],
                    min_quantity=rule.get("min_quantity", 0),
                    max_quantity=rule["max_quantity"],
                ),
            )
        self._plan_repo.update(plan)
