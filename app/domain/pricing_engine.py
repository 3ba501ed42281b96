"""Pricing Engine — exact-decimal totals for baskets and one-time orders.

Amounts accumulate as ``Decimal`` and are only rounded to cents when they
are rendered (``format_money`` / ``CostBreakdown.to_dict``).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal

from app.domain.exceptions import InvalidQuantityError
from app.domain.rule_catalog import PlanDefinition, ProductRef
from app.domain.selection import SelectionState

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")


def format_money(amount: Decimal) -> str:
    """Round to two places for display, e.g. ``Decimal('59.9') -> '59.90'``."""
    return str(amount.quantize(CENTS, rounding=ROUND_HALF_UP))


# ---------------------------------------------------------------------------
# Cost breakdown data object
# ---------------------------------------------------------------------------
@dataclass
class LineCost:
    """Cost of one product line."""

    product_id: int
    name: str
    quantity: int
    unit_price: Decimal

    @property
    def total(self) -> Decimal:
        return self.unit_price * self.quantity

    def to_dict(self) -> dict:
        return {
            "product_id": self.product_id,
            "name": self.name,
            "quantity": self.quantity,
            "unit_price": format_money(self.unit_price),
            "total": format_money(self.total),
        }


@dataclass
class CostBreakdown:
    """Itemised cost breakdown returned by the pricing engine."""

    base_price: Decimal = Decimal("0")
    lines: list[LineCost] = field(default_factory=list)

    @property
    def items_subtotal(self) -> Decimal:
        return sum((line.total for line in self.lines), Decimal("0"))

    @property
    def total(self) -> Decimal:
        return self.base_price + self.items_subtotal

    def to_dict(self) -> dict:
        return {
            "base_price": format_money(self.base_price),
            "items": [line.to_dict() for line in self.lines],
            "items_subtotal": format_money(self.items_subtotal),
            "total": format_money(self.total),
        }


# ---------------------------------------------------------------------------
# Pricing Engine
# ---------------------------------------------------------------------------
class PricingEngine:
    """Computes the monthly charge of a customised plan.

    Fixed items are never priced separately: their cost is part of the
    plan's base price.
    """

    def customization_subtotal(self, selection: SelectionState) -> Decimal:
        """Sum of ``quantity * price`` over the selected items."""
        return sum((item.line_total for item in selection.items), Decimal("0"))

    def grand_total(self, plan: PlanDefinition, selection: SelectionState) -> Decimal:
        return plan.price + self.customization_subtotal(selection)

    def quote(self, plan: PlanDefinition, selection: SelectionState) -> CostBreakdown:
        """Itemised breakdown of ``grand_total``."""
        breakdown = CostBreakdown(
            base_price=plan.price,
            lines=[
                LineCost(
                    product_id=item.product.id,
                    name=item.product.name,
                    quantity=item.quantity,
                    unit_price=item.product.price,
                )
                for item in selection.items
            ],
        )
        logger.debug("Quoted plan '%s' — total=%s", plan.slug, breakdown.total)
        return breakdown

    def price_order(self, lines: list[tuple[ProductRef, int]]) -> CostBreakdown:
        """Price a one-time order of ``(product, quantity)`` pairs."""
        costs = []
        for product, quantity in lines:
            if quantity < 1:
                raise InvalidQuantityError(quantity)
            costs.append(
                LineCost(
                    product_id=product.id,
                    name=product.name,
                    quantity=quantity,
                    unit_price=product.price,
                ),
            )
        breakdown = CostBreakdown(lines=costs)
        logger.info("Order priced — lines=%s, total=%s", len(costs), breakdown.total)
        return breakdown
