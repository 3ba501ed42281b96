"""Unit tests for the Pricing Engine.

Exact-decimal totals for baskets and one-time orders.
These tests are pure business logic — no Flask dependency.
"""

from decimal import Decimal

import pytest

from app.domain.exceptions import InvalidQuantityError
from app.domain.pricing_engine import CostBreakdown, LineCost, PricingEngine, format_money
from app.domain.rule_catalog import ProductRef
from app.domain.selection import SelectionState


class TestPricingEngine:
    """Tests for the PricingEngine."""

    def setup_method(self):
        self.engine = PricingEngine()

    def test_plan_price_plus_customization(self, basket_plan, fruit):
        selection = SelectionState(basket_plan)
        selection.add_item(fruit["pear"], 2)
        assert self.engine.customization_subtotal(selection) == Decimal("10.00")
        assert self.engine.grand_total(basket_plan, selection) == Decimal("59.90")

    def test_fixed_items_are_not_priced(self, basket_plan):
        selection = SelectionState(basket_plan)
        assert self.engine.grand_total(basket_plan, selection) == basket_plan.price

    def test_no_binary_float_drift(self):
        cheap = ProductRef(99, "Grape", Decimal("0.10"), "normal")
        selection = SelectionState()
        selection.add_item(cheap, 3)
        assert self.engine.customization_subtotal(selection) == Decimal("0.30")

    def test_total_never_decreases_as_quantity_grows(self, basket_plan, fruit):
        selection = SelectionState(basket_plan)
        selection.add_item(fruit["apple"], 1)
        totals = []
        for quantity in range(1, 6):
            selection.update_quantity(fruit["apple"].id, quantity)
            totals.append(self.engine.grand_total(basket_plan, selection))
        assert totals == sorted(totals)

    def test_subtotal_is_idempotent(self, basket_plan, fruit):
        selection = SelectionState(basket_plan)
        selection.add_item(fruit["orange"], 3)
        assert self.engine.customization_subtotal(selection) == self.engine.customization_subtotal(selection)

    def test_quote_breakdown(self, basket_plan, fruit):
        selection = SelectionState(basket_plan)
        selection.add_item(fruit["apple"], 2)
        selection.add_item(fruit["orange"], 1)
        breakdown = self.engine.quote(basket_plan, selection)
        assert breakdown.items_subtotal == Decimal("12.30")
        assert breakdown.total == Decimal("62.20")
        assert breakdown.to_dict() == {
            "base_price": "49.90",
            "items": [
                {"product_id": 2, "name": "Apple", "quantity": 2, "unit_price": "4.20", "total": "8.40"},
                {"product_id": 3, "name": "Orange", "quantity": 1, "unit_price": "3.90", "total": "3.90"},
            ],
            "items_subtotal": "12.30",
            "total": "62.20",
        }

    def test_price_order_has_no_base_price(self, fruit):
        breakdown = self.engine.price_order([(fruit["mango"], 2), (fruit["pitaya"], 1)])
        assert breakdown.base_price == Decimal("0")
        assert breakdown.total == Decimal("22.90")

    def test_price_order_rejects_non_positive_quantity(self, fruit):
        with pytest.raises(InvalidQuantityError):
            self.engine.price_order([(fruit["mango"], 0)])


class TestFormatting:
    def test_rounds_half_up_only_for_display(self):
        line = LineCost(1, "Pricey", 3, Decimal("0.335"))
        breakdown = CostBreakdown(lines=[line])
        assert breakdown.total == Decimal("1.005")
        assert breakdown.to_dict()["total"] == "1.01"

    def test_format_money_pads_cents(self):
        assert format_money(Decimal("59.9")) == "59.90"
        assert format_money(Decimal("7")) == "7.00"
