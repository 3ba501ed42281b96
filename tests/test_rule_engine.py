"""Unit tests for the Rule Engine.

Covers per-category bounds, ignored categories and the raising variant.
Pure business logic — no Flask dependency.
"""

from decimal import Decimal

import pytest

from app.domain.exceptions import IncompleteCustomizationError
from app.domain.rule_catalog import CategoryRule, PlanDefinition
from app.domain.rule_engine import NO_PLAN_SELECTED, RuleEngine
from app.domain.selection import SelectionState


def _plan(*rules):
    return PlanDefinition(id=1, slug="plan", name="Plan", price=Decimal("30"), rules=rules)


class TestRuleEngine:
    """Tests for the RuleEngine."""

    def setup_method(self):
        self.engine = RuleEngine()

    # ------------------------------------------------------------------
    # Basket scenarios
    # ------------------------------------------------------------------
    def test_empty_selection_below_minimum(self, basket_plan):
        selection = SelectionState(basket_plan)
        assert self.engine.is_valid(selection) is False
        assert self.engine.get_validation_errors(selection) == [
            "normal requires at least 3 items (currently 0)",
        ]

    def test_three_distinct_products_is_valid(self, basket_plan, fruit):
        selection = SelectionState(basket_plan)
        for name in ("apple", "orange", "pear"):
            selection.add_item(fruit[name], 1)
        assert selection.category_count("normal") == 3
        assert self.engine.is_valid(selection) is True
        assert self.engine.get_validation_errors(selection) == []

    def test_exceeding_maximum(self, basket_plan, fruit):
        selection = SelectionState(basket_plan)
        selection.add_item(fruit["apple"], 1)
        selection.add_item(fruit["orange"], 1)
        selection.add_item(fruit["pear"], 1)
        selection.update_quantity(fruit["pear"].id, 5)
        assert selection.category_count("normal") == 7
        assert self.engine.is_valid(selection) is False
        assert "normal allows at most 5 items (currently 7)" in self.engine.get_validation_errors(selection)

    def test_boundaries_are_inclusive(self, basket_plan, fruit):
        selection = SelectionState(basket_plan)
        selection.add_item(fruit["apple"], 5)
        assert self.engine.is_valid(selection) is True

    # ------------------------------------------------------------------
    # Ignored categories
    # ------------------------------------------------------------------
    def test_disabled_category_is_not_validated(self, fruit):
        selection = SelectionState(_plan(CategoryRule("normal", 1, 2), CategoryRule("exotic", 0, 0)))
        selection.add_item(fruit["apple"])
        assert self.engine.get_validation_errors(selection) == []

    def test_plan_without_rules_is_always_valid(self):
        assert self.engine.is_valid(SelectionState(_plan())) is True

    def test_one_message_per_failing_category(self):
        selection = SelectionState(_plan(CategoryRule("normal", 2, 4), CategoryRule("exotic", 1, 2)))
        assert self.engine.get_validation_errors(selection) == [
            "normal requires at least 2 items (currently 0)",
            "exotic requires at least 1 items (currently 0)",
        ]

    def test_zero_minimum_accepts_empty_selection(self):
        selection = SelectionState(_plan(CategoryRule("exotic", 0, 3)))
        assert self.engine.is_valid(selection) is True

    def test_missing_plan_is_invalid(self):
        assert self.engine.get_validation_errors(SelectionState()) == [NO_PLAN_SELECTED]

    # ------------------------------------------------------------------
    # Purity and raising variant
    # ------------------------------------------------------------------
    def test_repeated_calls_give_identical_results(self, basket_plan, fruit):
        selection = SelectionState(basket_plan)
        selection.add_item(fruit["apple"], 2)
        first = self.engine.get_validation_errors(selection)
        assert self.engine.get_validation_errors(selection) == first
        assert self.engine.is_valid(selection) == self.engine.is_valid(selection)
        assert selection.category_count("normal") == 2

    def test_validate_raises_with_violations(self, basket_plan):
        with pytest.raises(IncompleteCustomizationError) as exc_info:
            self.engine.validate(SelectionState(basket_plan))
        assert exc_info.value.violations == ["normal requires at least 3 items (currently 0)"]
        assert exc_info.value.status_code == 422

    def test_validate_passes_silently_when_valid(self, basket_plan, fruit):
        selection = SelectionState(basket_plan)
        selection.add_item(fruit["apple"], 3)
        self.engine.validate(selection)
