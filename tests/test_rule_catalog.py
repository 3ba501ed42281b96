"""Unit tests for the Rule Catalog value objects.

Pure business logic — no Flask dependency.
"""

from decimal import Decimal

import pytest

from app.domain.rule_catalog import (
    CategoryRule,
    FixedItem,
    PlanDefinition,
    ProductRef,
    load_rules,
    parse_price,
)


class TestParsePrice:
    def test_decimal_string_is_exact(self):
        assert parse_price("49.90") == Decimal("49.90")

    def test_float_goes_through_str(self):
        assert parse_price(0.1) == Decimal("0.1")

    @pytest.mark.parametrize("value", ["abc", "-1", "NaN"])
    def test_invalid_prices_raise(self, value):
        with pytest.raises(ValueError, match="Invalid price"):
            parse_price(value)


class TestCategoryRule:
    def test_min_above_max_fails_fast(self):
        with pytest.raises(ValueError, match="0 <= min <= max"):
            CategoryRule("normal", 4, 2)

    def test_negative_min_fails_fast(self):
        with pytest.raises(ValueError):
            CategoryRule("normal", -1, 2)

    def test_unknown_category_rejected(self):
        with pytest.raises(ValueError, match="Unknown category"):
            CategoryRule("citrus", 0, 2)

    def test_zero_max_means_disabled(self):
        assert CategoryRule("exotic", 0, 0).enabled is False
        assert CategoryRule("exotic", 0, 1).enabled is True


class TestLoadRules:
    def test_exposes_fixed_items_and_rules_by_category(self, basket_plan, fruit):
        rules = load_rules(basket_plan)
        assert rules.fixed_items == (FixedItem(fruit["banana"], 6),)
        assert set(rules.rules) == {"normal"}
        assert rules.rules["normal"].min_quantity == 3

    def test_category_without_rule_is_not_offered(self, basket_plan):
        assert load_rules(basket_plan).offered_categories() == ["normal"]

    def test_disabled_category_is_not_offered(self):
        plan = PlanDefinition(
            id=1, slug="p", name="P", price=Decimal("10"),
            rules=(CategoryRule("exotic", 0, 0), CategoryRule("normal", 1, 2)),
        )
        rules = load_rules(plan)
        assert "exotic" in rules.rules
        assert rules.offered_categories() == ["normal"]

    def test_offered_categories_use_canonical_order(self):
        plan = PlanDefinition(
            id=1, slug="p", name="P", price=Decimal("10"),
            rules=(CategoryRule("exotic", 0, 2), CategoryRule("normal", 1, 2)),
        )
        assert load_rules(plan).offered_categories() == ["normal", "exotic"]

    def test_fixed_product_is_not_customizable(self, basket_plan, fruit):
        rules = load_rules(basket_plan)
        assert rules.is_customizable(fruit["apple"]) is True
        assert rules.is_customizable(fruit["banana"]) is False
        assert rules.is_customizable(fruit["mango"]) is False

    def test_plan_with_two_rules_for_one_category_rejected(self):
        with pytest.raises(ValueError, match="more than one rule"):
            PlanDefinition(
                id=1, slug="p", name="P", price=Decimal("10"),
                rules=(CategoryRule("normal", 0, 2), CategoryRule("normal", 1, 3)),
            )


class TestFromDict:
    def test_plan_from_store_payload(self):
        payload = {
            "id": 7,
            "slug": "tropical-basket",
            "name": "Tropical",
            "price": "89.90",
            "fixed_items": [
                {
                    "product_id": 1,
                    "quantity": 4,
                    "product": {"id": 1, "name": "Banana", "price": "3.50", "product_type": "normal"},
                },
            ],
            "customizable_rules": [
                {"product_type": "normal", "min_quantity": 2, "max_quantity": 6},
                {"product_type": "exotic", "min_quantity": 1, "max_quantity": 3},
            ],
        }
        plan = PlanDefinition.from_dict(payload)
        assert plan.price == Decimal("89.90")
        assert plan.fixed_items[0].quantity == 4
        assert plan.fixed_items[0].product.category == "normal"
        assert [r.category for r in plan.rules] == ["normal", "exotic"]

    def test_product_from_dict_accepts_category_key(self):
        product = ProductRef.from_dict({"id": "3", "name": "Kiwi", "price": "2.10", "category": "exotic"})
        assert product.id == 3
        assert product.category == "exotic"
        assert product.price == Decimal("2.10")
