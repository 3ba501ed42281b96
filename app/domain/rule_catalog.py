"""Rule Catalog — per-plan fixed items and customization bounds.

Plain value objects parsed from the storefront's JSON shapes. Nothing here
touches Flask or the database, so the same types serve the HTTP client and
the server-side checkout.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation

NORMAL = "normal"
EXOTIC = "exotic"
CATEGORIES = (NORMAL, EXOTIC)


def parse_price(value) -> Decimal:
    """Parse a decimal string (or number) into an exact ``Decimal``."""
    try:
        price = Decimal(str(value))
    except InvalidOperation as err:
        raise ValueError(f"Invalid price: {value!r}") from err
    if not price.is_finite() or price < 0:
        raise ValueError(f"Invalid price: {value!r}")
    return price


@dataclass(frozen=True)
class ProductRef:
    """Read-only view of a catalog product."""

    id: int
    name: str
    price: Decimal
    category: str
    is_available: bool = True
    stock_quantity: int = 0

    @classmethod
    def from_dict(cls, data: dict) -> "ProductRef":
        return cls(
            id=int(data["id"]),
            name=data.get("name", ""),
            price=parse_price(data["price"]),
            category=data.get("product_type", data.get("category")),
            is_available=bool(data.get("is_available", True)),
            stock_quantity=int(data.get("stock_quantity", 0)),
        )


@dataclass(frozen=True)
class FixedItem:
    """A product always delivered with the plan."""

    product: ProductRef
    quantity: int = 1


@dataclass(frozen=True)
class CategoryRule:
    """Min/max total quantity a customer may pick from one category."""

    category: str
    min_quantity: int
    max_quantity: int

    def __post_init__(self):
        if self.category not in CATEGORIES:
            raise ValueError(f"Unknown category '{self.category}'")
        if not 0 <= self.min_quantity <= self.max_quantity:
            raise ValueError(
                f"Rule for '{self.category}' must satisfy 0 <= min <= max "
                f"(got min={self.min_quantity}, max={self.max_quantity})",
            )

    @property
    def enabled(self) -> bool:
        return self.max_quantity > 0


@dataclass(frozen=True)
class PlanDefinition:
    """A subscription plan as seen by the customization engine."""

    id: int
    slug: str
    name: str
    price: Decimal
    fixed_items: tuple[FixedItem, ...] = ()
    rules: tuple[CategoryRule, ...] = ()

    def __post_init__(self):
        seen = [rule.category for rule in self.rules]
        if len(seen) != len(set(seen)):
            raise ValueError(f"Plan '{self.slug}' has more than one rule per category")

    @classmethod
    def from_dict(cls, data: dict) -> "PlanDefinition":
        """Build from the ``/store/plans/<slug>`` payload."""
        fixed = tuple(
            FixedItem(
                product=ProductRef.from_dict(item["product"]),
                quantity=int(item.get("quantity", 1)),
            )
            for item in data.get("fixed_items", [])
        )
        rules = tuple(
            CategoryRule(
                category=rule["product_type"],
                min_quantity=int(rule.get("min_quantity", 0)),
                max_quantity=int(rule["max_quantity"]),
            )
            for rule in data.get("customizable_rules", [])
        )
        return cls(
            id=int(data["id"]),
            slug=data.get("slug", ""),
            name=data.get("name", ""),
            price=parse_price(data["price"]),
            fixed_items=fixed,
            rules=rules,
        )


@dataclass(frozen=True)
class PlanRules:
    """Fixed items plus the rule configured for each category."""

    fixed_items: tuple[FixedItem, ...] = ()
    rules: dict[str, CategoryRule] = field(default_factory=dict)

    def offered_categories(self) -> list[str]:
        """Categories the customer may pick from, in canonical order."""
        return [
            category for category in CATEGORIES
            if category in self.rules and self.rules[category].enabled
        ]

    def fixed_product_ids(self) -> set[int]:
        return {item.product.id for item in self.fixed_items}

    def is_customizable(self, product: ProductRef) -> bool:
        return (
            product.category in self.offered_categories()
            and product.id not in self.fixed_product_ids()
        )


def load_rules(plan: PlanDefinition) -> PlanRules:
    """Expose the fixed items and per-category bounds of a plan.

    A category with no configured rule is simply absent from the result.
    """
    return PlanRules(
        fixed_items=tuple(plan.fixed_items),
        rules={rule.category: rule for rule in plan.rules},
    )
