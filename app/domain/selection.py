"""Selection State — the customer's in-progress basket customization.

Owned by a single session; every mutation goes through the methods below so
the uniqueness and positive-quantity invariants hold in one place.
"""

import logging
from dataclasses import dataclass

from app.domain.exceptions import (
    DuplicateItemError,
    InvalidQuantityError,
    ProductNotCustomizableError,
    ResourceNotFoundError,
)
from app.domain.rule_catalog import PlanDefinition, ProductRef, load_rules

logger = logging.getLogger(__name__)


@dataclass
class SelectionItem:
    """One chosen product and how many of it."""

    product: ProductRef
    quantity: int

    @property
    def line_total(self):
        return self.product.price * self.quantity


class SelectionState:
    """Customizable items chosen for a plan, keyed by product id."""

    def __init__(self, plan: PlanDefinition | None = None):
        self._plan = plan
        self._items: dict[int, SelectionItem] = {}

    @property
    def plan(self) -> PlanDefinition | None:
        return self._plan

    @property
    def items(self) -> list[SelectionItem]:
        return list(self._items.values())

    @property
    def is_empty(self) -> bool:
        return not self._items

    def attach_plan(self, plan: PlanDefinition) -> None:
        """Attach a plan and drop any choices made for a previous one."""
        self._plan = plan
        self._items.clear()

    def get(self, product_id: int) -> SelectionItem | None:
        return self._items.get(product_id)

    def add_item(self, product: ProductRef, quantity: int = 1) -> SelectionItem:
        """Insert a new product.  Existing entries must use ``update_quantity``."""
        if product.id in self._items:
            raise DuplicateItemError(product.id)
        if quantity < 1:
            raise InvalidQuantityError(quantity)
        if self._plan is not None:
            self._check_customizable(product)

        item = SelectionItem(product=product, quantity=quantity)
        self._items[product.id] = item
        return item

    def remove_item(self, product_id: int) -> None:
        self._items.pop(product_id, None)

    def update_quantity(self, product_id: int, quantity: int) -> SelectionItem:
        """Set the quantity of an existing entry.  Use ``remove_item`` to drop it."""
        if quantity < 1:
            raise InvalidQuantityError(quantity)
        item = self._items.get(product_id)
        if item is None:
            raise ResourceNotFoundError("SelectionItem", product_id)
        item.quantity = quantity
        return item

    def clear(self) -> None:
        self._items.clear()
        self._plan = None

    def category_count(self, category: str) -> int:
        return sum(item.quantity for item in self.items_by_category(category))

    def items_by_category(self, category: str) -> list[SelectionItem]:
        return [item for item in self._items.values() if item.product.category == category]

    def to_payload_items(self) -> list[dict]:
        return [
            {"product_id": item.product.id, "quantity": item.quantity}
            for item in self._items.values()
        ]

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _check_customizable(self, product: ProductRef) -> None:
        rules = load_rules(self._plan)
        if product.id in rules.fixed_product_ids():
            raise ProductNotCustomizableError(product.id, "it is already a fixed item of the plan")
        if product.category not in rules.offered_categories():
            logger.debug(
                "Rejected product id=%s: category '%s' not offered by plan '%s'",
                product.id, product.category, self._plan.slug,
            )
            raise ProductNotCustomizableError(
                product.id, f"category '{product.category}' is not offered",
            )
