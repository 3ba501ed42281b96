"""Rule Engine — validates a basket selection against its plan's rules.

Pure business logic with no Flask or database dependency.  Every call site
(quote, storefront checkout, client-side submission) delegates here.
"""

import logging

from app.domain.exceptions import IncompleteCustomizationError
from app.domain.rule_catalog import CATEGORIES, load_rules
from app.domain.selection import SelectionState

logger = logging.getLogger(__name__)

NO_PLAN_SELECTED = "no plan selected"


class RuleEngine:
    """Checks per-category [min, max] bounds for the attached plan.

    Categories without a rule, or whose rule has ``max_quantity == 0``, are
    ignored entirely.
    """

    def get_validation_errors(self, selection: SelectionState) -> list[str]:
        """Return the human-readable violations (empty when valid)."""
        if selection.plan is None:
            return [NO_PLAN_SELECTED]

        rules = load_rules(selection.plan).rules
        violations: list[str] = []

        for category in CATEGORIES:
            rule = rules.get(category)
            if rule is None or not rule.enabled:
                continue
            self._validate_category(
                category, rule.min_quantity, rule.max_quantity,
                selection.category_count(category), violations,
            )

        return violations

    def is_valid(self, selection: SelectionState) -> bool:
        return not self.get_validation_errors(selection)

    def validate(self, selection: SelectionState) -> None:
        """Raise ``IncompleteCustomizationError`` if any rule is broken."""
        violations = self.get_validation_errors(selection)
        if violations:
            logger.warning("Customization violations: %s", violations)
            raise IncompleteCustomizationError(violations)

    # ------------------------------------------------------------------
    # Private validation helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _validate_category(
        category: str,
        min_quantity: int,
        max_quantity: int,
        count: int,
        violations: list[str],
    ) -> None:
        if count < min_quantity:
            violations.append(
                f"{category} requires at least {min_quantity} items (currently {count})",
            )
        if count > max_quantity:
            violations.append(
                f"{category} allows at most {max_quantity} items (currently {count})",
            )
