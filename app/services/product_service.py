"""Product service — catalog and inventory use cases."""

import logging

from app.domain.exceptions import ConflictError, ResourceNotFoundError, ValidationError
from app.repositories.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class ProductService:
    """Manages products and their stock."""

    def __init__(self):
        self._repo = ProductRepository()

    def create_product(self, **fields) -> dict:
        """Create a new product."""
        product = self._repo.create(**fields)
        self._repo.commit()
        logger.info("Created product id=%s name='%s'", product.id, product.name)
        return product.to_dict()

    def update_product(self, product_id: int, **fields) -> dict:
        """Update an existing product."""
        product = self._get_or_raise(product_id)
        product = self._repo.update(product, **fields)
        self._repo.commit()
        logger.info("Updated product id=%s", product_id)
        return product.to_dict()

    def delete_product(self, product_id: int) -> None:
        """Delete a product no plan, order or subscription references."""
        product = self._get_or_raise(product_id)
        plan_ids = self._repo.get_fixed_plan_ids(product_id)
        if plan_ids:
            raise ConflictError(
                "Product is a fixed item of one or more plans",
                details={"plan_ids": plan_ids},
            )
        history = self._repo.count_history_references(product_id)
        if any(history.values()):
            raise ConflictError(
                "Product has order or subscription history; mark it unavailable instead",
                details=history,
            )
        self._repo.delete(product)
        self._repo.commit()
        logger.info("Deleted product id=%s", product_id)

    def get_product(self, product_id: int) -> dict:
        return self._get_or_raise(product_id).to_dict()

    def list_products(
        self, category: str | None = None, available_only: bool = False,
    ) -> list[dict]:
        """Return the catalog, optionally only what customers can buy."""
        products = self._repo.get_catalog(category, available_only)
        return [p.to_dict() for p in products]

    def update_stock(
        self, product_id: int, stock_quantity: int, is_available: bool | None = None,
    ) -> dict:
        """Set the stock level (and optionally availability) of a product."""
        product = self._get_or_raise(product_id)
        fields = {"stock_quantity": stock_quantity}
        if is_available is not None:
            fields["is_available"] = is_available
        product = self._repo.update(product, **fields)
        self._repo.commit()
        logger.info("Stock for product id=%s set to %s", product_id, stock_quantity)
        return product.to_dict()

    def get_low_stock(self, threshold: int) -> list[dict]:
        return [p.to_dict() for p in self._repo.get_low_stock(threshold)]

    def resolve_purchasable(self, quantities: dict[int, int]) -> dict:
        """Fetch products for ``{product_id: quantity}`` and check they can be sold.

        Returns the ORM products keyed by id.
        """
        if not quantities:
            return {}

        products = {p.id: p for p in self._repo.get_many_by_ids(list(quantities))}
        missing = sorted(set(quantities) - set(products))
        if missing:
            raise ValidationError(
                f"Products not found: {missing}",
                details={"missing_product_ids": missing},
            )

        unavailable = sorted(
            product_id for product_id, quantity in quantities.items()
            if not products[product_id].is_available
            or products[product_id].stock_quantity < quantity
        )
        if unavailable:
            raise ValidationError(
                "Some products are unavailable or out of stock",
                details={"unavailable_product_ids": unavailable},
            )

        return products

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _get_or_raise(self, product_id: int):
        product = self._repo.get_by_id(product_id)
        if not product:
            raise ResourceNotFoundError("Product", product_id)
        return product
