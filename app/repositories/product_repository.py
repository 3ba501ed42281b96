"""Product repository."""

from app.domain.models import OrderItem, PlanFixedItem, Product, SubscriptionItem
from app.repositories.base import BaseRepository


class ProductRepository(BaseRepository[Product]):
    """Data access for Product records."""

    def __init__(self):
        super().__init__(Product)

    def get_catalog(
        self, category: str | None = None, available_only: bool = False,
    ) -> list[Product]:
        """Return products, optionally filtered by category and availability."""
        query = Product.query
        if category:
            query = query.filter_by(product_type=category)
        if available_only:
            query = query.filter(Product.is_available.is_(True), Product.stock_quantity > 0)
        return query.order_by(Product.name).all()

    def get_low_stock(self, threshold: int) -> list[Product]:
        """Return products whose stock is at or below ``threshold``."""
        return (
            Product.query
            .filter(Product.stock_quantity <= threshold)
            .order_by(Product.stock_quantity, Product.name)
            .all()
        )

    def get_fixed_plan_ids(self, product_id: int) -> list[int]:
        """Return ids of plans that ship this product as a fixed item."""
        rows = PlanFixedItem.query.filter_by(product_id=product_id).all()
        return sorted({row.plan_id for row in rows})

    def count_history_references(self, product_id: int) -> dict:
        """Count order and subscription lines that reference this product."""
        return {
            "order_items": OrderItem.query.filter_by(product_id=product_id).count(),
            "subscription_items": SubscriptionItem.query.filter_by(product_id=product_id).count(),
        }

    def decrement_stock(self, product: Product, quantity: int) -> Product:
        """Lower stock by ``quantity``, never below zero."""
        return self.update(product, stock_quantity=max(0, product.stock_quantity - quantity))
