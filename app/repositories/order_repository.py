"""Order repository."""

from decimal import Decimal

from sqlalchemy import func

from app.domain.models import Order
from app.extensions import db
from app.repositories.base import BaseRepository


class OrderRepository(BaseRepository[Order]):
    """Data access for Order records."""

    def __init__(self):
        super().__init__(Order)

    def get_by_customer(self, customer_id: int) -> list[Order]:
        """Return all orders for a customer, newest first."""
        return (
            Order.query
            .filter_by(customer_id=customer_id)
            .order_by(Order.id.desc())
            .all()
        )

    def filter_orders(self, status: str | None = None) -> list[Order]:
        """Flexible filtering for dashboard views."""
        query = Order.query
        if status:
            query = query.filter(Order.status == status)
        return query.order_by(Order.id).all()

    def total_revenue(self) -> Decimal:
        """Sum of ``total_amount`` over orders that were not cancelled."""
        total = (
            db.session.query(func.coalesce(func.sum(Order.total_amount), 0))
            .filter(Order.status != "cancelled")
            .scalar()
        )
        return Decimal(str(total))
