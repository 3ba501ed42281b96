"""Stats service — headline numbers for the admin dashboard."""

from app.domain.pricing_engine import format_money
from app.repositories.customer_repository import CustomerRepository
from app.repositories.order_repository import OrderRepository
from app.repositories.plan_repository import PlanRepository
from app.repositories.product_repository import ProductRepository
from app.repositories.subscription_repository import SubscriptionRepository


class StatsService:
    """Aggregates counts across the shop."""

    def __init__(self):
        self._product_repo = ProductRepository()
        self._plan_repo = PlanRepository()
        self._customer_repo = CustomerRepository()
        self._sub_repo = SubscriptionRepository()
        self._order_repo = OrderRepository()

    def get_stats(self) -> dict:
        return {
            "products": self._product_repo.count(),
            "plans": self._plan_repo.count(),
            "customers": self._customer_repo.count(role="member"),
            "active_subscriptions": self._sub_repo.count(status="active"),
            "paused_subscriptions": self._sub_repo.count(status="paused"),
            "orders": self._order_repo.count(),
            "pending_orders": self._order_repo.count(status="pending"),
            "revenue": format_money(self._order_repo.total_revenue()),
        }
