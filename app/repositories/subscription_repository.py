"""User subscription repository."""

from app.domain.models import UserSubscription
from app.repositories.base import BaseRepository


class SubscriptionRepository(BaseRepository[UserSubscription]):
    """Data access for UserSubscription records."""

    def __init__(self):
        super().__init__(UserSubscription)

    def get_by_customer(self, customer_id: int) -> list[UserSubscription]:
        """Return all subscriptions for a customer, newest first."""
        return (
            UserSubscription.query
            .filter_by(customer_id=customer_id)
            .order_by(UserSubscription.id.desc())
            .all()
        )

    def filter_subscriptions(self, status: str | None = None) -> list[UserSubscription]:
        """Flexible filtering for dashboard views."""
        query = UserSubscription.query
        if status:
            query = query.filter(UserSubscription.status == status)
        return query.order_by(UserSubscription.id).all()
