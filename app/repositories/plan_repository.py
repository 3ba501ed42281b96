"""Subscription plan repository."""

from app.domain.models import SubscriptionPlan, UserSubscription
from app.repositories.base import BaseRepository

LIVE_SUBSCRIPTION_STATUSES = ("active", "paused")


class PlanRepository(BaseRepository[SubscriptionPlan]):
    """Data access for SubscriptionPlan records."""

    def __init__(self):
        super().__init__(SubscriptionPlan)

    def get_by_slug(self, slug: str) -> SubscriptionPlan | None:
        """Find a plan by its URL slug."""
        return SubscriptionPlan.query.filter_by(slug=slug).first()

    def count_live_subscriptions(self, plan_id: int) -> int:
        """Count active or paused subscriptions that reference the plan."""
        return (
            UserSubscription.query
            .filter(
                UserSubscription.plan_id == plan_id,
                UserSubscription.status.in_(LIVE_SUBSCRIPTION_STATUSES),
            )
            .count()
        )
