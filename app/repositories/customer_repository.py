"""Customer repository."""

from sqlalchemy import func

from app.domain.models import Customer
from app.repositories.base import BaseRepository


class CustomerRepository(BaseRepository[Customer]):
    """Data access for Customer records."""

    def __init__(self):
        super().__init__(Customer)

    def get_by_email(self, email: str) -> Customer | None:
        """Find a customer by their email address (case-insensitive)."""
        return Customer.query.filter(func.lower(Customer.email) == email.lower()).first()

    def get_by_role(self, role: str | None = None) -> list[Customer]:
        """Return users, optionally only those with a given role."""
        query = Customer.query
        if role:
            query = query.filter_by(role=role)
        return query.order_by(Customer.id).all()
