"""Customer service — accounts and checkout customer resolution."""

import logging

import bcrypt

from app.domain.exceptions import (
    AuthenticationRequiredError,
    ConflictError,
    ResourceNotFoundError,
    ValidationError,
)
from app.repositories.customer_repository import CustomerRepository
from app.repositories.order_repository import OrderRepository
from app.repositories.subscription_repository import SubscriptionRepository

logger = logging.getLogger(__name__)

PROFILE_FIELDS = ("name", "phone", "address", "delivery_instructions")
INVALID_CREDENTIALS = "Invalid email or password"


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def check_password(password: str | None, password_hash: str | None) -> bool:
    if not password or not password_hash:
        return False
    return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))


class CustomerService:
    """Manages customer accounts and their history."""

    def __init__(self):
        self._customer_repo = CustomerRepository()
        self._subscription_repo = SubscriptionRepository()
        self._order_repo = OrderRepository()

    # ------------------------------------------------------------------
    # Customer operations
    # ------------------------------------------------------------------

    def register_customer(
        self,
        name: str,
        email: str,
        password: str,
        phone: str | None = None,
        address: str | None = None,
        delivery_instructions: str | None = None,
    ) -> dict:
        """Create a new customer account and return its dict representation."""
        customer = self._create_account(
            name=name,
            email=email,
            password=password,
            phone=phone,
            address=address,
            delivery_instructions=delivery_instructions,
        )
        self._customer_repo.commit()
        return customer.to_dict()

    def authenticate(self, email: str, password: str) -> dict:
        """Return the customer whose email and password match, else 401."""
        customer = self._customer_repo.get_by_email(email)
        if not customer or not check_password(password, customer.password_hash):
            logger.warning("Failed login for email=%s", email)
            raise AuthenticationRequiredError(INVALID_CREDENTIALS)
        return customer.to_dict()

    def get_customer(self, customer_id: int) -> dict:
        """Fetch a customer by ID or raise not-found."""
        return self._get_or_raise(customer_id).to_dict()

    def list_customers(self, role: str | None = None) -> list[dict]:
        return [c.to_dict() for c in self._customer_repo.get_by_role(role)]

    def update_customer(self, customer_id: int, **fields) -> dict:
        """Update profile fields (and role) of a customer."""
        customer = self._get_or_raise(customer_id)
        changes = {key: value for key, value in fields.items() if value is not None}
        customer = self._customer_repo.update(customer, **changes)
        self._customer_repo.commit()
        logger.info("Updated customer id=%s fields=%s", customer_id, sorted(changes))
        return customer.to_dict()

    def get_customer_subscriptions(self, customer_id: int) -> list[dict]:
        self._get_or_raise(customer_id)
        return [s.to_dict() for s in self._subscription_repo.get_by_customer(customer_id)]

    def get_customer_orders(self, customer_id: int) -> list[dict]:
        self._get_or_raise(customer_id)
        return [o.to_dict() for o in self._order_repo.get_by_customer(customer_id)]

    # ------------------------------------------------------------------
    # Checkout support
    # ------------------------------------------------------------------

    def resolve_checkout_customer(
        self,
        customer_id: int | None,
        details: dict | None,
        create_account: bool,
        password: str | None = None,
    ):
        """Return the ORM customer a checkout is placed for.

        An existing ``customer_id`` must be confirmed with the account password
        (``password`` or ``details["password"]``) before its profile is
        refreshed from ``details``; otherwise ``create_account`` with a password
        registers a new customer.  Does not commit.
        """
        if customer_id:
            customer = self._customer_repo.get_by_id(customer_id)
            password = password or (details or {}).get("password")
            if not customer or not check_password(password, customer.password_hash):
                logger.warning("Rejected checkout for customer id=%s: bad credentials", customer_id)
                raise AuthenticationRequiredError(INVALID_CREDENTIALS)
            if details:
                profile = {key: details[key] for key in PROFILE_FIELDS if details.get(key)}
                self._customer_repo.update(customer, **profile)
            return customer

        if create_account and details:
            if not details.get("password"):
                raise ValidationError("A password is required to create an account")
            return self._create_account(**details)

        raise AuthenticationRequiredError()

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _get_or_raise(self, customer_id: int):
        customer = self._customer_repo.get_by_id(customer_id)
        if not customer:
            raise ResourceNotFoundError("Customer", customer_id)
        return customer

    def _create_account(self, name: str, email: str, password: str, **profile):
        if self._customer_repo.get_by_email(email):
            raise ConflictError("Email already registered. Please log in.", details={"email": email})

        customer = self._customer_repo.create(
            name=name,
            email=email,
            password_hash=hash_password(password),
            **{key: value for key, value in profile.items() if key in PROFILE_FIELDS},
        )
        logger.info("Created customer id=%s", customer.id)
        return customer
