"""Order service — one-time purchases."""

import logging

from app.domain.exceptions import ResourceNotFoundError, ValidationError
from app.domain.models import OrderItem
from app.domain.pricing_engine import PricingEngine
from app.repositories.order_repository import OrderRepository
from app.repositories.product_repository import ProductRepository
from app.services.customer_service import CustomerService
from app.services.product_service import ProductService

logger = logging.getLogger(__name__)


class OrderService:
    """Creates and manages one-time orders; totals are always priced server side."""

    def __init__(self):
        self._order_repo = OrderRepository()
        self._product_repo = ProductRepository()
        self._product_svc = ProductService()
        self._customer_svc = CustomerService()
        self._pricing_engine = PricingEngine()

    def create_order(
        self,
        items: list[dict],
        customer_id: int | None = None,
        customer: dict | None = None,
        create_account: bool = False,
        password: str | None = None,
        shipping_address: str | None = None,
        delivery_instructions: str | None = None,
    ) -> dict:
        """Create an order for the given product lines."""
        quantities: dict[int, int] = {}
        for item in items:
            quantities[item["product_id"]] = quantities.get(item["product_id"], 0) + item["quantity"]
        products = self._product_svc.resolve_purchasable(quantities)

        breakdown = self._pricing_engine.price_order(
            [(products[pid].to_ref(), qty) for pid, qty in quantities.items()],
        )

        owner = self._customer_svc.resolve_checkout_customer(
            customer_id, customer, create_account, password,
        )
        address = shipping_address or owner.address
        if not address:
            raise ValidationError("A shipping address is required")

        order = self._order_repo.create(
            customer_id=owner.id,
            status="pending",
            payment_status="pending",
            total_amount=breakdown.total,
            shipping_address=address,
            delivery_instructions=delivery_instructions or owner.delivery_instructions,
        )
        for line in breakdown.lines:
            order.items.append(
                OrderItem(
                    product_id=line.product_id,
                    quantity=line.quantity,
                    unit_price=line.unit_price,
                    total_price=line.total,
                ),
            )
            self._product_repo.decrement_stock(products[line.product_id], line.quantity)
        self._order_repo.commit()

        logger.info(
            "Order created id=%s customer=%s total=%s", order.id, owner.id, breakdown.total,
        )
        return order.to_dict()

    def get_order(self, order_id: int) -> dict:
        return self._get_or_raise(order_id).to_dict()

    def list_orders(self, status: str | None = None) -> list[dict]:
        """List orders with an optional status filter."""
        return [o.to_dict() for o in self._order_repo.filter_orders(status)]

    def update_status(
        self, order_id: int, status: str, payment_status: str | None = None,
    ) -> dict:
        """Change an order's fulfilment (and optionally payment) status."""
        order = self._get_or_raise(order_id)
        if order.status == "cancelled" and status != "cancelled":
            raise ValidationError("Cancelled orders cannot be reopened")

        fields = {"status": status}
        if payment_status:
            fields["payment_status"] = payment_status
        order = self._order_repo.update(order, **fields)
        self._order_repo.commit()
        logger.info("Order id=%s status changed to '%s'", order_id, status)
        return order.to_dict()

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _get_or_raise(self, order_id: int):
        order = self._order_repo.get_by_id(order_id)
        if not order:
            raise ResourceNotFoundError("Order", order_id)
        return order
