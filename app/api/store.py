"""Store API namespace — endpoints for the customer-facing shop.

All routes delegate to service-layer classes. Controllers are kept thin
(parse → validate → call service → respond).
"""

from flask import request
from flask_restx import Namespace, Resource, fields
from pydantic import ValidationError as PydanticValidationError

from app.schemas.checkout_schema import (
    OrderCheckoutSchema,
    QuoteSchema,
    SubscriptionCheckoutSchema,
)
from app.schemas.customer_schema import CustomerCreateSchema, CustomerLoginSchema
from app.schemas.response import (
    app_error_response,
    success_response,
    validation_error_response,
)
from app.services.customer_service import CustomerService
from app.services.order_service import OrderService
from app.services.plan_service import PlanService
from app.services.product_service import ProductService
from app.services.subscription_service import SubscriptionService
from app.domain.exceptions import AppError

ns = Namespace("store", description="Customer-facing shop APIs")

# ---------------------------------------------------------------------------
# Swagger models (for documentation only)
# ---------------------------------------------------------------------------
selection_item_model = ns.model("SelectionItem", {
    "product_id": fields.Integer(required=True),
    "quantity": fields.Integer(required=True, min=1),
})

customer_details_model = ns.model("CustomerDetails", {
    "name": fields.String(required=True),
    "email": fields.String(required=True),
    "phone": fields.String(required=True),
    "address": fields.String(required=True),
    "delivery_instructions": fields.String(),
    "password": fields.String(description="Required when create_account is true"),
})

quote_model = ns.model("QuoteInput", {
    "items": fields.List(fields.Nested(selection_item_model)),
})

subscription_checkout_model = ns.model("SubscriptionCheckoutInput", {
    "plan_id": fields.Integer(required=True),
    "items": fields.List(fields.Nested(selection_item_model)),
    "customer_id": fields.Integer(description="Existing customer"),
    "password": fields.String(description="Account password, required with customer_id"),
    "customer": fields.Nested(customer_details_model),
    "create_account": fields.Boolean(default=False),
})

order_checkout_model = ns.model("OrderCheckoutInput", {
    "items": fields.List(fields.Nested(selection_item_model), required=True),
    "customer_id": fields.Integer(description="Existing customer"),
    "password": fields.String(description="Account password, required with customer_id"),
    "customer": fields.Nested(customer_details_model),
    "create_account": fields.Boolean(default=False),
    "shipping_address": fields.String(),
    "delivery_instructions": fields.String(),
})

register_model = ns.model("CustomerRegistration", {
    "name": fields.String(required=True),
    "email": fields.String(required=True),
    "password": fields.String(required=True),
    "phone": fields.String(),
    "address": fields.String(),
    "delivery_instructions": fields.String(),
})

login_model = ns.model("CustomerLogin", {
    "email": fields.String(required=True),
    "password": fields.String(required=True),
})

# ---------------------------------------------------------------------------
# Service instances
# ---------------------------------------------------------------------------
_plan_svc = PlanService()
_product_svc = ProductService()
_customer_svc = CustomerService()
_subscription_svc = SubscriptionService()
_order_svc = OrderService()


# ---------------------------------------------------------------------------
# Catalog routes
# ---------------------------------------------------------------------------
@ns.route("/plans")
class PlanList(Resource):
    """List subscription plans."""

    @ns.doc("list_plans")
    def get(self):
        """Fetch all plans with fixed items and customization rules."""
        return success_response(_plan_svc.get_all_plans())


@ns.route("/plans/<string:slug>")
@ns.param("slug", "The plan slug")
class PlanDetail(Resource):
    """View one plan."""

    @ns.doc("get_plan")
    def get(self, slug: str):
        """Fetch a plan by slug."""
        try:
            return success_response(_plan_svc.get_plan_by_slug(slug))
        except AppError as err:
            return app_error_response(err)


@ns.route("/plans/<string:slug>/quote")
@ns.param("slug", "The plan slug")
class PlanQuote(Resource):
    """Validate and price a basket for a plan."""

    @ns.doc("quote_plan")
    @ns.expect(quote_model)
    def post(self, slug: str):
        """Return validation errors and a cost breakdown; nothing is saved."""
        try:
            data = QuoteSchema(**(request.get_json() or {}))
            result = _subscription_svc.quote(slug, [i.model_dump() for i in data.items])
            return success_response(result)
        except PydanticValidationError as err:
            return validation_error_response(err)
        except AppError as err:
            return app_error_response(err)


@ns.route("/products")
class ProductList(Resource):
    """List products customers can buy."""

    @ns.doc("list_products")
    def get(self):
        """Available products (optional: ?category=normal|exotic)."""
        category = request.args.get("category")
        return success_response(_product_svc.list_products(category, available_only=True))


# ---------------------------------------------------------------------------
# Checkout routes
# ---------------------------------------------------------------------------
@ns.route("/checkout/subscription")
class SubscriptionCheckout(Resource):
    """Create a subscription from a customised plan."""

    @ns.doc("checkout_subscription")
    @ns.expect(subscription_checkout_model)
    def post(self):
        """Submit a subscription; the basket is re-validated and re-priced."""
        try:
            data = SubscriptionCheckoutSchema(**(request.get_json() or {}))
            result = _subscription_svc.create_subscription(
                plan_id=data.plan_id,
                items=[i.model_dump() for i in data.items],
                customer_id=data.customer_id,
                customer=data.customer.model_dump() if data.customer else None,
                create_account=data.create_account,
                password=data.password,
            )
            return success_response(result, 201)
        except PydanticValidationError as err:
            return validation_error_response(err)
        except AppError as err:
            return app_error_response(err)


@ns.route("/checkout/order")
class OrderCheckout(Resource):
    """Place a one-time order."""

    @ns.doc("checkout_order")
    @ns.expect(order_checkout_model)
    def post(self):
        """Submit an order; totals are computed server side."""
        try:
            data = OrderCheckoutSchema(**(request.get_json() or {}))
            result = _order_svc.create_order(
                items=[i.model_dump() for i in data.items],
                customer_id=data.customer_id,
                customer=data.customer.model_dump() if data.customer else None,
                create_account=data.create_account,
                password=data.password,
                shipping_address=data.shipping_address,
                delivery_instructions=data.delivery_instructions,
            )
            return success_response(result, 201)
        except PydanticValidationError as err:
            return validation_error_response(err)
        except AppError as err:
            return app_error_response(err)


# ---------------------------------------------------------------------------
# Subscription self-service routes
# ---------------------------------------------------------------------------
@ns.route("/subscriptions/<int:subscription_id>")
@ns.param("subscription_id", "The subscription ID")
class SubscriptionDetail(Resource):
    """View subscription details."""

    @ns.doc("get_subscription")
    def get(self, subscription_id: int):
        """Fetch a subscription with its items and cost breakdown."""
        try:
            return success_response(_subscription_svc.get_subscription(subscription_id))
        except AppError as err:
            return app_error_response(err)


@ns.route("/subscriptions/<int:subscription_id>/pause")
@ns.param("subscription_id", "The subscription ID")
class SubscriptionPause(Resource):
    """Pause an active subscription."""

    @ns.doc("pause_subscription")
    def post(self, subscription_id: int):
        try:
            return success_response(_subscription_svc.pause(subscription_id))
        except AppError as err:
            return app_error_response(err)


@ns.route("/subscriptions/<int:subscription_id>/resume")
@ns.param("subscription_id", "The subscription ID")
class SubscriptionResume(Resource):
    """Resume a paused subscription."""

    @ns.doc("resume_subscription")
    def post(self, subscription_id: int):
        try:
            return success_response(_subscription_svc.resume(subscription_id))
        except AppError as err:
            return app_error_response(err)


@ns.route("/subscriptions/<int:subscription_id>/cancel")
@ns.param("subscription_id", "The subscription ID")
class SubscriptionCancel(Resource):
    """Cancel a subscription."""

    @ns.doc("cancel_subscription")
    def post(self, subscription_id: int):
        try:
            return success_response(_subscription_svc.cancel(subscription_id))
        except AppError as err:
            return app_error_response(err)


# ---------------------------------------------------------------------------
# Customer routes
# ---------------------------------------------------------------------------
@ns.route("/customers")
class CustomerRegister(Resource):
    """Register a customer account."""

    @ns.doc("register_customer")
    @ns.expect(register_model)
    def post(self):
        """Create a new customer account."""
        try:
            data = CustomerCreateSchema(**(request.get_json() or {}))
            return success_response(_customer_svc.register_customer(**data.model_dump()), 201)
        except PydanticValidationError as err:
            return validation_error_response(err)
        except AppError as err:
            return app_error_response(err)


@ns.route("/customers/login")
class CustomerLogin(Resource):
    """Check an account's credentials."""

    @ns.doc("login_customer")
    @ns.expect(login_model)
    def post(self):
        """Return the customer when email and password match."""
        try:
            data = CustomerLoginSchema(**(request.get_json() or {}))
            return success_response(_customer_svc.authenticate(data.email, data.password))
        except PydanticValidationError as err:
            return validation_error_response(err)
        except AppError as err:
            return app_error_response(err)


@ns.route("/customers/<int:customer_id>/subscriptions")
@ns.param("customer_id", "The customer ID")
class CustomerSubscriptions(Resource):
    """A customer's subscriptions."""

    @ns.doc("list_customer_subscriptions")
    def get(self, customer_id: int):
        try:
            return success_response(_customer_svc.get_customer_subscriptions(customer_id))
        except AppError as err:
            return app_error_response(err)


@ns.route("/customers/<int:customer_id>/orders")
@ns.param("customer_id", "The customer ID")
class CustomerOrders(Resource):
    """A customer's order history."""

    @ns.doc("list_customer_orders")
    def get(self, customer_id: int):
        try:
            return success_response(_customer_svc.get_customer_orders(customer_id))
        except AppError as err:
            return app_error_response(err)
