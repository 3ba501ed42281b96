"""Dashboard API namespace — endpoints for administration.

All routes delegate to service-layer classes. Controllers are kept thin
(parse → validate → call service → respond).
"""

from flask import current_app, request
from flask_restx import Namespace, Resource, fields
from pydantic import ValidationError as PydanticValidationError

from app.schemas.customer_schema import CustomerUpdateSchema
from app.schemas.plan_schema import PlanCreateSchema
from app.schemas.product_schema import ProductCreateSchema, ProductStockUpdateSchema
from app.schemas.subscription_schema import (
    OrderStatusUpdateSchema,
    SubscriptionStatusUpdateSchema,
)
from app.schemas.response import (
    app_error_response,
    success_response,
    validation_error_response,
)
from app.services.customer_service import CustomerService
from app.services.order_service import OrderService
from app.services.plan_service import PlanService
from app.services.product_service import ProductService
from app.services.stats_service import StatsService
from app.services.subscription_service import SubscriptionService
from app.domain.exceptions import AppError

ns = Namespace("dashboard", description="Dashboard / Administration APIs")

# ---------------------------------------------------------------------------
# Swagger models
# ---------------------------------------------------------------------------
product_model = ns.model("ProductInput", {
    "name": fields.String(required=True),
    "description": fields.String(),
    "price": fields.String(required=True, description="Decimal string, e.g. '5.90'"),
    "product_type": fields.String(required=True, enum=["normal", "exotic"]),
    "stock_quantity": fields.Integer(default=0),
    "is_available": fields.Boolean(default=True),
    "image_url": fields.String(),
})

stock_model = ns.model("StockUpdate", {
    "stock_quantity": fields.Integer(required=True),
    "is_available": fields.Boolean(),
})

fixed_item_model = ns.model("PlanFixedItemInput", {
    "product_id": fields.Integer(required=True),
    "quantity": fields.Integer(default=1),
})

rule_model = ns.model("PlanCustomizableRuleInput", {
    "product_type": fields.String(required=True, enum=["normal", "exotic"]),
    "min_quantity": fields.Integer(default=0),
    "max_quantity": fields.Integer(required=True),
})

plan_model = ns.model("PlanInput", {
    "name": fields.String(required=True),
    "slug": fields.String(required=True),
    "description": fields.String(),
    "price": fields.String(required=True, description="Base monthly price"),
    "image_url": fields.String(),
    "fixed_items": fields.List(fields.Nested(fixed_item_model)),
    "customizable_rules": fields.List(fields.Nested(rule_model)),
})

subscription_status_model = ns.model("SubscriptionStatusUpdate", {
    "status": fields.String(required=True, enum=["active", "paused", "cancelled"]),
})

order_status_model = ns.model("OrderStatusUpdate", {
    "status": fields.String(
        required=True,
        enum=["pending", "processing", "shipped", "delivered", "cancelled"],
    ),
    "payment_status": fields.String(enum=["pending", "paid", "refunded", "failed"]),
})

user_model = ns.model("UserUpdate", {
    "name": fields.String(),
    "phone": fields.String(),
    "address": fields.String(),
    "delivery_instructions": fields.String(),
    "role": fields.String(enum=["member", "admin"]),
})

# ---------------------------------------------------------------------------
# Service instances
# ---------------------------------------------------------------------------
_product_svc = ProductService()
_plan_svc = PlanService()
_customer_svc = CustomerService()
_subscription_svc = SubscriptionService()
_order_svc = OrderService()
_stats_svc = StatsService()


# ---------------------------------------------------------------------------
# Product / inventory routes
# ---------------------------------------------------------------------------
@ns.route("/products")
class ProductList(Resource):
    """Create and list products."""

    @ns.doc("list_products")
    def get(self):
        """List all products (optional: ?category=)."""
        return success_response(_product_svc.list_products(request.args.get("category")))

    @ns.doc("create_product")
    @ns.expect(product_model)
    def post(self):
        """Create a new product."""
        try:
            data = ProductCreateSchema(**(request.get_json() or {}))
            return success_response(_product_svc.create_product(**data.model_dump()), 201)
        except PydanticValidationError as err:
            return validation_error_response(err)
        except AppError as err:
            return app_error_response(err)


@ns.route("/products/<int:product_id>")
@ns.param("product_id", "The product ID")
class ProductDetail(Resource):
    """View, update or delete a product."""

    @ns.doc("get_product")
    def get(self, product_id: int):
        try:
            return success_response(_product_svc.get_product(product_id))
        except AppError as err:
            return app_error_response(err)

    @ns.doc("update_product")
    @ns.expect(product_model)
    def put(self, product_id: int):
        """Update an existing product."""
        try:
            data = ProductCreateSchema(**(request.get_json() or {}))
            return success_response(_product_svc.update_product(product_id, **data.model_dump()))
        except PydanticValidationError as err:
            return validation_error_response(err)
        except AppError as err:
            return app_error_response(err)

    @ns.doc("delete_product")
    def delete(self, product_id: int):
        """Delete a product no plan, order or subscription references."""
        try:
            _product_svc.delete_product(product_id)
            return success_response({"id": product_id})
        except AppError as err:
            return app_error_response(err)


@ns.route("/products/<int:product_id>/stock")
@ns.param("product_id", "The product ID")
class ProductStock(Resource):
    """Adjust inventory for a product."""

    @ns.doc("update_stock")
    @ns.expect(stock_model)
    def patch(self, product_id: int):
        try:
            data = ProductStockUpdateSchema(**(request.get_json() or {}))
            return success_response(_product_svc.update_stock(product_id, **data.model_dump()))
        except PydanticValidationError as err:
            return validation_error_response(err)
        except AppError as err:
            return app_error_response(err)


@ns.route("/inventory")
class Inventory(Resource):
    """Low-stock report."""

    @ns.doc("low_stock")
    def get(self):
        """Products at or below the threshold (?threshold= overrides config)."""
        threshold = request.args.get(
            "threshold", type=int, default=current_app.config["LOW_STOCK_THRESHOLD"],
        )
        return success_response({
            "threshold": threshold,
            "products": _product_svc.get_low_stock(threshold),
        })


# ---------------------------------------------------------------------------
# Plan routes
# ---------------------------------------------------------------------------
@ns.route("/plans")
class PlanList(Resource):
    """Create and list subscription plans."""

    @ns.doc("list_plans")
    def get(self):
        """List all plans."""
        return success_response(_plan_svc.get_all_plans())

    @ns.doc("create_plan")
    @ns.expect(plan_model)
    def post(self):
        """Create a new subscription plan with fixed items and rules."""
        try:
            data = PlanCreateSchema(**(request.get_json() or {}))
            return success_response(_plan_svc.create_plan(**data.model_dump()), 201)
        except PydanticValidationError as err:
            return validation_error_response(err)
        except AppError as err:
            return app_error_response(err)


@ns.route("/plans/<int:plan_id>")
@ns.param("plan_id", "The plan ID")
class PlanDetail(Resource):
    """View, update or delete a subscription plan."""

    @ns.doc("get_plan")
    def get(self, plan_id: int):
        try:
            return success_response(_plan_svc.get_plan(plan_id))
        except AppError as err:
            return app_error_response(err)

    @ns.doc("update_plan")
    @ns.expect(plan_model)
    def put(self, plan_id: int):
        """Update a plan, replacing its fixed items and rules."""
        try:
            data = PlanCreateSchema(**(request.get_json() or {}))
            return success_response(_plan_svc.update_plan(plan_id, **data.model_dump()))
        except PydanticValidationError as err:
            return validation_error_response(err)
        except AppError as err:
            return app_error_response(err)

    @ns.doc("delete_plan")
    def delete(self, plan_id: int):
        """Delete a plan without active or paused subscriptions."""
        try:
            _plan_svc.delete_plan(plan_id)
            return success_response({"id": plan_id})
        except AppError as err:
            return app_error_response(err)


# ---------------------------------------------------------------------------
# Order routes
# ---------------------------------------------------------------------------
@ns.route("/orders")
class OrderList(Resource):
    """List orders."""

    @ns.doc("list_orders")
    def get(self):
        """List orders (?status=)."""
        return success_response(_order_svc.list_orders(request.args.get("status")))


@ns.route("/orders/<int:order_id>")
@ns.param("order_id", "The order ID")
class OrderDetail(Resource):
    """View one order."""

    @ns.doc("get_order")
    def get(self, order_id: int):
        try:
            return success_response(_order_svc.get_order(order_id))
        except AppError as err:
            return app_error_response(err)


@ns.route("/orders/<int:order_id>/status")
@ns.param("order_id", "The order ID")
class OrderStatusUpdate(Resource):
    """Update an order's status."""

    @ns.doc("update_order_status")
    @ns.expect(order_status_model)
    def patch(self, order_id: int):
        try:
            data = OrderStatusUpdateSchema(**(request.get_json() or {}))
            return success_response(_order_svc.update_status(order_id, **data.model_dump()))
        except PydanticValidationError as err:
            return validation_error_response(err)
        except AppError as err:
            return app_error_response(err)


# ---------------------------------------------------------------------------
# Subscription routes
# ---------------------------------------------------------------------------
@ns.route("/subscriptions")
class SubscriptionList(Resource):
    """List subscriptions with filters."""

    @ns.doc("list_subscriptions")
    def get(self):
        """List subscriptions (?status=)."""
        return success_response(
            _subscription_svc.list_subscriptions(request.args.get("status")),
        )


@ns.route("/subscriptions/<int:subscription_id>")
@ns.param("subscription_id", "The subscription ID")
class SubscriptionDetail(Resource):
    """View one subscription."""

    @ns.doc("get_subscription")
    def get(self, subscription_id: int):
        try:
            return success_response(_subscription_svc.get_subscription(subscription_id))
        except AppError as err:
            return app_error_response(err)


@ns.route("/subscriptions/<int:subscription_id>/status")
@ns.param("subscription_id", "The subscription ID")
class SubscriptionStatusUpdate(Resource):
    """Update a subscription's status."""

    @ns.doc("update_subscription_status")
    @ns.expect(subscription_status_model)
    def patch(self, subscription_id: int):
        """Change the status of a subscription."""
        try:
            data = SubscriptionStatusUpdateSchema(**(request.get_json() or {}))
            result = _subscription_svc.update_status(subscription_id, data.status)
            return success_response(result)
        except PydanticValidationError as err:
            return validation_error_response(err)
        except AppError as err:
            return app_error_response(err)


# ---------------------------------------------------------------------------
# User routes
# ---------------------------------------------------------------------------
@ns.route("/users")
class UserList(Resource):
    """List users."""

    @ns.doc("list_users")
    def get(self):
        """List users (?role=member|admin)."""
        return success_response(_customer_svc.list_customers(request.args.get("role")))


@ns.route("/users/<int:user_id>")
@ns.param("user_id", "The user ID")
class UserDetail(Resource):
    """View or edit a user."""

    @ns.doc("get_user")
    def get(self, user_id: int):
        try:
            return success_response(_customer_svc.get_customer(user_id))
        except AppError as err:
            return app_error_response(err)

    @ns.doc("update_user")
    @ns.expect(user_model)
    def put(self, user_id: int):
        try:
            data = CustomerUpdateSchema(**(request.get_json() or {}))
            return success_response(_customer_svc.update_customer(user_id, **data.model_dump()))
        except PydanticValidationError as err:
            return validation_error_response(err)
        except AppError as err:
            return app_error_response(err)


# ---------------------------------------------------------------------------
# Stats
# ---------------------------------------------------------------------------
@ns.route("/stats")
class Stats(Resource):
    """Headline numbers."""

    @ns.doc("get_stats")
    def get(self):
        return success_response(_stats_svc.get_stats())
