"""SQLAlchemy ORM models.

Money is stored as ``Numeric(10, 2)`` and serialised as decimal strings.
Plans keep their fixed items and per-category rules in child tables.
"""

from datetime import datetime, timezone

from app.domain.rule_catalog import PlanDefinition, ProductRef, load_rules
from app.extensions import db


def _utcnow():
    return datetime.now(timezone.utc)


def _money(value) -> str:
    return f"{value:.2f}"


# ---------------------------------------------------------------------------
# Customer
# ---------------------------------------------------------------------------
class Customer(db.Model):
    """A shop user; ``role`` distinguishes admins from members."""

    __tablename__ = "customers"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.Text, nullable=True)
    role = db.Column(db.String(20), default="member", nullable=False)
    phone = db.Column(db.String(20), nullable=True)
    address = db.Column(db.Text, nullable=True)
    delivery_instructions = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=_utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)

    subscriptions = db.relationship(
        "UserSubscription", back_populates="customer", lazy="dynamic",
    )
    orders = db.relationship("Order", back_populates="customer", lazy="dynamic")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
            "phone": self.phone,
            "address": self.address,
            "delivery_instructions": self.delivery_instructions,
            "has_password": bool(self.password_hash),
            "created_at": self.created_at.isoformat(),
        }


# ---------------------------------------------------------------------------
# Product
# ---------------------------------------------------------------------------
class Product(db.Model):
    """A fruit sold individually or picked into a subscription basket."""

    __tablename__ = "products"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, default="")
    price = db.Column(db.Numeric(10, 2), nullable=False)
    product_type = db.Column(db.String(20), nullable=False, index=True)
    stock_quantity = db.Column(db.Integer, default=0, nullable=False)
    is_available = db.Column(db.Boolean, default=True, nullable=False)
    image_url = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=_utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "price": _money(self.price),
            "product_type": self.product_type,
            "stock_quantity": self.stock_quantity,
            "is_available": self.is_available,
            "image_url": self.image_url,
        }

    def to_ref(self) -> ProductRef:
        return ProductRef.from_dict(self.to_dict())


# ---------------------------------------------------------------------------
# Subscription Plan
# ---------------------------------------------------------------------------
class SubscriptionPlan(db.Model):
    """A subscription offering with a base monthly price."""

    __tablename__ = "subscription_plans"

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), nullable=False)
    slug = db.Column(db.String(255), unique=True, nullable=False)
    description = db.Column(db.Text, default="")
    price = db.Column(db.Numeric(10, 2), nullable=False)
    image_url = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=_utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)

    fixed_items = db.relationship(
        "PlanFixedItem", back_populates="plan", order_by="PlanFixedItem.id",
        cascade="all, delete-orphan",
    )
    customizable_rules = db.relationship(
        "PlanCustomizableRule", back_populates="plan", order_by="PlanCustomizableRule.id",
        cascade="all, delete-orphan",
    )
    subscriptions = db.relationship(
        "UserSubscription", back_populates="plan", lazy="dynamic",
    )

    def to_dict(self) -> dict:
        definition = self.to_definition()
        return {
            "id": self.id,
            "name": self.name,
            "slug": self.slug,
            "description": self.description,
            "price": _money(self.price),
            "image_url": self.image_url,
            "fixed_items": [item.to_dict() for item in self.fixed_items],
            "customizable_rules": [rule.to_dict() for rule in self.customizable_rules],
            "offered_categories": load_rules(definition).offered_categories(),
        }

    def to_definition(self) -> PlanDefinition:
        return PlanDefinition.from_dict({
            "id": self.id,
            "slug": self.slug,
            "name": self.name,
            "price": _money(self.price),
            "fixed_items": [item.to_dict() for item in self.fixed_items],
            "customizable_rules": [rule.to_dict() for rule in self.customizable_rules],
        })


class PlanFixedItem(db.Model):
    """A product always delivered with a plan."""

    __tablename__ = "plan_fixed_items"

    id = db.Column(db.Integer, primary_key=True)
    plan_id = db.Column(
        db.Integer, db.ForeignKey("subscription_plans.id"), nullable=False, index=True,
    )
    product_id = db.Column(
        db.Integer, db.ForeignKey("products.id"), nullable=False, index=True,
    )
    quantity = db.Column(db.Integer, default=1, nullable=False)

    plan = db.relationship("SubscriptionPlan", back_populates="fixed_items")
    product = db.relationship("Product")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "product_id": self.product_id,
            "quantity": self.quantity,
            "product": self.product.to_dict(),
        }


class PlanCustomizableRule(db.Model):
    """Min/max quantity a customer may choose from one product category."""

    __tablename__ = "plan_customizable_rules"

    id = db.Column(db.Integer, primary_key=True)
    plan_id = db.Column(
        db.Integer, db.ForeignKey("subscription_plans.id"), nullable=False, index=True,
    )
    product_type = db.Column(db.String(20), nullable=False)
    min_quantity = db.Column(db.Integer, default=0, nullable=False)
    max_quantity = db.Column(db.Integer, nullable=False)

    plan = db.relationship("SubscriptionPlan", back_populates="customizable_rules")

    __table_args__ = (
        db.UniqueConstraint("plan_id", "product_type", name="uq_plan_rule_category"),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "product_type": self.product_type,
            "min_quantity": self.min_quantity,
            "max_quantity": self.max_quantity,
        }


# ---------------------------------------------------------------------------
# User Subscription
# ---------------------------------------------------------------------------
class UserSubscription(db.Model):
    """A customer's recurring subscription to a plan."""

    __tablename__ = "user_subscriptions"

    id = db.Column(db.Integer, primary_key=True)
    customer_id = db.Column(
        db.Integer, db.ForeignKey("customers.id"), nullable=False, index=True,
    )
    plan_id = db.Column(
        db.Integer, db.ForeignKey("subscription_plans.id"), nullable=True, index=True,
    )
    plan_name = db.Column(db.String(255), nullable=True)
    status = db.Column(db.String(20), default="active", nullable=False)
    start_date = db.Column(db.Date, nullable=False)
    next_delivery_date = db.Column(db.Date, nullable=True)
    monthly_price = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    cost_breakdown = db.Column(db.JSON, default=dict)
    created_at = db.Column(db.DateTime, default=_utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)

    customer = db.relationship("Customer", back_populates="subscriptions")
    plan = db.relationship("SubscriptionPlan", back_populates="subscriptions")
    items = db.relationship(
        "SubscriptionItem", back_populates="subscription", lazy="joined",
        order_by="SubscriptionItem.id",
        cascade="all, delete-orphan",
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "customer_id": self.customer_id,
            "plan_id": self.plan_id,
            "plan_name": self.plan_name,
            "status": self.status,
            "start_date": self.start_date.isoformat(),
            "next_delivery_date": (
                self.next_delivery_date.isoformat() if self.next_delivery_date else None
            ),
            "monthly_price": _money(self.monthly_price),
            "cost_breakdown": self.cost_breakdown,
            "items": [item.to_dict() for item in self.items],
            "created_at": self.created_at.isoformat(),
        }


class SubscriptionItem(db.Model):
    """A customised product line of a subscription."""

    __tablename__ = "subscription_items"

    id = db.Column(db.Integer, primary_key=True)
    subscription_id = db.Column(
        db.Integer, db.ForeignKey("user_subscriptions.id"), nullable=False, index=True,
    )
    product_id = db.Column(
        db.Integer, db.ForeignKey("products.id"), nullable=False, index=True,
    )
    quantity = db.Column(db.Integer, default=1, nullable=False)
    unit_price = db.Column(db.Numeric(10, 2), nullable=False, default=0)

    subscription = db.relationship("UserSubscription", back_populates="items")
    product = db.relationship("Product")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "subscription_id": self.subscription_id,
            "product_id": self.product_id,
            "quantity": self.quantity,
            "unit_price": _money(self.unit_price),
        }


# ---------------------------------------------------------------------------
# Order
# ---------------------------------------------------------------------------
class Order(db.Model):
    """A one-time purchase."""

    __tablename__ = "orders"

    id = db.Column(db.Integer, primary_key=True)
    customer_id = db.Column(
        db.Integer, db.ForeignKey("customers.id"), nullable=False, index=True,
    )
    status = db.Column(db.String(20), default="pending", nullable=False)
    payment_status = db.Column(db.String(20), default="pending", nullable=False)
    total_amount = db.Column(db.Numeric(10, 2), nullable=False)
    shipping_address = db.Column(db.Text, nullable=False)
    delivery_instructions = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=_utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=_utcnow, onupdate=_utcnow, nullable=False)

    customer = db.relationship("Customer", back_populates="orders")
    items = db.relationship(
        "OrderItem", back_populates="order", lazy="joined", order_by="OrderItem.id",
        cascade="all, delete-orphan",
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "customer_id": self.customer_id,
            "status": self.status,
            "payment_status": self.payment_status,
            "total_amount": _money(self.total_amount),
            "shipping_address": self.shipping_address,
            "delivery_instructions": self.delivery_instructions,
            "items": [item.to_dict() for item in self.items],
            "created_at": self.created_at.isoformat(),
        }


class OrderItem(db.Model):
    """A product line of an order, with prices frozen at purchase time."""

    __tablename__ = "order_items"

    id = db.Column(db.Integer, primary_key=True)
    order_id = db.Column(
        db.Integer, db.ForeignKey("orders.id"), nullable=False, index=True,
    )
    product_id = db.Column(
        db.Integer, db.ForeignKey("products.id"), nullable=False, index=True,
    )
    quantity = db.Column(db.Integer, default=1, nullable=False)
    unit_price = db.Column(db.Numeric(10, 2), nullable=False)
    total_price = db.Column(db.Numeric(10, 2), nullable=False)

    order = db.relationship("Order", back_populates="items")
    product = db.relationship("Product")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "order_id": self.order_id,
            "product_id": self.product_id,
            "quantity": self.quantity,
            "unit_price": _money(self.unit_price),
            "total_price": _money(self.total_price),
        }
