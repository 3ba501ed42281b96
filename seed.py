"""Seed script — populates the database with demo data for testing.

Usage:
    flask shell
    >>> exec(open('seed.py').read())

Or run directly:
    python seed.py
"""

from decimal import Decimal

from app import create_app
from app.extensions import db
from app.domain.models import (
    Customer,
    PlanCustomizableRule,
    PlanFixedItem,
    Product,
    SubscriptionPlan,
)
from app.services.customer_service import hash_password


def seed():
    """Insert demo products, plans and users."""
    app = create_app("development")

    with app.app_context():
        db.create_all()

        # Check if already seeded
        if Product.query.first():
            print("Seed data already exists — skipping.")
            return

        # -- Products --
        banana = Product(name="Banana", price=Decimal("3.50"), product_type="normal", stock_quantity=200)
        apple = Product(name="Apple", price=Decimal("4.20"), product_type="normal", stock_quantity=150)
        orange = Product(name="Orange", price=Decimal("3.90"), product_type="normal", stock_quantity=120)
        papaya = Product(name="Papaya", price=Decimal("6.80"), product_type="normal", stock_quantity=60)
        mango = Product(name="Mango", price=Decimal("5.00"), product_type="exotic", stock_quantity=80)
        pitaya = Product(name="Pitaya", price=Decimal("12.90"), product_type="exotic", stock_quantity=25)
        lychee = Product(name="Lychee", price=Decimal("9.50"), product_type="exotic", stock_quantity=3)
        db.session.add_all([banana, apple, orange, papaya, mango, pitaya, lychee])
        db.session.flush()

        # -- Plans --
        essential = SubscriptionPlan(
            name="Essential Basket",
            slug="essential-basket",
            description="Weekly staples plus a few fruits of your choice",
            price=Decimal("49.90"),
            fixed_items=[PlanFixedItem(product_id=banana.id, quantity=6)],
            customizable_rules=[
                PlanCustomizableRule(product_type="normal", min_quantity=3, max_quantity=5),
                PlanCustomizableRule(product_type="exotic", min_quantity=0, max_quantity=0),
            ],
        )
        tropical = SubscriptionPlan(
            name="Tropical Basket",
            slug="tropical-basket",
            description="Staples and exotic picks every week",
            price=Decimal("89.90"),
            fixed_items=[
                PlanFixedItem(product_id=banana.id, quantity=6),
                PlanFixedItem(product_id=apple.id, quantity=4),
            ],
            customizable_rules=[
                PlanCustomizableRule(product_type="normal", min_quantity=2, max_quantity=6),
                PlanCustomizableRule(product_type="exotic", min_quantity=1, max_quantity=3),
            ],
        )
        db.session.add_all([essential, tropical])

        # -- Users --
        db.session.add_all([
            Customer(name="Shop Admin", email="admin@example.com", role="admin",
                     password_hash=hash_password("admin123")),
            Customer(name="Alice Johnson", email="alice@example.com", phone="+5511999990000",
                     address="Rua das Flores, 100", password_hash=hash_password("alice123")),
        ])

        db.session.commit()
        print("Seed data inserted successfully.")


if __name__ == "__main__":
    seed()
