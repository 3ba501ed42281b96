"""Shared test fixtures."""

from decimal import Decimal

import pytest

from app import create_app
from app.domain.rule_catalog import CategoryRule, FixedItem, PlanDefinition, ProductRef
from app.extensions import db as _db


@pytest.fixture(scope="session")
def app():
    """Create an application instance configured for testing."""
    app = create_app("testing")
    with app.app_context():
        _db.create_all()
        yield app
        _db.drop_all()


@pytest.fixture(autouse=True)
def db_session(app):
    """Ensure a clean database state for each test.

    Re-creates all tables before each test to guarantee isolation.
    """
    with app.app_context():
        _db.create_all()
        yield _db.session
        _db.session.rollback()
        _db.drop_all()


@pytest.fixture()
def client(app):
    """Flask test client."""
    return app.test_client()


# ---------------------------------------------------------------------------
# Pure-domain fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def fruit():
    """A small catalog of ``ProductRef`` keyed by name."""
    return {
        "banana": ProductRef(1, "Banana", Decimal("3.50"), "normal", True, 100),
        "apple": ProductRef(2, "Apple", Decimal("4.20"), "normal", True, 100),
        "orange": ProductRef(3, "Orange", Decimal("3.90"), "normal", True, 100),
        "pear": ProductRef(4, "Pear", Decimal("5.00"), "normal", True, 100),
        "mango": ProductRef(5, "Mango", Decimal("5.00"), "exotic", True, 100),
        "pitaya": ProductRef(6, "Pitaya", Decimal("12.90"), "exotic", True, 100),
    }


@pytest.fixture()
def basket_plan(fruit):
    """Plan priced 49.90 with banana fixed and a normal rule of 3..5."""
    return PlanDefinition(
        id=10,
        slug="essential-basket",
        name="Essential Basket",
        price=Decimal("49.90"),
        fixed_items=(FixedItem(fruit["banana"], 6),),
        rules=(CategoryRule("normal", 3, 5),),
    )
