"""Integration tests for the dashboard API, one-time orders and app wiring."""

import json
from decimal import Decimal

import pytest

from app import CustomJSONProvider, create_app
from app.domain.exceptions import AppError

PASSWORD = "s3cret!"


def _send(client, method, url, data):
    resp = getattr(client, method)(url, data=json.dumps(data), content_type="application/json")
    return resp.status_code, resp.get_json()


def _product(client, name="Apple", price="4.20", product_type="normal", stock=20):
    _, body = _send(client, "post", "/dashboard/products", {
        "name": name,
        "price": price,
        "product_type": product_type,
        "stock_quantity": stock,
    })
    return body["data"]


def _plan_payload(**overrides):
    payload = {
        "name": "Essential Basket",
        "slug": "essential-basket",
        "price": "49.90",
        "customizable_rules": [{"product_type": "normal", "min_quantity": 1, "max_quantity": 3}],
    }
    payload.update(overrides)
    return payload


def _member(client, email="bob@example.com"):
    _, body = _send(client, "post", "/store/customers", {
        "name": "Bob",
        "email": email,
        "password": PASSWORD,
        "address": "Av. Paulista, 1000",
    })
    return body["data"]["id"]


class TestProducts:
    def test_create_and_get(self, client):
        created = _product(client)
        assert created["price"] == "4.20"

        resp = client.get(f"/dashboard/products/{created['id']}")
        assert resp.status_code == 200
        assert resp.get_json()["data"]["name"] == "Apple"

    def test_invalid_category_is_rejected(self, client):
        status, body = _send(client, "post", "/dashboard/products", {
            "name": "Kiwi", "price": "2.00", "product_type": "tropical",
        })
        assert status == 400
        assert body["error_code"] == "VALIDATION_ERROR"

    def test_price_with_too_many_decimals_is_rejected(self, client):
        status, _ = _send(client, "post", "/dashboard/products", {
            "name": "Kiwi", "price": "2.005", "product_type": "normal",
        })
        assert status == 400

    def test_update(self, client):
        product_id = _product(client)["id"]
        status, body = _send(client, "put", f"/dashboard/products/{product_id}", {
            "name": "Green Apple", "price": "4.50", "product_type": "normal", "stock_quantity": 7,
        })
        assert status == 200
        assert body["data"]["name"] == "Green Apple"
        assert body["data"]["price"] == "4.50"

    def test_list_by_category(self, client):
        _product(client, "Apple")
        _product(client, "Mango", "5.00", "exotic")
        resp = client.get("/dashboard/products?category=exotic")
        assert [p["name"] for p in resp.get_json()["data"]] == ["Mango"]

    def test_delete(self, client):
        product_id = _product(client)["id"]
        resp = client.delete(f"/dashboard/products/{product_id}")
        assert resp.status_code == 200
        assert client.get(f"/dashboard/products/{product_id}").status_code == 404

    def test_delete_fixed_item_is_blocked(self, client):
        banana = _product(client, "Banana", "3.50")
        _, plan = _send(client, "post", "/dashboard/plans", _plan_payload(
            fixed_items=[{"product_id": banana["id"], "quantity": 6}],
        ))

        resp = client.delete(f"/dashboard/products/{banana['id']}")
        assert resp.status_code == 409
        assert resp.get_json()["details"] == {"plan_ids": [plan["data"]["id"]]}

    def test_delete_product_with_order_history_is_blocked(self, client):
        apple = _product(client)
        customer_id = _member(client)
        _send(client, "post", "/store/checkout/order", {
            "items": [{"product_id": apple["id"], "quantity": 1}],
            "customer_id": customer_id,
            "password": PASSWORD,
        })

        resp = client.delete(f"/dashboard/products/{apple['id']}")
        assert resp.status_code == 409
        assert resp.get_json()["details"] == {"order_items": 1, "subscription_items": 0}
        assert client.get(f"/dashboard/products/{apple['id']}").status_code == 200

    def test_delete_product_with_subscription_history_is_blocked(self, client):
        apple = _product(client)
        _, created = _send(client, "post", "/dashboard/plans", _plan_payload())
        customer_id = _member(client)
        _send(client, "post", "/store/checkout/subscription", {
            "plan_id": created["data"]["id"],
            "items": [{"product_id": apple["id"], "quantity": 2}],
            "customer_id": customer_id,
            "password": PASSWORD,
        })

        resp = client.delete(f"/dashboard/products/{apple['id']}")
        assert resp.status_code == 409
        assert resp.get_json()["details"] == {"order_items": 0, "subscription_items": 1}

    def test_stock_and_inventory(self, client):
        apple = _product(client, "Apple", stock=20)
        _product(client, "Pear", "5.00", stock=3)

        status, body = _send(client, "patch", f"/dashboard/products/{apple['id']}/stock", {
            "stock_quantity": 1, "is_available": False,
        })
        assert status == 200
        assert body["data"]["is_available"] is False

        data = client.get("/dashboard/inventory").get_json()["data"]
        assert data["threshold"] == 5
        assert [p["name"] for p in data["products"]] == ["Apple", "Pear"]

        data = client.get("/dashboard/inventory?threshold=2").get_json()["data"]
        assert [p["name"] for p in data["products"]] == ["Apple"]

    def test_negative_stock_is_rejected(self, client):
        product_id = _product(client)["id"]
        status, _ = _send(client, "patch", f"/dashboard/products/{product_id}/stock", {
            "stock_quantity": -1,
        })
        assert status == 400


class TestPlans:
    def test_create_plan(self, client):
        status, body = _send(client, "post", "/dashboard/plans", _plan_payload())
        assert status == 201
        assert body["data"]["slug"] == "essential-basket"
        assert body["data"]["customizable_rules"][0]["max_quantity"] == 3

    @pytest.mark.parametrize("overrides", [
        {"slug": "Not A Slug"},
        {"price": "0"},
        {"customizable_rules": [{"product_type": "normal", "min_quantity": 4, "max_quantity": 2}]},
        {"customizable_rules": [
            {"product_type": "normal", "max_quantity": 2},
            {"product_type": "normal", "max_quantity": 3},
        ]},
        {"fixed_items": [{"product_id": 1}, {"product_id": 1}]},
    ])
    def test_invalid_plan_is_rejected(self, client, overrides):
        status, body = _send(client, "post", "/dashboard/plans", _plan_payload(**overrides))
        assert status == 400
        assert body["error_code"] == "VALIDATION_ERROR"

    def test_missing_fixed_product(self, client):
        status, body = _send(client, "post", "/dashboard/plans", _plan_payload(
            fixed_items=[{"product_id": 42}],
        ))
        assert status == 400
        assert body["details"] == {"missing_product_ids": [42]}

    def test_duplicate_slug(self, client):
        _send(client, "post", "/dashboard/plans", _plan_payload())
        status, body = _send(client, "post", "/dashboard/plans", _plan_payload(name="Copy"))
        assert status == 409
        assert body["error_code"] == "CONFLICT"

    def test_update_replaces_rules(self, client):
        _, created = _send(client, "post", "/dashboard/plans", _plan_payload())
        plan_id = created["data"]["id"]

        status, body = _send(client, "put", f"/dashboard/plans/{plan_id}", _plan_payload(
            price="59.90",
            customizable_rules=[{"product_type": "exotic", "min_quantity": 1, "max_quantity": 2}],
        ))
        assert status == 200
        assert body["data"]["price"] == "59.90"
        assert body["data"]["offered_categories"] == ["exotic"]

    def test_delete_plan(self, client):
        _, created = _send(client, "post", "/dashboard/plans", _plan_payload())
        plan_id = created["data"]["id"]
        assert client.delete(f"/dashboard/plans/{plan_id}").status_code == 200
        assert client.get(f"/dashboard/plans/{plan_id}").status_code == 404

    def test_delete_plan_with_live_subscription_is_blocked(self, client):
        apple = _product(client)
        _, created = _send(client, "post", "/dashboard/plans", _plan_payload())
        plan_id = created["data"]["id"]
        customer_id = _member(client)
        _send(client, "post", "/store/checkout/subscription", {
            "plan_id": plan_id,
            "items": [{"product_id": apple["id"], "quantity": 2}],
            "customer_id": customer_id,
            "password": PASSWORD,
        })

        resp = client.delete(f"/dashboard/plans/{plan_id}")
        assert resp.status_code == 409
        assert resp.get_json()["details"] == {"live_subscriptions": 1}


class TestOrders:
    def test_order_checkout_and_status(self, client):
        apple = _product(client, stock=10)
        mango = _product(client, "Mango", "5.00", "exotic", stock=4)
        customer_id = _member(client)

        status, body = _send(client, "post", "/store/checkout/order", {
            "items": [
                {"product_id": apple["id"], "quantity": 2},
                {"product_id": mango["id"], "quantity": 1},
            ],
            "customer_id": customer_id,
            "password": PASSWORD,
        })
        assert status == 201
        order = body["data"]
        assert order["total_amount"] == "13.40"
        assert order["shipping_address"] == "Av. Paulista, 1000"
        assert order["items"][0]["total_price"] == "8.40"

        mango_now = client.get(f"/dashboard/products/{mango['id']}").get_json()["data"]
        assert mango_now["stock_quantity"] == 3

        status, body = _send(client, "patch", f"/dashboard/orders/{order['id']}/status", {
            "status": "shipped", "payment_status": "paid",
        })
        assert status == 200
        assert body["data"]["payment_status"] == "paid"

        history = client.get(f"/store/customers/{customer_id}/orders").get_json()["data"]
        assert [o["id"] for o in history] == [order["id"]]

    def test_cancelled_order_cannot_reopen(self, client):
        apple = _product(client)
        customer_id = _member(client)
        _, body = _send(client, "post", "/store/checkout/order", {
            "items": [{"product_id": apple["id"], "quantity": 1}],
            "customer_id": customer_id,
            "password": PASSWORD,
        })
        order_id = body["data"]["id"]
        _send(client, "patch", f"/dashboard/orders/{order_id}/status", {"status": "cancelled"})

        status, body = _send(client, "patch", f"/dashboard/orders/{order_id}/status", {
            "status": "processing",
        })
        assert status == 400
        assert body["message"] == "Cancelled orders cannot be reopened"

    def test_list_orders_by_status(self, client):
        apple = _product(client)
        customer_id = _member(client)
        _send(client, "post", "/store/checkout/order", {
            "items": [{"product_id": apple["id"], "quantity": 1}],
            "customer_id": customer_id,
            "password": PASSWORD,
        })
        assert len(client.get("/dashboard/orders?status=pending").get_json()["data"]) == 1
        assert client.get("/dashboard/orders?status=shipped").get_json()["data"] == []

    def test_empty_order_is_rejected(self, client):
        status, _ = _send(client, "post", "/store/checkout/order", {"items": []})
        assert status == 400


class TestUsersAndStats:
    def test_users(self, client):
        customer_id = _member(client)

        resp = client.get("/dashboard/users?role=member")
        assert [u["id"] for u in resp.get_json()["data"]] == [customer_id]

        status, body = _send(client, "put", f"/dashboard/users/{customer_id}", {"role": "admin"})
        assert status == 200
        assert body["data"]["role"] == "admin"
        assert body["data"]["name"] == "Bob"

    def test_invalid_role(self, client):
        customer_id = _member(client)
        status, _ = _send(client, "put", f"/dashboard/users/{customer_id}", {"role": "root"})
        assert status == 400

    def test_register_duplicate_email(self, client):
        _member(client)
        status, body = _send(client, "post", "/store/customers", {
            "name": "Bob", "email": "BOB@example.com", "password": PASSWORD,
        })
        assert status == 409

    def test_stats(self, client):
        apple = _product(client)
        customer_id = _member(client)
        _send(client, "post", "/store/checkout/order", {
            "items": [{"product_id": apple["id"], "quantity": 2}],
            "customer_id": customer_id,
            "password": PASSWORD,
        })

        stats = client.get("/dashboard/stats").get_json()["data"]
        assert stats["products"] == 1
        assert stats["customers"] == 1
        assert stats["orders"] == 1
        assert stats["pending_orders"] == 1
        assert stats["active_subscriptions"] == 0
        assert stats["revenue"] == "8.40"


class TestAppWiring:
    def test_custom_json_provider_decimal_and_fallback(self, app):
        provider = CustomJSONProvider(app)
        assert provider.default(Decimal("1.25")) == "1.25"
        with pytest.raises(TypeError):
            provider.default(object())

    def test_global_error_handlers_404_app_error_500(self):
        test_app = create_app("testing")
        test_app.config["PROPAGATE_EXCEPTIONS"] = False

        @test_app.route("/raise-app-error")
        def raise_app_error():
            raise AppError("boom", "CUSTOM_ERROR", 418)

        @test_app.route("/raise-500")
        def raise_500():
            raise RuntimeError("boom")

        client = test_app.test_client()
        not_found = client.get("/does-not-exist")
        assert not_found.status_code == 404
        assert not_found.get_json()["error_code"] == "NOT_FOUND"

        app_error = client.get("/raise-app-error")
        assert app_error.status_code == 418
        assert app_error.get_json()["error_code"] == "CUSTOM_ERROR"

        internal = client.get("/raise-500")
        assert internal.status_code == 500
        assert internal.get_json()["error_code"] == "INTERNAL_ERROR"
