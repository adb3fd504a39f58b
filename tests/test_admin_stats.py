"""
Admin dashboard aggregates and recent orders: /api/admin.
"""
from datetime import datetime, timedelta, timezone

from fastapi.testclient import TestClient

from storefront.models.coupon import Coupon


def _place(client: TestClient, headers: dict, *lines) -> str:
    for product, qty in lines:
        client.post(
            "/api/cart",
            json={"productId": str(product.id), "quantity": qty},
            headers=headers,
        )
    return client.post(
        "/api/orders", json={"deliveryAddress": "12 MG Road"}, headers=headers
    ).json()["id"]


class TestDashboard:
    def test_customers_are_locked_out(self, test_client: TestClient, customer_headers):
        assert test_client.get("/api/admin/dashboard", headers=customer_headers).status_code == 403

    def test_aggregates(
        self, test_client: TestClient, session, make_product, customer_headers, admin_headers
    ):
        rice = make_product(name="Rice", category="groceries", price=100.0, stock=40)
        soap = make_product(name="Soap", category="personal_care", price=30.0, stock=3)
        _place(test_client, customer_headers, (rice, 2), (soap, 1))
        cancelled = _place(test_client, customer_headers, (soap, 5))
        test_client.patch(
            f"/api/orders/{cancelled}/status",
            json={"status": "cancelled"},
            headers=admin_headers,
        )
        session.add(
            Coupon(
                code="FESTIVE10",
                discount_percent=10,
                expiry_date=datetime.now(timezone.utc) + timedelta(days=7),
            )
        )
        session.add(
            Coupon(
                code="OLD5",
                discount_percent=5,
                expiry_date=datetime.now(timezone.utc) - timedelta(days=7),
            )
        )
        session.commit()

        response = test_client.get("/api/admin/dashboard", headers=admin_headers)

        assert response.status_code == 200
        stats = response.json()
        assert stats["orders"] == {
            "total": 2,
            "revenue": 230.0,
            "by_status": {"processing": 1, "cancelled": 1},
        }
        assert stats["products"] == {
            "total": 2,
            "low_stock": 1,
            "by_category": {"groceries": 1, "personal_care": 1},
        }
        assert stats["users"] == {"total": 2, "customers": 1, "admins": 1}
        assert stats["coupons"] == {"total": 2, "active": 1}

        assert len(stats["daily_sales"]) == 1
        assert stats["daily_sales"][0]["total_revenue"] == 230.0
        assert stats["daily_sales"][0]["order_count"] == 1

        top = stats["top_products"]
        assert [p["name"] for p in top] == ["Rice", "Soap"]
        assert top[0]["total_quantity"] == 2
        assert top[0]["total_revenue"] == 200.0

    def test_other_month_has_no_daily_sales(
        self, test_client: TestClient, make_product, customer_headers, admin_headers
    ):
        _place(test_client, customer_headers, (make_product(), 1))

        response = test_client.get(
            "/api/admin/dashboard",
            params={"year": 2001, "month": 1},
            headers=admin_headers,
        )

        assert response.json()["daily_sales"] == []
        assert response.json()["orders"]["total"] == 1

    def test_bad_month(self, test_client: TestClient, admin_headers):
        response = test_client.get(
            "/api/admin/dashboard", params={"month": 13}, headers=admin_headers
        )

        assert response.status_code == 400


class TestRecentOrders:
    def test_newest_first_and_limited(
        self, test_client: TestClient, make_product, customer_headers, admin_headers
    ):
        first = _place(test_client, customer_headers, (make_product(), 1))
        second = _place(test_client, customer_headers, (make_product(), 1))
        third = _place(test_client, customer_headers, (make_product(), 1))

        response = test_client.get(
            "/api/admin/orders/recent", params={"limit": 2}, headers=admin_headers
        )

        assert [o["id"] for o in response.json()] == [third, second]
        assert first not in [o["id"] for o in response.json()]
