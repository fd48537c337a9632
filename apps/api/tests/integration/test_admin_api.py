from datetime import datetime, timedelta, timezone

BASE_TIME = datetime(2026, 2, 1, 9, 0, tzinfo=timezone.utc)


def test_status_update_appends_tracking_entry(client, auth_headers, make_order):
    make_order(id="ORD123", status="Processing")

    response = client.patch(
        "/api/admin/orders/ORD123/status",
        json={"status": "Shipped"},
        headers=auth_headers["admin"],
    )

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "success"
    assert body["message"] == "Order status updated successfully"
    assert body["data"]["order"]["status"] == "Shipped"

    tracking = client.get("/api/tracking/ORD123", headers=auth_headers["admin"])
    assert tracking.status_code == 200
    history = tracking.json()["data"]["trackingHistory"]
    assert history[-1]["status"] == "Shipped"
    assert history[-1]["description"] == "Your order has been shipped and is on its way"


def test_status_update_for_missing_order(client, auth_headers):
    response = client.patch(
        "/api/admin/orders/ORD-NOPE/status",
        json={"status": "Shipped"},
        headers=auth_headers["admin"],
    )

    assert response.status_code == 404
    assert response.json() == {"status": "error", "message": "Order not found"}


def test_status_update_requires_admin(client, auth_headers, make_order):
    make_order(id="ORD-GUARD")

    response = client.patch(
        "/api/admin/orders/ORD-GUARD/status",
        json={"status": "Shipped"},
        headers=auth_headers["customer_a"],
    )

    assert response.status_code == 403


def test_dashboard_endpoint(client, auth_headers, make_order, make_product):
    make_product()
    make_order(status="Processing", total_amount="10.00")
    make_order(status="Delivered", total_amount="15.50")
    make_order(status="Cancelled", total_amount="40.00")

    response = client.get("/api/admin/dashboard", headers=auth_headers["admin"])

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["stats"] == {
        "totalProducts": 1,
        "totalOrders": 3,
        "totalRevenue": 25.5,
        "pendingOrders": 1,
    }
    assert len(data["recentOrders"]) == 3
    assert set(data["recentOrders"][0]) == {
        "id",
        "customer_name",
        "total_amount",
        "status",
        "created_at",
    }


def test_dashboard_over_empty_store(client, auth_headers):
    response = client.get("/api/admin/dashboard", headers=auth_headers["admin"])

    data = response.json()["data"]
    assert data["stats"]["totalRevenue"] == 0
    assert data["stats"]["pendingOrders"] == 0
    assert data["recentOrders"] == []


def test_dashboard_failure_returns_internal_error(client, auth_headers, monkeypatch):
    from storefront.services import dashboard_service

    def _broken(_db):
        raise RuntimeError("read failed")

    monkeypatch.setattr(dashboard_service, "recent_orders", _broken)

    response = client.get("/api/admin/dashboard", headers=auth_headers["admin"])

    assert response.status_code == 500
    assert response.json() == {
        "status": "error",
        "message": "Failed to load dashboard statistics",
    }


def test_admin_orders_listing_filters_searches_and_paginates(
    client, auth_headers, db_session, make_order
):
    from storefront.models.order import OrderItem

    make_order(
        id="ORD-A1",
        customer_name="Achieng Otieno",
        status="Processing",
        created_at=BASE_TIME,
    )
    make_order(
        id="ORD-B2",
        customer_name="Baraka",
        customer_email="baraka@shop.test",
        status="Shipped",
        created_at=BASE_TIME + timedelta(hours=1),
    )
    make_order(
        id="ORD-C3",
        customer_name="Chebet",
        status="Processing",
        created_at=BASE_TIME + timedelta(hours=2),
    )
    db_session.add(
        OrderItem(
            order_id="ORD-A1",
            product_id=None,
            product_name="Coffee",
            product_price=5,
            quantity=2,
            total_price=10,
        )
    )
    db_session.commit()

    everything = client.get("/api/admin/orders", headers=auth_headers["admin"]).json()["data"]
    assert [order["id"] for order in everything["orders"]] == ["ORD-C3", "ORD-B2", "ORD-A1"]
    assert everything["pagination"] == {"page": 1, "limit": 10, "total": 3}
    assert everything["orders"][2]["order_items"][0]["product_name"] == "Coffee"

    processing = client.get(
        "/api/admin/orders", params={"status": "Processing"}, headers=auth_headers["admin"]
    ).json()["data"]
    assert [order["id"] for order in processing["orders"]] == ["ORD-C3", "ORD-A1"]

    by_email = client.get(
        "/api/admin/orders", params={"search": "SHOP.TEST"}, headers=auth_headers["admin"]
    ).json()["data"]
    assert [order["id"] for order in by_email["orders"]] == ["ORD-B2"]

    by_name = client.get(
        "/api/admin/orders", params={"search": "otieno"}, headers=auth_headers["admin"]
    ).json()["data"]
    assert [order["id"] for order in by_name["orders"]] == ["ORD-A1"]

    second_page = client.get(
        "/api/admin/orders", params={"page": 2, "limit": 2}, headers=auth_headers["admin"]
    ).json()["data"]
    assert [order["id"] for order in second_page["orders"]] == ["ORD-A1"]
    assert second_page["pagination"]["total"] == 3


def test_product_crud_and_soft_delete(client, auth_headers):
    created = client.post(
        "/api/admin/products",
        json={
            "name": "Smart Fitness Watch",
            "description": "Heart rate and sleep tracking",
            "price": 199.99,
            "category": "wearables",
            "stock": 7,
        },
        headers=auth_headers["admin"],
    )
    assert created.status_code == 201
    product = created.json()["data"]["product"]
    assert product["id"].startswith("PRD-")
    assert product["price"] == 199.99

    updated = client.put(
        f"/api/admin/products/{product['id']}",
        json={"price": 179.5},
        headers=auth_headers["admin"],
    )
    assert updated.status_code == 200
    assert updated.json()["data"]["product"]["price"] == 179.5
    assert updated.json()["data"]["product"]["stock"] == 7

    deleted = client.delete(f"/api/admin/products/{product['id']}", headers=auth_headers["admin"])
    assert deleted.status_code == 200
    assert deleted.json() == {"status": "success", "message": "Product deleted successfully"}

    assert client.get(f"/api/products/{product['id']}").status_code == 404

    again = client.delete(f"/api/admin/products/{product['id']}", headers=auth_headers["admin"])
    assert again.status_code == 404
    assert again.json() == {"status": "error", "message": "Product not found"}


def test_create_product_rejects_negative_price(client, auth_headers):
    response = client.post(
        "/api/admin/products",
        json={"name": "Broken", "price": -1, "stock": 1},
        headers=auth_headers["admin"],
    )

    assert response.status_code == 400
    assert response.json()["status"] == "error"


def test_update_missing_product(client, auth_headers):
    response = client.put(
        "/api/admin/products/PRD-NOPE", json={"stock": 1}, headers=auth_headers["admin"]
    )

    assert response.status_code == 404


def test_admin_customers_listing(client, auth_headers, make_user, make_order):
    make_user("cust-a", name="Amina")
    make_user("admin-1", role="ADMIN")
    make_order(user_id="cust-a", total_amount="30.00", status="Delivered")
    make_order(user_id="cust-a", total_amount="12.00", status="Cancelled")

    response = client.get("/api/admin/customers", headers=auth_headers["admin"])

    assert response.status_code == 200
    customers = response.json()["data"]["customers"]
    assert len(customers) == 1
    assert customers[0]["name"] == "Amina"
    assert customers[0]["order_count"] == 2
    assert customers[0]["total_spent"] == 30.0


def test_metrics_endpoint_counts_requests(client, auth_headers):
    client.get("/api/health")

    response = client.get("/api/admin/metrics", headers=auth_headers["admin"])

    assert response.status_code == 200
    assert response.json()["counters"]["http_requests_total"] >= 1


def test_metrics_endpoint_requires_admin(client, auth_headers):
    response = client.get("/api/admin/metrics", headers=auth_headers["customer_a"])

    assert response.status_code == 403
