"""
Tests for cart routes
"""

ORDERS = "orders.test"
BASE = "/api/v1/order"


class TestCarts:
    """Test cart lifecycle routes"""

    def test_create_cart(self, client, backends):
        backends.reply("POST", ORDERS, BASE, json_body={"id": 11, "customerId": "c-1"})

        response = client.post("/api/orders", json={"customerId": "c-1"})

        assert response.status_code == 201
        assert response.json() == {
            "status": 201,
            "message": "Cart created successfully for customer: c-1",
            "data": {"id": 11, "customerId": "c-1"},
        }

    def test_create_cart_requires_customer(self, client, backends):
        response = client.post("/api/orders", json={})

        assert response.status_code == 400
        assert response.json() == {"status": 400, "message": "Customer ID is required"}
        assert backends.api_requests() == []

    def test_create_cart_customer_too_long(self, client, backends):
        response = client.post("/api/orders", json={"customerId": "x" * 51})

        assert response.status_code == 400
        assert response.json()["message"] == "Customer ID must be between 1 and 50 characters"

    def test_get_cart_by_customer(self, client, backends):
        backends.reply("GET", ORDERS, f"{BASE}/customer/c-1", json_body={"id": 11})

        response = client.get("/api/orders/customer/c-1")

        assert response.status_code == 200
        assert response.json()["message"] == "Cart retrieved successfully for customer: c-1"

    def test_get_cart(self, client, backends):
        backends.reply("GET", ORDERS, f"{BASE}/11", json_body={"id": 11, "items": []})

        response = client.get("/api/orders/11")

        assert response.json()["message"] == "Cart retrieved successfully"
        assert response.json()["data"] == {"id": 11, "items": []}

    def test_get_cart_invalid_id(self, client, backends):
        response = client.get("/api/orders/abc")

        assert response.status_code == 400
        assert response.json()["message"] == "Cart ID must be a positive number"
        assert backends.api_requests() == []

    def test_remove_cart(self, client, backends):
        backends.reply("DELETE", ORDERS, f"{BASE}/11", status=204)

        response = client.delete("/api/orders/11")

        assert response.status_code == 204
        assert response.content == b""

    def test_remove_missing_cart(self, client, backends):
        backends.reply("DELETE", ORDERS, f"{BASE}/99", status=404,
                       json_body={"status": 404, "message": "Cart not found"})

        response = client.delete("/api/orders/99")

        assert response.status_code == 404
        assert response.json() == {"status": 404, "message": "Cart not found"}


class TestCartItems:
    """Test adding and removing cart items"""

    def test_add_item(self, client, backends):
        backends.reply("POST", ORDERS, f"{BASE}/11", json_body={"id": 11, "items": [{"skuCode": "AB-1"}]})
        payload = {"skuCode": "AB-1", "quantity": 2}

        response = client.post("/api/orders/11", json=payload)

        assert response.status_code == 200
        assert response.json()["message"] == "Item added to cart successfully"
        assert backends.json_of(backends.api_requests()[0]) == payload

    def test_add_item_validation_order(self, client, backends):
        cases = [
            ("/api/orders/0", {"skuCode": "AB-1", "quantity": 1}, "Cart ID must be a positive number"),
            ("/api/orders/11", {"quantity": 1}, "SKU code is required"),
            ("/api/orders/11", {"skuCode": "A", "quantity": 1}, "SKU Code must be between 2 and 50 characters"),
            ("/api/orders/11", {"skuCode": "AB-1"}, "Quantity must be a positive number"),
            ("/api/orders/11", {"skuCode": "AB-1", "quantity": 0}, "Quantity must be a positive number"),
        ]
        for path, payload, message in cases:
            response = client.post(path, json=payload)
            assert response.status_code == 400
            assert response.json()["message"] == message

        assert backends.api_requests() == []

    def test_remove_item(self, client, backends):
        backends.reply("DELETE", ORDERS, f"{BASE}/11/AB-1")

        response = client.delete("/api/orders/11/AB-1")

        assert response.status_code == 204
        assert response.content == b""

    def test_remove_item_invalid_sku(self, client, backends):
        response = client.delete("/api/orders/11/A")

        assert response.status_code == 400
        assert response.json()["message"] == "SKU Code must be between 2 and 50 characters"

    def test_remove_item_enveloped_reply_is_passed_through(self, client, backends):
        body = {"status": 200, "message": "Item removed", "data": {"id": 11, "items": []}}
        backends.reply("DELETE", ORDERS, f"{BASE}/11/AB-1", json_body=body)

        response = client.delete("/api/orders/11/AB-1")

        assert response.status_code == 200
        assert response.json() == body
