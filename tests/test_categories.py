"""
Tests for category routes
"""

CATALOG = "catalog.test"
BASE = "/api/v1/categories"


class TestCategoryRoutes:
    """Test category routes served by the catalog host"""

    def test_list(self, client, backends):
        backends.reply("GET", CATALOG, BASE, json_body=[{"id": 1, "name": "Home"}])

        response = client.get("/api/categories")

        assert response.status_code == 200
        assert response.json()["message"] == "Categories retrieved successfully"

    def test_get(self, client, backends):
        backends.reply("GET", CATALOG, f"{BASE}/1", json_body={"id": 1})

        response = client.get("/api/categories/1")

        assert response.json()["message"] == "Category retrieved successfully"

    def test_get_invalid_id(self, client, backends):
        response = client.get("/api/categories/x1")

        assert response.status_code == 400
        assert response.json()["message"] == "Invalid category ID provided. Must be a positive number."
        assert backends.api_requests() == []

    def test_create(self, client, backends):
        backends.reply("POST", CATALOG, BASE, json_body={"id": 2, "name": "Garden"})

        response = client.post("/api/categories", json={"name": "Garden"})

        assert response.status_code == 201
        assert response.json()["message"] == "Category created successfully"

    def test_create_validation(self, client, backends):
        assert client.post("/api/categories", json={}).json()["message"] == "Category name is required"
        assert (client.post("/api/categories", json={"name": " G "}).json()["message"]
                == "Category name must be between 2 and 100 characters")
        assert backends.api_requests() == []

    def test_update(self, client, backends):
        backends.reply("PUT", CATALOG, f"{BASE}/2", json_body={"id": 2, "name": "Yard"})

        response = client.put("/api/categories/2", json={"name": "Yard"})

        assert response.json()["message"] == "Category updated successfully"
        assert backends.json_of(backends.api_requests()[0]) == {"name": "Yard"}

    def test_delete(self, client, backends):
        backends.reply("DELETE", CATALOG, f"{BASE}/2")

        response = client.delete("/api/categories/2")

        assert response.status_code == 200
        assert response.json() == {"status": 200, "message": "Category deleted successfully"}
