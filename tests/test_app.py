"""
Tests for application wiring, error handlers and configuration
"""

from unittest.mock import AsyncMock, patch

import pytest
from fastapi.testclient import TestClient

from bff_service.config import (
    CATEGORY_SERVICE,
    INVENTORY_SERVICE,
    ORDER_SERVICE,
    PRODUCT_SERVICE,
    Settings,
    SettingsLoadError,
    derive_health_url,
    load_settings,
)
from bff_service.main import create_app


class TestRootAndFallbacks:
    """Test root endpoint and unmatched routes"""

    def test_root(self, client):
        response = client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert data["service"] == "E-commerce BFF"
        assert data["version"] == "1.0.0"
        assert data["status"] == "running"
        assert data["endpoints"]["health"] == "/health"
        assert data["endpoints"]["categories"] == "/api/categories"

    def test_unknown_route(self, client):
        response = client.get("/api/unknown?x=1")

        assert response.status_code == 404
        data = response.json()
        assert data["status"] == 404
        assert data["message"] == "Endpoint not found"
        assert data["path"] == "/api/unknown?x=1"
        assert "timestamp" in data

    def test_method_mismatch_is_not_found(self, client):
        response = client.patch("/api/products/5")

        assert response.status_code == 404
        assert response.json()["message"] == "Endpoint not found"


class TestUncaughtErrors:
    """Test the catch-all error handler"""

    def _client(self, settings, backends):
        app = create_app(settings, transport=backends.transport)
        app.state.backends[PRODUCT_SERVICE].call = AsyncMock(side_effect=RuntimeError("boom"))
        return TestClient(app, raise_server_exceptions=False)

    def test_includes_stack_outside_production(self, settings, backends):
        with self._client(settings, backends) as client:
            response = client.get("/api/products/5")

        assert response.status_code == 500
        data = response.json()
        assert data["status"] == 500
        assert data["message"] == "Internal server error"
        assert "RuntimeError: boom" in data["stack"]

    def test_failed_request_is_still_logged(self, settings, backends):
        with patch("bff_service.main.logger") as mock_logger:
            with self._client(settings, backends) as client:
                client.get("/api/products/5")

        completed = [
            call.kwargs for call in mock_logger.info.call_args_list
            if call.args and call.args[0] == "Request completed"
        ]
        assert len(completed) == 1
        assert completed[0]["path"] == "/api/products/5"
        assert completed[0]["status_code"] == 500
        assert completed[0]["duration_ms"] >= 0

    def test_hides_stack_in_production(self, settings, backends):
        settings = settings.model_copy(update={"node_env": "production"})
        with self._client(settings, backends) as client:
            response = client.get("/api/products/5")

        assert response.status_code == 500
        assert "stack" not in response.json()


class TestSettings:
    """Test environment driven configuration"""

    def test_defaults(self):
        settings = Settings(_env_file=None)
        assert settings.port == 4000
        assert settings.node_env == "development"
        assert not settings.is_production

    def test_backend_targets(self, settings):
        targets = settings.backend_targets()

        assert set(targets) == {PRODUCT_SERVICE, CATEGORY_SERVICE, ORDER_SERVICE, INVENTORY_SERVICE}
        assert targets[CATEGORY_SERVICE].base_address == "http://catalog.test/api/v1/categories"
        assert targets[ORDER_SERVICE].health_address == "http://orders.test/health"
        assert targets[PRODUCT_SERVICE].timeout == 15.0

    def test_trailing_slash_is_dropped(self):
        settings = Settings(_env_file=None, inventory_service_url="http://inventory.test/api/v1/inventory/")
        target = settings.backend_targets()[INVENTORY_SERVICE]
        assert target.base_address == "http://inventory.test/api/v1/inventory"

    @pytest.mark.parametrize("address,expected", [
        ("http://catalog:8080/api/v1/products", "http://catalog:8080/health"),
        ("https://orders.example.com/svc/api/v1/order", "https://orders.example.com/svc/health"),
        ("http://inventory:8082", "http://inventory:8082/health"),
    ])
    def test_derive_health_url(self, address, expected):
        assert derive_health_url(address) == expected

    def test_cors_origins(self):
        assert Settings(_env_file=None).cors_origins == ["*"]
        settings = Settings(_env_file=None, allowed_origins="http://a.test, http://b.test")
        assert settings.cors_origins == ["http://a.test", "http://b.test"]

    def test_environment_variables(self, monkeypatch):
        monkeypatch.setenv("PORT", "5050")
        monkeypatch.setenv("NODE_ENV", "production")
        monkeypatch.setenv("ORDER_SERVICE_URL", "http://orders.internal/api/v1/order")

        settings = load_settings()

        assert settings.port == 5050
        assert settings.is_production
        assert settings.order_service_url == "http://orders.internal/api/v1/order"

    def test_invalid_port(self, monkeypatch):
        monkeypatch.setenv("PORT", "70000")

        with pytest.raises(SettingsLoadError):
            load_settings()

    def test_invalid_timeout(self):
        with pytest.raises(ValueError):
            Settings(_env_file=None, health_probe_timeout_seconds=0)
