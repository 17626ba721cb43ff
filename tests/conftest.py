"""
Pytest fixtures for BFF gateway tests
"""

import json
from typing import Any, Callable, Dict, List, Tuple, Union

import httpx
import pytest
from fastapi.testclient import TestClient

from bff_service.config import BackendTarget, Settings
from bff_service.main import create_app
from bff_service.services.backend_proxy import BackendProxy

CATALOG_HOST = "catalog.test"
ORDERS_HOST = "orders.test"
INVENTORY_HOST = "inventory.test"

Reply = Union[Exception, Callable[[httpx.Request], Any]]


class FakeBackends:
    """
    In-process stand-in for every backend service

    Replies are registered per (method, host, path). Health endpoints answer
    200 unless a host is marked down; anything unregistered answers 404.
    """

    def __init__(self):
        self.routes: Dict[Tuple[str, str, str], Reply] = {}
        self.down: set = set()
        self.requests: List[httpx.Request] = []

    def reply(self, method: str, host: str, path: str, status: int = 200, json_body: Any = None, text: str = None):
        def respond(request: httpx.Request) -> httpx.Response:
            if text is not None:
                return httpx.Response(status, text=text)
            if json_body is None:
                return httpx.Response(status)
            return httpx.Response(status, json=json_body)
        self.routes[(method.upper(), host, path)] = respond

    def register(self, method: str, host: str, path: str, reply: Reply):
        self.routes[(method.upper(), host, path)] = reply

    def api_requests(self) -> List[httpx.Request]:
        """Recorded requests other than health probes"""
        return [r for r in self.requests if r.url.path != "/health"]

    @staticmethod
    def json_of(request: httpx.Request) -> Any:
        return json.loads(request.content) if request.content else None

    async def handler(self, request: httpx.Request):
        self.requests.append(request)
        host = request.url.host
        path = request.url.path

        if path == "/health" and (request.method, host, path) not in self.routes:
            if host in self.down:
                raise httpx.ConnectError("Connection refused", request=request)
            return httpx.Response(200, json={"status": "UP"})

        reply = self.routes.get((request.method, host, path))
        if reply is None:
            return httpx.Response(404, json={"message": f"No handler for {request.method} {path}"})
        if isinstance(reply, Exception):
            raise reply
        result = reply(request)
        if hasattr(result, "__await__"):
            result = await result
        return result

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def settings() -> Settings:
    """Settings pointing every backend at a fake host"""
    return Settings(
        product_service_url=f"http://{CATALOG_HOST}/api/v1/products",
        order_service_url=f"http://{ORDERS_HOST}/api/v1/order",
        inventory_service_url=f"http://{INVENTORY_HOST}/api/v1/inventory",
        health_probe_timeout_seconds=0.5,
        node_env="development",
    )


@pytest.fixture
def backends() -> FakeBackends:
    return FakeBackends()


@pytest.fixture
def client(settings, backends):
    """Create test client wired to the fake backends"""
    app = create_app(settings, transport=backends.transport)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_proxy(backends):
    """Build a BackendProxy for a fake backend"""
    def factory(name: str = "productService", address: str = f"http://{CATALOG_HOST}/api/v1/products",
                timeout: float = 1.0) -> BackendProxy:
        target = BackendTarget.from_address(name, address, timeout)
        return BackendProxy(target, transport=backends.transport)
    return factory
