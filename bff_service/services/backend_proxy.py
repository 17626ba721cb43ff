"""
Backend Service HTTP Client
Forwards single calls to one backend service and classifies their failures

Connection pooling follows the shared-client pattern:
- One AsyncClient per backend, opened in the app lifespan
- If not started, falls back to a per-request client
- No retries: a failed attempt is reported immediately
"""

import asyncio
import json
from typing import Any, Dict, Mapping, Optional
from urllib.parse import quote

import httpx
import structlog

from bff_service.config import BackendTarget
from bff_service.utils.errors import (
    BackendServiceError,
    RequestSetupError,
    UpstreamRejectedError,
    UpstreamUnreachableError,
)

logger = structlog.get_logger(__name__)


def join_path(*segments: Any) -> str:
    """Build a relative path from identifiers, each encoded as one segment"""
    return "".join(f"/{quote(str(segment), safe='')}" for segment in segments)


def decode_body(response: httpx.Response) -> Any:
    """Decode a response body as JSON, falling back to text; empty bodies are None"""
    if response.status_code == 204 or not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class BackendProxy:
    """
    HTTP client bound to one backend target.

    Lifecycle:
        - Call start() during app startup (FastAPI lifespan)
        - Call stop() during app shutdown
    """

    # Connection pool settings (per worker)
    MAX_CONNECTIONS = 100
    MAX_KEEPALIVE = 20
    KEEPALIVE_EXPIRY = 5.0

    def __init__(
        self,
        target: BackendTarget,
        user_agent: str = "BFF-Service/1.0.0",
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.target = target
        self._headers = {
            "Content-Type": "application/json",
            "User-Agent": user_agent,
        }
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def name(self) -> str:
        return self.target.name

    def _build_client(self) -> httpx.AsyncClient:
        limits = httpx.Limits(
            max_connections=self.MAX_CONNECTIONS,
            max_keepalive_connections=self.MAX_KEEPALIVE,
            keepalive_expiry=self.KEEPALIVE_EXPIRY,
        )
        return httpx.AsyncClient(
            headers=self._headers,
            limits=limits,
            timeout=self.target.timeout,
            transport=self._transport,
        )

    async def start(self) -> None:
        """Open the shared HTTP client"""
        if self._client is not None:
            logger.warning("Backend client already started", target=self.name)
            return
        self._client = self._build_client()
        logger.info(
            "Backend client started",
            target=self.name,
            base_address=self.target.base_address,
            timeout=self.target.timeout,
        )

    async def stop(self) -> None:
        """Close the shared HTTP client and release connections"""
        if self._client:
            await self._client.aclose()
            self._client = None
            logger.info("Backend client stopped", target=self.name)

    async def _send(self, request: httpx.Request, timeout: float) -> httpx.Response:
        if self._client is not None:
            return await asyncio.wait_for(self._client.send(request), timeout=timeout)
        async with self._build_client() as client:
            return await asyncio.wait_for(client.send(request), timeout=timeout)

    def _build_request(
        self,
        method: str,
        url: str,
        json_body: Any = None,
        params: Optional[Mapping[str, Any]] = None,
        timeout: Optional[float] = None,
    ) -> httpx.Request:
        try:
            content = None if json_body is None else json.dumps(json_body)
            request_timeout = httpx.Timeout(timeout if timeout is not None else self.target.timeout)
            # send() does not apply the client timeout, so carry it on the request
            request = httpx.Request(
                method.upper(),
                url,
                params=dict(params) if params else None,
                content=content,
                headers=self._headers,
                extensions={"timeout": request_timeout.as_dict()},
            )
        except (httpx.InvalidURL, httpx.UnsupportedProtocol, TypeError, ValueError) as e:
            raise RequestSetupError(f"Could not build {method} request for {url}: {e}", service=self.name) from e

        if request.url.scheme not in ("http", "https") or not request.url.host:
            raise RequestSetupError(f"Request URL must be an absolute http(s) URL: {url}", service=self.name)
        return request

    async def _dispatch(self, request: httpx.Request, timeout: float) -> httpx.Response:
        try:
            return await self._send(request, timeout)
        except asyncio.TimeoutError as e:
            raise UpstreamUnreachableError(
                f"{self.name} did not respond within {timeout}s", service=self.name
            ) from e
        except (httpx.UnsupportedProtocol, httpx.LocalProtocolError) as e:
            raise RequestSetupError(f"Could not dispatch request: {e}", service=self.name) from e
        except httpx.TransportError as e:
            raise UpstreamUnreachableError(f"Failed to connect to {self.name}: {e}", service=self.name) from e
        except httpx.InvalidURL as e:
            raise RequestSetupError(f"Invalid URL: {e}", service=self.name) from e
        except httpx.HTTPError as e:
            # A response arrived but could not be read, e.g. a bad Content-Encoding
            raise UpstreamUnreachableError(f"Unreadable response from {self.name}: {e}", service=self.name) from e

    async def call(
        self,
        method: str,
        path: str = "",
        json_body: Any = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Issue exactly one call to the backend

        Args:
            method: HTTP method
            path: Path relative to the target base address ("" or "/...")
            json_body: Optional JSON payload
            params: Optional query parameters

        Returns:
            Decoded response body (JSON value, text, or None when empty)

        Raises:
            UpstreamRejectedError: backend answered with a non-2xx status
            UpstreamUnreachableError: no usable response (connection, DNS, timeout, unreadable body)
            RequestSetupError: request could not be built or dispatched
        """
        url = f"{self.target.base_address}{path}"
        logger.info(
            "Forwarding request to backend",
            target=self.name,
            method=method.upper(),
            path=path or "/",
            param_keys=sorted(params) if params else [],
            body_keys=sorted(json_body) if isinstance(json_body, dict) else [],
        )

        try:
            request = self._build_request(method, url, json_body=json_body, params=params)
            response = await self._dispatch(request, self.target.timeout)
        except BackendServiceError as e:
            logger.warning(
                "Backend call failed",
                target=self.name,
                method=method.upper(),
                path=path or "/",
                error_type=type(e).__name__,
            )
            raise

        logger.info(
            "Backend response received",
            target=self.name,
            method=method.upper(),
            path=path or "/",
            status_code=response.status_code,
        )

        body = decode_body(response)
        if not response.is_success:
            raise UpstreamRejectedError(response.status_code, body, service=self.name)
        return body

    async def health_check(self, timeout: Optional[float] = None) -> Any:
        """
        GET the backend's health endpoint

        Returns:
            Decoded health body on any 2xx response

        Raises:
            BackendServiceError: on any failure, classified like call()
        """
        probe_timeout = timeout if timeout is not None else self.target.timeout
        request = self._build_request("GET", self.target.health_address, timeout=probe_timeout)
        response = await self._dispatch(request, probe_timeout)
        body = decode_body(response)
        if not response.is_success:
            raise UpstreamRejectedError(response.status_code, body, service=self.name)
        return body
