"""
Aggregated backend health

Probes every configured backend concurrently. Each probe has its own timeout
and a failed probe is recorded as an unhealthy entry, never raised.
"""

import asyncio
import time
from datetime import datetime, timezone
from typing import Dict, Mapping, Optional, Tuple

import httpx
import structlog

from bff_service.models.health import BackendHealthState, HealthReport, HealthState
from bff_service.services.backend_proxy import BackendProxy
from bff_service.utils.errors import BackendServiceError

logger = structlog.get_logger(__name__)

DEFAULT_PROBE_TIMEOUT = 5.0


def reduce_health(services: Mapping[str, BackendHealthState]) -> HealthState:
    """Healthy only when every backend is healthy"""
    if all(state == BackendHealthState.HEALTHY for state in services.values()):
        return HealthState.HEALTHY
    return HealthState.DEGRADED


class HealthAggregator:
    """Fan-out health checker over a fixed set of backend proxies"""

    def __init__(
        self,
        proxies: Mapping[str, BackendProxy],
        probe_timeout: float = DEFAULT_PROBE_TIMEOUT,
        environment: str = "development",
        started_at: Optional[float] = None,
    ):
        self._proxies = dict(proxies)
        self._probe_timeout = probe_timeout
        self._environment = environment
        self._started_at = started_at if started_at is not None else time.monotonic()

    @property
    def backend_names(self) -> Tuple[str, ...]:
        return tuple(self._proxies)

    async def probe(self, name: str, proxy: BackendProxy) -> BackendHealthState:
        """Probe one backend; any failure or timeout counts as unhealthy"""
        try:
            await asyncio.wait_for(
                proxy.health_check(timeout=self._probe_timeout),
                timeout=self._probe_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning("Health probe timed out", service=name, timeout=self._probe_timeout)
            return BackendHealthState.UNHEALTHY
        except (BackendServiceError, httpx.HTTPError) as e:
            logger.warning("Health probe failed", service=name, error=str(e))
            return BackendHealthState.UNHEALTHY
        return BackendHealthState.HEALTHY

    async def check(self) -> HealthReport:
        """Run all probes concurrently and reduce them into one report"""
        names = list(self._proxies)
        results = await asyncio.gather(
            *(self.probe(name, self._proxies[name]) for name in names)
        )
        services: Dict[str, BackendHealthState] = dict(zip(names, results))
        overall = reduce_health(services)

        if overall != HealthState.HEALTHY:
            unhealthy = [name for name, state in services.items() if state != BackendHealthState.HEALTHY]
            logger.warning("Gateway health degraded", unhealthy_services=unhealthy)

        return HealthReport(
            overall=overall,
            services=services,
            timestamp=datetime.now(timezone.utc),
            uptime=max(0.0, time.monotonic() - self._started_at),
            environment=self._environment,
        )
