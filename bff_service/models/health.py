"""
Health report models
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict

from pydantic import BaseModel, Field


class HealthState(str, Enum):
    """Aggregated gateway health"""
    HEALTHY = "healthy"
    DEGRADED = "degraded"


class BackendHealthState(str, Enum):
    """Health of one backend probe"""
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


class HealthReport(BaseModel):
    """Composite health of every probed backend"""
    overall: HealthState
    services: Dict[str, BackendHealthState] = Field(default_factory=dict)
    timestamp: datetime
    uptime: float = Field(..., ge=0, description="Process uptime in seconds")
    environment: str = "development"

    @property
    def http_status(self) -> int:
        return 200 if self.overall == HealthState.HEALTHY else 503

    def to_payload(self) -> Dict[str, Any]:
        """Render the public /health body"""
        return {
            "status": self.overall.value,
            "timestamp": self.timestamp.isoformat(),
            "uptime": self.uptime,
            "environment": self.environment,
            "services": {name: state.value for name, state in self.services.items()},
        }
