"""
Configuration Management
Environment-based settings for the BFF gateway and its backend targets
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, List, Optional
from urllib.parse import urlsplit, urlunsplit

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


PRODUCT_SERVICE = "productService"
CATEGORY_SERVICE = "categoryService"
ORDER_SERVICE = "orderService"
INVENTORY_SERVICE = "inventoryService"

# Backends reported by the aggregated /health endpoint, in report order
HEALTH_CHECKED_SERVICES = (PRODUCT_SERVICE, ORDER_SERVICE, INVENTORY_SERVICE)


class SettingsLoadError(RuntimeError):
    """Raised when runtime settings cannot be loaded or validated."""


def derive_health_url(base_address: str) -> str:
    """
    Build the health URL for a backend from its resource base address.

    The resource path (everything from ``/api/`` on) is dropped and
    ``/health`` is appended to what remains, e.g.
    ``http://catalog:8080/api/v1/products`` -> ``http://catalog:8080/health``.
    """
    parts = urlsplit(base_address)
    path = parts.path
    api_index = path.find("/api/")
    if api_index >= 0:
        path = path[:api_index]
    path = path.rstrip("/") + "/health"
    return urlunsplit((parts.scheme, parts.netloc, path, "", ""))


@dataclass(frozen=True)
class BackendTarget:
    """Immutable address and timeout of one backend service"""
    name: str
    base_address: str
    timeout: float
    health_address: str

    @classmethod
    def from_address(cls, name: str, base_address: str, timeout: float) -> "BackendTarget":
        normalized = base_address.strip().rstrip("/")
        return cls(
            name=name,
            base_address=normalized,
            timeout=timeout,
            health_address=derive_health_url(normalized),
        )


class Settings(BaseSettings):
    """Gateway settings

    Environment variable names map to field names in uppercase,
    e.g. `product_service_url` reads from `PRODUCT_SERVICE_URL`.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # Service info
    service_name: str = "E-commerce BFF"
    service_version: str = "1.0.0"

    # Server
    host: str = "0.0.0.0"
    port: int = 4000
    node_env: str = "development"

    # Backend service URLs
    product_service_url: str = "http://localhost:8080/api/v1/products"
    order_service_url: str = "http://localhost:8083/api/v1/order"
    inventory_service_url: str = "http://localhost:8082/api/v1/inventory"

    # Outbound calls
    backend_timeout_seconds: float = 15.0
    health_probe_timeout_seconds: float = 5.0
    user_agent: str = "BFF-Service/1.0.0"

    # CORS: comma-separated list of origins or "*"
    allowed_origins: str = "*"

    # Logging
    log_level: str = "INFO"
    log_format: str = Field(default="console", pattern="^(console|json)$")
    logging_config_path: Optional[str] = None

    @field_validator("port")
    @classmethod
    def validate_port(cls, v):
        if not 1 <= v <= 65535:
            raise ValueError("PORT must be between 1 and 65535")
        return v

    @field_validator("backend_timeout_seconds", "health_probe_timeout_seconds")
    @classmethod
    def validate_timeout(cls, v):
        if v <= 0:
            raise ValueError("timeouts must be greater than 0 seconds")
        return v

    @field_validator("product_service_url", "order_service_url", "inventory_service_url")
    @classmethod
    def validate_service_url(cls, v):
        stripped = v.strip()
        if not stripped:
            raise ValueError("service URL must not be blank")
        return stripped

    @property
    def is_production(self) -> bool:
        return self.node_env.strip().lower() == "production"

    @property
    def cors_origins(self) -> List[str]:
        """Parse ALLOWED_ORIGINS into the list CORSMiddleware expects"""
        origins = [o.strip() for o in self.allowed_origins.split(",") if o.strip()]
        if not origins or "*" in origins:
            return ["*"]
        return origins

    @property
    def category_service_url(self) -> str:
        # Categories are served by the product service under a sibling path
        return self.product_service_url.replace("/products", "/categories")

    def backend_targets(self) -> Dict[str, BackendTarget]:
        """Build the immutable backend targets keyed by service name"""
        timeout = self.backend_timeout_seconds
        return {
            PRODUCT_SERVICE: BackendTarget.from_address(PRODUCT_SERVICE, self.product_service_url, timeout),
            CATEGORY_SERVICE: BackendTarget.from_address(CATEGORY_SERVICE, self.category_service_url, timeout),
            ORDER_SERVICE: BackendTarget.from_address(ORDER_SERVICE, self.order_service_url, timeout),
            INVENTORY_SERVICE: BackendTarget.from_address(INVENTORY_SERVICE, self.inventory_service_url, timeout),
        }


def load_settings() -> Settings:
    """
    Load and validate settings from environment and dotenv

    Raises:
        SettingsLoadError: when a setting is missing or invalid
    """
    try:
        return Settings()
    except ValidationError as e:
        raise SettingsLoadError(
            f"Startup configuration validation failed. Update .env or environment variables. Details: {e}"
        ) from e


@lru_cache()
def get_settings() -> Settings:
    """Get the process-wide settings instance"""
    return load_settings()
