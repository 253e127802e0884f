"""Application configuration loaded from environment variables."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, model_validator

load_dotenv()

_PROJECT_ROOT = Path(__file__).resolve().parent

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


class ConfigError(RuntimeError):
    """Raised when required settings are missing at startup."""


class Config(BaseModel):
    """Centralised app configuration backed by env vars."""

    # Shopify
    shop_domain: str = ""
    shopify_access_token: str = ""
    shopify_api_version: str = "2024-07"
    metafield_namespace: str = "distacart"

    # Upstream request gate
    upstream_timeout: float = 30.0
    upstream_requests_per_second: float = 20.0
    upstream_burst: int = 1

    # Server
    server_host: str = "127.0.0.1"
    server_port: int = 4000
    server_debug: bool = False
    cors_origins: list[str] = ["*"]
    log_level: str = "INFO"

    # Deployment data
    customer_directory_path: str = str(_PROJECT_ROOT / "data" / "customers.json")

    @model_validator(mode="after")
    def _warn_empty_critical_fields(self) -> Config:
        """Log warnings when critical integration fields are empty."""
        if not self.shop_domain:
            logger.warning("SHOP_DOMAIN is not set; upstream calls will fail")
        if not self.shopify_access_token:
            logger.warning("SHOPIFY_ADMIN_TOKEN is not set; upstream calls will fail")
        return self

    def missing_shopify_settings(self) -> list[str]:
        """Return env var names of required Shopify settings that are empty."""
        missing = []
        if not self.shop_domain:
            missing.append("SHOP_DOMAIN")
        if not self.shopify_access_token:
            missing.append("SHOPIFY_ADMIN_TOKEN")
        return missing

    def require_shopify(self) -> None:
        """Raise ConfigError unless the shop domain and token are configured."""
        missing = self.missing_shopify_settings()
        if missing:
            raise ConfigError(f"Missing required environment variables: {', '.join(missing)}")

    def masked_token(self) -> str:
        """Access token prefix suitable for logs."""
        if not self.shopify_access_token:
            return ""
        return self.shopify_access_token[:10] + "..."

    @classmethod
    def from_env(cls) -> Config:
        """Build config from environment variables."""
        cors_raw = os.getenv("CORS_ORIGINS", "*")
        cors_origins = [o.strip() for o in cors_raw.split(",") if o.strip()]

        return cls(
            shop_domain=os.getenv("SHOP_DOMAIN", ""),
            shopify_access_token=os.getenv("SHOPIFY_ADMIN_TOKEN", ""),
            shopify_api_version=os.getenv("SHOPIFY_API_VERSION", "2024-07"),
            metafield_namespace=os.getenv("METAFIELD_NAMESPACE", "distacart"),
            upstream_timeout=float(os.getenv("UPSTREAM_TIMEOUT", "30")),
            upstream_requests_per_second=float(os.getenv("UPSTREAM_REQUESTS_PER_SECOND", "20")),
            upstream_burst=int(os.getenv("UPSTREAM_BURST", "1")),
            server_host=os.getenv("SERVER_HOST", "127.0.0.1"),
            server_port=int(os.getenv("SERVER_PORT", "4000")),
            server_debug=os.getenv("SERVER_DEBUG", "false").lower() in ("1", "true", "yes"),
            cors_origins=cors_origins,
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            customer_directory_path=os.getenv(
                "CUSTOMER_DIRECTORY_PATH", str(_PROJECT_ROOT / "data" / "customers.json")
            ),
        )


def configure_logging(level: str = "INFO") -> None:
    """Install the root log handler used by the server and the CLI."""
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)


settings = Config.from_env()
