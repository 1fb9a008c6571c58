"""
Configuration management for the RES Bridge registry client.
Loads environment variables and provides centralized access to connection settings.
"""

from urllib.parse import urlparse

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def is_http_url(url: str) -> bool:
    """Check if a URL is absolute with an http(s) scheme and a host."""
    parsed = urlparse(url or "")
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


class BridgeConfig(BaseSettings):
    """
    Centralized configuration for the registry client.
    Loads from environment variables and .env file.

    Only transport concerns live here. The XDS.b wire contract (query ids,
    slot names, status literals) is fixed in `res_bridge.core.wire`.
    """

    # === Registry Endpoint ===
    registry_url: str = Field(
        default="https://servicoshm.saude.gov.br/EHR-UNB/ProxyService/RegistryPS",
        alias="RES_REGISTRY_URL",
    )
    registry_soap_action: str = Field(
        default="urn:ihe:iti:2007:ns:AdhocQueryRequestRequest",
        alias="RES_REGISTRY_SOAP_ACTION",
    )
    registry_timeout_seconds: float = Field(
        default=30.0,
        alias="RES_REGISTRY_TIMEOUT_SECONDS",
    )
    registry_verify_tls: bool = Field(default=True, alias="RES_REGISTRY_VERIFY_TLS")

    # === Application Configuration ===
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # === Retry (connection failures only) ===
    max_retry_attempts: int = Field(default=1, alias="RES_MAX_RETRY_ATTEMPTS")
    retry_delay_multiplier: float = Field(default=1.0, alias="RES_RETRY_DELAY_MULTIPLIER")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @property
    def is_registry_configured(self) -> bool:
        """Check if the registry URL is an absolute http(s) URL."""
        return is_http_url(self.registry_url)


# Singleton instance
_config: BridgeConfig | None = None


def get_config() -> BridgeConfig:
    """
    Get the application configuration singleton.
    Initializes on first call.
    """
    global _config
    if _config is None:
        _config = BridgeConfig()
    return _config


def reload_config() -> BridgeConfig:
    """Force reload of configuration from environment."""
    global _config
    _config = BridgeConfig()
    return _config
