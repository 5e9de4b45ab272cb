"""Configuration management for the storage accessor admission webhook."""

from enum import Enum
from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class Settings(BaseSettings):
    """Webhook settings, read from the environment (case-insensitive)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "Storage Accessor Webhook"
    app_version: str = "0.1.0"
    environment: Environment = Environment.DEVELOPMENT
    debug: bool = False

    # Webhook
    webhook_path: str = "/persistentvolumeclaims"
    workspace_label_key: str = "kubesphere.io/workspace"
    storage_class_annotation: str = "volume.beta.kubernetes.io/storage-class"

    # Kubernetes
    kubeconfig: Optional[str] = None
    kube_request_timeout: float = Field(10.0, gt=0)  # seconds

    # TLS
    tls_cert_file: str = "/tmp/k8s-webhook-server/serving-certs/tls.crt"
    tls_key_file: str = "/tmp/k8s-webhook-server/serving-certs/tls.key"

    # Server
    host: str = "0.0.0.0"
    port: int = 8443

    # Logging
    log_level: LogLevel = LogLevel.INFO
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    log_json: bool = False

    # Health Check
    health_check_path: str = "/health"
    readiness_check_path: str = "/ready"

    # Metrics
    metrics_enabled: bool = True
    metrics_path: str = "/metrics"

    @field_validator("webhook_path", "health_check_path", "readiness_check_path", "metrics_path")
    @classmethod
    def ensure_leading_slash(cls, v: str) -> str:
        """Route paths must be absolute."""
        return v if v.startswith("/") else f"/{v}"

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v):
        """Accept lowercase level names from the environment."""
        if isinstance(v, str):
            return v.upper()
        return v


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
