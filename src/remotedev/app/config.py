"""Application configuration using pydantic-settings."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class FeaturesConfig(BaseSettings):
    """Remote development availability.

    Both flags must be true for agents to reconcile. They stand in for the
    license and feature flag checks of the hosting application.
    """

    model_config = SettingsConfigDict(env_prefix="FEATURES_")

    remote_development_enabled: bool = Field(default=True)
    remote_development_licensed: bool = Field(default=True)
    # Agent IDs for which remote development is switched off
    disabled_agent_ids: list[int] = Field(default_factory=list)


class DevfileConfig(BaseSettings):
    """Devfile compilation defaults."""

    model_config = SettingsConfigDict(env_prefix="DEVFILE_")

    variables_file_mount_path: str = Field(default="/.workspace-data/variables/file")
    default_volume_size: str = Field(default="15Gi")
    image_pull_policy: str = Field(default="IfNotPresent")


class StoreConfig(BaseSettings):
    """In-memory state store configuration."""

    model_config = SettingsConfigDict(env_prefix="STORE_")

    # YAML file with agents and workspaces loaded at startup
    seed_path: str | None = Field(default=None)


class ServerConfig(BaseSettings):
    """HTTP server configuration.

    The server always runs as one process. Workspace bookkeeping lives in the
    in-memory store, which worker processes would not share.
    """

    model_config = SettingsConfigDict(env_prefix="SERVER_")

    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8080)


class MetricsConfig(BaseSettings):
    """Prometheus metrics configuration."""

    model_config = SettingsConfigDict(env_prefix="METRICS_")

    enabled: bool = Field(default=True)


class LoggingConfig(BaseSettings):
    """Logging configuration.

    Standard fields added to all logs:
    - schema_version: Log schema version for backwards compatibility
    - service: Service name (remotedev-reconciler)

    Rate limiting:
    - Prevents log storms from repeated messages
    - ERROR logs bypass rate limiting (always logged)
    """

    model_config = SettingsConfigDict(env_prefix="LOGGING_")

    level: str = Field(default="INFO")
    schema_version: str = Field(default="1.0")
    slow_threshold_ms: float = Field(default=1000.0)
    rate_limit_per_minute: int = Field(default=100)
    service_name: str = Field(default="remotedev-reconciler")


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="REMOTEDEV_",
        env_nested_delimiter="__",
    )

    features: FeaturesConfig = Field(default_factory=FeaturesConfig)
    devfile: DevfileConfig = Field(default_factory=DevfileConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    metrics: MetricsConfig = Field(default_factory=MetricsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


@lru_cache
def get_settings() -> Settings:
    return Settings()
