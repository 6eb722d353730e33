from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore", populate_by_name=True)

    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=8080, alias="PORT")
    environment: str = Field(default="development", alias="APP_ENV")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    service_name: str = Field(default="web-app", alias="SERVICE_NAME")
    service_version: str = Field(default="1.0.0", alias="SERVICE_VERSION")
    service_namespace: str = Field(default="local-o11y", alias="SERVICE_NAMESPACE")

    enable_tracing: bool = Field(default=True, alias="ENABLE_TRACING")
    otlp_traces_endpoint: str = Field(
        default="http://otel-collector.observability.svc.cluster.local:4318/v1/traces",
        alias="OTEL_EXPORTER_OTLP_TRACES_ENDPOINT",
    )

    # Default label attached to every exported metric sample.
    metrics_app_label: str = Field(default="web-app", alias="METRICS_APP_LABEL")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
