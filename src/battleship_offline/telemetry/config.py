"""Telemetry configuration helpers."""

from __future__ import annotations

import os
from functools import lru_cache
from typing import Any, Dict

from pydantic import BaseModel, Field

from .logger import init_logging
from .metrics import init_metrics
from .tracer import init_tracing

_TRUTHY = {"1", "true", "yes", "on"}


class TelemetryConfig(BaseModel):
    """Runtime configuration for telemetry exporters."""

    enable_tracing: bool = False
    enable_metrics: bool = False
    enable_logging: bool = False
    otlp_traces_endpoint: str | None = None
    otlp_metrics_endpoint: str | None = None
    otlp_logs_endpoint: str | None = None
    metrics_export_interval_ms: int = Field(default=5000, gt=0)
    service_name: str = "battleship-offline"
    service_namespace: str = "game"
    resource_attributes: dict[str, str] = Field(default_factory=dict)

    @classmethod
    def from_env(cls, **overrides: Any) -> "TelemetryConfig":
        """Construct config from env vars (`BATTLESHIP_*` + `OTEL_*`)."""

        data: Dict[str, Any] = cls().model_dump()

        toggles = {
            "enable_tracing": ("BATTLESHIP_ENABLE_TRACING", "OTEL_TRACES_ENABLED"),
            "enable_metrics": ("BATTLESHIP_ENABLE_METRICS", "OTEL_METRICS_ENABLED"),
            "enable_logging": ("BATTLESHIP_ENABLE_LOGGING", "OTEL_LOGS_ENABLED"),
        }
        for key, env_names in toggles.items():
            for name in env_names:
                value = os.getenv(name)
                if value is not None:
                    data[key] = value.strip().lower() in _TRUTHY
                    break

        base_endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
        for key, env_name, suffix in (
            ("otlp_traces_endpoint", "OTEL_EXPORTER_OTLP_TRACES_ENDPOINT", "v1/traces"),
            ("otlp_metrics_endpoint", "OTEL_EXPORTER_OTLP_METRICS_ENDPOINT", "v1/metrics"),
            ("otlp_logs_endpoint", "OTEL_EXPORTER_OTLP_LOGS_ENDPOINT", "v1/logs"),
        ):
            explicit = os.getenv(env_name)
            if explicit:
                data[key] = explicit
            elif base_endpoint:
                data[key] = f"{base_endpoint.rstrip('/')}/{suffix}"

        interval = os.getenv("OTEL_METRIC_EXPORT_INTERVAL")
        if interval:
            data["metrics_export_interval_ms"] = int(interval)

        if os.getenv("OTEL_SERVICE_NAME"):
            data["service_name"] = os.environ["OTEL_SERVICE_NAME"]
        if os.getenv("OTEL_SERVICE_NAMESPACE"):
            data["service_namespace"] = os.environ["OTEL_SERVICE_NAMESPACE"]

        resource_env = os.getenv("OTEL_RESOURCE_ATTRIBUTES")
        if resource_env:
            attrs = dict(data.get("resource_attributes", {}))
            for part in resource_env.split(","):
                if "=" not in part:
                    continue
                key, value = part.split("=", 1)
                attrs[key.strip()] = value.strip()
            data["resource_attributes"] = attrs

        # Configured endpoints switch their exporter on.
        for flag, endpoint in (
            ("enable_tracing", "otlp_traces_endpoint"),
            ("enable_metrics", "otlp_metrics_endpoint"),
            ("enable_logging", "otlp_logs_endpoint"),
        ):
            if data.get(endpoint):
                data[flag] = True

        data.update(overrides)
        return cls(**data)

    def resource_dict(self) -> dict[str, str]:
        """Resource attributes shared by every provider."""
        attributes = {
            "service.name": self.service_name,
            "service.namespace": self.service_namespace,
        }
        attributes.update(self.resource_attributes)
        return attributes


@lru_cache(maxsize=1)
def load_telemetry_config() -> TelemetryConfig:
    """Load and cache telemetry config from the environment."""

    return TelemetryConfig.from_env()


def init_telemetry(config: TelemetryConfig | None = None) -> TelemetryConfig:
    """Initialise telemetry subsystems lazily."""

    resolved = config or load_telemetry_config()

    if resolved.enable_tracing:
        init_tracing(resolved)
    if resolved.enable_metrics:
        init_metrics(resolved)
    if resolved.enable_logging:
        init_logging(resolved)
    return resolved
