"""Public telemetry helpers for the offline Battleship engine."""

from __future__ import annotations

from .config import TelemetryConfig, init_telemetry, load_telemetry_config
from .logger import configure_console_logging, get_logger, init_logging
from .metrics import get_meter, init_metrics, record_game_duration, record_game_metric
from .tracer import get_tracer, init_tracing, shutdown_tracing

__all__ = [
    "TelemetryConfig",
    "configure_console_logging",
    "get_logger",
    "get_tracer",
    "get_meter",
    "record_game_metric",
    "record_game_duration",
    "init_logging",
    "init_tracing",
    "init_metrics",
    "shutdown_tracing",
    "load_telemetry_config",
    "init_telemetry",
]
