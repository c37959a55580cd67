"""Tracing helpers built on OpenTelemetry."""

from __future__ import annotations

from typing import TYPE_CHECKING

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import (
    BatchSpanProcessor,
    ConsoleSpanExporter,
    SimpleSpanProcessor,
)
from opentelemetry.trace import Tracer

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .config import TelemetryConfig


_TRACERS: dict[str, Tracer] = {}
_TRACER_PROVIDER: TracerProvider | None = None


def get_tracer(name: str = "battleship_offline") -> Tracer:
    """Return a tracer for ``name``, served by whichever provider is installed."""
    tracer = _TRACERS.get(name)
    if tracer is None:
        # ProxyTracer picks up a provider installed after module import time.
        tracer = trace.get_tracer(name)
        _TRACERS[name] = tracer
    return tracer


def init_tracing(config: TelemetryConfig) -> TracerProvider:
    """Install a TracerProvider according to the config."""
    global _TRACER_PROVIDER

    provider = TracerProvider(resource=Resource.create(config.resource_dict()))

    if config.otlp_traces_endpoint:
        exporter = OTLPSpanExporter(endpoint=config.otlp_traces_endpoint, insecure=True)
        provider.add_span_processor(BatchSpanProcessor(exporter))
    else:
        provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))

    trace.set_tracer_provider(provider)
    _TRACER_PROVIDER = provider
    return provider


def shutdown_tracing() -> None:
    """Flush and stop the installed provider, if any."""
    global _TRACER_PROVIDER
    if _TRACER_PROVIDER is not None:
        _TRACER_PROVIDER.shutdown()
        _TRACER_PROVIDER = None
