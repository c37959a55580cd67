"""Metrics helper utilities."""

from __future__ import annotations

from typing import TYPE_CHECKING, Mapping

from opentelemetry import metrics as otel_metrics
from opentelemetry.exporter.otlp.proto.grpc.metric_exporter import OTLPMetricExporter
from opentelemetry.metrics import Counter, Histogram, Meter
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource

if TYPE_CHECKING:  # pragma: no cover
    from .config import TelemetryConfig

MetricAttributes = Mapping[str, str | bool | int | float]

_METER_PROVIDER: MeterProvider | None = None
_METERS: dict[str, Meter] = {}
_COUNTERS: dict[str, Counter] = {}
_HISTOGRAMS: dict[str, Histogram] = {}


def get_meter(name: str = "battleship_offline") -> Meter:
    """Return a meter for ``name``, served by whichever provider is installed."""
    meter = _METERS.get(name)
    if meter is None:
        meter = otel_metrics.get_meter(name)
        _METERS[name] = meter
    return meter


def init_metrics(config: TelemetryConfig) -> MeterProvider:
    """Install a MeterProvider, exporting over OTLP when an endpoint is set."""
    global _METER_PROVIDER, _COUNTERS, _HISTOGRAMS

    readers = []
    if config.otlp_metrics_endpoint:
        exporter = OTLPMetricExporter(endpoint=config.otlp_metrics_endpoint, insecure=True)
        readers.append(
            PeriodicExportingMetricReader(
                exporter, export_interval_millis=config.metrics_export_interval_ms
            )
        )

    provider = MeterProvider(
        resource=Resource.create(config.resource_dict()), metric_readers=readers
    )
    otel_metrics.set_meter_provider(provider)

    _METER_PROVIDER = provider
    _COUNTERS = {}
    _HISTOGRAMS = {}
    return provider


def record_game_metric(name: str, value: float, attrs: MetricAttributes | None = None) -> None:
    """Add ``value`` to the counter called ``name``, creating it on first use."""
    instrument = _COUNTERS.get(name)
    if instrument is None:
        instrument = get_meter().create_counter(name)
        _COUNTERS[name] = instrument
    instrument.add(value, attributes=attrs or {})


def record_game_duration(name: str, seconds: float, attrs: MetricAttributes | None = None) -> None:
    """Record a duration sample on the histogram called ``name``."""
    instrument = _HISTOGRAMS.get(name)
    if instrument is None:
        instrument = get_meter().create_histogram(name, unit="s")
        _HISTOGRAMS[name] = instrument
    instrument.record(seconds, attributes=attrs or {})
