"""OpenTelemetry instrumentation for ghread."""

from typing import Any

from opentelemetry import metrics, trace
from opentelemetry.exporter.otlp.proto.http.metric_exporter import OTLPMetricExporter
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.metrics.export import PeriodicExportingMetricReader
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor

from ghread.logger import get_logger

logger = get_logger(__name__)

_initialized = False
_tracer: trace.Tracer | None = None
_meter: metrics.Meter | None = None
_request_counter: metrics.Counter | None = None
_duration_histogram: metrics.Histogram | None = None


def init_telemetry(
    endpoint: str,
    service_name: str,
    service_version: str | None = None,
) -> None:
    """Initialize OpenTelemetry tracing and metrics.

    Idempotent. An empty endpoint leaves telemetry disabled.

    Args:
        endpoint: OTLP endpoint URL (e.g., http://localhost:4318)
        service_name: Service name for telemetry (e.g., "ghread")
        service_version: Optional service version (e.g., "0.1.0")
    """
    global _initialized, _tracer, _meter
    global _request_counter, _duration_histogram

    if _initialized or not endpoint:
        return

    resource_attrs = {"service.name": service_name}
    if service_version:
        resource_attrs["service.version"] = service_version
    resource = Resource.create(resource_attrs)

    trace_exporter = OTLPSpanExporter(endpoint=f"{endpoint}/v1/traces")
    trace_provider = TracerProvider(resource=resource)
    trace_provider.add_span_processor(BatchSpanProcessor(trace_exporter))
    trace.set_tracer_provider(trace_provider)
    _tracer = trace.get_tracer(__name__)

    metric_exporter = OTLPMetricExporter(endpoint=f"{endpoint}/v1/metrics")
    metric_reader = PeriodicExportingMetricReader(metric_exporter, export_interval_millis=10000)
    meter_provider = MeterProvider(resource=resource, metric_readers=[metric_reader])
    metrics.set_meter_provider(meter_provider)
    _meter = metrics.get_meter(__name__)

    _request_counter = _meter.create_counter(
        "github.requests",
        unit="requests",
        description="Number of GitHub REST requests issued",
    )
    _duration_histogram = _meter.create_histogram(
        "github.request.duration",
        unit="ms",
        description="Duration of GitHub REST requests in milliseconds",
    )

    _initialized = True
    version_info = f", version={service_version}" if service_version else ""
    logger.info(
        f"OpenTelemetry initialized: endpoint={endpoint}, service={service_name}{version_info}"
    )


def get_tracer() -> trace.Tracer:
    """Get the global tracer, or a no-op tracer if not initialized."""
    return _tracer or trace.get_tracer(__name__)


def record_request(status: int, host_variant: str, duration_ms: float) -> None:
    """Record one completed REST request.

    Args:
        status: HTTP status of the response
        host_variant: "github" or "github-enterprise"
        duration_ms: Wall time of the request including body decode
    """
    if not _initialized:
        return

    attributes: dict[str, Any] = {
        "http.status_code": status,
        "github.host_variant": host_variant,
    }

    if _request_counter:
        _request_counter.add(1, attributes)

    if _duration_histogram and duration_ms > 0:
        _duration_histogram.record(duration_ms, attributes)


def reset_telemetry() -> None:
    """Reset module state (for testing only)."""
    global _initialized, _tracer, _meter
    global _request_counter, _duration_histogram
    _initialized = False
    _tracer = None
    _meter = None
    _request_counter = None
    _duration_histogram = None
