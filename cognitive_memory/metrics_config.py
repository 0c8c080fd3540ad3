"""Cognitive memory metrics.

Local-only tool call metrics using OpenTelemetry with a Prometheus reader.
Metrics are disabled under pytest and CI unless explicitly switched on via
``COGNITIVE_MEMORY_ENABLE_METRICS``, the same variable that feeds
``Settings.enable_metrics``. Both the import-time default here and the server
setting must be on for instruments to be created.
"""
from __future__ import annotations

import logging
import os
import socket
import time
from typing import Any

from opentelemetry import metrics
from opentelemetry.exporter.prometheus import PrometheusMetricReader
from opentelemetry.sdk.metrics import MeterProvider
from opentelemetry.sdk.resources import Resource
from prometheus_client import CONTENT_TYPE_LATEST
from prometheus_client import generate_latest

logger = logging.getLogger(__name__)

SERVICE_NAME = os.getenv("OTEL_SERVICE_NAME", "cognitive-memory")
SERVICE_VERSION = os.getenv("OTEL_SERVICE_VERSION", "0.1.0")
DEPLOYMENT_ENVIRONMENT = os.getenv("DEPLOYMENT_ENVIRONMENT", "local")


def is_test_environment() -> bool:
    """Detect if running in test environment."""
    return "PYTEST_CURRENT_TEST" in os.environ or "CI" in os.environ or "GITHUB_ACTIONS" in os.environ


default_metrics_enabled = "false" if is_test_environment() else "true"
METRICS_ENV_VAR = "COGNITIVE_MEMORY_ENABLE_METRICS"
METRICS_ENABLED = os.getenv(METRICS_ENV_VAR, default_metrics_enabled).lower() == "true"

meter = None
tool_calls_counter = None
tool_duration_histogram = None
tool_result_size_histogram = None
prometheus_reader = None

_active_operations: dict[str, float] = {}
_metrics_initialized = False


def get_resource() -> Resource:
    """Create OpenTelemetry resource with service information."""
    return Resource.create(
        {
            "service.name": SERVICE_NAME,
            "service.version": SERVICE_VERSION,
            "deployment.environment": DEPLOYMENT_ENVIRONMENT,
            "host.name": socket.gethostname(),
        }
    )


def initialize_metrics() -> None:
    """Create the meter provider, call counter and histograms."""
    global meter, tool_calls_counter, tool_duration_histogram, tool_result_size_histogram, prometheus_reader

    prometheus_reader = PrometheusMetricReader()
    meter_provider = MeterProvider(resource=get_resource(), metric_readers=[prometheus_reader])
    metrics.set_meter_provider(meter_provider)
    meter = metrics.get_meter(__name__)

    tool_calls_counter = meter.create_counter(
        name="cognitive_memory_tool_calls_total",
        description="Total number of MCP tool calls",
        unit="1",
    )
    tool_duration_histogram = meter.create_histogram(
        name="cognitive_memory_tool_duration_seconds",
        description="Wall-clock duration of MCP tool calls",
        unit="s",
    )
    tool_result_size_histogram = meter.create_histogram(
        name="cognitive_memory_tool_result_size_bytes",
        description="Size of MCP tool results",
        unit="By",
    )
    logger.info("Metrics initialized for %s v%s", SERVICE_NAME, SERVICE_VERSION)


def is_metrics_enabled() -> bool:
    """Check if metrics collection is enabled and initialized."""
    return METRICS_ENABLED and meter is not None


def record_tool_call_start(tool_name: str, args: tuple, kwargs: dict) -> float | None:
    """Record start of tool call, return start time."""
    if not is_metrics_enabled():
        return None

    start_time = time.time()
    _active_operations[f"{tool_name}_{start_time}"] = start_time
    return start_time


def _record_completion(tool_name: str, start_time: float | None, status: str) -> None:
    attributes = {"tool_name": tool_name, "status": status, "environment": DEPLOYMENT_ENVIRONMENT}
    if tool_calls_counter:
        tool_calls_counter.add(1, attributes)
    if start_time:
        _active_operations.pop(f"{tool_name}_{start_time}", None)
        if tool_duration_histogram:
            tool_duration_histogram.record(time.time() - start_time, attributes)


def record_tool_call_success(tool_name: str, start_time: float | None, result_size: int = 0) -> None:
    """Record successful tool call."""
    if not is_metrics_enabled():
        return
    _record_completion(tool_name, start_time, "success")
    if tool_result_size_histogram:
        tool_result_size_histogram.record(
            result_size, {"tool_name": tool_name, "environment": DEPLOYMENT_ENVIRONMENT}
        )


def record_tool_call_error(tool_name: str, start_time: float | None, error: Exception) -> None:
    """Record failed tool call."""
    if not is_metrics_enabled():
        return
    _record_completion(tool_name, start_time, "error")


def get_metrics_export() -> tuple[str, str]:
    """Export metrics in Prometheus format."""
    if not is_metrics_enabled() or not prometheus_reader:
        return "# Metrics not available\n", "text/plain"
    return generate_latest().decode("utf-8"), CONTENT_TYPE_LATEST


def get_metrics_summary() -> dict[str, Any]:
    """Get metrics summary for debugging."""
    if not is_metrics_enabled():
        return {"status": "disabled"}

    return {
        "status": "active",
        "service_name": SERVICE_NAME,
        "service_version": SERVICE_VERSION,
        "environment": DEPLOYMENT_ENVIRONMENT,
        "active_operations": len(_active_operations),
    }


def ensure_metrics_initialized(enabled: bool = True) -> bool:
    """Initialize metrics once when the server starts."""
    global _metrics_initialized
    if not _metrics_initialized and enabled and METRICS_ENABLED:
        initialize_metrics()
    _metrics_initialized = True
    return is_metrics_enabled()
