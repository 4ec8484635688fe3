"""Gravity Forms MCP Metrics Configuration.

Local-only metrics collection using OpenTelemetry with a Prometheus reader.
Tool calls and bulk entry outcomes are counted; nothing is exported unless
the server explicitly initializes metrics.
"""

from __future__ import annotations

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

# =============================================================================
# SERVICE CONFIGURATION
# =============================================================================

SERVICE_NAME = os.getenv("OTEL_SERVICE_NAME", "gravity-forms-mcp")
SERVICE_VERSION = os.getenv("OTEL_SERVICE_VERSION", "1.0.0")
DEPLOYMENT_ENVIRONMENT = os.getenv("DEPLOYMENT_ENVIRONMENT", "local")


def is_test_environment() -> bool:
    """Detect if running in test environment."""
    return "PYTEST_CURRENT_TEST" in os.environ or "CI" in os.environ or "GITHUB_ACTIONS" in os.environ


# Disable metrics in test/CI environments by default
default_metrics_enabled = "false" if is_test_environment() else "true"
METRICS_ENABLED = os.getenv("MCP_METRICS_ENABLED", default_metrics_enabled).lower() == "true"

DEBUG_METRICS = os.getenv("MCP_METRICS_DEBUG", "false").lower() == "true"

# Metrics instances
meter = None
tool_calls_counter = None
bulk_entries_counter = None
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


def initialize_metrics():
    """Initialize local metrics collection with Prometheus endpoint."""
    global meter, tool_calls_counter, bulk_entries_counter, prometheus_reader

    if not METRICS_ENABLED:
        if DEBUG_METRICS:
            print("[METRICS] Telemetry disabled")
        return

    try:
        prometheus_reader = PrometheusMetricReader()
        meter_provider = MeterProvider(resource=get_resource(), metric_readers=[prometheus_reader])
        metrics.set_meter_provider(meter_provider)
        meter = metrics.get_meter(__name__)

        tool_calls_counter = meter.create_counter(
            name="mcp_tool_calls_total",
            description="Total number of MCP tool calls",
            unit="1",
        )
        bulk_entries_counter = meter.create_counter(
            name="gravity_forms_bulk_entries_total",
            description="Entries processed by bulk operations, by outcome",
            unit="1",
        )

        if DEBUG_METRICS:
            print(f"[METRICS] Initialized: {SERVICE_NAME} v{SERVICE_VERSION}")
    except Exception as e:
        if DEBUG_METRICS:
            print(f"[METRICS] Init failed: {e}")


def is_metrics_enabled() -> bool:
    """Check if metrics collection is enabled."""
    return METRICS_ENABLED and meter is not None


def record_tool_call_start(tool_name: str, args: tuple, kwargs: dict) -> float | None:
    """Record start of tool call, return start time."""
    if not is_metrics_enabled():
        return None

    start_time = time.time()
    _active_operations[f"{tool_name}_{start_time}"] = start_time
    return start_time


def _record_tool_call(tool_name: str, start_time: float | None, status: str) -> None:
    if tool_calls_counter:
        tool_calls_counter.add(
            1, {"tool_name": tool_name, "status": status, "environment": DEPLOYMENT_ENVIRONMENT}
        )
    if start_time:
        _active_operations.pop(f"{tool_name}_{start_time}", None)


def record_tool_call_success(tool_name: str, start_time: float | None, result_size: int = 0):
    """Record successful tool call."""
    if not is_metrics_enabled():
        return
    try:
        _record_tool_call(tool_name, start_time, "success")
    except Exception as e:
        if DEBUG_METRICS:
            print(f"[METRICS] Record success failed: {e}")


def record_tool_call_error(tool_name: str, start_time: float | None, error: Exception):
    """Record failed tool call."""
    if not is_metrics_enabled():
        return
    try:
        _record_tool_call(tool_name, start_time, "error")
    except Exception as e:
        if DEBUG_METRICS:
            print(f"[METRICS] Record error failed: {e}")


def record_bulk_entry_outcome(operation_type: str, success: bool) -> None:
    """Count one processed entry of a bulk operation."""
    if not is_metrics_enabled() or bulk_entries_counter is None:
        return
    try:
        bulk_entries_counter.add(
            1,
            {
                "operation_type": operation_type,
                "outcome": "success" if success else "failure",
                "environment": DEPLOYMENT_ENVIRONMENT,
            },
        )
    except Exception as e:
        if DEBUG_METRICS:
            print(f"[METRICS] Record bulk outcome failed: {e}")


def get_metrics_export() -> tuple[str, str]:
    """Export metrics in Prometheus format."""
    if not is_metrics_enabled() or not prometheus_reader:
        return "# Metrics not available\n", "text/plain"

    try:
        return generate_latest().decode("utf-8"), CONTENT_TYPE_LATEST
    except Exception as e:
        return f"# Error: {e}\n", "text/plain"


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
        "prometheus_enabled": prometheus_reader is not None,
    }


def ensure_metrics_initialized():
    """Initialize metrics when server starts."""
    global _metrics_initialized
    if _metrics_initialized:
        return

    if METRICS_ENABLED and not is_test_environment():
        initialize_metrics()
    _metrics_initialized = True


def shutdown_metrics():
    """Shutdown metrics collection."""
    if prometheus_reader:
        try:
            prometheus_reader.shutdown()
        except Exception as e:
            if DEBUG_METRICS:
                print(f"[METRICS] Shutdown failed: {e}")
