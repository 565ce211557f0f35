"""
Prometheus metrics blueprint.

Exposes /metrics with HTTP request metrics and per-method RPC call metrics.
This endpoint should be restricted to internal network or monitoring systems only.
"""
import os
import time

from flask import Blueprint, Response, request, g
from prometheus_client import Counter, Histogram, Gauge, generate_latest, CollectorRegistry, CONTENT_TYPE_LATEST
from prometheus_client import multiprocess, REGISTRY

metrics_bp = Blueprint('metrics', __name__)

# Check if running in multi-process mode (Gunicorn)
MULTIPROCESS_MODE = os.environ.get('PROMETHEUS_MULTIPROC_DIR') is not None

if MULTIPROCESS_MODE:
    registry = CollectorRegistry()
    multiprocess.MultiProcessCollector(registry)
else:
    registry = REGISTRY

_metric_registry = registry if not MULTIPROCESS_MODE else None

# HTTP Request Metrics
http_requests_total = Counter(
    'shopdb_http_requests_total',
    'Total HTTP requests',
    ['method', 'endpoint', 'http_status'],
    registry=_metric_registry
)

http_requests_in_flight = Gauge(
    'shopdb_http_requests_in_flight',
    'Number of HTTP requests currently being processed',
    registry=_metric_registry
)

# RPC Metrics
rpc_calls_total = Counter(
    'shopdb_rpc_calls_total',
    'Total RPC calls by method and outcome (ok or error kind)',
    ['method', 'outcome'],
    registry=_metric_registry
)

rpc_call_duration_seconds = Histogram(
    'shopdb_rpc_call_duration_seconds',
    'RPC call latency in seconds',
    ['method'],
    registry=_metric_registry,
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0)
)


def record_rpc_call(method, outcome, duration):
    """Count one RPC call and observe its latency."""
    rpc_calls_total.labels(method=method, outcome=outcome).inc()
    rpc_call_duration_seconds.labels(method=method).observe(duration)


def setup_metrics_instrumentation(app):
    """Register before/after request hooks for HTTP metrics."""

    @app.before_request
    def before_request_metrics():
        g._prometheus_metrics_start_time = time.time()
        http_requests_in_flight.inc()

    @app.after_request
    def after_request_metrics(response):
        if hasattr(g, '_prometheus_metrics_start_time'):
            http_requests_total.labels(
                method=request.method,
                endpoint=request.endpoint or 'unknown',
                http_status=response.status_code
            ).inc()
            http_requests_in_flight.dec()
        return response


@metrics_bp.route('/metrics')
def metrics():
    """
    Prometheus metrics endpoint.

    SECURITY NOTE:
    - This endpoint is NOT authenticated
    - Should be restricted by network/firewall rules in production
    """
    return Response(generate_latest(registry), mimetype=CONTENT_TYPE_LATEST)
