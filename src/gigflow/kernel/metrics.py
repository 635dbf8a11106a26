"""
Prometheus metrics collection for gigflow.

Provides observability into workflow transitions, check-ins, the offline
queue, suspensions and notification dispatch.
"""

import time
from collections.abc import Callable
from functools import wraps
from typing import ParamSpec, TypeVar

from prometheus_client import Counter, Gauge, Histogram, start_http_server

# ============================================================================
# Workflow Metrics
# ============================================================================

transitions_total = Counter(
    "gigflow_transitions_total",
    "Total number of event workflow transitions attempted",
    ["action", "status"],  # status: success, rejected, failure
)

transition_duration_seconds = Histogram(
    "gigflow_transition_duration_seconds",
    "Duration of workflow operations in seconds",
    ["operation"],
    buckets=(0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0),
)

# ============================================================================
# Check-in Metrics
# ============================================================================

vendor_updates_total = Counter(
    "gigflow_vendor_updates_total",
    "Total number of vendor check-in updates",
    ["outcome"],  # applied, queued, rejected
)

funds_released_total = Counter(
    "gigflow_funds_released_total",
    "Total number of vendors flagged as eligible for payout",
)

stipends_released_total = Counter(
    "gigflow_stipends_released_total",
    "Total number of halfway stipend releases",
)

reviews_submitted_total = Counter(
    "gigflow_reviews_submitted_total",
    "Total number of vendor reviews submitted",
    ["rating"],
)

# ============================================================================
# Offline Queue Metrics
# ============================================================================

offline_queue_depth = Gauge(
    "gigflow_offline_queue_depth",
    "Number of vendor updates waiting for connectivity",
)

offline_actions_replayed_total = Counter(
    "gigflow_offline_actions_replayed_total",
    "Total number of queued actions processed during replay",
    ["outcome"],  # applied, rejected, storage_failure
)

# ============================================================================
# Side-effect Metrics
# ============================================================================

suspensions_total = Counter(
    "gigflow_suspensions_total",
    "Total number of contractor suspensions triggered by one-star reviews",
)

inventory_discrepancies_total = Counter(
    "gigflow_inventory_discrepancies_total",
    "Total number of inventory discrepancy reports",
    ["notified"],
)

notifications_total = Counter(
    "gigflow_notifications_total",
    "Total number of notification dispatch attempts",
    ["kind", "status"],  # status: sent, failed
)

# ============================================================================
# Helper Functions
# ============================================================================

P = ParamSpec("P")
R = TypeVar("R")


def track_duration(operation: str) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """
    Decorator to track workflow operation duration.

    Args:
        operation: Operation name used as the histogram label
    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            start = time.perf_counter()
            try:
                return func(*args, **kwargs)
            finally:
                transition_duration_seconds.labels(operation=operation).observe(
                    time.perf_counter() - start
                )

        return wrapper

    return decorator


def start_metrics_server(port: int = 9090) -> None:
    """
    Start Prometheus metrics HTTP server.

    Args:
        port: Port to listen on (default: 9090)
    """
    start_http_server(port)
