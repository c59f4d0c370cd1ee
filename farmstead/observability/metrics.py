"""Prometheus metrics for Farmstead.

Counts how reads were served and how audit writes went, so a
degraded backend shows up as a shift from live to cache results.
"""

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    Counter,
    generate_latest,
    start_http_server,
)

from farmstead.config.models.observability import MetricsConfig
from farmstead.observability.logging import get_logger

logger = get_logger(__name__)

# Read-through cache metrics
CACHE_FETCHES = Counter(
    "farmstead_cache_fetches_total",
    "Read-through fetches by the source that served them",
    labelnames=["entity", "source"],
)

CACHE_STORE_ERRORS = Counter(
    "farmstead_cache_store_errors_total",
    "Key-value store failures treated as cache-absent",
    labelnames=["operation"],
)

CACHE_INVALID_ENTRIES = Counter(
    "farmstead_cache_invalid_entries_total",
    "Cached entries rejected at the read boundary",
    labelnames=["entity"],
)

# Audit metrics
AUDIT_OUTCOMES = Counter(
    "farmstead_audit_outcomes_total",
    "Audited mutations by strategy and result",
    labelnames=["strategy", "result"],
)

# Identifier allocation metrics
ID_ALLOCATIONS = Counter(
    "farmstead_id_allocations_total",
    "Identifier allocations by outcome",
    labelnames=["outcome"],
)


def render_metrics() -> tuple[bytes, str]:
    """Return the current metrics in Prometheus text format with its content type."""
    return generate_latest(), CONTENT_TYPE_LATEST


def start_metrics_server(config: MetricsConfig) -> bool:
    """Expose metrics on config.port when enabled.

    Returns:
        True if the exposition server was started
    """
    if not config.enabled:
        return False
    start_http_server(config.port)
    logger.info("metrics_server_started", port=config.port)
    return True
