"""Prometheus metrics for sniper runs."""

import logging

from prometheus_client import CollectorRegistry, Counter, Gauge, Histogram, push_to_gateway

logger = logging.getLogger(__name__)

# A batch job exits after one pass, so metrics go to their own registry
# and are pushed rather than scraped.
registry = CollectorRegistry()

target_checks_total = Counter(
    "sniper_target_checks_total",
    "Total number of target checks",
    ["outcome"],
    registry=registry,
)

check_failures_total = Counter(
    "sniper_check_failures_total",
    "Total number of failed target checks by reason",
    ["reason"],
    registry=registry,
)

target_check_duration_seconds = Histogram(
    "sniper_target_check_duration_seconds",
    "Time spent checking a single target",
    buckets=[1.0, 2.5, 5.0, 10.0, 20.0, 30.0, 60.0, 120.0],
    registry=registry,
)

targets_loaded = Gauge(
    "sniper_targets_loaded",
    "Number of tracking targets loaded for the last run",
    registry=registry,
)

identity_picks_total = Counter(
    "sniper_identity_picks_total",
    "Browsing identities picked by device class",
    ["device_class"],
    registry=registry,
)


def _reason_label(reason: str) -> str:
    """Collapse a free-form failure reason to a low-cardinality label."""
    return reason.split(":", 1)[0].strip().lower() or "unknown"


def record_check(succeeded: bool, duration_seconds: float, failure_reason: str | None = None) -> None:
    """Record the outcome of one target check."""
    target_checks_total.labels(outcome="success" if succeeded else "failure").inc()
    target_check_duration_seconds.observe(duration_seconds)
    if not succeeded and failure_reason:
        check_failures_total.labels(reason=_reason_label(failure_reason)).inc()


def record_identity(device_class: str) -> None:
    """Record a picked device class."""
    identity_picks_total.labels(device_class=device_class).inc()


def push_metrics(gateway_url: str, job: str) -> bool:
    """
    Push the run's metrics to a Pushgateway.

    Args:
        gateway_url: Pushgateway address; pushing is skipped when empty
        job: Job label

    Returns:
        True if metrics were pushed
    """
    if not gateway_url:
        return False
    try:
        push_to_gateway(gateway_url, job=job, registry=registry)
        return True
    except OSError as e:
        logger.warning(f"Could not push metrics to {gateway_url}: {e}")
        return False
