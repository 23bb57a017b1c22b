"""
Prometheus metrics for textload runs

Counters are populated on the driver once a load has been materialised
(see LoadResult.summarize), never from inside executor tasks.
"""
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Histogram,
    generate_latest,
)


REGISTRY = CollectorRegistry()


# =======================
# LOAD METRICS
# =======================

# status: accepted, rejected
records_total = Counter(
    name="textload_records_total",
    documentation="Total number of records that reached the end of the load pipeline",
    labelnames=["status"],
    registry=REGISTRY,
)

# kind: type_mismatch, parse_error, not_enough_input, too_much_input, validation
rejections_total = Counter(
    name="textload_rejections_total",
    documentation="Total number of rejected records by rejection kind",
    labelnames=["kind"],
    registry=REGISTRY,
)

# Warning-severity rule messages; they never reject a record
validation_warnings_total = Counter(
    name="textload_validation_warnings_total",
    documentation="Total number of validation warnings (non-blocking issues)",
    labelnames=["mode"],
    registry=REGISTRY,
)

# mode: delimited, delimited_with_key, fixed_length
load_duration_seconds = Histogram(
    name="textload_load_duration_seconds",
    documentation="Wall-clock time of a materialised load in seconds",
    labelnames=["mode"],
    buckets=[0.5, 1.0, 5.0, 10.0, 30.0, 60.0, 300.0, 900.0, 3600.0],
    registry=REGISTRY,
)


def get_metrics() -> bytes:
    """Prometheus text exposition of the textload registry."""
    return generate_latest(REGISTRY)


def get_content_type() -> str:
    return CONTENT_TYPE_LATEST


def record_load(
    mode: str,
    accepted: int,
    rejected_by_kind: dict[str, int],
    duration: float | None = None,
    warnings: int = 0,
) -> None:
    """
    Record the outcome of one load.

    Args:
        mode: Load entry point used
        accepted: Number of accepted records
        rejected_by_kind: Rejected record counts keyed by rejection kind
        duration: Optional wall-clock duration in seconds
        warnings: Number of warning-severity rule messages
    """
    records_total.labels(status="accepted").inc(accepted)
    records_total.labels(status="rejected").inc(sum(rejected_by_kind.values()))

    for kind, count in rejected_by_kind.items():
        rejections_total.labels(kind=kind).inc(count)

    validation_warnings_total.labels(mode=mode).inc(warnings)

    if duration is not None:
        load_duration_seconds.labels(mode=mode).observe(duration)
