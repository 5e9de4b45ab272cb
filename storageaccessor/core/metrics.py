"""Prometheus metrics for admission decisions."""

from prometheus_client import Counter, Histogram

admission_decisions = Counter(
    "admission_decisions_total",
    "Total number of admission decisions",
    ["operation", "decision"],
)

admission_review_duration = Histogram(
    "admission_review_duration_seconds",
    "Time spent deciding an admission review",
)

resolution_errors = Counter(
    "resolution_errors_total",
    "Total number of cluster lookups that failed a decision",
    ["source"],
)
