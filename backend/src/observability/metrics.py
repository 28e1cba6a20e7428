"""Prometheus metrics for the declaration request backend.

Defines and exposes operational metrics for monitoring and alerting.
"""

from prometheus_client import Counter, Histogram

requests_created_total = Counter(
    "declara_requests_created_total",
    "Total number of declaration requests submitted",
)

request_status_updates_total = Counter(
    "declara_request_status_updates_total",
    "Total number of admin status updates applied",
    ["status"]  # target status: PROCESSING|COMPLETED|REJECTED
)

documents_generated_total = Counter(
    "declara_documents_generated_total",
    "Batch generation item outcomes",
    ["outcome"]  # outcome: generated|skipped|failed
)

document_render_seconds = Histogram(
    "declara_document_render_seconds",
    "Time spent rendering one declaration document in seconds",
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0]
)
