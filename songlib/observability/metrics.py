from __future__ import annotations

from flask import Blueprint, Response
from prometheus_client import Counter, Histogram, generate_latest

metrics_blueprint = Blueprint("metrics_bp", __name__)

CONTENT_TYPE_LATEST = "text/plain; version=0.0.4; charset=utf-8"

SONG_OPERATIONS = Counter(
    "songlib_song_operations_total",
    "Song use cases executed, by operation and outcome (ok, rejected, failed).",
    ["operation", "outcome"],
)
DETAIL_FETCH_FAILURES = Counter(
    "songlib_detail_fetch_failure_total",
    "Failed lookups against the external song detail service.",
)
DETAIL_FETCH_TIME = Histogram(
    "songlib_detail_fetch_seconds",
    "Latency of lookups against the external song detail service.",
    buckets=(0.05, 0.1, 0.25, 0.5, 1, 2, 5, 10, float("inf")),
)


def record_song_operation(operation: str, outcome: str) -> None:
    SONG_OPERATIONS.labels(operation=operation, outcome=outcome).inc()


def record_detail_fetch(duration_seconds: float, *, ok: bool) -> None:
    DETAIL_FETCH_TIME.observe(max(0.0, duration_seconds))
    if not ok:
        DETAIL_FETCH_FAILURES.inc()


@metrics_blueprint.route("/metrics")
def metrics_endpoint() -> Response:
    return Response(generate_latest(), mimetype=CONTENT_TYPE_LATEST)
