"""OpenTelemetry spans for song use cases and detail lookups.

Everything here degrades to a no-op when the ``otel`` extra is not installed
or no OTLP endpoint is configured.
"""

import os
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from flask import Flask

try:
    from opentelemetry import trace
    from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
    from opentelemetry.instrumentation.flask import FlaskInstrumentor
    from opentelemetry.sdk.resources import Resource
    from opentelemetry.sdk.trace import TracerProvider
    from opentelemetry.sdk.trace.export import BatchSpanProcessor
except Exception:  # pragma: no cover - optional dependency
    trace = None  # type: ignore
    FlaskInstrumentor = None  # type: ignore
    Resource = None  # type: ignore

TRACER_NAME = "songlib"


def otlp_endpoint(app: Flask) -> Optional[str]:
    return app.config.get("OTEL_EXPORTER_OTLP_ENDPOINT") or os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")


def service_resource_attributes(app: Flask) -> Dict[str, Any]:
    """Resource attributes shared by exported spans and log records."""
    return {
        "service.name": app.config.get("OTEL_SERVICE_NAME", "song-library"),
        "songlib.detail_service.configured": bool(app.config.get("EXTERNAL_API_URL")),
    }


def init_tracing(app: Flask) -> bool:
    """Export spans for requests and song operations when OTLP is configured."""
    endpoint = otlp_endpoint(app)
    if FlaskInstrumentor is None or not endpoint:
        return False

    provider = TracerProvider(resource=Resource.create(service_resource_attributes(app)))
    provider.add_span_processor(
        BatchSpanProcessor(
            OTLPSpanExporter(
                endpoint=endpoint,
                headers=app.config.get("OTEL_EXPORTER_OTLP_HEADERS") or os.getenv("OTEL_EXPORTER_OTLP_HEADERS"),
                insecure=app.config.get("OTEL_EXPORTER_OTLP_INSECURE", True),
            )
        )
    )
    trace.set_tracer_provider(provider)
    # Song ids in the path are high-cardinality; spans are named by route instead
    FlaskInstrumentor().instrument_app(app, excluded_urls="healthz,readyz,metrics")
    app.logger.info("Tracing song operations to %s", endpoint)
    return True


def _get_tracer():
    if trace is None:
        return None
    return trace.get_tracer(TRACER_NAME)


@contextmanager
def song_span(name: str, **attributes: Any) -> Iterator[Optional[Any]]:
    """Open a span named ``songlib.<name>`` carrying the non-null ``attributes``.

    Yields the span (or ``None`` without OpenTelemetry) so callers can add the
    outcome once it is known.
    """
    tracer = _get_tracer()
    if tracer is None:
        yield None
        return
    with tracer.start_as_current_span(f"songlib.{name}") as span:
        for key, value in attributes.items():
            if value is not None:
                span.set_attribute(f"songlib.{key}", value)
        yield span


def set_span_outcome(span, outcome: str, **attributes: Any) -> None:
    if span is None:
        return
    span.set_attribute("songlib.outcome", outcome)
    for key, value in attributes.items():
        if value is not None:
            span.set_attribute(f"songlib.{key}", value)


__all__ = ["init_tracing", "song_span", "set_span_outcome", "service_resource_attributes", "otlp_endpoint"]
