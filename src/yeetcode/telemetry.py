"""Tracing setup.

Spans are shipped to Axiom over OTLP/HTTP when AXIOM_API_TOKEN is set and
printed to stdout otherwise.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

from opentelemetry import trace
from opentelemetry.exporter.otlp.proto.http.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import SERVICE_NAME, Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter, SpanExporter

from yeetcode.configuration import Settings

logger = logging.getLogger(__name__)

SERVICE = "yeetcode"
INSTRUMENTATION_NAME = "yeetcode"
AXIOM_TRACES_ENDPOINT = "https://api.axiom.co/v1/traces"


@dataclass
class Telemetry:
    """Process-scoped tracing state handed to the application."""

    tracer: trace.Tracer
    provider: Optional[TracerProvider] = field(default=None)

    @classmethod
    def disabled(cls) -> "Telemetry":
        return cls(tracer=trace.NoOpTracer())

    @classmethod
    def from_provider(cls, provider: TracerProvider) -> "Telemetry":
        return cls(tracer=provider.get_tracer(INSTRUMENTATION_NAME), provider=provider)

    def shutdown(self) -> None:
        if self.provider is not None:
            self.provider.shutdown()


def build_exporter(settings: Settings) -> SpanExporter:
    if not settings.axiom_api_token:
        logger.info("AXIOM_API_TOKEN not set, writing spans to stdout")
        return ConsoleSpanExporter()

    return OTLPSpanExporter(
        endpoint=AXIOM_TRACES_ENDPOINT,
        headers={
            "Authorization": f"Bearer {settings.axiom_api_token}",
            "X-AXIOM-DATASET": settings.axiom_dataset,
        },
    )


def setup_telemetry(settings: Settings, exporter: Optional[SpanExporter] = None) -> Telemetry:
    """Build the tracer provider once for the whole process."""
    provider = TracerProvider(resource=Resource.create({SERVICE_NAME: SERVICE}))
    provider.add_span_processor(BatchSpanProcessor(exporter or build_exporter(settings)))
    return Telemetry.from_provider(provider)
