"""
Tracing utilities for benchmark runs.

Wraps each lifecycle phase of a benchmark module (init, setup, every
measured run) in an OpenTelemetry span. Without an explicit exporter the
globally configured provider is used, which is a no-op unless the host
application installed one.
"""

import os
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import ConsoleSpanExporter, SimpleSpanProcessor
from opentelemetry.trace import Status, StatusCode


class TracingConfig:
    """Configuration for tracing setup."""

    def __init__(
        self,
        service_name: Optional[str] = None,
        enable_console_export: bool = False,
    ):
        self.service_name = service_name or os.getenv("MICROBENCH_SERVICE_NAME", "microbench")
        self.enable_console_export = enable_console_export


class Tracer:
    """Span factory used by the runner."""

    def __init__(
        self,
        config: Optional[TracingConfig] = None,
        provider: Optional[TracerProvider] = None,
    ):
        self.config = config or TracingConfig()
        self._provider = provider
        self._otel_tracer = None
        self._initialized = False

    def initialize(self) -> "Tracer":
        """Initialize the tracing backend."""
        if self._initialized:
            return self

        if self._provider is None and self.config.enable_console_export:
            resource = Resource.create({"service.name": self.config.service_name})
            self._provider = TracerProvider(resource=resource)
            self._provider.add_span_processor(SimpleSpanProcessor(ConsoleSpanExporter()))

        if self._provider is not None:
            self._otel_tracer = self._provider.get_tracer(self.config.service_name)
        else:
            self._otel_tracer = trace.get_tracer(self.config.service_name)

        self._initialized = True
        return self

    def shutdown(self) -> None:
        """Flush and shut down a provider owned by this tracer."""
        if self._provider is not None:
            self._provider.shutdown()

    @contextmanager
    def span(
        self,
        name: str,
        attributes: Optional[dict] = None,
    ) -> Iterator[Any]:
        """Create a traced span.

        Usage:
            with tracer.span("setup", {"benchmark.module": "fibonacci"}) as span:
                # do work
                span.set_attribute("key", "value")
        """
        if not self._initialized:
            self.initialize()

        span_obj = self._otel_tracer.start_span(name)
        if attributes:
            for key, value in attributes.items():
                span_obj.set_attribute(key, value)

        try:
            yield span_obj
        except Exception as e:
            span_obj.set_status(Status(StatusCode.ERROR, str(e)))
            span_obj.record_exception(e)
            raise
        finally:
            span_obj.end()
