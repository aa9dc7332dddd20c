"""Named spans on OpenTelemetry, carried through structlog events.

Spans are started with the SDK tracer as the current span. Every event logged
inside one gets ``span`` (the innermost span with its trace, span and parent
IDs) and ``spans`` (all open spans, outermost first) added by
:func:`add_span_context`. Finished spans are not exported anywhere.
"""

from __future__ import annotations

import functools
import inspect
import time
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any, Callable, TypeVar

import structlog
from opentelemetry import context, trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider


F = TypeVar("F", bound=Callable[..., Any])

SERVICE_NAME = "tracing-demo"

# Open spans of the current context, outermost first.
_STACK_KEY = context.create_key("tracing_demo.span_stack")

_PROVIDER: TracerProvider | None = None


def configure_tracing(service_name: str = SERVICE_NAME) -> TracerProvider:
    """Install the SDK tracer provider once and return it."""

    global _PROVIDER
    if _PROVIDER is None:
        _PROVIDER = TracerProvider(resource=Resource(attributes={"service.name": service_name}))
        trace.set_tracer_provider(_PROVIDER)
    return _PROVIDER


def get_tracer(name: str = __name__) -> trace.Tracer:
    return configure_tracing().get_tracer(name)


def current_spans() -> tuple[trace.Span, ...]:
    return context.get_value(_STACK_KEY) or ()


@contextmanager
def span(name: str, /, **fields: Any) -> Iterator[trace.Span]:
    """Run the block as the current span; exceptions are recorded and re-raised."""

    attributes = {key: value for key, value in fields.items() if value is not None}
    with get_tracer().start_as_current_span(name, attributes=attributes) as current:
        token = context.attach(context.set_value(_STACK_KEY, (*current_spans(), current)))
        try:
            yield current
        finally:
            elapsed_ms = (time.time_ns() - current.start_time) / 1_000_000.0
            structlog.get_logger("span").debug("span_closed", elapsed_ms=round(elapsed_ms, 2))
            context.detach(token)


def _describe(current: trace.Span) -> dict[str, Any]:
    span_context = current.get_span_context()
    described: dict[str, Any] = {
        "name": getattr(current, "name", None),
        "trace_id": format(span_context.trace_id, "032x"),
        "span_id": format(span_context.span_id, "016x"),
    }
    parent = getattr(current, "parent", None)
    if parent is not None:
        described["parent_span_id"] = format(parent.span_id, "016x")
    described["fields"] = dict(getattr(current, "attributes", None) or {})
    return described


def add_span_context(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    current = trace.get_current_span()
    if not current.get_span_context().is_valid:
        return event_dict

    event_dict["span"] = _describe(current)
    event_dict["spans"] = [_describe(s) for s in current_spans()]
    return event_dict


def _bound_fields(func: Callable[..., Any], args: tuple, kwargs: dict, skip: frozenset[str]) -> dict[str, str]:
    try:
        bound = inspect.signature(func).bind_partial(*args, **kwargs)
    except TypeError:
        # Let the real call raise the argument error.
        return {}
    return {key: repr(value) for key, value in bound.arguments.items() if key not in skip}


def instrument(name: str | None = None, *, skip: tuple[str, ...] = ()) -> Callable[[F], F]:
    """Run the decorated function inside a span recording its arguments.

    Works for plain and ``async`` functions. ``functools.wraps`` keeps the
    original signature visible, so FastAPI still resolves the parameters of
    an instrumented endpoint.
    """

    skipped = frozenset(skip)

    def decorator(func: F) -> F:
        span_name = name or func.__name__

        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            with span(span_name, **_bound_fields(func, args, kwargs, skipped)):
                return func(*args, **kwargs)

        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
            with span(span_name, **_bound_fields(func, args, kwargs, skipped)):
                return await func(*args, **kwargs)

        if inspect.iscoroutinefunction(func):
            return async_wrapper  # type: ignore[return-value]
        return sync_wrapper  # type: ignore[return-value]

    return decorator
