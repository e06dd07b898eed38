"""
Shared OTel span event emission helper for the schema engine.

Provides ``add_span_event()``, the single implementation used by the
``compat`` and ``migrations`` ``otel.py`` modules.  Centralises the span
recording check so each domain module does not duplicate it.

Usage::

    from contentschema._otel_helpers import add_span_event

    add_span_event("schema.compatibility.check", {"schema.slug": "article"})
"""

from __future__ import annotations

from opentelemetry import trace as otel_trace

from contentschema.config import get_config

AttributeValue = str | int | float | bool


def add_span_event(name: str, attributes: dict[str, AttributeValue]) -> None:
    """Add an event to the current OTel span if it is recording.

    No-op when the current span is not recording or span events are
    disabled via ``CONTENTSCHEMA_EMIT_SPAN_EVENTS``.

    Args:
        name: Event name (e.g. ``"schema.migration.applied"``).
        attributes: Flat dict of span event attributes.
    """
    if not get_config().emit_span_events:
        return
    span = otel_trace.get_current_span()
    if span and span.is_recording():
        span.add_event(name=name, attributes=attributes)
