"""
OTel span event emission helpers for payload migrations.

Usage::

    from contentschema.migrations.otel import emit_migration_applied

    emit_migration_applied("article", "article@v1.0.0", "article@v2.0.0", 1)
"""

from __future__ import annotations

import logging

from contentschema._otel_helpers import AttributeValue, add_span_event

logger = logging.getLogger(__name__)


def emit_migration_applied(
    slug: str,
    from_version: str,
    to_version: str,
    hops: int,
) -> None:
    """Emit a span event for a completed payload migration.

    Event name: ``schema.migration.applied``
    """
    attrs: dict[str, AttributeValue] = {
        "schema.slug": slug,
        "schema.migration.from": from_version,
        "schema.migration.to": to_version,
        "schema.migration.hops": hops,
    }

    logger.info(
        "Payload migrated: slug=%s %s -> %s hops=%d",
        slug,
        from_version,
        to_version,
        hops,
    )

    add_span_event("schema.migration.applied", attrs)
