"""
OTel span event emission helpers for schema compatibility.

Usage::

    from contentschema.compat.otel import (
        emit_compatibility_check,
        emit_compatibility_breaking,
        emit_update_planned,
    )

    emit_compatibility_check(result, slug="article")
    emit_compatibility_breaking(result, change, slug="article")
    emit_update_planned(plan)
"""

from __future__ import annotations

import logging

from contentschema._otel_helpers import AttributeValue, add_span_event
from contentschema.compat.models import (
    BreakingChange,
    CompatibilityResult,
    SchemaUpdatePlan,
)

logger = logging.getLogger(__name__)


def emit_compatibility_check(result: CompatibilityResult, slug: str = "") -> None:
    """Emit a span event for a compatibility check result.

    Event name: ``schema.compatibility.check``
    """
    attrs: dict[str, AttributeValue] = {
        "schema.slug": slug,
        "schema.compatible": result.compatible,
        "schema.change_level": result.change_level.label,
        "schema.breaking_count": len(result.breaking_changes),
        "schema.warning_count": len(result.warnings),
    }

    if result.compatible:
        logger.debug(
            "Schema compat check: slug=%s level=%s compatible=True",
            slug,
            result.change_level.label,
        )
    else:
        logger.warning(
            "Schema compat check FAILED: slug=%s breaking=%d",
            slug,
            len(result.breaking_changes),
        )

    add_span_event("schema.compatibility.check", attrs)


def emit_compatibility_breaking(
    result: CompatibilityResult,
    change: BreakingChange,
    slug: str = "",
) -> None:
    """Emit a span event for one breaking change.

    Event name: ``schema.compatibility.breaking``
    """
    attrs: dict[str, AttributeValue] = {
        "schema.slug": slug,
        "schema.change_type": change.type.value,
        "schema.change_field": change.field,
        "schema.change_level": result.change_level.label,
        "schema.message": change.description,
    }

    logger.warning(
        "Breaking schema change: slug=%s change=%s field=%s",
        slug,
        change.type.value,
        change.field,
    )

    add_span_event("schema.compatibility.breaking", attrs)


def emit_update_planned(plan: SchemaUpdatePlan) -> None:
    """Emit a span event for a gated schema update.

    Event name: ``schema.update.planned``
    """
    attrs: dict[str, AttributeValue] = {
        "schema.slug": plan.slug,
        "schema.version": plan.version,
        "schema.previous_version": plan.previous_version or "",
        "schema.change_level": plan.change_level.label,
        "schema.compatible": plan.compatibility.compatible,
    }

    logger.info(
        "Schema update planned: slug=%s %s -> %s level=%s",
        plan.slug,
        plan.previous_version or "<none>",
        plan.version,
        plan.change_level.label,
    )

    add_span_event("schema.update.planned", attrs)
