"""
Schema update gate.

Decides whether a candidate schema may replace the stored one and, if so,
which version it is persisted under:

1. the candidate must carry (or be given) a valid version for ``slug``
2. it is compared with the previous schema, when there is one
3. breaking changes are rejected unless explicitly overridden
4. the base version is bumped by the detected change level and written
   into the candidate's metadata

Usage::

    from contentschema.compat.gate import SchemaUpdateGate

    gate = SchemaUpdateGate()
    plan = gate.plan(
        "article",
        candidate,
        previous_schema=stored,
        previous_version="article@v1.2.0",
    )
    plan.version        # "article@v1.3.0" for a minor change
    plan.schema_tree    # candidate with metadata.schema_version applied
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Optional

from contentschema.compat.analyzer import CompatibilityAnalyzer
from contentschema.compat.models import CompatibilityResult, SchemaUpdatePlan
from contentschema.compat.otel import emit_update_planned
from contentschema.config import get_config
from contentschema.errors import SchemaCompatibilityBreakingError
from contentschema.schema.metadata import apply_metadata, extract_metadata
from contentschema.versioning import (
    Version,
    bump_version,
    ensure_schema_version,
    parse_version,
)

logger = logging.getLogger(__name__)


class SchemaUpdateGate:
    """Gates schema updates on compatibility and assigns the next version.

    Args:
        allow_breaking_changes: Accept breaking updates (bumped MAJOR)
            instead of raising.  Defaults to
            ``config.allow_breaking_changes``.
        analyzer: Compatibility analyzer to use.
    """

    def __init__(
        self,
        allow_breaking_changes: Optional[bool] = None,
        analyzer: Optional[CompatibilityAnalyzer] = None,
    ) -> None:
        if allow_breaking_changes is None:
            allow_breaking_changes = get_config().allow_breaking_changes
        self._allow_breaking = allow_breaking_changes
        self._analyzer = analyzer or CompatibilityAnalyzer()

    @property
    def allow_breaking_changes(self) -> bool:
        return self._allow_breaking

    def plan(
        self,
        slug: str,
        candidate: Mapping[str, Any],
        previous_schema: Optional[Mapping[str, Any]] = None,
        previous_version: Optional[str] = None,
        enforce: bool = True,
    ) -> SchemaUpdatePlan:
        """Plan the update of ``slug``'s schema to ``candidate``.

        Args:
            slug: Owning content-type / block slug.
            candidate: Proposed schema (not mutated).
            previous_schema: Currently stored schema, ``None`` for a new slug.
            previous_version: Stored version string; takes precedence over
                the version embedded in ``previous_schema``.
            enforce: When ``False`` breaking changes are never rejected
                (e.g. drafts that have not been published yet).

        Returns:
            ``SchemaUpdatePlan`` with the schema to persist and its version.

        Raises:
            InvalidSchemaVersionError: A version cannot be established or
                belongs to another slug.
            SchemaCompatibilityBreakingError: The change is breaking,
                ``enforce`` is set and breaking changes are not allowed.
        """
        _, candidate_version = ensure_schema_version(candidate, slug)
        effective_slug = (slug or "").strip() or candidate_version.slug

        if previous_schema is not None:
            compatibility = self._analyzer.compare(
                previous_schema, candidate, slug=effective_slug
            )
        else:
            compatibility = CompatibilityResult()

        if compatibility.breaking_changes:
            if enforce and not self._allow_breaking:
                raise SchemaCompatibilityBreakingError(compatibility)
            logger.warning(
                "Accepting breaking schema update for %s (%d breaking changes)",
                effective_slug,
                len(compatibility.breaking_changes),
            )

        base = self._resolve_base_version(
            effective_slug, candidate_version, previous_schema, previous_version
        )
        has_previous = previous_schema is not None or bool((previous_version or "").strip())
        next_version = bump_version(base, compatibility.change_level)

        meta = extract_metadata(candidate)
        meta.slug = effective_slug
        meta.schema_version = str(next_version)
        schema_tree = apply_metadata(candidate, meta) or {}

        plan = SchemaUpdatePlan(
            slug=effective_slug,
            schema_tree=schema_tree,
            version=str(next_version),
            previous_version=str(base) if has_previous else None,
            change_level=compatibility.change_level,
            compatibility=compatibility,
        )
        emit_update_planned(plan)
        return plan

    @staticmethod
    def _resolve_base_version(
        slug: str,
        candidate_version: Version,
        previous_schema: Optional[Mapping[str, Any]],
        previous_version: Optional[str],
    ) -> Version:
        if previous_version and previous_version.strip():
            stored = parse_version(previous_version)
            return Version(slug=slug or stored.slug, semver=stored.semver)
        if previous_schema is not None:
            _, version = ensure_schema_version(previous_schema, slug)
            return version
        return candidate_version
