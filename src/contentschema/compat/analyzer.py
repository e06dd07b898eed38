"""
Schema compatibility analyzer.

Compares two schema revisions field by field and classifies the change:

- **major**: a field was removed, a type was narrowed or changed, or a field
  became required (incompatible; existing payloads may fail validation)
- **minor**: a type widened, an optional field was added, or a field
  stopped being required
- **patch**: no field-level change but the documents differ (titles,
  descriptions, formats, extension keys, ...)
- **none**: identical once version metadata is ignored

Field paths are dotted: properties join with ``.``, array items append
``[]``, and composite branches appear as ``oneOf/N``, ``allOf/N`` and
``$defs/name`` segments (e.g. ``blocks[].oneOf/0.title``).

Usage::

    from contentschema.compat.analyzer import check_schema_compatibility

    result = check_schema_compatibility(old_schema, new_schema)
    if not result.compatible:
        for change in result.breaking_changes:
            print(change.type.value, change.field)
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, Optional

from contentschema.compat.classify import (
    ALL_OF_SIGNATURE,
    ONE_OF_SIGNATURE,
    classify_type,
    compare_types,
)
from contentschema.compat.models import (
    BreakingChange,
    CompatibilityResult,
    FieldDescriptor,
)
from contentschema.compat.otel import (
    emit_compatibility_breaking,
    emit_compatibility_check,
)
from contentschema._tree import trees_equal
from contentschema.schema.metadata import strip_version_metadata
from contentschema.schema.normalizer import normalize_schema
from contentschema.types import (
    BreakingChangeType,
    ChangeLevel,
    TypeChange,
    TypeKind,
)

logger = logging.getLogger(__name__)

_SIGNATURE_ONLY = frozenset({ONE_OF_SIGNATURE, ALL_OF_SIGNATURE})


# ---------------------------------------------------------------------------
# Field collection
# ---------------------------------------------------------------------------


class _FieldWalker:
    """Collects field descriptors and unanalyzed ``anyOf`` locations."""

    def __init__(self) -> None:
        self.fields: dict[str, FieldDescriptor] = {}
        self.any_of_paths: list[str] = []

    def walk(self, node: Optional[Mapping[str, Any]], prefix: str) -> None:
        if node is None:
            return
        if "anyOf" in node:
            self.any_of_paths.append(prefix)

        required = _required_set(node.get("required"))

        properties = node.get("properties")
        if isinstance(properties, Mapping):
            for name in sorted(properties, key=str):
                child = properties[name]
                if not isinstance(child, Mapping):
                    continue
                path = _join(prefix, str(name))
                self.fields[path] = FieldDescriptor(
                    type=classify_type(child),
                    required=name in required,
                )
                self.walk(child, path)

        items = node.get("items")
        if isinstance(items, Mapping):
            self.walk(items, f"{prefix}[]")

        for keyword in ("oneOf", "allOf"):
            entries = node.get(keyword)
            if not isinstance(entries, (list, tuple)):
                continue
            for index, entry in enumerate(entries):
                if isinstance(entry, Mapping):
                    self.walk(entry, _join(prefix, f"{keyword}/{index}"))

        defs = node.get("$defs")
        if isinstance(defs, Mapping):
            for name in sorted(defs, key=str):
                entry = defs[name]
                if isinstance(entry, Mapping):
                    self.walk(entry, _join(prefix, f"$defs/{name}"))


def _join(prefix: str, segment: str) -> str:
    return f"{prefix}.{segment}" if prefix else segment


def _required_set(value: Any) -> set[str]:
    if not isinstance(value, (list, tuple)):
        return set()
    return {
        entry.strip()
        for entry in value
        if isinstance(entry, str) and entry.strip()
    }


def collect_schema_fields(schema: Optional[Mapping[str, Any]]) -> dict[str, FieldDescriptor]:
    """Map every field path of a (normalized) schema to its descriptor."""
    walker = _FieldWalker()
    walker.walk(schema, "")
    return walker.fields


def field_paths(schema: Optional[Mapping[str, Any]]) -> set[str]:
    """Return the set of field paths derived from a (normalized) schema."""
    return set(collect_schema_fields(schema))


# ---------------------------------------------------------------------------
# Analyzer
# ---------------------------------------------------------------------------


class CompatibilityAnalyzer:
    """Compares schema revisions and classifies the change.

    Stateless; a single instance may be shared across threads.
    """

    def compare(
        self,
        old_schema: Optional[Mapping[str, Any]],
        new_schema: Optional[Mapping[str, Any]],
        slug: str = "",
    ) -> CompatibilityResult:
        """Compare ``old_schema`` with ``new_schema``.

        Both inputs may use either dialect; neither is mutated.

        Args:
            old_schema: The currently stored schema.
            new_schema: The candidate schema.
            slug: Owning slug, used only for logs and span events.

        Returns:
            ``CompatibilityResult`` describing the change level, every
            breaking change (old-side paths first, then new-only paths,
            each group sorted) and any analysis warnings.
        """
        old_normalized = normalize_schema(old_schema)
        new_normalized = normalize_schema(new_schema)

        old_walker = _FieldWalker()
        old_walker.walk(old_normalized, "")
        new_walker = _FieldWalker()
        new_walker.walk(new_normalized, "")
        old_fields = old_walker.fields
        new_fields = new_walker.fields

        breaking: list[BreakingChange] = []
        warnings = _any_of_warnings(old_walker.any_of_paths + new_walker.any_of_paths)
        has_minor = False

        for path in sorted(old_fields):
            old_field = old_fields[path]
            new_field = new_fields.get(path)
            if new_field is None:
                breaking.append(
                    BreakingChange(
                        type=BreakingChangeType.FIELD_REMOVED,
                        field=path,
                        description="field removed",
                    )
                )
                continue

            if _signature_only(old_field) or _signature_only(new_field):
                warnings.append(
                    f"{path}: composite type compared by signature only"
                )

            change = compare_types(old_field.type, new_field.type)
            if change == TypeChange.BREAKING:
                breaking.append(
                    BreakingChange(
                        type=BreakingChangeType.TYPE_CHANGED,
                        field=path,
                        description=(
                            f"field type changed from {old_field.type.describe()} "
                            f"to {new_field.type.describe()}"
                        ),
                    )
                )
            elif change == TypeChange.MINOR:
                has_minor = True

            if not old_field.required and new_field.required:
                breaking.append(
                    BreakingChange(
                        type=BreakingChangeType.REQUIRED_ADDED,
                        field=path,
                        description="field became required",
                    )
                )
            elif old_field.required and not new_field.required:
                has_minor = True

        for path in sorted(new_fields):
            if path in old_fields:
                continue
            if new_fields[path].required:
                breaking.append(
                    BreakingChange(
                        type=BreakingChangeType.REQUIRED_ADDED,
                        field=path,
                        description="required field added",
                    )
                )
            else:
                has_minor = True

        if breaking:
            result = CompatibilityResult(
                compatible=False,
                change_level=ChangeLevel.MAJOR,
                breaking_changes=breaking,
                warnings=warnings,
            )
        elif has_minor:
            result = CompatibilityResult(change_level=ChangeLevel.MINOR, warnings=warnings)
        elif not trees_equal(
            strip_version_metadata(old_normalized),
            strip_version_metadata(new_normalized),
        ):
            result = CompatibilityResult(change_level=ChangeLevel.PATCH, warnings=warnings)
        else:
            result = CompatibilityResult(warnings=warnings)

        logger.debug(
            "Compared schemas slug=%s fields old=%d new=%d level=%s",
            slug,
            len(old_fields),
            len(new_fields),
            result.change_level.label,
        )
        emit_compatibility_check(result, slug=slug)
        for change in result.breaking_changes:
            emit_compatibility_breaking(result, change, slug=slug)
        return result


def _signature_only(descriptor: FieldDescriptor) -> bool:
    field_type = descriptor.type
    return (
        field_type.kind == TypeKind.UNKNOWN
        and field_type.signature in _SIGNATURE_ONLY
    )


def _any_of_warnings(paths: list[str]) -> list[str]:
    seen: set[str] = set()
    warnings: list[str] = []
    for path in sorted(paths):
        if path in seen:
            continue
        seen.add(path)
        warnings.append(f"{path or '<root>'}: anyOf is not analyzed")
    return warnings


def check_schema_compatibility(
    old_schema: Optional[Mapping[str, Any]],
    new_schema: Optional[Mapping[str, Any]],
) -> CompatibilityResult:
    """Compare two schema revisions with a default ``CompatibilityAnalyzer``."""
    return CompatibilityAnalyzer().compare(old_schema, new_schema)
