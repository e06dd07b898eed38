"""
contentschema CLI - Inspect, version and gate schema documents.

Commands:
    contentschema check      Compare two schema revisions and plan the next version
    contentschema validate   Check a schema against the supported keyword subset
    contentschema normalize  Print the normalized, versioned schema as JSON
    contentschema bump       Bump a slug@vX.Y.Z version by a change level
    contentschema fields     List the field paths of a schema
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, NoReturn, Optional

import click
import yaml

from contentschema import __version__
from contentschema.compat import SchemaUpdateGate, collect_schema_fields
from contentschema.compat.models import CompatibilityResult, SchemaUpdatePlan
from contentschema.errors import SchemaCompatibilityBreakingError, SchemaError
from contentschema.loader import SchemaDocumentLoader
from contentschema.log import configure_logging
from contentschema.schema import extract_metadata, normalize_schema, validate_schema_subset
from contentschema.schema.content import normalize_content_schema
from contentschema.types import ChangeLevel
from contentschema.versioning import bump_version, parse_version

_LEVELS = [level.label for level in ChangeLevel]


def _load(path: str) -> dict[str, Any]:
    try:
        return SchemaDocumentLoader().load(Path(path))
    except (TypeError, ValueError, yaml.YAMLError) as exc:
        click.echo(f"Error: {path}: {exc}", err=True)
        sys.exit(1)


def _fail(exc: Exception) -> NoReturn:
    click.echo(f"Error: {exc}", err=True)
    sys.exit(1)


def _result_payload(result: CompatibilityResult) -> dict[str, Any]:
    return {
        "compatible": result.compatible,
        "change_level": result.change_level.label,
        "breaking_changes": [
            {
                "type": change.type.value,
                "field": change.field,
                "description": change.description,
            }
            for change in result.breaking_changes
        ],
        "warnings": list(result.warnings),
    }


def _plan_payload(plan: SchemaUpdatePlan) -> dict[str, Any]:
    payload = _result_payload(plan.compatibility)
    payload.update(
        {
            "slug": plan.slug,
            "version": plan.version,
            "previous_version": plan.previous_version,
        }
    )
    return payload


def _echo_result(result: CompatibilityResult) -> None:
    for change in result.breaking_changes:
        click.echo(f"  BREAKING {change.type.value}: {change.field} ({change.description})")
    for warning in result.warnings:
        click.echo(f"  warning: {warning}")


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"]),
    default=None,
    help="Log level (default from CONTENTSCHEMA_LOG_LEVEL)",
)
@click.option(
    "--log-format",
    type=click.Choice(["json", "text"]),
    default=None,
    help="Log format (default from CONTENTSCHEMA_LOG_FORMAT)",
)
def main(log_level: Optional[str], log_format: Optional[str]):
    """contentschema - Schema versioning, compatibility and payload migration."""
    configure_logging(level=log_level, fmt=log_format)


@main.command("check")
@click.argument("old", type=click.Path(exists=True, dir_okay=False))
@click.argument("new", type=click.Path(exists=True, dir_okay=False))
@click.option("--slug", "-s", help="Owning slug (default: from schema metadata)")
@click.option("--previous-version", help="Stored version of OLD (slug@vX.Y.Z)")
@click.option("--allow-breaking", is_flag=True, help="Accept breaking changes (bumps major)")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON")
def check_cmd(
    old: str,
    new: str,
    slug: Optional[str],
    previous_version: Optional[str],
    allow_breaking: bool,
    as_json: bool,
):
    """Compare OLD with NEW and plan the next schema version.

    Exits with status 1 when NEW is breaking and --allow-breaking is not set.

    Example:
        contentschema check schemas/article.v1.yaml schemas/article.yaml
    """
    old_schema = _load(old)
    new_schema = _load(new)
    owner = (
        slug
        or extract_metadata(new_schema).slug
        or extract_metadata(old_schema).slug
    )

    gate = SchemaUpdateGate(allow_breaking_changes=allow_breaking or None)
    try:
        plan = gate.plan(
            owner or "",
            new_schema,
            previous_schema=old_schema,
            previous_version=previous_version,
        )
    except SchemaCompatibilityBreakingError as exc:
        if as_json:
            click.echo(json.dumps(_result_payload(exc.result), indent=2))
        else:
            click.echo("Incompatible schema change:")
            _echo_result(exc.result)
        sys.exit(1)
    except SchemaError as exc:
        _fail(exc)

    if as_json:
        click.echo(json.dumps(_plan_payload(plan), indent=2))
        return

    status = "compatible" if plan.compatibility.compatible else "breaking (allowed)"
    click.echo(f"{plan.slug}: {status}, change level {plan.change_level.label}")
    click.echo(f"  version: {plan.previous_version or '<none>'} -> {plan.version}")
    _echo_result(plan.compatibility)


@main.command("validate")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
def validate_cmd(file: str):
    """Check FILE against the supported schema keyword subset."""
    schema = normalize_schema(_load(file))
    try:
        validate_schema_subset(schema)
    except SchemaError as exc:
        _fail(exc)
    click.echo(f"OK: {file}")


@main.command("normalize")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--slug", "-s", help="Owning slug when the schema metadata has none")
@click.option("--no-subset-check", is_flag=True, help="Skip keyword subset validation")
def normalize_cmd(file: str, slug: Optional[str], no_subset_check: bool):
    """Print FILE normalized and versioned, as JSON."""
    try:
        normalized = normalize_content_schema(
            _load(file), slug=slug, fail_on_unsupported=not no_subset_check
        )
    except SchemaError as exc:
        _fail(exc)
    click.echo(json.dumps(normalized.schema_tree, indent=2, sort_keys=True))


@main.command("bump")
@click.argument("version")
@click.argument("level", type=click.Choice(_LEVELS, case_sensitive=False))
def bump_cmd(version: str, level: str):
    """Bump VERSION (slug@vX.Y.Z) by LEVEL.

    Example:
        contentschema bump article@v1.2.3 minor    # article@v1.3.0
    """
    try:
        bumped = bump_version(parse_version(version), ChangeLevel.parse(level))
    except SchemaError as exc:
        _fail(exc)
    click.echo(str(bumped))


@main.command("fields")
@click.argument("file", type=click.Path(exists=True, dir_okay=False))
@click.option("--json", "as_json", is_flag=True, help="Print fields as JSON")
def fields_cmd(file: str, as_json: bool):
    """List the field paths of FILE with their coarse types."""
    fields = collect_schema_fields(normalize_schema(_load(file)))
    if as_json:
        payload = {
            path: {"type": descriptor.type.describe(), "required": descriptor.required}
            for path, descriptor in sorted(fields.items())
        }
        click.echo(json.dumps(payload, indent=2))
        return
    for path in sorted(fields):
        descriptor = fields[path]
        marker = " (required)" if descriptor.required else ""
        click.echo(f"{path}: {descriptor.type.describe()}{marker}")


if __name__ == "__main__":
    main()
