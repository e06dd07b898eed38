"""
Schema compatibility analysis and update gating.

Public API::

    from contentschema.compat import (
        # Analyzer
        CompatibilityAnalyzer,
        check_schema_compatibility,
        collect_schema_fields,
        field_paths,
        # Classification
        classify_type,
        compare_types,
        # Gate
        SchemaUpdateGate,
        # Models
        BreakingChange,
        CompatibilityResult,
        FieldDescriptor,
        SchemaUpdatePlan,
        TypeDescriptor,
    )
"""

from contentschema.compat.analyzer import (
    CompatibilityAnalyzer,
    check_schema_compatibility,
    collect_schema_fields,
    field_paths,
)
from contentschema.compat.classify import classify_type, compare_types
from contentschema.compat.gate import SchemaUpdateGate
from contentschema.compat.models import (
    BreakingChange,
    CompatibilityResult,
    FieldDescriptor,
    SchemaUpdatePlan,
    TypeDescriptor,
)

__all__ = [
    # Analyzer
    "CompatibilityAnalyzer",
    "check_schema_compatibility",
    "collect_schema_fields",
    "field_paths",
    # Classification
    "classify_type",
    "compare_types",
    # Gate
    "SchemaUpdateGate",
    # Models
    "BreakingChange",
    "CompatibilityResult",
    "FieldDescriptor",
    "SchemaUpdatePlan",
    "TypeDescriptor",
]
