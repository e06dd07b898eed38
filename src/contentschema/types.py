"""
Core enums shared across the schema engine.

``ChangeLevel`` is both the analyzer's verdict and the instruction passed to
``bump_version``; it is an ``IntEnum`` so levels compare and ``max()``
naturally (``NONE < PATCH < MINOR < MAJOR``).
"""

from __future__ import annotations

from enum import Enum, IntEnum


class ChangeLevel(IntEnum):
    """Semantic impact of a schema update."""

    NONE = 0
    PATCH = 1
    MINOR = 2
    MAJOR = 3

    @property
    def label(self) -> str:
        return self.name.lower()

    @classmethod
    def parse(cls, value: str) -> "ChangeLevel":
        """Parse a level label (``"none"``, ``"patch"``, ``"minor"``, ``"major"``)."""
        try:
            return cls[value.strip().upper()]
        except KeyError:
            raise ValueError(f"unknown change level: {value!r}") from None

    def __str__(self) -> str:
        return self.label


class BreakingChangeType(str, Enum):
    """Kinds of breaking schema change."""

    FIELD_REMOVED = "field_removed"
    TYPE_CHANGED = "type_changed"
    REQUIRED_ADDED = "required_added"


class TypeKind(str, Enum):
    """Coarse shape of a field's type descriptor."""

    SCALAR = "scalar"
    ARRAY = "array"
    OBJECT = "object"
    UNKNOWN = "unknown"


class TypeChange(IntEnum):
    """Outcome of comparing two type descriptors."""

    NONE = 0
    MINOR = 1
    BREAKING = 2
