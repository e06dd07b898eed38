"""
Schema document loader with per-path caching.

Reads schema documents (either dialect) from YAML or JSON files.  Files
ending in ``.json`` are parsed as JSON, everything else as YAML.  Cached
documents are handed out as copies so callers may mutate what they get.
Non-string mapping keys (YAML reads ``2024:`` as an integer) are converted
to strings.

Usage::

    from contentschema.loader import SchemaDocumentLoader

    loader = SchemaDocumentLoader()
    schema = loader.load(Path("schemas/article.yaml"))
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, ClassVar, Union

import yaml

from contentschema._tree import clone_tree, stringify_keys

logger = logging.getLogger(__name__)


class SchemaDocumentLoader:
    """Loads and caches schema documents from YAML or JSON files."""

    _cache: ClassVar[dict[str, dict[str, Any]]] = {}

    @classmethod
    def clear_cache(cls) -> None:
        """Clear the document cache (useful in tests)."""
        cls._cache.clear()

    def load(self, path: Union[str, Path]) -> dict[str, Any]:
        """Load a schema document from a file.

        Args:
            path: Path to a ``.yaml`` / ``.yml`` / ``.json`` document.

        Returns:
            The document's root mapping.

        Raises:
            FileNotFoundError: If the file does not exist.
            TypeError: If the document root is not a mapping.
            yaml.YAMLError: If a YAML file is malformed.
            json.JSONDecodeError: If a JSON file is malformed.
        """
        path = Path(path)
        key = str(path.resolve())
        cached = self._cache.get(key)
        if cached is not None:
            logger.debug("Schema document cache hit: %s", key)
            return clone_tree(cached)

        if not path.exists():
            raise FileNotFoundError(f"Schema file not found: {path}")

        with open(path, encoding="utf-8") as fh:
            if path.suffix.lower() == ".json":
                raw = json.load(fh)
            else:
                raw = yaml.safe_load(fh)

        if not isinstance(raw, dict):
            raise TypeError(
                f"Expected mapping at root of {path}, got {type(raw).__name__}"
            )

        raw = stringify_keys(raw)
        self._cache[key] = raw
        logger.debug("Loaded schema document from %s (%d keys)", key, len(raw))
        return clone_tree(raw)

    def load_from_string(self, text: str) -> dict[str, Any]:
        """Load a schema document from a YAML (or JSON) string.

        Raises:
            TypeError: If the document root is not a mapping.
        """
        raw = yaml.safe_load(text)
        if not isinstance(raw, dict):
            raise TypeError(f"Expected mapping, got {type(raw).__name__}")
        return stringify_keys(raw)
