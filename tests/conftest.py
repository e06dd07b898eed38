"""
Pytest configuration and fixtures for contentschema tests.
"""

from __future__ import annotations

import logging
import os
from typing import Dict, Generator
from unittest.mock import MagicMock, patch

import pytest

from contentschema.config import reset_config
from contentschema.loader import SchemaDocumentLoader
from contentschema.log import ROOT_LOGGER


# ============================================================================
# Environment Fixtures
# ============================================================================


@pytest.fixture(scope="session")
def test_env() -> Dict[str, str]:
    """Test environment variables."""
    return {
        "CONTENTSCHEMA_LOG_LEVEL": "warning",
        "CONTENTSCHEMA_LOG_FORMAT": "text",
    }


@pytest.fixture(autouse=True)
def set_test_env(test_env: Dict[str, str]) -> Generator[None, None, None]:
    """Set test environment variables and a fresh config for each test."""
    original = {}
    for key, value in test_env.items():
        original[key] = os.environ.get(key)
        os.environ[key] = value
    reset_config()
    SchemaDocumentLoader.clear_cache()

    yield

    for key, value in original.items():
        if value is None:
            os.environ.pop(key, None)
        else:
            os.environ[key] = value
    reset_config()
    SchemaDocumentLoader.clear_cache()
    _reset_package_logger()


def _reset_package_logger() -> None:
    """Drop handlers installed by configure_logging (e.g. from CLI tests)."""
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


# ============================================================================
# OTel Fixtures
# ============================================================================


@pytest.fixture
def mock_span() -> MagicMock:
    """A mock OTel span that is recording."""
    span = MagicMock()
    span.is_recording.return_value = True
    return span


@pytest.fixture
def mock_otel(mock_span: MagicMock) -> Generator[MagicMock, None, None]:
    """Patch the OTel trace API to return ``mock_span``."""
    with patch("contentschema._otel_helpers.otel_trace") as mock_trace:
        mock_trace.get_current_span.return_value = mock_span
        yield mock_span


# ============================================================================
# Schema Fixtures
# ============================================================================


@pytest.fixture
def article_schema() -> dict:
    """Native schema tree for an ``article`` content type at v1.0.0."""
    return {
        "type": "object",
        "additionalProperties": False,
        "required": ["title"],
        "properties": {
            "title": {"type": "string", "title": "Title"},
            "body": {"type": "string"},
            "rating": {"type": "integer"},
            "tags": {"type": "array", "items": {"type": "string"}},
            "author": {
                "type": "object",
                "required": ["name"],
                "properties": {
                    "name": {"type": "string"},
                    "email": {"type": "string", "format": "email"},
                },
            },
        },
        "metadata": {"slug": "article", "schema_version": "article@v1.0.0"},
    }


@pytest.fixture
def legacy_article_schema() -> dict:
    """Legacy field-list form of a small ``article`` schema."""
    return {
        "fields": [
            {"name": "title", "type": "string", "required": True},
            {"name": "body", "type": "string"},
            "summary",
        ],
    }
