"""Test setup for ctfexport."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for pytest.

    This allows running integration tests selectively:
        pytest -m integration       # run only integration tests
        pytest -m "not integration" # skip integration tests
    """
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (call the real Contentful API)",
    )


@pytest.fixture
def rich_text_document() -> dict:
    """Rich text payload as returned by the Management API."""
    return {
        "nodeType": "document",
        "data": {},
        "content": [
            {
                "nodeType": "heading-2",
                "data": {},
                "content": [{"nodeType": "text", "value": "Welcome", "marks": [], "data": {}}],
            },
            {
                "nodeType": "paragraph",
                "data": {},
                "content": [
                    {"nodeType": "text", "value": "Read ", "marks": [], "data": {}},
                    {
                        "nodeType": "hyperlink",
                        "data": {"uri": "https://example.com"},
                        "content": [
                            {"nodeType": "text", "value": "the docs", "marks": [{"type": "bold"}], "data": {}}
                        ],
                    },
                    {"nodeType": "text", "value": ".", "marks": [], "data": {}},
                ],
            },
            {
                "nodeType": "embedded-asset-block",
                "data": {"target": {"sys": {"id": "asset-1", "type": "Link", "linkType": "Asset"}}},
                "content": [],
            },
        ],
    }
