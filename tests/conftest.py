"""Test setup for word2html."""

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

    This allows skipping the slower end-to-end checks:
        pytest -m "not pipeline"
    """
    config.addinivalue_line(
        "markers",
        "pipeline: marks tests that run the complete cleaning pipeline",
    )


@pytest.fixture
def parse():
    """Parse an HTML fragment with the default backend, returning (soup, root)."""
    from word2html.html_utils import parse_fragment

    def _parse(html: str):
        return parse_fragment(html, "html5lib")

    return _parse


@pytest.fixture
def render():
    """Serialize the children of a root element, without layout newlines."""
    from word2html.html_utils import serialize_node

    def _render(root) -> str:
        return "".join(serialize_node(child) for child in root.contents)

    return _render
