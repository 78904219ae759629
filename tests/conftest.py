"""Shared test fixtures."""

from pathlib import Path

import pytest
from mdxserve.config import Config, DocsConfig, ServerConfig


@pytest.fixture
def docs_root(tmp_path: Path) -> Path:
    """Create a documentation root with an index.html fallback."""
    root = tmp_path / "site"
    root.mkdir()
    (root / "index.html").write_text("<html><body>fallback</body></html>")
    return root


@pytest.fixture
def test_config(docs_root: Path) -> Config:
    """Create a test configuration serving docs_root on an ephemeral port."""
    return Config(
        server=ServerConfig(host="127.0.0.1", port=0),
        docs=DocsConfig(root_dir=docs_root),
    )
