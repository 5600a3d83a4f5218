"""Shared test fixtures."""

from pathlib import Path

import pytest
from docnav.config import Config, DocsConfig, NavigationConfig, OutputConfig


@pytest.fixture
def docs_dir(tmp_path: Path) -> Path:
    """Create docs directory with sample structure."""
    docs = tmp_path / "docs"
    docs.mkdir()

    (docs / "index.md").write_text("---\ntitle: Overview\n---\n\nWelcome.")
    general = docs / "general"
    general.mkdir()
    (general / "getting-started.md").write_text("---\ntitle: Getting Started\norder: 1\n---\n\nInstall.")
    (general / "tutorial.md").write_text("---\ntitle: Tutorial\norder: 2\n---\n\nSteps.")
    guides = docs / "guides"
    guides.mkdir()
    (guides / "oidc-auth.md").write_text("---\ntitle: OIDC Authentication\n---\n\nOIDC.")
    (guides / "monitoring.md").write_text("# Monitoring\n\nNo front matter.")

    return docs


@pytest.fixture
def test_config(tmp_path: Path, docs_dir: Path) -> Config:
    """Create a test configuration with tmp_path directories."""
    return Config(
        docs=DocsConfig(source_dir=docs_dir, path_prefix="/docs"),
        navigation=NavigationConfig(),
        output=OutputConfig(dir=tmp_path / "dist"),
    )
