"""Shared pytest configuration and fixtures."""

from pathlib import Path

import pytest


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "integration: marks tests requiring external services")


@pytest.fixture
def vault(tmp_path: Path) -> Path:
    """A small notes directory with one anchored and one nested note."""
    root = tmp_path / "vault"
    (root / "linux").mkdir(parents=True)
    (root / "setup.md").write_text(
        "# Setup\n\nInstall first. ^(install)\n\nThen configure.\n",
        encoding="utf-8",
    )
    (root / "linux" / "apt.md").write_text(
        "# Apt\n\n- Update the index\n  - Run as root\n",
        encoding="utf-8",
    )
    return root
