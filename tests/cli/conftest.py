"""Shared fixtures for CLI tests."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
from click.testing import CliRunner


@pytest.fixture
def runner() -> CliRunner:
    """Create a Click CliRunner for invoking commands."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _isolated_home(home: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Point HOME at an empty directory so agent detection is predictable."""
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("USERPROFILE", str(home))


@pytest.fixture
def synced_project(project: Path, make_skill: Callable[..., Path]) -> Path:
    """A project whose node_modules ships two skills."""
    make_skill(project / "node_modules" / "alpha-pkg", "alpha", description="Alpha helper")
    make_skill(project / "node_modules" / "@acme" / "kit" / "skills" / "beta", "beta")
    return project
