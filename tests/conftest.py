"""Shared fixtures for skillsync tests."""

from __future__ import annotations

import contextlib
import os
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def _no_telemetry(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep tests from ever sending telemetry."""
    monkeypatch.setenv("DISABLE_TELEMETRY", "1")


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """Create an empty project directory."""
    root = tmp_path / "project"
    root.mkdir()
    return root


@pytest.fixture
def home(tmp_path: Path) -> Path:
    """Create an empty home directory (no agents installed)."""
    root = tmp_path / "home"
    root.mkdir()
    return root


@pytest.fixture
def make_skill() -> Callable[..., Path]:
    """Return a factory that writes a SKILL.md into a directory.

    Usage::

        make_skill(project / "node_modules" / "pkg", "my-skill")
    """

    def _make(
        directory: Path,
        name: str,
        description: str = "A test skill",
        body: str = "Instructions.",
    ) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        (directory / "SKILL.md").write_text(
            "---\n"
            f"name: {name}\n"
            f"description: {description}\n"
            "---\n\n"
            f"# {name}\n"
            f"{body}\n",
            encoding="utf-8",
        )
        return directory

    return _make


@pytest.fixture
def limit_open_files() -> Callable[[int], contextlib.AbstractContextManager[None]]:
    """Return a context manager factory that caps open file descriptors.

    The soft ``RLIMIT_NOFILE`` is set to the descriptors already open plus
    ``headroom`` and restored on exit.
    """
    resource = pytest.importorskip("resource")
    fd_dir = Path("/proc/self/fd")
    if not fd_dir.is_dir():
        fd_dir = Path("/dev/fd")
    if not fd_dir.is_dir():
        pytest.skip("open descriptors cannot be counted on this platform")

    @contextlib.contextmanager
    def _limit(headroom: int) -> Iterator[None]:
        soft, hard = resource.getrlimit(resource.RLIMIT_NOFILE)
        cap = len(os.listdir(fd_dir)) + headroom
        if hard != resource.RLIM_INFINITY:
            cap = min(cap, hard)
        resource.setrlimit(resource.RLIMIT_NOFILE, (cap, hard))
        try:
            yield
        finally:
            resource.setrlimit(resource.RLIMIT_NOFILE, (soft, hard))

    return _limit
