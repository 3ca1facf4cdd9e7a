"""Skill record produced by manifest parsing.

A skill is a folder containing a ``SKILL.md`` manifest. The manifest's YAML
front-matter names the skill and optionally describes it; everything else
in the front-matter is kept in ``metadata`` untouched.

``ManifestParser`` is the callable shape every consumer of manifests
depends on: a path in, a ``SkillRecord`` or ``None`` out, never an
exception for a missing or malformed file.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

MANIFEST_FILENAME = "SKILL.md"


@dataclass(frozen=True)
class SkillRecord:
    """A parsed skill manifest.

    Attributes:
        name: Unique skill identifier from the front-matter ``name`` key.
        path: The skill folder (the manifest's parent directory).
        description: Short human-readable summary; empty when not declared.
        manifest_path: Location of the ``SKILL.md`` file itself.
        metadata: Any additional front-matter keys.
    """

    name: str
    path: Path
    description: str = ""
    manifest_path: Path | None = None
    metadata: dict[str, Any] = field(default_factory=dict, compare=False)


ManifestParser = Callable[[Path], "SkillRecord | None"]
