"""Parser for ``SKILL.md`` skill manifests.

A manifest is a Markdown file that opens with YAML front-matter delimited
by ``---`` lines::

    ---
    name: release-notes
    description: Draft release notes from merged pull requests
    ---

    # Release Notes
    ...

Front-matter Parsing
--------------------
A regex isolates the block between the ``---`` markers and PyYAML's
``safe_load`` parses it. The ``name`` key is required and must be a
non-empty string; ``description`` is optional. A file with no front-matter,
unparseable YAML, or no usable name is not a skill.

Two entry points are provided: ``load_skill_manifest`` raises
``ManifestError`` with the reason a file was rejected, and
``parse_skill_manifest`` (the one discovery uses) turns every failure into
``None``.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

import yaml

from skillsync.exceptions import ManifestError
from skillsync.parsers.base import SkillRecord

logger = logging.getLogger(__name__)

# Match YAML front-matter: ---\n...\n---  (CRLF tolerated)
_FRONTMATTER_PATTERN = re.compile(r"^\ufeff?---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|$)", re.DOTALL)


def _read_front_matter(raw_content: str) -> dict:
    match = _FRONTMATTER_PATTERN.match(raw_content)
    if match is None:
        raise ManifestError("no YAML front-matter")
    try:
        data = yaml.safe_load(match.group(1))
    except yaml.YAMLError as exc:
        raise ManifestError(f"invalid YAML front-matter: {exc}") from exc
    if not isinstance(data, dict):
        raise ManifestError("front-matter is not a mapping")
    return data


def load_skill_manifest(manifest_path: Path) -> SkillRecord:
    """Parse a manifest strictly.

    Args:
        manifest_path: Path to a ``SKILL.md`` file.

    Returns:
        The parsed ``SkillRecord``; its ``path`` is the manifest's folder.

    Raises:
        ManifestError: If the file cannot be read or lacks a valid name.
    """
    try:
        raw_content = manifest_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ManifestError(f"cannot read {manifest_path}: {exc}") from exc

    data = _read_front_matter(raw_content)

    name = data.get("name")
    if not isinstance(name, str) or not name.strip():
        raise ManifestError("front-matter 'name' missing or empty")

    description = data.get("description", "")
    if not isinstance(description, str):
        description = "" if description is None else str(description)

    extra = {k: v for k, v in data.items() if k not in ("name", "description")}

    return SkillRecord(
        name=name.strip(),
        path=manifest_path.parent,
        description=description.strip(),
        manifest_path=manifest_path,
        metadata=extra,
    )


def parse_skill_manifest(manifest_path: Path) -> SkillRecord | None:
    """Parse a manifest, returning None for anything that is not a skill.

    Missing files return None silently; files that exist but are rejected
    are logged at debug level.
    """
    try:
        if not manifest_path.is_file():
            return None
        return load_skill_manifest(manifest_path)
    except PermissionError:
        return None
    except ManifestError as exc:
        logger.debug("Skipping %s: %s", manifest_path, exc)
        return None
