"""Parsing of ``SKILL.md`` manifests into skill records."""

from skillsync.parsers.base import MANIFEST_FILENAME, ManifestParser, SkillRecord
from skillsync.parsers.skill_manifest import load_skill_manifest, parse_skill_manifest

__all__ = [
    "MANIFEST_FILENAME",
    "ManifestParser",
    "SkillRecord",
    "load_skill_manifest",
    "parse_skill_manifest",
]
