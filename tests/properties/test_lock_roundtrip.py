"""Property-based tests for lock file determinism and round-trip fidelity.

Verifies that lock serialization is:
- Deterministic: the same entries in any insertion order give the same text
- Round-trip safe: to_json -> parse_local_lock preserves every entry
- Stable: re-serializing a parsed lock is byte-identical
"""
from __future__ import annotations

import json

from hypothesis import given, settings
from hypothesis import strategies as st

from skillsync.core.lockfile import LocalLock, LockEntry, parse_local_lock


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

skill_names = st.text(min_size=1, max_size=30).filter(lambda s: s.strip())

sources = st.one_of(
    st.from_regex(r"[a-z][a-z0-9-]{0,15}", fullmatch=True),
    st.from_regex(r"@[a-z]{1,8}/[a-z][a-z0-9-]{0,10}", fullmatch=True),
)

digests = st.from_regex(r"[0-9a-f]{64}", fullmatch=True)

entries = st.builds(
    LockEntry,
    source=sources,
    source_type=st.sampled_from(["node_modules", "local", "github"]),
    computed_hash=digests,
)

skill_maps = st.dictionaries(skill_names, entries, max_size=8)


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------


@given(skills=skill_maps)
@settings(max_examples=100)
def test_round_trip_preserves_entries(skills: dict[str, LockEntry]) -> None:
    lock = LocalLock(skills=skills)
    assert parse_local_lock(lock.to_json()).skills == skills


@given(skills=skill_maps)
@settings(max_examples=100)
def test_insertion_order_irrelevant(skills: dict[str, LockEntry]) -> None:
    reversed_skills = dict(reversed(list(skills.items())))
    assert LocalLock(skills=skills).to_json() == LocalLock(skills=reversed_skills).to_json()


@given(skills=skill_maps)
@settings(max_examples=100)
def test_reserialization_is_stable(skills: dict[str, LockEntry]) -> None:
    text = LocalLock(skills=skills).to_json()
    assert parse_local_lock(text).to_json() == text


@given(skills=skill_maps)
@settings(max_examples=100)
def test_output_shape(skills: dict[str, LockEntry]) -> None:
    text = LocalLock(skills=skills).to_json()
    assert text.endswith("\n") and not text.endswith("\n\n")
    data = json.loads(text)
    assert list(data) == ["version", "skills"]
    assert list(data["skills"]) == sorted(skills)
