"""Property-based tests for skill folder hashing.

Verifies that for arbitrary file trees:
- Hashing is deterministic and independent of file creation order.
- Changing any single file's content changes the digest.
- Adding content under .git or node_modules never changes the digest.
"""
from __future__ import annotations

import asyncio
import tempfile
from pathlib import Path

from hypothesis import assume, given, settings
from hypothesis import strategies as st

from skillsync.core.hashing import compute_skill_folder_hash, compute_skill_folder_hash_sync


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

segments = st.text(
    alphabet=st.sampled_from("abcdefghijklmnopqrstuvwxyz0123456789_"),
    min_size=1,
    max_size=8,
)

relative_paths = st.lists(segments, min_size=1, max_size=3).map(lambda parts: "/".join(parts))

contents = st.binary(min_size=0, max_size=64)


@st.composite
def file_trees(draw: st.DrawFn) -> dict[str, bytes]:
    """Generate a mapping of relative file path to content with no file/dir clashes."""
    paths = draw(st.lists(relative_paths, min_size=1, max_size=6, unique=True))
    kept: list[str] = []
    for path in paths:
        clash = any(
            other.startswith(path + "/") or path.startswith(other + "/") for other in kept
        )
        if not clash:
            kept.append(path)
    return {path: draw(contents) for path in kept}


def _materialize(root: Path, tree: dict[str, bytes], order: list[str] | None = None) -> None:
    for rel in order or list(tree):
        target = root / rel
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(tree[rel])


def _hash(root: Path) -> str:
    return asyncio.run(compute_skill_folder_hash(root))


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------


@given(tree=file_trees())
@settings(max_examples=40, deadline=None)
def test_creation_order_does_not_matter(tree: dict[str, bytes]) -> None:
    """The digest depends on the tree, not on how it was written."""
    with tempfile.TemporaryDirectory() as tmp:
        first = Path(tmp) / "first"
        second = Path(tmp) / "second"
        first.mkdir()
        second.mkdir()
        _materialize(first, tree)
        _materialize(second, tree, order=list(reversed(list(tree))))
        assert _hash(first) == _hash(second)


@given(tree=file_trees())
@settings(max_examples=40, deadline=None)
def test_async_and_sync_agree(tree: dict[str, bytes]) -> None:
    with tempfile.TemporaryDirectory() as tmp:
        root = Path(tmp)
        _materialize(root, tree)
        assert _hash(root) == compute_skill_folder_hash_sync(root)


@given(tree=file_trees(), data=st.data())
@settings(max_examples=40, deadline=None)
def test_any_content_change_changes_digest(tree: dict[str, bytes], data: st.DataObject) -> None:
    """Mutating one file always produces a different digest."""
    victim = data.draw(st.sampled_from(sorted(tree)))
    replacement = data.draw(contents.filter(lambda c: c != tree[victim]))
    with tempfile.TemporaryDirectory() as tmp:
        root = Path(tmp)
        _materialize(root, tree)
        before = _hash(root)
        (root / victim).write_bytes(replacement)
        assert _hash(root) != before


@given(
    tree=file_trees(),
    excluded=st.sampled_from([".git", "node_modules"]),
    nested=st.lists(segments, max_size=2),
    payload=contents,
)
@settings(max_examples=40, deadline=None)
def test_excluded_directories_never_count(
    tree: dict[str, bytes], excluded: str, nested: list[str], payload: bytes,
) -> None:
    with tempfile.TemporaryDirectory() as tmp:
        root = Path(tmp)
        _materialize(root, tree)
        before = _hash(root)
        target = root.joinpath(*nested, excluded, "junk.bin")
        assume(not any(p.is_file() for p in target.parents if p == root or root in p.parents))
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(payload)
        assert _hash(root) == before
