"""Tests for skill folder content hashing.

Verifies:
    - The digest is a deterministic 64-char hex SHA-256.
    - Content edits, added files, deleted files and renames change it.
    - Nested files are covered.
    - .git and node_modules at any depth are ignored.
    - The sync and async variants agree.
    - A missing folder raises instead of producing a digest.
    - File names that are not valid UTF-8 hash as their raw bytes.
    - Large folders hash under a tight open-file limit.
    - Symlinked files are hashed by target content; symlinked directories
      are not followed.
"""

from __future__ import annotations

import asyncio
import hashlib
import os
import re
import sys
from pathlib import Path

import pytest

from skillsync.core.hashing import (
    compute_skill_folder_hash,
    compute_skill_folder_hash_sync,
    is_excluded_path,
)

_HEX64 = re.compile(r"^[0-9a-f]{64}$")


def _hash(path: Path) -> str:
    return asyncio.run(compute_skill_folder_hash(path))


@pytest.fixture
def skill_dir(tmp_path: Path) -> Path:
    """Create a small skill folder with one nested file."""
    root = tmp_path / "my-skill"
    (root / "sub").mkdir(parents=True)
    (root / "SKILL.md").write_text("---\nname: test\ndescription: test\n---\n# Test\n")
    (root / "sub" / "helper.md").write_text("nested")
    return root


class TestIsExcludedPath:
    """The exclusion rule is a pure predicate over path segments."""

    def test_git_segment_excluded(self) -> None:
        assert is_excluded_path(Path(".git/HEAD").parts) is True

    def test_nested_node_modules_excluded(self) -> None:
        assert is_excluded_path(("lib", "deep", "node_modules", "x", "index.js")) is True

    def test_regular_path_included(self) -> None:
        assert is_excluded_path(("docs", "guide.md")) is False

    def test_similar_names_not_excluded(self) -> None:
        """Only exact segment matches count."""
        assert is_excluded_path((".github", "workflow.yml")) is False
        assert is_excluded_path(("my_node_modules", "a")) is False

    def test_empty_parts(self) -> None:
        assert is_excluded_path(()) is False


class TestDeterminism:
    """Repeated hashing of the same tree gives the same digest."""

    def test_same_tree_same_hash(self, skill_dir: Path) -> None:
        assert _hash(skill_dir) == _hash(skill_dir)

    def test_hex_format(self, skill_dir: Path) -> None:
        assert _HEX64.match(_hash(skill_dir))

    def test_identical_trees_in_different_places(self, tmp_path: Path) -> None:
        for name in ("a", "b"):
            (tmp_path / name / "x").mkdir(parents=True)
            (tmp_path / name / "SKILL.md").write_text("same")
            (tmp_path / name / "x" / "y.txt").write_text("same nested")
        assert _hash(tmp_path / "a") == _hash(tmp_path / "b")

    def test_matches_manual_computation(self, tmp_path: Path) -> None:
        """Digest is sha256 over sorted (path bytes + content bytes)."""
        root = tmp_path / "s"
        (root / "b").mkdir(parents=True)
        (root / "a.txt").write_bytes(b"A")
        (root / "b" / "c.txt").write_bytes(b"C")
        expected = hashlib.sha256(b"a.txt" + b"A" + b"b/c.txt" + b"C").hexdigest()
        assert _hash(root) == expected

    def test_empty_folder(self, tmp_path: Path) -> None:
        root = tmp_path / "empty"
        root.mkdir()
        assert _hash(root) == hashlib.sha256().hexdigest()

    def test_sync_variant_agrees(self, skill_dir: Path) -> None:
        assert compute_skill_folder_hash_sync(skill_dir) == _hash(skill_dir)


class TestChangeDetection:
    """Any content or layout change produces a different digest."""

    def test_content_change(self, skill_dir: Path) -> None:
        before = _hash(skill_dir)
        (skill_dir / "SKILL.md").write_text("version 2")
        assert _hash(skill_dir) != before

    def test_nested_content_change(self, skill_dir: Path) -> None:
        before = _hash(skill_dir)
        (skill_dir / "sub" / "helper.md").write_text("changed")
        assert _hash(skill_dir) != before

    def test_file_added(self, skill_dir: Path) -> None:
        before = _hash(skill_dir)
        (skill_dir / "extra.txt").write_text("extra file")
        assert _hash(skill_dir) != before

    def test_file_deleted(self, skill_dir: Path) -> None:
        before = _hash(skill_dir)
        (skill_dir / "sub" / "helper.md").unlink()
        assert _hash(skill_dir) != before

    def test_rename_with_same_content(self, tmp_path: Path) -> None:
        v1 = tmp_path / "skill-v1"
        v2 = tmp_path / "skill-v2"
        v1.mkdir()
        v2.mkdir()
        (v1 / "old-name.md").write_text("content")
        (v2 / "new-name.md").write_text("content")
        assert _hash(v1) != _hash(v2)

    def test_move_into_subdirectory(self, tmp_path: Path) -> None:
        root = tmp_path / "s"
        root.mkdir()
        (root / "file.md").write_text("content")
        before = _hash(root)
        (root / "sub").mkdir()
        (root / "file.md").rename(root / "sub" / "file.md")
        assert _hash(root) != before


class TestExclusions:
    """VCS and dependency directories never affect the digest."""

    def test_git_and_node_modules_ignored(self, skill_dir: Path) -> None:
        before = _hash(skill_dir)
        (skill_dir / ".git").mkdir()
        (skill_dir / ".git" / "HEAD").write_text("ref: refs/heads/main")
        (skill_dir / "node_modules" / "foo").mkdir(parents=True)
        (skill_dir / "node_modules" / "foo" / "index.js").write_text("noop")
        assert _hash(skill_dir) == before

    def test_excluded_at_depth(self, skill_dir: Path) -> None:
        before = _hash(skill_dir)
        deep = skill_dir / "sub" / "node_modules" / "x"
        deep.mkdir(parents=True)
        (deep / "a.js").write_text("a")
        (skill_dir / "sub" / ".git").mkdir()
        (skill_dir / "sub" / ".git" / "config").write_text("[core]")
        assert _hash(skill_dir) == before
        assert compute_skill_folder_hash_sync(skill_dir) == before


class TestFailures:
    """Missing roots raise rather than hashing nothing."""

    def test_missing_root_raises(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            _hash(tmp_path / "does-not-exist")

    def test_missing_root_raises_sync(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            compute_skill_folder_hash_sync(tmp_path / "does-not-exist")


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX byte file names only")
class TestUndecodableNames:
    """Names the filesystem accepts are hashed even when they are not UTF-8."""

    @pytest.fixture
    def latin1_dir(self, tmp_path: Path) -> Path:
        if sys.getfilesystemencoding().lower().replace("-", "") != "utf8":
            pytest.skip("needs a UTF-8 filesystem encoding")
        root = tmp_path / "s"
        root.mkdir()
        raw = os.path.join(os.fsencode(root), b"caf\xe9.txt")
        try:
            with open(raw, "wb") as fh:
                fh.write(b"X")
        except OSError:
            pytest.skip("filesystem rejects non-UTF-8 file names")
        return root

    def test_raw_name_bytes_hashed(self, latin1_dir: Path) -> None:
        expected = hashlib.sha256(b"caf\xe9.txt" + b"X").hexdigest()
        assert _hash(latin1_dir) == expected
        assert compute_skill_folder_hash_sync(latin1_dir) == expected

    def test_rename_still_detected(self, latin1_dir: Path) -> None:
        before = _hash(latin1_dir)
        os.rename(
            os.path.join(os.fsencode(latin1_dir), b"caf\xe9.txt"),
            os.path.join(os.fsencode(latin1_dir), b"caf\xe8.txt"),
        )
        assert _hash(latin1_dir) != before


class TestOpenFileLimit:
    """Hashing keeps a bounded number of files open."""

    def test_many_files_under_tight_limit(self, tmp_path: Path, limit_open_files) -> None:
        root = tmp_path / "big"
        root.mkdir()
        for i in range(400):
            (root / f"f{i:03}.md").write_text(f"file {i}")
        expected = compute_skill_folder_hash_sync(root)
        with limit_open_files(64):
            assert _hash(root) == expected

    def test_concurrent_hashes_under_tight_limit(self, tmp_path: Path, limit_open_files) -> None:
        roots = []
        for n in range(8):
            root = tmp_path / f"s{n}"
            root.mkdir()
            for i in range(100):
                (root / f"f{i:03}.md").write_text(f"{n}-{i}")
            roots.append(root)

        async def _all() -> list[str]:
            return list(await asyncio.gather(*(compute_skill_folder_hash(r) for r in roots)))

        with limit_open_files(64):
            digests = asyncio.run(_all())
        assert digests == [compute_skill_folder_hash_sync(r) for r in roots]


class TestSymlinks:
    """File links contribute their target's bytes; directory links are skipped."""

    @staticmethod
    def _link(target: Path, link: Path, *, is_dir: bool = False) -> None:
        try:
            os.symlink(target, link, target_is_directory=is_dir)
        except (OSError, NotImplementedError):
            pytest.skip("symlinks are not available")

    def test_file_link_hashed_by_target_content(self, tmp_path: Path) -> None:
        outside = tmp_path / "outside.md"
        outside.write_text("shared v1")
        root = tmp_path / "s"
        root.mkdir()
        self._link(outside, root / "shared.md")

        copy = tmp_path / "copy"
        copy.mkdir()
        (copy / "shared.md").write_text("shared v1")
        assert _hash(root) == _hash(copy)

        before = _hash(root)
        outside.write_text("shared v2")
        assert _hash(root) != before

    def test_directory_link_not_followed(self, skill_dir: Path, tmp_path: Path) -> None:
        before = _hash(skill_dir)
        elsewhere = tmp_path / "elsewhere"
        elsewhere.mkdir()
        (elsewhere / "big.md").write_text("not part of the skill")
        self._link(elsewhere, skill_dir / "linked", is_dir=True)
        assert _hash(skill_dir) == before
        assert compute_skill_folder_hash_sync(skill_dir) == before

    def test_dangling_link_ignored(self, skill_dir: Path, tmp_path: Path) -> None:
        before = _hash(skill_dir)
        self._link(tmp_path / "gone.md", skill_dir / "dangling.md")
        assert _hash(skill_dir) == before
