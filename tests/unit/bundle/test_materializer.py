"""Unit tests for bundle materialization and artifact cleanup."""

from __future__ import annotations

from pathlib import Path

import pytest

from bundle.materializer import clean_artifacts, materialize_bundle
from bundle.parser import parse_bundle
from core.errors import CleanError, MaterializeError
from core.types import BundleDocument, FileRecord
from tests.fixture_paths import fixture_text, snapshot_tree


def test_materialize_bundle_writes_nested_files(tmp_path: Path) -> None:
    """Records with subdirectory paths should create parent directories."""
    document = parse_bundle(fixture_text("bundles/java_project.txt"))

    written = materialize_bundle(document, tmp_path)

    strings_file = tmp_path / "util" / "Strings.java"
    assert len(written) == 3 and strings_file.read_text(encoding="utf-8") == (
        "package util;\n\npublic class Strings {\n}"
    )


def test_materialize_bundle_reports_byte_lengths(tmp_path: Path) -> None:
    """Each write should report the encoded byte length."""
    document = BundleDocument(records=(FileRecord(path="u.txt", lines=("héllo", "x")),))

    written = materialize_bundle(document, tmp_path)

    assert written[0].byte_count == len("héllo\nx".encode("utf-8"))


def test_materialize_bundle_skips_empty_records_from_parse(tmp_path: Path) -> None:
    """The empty B.txt record should never reach the disk."""
    document = parse_bundle(fixture_text("bundles/empty_record.txt"))

    materialize_bundle(document, tmp_path)

    assert snapshot_tree(tmp_path) == {"A.txt": b"line1\nline2"}


def test_materialize_bundle_last_write_wins(tmp_path: Path) -> None:
    """Later records with the same path should overwrite earlier ones."""
    document = BundleDocument(
        records=(
            FileRecord(path="dup.txt", lines=("first",)),
            FileRecord(path="dup.txt", lines=("second",)),
        )
    )

    materialize_bundle(document, tmp_path)

    assert (tmp_path / "dup.txt").read_text(encoding="utf-8") == "second"


def test_materialize_bundle_overwrites_existing_file(tmp_path: Path) -> None:
    """Existing files should be replaced unconditionally."""
    (tmp_path / "a.txt").write_text("stale content that is longer", encoding="utf-8")
    document = BundleDocument(records=(FileRecord(path="a.txt", lines=("fresh",)),))

    materialize_bundle(document, tmp_path)

    assert (tmp_path / "a.txt").read_text(encoding="utf-8") == "fresh"


def test_materialize_bundle_rejects_paths_outside_target(tmp_path: Path) -> None:
    """Paths escaping the target directory should fail the stage."""
    target = tmp_path / "work"
    target.mkdir()
    document = BundleDocument(records=(FileRecord(path="../escape.txt", lines=("x",)),))

    with pytest.raises(MaterializeError):
        materialize_bundle(document, target)

    assert not (tmp_path / "escape.txt").exists()


def test_materialize_bundle_raises_on_write_failure(tmp_path: Path) -> None:
    """Filesystem errors should surface as materialize errors."""
    (tmp_path / "blocker").write_text("a file, not a directory", encoding="utf-8")
    document = BundleDocument(records=(FileRecord(path="blocker/child.txt", lines=("x",)),))

    with pytest.raises(MaterializeError) as error_info:
        materialize_bundle(document, tmp_path)

    assert error_info.value.kind == "MaterializeFailure"


def test_clean_artifacts_non_recursive_keeps_nested_artifacts(tmp_path: Path) -> None:
    """Flat cleaning should only touch the immediate directory."""
    (tmp_path / "Top.class").write_text("x", encoding="utf-8")
    (tmp_path / "Top.java").write_text("x", encoding="utf-8")
    (tmp_path / "pkg").mkdir()
    (tmp_path / "pkg" / "Nested.class").write_text("x", encoding="utf-8")

    deleted = clean_artifacts(tmp_path, ".class", recursive=False)

    assert deleted == (tmp_path / "Top.class",) and sorted(snapshot_tree(tmp_path)) == [
        "Top.java",
        "pkg/Nested.class",
    ]


def test_clean_artifacts_recursive_walks_subtree(tmp_path: Path) -> None:
    """Recursive cleaning should remove artifacts at every depth."""
    (tmp_path / "Top.class").write_text("x", encoding="utf-8")
    (tmp_path / "a" / "b").mkdir(parents=True)
    (tmp_path / "a" / "b" / "Deep.class").write_text("x", encoding="utf-8")

    deleted = clean_artifacts(tmp_path, ".class", recursive=True)

    assert len(deleted) == 2 and snapshot_tree(tmp_path) == {}


def test_clean_artifacts_tolerates_missing_directory(tmp_path: Path) -> None:
    """A missing directory means there is nothing to clean."""
    assert clean_artifacts(tmp_path / "absent", ".class", recursive=True) == ()


def test_materialize_bundle_rejects_unrepresentable_path(tmp_path: Path) -> None:
    """A header path the filesystem cannot name should be a materialize error."""
    document = BundleDocument(records=(FileRecord(path="A\x00.java", lines=("x",)),))

    with pytest.raises(MaterializeError):
        materialize_bundle(document, tmp_path)

    assert snapshot_tree(tmp_path) == {}


def test_clean_artifacts_raises_when_artifact_cannot_be_deleted(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Deletion failures should surface as clean errors."""
    (tmp_path / "A.class").write_text("x", encoding="utf-8")

    def deny_unlink(self: Path, missing_ok: bool = False) -> None:
        raise PermissionError(13, "Permission denied", str(self))

    monkeypatch.setattr(Path, "unlink", deny_unlink)

    with pytest.raises(CleanError) as error_info:
        clean_artifacts(tmp_path, ".class", recursive=True)

    assert error_info.value.kind == "CleanFailure" and "A.class" in str(error_info.value)


def test_clean_artifacts_raises_when_directory_cannot_be_scanned(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Scan failures should surface as clean errors."""

    def deny_iterdir(self: Path) -> None:
        raise PermissionError(13, "Permission denied", str(self))

    monkeypatch.setattr(Path, "iterdir", deny_iterdir)

    with pytest.raises(CleanError):
        clean_artifacts(tmp_path, ".class", recursive=False)
