"""Bundle materialization and artifact cleanup.

This module writes parsed file records into the work directory and removes
stale compiled artifacts before a fresh compile.
"""

from __future__ import annotations

from pathlib import Path

from core.constants import BUNDLE_ENCODING
from core.errors import CleanError, MaterializeError
from core.logging_config import get_logger
from core.types import BundleDocument, FileRecord, MaterializedFile

_LOGGER = get_logger(__name__)


def materialize_bundle(document: BundleDocument, target_dir: Path) -> tuple[MaterializedFile, ...]:
    """Write every record of a document below the target directory.

    Records are written independently in document order, so a later record
    with the same path replaces the earlier file.

    Args:
        document: Parsed bundle document.
        target_dir: Directory receiving the files.

    Returns:
        One entry per write, in document order.

    Raises:
        MaterializeError: If a path escapes the target or a write fails.
    """
    root = target_dir.resolve()
    written = [_write_record(record, root) for record in document.records]
    _LOGGER.info("bundle_materialized", target_dir=str(root), file_count=len(written))
    return tuple(written)


def clean_artifacts(target_dir: Path, artifact_suffix: str, recursive: bool) -> tuple[Path, ...]:
    """Delete compiled artifacts left by a previous build.

    Args:
        target_dir: Directory to scan.
        artifact_suffix: Suffix of compiled artifact files.
        recursive: Walk the full subtree instead of the immediate directory.

    Returns:
        Deleted artifact paths. Empty when nothing matched or the
        directory does not exist.

    Raises:
        CleanError: If the directory cannot be scanned or an artifact
            cannot be deleted.
    """
    if not target_dir.is_dir():
        return ()
    try:
        candidates = sorted(
            target_dir.rglob(f"*{artifact_suffix}") if recursive else target_dir.iterdir()
        )
    except OSError as error:
        raise CleanError(
            f"Failed to scan {target_dir} for {artifact_suffix} artifacts: {error}. "
            "Check directory permissions and retry."
        ) from error
    deleted: list[Path] = []
    for path in candidates:
        if path.is_file() and path.name.endswith(artifact_suffix):
            _delete_artifact(path)
            deleted.append(path)
    return tuple(deleted)


def _delete_artifact(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as error:
        raise CleanError(
            f"Failed to delete stale artifact {path}: {error}. "
            "Remove it manually or fix its permissions."
        ) from error
    _LOGGER.info("artifact_deleted", path=str(path))


def _write_record(record: FileRecord, root: Path) -> MaterializedFile:
    try:
        destination = (root / record.path).resolve()
    except (OSError, ValueError) as error:
        raise MaterializeError(
            f"Invalid bundle file path {record.path!r}: {error}. "
            "Fix the FILE header in the bundle."
        ) from error
    if not destination.is_relative_to(root):
        raise MaterializeError(
            f"Refusing to write bundle file '{record.path}': path resolves outside {root}. "
            "Use paths relative to the work directory."
        )
    payload = record.content.encode(BUNDLE_ENCODING)
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_bytes(payload)
    except (OSError, ValueError) as error:
        raise MaterializeError(
            f"Failed to write bundle file {destination}: {error}. "
            "Check directory permissions and free space."
        ) from error
    _LOGGER.info("bundle_file_written", path=record.path, byte_count=len(payload))
    return MaterializedFile(path=destination, byte_count=len(payload))
