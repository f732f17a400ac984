"""Bundle serialization.

This module builds bundle text from file records or from a directory of
source files. Its output parses back into the same records.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from core.constants import BUNDLE_DELIMITER, BUNDLE_ENCODING, BUNDLE_HEADER_PREFIX
from core.errors import BundleRunError
from core.logging_config import get_logger
from core.types import FileRecord

_LOGGER = get_logger(__name__)


def serialize_bundle(records: Iterable[FileRecord], delimiter: str = BUNDLE_DELIMITER) -> str:
    """Render file records as bundle text.

    Args:
        records: Records to serialize, in order.
        delimiter: Token framing each content block.

    Returns:
        Newline-terminated bundle text.

    Raises:
        BundleRunError: If a record cannot be framed so that it parses back
            unchanged.
    """
    lines: list[str] = []
    for record in records:
        _check_record(record, delimiter)
        lines.append(f"{BUNDLE_HEADER_PREFIX}{record.path}")
        lines.append(delimiter)
        lines.extend(record.lines)
        lines.append(delimiter)
    return "\n".join(lines) + "\n" if lines else ""


def _check_record(record: FileRecord, delimiter: str) -> None:
    path = record.path
    if not path or path != path.strip() or "\n" in path:
        raise BundleRunError(
            f"Cannot bundle file path {path!r}: paths must be non-empty single lines "
            "without surrounding whitespace."
        )
    for line_number, line in enumerate(record.lines, 1):
        control_line = line.strip()
        if control_line == delimiter or control_line.startswith(BUNDLE_HEADER_PREFIX):
            raise BundleRunError(
                f"Cannot bundle {path}: line {line_number} reads as a bundle "
                f"{'delimiter' if control_line == delimiter else 'file header'}. "
                "Edit the line or leave the file out of the bundle."
            )


def collect_file_records(source_dir: Path, source_suffix: str) -> tuple[FileRecord, ...]:
    """Load every source file under a directory as a file record.

    Args:
        source_dir: Directory to scan recursively.
        source_suffix: Suffix selecting files to include.

    Returns:
        Records sorted by relative path. Empty files are skipped because
        they cannot survive a parse.

    Raises:
        BundleRunError: If the directory is missing or a file is unreadable.
    """
    if not source_dir.is_dir():
        raise BundleRunError(
            f"Pack source directory does not exist at {source_dir}. "
            "Provide an existing directory of source files."
        )
    records: list[FileRecord] = []
    for file_path in sorted(source_dir.rglob(f"*{source_suffix}")):
        if not file_path.is_file():
            continue
        try:
            text = file_path.read_text(encoding=BUNDLE_ENCODING)
        except (OSError, UnicodeDecodeError) as error:
            raise BundleRunError(f"Failed to read source file {file_path}: {error}.") from error
        if not text:
            _LOGGER.warning("pack_file_skipped", path=str(file_path), reason="empty")
            continue
        relative_path = file_path.relative_to(source_dir).as_posix()
        records.append(FileRecord(path=relative_path, lines=tuple(text.split("\n"))))
    return tuple(records)
