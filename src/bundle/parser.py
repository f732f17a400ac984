"""Bundle text parser.

A bundle is a flat document in which each file starts with a
``FILE: <path>`` header followed by a content block opened and closed by
the delimiter token. Parsing is lossy by contract: lines outside a content
window are dropped and empty blocks produce no record, so malformed input
degrades instead of raising.
"""

from __future__ import annotations

from core.constants import BUNDLE_DELIMITER, BUNDLE_HEADER_PREFIX
from core.types import BundleDocument, FileRecord, ParserState


def parse_bundle(text: str, delimiter: str = BUNDLE_DELIMITER) -> BundleDocument:
    """Parse bundle text into ordered file records.

    Args:
        text: Full bundle text.
        delimiter: Token toggling content blocks, compared after trimming.

    Returns:
        Parsed document. Duplicate paths are kept in document order.
    """
    state = ParserState()
    records: list[FileRecord] = []
    for raw_line in text.split("\n"):
        _consume_line(state, raw_line, delimiter, records)
    _flush(state, records)
    return BundleDocument(records=tuple(records))


def _consume_line(
    state: ParserState,
    raw_line: str,
    delimiter: str,
    records: list[FileRecord],
) -> None:
    line = raw_line.strip()
    if line.startswith(BUNDLE_HEADER_PREFIX):
        _flush(state, records)
        state.current_path = line[len(BUNDLE_HEADER_PREFIX) :].strip()
        state.buffer = []
        state.in_content = False
        return
    if line == delimiter:
        state.in_content = not state.in_content
        return
    if state.in_content and state.current_path:
        state.buffer.append(raw_line)


def _flush(state: ParserState, records: list[FileRecord]) -> None:
    # Empty buffers never become records.
    if state.current_path and state.buffer:
        records.append(FileRecord(path=state.current_path, lines=tuple(state.buffer)))
