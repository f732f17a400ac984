"""Bundle file loading."""

from __future__ import annotations

from pathlib import Path

from core.constants import BUNDLE_ENCODING
from core.errors import MissingBundleSourceError, ParseIOError


def read_bundle_text(bundle_path: Path) -> str:
    """Read bundle text from disk.

    Args:
        bundle_path: Bundle file path.

    Returns:
        Decoded bundle text.

    Raises:
        MissingBundleSourceError: If the bundle file does not exist.
        ParseIOError: If the file cannot be read or decoded.
    """
    if not bundle_path.is_file():
        raise MissingBundleSourceError(
            f"Bundle file not found at {bundle_path}. "
            "Place the bundle in the work directory or set 'bundle' in the build profile."
        )
    try:
        return bundle_path.read_text(encoding=BUNDLE_ENCODING)
    except UnicodeDecodeError as error:
        raise ParseIOError(
            f"Failed to decode bundle at {bundle_path}: {error.reason}. "
            f"Save the bundle as {BUNDLE_ENCODING} and retry."
        ) from error
    except OSError as error:
        raise ParseIOError(
            f"Failed to read bundle at {bundle_path}: {error}. Check file permissions and retry."
        ) from error
