"""Compile and verification stages.

This module discovers source files, hands them to the toolchain as one
batch, and confirms the entry artifact exists afterwards.
"""

from __future__ import annotations

from pathlib import Path

from core.errors import CompileError, NoSourceFilesError, VerificationError
from core.logging_config import get_logger
from core.types import CompileResult
from toolchain.command_toolchain import Toolchain

_LOGGER = get_logger(__name__)


def discover_source_files(work_dir: Path, source_suffix: str, recursive: bool) -> tuple[str, ...]:
    """List source files relative to the work directory.

    Args:
        work_dir: Directory holding the sources.
        source_suffix: Suffix identifying source files.
        recursive: Include files from subdirectories.

    Returns:
        Sorted POSIX-style relative paths.

    Raises:
        CompileError: If the directory cannot be scanned.
    """
    if not work_dir.is_dir():
        return ()
    try:
        candidates = work_dir.rglob(f"*{source_suffix}") if recursive else work_dir.iterdir()
        return tuple(
            sorted(
                path.relative_to(work_dir).as_posix()
                for path in candidates
                if path.is_file() and path.name.endswith(source_suffix)
            )
        )
    except OSError as error:
        raise CompileError(
            f"Failed to scan {work_dir} for {source_suffix} sources: {error}. "
            "Check directory permissions and retry."
        ) from error


def compile_sources(
    toolchain: Toolchain,
    work_dir: Path,
    source_files: tuple[str, ...],
) -> CompileResult:
    """Compile every source file in a single toolchain call.

    Args:
        toolchain: Compiler implementation.
        work_dir: Working directory for the compiler.
        source_files: Relative source paths.

    Returns:
        Successful compile result.

    Raises:
        NoSourceFilesError: If there is nothing to compile.
        CompileError: If the compiler cannot start or exits non-zero.
    """
    if not source_files:
        raise NoSourceFilesError(
            f"No source files found in {work_dir}. "
            "Check the bundle contents and the profile 'source_suffix'."
        )
    _LOGGER.info("compile_started", work_dir=str(work_dir), source_count=len(source_files))
    try:
        return_code = toolchain.compile(source_files, work_dir)
    except OSError as error:
        raise CompileError(
            f"Failed to start compiler: {error}. "
            "Install the toolchain or set 'toolchain.compiler' in the build profile."
        ) from error
    result = CompileResult(return_code=return_code, source_files=source_files)
    if not result.succeeded:
        raise CompileError(
            f"Compilation failed with exit code {return_code}. "
            "See the compiler diagnostics above."
        )
    _LOGGER.info("compile_completed", source_count=len(source_files))
    return result


def entry_artifact_exists(work_dir: Path, entry_artifact: str) -> bool:
    """Return whether the entry artifact is present as a file."""
    return (work_dir / entry_artifact).is_file()


def verify_entry_artifact(work_dir: Path, entry_artifact: str) -> Path:
    """Confirm the compiler produced the entry artifact.

    Args:
        work_dir: Directory holding compiled artifacts.
        entry_artifact: Artifact path relative to the work directory.

    Returns:
        Absolute artifact path.

    Raises:
        VerificationError: If the artifact is absent after a successful compile.
    """
    artifact_path = work_dir / entry_artifact
    if not entry_artifact_exists(work_dir, entry_artifact):
        raise VerificationError(
            f"{entry_artifact} not found in {work_dir} after compilation. "
            "Check the entry class name against 'entry.artifact' in the build profile."
        )
    _LOGGER.info("entry_artifact_verified", path=str(artifact_path))
    return artifact_path
