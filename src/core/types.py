"""Shared typed models.

This module defines the data models passed between the bundle parser,
the materializer, the toolchain stages, and the pipeline driver.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

PipelineMode = Literal["build", "rebuild", "run"]
PipelineState = Literal[
    "Init",
    "Parsing",
    "Materializing",
    "Cleaning",
    "Compiling",
    "Verifying",
    "Launching",
    "Done",
    "Failed",
]


@dataclass(frozen=True)
class FileRecord:
    """One file carried inside a bundle.

    Attributes:
        path: Relative file path, may include subdirectories.
        lines: Raw content lines in order, whitespace preserved.
    """

    path: str
    lines: tuple[str, ...]

    @property
    def content(self) -> str:
        """File text as written to disk."""
        return "\n".join(self.lines)


@dataclass(frozen=True)
class BundleDocument:
    """Ordered file records parsed from one bundle text."""

    records: tuple[FileRecord, ...] = ()

    @property
    def paths(self) -> tuple[str, ...]:
        """Record paths in document order, duplicates included."""
        return tuple(record.path for record in self.records)


@dataclass
class ParserState:
    """Transient state for a single parse call."""

    current_path: str | None = None
    buffer: list[str] = field(default_factory=list)
    in_content: bool = False


@dataclass(frozen=True)
class MaterializedFile:
    """One file written by the materializer."""

    path: Path
    byte_count: int


@dataclass(frozen=True)
class CompileResult:
    """Outcome of one batch toolchain invocation.

    Attributes:
        return_code: Toolchain process exit status.
        source_files: Relative source paths handed to the toolchain.
    """

    return_code: int
    source_files: tuple[str, ...]

    @property
    def succeeded(self) -> bool:
        """Whether the toolchain reported success."""
        return self.return_code == 0


@dataclass(frozen=True)
class BuildProfile:
    """Toolchain and layout settings for one work directory.

    Attributes:
        bundle_file: Bundle file name relative to the work directory.
        recursive: Scan subdirectories for sources and artifacts.
        compiler_command: Command prefix used to compile sources.
        runner_command: Command prefix used to launch the entry point.
        source_suffix: Suffix identifying source files.
        artifact_suffix: Suffix identifying compiled artifacts.
        entry_artifact: Artifact path whose presence confirms the build.
        entry_point: Name handed to the runner command.
    """

    bundle_file: str
    recursive: bool
    compiler_command: tuple[str, ...]
    runner_command: tuple[str, ...]
    source_suffix: str
    artifact_suffix: str
    entry_artifact: str
    entry_point: str


@dataclass(frozen=True)
class PipelineOutcome:
    """Tagged result of one pipeline run.

    Attributes:
        mode: Pipeline mode that was executed.
        states: Every state visited, in order, ending in Done or Failed.
        error_kind: Error kind label for Failed runs, None when Ok.
        message: Operator-facing failure description.
        program_exit_code: Exit status of the launched program, if launched.
    """

    mode: PipelineMode
    states: tuple[PipelineState, ...]
    error_kind: str | None = None
    message: str | None = None
    program_exit_code: int | None = None

    @property
    def succeeded(self) -> bool:
        """Whether the pipeline reached Done."""
        return self.error_kind is None

    @property
    def exit_code(self) -> int:
        """Process exit code for this outcome."""
        return 0 if self.succeeded else 1
