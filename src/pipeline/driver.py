"""Pipeline state machine.

Full build walks ``Init -> Parsing -> Materializing -> Cleaning ->
Compiling -> Verifying -> Launching -> Done``. Rebuild skips parsing and
materializing, and run-only jumps from ``Init`` straight to ``Launching``.
Any stage error ends in ``Failed`` with the error's kind.
"""

from __future__ import annotations

from pathlib import Path

from bundle.materializer import clean_artifacts, materialize_bundle
from bundle.parser import parse_bundle
from bundle.reader import read_bundle_text
from core.errors import BundleRunError, MissingWorkingLocationError
from core.logging_config import get_logger
from core.types import (
    BuildProfile,
    BundleDocument,
    PipelineMode,
    PipelineOutcome,
    PipelineState,
)
from toolchain.command_toolchain import Toolchain
from toolchain.compile_stage import compile_sources, discover_source_files, verify_entry_artifact
from toolchain.launch_stage import launch_entry_point

_LOGGER = get_logger(__name__)


class PipelineDriver:
    """Runs one pipeline mode against a work directory."""

    def __init__(
        self,
        work_dir: Path,
        profile: BuildProfile,
        toolchain: Toolchain,
        invocation_dir: Path,
    ) -> None:
        """Create a driver.

        Args:
            work_dir: Directory holding the bundle, sources and artifacts.
            profile: Toolchain and layout settings.
            toolchain: Compiler and runner implementation.
            invocation_dir: Operator directory captured before any work.
        """
        self._work_dir = work_dir
        self._profile = profile
        self._toolchain = toolchain
        self._invocation_dir = invocation_dir
        self._states: list[PipelineState] = []
        self._document = BundleDocument()
        self._program_exit_code: int | None = None

    def run(self, mode: PipelineMode) -> PipelineOutcome:
        """Execute the pipeline and return its tagged outcome."""
        self._states = []
        self._document = BundleDocument()
        self._program_exit_code = None
        self._enter("Init")
        _LOGGER.info(
            "pipeline_started",
            mode=mode,
            work_dir=str(self._work_dir),
            invocation_dir=str(self._invocation_dir),
        )
        try:
            self._check_work_dir()
            if mode == "build":
                self._parse()
                self._materialize()
            if mode in ("build", "rebuild"):
                self._clean()
                self._compile()
                self._verify()
            self._launch()
        except BundleRunError as error:
            return self._fail(mode, error)
        self._enter("Done")
        return PipelineOutcome(
            mode=mode,
            states=tuple(self._states),
            program_exit_code=self._program_exit_code,
        )

    def _check_work_dir(self) -> None:
        if not self._work_dir.is_dir():
            raise MissingWorkingLocationError(
                f"Work directory does not exist: {self._work_dir}. "
                "Pass --work-dir or set BUNDLERUN_WORK_DIR to an existing directory."
            )

    def _parse(self) -> None:
        self._enter("Parsing")
        text = read_bundle_text(self._work_dir / self._profile.bundle_file)
        self._document = parse_bundle(text)
        _LOGGER.info("bundle_parsed", record_count=len(self._document.records))

    def _materialize(self) -> None:
        self._enter("Materializing")
        materialize_bundle(self._document, self._work_dir)

    def _clean(self) -> None:
        self._enter("Cleaning")
        deleted = clean_artifacts(
            self._work_dir, self._profile.artifact_suffix, self._profile.recursive
        )
        _LOGGER.info("artifacts_cleaned", deleted_count=len(deleted))

    def _compile(self) -> None:
        self._enter("Compiling")
        source_files = discover_source_files(
            self._work_dir, self._profile.source_suffix, self._profile.recursive
        )
        compile_sources(self._toolchain, self._work_dir, source_files)

    def _verify(self) -> None:
        self._enter("Verifying")
        verify_entry_artifact(self._work_dir, self._profile.entry_artifact)

    def _launch(self) -> None:
        self._enter("Launching")
        self._program_exit_code = launch_entry_point(
            self._toolchain,
            self._work_dir,
            self._profile.entry_point,
            self._invocation_dir,
        )

    def _enter(self, state: PipelineState) -> None:
        self._states.append(state)
        _LOGGER.debug("pipeline_state_entered", state=state)

    def _fail(self, mode: PipelineMode, error: BundleRunError) -> PipelineOutcome:
        failed_state = self._states[-1]
        self._enter("Failed")
        _LOGGER.error(
            "pipeline_failed",
            mode=mode,
            state=failed_state,
            error_kind=error.kind,
            message=str(error),
        )
        return PipelineOutcome(
            mode=mode,
            states=tuple(self._states),
            error_kind=error.kind,
            message=str(error),
        )
