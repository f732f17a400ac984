"""Python SDK for bundle build workflows.

This module exposes high-level APIs for building, rebuilding and running
a bundled program, packing source trees into bundles, and opening the
request recorder, all driven by one runtime configuration.
"""

from __future__ import annotations

from pathlib import Path

from bundle.serializer import collect_file_records, serialize_bundle
from core.build_profile import load_build_profile
from core.config import BundleRunConfig
from core.constants import BUNDLE_ENCODING
from core.errors import BundleRunError
from core.logging_config import get_logger
from core.types import BuildProfile, PipelineMode, PipelineOutcome
from pipeline.driver import PipelineDriver
from recorder.request_filters import RequestFilter
from recorder.request_recorder import RequestRecorder
from recorder.request_store import JsonRequestStore
from toolchain.command_toolchain import CommandToolchain, Toolchain

_LOGGER = get_logger(__name__)


class BundleRunClient:
    """Primary SDK entry point for bundlerun workflows."""

    def __init__(
        self,
        config: BundleRunConfig | None = None,
        invocation_dir: Path | None = None,
        toolchain: Toolchain | None = None,
    ) -> None:
        """Create SDK client.

        Args:
            config: Optional runtime configuration.
            invocation_dir: Operator directory forwarded to the program.
                Captured from the current directory when omitted.
            toolchain: Optional toolchain override, built from the
                profile when omitted.
        """
        self._config = config or BundleRunConfig.from_env()
        self._invocation_dir = (invocation_dir or Path.cwd()).resolve()
        self._toolchain = toolchain

    @property
    def config(self) -> BundleRunConfig:
        """Runtime configuration used by this client."""
        return self._config

    def with_work_dir(self, work_dir: str) -> "BundleRunClient":
        """Return a client rooted at another work directory."""
        return BundleRunClient(
            self._config.with_work_dir(work_dir),
            invocation_dir=self._invocation_dir,
            toolchain=self._toolchain,
        )

    def profile(self) -> BuildProfile:
        """Load the build profile for the work directory.

        Raises:
            BundleRunConfigError: If the profile file is invalid.
        """
        return load_build_profile(self._config.profile_path)

    def execute(self, mode: PipelineMode) -> PipelineOutcome:
        """Run one pipeline mode and return its outcome.

        Configuration errors are reported as a Failed outcome so callers
        handle every failure the same way.
        """
        try:
            profile = self.profile()
        except BundleRunError as error:
            _LOGGER.error("pipeline_failed", mode=mode, error_kind=error.kind, message=str(error))
            return PipelineOutcome(
                mode=mode,
                states=("Init", "Failed"),
                error_kind=error.kind,
                message=str(error),
            )
        toolchain = self._toolchain or CommandToolchain.from_profile(profile)
        driver = PipelineDriver(self._config.work_dir, profile, toolchain, self._invocation_dir)
        return driver.run(mode)

    def build(self) -> PipelineOutcome:
        """Parse the bundle, write sources, compile, verify and launch."""
        return self.execute("build")

    def rebuild(self) -> PipelineOutcome:
        """Compile, verify and launch the sources already on disk."""
        return self.execute("rebuild")

    def run_only(self) -> PipelineOutcome:
        """Launch the existing entry point without touching any file."""
        return self.execute("run")

    def pack(self, source_dir: str, output_path: str | None = None) -> Path:
        """Serialize a source tree into a bundle file.

        Args:
            source_dir: Directory of source files.
            output_path: Bundle destination, defaults to the profile bundle
                file inside the work directory.

        Returns:
            Written bundle path.

        Raises:
            BundleRunError: If no source files were found or IO fails.
        """
        profile = self.profile()
        source_root = Path(source_dir).expanduser().resolve()
        records = collect_file_records(source_root, profile.source_suffix)
        if not records:
            raise BundleRunError(
                f"No {profile.source_suffix} files found under {source_root}. "
                "Check the directory or 'toolchain.source_suffix' in the build profile."
            )
        destination = (
            Path(output_path).expanduser().resolve()
            if output_path
            else self._config.work_dir / profile.bundle_file
        )
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            destination.write_text(serialize_bundle(records), encoding=BUNDLE_ENCODING)
        except OSError as error:
            raise BundleRunError(f"Failed to write bundle at {destination}: {error}.") from error
        _LOGGER.info("bundle_packed", path=str(destination), record_count=len(records))
        return destination

    def recorder(self, request_filter: RequestFilter | None = None) -> RequestRecorder:
        """Open the request recorder backed by the configured store."""
        return RequestRecorder(JsonRequestStore(self._config.recorder_store), request_filter)
