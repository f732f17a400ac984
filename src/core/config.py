"""Runtime configuration model for bundlerun.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path

from core.constants import (
    DEFAULT_LOG_LEVEL,
    DEFAULT_PROFILE_FILE_NAME,
    DEFAULT_RECORDER_STORE_FILE_NAME,
    DEFAULT_STATE_DIR_NAME,
    DEFAULT_WORK_DIR,
    SUPPORTED_LOG_LEVELS,
)
from core.errors import BundleRunConfigError


@dataclass(frozen=True)
class BundleRunConfig:
    """Validated runtime configuration.

    Attributes:
        work_dir: Directory where the bundle lives and compilation happens.
        profile_path: Build profile YAML path, optional on disk.
        log_level: Minimum structured log level.
        recorder_store: JSON file backing the request recorder.
    """

    work_dir: Path
    profile_path: Path
    log_level: str
    recorder_store: Path

    @classmethod
    def from_env(cls) -> "BundleRunConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            BundleRunConfigError: If environment values are invalid.
        """
        work_dir = _resolve_path(os.getenv("BUNDLERUN_WORK_DIR", str(DEFAULT_WORK_DIR)))
        profile_value = os.getenv("BUNDLERUN_PROFILE")
        recorder_value = os.getenv("BUNDLERUN_RECORDER_STORE")
        log_level = _parse_log_level(os.getenv("BUNDLERUN_LOG_LEVEL", DEFAULT_LOG_LEVEL))
        return cls(
            work_dir=work_dir,
            profile_path=(
                _resolve_path(profile_value)
                if profile_value
                else work_dir / DEFAULT_PROFILE_FILE_NAME
            ),
            log_level=log_level,
            recorder_store=(
                _resolve_path(recorder_value)
                if recorder_value
                else work_dir / DEFAULT_STATE_DIR_NAME / DEFAULT_RECORDER_STORE_FILE_NAME
            ),
        )

    def with_work_dir(self, work_dir: str) -> "BundleRunConfig":
        """Return a copy rooted at another work directory.

        Profile and recorder paths that still point at their defaults
        under the old work directory move along with it.
        """
        resolved = _resolve_path(work_dir)
        profile_path = self.profile_path
        if profile_path == self.work_dir / DEFAULT_PROFILE_FILE_NAME:
            profile_path = resolved / DEFAULT_PROFILE_FILE_NAME
        recorder_store = self.recorder_store
        default_store = self.work_dir / DEFAULT_STATE_DIR_NAME / DEFAULT_RECORDER_STORE_FILE_NAME
        if recorder_store == default_store:
            recorder_store = resolved / DEFAULT_STATE_DIR_NAME / DEFAULT_RECORDER_STORE_FILE_NAME
        return BundleRunConfig(
            work_dir=resolved,
            profile_path=profile_path,
            log_level=self.log_level,
            recorder_store=recorder_store,
        )


def _resolve_path(raw_value: str) -> Path:
    return Path(raw_value).expanduser().resolve()


def _parse_log_level(raw_value: str) -> str:
    """Parse the log level environment value.

    Args:
        raw_value: Raw string from environment.

    Returns:
        Normalized lowercase level name.

    Raises:
        BundleRunConfigError: If the level is not supported.
    """
    normalized = raw_value.strip().lower()
    if normalized in SUPPORTED_LOG_LEVELS:
        return normalized
    supported_rows = ", ".join(SUPPORTED_LOG_LEVELS)
    raise BundleRunConfigError(
        "Invalid BUNDLERUN_LOG_LEVEL value: "
        f"expected one of {supported_rows}, got '{raw_value}'. "
        "Set BUNDLERUN_LOG_LEVEL to a supported level."
    )
