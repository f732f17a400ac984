"""Unit tests for core config parsing."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from core.config import BundleRunConfig
from core.errors import BundleRunConfigError


def test_from_env_reads_work_dir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Config should resolve the work dir and derive default paths from it."""
    monkeypatch.setenv("BUNDLERUN_WORK_DIR", str(tmp_path))

    config = BundleRunConfig.from_env()

    assert config.work_dir == tmp_path.resolve()
    assert config.profile_path == tmp_path.resolve() / "bundlerun.yaml"
    assert config.recorder_store == tmp_path.resolve() / ".bundlerun" / "requests.json"


def test_from_env_defaults_to_current_directory(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    """Without overrides the work dir is the current directory."""
    monkeypatch.chdir(tmp_path)

    config = BundleRunConfig.from_env()

    assert config.work_dir == tmp_path.resolve() and config.log_level == "info"


def test_from_env_normalizes_log_level(monkeypatch: pytest.MonkeyPatch) -> None:
    """Log level values should be case-insensitive."""
    monkeypatch.setenv("BUNDLERUN_LOG_LEVEL", " DEBUG ")

    assert BundleRunConfig.from_env().log_level == "debug"


def test_from_env_raises_for_invalid_log_level(monkeypatch: pytest.MonkeyPatch) -> None:
    """Config should fail for unsupported log levels."""
    monkeypatch.setenv("BUNDLERUN_LOG_LEVEL", "verbose")

    with pytest.raises(BundleRunConfigError):
        BundleRunConfig.from_env()

    assert os.getenv("BUNDLERUN_LOG_LEVEL") == "verbose"


def test_with_work_dir_moves_default_paths(tmp_path: Path) -> None:
    """Default profile and store paths should follow the work dir."""
    config = BundleRunConfig.from_env().with_work_dir(str(tmp_path))

    assert config.profile_path == tmp_path.resolve() / "bundlerun.yaml"
    assert config.recorder_store.parent == tmp_path.resolve() / ".bundlerun"


def test_with_work_dir_keeps_explicit_profile(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    """An explicitly configured profile should not move."""
    profile_path = tmp_path / "shared" / "profile.yaml"
    monkeypatch.setenv("BUNDLERUN_PROFILE", str(profile_path))

    config = BundleRunConfig.from_env().with_work_dir(str(tmp_path / "work"))

    assert config.profile_path == profile_path.resolve()
