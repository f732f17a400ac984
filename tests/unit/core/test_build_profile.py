"""Unit tests for build profile loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from core.build_profile import default_build_profile, load_build_profile
from core.errors import BundleRunConfigError
from tests.fixture_paths import fixture_path


def test_missing_profile_returns_java_defaults(tmp_path: Path) -> None:
    """No profile file should mean the built-in Java toolchain."""
    profile = load_build_profile(tmp_path / "bundlerun.yaml")

    assert profile == default_build_profile()
    assert profile.entry_artifact == "ConversationCLI.class" and profile.recursive is True


def test_valid_profile_overrides_defaults() -> None:
    """Every provided field should replace its default."""
    profile = load_build_profile(fixture_path("profiles/valid_profile.yaml"))

    assert profile.bundle_file == "project.bundle"
    assert profile.recursive is False
    assert profile.compiler_command == ("javac", "-encoding", "UTF-8")
    assert profile.runner_command == ("java",)
    assert profile.entry_artifact == "com/codeboss/Main.class"
    assert profile.entry_point == "com.codeboss.Main"
    assert profile.source_suffix == ".java"


def test_unknown_key_is_rejected() -> None:
    """Typos in profile sections should fail fast."""
    with pytest.raises(BundleRunConfigError) as error_info:
        load_build_profile(fixture_path("profiles/unknown_key.yaml"))

    assert "linker" in str(error_info.value)


def test_unsupported_version_is_rejected() -> None:
    """Only version 1 profiles are accepted."""
    with pytest.raises(BundleRunConfigError):
        load_build_profile(fixture_path("profiles/bad_version.yaml"))


@pytest.mark.parametrize(
    "content",
    [
        "",
        "- just\n- a list\n",
        "version: 1\nrecursive: yes please\n",
        "version: 1\ntoolchain:\n  compiler: []\n",
        "version: 1\nentry:\n  point: '  '\n",
        "version: [1\n",
    ],
)
def test_invalid_profile_content_is_rejected(tmp_path: Path, content: str) -> None:
    """Malformed profiles should raise a configuration error."""
    profile_path = tmp_path / "bundlerun.yaml"
    profile_path.write_text(content, encoding="utf-8")

    with pytest.raises(BundleRunConfigError):
        load_build_profile(profile_path)
