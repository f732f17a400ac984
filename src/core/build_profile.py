"""Typed build profile parsing for bundlerun work directories.

This module loads and validates the optional YAML profile that names the
toolchain commands, file suffixes and entry artifact for one work directory.
A missing profile file resolves to the Java defaults.
"""

from __future__ import annotations

from pathlib import Path
from typing import Mapping, Sequence, cast

import yaml

from core.constants import (
    DEFAULT_ARTIFACT_SUFFIX,
    DEFAULT_BUNDLE_FILE_NAME,
    DEFAULT_COMPILER_COMMAND,
    DEFAULT_ENTRY_ARTIFACT,
    DEFAULT_ENTRY_POINT,
    DEFAULT_RECURSIVE_SCAN,
    DEFAULT_RUNNER_COMMAND,
    DEFAULT_SOURCE_SUFFIX,
    SUPPORTED_PROFILE_VERSION,
)
from core.errors import BundleRunConfigError
from core.types import BuildProfile

_ROOT_KEYS = {"version", "bundle", "recursive", "toolchain", "entry"}
_TOOLCHAIN_KEYS = {"compiler", "runner", "source_suffix", "artifact_suffix"}
_ENTRY_KEYS = {"artifact", "point"}


def default_build_profile() -> BuildProfile:
    """Return the built-in Java profile."""
    return BuildProfile(
        bundle_file=DEFAULT_BUNDLE_FILE_NAME,
        recursive=DEFAULT_RECURSIVE_SCAN,
        compiler_command=DEFAULT_COMPILER_COMMAND,
        runner_command=DEFAULT_RUNNER_COMMAND,
        source_suffix=DEFAULT_SOURCE_SUFFIX,
        artifact_suffix=DEFAULT_ARTIFACT_SUFFIX,
        entry_artifact=DEFAULT_ENTRY_ARTIFACT,
        entry_point=DEFAULT_ENTRY_POINT,
    )


def load_build_profile(profile_path: Path) -> BuildProfile:
    """Load and validate a YAML build profile from disk.

    Args:
        profile_path: Profile file path. A missing file yields defaults.

    Returns:
        Fully validated build profile.

    Raises:
        BundleRunConfigError: If the file is invalid or schema checks fail.
    """
    if not profile_path.exists():
        return default_build_profile()
    payload = _load_yaml_payload(profile_path)
    root_mapping = _expect_mapping(payload, "build profile root")
    _validate_keys(root_mapping, _ROOT_KEYS, "build profile")
    _parse_version(root_mapping)
    defaults = default_build_profile()
    toolchain = _optional_section(root_mapping, "toolchain", _TOOLCHAIN_KEYS)
    entry = _optional_section(root_mapping, "entry", _ENTRY_KEYS)
    return BuildProfile(
        bundle_file=_string_or(root_mapping, "bundle", defaults.bundle_file),
        recursive=_bool_or(root_mapping, "recursive", defaults.recursive),
        compiler_command=_command_or(toolchain, "compiler", defaults.compiler_command),
        runner_command=_command_or(toolchain, "runner", defaults.runner_command),
        source_suffix=_string_or(toolchain, "source_suffix", defaults.source_suffix),
        artifact_suffix=_string_or(toolchain, "artifact_suffix", defaults.artifact_suffix),
        entry_artifact=_string_or(entry, "artifact", defaults.entry_artifact),
        entry_point=_string_or(entry, "point", defaults.entry_point),
    )


def _load_yaml_payload(profile_path: Path) -> object:
    try:
        payload = cast(object, yaml.safe_load(profile_path.read_text(encoding="utf-8")))
    except OSError as error:
        raise BundleRunConfigError(
            f"Failed to read build profile at {profile_path}: {error}. "
            "Check file permissions and retry."
        ) from error
    except yaml.YAMLError as error:
        raise BundleRunConfigError(
            f"Failed to parse YAML build profile at {profile_path}: {error}. "
            "Fix YAML syntax and retry."
        ) from error
    if payload is None:
        raise BundleRunConfigError(
            f"Build profile at {profile_path} is empty. Define at least 'version: 1'."
        )
    return payload


def _expect_mapping(value: object, context: str) -> Mapping[str, object]:
    if isinstance(value, Mapping):
        normalized_mapping = {}
        for key, payload in value.items():
            if not isinstance(key, str):
                raise BundleRunConfigError(
                    f"Invalid {context}: expected string keys, got {type(key).__name__}."
                )
            normalized_mapping[key] = payload
        return normalized_mapping
    raise BundleRunConfigError(
        f"Invalid {context}: expected object mapping, got {type(value).__name__}."
    )


def _parse_version(root_mapping: Mapping[str, object]) -> int:
    raw_version = root_mapping.get("version")
    if not isinstance(raw_version, int) or isinstance(raw_version, bool):
        raise BundleRunConfigError(
            "Build profile field 'version' must be an integer. Set version: 1."
        )
    if raw_version != SUPPORTED_PROFILE_VERSION:
        raise BundleRunConfigError(
            f"Unsupported build profile version {raw_version}. "
            f"Use version: {SUPPORTED_PROFILE_VERSION}."
        )
    return raw_version


def _optional_section(
    root_mapping: Mapping[str, object],
    section_name: str,
    allowed_keys: set[str],
) -> Mapping[str, object]:
    raw_section = root_mapping.get(section_name)
    if raw_section is None:
        return {}
    section = _expect_mapping(raw_section, f"build profile section '{section_name}'")
    _validate_keys(section, allowed_keys, f"build profile section '{section_name}'")
    return section


def _string_or(mapping: Mapping[str, object], field_name: str, default_value: str) -> str:
    raw_value = mapping.get(field_name)
    if raw_value is None:
        return default_value
    if isinstance(raw_value, str) and raw_value.strip():
        return raw_value.strip()
    raise BundleRunConfigError(
        f"Build profile field '{field_name}' must be a non-empty string when provided."
    )


def _bool_or(mapping: Mapping[str, object], field_name: str, default_value: bool) -> bool:
    raw_value = mapping.get(field_name)
    if raw_value is None:
        return default_value
    if isinstance(raw_value, bool):
        return raw_value
    raise BundleRunConfigError(f"Build profile field '{field_name}' must be true/false.")


def _command_or(
    mapping: Mapping[str, object],
    field_name: str,
    default_value: tuple[str, ...],
) -> tuple[str, ...]:
    raw_value = mapping.get(field_name)
    if raw_value is None:
        return default_value
    if isinstance(raw_value, str) and raw_value.strip():
        return (raw_value.strip(),)
    if isinstance(raw_value, Sequence) and not isinstance(raw_value, (bytes, bytearray)):
        parts = tuple(raw_value)
        if parts and all(isinstance(part, str) and part for part in parts):
            return cast(tuple[str, ...], parts)
    raise BundleRunConfigError(
        f"Build profile field '{field_name}' must be a command string "
        "or a non-empty list of strings."
    )


def _validate_keys(mapping: Mapping[str, object], allowed_keys: set[str], context: str) -> None:
    unknown_keys = sorted(set(mapping) - allowed_keys)
    if unknown_keys:
        raise BundleRunConfigError(
            f"Invalid {context}: unknown fields {', '.join(unknown_keys)}."
        )
