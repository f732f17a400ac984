"""bundlerun exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Each pipeline stage raises a specific error type, and every type carries
a stable ``kind`` label that the CLI reports to the operator.
"""

from __future__ import annotations


class BundleRunError(Exception):
    """Base exception for all bundlerun failures."""

    kind = "BundleRunFailure"


class BundleRunConfigError(BundleRunError):
    """Raised for invalid runtime configuration or build profiles."""

    kind = "InvalidConfiguration"


class MissingWorkingLocationError(BundleRunError):
    """Raised when the work directory does not exist."""

    kind = "MissingWorkingLocation"


class MissingBundleSourceError(BundleRunError):
    """Raised when the bundle file cannot be found."""

    kind = "MissingBundleSource"


class ParseIOError(BundleRunError):
    """Raised when the bundle text cannot be read or decoded."""

    kind = "ParseIOFailure"


class MaterializeError(BundleRunError):
    """Raised when a parsed file cannot be written to disk."""

    kind = "MaterializeFailure"


class CleanError(BundleRunError):
    """Raised when stale compiled artifacts cannot be removed."""

    kind = "CleanFailure"


class NoSourceFilesError(BundleRunError):
    """Raised when the work directory holds no source files to compile."""

    kind = "NoSourceFiles"


class CompileError(BundleRunError):
    """Raised when the toolchain reports a non-zero compile result."""

    kind = "CompileFailure"


class VerificationError(BundleRunError):
    """Raised when the entry artifact is missing after a successful compile."""

    kind = "VerificationFailure"


class LaunchError(BundleRunError):
    """Raised when the entry point process cannot be started."""

    kind = "LaunchStartFailure"


class RecorderError(BundleRunError):
    """Raised for request recorder store failures."""

    kind = "RecorderFailure"
