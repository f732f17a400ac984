"""Public SDK surface for bundlerun.

This module provides a stable import path for library users.
It re-exports the primary client and typed models.
"""

from __future__ import annotations

from bundle.parser import parse_bundle
from bundle.serializer import serialize_bundle
from core.config import BundleRunConfig
from core.types import BuildProfile, BundleDocument, FileRecord, PipelineOutcome
from pipeline.client import BundleRunClient
from recorder.request_filters import KeywordFilter, PatternFilter
from recorder.request_recorder import RequestRecorder
from toolchain.command_toolchain import CommandToolchain, Toolchain

__all__ = [
    "BuildProfile",
    "BundleDocument",
    "BundleRunClient",
    "BundleRunConfig",
    "CommandToolchain",
    "FileRecord",
    "KeywordFilter",
    "PatternFilter",
    "PipelineOutcome",
    "RequestRecorder",
    "Toolchain",
    "parse_bundle",
    "serialize_bundle",
]
