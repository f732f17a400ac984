"""bundlerun CLI entry points.

This module exposes the build, rebuild, run-only, pack and recorder
commands. It maps argparse commands onto SDK calls and pipeline outcomes
onto process exit codes.
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path
from typing import Sequence

from cli.pack_command import add_pack_command, run_pack_command
from cli.requests_command import add_requests_command, run_requests_command
from core.config import BundleRunConfig
from core.errors import BundleRunError
from core.logging_config import configure_logging
from core.types import PipelineMode, PipelineOutcome
from pipeline.client import BundleRunClient

_DEFAULT_COMMAND = "build"
_PIPELINE_MODES: dict[str, PipelineMode] = {
    "build": "build",
    "rebuild": "rebuild",
    "run": "run",
    "r": "run",
}


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="bundlerun",
        description="Extract a source bundle, compile it, and launch the entry point",
    )
    parser.add_argument("--work-dir", help="Override BUNDLERUN_WORK_DIR for this command")
    parser.add_argument("--profile", help="Override BUNDLERUN_PROFILE for this command")
    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("build", help="Extract the bundle, compile, verify and launch")
    subparsers.add_parser(
        "run",
        aliases=["r"],
        help="Launch the existing entry point without extracting or compiling",
    )
    subparsers.add_parser(
        "rebuild",
        help="Clean, compile, verify and launch the sources already on disk",
    )
    add_pack_command(subparsers)
    add_requests_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the bundlerun CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    invocation_dir = Path.cwd()
    parser = build_parser()
    args = parser.parse_args(argv)
    command = args.command or _DEFAULT_COMMAND
    try:
        client = _build_client(args.work_dir, args.profile, invocation_dir)
        if command in _PIPELINE_MODES:
            return _run_pipeline_command(client, _PIPELINE_MODES[command])
        if command == "pack":
            return run_pack_command(client, args)
        if command == "requests":
            return run_requests_command(client, args)
    except BundleRunError as error:
        _report_failure(error.kind, str(error))
        return 1
    parser.error(f"Unsupported command: {command}")
    return 2


def _build_client(
    work_dir: str | None,
    profile: str | None,
    invocation_dir: Path,
) -> BundleRunClient:
    """Build SDK client with optional path overrides.

    Args:
        work_dir: Optional work directory override.
        profile: Optional build profile override.
        invocation_dir: Directory the operator ran the command from.

    Returns:
        Configured SDK client.
    """
    config = BundleRunConfig.from_env()
    if work_dir:
        config = config.with_work_dir(work_dir)
    if profile:
        config = replace(config, profile_path=Path(profile).expanduser().resolve())
    configure_logging(config.log_level)
    return BundleRunClient(config, invocation_dir=invocation_dir)


def _run_pipeline_command(client: BundleRunClient, mode: PipelineMode) -> int:
    """Handle build, rebuild and run-only commands.

    Args:
        client: SDK client.
        mode: Pipeline mode.

    Returns:
        Exit code.
    """
    outcome: PipelineOutcome = client.execute(mode)
    if not outcome.succeeded:
        _report_failure(outcome.error_kind or "BundleRunFailure", outcome.message or "")
    return outcome.exit_code


def _report_failure(kind: str, message: str) -> None:
    print(f"{kind}: {message}", file=sys.stderr)
