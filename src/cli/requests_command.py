"""Request recorder command wiring for bundlerun CLI."""

from __future__ import annotations

import argparse
import json
from dataclasses import replace
from pathlib import Path
from typing import Any

from pipeline.client import BundleRunClient


def add_requests_command(subparsers: Any) -> None:
    """Register requests subcommand."""
    parser = subparsers.add_parser(
        "requests",
        help="List, clear or replay captured HTTP requests",
    )
    parser.add_argument(
        "action",
        choices=("list", "clear", "replay"),
        help="Recorder operation",
    )
    parser.add_argument(
        "--store",
        help="Override BUNDLERUN_RECORDER_STORE for this command",
    )


def run_requests_command(client: BundleRunClient, args: argparse.Namespace) -> int:
    """Execute one recorder action and print its result."""
    if args.store:
        client = BundleRunClient(
            replace(client.config, recorder_store=Path(args.store).expanduser().resolve())
        )
    recorder = client.recorder()
    if args.action == "list":
        for entry in recorder.list_requests():
            print(json.dumps(entry.to_payload(), sort_keys=True))
        return 0
    if args.action == "clear":
        recorder.clear()
        print("cleared")
        return 0
    outcomes = recorder.replay()
    for outcome in outcomes:
        if outcome.succeeded:
            print(f"{outcome.index}\t{outcome.status_code}\t{outcome.url}")
        else:
            print(f"{outcome.index}\terror\t{outcome.url}\t{outcome.error}")
    return 0 if all(outcome.succeeded for outcome in outcomes) else 1
