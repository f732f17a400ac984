"""Pack command wiring for bundlerun CLI."""

from __future__ import annotations

import argparse
from typing import Any

from pipeline.client import BundleRunClient


def add_pack_command(subparsers: Any) -> None:
    """Register pack subcommand."""
    parser = subparsers.add_parser(
        "pack",
        help="Serialize a directory of source files into a bundle",
    )
    parser.add_argument("source_dir", help="Directory containing the source files")
    parser.add_argument(
        "--output",
        help="Bundle destination, defaults to the profile bundle in the work directory",
    )


def run_pack_command(client: BundleRunClient, args: argparse.Namespace) -> int:
    """Write the bundle and print its path."""
    bundle_path = client.pack(args.source_dir, args.output)
    print(bundle_path)
    return 0
