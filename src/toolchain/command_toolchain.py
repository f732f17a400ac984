"""Toolchain protocol and subprocess implementation.

Pipeline stages depend on the ``Toolchain`` protocol only. The default
``CommandToolchain`` shells out to configured command prefixes with the
operator's terminal streams inherited.
"""

from __future__ import annotations

import subprocess
from pathlib import Path
from typing import Protocol, Sequence

from core.types import BuildProfile


class ProcessHandle(Protocol):
    """Running program handle returned by ``Toolchain.run``."""

    def wait(self) -> int: ...


class Toolchain(Protocol):
    """Compile and run contract required by pipeline stages."""

    def compile(self, source_files: Sequence[str], cwd: Path) -> int: ...

    def run(self, entry_point: str, args: Sequence[str], cwd: Path) -> ProcessHandle: ...


class CommandToolchain:
    """Toolchain backed by external commands."""

    def __init__(
        self,
        compiler_command: Sequence[str],
        runner_command: Sequence[str],
    ) -> None:
        self._compiler_command = tuple(compiler_command)
        self._runner_command = tuple(runner_command)

    @classmethod
    def from_profile(cls, profile: BuildProfile) -> "CommandToolchain":
        """Build a toolchain from profile command prefixes."""
        return cls(profile.compiler_command, profile.runner_command)

    def compile(self, source_files: Sequence[str], cwd: Path) -> int:
        """Compile all sources in one invocation and return its exit status.

        Raises:
            OSError: If the compiler executable cannot be started.
        """
        command = [*self._compiler_command, *source_files]
        completed = subprocess.run(command, cwd=cwd, check=False)
        return completed.returncode

    def run(self, entry_point: str, args: Sequence[str], cwd: Path) -> ProcessHandle:
        """Start the entry point without waiting for it.

        Raises:
            OSError: If the runner executable cannot be started.
        """
        command = [*self._runner_command, entry_point, *args]
        return subprocess.Popen(command, cwd=cwd)
