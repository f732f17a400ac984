"""Entry point launch stage."""

from __future__ import annotations

from pathlib import Path

from core.errors import LaunchError
from core.logging_config import get_logger
from toolchain.command_toolchain import ProcessHandle, Toolchain

_LOGGER = get_logger(__name__)


def launch_entry_point(
    toolchain: Toolchain,
    work_dir: Path,
    entry_point: str,
    invocation_dir: Path,
) -> int:
    """Run the entry point until it exits.

    The program receives the operator's invocation directory as its only
    argument. Its exit status, including signal terminations and operator
    interrupts, is normal completion.

    Args:
        toolchain: Runner implementation.
        work_dir: Directory holding compiled artifacts.
        entry_point: Name passed to the runner.
        invocation_dir: Directory the operator started bundlerun from.

    Returns:
        Exit status reported by the program.

    Raises:
        LaunchError: If the program cannot be started.
    """
    _LOGGER.info("launch_started", entry_point=entry_point, invocation_dir=str(invocation_dir))
    try:
        handle = toolchain.run(entry_point, [str(invocation_dir)], work_dir)
    except OSError as error:
        raise LaunchError(
            f"Failed to start {entry_point}: {error}. "
            "Install the runtime or set 'toolchain.runner' in the build profile."
        ) from error
    exit_code = _wait_for_exit(handle)
    _LOGGER.info("launch_completed", entry_point=entry_point, exit_code=exit_code)
    return exit_code


def _wait_for_exit(handle: ProcessHandle) -> int:
    # The child receives every terminal interrupt too; keep collecting until it exits.
    while True:
        try:
            return handle.wait()
        except KeyboardInterrupt:
            _LOGGER.info("launch_interrupted")
