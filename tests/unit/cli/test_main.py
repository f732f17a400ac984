"""Unit tests for CLI command handling."""

from __future__ import annotations

import json
import shutil
import sys
from pathlib import Path

import pytest

from cli.main import build_parser, main
from tests.fixture_paths import fixture_path


def _write_python_profile(work_dir: Path) -> None:
    """Profile whose toolchain is the fixture compiler and program scripts."""
    compiler = [sys.executable, str(fixture_path("tools/fake_compiler.py"))]
    runner = [sys.executable, str(fixture_path("tools/fake_program.py"))]
    (work_dir / "bundlerun.yaml").write_text(
        "version: 1\n"
        "toolchain:\n"
        f"  compiler: {json.dumps(compiler)}\n"
        f"  runner: {json.dumps(runner)}\n"
        "  source_suffix: .src\n"
        "  artifact_suffix: .out\n"
        "entry:\n"
        "  artifact: Main.out\n"
        "  point: Main\n",
        encoding="utf-8",
    )


def _operator_and_work_dirs(tmp_path: Path) -> tuple[Path, Path]:
    operator_dir = tmp_path / "operator"
    work_dir = tmp_path / "work"
    operator_dir.mkdir()
    work_dir.mkdir()
    return operator_dir, work_dir


def test_parser_defaults_to_no_command() -> None:
    """A bare invocation should leave the command for main to default."""
    args = build_parser().parse_args([])

    assert args.command is None and args.work_dir is None


def test_cli_run_alias_launches_without_compiling(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """The short run alias should launch with the operator directory."""
    operator_dir, work_dir = _operator_and_work_dirs(tmp_path)
    _write_python_profile(work_dir)
    (work_dir / "Main.out").write_text("COMPILED", encoding="utf-8")
    monkeypatch.chdir(operator_dir)

    exit_code = main(["--work-dir", str(work_dir), "r"])

    launched = (operator_dir / "launched.txt").read_text(encoding="utf-8")
    assert exit_code == 0
    assert launched == "Main\nwork"


def test_cli_build_defaults_when_no_command_given(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Running without a command should perform a full build."""
    operator_dir, work_dir = _operator_and_work_dirs(tmp_path)
    _write_python_profile(work_dir)
    (work_dir / "bundle.txt").write_text(
        "FILE: Main.src\n|~|~|~|~|~|~|~|~|~|~|~|\nhello\n|~|~|~|~|~|~|~|~|~|~|~|\n",
        encoding="utf-8",
    )
    monkeypatch.chdir(operator_dir)

    exit_code = main(["--work-dir", str(work_dir)])

    assert exit_code == 0
    assert (work_dir / "Main.out").read_text(encoding="utf-8") == "HELLO"
    assert (operator_dir / "launched.txt").is_file()


def test_cli_reports_missing_bundle(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    """A missing bundle should exit 1 with the error kind on stderr."""
    operator_dir, work_dir = _operator_and_work_dirs(tmp_path)
    monkeypatch.chdir(operator_dir)

    exit_code = main(["--work-dir", str(work_dir), "build"])

    last_line = capsys.readouterr().err.strip().splitlines()[-1]
    assert exit_code == 1 and last_line.startswith("MissingBundleSource: ")


def test_cli_reports_missing_work_dir(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """An absent work directory should be reported, not created."""
    exit_code = main(["--work-dir", str(tmp_path / "absent"), "rebuild"])

    last_line = capsys.readouterr().err.strip().splitlines()[-1]
    assert exit_code == 1 and last_line.startswith("MissingWorkingLocation: ")
    assert not (tmp_path / "absent").exists()


def test_cli_reports_invalid_log_level(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    """Configuration errors should exit 1 with their kind."""
    monkeypatch.setenv("BUNDLERUN_LOG_LEVEL", "loud")

    exit_code = main(["run"])

    assert exit_code == 1
    assert capsys.readouterr().err.startswith("InvalidConfiguration: ")


def test_cli_profile_override_is_used(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """The --profile flag should replace the work dir profile."""
    profile_path = tmp_path / "elsewhere.yaml"
    shutil.copyfile(fixture_path("profiles/bad_version.yaml"), profile_path)

    exit_code = main(["--work-dir", str(tmp_path), "--profile", str(profile_path), "run"])

    assert exit_code == 1
    assert "InvalidConfiguration: " in capsys.readouterr().err


def test_cli_pack_prints_bundle_path(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    """Pack should write the bundle and print where it went."""
    source_dir = tmp_path / "sources"
    source_dir.mkdir()
    (source_dir / "Main.java").write_text("class Main {}", encoding="utf-8")
    output_path = tmp_path / "out" / "bundle.txt"

    exit_code = main(["--work-dir", str(tmp_path), "pack", str(source_dir), "--output", str(output_path)])

    assert exit_code == 0
    assert capsys.readouterr().out.strip() == str(output_path.resolve())
    assert output_path.read_text(encoding="utf-8").startswith("FILE: Main.java\n")
