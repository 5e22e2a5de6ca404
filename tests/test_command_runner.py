from pathlib import Path

import pytest

from helpers import make_tool

from optimz.services.command_runner import CommandRunner

pytestmark = pytest.mark.timeout(15)


def test_run_returns_child_exit_status(tool_dir: Path) -> None:
    tool = make_tool(tool_dir, "failing", "exit 3")
    assert CommandRunner().run([str(tool)]) == 3


def test_arguments_with_whitespace_stay_single_tokens(tool_dir: Path, tmp_path: Path) -> None:
    record = tmp_path / "argv.txt"
    tool = make_tool(tool_dir, "recorder", f'printf "%s\\n" "$#" "$@" > "{record}"')
    odd = tmp_path / "dir with spaces" / "a; b.out"
    assert CommandRunner().run([str(tool), "--flag", str(odd)]) == 0
    assert record.read_text(encoding="utf-8").splitlines() == ["2", "--flag", str(odd)]


def test_launch_failure_reports_os_error(tmp_path: Path, collect, messages) -> None:
    status = CommandRunner(on_output=collect).run([str(tmp_path / "does-not-exist")])
    assert status == 2  # ENOENT
    assert messages and messages[-1].startswith("Unable to launch")


def test_command_line_is_echoed_unless_quiet(tool_dir: Path, collect, messages) -> None:
    tool = make_tool(tool_dir, "noop")
    runner = CommandRunner(on_output=collect)
    runner.run([str(tool), "a b"])
    assert messages == [f"[exec] {tool} 'a b'"]
    runner.run([str(tool)], quiet=True)
    assert len(messages) == 1


def test_signal_termination_is_nonzero(tool_dir: Path) -> None:
    tool = make_tool(tool_dir, "killer", "kill -9 $$")
    assert CommandRunner().run([str(tool)]) == 137
