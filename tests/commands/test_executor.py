"""Tests for the command executor.

Argument and environment plumbing is checked against a mocked
create_subprocess_exec; exit-code mapping and cancellation run real
children through the current Python interpreter.
"""

import asyncio
import os
import sys
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from glide_go.commands.catalogue import GO_COMMANDS, CommandDefinition
from glide_go.commands.executor import (
    build_argv,
    build_env,
    execute_command,
    run_command,
)

PY = sys.executable


def _fake_process(output: bytes = b"", returncode: int = 0) -> MagicMock:
    proc = MagicMock()
    proc.communicate = AsyncMock(return_value=(output, None))
    proc.returncode = returncode
    return proc


def _python_catalogue() -> dict[str, CommandDefinition]:
    """Catalogue with one entry that runs `python -c <code>`; args follow."""
    return {"py": CommandDefinition(f"{PY} -c", "run python", "run")}


def _sleeper(pid_file) -> str:
    """Code for a child that records its pid, then sleeps."""
    return (
        "import os, time; "
        f"open({str(pid_file)!r}, 'w').write(str(os.getpid())); "
        "time.sleep(30)"
    )


async def _wait_for_file(path, attempts: int = 100) -> None:
    for _ in range(attempts):
        if path.exists() and path.read_text():
            return
        await asyncio.sleep(0.05)
    raise AssertionError(f"{path} was never written")


def _assert_not_running(pid: int) -> None:
    with pytest.raises(ProcessLookupError):
        os.kill(pid, 0)


class TestBuildArgv:
    def test_splits_on_whitespace(self):
        assert build_argv("go  test\t./...") == ["go", "test", "./..."]

    def test_appends_args_verbatim(self):
        assert build_argv("go test ./...", ["-run", "Test Foo"]) == [
            "go", "test", "./...", "-run", "Test Foo",
        ]


class TestBuildEnv:
    def test_inherits_process_environment(self, monkeypatch):
        monkeypatch.setenv("GLIDE_GO_TEST_INHERITED", "1")
        assert build_env()["GLIDE_GO_TEST_INHERITED"] == "1"

    def test_overlay_overrides(self, monkeypatch):
        monkeypatch.setenv("CGO_ENABLED", "1")
        env = build_env({"CGO_ENABLED": "0"})
        assert env["CGO_ENABLED"] == "0"

    def test_does_not_mutate_os_environ(self):
        build_env({"GLIDE_GO_TEST_OVERLAY_ONLY": "x"})
        assert "GLIDE_GO_TEST_OVERLAY_ONLY" not in os.environ


class TestExecuteCommandPlumbing:
    @patch("glide_go.commands.executor.asyncio.create_subprocess_exec")
    async def test_test_command_with_args_and_env(self, mock_exec):
        mock_exec.return_value = _fake_process(b"ok  \texample.com/pkg\n")

        result = await execute_command(
            GO_COMMANDS,
            "test",
            args=["-run", "TestFoo"],
            env={"CGO_ENABLED": "0"},
        )

        argv = mock_exec.call_args.args
        kwargs = mock_exec.call_args.kwargs
        assert argv == ("go", "test", "./...", "-run", "TestFoo")
        assert kwargs["env"]["CGO_ENABLED"] == "0"
        assert kwargs["env"].get("PATH") == os.environ.get("PATH")
        assert kwargs["stderr"] == asyncio.subprocess.STDOUT
        assert result.success is True
        assert result.exit_code == 0
        assert result.stdout == b"ok  \texample.com/pkg\n"
        assert result.stderr == b""
        assert result.error == ""

    @patch("glide_go.commands.executor.asyncio.create_subprocess_exec")
    async def test_default_work_dir_is_current_directory(self, mock_exec):
        mock_exec.return_value = _fake_process()
        await execute_command(GO_COMMANDS, "build")
        assert mock_exec.call_args.kwargs["cwd"] == "."

    @patch("glide_go.commands.executor.asyncio.create_subprocess_exec")
    async def test_work_dir_is_passed(self, mock_exec, tmp_path):
        mock_exec.return_value = _fake_process()
        await execute_command(GO_COMMANDS, "vet", work_dir=str(tmp_path))
        assert mock_exec.call_args.kwargs["cwd"] == str(tmp_path)

    @patch("glide_go.commands.executor.asyncio.create_subprocess_exec")
    async def test_unknown_command_never_spawns(self, mock_exec):
        result = await execute_command(GO_COMMANDS, "deploy")

        mock_exec.assert_not_called()
        assert result.success is False
        assert result.exit_code == 1
        assert result.error == "unknown command"

    @patch("glide_go.commands.executor.asyncio.create_subprocess_exec")
    async def test_empty_command(self, mock_exec):
        catalogue = {"blank": CommandDefinition("   ", "nothing", "run")}
        result = await execute_command(catalogue, "blank", args=["x"])

        mock_exec.assert_not_called()
        assert result.exit_code == 1
        assert result.error == "empty command"

    @patch("glide_go.commands.executor.asyncio.create_subprocess_exec")
    async def test_spawn_failure_maps_to_exit_one(self, mock_exec):
        mock_exec.side_effect = FileNotFoundError(2, "No such file or directory", "go")

        result = await execute_command(GO_COMMANDS, "build")

        assert result.success is False
        assert result.exit_code == 1
        assert "No such file" in result.error


class TestRunCommandRealProcess:
    async def test_zero_exit_is_success(self):
        result = await run_command(f"{PY} -c", ["print('hello')"])
        assert result.success is True
        assert result.exit_code == 0
        assert result.stdout.strip() == b"hello"

    async def test_nonzero_exit_reports_real_code(self):
        result = await run_command(f"{PY} -c", ["import sys; sys.exit(3)"])
        assert result.success is False
        assert result.exit_code == 3
        assert result.error == ""

    async def test_stderr_is_merged_into_stdout(self):
        code = "import sys; print('out'); sys.stdout.flush(); print('err', file=sys.stderr)"
        result = await run_command(f"{PY} -c", [code])
        assert b"out" in result.stdout
        assert b"err" in result.stdout
        assert result.stderr == b""

    async def test_env_overlay_reaches_child(self):
        code = "import os; print(os.environ['GLIDE_GO_CHILD'])"
        result = await run_command(f"{PY} -c", [code], env={"GLIDE_GO_CHILD": "overlaid"})
        assert result.stdout.strip() == b"overlaid"

    async def test_work_dir_is_used(self, tmp_path):
        code = "import os; print(os.getcwd())"
        result = await run_command(f"{PY} -c", [code], work_dir=str(tmp_path))
        assert os.path.samefile(result.stdout.decode().strip(), tmp_path)

    async def test_missing_executable(self):
        result = await run_command("definitely-not-a-real-binary-glide --version")
        assert result.success is False
        assert result.exit_code == 1
        assert result.error

    async def test_missing_work_dir_is_spawn_failure(self, tmp_path):
        result = await run_command(f"{PY} -c", ["pass"], work_dir=str(tmp_path / "nope"))
        assert result.success is False
        assert result.exit_code == 1
        assert result.error


class TestCancellation:
    async def test_timeout_terminates_child(self, tmp_path):
        pid_file = tmp_path / "child.pid"
        result = await execute_command(
            _python_catalogue(), "py", args=[_sleeper(pid_file)], timeout=2.0
        )

        assert result.success is False
        assert result.exit_code == 1
        assert result.error.startswith("cancelled")
        _assert_not_running(int(pid_file.read_text()))

    async def test_caller_cancellation_terminates_child(self, tmp_path):
        pid_file = tmp_path / "child.pid"
        task = asyncio.create_task(
            execute_command(_python_catalogue(), "py", args=[_sleeper(pid_file)])
        )
        await _wait_for_file(pid_file)
        task.cancel()
        result = await task

        assert result.success is False
        assert result.exit_code == 1
        assert result.error == "cancelled"
        _assert_not_running(int(pid_file.read_text()))

    async def test_consumed_cancellation_is_cleared_on_the_task(self, tmp_path):
        pid_file = tmp_path / "child.pid"

        async def _run():
            result = await execute_command(
                _python_catalogue(), "py", args=[_sleeper(pid_file)]
            )
            return result, asyncio.current_task().cancelling()

        task = asyncio.create_task(_run())
        await _wait_for_file(pid_file)
        task.cancel()
        result, cancelling = await task

        assert result.error == "cancelled"
        assert cancelling == 0

    async def test_run_command_propagates_cancellation(self, tmp_path):
        pid_file = tmp_path / "child.pid"
        task = asyncio.create_task(run_command(f"{PY} -c", [_sleeper(pid_file)]))
        await _wait_for_file(pid_file)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        _assert_not_running(int(pid_file.read_text()))
