"""Spawns catalogue commands on behalf of the host.

run_command() tokenizes a catalogue shell string on whitespace, appends the
host-supplied args, and runs the result with stderr merged into stdout.
execute_command() adds the catalogue lookup and turns cancellation into a
failed result. Neither function raises for command failures; every outcome
is encoded in the returned ExecuteResult.
"""

import asyncio
import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

from glide_go.commands.catalogue import CommandDefinition

logger = logging.getLogger(__name__)

# Seconds a cancelled child gets between SIGTERM and SIGKILL
TERMINATE_GRACE_SECONDS = 5.0

UNKNOWN_COMMAND = "unknown command"
EMPTY_COMMAND = "empty command"
CANCELLED = "cancelled"


@dataclass
class ExecuteResult:
    """Outcome of one command execution.

    stdout holds the combined stdout/stderr stream of the child; stderr is
    always empty. error is set only when the child could not run to
    completion (unknown/empty command, spawn failure, cancellation).
    """

    success: bool
    exit_code: int
    stdout: bytes = b""
    stderr: bytes = b""
    error: str = ""

    @classmethod
    def failure(cls, error: str, exit_code: int = 1) -> "ExecuteResult":
        return cls(success=False, exit_code=exit_code, error=error)


def build_argv(cmd: str, args: Sequence[str] = ()) -> list[str]:
    """Split a catalogue shell string on whitespace and append `args` verbatim."""
    return cmd.split() + list(args)


def build_env(overlay: Optional[Mapping[str, str]] = None) -> dict[str, str]:
    """Return the current process environment with `overlay` applied on top."""
    env = dict(os.environ)
    if overlay:
        env.update(overlay)
    return env


async def run_command(
    cmd: str,
    args: Sequence[str] = (),
    work_dir: str = "",
    env: Optional[Mapping[str, str]] = None,
) -> ExecuteResult:
    """Run `cmd` plus `args` and collect its combined output.

    If the calling task is cancelled while the child runs, the child is
    terminated (then killed after TERMINATE_GRACE_SECONDS) and the
    cancellation propagates.
    """
    if not cmd.split():
        return ExecuteResult.failure(EMPTY_COMMAND)
    argv = build_argv(cmd, args)

    cwd = work_dir or "."
    logger.info("Running command: %s (cwd=%s)", " ".join(argv), cwd)

    try:
        proc = await asyncio.create_subprocess_exec(
            *argv,
            cwd=cwd,
            env=build_env(env),
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.STDOUT,
        )
    except OSError as exc:
        logger.warning("Failed to spawn %s: %s", argv[0], exc)
        return ExecuteResult.failure(str(exc))

    try:
        output, _ = await proc.communicate()
    except asyncio.CancelledError:
        await _terminate(proc)
        raise

    exit_code = proc.returncode if proc.returncode is not None else 1
    status = "OK" if exit_code == 0 else "FAILED"
    logger.info("Command %s %s (exit=%d)", argv[0], status, exit_code)
    return ExecuteResult(
        success=exit_code == 0,
        exit_code=exit_code,
        stdout=output or b"",
    )


async def execute_command(
    catalogue: Mapping[str, CommandDefinition],
    name: str,
    args: Sequence[str] = (),
    work_dir: str = "",
    env: Optional[Mapping[str, str]] = None,
    timeout: Optional[float] = None,
) -> ExecuteResult:
    """Look up `name` in `catalogue` and run it.

    Unknown names return a failure without spawning anything. Cancellation,
    whether from the caller or from `timeout`, returns a failure whose error
    starts with "cancelled".
    """
    definition = catalogue.get(name)
    if definition is None:
        logger.info("Rejected unknown command %r", name)
        return ExecuteResult.failure(UNKNOWN_COMMAND)

    try:
        async with asyncio.timeout(timeout):
            return await run_command(definition.cmd, args, work_dir, env)
    except TimeoutError:
        logger.warning("Command %r timed out after %ss", name, timeout)
        return ExecuteResult.failure(f"{CANCELLED}: timed out after {timeout}s")
    except asyncio.CancelledError:
        logger.warning("Command %r cancelled", name)
        # The cancellation is consumed here; clear it so enclosing scopes
        # of the calling task behave as if it never arrived.
        task = asyncio.current_task()
        if task is not None:
            task.uncancel()
        return ExecuteResult.failure(CANCELLED)


async def _terminate(proc: asyncio.subprocess.Process) -> None:
    """Stop a child process, escalating to SIGKILL after the grace period."""
    if proc.returncode is not None:
        return
    try:
        proc.terminate()
    except ProcessLookupError:
        return
    try:
        await asyncio.wait_for(proc.wait(), TERMINATE_GRACE_SECONDS)
    except TimeoutError:
        logger.warning("Child %s ignored SIGTERM; killing", proc.pid)
        try:
            proc.kill()
        except ProcessLookupError:
            return
        await proc.wait()
