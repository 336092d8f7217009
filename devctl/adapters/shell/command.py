"""
Process runner — the single place package manager commands are spawned.

Commands run without a shell, with stdout/stderr captured as text.
The child is polled so a cancelled or expired ``RunContext`` terminates
it promptly instead of leaking a running package manager.
"""

from __future__ import annotations

import logging
import subprocess
import time
from dataclasses import dataclass

from devctl.adapters.base import RunContext
from devctl.core.errors import ExecutionError, OperationCancelledError, OperationTimeoutError

logger = logging.getLogger(__name__)

# How often a running child is checked against the context
POLL_INTERVAL = 0.1

# Grace period between terminate() and kill()
TERMINATE_GRACE = 5.0


@dataclass
class CommandResult:
    """Captured output of a finished command."""

    args: list[str]
    returncode: int
    stdout: str = ""
    stderr: str = ""
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.returncode == 0

    @property
    def command_line(self) -> str:
        return " ".join(self.args)


def run_command(
    ctx: RunContext,
    args: list[str],
    *,
    poll_interval: float = POLL_INTERVAL,
) -> CommandResult:
    """Run a command to completion under a run context.

    A non-zero exit code is NOT an error here; callers inspect the
    result and classify stderr themselves.

    Raises:
        OperationCancelledError: the context was cancelled.
        OperationTimeoutError: the context deadline passed.
        ExecutionError: the executable could not be started.
    """
    command_line = " ".join(args)
    if ctx.cancelled:
        raise OperationCancelledError(command_line)
    if ctx.expired:
        raise OperationTimeoutError(command_line, ctx.timeout)

    logger.debug("Executing: %s", command_line)
    start = time.monotonic()

    try:
        proc = subprocess.Popen(
            args,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
    except OSError as e:
        raise ExecutionError(command_line, message=f"cannot start: {e}") from e

    try:
        while True:
            try:
                stdout, stderr = proc.communicate(timeout=poll_interval)
                break
            except subprocess.TimeoutExpired:
                if ctx.cancelled:
                    _terminate(proc)
                    raise OperationCancelledError(command_line) from None
                if ctx.expired:
                    _terminate(proc)
                    raise OperationTimeoutError(command_line, ctx.timeout) from None
    except KeyboardInterrupt:
        _terminate(proc)
        raise

    elapsed_ms = int((time.monotonic() - start) * 1000)
    logger.debug("Exit %d after %dms: %s", proc.returncode, elapsed_ms, command_line)

    return CommandResult(
        args=list(args),
        returncode=proc.returncode,
        stdout=stdout or "",
        stderr=stderr or "",
        duration_ms=elapsed_ms,
    )


def _terminate(proc: subprocess.Popen[str]) -> None:
    """Stop a child process, escalating to kill after a grace period.

    Output is discarded; the pipes are closed rather than drained, since
    a grandchild may hold them open long after the child is gone.
    """
    if proc.poll() is None:
        logger.debug("Terminating pid %d", proc.pid)
        proc.terminate()
        try:
            proc.wait(timeout=TERMINATE_GRACE)
        except subprocess.TimeoutExpired:
            logger.warning("pid %d ignored SIGTERM — killing", proc.pid)
            proc.kill()
            proc.wait()

    for stream in (proc.stdout, proc.stderr):
        if stream is not None:
            stream.close()
