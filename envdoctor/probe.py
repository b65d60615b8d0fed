"""
EnvDoctor Command Probe — Run external tools and capture what they print.

Every failure at the subprocess layer (missing executable, launch error,
non-zero exit, timeout) collapses into a single "unavailable" answer.
A timed-out command is killed together with its process group.
A caller cannot tell "not installed" from "installed but broken" and
reports both the same way.
"""

import logging
import os
import shlex
import signal
import subprocess
from typing import Optional, Sequence, Union

logger = logging.getLogger(__name__)

Command = Union[str, Sequence[str]]


def _argv(command: Command) -> list[str]:
    if isinstance(command, str):
        return shlex.split(command)
    return list(command)


def _kill_group(proc: subprocess.Popen):
    """Kill a timed-out process and everything it started in its session."""
    if hasattr(os, "killpg"):
        try:
            os.killpg(proc.pid, signal.SIGKILL)
        except OSError:
            proc.kill()
    else:
        proc.kill()
    proc.communicate()


def _run(
    command: Command,
    timeout: Optional[float],
    cwd: Optional[str] = None,
    capture: bool = True,
) -> Optional[subprocess.CompletedProcess]:
    """Run a command, or return None if it never finished.

    With `capture`, stdout/stderr are collected and decoded as UTF-8 (bad
    bytes replaced); without it, both go to /dev/null undecoded.
    """
    logger.debug("Running %s in %s (timeout=%s)", command, cwd or ".", timeout)
    output = subprocess.PIPE if capture else subprocess.DEVNULL
    try:
        argv = _argv(command)
        if not argv:
            raise ValueError("empty command")
        proc = subprocess.Popen(
            argv,
            stdin=subprocess.DEVNULL, stdout=output, stderr=output,
            encoding="utf-8" if capture else None,
            errors="replace" if capture else None,
            cwd=cwd,
            start_new_session=True,
        )
    except (OSError, ValueError, subprocess.SubprocessError) as e:
        logger.debug("Could not launch %s: %s", command, e)
        return None

    try:
        stdout, stderr = proc.communicate(timeout=timeout)
    except subprocess.TimeoutExpired:
        logger.debug("%s timed out after %ss", command, timeout)
        _kill_group(proc)
        return None
    return subprocess.CompletedProcess(argv, proc.returncode, stdout, stderr)


def run_command(command: Command, timeout: Optional[float] = None) -> Optional[str]:
    """Run a command and return its trimmed standard output.

    Args:
        command: Shell-style string ("node --version") or an argv list.
        timeout: Seconds to wait before the process is killed. None waits forever.

    Returns:
        Stripped stdout on exit code 0, otherwise None.
    """
    result = _run(command, timeout)
    if result is None:
        return None
    if result.returncode != 0:
        logger.debug("%s exited with code %d", command, result.returncode)
        return None
    return result.stdout.strip()


def command_succeeds(command: Command, timeout: float, cwd: Optional[str] = None) -> bool:
    """Run a validation command with a bounded timeout.

    Returns:
        True only if the command finished within `timeout` seconds with exit code 0.
    """
    result = _run(command, timeout, cwd=cwd, capture=False)
    if result is None:
        return False
    logger.debug("%s exited with code %d", command, result.returncode)
    return result.returncode == 0
