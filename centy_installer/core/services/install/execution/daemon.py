"""
L4 Execution — Daemon restart after install.

If a centy-daemon is running when a new binary lands, stop it
(graceful signal, then forced kill) and start the freshly installed
binary in the background.  Not part of the six install stages: a
failure here is reported next to a successful install, it does not
undo it.
"""

from __future__ import annotations

import logging
import os
import signal
import subprocess
import sys
import time
from pathlib import Path

from centy_installer.core.data.constants import (
    DAEMON_PID_FILE,
    DAEMON_STOP_POLL_ATTEMPTS,
    DAEMON_STOP_POLL_INTERVAL,
    DEFAULT_BINARY_NAME,
)

logger = logging.getLogger(__name__)

_IS_WINDOWS = sys.platform == "win32"


class DaemonRestartError(Exception):
    """A running daemon was found but could not be stopped or restarted."""


# ── Process probes ──────────────────────────────────────────────


def is_process_running(pid: int) -> bool:
    """Whether a process with ``pid`` exists."""
    if pid <= 0:
        return False
    if _IS_WINDOWS:
        result = _run(["tasklist", "/FI", f"PID eq {pid}", "/NH"])
        return result is not None and str(pid) in result.stdout
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except PermissionError:
        return True  # exists, owned by someone else
    except (OverflowError, OSError):
        return False
    return True


def read_pid_file(home: Path) -> int | None:
    """PID recorded in ``<home>/.centy/daemon.pid``, if readable."""
    pid_file = home.joinpath(*DAEMON_PID_FILE)
    try:
        return int(pid_file.read_text(encoding="utf-8").strip())
    except (OSError, ValueError):
        return None


def find_daemon_pid(home: Path, binary_name: str = DEFAULT_BINARY_NAME) -> int | None:
    """Find a running daemon: PID file first, then by process name."""
    pid = read_pid_file(home)
    if pid is not None and is_process_running(pid):
        logger.debug("Daemon PID %d from pid file", pid)
        return pid
    return find_daemon_pid_by_name(binary_name)


def find_daemon_pid_by_name(binary_name: str = DEFAULT_BINARY_NAME) -> int | None:
    """Look the daemon up in the process table (``pgrep`` / ``tasklist``)."""
    if _IS_WINDOWS:
        image = binary_name if binary_name.lower().endswith(".exe") else f"{binary_name}.exe"
        result = _run(["tasklist", "/FI", f"IMAGENAME eq {image}", "/NH", "/FO", "CSV"])
        if result is None or result.returncode != 0:
            return None
        for line in result.stdout.splitlines():
            if binary_name not in line:
                continue
            parts = [p.strip().strip('"') for p in line.split(",")]
            if len(parts) > 1 and parts[1].isdigit():
                return int(parts[1])
        return None

    result = _run(["pgrep", "-x", binary_name])
    if result is None or result.returncode != 0:
        return None
    for line in result.stdout.splitlines():
        if line.strip().isdigit():
            return int(line.strip())
    return None


# ── Stop / start ────────────────────────────────────────────────


def stop_daemon(pid: int) -> None:
    """Stop ``pid`` gracefully, falling back to a forced kill.

    Raises:
        DaemonRestartError: The signal could not be sent, or the
            process survived the forced kill.
    """
    _send_term(pid)

    for _ in range(DAEMON_STOP_POLL_ATTEMPTS):
        time.sleep(DAEMON_STOP_POLL_INTERVAL)
        if not is_process_running(pid):
            logger.info("Daemon (PID %d) stopped", pid)
            return

    logger.warning("Daemon (PID %d) ignored graceful stop, killing", pid)
    _send_kill(pid)
    time.sleep(DAEMON_STOP_POLL_INTERVAL)

    if is_process_running(pid):
        raise DaemonRestartError(f"failed to stop daemon (PID {pid}) after forced kill")


def start_daemon(binary_path: Path) -> None:
    """Start the daemon detached, output discarded."""
    kwargs: dict = {
        "stdin": subprocess.DEVNULL,
        "stdout": subprocess.DEVNULL,
        "stderr": subprocess.DEVNULL,
    }
    if _IS_WINDOWS:  # pragma: no cover - exercised on Windows
        kwargs["creationflags"] = getattr(subprocess, "DETACHED_PROCESS", 0) | getattr(
            subprocess, "CREATE_NEW_PROCESS_GROUP", 0
        )
    else:
        kwargs["start_new_session"] = True

    try:
        subprocess.Popen([str(binary_path)], **kwargs)
    except OSError as exc:
        raise DaemonRestartError(f"failed to start daemon: {exc}") from exc
    logger.info("Started daemon %s", binary_path)


def restart_if_running(
    binary_path: Path,
    *,
    home: Path | None = None,
    binary_name: str = DEFAULT_BINARY_NAME,
) -> bool:
    """Restart the daemon if it is currently running.

    Returns:
        True if a daemon was found and restarted, False if none was running.

    Raises:
        DaemonRestartError: The daemon was found but could not be
            stopped or started again.
    """
    pid = find_daemon_pid(home or Path.home(), binary_name)
    if pid is None:
        logger.debug("No running daemon to restart")
        return False

    logger.info("Restarting daemon (PID %d) with %s", pid, binary_path)
    stop_daemon(pid)
    start_daemon(binary_path)
    return True


# ── Helpers ─────────────────────────────────────────────────────


def _send_term(pid: int) -> None:
    if _IS_WINDOWS:
        result = _run(["taskkill", "/PID", str(pid)])
        if result is None or result.returncode != 0:
            raise DaemonRestartError(f"failed to terminate daemon (PID {pid})")
        return
    try:
        os.kill(pid, signal.SIGTERM)
    except ProcessLookupError:
        return  # already gone
    except OSError as exc:
        raise DaemonRestartError(f"failed to send SIGTERM to daemon (PID {pid}): {exc}") from exc


def _send_kill(pid: int) -> None:
    if _IS_WINDOWS:
        _run(["taskkill", "/F", "/PID", str(pid)])
        return
    try:
        os.kill(pid, signal.SIGKILL)
    except OSError as exc:
        logger.debug("SIGKILL to %d failed: %s", pid, exc)


def _run(cmd: list[str]) -> subprocess.CompletedProcess[str] | None:
    """Run a probe command; None when the tool is missing or hangs."""
    try:
        return subprocess.run(cmd, capture_output=True, text=True, timeout=10)
    except (OSError, subprocess.TimeoutExpired) as exc:
        logger.debug("%s failed: %s", cmd[0], exc)
        return None
