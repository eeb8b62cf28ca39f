"""Run an action on a site through a patched copy of its SSH-entry script."""

from __future__ import annotations

import logging
import os
import signal
import subprocess
import tempfile
import threading
from typing import Callable, Optional, Sequence

from localcli.command_builder import build_action_command, describe_command
from localcli.errors import RunnerError
from localcli.platform_utils import find_shell
from localcli.ssh_entry import patch_script

logger = logging.getLogger(__name__)

TEMP_PREFIX = "local-cli-"
TEMP_SUFFIX = ".sh"

PrintFunc = Callable[[str], None]


def shell_available(shell: str = "bash") -> bool:
    return find_shell(shell) is not None


def missing_shell_message(shell: str = "bash") -> str:
    return (
        f"'{shell}' command not found. On Windows, install Git Bash or WSL "
        f"and ensure {shell} is in your PATH"
    )


def write_temp_script(content: str) -> str:
    """Write *content* to a new ``local-cli-*.sh`` file and return its path.

    Undecodable bytes carried through as surrogates are written back as the
    original bytes, and line endings are left as they are.
    """
    script_path = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w",
            prefix=TEMP_PREFIX,
            suffix=TEMP_SUFFIX,
            delete=False,
            encoding="utf-8",
            errors="surrogateescape",
            newline="",
        ) as f:
            script_path = f.name
            f.write(content)
        os.chmod(script_path, 0o700)
    except OSError as exc:
        if script_path:
            _remove_quietly(script_path)
        raise RunnerError(f"Error writing temp file: {exc}") from exc

    return script_path


def _remove_quietly(path: str) -> None:
    try:
        os.unlink(path)
    except FileNotFoundError:
        pass
    except OSError:
        logger.warning("Could not remove temporary script %s", path, exc_info=True)


def _ignore_interrupt(signum, frame) -> None:
    logger.debug("Interrupt forwarded to the child process")


def run_script(script_path: str, *, shell: str = "bash") -> int:
    """Execute *script_path* with *shell*, wired to the current terminal.

    The child shares the terminal and handles Ctrl+C itself, so SIGINT is
    swallowed here while it runs. A handler (not ``SIG_IGN``) is installed so
    the child still starts with the default disposition.
    """
    cmd = [shell, script_path]
    logger.debug("Executing %s", cmd)

    previous = None
    if threading.current_thread() is threading.main_thread():
        previous = signal.signal(signal.SIGINT, _ignore_interrupt)
    try:
        return subprocess.run(cmd).returncode
    except OSError as exc:
        raise RunnerError(f"Failed to start {shell}: {exc}") from exc
    finally:
        if previous is not None:
            signal.signal(signal.SIGINT, previous)


def run_action(
    script_path: str,
    site,
    action: str,
    extra_args: Optional[Sequence[str]] = None,
    *,
    shell: str = "bash",
    print_func: PrintFunc = print,
) -> int:
    """
    Run *action* for *site* and return the exit code of the script.

    The SSH-entry script is read, patched to run the action's command (or
    left interactive), written to a temporary file and executed with
    *shell*. The temporary file is always removed afterwards.
    """
    command = build_action_command(site, action, extra_args)

    try:
        with open(script_path, "r", encoding="utf-8", errors="surrogateescape", newline="") as f:
            content = f.read()
    except OSError as exc:
        raise RunnerError(f"Error reading script: {exc}") from exc

    temp_path = write_temp_script(patch_script(content, command))
    try:
        print_func(describe_command(site, command))
        rc = run_script(temp_path, shell=shell)
    finally:
        _remove_quietly(temp_path)

    if rc != 0:
        print_func(f"\nProcess finished: exit status {rc}")
    return rc


__all__ = [
    "missing_shell_message",
    "run_action",
    "run_script",
    "shell_available",
    "write_temp_script",
]
