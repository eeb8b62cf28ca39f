"""Platform-related utility functions."""

import logging
import os
import platform
import shutil
from pathlib import Path
from typing import Optional

APP_NAME = "local-cli"

# Directory names used by the Local desktop application, newest first
LOCAL_DIR_NAMES = ("Local", "Local by Flywheel")

logger = logging.getLogger(__name__)


def _normalize_path(path: str) -> str:
    """Expand user references and return an absolute path."""
    return os.path.abspath(os.path.expanduser(path))


def is_macos() -> bool:
    """Return True if running on macOS."""
    return platform.system() == "Darwin"


def is_windows() -> bool:
    """Return True if running on Windows."""
    return platform.system() == "Windows"


def _home_dir() -> str:
    expanded = os.path.expanduser("~")
    if expanded and expanded != "~":
        return expanded
    try:
        return str(Path.home())
    except RuntimeError:
        return ""


def get_user_config_dir() -> str:
    """Return the per-user configuration root for the current platform.

    This follows the same conventions desktop applications use when they
    store their settings: ``%APPDATA%`` on Windows,
    ``~/Library/Application Support`` on macOS and ``$XDG_CONFIG_HOME``
    (falling back to ``~/.config``) everywhere else.
    """
    if is_windows():
        appdata = os.environ.get("APPDATA")
        if not appdata:
            raise OSError("%AppData% is not defined")
        return appdata

    if is_macos():
        home = _home_dir()
        if not home:
            raise OSError("$HOME is not defined")
        return os.path.join(home, "Library", "Application Support")

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg and os.path.isabs(xdg):
        return xdg
    home = _home_dir()
    if not home:
        raise OSError("neither $XDG_CONFIG_HOME nor $HOME are defined")
    return os.path.join(home, ".config")


def get_config_dir() -> str:
    """Return the per-user configuration directory for local-cli."""
    return os.path.join(get_user_config_dir(), APP_NAME)


def get_local_config_dir(base_dir: Optional[str] = None) -> str:
    """Return the directory where Local keeps ``sites.json`` and ``ssh-entry``.

    The current ``Local`` directory wins over the legacy ``Local by Flywheel``
    one. When neither exists the current name is returned so that callers
    report a sensible path in their error messages.

    The ``LOCAL_CLI_LOCAL_DIR`` environment variable bypasses detection.
    """
    override = os.environ.get("LOCAL_CLI_LOCAL_DIR")
    if override:
        return _normalize_path(override)

    if base_dir is None:
        base_dir = get_user_config_dir()

    for name in LOCAL_DIR_NAMES:
        candidate = os.path.join(base_dir, name)
        if os.path.isdir(candidate):
            logger.debug("Using Local config directory %s", candidate)
            return candidate

    fallback = os.path.join(base_dir, LOCAL_DIR_NAMES[0])
    logger.debug("No Local config directory found; defaulting to %s", fallback)
    return fallback


def find_shell(shell: str = "bash") -> Optional[str]:
    """Return the resolved path of *shell* or ``None`` when it is not on PATH."""
    return shutil.which(shell)
