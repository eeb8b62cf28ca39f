"""
Translate a local-cli action into the command run inside the site environment.

An empty command means "keep the script interactive".
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from localcli.errors import MissingDatabaseError

logger = logging.getLogger(__name__)

ACTION_SHELL = "shell"
ACTION_DB = "db"
ACTION_WP = "wp"

KNOWN_ACTIONS = (ACTION_SHELL, ACTION_DB, ACTION_WP)
DEFAULT_ACTION = ACTION_SHELL


def _join(extra_args: Optional[Sequence[str]]) -> str:
    return " ".join(extra_args or [])


def build_action_command(site, action: str, extra_args: Optional[Sequence[str]] = None) -> str:
    """
    Return the one-off command for *action* on *site*.

    Args:
        site: :class:`localcli.sites.Site` the command targets.
        action: ``shell``, ``db``, ``wp`` or any other word (treated like ``shell``).
        extra_args: Remaining command line words, joined with single spaces.
    """
    if action == ACTION_DB:
        mysql = getattr(site, "mysql", None)
        database = getattr(mysql, "database", "") if mysql is not None else ""
        if not database:
            raise MissingDatabaseError("No MySQL configuration found for this site.")
        return f"mysql -u{mysql.user} -p{mysql.password} {database}"

    if action == ACTION_WP:
        if extra_args:
            return f"wp {_join(extra_args)}"
        return ""

    if action != ACTION_SHELL:
        logger.debug("Unknown action %r; running extra arguments as a shell command", action)
    return _join(extra_args)


def describe_command(site, command: str) -> str:
    name = getattr(site, "name", "")
    if command:
        return f"Running '{command}' on {name}..."
    return f"Opening shell for {name}..."


__all__ = [
    "ACTION_DB",
    "ACTION_SHELL",
    "ACTION_WP",
    "DEFAULT_ACTION",
    "KNOWN_ACTIONS",
    "build_action_command",
    "describe_command",
]
