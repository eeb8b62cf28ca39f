"""
Helpers for Local's generated SSH-entry scripts.

Local writes one host-side shell script per site into ``ssh-entry/``. Each
script exports the PHP/MySQL/WP-CLI environment for that site and finishes
with ``exec $SHELL`` to hand over an interactive session. Running a patched
copy of the script, rather than talking to the site's container directly,
keeps all of that environment intact.
"""

from __future__ import annotations

import logging
import os
from typing import List

from localcli.errors import ScriptNotFoundError

logger = logging.getLogger(__name__)

SSH_ENTRY_DIRNAME = "ssh-entry"
SCRIPT_SUFFIX = ".sh"

INTERACTIVE_SHELL_LINE = "exec $SHELL"
LAUNCH_BANNER = "Launching shell"


def get_ssh_entry_dir(config_dir: str) -> str:
    return os.path.join(config_dir, SSH_ENTRY_DIRNAME)


def find_script(ssh_dir: str, site) -> str:
    """Return the path of the SSH-entry script that belongs to *site*.

    A script matches when it mentions the site's ID or the last component of
    the site's path. Scripts are checked in name order and unreadable files
    are skipped.
    """
    try:
        names = sorted(os.listdir(ssh_dir))
    except OSError as exc:
        raise ScriptNotFoundError(f"open {ssh_dir}: {exc.strerror or exc}") from exc

    site_id = getattr(site, "id", "") or ""
    path_base = getattr(site, "path_basename", "") or ""

    for name in names:
        if not name.endswith(SCRIPT_SUFFIX):
            continue
        script_path = os.path.join(ssh_dir, name)
        if not os.path.isfile(script_path):
            continue
        try:
            with open(script_path, "r", encoding="utf-8", errors="replace") as f:
                content = f.read()
        except OSError:
            logger.debug("Skipping unreadable script %s", script_path, exc_info=True)
            continue

        if site_id and site_id in content:
            logger.debug("Matched %s by site id", script_path)
            return script_path
        if path_base and path_base in content:
            logger.debug("Matched %s by path %r", script_path, path_base)
            return script_path

    raise ScriptNotFoundError(f"no matching shell script found for site: {getattr(site, 'name', '')}")


def patch_script(content: str, command: str) -> str:
    """
    Rewrite an SSH-entry script so it runs *command* instead of a shell.

    The trailing ``exec $SHELL`` line and the "Launching shell" banner are
    removed and ``exec <command>`` is appended, so the script exits with the
    command's status and can take part in pipes and ``&&`` chains. An empty
    command returns the script untouched (interactive session).
    """
    if not command:
        return content

    kept: List[str] = []
    for line in content.split("\n"):
        stripped = line.strip()
        if stripped == INTERACTIVE_SHELL_LINE or LAUNCH_BANNER in stripped:
            continue
        kept.append(line)

    return "\n".join(kept) + f"\nexec {command}\n"


__all__ = ["find_script", "get_ssh_entry_dir", "patch_script"]
