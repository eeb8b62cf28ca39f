"""
Terminal UI package for local-cli.

This module exposes the public entry point for the Textual site browser.
The actual implementation lives in ``localcli.tui.app``. We import it
lazily so that the plain command-line path never pays for loading Textual.
"""

from __future__ import annotations

from typing import Any

__all__ = ["run_tui"]


def run_tui(*args: Any, **kwargs: Any) -> Any:
    """Open the site browser; see :func:`localcli.tui.app.run_tui`."""
    from .app import run_tui as _run_tui

    return _run_tui(*args, **kwargs)
