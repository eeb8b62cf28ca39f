#!/usr/bin/env python3
"""
local-cli - command-line access to sites managed by Local (formerly Local by Flywheel)
"""

import argparse
import logging
import os
import sys
from typing import List, Optional, Sequence

from . import __version__
from .command_builder import KNOWN_ACTIONS
from .config import Config
from .errors import MissingDatabaseError, RunnerError, ScriptNotFoundError, SitesFileError
from .picker import SitePicker
from .platform_utils import get_local_config_dir
from .runner import missing_shell_message, run_action, shell_available
from .sites import find_site, format_site_list, load_sites
from .ssh_entry import find_script, get_ssh_entry_dir

logger = logging.getLogger(__name__)

HELP_WORDS = ("help", "--help", "-h")

DESCRIPTION = "Local CLI - A fast CLI interface for Local by Flywheel/WP"

EPILOG = """\
actions:
  shell        Opens the container shell (zsh/bash)
  db           Opens MySQL console directly
  wp           Opens WP-CLI interactive shell

Any words after the action are run as a one-off command instead of an
interactive session, e.g. `local-cli blog wp plugin list`.

examples:
  # Open interactive list
  local-cli

  # Jump directly to 'sg' site shell
  local-cli sg

  # Open database for 'updraftplus'
  local-cli updraftplus db

  # Open WP-CLI for site ID '5jc4NXQ8I'
  local-cli 5jc4NXQ8I wp
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="local-cli",
        description=DESCRIPTION,
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Python logging level (default: WARNING)",
    )
    parser.add_argument(
        "--tui",
        action="store_true",
        help="Browse sites in a full-screen terminal UI when no site is given",
    )
    parser.add_argument(
        "--config-dir",
        metavar="DIR",
        help="Local configuration directory (default: auto-detect)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("site", nargs="?", help="Name or ID of the site (fuzzy search supported)")
    parser.add_argument("action", nargs="?", help="Action to perform (default: shell)")
    parser.add_argument("command", nargs=argparse.REMAINDER, help="Command to run instead of an interactive session")
    return parser


def setup_logging(level_name: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level_name).upper(), logging.WARNING),
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )


def resolve_local_config_dir(cli_value: Optional[str], config: Config) -> str:
    """Pick Local's config dir: flag, then environment, then preference, then detection."""
    if cli_value:
        return os.path.abspath(os.path.expanduser(cli_value))
    if os.environ.get("LOCAL_CLI_LOCAL_DIR"):
        return get_local_config_dir()
    override = config.get_local_config_dir_override()
    if override:
        return override
    return get_local_config_dir()


def _print_lines(lines: List[str]) -> None:
    for line in lines:
        print(line)


def run(args: argparse.Namespace, config: Config) -> int:
    shell = config.get_shell()
    if not shell_available(shell):
        print(f"Setup Error: {missing_shell_message(shell)}")
        return 1

    action = args.action or config.get_default_action()
    extra_args = list(args.command or [])
    if action not in KNOWN_ACTIONS:
        logger.info("Action %r is not a built-in action", action)

    try:
        config_dir = resolve_local_config_dir(args.config_dir, config)
    except OSError as exc:
        print(f"Error finding Local config directory: {exc}")
        return 1
    logger.debug("Local config directory: %s", config_dir)

    try:
        sites = load_sites(config_dir)
    except SitesFileError as exc:
        print(f"Error reading sites.json: {exc}")
        return 1

    if not sites:
        print("No sites found.")
        return 0

    if args.site:
        site = find_site(sites, args.site)
        if site is None:
            print(f"Site '{args.site}' not found. Available sites:")
            _print_lines(format_site_list(sites))
            return 1
        print(f"Found site: {site.name} (Action: {action})")
    elif args.tui or config.get_interface() == "tui":
        from .tui import run_tui

        return run_tui(config_dir, shell=shell)
    else:
        site = SitePicker(sites).run()
        if site is None:
            return 0

    try:
        script_path = find_script(get_ssh_entry_dir(config_dir), site)
    except ScriptNotFoundError as exc:
        print(f"Error finding shell script: {exc}")
        return 1

    try:
        return run_action(script_path, site, action, extra_args, shell=shell)
    except MissingDatabaseError as exc:
        print(f"Error: {exc}")
        return 1
    except RunnerError as exc:
        print(str(exc))
        return 1


def main(argv: Optional[Sequence[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    argv = list(argv)

    parser = build_parser()
    if argv and argv[0] in HELP_WORDS:
        parser.print_help()
        return 0

    args = parser.parse_args(argv)
    if args.site in HELP_WORDS:
        parser.print_help()
        return 0
    setup_logging(args.log_level)
    logger.debug("Arguments: %s", args)

    try:
        return run(args, Config())
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
