"""
Configuration Manager for local-cli
Handles user preferences stored as JSON
"""

import json
import logging
import os
from typing import Any, Dict, Optional, Tuple

from .command_builder import DEFAULT_ACTION
from .platform_utils import get_config_dir

logger = logging.getLogger(__name__)

# Increment this whenever the configuration format changes
CONFIG_VERSION = 1

INTERFACES = ("prompt", "tui")


class Config:
    """Configuration manager for local-cli"""

    def __init__(self, config_file: Optional[str] = None):
        if config_file is None:
            config_file = os.environ.get("LOCAL_CLI_CONFIG") or None
        if config_file is None:
            try:
                config_file = os.path.join(get_config_dir(), "config.json")
            except OSError as e:
                logger.warning(f"Unable to determine config directory; using defaults: {e}")
        self.config_file = config_file
        self.config_data = self.load_json_config()

    def get_default_config(self) -> Dict[str, Any]:
        """Return the default configuration"""
        return {
            "config_version": CONFIG_VERSION,
            "local_config_dir": "",
            "default_action": DEFAULT_ACTION,
            "shell": "bash",
            "interface": "prompt",
        }

    def load_json_config(self) -> Dict[str, Any]:
        """Load configuration from JSON file.

        A missing file yields the defaults without creating anything on disk.
        """
        if not self.config_file or not os.path.exists(self.config_file):
            return self.get_default_config()

        try:
            with open(self.config_file, "r", encoding="utf-8") as f:
                config = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Failed to load JSON config: {e}")
            return self.get_default_config()

        if not isinstance(config, dict):
            logger.error("Ignoring %s: top level is not an object", self.config_file)
            return self.get_default_config()

        stored_version = config.get("config_version", 1)
        if not isinstance(stored_version, int) or stored_version > CONFIG_VERSION:
            logger.warning(
                "Unsupported config version %r in %s; unknown settings may be ignored",
                stored_version,
                self.config_file,
            )

        config, updated = self._ensure_config_defaults(config)
        if updated:
            logger.debug("Filled missing configuration keys from defaults")
        return config

    def save_json_config(self, config_data: Dict[str, Any] = None):
        """Save configuration to JSON file"""
        if config_data is None:
            config_data = self.config_data
        if not self.config_file:
            raise OSError("No configuration file location available")

        os.makedirs(os.path.dirname(self.config_file) or ".", exist_ok=True)
        with open(self.config_file, "w", encoding="utf-8") as f:
            json.dump(config_data, f, indent=2)

        logger.debug("Configuration saved to %s", self.config_file)

    def _ensure_config_defaults(self, config: Dict[str, Any]) -> Tuple[Dict[str, Any], bool]:
        """Ensure known keys exist and hold values of the right type."""
        updated = False
        defaults = self.get_default_config()

        for key, value in defaults.items():
            current = config.get(key)
            if not isinstance(current, type(value)):
                config[key] = value
                updated = True

        action = config["default_action"].strip()
        if not action:
            config["default_action"] = DEFAULT_ACTION
            updated = True

        if config["interface"] not in INTERFACES:
            logger.warning("Unknown interface %r; using 'prompt'", config["interface"])
            config["interface"] = "prompt"
            updated = True

        if not config["shell"].strip():
            config["shell"] = "bash"
            updated = True

        return config, updated

    def get_setting(self, key: str, default=None):
        """Get a setting value"""
        keys = key.split(".")
        value = self.config_data
        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default
        return value

    def set_setting(self, key: str, value: Any):
        """Set a setting value in memory; call :meth:`save_json_config` to persist"""
        keys = key.split(".")
        target = self.config_data
        for k in keys[:-1]:
            nested = target.get(k)
            if not isinstance(nested, dict):
                nested = {}
                target[k] = nested
            target = nested
        target[keys[-1]] = value

    # --- Resolved preferences ---------------------------------------------

    def get_local_config_dir_override(self) -> str:
        value = self.get_setting("local_config_dir", "") or ""
        return os.path.abspath(os.path.expanduser(value)) if value else ""

    def get_default_action(self) -> str:
        return self.get_setting("default_action", DEFAULT_ACTION) or DEFAULT_ACTION

    def get_shell(self) -> str:
        return os.environ.get("LOCAL_CLI_SHELL") or self.get_setting("shell", "bash") or "bash"

    def get_interface(self) -> str:
        return self.get_setting("interface", "prompt")
