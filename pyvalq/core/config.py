"""Manages configuration for pyvalq.

This module is responsible for loading and managing the settings used to
assemble validators: where language lines come from, inline messages, the
database behind the presence verifier and which built-in rules are turned
off. It aggregates settings from default values, TOML files, and
environment variables, providing a unified interface for accessing them.
"""

import copy
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

try:
    import tomllib  # Available in Python 3.11+
except ImportError:
    import tomli as tomllib  # Fallback for Python versions < 3.11

logger = logging.getLogger(__name__)

# The default path for the user-specific global configuration file.
USER_CONFIG_PATH = Path.home() / ".config" / "pyvalq" / "config.toml"

# The project-level configuration file, looked up in the working directory.
PROJECT_CONFIG_NAME = "pyvalq.toml"


class Config:
    """Handles the configuration for the pyvalq application.

    This class loads configuration from multiple sources with a defined
    precedence:
    1.  Default values (lowest precedence).
    2.  Project-specific `pyvalq.toml` file.
    3.  User-level `~/.config/pyvalq/config.toml` file.
    4.  A custom configuration file specified at runtime, which replaces
        steps 2 and 3.
    5.  Environment variables (highest precedence).

    Attributes:
        DEFAULT_CONFIG (Dict[str, Any]): A dictionary containing the default
            configuration values.
    """

    DEFAULT_CONFIG = {
        "language_file": None,  # TOML file of extra message lines.
        "use_default_lines": True,  # Preload the built-in English lines.
        "messages": {},  # Inline lines, keyed without the "validation." prefix.
        "disable_rules": [],
        "verbose": False,
        "presence": {
            "database": None,  # sqlite database for the unique/exists rules.
        },
    }

    def __init__(self, config_path: Optional[Path] = None, load_defaults: bool = True) -> None:
        """Initializes the configuration manager.

        Args:
            config_path (Optional[Path]): An optional path to a specific
                configuration file to load. If provided, it takes precedence
                over default file locations.
            load_defaults (bool): Whether to read the project and user files
                when no `config_path` is given. Environment variables are
                always applied.
        """
        self.config = copy.deepcopy(self.DEFAULT_CONFIG)
        self._load_config(config_path, load_defaults)

    def _load_config(self, config_path: Optional[Path] = None, load_defaults: bool = True) -> None:
        """Loads configuration from files and environment variables.

        Args:
            config_path (Optional[Path]): A specific config file path.
            load_defaults (bool): Whether to look in the standard locations.
        """
        if config_path:
            self._load_file_config(Path(config_path))
        elif load_defaults:
            self._load_default_configs()

        self._load_env_config()

    def _load_default_configs(self) -> None:
        """Loads configs from standard locations if they exist."""
        project_config = Path.cwd() / PROJECT_CONFIG_NAME
        if project_config.exists():
            self._load_file_config(project_config)

        if USER_CONFIG_PATH.exists():
            self._load_file_config(USER_CONFIG_PATH)

    def _merge_configs(self, base: Dict[str, Any], new: Dict[str, Any]) -> None:
        """Recursively merges a new config dict into a base dict.

        Args:
            base (Dict[str, Any]): The base configuration dictionary.
            new (Dict[str, Any]): The new configuration to merge in.
        """
        for key, value in new.items():
            if isinstance(value, dict) and key in base and isinstance(base[key], dict):
                self._merge_configs(base[key], value)
            else:
                base[key] = value

    def _load_file_config(self, config_path: Path) -> None:
        """Loads and merges configuration from a TOML file.

        Args:
            config_path (Path): The path to the TOML configuration file.
        """
        try:
            with open(config_path, "rb") as f:
                file_config = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.warning(f"Could not load config from {config_path}: {e}")
            return

        # A relative language file is resolved against the config file's folder.
        language_file = file_config.get("language_file")
        if language_file and not Path(language_file).is_absolute():
            file_config["language_file"] = str(config_path.parent / language_file)

        self._merge_configs(self.config, file_config)

    def _load_env_config(self) -> None:
        """Loads and merges configuration from environment variables."""
        env_mapping = {
            "PYVALQ_LANGUAGE_FILE": "language_file",
            "PYVALQ_USE_DEFAULT_LINES": "use_default_lines",
            "PYVALQ_DISABLE_RULES": "disable_rules",
            "PYVALQ_VERBOSE": "verbose",
            "PYVALQ_PRESENCE_DATABASE": "presence.database",
        }

        for env_var, config_key in env_mapping.items():
            value = os.getenv(env_var)
            if value is not None:
                self._set_nested_key(config_key, value)

    def _set_nested_key(self, key_path: str, value: str) -> None:
        """Sets a value in the config dict using a dot-separated path.

        This method correctly parses and casts values from environment
        variables, which are always strings.

        Args:
            key_path (str): The dot-separated key (e.g., "presence.database").
            value (str): The string value from the environment variable.
        """
        keys = key_path.split('.')
        target_config = self.config
        for key in keys[:-1]:
            if key not in target_config or not isinstance(target_config[key], dict):
                target_config[key] = {}
            target_config = target_config[key]

        leaf_key = keys[-1]

        # Type casting based on the key
        if leaf_key in ["use_default_lines", "verbose"]:
            target_config[leaf_key] = value.lower() in ("true", "1", "yes", "on")
        elif leaf_key in ["disable_rules"]:
            target_config[leaf_key] = [v.strip() for v in value.split(",") if v.strip()]
        else:
            target_config[leaf_key] = value

    def get(self, key: str, default: Any = None) -> Any:
        """Retrieves a configuration value using a dot-separated key.

        Args:
            key (str): The dot-separated key (e.g., "presence.database").
            default (Any): The default value to return if the key is not found.

        Returns:
            Any: The configuration value or the default.
        """
        keys = key.split('.')
        value = self.config
        try:
            for k in keys:
                value = value[k]
            return value
        except (KeyError, TypeError):
            return default

    def set(self, key: str, value: Any) -> None:
        """Sets a configuration value in memory.

        Args:
            key (str): The dot-separated key (e.g., "presence.database").
            value (Any): The value to set.
        """
        keys = key.split('.')
        target_config = self.config
        for k in keys[:-1]:
            target_config = target_config.setdefault(k, {})
        target_config[keys[-1]] = value

    def is_rule_enabled(self, rule_name: str) -> bool:
        """Checks if a built-in rule is enabled.

        Names are compared case-insensitively, ignoring underscores, so
        ``alpha_num`` in a config file disables ``AlphaNum``.

        Args:
            rule_name (str): The name of the rule to check.

        Returns:
            bool: True unless the rule is in the `disable_rules` list.
        """
        def normalize(name: str) -> str:
            return name.replace("_", "").lower()

        disabled = {normalize(name) for name in self.get("disable_rules", [])}
        return normalize(rule_name) not in disabled

    def __str__(self) -> str:
        """Returns a string representation of the configuration.

        Returns:
            str: A string showing the current configuration state.
        """
        return f"Config({self.config})"
