"""
Configuration management for cfxupload.

Handles discovery and loading of an optional YAML config file and merges
command-line values over it, producing the raw input mapping that
``parse_run_config`` validates.
"""
import os
from typing import Any, Dict, Optional

import yaml

from cfxupload.upload.exceptions import ClassifiedError, ErrorKind
from cfxupload.upload.run_config import RAW_INPUT_KEYS

DEFAULT_CONFIG_FILE = "cfxupload.config.yaml"


class ConfigManager:
    """Manages cfxupload configuration loading and merging operations."""

    def load_config(self, path: str) -> dict:
        """Load configuration from YAML file."""
        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ClassifiedError(
                ErrorKind.CONFIG,
                f"Config file {path} must contain a mapping of upload inputs.",
                False,
                "Use 'key: value' pairs such as 'asset-name: my-resource'.",
            )

        return self.normalize_keys(data)

    def normalize_keys(self, data: Dict[str, Any]) -> dict:
        """Accept kebab-case keys (asset-name) as well as snake_case."""
        normalized = {}
        for key, value in data.items():
            name = str(key).replace("-", "_")
            if name not in RAW_INPUT_KEYS:
                raise ClassifiedError(
                    ErrorKind.CONFIG,
                    f"Unknown config key '{key}'.",
                    False,
                    f"Supported keys: {', '.join(RAW_INPUT_KEYS)}.",
                )
            normalized[name] = value
        return normalized

    def discover_and_load_config(self, config_arg: Optional[str]) -> dict:
        """Discover config file with priority order."""

        # Priority 1: --config argument
        if config_arg:
            if os.path.exists(config_arg):
                return self.load_config(config_arg)
            raise ClassifiedError(
                ErrorKind.CONFIG,
                f"Config file not found: {config_arg}",
                False,
                "Check the --config path.",
            )

        # Priority 2: cfxupload.config.yaml in current directory
        if os.path.exists(DEFAULT_CONFIG_FILE):
            return self.load_config(DEFAULT_CONFIG_FILE)

        # Priority 3: command-line values only
        return {}

    def merge_config_and_args(self, config: dict, args: Dict[str, Any]) -> dict:
        """Merge configuration with CLI arguments; explicit CLI values win."""
        result = dict(config)
        for key, value in args.items():
            if value is not None:
                result[key] = value
        return result
