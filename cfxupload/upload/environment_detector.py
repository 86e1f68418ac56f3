"""
GitHub Actions Environment Detector

Reads action inputs (exposed by the runner as ``INPUT_<NAME>`` environment
variables) into the raw input mapping understood by ``parse_run_config``.
"""

import os
from typing import Dict, List, Optional

from .exceptions import ClassifiedError, ErrorKind
from .models import RunConfig
from .run_config import RawValue, parse_run_config


class ActionEnvironmentDetector:
    """Detects and reads GitHub Actions upload inputs"""

    # action input name -> run config key
    INPUTS = {
        "cookie": "cookie",
        "makeZip": "make_zip",
        "assetName": "asset_name",
        "assetId": "asset_id",
        "zipPath": "zip_path",
        "skipUpload": "skip_upload",
        "chunkSize": "chunk_size",
        "maxRetries": "max_retries",
        "authMode": "auth_mode",
        "requestTimeoutMs": "request_timeout_ms",
        "retryBaseDelayMs": "retry_base_delay_ms",
        "retryMaxDelayMs": "retry_max_delay_ms",
        "zipExclude": "zip_exclude",
    }

    SENSITIVE_INPUTS = {"cookie"}

    def is_github_actions(self) -> bool:
        """Check whether we are running inside a GitHub Actions job"""
        return os.getenv("GITHUB_ACTIONS") == "true"

    def is_debug_enabled(self) -> bool:
        """Runner debug logging is switched on with RUNNER_DEBUG=1"""
        return os.getenv("RUNNER_DEBUG") == "1"

    def get_input(self, name: str) -> Optional[str]:
        """Read a single action input the way the runner exposes it"""
        value = os.getenv(self._input_env_var(name))
        if value is None:
            return None
        return value.strip()

    def get_missing_inputs(self) -> List[str]:
        """Get list of missing required inputs"""
        return [name for name in ("cookie",) if not self.get_input(name)]

    def get_raw_inputs(self) -> Dict[str, RawValue]:
        """Collect all action inputs keyed by run config field"""
        raw: Dict[str, RawValue] = {
            key: self.get_input(name) for name, key in self.INPUTS.items()
        }
        raw["workspace_path"] = os.getenv("GITHUB_WORKSPACE")
        return raw

    def get_run_config(self) -> RunConfig:
        """Extract and validate configuration from the action inputs"""
        missing = self.get_missing_inputs()
        if missing:
            raise ClassifiedError(
                ErrorKind.CONFIG,
                f"Missing required action inputs: {', '.join(missing)}.",
                False,
                "Set them under 'with:' in the workflow step, e.g. cookie: ${{ secrets.FORUM_COOKIE }}.",
            )

        return parse_run_config(self.get_raw_inputs())

    def get_environment_summary(self) -> dict:
        """Get summary of detected inputs for debugging"""
        summary = {
            "github_actions": self.is_github_actions(),
            "missing_inputs": self.get_missing_inputs(),
            "detected_inputs": {},
        }

        # Mask sensitive values
        for name in self.INPUTS:
            value = self.get_input(name)
            if value and name in self.SENSITIVE_INPUTS:
                summary["detected_inputs"][name] = f"{value[:4]}...{value[-4:]}" if len(value) > 8 else "***"
            else:
                summary["detected_inputs"][name] = value or None

        return summary

    def _input_env_var(self, name: str) -> str:
        """Convert an action input name to its environment variable"""
        # makeZip -> INPUT_MAKEZIP
        return f"INPUT_{name.replace(' ', '_').upper()}"
