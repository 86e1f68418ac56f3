"""
Run configuration parsing.

Turns raw inputs (strings from the environment or a YAML file, typed values
from the CLI) into a validated, immutable RunConfig.
"""

import os
from typing import Any, List, Mapping, Optional, Union

from .exceptions import ClassifiedError, ErrorKind
from .models import (
    DEFAULT_CHUNK_SIZE,
    DEFAULT_MAX_RETRIES,
    DEFAULT_REQUEST_TIMEOUT_MS,
    DEFAULT_RETRY_BASE_DELAY_MS,
    DEFAULT_RETRY_MAX_DELAY_MS,
    AuthMode,
    RetryPolicy,
    RunConfig,
)

RawValue = Union[str, int, bool, List[str], None]

RAW_INPUT_KEYS = (
    "cookie",
    "make_zip",
    "asset_name",
    "asset_id",
    "zip_path",
    "skip_upload",
    "chunk_size",
    "max_retries",
    "auth_mode",
    "request_timeout_ms",
    "retry_base_delay_ms",
    "retry_max_delay_ms",
    "zip_exclude",
    "workspace_path",
)


def _config_error(message: str, suggestion: str = "Check the upload inputs.") -> ClassifiedError:
    return ClassifiedError(ErrorKind.CONFIG, message, False, suggestion)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def parse_boolean(value: RawValue, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    if _is_blank(value):
        return default

    normalized = str(value).strip().lower()
    if normalized == "true":
        return True
    if normalized == "false":
        return False

    raise _config_error(f'Invalid boolean value "{value}". Use true or false.')


def _parse_integer(value: RawValue, default: int, error_message: str, minimum: int) -> int:
    if _is_blank(value):
        return default

    try:
        parsed = int(str(value).strip())
    except ValueError:
        raise _config_error(error_message)

    if parsed < minimum:
        bound = "greater than zero" if minimum == 1 else "zero or greater"
        raise _config_error(f"{error_message} Value must be {bound}.")

    return parsed


def parse_positive_integer(value: RawValue, default: int, error_message: str) -> int:
    return _parse_integer(value, default, error_message, minimum=1)


def parse_non_negative_integer(value: RawValue, default: int, error_message: str) -> int:
    return _parse_integer(value, default, error_message, minimum=0)


def parse_name(value: RawValue) -> Optional[str]:
    if _is_blank(value):
        return None
    return str(value).strip()


def parse_auth_mode(value: RawValue) -> AuthMode:
    if _is_blank(value):
        return AuthMode.AUTO

    try:
        return AuthMode(str(value).strip().lower())
    except ValueError:
        raise _config_error(
            f'Invalid auth-mode "{value}". Allowed values are: auto, http, browser.',
            "Set auth-mode to auto, http or browser.",
        )


def parse_zip_exclude(value: RawValue) -> List[str]:
    if _is_blank(value):
        return []

    patterns = value if isinstance(value, list) else str(value).split(",")
    return [pattern.strip() for pattern in patterns if pattern and pattern.strip()]


def resolve_workspace_path(value: RawValue) -> str:
    if not _is_blank(value):
        return str(value)

    github_workspace = os.getenv("GITHUB_WORKSPACE")
    if github_workspace:
        return github_workspace

    return os.getcwd()


def parse_run_config(inputs: Mapping[str, RawValue]) -> RunConfig:
    """
    Validate raw inputs and build a RunConfig.

    Raises:
        ClassifiedError: kind ``config`` for any invalid or missing input
    """
    cookie = parse_name(inputs.get("cookie"))
    if not cookie:
        raise _config_error('Input "cookie" is required.', "Pass the forum _t cookie value as cookie.")

    workspace_path = resolve_workspace_path(inputs.get("workspace_path"))

    make_zip = parse_boolean(inputs.get("make_zip"), True)
    skip_upload = parse_boolean(inputs.get("skip_upload"), False)
    asset_name = parse_name(inputs.get("asset_name"))
    asset_id = parse_name(inputs.get("asset_id"))

    if not asset_name and (make_zip or (not asset_id and not skip_upload)):
        asset_name = os.path.basename(os.path.normpath(workspace_path))

    chunk_size = parse_positive_integer(
        inputs.get("chunk_size"), DEFAULT_CHUNK_SIZE, "Invalid chunk size. Must be a number."
    )
    max_retries = parse_non_negative_integer(
        inputs.get("max_retries"), DEFAULT_MAX_RETRIES, "Invalid max retries. Must be a number."
    )
    request_timeout_ms = parse_positive_integer(
        inputs.get("request_timeout_ms"), DEFAULT_REQUEST_TIMEOUT_MS, "Invalid request timeout. Must be a number."
    )
    retry_base_delay_ms = parse_positive_integer(
        inputs.get("retry_base_delay_ms"), DEFAULT_RETRY_BASE_DELAY_MS, "Invalid retry base delay. Must be a number."
    )
    retry_max_delay_ms = parse_positive_integer(
        inputs.get("retry_max_delay_ms"), DEFAULT_RETRY_MAX_DELAY_MS, "Invalid retry max delay. Must be a number."
    )

    if retry_max_delay_ms < retry_base_delay_ms:
        raise _config_error("retry-max-delay-ms must be greater than or equal to retry-base-delay-ms.")

    return RunConfig(
        cookie=cookie,
        make_zip=make_zip,
        asset_name=asset_name,
        asset_id=asset_id,
        zip_path=parse_name(inputs.get("zip_path")),
        skip_upload=skip_upload,
        chunk_size=chunk_size,
        auth_mode=parse_auth_mode(inputs.get("auth_mode")),
        request_timeout_ms=request_timeout_ms,
        retry_policy=RetryPolicy(
            max_retries=max_retries,
            base_delay_ms=retry_base_delay_ms,
            max_delay_ms=retry_max_delay_ms,
        ),
        zip_exclude=parse_zip_exclude(inputs.get("zip_exclude")),
        workspace_path=workspace_path,
    )
