"""
Upload command implementation.

Thin wrapper around UploadService that handles CLI argument parsing
and delegates business logic to the service layer.
"""
import sys
from typing import Optional

import typer

from cfxupload.core.config_manager import ConfigManager
from cfxupload.core.loggers import configure_logging
from cfxupload.core.uploader import UploadService
from cfxupload.upload.run_config import parse_run_config


def upload_command(
    cookie: Optional[str] = typer.Option(None, "--cookie", help="Forum _t cookie value"),
    asset_name: Optional[str] = typer.Option(None, "--asset-name", help="Exact portal asset name"),
    asset_id: Optional[str] = typer.Option(None, "--asset-id", help="Portal asset id (takes precedence over --asset-name)"),
    zip_path: Optional[str] = typer.Option(None, "--zip-path", help="Upload an existing zip instead of packaging the workspace"),
    make_zip: Optional[bool] = typer.Option(None, "--make-zip/--no-make-zip", help="Package the workspace into a zip before upload"),
    skip_upload: Optional[bool] = typer.Option(None, "--skip-upload/--no-skip-upload", help="Only authenticate, do not upload"),
    chunk_size: Optional[int] = typer.Option(None, "--chunk-size", help="Chunk size in bytes"),
    max_retries: Optional[int] = typer.Option(None, "--max-retries", help="Retries per portal request"),
    auth_mode: Optional[str] = typer.Option(None, "--auth-mode", help="auto, http or browser"),
    request_timeout_ms: Optional[int] = typer.Option(None, "--request-timeout-ms", help="Timeout per portal request"),
    retry_base_delay_ms: Optional[int] = typer.Option(None, "--retry-base-delay-ms", help="Initial retry delay"),
    retry_max_delay_ms: Optional[int] = typer.Option(None, "--retry-max-delay-ms", help="Maximum retry delay"),
    zip_exclude: Optional[str] = typer.Option(None, "--zip-exclude", help="Comma-separated exclude patterns, e.g. '.git/**,node_modules/**'"),
    workspace_path: Optional[str] = typer.Option(None, "--workspace-path", help="Directory to package (default: current directory)"),
    config_path: Optional[str] = typer.Option(None, "-c", "--config", help="Path to config YAML"),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging"),
):
    """Upload an asset to the CFX portal."""
    configure_logging(debug=debug)

    cli_values = {
        "cookie": cookie,
        "asset_name": asset_name,
        "asset_id": asset_id,
        "zip_path": zip_path,
        "make_zip": make_zip,
        "skip_upload": skip_upload,
        "chunk_size": chunk_size,
        "max_retries": max_retries,
        "auth_mode": auth_mode,
        "request_timeout_ms": request_timeout_ms,
        "retry_base_delay_ms": retry_base_delay_ms,
        "retry_max_delay_ms": retry_max_delay_ms,
        "zip_exclude": zip_exclude,
        "workspace_path": workspace_path,
    }

    def load_config():
        config_manager = ConfigManager()
        file_values = config_manager.discover_and_load_config(config_path)
        return parse_run_config(config_manager.merge_config_and_args(file_values, cli_values))

    # Delegate to service layer
    upload_service = UploadService()
    exit_code = upload_service.execute_upload(load_config)

    # Exit with appropriate code
    if exit_code != 0:
        sys.exit(exit_code)
