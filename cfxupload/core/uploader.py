"""
Upload service for cfxupload.

Wires the portal client, session provider and orchestrator for one run and
translates the outcome into a process exit code.
"""
import asyncio
import logging
from typing import Any, Dict, Optional

from cfxupload.upload.api_client import PortalAPIClient
from cfxupload.upload.auth import create_session_provider
from cfxupload.upload.error_classifier import format_error_for_user
from cfxupload.upload.models import PortalEndpoints, RunConfig, UploadResult
from cfxupload.upload.upload_orchestrator import UploadOrchestrator

logger = logging.getLogger(__name__)


class UploadService:
    """Service for uploading an artifact to the CFX portal."""

    def __init__(self, endpoints: Optional[PortalEndpoints] = None):
        self.endpoints = endpoints or PortalEndpoints()

    async def run(self, config: RunConfig) -> UploadResult:
        """Run the upload workflow for a validated configuration."""
        async with PortalAPIClient(config.request_timeout_ms, self.endpoints) as portal_client:
            session_provider = create_session_provider(
                config.auth_mode,
                portal_client,
                config.retry_policy.max_retries,
                self.endpoints,
            )
            orchestrator = UploadOrchestrator(session_provider, portal_client)
            return await orchestrator.run(config)

    def report_result(self, result: UploadResult) -> None:
        if result.skipped_upload:
            logger.info("Login/session refresh completed. Upload was skipped.")
            return

        logger.info(
            "Upload finished for assetId=%s using %d chunk(s).",
            result.asset_id,
            result.uploaded_chunks,
        )

    def execute_upload(self, load_config) -> int:
        """
        Execute the upload workflow and return an exit code.

        Args:
            load_config: Zero-argument callable returning a RunConfig; called
                inside the error boundary so config errors are reported too
        """
        try:
            config = load_config()
            logger.debug("Run configuration: %s", self.describe_config(config))
            result = asyncio.run(self.run(config))
            self.report_result(result)
            return 0
        except Exception as e:
            logger.error(format_error_for_user(e))
            logger.debug("Upload failure details", exc_info=True)
            return 1

    def describe_config(self, config: RunConfig) -> Dict[str, Any]:
        """Summary of the run configuration for debug output (cookie masked)."""
        return {
            "asset_name": config.asset_name,
            "asset_id": config.asset_id,
            "zip_path": config.zip_path,
            "make_zip": config.make_zip,
            "skip_upload": config.skip_upload,
            "chunk_size": config.chunk_size,
            "auth_mode": config.auth_mode.value,
            "request_timeout_ms": config.request_timeout_ms,
            "max_retries": config.retry_policy.max_retries,
            "workspace_path": config.workspace_path,
        }
