"""
Upload Orchestrator for the CFX portal

Coordinates a single upload run: authenticate, resolve the target asset,
resolve or build the archive, then stream it to the portal chunk by chunk
(start re-upload, upload each chunk, complete upload). Every portal call goes
through the retry engine; chunks are sent strictly one after another.
"""

import logging
import math
import os
from functools import partial
from typing import Callable, List, Optional

import aiofiles

from .api_client import PortalAPIClient
from .auth import SessionProvider
from .exceptions import ClassifiedError, ErrorKind
from .models import RunConfig, UploadResult
from .packager import create_archive
from .retry import with_retry

logger = logging.getLogger(__name__)

ArchiveFactory = Callable[[str, str, List[str]], str]


class UploadOrchestrator:
    """Runs the authenticate → resolve → chunked upload workflow"""

    def __init__(
        self,
        session_provider: SessionProvider,
        portal_client: PortalAPIClient,
        archive_factory: Optional[ArchiveFactory] = None,
    ):
        self.session_provider = session_provider
        self.portal_client = portal_client
        self.archive_factory = archive_factory or create_archive

    async def run(self, config: RunConfig) -> UploadResult:
        """Execute the complete upload workflow"""
        session = await self.session_provider.get_session(config.cookie)
        logger.info("Authenticated against CFX portal using %s mode.", session.source.value)

        if config.skip_upload:
            logger.info("Skipping upload due to skip-upload=true")
            return UploadResult(
                skipped_upload=True,
                authenticated_with=session.source,
                uploaded_chunks=0,
            )

        asset_id = await self._resolve_asset_id(config, session.cookie_header)
        zip_path = self._resolve_zip_path(config)
        uploaded_chunks = await self._upload_zip(config, asset_id, zip_path, session.cookie_header)

        logger.info("Upload completed successfully.")

        return UploadResult(
            skipped_upload=False,
            authenticated_with=session.source,
            asset_id=asset_id,
            asset_name=config.asset_name,
            zip_path=zip_path,
            uploaded_chunks=uploaded_chunks,
        )

    async def _resolve_asset_id(self, config: RunConfig, cookie_header: str) -> str:
        if config.asset_id:
            if config.asset_name:
                logger.debug("Both asset-id and asset-name were provided. asset-id takes precedence.")
            return config.asset_id

        if not config.asset_name:
            raise ClassifiedError(
                ErrorKind.CONFIG,
                "asset-name or asset-id must be provided when skip-upload is false.",
                False,
                "Provide asset-id directly or set asset-name to the exact portal asset name.",
            )

        asset_name = config.asset_name
        return await with_retry(
            partial(self.portal_client.resolve_asset_id, asset_name, cookie_header),
            config.retry_policy,
            f'Resolve asset id for "{asset_name}"',
        )

    def _resolve_zip_path(self, config: RunConfig) -> str:
        if config.zip_path:
            logger.debug("Using provided zip-path: %s", config.zip_path)
            return config.zip_path

        if not config.make_zip:
            raise ClassifiedError(
                ErrorKind.CONFIG,
                "Either zip-path or make-zip must be provided to upload a file.",
                False,
                "Set zip-path to an existing zip or enable make-zip=true.",
            )

        if not config.asset_name:
            raise ClassifiedError(
                ErrorKind.CONFIG,
                "asset-name is required to generate a zip path when make-zip is enabled.",
                False,
                "Provide asset-name or an explicit zip-path.",
            )

        logger.info("Creating zip file ...")
        return self.archive_factory(config.workspace_path, config.asset_name, list(config.zip_exclude))

    async def _upload_zip(self, config: RunConfig, asset_id: str, zip_path: str, cookie_header: str) -> int:
        if not os.path.isfile(zip_path):
            raise ClassifiedError(
                ErrorKind.UPLOAD,
                f'Zip file "{zip_path}" does not exist.',
                False,
                "Check zip-path or enable make-zip=true.",
            )

        total_size = os.path.getsize(zip_path)
        if total_size <= 0:
            raise ClassifiedError(
                ErrorKind.UPLOAD,
                f'Zip file "{zip_path}" is empty.',
                False,
                "Ensure your artifact contains files before upload.",
            )

        chunk_size = config.chunk_size
        chunk_count = math.ceil(total_size / chunk_size)
        original_file_name = os.path.basename(zip_path)
        policy = config.retry_policy

        await with_retry(
            partial(
                self.portal_client.start_reupload,
                asset_id,
                chunk_count,
                chunk_size,
                total_size,
                original_file_name,
                cookie_header,
            ),
            policy,
            "Start re-upload session",
        )

        chunk_index = 0
        async with aiofiles.open(zip_path, "rb") as f:
            while True:
                chunk = await f.read(chunk_size)
                if not chunk:
                    break

                try:
                    await with_retry(
                        partial(self.portal_client.upload_chunk, asset_id, chunk_index, chunk, cookie_header),
                        policy,
                        f"Upload chunk {chunk_index + 1}/{chunk_count}",
                    )
                except ClassifiedError:
                    logger.error(
                        "Upload aborted at chunk %d/%d; %d chunk(s) were sent before the failure.",
                        chunk_index + 1,
                        chunk_count,
                        chunk_index,
                    )
                    raise

                logger.info("Uploaded chunk %d/%d", chunk_index + 1, chunk_count)
                chunk_index += 1

        await with_retry(
            partial(self.portal_client.complete_upload, asset_id, cookie_header),
            policy,
            "Complete upload",
        )

        return chunk_index
