"""
CFX Portal API Client

Handles the portal round trips used by the upload workflow: session
verification, asset lookup, and the three-step chunked re-upload
(start, upload chunks, complete). Each method is a single request; retries
are applied by the caller through the retry engine.
"""

import logging
from typing import Any, List, Optional
from urllib.parse import urljoin

import aiohttp

from .exceptions import ClassifiedError, ErrorKind
from .models import Asset, PortalEndpoints

logger = logging.getLogger(__name__)

SEARCH_SORT_PARAMS = {"sort": "asset.name", "direction": "asc"}


class PortalAPIClient:
    """Handles all API interactions with the CFX portal"""

    def __init__(
        self,
        request_timeout_ms: int,
        endpoints: Optional[PortalEndpoints] = None,
        session: Optional[aiohttp.ClientSession] = None,
    ):
        self.endpoints = endpoints or PortalEndpoints()
        self.timeout = aiohttp.ClientTimeout(total=request_timeout_ms / 1000)
        self._session = session
        self._owns_session = session is None

    async def __aenter__(self):
        if self._session is None:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    async def verify_session(self, cookie_header: str) -> None:
        """GET /me/assets with an empty search to prove the cookie works"""
        await self._request(
            "GET",
            self.endpoints.assets_search,
            cookie_header,
            params={"search": "", **SEARCH_SORT_PARAMS},
        )

    async def resolve_asset_id(self, name: str, cookie_header: str) -> str:
        """GET /me/assets?search={name} and return the exact match's id"""
        logger.debug('Resolving asset id for name "%s".', name)

        data = await self._request(
            "GET",
            self.endpoints.assets_search,
            cookie_header,
            params={"search": name, **SEARCH_SORT_PARAMS},
            expect_json=True,
        )
        assets = self._parse_assets(data)

        if not assets:
            raise ClassifiedError(
                ErrorKind.PORTAL,
                f'Failed to find asset id for "{name}". See debug logs for more information.',
                False,
                "Ensure the asset exists in portal.cfx.re and that the name is correct.",
            )

        for asset in assets:
            if asset.name == name:
                return asset.id

        logger.debug("Search returned: %s", ", ".join(asset.name for asset in assets))
        raise ClassifiedError(
            ErrorKind.PORTAL,
            f'Failed to find asset id for "{name}" exact match. See debug logs for more information.',
            False,
            "Use asset-id directly or provide the exact portal asset name.",
        )

    async def start_reupload(
        self,
        asset_id: str,
        chunk_count: int,
        chunk_size: int,
        total_size: int,
        original_file_name: str,
        cookie_header: str,
    ) -> None:
        """POST /assets/{id}/re-upload"""
        payload = {
            "chunk_count": chunk_count,
            "chunk_size": chunk_size,
            "name": original_file_name,
            "original_file_name": original_file_name,
            "total_size": total_size,
        }

        data = await self._request(
            "POST",
            self.endpoints.for_asset(self.endpoints.reupload, asset_id),
            cookie_header,
            json=payload,
            expect_json=True,
        )

        errors = data.get("errors") if isinstance(data, dict) else None
        if errors is not None:
            logger.debug("Re-upload rejected by portal: %s", errors)
            raise ClassifiedError(
                ErrorKind.UPLOAD,
                "Failed to start re-upload session.",
                False,
                "Inspect portal response in debug logs and verify asset permissions.",
            )

    async def upload_chunk(self, asset_id: str, chunk_index: int, chunk: bytes, cookie_header: str) -> None:
        """POST /assets/{id}/upload-chunk as multipart form data"""
        form = aiohttp.FormData()
        form.add_field("chunk_id", str(chunk_index))
        form.add_field("chunk", chunk, filename="blob", content_type="application/octet-stream")

        await self._request(
            "POST",
            self.endpoints.for_asset(self.endpoints.upload_chunk, asset_id),
            cookie_header,
            data=form,
        )

    async def complete_upload(self, asset_id: str, cookie_header: str) -> None:
        """POST /assets/{id}/complete-upload"""
        await self._request(
            "POST",
            self.endpoints.for_asset(self.endpoints.complete_upload, asset_id),
            cookie_header,
            json={},
        )

    async def _request(
        self,
        method: str,
        endpoint: str,
        cookie_header: str,
        expect_json: bool = False,
        **kwargs,
    ) -> Any:
        if self._session is None:
            raise RuntimeError("PortalAPIClient must be used as an async context manager")

        url = urljoin(self.endpoints.api_url, endpoint)
        headers = {"Cookie": cookie_header}

        async with self._session.request(method, url, headers=headers, timeout=self.timeout, **kwargs) as response:
            if response.status >= 400:
                body = await response.text()
                logger.debug("%s %s returned %s: %s", method, endpoint, response.status, body[:500])
            response.raise_for_status()

            if expect_json:
                return await response.json(content_type=None)
            return None

    @staticmethod
    def _parse_assets(data: Any) -> List[Asset]:
        items = data.get("items") if isinstance(data, dict) else None
        return [Asset(id=str(item["id"]), name=item["name"]) for item in items or []]
