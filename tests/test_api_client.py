"""
Tests for the CFX portal API client.

The aiohttp session is replaced with a mock whose ``request`` returns an
async context manager yielding a canned response.
"""

from unittest.mock import AsyncMock, MagicMock, Mock

import aiohttp
import pytest

from cfxupload.upload.api_client import PortalAPIClient
from cfxupload.upload.exceptions import ClassifiedError, ErrorKind
from cfxupload.upload.models import PortalEndpoints

COOKIE = "_t=cookie"


def make_response(status: int = 200, json_data=None, text: str = "") -> MagicMock:
    response = MagicMock()
    response.status = status
    response.json = AsyncMock(return_value=json_data)
    response.text = AsyncMock(return_value=text)
    if status >= 400:
        response.raise_for_status = Mock(
            side_effect=aiohttp.ClientResponseError(request_info=Mock(), history=(), status=status)
        )
    else:
        response.raise_for_status = Mock()
    return response


def make_session(response: MagicMock) -> MagicMock:
    request_cm = MagicMock()
    request_cm.__aenter__ = AsyncMock(return_value=response)
    request_cm.__aexit__ = AsyncMock(return_value=False)

    session = MagicMock()
    session.request = Mock(return_value=request_cm)
    session.close = AsyncMock()
    return session


class TestPortalAPIClient:
    """Test cases for the portal round trips"""

    def build_client(self, response: MagicMock) -> PortalAPIClient:
        self.session = make_session(response)
        return PortalAPIClient(30_000, session=self.session)

    @pytest.mark.asyncio
    async def test_verify_session_sends_cookie(self):
        client = self.build_client(make_response())

        async with client:
            await client.verify_session(COOKIE)

        method, url = self.session.request.call_args.args
        kwargs = self.session.request.call_args.kwargs
        assert method == "GET"
        assert url == "https://portal-api.cfx.re/v1/me/assets"
        assert kwargs["headers"] == {"Cookie": COOKIE}
        assert kwargs["params"] == {"search": "", "sort": "asset.name", "direction": "asc"}

    @pytest.mark.asyncio
    async def test_verify_session_raises_on_forbidden(self):
        client = self.build_client(make_response(status=403, text="Forbidden"))

        async with client:
            with pytest.raises(aiohttp.ClientResponseError) as exc_info:
                await client.verify_session(COOKIE)

        assert exc_info.value.status == 403

    @pytest.mark.asyncio
    async def test_resolve_asset_id_exact_match(self):
        data = {"items": [{"id": 1, "name": "my-resource-old"}, {"id": 42, "name": "my-resource"}]}
        client = self.build_client(make_response(json_data=data))

        async with client:
            asset_id = await client.resolve_asset_id("my-resource", COOKIE)

        assert asset_id == "42"
        assert self.session.request.call_args.kwargs["params"]["search"] == "my-resource"

    @pytest.mark.asyncio
    async def test_resolve_asset_id_no_results(self):
        client = self.build_client(make_response(json_data={"items": []}))

        async with client:
            with pytest.raises(ClassifiedError) as exc_info:
                await client.resolve_asset_id("missing", COOKIE)

        error = exc_info.value
        assert error.kind == ErrorKind.PORTAL
        assert error.retriable is False
        assert error.message == 'Failed to find asset id for "missing". See debug logs for more information.'

    @pytest.mark.asyncio
    async def test_resolve_asset_id_no_exact_match(self):
        client = self.build_client(make_response(json_data={"items": [{"id": 7, "name": "missing-v2"}]}))

        async with client:
            with pytest.raises(ClassifiedError) as exc_info:
                await client.resolve_asset_id("missing", COOKIE)

        error = exc_info.value
        assert error.kind == ErrorKind.PORTAL
        assert error.retriable is False
        assert "exact match" in error.message
        assert "asset-id directly" in error.suggestion

    @pytest.mark.asyncio
    async def test_start_reupload_payload(self):
        client = self.build_client(make_response(json_data={"asset_id": 42, "errors": None}))

        async with client:
            await client.start_reupload("42", 3, 4, 10, "resource.zip", COOKIE)

        method, url = self.session.request.call_args.args
        assert method == "POST"
        assert url == "https://portal-api.cfx.re/v1/assets/42/re-upload"
        assert self.session.request.call_args.kwargs["json"] == {
            "chunk_count": 3,
            "chunk_size": 4,
            "name": "resource.zip",
            "original_file_name": "resource.zip",
            "total_size": 10,
        }

    @pytest.mark.asyncio
    async def test_start_reupload_rejected(self):
        client = self.build_client(make_response(json_data={"asset_id": 42, "errors": ["locked"]}))

        async with client:
            with pytest.raises(ClassifiedError) as exc_info:
                await client.start_reupload("42", 3, 4, 10, "resource.zip", COOKIE)

        assert exc_info.value.kind == ErrorKind.UPLOAD
        assert exc_info.value.retriable is False

    @pytest.mark.asyncio
    async def test_upload_chunk_sends_multipart_form(self):
        client = self.build_client(make_response())

        async with client:
            await client.upload_chunk("42", 2, b"data", COOKIE)

        method, url = self.session.request.call_args.args
        kwargs = self.session.request.call_args.kwargs
        assert method == "POST"
        assert url == "https://portal-api.cfx.re/v1/assets/42/upload-chunk"
        assert isinstance(kwargs["data"], aiohttp.FormData)
        assert kwargs["headers"]["Cookie"] == COOKIE

    @pytest.mark.asyncio
    async def test_upload_chunk_server_error_propagates(self):
        client = self.build_client(make_response(status=502, text="Bad Gateway"))

        async with client:
            with pytest.raises(aiohttp.ClientResponseError):
                await client.upload_chunk("42", 0, b"data", COOKIE)

    @pytest.mark.asyncio
    async def test_complete_upload(self):
        client = self.build_client(make_response())

        async with client:
            await client.complete_upload("42", COOKIE)

        method, url = self.session.request.call_args.args
        assert method == "POST"
        assert url == "https://portal-api.cfx.re/v1/assets/42/complete-upload"
        assert self.session.request.call_args.kwargs["json"] == {}

    @pytest.mark.asyncio
    async def test_custom_endpoints(self):
        endpoints = PortalEndpoints(api_url="https://portal.test/api/")
        self.session = make_session(make_response())
        client = PortalAPIClient(1000, endpoints=endpoints, session=self.session)

        async with client:
            await client.complete_upload("7", COOKIE)

        assert self.session.request.call_args.args[1] == "https://portal.test/api/assets/7/complete-upload"

    @pytest.mark.asyncio
    async def test_injected_session_is_not_closed(self):
        client = self.build_client(make_response())

        async with client:
            pass

        self.session.close.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_requires_context_manager(self):
        client = PortalAPIClient(1000)

        with pytest.raises(RuntimeError):
            await client.complete_upload("42", COOKIE)
