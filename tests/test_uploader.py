"""
Tests for the upload service
"""

import logging
from unittest.mock import AsyncMock, MagicMock, patch

from cfxupload.core.uploader import UploadService
from cfxupload.upload.exceptions import ClassifiedError, ErrorKind
from cfxupload.upload.models import AuthMode, AuthSource, RetryPolicy, RunConfig, UploadResult


def build_config(**overrides):
    values = dict(
        cookie="secret-cookie",
        asset_id="42",
        zip_path="resource.zip",
        auth_mode=AuthMode.HTTP,
        request_timeout_ms=1000,
        retry_policy=RetryPolicy(max_retries=2, base_delay_ms=10, max_delay_ms=20),
    )
    values.update(overrides)
    return RunConfig(**values)


class TestUploadService:
    """Test cases for UploadService"""

    @patch("cfxupload.core.uploader.UploadOrchestrator")
    @patch("cfxupload.core.uploader.create_session_provider")
    @patch("cfxupload.core.uploader.PortalAPIClient")
    def test_execute_upload_success(self, mock_client_cls, mock_create_provider, mock_orchestrator_cls, caplog):
        portal_client = MagicMock()
        mock_client_cls.return_value.__aenter__ = AsyncMock(return_value=portal_client)
        mock_client_cls.return_value.__aexit__ = AsyncMock(return_value=False)
        result = UploadResult(
            skipped_upload=False,
            authenticated_with=AuthSource.HTTP,
            asset_id="42",
            uploaded_chunks=3,
        )
        mock_orchestrator_cls.return_value.run = AsyncMock(return_value=result)
        config = build_config()

        with caplog.at_level(logging.INFO, logger="cfxupload"):
            exit_code = UploadService().execute_upload(lambda: config)

        assert exit_code == 0
        mock_client_cls.assert_called_once()
        assert mock_client_cls.call_args.args[0] == 1000
        mock_create_provider.assert_called_once()
        args = mock_create_provider.call_args.args
        assert args[0] == AuthMode.HTTP
        assert args[1] is portal_client
        assert args[2] == 2
        mock_orchestrator_cls.assert_called_once_with(mock_create_provider.return_value, portal_client)
        mock_orchestrator_cls.return_value.run.assert_awaited_once_with(config)
        assert "Upload finished for assetId=42 using 3 chunk(s)." in caplog.text

    @patch("cfxupload.core.uploader.UploadOrchestrator")
    @patch("cfxupload.core.uploader.create_session_provider")
    @patch("cfxupload.core.uploader.PortalAPIClient")
    def test_execute_upload_failure(self, mock_client_cls, mock_create_provider, mock_orchestrator_cls, caplog):
        mock_client_cls.return_value.__aenter__ = AsyncMock(return_value=MagicMock())
        mock_client_cls.return_value.__aexit__ = AsyncMock(return_value=False)
        mock_orchestrator_cls.return_value.run = AsyncMock(side_effect=ClassifiedError(
            ErrorKind.AUTH, "Authentication failed with status 401.", False, "Refresh the cookie."
        ))

        with caplog.at_level(logging.ERROR, logger="cfxupload"):
            exit_code = UploadService().execute_upload(build_config)

        assert exit_code == 1
        assert "[auth] Authentication failed with status 401. Hint: Refresh the cookie." in caplog.text

    def test_config_errors_are_reported(self, caplog):
        def load_config():
            raise ClassifiedError(ErrorKind.CONFIG, 'Input "cookie" is required.', False, "Pass the cookie.")

        with caplog.at_level(logging.ERROR, logger="cfxupload"):
            exit_code = UploadService().execute_upload(load_config)

        assert exit_code == 1
        assert '[config] Input "cookie" is required.' in caplog.text

    def test_report_skipped_upload(self, caplog):
        result = UploadResult(skipped_upload=True, authenticated_with=AuthSource.BROWSER)

        with caplog.at_level(logging.INFO, logger="cfxupload"):
            UploadService().report_result(result)

        assert "Upload was skipped." in caplog.text

    def test_describe_config_masks_cookie(self):
        summary = UploadService().describe_config(build_config())

        assert "cookie" not in summary
        assert "secret-cookie" not in str(summary)
        assert summary["asset_id"] == "42"
        assert summary["auth_mode"] == "http"
        assert summary["max_retries"] == 2
