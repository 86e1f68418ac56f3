"""
Tests for the GitHub Actions Environment Detector

Tests input detection and configuration extraction for action runs.
"""

import os
from unittest.mock import patch

import pytest

from cfxupload.upload.environment_detector import ActionEnvironmentDetector
from cfxupload.upload.exceptions import ClassifiedError, ErrorKind
from cfxupload.upload.models import AuthMode


class TestActionEnvironmentDetector:
    """Test cases for action input detection"""

    def setup_method(self):
        """Setup for each test"""
        self.detector = ActionEnvironmentDetector()

    def test_is_github_actions(self):
        """Test detection of a GitHub Actions job"""
        with patch.dict(os.environ, {'GITHUB_ACTIONS': 'true'}):
            assert self.detector.is_github_actions() == True

        with patch.dict(os.environ, {}, clear=True):
            assert self.detector.is_github_actions() == False

    def test_is_debug_enabled(self):
        """Test runner debug flag"""
        with patch.dict(os.environ, {'RUNNER_DEBUG': '1'}):
            assert self.detector.is_debug_enabled() == True

        with patch.dict(os.environ, {}, clear=True):
            assert self.detector.is_debug_enabled() == False

    def test_get_input_strips_whitespace(self):
        """Test inputs are read from INPUT_<NAME> and trimmed"""
        with patch.dict(os.environ, {'INPUT_ASSETNAME': '  my-resource  '}, clear=True):
            assert self.detector.get_input('assetName') == 'my-resource'
            assert self.detector.get_input('assetId') is None

    def test_get_missing_inputs(self):
        """Test identification of missing required inputs"""
        with patch.dict(os.environ, {}, clear=True):
            assert self.detector.get_missing_inputs() == ['cookie']

        with patch.dict(os.environ, {'INPUT_COOKIE': 'abc'}, clear=True):
            assert self.detector.get_missing_inputs() == []

    def test_get_raw_inputs(self):
        """Test raw inputs are keyed by run config field"""
        with patch.dict(os.environ, {
            'INPUT_COOKIE': 'abc',
            'INPUT_CHUNKSIZE': '1024',
            'GITHUB_WORKSPACE': '/runner/work/resource',
        }, clear=True):
            raw = self.detector.get_raw_inputs()

            assert raw['cookie'] == 'abc'
            assert raw['chunk_size'] == '1024'
            assert raw['asset_id'] is None
            assert raw['workspace_path'] == '/runner/work/resource'

    def test_get_run_config(self):
        """Test configuration extraction from action inputs"""
        with patch.dict(os.environ, {
            'INPUT_COOKIE': 'abc',
            'INPUT_MAKEZIP': 'false',
            'INPUT_ZIPPATH': 'resource.zip',
            'INPUT_ASSETID': '42',
            'INPUT_AUTHMODE': 'http',
            'INPUT_MAXRETRIES': '5',
            'INPUT_ZIPEXCLUDE': 'dist/**,docs/**',
            'GITHUB_WORKSPACE': '/runner/work/resource',
        }, clear=True):
            config = self.detector.get_run_config()

            assert config.cookie == 'abc'
            assert config.make_zip == False
            assert config.zip_path == 'resource.zip'
            assert config.asset_id == '42'
            assert config.auth_mode == AuthMode.HTTP
            assert config.retry_policy.max_retries == 5
            assert config.zip_exclude == ['dist/**', 'docs/**']
            assert config.workspace_path == '/runner/work/resource'

    def test_get_run_config_without_cookie(self):
        """Test a missing cookie is a config error"""
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ClassifiedError) as exc_info:
                self.detector.get_run_config()

            assert exc_info.value.kind == ErrorKind.CONFIG
            assert exc_info.value.message == "Missing required action inputs: cookie."
            assert exc_info.value.retriable == False

    def test_get_environment_summary_masks_cookie(self):
        """Test environment summary hides the cookie value"""
        with patch.dict(os.environ, {
            'GITHUB_ACTIONS': 'true',
            'INPUT_COOKIE': 'abcdefghijklmnop',
            'INPUT_ASSETNAME': 'my-resource',
        }, clear=True):
            summary = self.detector.get_environment_summary()

            assert summary['github_actions'] == True
            assert summary['missing_inputs'] == []
            assert summary['detected_inputs']['cookie'] == 'abcd...mnop'
            assert summary['detected_inputs']['assetName'] == 'my-resource'
            assert summary['detected_inputs']['zipPath'] is None

    def test_get_environment_summary_short_cookie(self):
        """Test short cookies are fully masked"""
        with patch.dict(os.environ, {'INPUT_COOKIE': 'short'}, clear=True):
            summary = self.detector.get_environment_summary()
            assert summary['detected_inputs']['cookie'] == '***'
