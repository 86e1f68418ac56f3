"""
CFX Portal Upload Module

This module uploads a zip artifact to the CFX portal via a chunked
re-upload workflow.

Authentication: HTTP cookie handshake, falling back to browser SSO
Resolution: asset id lookup by exact name
Transfer: start re-upload, upload chunks in order, complete upload
"""

from .error_classifier import classify_error, format_error_for_user
from .exceptions import ClassifiedError, ErrorKind
from .models import AuthMode, AuthSession, AuthSource, RetryPolicy, RunConfig, UploadResult
from .retry import with_retry
from .upload_orchestrator import UploadOrchestrator

__all__ = [
    'ClassifiedError',
    'ErrorKind',
    'classify_error',
    'format_error_for_user',
    'with_retry',
    'AuthMode',
    'AuthSession',
    'AuthSource',
    'RetryPolicy',
    'RunConfig',
    'UploadResult',
    'UploadOrchestrator',
]
