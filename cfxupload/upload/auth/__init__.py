"""
Portal authentication.

Provides the HTTP and browser session providers and the composite provider
that chooses between them.
"""
from typing import Optional

from cfxupload.upload.api_client import PortalAPIClient
from cfxupload.upload.models import AuthMode, PortalEndpoints

from .base import SessionProvider
from .browser_provider import BrowserSessionProvider
from .composite import CompositeSessionProvider, should_fallback_to_browser
from .http_provider import HttpSessionProvider


def create_session_provider(
    mode: AuthMode,
    portal_client: PortalAPIClient,
    max_retries: int,
    endpoints: Optional[PortalEndpoints] = None,
) -> SessionProvider:
    """Build the composite provider used by the upload service."""
    http_provider = HttpSessionProvider(portal_client)
    browser_provider = BrowserSessionProvider(max_retries, endpoints=endpoints or portal_client.endpoints)

    return CompositeSessionProvider(mode, http_provider, browser_provider)


__all__ = [
    'SessionProvider',
    'HttpSessionProvider',
    'BrowserSessionProvider',
    'CompositeSessionProvider',
    'create_session_provider',
    'should_fallback_to_browser',
]
