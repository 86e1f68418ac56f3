"""HTTP session provider: uses the forum cookie directly."""
import logging

from cfxupload.upload.api_client import PortalAPIClient
from cfxupload.upload.models import AuthSession, AuthSource

from .base import SessionProvider

logger = logging.getLogger(__name__)


class HttpSessionProvider(SessionProvider):
    """Builds the cookie header from the raw cookie and verifies it with one request."""

    def __init__(self, portal_client: PortalAPIClient):
        self.portal_client = portal_client

    async def get_session(self, cookie: str) -> AuthSession:
        cookie_header = f"{self.portal_client.endpoints.cookie_name}={cookie}"
        await self.portal_client.verify_session(cookie_header)
        logger.debug("HTTP session established directly from forum cookie.")

        return AuthSession(cookie_header=cookie_header, source=AuthSource.HTTP)
