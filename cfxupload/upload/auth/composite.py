"""Composite session provider: HTTP first, browser as fallback."""
import logging

from cfxupload.upload.error_classifier import classify_error, has_challenge_signature
from cfxupload.upload.exceptions import ErrorKind
from cfxupload.upload.models import AuthMode, AuthSession

from .base import SessionProvider

logger = logging.getLogger(__name__)


def should_fallback_to_browser(error: BaseException) -> bool:
    """Decide whether an HTTP authentication failure warrants the browser flow"""
    classified = classify_error(error, ErrorKind.AUTH)

    if classified.kind == ErrorKind.TIMEOUT or classified.retriable:
        return True

    if classified.kind == ErrorKind.AUTH and classified.status_code in (401, 403):
        return True

    return has_challenge_signature(classified.message)


class CompositeSessionProvider(SessionProvider):
    """Selects a session provider according to the configured auth mode."""

    def __init__(self, mode: AuthMode, http_provider: SessionProvider, browser_provider: SessionProvider):
        self.mode = AuthMode(mode)
        self.http_provider = http_provider
        self.browser_provider = browser_provider

    async def get_session(self, cookie: str) -> AuthSession:
        if self.mode == AuthMode.HTTP:
            return await self.http_provider.get_session(cookie)

        if self.mode == AuthMode.BROWSER:
            return await self.browser_provider.get_session(cookie)

        try:
            logger.info("Authenticating with HTTP-first strategy ...")
            return await self.http_provider.get_session(cookie)
        except Exception as e:
            if not should_fallback_to_browser(e):
                raise

            logger.warning("HTTP authentication failed, falling back to browser authentication.")
            logger.debug("HTTP authentication error: %s", e)
            return await self.browser_provider.get_session(cookie)
