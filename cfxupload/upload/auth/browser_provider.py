"""
Browser session provider.

Drives a headless Chromium through the portal's single-sign-on flow: fetch the
SSO redirect, plant the forum cookie, follow the redirect back to the portal
and harvest the resulting session cookies.
"""
import asyncio
import json
import logging
from typing import Awaitable, Callable, Optional
from urllib.parse import urlparse

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from cfxupload.upload.exceptions import ClassifiedError, ErrorKind
from cfxupload.upload.models import AuthSession, AuthSource, PortalEndpoints

from .base import SessionProvider
from .browser_prep import prepare_browser

logger = logging.getLogger(__name__)

LAUNCH_ARGS = ["--no-sandbox", "--disable-setuid-sandbox"]


def _origin(url: str) -> str:
    parsed = urlparse(url)
    return f"{parsed.scheme}://{parsed.netloc}"


class BrowserSessionProvider(SessionProvider):
    """Obtains a portal session through the SSO redirect in a headless browser."""

    def __init__(
        self,
        max_retries: int,
        endpoints: Optional[PortalEndpoints] = None,
        playwright_factory=async_playwright,
        prepare: Callable[[], Awaitable[None]] = prepare_browser,
        retry_pause_seconds: float = 1.0,
    ):
        self.max_attempts = max(1, max_retries)
        self.endpoints = endpoints or PortalEndpoints()
        self.playwright_factory = playwright_factory
        self.prepare = prepare
        self.retry_pause_seconds = retry_pause_seconds

    async def get_session(self, cookie: str) -> AuthSession:
        await self.prepare()

        async with self.playwright_factory() as playwright:
            browser = await playwright.chromium.launch(headless=True, args=LAUNCH_ARGS)
            try:
                context = await browser.new_context()
                page = await context.new_page()

                redirect_url = await self._get_redirect_url(page)
                await self._set_forum_cookie(context, redirect_url, cookie)

                await page.goto(redirect_url, wait_until="networkidle")

                if self.endpoints.portal_domain not in page.url:
                    raise ClassifiedError(
                        ErrorKind.AUTH,
                        "Redirect failed. Make sure the provided cookie is valid.",
                        False,
                        f"Use a fresh {self.endpoints.cookie_name} cookie from forum.cfx.re.",
                    )

                cookies = await context.cookies()
                cookie_header = "; ".join(f"{c['name']}={c['value']}" for c in cookies)

                return AuthSession(cookie_header=cookie_header, source=AuthSource.BROWSER)
            finally:
                await browser.close()

    async def _get_redirect_url(self, page) -> str:
        for attempt in range(1, self.max_attempts + 1):
            try:
                logger.info("Navigating to SSO URL ...")
                await page.goto(self.endpoints.sso_url, wait_until="networkidle")

                logger.info("Navigated to SSO URL. Parsing response body ...")
                body = json.loads(await page.inner_text("body"))
                redirect_url = body["url"]
                logger.debug("Parsed response body.")

                logger.info("Redirecting to forum origin ...")
                await page.goto(_origin(redirect_url))
                return redirect_url

            except (PlaywrightError, ValueError, KeyError, TypeError) as e:
                logger.warning(
                    "Failed to navigate to SSO URL (attempt %d/%d): %s",
                    attempt,
                    self.max_attempts,
                    e,
                )
                if attempt < self.max_attempts:
                    await asyncio.sleep(self.retry_pause_seconds)

        raise ClassifiedError(
            ErrorKind.AUTH,
            f"Failed to navigate to SSO URL after {self.max_attempts} attempts.",
            False,
            "Verify cfx endpoints are reachable and try again later.",
        )

    async def _set_forum_cookie(self, context, redirect_url: str, cookie: str) -> None:
        logger.info("Setting forum cookie in browser context ...")

        await context.add_cookies([
            {
                "name": self.endpoints.cookie_name,
                "value": cookie,
                "domain": urlparse(redirect_url).hostname,
                "path": "/",
                "httpOnly": True,
                "secure": True,
            }
        ])

        logger.info("Cookie set. Following portal redirect ...")
