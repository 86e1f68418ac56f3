"""Chromium installation for browser authentication on CI runners."""
import asyncio
import logging
import os
import sys

from cfxupload.upload.exceptions import ClassifiedError, ErrorKind

logger = logging.getLogger(__name__)


async def prepare_browser() -> None:
    """Install Playwright's Chromium build when running on a GitHub runner."""
    if os.getenv("RUNNER_TEMP") is None:
        logger.debug("Running locally, skipping Playwright browser setup.")
        return

    logger.info("Installing Chromium for Playwright...")
    process = await asyncio.create_subprocess_exec(
        sys.executable, "-m", "playwright", "install", "chromium"
    )
    returncode = await process.wait()

    if returncode != 0:
        raise ClassifiedError(
            ErrorKind.AUTH,
            f"Failed to install Chromium for browser authentication (exit code {returncode}).",
            False,
            "Run 'playwright install chromium' on the runner or use auth-mode=http.",
        )
