"""
Error classification for the upload workflow.

Maps transport failures (aiohttp errors and timeouts), HTTP status failures
and plain exceptions onto a single ClassifiedError. Classification is pure and
idempotent: a ClassifiedError passes through untouched.
"""

import asyncio
from typing import Optional

import aiohttp

from .exceptions import ClassifiedError, ErrorKind

CHALLENGE_SIGNATURES = ("cloudflare", "challenge", "attention required")


def has_challenge_signature(message: str) -> bool:
    """Check whether a message looks like a Cloudflare challenge page"""
    normalized = message.lower()
    return any(signature in normalized for signature in CHALLENGE_SIGNATURES)


def _normalize_message(error: BaseException) -> str:
    message = str(error)
    return message if message else error.__class__.__name__


def _is_timeout(error: BaseException) -> bool:
    return isinstance(error, (asyncio.TimeoutError, TimeoutError))


def _is_transport_error(error: BaseException) -> bool:
    return isinstance(error, aiohttp.ClientError) or _is_timeout(error)


def _challenge_error(status_code: Optional[int] = None) -> ClassifiedError:
    return ClassifiedError(
        ErrorKind.AUTH,
        "Cloudflare challenge detected during authentication.",
        True,
        "Retry with auth-mode=browser.",
        status_code,
    )


def _classify_transport_error(error: BaseException, fallback_kind: ErrorKind) -> ClassifiedError:
    status: Optional[int] = getattr(error, "status", None)
    message = _normalize_message(error)

    if _is_timeout(error):
        return ClassifiedError(
            ErrorKind.TIMEOUT,
            "Request timed out while communicating with CFX portal.",
            True,
            "Increase request-timeout-ms or retry later.",
        )

    if status in (401, 403):
        return ClassifiedError(
            ErrorKind.AUTH,
            f"Authentication failed with status {status}.",
            False,
            "Verify cookie value. If this persists, run with auth-mode=browser.",
            status,
        )

    if status is not None and (status == 429 or status >= 500):
        return ClassifiedError(
            ErrorKind.NETWORK,
            f"Transient portal error with status {status}.",
            True,
            "Retry the upload. If it keeps failing, increase max-retries.",
            status,
        )

    if status is not None and status >= 400:
        return ClassifiedError(
            fallback_kind,
            f"Portal request failed with status {status}.",
            False,
            "Check inputs and inspect debug logs for request context.",
            status,
        )

    if has_challenge_signature(message):
        return _challenge_error(status)

    return ClassifiedError(
        ErrorKind.NETWORK,
        message,
        True,
        "Retry the operation and verify network connectivity.",
        status,
    )


def classify_error(error: BaseException, fallback_kind: ErrorKind = ErrorKind.UNKNOWN) -> ClassifiedError:
    """
    Convert any raised failure into a ClassifiedError.

    Args:
        error: The exception to classify
        fallback_kind: Kind used for non-transport errors and unmapped 4xx

    Returns:
        The error itself if it is already classified, otherwise a new
        ClassifiedError
    """
    if isinstance(error, ClassifiedError):
        return error

    fallback_kind = ErrorKind(fallback_kind)

    if _is_transport_error(error):
        return _classify_transport_error(error, fallback_kind)

    message = _normalize_message(error)

    if has_challenge_signature(message):
        return _challenge_error()

    return ClassifiedError(
        fallback_kind,
        message,
        False,
        "Inspect debug logs for more details.",
    )


def format_error_for_user(error: BaseException) -> str:
    """Render a failure as a single '[kind] message Hint: suggestion' line"""
    classified = classify_error(error)
    return f"[{classified.kind.value}] {classified.message} Hint: {classified.suggestion}"
