"""
Error classification for display.

The single place where a raw failure becomes user-presentable text. Hooks
store the returned string in their state; nothing else formats error text.
"""

from __future__ import annotations
import asyncio
from typing import Any

import aiohttp

from .errors import ErrorKind, TicketDeskError, ValidationError, payload_message


DEFAULT_FALLBACK_MESSAGE = "An error occurred"

STATUS_MESSAGES = {
    400: "Invalid request data",
    401: "Unauthorized, please login again",
    403: "You do not have permission to access this resource",
    404: "The requested resource was not found",
    500: "Server error, please try again later",
}


def status_message(status: int) -> str:
    """Generic text for an HTTP status code."""
    return STATUS_MESSAGES.get(status, f"Error ({status})")


def handle_api_error(error: Any, fallback_message: str = DEFAULT_FALLBACK_MESSAGE) -> str:
    """
    Convert any caught failure into a display string.

    Preference order: backend-supplied message, then a status-coded generic
    message, then a local validation message, then the fallback.

    Args:
        error: Caught failure (any value, not necessarily an exception)
        fallback_message: Text to use when nothing better is available

    Returns:
        Display string; never raises
    """
    try:
        if isinstance(error, TicketDeskError):
            backend = payload_message(error.payload)
            if backend:
                return backend
            if error.status is not None:
                return status_message(error.status)
            if isinstance(error, ValidationError) and error.message:
                return error.message
            return fallback_message

        # Raw aiohttp status errors that escaped the transport wrapper
        if isinstance(error, aiohttp.ClientResponseError):
            return status_message(error.status)

        return fallback_message
    except Exception:
        return fallback_message


def classify_error(error: Any) -> ErrorKind:
    """Map a failure to its ErrorKind."""
    if isinstance(error, TicketDeskError):
        return error.kind
    if isinstance(error, aiohttp.ClientResponseError):
        return ErrorKind.BACKEND
    if isinstance(error, (aiohttp.ClientError, asyncio.TimeoutError, ConnectionError)):
        return ErrorKind.TRANSPORT
    return ErrorKind.UNKNOWN


__all__ = [
    "DEFAULT_FALLBACK_MESSAGE",
    "STATUS_MESSAGES",
    "status_message",
    "handle_api_error",
    "classify_error",
]
