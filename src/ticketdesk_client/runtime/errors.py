"""
TicketDesk Error Model

This module provides the error handling framework for the TicketDesk client.
Every failure raised by the transport or the resource client is one of the
classes below, so the classifier sees the original failure shape.
"""

from __future__ import annotations
from typing import Optional, Dict, Any
from enum import Enum


class ErrorKind(Enum):
    """Coarse error taxonomy used by the sync layer."""

    VALIDATION = "validation"  # Missing required input, no network call made
    TRANSPORT = "transport"    # Network unreachable, timeout
    BACKEND = "backend"        # Non-2xx response from the backend
    UNKNOWN = "unknown"        # Anything else


class TicketDeskError(Exception):
    """
    Base class for all TicketDesk errors.

    Carries the HTTP status and the decoded response payload (when there was
    a response) so callers can classify the failure without string parsing.
    """

    kind: ErrorKind = ErrorKind.UNKNOWN

    def __init__(self, message: str, status: Optional[int] = None,
                 payload: Any = None, cause: Optional[BaseException] = None):
        """
        Initialize a TicketDesk error.

        Args:
            message: Error message
            status: HTTP status code, if a response was received
            payload: Decoded response body, if any
            cause: Underlying exception that caused this error
        """
        super().__init__(message)
        self.message = message
        self.status = status
        self.payload = payload
        self.cause = cause

    def __str__(self) -> str:
        """String representation of the error."""
        parts = [f"[{self.kind.name}] {self.message}"]
        if self.status is not None:
            parts.append(f"Status: {self.status}")
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)

    @property
    def backend_message(self) -> Optional[str]:
        """Message supplied by the backend in the response payload, if any."""
        return payload_message(self.payload)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        result: Dict[str, Any] = {
            "kind": self.kind.value,
            "message": self.message,
        }
        if self.status is not None:
            result["status"] = self.status
        if self.payload is not None:
            result["payload"] = self.payload
        if self.cause:
            result["cause"] = str(self.cause)
        return result


class ValidationError(TicketDeskError):
    """Required input missing or malformed; raised before any network call."""

    kind = ErrorKind.VALIDATION


class TransportError(TicketDeskError):
    """Network-related errors (connection refused, DNS, reset)."""

    kind = ErrorKind.TRANSPORT


class RequestTimeoutError(TransportError):
    """Request timeouts."""


class BackendError(TicketDeskError):
    """Non-2xx response from the backend."""

    kind = ErrorKind.BACKEND

    def __init__(self, message: str, status: int, payload: Any = None,
                 cause: Optional[BaseException] = None):
        super().__init__(message, status=status, payload=payload, cause=cause)


class UnknownError(TicketDeskError):
    """Failures that match none of the other kinds."""

    kind = ErrorKind.UNKNOWN


class DecodeError(UnknownError):
    """Response body did not match the expected record shape."""


def payload_message(payload: Any) -> Optional[str]:
    """Return the backend's own error text from a response body, if present."""
    if not isinstance(payload, dict):
        return None
    for key in ("error", "message", "detail"):
        value = payload.get(key)
        if isinstance(value, str) and value.strip():
            return value
    return None


def error_from_response(status: int, payload: Any = None,
                        reason: Optional[str] = None) -> BackendError:
    """
    Create a BackendError from a non-2xx response.

    Args:
        status: HTTP status code
        payload: Decoded response body (dict, str or None)
        reason: HTTP reason phrase

    Returns:
        BackendError carrying the status and payload unchanged
    """
    message = payload_message(payload)
    if message is None:
        message = f"HTTP {status}: {reason}" if reason else f"HTTP {status}"
    return BackendError(message, status=status, payload=payload)


__all__ = [
    "ErrorKind",
    "TicketDeskError",
    "ValidationError",
    "TransportError",
    "RequestTimeoutError",
    "BackendError",
    "UnknownError",
    "DecodeError",
    "payload_message",
    "error_from_response",
]
