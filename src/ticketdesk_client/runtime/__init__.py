"""
Runtime error taxonomy and the display-message classifier.
"""

from .errors import (
    ErrorKind, TicketDeskError, ValidationError, TransportError, RequestTimeoutError,
    BackendError, UnknownError, DecodeError, payload_message, error_from_response
)
from .classifier import (
    DEFAULT_FALLBACK_MESSAGE, STATUS_MESSAGES, status_message, handle_api_error, classify_error
)

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
    "DEFAULT_FALLBACK_MESSAGE",
    "STATUS_MESSAGES",
    "status_message",
    "handle_api_error",
    "classify_error"
]
