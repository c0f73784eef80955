"""
HTTP transport layer.
"""

from .http import Transport, TransportClosed, ConnectionStats, HttpTransport, decode_body

__all__ = [
    "Transport",
    "TransportClosed",
    "ConnectionStats",
    "HttpTransport",
    "decode_body"
]
