"""
Base class for the per-resource API objects.
"""

from __future__ import annotations
from typing import Any, Dict, Optional, Union
from urllib.parse import quote

from ..transport.http import Transport


def segment(value: Union[str, int]) -> str:
    """URL-quote one path segment (emails, ids)."""
    return quote(str(value), safe="")


class ResourceApi:
    """
    Typed accessors for one resource family.

    Each method issues exactly one request through the shared transport and
    returns decoded records. Nothing is cached and no error is caught here;
    failures reach the caller exactly as the transport raised them.
    """

    def __init__(self, transport: Transport):
        self._transport = transport

    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self._transport.request("GET", path, params=params)

    async def _post(self, path: str, body: Any = None) -> Any:
        return await self._transport.request("POST", path, json=body)

    async def _put(self, path: str, body: Any = None) -> Any:
        return await self._transport.request("PUT", path, json=body)

    async def _delete(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return await self._transport.request("DELETE", path, params=params)


__all__ = ["ResourceApi", "segment"]
