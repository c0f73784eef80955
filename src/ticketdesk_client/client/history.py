"""
Purchase history endpoints (`/api/history`).
"""

from __future__ import annotations
from typing import Any, List

from .base import ResourceApi, segment
from ..models import (
    CartItem, CheckoutItem, HistoryEvent, HistoryEventDetail, QueueItem,
    decode, decode_list,
)


HISTORY_PATH = "/api/history"


class HistoryApi(ResourceApi):
    """Finished event runs and their append-only pipeline records."""

    async def list(self) -> List[HistoryEvent]:
        return decode_list(HistoryEvent, await self._get(HISTORY_PATH))

    async def get(self, history_id: str) -> HistoryEventDetail:
        return decode(HistoryEventDetail, await self._get(f"{HISTORY_PATH}/{segment(history_id)}"))

    async def delete(self, history_id: str) -> Any:
        return await self._delete(f"{HISTORY_PATH}/{segment(history_id)}")

    async def queue(self, history_id: str) -> List[QueueItem]:
        """Queue positions recorded during the run."""
        return decode_list(QueueItem, await self._get(f"{HISTORY_PATH}/{segment(history_id)}/queue"))

    async def carts(self, history_id: str) -> List[CartItem]:
        """Carts obtained during the run and how each ended."""
        return decode_list(CartItem, await self._get(f"{HISTORY_PATH}/{segment(history_id)}/carts"))

    async def checkouts(self, history_id: str) -> List[CheckoutItem]:
        """Checkout attempts made during the run."""
        return decode_list(CheckoutItem, await self._get(f"{HISTORY_PATH}/{segment(history_id)}/checkouts"))


__all__ = ["HistoryApi", "HISTORY_PATH"]
