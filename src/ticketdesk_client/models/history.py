"""
Purchase history records.

Queue, cart and checkout items are append-only: the backend never rewrites
a recorded item, it only adds new ones.
"""

from __future__ import annotations
from enum import Enum
from typing import Optional, Union

from pydantic import field_validator

from .base import Record


class HistoryStatus(str, Enum):
    COMPLETED = "completed"
    ARCHIVED = "archived"


class CartResult(str, Enum):
    CHECKEDOUT = "checkedout"
    DROPPED = "dropped"
    TIMEDOUT = "timedout"


class CheckoutResult(str, Enum):
    CONFIRMED = "confirmed"
    PROCESSING = "processing"
    VERIFIED = "verified"


class HistoryEvent(Record):
    """One finished event run."""
    id: str
    name: Optional[str] = None
    date: Optional[str] = None
    venue: Optional[str] = None
    accounts: int = 0

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, value: Union[str, int]) -> str:
        return str(value)


class HistoryEventDetail(HistoryEvent):
    """History event with its description and archive status."""
    description: Optional[str] = None
    status: Optional[HistoryStatus] = None
    created_at: Optional[str] = None


class QueueItem(Record):
    """Queue position observed for an account."""
    email: str
    password: Optional[str] = None
    queue_position: Optional[str] = None
    timestamp: Optional[str] = None


class CartItem(Record):
    """Cart obtained by an account and how it ended."""
    email: str
    password: Optional[str] = None
    section: Optional[str] = None
    row: Optional[str] = None
    price: Optional[str] = None
    result: CartResult
    timestamp: Optional[str] = None


class CheckoutItem(Record):
    """Checkout attempt and its order state."""
    email: str
    password: Optional[str] = None
    order_id: Optional[str] = None
    section: Optional[str] = None
    row: Optional[str] = None
    price: Optional[str] = None
    result: CheckoutResult
    timestamp: Optional[str] = None


__all__ = [
    "HistoryStatus",
    "CartResult",
    "CheckoutResult",
    "HistoryEvent",
    "HistoryEventDetail",
    "QueueItem",
    "CartItem",
    "CheckoutItem",
]
