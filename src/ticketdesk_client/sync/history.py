"""
One-shot fetchers for the records of a finished event run.

Each fetcher loads once when started and again on every explicit
`refresh()`; none of them poll. Fetches go through the retry policy, and an
empty event id fails locally without touching the network.
"""

from __future__ import annotations
from abc import abstractmethod
from typing import Generic, List, Optional, TypeVar

from .base import Synchronizer
from ..client import TicketDeskClient
from ..models import CartItem, CheckoutItem, HistoryEventDetail, QueueItem
from ..recovery.retry import RetryOptions, SleepFunc, with_retry


T = TypeVar("T")

EVENT_ID_REQUIRED = "Event ID is required"


class HistoryRecordFetcher(Synchronizer[T], Generic[T]):
    """
    Base for history fetchers.

    Subclasses implement `_request()`, the single client call to retry.
    """

    def __init__(self, client: TicketDeskClient, event_id: str, initial: T, *,
                 retry_options: Optional[RetryOptions] = None,
                 sleep: Optional[SleepFunc] = None,
                 autoload: bool = True):
        super().__init__(initial)
        self.client = client
        self.event_id = event_id
        self.retry_options = retry_options or client.config.retry_options()
        self._sleep = sleep
        self._autostart(autoload)

    @abstractmethod
    async def _request(self) -> T:
        """Issue the one client call for this record type."""

    def _precondition_error(self) -> Optional[str]:
        return None if self.event_id else EVENT_ID_REQUIRED

    async def _fetch(self) -> T:
        self._check_preconditions()
        return await with_retry(self._request, self.retry_options, sleep=self._sleep)


class QueueDataFetcher(HistoryRecordFetcher[List[QueueItem]]):
    """Queue positions recorded for a run."""

    fallback_message = "Failed to load queue data"

    def __init__(self, client: TicketDeskClient, event_id: str, **kwargs):
        super().__init__(client, event_id, [], **kwargs)

    async def _request(self) -> List[QueueItem]:
        return await self.client.history.queue(self.event_id)


class CartDataFetcher(HistoryRecordFetcher[List[CartItem]]):
    """Carts obtained during a run."""

    fallback_message = "Failed to load cart data"

    def __init__(self, client: TicketDeskClient, event_id: str, **kwargs):
        super().__init__(client, event_id, [], **kwargs)

    async def _request(self) -> List[CartItem]:
        return await self.client.history.carts(self.event_id)


class CheckoutDataFetcher(HistoryRecordFetcher[List[CheckoutItem]]):
    """Checkout attempts made during a run."""

    fallback_message = "Failed to load checkout data"

    def __init__(self, client: TicketDeskClient, event_id: str, **kwargs):
        super().__init__(client, event_id, [], **kwargs)

    async def _request(self) -> List[CheckoutItem]:
        return await self.client.history.checkouts(self.event_id)


class HistoryDetailFetcher(HistoryRecordFetcher[Optional[HistoryEventDetail]]):
    """Headline detail of a run."""

    fallback_message = "Failed to load event details"

    def __init__(self, client: TicketDeskClient, event_id: str, **kwargs):
        super().__init__(client, event_id, None, **kwargs)

    async def _request(self) -> HistoryEventDetail:
        return await self.client.history.get(self.event_id)


__all__ = [
    "EVENT_ID_REQUIRED",
    "HistoryRecordFetcher",
    "QueueDataFetcher",
    "CartDataFetcher",
    "CheckoutDataFetcher",
    "HistoryDetailFetcher",
]
