"""
Live detail poller for one event.

Loads the event once, then re-reads it on a fixed interval for as long as
the consumer keeps it open. A failed tick keeps the last good snapshot and
reports only the first failure of an outage, so a sustained outage does not
re-alert on every tick.
"""

import asyncio
import logging
import time
from typing import List, Optional

from .base import Hook
from .state import LoadState, PollerState
from ..client import TicketDeskClient
from ..models import EventAccountView, EventDetail, EventInfo, account_views, event_info
from ..recovery.retry import SleepFunc
from ..runtime.classifier import classify_error
from ..runtime.errors import ErrorKind


logger = logging.getLogger(__name__)

LOAD_ERROR_MESSAGE = "Failed to load event details. Please try again later."
POLL_ERROR_MESSAGE = "Failed to refresh event data. Will keep trying..."
STALE_ERROR_MESSAGE = "Event data may be out of date: the last {failures} refreshes failed."


class EventDetailPoller(Hook):
    """
    Keeps an EventDetail snapshot fresh by polling.

    States: UNINITIALIZED -> LOADING -> POLLING -> STOPPED, with
    LOAD_FAILED when the first load fails (`refresh()` retries it).

    Changing the event id cancels the running timer synchronously and bumps
    a generation counter; any response belonging to an older generation is
    dropped on arrival.

    Example:
        ```python
        async with EventDetailPoller(client, "evt-1") as poller:
            print(poller.event_info, len(poller.accounts_array))
        ```
    """

    def __init__(self, client: TicketDeskClient, event_id: str, *,
                 interval: Optional[float] = None,
                 escalate_after_failures: Optional[int] = None,
                 sleep: Optional[SleepFunc] = None,
                 autoload: bool = True):
        """
        Initialize the poller.

        Args:
            client: API client
            event_id: Event to watch; an empty id waits for set_event_id()
            interval: Seconds between ticks (defaults to the client config)
            escalate_after_failures: Re-alert once with a staleness message
                after this many consecutive failed ticks (None disables it)
            sleep: Awaitable sleep function, for tests
            autoload: Start automatically when created inside a running loop
        """
        super().__init__()
        if interval is None:
            interval = client.config.poll_interval
        if interval <= 0:
            raise ValueError(f"interval must be > 0, got {interval}")
        if escalate_after_failures is not None and escalate_after_failures < 1:
            raise ValueError("escalate_after_failures must be >= 1")

        self.client = client
        self.event_id = event_id
        self.interval = interval
        self.escalate_after_failures = escalate_after_failures
        self._sleep = sleep or asyncio.sleep

        self.state: LoadState[Optional[EventDetail]] = LoadState(data=None)
        self.status = PollerState.UNINITIALIZED
        self.consecutive_failures = 0
        self.last_success_at: Optional[float] = None
        self._escalated = False
        self._generation = 0
        self._task: Optional[asyncio.Task] = None
        self._loaded: Optional[asyncio.Event] = None

        self._autostart(autoload)

    # =========================================================================
    # State accessors
    # =========================================================================

    @property
    def data(self) -> Optional[EventDetail]:
        return self.state.data

    @property
    def is_loading(self) -> bool:
        return self.state.is_loading

    @property
    def error(self) -> Optional[str]:
        return self.state.error

    @property
    def error_kind(self) -> Optional[ErrorKind]:
        return self.state.error_kind

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def accounts_array(self) -> List[EventAccountView]:
        """Accounts of the current snapshot, each carrying its key as `id`."""
        return account_views(self.state.data)

    @property
    def event_info(self) -> Optional[EventInfo]:
        return event_info(self.state.data)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def _start(self) -> Optional[asyncio.Task]:
        if not self.event_id:
            self._loaded_event().set()
            return None
        self._task = self._spawn(self._run(self._generation))
        return self._task

    def _loaded_event(self) -> asyncio.Event:
        # Created on first use so it belongs to the loop that awaits it
        if self._loaded is None:
            self._loaded = asyncio.Event()
        return self._loaded

    async def ready(self) -> None:
        """Wait for the first load of the current event id."""
        self.mount()
        await self._loaded_event().wait()

    def _cancel_timer(self) -> None:
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    def _reset(self) -> None:
        self._generation += 1
        self._loaded = None
        self.consecutive_failures = 0
        self._escalated = False

    def set_event_id(self, event_id: str) -> None:
        """
        Switch to another event.

        The old timer is cancelled before this returns and the snapshot is
        cleared; the new event loads immediately if the poller is mounted.
        """
        if event_id == self.event_id:
            return
        self._cancel_timer()
        self._reset()
        self.event_id = event_id
        self.state = LoadState(data=None)
        self.last_success_at = None
        self.status = PollerState.UNINITIALIZED
        logger.debug(f"Poller switched to event {event_id!r} (generation {self._generation})")

        if self._mounted and not self._closed:
            self._initial = self._start()

    async def refresh(self) -> bool:
        """
        Restart from a fresh load of the current event.

        Returns:
            True if the load succeeded and polling resumed
        """
        if self._closed or not self.event_id:
            return False
        self._cancel_timer()
        self._reset()
        self._mounted = True
        self._initial = self._start()
        await self._loaded_event().wait()
        return self.status == PollerState.POLLING

    def stop(self) -> None:
        """Stop polling. Synchronous and idempotent; the snapshot is kept."""
        if self.status == PollerState.STOPPED:
            return
        self._cancel_timer()
        self._generation += 1
        self._loaded_event().set()
        self.state.is_loading = False
        self.status = PollerState.STOPPED
        logger.debug(f"Poller for event {self.event_id!r} stopped")

    async def aclose(self) -> None:
        """Stop and wait for the cancelled timer to unwind."""
        self.stop()
        await super().close()

    async def close(self) -> None:
        await self.aclose()

    # =========================================================================
    # Loading and ticking
    # =========================================================================

    async def _run(self, generation: int) -> None:
        if not await self._load(generation):
            return
        while generation == self._generation:
            await self._sleep(self.interval)
            await self._poll_once(generation)

    async def _load(self, generation: int) -> bool:
        self.status = PollerState.LOADING
        self.state.is_loading = True
        self.state.error = None
        self.state.error_kind = None

        try:
            detail = await self.client.events.get(self.event_id)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            if generation != self._generation:
                return False
            self.state.error = LOAD_ERROR_MESSAGE
            self.state.error_kind = classify_error(e)
            self.status = PollerState.LOAD_FAILED
            logger.warning(f"Failed to load event {self.event_id!r}: {e}")
            return False
        else:
            if generation != self._generation:
                return False
            self._apply(detail)
            return True
        finally:
            if generation == self._generation:
                self.state.is_loading = False
                self._loaded_event().set()

    def _apply(self, detail: EventDetail) -> None:
        self.state.data = detail
        self.state.error = None
        self.state.error_kind = None
        self.consecutive_failures = 0
        self._escalated = False
        self.last_success_at = time.time()
        self.status = PollerState.POLLING

    async def _poll_once(self, generation: int) -> bool:
        try:
            detail = await self.client.events.get(self.event_id)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            if generation != self._generation:
                return False
            self._record_failure(e)
            return False

        if generation != self._generation:
            logger.debug(f"Dropping response for generation {generation}")
            return False
        self._apply(detail)
        return True

    def _record_failure(self, error: Exception) -> None:
        self.consecutive_failures += 1
        self.state.error_kind = classify_error(error)

        if self.state.error is None:
            self.state.error = POLL_ERROR_MESSAGE
            logger.warning(f"Refresh of event {self.event_id!r} failed: {error}")
        elif (self.escalate_after_failures is not None
              and not self._escalated
              and self.consecutive_failures >= self.escalate_after_failures):
            self._escalated = True
            self.state.error = STALE_ERROR_MESSAGE.format(failures=self.consecutive_failures)
            logger.warning(f"Event {self.event_id!r} stale after {self.consecutive_failures} failed refreshes")
        else:
            logger.debug(f"Suppressed refresh failure #{self.consecutive_failures}: {error}")

    async def tick(self) -> bool:
        """
        Refresh immediately, outside the timer.

        Without a snapshot this performs a full load instead.

        Returns:
            True if the snapshot was replaced
        """
        if not self.event_id or self.status == PollerState.STOPPED:
            return False
        if self.state.data is None:
            return await self.refresh()
        return await self._poll_once(self._generation)


__all__ = [
    "EventDetailPoller",
    "LOAD_ERROR_MESSAGE",
    "POLL_ERROR_MESSAGE",
    "STALE_ERROR_MESSAGE",
]
