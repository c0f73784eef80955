"""
Collection synchronizers.

Each class keeps one backend collection in sync by full reloads. Mutations
(`add`, `remove`, ...) call the backend, and only on success await a full
reload; they return a bool and never raise.
"""

from __future__ import annotations
import asyncio
import logging
from abc import abstractmethod
from typing import Any, Dict, Generic, Hashable, Iterable, List, Optional, TypeVar, Union

from .base import Synchronizer
from ..client import TicketDeskClient
from ..models import (
    Account, AddEventPayload, EventFilter, EventSummary, EventTableRow, HistoryEvent,
    PresaleCode, PresaleCodeSet, PresaleCodeSetDetail, PresaleCodeSetPayload,
    Profile, ProfileDetail,
)
from ..recovery.retry import RetryOptions, SleepFunc, with_retry
from ..runtime.classifier import handle_api_error


logger = logging.getLogger(__name__)

K = TypeVar("K", bound=Hashable)
T = TypeVar("T")


class CollectionSynchronizer(Synchronizer[List[T]], Generic[K, T]):
    """
    Synchronizer over a list of keyed records.

    The collection is always replaced whole; there is no local patching.
    """

    def __init__(self, client: TicketDeskClient, *, autoload: bool = True):
        super().__init__([])
        self.client = client
        self._autostart(autoload)

    @abstractmethod
    def key_of(self, item: T) -> K:
        """Identity of an item within the collection."""

    @property
    def items(self) -> List[T]:
        return list(self.state.data)

    def get(self, key: K) -> Optional[T]:
        """Find an item by key in the last loaded collection."""
        for item in self.state.data:
            if self.key_of(item) == key:
                return item
        return None

    def keys(self) -> List[K]:
        return [self.key_of(item) for item in self.state.data]

    def __len__(self) -> int:
        return len(self.state.data)

    def __contains__(self, key: object) -> bool:
        return any(self.key_of(item) == key for item in self.state.data)


class AccountsCollection(CollectionSynchronizer[str, Account]):
    """All accounts, keyed by email."""

    fallback_message = "Failed to load accounts. Please try again later."

    async def _fetch(self) -> List[Account]:
        return await self.client.accounts.list()

    def key_of(self, item: Account) -> str:
        return item.email

    async def add(self, account_lines: Iterable[str]) -> bool:
        """Add accounts given as raw definition strings."""
        lines = list(account_lines)
        return await self._mutate("add accounts", lambda: self.client.accounts.add(lines))

    async def remove(self, email: str) -> bool:
        return await self._mutate("delete account", lambda: self.client.accounts.delete(email))


class ProfilesCollection(CollectionSynchronizer[str, Profile]):
    """All profiles, keyed by id."""

    fallback_message = "Failed to load profiles. Please try again later."

    async def _fetch(self) -> List[Profile]:
        return await self.client.profiles.list()

    def key_of(self, item: Profile) -> str:
        return item.id

    async def add(self, name: str) -> bool:
        return await self._mutate("add profile", lambda: self.client.profiles.add(name))

    async def remove(self, profile_id: str) -> bool:
        return await self._mutate("delete profile", lambda: self.client.profiles.delete(profile_id))


class EventsCollection(Synchronizer[Dict[str, EventSummary]]):
    """
    Event listing, keyed by event id.

    Also derives the flattened `table_rows` used by tabular consumers.
    """

    fallback_message = "Failed to load events. Please try again later."

    def __init__(self, client: TicketDeskClient, *, autoload: bool = True):
        super().__init__({})
        self.client = client
        self._autostart(autoload)

    async def _fetch(self) -> Dict[str, EventSummary]:
        return await self.client.events.list()

    @property
    def items(self) -> List[EventSummary]:
        return list(self.state.data.values())

    def get(self, event_id: str) -> Optional[EventSummary]:
        return self.state.data.get(event_id)

    def __len__(self) -> int:
        return len(self.state.data)

    def __contains__(self, event_id: object) -> bool:
        return event_id in self.state.data

    @property
    def table_rows(self) -> List[EventTableRow]:
        """One row per event, in listing order."""
        return [
            EventTableRow(
                id=summary.id or event_id,
                name=summary.display_name,
                date=summary.date,
                venue=summary.venue,
                accounts_count=summary.accounts,
            )
            for event_id, summary in self.state.data.items()
        ]

    async def add(self, payload: Union[AddEventPayload, Dict[str, Any]]) -> bool:
        return await self._mutate("add event", lambda: self.client.events.add(payload))

    async def remove(self, event_id: str) -> bool:
        return await self._mutate("delete event", lambda: self.client.events.delete(event_id))

    async def start_carting(self, event_id: str) -> bool:
        return await self._mutate("start carting", lambda: self.client.events.start_carting(event_id))

    async def start_availability(self, event_id: str) -> bool:
        return await self._mutate(
            "start availability checks", lambda: self.client.events.start_availability(event_id)
        )

    async def enable_qb(self, event_id: str) -> bool:
        return await self._mutate("enable queue bypass", lambda: self.client.events.enable_qb(event_id))


class PresaleCodeSetsCollection(CollectionSynchronizer[int, PresaleCodeSet]):
    """Named presale code sets, keyed by set id."""

    fallback_message = "Failed to load presale code sets. Please try again later."

    async def _fetch(self) -> List[PresaleCodeSet]:
        return await self.client.presales.list()

    def key_of(self, item: PresaleCodeSet) -> int:
        return item.id

    async def add(self, data: Union[PresaleCodeSetPayload, Dict[str, Any]]) -> bool:
        return await self._mutate("add presale code set", lambda: self.client.presales.add(data))

    async def update(self, set_id: int, data: Union[PresaleCodeSetPayload, Dict[str, Any]]) -> bool:
        """Replace a set's name and codes."""
        return await self._mutate(
            "update presale code set", lambda: self.client.presales.update(set_id, data)
        )

    async def remove(self, set_id: int) -> bool:
        return await self._mutate("delete presale code set", lambda: self.client.presales.delete(set_id))

    async def fetch_detail(self, set_id: int) -> Optional[PresaleCodeSetDetail]:
        """
        Fetch one set with its codes, outside the cached collection.

        Returns None on failure and records the message in
        `last_mutation_error`.
        """
        self.last_mutation_error = None
        try:
            return await self.client.presales.get(set_id)
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self.last_mutation_error = handle_api_error(
                e, "Failed to load presale code set details. Please try again."
            )
            logger.warning(f"Failed to load presale code set {set_id}: {e}")
            return None


class EventHistoryCollection(CollectionSynchronizer[str, HistoryEvent]):
    """
    Finished event runs, keyed by history id.

    Loads go through the retry policy. Deleting a run reloads the listing.
    """

    fallback_message = "Failed to load event history"

    def __init__(self, client: TicketDeskClient, *, retry_options: Optional[RetryOptions] = None,
                 sleep: Optional[SleepFunc] = None, autoload: bool = True):
        self.retry_options = retry_options or client.config.retry_options()
        self._sleep = sleep
        super().__init__(client, autoload=autoload)

    async def _fetch(self) -> List[HistoryEvent]:
        return await with_retry(self.client.history.list, self.retry_options, sleep=self._sleep)

    def key_of(self, item: HistoryEvent) -> str:
        return item.id

    async def remove(self, history_id: str) -> bool:
        return await self._mutate("delete event", lambda: self.client.history.delete(history_id))


class EventFiltersCollection(CollectionSynchronizer[str, EventFilter]):
    """Seat filters of one event, keyed by filter id."""

    fallback_message = "Failed to load filters"

    def __init__(self, client: TicketDeskClient, event_id: str, *, autoload: bool = True):
        self.event_id = event_id
        super().__init__(client, autoload=autoload)

    def _precondition_error(self) -> Optional[str]:
        return None if self.event_id else "Event ID is required"

    async def _fetch(self) -> List[EventFilter]:
        self._check_preconditions()
        return await self.client.filters.list(self.event_id)

    def key_of(self, item: EventFilter) -> str:
        return item.id or ""

    async def add(self, event_filter: EventFilter) -> bool:
        return await self._mutate("add filter", lambda: self.client.filters.add(self.event_id, event_filter))

    async def update(self, event_filter: EventFilter) -> bool:
        return await self._mutate(
            "update filter", lambda: self.client.filters.update(self.event_id, event_filter)
        )

    async def remove(self, filter_id: str) -> bool:
        return await self._mutate(
            "remove filter", lambda: self.client.filters.delete(self.event_id, filter_id)
        )

    async def reorder(self, filter_ids: Iterable[str]) -> bool:
        """Set filter priority to the given id order."""
        order = list(filter_ids)
        return await self._mutate(
            "reorder filters", lambda: self.client.filters.reorder(self.event_id, order)
        )

    async def drop_non_matching(self) -> bool:
        """Drop held carts that match no filter."""
        return await self._mutate(
            "drop non-matching carts", lambda: self.client.filters.drop_non_matching(self.event_id)
        )

    async def reset(self) -> bool:
        return await self._mutate("reset filters", lambda: self.client.filters.reset(self.event_id))


class ProfileDetailSync(Synchronizer[Optional[ProfileDetail]]):
    """One profile with its accounts."""

    fallback_message = "Failed to load profile details. Please try again later."

    def __init__(self, client: TicketDeskClient, profile_id: str, *, autoload: bool = True):
        super().__init__(None)
        self.client = client
        self.profile_id = profile_id
        self._autostart(autoload)

    def _precondition_error(self) -> Optional[str]:
        return None if self.profile_id else "Profile ID is required"

    async def _fetch(self) -> ProfileDetail:
        self._check_preconditions()
        return await self.client.profiles.get(self.profile_id)

    @property
    def accounts(self) -> List[Account]:
        return list(self.state.data.accounts) if self.state.data else []

    async def add_accounts(self, account_lines: Iterable[str]) -> bool:
        lines = list(account_lines)
        return await self._mutate(
            "add accounts", lambda: self.client.profiles.add_accounts(self.profile_id, lines)
        )

    async def remove_account(self, email: str) -> bool:
        return await self._mutate(
            "remove account", lambda: self.client.profiles.remove_account(self.profile_id, email)
        )


class EventPresaleCodesSync(CollectionSynchronizer[str, PresaleCode]):
    """
    Presale codes injected into one event.

    Mutations flip `is_submitting` for their duration.
    """

    fallback_message = "Failed to load presale codes. Please try again later."

    def __init__(self, client: TicketDeskClient, event_id: str, *, autoload: bool = True):
        self.event_id = event_id
        self.is_submitting = False
        super().__init__(client, autoload=autoload)

    def _precondition_error(self) -> Optional[str]:
        return None if self.event_id else "Event ID is required"

    async def _fetch(self) -> List[PresaleCode]:
        self._check_preconditions()
        return await self.client.event_presales.list(self.event_id)

    def key_of(self, item: PresaleCode) -> str:
        return item.code

    async def _mutate(self, action, operation) -> bool:
        self.is_submitting = True
        try:
            return await super()._mutate(action, operation)
        finally:
            self.is_submitting = False

    async def add(self, codes: Iterable[str], are_generic: bool = False) -> bool:
        """
        Inject codes into the event.

        Blank codes are dropped; if none remain nothing is sent and False
        is returned.
        """
        valid = [code.strip() for code in codes if code and code.strip()]
        if not valid:
            self.last_mutation_error = "No valid presale codes provided."
            return False
        return await self._mutate(
            "add presale codes",
            lambda: self.client.event_presales.add(self.event_id, valid, are_generic),
        )

    async def clear(self) -> bool:
        return await self._mutate("clear presale codes", lambda: self.client.event_presales.clear(self.event_id))

    async def recheck(self) -> bool:
        """Ask the backend to re-validate every code, then reload."""
        return await self._mutate(
            "recheck presale codes", lambda: self.client.event_presales.recheck(self.event_id)
        )


__all__ = [
    "CollectionSynchronizer",
    "AccountsCollection",
    "ProfilesCollection",
    "EventsCollection",
    "PresaleCodeSetsCollection",
    "EventHistoryCollection",
    "EventFiltersCollection",
    "ProfileDetailSync",
    "EventPresaleCodesSync",
]
