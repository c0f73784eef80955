"""
Client-side data synchronization hooks.

Async objects that keep backend data in sync for one consumer: collection
synchronizers (full reload after every mutation), the live event detail
poller, and the one-shot history record fetchers.
"""

from .state import CollectionState, PollerState, LoadState
from .base import Hook, Synchronizer
from .collection import (
    CollectionSynchronizer, AccountsCollection, ProfilesCollection, EventsCollection,
    PresaleCodeSetsCollection, EventHistoryCollection, EventFiltersCollection,
    ProfileDetailSync, EventPresaleCodesSync
)
from .poller import EventDetailPoller
from .history import (
    EVENT_ID_REQUIRED, HistoryRecordFetcher, QueueDataFetcher, CartDataFetcher,
    CheckoutDataFetcher, HistoryDetailFetcher
)

__all__ = [
    "CollectionState",
    "PollerState",
    "LoadState",
    "Hook",
    "Synchronizer",
    "CollectionSynchronizer",
    "AccountsCollection",
    "ProfilesCollection",
    "EventsCollection",
    "PresaleCodeSetsCollection",
    "EventHistoryCollection",
    "EventFiltersCollection",
    "ProfileDetailSync",
    "EventPresaleCodesSync",
    "EventDetailPoller",
    "EVENT_ID_REQUIRED",
    "HistoryRecordFetcher",
    "QueueDataFetcher",
    "CartDataFetcher",
    "CheckoutDataFetcher",
    "HistoryDetailFetcher"
]
