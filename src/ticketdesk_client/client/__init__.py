"""
Resource client for the TicketDesk backend.
"""

from .base import ResourceApi, segment
from .accounts import AccountsApi, ProfilesApi
from .events import EventsApi, FiltersApi, CartsApi
from .presales import PresalesApi, EventPresalesApi
from .history import HistoryApi
from .facade import TicketDeskClient

__all__ = [
    "ResourceApi",
    "segment",
    "AccountsApi",
    "ProfilesApi",
    "EventsApi",
    "FiltersApi",
    "CartsApi",
    "PresalesApi",
    "EventPresalesApi",
    "HistoryApi",
    "TicketDeskClient",
]
