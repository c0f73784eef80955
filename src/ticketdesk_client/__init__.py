"""
TicketDesk Python Client

Async client and data-synchronization hooks for the ticket-purchasing
automation console's backend.
"""

# Configuration
from .config import ClientConfig, ENDPOINTS, resolve_endpoint

# Errors and display classification
from .runtime.errors import (
    ErrorKind, TicketDeskError, ValidationError, TransportError, RequestTimeoutError,
    BackendError, UnknownError, DecodeError
)
from .runtime.classifier import handle_api_error, classify_error

# Retry
from .recovery import RetryOptions, RetryPolicy, ExponentialBackoff, with_retry

# Transport and resource client
from .transport import HttpTransport
from .client import TicketDeskClient

# Sync hooks
from .sync import (
    LoadState, CollectionState, PollerState,
    AccountsCollection, ProfilesCollection, EventsCollection, PresaleCodeSetsCollection,
    EventHistoryCollection, EventFiltersCollection, ProfileDetailSync, EventPresaleCodesSync,
    EventDetailPoller,
    QueueDataFetcher, CartDataFetcher, CheckoutDataFetcher, HistoryDetailFetcher
)

# Preferences
from .preferences import ThemeMode, ThemeContext, ThemePreferenceStore, sync_theme_with_local

__version__ = "1.0.0"

__all__ = [
    "ClientConfig",
    "ENDPOINTS",
    "resolve_endpoint",
    "ErrorKind",
    "TicketDeskError",
    "ValidationError",
    "TransportError",
    "RequestTimeoutError",
    "BackendError",
    "UnknownError",
    "DecodeError",
    "handle_api_error",
    "classify_error",
    "RetryOptions",
    "RetryPolicy",
    "ExponentialBackoff",
    "with_retry",
    "HttpTransport",
    "TicketDeskClient",
    "LoadState",
    "CollectionState",
    "PollerState",
    "AccountsCollection",
    "ProfilesCollection",
    "EventsCollection",
    "PresaleCodeSetsCollection",
    "EventHistoryCollection",
    "EventFiltersCollection",
    "ProfileDetailSync",
    "EventPresaleCodesSync",
    "EventDetailPoller",
    "QueueDataFetcher",
    "CartDataFetcher",
    "CheckoutDataFetcher",
    "HistoryDetailFetcher",
    "ThemeMode",
    "ThemeContext",
    "ThemePreferenceStore",
    "sync_theme_with_local",
    "__version__"
]
