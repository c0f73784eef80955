"""
Backend record models.

Every record is a pydantic model with explicit nullable fields.
"""

from .base import Record, decode, decode_list, unwrap, keyed
from .accounts import Account, CartedInfo, CheckedOutInfo
from .events import (
    TicketType, EventDetail, EventAccountView, EventInfo, EventSummary, EventTableRow,
    AddEventPayload, account_views, event_info,
)
from .profiles import Profile, ProfileDetail
from .presales import (
    PresaleCodeSet, PresaleCodeSetDetail, PresaleCodeSetPayload, PresaleCode,
    presale_codes_from_payload,
)
from .history import (
    HistoryStatus, CartResult, CheckoutResult,
    HistoryEvent, HistoryEventDetail, QueueItem, CartItem, CheckoutItem,
)
from .filters import EventFilter, filters_from_payload
from .carts import CartedTicket, CheckedOutTicket

__all__ = [
    "Record",
    "decode",
    "decode_list",
    "unwrap",
    "keyed",
    "Account",
    "CartedInfo",
    "CheckedOutInfo",
    "TicketType",
    "EventDetail",
    "EventAccountView",
    "EventInfo",
    "account_views",
    "event_info",
    "EventSummary",
    "EventTableRow",
    "AddEventPayload",
    "Profile",
    "ProfileDetail",
    "PresaleCodeSet",
    "PresaleCodeSetDetail",
    "PresaleCodeSetPayload",
    "PresaleCode",
    "presale_codes_from_payload",
    "HistoryStatus",
    "CartResult",
    "CheckoutResult",
    "HistoryEvent",
    "HistoryEventDetail",
    "QueueItem",
    "CartItem",
    "CheckoutItem",
    "EventFilter",
    "filters_from_payload",
    "CartedTicket",
    "CheckedOutTicket",
]
