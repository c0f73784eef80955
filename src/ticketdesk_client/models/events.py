"""
Event records.

Matches the backend's task shapes: the `/events` listing is a mapping of
event id to summary row, and `/event/{id}` wraps the detail in `task`.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional

from pydantic import Field, field_validator

from .accounts import Account
from .base import Record


class TicketType(Record):
    """Ticket type offered by an event."""
    type_id: str
    event_id: Optional[str] = None
    name: Optional[str] = None


class EventDetail(Record):
    """
    Full snapshot of one target event.

    Owned by the backend; the client re-reads it on every poll tick.
    """
    event_url: Optional[str] = None
    event_id: Optional[str] = None
    name: Optional[str] = None
    date: Optional[str] = None
    map_id: Optional[str] = None
    eps_mgr: Optional[str] = None
    domain: Optional[str] = None
    host: Optional[str] = None
    venue: Optional[str] = None
    rows: List[str] = Field(default_factory=list)
    seats: Optional[List[str]] = None
    sections: List[str] = Field(default_factory=list)
    accounts: Dict[str, Account] = Field(default_factory=dict)
    min_seats: Optional[int] = None
    max_seats: Optional[int] = None
    delay: Optional[float] = None
    is_delay_enabled: bool = False
    ticket_types: List[TicketType] = Field(default_factory=list)
    has_queue: bool = False
    is_qb_enabled: bool = False

    @field_validator("rows", "sections", "ticket_types", mode="before")
    @classmethod
    def _null_list(cls, value: Any) -> Any:
        return [] if value is None else value

    @field_validator("accounts", mode="before")
    @classmethod
    def _null_accounts(cls, value: Any) -> Any:
        return {} if value is None else value


class EventAccountView(Account):
    """Account of an event, carrying the key it is stored under."""
    id: str


class EventInfo(Record):
    """Headline fields of an event."""
    name: Optional[str] = None
    date: Optional[str] = None
    venue: Optional[str] = None
    has_queue: bool = False
    is_qb_enabled: bool = False


def account_views(detail: Optional[EventDetail]) -> List[EventAccountView]:
    """Flatten an event's account mapping into a list, keeping each key as `id`."""
    if detail is None:
        return []
    return [
        EventAccountView.model_validate({**account.model_dump(), "id": account_id})
        for account_id, account in detail.accounts.items()
    ]


def event_info(detail: Optional[EventDetail]) -> Optional[EventInfo]:
    """Headline fields of an event snapshot, or None without one."""
    if detail is None:
        return None
    return EventInfo(
        name=detail.name,
        date=detail.date,
        venue=detail.venue,
        has_queue=detail.has_queue,
        is_qb_enabled=detail.is_qb_enabled,
    )


class EventSummary(Record):
    """One row of the `/events` listing."""
    id: Optional[str] = None
    event_name: Optional[str] = None
    name: Optional[str] = None
    date: Optional[str] = None
    venue: Optional[str] = None
    accounts: int = 0

    @field_validator("accounts", mode="before")
    @classmethod
    def _count_accounts(cls, value: Any) -> Any:
        """The listing sends either a count or the accounts themselves."""
        if value is None:
            return 0
        if isinstance(value, (dict, list)):
            return len(value)
        return value

    @property
    def display_name(self) -> str:
        return self.event_name or self.name or ""


class EventTableRow(Record):
    """Flattened event row for tabular display."""
    id: str
    name: str
    date: Optional[str] = None
    venue: Optional[str] = None
    accounts_count: int = 0


class AddEventPayload(Record):
    """Body of `POST /event`."""
    event_url: str
    min_amount_of_seats: int = Field(ge=1)
    max_amount_of_seats: int = Field(ge=1)
    number_of_accounts: int = Field(ge=1)
    delay: float = Field(default=0, ge=0)


__all__ = [
    "TicketType",
    "EventDetail",
    "EventAccountView",
    "EventInfo",
    "account_views",
    "event_info",
    "EventSummary",
    "EventTableRow",
    "AddEventPayload",
]
