"""
Event endpoints: event tasks, seat filters and live carts.
"""

from __future__ import annotations
from typing import Any, Dict, List, Union

from .base import ResourceApi, segment
from ..models import (
    AddEventPayload, CartedTicket, CheckedOutTicket, EventDetail, EventFilter,
    EventSummary, decode, decode_list, filters_from_payload, unwrap,
)
from ..runtime.errors import DecodeError


class EventsApi(ResourceApi):
    """
    Event task endpoints.

    The backend calls a target event a task; `/event/{id}` wraps its
    detail in a `task` field.
    """

    async def list(self) -> Dict[str, EventSummary]:
        """
        Fetch the event listing.

        Returns:
            Mapping of event id to summary row
        """
        payload = await self._get("/events")
        if payload is None:
            return {}
        if not isinstance(payload, dict):
            raise DecodeError(f"Expected an object of events, got {type(payload).__name__}",
                              payload=payload)

        events: Dict[str, EventSummary] = {}
        for event_id, data in payload.items():
            summary = decode(EventSummary, data)
            if summary.id is None:
                summary.id = str(event_id)
            events[str(event_id)] = summary
        return events

    async def get(self, event_id: str) -> EventDetail:
        """Fetch the full detail of one event."""
        payload = await self._get(f"/event/{segment(event_id)}")
        return decode(EventDetail, unwrap(payload, "task"))

    async def add(self, payload: Union[AddEventPayload, Dict[str, Any]]) -> Any:
        if isinstance(payload, dict):
            payload = AddEventPayload.model_validate(payload)
        return await self._post("/event", payload.to_payload())

    async def delete(self, event_id: str) -> Any:
        return await self._delete("/event", params={"id": event_id})

    async def start_carting(self, event_id: str) -> Any:
        return await self._post(f"/event/{segment(event_id)}/carting/start")

    async def start_availability(self, event_id: str) -> Any:
        return await self._post(f"/event/{segment(event_id)}/availability/start")

    async def enable_qb(self, event_id: str) -> Any:
        """Enable queue bypass for an event."""
        return await self._post(f"/events/{segment(event_id)}/enable-qb")


class FiltersApi(ResourceApi):
    """Seat filters attached to an event."""

    async def list(self, event_id: str) -> List[EventFilter]:
        payload = await self._get(f"/event/{segment(event_id)}/filters")
        return filters_from_payload(unwrap(payload, "filters"))

    async def add(self, event_id: str, event_filter: EventFilter) -> Any:
        return await self._post(f"/event/{segment(event_id)}/filters", event_filter.to_payload())

    async def update(self, event_id: str, event_filter: EventFilter) -> Any:
        """Replace an existing filter; the filter must carry its id."""
        if not event_filter.id:
            raise ValueError("Filter id is required for update")
        body = event_filter.to_payload()
        body["id"] = event_filter.id
        return await self._post(f"/event/{segment(event_id)}/filters/{segment(event_filter.id)}", body)

    async def delete(self, event_id: str, filter_id: str) -> Any:
        return await self._delete(f"/event/{segment(event_id)}/filters/{segment(filter_id)}")

    async def reorder(self, event_id: str, filter_ids: List[str]) -> Any:
        """Set filter priority to the given id order."""
        return await self._post(f"/event/{segment(event_id)}/filters/reorder", {"order": list(filter_ids)})

    async def drop_non_matching(self, event_id: str) -> Any:
        """Drop held carts that no longer match any filter."""
        return await self._get(f"/event/{segment(event_id)}/filters/drop")

    async def reset(self, event_id: str) -> Any:
        return await self._delete(f"/events/{segment(event_id)}/filters")


class CartsApi(ResourceApi):
    """Live carts and checkouts of an event in progress."""

    async def list(self, event_id: str) -> List[CartedTicket]:
        payload = await self._get(f"/event/{segment(event_id)}/carts")
        return decode_list(CartedTicket, unwrap(payload, "carts"))

    async def drop(self, event_id: str, cart_id: str) -> Any:
        return await self._get(f"/event/{segment(event_id)}/cart/{segment(cart_id)}/drop")

    async def checkout(self, event_id: str, cart_id: str) -> Any:
        return await self._get(f"/event/{segment(event_id)}/cart/{segment(cart_id)}/checkout")

    async def checkouts(self, event_id: str) -> List[CheckedOutTicket]:
        payload = await self._get(f"/event/{segment(event_id)}/checkouts")
        return decode_list(CheckedOutTicket, unwrap(payload, "checkouts"))


__all__ = ["EventsApi", "FiltersApi", "CartsApi"]
