"""
Seat filter records.

The backend returns an event's filters as an object keyed by filter id;
`filters_from_payload` flattens that into a list that carries the id.
"""

from __future__ import annotations
from typing import Any, List, Optional

from pydantic import Field, model_validator

from .base import Record, decode
from ..runtime.errors import DecodeError


class EventFilter(Record):
    """Seat selection filter applied while carting."""
    id: Optional[str] = None
    sections: List[str] = Field(default_factory=list)
    rows: List[str] = Field(default_factory=list)
    excluded_ticket_types: List[str] = Field(default_factory=list)
    min_price: float = Field(default=0, ge=0)
    max_price: float = Field(default=1000, ge=0)
    min_seats: int = Field(default=1, ge=1)
    max_seats: int = Field(default=8, ge=1)
    priority: Optional[int] = None

    @model_validator(mode="after")
    def _check_ranges(self) -> "EventFilter":
        if self.min_price > self.max_price:
            raise ValueError("min_price must not exceed max_price")
        if self.min_seats > self.max_seats:
            raise ValueError("min_seats must not exceed max_seats")
        return self

    def to_payload(self) -> dict:
        """Filter body without its id; the id travels in the path."""
        payload = super().to_payload()
        payload.pop("id", None)
        return payload


def filters_from_payload(payload: Any) -> List[EventFilter]:
    """
    Decode the `filters` field of a filters response.

    Accepts the keyed object the backend sends, or a plain list.
    """
    if payload is None:
        return []
    if isinstance(payload, dict):
        result = []
        for filter_id, data in payload.items():
            item = dict(data) if isinstance(data, dict) else data
            if isinstance(item, dict):
                item.setdefault("id", str(filter_id))
            result.append(decode(EventFilter, item))
        return result
    if isinstance(payload, list):
        return [decode(EventFilter, item) for item in payload]
    raise DecodeError(f"Unexpected filters shape: {type(payload).__name__}", payload=payload)


__all__ = ["EventFilter", "filters_from_payload"]
