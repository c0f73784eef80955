"""
Live cart and checkout rows for an event in progress.
"""

from __future__ import annotations
from typing import Optional, Union

from pydantic import Field, field_validator

from .base import Record


class CartedTicket(Record):
    """Cart currently held by one account."""
    id: Optional[str] = None
    email: str
    account_id: Optional[str] = Field(default=None, alias="accountId")
    section: Optional[str] = None
    row: Optional[str] = None
    seats: Optional[Union[str, list]] = None
    price: Optional[float] = None
    map: Optional[str] = None
    deadline: Optional[str] = None
    checkout_url: Optional[str] = None
    carts_remaining: Optional[int] = None

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, value):
        return None if value is None else str(value)

    @property
    def cart_id(self) -> str:
        """Identifier used by the drop and checkout endpoints."""
        return self.id or self.account_id or self.email


class CheckedOutTicket(Record):
    """Completed checkout for one account."""
    email: str
    order_id: Optional[str] = Field(default=None, alias="orderId")
    section: Optional[str] = None
    row: Optional[str] = None
    seats: Optional[Union[str, list]] = None
    price: Optional[float] = None
    purchase_date: Optional[str] = Field(default=None, alias="purchaseDate")
    map: Optional[str] = None
    message: Optional[str] = None


__all__ = ["CartedTicket", "CheckedOutTicket"]
