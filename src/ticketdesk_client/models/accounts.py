"""
Account records.

An account is one credentialed purchasing identity. The backend tracks its
session tokens and pipeline progress; the client only reads them.
"""

from __future__ import annotations
from typing import List, Optional

from pydantic import Field

from .base import Record


class CartedInfo(Record):
    """Cart currently held by an account."""
    checkout_url: Optional[str] = None
    row: Optional[str] = None
    section: Optional[str] = None
    seats: Optional[List[str]] = None
    price: Optional[str] = None
    map: Optional[str] = None
    deadline: Optional[str] = None
    carts_remaining: Optional[int] = None


class CheckedOutInfo(Record):
    """Completed order for an account."""
    order_id: Optional[str] = None
    row: Optional[str] = None
    section: Optional[str] = None
    seats: Optional[List[str]] = None
    price: Optional[str] = None
    map: Optional[str] = None
    message: Optional[str] = None


class Account(Record):
    """
    Credentialed purchasing account.

    Identified by email. `postal_code` travels as `PostalCode` on the wire.
    """
    email: str
    password: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    address_line_1: Optional[str] = None
    city: Optional[str] = None
    postal_code: Optional[str] = Field(default=None, alias="PostalCode")
    phone: Optional[str] = None
    proxy: Optional[str] = None

    # Card
    card_number: Optional[str] = None
    exp_month: Optional[str] = None
    exp_year: Optional[str] = None
    cvv: Optional[str] = None

    # Session tokens
    bid: Optional[str] = None
    id_token: Optional[str] = None
    sid: Optional[str] = None
    sotc: Optional[str] = None
    sortc: Optional[str] = None
    ma_dvt: Optional[str] = None

    qb_bypass: Optional[bool] = None
    status: Optional[str] = None
    queue_position: Optional[str] = None
    carted: Optional[CartedInfo] = None
    checked_out: Optional[CheckedOutInfo] = None

    @property
    def full_name(self) -> str:
        """First and last name joined, skipping blanks."""
        return " ".join(part for part in (self.first_name, self.last_name) if part)


__all__ = ["Account", "CartedInfo", "CheckedOutInfo"]
