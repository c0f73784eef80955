"""
Profile records.
"""

from __future__ import annotations
from typing import List, Optional, Union

from pydantic import Field, field_validator

from .accounts import Account
from .base import Record


class Profile(Record):
    """Named group of accounts."""
    id: str
    name: str
    account_count: int = Field(default=0, alias="accountCount")
    created_at: Optional[str] = Field(default=None, alias="createdAt")

    @field_validator("id", mode="before")
    @classmethod
    def _id_as_str(cls, value: Union[str, int]) -> str:
        return str(value)


class ProfileDetail(Profile):
    """Profile with its member accounts."""
    accounts: List[Account] = Field(default_factory=list)


__all__ = ["Profile", "ProfileDetail"]
