"""
Accounts and profiles endpoints.
"""

from __future__ import annotations
from typing import Any, List

from .base import ResourceApi, segment
from ..models import Account, Profile, ProfileDetail, decode, decode_list


class AccountsApi(ResourceApi):
    """`/accounts` endpoints."""

    async def list(self) -> List[Account]:
        """Fetch every account."""
        return decode_list(Account, await self._get("/accounts"))

    async def add(self, account_lines: List[str]) -> Any:
        """
        Add accounts.

        Args:
            account_lines: One raw account definition string per account

        Returns:
            Backend acknowledgement, undecoded
        """
        return await self._post("/accounts", {"accounts": list(account_lines)})

    async def delete(self, email: str) -> Any:
        """Delete the account with the given email."""
        return await self._delete(f"/accounts/{segment(email)}")


class ProfilesApi(ResourceApi):
    """`/profiles` endpoints."""

    async def list(self) -> List[Profile]:
        return decode_list(Profile, await self._get("/profiles"))

    async def get(self, profile_id: str) -> ProfileDetail:
        """Fetch one profile with its accounts."""
        return decode(ProfileDetail, await self._get(f"/profiles/{segment(profile_id)}"))

    async def add(self, name: str) -> Any:
        return await self._post("/profiles", {"name": name})

    async def delete(self, profile_id: str) -> Any:
        return await self._delete(f"/profiles/{segment(profile_id)}")

    async def add_accounts(self, profile_id: str, account_lines: List[str]) -> Any:
        """Attach accounts, given as raw definition strings, to a profile."""
        return await self._post(
            f"/profiles/{segment(profile_id)}/accounts",
            {"accounts": list(account_lines)},
        )

    async def remove_account(self, profile_id: str, email: str) -> Any:
        """Detach one account from a profile."""
        return await self._delete(f"/profiles/{segment(profile_id)}/accounts/{segment(email)}")


__all__ = ["AccountsApi", "ProfilesApi"]
