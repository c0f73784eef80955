"""
Presale code records.

Two families live here: reusable named code sets (`/presales`) and the
codes injected into one event (`/event/{id}/presale_codes`).
"""

from __future__ import annotations
from typing import Any, List, Optional

from pydantic import Field, field_validator

from .base import Record, decode
from ..runtime.errors import DecodeError


# =============================================================================
# Named code sets
# =============================================================================

class PresaleCodeSet(Record):
    """Summary of a named presale code set."""
    id: int
    name: str
    codes_count: int = Field(default=0, alias="codesCount")
    created_at: Optional[str] = Field(default=None, alias="createdAt")
    updated_at: Optional[str] = Field(default=None, alias="updatedAt")


class PresaleCodeSetDetail(Record):
    """A named presale code set including its codes."""
    id: int
    name: str
    codes: List[str] = Field(default_factory=list)
    created_at: Optional[str] = Field(default=None, alias="createdAt")
    updated_at: Optional[str] = Field(default=None, alias="updatedAt")


class PresaleCodeSetPayload(Record):
    """
    Body for creating or replacing a code set.

    Sets are edited as a whole: an update replaces name and codes together.
    """
    name: str = Field(min_length=1)
    codes: List[str] = Field(default_factory=list)

    @field_validator("codes")
    @classmethod
    def _strip_codes(cls, value: List[str]) -> List[str]:
        return [code.strip() for code in value if code and code.strip()]


# =============================================================================
# Codes attached to an event
# =============================================================================

class PresaleCode(Record):
    """Presale code injected into an event."""
    code: str
    ticket_types: Optional[List[str]] = None
    token: Optional[str] = None
    is_used: bool = False
    are_generic: bool = False
    is_valid: bool = False


def presale_codes_from_payload(payload: Any) -> List[PresaleCode]:
    """
    Decode the codes of an event presale response.

    The backend has sent a bare list, `{codes: [...]}` and a `presale_codes`
    wrapper around either; a missing field means no codes. Bare strings are
    read as codes.
    """
    if payload is None:
        return []
    if isinstance(payload, dict):
        if "presale_codes" in payload:
            return presale_codes_from_payload(payload["presale_codes"])
        return presale_codes_from_payload(payload.get("codes"))
    if isinstance(payload, list):
        return [
            decode(PresaleCode, {"code": item} if isinstance(item, str) else item)
            for item in payload
        ]
    raise DecodeError(f"Unexpected presale codes shape: {type(payload).__name__}", payload=payload)


__all__ = [
    "PresaleCodeSet",
    "PresaleCodeSetDetail",
    "PresaleCodeSetPayload",
    "PresaleCode",
    "presale_codes_from_payload",
]
