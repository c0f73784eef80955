"""
Presale code endpoints.
"""

from __future__ import annotations
from typing import Any, Dict, List, Union

from .base import ResourceApi, segment
from ..models import (
    PresaleCode, PresaleCodeSet, PresaleCodeSetDetail, PresaleCodeSetPayload,
    decode, decode_list, presale_codes_from_payload, unwrap,
)


def _as_payload(data: Union[PresaleCodeSetPayload, Dict[str, Any]]) -> Dict[str, Any]:
    if isinstance(data, dict):
        data = PresaleCodeSetPayload.model_validate(data)
    return data.to_payload()


class PresalesApi(ResourceApi):
    """Named presale code sets (`/presales`)."""

    async def list(self) -> List[PresaleCodeSet]:
        payload = await self._get("/presales")
        return decode_list(PresaleCodeSet, unwrap(payload, "presales"))

    async def get(self, set_id: int) -> PresaleCodeSetDetail:
        payload = await self._get(f"/presales/{segment(set_id)}")
        return decode(PresaleCodeSetDetail, unwrap(payload, "presale"))

    async def add(self, data: Union[PresaleCodeSetPayload, Dict[str, Any]]) -> Any:
        """Create one code set; the backend takes a batch of one."""
        return await self._post("/presales", {"presales": [_as_payload(data)]})

    async def update(self, set_id: int, data: Union[PresaleCodeSetPayload, Dict[str, Any]]) -> Any:
        """Replace a code set's name and codes."""
        return await self._put(f"/presales/{segment(set_id)}", _as_payload(data))

    async def delete(self, set_id: int) -> Any:
        return await self._delete(f"/presales/{segment(set_id)}")


class EventPresalesApi(ResourceApi):
    """Presale codes injected into one event."""

    async def list(self, event_id: str) -> List[PresaleCode]:
        payload = await self._get(f"/event/{segment(event_id)}/presale_codes")
        return presale_codes_from_payload(payload)

    async def add(self, event_id: str, codes: List[str], are_generic: bool = False) -> Any:
        """
        Inject presale codes into an event.

        Args:
            event_id: Target event
            codes: Codes to add, sent as given
            are_generic: Whether the codes apply to every ticket type
        """
        return await self._post(
            f"/event/{segment(event_id)}/presale_codes",
            {"presale_codes": list(codes), "are_generic": are_generic},
        )

    async def clear(self, event_id: str) -> Any:
        return await self._get(f"/event/{segment(event_id)}/presale_codes/clear")

    async def recheck(self, event_id: str) -> Any:
        """Ask the backend to re-validate every code of the event."""
        return await self._get(f"/event/{segment(event_id)}/presale_codes/recheck")


__all__ = ["PresalesApi", "EventPresalesApi"]
