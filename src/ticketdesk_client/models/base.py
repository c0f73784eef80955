"""
Shared base for backend records.
"""

from __future__ import annotations
from typing import Any, Dict, Iterable, List, Type, TypeVar

from pydantic import BaseModel, ValidationError as SchemaValidationError

from ..runtime.errors import DecodeError


R = TypeVar("R", bound="Record")


class Record(BaseModel):
    """
    Base class for every record the backend returns.

    Fields the backend omits are None; fields it adds are ignored. Numbers
    sent for text fields (queue positions, prices) are kept as strings.
    """

    model_config = {"populate_by_name": True, "extra": "ignore", "coerce_numbers_to_str": True}

    def to_payload(self) -> Dict[str, Any]:
        """Convert to the backend's JSON shape."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


def decode(model: Type[R], payload: Any) -> R:
    """Validate one record, raising DecodeError on a shape mismatch."""
    try:
        return model.model_validate(payload)
    except SchemaValidationError as e:
        raise DecodeError(f"Unexpected {model.__name__} shape: {e.error_count()} error(s)",
                          payload=payload, cause=e) from e


def decode_list(model: Type[R], payload: Any) -> List[R]:
    """Validate a JSON array of records. A null body decodes to an empty list."""
    if payload is None:
        return []
    if not isinstance(payload, list):
        raise DecodeError(f"Expected a list of {model.__name__}, got {type(payload).__name__}",
                          payload=payload)
    return [decode(model, item) for item in payload]


def unwrap(payload: Any, key: str) -> Any:
    """Return payload[key] from a wrapper object, raising DecodeError if absent."""
    if not isinstance(payload, dict) or key not in payload:
        raise DecodeError(f"Response is missing the '{key}' field", payload=payload)
    return payload[key]


def keyed(records: Iterable[R], key: str) -> Dict[Any, R]:
    """Index records by one of their attributes."""
    return {getattr(record, key): record for record in records}


__all__ = ["Record", "decode", "decode_list", "unwrap", "keyed"]
