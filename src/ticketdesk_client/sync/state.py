"""
Observable state shared by every sync hook.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from enum import Enum
from typing import Generic, Optional, TypeVar

from ..runtime.errors import ErrorKind


T = TypeVar("T")


class CollectionState(Enum):
    """Lifecycle of a synchronizer."""
    IDLE = "idle"
    LOADING = "loading"
    LOADED = "loaded"
    LOAD_FAILED = "load_failed"


class PollerState(Enum):
    """Lifecycle of the live detail poller."""
    UNINITIALIZED = "uninitialized"
    LOADING = "loading"
    POLLING = "polling"
    STOPPED = "stopped"
    LOAD_FAILED = "load_failed"


@dataclass
class LoadState(Generic[T]):
    """
    Consumer-visible state of one hook.

    `data` is the last good value. A failed load or poll keeps it; only a
    successful fetch replaces it. `error` holds display text produced by
    the classifier, never an exception.
    """
    data: T
    is_loading: bool = False
    error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None

    def snapshot(self) -> "LoadState[T]":
        """Shallow copy, for consumers that diff successive states."""
        return replace(self)


__all__ = ["CollectionState", "PollerState", "LoadState"]
