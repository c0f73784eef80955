"""
Hook lifecycle and the shared load machinery.

A hook is an async object owned by one consumer. It starts its initial load
when created inside a running event loop (or when mounted later), exposes a
LoadState, and cancels its background work on close.
"""

from __future__ import annotations
import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Generic, Optional, Set, TypeVar

from .state import CollectionState, LoadState
from ..runtime.classifier import classify_error, handle_api_error
from ..runtime.errors import ErrorKind, ValidationError


logger = logging.getLogger(__name__)

T = TypeVar("T")


class Hook(ABC):
    """
    Base lifecycle for sync hooks.

    Subclasses call `_autostart()` at the end of their constructor and
    implement `_start()`, which schedules the initial work.
    """

    def __init__(self):
        self._tasks: Set[asyncio.Task] = set()
        self._initial: Optional[asyncio.Task] = None
        self._mounted = False
        self._closed = False

    def _autostart(self, autoload: bool) -> None:
        if not autoload:
            return
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            # No loop yet; mount() or `async with` starts the hook later
            return
        self.mount()

    def _spawn(self, coro: Awaitable[Any]) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    @abstractmethod
    def _start(self) -> Optional[asyncio.Task]:
        """Schedule the initial work and return its task."""

    @property
    def mounted(self) -> bool:
        return self._mounted

    @property
    def closed(self) -> bool:
        return self._closed

    def mount(self) -> None:
        """
        Start the hook. Must be called from inside a running event loop.

        Calling it again is a no-op.
        """
        if self._mounted or self._closed:
            return
        self._mounted = True
        self._initial = self._start()

    async def ready(self) -> None:
        """Mount if needed and wait for the initial load to finish."""
        self.mount()
        initial = self._initial
        if initial is None:
            return
        try:
            await asyncio.shield(initial)
        except asyncio.CancelledError:
            if not initial.cancelled():
                raise

    async def close(self) -> None:
        """Cancel outstanding background work. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        pending = [task for task in self._tasks if not task.done()]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    async def __aenter__(self):
        await self.ready()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()


class Synchronizer(Hook, Generic[T]):
    """
    Holds one backend value and keeps it in sync by full reloads.

    Reentrancy: the latest-issued load wins. Every load runs to completion,
    but a response from a load that a newer one has superseded is dropped,
    and `is_loading` stays true while any load is outstanding.
    """

    #: Display text used when the classifier has nothing better
    fallback_message = "Failed to load data. Please try again later."

    def __init__(self, initial: T):
        super().__init__()
        self.state: LoadState[T] = LoadState(data=initial)
        self.status = CollectionState.IDLE
        self.last_mutation_error: Optional[str] = None
        self._issued = 0
        self._outstanding = 0

    # =========================================================================
    # State accessors
    # =========================================================================

    @property
    def data(self) -> T:
        return self.state.data

    @property
    def is_loading(self) -> bool:
        return self.state.is_loading

    @property
    def error(self) -> Optional[str]:
        return self.state.error

    @property
    def error_kind(self) -> Optional[ErrorKind]:
        return self.state.error_kind

    # =========================================================================
    # Loading
    # =========================================================================

    @abstractmethod
    async def _fetch(self) -> T:
        """Fetch the full value from the backend."""

    def _start(self) -> Optional[asyncio.Task]:
        return self._spawn(self.load())

    async def load(self) -> bool:
        """
        Fetch and replace the whole value.

        Never raises (except cancellation). On failure the previous value is
        kept and `error` holds the classified message.

        Returns:
            True if this load's result was applied
        """
        self._issued += 1
        seq = self._issued
        self._outstanding += 1
        self.state.is_loading = True
        self.state.error = None
        self.state.error_kind = None
        self.status = CollectionState.LOADING

        try:
            value = await self._fetch()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            if seq != self._issued:
                logger.debug(f"{type(self).__name__}: dropping failure of superseded load {seq}")
                return False
            self.state.error = handle_api_error(e, self.fallback_message)
            self.state.error_kind = classify_error(e)
            self.status = CollectionState.LOAD_FAILED
            logger.warning(f"{type(self).__name__} load failed: {e}")
            return False
        else:
            if seq != self._issued:
                logger.debug(f"{type(self).__name__}: dropping result of superseded load {seq}")
                return False
            self.state.data = value
            self.status = CollectionState.LOADED
            return True
        finally:
            self._outstanding -= 1
            self.state.is_loading = self._outstanding > 0

    async def reload(self) -> bool:
        """Alias of load()."""
        return await self.load()

    async def refresh(self) -> bool:
        """Alias of load()."""
        return await self.load()

    # =========================================================================
    # Mutations
    # =========================================================================

    def _precondition_error(self) -> Optional[str]:
        """Message explaining why this hook cannot talk to the backend, if any."""
        return None

    def _check_preconditions(self) -> None:
        problem = self._precondition_error()
        if problem is not None:
            raise ValidationError(problem)

    async def _mutate(self, action: str, operation: Callable[[], Awaitable[Any]]) -> bool:
        """
        Run a mutation and, only if it succeeded, reload everything.

        Args:
            action: Short description used in the failure message
            operation: Zero-argument callable performing the backend call

        Returns:
            True if the mutation succeeded; the reload outcome is reported
            through `error` as for any other load
        """
        self.last_mutation_error = None
        problem = self._precondition_error()
        if problem is not None:
            self.last_mutation_error = problem
            logger.warning(f"{type(self).__name__}: cannot {action}: {problem}")
            return False

        try:
            await operation()
        except asyncio.CancelledError:
            raise
        except Exception as e:
            self.last_mutation_error = handle_api_error(
                e, f"Failed to {action}. Please try again."
            )
            logger.warning(f"{type(self).__name__}: failed to {action}: {e}")
            return False

        await self.load()
        return True


__all__ = ["Hook", "Synchronizer"]
