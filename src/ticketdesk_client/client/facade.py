"""
TicketDesk API client facade.

One object that owns the transport and exposes one API object per resource
family.
"""

from __future__ import annotations
import logging
from typing import Optional, Union

from .accounts import AccountsApi, ProfilesApi
from .events import CartsApi, EventsApi, FiltersApi
from .history import HistoryApi
from .presales import EventPresalesApi, PresalesApi
from ..config import ClientConfig
from ..transport.http import HttpTransport, Transport


logger = logging.getLogger(__name__)


class TicketDeskClient:
    """
    Async client for the TicketDesk backend.

    Example:
        ```python
        async with TicketDeskClient("http://127.0.0.1:8080/api") as client:
            accounts = await client.accounts.list()
            detail = await client.events.get("evt-1")
        ```
    """

    def __init__(self, config: Union[ClientConfig, str, None] = None,
                 transport: Optional[Transport] = None):
        """
        Initialize the client.

        Args:
            config: ClientConfig, a base URL or endpoint alias, or None for
                the environment-derived defaults
            transport: Transport to use instead of a new HttpTransport
        """
        if config is None:
            config = ClientConfig.from_env()
        elif isinstance(config, str):
            config = ClientConfig(base_url=config)

        self.config = config
        self._owns_transport = transport is None
        self.transport: Transport = transport or HttpTransport(config)

        self.accounts = AccountsApi(self.transport)
        self.profiles = ProfilesApi(self.transport)
        self.events = EventsApi(self.transport)
        self.filters = FiltersApi(self.transport)
        self.carts = CartsApi(self.transport)
        self.presales = PresalesApi(self.transport)
        self.event_presales = EventPresalesApi(self.transport)
        self.history = HistoryApi(self.transport)

        logger.debug(f"TicketDeskClient created for {config.base_url}")

    @property
    def base_url(self) -> str:
        return self.config.base_url

    async def close(self) -> None:
        """Close the transport if owned by this client."""
        if self._owns_transport:
            await self.transport.close()

    async def __aenter__(self) -> "TicketDeskClient":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    def __repr__(self) -> str:
        return f"TicketDeskClient(base_url={self.base_url!r})"


__all__ = ["TicketDeskClient"]
