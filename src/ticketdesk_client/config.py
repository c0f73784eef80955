"""
Client configuration.

Settings come from code or from TICKETDESK_* environment variables.
"""

from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .recovery.retry import RetryOptions


ENV_PREFIX = "TICKETDESK_"

# Well-known endpoints
ENDPOINTS = {
    "local": "http://127.0.0.1:8080/api",
}


def resolve_endpoint(base_url: str) -> str:
    """Resolve a well-known endpoint alias and strip trailing slashes."""
    url = ENDPOINTS.get(base_url.lower(), base_url)
    return url.rstrip("/")


def _env_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass
class ClientConfig:
    """Configuration for the TicketDesk API client and sync hooks."""

    base_url: str = "local"
    timeout: float = 30.0
    user_agent: str = "ticketdesk-client/1.0.0"
    retry_max_attempts: int = 4
    retry_base_delay: float = 1.0
    retry_backoff_factor: float = 1.5
    poll_interval: float = 1.0
    debug: bool = False

    def __post_init__(self):
        self.base_url = resolve_endpoint(self.base_url)
        if self.poll_interval <= 0:
            raise ValueError(f"poll_interval must be > 0, got {self.poll_interval}")
        if self.debug:
            logging.getLogger("ticketdesk_client").setLevel(logging.DEBUG)

    def retry_options(self) -> RetryOptions:
        """Retry options for one-shot fetches."""
        return RetryOptions(
            max_attempts=self.retry_max_attempts,
            base_delay=self.retry_base_delay,
            backoff_factor=self.retry_backoff_factor,
        )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> "ClientConfig":
        """
        Build a config from TICKETDESK_* environment variables.

        Recognised: TICKETDESK_API_URL, TICKETDESK_TIMEOUT,
        TICKETDESK_POLL_INTERVAL, TICKETDESK_DEBUG. Explicit keyword
        overrides win over the environment.
        """
        env = os.environ if environ is None else environ
        values: dict = {}

        if env.get(f"{ENV_PREFIX}API_URL"):
            values["base_url"] = env[f"{ENV_PREFIX}API_URL"]
        if env.get(f"{ENV_PREFIX}TIMEOUT"):
            values["timeout"] = float(env[f"{ENV_PREFIX}TIMEOUT"])
        if env.get(f"{ENV_PREFIX}POLL_INTERVAL"):
            values["poll_interval"] = float(env[f"{ENV_PREFIX}POLL_INTERVAL"])
        if env.get(f"{ENV_PREFIX}DEBUG"):
            values["debug"] = _env_bool(env[f"{ENV_PREFIX}DEBUG"])

        values.update(overrides)
        return cls(**values)


__all__ = ["ClientConfig", "ENDPOINTS", "resolve_endpoint"]
