"""
Shared fixtures for the TicketDesk client test suite.
"""

import logging

import pytest

from helpers import FakeTransport, make_client


@pytest.fixture
def transport():
    """Scripted in-memory backend."""
    return FakeTransport()


@pytest.fixture
def client(transport):
    """TicketDeskClient wired to the fake transport."""
    return make_client(transport)


@pytest.fixture
def no_sleep():
    """Sleep replacement that records requested delays without waiting."""
    delays = []

    async def sleep(delay):
        delays.append(delay)

    sleep.delays = delays
    return sleep


@pytest.fixture(autouse=True)
def _capture_client_logs(caplog):
    caplog.set_level(logging.DEBUG, logger="ticketdesk_client")
    yield
