"""
Tests for the live event detail poller.

Ticks are driven by calling `tick()` directly; the timer interval is set far
beyond the test duration so it never fires on its own.
"""

import asyncio
import logging

import pytest

from ticketdesk_client.runtime.errors import ErrorKind, TransportError
from ticketdesk_client.sync import EventDetailPoller, PollerState
from ticketdesk_client.sync.poller import (
    LOAD_ERROR_MESSAGE, POLL_ERROR_MESSAGE, STALE_ERROR_MESSAGE
)

from helpers import backend_error


SLOW = 3600.0


def task(name, accounts=None, **extra):
    return {"task": {"name": name, "accounts": accounts or {}, **extra}}


def poll_warnings(caplog):
    return [r for r in caplog.records
            if r.name == "ticketdesk_client.sync.poller"
            and r.levelno == logging.WARNING
            and "Refresh of event" in r.getMessage()]


class TestInitialLoad:

    @pytest.mark.asyncio
    async def test_loads_and_starts_polling(self, client, transport):
        transport.on("GET", "/event/evt-1", task("Show", venue="Arena", has_queue=True))

        poller = EventDetailPoller(client, "evt-1", interval=SLOW)
        await poller.ready()

        assert poller.status is PollerState.POLLING
        assert poller.data.name == "Show"
        assert poller.event_info.venue == "Arena"
        assert poller.event_info.has_queue is True
        assert poller.is_loading is False
        assert poller.last_success_at is not None
        await poller.aclose()

    @pytest.mark.asyncio
    async def test_interval_defaults_to_config(self, transport):
        from helpers import make_client

        poller = EventDetailPoller(make_client(transport, poll_interval=2.5), "", autoload=False)

        assert poller.interval == 2.5

    @pytest.mark.asyncio
    async def test_empty_id_does_not_load(self, client, transport):
        poller = EventDetailPoller(client, "", interval=SLOW)
        await poller.ready()

        assert poller.status is PollerState.UNINITIALIZED
        assert poller.data is None
        assert transport.calls == []
        assert await poller.tick() is False

    @pytest.mark.asyncio
    async def test_first_load_failure(self, client, transport):
        transport.on("GET", "/event/evt-1", backend_error(500), task("Show"))

        poller = EventDetailPoller(client, "evt-1", interval=SLOW)
        await poller.ready()

        assert poller.status is PollerState.LOAD_FAILED
        assert poller.error == LOAD_ERROR_MESSAGE
        assert poller.error_kind is ErrorKind.BACKEND
        assert poller.data is None

        assert await poller.refresh() is True
        assert poller.status is PollerState.POLLING
        assert poller.error is None
        await poller.aclose()


class TestTicking:

    @pytest.mark.asyncio
    async def test_account_appears_after_tick(self, client, transport):
        transport.on("GET", "/event/evt-1",
                     task("Show"),
                     task("Show", {"1": {"email": "a@x.com", "status": "queued"}}))
        poller = EventDetailPoller(client, "evt-1", interval=SLOW)
        await poller.ready()
        assert poller.accounts_array == []

        assert await poller.tick() is True

        views = poller.accounts_array
        assert len(views) == 1
        assert views[0].id == "1"
        assert views[0].email == "a@x.com"
        await poller.aclose()

    @pytest.mark.asyncio
    async def test_failures_keep_snapshot_and_alert_once(self, client, transport, caplog):
        transport.on("GET", "/event/evt-1", task("Show"))
        poller = EventDetailPoller(client, "evt-1", interval=SLOW)
        await poller.ready()
        snapshot = poller.data

        transport.on("GET", "/event/evt-1", TransportError("down"))
        for _ in range(5):
            assert await poller.tick() is False
            assert poller.data is snapshot
            assert poller.error == POLL_ERROR_MESSAGE

        assert poller.consecutive_failures == 5
        assert poller.error_kind is ErrorKind.TRANSPORT
        assert len(poll_warnings(caplog)) == 1
        await poller.aclose()

    @pytest.mark.asyncio
    async def test_recovery_clears_error(self, client, transport):
        transport.on("GET", "/event/evt-1", task("Show"))
        poller = EventDetailPoller(client, "evt-1", interval=SLOW)
        await poller.ready()

        transport.on("GET", "/event/evt-1", TransportError("down"))
        await poller.tick()
        await poller.tick()

        transport.on("GET", "/event/evt-1", task("Show (updated)"))
        assert await poller.tick() is True

        assert poller.error is None
        assert poller.error_kind is None
        assert poller.data.name == "Show (updated)"
        assert poller.consecutive_failures == 0
        await poller.aclose()

    @pytest.mark.asyncio
    async def test_escalates_once_after_threshold(self, client, transport):
        transport.on("GET", "/event/evt-1", task("Show"))
        poller = EventDetailPoller(client, "evt-1", interval=SLOW, escalate_after_failures=3)
        await poller.ready()

        transport.on("GET", "/event/evt-1", TransportError("down"))
        await poller.tick()
        await poller.tick()
        assert poller.error == POLL_ERROR_MESSAGE

        await poller.tick()
        escalated = STALE_ERROR_MESSAGE.format(failures=3)
        assert poller.error == escalated

        await poller.tick()
        assert poller.error == escalated
        await poller.aclose()

    @pytest.mark.asyncio
    async def test_timer_ticks_on_interval(self, client, transport):
        transport.on("GET", "/event/evt-1", task("v1"), task("v2"), task("v3"))
        poller = EventDetailPoller(client, "evt-1", interval=0.01)
        await poller.ready()

        for _ in range(200):
            if poller.data.name == "v3":
                break
            await asyncio.sleep(0.01)

        assert poller.data.name == "v3"
        await poller.aclose()


class TestLifecycle:

    @pytest.mark.asyncio
    async def test_switch_discards_stale_response(self, client, transport):
        gate = asyncio.Event()

        async def stale_old():
            await gate.wait()
            return task("Old event")

        transport.on("GET", "/event/old", task("Old event"), stale_old)
        transport.on("GET", "/event/new", task("New event"))
        poller = EventDetailPoller(client, "old", interval=SLOW)
        await poller.ready()
        old_generation = poller.generation

        pending_tick = asyncio.ensure_future(poller.tick())
        await asyncio.sleep(0)

        poller.set_event_id("new")
        assert poller.generation > old_generation
        assert poller.data is None

        await poller.ready()
        assert poller.data.name == "New event"

        gate.set()
        assert await pending_tick is False
        assert poller.data.name == "New event"
        assert poller.event_id == "new"
        await poller.aclose()

    @pytest.mark.asyncio
    async def test_switch_cancels_old_timer(self, client, transport):
        transport.on("GET", "/event/old", task("Old event"))
        transport.on("GET", "/event/new", task("New event"))
        poller = EventDetailPoller(client, "old", interval=0.01)
        await poller.ready()
        old_task = poller._task

        poller.set_event_id("new")
        await poller.ready()
        calls_before = transport.count("GET", "/event/old")
        await asyncio.sleep(0.05)

        assert old_task.cancelled() or old_task.done()
        assert transport.count("GET", "/event/old") == calls_before
        await poller.aclose()

    @pytest.mark.asyncio
    async def test_stop_is_idempotent_and_keeps_snapshot(self, client, transport):
        transport.on("GET", "/event/evt-1", task("Show"))
        poller = EventDetailPoller(client, "evt-1", interval=0.01)
        await poller.ready()

        poller.stop()
        poller.stop()
        calls = transport.count("GET", "/event/evt-1")
        await asyncio.sleep(0.05)

        assert poller.status is PollerState.STOPPED
        assert poller.data.name == "Show"
        assert transport.count("GET", "/event/evt-1") == calls
        assert await poller.tick() is False

        await poller.aclose()
        await poller.aclose()

    @pytest.mark.asyncio
    async def test_async_context_manager(self, client, transport):
        transport.on("GET", "/event/evt-1", task("Show"))

        async with EventDetailPoller(client, "evt-1", interval=SLOW) as poller:
            assert poller.status is PollerState.POLLING

        assert poller.status is PollerState.STOPPED
        assert poller.closed

    def test_created_outside_running_loop(self, client, transport):
        transport.on("GET", "/event/evt-1", task("Show"))
        poller = EventDetailPoller(client, "evt-1", interval=SLOW, autoload=False)

        async def main():
            await poller.ready()
            assert poller.status is PollerState.POLLING
            poller.set_event_id("")
            await poller.aclose()

        asyncio.run(main())

        assert poller.data is None
        assert poller.status is PollerState.STOPPED

    def test_rejects_bad_interval(self, client):
        with pytest.raises(ValueError):
            EventDetailPoller(client, "evt-1", interval=0, autoload=False)
