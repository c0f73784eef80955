"""
Tests for the collection synchronizers.
"""

import asyncio

import pytest

from ticketdesk_client.models import EventFilter
from ticketdesk_client.runtime.errors import ErrorKind, TransportError
from ticketdesk_client.sync import (
    AccountsCollection, CollectionState, EventFiltersCollection, EventHistoryCollection,
    EventPresaleCodesSync, EventsCollection, PresaleCodeSetsCollection, ProfileDetailSync,
    ProfilesCollection,
)

from helpers import backend_error


def account(email):
    return {"email": email, "password": "pw"}


class TestLifecycle:

    @pytest.mark.asyncio
    async def test_autoloads_inside_running_loop(self, client, transport):
        transport.on("GET", "/accounts", [account("a@x.com")])

        accounts = AccountsCollection(client)
        await accounts.ready()

        assert accounts.mounted
        assert accounts.status is CollectionState.LOADED
        assert accounts.keys() == ["a@x.com"]
        assert transport.count("GET", "/accounts") == 1
        await accounts.close()

    @pytest.mark.asyncio
    async def test_autoload_disabled_waits_for_mount(self, client, transport):
        transport.on("GET", "/accounts", [])

        accounts = AccountsCollection(client, autoload=False)
        await asyncio.sleep(0)

        assert accounts.status is CollectionState.IDLE
        assert transport.calls == []

        async with accounts:
            assert accounts.status is CollectionState.LOADED
        assert accounts.closed

    @pytest.mark.asyncio
    async def test_close_is_idempotent_and_cancels_load(self, client, transport):
        gate = asyncio.Event()

        async def slow():
            await gate.wait()
            return []

        transport.on("GET", "/accounts", slow)
        accounts = AccountsCollection(client)
        await asyncio.sleep(0)

        await accounts.close()
        await accounts.close()
        await accounts.ready()

        assert accounts.data == []


class TestLoad:

    @pytest.mark.asyncio
    async def test_failure_keeps_stale_data_and_classifies(self, client, transport):
        transport.on("GET", "/accounts", [account("a@x.com")])
        accounts = AccountsCollection(client)
        await accounts.ready()

        transport.on("GET", "/accounts", backend_error(500, {"error": "Database unavailable"}))
        ok = await accounts.reload()

        assert ok is False
        assert accounts.status is CollectionState.LOAD_FAILED
        assert accounts.error == "Database unavailable"
        assert accounts.error_kind is ErrorKind.BACKEND
        assert accounts.keys() == ["a@x.com"]
        assert accounts.is_loading is False

    @pytest.mark.asyncio
    async def test_transport_failure_uses_collection_fallback(self, client, transport):
        transport.on("GET", "/profiles", TransportError("connection refused"))

        profiles = ProfilesCollection(client)
        await profiles.ready()

        assert profiles.error == "Failed to load profiles. Please try again later."
        assert profiles.error_kind is ErrorKind.TRANSPORT

    @pytest.mark.asyncio
    async def test_successful_reload_clears_error(self, client, transport):
        transport.on("GET", "/profiles", TransportError("down"), [{"id": "1", "name": "Main"}])

        profiles = ProfilesCollection(client)
        await profiles.ready()
        assert profiles.error is not None

        await profiles.reload()

        assert profiles.error is None
        assert profiles.error_kind is None
        assert profiles.get("1").name == "Main"

    @pytest.mark.asyncio
    async def test_latest_issued_load_wins(self, client, transport):
        first_gate = asyncio.Event()

        async def stale():
            await first_gate.wait()
            return [account("old@x.com")]

        transport.on("GET", "/accounts", stale, [account("new@x.com")])
        accounts = AccountsCollection(client, autoload=False)

        first = asyncio.ensure_future(accounts.load())
        await asyncio.sleep(0)
        assert accounts.is_loading

        second = await accounts.load()
        assert second is True
        assert accounts.is_loading, "older load still outstanding"

        first_gate.set()
        assert await first is False

        assert accounts.keys() == ["new@x.com"]
        assert accounts.is_loading is False


class TestMutations:

    @pytest.mark.asyncio
    async def test_accounts_add_scenario(self, client, transport):
        """Seed [], add one account, backend then reports it: data is that one account."""
        transport.on("GET", "/accounts", [], [account("a@x.com")])
        transport.on("POST", "/accounts", {"added": 1})
        accounts = AccountsCollection(client)
        await accounts.ready()
        assert accounts.data == []

        ok = await accounts.add(["a@x.com;pw;Ada;Lovelace"])

        assert ok is True
        assert [a.email for a in accounts.data] == ["a@x.com"]
        assert accounts.is_loading is False
        assert transport.last("POST", "/accounts").json == {"accounts": ["a@x.com;pw;Ada;Lovelace"]}

    @pytest.mark.asyncio
    async def test_add_reflects_reload_not_local_append(self, client, transport):
        transport.on("GET", "/accounts", [account("a@x.com")],
                     [account("b@x.com"), account("c@x.com")])
        transport.on("POST", "/accounts", {})
        accounts = AccountsCollection(client)
        await accounts.ready()

        await accounts.add(["new@x.com;pw"])

        assert accounts.keys() == ["b@x.com", "c@x.com"]
        assert "new@x.com" not in accounts
        assert transport.count("GET", "/accounts") == 2

    @pytest.mark.asyncio
    async def test_failed_remove_skips_reload(self, client, transport):
        transport.on("GET", "/accounts", [account("a@x.com")])
        transport.on("DELETE", "/accounts/a%40x.com", backend_error(403))
        accounts = AccountsCollection(client)
        await accounts.ready()
        before = accounts.data

        ok = await accounts.remove("a@x.com")

        assert ok is False
        assert accounts.data == before
        assert transport.count("GET", "/accounts") == 1
        assert accounts.last_mutation_error == "You do not have permission to access this resource"
        assert accounts.error is None

    @pytest.mark.asyncio
    async def test_mutation_success_with_failed_reload(self, client, transport):
        transport.on("GET", "/profiles", [{"id": "1", "name": "Main"}], TransportError("down"))
        transport.on("DELETE", "/profiles/1", {})
        profiles = ProfilesCollection(client)
        await profiles.ready()

        ok = await profiles.remove("1")

        assert ok is True
        assert profiles.keys() == ["1"]
        assert profiles.status is CollectionState.LOAD_FAILED


class TestEventsCollection:

    @pytest.mark.asyncio
    async def test_table_rows(self, client, transport):
        transport.on("GET", "/events", {
            "evt-1": {"event_name": "Show", "date": "2025-06-01", "venue": "Arena",
                      "accounts": {"1": account("a@x.com")}},
        })

        events = EventsCollection(client)
        await events.ready()

        rows = events.table_rows
        assert len(rows) == 1
        assert rows[0].id == "evt-1"
        assert rows[0].name == "Show"
        assert rows[0].accounts_count == 1
        assert "evt-1" in events

    @pytest.mark.asyncio
    async def test_remove_reloads(self, client, transport):
        transport.on("GET", "/events", {"evt-1": {"name": "Show"}}, {})
        transport.on("DELETE", "/event", {})
        events = EventsCollection(client)
        await events.ready()

        assert await events.remove("evt-1") is True

        assert len(events) == 0
        assert transport.last("DELETE", "/event").params == {"id": "evt-1"}


class TestPresaleCodeSets:

    @pytest.mark.asyncio
    async def test_update_and_detail(self, client, transport):
        transport.on("GET", "/presales", {"presales": [{"id": 1, "name": "Old"}]},
                     {"presales": [{"id": 1, "name": "New"}]})
        transport.on("PUT", "/presales/1", {})
        transport.on("GET", "/presales/1", backend_error(404))
        sets = PresaleCodeSetsCollection(client)
        await sets.ready()

        assert await sets.update(1, {"name": "New", "codes": ["A"]}) is True
        assert sets.get(1).name == "New"

        assert await sets.fetch_detail(1) is None
        assert sets.last_mutation_error == "The requested resource was not found"


class TestEventHistoryCollection:

    @pytest.mark.asyncio
    async def test_load_retries_then_succeeds(self, client, transport, no_sleep):
        transport.on("GET", "/api/history", TransportError("blip"), [{"id": 1, "name": "Show"}])

        history = EventHistoryCollection(client, sleep=no_sleep)
        await history.ready()

        assert history.keys() == ["1"]
        assert transport.count("GET", "/api/history") == 2
        assert no_sleep.delays == [0.0]

    @pytest.mark.asyncio
    async def test_delete_reloads_instead_of_patching(self, client, transport, no_sleep):
        transport.on("GET", "/api/history", [{"id": "h1"}, {"id": "h2"}], [{"id": "h2"}, {"id": "h3"}])
        transport.on("DELETE", "/api/history/h1", {})
        history = EventHistoryCollection(client, sleep=no_sleep)
        await history.ready()

        assert await history.remove("h1") is True

        assert history.keys() == ["h2", "h3"]


class TestEventFilters:

    @pytest.mark.asyncio
    async def test_reorder_reloads(self, client, transport):
        transport.on("GET", "/event/evt-1/filters", {"filters": {"f1": {}, "f2": {}}},
                     {"filters": {"f2": {"priority": 1}, "f1": {"priority": 2}}})
        transport.on("POST", "/event/evt-1/filters/reorder", {})
        filters = EventFiltersCollection(client, "evt-1")
        await filters.ready()

        assert await filters.reorder(["f2", "f1"]) is True

        assert filters.keys() == ["f2", "f1"]

    @pytest.mark.asyncio
    async def test_empty_event_id_fails_validation(self, client, transport):
        filters = EventFiltersCollection(client, "")
        await filters.ready()

        assert filters.error == "Event ID is required"
        assert filters.error_kind is ErrorKind.VALIDATION
        assert transport.calls == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("mutation", [
        lambda f: f.add(EventFilter(sections=["101"])),
        lambda f: f.update(EventFilter(id="f1")),
        lambda f: f.remove("f1"),
        lambda f: f.reorder(["f2", "f1"]),
        lambda f: f.drop_non_matching(),
        lambda f: f.reset(),
    ])
    async def test_mutations_without_event_id_send_nothing(self, client, transport, mutation):
        filters = EventFiltersCollection(client, "", autoload=False)

        assert await mutation(filters) is False

        assert filters.last_mutation_error == "Event ID is required"
        assert transport.calls == []


class TestProfileDetail:

    @pytest.mark.asyncio
    async def test_add_accounts_reloads_detail(self, client, transport):
        transport.on("GET", "/profiles/p1",
                     {"id": "p1", "name": "Main", "accountCount": 0, "accounts": []},
                     {"id": "p1", "name": "Main", "accountCount": 1, "accounts": [account("a@x.com")]})
        transport.on("POST", "/profiles/p1/accounts", {})
        profile = ProfileDetailSync(client, "p1")
        await profile.ready()

        assert await profile.add_accounts(["a@x.com;pw"]) is True

        assert profile.data.account_count == 1
        assert [a.email for a in profile.accounts] == ["a@x.com"]

    @pytest.mark.asyncio
    async def test_membership_changes_without_profile_id_send_nothing(self, client, transport):
        profile = ProfileDetailSync(client, "")
        await profile.ready()

        assert await profile.add_accounts(["a@x.com;pw"]) is False
        assert await profile.remove_account("a@x.com") is False

        assert profile.error == "Profile ID is required"
        assert profile.last_mutation_error == "Profile ID is required"
        assert transport.calls == []


class TestEventPresaleCodes:

    @pytest.mark.asyncio
    async def test_add_filters_blank_codes(self, client, transport):
        transport.on("GET", "/event/evt-1/presale_codes", {"presale_codes": []},
                     {"presale_codes": [{"code": "ABC"}]})
        transport.on("POST", "/event/evt-1/presale_codes", {})
        codes = EventPresaleCodesSync(client, "evt-1")
        await codes.ready()

        assert await codes.add(["ABC", "  ", ""]) is True

        assert transport.last("POST", "/event/evt-1/presale_codes").json == {
            "presale_codes": ["ABC"], "are_generic": False,
        }
        assert codes.keys() == ["ABC"]
        assert codes.is_submitting is False

    @pytest.mark.asyncio
    async def test_add_with_only_blank_codes_sends_nothing(self, client, transport):
        transport.on("GET", "/event/evt-1/presale_codes", {"presale_codes": []})
        codes = EventPresaleCodesSync(client, "evt-1")
        await codes.ready()

        assert await codes.add(["", "   "]) is False

        assert codes.last_mutation_error == "No valid presale codes provided."
        assert transport.count("POST", "/event/evt-1/presale_codes") == 0

    @pytest.mark.asyncio
    async def test_is_submitting_during_clear(self, client, transport):
        seen = []
        codes = None

        def clear_response():
            seen.append(codes.is_submitting)
            return {}

        transport.on("GET", "/event/evt-1/presale_codes", {"presale_codes": [{"code": "A"}]},
                     {"presale_codes": []})
        transport.on("GET", "/event/evt-1/presale_codes/clear", clear_response)
        codes = EventPresaleCodesSync(client, "evt-1")
        await codes.ready()

        assert await codes.clear() is True

        assert seen == [True]
        assert codes.is_submitting is False
        assert codes.data == []

    @pytest.mark.asyncio
    async def test_loads_nested_codes_shape(self, client, transport):
        transport.on("GET", "/event/evt-1/presale_codes",
                     {"presale_codes": {"codes": [{"code": "ABC", "is_valid": True}]}})

        codes = EventPresaleCodesSync(client, "evt-1")
        await codes.ready()

        assert codes.error is None
        assert codes.keys() == ["ABC"]

    @pytest.mark.asyncio
    async def test_missing_codes_field_loads_empty(self, client, transport):
        transport.on("GET", "/event/evt-1/presale_codes", {})

        codes = EventPresaleCodesSync(client, "evt-1")
        await codes.ready()

        assert codes.error is None
        assert codes.status is CollectionState.LOADED
        assert codes.data == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("mutation", [
        lambda c: c.add(["ABC"]),
        lambda c: c.clear(),
        lambda c: c.recheck(),
    ])
    async def test_mutations_without_event_id_send_nothing(self, client, transport, mutation):
        codes = EventPresaleCodesSync(client, "", autoload=False)

        assert await mutation(codes) is False

        assert codes.last_mutation_error == "Event ID is required"
        assert codes.is_submitting is False
        assert transport.calls == []
