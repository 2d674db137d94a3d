"""
Record store tests - tolerant loading, status updates and write atomicity.
"""

import json
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from conference.core import config
from conference.core.errors import PersistenceError, StoreOutcome, ValidationError
from conference.core.kinds import ABSTRACTS, REGISTRATIONS
from conference.core.storage import MemoryStorage
from conference.core.store import RecordStore
from conftest import make_abstract, stored

NOW = datetime(2026, 2, 1, 8, 0, tzinfo=timezone.utc)


@pytest.fixture
def store(seeded_storage):
    s = RecordStore(ABSTRACTS, seeded_storage)
    s.load()
    return s


def stored_statuses(storage):
    return [r["status"] for r in json.loads(storage.get(config.SUBMISSIONS_KEY))]


class TestLoad:
    def test_missing_key_loads_empty(self, memory_storage):
        assert RecordStore(ABSTRACTS, memory_storage).load() == ()

    def test_invalid_json_loads_empty(self):
        storage = MemoryStorage({config.SUBMISSIONS_KEY: "{not json"})
        store = RecordStore(ABSTRACTS, storage)
        assert store.load() == ()
        assert store.unreadable is True

    def test_non_list_loads_empty(self):
        storage = MemoryStorage({config.SUBMISSIONS_KEY: json.dumps({"id": "ABS-1"})})
        store = RecordStore(ABSTRACTS, storage)
        assert store.load() == ()
        assert store.unreadable is True

    def test_missing_key_is_readable(self, memory_storage):
        store = RecordStore(ABSTRACTS, memory_storage)
        store.load()
        assert store.unreadable is False


    def test_partial_records_get_defaults(self):
        storage = MemoryStorage({config.SUBMISSIONS_KEY: json.dumps([{"fullName": "Legacy Person"}, {}])})
        records = RecordStore(ABSTRACTS, storage).load(now=NOW)

        assert [r.id for r in records] == ["ABS-1", "ABS-2"]
        legacy = records[0]
        assert legacy.status == "Pending Review"
        assert legacy.co_authors == []
        assert legacy.title == "Research Abstract"
        assert legacy.submitted_at == "2026-02-01T08:00:00.000Z"

    def test_registration_defaults(self):
        storage = MemoryStorage({config.REGISTRATIONS_KEY: json.dumps([{"fullName": "Emma Wilson"}])})
        registration = RecordStore(REGISTRATIONS, storage).load(now=NOW)[0]
        assert registration.id == "REG-1"
        assert registration.registration_type == "Attendee"

    def test_unknown_status_defaults_to_pending(self):
        storage = MemoryStorage({config.SUBMISSIONS_KEY: json.dumps([{"id": "ABS-9", "status": "Maybe"}])})
        assert RecordStore(ABSTRACTS, storage).load()[0].status == "Pending Review"

    def test_malformed_and_duplicate_entries_skipped(self):
        raw = [{"id": "ABS-1"}, "garbage", 42, {"id": "ABS-1", "fullName": "Twin"}, {"id": "ABS-2"}]
        storage = MemoryStorage({config.SUBMISSIONS_KEY: json.dumps(raw)})
        records = RecordStore(ABSTRACTS, storage).load()
        assert [r.id for r in records] == ["ABS-1", "ABS-2"]

    def test_co_authors_string_is_parsed(self):
        storage = MemoryStorage({config.SUBMISSIONS_KEY: json.dumps([{"id": "ABS-1", "coAuthors": "A, , B "}])})
        assert RecordStore(ABSTRACTS, storage).load()[0].co_authors == ["A", "B"]


class TestUnreadablePayload:
    TRUNCATED = '[{"id": "ABS-1", "fullName": "Existing"'

    def test_add_refuses_to_overwrite(self):
        storage = MemoryStorage({config.SUBMISSIONS_KEY: self.TRUNCATED})
        store = RecordStore(ABSTRACTS, storage)
        store.load()

        with pytest.raises(PersistenceError):
            store.add(make_abstract(2))
        assert storage.get(config.SUBMISSIONS_KEY) == self.TRUNCATED
        assert store.records == ()

    def test_remove_on_unreadable_payload_writes_nothing(self):
        storage = MemoryStorage({config.SUBMISSIONS_KEY: json.dumps({"ABS-1": {}})})
        store = RecordStore(ABSTRACTS, storage)
        store.load()
        assert store.remove("ABS-1") is StoreOutcome.NOT_FOUND
        assert storage.get(config.SUBMISSIONS_KEY) == json.dumps({"ABS-1": {}})

    def test_failed_read_blocks_writes(self, seeded_storage):
        failing = MagicMock(wraps=seeded_storage)
        failing.get.side_effect = PersistenceError("database is locked")
        store = RecordStore(ABSTRACTS, failing)

        assert store.load() == ()
        assert store.unreadable is True
        with pytest.raises(PersistenceError):
            store.add(make_abstract(4))
        failing.set.assert_not_called()

    def test_repaired_payload_clears_the_block(self):
        storage = MemoryStorage({config.SUBMISSIONS_KEY: self.TRUNCATED})
        store = RecordStore(ABSTRACTS, storage)
        store.load()

        storage.set(config.SUBMISSIONS_KEY, "[]")
        store.load()
        store.add(make_abstract(1))
        assert len(json.loads(storage.get(config.SUBMISSIONS_KEY))) == 1


class TestUpdate:
    def test_same_status_is_no_change(self, store, seeded_storage):
        before = seeded_storage.get(config.SUBMISSIONS_KEY)
        assert store.update("ABS-1", {"status": "Pending Review"}) is StoreOutcome.NO_CHANGE
        assert store.get("ABS-1").status == "Pending Review"
        assert seeded_storage.get(config.SUBMISSIONS_KEY) == before

    def test_new_status_is_updated(self, store, seeded_storage):
        assert store.update("ABS-1", {"status": "Accepted"}) is StoreOutcome.UPDATED
        assert store.get("ABS-1").status == "Accepted"
        assert stored_statuses(seeded_storage) == ["Accepted", "Accepted", "Pending Review"]

    def test_unknown_id_is_not_found(self, store):
        assert store.update("ABS-404", {"status": "Accepted"}) is StoreOutcome.NOT_FOUND

    def test_invalid_status_rejected(self, store):
        with pytest.raises(ValidationError):
            store.update("ABS-1", {"status": "Approved"})

    def test_only_status_is_mutable(self, store):
        with pytest.raises(ValidationError):
            store.update("ABS-1", {"email": "new@example.org"})

    def test_failed_write_leaves_memory_and_storage_unchanged(self, seeded_storage):
        failing = MagicMock(wraps=seeded_storage)
        failing.set.side_effect = PersistenceError("disk full")
        store = RecordStore(ABSTRACTS, failing)
        store.load()

        with pytest.raises(PersistenceError):
            store.update("ABS-1", {"status": "Rejected"})

        assert store.get("ABS-1").status == "Pending Review"
        assert stored_statuses(seeded_storage) == ["Pending Review", "Accepted", "Pending Review"]

    def test_unexpected_write_error_becomes_persistence_error(self, seeded_storage):
        failing = MagicMock(wraps=seeded_storage)
        failing.set.side_effect = OSError("read-only")
        store = RecordStore(ABSTRACTS, failing)
        store.load()

        with pytest.raises(PersistenceError):
            store.update("ABS-3", {"status": "Accepted"})
        assert store.get("ABS-3").status == "Pending Review"

    def test_update_keeps_malformed_entries_in_storage(self):
        raw = [{"id": "ABS-1"}, "garbage"]
        storage = MemoryStorage({config.SUBMISSIONS_KEY: json.dumps(raw)})
        store = RecordStore(ABSTRACTS, storage)
        store.load()

        store.update("ABS-1", {"status": "Accepted"})
        assert json.loads(storage.get(config.SUBMISSIONS_KEY)) == [{"id": "ABS-1", "status": "Accepted"}, "garbage"]


class TestAddRemove:
    def test_add_appends_and_persists(self, store, seeded_storage):
        store.add(make_abstract(4))
        assert [r.id for r in store.records][-1] == "ABS-4"
        assert len(json.loads(seeded_storage.get(config.SUBMISSIONS_KEY))) == 4

    def test_add_duplicate_id_rejected(self, store):
        with pytest.raises(ValidationError):
            store.add(make_abstract(1))

    def test_remove(self, store, seeded_storage):
        assert store.remove("ABS-2") is StoreOutcome.REMOVED
        assert store.ids() == {"ABS-1", "ABS-3"}
        assert store.update("ABS-3", {"status": "Accepted"}) is StoreOutcome.UPDATED
        assert stored_statuses(seeded_storage) == ["Pending Review", "Accepted"]

    def test_remove_unknown(self, store):
        assert store.remove("ABS-404") is StoreOutcome.NOT_FOUND
        assert len(store) == 3

    def test_round_trip_through_sqlite(self, sqlite_storage):
        sqlite_storage.set(config.SUBMISSIONS_KEY, stored([make_abstract(1), make_abstract(2)]))
        store = RecordStore(ABSTRACTS, sqlite_storage)
        store.load()
        store.update("ABS-2", {"status": "Rejected"})

        reloaded = RecordStore(ABSTRACTS, sqlite_storage)
        reloaded.load()
        assert reloaded.get("ABS-2").status == "Rejected"
