"""
Admin dashboard tests - list view state transitions, admin actions and the
notifications they raise.
"""

import csv
import io
import json
from datetime import date, datetime, timezone
from unittest.mock import MagicMock

import pytest

from conference.core import config
from conference.core.dashboard import AdminDashboard, ListView
from conference.core.errors import NotFoundError, StoreOutcome
from conference.core.kinds import ABSTRACTS
from conference.core.notify import FileDownloader, NotificationKind
from conference.core.query import SortKey, ViewState
from conference.core.store import RecordStore
from conftest import make_abstract, stored

NOW = datetime(2026, 1, 5, 10, 30, tzinfo=timezone.utc)


@pytest.fixture
def notifier():
    return MagicMock()


@pytest.fixture
def dashboard(seeded_storage, notifier, tmp_path):
    board = AdminDashboard(seeded_storage, notifier, FileDownloader(str(tmp_path)), clock=lambda: NOW)
    board.load()
    notifier.reset_mock()
    return board


def last_toast(notifier):
    kind, title, message, duration = notifier.notify.call_args.args
    return kind, title, message


class TestListView:
    def test_page_size_change_and_clamped_navigation(self, memory_storage):
        memory_storage.set(config.SUBMISSIONS_KEY, stored([make_abstract(n) for n in range(1, 31)]))
        store = RecordStore(ABSTRACTS, memory_storage)
        store.load()
        view = ListView(ABSTRACTS, store, ViewState(page_size=25))

        assert view.go_to_page(2).page == 2
        assert len(view.page().items) == 5
        assert view.go_to_page(99).page == 2
        assert view.set_page_size(10).page == 1
        assert view.page().total_pages == 3

    def test_get_unknown_raises(self, memory_storage):
        view = ListView(ABSTRACTS, RecordStore(ABSTRACTS, memory_storage))
        with pytest.raises(NotFoundError):
            view.get("ABS-404")

    def test_render_uses_current_state(self, seeded_storage):
        store = RecordStore(ABSTRACTS, seeded_storage)
        store.load()
        view = ListView(ABSTRACTS, store)
        view.set_filter("Accepted")
        assert [row.key for row in view.render().rows] == ["ABS-2"]


class TestLoad:
    def test_load_reports_count(self, seeded_storage, notifier):
        board = AdminDashboard(seeded_storage, notifier, MagicMock(), clock=lambda: NOW)
        counts = board.load()
        assert counts["total"] == 3
        assert counts["registrations"] == 2
        assert last_toast(notifier) == (NotificationKind.SUCCESS, "Data Loaded Successfully",
                                        "3 submissions loaded successfully.")

    def test_load_empty(self, memory_storage, notifier):
        AdminDashboard(memory_storage, notifier, MagicMock()).load()
        assert last_toast(notifier)[:2] == (NotificationKind.INFO, "No Submissions")

    def test_unreadable_collection_reports_error(self, seeded_storage, notifier):
        seeded_storage.set(config.REGISTRATIONS_KEY, '[{"id": "REG-1"')
        board = AdminDashboard(seeded_storage, notifier, MagicMock(), clock=lambda: NOW)

        assert board.load()["registrations"] == 0
        kind, title, message = last_toast(notifier)
        assert (kind, title) == (NotificationKind.ERROR, "Data Unavailable")
        assert "registrations" in message
        assert board.registrations.store.unreadable is True
        assert board.abstracts.store.unreadable is False

    def test_refresh_picks_up_new_records(self, dashboard, seeded_storage):
        raw = json.loads(seeded_storage.get(config.SUBMISSIONS_KEY))
        raw.append(make_abstract(4).to_dict())
        seeded_storage.set(config.SUBMISSIONS_KEY, json.dumps(raw))

        assert dashboard.refresh()["total"] == 4


class TestQueryControls:
    def test_filter_then_search_no_results(self, dashboard, notifier):
        result = dashboard.set_filter("abstracts", "Accepted")
        assert result.matched == 1
        assert last_toast(notifier) == (NotificationKind.INFO, "Filter Applied", "Showing 1 Accepted submission.")

        result = dashboard.set_search("abstracts", "garcia")
        assert result.matched == 0
        assert result.no_results is True
        assert last_toast(notifier)[:2] == (NotificationKind.WARNING, "No Results")

    def test_search_complete(self, dashboard, notifier):
        result = dashboard.set_search("abstracts", "  JOHNSON ")
        assert [r.id for r in result.records] == ["ABS-1"]
        assert last_toast(notifier) == (NotificationKind.SUCCESS, "Search Complete",
                                        'Found 1 submission matching "johnson".')

    def test_clearing_search_is_silent(self, dashboard, notifier):
        dashboard.set_search("abstracts", "")
        notifier.notify.assert_not_called()

    def test_registration_filter(self, dashboard, notifier):
        result = dashboard.set_filter("registrations", "Speaker")
        assert [r.full_name for r in result.records] == ["John Smith"]
        assert last_toast(notifier) == (NotificationKind.SUCCESS, "Filter Applied", "Found 1 registration")

    def test_sort_keeps_page_and_notifies(self, dashboard, notifier):
        dashboard.abstracts.state = dashboard.abstracts.state.with_page(3)
        result = dashboard.set_sort("abstracts", "name_asc")
        assert dashboard.abstracts.state.page == 3
        assert dashboard.abstracts.state.sort_key is SortKey.NAME_ASC
        assert [r.id for r in result.records] == ["ABS-2", "ABS-3", "ABS-1"]
        assert last_toast(notifier) == (NotificationKind.INFO, "Sorted", "Submissions sorted by Name (A-Z).")

    def test_unknown_sort_key_is_silent(self, dashboard, notifier):
        result = dashboard.set_sort("abstracts", "by_mood")
        assert dashboard.abstracts.state.sort_key is None
        assert [r.id for r in result.records] == ["ABS-1", "ABS-2", "ABS-3"]
        notifier.notify.assert_not_called()

    def test_paging(self, dashboard):
        dashboard.change_page_size("abstracts", 1)
        assert dashboard.next_page("abstracts").page_number == 2
        assert dashboard.next_page("abstracts").page_number == 3
        assert dashboard.next_page("abstracts").page_number == 3
        assert dashboard.previous_page("abstracts").page_number == 2
        assert dashboard.go_to_page("abstracts", 1).items[0].id == "ABS-1"

    def test_page_size_change_notifies_once(self, dashboard, notifier):
        dashboard.change_page_size("abstracts", 10)
        assert last_toast(notifier) == (NotificationKind.INFO, "Display Updated", "Showing 10 submissions per page.")
        notifier.reset_mock()
        dashboard.change_page_size("abstracts", 10)
        notifier.notify.assert_not_called()

    def test_unknown_kind(self, dashboard):
        with pytest.raises(ValueError):
            dashboard.set_filter("speakers", "all")


class TestRecords:
    def test_view_details(self, dashboard):
        fields = dict(dashboard.view_details("abstracts", "ABS-2"))
        assert fields["Full Name"] == "Ahmed Al-Mansouri"
        assert fields["Status"] == "Accepted"

    def test_view_details_not_found(self, dashboard, notifier):
        assert dashboard.view_details("registrations", "REG-404") is None
        assert last_toast(notifier) == (NotificationKind.ERROR, "Not Found", "Registration not found.")

    def test_update_status_no_change(self, dashboard, notifier):
        assert dashboard.update_status("ABS-1", "Pending Review") is StoreOutcome.NO_CHANGE
        assert last_toast(notifier) == (NotificationKind.INFO, "No Change",
                                        "Submission is already marked as Pending Review.")

    def test_update_status_accepted(self, dashboard, notifier, seeded_storage):
        assert dashboard.update_status("ABS-1", "Accepted") is StoreOutcome.UPDATED
        assert dashboard.abstracts.store.get("ABS-1").status == "Accepted"
        assert last_toast(notifier) == (NotificationKind.SUCCESS, "Submission Accepted",
                                        "Submission by Sarah Johnson has been accepted.")
        assert dashboard.stats()["accepted"] == 2
        assert json.loads(seeded_storage.get(config.SUBMISSIONS_KEY))[0]["status"] == "Accepted"

    def test_update_status_rejected_and_back(self, dashboard, notifier):
        dashboard.update_status("ABS-3", "Rejected")
        assert last_toast(notifier)[:2] == (NotificationKind.WARNING, "Submission Rejected")
        dashboard.update_status("ABS-3", "Pending Review")
        assert last_toast(notifier)[:2] == (NotificationKind.INFO, "Status Updated")

    def test_update_status_unknown_id(self, dashboard, notifier):
        assert dashboard.update_status("ABS-404", "Accepted") is StoreOutcome.NOT_FOUND
        assert last_toast(notifier) == (NotificationKind.ERROR, "Update Failed", "Submission not found.")

    def test_update_status_invalid_value(self, dashboard, notifier):
        assert dashboard.update_status("ABS-1", "Maybe") is None
        assert last_toast(notifier)[0] == NotificationKind.ERROR
        assert dashboard.abstracts.store.get("ABS-1").status == "Pending Review"

    def test_update_status_write_failure(self, seeded_storage, notifier):
        failing = MagicMock(wraps=seeded_storage)
        failing.set.side_effect = OSError("locked")
        board = AdminDashboard(failing, notifier, MagicMock(), clock=lambda: NOW)
        board.load()

        assert board.update_status("ABS-1", "Accepted") is None
        assert last_toast(notifier) == (NotificationKind.ERROR, "Update Failed",
                                        "Failed to update submission status. Please try again.")
        assert board.abstracts.store.get("ABS-1").status == "Pending Review"


class TestExport:
    def test_export_ignores_active_filter(self, dashboard, notifier, tmp_path):
        dashboard.set_filter("abstracts", "Accepted")
        dashboard.set_search("abstracts", "ahmed")

        path = dashboard.export("abstracts")

        assert path == tmp_path / "aieni-2026-submissions-2026-01-05.csv"
        rows = list(csv.reader(io.StringIO(path.read_text(encoding="utf-8"))))
        assert len(rows) == 4
        assert {row[0] for row in rows[1:]} == {"ABS-1", "ABS-2", "ABS-3"}
        assert last_toast(notifier) == (NotificationKind.SUCCESS, "Export Successful",
                                        "3 submissions exported to aieni-2026-submissions-2026-01-05.csv")

    def test_export_registrations(self, dashboard, tmp_path):
        path = dashboard.export("registrations")
        assert path.name == "aieni-2026-registrations-2026-01-05.csv"

    def test_empty_export_warns_and_skips_download(self, memory_storage, notifier):
        downloader = MagicMock()
        board = AdminDashboard(memory_storage, notifier, downloader, today=lambda: date(2026, 1, 5))
        board.load()

        assert board.export("abstracts") is None
        downloader.download.assert_not_called()
        assert last_toast(notifier)[:2] == (NotificationKind.WARNING, "No Data to Export")

    def test_download_failure(self, dashboard, notifier):
        dashboard.downloader = MagicMock()
        dashboard.downloader.download.side_effect = PermissionError("read-only")
        assert dashboard.export("abstracts") is None
        assert last_toast(notifier)[:2] == (NotificationKind.ERROR, "Export Failed")


class TestDemoData:
    def test_create_demo_data(self, memory_storage, notifier):
        board = AdminDashboard(memory_storage, notifier, MagicMock(), clock=lambda: NOW)
        assert board.create_demo_data() is True

        counts = board.stats()
        assert counts == {"total": 5, "pending": 3, "accepted": 2, "rejected": 0, "registrations": 3}
        titles = [call.args[1] for call in notifier.notify.call_args_list]
        assert "Demo Data Created" in titles
        assert titles[-1] == "Data Loaded Successfully"

    def test_demo_ids_are_unique(self, memory_storage, notifier):
        board = AdminDashboard(memory_storage, notifier, MagicMock(), clock=lambda: NOW)
        board.create_demo_data()
        assert len(board.abstracts.store.ids()) == 5
        assert len(board.registrations.store.ids()) == 3
