"""
Admin dashboard controller - two list views (abstracts and registrations)
over a shared storage collaborator, plus the admin actions and the toast
notifications each one raises.

Presentation is left to the caller: everything here returns plain values
from core.render and reports through the Notifier.
"""

import json
from datetime import date, datetime
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

from . import config
from .demo import demo_abstracts, demo_registrations
from .errors import NotFoundError, PersistenceError, StoreOutcome, ValidationError
from .exporter import CSV_MIME_TYPE, export_filename, to_delimited_text
from .kinds import ABSTRACTS, KINDS, REGISTRATIONS
from .notify import FileDownloader, LogNotifier, NotificationKind
from .paginator import Page, clamp_page, paginate
from .query import ALL, QueryResult, ViewState, apply_query, coerce_sort_key
from .render import RenderedPage, detail_fields, plural, render_page, stats
from .schema import STATUS_ACCEPTED, STATUS_PENDING, STATUS_REJECTED, utc_now
from .store import RecordStore
from ..util.logging import logger


class ListView:
    """One ViewState bound to one RecordStore."""

    def __init__(self, kind, store: RecordStore, state: ViewState = None):
        self.kind = kind
        self.store = store
        self.state = state or ViewState()

    def query(self) -> QueryResult:
        result = apply_query(self.store.records, self.state, self.kind)
        logger.log_query(self.kind.name, self.state.criteria, result.matched, result.total)
        return result

    def page(self) -> Page:
        return paginate(self.query().records, self.state.page, self.state.page_size)

    def render(self) -> RenderedPage:
        return render_page(self.kind, self.page())

    def get(self, record_id: str):
        record = self.store.get(record_id)
        if record is None:
            raise NotFoundError(self.kind.singular, record_id)
        return record

    def set_filter(self, value: str) -> ViewState:
        self.state = self.state.with_filter(value)
        return self.state

    def set_search(self, term: str) -> ViewState:
        self.state = self.state.with_search(term)
        return self.state

    def set_sort(self, key: str) -> ViewState:
        self.state = self.state.with_sort(key)
        return self.state

    def go_to_page(self, page_number: int) -> ViewState:
        """Move to `page_number`, clamped to the pages the current query yields."""
        pages = self.page().total_pages
        self.state = self.state.with_page(clamp_page(page_number, pages))
        return self.state

    def set_page_size(self, page_size: int) -> ViewState:
        self.state = self.state.with_page_size(page_size)
        return self.state


class AdminDashboard:
    """Admin actions over both record kinds."""

    def __init__(self, storage, notifier=None, downloader=None,
                 clock: Callable[[], datetime] = utc_now, today: Callable[[], date] = None):
        self.storage = storage
        self.notifier = notifier or LogNotifier()
        self.downloader = downloader or FileDownloader()
        self._clock = clock
        self._today = today or (lambda: self._clock().date())
        self.views: Dict[str, ListView] = {
            kind.name: ListView(kind, RecordStore(kind, storage))
            for kind in (ABSTRACTS, REGISTRATIONS)
        }

    @property
    def abstracts(self) -> ListView:
        return self.views[ABSTRACTS.name]

    @property
    def registrations(self) -> ListView:
        return self.views[REGISTRATIONS.name]

    def view(self, kind_name: str) -> ListView:
        if kind_name not in KINDS:
            raise ValueError(f"Unknown record kind: {kind_name}")
        return self.views[kind_name]

    def _notify(self, kind: NotificationKind, title: str, message: str, duration_ms: int = 4000):
        self.notifier.notify(kind, title, message, duration_ms)

    # Loading

    def load(self) -> Dict[str, int]:
        now = self._clock()
        for view in self.views.values():
            view.store.load(now)

        unreadable = [view.kind.plural for view in self.views.values() if view.store.unreadable]
        if unreadable:
            self._notify(NotificationKind.ERROR, "Data Unavailable",
                         f"Stored {' and '.join(unreadable)} could not be read. Changes are disabled.", 6000)
            return self.stats()

        count = len(self.abstracts.store)
        if count == 0:
            self._notify(NotificationKind.INFO, "No Submissions",
                         "No submissions found. Waiting for new submissions.")
        else:
            self._notify(NotificationKind.SUCCESS, "Data Loaded Successfully",
                         f"{plural(count, 'submission')} loaded successfully.")
        return self.stats()

    def refresh(self) -> Dict[str, int]:
        self._notify(NotificationKind.INFO, "Refreshing Data", "Loading latest submissions...", 2000)
        return self.load()

    def stats(self) -> Dict[str, int]:
        return stats(self.abstracts.store.records, self.registrations.store.records)

    def create_demo_data(self) -> bool:
        """Replace both collections with the sample records and reload."""
        now = self._clock()
        try:
            self.storage.set(ABSTRACTS.storage_key, json.dumps(demo_abstracts(now)))
            self.storage.set(REGISTRATIONS.storage_key, json.dumps(demo_registrations(now)))
        except PersistenceError as e:
            logger.error(f"Creating demo data failed: {e}")
            self._notify(NotificationKind.ERROR, "Demo Data Failed", "Sample data could not be saved.")
            return False

        self._notify(NotificationKind.SUCCESS, "Demo Data Created",
                     "Sample abstracts and registrations have been added!", 3000)
        self.load()
        return True

    # Query controls

    def set_filter(self, kind_name: str, value: str) -> QueryResult:
        view = self.view(kind_name)
        view.set_filter(value)
        result = view.query()
        if view.kind is ABSTRACTS:
            label = "All Submissions" if view.state.filter_value == ALL else view.state.filter_value
            noun = "submission" if result.matched == 1 else "submissions"
            self._notify(NotificationKind.INFO, "Filter Applied",
                         f"Showing {result.matched} {label} {noun}.", 2500)
        else:
            self._notify(NotificationKind.SUCCESS, "Filter Applied",
                         f"Found {plural(result.matched, view.kind.singular)}", 2000)
        return result

    def set_search(self, kind_name: str, term: str) -> QueryResult:
        view = self.view(kind_name)
        view.set_search(term)
        result = view.query()
        needle = view.state.search_term.strip().lower()
        if not needle:
            return result

        if result.matched == 0:
            self._notify(NotificationKind.WARNING, "No Results",
                         f'No {view.kind.plural} found matching "{needle}".', 3000)
        else:
            self._notify(NotificationKind.SUCCESS, "Search Complete",
                         f'Found {plural(result.matched, view.kind.singular)} matching "{needle}".', 2500)
        return result

    def set_sort(self, kind_name: str, key: str) -> QueryResult:
        view = self.view(kind_name)
        view.set_sort(key)
        sort_key = coerce_sort_key(key)
        if sort_key is None:
            logger.warning(f"Ignoring unknown sort key {key!r} for {view.kind.plural}")
        else:
            self._notify(NotificationKind.INFO, "Sorted",
                         f"{view.kind.plural.capitalize()} sorted by {sort_key.label}.", 2000)
        return view.query()

    def go_to_page(self, kind_name: str, page_number: int) -> Page:
        view = self.view(kind_name)
        view.go_to_page(page_number)
        return view.page()

    def next_page(self, kind_name: str) -> Page:
        view = self.view(kind_name)
        return self.go_to_page(kind_name, view.state.page + 1)

    def previous_page(self, kind_name: str) -> Page:
        view = self.view(kind_name)
        return self.go_to_page(kind_name, view.state.page - 1)

    def change_page_size(self, kind_name: str, page_size: int) -> Page:
        view = self.view(kind_name)
        if page_size != view.state.page_size:
            view.set_page_size(page_size)
            self._notify(NotificationKind.INFO, "Display Updated",
                         f"Showing {page_size} {view.kind.plural} per page.", 2000)
        return view.page()

    # Records

    def view_details(self, kind_name: str, record_id: str) -> Optional[List[Tuple[str, str]]]:
        view = self.view(kind_name)
        try:
            record = view.get(record_id)
        except NotFoundError:
            self._notify(NotificationKind.ERROR, "Not Found",
                         f"{view.kind.singular.capitalize()} not found.", 3000)
            return None
        return detail_fields(view.kind, record)

    def update_status(self, record_id: str, new_status: str) -> Optional[StoreOutcome]:
        """Change an abstract's review status, notifying the outcome."""
        store = self.abstracts.store
        try:
            outcome = store.update(record_id, {"status": new_status})
        except ValidationError as e:
            self._notify(NotificationKind.ERROR, e.title, e.message)
            return None
        except PersistenceError as e:
            logger.error(f"Status update for {record_id} failed: {e}")
            self._notify(NotificationKind.ERROR, "Update Failed",
                         "Failed to update submission status. Please try again.")
            return None

        if outcome is StoreOutcome.NOT_FOUND:
            self._notify(NotificationKind.ERROR, "Update Failed", "Submission not found.", 3000)
        elif outcome is StoreOutcome.NO_CHANGE:
            self._notify(NotificationKind.INFO, "No Change",
                         f"Submission is already marked as {new_status}.", 3000)
        else:
            full_name = store.get(record_id).full_name
            messages = {
                STATUS_PENDING: (NotificationKind.INFO, "Status Updated",
                                 "Submission moved to Pending Review."),
                STATUS_ACCEPTED: (NotificationKind.SUCCESS, "Submission Accepted",
                                  f"Submission by {full_name} has been accepted."),
                STATUS_REJECTED: (NotificationKind.WARNING, "Submission Rejected",
                                  f"Submission by {full_name} has been rejected."),
            }
            self._notify(*messages[new_status])
        return outcome

    def export(self, kind_name: str) -> Optional[Path]:
        """Write every stored record of a kind to a CSV download; filters do not apply."""
        view = self.view(kind_name)
        kind = view.kind
        records = view.store.records
        if not records:
            self._notify(NotificationKind.WARNING, "No Data to Export",
                         f"There are no {kind.plural} to export. Please wait for {kind.plural} to be added.")
            return None

        filename = export_filename(config.EXPORT_PREFIX, kind.plural, self._today())
        try:
            text = to_delimited_text(records, kind.export_columns)
            path = self.downloader.download(filename, CSV_MIME_TYPE, text)
        except OSError as e:
            logger.log_export(kind.name, filename, len(records), status="failed")
            logger.error(f"Export of {kind.plural} failed: {e}")
            self._notify(NotificationKind.ERROR, "Export Failed",
                         f"Failed to export {kind.plural}. Please try again.")
            return None

        logger.log_export(kind.name, filename, len(records))
        self._notify(NotificationKind.SUCCESS, "Export Successful",
                     f"{plural(len(records), kind.singular)} exported to {filename}", 5000)
        return path
