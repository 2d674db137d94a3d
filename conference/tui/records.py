"""
Record list panel and detail modal for the admin dashboard. One panel per
record kind; all state lives in the dashboard's ListView, the panel only
forwards control changes and redraws the rendered page.
"""

from typing import List, Optional, Tuple

from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import Button, DataTable, Input, Select, Static

from conference.core import config
from conference.core.paginator import ELLIPSIS
from conference.core.query import ALL, SortKey, coerce_sort_key
from conference.core.render import STATUS_TONES
from conference.core.schema import STATUS_ACCEPTED, STATUS_PENDING, STATUS_REJECTED

TONE_STYLES = {
    "warning": "bold yellow",
    "success": "bold green",
    "error": "bold red",
    "primary": "bold cyan",
    "accent": "bold magenta",
}

# Columns that carry the discriminator and get the tone style
TONE_COLUMNS = ("Status", "Type")

STATUS_ACTIONS = (
    (STATUS_ACCEPTED, "Accept", "success"),
    (STATUS_REJECTED, "Reject", "error"),
    (STATUS_PENDING, "Mark Pending", "warning"),
)


class RecordPanel(Vertical):
    """Filter/search/sort controls, the record table and the pager for one kind."""

    def __init__(self, kind, **kwargs):
        super().__init__(**kwargs)
        self.kind = kind

    @property
    def record_view(self):
        return self.app.dashboard.view(self.kind.name)

    def compose(self) -> ComposeResult:
        name = self.kind.name
        state = self.record_view.state
        filter_options = [("All", ALL)] + [(value, value) for value in self.kind.discriminator_values]
        page_sizes = sorted(set(config.PAGE_SIZE_OPTIONS) | {state.page_size})

        with Horizontal(classes="controls"):
            yield Select(filter_options, value=state.filter_value, allow_blank=False, id=f"{name}-filter")
            yield Input(placeholder=f"Search {self.kind.plural}... (Enter)", id=f"{name}-search")
            yield Select([(key.label, key.value) for key in SortKey], prompt="Sort by", id=f"{name}-sort")
            yield Select([(f"{size} per page", size) for size in page_sizes], value=state.page_size,
                         allow_blank=False, id=f"{name}-page-size")
        yield DataTable(id=f"{name}-table", cursor_type="row", zebra_stripes=True)
        with Horizontal(classes="pager"):
            yield Static("", id=f"{name}-summary", classes="summary")
            yield Button("‹ Prev", id=f"{name}-prev")
            yield Horizontal(id=f"{name}-pages", classes="page-buttons")
            yield Button("Next ›", id=f"{name}-next")
        with Horizontal(classes="actions"):
            yield Button("Export CSV", id=f"{name}-export", variant="success")
            yield Button("Refresh", id=f"{name}-refresh", variant="primary")

    def refresh_view(self) -> None:
        """Redraw the table and pager from the current page."""
        name = self.kind.name
        rendered = self.record_view.render()

        table = self.query_one(f"#{name}-table", DataTable)
        table.clear(columns=True)
        table.add_columns(*rendered.columns)
        tone_column = next((i for i, label in enumerate(rendered.columns) if label in TONE_COLUMNS), None)
        for row in rendered.rows:
            cells = [Text(cell) for cell in row.cells]
            if tone_column is not None and row.tone in TONE_STYLES:
                cells[tone_column].stylize(TONE_STYLES[row.tone])
            table.add_row(*cells, key=row.key)

        self.query_one(f"#{name}-summary", Static).update(rendered.empty_message or rendered.summary)
        self.query_one(f"#{name}-prev", Button).disabled = not rendered.has_previous
        self.query_one(f"#{name}-next", Button).disabled = not rendered.has_next

        pages = self.query_one(f"#{name}-pages", Horizontal)
        pages.remove_children()
        widgets = []
        for button in rendered.buttons:
            if button == ELLIPSIS:
                widgets.append(Static(ELLIPSIS, classes="ellipsis"))
            else:
                variant = "primary" if button == rendered.current_page else "default"
                widgets.append(Button(str(button), name=str(button), classes="page-button", variant=variant))
        if widgets:
            pages.mount(*widgets)

    def on_select_changed(self, event: Select.Changed) -> None:
        name = self.kind.name
        dashboard = self.app.dashboard
        state = self.record_view.state
        select_id = event.select.id

        if select_id == f"{name}-filter" and isinstance(event.value, str):
            if event.value != state.filter_value:
                dashboard.set_filter(name, event.value)
        elif select_id == f"{name}-sort" and isinstance(event.value, str):
            if coerce_sort_key(event.value) != state.sort_key:
                dashboard.set_sort(name, event.value)
        elif select_id == f"{name}-page-size" and isinstance(event.value, int):
            dashboard.change_page_size(name, event.value)
        else:
            return
        event.stop()
        self.refresh_view()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == f"{self.kind.name}-search":
            event.stop()
            self.app.dashboard.set_search(self.kind.name, event.value)
            self.refresh_view()

    def on_input_changed(self, event: Input.Changed) -> None:
        # Clearing the box drops the search without waiting for Enter
        if event.input.id == f"{self.kind.name}-search" and not event.value and self.record_view.state.search_term:
            event.stop()
            self.app.dashboard.set_search(self.kind.name, "")
            self.refresh_view()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        name = self.kind.name
        dashboard = self.app.dashboard
        button = event.button

        if button.has_class("page-button"):
            dashboard.go_to_page(name, int(button.name))
        elif button.id == f"{name}-prev":
            dashboard.previous_page(name)
        elif button.id == f"{name}-next":
            dashboard.next_page(name)
        elif button.id == f"{name}-export":
            dashboard.export(name)
        elif button.id == f"{name}-refresh":
            dashboard.refresh()
            self.screen.refresh_all()
        else:
            return
        event.stop()
        self.refresh_view()

    def on_data_table_row_selected(self, event: DataTable.RowSelected) -> None:
        event.stop()
        record_id = event.row_key.value
        fields = self.app.dashboard.view_details(self.kind.name, record_id)
        if fields is None:
            return

        record = self.record_view.store.get(record_id)
        tone = STATUS_TONES.get(getattr(record, self.kind.discriminator, ""), "")
        actions = STATUS_ACTIONS if self.kind.mutable_fields else ()
        self.app.push_screen(
            DetailScreen(f"{self.kind.singular.capitalize()} {record_id}", fields, actions, tone),
            lambda status: self.apply_status(record_id, status),
        )

    def apply_status(self, record_id: str, status: Optional[str]) -> None:
        if status is None:
            return
        self.app.dashboard.update_status(record_id, status)
        self.screen.refresh_all()


class DetailScreen(ModalScreen):
    """Read-only record details; dismisses with the chosen status, or None."""

    BINDINGS = [("escape", "close", "Close")]

    def __init__(self, heading: str, fields: List[Tuple[str, str]],
                 actions: Tuple[Tuple[str, str, str], ...] = (), tone: str = ""):
        super().__init__()
        self.heading = heading
        self.fields = fields
        self.actions = actions
        self.tone = tone

    def compose(self) -> ComposeResult:
        with VerticalScroll(id="detail-dialog"):
            yield Static(self.heading, classes="title", markup=False)
            for label, value in self.fields:
                classes = "detail-value"
                if label in TONE_COLUMNS and self.tone:
                    classes += f" tone-{self.tone}"
                yield Static(label, classes="detail-label", markup=False)
                yield Static(value or "-", classes=classes, markup=False)
            with Horizontal(classes="actions"):
                for status, label, variant in self.actions:
                    yield Button(label, name=status, classes="status-button", variant=variant)
                yield Button("Close", id="detail-close")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        event.stop()
        if event.button.has_class("status-button"):
            self.dismiss(event.button.name)
        else:
            self.dismiss(None)

    def action_close(self) -> None:
        self.dismiss(None)
