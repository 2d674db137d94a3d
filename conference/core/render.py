"""
Renderer - shapes records and pages into display-ready values.

Nothing here knows about widgets or markup; the terminal dashboard (or any
other presentation layer) consumes these plain structures.
"""

from dataclasses import dataclass
from datetime import tzinfo
from typing import Any, List, Sequence, Tuple

from .paginator import Page
from .schema import STATUS_ACCEPTED, STATUS_PENDING, STATUS_REJECTED, parse_timestamp

MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
          "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")

# Display tone per discriminator value, consumed as a style hint
STATUS_TONES = {
    STATUS_PENDING: "warning",
    STATUS_ACCEPTED: "success",
    STATUS_REJECTED: "error",
    "Speaker": "primary",
    "Student": "success",
    "Attendee": "accent",
}


def format_date(value: str, tz: tzinfo = None) -> str:
    """Jan 5, 2026, 10:30 AM in local time (or `tz`); empty for unparseable input."""
    moment = parse_timestamp(value)
    if moment is None:
        return ""
    moment = moment.astimezone(tz)
    hour = moment.hour % 12 or 12
    meridiem = "AM" if moment.hour < 12 else "PM"
    return f"{MONTHS[moment.month - 1]} {moment.day}, {moment.year}, {hour:02d}:{moment.minute:02d} {meridiem}"


def plural(count: int, word: str) -> str:
    return f"{count} {word}{'' if count == 1 else 's'}"


@dataclass(frozen=True)
class RenderedRow:
    key: str
    cells: Tuple[str, ...]
    tone: str


@dataclass(frozen=True)
class RenderedPage:
    columns: Tuple[str, ...]
    rows: Tuple[RenderedRow, ...]
    summary: str
    buttons: Tuple[Any, ...]
    current_page: int
    has_previous: bool
    has_next: bool
    empty_message: str = ""


def render_page(kind, page: Page) -> RenderedPage:
    """Project one page of records through the kind's table columns."""
    rows = []
    for record in page.items:
        cells = tuple(_display(column.accessor(record)) for column in kind.table_columns)
        tone = STATUS_TONES.get(getattr(record, kind.discriminator, ""), "")
        rows.append(RenderedRow(key=record.id, cells=cells, tone=tone))

    empty_message = ""
    if not rows:
        empty_message = f"No {kind.plural} found"

    return RenderedPage(
        columns=tuple(column.label for column in kind.table_columns),
        rows=tuple(rows),
        summary=f"Showing {page.start_index} to {page.end_index} of {page.count}",
        buttons=page.buttons,
        current_page=page.page_number,
        has_previous=page.has_previous,
        has_next=page.has_next,
        empty_message=empty_message,
    )


def detail_fields(kind, record) -> List[Tuple[str, str]]:
    """Label/value pairs for the detail view; every export column plus extras."""
    fields = [(column.label, _display(column.accessor(record))) for column in kind.export_columns]
    for label, attr in kind.detail_extras:
        value = getattr(record, attr, "")
        if value:
            fields.append((label, _display(value)))
    return fields


def stats(abstracts: Sequence[Any], registrations: Sequence[Any]) -> dict:
    """Dashboard counters."""
    return {
        "total": len(abstracts),
        "pending": sum(1 for s in abstracts if s.status == STATUS_PENDING),
        "accepted": sum(1 for s in abstracts if s.status == STATUS_ACCEPTED),
        "rejected": sum(1 for s in abstracts if s.status == STATUS_REJECTED),
        "registrations": len(registrations),
    }


def _display(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ", ".join(str(item) for item in value)
    return str(value)
