"""
Delimited text export of a whole record collection.

Every cell is quoted with embedded quotes doubled; sequence values are
flattened with "; " first. Callers pass the full store contents, never the
filtered view.
"""

import csv
import io
from dataclasses import dataclass
from datetime import date
from typing import Any, Callable, Iterable, Sequence

SEQUENCE_DELIMITER = "; "
CSV_MIME_TYPE = "text/csv;charset=utf-8"


@dataclass(frozen=True)
class Column:
    """One exported (or displayed) column: a label and a value accessor."""
    label: str
    accessor: Callable[[Any], Any]


def cell_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return SEQUENCE_DELIMITER.join(str(item) for item in value)
    return str(value)


def to_delimited_text(records: Iterable[Any], columns: Sequence[Column]) -> str:
    """Header row from column labels, then one fully quoted row per record."""
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow([column.label for column in columns])
    for record in records:
        writer.writerow([cell_text(column.accessor(record)) for column in columns])
    return buffer.getvalue()


def export_filename(prefix: str, plural: str, today: date = None) -> str:
    """e.g. aieni-2026-submissions-2026-01-05.csv"""
    today = today or date.today()
    return f"{prefix}-{plural}-{today.isoformat()}.csv"
