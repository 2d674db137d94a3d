"""
Query pipeline - filter, then search, then sort over one record collection.

Every stage is pure: it reads the sequence it is given and returns a new
tuple, so the full store and the derived view can live side by side.
"""

import unicodedata
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional, Sequence, Tuple

from .config import DEFAULT_PAGE_SIZE
from .schema import parse_timestamp

ALL = "all"

_EARLIEST = datetime.min.replace(tzinfo=timezone.utc)


class SortKey(str, Enum):
    DATE_DESC = "date_desc"
    DATE_ASC = "date_asc"
    NAME_ASC = "name_asc"
    NAME_DESC = "name_desc"

    @property
    def label(self) -> str:
        return SORT_LABELS[self]


SORT_LABELS = {
    SortKey.DATE_DESC: "Newest First",
    SortKey.DATE_ASC: "Oldest First",
    SortKey.NAME_ASC: "Name (A-Z)",
    SortKey.NAME_DESC: "Name (Z-A)",
}


@dataclass(frozen=True)
class ViewState:
    """Current filter/search/sort/page selection for one list view."""
    filter_value: str = ALL
    search_term: str = ""
    sort_key: Optional[SortKey] = None
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    def with_filter(self, value: str) -> 'ViewState':
        return replace(self, filter_value=value or ALL, page=1)

    def with_search(self, term: str) -> 'ViewState':
        return replace(self, search_term=term or "", page=1)

    def with_sort(self, key: Optional[str]) -> 'ViewState':
        return replace(self, sort_key=coerce_sort_key(key))

    def with_page(self, page: int) -> 'ViewState':
        return replace(self, page=page)

    def with_page_size(self, page_size: int) -> 'ViewState':
        if page_size < 1:
            raise ValueError(f"page_size must be >= 1, got {page_size}")
        return replace(self, page_size=page_size, page=1)

    @property
    def criteria(self) -> Dict[str, Any]:
        return {
            "filter": self.filter_value,
            "search": self.search_term,
            "sort": self.sort_key.value if self.sort_key else None,
        }


@dataclass(frozen=True)
class QueryResult:
    records: Tuple[Any, ...]
    total: int

    @property
    def matched(self) -> int:
        return len(self.records)

    @property
    def no_results(self) -> bool:
        """The store has records but none survived the criteria."""
        return self.total > 0 and not self.records


def coerce_sort_key(key: Any) -> Optional[SortKey]:
    """Unrecognized keys become None, which leaves order unchanged."""
    if key is None or isinstance(key, SortKey):
        return key
    try:
        return SortKey(key)
    except ValueError:
        return None


def field_text(record: Any, field_name: str) -> str:
    """Field value as text; absent or None fields read as the empty string."""
    value = getattr(record, field_name, None)
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return " ".join(str(item) for item in value)
    return str(value)


def filter_records(records: Sequence[Any], discriminator: str, value: str) -> Tuple[Any, ...]:
    if not value or value == ALL:
        return tuple(records)
    return tuple(r for r in records if getattr(r, discriminator, None) == value)


def search_records(records: Sequence[Any], fields: Sequence[str], term: str) -> Tuple[Any, ...]:
    needle = (term or "").strip().lower()
    if not needle:
        return tuple(records)
    return tuple(
        r for r in records
        if any(needle in field_text(r, f).lower() for f in fields)
    )


def collation_key(text: str) -> Tuple[str, str]:
    """Accent- and case-insensitive ordering, ties broken by the raw text."""
    decomposed = unicodedata.normalize("NFKD", text)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base.casefold(), text


def sort_records(records: Sequence[Any], sort_key: Optional[SortKey], date_field: str,
                 name_field: str) -> Tuple[Any, ...]:
    """Stable sort; Python's sort keeps equal keys in input order even when reversed."""
    if sort_key is None:
        return tuple(records)

    if sort_key in (SortKey.DATE_DESC, SortKey.DATE_ASC):
        def key(r):
            return parse_timestamp(field_text(r, date_field)) or _EARLIEST
    else:
        def key(r):
            return collation_key(field_text(r, name_field))

    descending = sort_key in (SortKey.DATE_DESC, SortKey.NAME_DESC)
    return tuple(sorted(records, key=key, reverse=descending))


def apply_query(records: Sequence[Any], state: ViewState, kind) -> QueryResult:
    """filter -> search -> sort, each stage fed by the previous one."""
    filtered = filter_records(records, kind.discriminator, state.filter_value)
    searched = search_records(filtered, kind.search_fields, state.search_term)
    ordered = sort_records(searched, state.sort_key, kind.date_field, kind.name_field)
    return QueryResult(records=ordered, total=len(records))
