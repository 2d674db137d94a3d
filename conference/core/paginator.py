"""
Paginator - slices an ordered sequence into 1-indexed pages and derives the
page-button strip shown under each list.
"""

import math
from dataclasses import dataclass
from typing import Any, List, Sequence, Tuple, Union

ELLIPSIS = "..."
MAX_FULL_BUTTONS = 7

PageButton = Union[int, str]


@dataclass(frozen=True)
class Page:
    """One page of a derived sequence.

    start_index/end_index are the 1-based positions of the first and last
    item shown (both 0 for an empty sequence).
    """
    items: Tuple[Any, ...]
    page_number: int
    page_size: int
    total_pages: int
    count: int
    start_index: int
    end_index: int
    buttons: Tuple[PageButton, ...]

    @property
    def has_previous(self) -> bool:
        return self.page_number > 1

    @property
    def has_next(self) -> bool:
        return self.page_number < self.total_pages


def total_pages(count: int, page_size: int) -> int:
    if page_size < 1:
        raise ValueError(f"page_size must be >= 1, got {page_size}")
    return math.ceil(count / page_size) if count > 0 else 0


def clamp_page(page_number: int, pages: int) -> int:
    """Clamp into [1, pages]; an empty sequence has only page 1."""
    if pages == 0:
        return 1
    return max(1, min(page_number, pages))


def page_buttons(current: int, pages: int) -> List[PageButton]:
    """Page numbers with at most one ellipsis on each side of the current window.

    Up to seven pages are listed in full. Beyond that the first and last page
    are always shown, with [current-1, current+1] between them; a gap of one
    page shows that page, a larger gap collapses to ELLIPSIS.
    """
    if pages <= MAX_FULL_BUTTONS:
        return list(range(1, pages + 1))

    current = clamp_page(current, pages)
    low = max(2, current - 1)
    high = min(pages - 1, current + 1)

    buttons: List[PageButton] = [1]
    if low - 2 > 1:
        buttons.append(ELLIPSIS)
    elif low - 2 == 1:
        buttons.append(2)
    buttons.extend(range(low, high + 1))
    if (pages - 1) - high > 1:
        buttons.append(ELLIPSIS)
    elif (pages - 1) - high == 1:
        buttons.append(pages - 1)
    buttons.append(pages)
    return buttons


def paginate(sequence: Sequence[Any], page_number: int, page_size: int) -> Page:
    """Cut one page out of `sequence`, clamping out-of-range page numbers."""
    count = len(sequence)
    pages = total_pages(count, page_size)
    page_number = clamp_page(page_number, pages)

    offset = (page_number - 1) * page_size
    items = tuple(sequence[offset:offset + page_size])

    return Page(
        items=items,
        page_number=page_number,
        page_size=page_size,
        total_pages=pages,
        count=count,
        start_index=offset + 1 if items else 0,
        end_index=min(page_number * page_size, count),
        buttons=tuple(page_buttons(page_number, pages)),
    )
