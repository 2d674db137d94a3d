"""
Renderer tests - date formatting, page projection and detail fields.
"""

from datetime import timedelta, timezone

from conference.core.kinds import ABSTRACTS, REGISTRATIONS
from conference.core.paginator import paginate
from conference.core.render import detail_fields, format_date, plural, render_page, stats
from conftest import make_abstract, make_registration


def test_format_date_in_given_zone():
    assert format_date("2026-01-05T10:30:00.000Z", timezone.utc) == "Jan 5, 2026, 10:30 AM"
    assert format_date("2026-01-05T00:05:00.000Z", timezone.utc) == "Jan 5, 2026, 12:05 AM"
    gulf = timezone(timedelta(hours=4))
    assert format_date("2026-01-05T10:30:00.000Z", gulf) == "Jan 5, 2026, 02:30 PM"


def test_format_date_unparseable():
    assert format_date("") == ""
    assert format_date("yesterday") == ""


def test_plural():
    assert plural(1, "submission") == "1 submission"
    assert plural(0, "registration") == "0 registrations"


def test_render_page_rows_and_summary():
    records = [make_abstract(n, status="Accepted" if n == 2 else "Pending Review") for n in range(1, 31)]
    rendered = render_page(ABSTRACTS, paginate(records, 2, 25))

    assert rendered.columns == tuple(column.label for column in ABSTRACTS.table_columns)
    assert [row.key for row in rendered.rows] == [f"ABS-{n}" for n in range(26, 31)]
    assert rendered.summary == "Showing 26 to 30 of 30"
    assert rendered.has_previous is True
    assert rendered.has_next is False
    assert rendered.buttons == (1, 2)
    assert rendered.empty_message == ""


def test_render_row_tone_follows_discriminator():
    rendered = render_page(ABSTRACTS, paginate([make_abstract(1, status="Rejected")], 1, 25))
    assert rendered.rows[0].tone == "error"

    rendered = render_page(REGISTRATIONS, paginate([make_registration(1, registration_type="Speaker")], 1, 25))
    assert rendered.rows[0].tone == "primary"


def test_render_empty_page():
    rendered = render_page(REGISTRATIONS, paginate([], 1, 25))
    assert rendered.rows == ()
    assert rendered.empty_message == "No registrations found"
    assert rendered.summary == "Showing 0 to 0 of 0"


def test_detail_fields_include_extras():
    record = make_abstract(1, co_authors=["Dr. A", "Dr. B"], file_size_mb="0.25 MB", abstract="Body text")
    fields = dict(detail_fields(ABSTRACTS, record))
    assert fields["Co-Authors"] == "Dr. A, Dr. B"
    assert fields["File Size"] == "0.25 MB"
    assert fields["Abstract"] == "Body text"


def test_stats():
    abstracts = [make_abstract(1), make_abstract(2, status="Accepted"), make_abstract(3, status="Rejected"),
                 make_abstract(4)]
    counts = stats(abstracts, [make_registration(1)])
    assert counts == {"total": 4, "pending": 2, "accepted": 1, "rejected": 1, "registrations": 1}
