"""
Shared fixtures for portal tests.
"""

import json
from datetime import datetime, timedelta, timezone

import pytest

from conference.core import config
from conference.core.schema import AbstractSubmission, Registration, iso_timestamp
from conference.core.storage import MemoryStorage, SqliteStorage

BASE_TIME = datetime(2026, 1, 5, 10, 30, tzinfo=timezone.utc)


def make_abstract(n, **overrides):
    fields = dict(
        id=f"ABS-{n}",
        full_name=f"Author {n}",
        email=f"author{n}@example.org",
        institution="Example University",
        country="United Arab Emirates",
        title=f"Paper {n}",
        submitted_at=iso_timestamp(BASE_TIME + timedelta(minutes=n)),
    )
    fields.update(overrides)
    return AbstractSubmission(**fields)


def make_registration(n, **overrides):
    fields = dict(
        id=f"REG-{n}",
        full_name=f"Guest {n}",
        email=f"guest{n}@example.org",
        organization="Example Org",
        country="Spain",
        registered_at=iso_timestamp(BASE_TIME + timedelta(minutes=n)),
    )
    fields.update(overrides)
    return Registration(**fields)


def stored(records):
    return json.dumps([r.to_dict() for r in records])


@pytest.fixture
def memory_storage():
    return MemoryStorage()


@pytest.fixture
def sqlite_storage(tmp_path):
    return SqliteStorage(str(tmp_path / "portal.db"))


@pytest.fixture
def three_abstracts():
    return [
        make_abstract(1, full_name="Sarah Johnson", title="Healthcare Diagnostics"),
        make_abstract(2, full_name="Ahmed Al-Mansouri", title="Arabic NLP", status="Accepted"),
        make_abstract(3, full_name="Maria Garcia", title="Autonomous Vehicles"),
    ]


@pytest.fixture
def seeded_storage(memory_storage, three_abstracts):
    memory_storage.set(config.SUBMISSIONS_KEY, stored(three_abstracts))
    memory_storage.set(config.REGISTRATIONS_KEY, stored([
        make_registration(1, full_name="John Smith", registration_type="Speaker"),
        make_registration(2, full_name="Aisha Mohammed"),
    ]))
    return memory_storage
