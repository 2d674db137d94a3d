"""
Record kind descriptors. One generic list engine serves both entity types;
everything that differs between them lives here.
"""

from dataclasses import dataclass, field
from typing import Dict, Sequence, Tuple, Type

from . import config
from .exporter import Column
from .render import format_date
from .schema import (
    REGISTRATION_TYPES,
    SUBMISSION_STATUSES,
    AbstractSubmission,
    Registration,
)


@dataclass(frozen=True)
class RecordKind:
    name: str
    singular: str
    plural: str
    storage_key: str
    id_prefix: str
    record_type: Type
    discriminator: str
    discriminator_values: Tuple[str, ...]
    search_fields: Tuple[str, ...]
    date_field: str
    name_field: str
    table_columns: Sequence[Column]
    export_columns: Sequence[Column]
    # dataclass field -> stored camelCase key, for fields an admin may change
    mutable_fields: Dict[str, str] = field(default_factory=dict)
    detail_extras: Tuple[Tuple[str, str], ...] = ()

    def from_stored(self, raw, index, now=None):
        return self.record_type.from_stored(raw, index, now)


ABSTRACTS = RecordKind(
    name="abstracts",
    singular="submission",
    plural="submissions",
    storage_key=config.SUBMISSIONS_KEY,
    id_prefix="ABS",
    record_type=AbstractSubmission,
    discriminator="status",
    discriminator_values=SUBMISSION_STATUSES,
    search_fields=("full_name", "email", "title", "institution"),
    date_field="submitted_at",
    name_field="last_name",
    table_columns=(
        Column("ID", lambda s: s.id),
        Column("Name", lambda s: s.full_name),
        Column("Email", lambda s: s.email),
        Column("Institution", lambda s: s.institution),
        Column("Title", lambda s: s.title),
        Column("Status", lambda s: s.status),
        Column("Submitted", lambda s: format_date(s.submitted_at)),
    ),
    export_columns=(
        Column("ID", lambda s: s.id),
        Column("Full Name", lambda s: s.full_name),
        Column("Job Title", lambda s: s.job_title),
        Column("Email", lambda s: s.email),
        Column("Phone", lambda s: s.phone),
        Column("Institution", lambda s: s.institution),
        Column("Country", lambda s: s.country),
        Column("Title", lambda s: s.title),
        Column("Co-Authors", lambda s: s.co_authors),
        Column("File Name", lambda s: s.file_name),
        Column("Status", lambda s: s.status),
        Column("Submitted", lambda s: format_date(s.submitted_at)),
    ),
    mutable_fields={"status": "status"},
    detail_extras=(("File Size", "file_size_mb"), ("Abstract", "abstract")),
)

REGISTRATIONS = RecordKind(
    name="registrations",
    singular="registration",
    plural="registrations",
    storage_key=config.REGISTRATIONS_KEY,
    id_prefix="REG",
    record_type=Registration,
    discriminator="registration_type",
    discriminator_values=REGISTRATION_TYPES,
    search_fields=("full_name", "email", "organization", "country"),
    date_field="registered_at",
    name_field="last_name",
    table_columns=(
        Column("ID", lambda r: r.id),
        Column("Name", lambda r: r.full_name),
        Column("Email", lambda r: r.email),
        Column("Organization", lambda r: r.organization),
        Column("Country", lambda r: r.country),
        Column("Type", lambda r: r.registration_type),
        Column("Registered", lambda r: format_date(r.registered_at)),
    ),
    export_columns=(
        Column("ID", lambda r: r.id),
        Column("Full Name", lambda r: r.full_name),
        Column("Job Title", lambda r: r.job_title),
        Column("Email", lambda r: r.email),
        Column("Phone", lambda r: r.phone),
        Column("Country", lambda r: r.country),
        Column("Organization", lambda r: r.organization),
        Column("Registration Type", lambda r: r.registration_type),
        Column("Registered At", lambda r: format_date(r.registered_at)),
    ),
)

KINDS = {kind.name: kind for kind in (ABSTRACTS, REGISTRATIONS)}
