"""
Record schema - abstract submissions and registrations as stored by the
public forms (camelCase JSON objects) and as handled by the dashboard.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

STATUS_PENDING = "Pending Review"
STATUS_ACCEPTED = "Accepted"
STATUS_REJECTED = "Rejected"
SUBMISSION_STATUSES = (STATUS_PENDING, STATUS_ACCEPTED, STATUS_REJECTED)

REGISTRATION_TYPES = ("Attendee", "Speaker", "Student")
DEFAULT_REGISTRATION_TYPE = "Attendee"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def iso_timestamp(moment: datetime) -> str:
    """ISO 8601 in UTC with millisecond precision, e.g. 2026-01-05T10:30:00.000Z."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    moment = moment.astimezone(timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def parse_timestamp(value: str) -> Optional[datetime]:
    """Parse an ISO 8601 timestamp; None when absent or malformed."""
    if not value:
        return None
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_co_authors(value: Any) -> List[str]:
    """Co-authors from a comma separated string or a list; empty entries dropped."""
    if value is None:
        return []
    if isinstance(value, str):
        parts = value.split(",")
    elif isinstance(value, (list, tuple)):
        parts = [str(item) for item in value if item is not None]
    else:
        return []
    return [part.strip() for part in parts if part.strip()]


def last_name(full_name: str) -> str:
    """Final whitespace-separated token of a full name."""
    tokens = (full_name or "").split()
    return tokens[-1] if tokens else ""


def _text(raw: Dict[str, Any], key: str, default: str = "") -> str:
    value = raw.get(key)
    if value is None or isinstance(value, (dict, list)):
        return default
    return str(value)


@dataclass(frozen=True)
class AbstractSubmission:
    id: str
    full_name: str = ""
    job_title: str = ""
    email: str = ""
    phone: str = ""
    institution: str = ""
    country: str = ""
    co_authors: List[str] = field(default_factory=list)
    title: str = "Research Abstract"
    abstract: str = ""
    file_name: str = ""
    file_size_mb: str = ""
    status: str = STATUS_PENDING
    submitted_at: str = ""

    @property
    def last_name(self) -> str:
        return last_name(self.full_name)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the stored camelCase object."""
        return {
            "id": self.id,
            "fullName": self.full_name,
            "jobTitle": self.job_title,
            "email": self.email,
            "phone": self.phone,
            "institution": self.institution,
            "country": self.country,
            "coAuthors": list(self.co_authors),
            "title": self.title,
            "abstract": self.abstract,
            "fileName": self.file_name,
            "fileSize": self.file_size_mb,
            "status": self.status,
            "submittedAt": self.submitted_at,
            "type": "abstract",
        }

    @classmethod
    def from_stored(cls, raw: Dict[str, Any], index: int = 0, now: datetime = None) -> 'AbstractSubmission':
        """Create from a stored object, filling every missing field with its default."""
        status = _text(raw, "status", STATUS_PENDING)
        if status not in SUBMISSION_STATUSES:
            status = STATUS_PENDING
        return cls(
            id=_text(raw, "id") or f"ABS-{index + 1}",
            full_name=_text(raw, "fullName"),
            job_title=_text(raw, "jobTitle"),
            email=_text(raw, "email"),
            phone=_text(raw, "phone"),
            institution=_text(raw, "institution"),
            country=_text(raw, "country"),
            co_authors=parse_co_authors(raw.get("coAuthors")),
            title=_text(raw, "title") or "Research Abstract",
            abstract=_text(raw, "abstract"),
            file_name=_text(raw, "fileName"),
            file_size_mb=_text(raw, "fileSize"),
            status=status,
            submitted_at=_text(raw, "submittedAt") or iso_timestamp(now or utc_now()),
        )


@dataclass(frozen=True)
class Registration:
    id: str
    registration_type: str = DEFAULT_REGISTRATION_TYPE
    full_name: str = ""
    job_title: str = ""
    email: str = ""
    phone: str = ""
    country: str = ""
    organization: str = ""
    registered_at: str = ""

    @property
    def last_name(self) -> str:
        return last_name(self.full_name)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the stored camelCase object."""
        return {
            "id": self.id,
            "registrationType": self.registration_type,
            "fullName": self.full_name,
            "jobTitle": self.job_title,
            "email": self.email,
            "phone": self.phone,
            "country": self.country,
            "organization": self.organization,
            "registeredAt": self.registered_at,
            "type": "registration",
        }

    @classmethod
    def from_stored(cls, raw: Dict[str, Any], index: int = 0, now: datetime = None) -> 'Registration':
        """Create from a stored object, filling every missing field with its default."""
        return cls(
            id=_text(raw, "id") or f"REG-{index + 1}",
            registration_type=_text(raw, "registrationType") or DEFAULT_REGISTRATION_TYPE,
            full_name=_text(raw, "fullName"),
            job_title=_text(raw, "jobTitle"),
            email=_text(raw, "email"),
            phone=_text(raw, "phone"),
            country=_text(raw, "country"),
            organization=_text(raw, "organization"),
            registered_at=_text(raw, "registeredAt") or iso_timestamp(now or utc_now()),
        )

