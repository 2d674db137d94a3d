"""
Public intake - abstract submission and attendee registration.

The forms arrive as flat key -> string mappings; pydantic models validate and
normalize them, then the service either appends a record to local storage
(demo mode) or posts it to the backend.
"""

import mimetypes
import re
import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import PurePath
from typing import Any, Callable, Dict, List, Mapping, Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic import ValidationError as PydanticValidationError

from . import config
from .errors import TransportError, ValidationError
from .kinds import ABSTRACTS, REGISTRATIONS
from .schema import (
    DEFAULT_REGISTRATION_TYPE,
    AbstractSubmission,
    Registration,
    iso_timestamp,
    parse_co_authors,
    utc_now,
)
from .store import RecordStore
from ..util.logging import logger

WORD_MIME_TYPES = (
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
)

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
PHONE_PATTERN = re.compile(r"^\+?[\d\s\-()]{6,20}$")

MESSAGES = {
    "file_invalid_type": ("Invalid File Type", "Please upload a Word document only (.doc or .docx)."),
    "file_too_large": ("File Too Large", "File size must be less than {limit}MB."),
    "validation": ("Validation Error", "Please fill in all required fields correctly."),
    "busy": ("Submission In Progress", "Please wait for the current submission to finish."),
    "abstract_success": ("Abstract Submitted!",
                         "Submission ID: {id}. You will receive the review decision by February 15, 2026."),
    "abstract_error": ("Submission Failed", "Please try again or contact Research.Center@Icp.gov.ae"),
    "registration_success": ("Registration Successful!",
                             "Registration ID: {id}. A confirmation email will be sent to your email address."),
    "registration_error": ("Registration Failed", "Please try again or contact Research.Center@Icp.gov.ae"),
}


def _required(value: str, label: str) -> str:
    if not value:
        raise ValueError(f"{label} is required")
    return value


class AbstractForm(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    full_name: str
    job_title: str = ""
    email: str
    phone: str = ""
    institution: str
    country: str
    co_authors: List[str] = []

    @field_validator('full_name')
    @classmethod
    def full_name_required(cls, v):
        return _required(v, "Full name")

    @field_validator('institution')
    @classmethod
    def institution_required(cls, v):
        return _required(v, "Institution")

    @field_validator('country')
    @classmethod
    def country_required(cls, v):
        return _required(v, "Country")

    @field_validator('email')
    @classmethod
    def email_must_be_valid(cls, v):
        if not EMAIL_PATTERN.match(v):
            raise ValueError('Please enter a valid email address.')
        return v.lower()

    @field_validator('phone')
    @classmethod
    def phone_must_be_valid(cls, v):
        if v and not PHONE_PATTERN.match(v):
            raise ValueError('Please enter a valid phone number.')
        return v

    @field_validator('co_authors', mode='before')
    @classmethod
    def split_co_authors(cls, v):
        return parse_co_authors(v)

    def payload(self) -> Dict[str, Any]:
        return {
            "fullName": self.full_name,
            "jobTitle": self.job_title,
            "email": self.email,
            "phone": self.phone,
            "institution": self.institution,
            "country": self.country,
            "coAuthors": list(self.co_authors),
        }


class RegistrationForm(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    registration_type: str = DEFAULT_REGISTRATION_TYPE
    full_name: str
    job_title: str = ""
    email: str
    phone: str = ""
    country: str
    organization: str = ""

    @field_validator('registration_type')
    @classmethod
    def default_registration_type(cls, v):
        return v or DEFAULT_REGISTRATION_TYPE

    @field_validator('full_name')
    @classmethod
    def full_name_required(cls, v):
        return _required(v, "Full name")

    @field_validator('country')
    @classmethod
    def country_required(cls, v):
        return _required(v, "Country")

    @field_validator('email')
    @classmethod
    def email_must_be_valid(cls, v):
        if not EMAIL_PATTERN.match(v):
            raise ValueError('Please enter a valid email address.')
        return v.lower()

    @field_validator('phone')
    @classmethod
    def phone_must_be_valid(cls, v):
        if v and not PHONE_PATTERN.match(v):
            raise ValueError('Please enter a valid phone number.')
        return v

    def payload(self) -> Dict[str, Any]:
        return {
            "registrationType": self.registration_type,
            "fullName": self.full_name,
            "jobTitle": self.job_title,
            "email": self.email,
            "phone": self.phone,
            "country": self.country,
            "organization": self.organization,
        }


def parse_form(model, form_data: Mapping[str, Any]):
    """Validate a flat form mapping, converting pydantic errors to ValidationError."""
    try:
        return model.model_validate(dict(form_data))
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(part) for part in first.get("loc", ()))
        message = first.get("msg", "").replace("Value error, ", "")
        if first.get("type") == "missing":
            message = f"{field.replace('_', ' ').capitalize()} is required"
        logger.info(f"Form rejected on field '{field}': {message}")
        raise ValidationError(MESSAGES["validation"][0], message, field=field) from e


@dataclass(frozen=True)
class Upload:
    name: str
    size_bytes: int
    content_type: str = ""
    content: bytes = b""

    @classmethod
    def from_path(cls, path: str) -> 'Upload':
        data = PurePath(path)
        with open(path, "rb") as fh:
            content = fh.read()
        return cls(name=data.name, size_bytes=len(content), content_type=guess_content_type(data.name),
                   content=content)

    @property
    def size_mb(self) -> str:
        return f"{self.size_bytes / (1024 * 1024):.2f} MB"

    @property
    def stem(self) -> str:
        """File name with its last extension removed."""
        return re.sub(r"\.[^/.]+$", "", self.name)


def guess_content_type(name: str) -> str:
    guessed, _ = mimetypes.guess_type(name)
    if guessed:
        return guessed
    suffix = PurePath(name).suffix.lower()
    if suffix == ".doc":
        return WORD_MIME_TYPES[0]
    if suffix == ".docx":
        return WORD_MIME_TYPES[1]
    return "application/octet-stream"


def validate_upload(upload: Upload, max_mb: int = None) -> Upload:
    """Word documents only, no larger than MAX_UPLOAD_MB."""
    max_mb = max_mb or config.MAX_UPLOAD_MB
    content_type = upload.content_type or guess_content_type(upload.name)
    if content_type not in WORD_MIME_TYPES:
        title, message = MESSAGES["file_invalid_type"]
        raise ValidationError(title, message, field="abstract_file")
    if upload.size_bytes > max_mb * 1024 * 1024:
        title, message = MESSAGES["file_too_large"]
        raise ValidationError(title, message.format(limit=max_mb), field="abstract_file")
    return upload


@dataclass(frozen=True)
class Receipt:
    kind: str
    id: str
    mode: str


class IntakeService:
    """Turns validated forms into stored records or backend submissions."""

    def __init__(self, storage, transport=None, demo_mode: bool = None, delay_sec: float = None,
                 sleep: Callable[[float], None] = time.sleep, clock: Callable[[], datetime] = utc_now):
        self.storage = storage
        self.transport = transport
        self.demo_mode = config.is_demo_mode() if demo_mode is None else demo_mode
        self.delay_sec = config.SUBMIT_DELAY_SEC if delay_sec is None else delay_sec
        self._sleep = sleep
        self._clock = clock
        self._pending = False

    @property
    def pending(self) -> bool:
        return self._pending

    def submit_abstract(self, form_data: Mapping[str, Any], upload: Optional[Upload] = None) -> Receipt:
        form = parse_form(AbstractForm, form_data)
        if upload is not None:
            validate_upload(upload)

        with self._in_flight():
            if not self.demo_mode:
                files = None
                if upload is not None:
                    files = {"word_file": (upload.name, upload.content, upload.content_type
                                           or guess_content_type(upload.name))}
                payload = form.payload()
                payload["confirmation"] = {"isOriginalWork": True, "agreedToTerms": True}
                return self._post(ABSTRACTS.name, config.get_api_endpoints()["submit_abstract"],
                                  payload, files)

            store = RecordStore(ABSTRACTS, self.storage)
            store.load()
            now = self._clock()
            record = AbstractSubmission(
                id=self._next_id(ABSTRACTS.id_prefix, now, store.ids()),
                full_name=form.full_name,
                job_title=form.job_title,
                email=form.email,
                phone=form.phone,
                institution=form.institution,
                country=form.country,
                co_authors=list(form.co_authors),
                title=upload.stem if upload else "Abstract Submission",
                abstract=f"Abstract uploaded as file: {upload.name if upload else 'No file'}",
                file_name=upload.name if upload else "No file uploaded",
                file_size_mb=upload.size_mb if upload else "0 MB",
                submitted_at=iso_timestamp(now),
            )
            store.add(record)
            logger.log_intake(ABSTRACTS.name, record.id, "demo")
            self._pause()
            return Receipt(kind=ABSTRACTS.name, id=record.id, mode="demo")

    def register(self, form_data: Mapping[str, Any]) -> Receipt:
        form = parse_form(RegistrationForm, form_data)

        with self._in_flight():
            if not self.demo_mode:
                return self._post(REGISTRATIONS.name, config.get_api_endpoints()["register"],
                                  form.payload(), None)

            store = RecordStore(REGISTRATIONS, self.storage)
            store.load()
            now = self._clock()
            record = Registration(
                id=self._next_id(REGISTRATIONS.id_prefix, now, store.ids()),
                registration_type=form.registration_type,
                full_name=form.full_name,
                job_title=form.job_title,
                email=form.email,
                phone=form.phone,
                country=form.country,
                organization=form.organization,
                registered_at=iso_timestamp(now),
            )
            store.add(record)
            logger.log_intake(REGISTRATIONS.name, record.id, "demo")
            self._pause()
            return Receipt(kind=REGISTRATIONS.name, id=record.id, mode="demo")

    def _post(self, kind: str, endpoint: str, payload: Dict[str, Any], files) -> Receipt:
        try:
            result = self.transport.submit(endpoint, payload, files=files)
        except TransportError as e:
            logger.log_intake(kind, "-", "backend", status="failed", details={"error": str(e)})
            raise
        logger.log_intake(kind, result["id"], "backend")
        return Receipt(kind=kind, id=result["id"], mode="backend")

    def _in_flight(self):
        return _PendingGuard(self)

    def _pause(self) -> None:
        if self.delay_sec:
            self._sleep(self.delay_sec)

    @staticmethod
    def _next_id(prefix: str, now: datetime, taken: set) -> str:
        """<prefix>-<epoch millis>, bumped a millisecond at a time past existing ids."""
        millis = int(now.timestamp() * 1000)
        while f"{prefix}-{millis}" in taken:
            millis += 1
        return f"{prefix}-{millis}"


class _PendingGuard:
    """Rejects a second submission while one is in flight."""

    def __init__(self, service: IntakeService):
        self.service = service

    def __enter__(self):
        if self.service._pending:
            title, message = MESSAGES["busy"]
            raise ValidationError(title, message)
        self.service._pending = True
        return self

    def __exit__(self, exc_type, exc, tb):
        self.service._pending = False
        return False
