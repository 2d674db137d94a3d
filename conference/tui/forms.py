"""
Public intake forms - abstract submission and attendee registration.

Submissions run in a worker thread so the cosmetic demo delay (or the
backend round-trip) never blocks the UI; the submit button stays disabled
until the worker reports back.
"""

from typing import Dict, Optional, Tuple

from textual import work
from textual.app import ComposeResult
from textual.containers import Horizontal, VerticalScroll
from textual.screen import Screen
from textual.widgets import Button, Input, Label, Select, Static

from conference.core.errors import PersistenceError, TransportError, ValidationError
from conference.core.intake import MESSAGES, Upload, validate_upload
from conference.core.schema import DEFAULT_REGISTRATION_TYPE, REGISTRATION_TYPES
from conference.util.logging import logger


class IntakeFormScreen(Screen):
    """Shared layout and submit flow.

    Subclasses list their FIELDS and define `submit(values, upload)`, which
    calls the intake service and returns its receipt.
    """

    BINDINGS = [("escape", "app.pop_screen", "Back")]

    HEADING = ""
    SUBMIT_LABEL = "Submit"
    # (input id, label, placeholder)
    FIELDS: Tuple[Tuple[str, str, str], ...] = ()
    SUCCESS = ("", "")
    FAILURE = ("", "")

    def compose(self) -> ComposeResult:
        with VerticalScroll(classes="form-container"):
            yield Static(self.HEADING, classes="title")
            yield from self.compose_extra()
            for field_id, label, placeholder in self.FIELDS:
                yield Label(label, classes="label")
                yield Input(id=field_id, placeholder=placeholder)
            with Horizontal(classes="actions"):
                yield Button(self.SUBMIT_LABEL, id="form-submit", variant="primary")
                yield Button("Back", id="form-back")
            yield Static("", id="form-receipt", classes="receipt")

    def compose_extra(self) -> ComposeResult:
        return iter(())

    def form_values(self) -> Dict[str, str]:
        return {field_id: self.query_one(f"#{field_id}", Input).value for field_id, _, _ in self.FIELDS}

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "form-submit":
            self.handle_submit()
        elif event.button.id == "form-back":
            self.app.pop_screen()

    def handle_submit(self) -> None:
        button = self.query_one("#form-submit", Button)
        if button.disabled or self.app.intake.pending:
            return
        try:
            upload = self.selected_upload()
        except ValidationError as e:
            self.app.notify(e.message, title=e.title, severity="error")
            return

        button.disabled = True
        button.label = "Submitting..."
        self.run_submission(self.form_values(), upload)

    def selected_upload(self) -> Optional[Upload]:
        return None

    @work(thread=True, exclusive=True)
    def run_submission(self, values: Dict[str, str], upload: Optional[Upload]) -> None:
        try:
            receipt = self.submit(values, upload)
        except ValidationError as e:
            self.app.call_from_thread(self.handle_failure, e.title, e.message)
        except (TransportError, PersistenceError) as e:
            logger.error(f"{self.HEADING} failed: {e}")
            self.app.call_from_thread(self.handle_failure, *self.FAILURE)
        else:
            self.app.call_from_thread(self.handle_success, receipt.id)

    def handle_success(self, record_id: str) -> None:
        title, message = self.SUCCESS
        message = message.format(id=record_id)
        self.app.notify(message, title=title, severity="information")
        self.query_one("#form-receipt", Static).update(f"✅ {title} {message}")
        for field_id, _, _ in self.FIELDS:
            self.query_one(f"#{field_id}", Input).value = ""
        self.reset_button()

    def handle_failure(self, title: str, message: str) -> None:
        self.app.notify(message, title=title, severity="error")
        self.reset_button()

    def reset_button(self) -> None:
        button = self.query_one("#form-submit", Button)
        button.disabled = False
        button.label = self.SUBMIT_LABEL


class AbstractFormScreen(IntakeFormScreen):
    HEADING = "📄 Submit an Abstract"
    SUBMIT_LABEL = "Submit Abstract"
    FIELDS = (
        ("full_name", "Full Name *", "Dr. Jane Doe"),
        ("job_title", "Job Title", "Research Scientist"),
        ("email", "Email *", "jane.doe@university.edu"),
        ("phone", "Phone", "+971-50-1234567"),
        ("institution", "Institution *", "University name"),
        ("country", "Country *", "United Arab Emirates"),
        ("co_authors", "Co-Authors (comma separated)", "Dr. A, Prof. B"),
        ("abstract_file", "Abstract File (.doc / .docx path)", "/path/to/abstract.docx"),
    )
    SUCCESS = MESSAGES["abstract_success"]
    FAILURE = MESSAGES["abstract_error"]

    def form_values(self) -> Dict[str, str]:
        values = super().form_values()
        values.pop("abstract_file", None)
        return values

    def selected_upload(self) -> Optional[Upload]:
        path = self.query_one("#abstract_file", Input).value.strip()
        if not path:
            return None
        try:
            upload = Upload.from_path(path)
        except OSError as e:
            raise ValidationError("File Not Found", f"Could not read {path}.", field="abstract_file") from e
        return validate_upload(upload)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id != "abstract_file" or not event.value.strip():
            return
        try:
            self.selected_upload()
        except ValidationError as e:
            self.app.notify(e.message, title=e.title, severity="error")
        else:
            self.app.notify("Your document has been selected successfully.", title="File Uploaded",
                            severity="information")

    def submit(self, values: Dict[str, str], upload: Optional[Upload]):
        return self.app.intake.submit_abstract(values, upload)


class RegistrationFormScreen(IntakeFormScreen):
    HEADING = "🎟 Register to Attend"
    SUBMIT_LABEL = "Register"
    FIELDS = (
        ("full_name", "Full Name *", "Jane Doe"),
        ("job_title", "Job Title", "Engineer"),
        ("email", "Email *", "jane.doe@example.com"),
        ("phone", "Phone", "+971-50-1234567"),
        ("country", "Country *", "United Arab Emirates"),
        ("organization", "Organization", "Company or university"),
    )
    SUCCESS = MESSAGES["registration_success"]
    FAILURE = MESSAGES["registration_error"]

    def compose_extra(self) -> ComposeResult:
        yield Label("Registration Type", classes="label")
        yield Select([(value, value) for value in REGISTRATION_TYPES], value=DEFAULT_REGISTRATION_TYPE,
                     allow_blank=False, id="registration_type")

    def form_values(self) -> Dict[str, str]:
        values = super().form_values()
        values["registration_type"] = self.query_one("#registration_type", Select).value
        return values

    def submit(self, values: Dict[str, str], upload: Optional[Upload]):
        return self.app.intake.register(values)
