"""
Admin login screen - gates the dashboard behind AuthService.
"""

from textual import work
from textual.app import ComposeResult
from textual.containers import Container
from textual.screen import Screen
from textual.widgets import Button, Input, Label, Static

from conference.core.errors import TransportError, ValidationError
from conference.util.logging import logger


class LoginScreen(Screen):
    """Authentication screen for dashboard access."""

    BINDINGS = [("escape", "app.pop_screen", "Back")]

    def compose(self) -> ComposeResult:
        yield Container(
            Static("🔐 AIENI 2026 Admin Dashboard", classes="title"),
            Static("Please sign in to continue", classes="subtitle"),
            Label("Email:", classes="label"),
            Input(id="login-email", placeholder="admin@eaic.ae"),
            Label("Password:", classes="label"),
            Input(id="login-password", placeholder="Enter password...", password=True),
            Button("Login", id="login-button", variant="primary"),
            Static("ESC to go back", classes="hint"),
            id="auth-container",
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "login-button":
            self.handle_login()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id in ("login-email", "login-password"):
            self.handle_login()

    def handle_login(self) -> None:
        button = self.query_one("#login-button", Button)
        if button.disabled:
            return
        button.disabled = True
        button.label = "Signing in..."

        email = self.query_one("#login-email", Input).value.strip()
        password = self.query_one("#login-password", Input).value
        self.attempt_login(email, password)

    @work(thread=True, exclusive=True)
    def attempt_login(self, email: str, password: str) -> None:
        try:
            self.app.auth.login(email, password)
        except ValidationError as e:
            self.app.call_from_thread(self.handle_login_failure, e.title, e.message)
        except TransportError as e:
            logger.error(f"Backend login failed: {e}")
            self.app.call_from_thread(self.handle_login_failure, "Login Failed", "Invalid email or password.")
        else:
            self.app.call_from_thread(self.handle_login_success)

    def handle_login_success(self) -> None:
        self.app.notify("Redirecting to dashboard...", title="Login Successful", severity="information")
        self.reset_form()
        self.app.switch_screen("dashboard")

    def handle_login_failure(self, title: str, message: str) -> None:
        self.app.notify(message, title=title, severity="error")
        self.reset_form()
        self.query_one("#login-button", Button).variant = "error"

    def reset_form(self) -> None:
        button = self.query_one("#login-button", Button)
        button.disabled = False
        button.label = "Login"
        button.variant = "primary"
        self.query_one("#login-password", Input).value = ""
