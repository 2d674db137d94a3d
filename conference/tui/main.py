"""
Conference portal TUI - public intake forms and the admin dashboard for
abstract submissions and registrations.
"""

import sys

from textual.app import App, ComposeResult
from textual.containers import Container, Horizontal
from textual.screen import Screen
from textual.widgets import Button, Footer, Header, Static, TabbedContent, TabPane

from conference.core import config
from conference.core.auth import AuthService
from conference.core.dashboard import AdminDashboard
from conference.core.intake import IntakeService
from conference.core.kinds import ABSTRACTS, REGISTRATIONS
from conference.core.notify import FileDownloader
from conference.core.storage import SqliteStorage
from conference.core.transport import ApiClient
from conference.util.logging import logger
from .auth import LoginScreen
from .forms import AbstractFormScreen, RegistrationFormScreen
from .notifier import TextualNotifier
from .records import RecordPanel


class HomeScreen(Screen):
    """Landing screen linking the public forms and the admin dashboard."""

    BINDINGS = [("escape", "app.quit", "Quit")]

    def compose(self) -> ComposeResult:
        mode = "Demo mode (local storage)" if self.app.intake.demo_mode else f"Backend: {config.API_BASE_URL}"
        yield Container(
            Static("🎓 AIENI 2026 Conference Portal", classes="title"),
            Static(mode, classes="subtitle"),
            Button("Submit an Abstract", id="open-abstract-form", variant="primary"),
            Button("Register to Attend", id="open-registration-form", variant="primary"),
            Button("Admin Dashboard", id="open-dashboard", variant="warning"),
            Static("ESC to quit", classes="hint"),
            id="home-container",
        )

    def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id

        if button_id == "open-abstract-form":
            self.app.push_screen("abstract-form")
        elif button_id == "open-registration-form":
            self.app.push_screen("registration-form")
        elif button_id == "open-dashboard":
            if self.app.auth.is_authenticated():
                self.app.push_screen("dashboard")
            else:
                self.app.push_screen("login")


class DashboardScreen(Screen):
    """Main dashboard screen after authentication."""

    BINDINGS = [
        ("escape", "app.pop_screen", "Back"),
        ("ctrl+r", "refresh", "Refresh"),
    ]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._records_loaded = False

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static("", id="stats", classes="stats")
        with TabbedContent(id="tabs"):
            with TabPane("Abstract Submissions", id="tab-abstracts"):
                yield RecordPanel(ABSTRACTS, id="panel-abstracts")
            with TabPane("Registrations", id="tab-registrations"):
                yield RecordPanel(REGISTRATIONS, id="panel-registrations")
        with Horizontal(classes="toolbar"):
            yield Button("Create Demo Data", id="demo-data", variant="warning")
            yield Button("Logout", id="logout", variant="error")
        yield Footer()

    def on_screen_resume(self) -> None:
        if not self.app.auth.is_authenticated():
            self.app.notify("Please login to access the dashboard.", title="Authentication Required",
                            severity="warning", timeout=3)
            self.app.switch_screen("login")
            return
        if not self._records_loaded:
            self._records_loaded = True
            self.app.dashboard.load()
            self.call_after_refresh(self.refresh_all)

    def refresh_all(self) -> None:
        """Redraw both panels and the stats line."""
        counts = self.app.dashboard.stats()
        self.query_one("#stats", Static).update(
            f"Total: {counts['total']}   Pending: {counts['pending']}   "
            f"Accepted: {counts['accepted']}   Rejected: {counts['rejected']}   "
            f"Registrations: {counts['registrations']}"
        )
        for panel in self.query(RecordPanel):
            panel.refresh_view()

    def action_refresh(self) -> None:
        self.app.dashboard.refresh()
        self.refresh_all()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        button_id = event.button.id

        if button_id == "demo-data":
            if self.app.dashboard.create_demo_data():
                self.refresh_all()
        elif button_id == "logout":
            self.logout()

    def logout(self) -> None:
        self.app.notify("You are being logged out...", title="Logging Out", severity="information", timeout=2)
        self.app.auth.logout()
        self._records_loaded = False
        self.app.pop_screen()


class PortalApp(App):
    """AIENI 2026 conference portal TUI application."""

    CSS = """
    .title {
        text-align: center;
        text-style: bold;
        margin-bottom: 1;
        color: cyan;
    }

    .subtitle {
        text-align: center;
        margin-bottom: 2;
        color: gray;
    }

    .label {
        margin-top: 1;
    }

    .hint {
        text-align: center;
        margin-top: 1;
        color: gray;
        text-style: italic;
    }

    .stats {
        background: $boost;
        padding: 0 1;
        height: 1;
    }

    .controls, .pager, .actions, .toolbar {
        height: auto;
    }

    .controls Select {
        width: 1fr;
    }

    .controls Input {
        width: 2fr;
    }

    .summary {
        width: 1fr;
        padding: 1;
    }

    .page-buttons {
        width: auto;
        height: auto;
    }

    .page-button {
        min-width: 5;
    }

    .ellipsis {
        width: 3;
        padding: 1 0;
    }

    DataTable {
        height: 1fr;
    }

    #auth-container, #home-container {
        width: 60;
        height: auto;
        align: center middle;
    }

    .form-container {
        padding: 1 2;
    }

    .receipt {
        margin-top: 1;
        color: green;
    }

    DetailScreen {
        align: center middle;
    }

    #detail-dialog {
        width: 80%;
        height: 80%;
        border: thick $primary;
        background: $surface;
        padding: 1 2;
    }

    .detail-label {
        text-style: bold;
        color: gray;
    }

    .detail-value {
        margin-bottom: 1;
    }

    .tone-warning { color: yellow; }
    .tone-success { color: green; }
    .tone-error { color: red; }
    .tone-primary { color: cyan; }
    .tone-accent { color: magenta; }
    """

    TITLE = "AIENI 2026 Conference Portal"

    SCREENS = {
        "home": HomeScreen,
        "login": LoginScreen,
        "dashboard": DashboardScreen,
        "abstract-form": AbstractFormScreen,
        "registration-form": RegistrationFormScreen,
    }

    def __init__(self, storage=None, transport=None, downloader=None):
        super().__init__()
        self.storage = storage or SqliteStorage()
        self.transport = transport or ApiClient()
        self.auth = AuthService(self.storage, self.transport)
        self.intake = IntakeService(self.storage, self.transport)
        self.dashboard = AdminDashboard(self.storage, TextualNotifier(self), downloader or FileDownloader())

    def on_mount(self) -> None:
        """Initialize the portal on startup."""
        logger.info("Conference portal started")

        issues = config.validate_config()
        if issues:
            self.exit(message="; ".join(issues))
            return
        self.push_screen("home")


def main():
    """Portal entry point."""
    try:
        issues = config.validate_config()
        if issues:
            for issue in issues:
                print(f"❌ Configuration error: {issue}")
            sys.exit(1)

        print("🚀 Starting AIENI 2026 Conference Portal...")
        app = PortalApp()
        app.run()

    except KeyboardInterrupt:
        print("\nℹ️  Portal interrupted by user")
        logger.info("Portal exited via keyboard interrupt")
    except Exception as e:
        error_msg = f"Portal startup failed: {e}"
        print(f"❌ {error_msg}")
        logger.error(error_msg)
        sys.exit(1)


if __name__ == "__main__":
    main()
