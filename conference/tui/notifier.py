"""
Toast notifications for the terminal dashboard, routed through Textual's
built-in notification system.
"""

from conference.core.notify import DEFAULT_DURATION_MS, NotificationKind

# Textual has no "success" severity; successes show as information
SEVERITIES = {
    NotificationKind.SUCCESS: "information",
    NotificationKind.INFO: "information",
    NotificationKind.WARNING: "warning",
    NotificationKind.ERROR: "error",
}


class TextualNotifier:
    """Notifier that raises a toast on a running Textual app; call it from the UI thread."""

    def __init__(self, app):
        self.app = app

    def notify(self, kind: NotificationKind, title: str, message: str,
               duration_ms: int = DEFAULT_DURATION_MS) -> None:
        severity = SEVERITIES[NotificationKind(kind)]
        self.app.notify(message, title=title, severity=severity, timeout=duration_ms / 1000)
