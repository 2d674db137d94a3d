"""
Notification and download collaborators. Both are fire-and-forget from the
core's point of view.
"""

from enum import Enum
from pathlib import Path
from typing import Protocol

from . import config
from ..util.logging import logger

DEFAULT_DURATION_MS = 4000


class NotificationKind(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class Notifier(Protocol):
    def notify(self, kind: NotificationKind, title: str, message: str,
               duration_ms: int = DEFAULT_DURATION_MS) -> None: ...


class LogNotifier:
    """Writes notifications to the structured logger."""

    def notify(self, kind: NotificationKind, title: str, message: str,
               duration_ms: int = DEFAULT_DURATION_MS) -> None:
        text = f"[{NotificationKind(kind).value}] {title}: {message}"
        if kind == NotificationKind.ERROR:
            logger.error(text)
        elif kind == NotificationKind.WARNING:
            logger.warning(text)
        else:
            logger.info(text)


class FileDownloader:
    """Saves exported text under a directory, the terminal stand-in for a browser download."""

    def __init__(self, directory: str = None):
        self.directory = Path(directory or config.EXPORT_DIR)

    def download(self, filename: str, mime_type: str, text: str) -> Path:
        self.directory.mkdir(parents=True, exist_ok=True)
        target = self.directory / Path(filename).name
        target.write_text(text, encoding="utf-8")
        logger.info(f"Saved {mime_type} download to {target}")
        return target
