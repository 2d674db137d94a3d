"""
Structured logging for portal operations - store writes, list queries,
exports, intake and admin authentication.
"""

import logging
import os
from typing import Any, Dict, Iterable

SENSITIVE_FIELDS = frozenset({"password", "token", "adminToken", "secret", "credentials"})
MAX_VALUE_CHARS = 100


class StructuredLogger:
    """Structured logger for store, query, export, intake and auth operations."""

    def __init__(self, name: str = "conference_portal"):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(os.getenv("LOG_LEVEL", "INFO").upper())

        if not self.logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
            self.logger.addHandler(handler)

    def log_operation(self, operation: str, status: str, details: Dict[str, Any] = None):
        """Log a structured operation."""
        message = f"Operation: {operation}, Status: {status}"
        if details:
            message += f", Details: {sanitize_payload(details)}"

        if status in ("failed", "error"):
            self.logger.error(message)
        else:
            self.logger.info(message)

    def log_store_operation(self, kind: str, operation: str, record_id: str = None,
                            status: str = "success", details: Dict[str, Any] = None):
        """Log a record store operation (load, add, update, remove)."""
        log_details = {"kind": kind}
        if record_id is not None:
            log_details["record_id"] = record_id
        if details:
            log_details.update(details)

        self.log_operation(f"store.{operation}", status, log_details)

    def log_query(self, kind: str, criteria: Dict[str, Any], matched: int, total: int):
        """Log a list query (filter, search, sort)."""
        log_details = {"kind": kind, "matched": matched, "total": total}
        log_details.update(criteria)
        self.logger.debug(f"Operation: query, Status: success, Details: {log_details}")

    def log_export(self, kind: str, filename: str, rows: int, status: str = "success"):
        """Log a delimited text export."""
        self.log_operation("export", status, {"kind": kind, "filename": filename, "rows": rows})

    def log_intake(self, kind: str, record_id: str, mode: str, status: str = "success",
                   details: Dict[str, Any] = None):
        """Log a public form submission."""
        log_details = {"kind": kind, "record_id": record_id, "mode": mode}
        if details:
            log_details.update(details)

        self.log_operation("intake", status, log_details)

    def log_auth_event(self, success: bool, details: str = ""):
        """Log admin authentication events."""
        event_type = "login_success" if success else "login_failure"
        self.log_operation(
            f"auth.{event_type}",
            "success" if success else "failure",
            {"details": details}
        )

    # Plain messages
    def info(self, message: str) -> None:
        self.logger.info(message)

    def warning(self, message: str) -> None:
        self.logger.warning(message)

    def error(self, message: str) -> None:
        self.logger.error(message)

    def debug(self, message: str) -> None:
        self.logger.debug(message)


def sanitize_payload(payload: Any, sensitive_fields: Iterable[str] = SENSITIVE_FIELDS) -> Any:
    """Redact sensitive keys and shorten long strings before a payload is logged."""
    if isinstance(payload, dict):
        return {
            k: "[REDACTED]" if k in sensitive_fields else sanitize_payload(v, sensitive_fields)
            for k, v in payload.items()
        }
    if isinstance(payload, str):
        return payload[:MAX_VALUE_CHARS] + "..." if len(payload) > MAX_VALUE_CHARS else payload
    if isinstance(payload, (list, tuple)):
        return [sanitize_payload(item, sensitive_fields) for item in payload]
    return payload


# Global logger instance
logger = StructuredLogger()
