"""
Portal configuration - environment driven settings for the admin dashboard,
the public intake forms and the optional backend transport.
"""

import os
from pathlib import Path
from typing import Dict, List

from dotenv import load_dotenv

load_dotenv()

# Storage configuration (sqlite file standing in for the browser key-value store)
DB_PATH = os.getenv("DB_PATH", "./data/portal.db")

# Debug flag is now a function to be dynamic
DEBUG = os.getenv("DEBUG", "false").lower() == "true"

# Demo mode keeps everything local; backend mode talks to API_BASE_URL
DEMO_MODE = os.getenv("DEMO_MODE", "true").lower() == "true"
API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000/api")
HTTP_TIMEOUT_SEC = float(os.getenv("HTTP_TIMEOUT_SEC", "15"))

# Demo credentials (only used in demo mode)
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@eaic.ae")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")

# List views
DEFAULT_PAGE_SIZE = int(os.getenv("DEFAULT_PAGE_SIZE", "25"))
PAGE_SIZE_OPTIONS = (10, 25, 50, 100)

# Intake
MAX_UPLOAD_MB = int(os.getenv("MAX_UPLOAD_MB", "5"))
SUBMIT_DELAY_SEC = float(os.getenv("SUBMIT_DELAY_SEC", "1.5"))  # cosmetic
LOGIN_DELAY_SEC = float(os.getenv("LOGIN_DELAY_SEC", "1.0"))  # cosmetic

# Export
EXPORT_DIR = os.getenv("EXPORT_DIR", "./exports")
EXPORT_PREFIX = os.getenv("EXPORT_PREFIX", "aieni-2026")

# Storage keys, one per entity kind plus the admin session token
SUBMISSIONS_KEY = "aieni_submissions"
REGISTRATIONS_KEY = "aieni_registrations"
ADMIN_TOKEN_KEY = "adminToken"

# Version string
VERSION = "1.0.0"


def debug_enabled():
    """Check if debug mode is enabled."""
    return os.getenv("DEBUG", "false").lower() == "true"


def is_demo_mode():
    """Check if the portal runs against local storage only."""
    return os.getenv("DEMO_MODE", "true").lower() == "true"


def get_db_path() -> str:
    """Current sqlite path, re-read so tests can point it elsewhere."""
    return os.getenv("DB_PATH", DB_PATH)


def ensure_db_directory(db_path: str = None):
    """Ensure the database directory exists."""
    Path(db_path or get_db_path()).parent.mkdir(parents=True, exist_ok=True)


def get_api_endpoints(base_url: str = None) -> Dict[str, str]:
    """Backend endpoints used outside demo mode."""
    base = (base_url or os.getenv("API_BASE_URL", API_BASE_URL)).rstrip("/")
    return {
        "submit_abstract": f"{base}/submit-abstract",
        "register": f"{base}/register",
        "login": f"{base}/admin/login",
        "submissions": f"{base}/submissions",
    }


def validate_config() -> List[str]:
    """Validate portal configuration and return any issues."""
    issues = []

    if DEFAULT_PAGE_SIZE < 1:
        issues.append("DEFAULT_PAGE_SIZE must be >= 1")

    if MAX_UPLOAD_MB < 1:
        issues.append("MAX_UPLOAD_MB must be >= 1")

    if SUBMIT_DELAY_SEC < 0 or LOGIN_DELAY_SEC < 0:
        issues.append("SUBMIT_DELAY_SEC and LOGIN_DELAY_SEC must be >= 0")

    if is_demo_mode():
        if not ADMIN_EMAIL or not ADMIN_PASSWORD:
            issues.append("ADMIN_EMAIL and ADMIN_PASSWORD must be set in demo mode")
    elif not os.getenv("API_BASE_URL", API_BASE_URL).startswith(("http://", "https://")):
        issues.append("API_BASE_URL must be an http(s) URL when DEMO_MODE=false")

    return issues
