"""
Admin authentication - a static credential comparison gating the dashboard
in demo mode, or a login call to the backend otherwise.

A stored token is all the dashboard checks for: there is no expiry, no
signature and no server round-trip on later visits.
"""

import hmac
import time
from typing import Callable, Optional

from . import config
from .errors import PersistenceError, TransportError, ValidationError
from .schema import utc_now
from ..util.logging import logger


def authenticate(email: str, password: str) -> bool:
    """
    Validate credentials against ADMIN_EMAIL / ADMIN_PASSWORD.

    Returns True if authentication successful, False otherwise.
    All authentication attempts are logged.
    """
    expected_email = config.ADMIN_EMAIL or ""
    expected_password = config.ADMIN_PASSWORD or ""

    if not expected_email or not expected_password:
        logger.error("Admin authentication attempted but no credentials configured")
        return False

    email_ok = hmac.compare_digest((email or "").encode(), expected_email.encode())
    password_ok = hmac.compare_digest((password or "").encode(), expected_password.encode())
    if not (email_ok and password_ok):
        logger.warning("Authentication failed: invalid credentials provided")
        return False

    logger.info("Admin authentication successful")
    return True


class AuthService:
    """Issues, stores and checks the admin session token."""

    def __init__(self, storage, transport=None, demo_mode: bool = None,
                 delay_sec: float = None, sleep: Callable[[float], None] = time.sleep):
        self.storage = storage
        self.transport = transport
        self.demo_mode = config.is_demo_mode() if demo_mode is None else demo_mode
        self.delay_sec = config.LOGIN_DELAY_SEC if delay_sec is None else delay_sec
        self._sleep = sleep

    def login(self, email: str, password: str) -> str:
        """Return the new token; raises ValidationError or TransportError."""
        if self.demo_mode:
            if self.delay_sec:
                self._sleep(self.delay_sec)
            if not authenticate(email, password):
                logger.log_auth_event(False, "dashboard login attempt")
                raise ValidationError("Login Failed", "Invalid email or password.")
            token = f"demo-token-{int(utc_now().timestamp() * 1000)}"
        else:
            try:
                result = self.transport.login(
                    config.get_api_endpoints()["login"],
                    {"email": email, "password": password},
                )
            except TransportError:
                logger.log_auth_event(False, "backend login failed")
                raise
            token = result["token"]

        self.storage.set(config.ADMIN_TOKEN_KEY, token)
        logger.log_auth_event(True, "dashboard login")
        return token

    def token(self) -> Optional[str]:
        try:
            return self.storage.get(config.ADMIN_TOKEN_KEY)
        except PersistenceError as e:
            logger.error(f"Admin token could not be read: {e}")
            return None

    def is_authenticated(self) -> bool:
        return bool(self.token())

    def logout(self) -> None:
        self.storage.delete(config.ADMIN_TOKEN_KEY)
        logger.info("Admin logged out")
