"""
Backend transport for the non-demo code path. Any non-2xx response or network
failure is a TransportError; nothing is retried.
"""

import json
from typing import Any, Dict, Optional

import requests

from . import config
from .errors import TransportError
from ..util.logging import logger


class ApiClient:
    """Thin JSON client over a requests session."""

    def __init__(self, session: requests.Session = None, timeout: float = None):
        self.session = session or requests.Session()
        self.timeout = timeout if timeout is not None else config.HTTP_TIMEOUT_SEC

    def submit(self, endpoint: str, payload: Dict[str, Any],
               files: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """POST a form payload; with files it goes multipart with the payload under `data`."""
        if files:
            body = self._post(endpoint, data={"data": json.dumps(payload)}, files=files)
        else:
            body = self._post(endpoint, json=payload)
        return {"id": body.get("id") or "N/A"}

    def login(self, endpoint: str, credentials: Dict[str, str]) -> Dict[str, Any]:
        body = self._post(endpoint, json=credentials)
        token = body.get("token")
        if not token:
            raise TransportError("Login response carried no token")
        return {"token": token}

    def _post(self, endpoint: str, **kwargs) -> Dict[str, Any]:
        try:
            response = self.session.post(endpoint, timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.error(f"Request to {endpoint} failed: {e}")
            raise TransportError(f"Unable to reach {endpoint}") from e

        if not 200 <= response.status_code < 300:
            logger.warning(f"Request to {endpoint} returned HTTP {response.status_code}")
            raise TransportError(f"{endpoint} returned HTTP {response.status_code}",
                                 status_code=response.status_code)

        try:
            body = response.json()
        except ValueError:
            return {}
        return body if isinstance(body, dict) else {}
