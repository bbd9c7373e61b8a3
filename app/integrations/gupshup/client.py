"""Gupshup SMS client.

Form-encoded POST to the Gupshup message endpoint. Success is judged purely
by the HTTP status class; the provider message id is read from either
``{"messageId": ...}`` or ``{"response": {"msgId"|"messageId": ...}}`` and
may legitimately be empty.
"""

import json
from typing import Any, Dict, Optional

import requests
from infrastructure.logging import get_module_logger

logger = get_module_logger()

DEFAULT_BASE_URL = "https://api.gupshup.io/sm/api/v1/msg"


class GupshupError(Exception):
    """Raised when Gupshup answers with a non-2xx status."""

    def __init__(self, status_code: int, body: str):
        super().__init__(f"gupshup request failed (HTTP {status_code}): {body}")
        self.status_code = status_code
        self.body = body


def _lookup_string(data: Dict[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def extract_message_id(body: str) -> str:
    """Best-effort extraction of the provider message id from a response body.

    Returns an empty string when the body is not JSON or matches neither
    known shape.
    """
    try:
        data = json.loads(body)
    except ValueError:
        return ""
    if not isinstance(data, dict):
        return ""

    msg_id = _lookup_string(data, "messageId")
    if msg_id:
        return msg_id

    nested = data.get("response")
    if isinstance(nested, dict):
        return _lookup_string(nested, "msgId") or _lookup_string(nested, "messageId") or ""

    return ""


class GupshupClient:
    """Client for the Gupshup SMS API.

    Args:
        base_url: Message endpoint; blank falls back to the public Gupshup URL
        api_key: Sent as the ``apikey`` header when non-empty
        source: Registered sender identifier
        session: Optional shared ``requests.Session``; without one each send
            opens and closes its own
        timeout: Seconds allowed per request
    """

    def __init__(
        self,
        base_url: str = "",
        api_key: str = "",
        source: str = "",
        session: Optional[requests.Session] = None,
        timeout: float = 10.0,
    ):
        self.base_url = base_url.strip() or DEFAULT_BASE_URL
        self.api_key = api_key
        self.source = source
        self.timeout = timeout
        self._session = session

    def _post(self, **kwargs) -> requests.Response:
        if self._session is not None:
            return self._session.post(self.base_url, **kwargs)
        with requests.Session() as session:
            return session.post(self.base_url, **kwargs)

    def send_sms(self, destination: str, message: str) -> str:
        """Send one SMS and return the provider message id ("" if absent).

        Raises:
            GupshupError: on a non-2xx response
            requests.RequestException: on transport failure or timeout
        """
        headers = {"Content-Type": "application/x-www-form-urlencoded"}
        if self.api_key:
            headers["apikey"] = self.api_key

        form = {
            "channel": "SMS",
            "source": self.source,
            "destination": destination,
            "message": message,
        }

        response = self._post(data=form, headers=headers, timeout=self.timeout)

        if not 200 <= response.status_code < 300:
            body = (response.text or "").strip()
            logger.error(
                "gupshup_request_failed",
                status_code=response.status_code,
                body=body,
            )
            raise GupshupError(response.status_code, body)

        msg_id = extract_message_id(response.text or "")
        if not msg_id:
            logger.debug("gupshup_message_id_missing", status_code=response.status_code)
        return msg_id
