from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Final

import requests
from twilio.http import HttpClient
from twilio.http.http_client import TwilioHttpClient
from twilio.rest import Client

from .errors import ConfigurationError, GatewayRejected, TransportError

logger = logging.getLogger(__name__)

MESSAGES_URL: Final[str] = "https://api.twilio.com/2010-04-01/Accounts/{account_sid}/Messages.json"

# Twilio answers a created message with 201; anything else is a failure.
SUCCESS_STATUS: Final[int] = 201


@dataclass(frozen=True)
class TwilioCredentials:
    account_sid: str
    auth_token: str
    from_number: str

    @property
    def is_complete(self) -> bool:
        return bool(self.account_sid and self.auth_token and self.from_number)


@dataclass(frozen=True)
class SentMessage:
    to: str
    sid: str | None
    status_code: int


def _error_detail(text: str | None) -> str | None:
    """Pull Twilio's human-readable "message" out of an error body, if any."""
    if not text:
        return None
    try:
        payload = json.loads(text)
    except ValueError:
        return None
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])
    return None


class TwilioGateway:
    """
    Sends one SMS per call through the Twilio Messages REST endpoint.

    The HTTP transport is a twilio.http.HttpClient, so a fake one can be
    injected in tests. There are no retries: each send() makes at most one
    request and raises a GatewayError subclass when it does not succeed.
    """

    def __init__(self, http_client: HttpClient | None = None, timeout: float | None = 10) -> None:
        self.http_client = http_client or TwilioHttpClient(timeout=timeout)

    def send(self, to: str, body: str, credentials: TwilioCredentials) -> SentMessage:
        if not credentials.is_complete:
            raise ConfigurationError()

        client = Client(
            credentials.account_sid,
            credentials.auth_token,
            http_client=self.http_client,
        )
        url = MESSAGES_URL.format(account_sid=credentials.account_sid)

        try:
            response = client.request(
                "POST",
                url,
                data={
                    "From": credentials.from_number,
                    "To": to,
                    "Body": body,
                },
                auth=(credentials.account_sid, credentials.auth_token),
            )
        except requests.RequestException as exc:
            logger.warning("Twilio request to %s failed: %s", to, exc)
            raise TransportError(exc) from exc

        if response.status_code != SUCCESS_STATUS:
            logger.warning("Twilio rejected message to %s with status %s", to, response.status_code)
            raise GatewayRejected(response.status_code, _error_detail(response.text))

        sid = None
        try:
            payload = json.loads(response.text or "{}")
        except ValueError:
            payload = {}
        if isinstance(payload, dict):
            sid = payload.get("sid")

        return SentMessage(to=to, sid=sid, status_code=response.status_code)
