from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest
import requests
from twilio.http import HttpClient

from sms_manager.errors import ConfigurationError, GatewayRejected, TransportError
from sms_manager.twilio_client import TwilioCredentials, TwilioGateway

CREDENTIALS = TwilioCredentials(account_sid="AC123", auth_token="secret", from_number="+15550000")


@pytest.mark.parametrize(
    "credentials",
    [
        TwilioCredentials("", "secret", "+15550000"),
        TwilioCredentials("AC123", "", "+15550000"),
        TwilioCredentials("AC123", "secret", ""),
    ],
)
def test_missing_credentials_never_hit_the_network(
    credentials: TwilioCredentials, make_http_client: Callable[..., Any]
) -> None:
    http_client = make_http_client()
    gateway = TwilioGateway(http_client=http_client)

    with pytest.raises(ConfigurationError):
        gateway.send("+15551234", "hello", credentials)

    assert http_client.calls == []


def test_201_is_success_and_posts_the_message(make_http_client: Callable[..., Any]) -> None:
    http_client = make_http_client(status_code=201, text='{"sid": "SM42"}')
    gateway = TwilioGateway(http_client=http_client)

    sent = gateway.send("+15551234", "hello", CREDENTIALS)

    assert sent.sid == "SM42"
    assert sent.status_code == 201
    assert len(http_client.calls) == 1
    call = http_client.calls[0]
    assert call["method"] == "POST"
    assert call["url"] == "https://api.twilio.com/2010-04-01/Accounts/AC123/Messages.json"
    assert call["data"] == {"From": "+15550000", "To": "+15551234", "Body": "hello"}
    assert call["auth"] == ("AC123", "secret")


@pytest.mark.parametrize("status_code", [200, 202, 400, 401, 500])
def test_any_other_status_is_rejected(
    status_code: int, make_http_client: Callable[..., Any]
) -> None:
    gateway = TwilioGateway(http_client=make_http_client(status_code=status_code, text=""))

    with pytest.raises(GatewayRejected) as excinfo:
        gateway.send("+15551234", "hello", CREDENTIALS)

    assert excinfo.value.status_code == status_code
    assert str(status_code) in str(excinfo.value)


def test_rejection_carries_twilio_error_message(make_http_client: Callable[..., Any]) -> None:
    body = '{"code": 21211, "message": "The \'To\' number is not a valid phone number."}'
    gateway = TwilioGateway(http_client=make_http_client(status_code=400, text=body))

    with pytest.raises(GatewayRejected) as excinfo:
        gateway.send("12", "hello", CREDENTIALS)

    assert excinfo.value.detail == "The 'To' number is not a valid phone number."


def test_transport_failure_is_wrapped(make_http_client: Callable[..., Any]) -> None:
    cause = requests.ConnectionError("connection refused")
    http_client = make_http_client(exc=cause)
    gateway = TwilioGateway(http_client=http_client)

    with pytest.raises(TransportError) as excinfo:
        gateway.send("+15551234", "hello", CREDENTIALS)

    assert excinfo.value.cause is cause
    assert "connection refused" in str(excinfo.value)
    assert len(http_client.calls) == 1


def test_gateway_uses_the_injected_transport(http_client: Any) -> None:
    assert isinstance(http_client, HttpClient)
    assert TwilioGateway(http_client=http_client).http_client is http_client
