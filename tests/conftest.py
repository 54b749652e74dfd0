from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from datetime import datetime
from pathlib import Path
from typing import Any

import pytest
from twilio.http import HttpClient
from twilio.http.response import Response

from sms_manager.config import Settings
from sms_manager.context import AppContext, create_context
from sms_manager.orders import OrderView

ADMIN_TOKEN = "test-admin-token"


class FakeHttpClient(HttpClient):
    """Fake Twilio transport that records requests and returns a canned response."""

    def __init__(
        self,
        status_code: int = 201,
        text: str = '{"sid": "SM123"}',
        exc: Exception | None = None,
    ) -> None:
        super().__init__(logger=logging.getLogger(__name__), is_async=False)
        self.status_code = status_code
        self.text = text
        self.exc = exc
        self.calls: list[dict[str, Any]] = []

    def request(
        self,
        method: str,
        url: str,
        params: Any = None,
        data: Any = None,
        headers: Any = None,
        auth: Any = None,
        timeout: Any = None,
        allow_redirects: bool = False,
    ) -> Response:
        self.calls.append({"method": method, "url": url, "data": dict(data or {}), "auth": auth})
        if self.exc is not None:
            raise self.exc
        return Response(self.status_code, self.text)


@pytest.fixture
def make_http_client() -> Callable[..., FakeHttpClient]:
    """Build extra fake transports with a chosen canned response."""
    return FakeHttpClient


@pytest.fixture
def http_client() -> FakeHttpClient:
    return FakeHttpClient()


@pytest.fixture
def admin_headers() -> dict[str, str]:
    return {"X-Admin-Token": ADMIN_TOKEN}


@pytest.fixture
def config(tmp_path: Path) -> Settings:
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'test.db'}",
        admin_token=ADMIN_TOKEN,
        twilio_timeout=5,
        trigger_status="completed",
    )


@pytest.fixture
def ctx(config: Settings, http_client: FakeHttpClient) -> Iterator[AppContext]:
    context = create_context(config, http_client=http_client)
    yield context
    context.engine.dispose()


@pytest.fixture
def enabled(ctx: AppContext) -> AppContext:
    """Context with SMS sending switched on and Twilio fully configured."""
    ctx.settings.set(
        {
            "enabled": True,
            "provider_account_id": "AC123",
            "provider_auth_secret": "secret",
            "sender_number": "+15550000",
            "message_template": "",
        }
    )
    return ctx


@pytest.fixture
def order(ctx: AppContext) -> OrderView:
    return ctx.orders.create(
        order_number="42",
        billing_phone="5551234",
        billing_country="US",
        total="19.99",
        status="completed",
        created_at=datetime(2024, 1, 2, 3, 4, 5),
    )
