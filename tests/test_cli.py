from __future__ import annotations

import pytest
from twilio.http import HttpClient

from sms_manager import cli
from sms_manager.config import Settings
from sms_manager.context import create_context
from sms_manager.notifications import DISABLED_NOTICE


@pytest.fixture
def cli_settings(
    config: Settings, http_client: HttpClient, monkeypatch: pytest.MonkeyPatch
) -> Settings:
    monkeypatch.setattr(cli, "get_settings", lambda: config)
    monkeypatch.setattr(cli, "setup_logging", lambda level: None)
    monkeypatch.setattr(
        cli, "create_context", lambda settings: create_context(settings, http_client=http_client)
    )
    return config


def test_send_unknown_order_exits_1(
    cli_settings: Settings, capsys: pytest.CaptureFixture[str]
) -> None:
    assert cli.main(["send", "404"]) == 1
    assert "Order 404 not found" in capsys.readouterr().err


def test_send_while_disabled_prints_notice(
    cli_settings: Settings, capsys: pytest.CaptureFixture[str]
) -> None:
    order = create_context(cli_settings).orders.create(
        order_number="1", billing_phone="5551234", billing_country="US"
    )

    assert cli.main(["send", str(order.id)]) == 0
    assert f"[error] {DISABLED_NOTICE}" in capsys.readouterr().out


def test_init_db(cli_settings: Settings, capsys: pytest.CaptureFixture[str]) -> None:
    assert cli.main(["init-db"]) == 0
    assert "Database ready" in capsys.readouterr().out
