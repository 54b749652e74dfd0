from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Final, Literal

from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session, sessionmaker

from .db import Option
from .templates import DEFAULT_MESSAGE, sanitize

SETTINGS_OPTION: Final[str] = "smsm_sms_manager"
NOTICES_OPTION: Final[str] = "smsm_flash_notices"

TRUTHY: Final[frozenset[str]] = frozenset({"yes", "on", "1", "true"})

NoticeType = Literal["info", "warning", "error", "success"]


def _strip_tags(value: str) -> str:
    return sanitize(value, tags=frozenset()).strip()


class SmsSettings(BaseModel):
    """The SMS configuration record, sanitized the way the settings form saves it."""

    enabled: bool = False
    provider_account_id: str = ""
    provider_auth_secret: str = ""
    sender_number: str = ""
    message_template: str = DEFAULT_MESSAGE

    @field_validator("enabled", mode="before")
    @classmethod
    def _coerce_enabled(cls, v: Any) -> bool:
        if isinstance(v, str):
            return v.strip().lower() in TRUTHY
        return bool(v)

    @field_validator("provider_account_id", "provider_auth_secret", "sender_number", mode="before")
    @classmethod
    def _clean_text(cls, v: Any) -> str:
        return _strip_tags(str(v)) if v is not None else ""

    @field_validator("message_template", mode="before")
    @classmethod
    def _clean_textarea(cls, v: Any) -> str:
        if v is None:
            return ""
        lines = (_strip_tags(line) for line in str(v).splitlines())
        return "\n".join(lines).strip()


def _load_option(session_factory: sessionmaker[Session], name: str) -> Any:
    with session_factory() as db:
        option = db.get(Option, name)
        return None if option is None else option.value


def _save_option(session_factory: sessionmaker[Session], name: str, value: Any) -> None:
    with session_factory() as db:
        option = db.get(Option, name)
        if option is None:
            db.add(Option(name=name, value=value))
        else:
            option.value = value
        db.commit()


class SettingsStore:
    """
    Key-value view over the single SMS configuration record.

    Reads always go to the database; nothing is cached in-process.
    """

    def __init__(self, session_factory: sessionmaker[Session], name: str = SETTINGS_OPTION) -> None:
        self._session_factory = session_factory
        self.name = name

    def all(self) -> dict[str, Any]:
        value = _load_option(self._session_factory, self.name)
        return dict(value) if isinstance(value, Mapping) else {}

    def get(self, key: str, default: Any = None) -> Any:
        return self.all().get(key, default)

    def set(self, bag: Mapping[str, Any]) -> SmsSettings:
        settings = SmsSettings.model_validate(dict(bag))
        _save_option(self._session_factory, self.name, settings.model_dump())
        return settings

    def install_defaults(self) -> bool:
        """Write the default record if none exists yet. Returns True if it did."""
        if _load_option(self._session_factory, self.name) is not None:
            return False
        _save_option(self._session_factory, self.name, SmsSettings().model_dump())
        return True


class NoticeStore:
    """Admin notices shown once, on the next admin page render."""

    def __init__(self, session_factory: sessionmaker[Session], name: str = NOTICES_OPTION) -> None:
        self._session_factory = session_factory
        self.name = name

    def flash(self, notice: str, type: NoticeType = "success", dismissible: bool = True) -> None:
        notices = list(_load_option(self._session_factory, self.name) or [])
        notices.append({"notice": notice, "type": type, "dismissible": dismissible})
        _save_option(self._session_factory, self.name, notices)

    def pop_all(self) -> list[dict[str, Any]]:
        notices = list(_load_option(self._session_factory, self.name) or [])
        if notices:
            _save_option(self._session_factory, self.name, [])
        return notices
