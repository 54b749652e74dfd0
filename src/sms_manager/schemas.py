from __future__ import annotations

from pydantic import BaseModel


class SmsSettingsIn(BaseModel):
    enabled: bool | str = False
    provider_account_id: str = ""
    provider_auth_secret: str = ""
    sender_number: str = ""
    message_template: str = ""


class StatusChange(BaseModel):
    status: str


class Notice(BaseModel):
    notice: str
    type: str
    dismissible: bool = True
