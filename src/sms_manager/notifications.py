from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Final, Literal

from .errors import GatewayError, OrderNotFound
from .events import (
    ORDER_ACTION_SEND_SMS,
    EventBus,
    OrderActionRequested,
    OrderStatusChanged,
    action_event_name,
    status_event_name,
)
from .orders import OrderRepository, OrderView
from .phone import normalize_phone
from .settings_store import NoticeStore, SettingsStore
from .templates import DEFAULT_MESSAGE, build_placeholders, render
from .twilio_client import TwilioCredentials, TwilioGateway

logger = logging.getLogger(__name__)

SEND_ORDER_SMS_LABEL: Final[str] = "Send order SMS to customer"
DISABLED_NOTICE: Final[str] = (
    "SMS notification is not enabled. "
    "Please configure the SMS settings to send the SMS notifications."
)
SENT_NOTE: Final[str] = "SMS notification sent successfully. Customer phone number: {to}"
FAILED_NOTE: Final[str] = "Failed to send SMS notification. Error: {error}"


@dataclass(frozen=True)
class DispatchOutcome:
    state: Literal["skipped", "sent", "failed"]
    to: str | None = None
    message: str | None = None
    error: str | None = None


SKIPPED: Final[DispatchOutcome] = DispatchOutcome(state="skipped")


class NotificationDispatcher:
    """
    Sends the order SMS and records what happened as an order note.

    Two triggers end up in dispatch(): the "Send order SMS to customer"
    order action and the order reaching the trigger status. Both may fire
    for the same order; each one sends.
    """

    def __init__(
        self,
        settings: SettingsStore,
        orders: OrderRepository,
        gateway: TwilioGateway,
        notices: NoticeStore,
    ) -> None:
        self.settings = settings
        self.orders = orders
        self.gateway = gateway
        self.notices = notices

    def is_enabled(self) -> bool:
        return self.settings.get("enabled", False) is True

    # --- event handlers ---

    def register(self, bus: EventBus, trigger_status: str = "completed") -> None:
        bus.subscribe(action_event_name(ORDER_ACTION_SEND_SMS), self.send_order_sms)
        bus.subscribe(status_event_name(trigger_status), self.send_notification)

    @staticmethod
    def order_actions(actions: dict[str, str] | None = None) -> dict[str, str]:
        """Add the manual SMS action to an order's action list."""
        actions = dict(actions or {})
        actions[ORDER_ACTION_SEND_SMS] = SEND_ORDER_SMS_LABEL
        return actions

    def send_order_sms(self, event: OrderActionRequested) -> None:
        if not self.is_enabled():
            self.notices.flash(DISABLED_NOTICE, "error")
            return
        self.dispatch(event.order_id)

    def send_notification(self, event: OrderStatusChanged) -> None:
        self.dispatch(event.order_id)

    # --- pipeline ---

    def dispatch(self, order: OrderView | int) -> DispatchOutcome:
        if not self.is_enabled():
            return SKIPPED

        if not isinstance(order, OrderView):
            resolved = self.orders.get(order)
            if resolved is None:
                raise OrderNotFound(order)
            order = resolved

        phone = order.billing_phone
        country = order.billing_country
        template = self.settings.get("message_template") or DEFAULT_MESSAGE

        # Nothing to send to, or nothing to send.
        if not phone or not country or not template:
            return SKIPPED

        to = normalize_phone(phone, country)
        placeholders = build_placeholders(
            order_number=order.order_number,
            status=order.status,
            total=order.total,
            created_at=order.created_at,
        )
        message = render(template, placeholders)

        credentials = TwilioCredentials(
            account_sid=self.settings.get("provider_account_id") or "",
            auth_token=self.settings.get("provider_auth_secret") or "",
            from_number=self.settings.get("sender_number") or "",
        )

        try:
            self.gateway.send(to, message, credentials)
        except GatewayError as exc:
            self.orders.add_note(order.id, FAILED_NOTE.format(error=exc))
            return DispatchOutcome(state="failed", to=to, message=message, error=str(exc))

        logger.info("Order SMS sent for order %s to %s", order.id, to)
        self.orders.add_note(order.id, SENT_NOTE.format(to=to))
        return DispatchOutcome(state="sent", to=to, message=message)
