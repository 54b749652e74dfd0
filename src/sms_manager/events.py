"""
Order events and a small synchronous event bus.

Handlers are plain callables subscribed under an event name. publish()
runs them in registration order on the caller's thread; anything a
handler raises propagates to whoever published the event.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Callable
from dataclasses import dataclass
from typing import Final, Protocol

ORDER_ACTION_SEND_SMS: Final[str] = "smsm_send_order_sms"


def action_event_name(action: str) -> str:
    return f"order_action_{action}"


def status_event_name(status: str) -> str:
    return f"order_status_{status}"


class Event(Protocol):
    @property
    def name(self) -> str: ...


@dataclass(frozen=True)
class OrderActionRequested:
    """An admin picked an order action from the order screen."""

    action: str
    order_id: int

    @property
    def name(self) -> str:
        return action_event_name(self.action)


@dataclass(frozen=True)
class OrderStatusChanged:
    order_id: int
    old_status: str
    new_status: str

    @property
    def name(self) -> str:
        return status_event_name(self.new_status)


Handler = Callable[[Event], None]


class EventBus:
    def __init__(self) -> None:
        self._handlers: defaultdict[str, list[Handler]] = defaultdict(list)

    def subscribe(self, name: str, handler: Handler) -> None:
        self._handlers[name].append(handler)

    def handlers(self, name: str) -> list[Handler]:
        return list(self._handlers.get(name, ()))

    def publish(self, event: Event) -> None:
        for handler in self.handlers(event.name):
            handler(event)
