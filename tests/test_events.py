from __future__ import annotations

import pytest

from sms_manager.events import EventBus, OrderActionRequested, OrderStatusChanged


def test_event_names() -> None:
    assert OrderActionRequested("smsm_send_order_sms", 1).name == "order_action_smsm_send_order_sms"
    assert OrderStatusChanged(1, "processing", "completed").name == "order_status_completed"


def test_publish_calls_handlers_in_order() -> None:
    bus = EventBus()
    seen: list[tuple[str, int]] = []
    bus.subscribe("order_status_completed", lambda e: seen.append(("first", e.order_id)))
    bus.subscribe("order_status_completed", lambda e: seen.append(("second", e.order_id)))
    bus.subscribe("order_status_refunded", lambda e: seen.append(("refunded", e.order_id)))

    bus.publish(OrderStatusChanged(5, "processing", "completed"))

    assert seen == [("first", 5), ("second", 5)]


def test_publish_without_handlers_is_a_no_op() -> None:
    EventBus().publish(OrderActionRequested("anything", 1))


def test_handler_errors_reach_the_publisher() -> None:
    bus = EventBus()

    def boom(event: OrderActionRequested) -> None:
        raise RuntimeError("handler failed")

    bus.subscribe("order_action_x", boom)

    with pytest.raises(RuntimeError):
        bus.publish(OrderActionRequested("x", 1))
