from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy import Engine
from sqlalchemy.orm import Session, sessionmaker
from twilio.http import HttpClient

from .config import Settings, get_settings
from .db import init_db, make_engine, make_session_factory
from .errors import OrderNotFound
from .events import EventBus, OrderActionRequested, OrderStatusChanged
from .notifications import NotificationDispatcher
from .orders import OrderRepository
from .settings_store import NoticeStore, SettingsStore
from .twilio_client import TwilioGateway


@dataclass
class AppContext:
    """Everything the service needs, built once at startup and passed around."""

    config: Settings
    engine: Engine
    session_factory: sessionmaker[Session]
    settings: SettingsStore
    notices: NoticeStore
    orders: OrderRepository
    gateway: TwilioGateway
    bus: EventBus
    dispatcher: NotificationDispatcher

    def request_action(self, order_id: int, action: str) -> None:
        if self.orders.get(order_id) is None:
            raise OrderNotFound(order_id)
        self.bus.publish(OrderActionRequested(action=action, order_id=order_id))

    def change_order_status(self, order_id: int, status: str) -> bool:
        """Update the status and fire the status event. Returns False if unchanged."""
        old_status, new_status = self.orders.update_status(order_id, status)
        if old_status == new_status:
            return False
        self.bus.publish(
            OrderStatusChanged(order_id=order_id, old_status=old_status, new_status=new_status)
        )
        return True


def create_context(
    config: Settings | None = None, http_client: HttpClient | None = None
) -> AppContext:
    config = config or get_settings()

    engine = make_engine(config.database_url)
    init_db(engine)
    session_factory = make_session_factory(engine)

    settings = SettingsStore(session_factory)
    settings.install_defaults()
    notices = NoticeStore(session_factory)
    orders = OrderRepository(session_factory)
    gateway = TwilioGateway(http_client=http_client, timeout=config.twilio_timeout)

    dispatcher = NotificationDispatcher(settings, orders, gateway, notices)
    bus = EventBus()
    dispatcher.register(bus, trigger_status=config.trigger_status)

    return AppContext(
        config=config,
        engine=engine,
        session_factory=session_factory,
        settings=settings,
        notices=notices,
        orders=orders,
        gateway=gateway,
        bus=bus,
        dispatcher=dispatcher,
    )
