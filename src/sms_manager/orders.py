from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from .db import Order, OrderNote, utcnow
from .errors import OrderNotFound


@dataclass(frozen=True)
class OrderView:
    id: int
    billing_phone: str
    billing_country: str
    total: str
    status: str
    order_number: str
    created_at: datetime

    @classmethod
    def from_row(cls, row: Order) -> OrderView:
        return cls(
            id=row.id,
            billing_phone=row.billing_phone or "",
            billing_country=row.billing_country or "",
            total=row.total,
            status=row.status,
            order_number=row.order_number,
            created_at=row.created_at,
        )


class OrderRepository:
    def __init__(self, session_factory: sessionmaker[Session]) -> None:
        self._session_factory = session_factory

    def get(self, order_id: int) -> OrderView | None:
        with self._session_factory() as db:
            row = db.get(Order, order_id)
            return None if row is None else OrderView.from_row(row)

    def create(
        self,
        order_number: str,
        billing_phone: str = "",
        billing_country: str = "",
        total: str = "0.00",
        status: str = "pending",
        created_at: datetime | None = None,
    ) -> OrderView:
        with self._session_factory() as db:
            row = Order(
                order_number=order_number,
                billing_phone=billing_phone,
                billing_country=billing_country,
                total=total,
                status=status,
                created_at=created_at or utcnow(),
            )
            db.add(row)
            db.commit()
            db.refresh(row)
            return OrderView.from_row(row)

    def update_status(self, order_id: int, status: str) -> tuple[str, str]:
        """Set a new status. Returns (old_status, new_status)."""
        with self._session_factory() as db:
            row = db.get(Order, order_id)
            if row is None:
                raise OrderNotFound(order_id)
            old_status = row.status
            row.status = status
            db.commit()
            return old_status, status

    def add_note(self, order_id: int, note: str) -> None:
        with self._session_factory() as db:
            db.add(OrderNote(order_id=order_id, note=note))
            db.commit()

    def notes(self, order_id: int) -> list[str]:
        with self._session_factory() as db:
            stmt = (
                select(OrderNote.note)
                .where(OrderNote.order_id == order_id)
                .order_by(OrderNote.id)
            )
            return list(db.scalars(stmt))
