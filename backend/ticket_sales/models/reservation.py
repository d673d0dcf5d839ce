"""
Reservation model: one order for an occurrence, holding one line per ticket type.

Key design decisions:
- Status field allows cancellation without deleting records; canceled
  reservations drop out of the booked aggregate
- Quantities live on reservation_tickets so one order can mix ticket types
"""

from enum import Enum

from sqlalchemy import (
    Column, Integer, String, ForeignKey, UniqueConstraint, CheckConstraint, Index,
)
from sqlalchemy.orm import relationship

from ticket_sales.db.base import Base, TimestampMixin


class ReservationStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    CANCELED = "canceled"


class Reservation(Base, TimestampMixin):
    __tablename__ = "reservations"

    id = Column(Integer, primary_key=True, index=True)
    occurrence_id = Column(Integer, ForeignKey("event_occurrences.id"), nullable=False, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False)
    status = Column(String(20), nullable=False, default=ReservationStatus.PENDING.value)

    lines = relationship(
        "ReservationTicket",
        back_populates="reservation",
        cascade="all, delete-orphan",
        lazy="selectin",
    )

    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'confirmed', 'canceled')", name="check_reservation_status"
        ),
    )

    @property
    def is_canceled(self) -> bool:
        return self.status == ReservationStatus.CANCELED.value

    def __repr__(self) -> str:
        return f"<Reservation(id={self.id}, occurrence={self.occurrence_id}, status={self.status})>"


class ReservationTicket(Base):
    __tablename__ = "reservation_tickets"

    id = Column(Integer, primary_key=True)
    reservation_id = Column(Integer, ForeignKey("reservations.id"), nullable=False)
    ticket_id = Column(Integer, ForeignKey("event_tickets.id"), nullable=False)
    quantity = Column(Integer, nullable=False)

    reservation = relationship("Reservation", back_populates="lines")

    __table_args__ = (
        UniqueConstraint("reservation_id", "ticket_id", name="uq_reservation_ticket"),
        CheckConstraint("quantity > 0", name="check_reservation_ticket_quantity_positive"),
        # Covers the booked-quantity aggregate: WHERE ticket_id = ? joined on reservation
        Index("ix_reservation_tickets_ticket", "ticket_id", "reservation_id"),
    )

    def __repr__(self) -> str:
        return f"<ReservationTicket(reservation={self.reservation_id}, ticket={self.ticket_id}, qty={self.quantity})>"
