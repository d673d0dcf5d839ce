"""
Ticket type model.

Sale window bounds are stored as a mode column plus the fields that mode
uses (a date, or a days/hours/minutes offset before the occurrence).
to_config() turns a row into the immutable domain TicketConfig.
"""

from sqlalchemy import Column, Integer, String, ForeignKey, Numeric, CheckConstraint

from sqlalchemy.orm import relationship

from ticket_sales.db.base import Base, TimestampMixin, UtcDateTime
from ticket_sales.domain.ticket import (
    TicketConfig,
    TicketDraft,
    TicketKind,
    WindowMode,
    bound_from_fields,
)


class EventTicket(Base, TimestampMixin):
    __tablename__ = "event_tickets"

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    description = Column(String(1000), nullable=True)
    kind = Column(String(20), nullable=False, default=TicketKind.FREE.value)
    price = Column(Numeric(10, 2), nullable=True)
    currency = Column(String(3), nullable=True)

    start_type = Column(String(20), nullable=False, default=WindowMode.DATE.value)
    start_date = Column(UtcDateTime, nullable=True)
    start_days = Column(Integer, nullable=False, default=0)
    start_hours = Column(Integer, nullable=False, default=0)
    start_minutes = Column(Integer, nullable=False, default=0)

    end_type = Column(String(20), nullable=False, default=WindowMode.TIME_BEFORE.value)
    end_date = Column(UtcDateTime, nullable=True)
    end_days = Column(Integer, nullable=False, default=0)
    end_hours = Column(Integer, nullable=False, default=0)
    end_minutes = Column(Integer, nullable=False, default=0)

    min_per_order = Column(Integer, nullable=False, default=1)
    max_per_order = Column(Integer, nullable=True)
    # NULL or 0 means unlimited
    total_capacity = Column(Integer, nullable=True)

    event = relationship("Event", back_populates="tickets")

    __table_args__ = (
        CheckConstraint("kind IN ('free', 'priced')", name="check_ticket_kind"),
        CheckConstraint("start_type IN ('date', 'time_before')", name="check_ticket_start_type"),
        CheckConstraint("end_type IN ('date', 'time_before')", name="check_ticket_end_type"),
        CheckConstraint("min_per_order >= 0", name="check_ticket_min_per_order"),
        CheckConstraint("total_capacity IS NULL OR total_capacity >= 0", name="check_ticket_capacity"),
    )

    @classmethod
    def from_draft(cls, event_id: int, draft: TicketDraft) -> "EventTicket":
        return cls(
            event_id=event_id,
            title=draft.title,
            description=draft.description,
            kind=draft.kind.value,
            price=draft.price,
            currency=draft.currency,
            start_type=draft.start_mode.value,
            start_date=draft.start_date,
            start_days=draft.start_days,
            start_hours=draft.start_hours,
            start_minutes=draft.start_minutes,
            end_type=draft.end_mode.value,
            end_date=draft.end_date,
            end_days=draft.end_days,
            end_hours=draft.end_hours,
            end_minutes=draft.end_minutes,
            min_per_order=draft.min_per_order,
            max_per_order=draft.max_per_order,
            total_capacity=draft.total_capacity,
        )

    def to_config(self) -> TicketConfig:
        return TicketConfig(
            id=self.id,
            event_id=self.event_id,
            title=self.title,
            description=self.description,
            kind=TicketKind(self.kind),
            price=self.price,
            currency=self.currency,
            sale_start=bound_from_fields(
                WindowMode(self.start_type), self.start_date,
                self.start_days, self.start_hours, self.start_minutes,
            ),
            sale_end=bound_from_fields(
                WindowMode(self.end_type), self.end_date,
                self.end_days, self.end_hours, self.end_minutes,
            ),
            min_per_order=self.min_per_order,
            max_per_order=self.max_per_order,
            total_capacity=self.total_capacity,
        )

    def __repr__(self) -> str:
        return f"<EventTicket(id={self.id}, event={self.event_id}, title={self.title})>"
