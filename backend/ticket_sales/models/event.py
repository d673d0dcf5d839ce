"""
Event and occurrence models.

An event can run several times; each run is an EventOccurrence with its own
start time. Ticket sale windows defined relative to "the event" are resolved
against the occurrence's start_time.
"""

from sqlalchemy import Column, Integer, String, ForeignKey, Index, CheckConstraint
from sqlalchemy.orm import relationship

from ticket_sales.db.base import Base, TimestampMixin, UtcDateTime


class Event(Base, TimestampMixin):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    description = Column(String(1000), nullable=True)
    location = Column(String(255), nullable=True)

    occurrences = relationship(
        "EventOccurrence",
        back_populates="event",
        order_by="EventOccurrence.start_time",
        lazy="selectin",
    )
    tickets = relationship("EventTicket", back_populates="event", lazy="selectin")

    def __repr__(self) -> str:
        return f"<Event(id={self.id}, title={self.title})>"


class EventOccurrence(Base, TimestampMixin):
    __tablename__ = "event_occurrences"

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey("events.id"), nullable=False, index=True)
    start_time = Column(UtcDateTime, nullable=False)
    end_time = Column(UtcDateTime, nullable=True)

    event = relationship("Event", back_populates="occurrences")

    __table_args__ = (
        CheckConstraint("end_time IS NULL OR end_time > start_time", name="check_occurrence_end_after_start"),
        Index("ix_event_occurrences_event_start", "event_id", "start_time"),
    )

    def __repr__(self) -> str:
        return f"<EventOccurrence(id={self.id}, event={self.event_id}, start={self.start_time})>"
