"""
Pydantic schemas for ticket types.

Input mirrors the administrator's form: a mode per window bound plus the
fields that mode uses. Cross-field rules (a start date for date mode, a
non-zero offset for time-before mode, ...) are checked by TicketDraft.validate
so every message is reported at once.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from pydantic import AwareDatetime, BaseModel, Field

from ticket_sales.domain.ticket import (
    TicketDraft,
    TicketKind,
    WindowMode,
    describe_price,
    describe_sale_start,
    describe_ticket,
)
from ticket_sales.models.ticket import EventTicket


class TicketCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=1000)
    kind: TicketKind = TicketKind.FREE
    price: Optional[Decimal] = Field(None, max_digits=10, decimal_places=2)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)

    start_type: WindowMode = WindowMode.DATE
    start_date: Optional[AwareDatetime] = None
    start_days: int = 0
    start_hours: int = 0
    start_minutes: int = 0

    end_type: WindowMode = WindowMode.TIME_BEFORE
    end_date: Optional[AwareDatetime] = None
    end_days: int = 0
    end_hours: int = 0
    end_minutes: int = 0

    min_per_order: int = Field(1, ge=0)
    max_per_order: Optional[int] = Field(None, ge=0)
    total_capacity: Optional[int] = Field(None, ge=0)

    def to_draft(self, default_currency: Optional[str] = None) -> TicketDraft:
        return TicketDraft(
            title=self.title,
            description=self.description,
            kind=self.kind,
            price=self.price,
            currency=self.currency or (default_currency if self.price is not None else None),
            start_mode=self.start_type,
            start_date=self.start_date,
            start_days=self.start_days,
            start_hours=self.start_hours,
            start_minutes=self.start_minutes,
            end_mode=self.end_type,
            end_date=self.end_date,
            end_days=self.end_days,
            end_hours=self.end_hours,
            end_minutes=self.end_minutes,
            min_per_order=self.min_per_order,
            max_per_order=self.max_per_order,
            total_capacity=self.total_capacity,
        )


class TicketResponse(BaseModel):
    id: int
    event_id: int
    title: str
    description: Optional[str]
    kind: TicketKind
    price: Optional[Decimal]
    currency: Optional[str]
    start_type: WindowMode
    start_date: Optional[datetime]
    start_days: int
    start_hours: int
    start_minutes: int
    end_type: WindowMode
    end_date: Optional[datetime]
    end_days: int
    end_hours: int
    end_minutes: int
    min_per_order: int
    max_per_order: Optional[int]
    total_capacity: Optional[int]
    sale_start_summary: str
    price_summary: str
    summary: str

    @classmethod
    def from_model(cls, ticket: EventTicket) -> "TicketResponse":
        config = ticket.to_config()
        return cls(
            id=ticket.id,
            event_id=ticket.event_id,
            title=ticket.title,
            description=ticket.description,
            kind=ticket.kind,
            price=ticket.price,
            currency=ticket.currency,
            start_type=ticket.start_type,
            start_date=ticket.start_date,
            start_days=ticket.start_days,
            start_hours=ticket.start_hours,
            start_minutes=ticket.start_minutes,
            end_type=ticket.end_type,
            end_date=ticket.end_date,
            end_days=ticket.end_days,
            end_hours=ticket.end_hours,
            end_minutes=ticket.end_minutes,
            min_per_order=ticket.min_per_order,
            max_per_order=ticket.max_per_order,
            total_capacity=ticket.total_capacity,
            sale_start_summary=describe_sale_start(config),
            price_summary=describe_price(config),
            summary=describe_ticket(config),
        )
