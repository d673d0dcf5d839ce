"""
Ticket configuration as seen by the availability core, plus edit-time
validation and display summaries.

Administrators edit a TicketDraft, which keeps the stored shape (a mode flag
and optional fields per window bound). Once validated and saved, the row
converts to a TicketConfig whose bounds are tagged variants.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from enum import Enum

from ticket_sales.core.errors import ConfigurationError
from ticket_sales.domain.sale_window import AbsoluteBound, RelativeOffset, SaleWindowBound


class TicketKind(str, Enum):
    FREE = "free"
    PRICED = "priced"


class WindowMode(str, Enum):
    DATE = "date"
    TIME_BEFORE = "time_before"


@dataclass(frozen=True)
class TicketConfig:
    """Immutable snapshot of a ticket type, read once per availability query."""

    id: int
    event_id: int
    title: str
    sale_start: SaleWindowBound
    sale_end: SaleWindowBound
    kind: TicketKind = TicketKind.FREE
    price: Decimal | None = None
    currency: str | None = None
    description: str | None = None
    min_per_order: int = 1
    max_per_order: int | None = None
    total_capacity: int | None = None

    @property
    def is_unbounded(self) -> bool:
        return not self.total_capacity


@dataclass
class TicketDraft:
    title: str
    kind: TicketKind = TicketKind.FREE
    price: Decimal | None = None
    currency: str | None = None
    description: str | None = None
    start_mode: WindowMode = WindowMode.DATE
    start_date: datetime | None = None
    start_days: int = 0
    start_hours: int = 0
    start_minutes: int = 0
    end_mode: WindowMode = WindowMode.TIME_BEFORE
    end_date: datetime | None = None
    end_days: int = 0
    end_hours: int = 0
    end_minutes: int = 0
    min_per_order: int = 1
    max_per_order: int | None = None
    total_capacity: int | None = None

    def apply_defaults(self, now: datetime, payments_enabled: bool = True) -> None:
        """Fill the values a freshly created ticket starts with."""
        if self.start_mode == WindowMode.DATE and self.start_date is None:
            self.start_date = now
        if not payments_enabled:
            self.kind = TicketKind.FREE
        if self.kind == TicketKind.FREE:
            self.price = None
            self.currency = None

    def validate(self) -> None:
        """
        Check the invariants an administrator must satisfy when saving a ticket.
        All problems are collected and raised together as a ConfigurationError.
        """
        errors: list[str] = []

        if self.kind == TicketKind.PRICED and (
            self.price is None or self.price <= 0 or not self.currency
        ):
            errors.append("You must enter a currency and price for fixed price tickets")

        if self.start_mode == WindowMode.DATE:
            if self.start_date is None:
                errors.append("You must enter a start date")
        elif RelativeOffset(self.start_days, self.start_hours, self.start_minutes).is_zero:
            errors.append("You must enter a time before the event to start the ticket sales")

        if self.end_mode == WindowMode.DATE and self.end_date is None:
            errors.append("You must enter an end date")

        if self.max_per_order and self.min_per_order > self.max_per_order:
            errors.append("Minimum tickets per order cannot exceed the maximum")

        if errors:
            raise ConfigurationError(errors)


def bound_from_fields(
    mode: WindowMode,
    at: datetime | None,
    days: int | None,
    hours: int | None,
    minutes: int | None,
) -> SaleWindowBound:
    if mode == WindowMode.DATE:
        if at is None:
            raise ValueError("absolute sale window bound requires a date")
        return AbsoluteBound(at=at)
    return RelativeOffset(days=days or 0, hours=hours or 0, minutes=minutes or 0)


def describe_sale_start(config: TicketConfig) -> str:
    bound = config.sale_start
    if isinstance(bound, RelativeOffset):
        return (
            f"{bound.days} days, {bound.hours} hours and "
            f"{bound.minutes} minutes before event"
        )
    at = bound.at
    hour = at.hour % 12 or 12
    meridiem = "am" if at.hour < 12 else "pm"
    return f"{at:%d/%m/%Y} {hour}:{at:%M}{meridiem}"


def describe_price(config: TicketConfig) -> str:
    if config.kind == TicketKind.FREE or config.price is None:
        return "Free"
    return f"{config.currency} {config.price:.2f}"


def describe_ticket(config: TicketConfig) -> str:
    summary = f"{config.title} ({describe_price(config)})"
    if config.total_capacity:
        summary += f" ({config.total_capacity} available)"
    return summary
