"""
Sale window resolution.

A ticket's sale window is described by two bounds, each either an absolute
instant or an offset before the occurrence's start time. Resolving a bound
against an occurrence gives a concrete instant; the window is the open
interval (start, end).
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from ticket_sales.domain.ticket import TicketConfig


@dataclass(frozen=True)
class AbsoluteBound:
    """A fixed instant, independent of the occurrence."""

    at: datetime


@dataclass(frozen=True)
class RelativeOffset:
    """A signed duration before the occurrence's start time; negative means after it."""

    days: int = 0
    hours: int = 0
    minutes: int = 0

    @property
    def is_zero(self) -> bool:
        return not (self.days or self.hours or self.minutes)

    def as_timedelta(self) -> timedelta:
        return timedelta(days=self.days, hours=self.hours, minutes=self.minutes)


SaleWindowBound = Union[AbsoluteBound, RelativeOffset]


def as_utc(value: datetime) -> datetime:
    """Normalize an instant to UTC; naive values are taken to already be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def resolve_bound(bound: SaleWindowBound, occurrence_start: datetime) -> datetime:
    if isinstance(bound, AbsoluteBound):
        return bound.at
    # Days, hours and minutes are fixed-length units, so subtraction order is irrelevant
    return occurrence_start - bound.as_timedelta()


def resolve_sale_start(config: "TicketConfig", occurrence_start: datetime) -> datetime:
    return resolve_bound(config.sale_start, occurrence_start)


def resolve_sale_end(config: "TicketConfig", occurrence_start: datetime) -> datetime:
    return resolve_bound(config.sale_end, occurrence_start)
