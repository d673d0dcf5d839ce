"""
Pydantic schema for availability responses.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel

from ticket_sales.domain.availability import AvailabilityResult, UnavailableReason


class AvailabilityResponse(BaseModel):
    ticket_id: int
    occurrence_id: int
    available: bool
    remaining: Optional[int] = None
    unbounded: bool = False
    reason: Optional[UnavailableReason] = None
    message: Optional[str] = None
    available_at: Optional[datetime] = None
    sale_end: datetime

    @classmethod
    def from_result(
        cls,
        ticket_id: int,
        occurrence_id: int,
        result: AvailabilityResult,
        sale_end: datetime,
    ) -> "AvailabilityResponse":
        if result.available:
            return cls(
                ticket_id=ticket_id,
                occurrence_id=occurrence_id,
                available=True,
                remaining=result.remaining,
                unbounded=result.unbounded,
                sale_end=sale_end,
            )
        return cls(
            ticket_id=ticket_id,
            occurrence_id=occurrence_id,
            available=False,
            reason=result.reason,
            message=result.message,
            available_at=result.available_at,
            sale_end=sale_end,
        )
