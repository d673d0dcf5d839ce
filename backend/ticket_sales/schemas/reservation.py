"""
Pydantic schemas for reservation request/response validation.
"""

from datetime import datetime
from pydantic import BaseModel, EmailStr, Field, field_validator


class ReservationLine(BaseModel):
    ticket_id: int
    quantity: int = Field(..., gt=0)

    model_config = {"from_attributes": True}


def _unique_tickets(lines: list[ReservationLine]) -> list[ReservationLine]:
    ticket_ids = [line.ticket_id for line in lines]
    if len(ticket_ids) != len(set(ticket_ids)):
        raise ValueError("each ticket may appear only once per reservation")
    return lines


class ReservationCreate(BaseModel):
    occurrence_id: int
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    tickets: list[ReservationLine] = Field(..., min_length=1)

    @field_validator("tickets")
    @classmethod
    def unique_tickets(cls, lines: list[ReservationLine]) -> list[ReservationLine]:
        return _unique_tickets(lines)


class ReservationUpdate(BaseModel):
    tickets: list[ReservationLine] = Field(..., min_length=1)

    @field_validator("tickets")
    @classmethod
    def unique_tickets(cls, lines: list[ReservationLine]) -> list[ReservationLine]:
        return _unique_tickets(lines)


class ReservationResponse(BaseModel):
    id: int
    occurrence_id: int
    name: str
    email: str
    status: str
    lines: list[ReservationLine]
    created_at: datetime

    model_config = {"from_attributes": True}
