"""
Pydantic schemas for events and their occurrences.
"""

from datetime import datetime
from typing import Optional
from pydantic import AwareDatetime, BaseModel, Field, model_validator


class EventCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=1000)
    location: Optional[str] = Field(None, max_length=255)


class EventResponse(BaseModel):
    id: int
    title: str
    description: Optional[str]
    location: Optional[str]
    created_at: datetime

    model_config = {"from_attributes": True}


class OccurrenceCreate(BaseModel):
    start_time: AwareDatetime
    end_time: Optional[AwareDatetime] = None

    @model_validator(mode="after")
    def end_after_start(self):
        if self.end_time is not None and self.end_time <= self.start_time:
            raise ValueError("end_time must be after start_time")
        return self


class OccurrenceResponse(BaseModel):
    id: int
    event_id: int
    start_time: datetime
    end_time: Optional[datetime]

    model_config = {"from_attributes": True}
