"""
Pydantic models for solar event data
"""

from datetime import date, datetime
from pydantic import BaseModel, ConfigDict, Field, model_validator

from .config import Mode


class DayEventSet(BaseModel):
    """Start and end instants of one solar period on one calendar day"""

    model_config = ConfigDict(frozen=True)

    day: date = Field(..., description="Calendar day the events belong to")
    mode: Mode = Field(..., description="Solar period the events describe")
    start: datetime = Field(..., description="Period start as an aware UTC instant")
    end: datetime = Field(..., description="Period end as an aware UTC instant")

    @model_validator(mode="after")
    def _check_order(self):
        if self.start > self.end:
            raise ValueError(f"start {self.start} is after end {self.end}")
        return self
