"""
Example Schemas
Pydantic models for common extraction targets.
"""

from pydantic import BaseModel, Field


class RoomBooking(BaseModel):
    """A room booking request."""
    name: str = Field(description="Full name of the person")
    date: str = Field(description="Date converted to Y-m-d format")
    fromTime: str = Field(description="Time in 24 hour format")
    toTime: str = Field(description="Time in 24 hour format")
