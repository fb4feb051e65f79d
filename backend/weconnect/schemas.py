"""Booking schemas - Pydantic models shared by storage, engines and routes"""

from datetime import date, datetime
from enum import Enum
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    REJECTED = "rejected"


class Booking(BaseModel):
    """A stored booking as seen by the lifecycle engine."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    phone: str
    email: Optional[str] = None
    facility: str
    visit_date: date
    pickup_location: str
    guests: int = 1
    notes: Optional[str] = None
    status: BookingStatus = BookingStatus.PENDING
    created_at: datetime
    confirmed_at: Optional[datetime] = None

    def to_public(self) -> dict:
        return self.model_dump(mode="json")


class BookingCreate(BaseModel):
    """Inbound booking request.

    Every field is optional here so that missing fields are reported by the
    lifecycle engine as one ``{error, required}`` response instead of a
    per-field schema error. ``visitors`` is accepted as an alias of
    ``guests``.
    """

    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    facility: Optional[str] = None
    visit_date: Optional[str] = None
    pickup_location: Optional[str] = None
    guests: Optional[int] = Field(default=None, validation_alias=AliasChoices("guests", "visitors"))
    notes: Optional[str] = None


class RejectRequest(BaseModel):
    reason: Optional[str] = None


class LoginRequest(BaseModel):
    password: Optional[str] = None


class ChannelOutcome(BaseModel):
    attempted: bool = False
    success: bool = False
    error: Optional[str] = None

    def to_public(self) -> dict:
        return self.model_dump(exclude_none=True)
