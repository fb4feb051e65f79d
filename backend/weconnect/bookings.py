"""Booking lifecycle - creation, confirmation, rejection and reporting"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Optional

from fastapi.concurrency import run_in_threadpool

from .errors import AlreadyInStateError, MissingFieldsError, NotFoundError, ValidationError
from .notifications import not_attempted
from .pickup_locations import find_pickup, is_known_facility
from .schemas import Booking, BookingCreate, BookingStatus
from .storage import BookingStore
from .validators import is_blank, is_valid_email, is_valid_phone
from .visit_dates import check_visit_date, parse_visit_date

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ["name", "phone", "facility", "visit_date", "pickup_location"]
DEFAULT_REJECTION_NOTE = "Booking rejected by admin"
DEFAULT_MAX_GUESTS = 10

TRANSITIONS = {
    BookingStatus.PENDING: {BookingStatus.CONFIRMED, BookingStatus.REJECTED},
    BookingStatus.CONFIRMED: set(),
    BookingStatus.REJECTED: set(),
}

STATUS_ORDER = {
    BookingStatus.PENDING: 0,
    BookingStatus.CONFIRMED: 1,
    BookingStatus.REJECTED: 2,
}


def assert_transition(booking: Booking, target: BookingStatus) -> None:
    if target not in TRANSITIONS.get(booking.status, set()):
        raise AlreadyInStateError(booking.id, BookingStatus(booking.status).value)


@dataclass
class TransitionResult:
    booking: Booking
    notifications: dict = field(default_factory=dict)


def sort_bookings(bookings) -> list:
    """Pending first, then confirmed, then rejected; soonest visit first, newest request first."""
    ordered = sorted(bookings, key=lambda b: b.created_at, reverse=True)
    return sorted(ordered, key=lambda b: (STATUS_ORDER.get(b.status, len(STATUS_ORDER)), b.visit_date))


def group_bookings(bookings) -> dict:
    grouped = {status.value: [] for status in BookingStatus}
    for booking in bookings:
        grouped[BookingStatus(booking.status).value].append(booking)
    return grouped


def compute_stats(bookings, now: datetime) -> dict:
    bookings = list(bookings)
    grouped = group_bookings(bookings)
    today = now.date()
    return {
        "total": len(bookings),
        "pending": len(grouped["pending"]),
        "confirmed": len(grouped["confirmed"]),
        "rejected": len(grouped["rejected"]),
        "thisMonth": sum(
            1 for b in bookings
            if b.created_at.year == today.year and b.created_at.month == today.month
        ),
        "today": sum(1 for b in bookings if b.created_at.date() == today),
    }


class BookingService:
    """
    Owns the booking state machine.

    State lives in the store; every transition goes through the store's
    conditional update, so of two racing confirm/reject calls exactly one
    wins and the other sees AlreadyInStateError.
    """

    def __init__(
        self,
        store: BookingStore,
        dispatcher=None,
        clock: Callable[[], datetime] = datetime.now,
        max_guests: int = DEFAULT_MAX_GUESTS,
    ):
        self.store = store
        self.dispatcher = dispatcher
        self.clock = clock
        self.max_guests = max_guests

    # ----------------------------------------------------------- create

    def create_booking(self, data: BookingCreate) -> Booking:
        missing = [name for name in REQUIRED_FIELDS if is_blank(getattr(data, name))]
        if missing:
            raise MissingFieldsError(missing, REQUIRED_FIELDS)

        if not is_valid_phone(data.phone):
            raise ValidationError("Please enter a valid phone number", field="phone")
        if not is_blank(data.email) and not is_valid_email(data.email):
            raise ValidationError("Please enter a valid email address", field="email")

        guests = 1 if data.guests is None else data.guests
        if guests < 1:
            raise ValidationError("Number of guests must be at least 1", field="guests")
        if guests > self.max_guests:
            raise ValidationError(f"Number of guests cannot exceed {self.max_guests}", field="guests")

        if is_known_facility(data.facility) and find_pickup(data.facility, data.pickup_location) is None:
            raise ValidationError(
                "Pickup location is not available for the selected facility",
                field="pickup_location",
            )

        now = self.clock()
        visit_date = parse_visit_date(data.visit_date)
        check_visit_date(visit_date, today=now.date())

        booking = self.store.create({
            "name": data.name,
            "phone": data.phone,
            "email": None if is_blank(data.email) else data.email,
            "facility": data.facility,
            "visit_date": visit_date,
            "pickup_location": data.pickup_location,
            "guests": guests,
            "notes": None if is_blank(data.notes) else data.notes,
            "status": BookingStatus.PENDING.value,
            "created_at": now,
            "confirmed_at": None,
        })
        logger.info(f"📝 New booking created: ID {booking.id} - {booking.name} for {booking.facility}")
        return booking

    # ----------------------------------------------------------- read

    def get_booking(self, booking_id: int) -> Booking:
        booking = self.store.get(booking_id)
        if booking is None:
            raise NotFoundError("Booking not found")
        return booking

    def list_bookings(self, status: Optional[str] = None) -> list:
        bookings = self.store.list()
        if status:
            bookings = [b for b in bookings if b.status == status]
        return sort_bookings(bookings)

    def stats(self) -> dict:
        return compute_stats(self.store.list(), self.clock())

    # ----------------------------------------------------------- transitions

    async def confirm_booking(self, booking_id: int) -> TransitionResult:
        booking = await run_in_threadpool(
            self._transition,
            booking_id,
            BookingStatus.CONFIRMED,
            {"status": BookingStatus.CONFIRMED.value, "confirmed_at": self.clock()},
        )
        logger.info(f"✅ Booking {booking.id} confirmed for {booking.name}")
        notifications = await self._notify(booking, "confirmed")
        return TransitionResult(booking, notifications)

    async def reject_booking(self, booking_id: int, reason: Optional[str] = None) -> TransitionResult:
        reason = None if is_blank(reason) else reason.strip()
        booking = await run_in_threadpool(
            self._transition,
            booking_id,
            BookingStatus.REJECTED,
            {"status": BookingStatus.REJECTED.value, "notes": reason or DEFAULT_REJECTION_NOTE},
        )
        logger.info(f"❌ Booking {booking.id} rejected for {booking.name}")
        notifications = await self._notify(booking, "rejected", reason)
        return TransitionResult(booking, notifications)

    def _transition(self, booking_id: int, target: BookingStatus, changes: dict) -> Booking:
        current = self.get_booking(booking_id)
        assert_transition(current, target)

        updated = self.store.update(booking_id, changes, expected_status=BookingStatus.PENDING.value)
        if updated is None:
            # lost a race: re-read to report what the booking became
            latest = self.get_booking(booking_id)
            logger.warning(f"⚠️ Booking {booking_id} changed to {BookingStatus(latest.status).value} during {target.value}")
            raise AlreadyInStateError(booking_id, BookingStatus(latest.status).value)
        return updated

    async def _notify(self, booking: Booking, action: str, reason: Optional[str] = None) -> dict:
        if self.dispatcher is None:
            return not_attempted()
        return await self.dispatcher.notify(booking, action, reason)
