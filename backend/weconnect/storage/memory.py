from threading import Lock
from typing import Optional

from ..schemas import Booking
from .base import BookingStore


class MemoryBookingStore(BookingStore):
    """Process-local store, used for demos and tests."""

    def __init__(self):
        self._bookings = {}
        self._next_id = 1
        self._lock = Lock()

    def create(self, data: dict) -> Booking:
        with self._lock:
            booking = Booking(id=self._next_id, **data)
            self._bookings[booking.id] = booking
            self._next_id += 1
            return booking.model_copy()

    def get(self, booking_id: int) -> Optional[Booking]:
        with self._lock:
            booking = self._bookings.get(booking_id)
            return booking.model_copy() if booking else None

    def list(self) -> list:
        with self._lock:
            return [b.model_copy() for b in self._bookings.values()]

    def update(self, booking_id: int, changes: dict, expected_status: Optional[str] = None) -> Optional[Booking]:
        with self._lock:
            booking = self._bookings.get(booking_id)
            if booking is None:
                return None
            if expected_status is not None and booking.status != expected_status:
                return None

            updated = Booking.model_validate({**booking.model_dump(), **changes})
            self._bookings[booking_id] = updated
            return updated.model_copy()
