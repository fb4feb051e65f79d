"""Storage contract for bookings.

Adapters own booking records. ``update`` is the only mutation after
creation and doubles as a compare-and-set: when ``expected_status`` is given
the change applies only if the stored status still matches, atomically.
"""

from abc import ABC, abstractmethod
from typing import Optional

from ..schemas import Booking


class BookingStore(ABC):

    @abstractmethod
    def create(self, data: dict) -> Booking:
        """Persist a new booking and return it with its assigned id."""

    @abstractmethod
    def get(self, booking_id: int) -> Optional[Booking]:
        ...

    @abstractmethod
    def list(self) -> list:
        ...

    @abstractmethod
    def update(self, booking_id: int, changes: dict, expected_status: Optional[str] = None) -> Optional[Booking]:
        """
        Apply ``changes`` and return the updated booking.

        Returns None when the booking does not exist or its status no longer
        equals ``expected_status``.
        """

    def close(self) -> None:
        pass
