import json
import logging
import os
import tempfile
from threading import Lock
from typing import Optional

from ..errors import StorageError
from ..schemas import Booking
from .base import BookingStore

logger = logging.getLogger(__name__)


class JsonFileBookingStore(BookingStore):
    """
    Single JSON document on disk: ``{"bookings": [...], "nextId": N}``.

    Every write replaces the file atomically (temp file + rename).
    """

    def __init__(self, path: str):
        self.path = path
        self._lock = Lock()

    def create(self, data: dict) -> Booking:
        with self._lock:
            document = self._load()
            booking = Booking(id=document["nextId"], **data)
            document["bookings"].append(booking.to_public())
            document["nextId"] += 1
            self._save(document)
            logger.debug(f"💾 Saved {len(document['bookings'])} bookings to {self.path}")
            return booking

    def get(self, booking_id: int) -> Optional[Booking]:
        with self._lock:
            for item in self._load()["bookings"]:
                if item["id"] == booking_id:
                    return Booking.model_validate(item)
        return None

    def list(self) -> list:
        with self._lock:
            return [Booking.model_validate(item) for item in self._load()["bookings"]]

    def update(self, booking_id: int, changes: dict, expected_status: Optional[str] = None) -> Optional[Booking]:
        with self._lock:
            document = self._load()
            for index, item in enumerate(document["bookings"]):
                if item["id"] != booking_id:
                    continue
                current = Booking.model_validate(item)
                if expected_status is not None and current.status != expected_status:
                    return None

                updated = Booking.model_validate({**current.model_dump(), **changes})
                document["bookings"][index] = updated.to_public()
                self._save(document)
                return updated
        return None

    def _load(self) -> dict:
        if not os.path.exists(self.path):
            return {"bookings": [], "nextId": 1}
        try:
            with open(self.path, encoding="utf-8") as f:
                document = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"❌ Failed to read {self.path}: {e}")
            raise StorageError(str(e), public_message="Failed to fetch bookings") from e

        document.setdefault("bookings", [])
        document.setdefault("nextId", max((b["id"] for b in document["bookings"]), default=0) + 1)
        return document

    def _save(self, document: dict) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        try:
            os.makedirs(directory, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as e:
            logger.error(f"❌ Failed to write {self.path}: {e}")
            raise StorageError(str(e), public_message="Failed to save booking") from e
