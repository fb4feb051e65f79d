import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError

from ..database import init_db, make_engine, make_session_factory
from ..errors import StorageError
from ..models import BookingRecord
from ..schemas import Booking
from .base import BookingStore

logger = logging.getLogger(__name__)


class SqlBookingStore(BookingStore):
    """SQLAlchemy-backed store (SQLite by default, any SQLAlchemy URL works)."""

    def __init__(self, session_factory, engine=None):
        self.SessionLocal = session_factory
        self.engine = engine

    @classmethod
    def from_url(cls, database_url: str, timeout: float = 10.0) -> "SqlBookingStore":
        engine = make_engine(database_url, timeout=timeout)
        return cls(make_session_factory(engine), engine=engine)

    def init_schema(self) -> None:
        if self.engine is not None:
            init_db(self.engine)

    def create(self, data: dict) -> Booking:
        try:
            with self.SessionLocal() as db:
                record = BookingRecord(**data)
                db.add(record)
                db.commit()
                db.refresh(record)
                return Booking.model_validate(record)
        except SQLAlchemyError as e:
            logger.error(f"❌ Failed to save booking: {e}")
            raise StorageError(str(e), public_message="Failed to save booking") from e

    def get(self, booking_id: int) -> Optional[Booking]:
        try:
            with self.SessionLocal() as db:
                record = db.get(BookingRecord, booking_id)
                return Booking.model_validate(record) if record else None
        except SQLAlchemyError as e:
            logger.error(f"❌ Failed to fetch booking {booking_id}: {e}")
            raise StorageError(str(e), public_message="Failed to fetch booking") from e

    def list(self) -> list:
        try:
            with self.SessionLocal() as db:
                records = db.query(BookingRecord).order_by(BookingRecord.id).all()
                return [Booking.model_validate(r) for r in records]
        except SQLAlchemyError as e:
            logger.error(f"❌ Failed to fetch bookings: {e}")
            raise StorageError(str(e), public_message="Failed to fetch bookings") from e

    def update(self, booking_id: int, changes: dict, expected_status: Optional[str] = None) -> Optional[Booking]:
        try:
            with self.SessionLocal() as db:
                query = db.query(BookingRecord).filter(BookingRecord.id == booking_id)
                if expected_status is not None:
                    query = query.filter(BookingRecord.status == expected_status)

                # single UPDATE ... WHERE statement, so the status check and write are atomic
                updated = query.update(changes, synchronize_session=False)
                db.commit()
                if not updated:
                    return None

                record = db.get(BookingRecord, booking_id)
                return Booking.model_validate(record)
        except SQLAlchemyError as e:
            logger.error(f"❌ Failed to update booking {booking_id}: {e}")
            raise StorageError(str(e), public_message="Failed to update booking") from e

    def close(self) -> None:
        if self.engine is not None:
            self.engine.dispose()
