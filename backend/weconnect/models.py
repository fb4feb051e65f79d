from sqlalchemy import Column, Date, DateTime, Integer, String, Text

from .database import Base


class BookingRecord(Base):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    phone = Column(String, nullable=False)
    email = Column(String, nullable=True)
    facility = Column(String, nullable=False)
    visit_date = Column(Date, nullable=False)
    pickup_location = Column(String, nullable=False)
    guests = Column(Integer, nullable=False, default=1)
    status = Column(String, nullable=False, default="pending", index=True)
    created_at = Column(DateTime, nullable=False)
    confirmed_at = Column(DateTime, nullable=True)
    notes = Column(Text, nullable=True)


class AdminSessionRecord(Base):
    __tablename__ = "admin_sessions"

    token = Column(String, primary_key=True)
    created_at = Column(DateTime, nullable=False)
    expires_at = Column(DateTime, nullable=False, index=True)
