import asyncio
import threading
from datetime import date, datetime, timedelta

import pytest

from weconnect.bookings import BookingService, compute_stats, sort_bookings
from weconnect.errors import AlreadyInStateError, MissingFieldsError, NotFoundError, ValidationError
from weconnect.schemas import Booking, BookingCreate, BookingStatus
from weconnect.storage import MemoryBookingStore

NOW = datetime(2025, 9, 20, 9, 30)


class RecordingDispatcher:
    def __init__(self):
        self.calls = []

    async def notify(self, booking, action, reason=None):
        self.calls.append((booking.id, action, reason))
        return {"sms": {"attempted": False, "success": False}, "email": {"attempted": False, "success": False}}


class RacingStore(MemoryBookingStore):
    """Another admin rejects the booking between our read and our write."""

    def update(self, booking_id, changes, expected_status=None):
        super().update(booking_id, {"status": "rejected", "notes": "beaten"})
        return super().update(booking_id, changes, expected_status)


@pytest.fixture
def clock():
    state = {"now": NOW}

    def now():
        return state["now"]

    now.state = state
    return now


@pytest.fixture
def dispatcher():
    return RecordingDispatcher()


@pytest.fixture
def service(clock, dispatcher):
    return BookingService(MemoryBookingStore(), dispatcher, clock=clock)


def request(**overrides):
    data = {
        "name": "Sarah Johnson",
        "phone": "5551234567",
        "facility": "Clinton Correctional Facility",
        "visit_date": "2025-09-27",
        "pickup_location": "bronx-yankee",
        "guests": 2,
    }
    data.update(overrides)
    return BookingCreate(**data)


# ------------------ create ------------------
def test_create_booking_sets_server_fields(service):
    booking = service.create_booking(request())
    assert booking.id == 1
    assert booking.status == BookingStatus.PENDING
    assert booking.created_at == NOW
    assert booking.confirmed_at is None
    assert booking.visit_date == date(2025, 9, 27)


def test_ids_increase(service):
    first = service.create_booking(request())
    second = service.create_booking(request())
    assert second.id > first.id


def test_guests_default_to_one(service):
    assert service.create_booking(request(guests=None)).guests == 1


def test_guests_must_be_positive(service):
    with pytest.raises(ValidationError, match="guests"):
        service.create_booking(request(guests=0))


def test_missing_fields_are_listed(service):
    with pytest.raises(MissingFieldsError) as exc:
        service.create_booking(BookingCreate(name="Sarah", facility=""))
    assert exc.value.missing == ["phone", "facility", "visit_date", "pickup_location"]


@pytest.mark.parametrize("field,value", [("phone", "call me"), ("email", "not-an-email")])
def test_invalid_contact_details(service, field, value):
    with pytest.raises(ValidationError) as exc:
        service.create_booking(request(**{field: value}))
    assert exc.value.field == field


def test_unlisted_facility_accepts_any_pickup(service):
    booking = service.create_booking(request(facility="Sing Sing Correctional Facility", pickup_location="call-us"))
    assert booking.pickup_location == "call-us"


def test_round_trip_through_list(service):
    created = service.create_booking(request(email="sarah@example.com", notes="Two children"))
    listed = service.list_bookings()
    assert len(listed) == 1
    assert listed[0].model_dump(exclude={"id", "created_at", "status"}) == created.model_dump(
        exclude={"id", "created_at", "status"}
    )


# ------------------ transitions ------------------
def test_confirm_booking(service, dispatcher):
    booking = service.create_booking(request())

    result = asyncio.run(service.confirm_booking(booking.id))
    assert result.booking.status == BookingStatus.CONFIRMED
    assert result.booking.confirmed_at == NOW
    assert dispatcher.calls == [(booking.id, "confirmed", None)]
    assert set(result.notifications) == {"sms", "email"}


def test_confirm_twice_keeps_first_timestamp(service, clock, dispatcher):
    booking = service.create_booking(request())
    asyncio.run(service.confirm_booking(booking.id))

    clock.state["now"] = NOW + timedelta(hours=2)
    with pytest.raises(AlreadyInStateError) as exc:
        asyncio.run(service.confirm_booking(booking.id))
    assert exc.value.status == "confirmed"

    assert service.get_booking(booking.id).confirmed_at == NOW
    assert len(dispatcher.calls) == 1


def test_reject_with_reason(service, dispatcher):
    booking = service.create_booking(request())

    result = asyncio.run(service.reject_booking(booking.id, "No space available"))
    assert result.booking.status == BookingStatus.REJECTED
    assert result.booking.notes == "No space available"
    assert result.booking.confirmed_at is None
    assert dispatcher.calls == [(booking.id, "rejected", "No space available")]


@pytest.mark.parametrize("reason", [None, "", "   "])
def test_reject_without_reason_uses_default_note(service, reason):
    booking = service.create_booking(request())
    result = asyncio.run(service.reject_booking(booking.id, reason))
    assert result.booking.notes == "Booking rejected by admin"


def test_terminal_states_do_not_move(service):
    confirmed = service.create_booking(request())
    rejected = service.create_booking(request())
    asyncio.run(service.confirm_booking(confirmed.id))
    asyncio.run(service.reject_booking(rejected.id))

    with pytest.raises(AlreadyInStateError, match="already confirmed"):
        asyncio.run(service.reject_booking(confirmed.id))
    with pytest.raises(AlreadyInStateError, match="already rejected"):
        asyncio.run(service.confirm_booking(rejected.id))


def test_unknown_booking(service):
    with pytest.raises(NotFoundError):
        asyncio.run(service.confirm_booking(42))
    with pytest.raises(NotFoundError):
        asyncio.run(service.reject_booking(42))
    with pytest.raises(NotFoundError):
        service.get_booking(42)


def test_losing_a_race_reports_current_state(clock, dispatcher):
    service = BookingService(RacingStore(), dispatcher, clock=clock)
    booking = service.create_booking(request())

    with pytest.raises(AlreadyInStateError) as exc:
        asyncio.run(service.confirm_booking(booking.id))
    assert exc.value.status == "rejected"

    stored = service.get_booking(booking.id)
    assert stored.status == BookingStatus.REJECTED
    assert stored.confirmed_at is None
    assert dispatcher.calls == []


def test_missing_dispatcher_reports_nothing_attempted(clock):
    service = BookingService(MemoryBookingStore(), clock=clock)
    booking = service.create_booking(request())

    result = asyncio.run(service.confirm_booking(booking.id))
    assert result.notifications == {
        "sms": {"attempted": False, "success": False},
        "email": {"attempted": False, "success": False},
    }


# ------------------ listing & stats ------------------
def make_booking(id, status, visit_date, created_at):
    return Booking(
        id=id,
        name="x",
        phone="5551234567",
        facility="Clinton Correctional Facility",
        visit_date=visit_date,
        pickup_location="bronx-yankee",
        status=status,
        created_at=created_at,
        confirmed_at=created_at if status == "confirmed" else None,
    )


def test_sort_order():
    bookings = [
        make_booking(1, "rejected", date(2025, 9, 27), datetime(2025, 9, 1)),
        make_booking(2, "confirmed", date(2025, 9, 27), datetime(2025, 9, 1)),
        make_booking(3, "pending", date(2025, 10, 4), datetime(2025, 9, 1)),
        make_booking(4, "pending", date(2025, 9, 27), datetime(2025, 9, 1)),
        make_booking(5, "pending", date(2025, 9, 27), datetime(2025, 9, 3)),
    ]
    assert [b.id for b in sort_bookings(bookings)] == [5, 4, 3, 2, 1]


def test_list_filters_by_status(service):
    kept = service.create_booking(request())
    other = service.create_booking(request())
    asyncio.run(service.confirm_booking(other.id))

    assert [b.id for b in service.list_bookings("pending")] == [kept.id]
    assert [b.id for b in service.list_bookings("confirmed")] == [other.id]


def test_compute_stats():
    now = datetime(2025, 9, 20, 12, 0)
    bookings = [
        make_booking(1, "pending", date(2025, 9, 27), datetime(2025, 9, 20, 8, 0)),
        make_booking(2, "confirmed", date(2025, 9, 27), datetime(2025, 9, 2, 8, 0)),
        make_booking(3, "rejected", date(2025, 9, 27), datetime(2025, 8, 31, 23, 59)),
        make_booking(4, "pending", date(2025, 9, 27), datetime(2024, 9, 20, 8, 0)),
    ]
    assert compute_stats(bookings, now) == {
        "total": 4,
        "pending": 2,
        "confirmed": 1,
        "rejected": 1,
        "thisMonth": 2,
        "today": 1,
    }


def test_guests_capped(clock):
    service = BookingService(MemoryBookingStore(), clock=clock, max_guests=4)
    assert service.create_booking(request(guests=4)).guests == 4
    with pytest.raises(ValidationError, match="cannot exceed 4"):
        service.create_booking(request(guests=5))


class ThreadRecordingStore(MemoryBookingStore):
    def __init__(self):
        super().__init__()
        self.update_threads = []

    def update(self, booking_id, changes, expected_status=None):
        self.update_threads.append(threading.get_ident())
        return super().update(booking_id, changes, expected_status)


def test_transitions_write_off_the_event_loop(clock):
    store = ThreadRecordingStore()
    service = BookingService(store, clock=clock)
    confirmed = service.create_booking(request())
    rejected = service.create_booking(request())

    async def run():
        loop_thread = threading.get_ident()
        await service.confirm_booking(confirmed.id)
        await service.reject_booking(rejected.id)
        return loop_thread

    loop_thread = asyncio.run(run())
    assert len(store.update_threads) == 2
    assert loop_thread not in store.update_threads
