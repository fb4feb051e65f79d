import asyncio
from datetime import date, datetime

import pytest

from weconnect.notifications import NotificationDispatcher, format_visit_date, render_email, render_sms
from weconnect.schemas import Booking


class RecordingChannel:
    def __init__(self, error=None, delay=0):
        self.error = error
        self.delay = delay
        self.sent = []

    async def send(self, *args):
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error:
            raise self.error
        self.sent.append(args)


@pytest.fixture
def booking():
    return Booking(
        id=7,
        name="Sarah <Johnson>",
        phone="(555) 123-4567",
        email="sarah@example.com",
        facility="Clinton Correctional Facility",
        visit_date=date(2025, 9, 27),
        pickup_location="bronx-yankee",
        guests=2,
        status="confirmed",
        created_at=datetime(2025, 9, 20, 9, 30),
        confirmed_at=datetime(2025, 9, 20, 10, 0),
    )


# ------------------ templates ------------------
def test_format_visit_date():
    assert format_visit_date(date(2025, 9, 27)) == "Saturday, September 27, 2025"
    assert format_visit_date(date(2025, 7, 4)) == "Friday, July 4, 2025"


def test_confirmation_sms(booking):
    body = render_sms(booking, "confirmed")
    assert body.startswith("BOOKING CONFIRMED - WE Connect Families")
    assert "Clinton Correctional Facility on Saturday, September 27, 2025 has been CONFIRMED!" in body
    assert "Pickup: Bronx: 161 McDonald's - Yankee Stadium - 12:30 AM" in body
    assert "Guests: 2" in body
    assert "(646) 226-2433" in body


def test_rejection_sms_with_and_without_reason(booking):
    with_reason = render_sms(booking, "rejected", "Bus is full")
    assert "could not be confirmed" in with_reason
    assert "Reason: Bus is full" in with_reason
    assert "Reason:" not in render_sms(booking, "rejected")


def test_email_escapes_user_text(booking):
    content = render_email(booking, "rejected", "<b>full</b>", organization="Org & Co")
    assert content.subject == "Booking Update - Clinton Correctional Facility on Saturday, September 27, 2025"
    assert "Sarah &lt;Johnson&gt;" in content.html
    assert "&lt;b&gt;full&lt;/b&gt;" in content.html
    assert "Org &amp; Co" in content.html


def test_confirmation_email_subject(booking):
    content = render_email(booking, "confirmed")
    assert content.subject.startswith("Booking Confirmed - ")
    assert "CONFIRMED" in content.html


def test_unknown_action(booking):
    with pytest.raises(ValueError):
        render_sms(booking, "cancelled")
    with pytest.raises(ValueError):
        render_email(booking, "cancelled")


# ------------------ dispatcher ------------------
def test_both_channels_succeed(booking):
    sms, email = RecordingChannel(), RecordingChannel()
    dispatcher = NotificationDispatcher(sms, email)

    result = asyncio.run(dispatcher.notify(booking, "confirmed"))
    assert result == {"sms": {"attempted": True, "success": True}, "email": {"attempted": True, "success": True}}
    assert sms.sent[0][0] == "(555) 123-4567"
    assert email.sent[0][0] == "sarah@example.com"
    assert email.sent[0][1].startswith("Booking Confirmed")


def test_channel_failure_is_reported_not_raised(booking):
    dispatcher = NotificationDispatcher(RecordingChannel(error=RuntimeError("Twilio is down")), RecordingChannel())

    result = asyncio.run(dispatcher.notify(booking, "rejected", "Bus is full"))
    assert result["sms"] == {"attempted": True, "success": False, "error": "Twilio is down"}
    assert result["email"] == {"attempted": True, "success": True}


def test_channel_timeout(booking):
    dispatcher = NotificationDispatcher(RecordingChannel(), RecordingChannel(delay=1), timeout=0.05)

    result = asyncio.run(dispatcher.notify(booking, "confirmed"))
    assert result["sms"]["success"] is True
    assert result["email"] == {"attempted": True, "success": False, "error": "Email timed out after 0.05s"}


def test_disabled_channels_are_not_attempted(booking):
    dispatcher = NotificationDispatcher()
    assert dispatcher.channels == {"sms": False, "email": False}

    result = asyncio.run(dispatcher.notify(booking, "confirmed"))
    assert result == {"sms": {"attempted": False, "success": False}, "email": {"attempted": False, "success": False}}


def test_booking_without_email_skips_email(booking):
    email = RecordingChannel()
    dispatcher = NotificationDispatcher(RecordingChannel(), email)

    result = asyncio.run(dispatcher.notify(booking.model_copy(update={"email": None}), "confirmed"))
    assert result["email"] == {"attempted": False, "success": False}
    assert email.sent == []
