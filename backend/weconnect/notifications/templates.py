"""Message text for booking notifications.

Pure functions: no I/O, so wording can be tested without any transport.
"""

from dataclasses import dataclass
from datetime import date
from html import escape
from typing import Optional

from ..pickup_locations import describe_pickup
from ..schemas import Booking

CONFIRMED = "confirmed"
REJECTED = "rejected"
ACTIONS = (CONFIRMED, REJECTED)


@dataclass
class EmailContent:
    subject: str
    html: str


def format_visit_date(day: date) -> str:
    """'Saturday, September 27, 2025'"""
    return f"{day:%A, %B} {day.day}, {day.year}"


def render_sms(
    booking: Booking,
    action: str,
    reason: Optional[str] = None,
    organization: str = "WE Connect Families",
    contact_phone: str = "(646) 226-2433",
) -> str:
    visit_date = format_visit_date(booking.visit_date)
    pickup = describe_pickup(booking.facility, booking.pickup_location)

    if action == CONFIRMED:
        return (
            f"BOOKING CONFIRMED - {organization}\n\n"
            f"Your transportation to {booking.facility} on {visit_date} has been CONFIRMED!\n\n"
            f"Pickup: {pickup}\n"
            f"Guests: {booking.guests}\n\n"
            f"Questions? Call {contact_phone}\n"
            f"Thank you for choosing {organization}!"
        )

    if action == REJECTED:
        lines = [
            f"BOOKING UPDATE - {organization}",
            "",
            f"Unfortunately, your transportation booking for {booking.facility} on {visit_date} "
            "could not be confirmed.",
        ]
        if reason:
            lines += ["", f"Reason: {reason}"]
        lines += [
            "",
            f"Please call {contact_phone} to discuss alternatives or reschedule.",
            "",
            "Thank you for understanding.",
        ]
        return "\n".join(lines)

    raise ValueError(f"Unknown notification action: {action}")


def render_email(
    booking: Booking,
    action: str,
    reason: Optional[str] = None,
    organization: str = "WE Connect Families",
    contact_phone: str = "(646) 226-2433",
) -> EmailContent:
    visit_date = format_visit_date(booking.visit_date)
    pickup = describe_pickup(booking.facility, booking.pickup_location)
    org = escape(organization)
    phone = escape(contact_phone)

    details = f"""
        <ul style="list-style: none; padding: 0;">
            <li><strong>Facility:</strong> {escape(booking.facility)}</li>
            <li><strong>Date:</strong> {visit_date}</li>
            <li><strong>Pickup Location:</strong> {escape(pickup)}</li>
            <li><strong>Number of Guests:</strong> {booking.guests}</li>
        </ul>
    """

    if action == CONFIRMED:
        subject = f"Booking Confirmed - {booking.facility} on {visit_date}"
        body = f"""
        <h2>Hello {escape(booking.name)},</h2>
        <p>Great news! Your transportation booking has been <strong>CONFIRMED</strong>.</p>
        <h3>Booking Details:</h3>
        {details}
        <p><strong>Important:</strong> Please arrive 15 minutes early at your pickup location.</p>
        <p>Questions or need to make changes? Call us at <strong>{phone}</strong></p>
        <p>Thank you for choosing {org}. We look forward to serving you!</p>
        """
    elif action == REJECTED:
        subject = f"Booking Update - {booking.facility} on {visit_date}"
        reason_html = f"<p><strong>Reason:</strong> {escape(reason)}</p>" if reason else ""
        body = f"""
        <h2>Hello {escape(booking.name)},</h2>
        <p>We regret to inform you that your transportation booking could not be confirmed at this time.</p>
        <h3>Booking Details:</h3>
        {details}
        {reason_html}
        <p><strong>Next Steps:</strong> Please call us at <strong>{phone}</strong> to discuss
        alternative dates, explore other pickup options or join our waitlist for cancellations.</p>
        <p>We apologize for any inconvenience and appreciate your understanding.</p>
        """
    else:
        raise ValueError(f"Unknown notification action: {action}")

    html = f"""
    <html>
    <body style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
        {body}
        <hr>
        <p style="text-align: center;"><strong>{org}</strong><br>{phone}</p>
    </body>
    </html>
    """
    return EmailContent(subject=subject, html=html)
