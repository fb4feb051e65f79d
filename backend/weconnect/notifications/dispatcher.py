"""
Booking notification dispatcher
Sends the SMS and email for a lifecycle event; channel failures are reported, never raised
"""

import asyncio
import logging
from typing import Optional

from ..schemas import Booking, ChannelOutcome
from .templates import render_email, render_sms

logger = logging.getLogger(__name__)


def not_attempted() -> dict:
    return {"sms": ChannelOutcome().to_public(), "email": ChannelOutcome().to_public()}


class NotificationDispatcher:
    """
    Args:
        sms_channel: object with ``async send(to_phone, body)``, or None when SMS is disabled
        email_channel: object with ``async send(to_email, subject, html)``, or None when email is disabled
        timeout: seconds allowed per channel
    """

    def __init__(
        self,
        sms_channel=None,
        email_channel=None,
        timeout: float = 10.0,
        organization: str = "WE Connect Families",
        contact_phone: str = "(646) 226-2433",
    ):
        self.sms_channel = sms_channel
        self.email_channel = email_channel
        self.timeout = timeout
        self.organization = organization
        self.contact_phone = contact_phone

    @property
    def channels(self) -> dict:
        return {"sms": self.sms_channel is not None, "email": self.email_channel is not None}

    async def notify(self, booking: Booking, action: str, reason: Optional[str] = None) -> dict:
        sms, email = await asyncio.gather(
            self._send_sms(booking, action, reason),
            self._send_email(booking, action, reason),
        )
        return {"sms": sms.to_public(), "email": email.to_public()}

    async def _send_sms(self, booking: Booking, action: str, reason: Optional[str]) -> ChannelOutcome:
        if self.sms_channel is None or not booking.phone:
            return ChannelOutcome()

        try:
            body = render_sms(booking, action, reason, self.organization, self.contact_phone)
            await asyncio.wait_for(self.sms_channel.send(booking.phone, body), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.error(f"❌ {action} SMS to {booking.phone} timed out after {self.timeout}s")
            return ChannelOutcome(attempted=True, success=False, error=f"SMS timed out after {self.timeout:g}s")
        except Exception as e:
            logger.error(f"❌ Failed to send {action} SMS to {booking.phone}: {e}")
            return ChannelOutcome(attempted=True, success=False, error=str(e) or e.__class__.__name__)

        logger.info(f"📱 {action.capitalize()} SMS sent to {booking.phone}")
        return ChannelOutcome(attempted=True, success=True)

    async def _send_email(self, booking: Booking, action: str, reason: Optional[str]) -> ChannelOutcome:
        if self.email_channel is None or not booking.email:
            return ChannelOutcome()

        try:
            content = render_email(booking, action, reason, self.organization, self.contact_phone)
            await asyncio.wait_for(
                self.email_channel.send(booking.email, content.subject, content.html),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            logger.error(f"❌ {action} email to {booking.email} timed out after {self.timeout}s")
            return ChannelOutcome(attempted=True, success=False, error=f"Email timed out after {self.timeout:g}s")
        except Exception as e:
            logger.error(f"❌ Failed to send {action} email to {booking.email}: {e}")
            return ChannelOutcome(attempted=True, success=False, error=str(e) or e.__class__.__name__)

        logger.info(f"📧 {action.capitalize()} email sent to {booking.email}")
        return ChannelOutcome(attempted=True, success=True)
