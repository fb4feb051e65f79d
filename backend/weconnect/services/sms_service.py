import asyncio
import logging
from typing import Optional

from twilio.http.http_client import TwilioHttpClient
from twilio.rest import Client

from ..errors import NotificationError
from ..validators import to_e164

logger = logging.getLogger(__name__)


class TwilioSmsChannel:
    """Sends SMS through the Twilio REST API."""

    def __init__(self, account_sid: str, auth_token: str, from_number: str, timeout: float = 10.0):
        self.from_number = from_number
        self.client = Client(account_sid, auth_token, http_client=TwilioHttpClient(timeout=timeout))

    async def send(self, to_phone: str, body: str) -> str:
        formatted = to_e164(to_phone)
        if not formatted:
            raise NotificationError(f"Invalid phone number format: {to_phone}")

        # the Twilio client is blocking; keep it off the event loop
        message = await asyncio.to_thread(
            self.client.messages.create,
            body=body,
            from_=self.from_number,
            to=formatted,
        )
        logger.debug(f"Twilio message SID: {message.sid}")
        return message.sid


def build_sms_channel(settings) -> Optional[TwilioSmsChannel]:
    if not settings.sms_configured:
        logger.info("📱 Twilio credentials not configured - SMS notifications disabled")
        return None

    try:
        channel = TwilioSmsChannel(
            settings.TWILIO_ACCOUNT_SID,
            settings.TWILIO_AUTH_TOKEN,
            settings.TWILIO_PHONE_NUMBER,
            timeout=settings.NOTIFICATION_TIMEOUT_SECONDS,
        )
    except Exception as e:
        logger.warning(f"📱 Twilio initialization failed - SMS notifications disabled: {e}")
        return None

    logger.info("📱 Twilio SMS service initialized")
    return channel
