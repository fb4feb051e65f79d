import logging
from typing import Optional

from fastapi_mail import ConnectionConfig, FastMail, MessageSchema, MessageType

logger = logging.getLogger(__name__)


class SmtpEmailChannel:
    """Sends HTML email through fastapi-mail."""

    def __init__(self, conf: ConnectionConfig):
        self.mailer = FastMail(conf)

    async def send(self, to_email: str, subject: str, html: str) -> None:
        message = MessageSchema(
            subject=subject,
            recipients=[to_email],
            body=html,
            subtype=MessageType.html,
        )
        await self.mailer.send_message(message)


def build_email_channel(settings) -> Optional[SmtpEmailChannel]:
    if not settings.email_configured:
        logger.info("📧 Email credentials not configured - Email notifications disabled")
        return None

    try:
        conf = ConnectionConfig(
            MAIL_USERNAME=settings.MAIL_USERNAME,
            MAIL_PASSWORD=settings.MAIL_PASSWORD,
            MAIL_FROM=settings.MAIL_FROM or settings.MAIL_USERNAME,
            MAIL_FROM_NAME=settings.MAIL_FROM_NAME,
            MAIL_PORT=settings.MAIL_PORT,
            MAIL_SERVER=settings.MAIL_SERVER,
            MAIL_STARTTLS=True,       # STARTTLS on 587
            MAIL_SSL_TLS=False,
            USE_CREDENTIALS=True,
            TIMEOUT=max(1, int(settings.NOTIFICATION_TIMEOUT_SECONDS)),
        )
        channel = SmtpEmailChannel(conf)
    except Exception as e:
        logger.warning(f"📧 Email initialization failed - Email notifications disabled: {e}")
        return None

    logger.info("📧 Email service initialized")
    return channel
