from .dispatcher import NotificationDispatcher, not_attempted
from .templates import CONFIRMED, REJECTED, EmailContent, format_visit_date, render_email, render_sms

__all__ = [
    "CONFIRMED",
    "REJECTED",
    "EmailContent",
    "NotificationDispatcher",
    "format_visit_date",
    "not_attempted",
    "render_email",
    "render_sms",
]
