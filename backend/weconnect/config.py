from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


# ================== SETTINGS ==================
class Settings(BaseSettings):
    ADMIN_PASSWORD: Optional[str] = None

    DATABASE_URL: str = "sqlite:///./bookings.db"
    STORAGE_TIMEOUT_SECONDS: float = 10.0

    SESSION_TTL_HOURS: int = 24
    LOGIN_RATE_LIMIT: int = 5
    LOGIN_RATE_WINDOW_SECONDS: int = 15 * 60
    # reverse proxies in front of the app that append to X-Forwarded-For
    TRUSTED_PROXY_HOPS: int = 0

    MAX_GUESTS_PER_BOOKING: int = 10

    # SMS (Twilio)
    TWILIO_ACCOUNT_SID: Optional[str] = None
    TWILIO_AUTH_TOKEN: Optional[str] = None
    TWILIO_PHONE_NUMBER: Optional[str] = None

    # Email (SMTP via fastapi-mail)
    MAIL_USERNAME: Optional[str] = None
    MAIL_PASSWORD: Optional[str] = None
    MAIL_FROM: Optional[str] = None
    MAIL_FROM_NAME: str = "WE Connect Families"
    MAIL_SERVER: str = "smtp.gmail.com"
    MAIL_PORT: int = 587

    NOTIFICATION_TIMEOUT_SECONDS: float = 10.0

    ORGANIZATION_NAME: str = "WE Connect Families"
    CONTACT_PHONE: str = "(646) 226-2433"

    CORS_ORIGINS: str = "*"
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="allow"
    )

    @property
    def sms_configured(self) -> bool:
        return bool(
            self.TWILIO_ACCOUNT_SID
            and self.TWILIO_AUTH_TOKEN
            and self.TWILIO_PHONE_NUMBER
            and self.TWILIO_ACCOUNT_SID.startswith("AC")
        )

    @property
    def email_configured(self) -> bool:
        return bool(self.MAIL_USERNAME and self.MAIL_PASSWORD)

    @property
    def cors_origins(self) -> list:
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


settings = Settings()
