"""Admin session guard - bearer tokens with a fixed lifetime"""

import hmac
import logging
import secrets
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta
from threading import Lock
from typing import Callable, Optional

from sqlalchemy.exc import SQLAlchemyError

from .errors import (
    InvalidCredentialsError,
    SessionExpiredError,
    StorageError,
    UnauthorizedError,
    ValidationError,
)
from .models import AdminSessionRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AdminSession:
    token: str
    created_at: datetime
    expires_at: datetime

    def is_expired(self, now: datetime) -> bool:
        return now > self.expires_at


# ================== STORES ==================
class SessionStore(ABC):

    @abstractmethod
    def get(self, token: str) -> Optional[AdminSession]:
        ...

    @abstractmethod
    def set(self, session: AdminSession) -> None:
        ...

    @abstractmethod
    def delete(self, token: str) -> None:
        ...

    @abstractmethod
    def purge_expired(self, now: datetime) -> int:
        ...


class MemorySessionStore(SessionStore):

    def __init__(self):
        self._sessions = {}
        self._lock = Lock()

    def get(self, token: str) -> Optional[AdminSession]:
        with self._lock:
            return self._sessions.get(token)

    def set(self, session: AdminSession) -> None:
        with self._lock:
            self._sessions[session.token] = session

    def delete(self, token: str) -> None:
        with self._lock:
            self._sessions.pop(token, None)

    def purge_expired(self, now: datetime) -> int:
        with self._lock:
            expired = [t for t, s in self._sessions.items() if s.is_expired(now)]
            for token in expired:
                del self._sessions[token]
            return len(expired)


class SqlSessionStore(SessionStore):

    def __init__(self, session_factory):
        self.SessionLocal = session_factory

    def get(self, token: str) -> Optional[AdminSession]:
        try:
            with self.SessionLocal() as db:
                record = db.get(AdminSessionRecord, token)
                if record is None:
                    return None
                return AdminSession(record.token, record.created_at, record.expires_at)
        except SQLAlchemyError as e:
            raise StorageError(str(e), public_message="Failed to verify session") from e

    def set(self, session: AdminSession) -> None:
        try:
            with self.SessionLocal() as db:
                db.merge(AdminSessionRecord(
                    token=session.token,
                    created_at=session.created_at,
                    expires_at=session.expires_at,
                ))
                db.commit()
        except SQLAlchemyError as e:
            raise StorageError(str(e), public_message="Failed to create session") from e

    def delete(self, token: str) -> None:
        try:
            with self.SessionLocal() as db:
                db.query(AdminSessionRecord).filter(AdminSessionRecord.token == token).delete()
                db.commit()
        except SQLAlchemyError as e:
            raise StorageError(str(e), public_message="Failed to end session") from e

    def purge_expired(self, now: datetime) -> int:
        try:
            with self.SessionLocal() as db:
                count = db.query(AdminSessionRecord).filter(AdminSessionRecord.expires_at < now).delete()
                db.commit()
                return count
        except SQLAlchemyError as e:
            raise StorageError(str(e), public_message="Failed to purge sessions") from e


# ================== GUARD ==================
class AdminSessionGuard:
    """
    Issues and verifies admin bearer tokens.

    Expired sessions are removed when a verification finds them; there is no
    background sweep.
    """

    def __init__(
        self,
        store: SessionStore,
        admin_password: Optional[str],
        ttl: timedelta = timedelta(hours=24),
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.store = store
        self.admin_password = admin_password
        self.ttl = ttl
        self.clock = clock
        if not admin_password:
            logger.warning("⚠️ ADMIN_PASSWORD not set - admin login is disabled")

    def login(self, password: Optional[str]) -> AdminSession:
        if not password:
            raise ValidationError("Password is required", field="password")

        if not self.admin_password or not hmac.compare_digest(
            password.encode("utf-8"), self.admin_password.encode("utf-8")
        ):
            logger.warning("🚨 Failed admin login attempt")
            raise InvalidCredentialsError()

        now = self.clock()
        session = AdminSession(token=secrets.token_hex(32), created_at=now, expires_at=now + self.ttl)
        self.store.set(session)
        logger.info("✅ Admin logged in successfully")
        return session

    def verify(self, token: Optional[str]) -> AdminSession:
        if not token:
            raise UnauthorizedError("No session token provided")

        session = self.store.get(token)
        if session is None:
            raise UnauthorizedError("Invalid session token")

        if session.is_expired(self.clock()):
            self.store.delete(token)
            raise SessionExpiredError()

        return session

    def logout(self, token: Optional[str]) -> None:
        if token:
            self.store.delete(token)
            logger.info("👋 Admin logged out")
