from typing import Optional

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .bookings import BookingService
from .rate_limiter import enforce_rate_limit
from .sessions import AdminSession, AdminSessionGuard

# missing or non-bearer credentials reach the guard as None, which reports them as 401
security = HTTPBearer(auto_error=False)


def get_booking_service(request: Request) -> BookingService:
    return request.app.state.booking_service


def get_session_guard(request: Request) -> AdminSessionGuard:
    return request.app.state.session_guard


def get_bearer_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[str]:
    return credentials.credentials if credentials else None


def require_admin(
    token: Optional[str] = Depends(get_bearer_token),
    guard: AdminSessionGuard = Depends(get_session_guard),
) -> AdminSession:
    return guard.verify(token)


def login_rate_limit(request: Request) -> None:
    enforce_rate_limit(
        request.app.state.login_limiter,
        request,
        key_prefix="admin_login",
        trusted_proxy_hops=request.app.state.settings.TRUSTED_PROXY_HOPS,
    )
