"""Admin endpoints - session management and booking review"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from ..bookings import BookingService, group_bookings
from ..dependencies import (
    get_bearer_token,
    get_booking_service,
    get_session_guard,
    login_rate_limit,
    require_admin,
)
from ..schemas import BookingStatus, LoginRequest, RejectRequest
from ..sessions import AdminSession, AdminSessionGuard

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/admin", tags=["Admin"])


# ============================================================================
# SESSION
# ============================================================================


@router.post("/login", dependencies=[Depends(login_rate_limit)])
def admin_login(
    data: Optional[LoginRequest] = None,
    guard: AdminSessionGuard = Depends(get_session_guard),
):
    session = guard.login(data.password if data else None)
    return {
        "success": True,
        "sessionToken": session.token,
        "expiresAt": session.expires_at.isoformat(),
        "message": "Login successful",
    }


@router.post("/logout")
def admin_logout(
    token: Optional[str] = Depends(get_bearer_token),
    guard: AdminSessionGuard = Depends(get_session_guard),
):
    guard.logout(token)
    return {"success": True, "message": "Logged out successfully"}


# ============================================================================
# BOOKINGS
# ============================================================================


@router.get("/bookings")
def admin_bookings(
    status: Optional[BookingStatus] = Query(None),
    _: AdminSession = Depends(require_admin),
    service: BookingService = Depends(get_booking_service),
):
    bookings = service.list_bookings(status.value if status else None)
    grouped = group_bookings(bookings)
    return {
        "success": True,
        "bookings": [b.to_public() for b in bookings],
        "grouped": {key: [b.to_public() for b in items] for key, items in grouped.items()},
        "total": len(bookings),
        "counts": {key: len(items) for key, items in grouped.items()},
    }


@router.get("/bookings/{booking_id}")
def admin_booking(
    booking_id: int,
    _: AdminSession = Depends(require_admin),
    service: BookingService = Depends(get_booking_service),
):
    return {"success": True, "booking": service.get_booking(booking_id).to_public()}


@router.post("/bookings/{booking_id}/confirm")
async def confirm_booking(
    booking_id: int,
    _: AdminSession = Depends(require_admin),
    service: BookingService = Depends(get_booking_service),
):
    result = await service.confirm_booking(booking_id)
    return {
        "success": True,
        "message": "Booking confirmed successfully",
        "booking": result.booking.to_public(),
        "notifications": result.notifications,
    }


@router.post("/bookings/{booking_id}/reject")
async def reject_booking(
    booking_id: int,
    data: Optional[RejectRequest] = None,
    _: AdminSession = Depends(require_admin),
    service: BookingService = Depends(get_booking_service),
):
    result = await service.reject_booking(booking_id, data.reason if data else None)
    return {
        "success": True,
        "message": "Booking rejected successfully",
        "booking": result.booking.to_public(),
        "notifications": result.notifications,
    }


@router.get("/stats")
def admin_stats(
    _: AdminSession = Depends(require_admin),
    service: BookingService = Depends(get_booking_service),
):
    return {
        "success": True,
        "stats": service.stats(),
        "timestamp": service.clock().isoformat(),
    }
