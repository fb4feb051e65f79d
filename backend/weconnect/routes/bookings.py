"""Public booking endpoints - submission, facilities, pickup stops and visit dates"""

import logging

from fastapi import APIRouter, Depends, Query

from ..bookings import BookingService
from ..dependencies import get_booking_service
from ..errors import ValidationError
from ..pickup_locations import facilities, pickup_options_for
from ..schemas import BookingCreate
from ..visit_dates import check_visit_date, holiday_name, parse_visit_date, upcoming_visit_dates

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Bookings"])


@router.post("/bookings", status_code=201)
def create_booking(
    data: BookingCreate,
    service: BookingService = Depends(get_booking_service),
):
    booking = service.create_booking(data)
    return {
        "success": True,
        "bookingId": booking.id,
        "message": "Booking submitted successfully! We will contact you soon to confirm.",
        "booking": {
            "id": booking.id,
            "name": booking.name,
            "phone": booking.phone,
            "facility": booking.facility,
            "visit_date": booking.visit_date.isoformat(),
            "status": booking.status.value,
        },
    }


@router.get("/facilities")
def list_facilities():
    return {"success": True, "facilities": facilities()}


@router.get("/pickup-locations")
def get_pickup_locations(facility: str = Query(...)):
    locations = pickup_options_for(facility)
    result = {
        "success": True,
        "facility": facility,
        "locations": [entry.model_dump(exclude_none=True) for entry in locations],
    }
    if not locations:
        result["message"] = "No pickup locations available for this facility. Please contact us."
    return result


@router.get("/visit-dates")
def list_visit_dates(
    days: int = Query(60, ge=1, le=366),
    service: BookingService = Depends(get_booking_service),
):
    today = service.clock().date()
    return {
        "success": True,
        "from": today.isoformat(),
        "dates": [
            {
                "date": day.isoformat(),
                "weekday": f"{day:%A}",
                "holiday": holiday_name(day),
            }
            for day in upcoming_visit_dates(today, days)
        ],
    }


@router.get("/visit-dates/check")
def check_date(
    date: str = Query(...),
    service: BookingService = Depends(get_booking_service),
):
    day = parse_visit_date(date)
    try:
        check_visit_date(day, today=service.clock().date())
    except ValidationError as e:
        return {"success": True, "date": day.isoformat(), "eligible": False, "reason": e.message}
    return {"success": True, "date": day.isoformat(), "eligible": True, "holiday": holiday_name(day)}
