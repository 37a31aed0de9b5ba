from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from .. import booking_rules, models, schemas
from ..database import get_db
from ..dependencies import get_current_user, require_customer, require_tailor
from ..services.bookings import BookingService, booking_out

router = APIRouter(prefix="/bookings", tags=["Bookings"])


def get_booking_service(db: Session = Depends(get_db)) -> BookingService:
    return BookingService(db)


@router.get("/rules", response_model=schemas.BookingRulesOut)
def get_rules():
    """Status and payment transition tables, for filtering options client-side."""
    return schemas.BookingRulesOut(
        status_transitions=booking_rules.STATUS_TRANSITIONS,
        payment_transitions=booking_rules.PAYMENT_TRANSITIONS,
        status_labels=booking_rules.STATUS_LABELS,
        payment_labels=booking_rules.PAYMENT_LABELS,
    )


@router.post("/", response_model=schemas.BookingOut, status_code=201)
def create_booking(
    data: schemas.BookingCreate,
    current_user: models.User = Depends(require_customer),
    service: BookingService = Depends(get_booking_service),
):
    return booking_out(service.create_booking(data, current_user))


@router.get("/mine/customer", response_model=List[schemas.BookingOut])
def get_my_customer_bookings(
    current_user: models.User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    return [booking_out(b) for b in service.customer_bookings(current_user)]


@router.get("/mine/tailor", response_model=List[schemas.BookingOut])
def get_my_tailor_bookings(
    current_user: models.User = Depends(require_tailor),
    service: BookingService = Depends(get_booking_service),
):
    return [booking_out(b) for b in service.tailor_bookings(current_user)]


@router.get("/{booking_id}", response_model=schemas.BookingOut)
def get_booking(
    booking_id: int,
    current_user: models.User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    return booking_out(service.get_booking(booking_id, current_user))


@router.get("/{booking_id}/history", response_model=schemas.BookingHistoryOut)
def get_booking_history(
    booking_id: int,
    current_user: models.User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    booking = service.get_booking(booking_id, current_user)
    return schemas.BookingHistoryOut(
        booking_id=booking.id,
        status_log=[
            schemas.StatusLogEntry(status=entry.status, changed_at=entry.changed_at)
            for entry in booking.status_log
        ],
    )


@router.get("/{booking_id}/status", response_model=schemas.BookingStatusOut)
def get_booking_status(
    booking_id: int,
    current_user: models.User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    booking = service.get_booking(booking_id, current_user)
    return schemas.BookingStatusOut(
        booking_id=booking.id,
        status=booking.status,
        status_label=booking_rules.status_label(booking.status),
    )


@router.post("/{booking_id}/accept", response_model=schemas.BookingOut)
def accept_booking(
    booking_id: int,
    current_user: models.User = Depends(require_tailor),
    service: BookingService = Depends(get_booking_service),
):
    return booking_out(service.accept(booking_id, current_user))


@router.post("/{booking_id}/cancel", response_model=schemas.BookingOut)
def cancel_booking(
    booking_id: int,
    current_user: models.User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    return booking_out(service.cancel(booking_id, current_user))


@router.patch("/{booking_id}/status", response_model=schemas.BookingOut)
def update_booking_status(
    booking_id: int,
    data: schemas.StatusUpdate,
    current_user: models.User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    return booking_out(service.update_status(booking_id, data.status, current_user))


@router.put("/{booking_id}/price", response_model=schemas.BookingOut)
def set_estimated_price(
    booking_id: int,
    data: schemas.PriceUpdate,
    current_user: models.User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    return booking_out(service.set_price(booking_id, data.price, current_user))


@router.patch("/{booking_id}/payment", response_model=schemas.BookingOut)
def update_payment_status(
    booking_id: int,
    data: schemas.PaymentUpdate,
    current_user: models.User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    return booking_out(service.update_payment(booking_id, data.payment_status, current_user))
