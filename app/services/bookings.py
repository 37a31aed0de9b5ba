"""Booking service - lifecycle, visibility and payment rules for bookings"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import HTTPException
from sqlalchemy import or_
from sqlalchemy.orm import Session

from .. import booking_rules, models, schemas
from ..booking_rules import BookingStatus, InvalidTransition, PaymentStatus

logger = logging.getLogger(__name__)


def booking_out(booking: models.Booking) -> schemas.BookingOut:
    tailor = booking.tailor
    return schemas.BookingOut(
        id=booking.id,
        status=booking.status,
        status_label=booking_rules.status_label(booking.status),
        payment_status=booking.payment_status,
        payment_status_label=booking_rules.payment_label(booking.payment_status),
        customer_id=booking.customer_id,
        tailor_id=booking.tailor_id,
        tailor_owner_id=tailor.owner_id if tailor else None,
        tailor_name=tailor.name if tailor else None,
        estimated_price=booking.estimated_price,
        address=booking.address,
        scheduled_at=booking.scheduled_at,
        created_at=booking.created_at,
        available_transitions=booking_rules.allowed_transitions(booking.status),
    )


class BookingService:
    """Service layer for the booking state machine"""

    def __init__(self, db: Session):
        self.db = db

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def _get(self, booking_id: int) -> models.Booking:
        booking = self.db.get(models.Booking, booking_id)
        if not booking:
            raise HTTPException(status_code=404, detail="Booking not found")
        return booking

    def _tailor_profile_of(self, user: models.User) -> Optional[models.TailorProfile]:
        return (
            self.db.query(models.TailorProfile)
            .filter(models.TailorProfile.owner_id == user.id)
            .first()
        )

    def _is_assigned_tailor(self, booking: models.Booking, user: models.User) -> bool:
        return booking.tailor is not None and booking.tailor.owner_id == user.id

    def can_view(self, booking: models.Booking, user: models.User) -> bool:
        if user.is_admin or booking.customer_id == user.id:
            return True
        if self._is_assigned_tailor(booking, user):
            return True
        # Open requests are visible to every active tailor so they can be accepted
        if booking.tailor_id is None and booking.status == BookingStatus.requested.value:
            profile = self._tailor_profile_of(user)
            return profile is not None and profile.is_active
        return False

    def get_booking(self, booking_id: int, user: models.User) -> models.Booking:
        booking = self._get(booking_id)
        if not self.can_view(booking, user):
            raise HTTPException(status_code=403, detail="Not allowed to view this booking")
        return booking

    def customer_bookings(self, user: models.User) -> List[models.Booking]:
        return (
            self.db.query(models.Booking)
            .filter(models.Booking.customer_id == user.id)
            .order_by(models.Booking.scheduled_at.desc(), models.Booking.id.desc())
            .all()
        )

    def tailor_bookings(self, user: models.User) -> List[models.Booking]:
        profile = self._tailor_profile_of(user)
        if not profile:
            raise HTTPException(status_code=404, detail="Tailor profile not found")

        condition = models.Booking.tailor_id == profile.id
        if profile.is_active:
            condition = or_(
                condition,
                (models.Booking.tailor_id.is_(None))
                & (models.Booking.status == BookingStatus.requested.value),
            )
        return (
            self.db.query(models.Booking)
            .filter(condition)
            .order_by(models.Booking.scheduled_at.desc(), models.Booking.id.desc())
            .all()
        )

    def all_bookings(
        self,
        sort: schemas.BookingSortColumn = schemas.BookingSortColumn.booking_date,
        direction: schemas.SortDirection = schemas.SortDirection.desc,
        status: Optional[BookingStatus] = None,
    ) -> List[models.Booking]:
        query = self.db.query(models.Booking).outerjoin(
            models.TailorProfile, models.Booking.tailor_id == models.TailorProfile.id
        )
        if status is not None:
            query = query.filter(models.Booking.status == status.value)

        descending = direction == schemas.SortDirection.desc
        if sort == schemas.BookingSortColumn.customer_principal:
            column = models.Booking.customer_id
            order = [column.desc() if descending else column.asc()]
        elif sort == schemas.BookingSortColumn.tailor_name:
            column = models.TailorProfile.name
            # Unassigned bookings go last in either direction
            order = [column.is_(None), column.desc() if descending else column.asc()]
        else:
            column = models.Booking.scheduled_at
            order = [column.desc() if descending else column.asc()]

        tiebreak = models.Booking.id.desc() if descending else models.Booking.id.asc()
        return query.order_by(*order, tiebreak).all()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def _transition(self, booking: models.Booking, new_status: BookingStatus) -> None:
        try:
            new_status = booking_rules.check_transition(booking.status, new_status)
        except InvalidTransition as e:
            logger.warning("Rejected transition for booking %s: %s", booking.id, e)
            raise HTTPException(status_code=409, detail=str(e))

        if new_status in booking_rules.REQUIRES_TAILOR and booking.tailor_id is None:
            raise HTTPException(status_code=409, detail="A tailor must be assigned first")

        booking.status = new_status.value
        booking.status_log.append(models.BookingStatusLog(status=new_status.value))
        logger.info("Booking %s moved to %s", booking.id, new_status.value)

    def _save(self, booking: models.Booking) -> models.Booking:
        self.db.commit()
        self.db.refresh(booking)
        return booking

    def create_booking(self, data: schemas.BookingCreate, user: models.User) -> models.Booking:
        if data.scheduled_at < datetime.now(timezone.utc):
            raise HTTPException(status_code=400, detail="Appointment time must be in the future")

        if data.tailor_id is not None:
            tailor = self.db.get(models.TailorProfile, data.tailor_id)
            if not tailor:
                raise HTTPException(status_code=404, detail="Tailor not found")
            if not tailor.is_active:
                raise HTTPException(status_code=400, detail="Tailor is not currently available")

        booking = models.Booking(
            customer_id=user.id,
            tailor_id=data.tailor_id,
            address=data.address,
            scheduled_at=data.scheduled_at,
            status=BookingStatus.requested.value,
            payment_status=PaymentStatus.unpaid.value,
        )
        booking.status_log.append(models.BookingStatusLog(status=BookingStatus.requested.value))
        self.db.add(booking)
        self._save(booking)
        logger.info("Booking %s created by user %s", booking.id, user.id)
        return booking

    def accept(self, booking_id: int, user: models.User) -> models.Booking:
        profile = self._tailor_profile_of(user)
        if not profile:
            raise HTTPException(status_code=403, detail="Only tailors can accept bookings")
        if not profile.is_active:
            raise HTTPException(status_code=403, detail="Tailor profile is not active")

        booking = self._get(booking_id)
        if booking.tailor_id is not None and booking.tailor_id != profile.id:
            raise HTTPException(status_code=403, detail="Booking is assigned to another tailor")

        booking.tailor_id = profile.id
        booking.tailor = profile
        self._transition(booking, BookingStatus.accepted)
        return self._save(booking)

    def cancel(self, booking_id: int, user: models.User) -> models.Booking:
        booking = self._get(booking_id)
        allowed = (
            user.is_admin
            or booking.customer_id == user.id
            or self._is_assigned_tailor(booking, user)
        )
        if not allowed:
            raise HTTPException(status_code=403, detail="Not allowed to cancel this booking")
        self._transition(booking, BookingStatus.cancelled)
        return self._save(booking)

    def update_status(self, booking_id: int, new_status: BookingStatus, user: models.User) -> models.Booking:
        booking = self._get(booking_id)
        if not (user.is_admin or self._is_assigned_tailor(booking, user)):
            raise HTTPException(status_code=403, detail="Only the assigned tailor or an admin can update status")
        self._transition(booking, new_status)
        return self._save(booking)

    def set_price(self, booking_id: int, price: int, user: models.User) -> models.Booking:
        booking = self._get(booking_id)
        if not (user.is_admin or self._is_assigned_tailor(booking, user)):
            raise HTTPException(status_code=403, detail="Only the assigned tailor or an admin can set the price")
        if booking.payment_status != PaymentStatus.unpaid.value:
            raise HTTPException(status_code=409, detail="Price cannot change after payment")
        if booking.status == BookingStatus.cancelled.value:
            raise HTTPException(status_code=409, detail="Booking is cancelled")

        booking.estimated_price = price
        logger.info("Booking %s estimated price set to %s", booking.id, price)
        return self._save(booking)

    def update_payment(self, booking_id: int, payment_status: PaymentStatus, user: models.User) -> models.Booking:
        booking = self._get(booking_id)

        if payment_status == PaymentStatus.refunded:
            if not user.is_admin:
                raise HTTPException(status_code=403, detail="Only admins can issue refunds")
        elif not (user.is_admin or booking.customer_id == user.id):
            raise HTTPException(status_code=403, detail="Only the customer or an admin can record payment")

        if not booking_rules.can_change_payment(booking.payment_status, payment_status):
            raise HTTPException(
                status_code=409,
                detail=f"Cannot change payment from '{booking.payment_status}' to '{payment_status.value}'",
            )
        if payment_status == PaymentStatus.paid:
            if booking.estimated_price is None:
                raise HTTPException(status_code=409, detail="Booking has no estimated price yet")
            if booking.status == BookingStatus.cancelled.value:
                raise HTTPException(status_code=409, detail="Booking is cancelled")

        booking.payment_status = payment_status.value
        logger.info("Booking %s payment status set to %s", booking.id, payment_status.value)
        return self._save(booking)

    def assign_tailor(self, booking_id: int, tailor_id: int) -> models.Booking:
        booking = self._get(booking_id)
        if booking_rules.is_terminal(booking.status):
            raise HTTPException(status_code=409, detail="Booking is already closed")

        tailor = self.db.get(models.TailorProfile, tailor_id)
        if not tailor:
            raise HTTPException(status_code=404, detail="Tailor not found")
        if not tailor.is_active:
            raise HTTPException(status_code=400, detail="Tailor is not active")

        booking.tailor_id = tailor.id
        booking.tailor = tailor
        logger.info("Booking %s assigned to tailor %s", booking.id, tailor.id)
        return self._save(booking)
