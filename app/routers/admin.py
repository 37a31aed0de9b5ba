import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from .. import models, schemas
from ..booking_rules import BookingStatus
from ..database import get_db
from ..dependencies import require_admin
from ..services.bookings import BookingService, booking_out
from .bookings import get_booking_service
from .users import access_role_of, profile_of

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["Admin"], dependencies=[Depends(require_admin)])


# ────────────────────────────── USERS ──────────────────────────────

@router.get("/users", response_model=List[schemas.UserWithProfile])
def get_all_users(db: Session = Depends(get_db)):
    users = db.query(models.User).order_by(models.User.id).all()
    return [
        schemas.UserWithProfile(user_id=u.id, access_role=access_role_of(u), profile=profile_of(u))
        for u in users
    ]


@router.put("/users/{user_id}/role", response_model=schemas.UserWithProfile)
def assign_user_role(
    user_id: int,
    data: schemas.RoleAssign,
    current_user: models.User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    user = db.get(models.User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    if user.id == current_user.id and data.role != schemas.AccessRole.admin:
        raise HTTPException(status_code=400, detail="Admins cannot revoke their own access")

    if user.is_admin and data.role != schemas.AccessRole.admin and user.role == "admin":
        # A demoted admin keeps their account as a customer
        user.role = "customer"
    user.access_role = data.role.value
    db.commit()
    db.refresh(user)
    logger.info("User %s access role set to %s by admin %s", user.id, data.role.value, current_user.id)
    return schemas.UserWithProfile(user_id=user.id, access_role=access_role_of(user), profile=profile_of(user))


# ────────────────────────────── BOOKINGS ──────────────────────────────

@router.get("/bookings", response_model=List[schemas.BookingOut])
def get_all_bookings(
    sort: schemas.BookingSortColumn = Query(schemas.BookingSortColumn.booking_date),
    direction: schemas.SortDirection = Query(schemas.SortDirection.desc),
    status: Optional[BookingStatus] = Query(None),
    service: BookingService = Depends(get_booking_service),
):
    return [booking_out(b) for b in service.all_bookings(sort, direction, status)]


@router.post("/bookings/{booking_id}/assign", response_model=schemas.BookingOut)
def assign_tailor_to_booking(
    booking_id: int,
    data: schemas.AssignTailor,
    service: BookingService = Depends(get_booking_service),
):
    return booking_out(service.assign_tailor(booking_id, data.tailor_id))


# ────────────────────────────── TAILORS ──────────────────────────────

def _set_tailor_active(db: Session, tailor_id: int, active: bool) -> models.TailorProfile:
    profile = db.get(models.TailorProfile, tailor_id)
    if not profile:
        raise HTTPException(status_code=404, detail="Tailor not found")
    profile.is_active = active
    db.commit()
    db.refresh(profile)
    logger.info("Tailor %s %s", profile.id, "activated" if active else "deactivated")
    return profile


@router.post("/tailors/{tailor_id}/activate", response_model=schemas.TailorProfileOut)
def activate_tailor(tailor_id: int, db: Session = Depends(get_db)):
    return _set_tailor_active(db, tailor_id, True)


@router.post("/tailors/{tailor_id}/deactivate", response_model=schemas.TailorProfileOut)
def deactivate_tailor(tailor_id: int, db: Session = Depends(get_db)):
    return _set_tailor_active(db, tailor_id, False)
