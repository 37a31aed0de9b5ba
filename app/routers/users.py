import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import models, schemas
from ..database import get_db
from ..dependencies import can_access_admin, can_access_customer, can_access_tailor, get_current_user

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/users", tags=["Users"])


def profile_of(user: models.User) -> Optional[schemas.UserProfileOut]:
    """A user's profile, or None until they have completed profile setup."""
    if not user.has_profile:
        return None
    return schemas.UserProfileOut(name=user.name, role=user.role, email=user.email, phone=user.phone)


def access_role_of(user: models.User) -> schemas.AccessRole:
    if user.is_admin:
        return schemas.AccessRole.admin
    if user.access_role == "guest" or not user.has_profile:
        return schemas.AccessRole.guest
    return schemas.AccessRole.user


@router.get("/me/profile", response_model=Optional[schemas.UserProfileOut])
def get_caller_profile(current_user: models.User = Depends(get_current_user)):
    return profile_of(current_user)


@router.put("/me/profile", response_model=schemas.UserProfileOut)
def save_caller_profile(
    profile: schemas.UserProfileIn,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    role = profile.role.value
    if not current_user.is_admin:
        if role == "admin":
            raise HTTPException(status_code=403, detail="Only admins can hold the admin role")
        if current_user.role and current_user.role != role:
            raise HTTPException(status_code=403, detail="Role cannot be changed once set")

    if profile.phone and profile.phone != current_user.phone:
        taken = db.query(models.User).filter(models.User.phone == profile.phone).first()
        if taken:
            raise HTTPException(status_code=409, detail="Phone number already in use")
        current_user.phone = profile.phone

    current_user.name = profile.name
    current_user.role = role
    current_user.email = profile.email
    db.commit()
    db.refresh(current_user)
    logger.info("Saved profile for user %s (role=%s)", current_user.id, role)
    return profile_of(current_user)


@router.get("/me/role", response_model=schemas.AccessRole)
def get_caller_role(current_user: models.User = Depends(get_current_user)):
    return access_role_of(current_user)


@router.get("/me/is-admin", response_model=bool)
def is_caller_admin(current_user: models.User = Depends(get_current_user)):
    return current_user.is_admin


@router.get("/me/access", response_model=schemas.AccessOut)
def get_caller_access(current_user: models.User = Depends(get_current_user)):
    return schemas.AccessOut(
        customer=can_access_customer(current_user),
        tailor=can_access_tailor(current_user),
        admin=can_access_admin(current_user),
    )


@router.get("/{user_id}/profile", response_model=Optional[schemas.UserProfileOut])
def get_user_profile(
    user_id: int,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if user_id != current_user.id and not current_user.is_admin:
        raise HTTPException(status_code=403, detail="Not allowed to view this profile")
    user = db.get(models.User, user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return profile_of(user)
