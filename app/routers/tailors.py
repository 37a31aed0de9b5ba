import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import models, schemas
from ..config import TAILOR_AUTO_ACTIVATE
from ..database import get_db
from ..dependencies import get_current_user, require_tailor

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tailors", tags=["Tailors"])


def get_own_profile(db: Session, user: models.User) -> Optional[models.TailorProfile]:
    return db.query(models.TailorProfile).filter(models.TailorProfile.owner_id == user.id).first()


@router.post("/", response_model=schemas.TailorProfileOut, status_code=201)
def create_tailor_profile(
    data: schemas.TailorProfileIn,
    current_user: models.User = Depends(require_tailor),
    db: Session = Depends(get_db),
):
    # Admins reach the tailor area but cannot open a listing themselves
    if current_user.role != "tailor":
        raise HTTPException(status_code=403, detail="Only tailor accounts can create a tailor profile")
    if get_own_profile(db, current_user):
        raise HTTPException(status_code=409, detail="Tailor profile already exists")

    profile = models.TailorProfile(
        owner_id=current_user.id,
        name=data.name,
        address=data.address,
        bio=data.bio,
        is_active=TAILOR_AUTO_ACTIVATE,
    )
    db.add(profile)
    db.commit()
    db.refresh(profile)
    logger.info("Tailor profile %s created for user %s", profile.id, current_user.id)
    return profile


@router.put("/me", response_model=schemas.TailorProfileOut)
def update_tailor_profile(
    data: schemas.TailorProfileIn,
    current_user: models.User = Depends(require_tailor),
    db: Session = Depends(get_db),
):
    profile = get_own_profile(db, current_user)
    if not profile:
        raise HTTPException(status_code=404, detail="Tailor profile not found")

    profile.name = data.name
    profile.address = data.address
    profile.bio = data.bio
    db.commit()
    db.refresh(profile)
    return profile


@router.get("/me", response_model=Optional[schemas.TailorProfileOut])
def get_my_tailor_profile(
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_own_profile(db, current_user)


@router.get("/", response_model=List[schemas.TailorProfileOut])
def get_all_tailor_profiles(
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    query = db.query(models.TailorProfile)
    # Only admins see tailors that are switched off
    if not current_user.is_admin:
        query = query.filter(models.TailorProfile.is_active.is_(True))
    return query.order_by(models.TailorProfile.name, models.TailorProfile.id).all()


@router.get("/{tailor_id}", response_model=schemas.TailorProfileOut)
def get_tailor_profile(
    tailor_id: int,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    profile = db.get(models.TailorProfile, tailor_id)
    if not profile:
        raise HTTPException(status_code=404, detail="Tailor not found")
    return profile
