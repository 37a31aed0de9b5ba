from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import models, schemas
from ..database import get_db
from ..dependencies import get_current_user

router = APIRouter(prefix="/addresses", tags=["Addresses"])


@router.post("/", response_model=schemas.SavedAddressOut, status_code=201)
def save_address(
    data: schemas.SavedAddressIn,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    new = models.SavedAddress(owner_id=current_user.id, label=data.label, address=data.address)
    db.add(new)
    db.commit()
    db.refresh(new)
    return new


@router.get("/", response_model=List[schemas.SavedAddressOut])
def get_my_saved_addresses(
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return (
        db.query(models.SavedAddress)
        .filter(models.SavedAddress.owner_id == current_user.id)
        .order_by(models.SavedAddress.id)
        .all()
    )


@router.delete("/{address_id}")
def delete_saved_address(
    address_id: int,
    current_user: models.User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    address = (
        db.query(models.SavedAddress)
        .filter(models.SavedAddress.id == address_id, models.SavedAddress.owner_id == current_user.id)
        .first()
    )
    if not address:
        raise HTTPException(status_code=404, detail="Address not found")
    db.delete(address)
    db.commit()
    return {"detail": "Address deleted successfully"}
