# app/dependencies.py

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from . import models
from .database import get_db
from .utils import decode_jwt

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/login")


def get_current_user(token: str = Depends(oauth2_scheme), db: Session = Depends(get_db)) -> models.User:
    user_id = decode_jwt(token)
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    user = db.get(models.User, user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found")
    return user


# ────────────────────────────── AREA GUARDS ──────────────────────────────

def can_access_customer(user: models.User) -> bool:
    return user.is_admin or (user.access_role != "guest" and user.role == "customer")


def can_access_tailor(user: models.User) -> bool:
    return user.is_admin or (user.access_role != "guest" and user.role == "tailor")


def can_access_admin(user: models.User) -> bool:
    return user.is_admin


def require_admin(user: models.User = Depends(get_current_user)) -> models.User:
    if not can_access_admin(user):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin access required")
    return user


def require_customer(user: models.User = Depends(get_current_user)) -> models.User:
    if not can_access_customer(user):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Customer access required")
    return user


def require_tailor(user: models.User = Depends(get_current_user)) -> models.User:
    if not can_access_tailor(user):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Tailor access required")
    return user
