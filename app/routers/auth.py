# app/routers/auth.py

import logging
import secrets
import time

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import models, schemas
from ..config import ADMIN_PHONES, OTP_MAX_ATTEMPTS, OTP_TTL_SECONDS
from ..database import get_db
from ..dependencies import get_current_user
from ..sms import send_sms
from ..utils import create_jwt

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["Auth"])

# In-memory OTP store: phone -> (otp, expires_at, failed_attempts)
otp_store = {}


def purge_expired_otps() -> None:
    now = time.monotonic()
    for phone in [p for p, entry in otp_store.items() if entry[1] < now]:
        del otp_store[phone]


def issue_otp(phone: str) -> str:
    purge_expired_otps()
    otp = f"{secrets.randbelow(900000) + 100000}"
    otp_store[phone] = (otp, time.monotonic() + OTP_TTL_SECONDS, 0)
    return otp


def verify_otp(phone: str, otp: str) -> bool:
    entry = otp_store.get(phone)
    if entry is None:
        return False
    stored, expires_at, attempts = entry
    if time.monotonic() > expires_at:
        otp_store.pop(phone, None)
        return False
    if secrets.compare_digest(stored.encode(), otp.encode()):
        return True

    attempts += 1
    if attempts >= OTP_MAX_ATTEMPTS:
        # Too many wrong guesses burn the code; a new one must be requested
        otp_store.pop(phone, None)
        logger.warning("OTP for %s invalidated after %s failed attempts", phone, attempts)
    else:
        otp_store[phone] = (stored, expires_at, attempts)
    return False


# ────────────────────────────── ENDPOINTS ──────────────────────────────

@router.post("/send-otp")
def send_otp(req: schemas.PhoneRequest):
    otp = issue_otp(req.phone)
    sent = send_sms(req.phone, f"Your tailoring booking code is {otp}")

    if sent:
        return {"message": "OTP sent successfully"}

    # Dev fallback so the code can be read from the server log
    logger.info("OTP for %s: %s", req.phone, otp)
    return {"message": "OTP generated (logged on server - SMS provider not configured)"}


@router.post("/login", response_model=schemas.Token)
def login(req: schemas.OTPVerify, db: Session = Depends(get_db)):
    if not verify_otp(req.phone, req.otp):
        raise HTTPException(status_code=400, detail="Invalid or expired OTP")

    user = db.query(models.User).filter(models.User.phone == req.phone).first()
    if not user:
        user = models.User(phone=req.phone, access_role="user")
        db.add(user)
        logger.info("Registered new user for phone %s", req.phone)

        # Bootstrap admins are granted once; a later revocation by another admin stands
        if req.phone in ADMIN_PHONES:
            user.access_role = "admin"
            logger.info("Granted admin access to %s", req.phone)

    db.commit()
    db.refresh(user)

    otp_store.pop(req.phone, None)

    token = create_jwt({"sub": str(user.id)})
    return {"access_token": token}


@router.get("/me", response_model=schemas.UserOut)
def me(current_user: models.User = Depends(get_current_user)):
    return current_user
