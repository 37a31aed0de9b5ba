# app/config.py

import os
import warnings

from dotenv import load_dotenv

load_dotenv()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./tailoring.db")

# ────────────────────────────── AUTH ──────────────────────────────

SECRET_KEY = os.getenv("SECRET_KEY")
if not SECRET_KEY:
    warnings.warn(
        "SECRET_KEY not set! Using insecure default - DO NOT USE IN PRODUCTION", RuntimeWarning, stacklevel=2
    )
    SECRET_KEY = "INSECURE-DEV-KEY-CHANGE-IN-PRODUCTION"  # noqa: S105

ALGORITHM = os.getenv("ALGORITHM", "HS256")
ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "43200"))
OTP_TTL_SECONDS = int(os.getenv("OTP_TTL_SECONDS", "300"))
OTP_MAX_ATTEMPTS = int(os.getenv("OTP_MAX_ATTEMPTS", "5"))

# Phones that are granted the admin access role when they log in
ADMIN_PHONES = {p.strip() for p in os.getenv("ADMIN_PHONES", "").split(",") if p.strip()}

# ────────────────────────────── MARKETPLACE ──────────────────────────────

# New tailor profiles are listed immediately unless an admin must approve them
TAILOR_AUTO_ACTIVATE = os.getenv("TAILOR_AUTO_ACTIVATE", "true").lower() == "true"

# ────────────────────────────── HTTP ──────────────────────────────

CORS_ORIGINS = [
    o.strip()
    for o in os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:5173").split(",")
    if o.strip()
]

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# ────────────────────────────── SMS (Africa's Talking) ──────────────────────────────

AT_USERNAME = os.getenv("AT_USERNAME") or os.getenv("AFRICASTALKING_USERNAME")
AT_API_KEY = os.getenv("AT_API_KEY") or os.getenv("AFRICASTALKING_APIKEY")
AT_FROM = os.getenv("AT_FROM") or os.getenv("AFRICASTALKING_FROM")
