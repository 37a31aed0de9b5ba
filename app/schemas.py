from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from .booking_rules import BookingStatus, PaymentStatus


class ProfileRole(str, Enum):
    customer = "customer"
    tailor = "tailor"
    admin = "admin"


class AccessRole(str, Enum):
    admin = "admin"
    user = "user"
    guest = "guest"


class BookingSortColumn(str, Enum):
    customer_principal = "customerPrincipal"
    tailor_name = "tailorName"
    booking_date = "bookingDate"


class SortDirection(str, Enum):
    asc = "asc"
    desc = "desc"


def _not_blank(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("must not be blank")
    return v


# ────────────────────────────── AUTH ──────────────────────────────

class PhoneRequest(BaseModel):
    phone: str


class OTPVerify(BaseModel):
    phone: str
    otp: str


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class UserOut(BaseModel):
    id: int
    phone: str
    name: Optional[str]
    role: Optional[str]
    email: Optional[str]
    access_role: AccessRole

    class Config:
        from_attributes = True


# ────────────────────────────── PROFILES ──────────────────────────────

class UserProfileIn(BaseModel):
    name: str
    role: ProfileRole
    email: Optional[str] = None
    phone: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        return _not_blank(v)


class UserProfileOut(BaseModel):
    name: str
    role: str
    email: Optional[str] = None
    phone: Optional[str] = None

    class Config:
        from_attributes = True


class UserWithProfile(BaseModel):
    user_id: int
    access_role: AccessRole
    profile: Optional[UserProfileOut]


class AccessOut(BaseModel):
    """Which dashboards the caller may open."""

    customer: bool
    tailor: bool
    admin: bool


class RoleAssign(BaseModel):
    role: AccessRole


# ────────────────────────────── TAILORS ──────────────────────────────

class TailorProfileIn(BaseModel):
    name: str
    address: str
    bio: str = ""

    @field_validator("name", "address")
    @classmethod
    def validate_required(cls, v):
        return _not_blank(v)


class TailorProfileOut(BaseModel):
    id: int
    owner_id: int
    name: str
    address: str
    bio: str
    is_active: bool
    rating: Optional[int]

    class Config:
        from_attributes = True


# ────────────────────────────── BOOKINGS ──────────────────────────────

class BookingCreate(BaseModel):
    address: str
    scheduled_at: datetime
    tailor_id: Optional[int] = None

    @field_validator("address")
    @classmethod
    def validate_address(cls, v):
        return _not_blank(v)

    @field_validator("scheduled_at")
    @classmethod
    def validate_scheduled_at(cls, v):
        if v.tzinfo is None:
            v = v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)


class BookingOut(BaseModel):
    id: int
    status: BookingStatus
    status_label: str
    payment_status: PaymentStatus
    payment_status_label: str
    customer_id: int
    tailor_id: Optional[int]
    tailor_owner_id: Optional[int]
    tailor_name: Optional[str]
    estimated_price: Optional[int]
    address: str
    scheduled_at: datetime
    created_at: Optional[datetime]
    available_transitions: List[BookingStatus]


class StatusLogEntry(BaseModel):
    status: BookingStatus
    changed_at: datetime

    class Config:
        from_attributes = True


class BookingHistoryOut(BaseModel):
    booking_id: int
    status_log: List[StatusLogEntry]


class BookingStatusOut(BaseModel):
    booking_id: int
    status: BookingStatus
    status_label: str


class StatusUpdate(BaseModel):
    status: BookingStatus


class PaymentUpdate(BaseModel):
    payment_status: PaymentStatus


class PriceUpdate(BaseModel):
    price: int = Field(gt=0)


class AssignTailor(BaseModel):
    tailor_id: int


class BookingRulesOut(BaseModel):
    status_transitions: Dict[BookingStatus, List[BookingStatus]]
    payment_transitions: Dict[PaymentStatus, List[PaymentStatus]]
    status_labels: Dict[BookingStatus, str]
    payment_labels: Dict[PaymentStatus, str]


# ────────────────────────────── ADDRESSES ──────────────────────────────

class SavedAddressIn(BaseModel):
    label: str
    address: str

    @field_validator("label", "address")
    @classmethod
    def validate_required(cls, v):
        return _not_blank(v)


class SavedAddressOut(BaseModel):
    id: int
    owner_id: int
    label: str
    address: str

    class Config:
        from_attributes = True
