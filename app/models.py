from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from sqlalchemy.types import TypeDecorator

from .booking_rules import BookingStatus, PaymentStatus
from .database import Base


def utcnow():
    return datetime.now(timezone.utc)


class UTCDateTime(TypeDecorator):
    """Timezone-aware UTC datetimes, also on backends (SQLite) that store them naive."""

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value

    def process_result_value(self, value, dialect):
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value


class User(Base):
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    phone = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=True)
    role = Column(String, nullable=True)  # customer / tailor / admin, unset until profile setup
    email = Column(String, nullable=True)
    access_role = Column(String, nullable=False, default="user")  # admin / user / guest
    created_at = Column(UTCDateTime(), default=utcnow)

    tailor_profile = relationship("TailorProfile", back_populates="owner", uselist=False)
    bookings = relationship("Booking", back_populates="customer")
    saved_addresses = relationship("SavedAddress", back_populates="owner", cascade="all, delete-orphan")

    @property
    def has_profile(self):
        return bool(self.name) and bool(self.role)

    @property
    def is_admin(self):
        return self.access_role == "admin"


class TailorProfile(Base):
    __tablename__ = "tailor_profiles"
    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)
    name = Column(String, nullable=False)
    address = Column(String, nullable=False)
    bio = Column(Text, nullable=False, default="")
    is_active = Column(Boolean, nullable=False, default=True)
    rating = Column(Integer, nullable=True)
    created_at = Column(UTCDateTime(), default=utcnow)

    owner = relationship("User", back_populates="tailor_profile")
    bookings = relationship("Booking", back_populates="tailor")


class Booking(Base):
    __tablename__ = "bookings"
    id = Column(Integer, primary_key=True, index=True)
    status = Column(String, nullable=False, default=BookingStatus.requested.value)
    payment_status = Column(String, nullable=False, default=PaymentStatus.unpaid.value)
    customer_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    tailor_id = Column(Integer, ForeignKey("tailor_profiles.id"), nullable=True, index=True)
    estimated_price = Column(Integer, nullable=True)
    address = Column(String, nullable=False)
    scheduled_at = Column(UTCDateTime(), nullable=False)
    created_at = Column(UTCDateTime(), default=utcnow)

    customer = relationship("User", back_populates="bookings")
    tailor = relationship("TailorProfile", back_populates="bookings")
    status_log = relationship(
        "BookingStatusLog",
        back_populates="booking",
        order_by="BookingStatusLog.id",
        cascade="all, delete-orphan",
    )


class BookingStatusLog(Base):
    __tablename__ = "booking_status_log"
    id = Column(Integer, primary_key=True, index=True)
    booking_id = Column(Integer, ForeignKey("bookings.id"), nullable=False, index=True)
    status = Column(String, nullable=False)
    changed_at = Column(UTCDateTime(), default=utcnow)

    booking = relationship("Booking", back_populates="status_log")


class SavedAddress(Base):
    __tablename__ = "saved_addresses"
    id = Column(Integer, primary_key=True, index=True)
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    label = Column(String, nullable=False)
    address = Column(String, nullable=False)

    owner = relationship("User", back_populates="saved_addresses")
