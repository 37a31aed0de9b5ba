"""Booking status and payment state machines.

Both tables are static: the server enforces them on every mutation and the
``/bookings/rules`` endpoint publishes them so clients can offer only the
legal next steps.
"""

from enum import Enum
from typing import Dict, List


class BookingStatus(str, Enum):
    requested = "requested"
    accepted = "accepted"
    in_progress = "inProgress"
    completed = "completed"
    cancelled = "cancelled"


class PaymentStatus(str, Enum):
    unpaid = "unpaid"
    paid = "paid"
    refunded = "refunded"


class InvalidTransition(ValueError):
    """Raised when a status change is not in the transition table."""

    def __init__(self, current, requested):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot change status from '{current.value}' to '{requested.value}'")


STATUS_TRANSITIONS: Dict[BookingStatus, List[BookingStatus]] = {
    BookingStatus.requested: [BookingStatus.accepted, BookingStatus.cancelled],
    BookingStatus.accepted: [BookingStatus.in_progress, BookingStatus.cancelled],
    BookingStatus.in_progress: [BookingStatus.completed, BookingStatus.cancelled],
    BookingStatus.completed: [],
    BookingStatus.cancelled: [],
}

PAYMENT_TRANSITIONS: Dict[PaymentStatus, List[PaymentStatus]] = {
    PaymentStatus.unpaid: [PaymentStatus.paid],
    PaymentStatus.paid: [PaymentStatus.refunded],
    PaymentStatus.refunded: [],
}

STATUS_LABELS = {
    BookingStatus.requested: "Requested",
    BookingStatus.accepted: "Accepted",
    BookingStatus.in_progress: "In Progress",
    BookingStatus.completed: "Completed",
    BookingStatus.cancelled: "Cancelled",
}

PAYMENT_LABELS = {
    PaymentStatus.unpaid: "Unpaid",
    PaymentStatus.paid: "Paid",
    PaymentStatus.refunded: "Refunded",
}

# Statuses that only make sense once a tailor is attached to the booking
REQUIRES_TAILOR = {BookingStatus.accepted, BookingStatus.in_progress, BookingStatus.completed}


def allowed_transitions(status) -> List[BookingStatus]:
    return list(STATUS_TRANSITIONS[BookingStatus(status)])


def can_transition(current, requested) -> bool:
    return BookingStatus(requested) in STATUS_TRANSITIONS[BookingStatus(current)]


def is_terminal(status) -> bool:
    return not STATUS_TRANSITIONS[BookingStatus(status)]


def check_transition(current, requested) -> BookingStatus:
    """Return the requested status as an enum, or raise InvalidTransition."""
    current, requested = BookingStatus(current), BookingStatus(requested)
    if requested not in STATUS_TRANSITIONS[current]:
        raise InvalidTransition(current, requested)
    return requested


def can_change_payment(current, requested) -> bool:
    return PaymentStatus(requested) in PAYMENT_TRANSITIONS[PaymentStatus(current)]


def status_label(status) -> str:
    return STATUS_LABELS[BookingStatus(status)]


def payment_label(status) -> str:
    return PAYMENT_LABELS[PaymentStatus(status)]
