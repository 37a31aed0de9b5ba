# app/sms.py

import logging

import africastalking

from .config import AT_API_KEY, AT_FROM, AT_USERNAME

logger = logging.getLogger(__name__)


def send_sms(phone: str, message: str) -> bool:
    """Send an SMS through Africa's Talking. Returns False when not configured or on failure."""
    if not AT_USERNAME or not AT_API_KEY:
        logger.warning("Africa's Talking credentials missing")
        return False

    try:
        africastalking.initialize(AT_USERNAME, AT_API_KEY)
        response = africastalking.SMS.send(message, [phone], sender_id=AT_FROM)
        logger.info("Africa's Talking SMS sent: %s", response)
        return True
    except Exception as e:
        logger.exception("Failed to send SMS via Africa's Talking: %s", e)
        return False
