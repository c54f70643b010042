"""Phone number utilities for the messaging channel."""

import logging
import re
from dataclasses import dataclass

logger = logging.getLogger(__name__)

MIN_PHONE_DIGITS = 10
MAX_PHONE_DIGITS = 15


@dataclass(frozen=True)
class PhoneValidationResult:
    """Outcome of phone validation."""

    is_valid: bool
    clean_number: str
    formatted_number: str


def validate_and_clean_phone_number(phone: str | None) -> PhoneValidationResult:
    """Normalize a phone number to ``+<country><number>`` and validate it.

    Handles various input formats:
        (281) 788-2316  → +12817882316
        98765 43210     → +919876543210  (10 digits starting 6-9)
        44 20 7946 0958 → +442079460958
        +1 281 788 2316 → +12817882316

    A number is valid when it starts with ``+`` and has between 10 and 15
    digits.

    Returns:
        PhoneValidationResult with the cleaned number
    """
    if not phone:
        return PhoneValidationResult(False, "", "")

    clean_number = re.sub(r"[^\d+]", "", phone)

    if not clean_number.startswith("+"):
        if re.fullmatch(r"[6-9]\d{9}", clean_number):
            clean_number = f"+91{clean_number}"
        elif re.fullmatch(r"\d{10}", clean_number):
            clean_number = f"+1{clean_number}"
        elif len(clean_number) >= MIN_PHONE_DIGITS:
            clean_number = f"+{clean_number}"

    digit_count = len(re.sub(r"\D", "", clean_number))
    is_valid = (
        MIN_PHONE_DIGITS <= digit_count <= MAX_PHONE_DIGITS
        and clean_number.startswith("+")
    )

    if not is_valid:
        logger.warning(f"Could not normalize phone number: {phone}")

    return PhoneValidationResult(is_valid, clean_number, clean_number)
