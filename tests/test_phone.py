"""Tests for phone number normalization."""

from app.core.phone import validate_and_clean_phone_number


class TestValidateAndCleanPhoneNumber:
    """Tests for validate_and_clean_phone_number."""

    def test_indian_mobile_gets_country_code(self):
        """Test that a 10-digit number starting 6-9 is treated as Indian."""
        result = validate_and_clean_phone_number("9876543210")
        assert result.is_valid is True
        assert result.clean_number == "+919876543210"

    def test_us_number_with_punctuation(self):
        """Test that a formatted US number gets +1."""
        result = validate_and_clean_phone_number("(281) 788-2316")
        assert result.is_valid is True
        assert result.clean_number == "+12817882316"

    def test_indian_mobile_with_spaces(self):
        result = validate_and_clean_phone_number("98765 43210")
        assert result.clean_number == "+919876543210"

    def test_number_with_country_code_and_no_plus(self):
        """Test that longer numbers are prefixed with + as-is."""
        result = validate_and_clean_phone_number("44 20 7946 0958")
        assert result.is_valid is True
        assert result.clean_number == "+442079460958"

    def test_already_international(self):
        result = validate_and_clean_phone_number("+1 281 788 2316")
        assert result.is_valid is True
        assert result.clean_number == "+12817882316"

    def test_too_short(self):
        """Test that short numbers are rejected."""
        result = validate_and_clean_phone_number("123")
        assert result.is_valid is False

    def test_too_long(self):
        result = validate_and_clean_phone_number("+1234567890123456")
        assert result.is_valid is False

    def test_empty(self):
        """Test that missing numbers are rejected."""
        assert validate_and_clean_phone_number("").is_valid is False
        assert validate_and_clean_phone_number(None).is_valid is False
