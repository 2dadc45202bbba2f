"""Tests for structural credential checks."""

import pytest

from modules.auth.exceptions import UnsupportedCredentialError
from modules.auth.models import PasswordCredential, PinCredential
from modules.auth.validation import (
    INVALID_PIN_FORMAT_MESSAGE,
    is_valid_pin,
    validate_credential,
)


class TestIsValidPin:
    @pytest.mark.parametrize("pin", ["1234", "0000", "9999", "0420"])
    def test_valid_pins(self, pin):
        """Exactly four ASCII digits are valid."""
        assert is_valid_pin(pin) is True

    @pytest.mark.parametrize(
        "pin",
        [
            "",
            "12",
            "123",
            "12345",
            "12a4",
            "abcd",
            " 123",
            "123 ",
            "12.4",
            "-123",
            "١٢٣٤",  # Arabic-Indic digits
            "１２３４",  # fullwidth digits
            None,
        ],
    )
    def test_invalid_pins(self, pin):
        """Anything but four ASCII digits is invalid."""
        assert is_valid_pin(pin) is False


class TestValidateCredential:
    def test_valid_pin_passes(self):
        assert validate_credential(PinCredential(pin="1234")) is None

    def test_invalid_pin_fails_with_invalid_format(self):
        """Malformed PINs yield an InvalidFormat failure."""
        result = validate_credential(PinCredential(pin="12a4"))
        assert result is not None
        assert result.success is False
        assert result.error_code == "InvalidFormat"
        assert result.user_facing_message == INVALID_PIN_FORMAT_MESSAGE

    def test_invalid_pin_message_does_not_echo_input(self):
        """The failure message must not contain the submitted PIN."""
        result = validate_credential(PinCredential(pin="98x7"))
        assert "98x7" not in result.user_facing_message

    def test_valid_password_passes(self):
        assert validate_credential(PasswordCredential(user_name="jane", password="x")) is None

    def test_empty_password_is_allowed(self):
        """Password policy is not enforced at this layer."""
        assert validate_credential(PasswordCredential(user_name="jane", password="")) is None

    @pytest.mark.parametrize("user_name", ["", "   "])
    def test_blank_username_fails(self, user_name):
        """A blank username yields an InvalidFormat failure."""
        result = validate_credential(PasswordCredential(user_name=user_name, password="x"))
        assert result.error_code == "InvalidFormat"

    def test_unsupported_credential_raises(self):
        """Anything outside the credential union is a programming error."""
        with pytest.raises(UnsupportedCredentialError):
            validate_credential(object())
