"""
Structural credential checks.

These run before any store lookup and never touch storage, so a malformed
credential is rejected without an expensive (and observable) code path.
Messages are generic and never echo the submitted value.
"""

from typing import Optional

from .exceptions import UnsupportedCredentialError
from .models import AuthErrorCode, AuthResult, PasswordCredential, PinCredential

PIN_LENGTH = 4
_ASCII_DIGITS = frozenset("0123456789")

INVALID_PIN_FORMAT_MESSAGE = "Please enter your 4-digit PIN."
INVALID_PASSWORD_FORMAT_MESSAGE = "Please enter your username and password."


def is_valid_pin(pin: Optional[str]) -> bool:
    """True iff pin is exactly four ASCII decimal digits."""
    if pin is None or len(pin) != PIN_LENGTH:
        return False
    return all(ch in _ASCII_DIGITS for ch in pin)


def validate_credential(credential: PasswordCredential | PinCredential) -> Optional[AuthResult]:
    """
    Check a credential's shape.

    Returns:
        None if the credential is well-formed, otherwise an InvalidFormat
        failure result.
    """
    if isinstance(credential, PinCredential):
        if not is_valid_pin(credential.pin):
            return AuthResult.fail(AuthErrorCode.INVALID_FORMAT.value, INVALID_PIN_FORMAT_MESSAGE)
        return None

    if isinstance(credential, PasswordCredential):
        if not credential.user_name or not credential.user_name.strip():
            return AuthResult.fail(
                AuthErrorCode.INVALID_FORMAT.value, INVALID_PASSWORD_FORMAT_MESSAGE
            )
        return None

    raise UnsupportedCredentialError(credential)
