"""
Authentication service implementation.

All sign-in flows go through AuthenticationService.sign_in(). User-facing
failures come back as AuthResult.fail(...) with fixed messages that never
reveal whether an account exists; only IdentityStoreUnavailableError is
translated, every other exception propagates.
"""

import asyncio
import logging
from typing import Optional
from uuid import UUID

from shared.models import AuthenticatedPrincipal

from .audit import AuditLogService
from .exceptions import IdentityStoreUnavailableError, UnsupportedCredentialError
from .interfaces import IDeviceBindingStore, IIdentityStore, ILockoutPolicy
from .models import (
    ApplicationUser,
    AuthErrorCode,
    AuthResult,
    Credential,
    PasswordCredential,
    PinCredential,
    UserSummary,
)
from .passwords import burn_verification, verify_secret
from .store import InMemoryDeviceBindingStore, InMemoryLockoutPolicy
from .validation import validate_credential

logger = logging.getLogger(__name__)

INVALID_PASSWORD_MESSAGE = "Invalid username or password."
INVALID_PIN_MESSAGE = "Invalid PIN. Please try again."
ACCOUNT_LOCKED_MESSAGE = "Too many failed sign-in attempts. Please try again later."
UNAVAILABLE_MESSAGE = "Sign-in is temporarily unavailable. Please try again shortly."

METHOD_PASSWORD = "Password"
METHOD_PIN = "PIN"


class AuthenticationService:
    """
    Implementation of the authentication service.

    Args:
        identity_store: Source of identity records and households
        lockout: Failed-attempt policy; in-memory by default
        devices: Remembered-device bindings; in-memory by default
        audit: Audit sink
    """

    def __init__(
        self,
        identity_store: IIdentityStore,
        lockout: Optional[ILockoutPolicy] = None,
        devices: Optional[IDeviceBindingStore] = None,
        audit: Optional[AuditLogService] = None,
    ):
        self._store = identity_store
        self._lockout = lockout or InMemoryLockoutPolicy()
        self._devices = devices or InMemoryDeviceBindingStore()
        self._audit = audit or AuditLogService()

    async def sign_in(self, credential: Credential) -> AuthResult:
        """Authenticate a password or PIN credential."""
        malformed = validate_credential(credential)
        if malformed is not None:
            self._audit.login_failure(
                "-", _method_of(credential), AuthErrorCode.INVALID_FORMAT.value
            )
            return malformed

        try:
            if isinstance(credential, PasswordCredential):
                return await self._sign_in_with_password(credential)
            if isinstance(credential, PinCredential):
                return await self._sign_in_with_pin(credential)
        except IdentityStoreUnavailableError as e:
            logger.error("Sign-in aborted, identity store unavailable: %s", e.message)
            return AuthResult.fail(AuthErrorCode.UNAVAILABLE.value, UNAVAILABLE_MESSAGE)

        raise UnsupportedCredentialError(credential)

    async def _sign_in_with_password(self, credential: PasswordCredential) -> AuthResult:
        user_name = credential.user_name.strip()

        # Keyed on the submitted name so unknown names lock exactly like real ones.
        lock_key = f"user:{user_name.casefold()}"
        if await self._lockout.is_locked_out(lock_key):
            self._audit.login_failure(
                user_name, METHOD_PASSWORD, AuthErrorCode.ACCOUNT_LOCKED.value
            )
            return AuthResult.fail(AuthErrorCode.ACCOUNT_LOCKED.value, ACCOUNT_LOCKED_MESSAGE)

        user = await self._store.find_by_user_name(user_name)

        if user is None:
            await asyncio.to_thread(burn_verification, credential.password)
            await self._lockout.record_failure(lock_key)
            self._audit.login_failure(user_name, METHOD_PASSWORD, "UnknownUser")
            return _invalid(INVALID_PASSWORD_MESSAGE)

        if not await asyncio.to_thread(verify_secret, credential.password, user.password_hash):
            await self._lockout.record_failure(lock_key)
            self._audit.login_failure(
                user.id,
                METHOD_PASSWORD,
                AuthErrorCode.INVALID_CREDENTIALS.value,
                user.household_id,
            )
            return _invalid(INVALID_PASSWORD_MESSAGE)

        if not await self._household_is_active(user):
            self._audit.login_failure(
                user.id,
                METHOD_PASSWORD,
                AuthErrorCode.HOUSEHOLD_INACTIVE.value,
                user.household_id,
            )
            return _invalid(INVALID_PASSWORD_MESSAGE)

        return await self._complete(user, credential, METHOD_PASSWORD, lock_key)

    async def _sign_in_with_pin(self, credential: PinCredential) -> AuthResult:
        # PINs are only checked within the household of a remembered device.
        if not credential.device_id:
            self._audit.login_failure("-", METHOD_PIN, "UnknownDevice")
            return _invalid(INVALID_PIN_MESSAGE)

        lock_key = f"device:{credential.device_id}"
        if await self._lockout.is_locked_out(lock_key):
            self._audit.login_failure(
                credential.device_id, METHOD_PIN, AuthErrorCode.ACCOUNT_LOCKED.value
            )
            return AuthResult.fail(AuthErrorCode.ACCOUNT_LOCKED.value, ACCOUNT_LOCKED_MESSAGE)

        binding = await self._devices.get(credential.device_id)
        if binding is None:
            await self._lockout.record_failure(lock_key)
            self._audit.login_failure(credential.device_id, METHOD_PIN, "UnknownDevice")
            return _invalid(INVALID_PIN_MESSAGE)

        household = await self._store.get_household(binding.household_id)
        if household is None or not household.is_active:
            self._audit.login_failure(
                credential.device_id,
                METHOD_PIN,
                AuthErrorCode.HOUSEHOLD_INACTIVE.value,
                binding.household_id,
            )
            return _invalid(INVALID_PIN_MESSAGE)

        candidates = await self._store.find_pin_candidates(binding.household_id)
        matches = await asyncio.to_thread(
            _pin_matches, candidates, binding.household_id, credential.pin
        )

        if len(matches) != 1:
            await self._lockout.record_failure(lock_key)
            reason = "AmbiguousPin" if matches else AuthErrorCode.INVALID_CREDENTIALS.value
            if matches:
                logger.warning(
                    "PIN matched %d users in household %s; refusing sign-in",
                    len(matches),
                    binding.household_id,
                )
            self._audit.login_failure(
                credential.device_id, METHOD_PIN, reason, binding.household_id
            )
            return _invalid(INVALID_PIN_MESSAGE)

        return await self._complete(matches[0], credential, METHOD_PIN, lock_key)

    async def _complete(
        self,
        user: ApplicationUser,
        credential: Credential,
        method: str,
        lock_key: str,
    ) -> AuthResult:
        await self._lockout.reset(lock_key)

        if credential.remember_device:
            await self._remember_device(user, credential.device_id)

        summary = user.to_summary()
        self._audit.login_success(user.id, method, user.household_id)
        logger.info("User %s signed in via %s", user.user_name, method)
        return AuthResult.ok(summary)

    async def _remember_device(self, user: ApplicationUser, device_id: Optional[str]) -> None:
        if not device_id:
            logger.debug("remember_device requested without a device_id; skipping")
            return
        if user.household_id is None:
            # Administrators have no household to bind a device to.
            return
        await self._devices.remember(device_id, user.household_id)
        self._audit.device_remembered(device_id, user.household_id, user.id)

    async def _household_is_active(self, user: ApplicationUser) -> bool:
        if user.household_id is None:
            return True
        household = await self._store.get_household(user.household_id)
        return household is not None and household.is_active

    async def sign_out(self, principal: AuthenticatedPrincipal) -> None:
        self._audit.logout(principal.user_id)
        logger.info("User %s signed out", principal.user_id)

    async def resolve_user(self, principal: AuthenticatedPrincipal) -> Optional[UserSummary]:
        """
        Re-read the identity behind an existing session.

        Returns None when the user was removed or the household has been
        deactivated since the session started.
        """
        user = await self._store.find_by_id(principal.user_id)
        if user is None:
            logger.info("Session user %s no longer exists", principal.user_id)
            return None
        if not await self._household_is_active(user):
            logger.info("Session user %s belongs to an inactive household", user.id)
            return None
        return user.to_summary()


def _invalid(message: str) -> AuthResult:
    return AuthResult.fail(AuthErrorCode.INVALID_CREDENTIALS.value, message)


def _method_of(credential: Credential) -> str:
    return METHOD_PIN if isinstance(credential, PinCredential) else METHOD_PASSWORD


def _pin_matches(
    candidates: list[ApplicationUser], household_id: UUID, pin: str
) -> list[ApplicationUser]:
    # No early exit: every candidate is checked.
    return [
        user
        for user in candidates
        if user.household_id == household_id and verify_secret(pin, user.pin_hash)
    ]
