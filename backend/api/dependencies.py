"""
Dependency injection setup for FastAPI.

This module provides the "container" that wires together all module
implementations. Each module exposes its service through an interface,
and this file creates the concrete implementations.

With Supabase configured the identity store, device bindings and
households are read from the database; otherwise everything lives in
memory (tests and local development).
"""

from typing import TYPE_CHECKING

# Type checking imports for interfaces (avoids circular imports)
if TYPE_CHECKING:
    from modules.auth.audit import AuditLogService
    from modules.auth.interfaces import (
        IAuthenticationService,
        IDeviceBindingStore,
        IIdentityStore,
        ILockoutPolicy,
    )
    from modules.households.interfaces import IHouseholdRepository, IHouseholdService


class ServiceContainer:
    """
    Container for all service instances.

    This class manages the lifecycle of service instances and their
    dependencies. Services are created lazily on first access.

    All services are cached as singletons within the container.
    Use reset() to clear all cached services for testing.
    Per-request objects (CurrentUserContext) are never stored here.
    """

    def __init__(self) -> None:
        self._audit: "AuditLogService | None" = None
        self._household_repository: "IHouseholdRepository | None" = None
        self._identity_store: "IIdentityStore | None" = None
        self._lockout: "ILockoutPolicy | None" = None
        self._devices: "IDeviceBindingStore | None" = None
        self._auth_service: "IAuthenticationService | None" = None
        self._household_service: "IHouseholdService | None" = None

    @property
    def audit(self) -> "AuditLogService":
        """Get the audit log instance."""
        if self._audit is None:
            from modules.auth.audit import AuditLogService
            self._audit = AuditLogService()
        return self._audit

    @property
    def household_repository(self) -> "IHouseholdRepository":
        """Get the household repository instance."""
        if self._household_repository is None:
            from shared.database import get_supabase_client, is_supabase_configured
            if is_supabase_configured():
                from modules.households.repository import HouseholdRepository
                self._household_repository = HouseholdRepository(get_supabase_client())
            else:
                from modules.households.repository import InMemoryHouseholdRepository
                self._household_repository = InMemoryHouseholdRepository()
        return self._household_repository

    @property
    def identity_store(self) -> "IIdentityStore":
        """Get the identity store instance."""
        if self._identity_store is None:
            from shared.database import get_supabase_client, is_supabase_configured
            if is_supabase_configured():
                from modules.auth.store import SupabaseIdentityStore
                self._identity_store = SupabaseIdentityStore(get_supabase_client())
            else:
                from modules.auth.store import InMemoryIdentityStore
                self._identity_store = InMemoryIdentityStore(
                    households=self.household_repository
                )
        return self._identity_store

    @property
    def lockout(self) -> "ILockoutPolicy":
        """Get the lockout policy instance."""
        if self._lockout is None:
            from modules.auth.store import InMemoryLockoutPolicy
            self._lockout = InMemoryLockoutPolicy()
        return self._lockout

    @property
    def devices(self) -> "IDeviceBindingStore":
        """Get the device binding store instance."""
        if self._devices is None:
            from shared.database import get_supabase_client, is_supabase_configured
            if is_supabase_configured():
                from modules.auth.store import SupabaseDeviceBindingStore
                self._devices = SupabaseDeviceBindingStore(get_supabase_client())
            else:
                from modules.auth.store import InMemoryDeviceBindingStore
                self._devices = InMemoryDeviceBindingStore()
        return self._devices

    @property
    def auth(self) -> "IAuthenticationService":
        """Get the authentication service instance."""
        if self._auth_service is None:
            from modules.auth.service import AuthenticationService
            self._auth_service = AuthenticationService(
                identity_store=self.identity_store,
                lockout=self.lockout,
                devices=self.devices,
                audit=self.audit,
            )
        return self._auth_service

    @property
    def households(self) -> "IHouseholdService":
        """Get the household service instance."""
        if self._household_service is None:
            from modules.households.service import HouseholdService
            self._household_service = HouseholdService(
                repository=self.household_repository,
                audit=self.audit,
            )
        return self._household_service

    def reset(self) -> None:
        """
        Reset all cached services.

        This is primarily for testing - allows tests to get fresh
        service instances with different mock dependencies.
        """
        self._audit = None
        self._household_repository = None
        self._identity_store = None
        self._lockout = None
        self._devices = None
        self._auth_service = None
        self._household_service = None


# Module-level container singleton
_container: ServiceContainer | None = None


def get_container() -> ServiceContainer:
    """Get the singleton service container."""
    global _container
    if _container is None:
        _container = ServiceContainer()
    return _container


def reset_container() -> None:
    """
    Reset the service container.

    This clears the cached container, so the next call to get_container()
    will create a fresh container with new service instances.

    Primarily used for testing.
    """
    global _container
    _container = None


# FastAPI dependency functions
# These are the functions that should be used in route Depends() calls


def get_auth_service() -> "IAuthenticationService":
    """FastAPI dependency for the authentication service."""
    return get_container().auth


def get_household_service() -> "IHouseholdService":
    """FastAPI dependency for the household service."""
    return get_container().households
