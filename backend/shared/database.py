"""
Database client factory for Supabase.

The identity store and household repositories use a service-role client.
Household isolation is enforced in application code through
CurrentUserContext, so the client itself is never handed to route handlers.
"""

from typing import Optional
from supabase import create_client, Client

from .config import get_settings

# Module-level client cache
_service_client: Optional[Client] = None


def get_supabase_client() -> Client:
    """
    Get Supabase client with service role (bypasses RLS).

    Callers must scope every query by household themselves; see
    modules.households.scoping.HouseholdScopedRepository.

    Returns:
        Supabase client configured with service role key
    """
    global _service_client

    if _service_client is None:
        settings = get_settings()
        if not settings.supabase_url or not settings.supabase_service_role_key:
            raise RuntimeError(
                "Supabase configuration missing. "
                "Set HEARTH_SUPABASE_URL and HEARTH_SUPABASE_SERVICE_ROLE_KEY environment variables."
            )
        _service_client = create_client(
            settings.supabase_url,
            settings.supabase_service_role_key,
        )

    return _service_client


def is_supabase_configured() -> bool:
    """Whether Supabase credentials are present in settings."""
    settings = get_settings()
    return bool(settings.supabase_url and settings.supabase_service_role_key)


def reset_client_cache() -> None:
    """
    Reset the cached database client.

    Useful for testing or when configuration changes.
    """
    global _service_client
    _service_client = None
