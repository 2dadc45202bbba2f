"""
Shared infrastructure for Hearth backend.

This package contains cross-cutting concerns that are used by multiple modules:
- config: Centralized settings management
- database: Supabase client factory
- exceptions: Base exception classes
- models: The transport-level authenticated principal

Note: Business logic should NOT go here. This is for infrastructure only.
"""

from .config import Settings, get_settings
from .database import get_supabase_client, is_supabase_configured, reset_client_cache
from .exceptions import (
    HearthError,
    NotFoundError,
    ValidationError,
    AuthenticationError,
    AuthorizationError,
    ExternalServiceError,
)
from .models import AuthenticatedPrincipal

__all__ = [
    "Settings",
    "get_settings",
    "get_supabase_client",
    "is_supabase_configured",
    "reset_client_cache",
    "HearthError",
    "NotFoundError",
    "ValidationError",
    "AuthenticationError",
    "AuthorizationError",
    "ExternalServiceError",
    "AuthenticatedPrincipal",
]
