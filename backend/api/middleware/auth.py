"""
Session authentication dependencies.

Decodes the bearer session token and builds the request's
CurrentUserContext. A fresh context is created for every request and
passed explicitly to the services that need it.
"""

from typing import Optional
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from shared.models import AuthenticatedPrincipal
from modules.auth.context import CurrentUserContext
from modules.auth.exceptions import MissingSessionError
from modules.auth.interfaces import IAuthenticationService
from modules.auth.tokens import decode_session_token

from ..dependencies import get_auth_service

# Bearer token extractor
bearer_scheme = HTTPBearer(auto_error=False)


async def get_principal(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[AuthenticatedPrincipal]:
    """
    Decode the session token, if any.

    Raises:
        InvalidSessionTokenError / ExpiredSessionTokenError: For a bad token
    """
    if credentials is None:
        return None
    return decode_session_token(credentials.credentials)


async def get_user_context(
    principal: Optional[AuthenticatedPrincipal] = Depends(get_principal),
    auth: IAuthenticationService = Depends(get_auth_service),
) -> CurrentUserContext:
    """
    Dependency that requires a READY user context.

    Usage:
        @router.get("/protected")
        async def protected_route(context: CurrentUserContext = Depends(get_user_context)):
            return {"household_id": context.household_id}
    """
    context = CurrentUserContext(auth, principal)
    await context.initialize()
    if not context.is_authenticated:
        raise MissingSessionError()
    return context


# Type alias for cleaner route definitions
RequireContext = Depends(get_user_context)
