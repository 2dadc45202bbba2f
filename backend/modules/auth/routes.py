"""
Authentication API endpoints.

Thin adapter over IAuthenticationService: the AuthResult is returned as-is
and a session token is attached on success.
"""

from fastapi import APIRouter, Depends, Response, status
from pydantic import BaseModel

from api.dependencies import get_auth_service
from api.middleware.auth import get_user_context

from .context import CurrentUserContext
from .interfaces import IAuthenticationService
from .models import AuthErrorCode, Credential, LoginResponse, UserSummary
from .tokens import issue_session_token

router = APIRouter()


class LoginRequest(BaseModel):
    """Request body for sign-in; credential.kind selects password or PIN."""

    credential: Credential


@router.post("/login", response_model=LoginResponse)
async def login(
    request: LoginRequest,
    response: Response,
    auth: IAuthenticationService = Depends(get_auth_service),
) -> LoginResponse:
    """
    Sign in with a password or PIN credential.

    Failures return 401 (503 when the identity store is unavailable)
    with the AuthResult in the body.
    """
    result = await auth.sign_in(request.credential)

    if not result.success or result.user is None:
        if result.error_code == AuthErrorCode.UNAVAILABLE.value:
            response.status_code = status.HTTP_503_SERVICE_UNAVAILABLE
        else:
            response.status_code = status.HTTP_401_UNAUTHORIZED
        return LoginResponse(result=result)

    session = issue_session_token(result.user, persistent=request.credential.remember_device)
    return LoginResponse(
        result=result,
        access_token=session.token,
        expires_at=session.expires_at,
    )


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(
    context: CurrentUserContext = Depends(get_user_context),
    auth: IAuthenticationService = Depends(get_auth_service),
) -> Response:
    """
    Record the end of the session.

    Session tokens are stateless; the client discards its token.
    """
    await auth.sign_out(context.principal)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/me", response_model=UserSummary)
async def get_me(context: CurrentUserContext = Depends(get_user_context)) -> UserSummary:
    """Get the signed-in user, including their household."""
    return context.summary
