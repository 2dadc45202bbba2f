"""
Shared data models used across modules.

These models are shared infrastructure, not business logic.
Module-specific models should stay in their respective module directories.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class AuthenticatedPrincipal(BaseModel):
    """
    The identity asserted by the transport layer for a request.

    This is decoded from the session token and consumed by
    CurrentUserContext, which resolves it into a full UserSummary.
    It carries no household information; the household
    is always re-read from the identity store.
    """

    user_id: str = Field(..., min_length=1, description="Identity record ID")
    issued_at: Optional[datetime] = Field(None, description="Session start time")
    expires_at: Optional[datetime] = Field(None, description="Session expiry time")
    persistent: bool = Field(default=False, description="Issued for a remembered device")

    model_config = {
        "frozen": True,
        "extra": "ignore",  # Ignore extra fields from token claims
    }
