"""
Per-request user context.

CurrentUserContext is the single source of truth for "who is calling and
which household may they see". One instance is created per request and
handed explicitly to every data-access call; it is never stored globally.

Lifecycle:
    UNINITIALIZED -> INITIALIZING -> READY | FAILED

READY and FAILED are terminal. Reading identity properties outside READY
raises ContextNotInitializedError.
"""

import asyncio
import logging
from enum import Enum
from typing import Optional
from uuid import UUID

from shared.models import AuthenticatedPrincipal

from .exceptions import ContextNotInitializedError
from .interfaces import IUserResolver
from .models import UserSummary

logger = logging.getLogger(__name__)


class ContextState(str, Enum):
    UNINITIALIZED = "uninitialized"
    INITIALIZING = "initializing"
    READY = "ready"
    FAILED = "failed"


class CurrentUserContext:
    """
    Resolves and caches the authenticated identity for one request.

    Args:
        resolver: Anything that can turn a principal into a UserSummary
            (normally the AuthenticationService).
        principal: The identity asserted by the transport layer, or None
            when the request carried no valid session.
    """

    def __init__(
        self,
        resolver: IUserResolver,
        principal: Optional[AuthenticatedPrincipal],
    ) -> None:
        self._resolver = resolver
        self._principal = principal
        self._state = ContextState.UNINITIALIZED
        self._summary: Optional[UserSummary] = None
        self._inflight: Optional[asyncio.Task] = None
        self.failure_reason: Optional[str] = None

    @property
    def state(self) -> ContextState:
        return self._state

    async def initialize(self) -> Optional[UserSummary]:
        """
        Resolve the principal into a UserSummary.

        Safe to call repeatedly: once READY the cached summary is returned
        without another resolver call; once FAILED, None is returned.
        Concurrent callers await the same in-flight resolution.

        Returns:
            The resolved UserSummary, or None if the context FAILED
        """
        if self._state is ContextState.READY:
            return self._summary
        if self._state is ContextState.FAILED:
            return None

        if self._inflight is None:
            self._state = ContextState.INITIALIZING
            self._inflight = asyncio.ensure_future(self._resolve())

        try:
            return await self._inflight
        except asyncio.CancelledError:
            # The task may be cancelled before its body ever ran.
            if self._state is ContextState.INITIALIZING:
                self._fail("cancelled")
            raise

    async def _resolve(self) -> Optional[UserSummary]:
        if self._principal is None:
            self._fail("no principal")
            return None

        try:
            summary = await self._resolver.resolve_user(self._principal)
        except asyncio.CancelledError:
            self._fail("cancelled")
            raise
        except Exception:
            self._fail("resolver error")
            raise

        if summary is None:
            self._fail("identity not resolved")
            return None

        self._summary = summary
        self._state = ContextState.READY
        logger.debug(
            "User context ready: user=%s household=%s",
            summary.user_id,
            summary.household_id,
        )
        return summary

    def _fail(self, reason: str) -> None:
        self._summary = None
        self._state = ContextState.FAILED
        self.failure_reason = reason
        logger.debug("User context failed: %s", reason)

    def _require_ready(self) -> UserSummary:
        if self._state is not ContextState.READY or self._summary is None:
            raise ContextNotInitializedError(self._state.value)
        return self._summary

    # -------------------------------------------------------------------------
    # Identity accessors (READY only)
    # -------------------------------------------------------------------------

    @property
    def summary(self) -> UserSummary:
        return self._require_ready()

    @property
    def principal(self) -> AuthenticatedPrincipal:
        self._require_ready()
        # READY implies a principal was present.
        assert self._principal is not None
        return self._principal

    @property
    def user_id(self) -> str:
        return self._require_ready().user_id

    @property
    def household_id(self) -> Optional[UUID]:
        """The caller's household, or None for administrators."""
        return self._require_ready().household_id

    @property
    def roles(self) -> frozenset[str]:
        return self._require_ready().roles

    def is_in_role(self, role: str) -> bool:
        return role in self._require_ready().roles

    # -------------------------------------------------------------------------
    # Derived flags (safe in any state)
    # -------------------------------------------------------------------------

    @property
    def is_authenticated(self) -> bool:
        return self._state is ContextState.READY

    @property
    def is_admin(self) -> bool:
        """True only for a READY context whose household_id is None."""
        return (
            self._state is ContextState.READY
            and self._summary is not None
            and self._summary.household_id is None
        )
