"""
Security audit logging.

Writes one "AUDIT:" record per security-relevant event to the standard
logging system. Never receives passwords or PINs.
"""

import logging
from typing import Optional
from uuid import UUID

logger = logging.getLogger("hearth.audit")


class AuditLogService:
    """Audit sink backed by the `hearth.audit` logger."""

    def __init__(self, audit_logger: Optional[logging.Logger] = None):
        self._logger = audit_logger or logger

    def login_success(self, user_id: str, method: str, household_id: Optional[UUID]) -> None:
        self._logger.info(
            "AUDIT: Login success - user=%s method=%s household=%s",
            user_id,
            method,
            household_id,
        )

    def login_failure(
        self,
        identifier: str,
        method: str,
        reason: str,
        household_id: Optional[UUID] = None,
    ) -> None:
        self._logger.warning(
            "AUDIT: Login failure - identifier=%s method=%s reason=%s household=%s",
            identifier,
            method,
            reason,
            household_id,
        )

    def logout(self, user_id: str) -> None:
        self._logger.info("AUDIT: Logout - user=%s", user_id)

    def device_remembered(self, device_id: str, household_id: UUID, user_id: str) -> None:
        self._logger.info(
            "AUDIT: Device remembered - device=%s household=%s by=%s",
            device_id,
            household_id,
            user_id,
        )

    def household_created(self, household_id: UUID, performed_by: str) -> None:
        self._logger.info(
            "AUDIT: Household created - household=%s by=%s", household_id, performed_by
        )

    def household_deactivated(self, household_id: UUID, performed_by: str) -> None:
        self._logger.warning(
            "AUDIT: Household deactivated - household=%s by=%s", household_id, performed_by
        )
