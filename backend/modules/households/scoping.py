"""
Household scoping for data access.

Every read or write performed on behalf of a request must pass through
these helpers with the request's CurrentUserContext. A non-admin context
only ever sees and writes records of its own household; an administrator
context (household_id is None) is unscoped.

The helpers read context.household_id, which raises
ContextNotInitializedError unless the context is READY, so an
uninitialized or failed context can never fall through to unscoped access.
"""

from typing import Any, Callable, Generic, Iterable, Optional, Protocol, TypeVar
from uuid import UUID

from shared.repository import BaseRepository
from modules.auth.context import CurrentUserContext

from .exceptions import (
    HouseholdReassignmentError,
    HouseholdRequiredError,
    HouseholdScopeViolationError,
)


class HouseholdOwned(Protocol):
    household_id: Optional[UUID]


T = TypeVar("T")
R = TypeVar("R", bound=HouseholdOwned)

HouseholdKey = Callable[[Any], Optional[UUID]]


def _household_of(record: Any) -> Optional[UUID]:
    return record.household_id


def scope_filter(context: CurrentUserContext) -> Optional[UUID]:
    """
    Return the household every query must be filtered by.

    Returns:
        The context's household ID, or None for an administrator
        (meaning: no filter)
    """
    household_id = context.household_id
    if context.is_admin:
        return None
    return household_id


def in_scope(record_household_id: Optional[UUID], context: CurrentUserContext) -> bool:
    """Whether a record owned by record_household_id is visible to context."""
    scope = scope_filter(context)
    return scope is None or record_household_id == scope


def scope_records(
    records: Iterable[T],
    context: CurrentUserContext,
    key: HouseholdKey = _household_of,
) -> list[T]:
    """Keep only the records visible to context."""
    scope = scope_filter(context)
    if scope is None:
        return list(records)
    return [record for record in records if key(record) == scope]


def ensure_in_scope(
    record: T,
    context: CurrentUserContext,
    key: HouseholdKey = _household_of,
) -> T:
    """
    Return record if context may touch it.

    Raises:
        HouseholdScopeViolationError: If record belongs to another household
    """
    record_household = key(record)
    if not in_scope(record_household, context):
        raise HouseholdScopeViolationError(context.household_id, record_household)
    return record


def stamp_household(
    data: dict[str, Any],
    context: CurrentUserContext,
    column: str = "household_id",
) -> dict[str, Any]:
    """
    Prepare a row for insertion on behalf of context.

    Non-admin writes always land in the caller's household. An explicit
    household naming another household is refused rather than silently
    rewritten. Administrators must name the household.

    Args:
        data: Row to insert
        context: Caller's context
        column: Key holding the household ID in data

    Raises:
        HouseholdScopeViolationError: If a member names another household
        HouseholdRequiredError: If an administrator names no household
    """
    scope = scope_filter(context)
    requested = data.get(column)
    if isinstance(requested, str):
        requested = UUID(requested)

    if scope is None:
        if requested is None:
            raise HouseholdRequiredError(column)
        return {**data, column: requested}

    if requested is not None and requested != scope:
        raise HouseholdScopeViolationError(scope, requested)
    return {**data, column: scope}


class HouseholdScopedStore(Generic[R]):
    """
    In-memory store for per-household records.

    Every operation takes the caller's context; there is no unscoped
    accessor. Records are keyed by an ID extracted with id_key.
    """

    def __init__(self, id_key: Callable[[R], Any]) -> None:
        self._id_key = id_key
        self._records: dict[Any, R] = {}

    def add(self, record: R, context: CurrentUserContext) -> R:
        ensure_in_scope(record, context)
        self._records[self._id_key(record)] = record
        return record

    def get(self, record_id: Any, context: CurrentUserContext) -> Optional[R]:
        """Get a record; records of other households look like missing ones."""
        record = self._records.get(record_id)
        if record is None or not in_scope(record.household_id, context):
            return None
        return record

    def list_all(self, context: CurrentUserContext) -> list[R]:
        return scope_records(self._records.values(), context)

    def remove(self, record_id: Any, context: CurrentUserContext) -> bool:
        record = self._records.get(record_id)
        if record is None:
            return False
        ensure_in_scope(record, context)
        del self._records[record_id]
        return True


class HouseholdScopedRepository(BaseRepository[T]):
    """
    Base class for Supabase repositories holding per-household rows.

    Subclasses build queries through _select() / _insert() so the
    household filter cannot be forgotten.

    Example:
        class ChoreRepository(HouseholdScopedRepository[Chore]):
            table_name = "chores"

            def list_chores(self, context: CurrentUserContext) -> list[Chore]:
                result = self._select(context).order("name").execute()
                return [Chore(**row) for row in result.data]
    """

    table_name: str = ""
    household_column: str = "household_id"

    def _scoped(self, query: Any, context: CurrentUserContext) -> Any:
        """Apply the household filter to a postgrest query builder."""
        scope = scope_filter(context)
        if scope is None:
            return query
        return query.eq(self.household_column, str(scope))

    def _select(self, context: CurrentUserContext, columns: str = "*") -> Any:
        return self._scoped(self._db.table(self.table_name).select(columns), context)

    def _insert(self, data: dict[str, Any], context: CurrentUserContext) -> Any:
        row = stamp_household(data, context, column=self.household_column)
        row[self.household_column] = str(row[self.household_column])
        return self._db.table(self.table_name).insert(row)

    def _update(self, data: dict[str, Any], context: CurrentUserContext) -> Any:
        for column in (self.household_column, "household_id"):
            if column in data:
                raise HouseholdReassignmentError(column)
        return self._scoped(self._db.table(self.table_name).update(data), context)

    def _delete(self, context: CurrentUserContext) -> Any:
        return self._scoped(self._db.table(self.table_name).delete(), context)
