"""
TransactionOutcome - typed result of a registration or wishlist transaction

The transaction body returns an outcome instead of raising for expected
declines. The use case then translates a failed outcome into an API error
through OUTCOME_ERRORS.
"""

from typing import Awaitable, Callable, Dict, Optional

import attrs

from src.platform.exception.exceptions import (
    ConflictError,
    CustomBaseError,
    ForbiddenError,
    InternalTransactionError,
    NotFoundError,
    TransactionConflictError,
)
from src.platform.logging.loguru_io import Logger
from src.service.conference.app.interface.i_entity_store import IEntityStore, ITransaction
from src.service.conference.domain.enum.registration_reason import RegistrationReason


UNKNOWN_EXCEPTION_MESSAGE = 'Unknown exception'


@attrs.frozen
class TransactionOutcome:
    success: bool
    reason: Optional[RegistrationReason] = None
    detail: str = ''

    @classmethod
    def ok(cls, detail: str = '') -> 'TransactionOutcome':
        return cls(success=True, detail=detail)

    @classmethod
    def fail(cls, reason: RegistrationReason, detail: str = '') -> 'TransactionOutcome':
        return cls(success=False, reason=reason, detail=detail)


# reason -> builds the error from the outcome detail
OUTCOME_ERRORS: Dict[RegistrationReason, Callable[[str], CustomBaseError]] = {
    RegistrationReason.NOT_FOUND: lambda detail: NotFoundError(detail),
    RegistrationReason.ALREADY_REGISTERED: lambda _: ConflictError('You have already registered'),
    RegistrationReason.NO_SEATS_AVAILABLE: lambda _: ConflictError('There are no seats available'),
    RegistrationReason.NOT_REGISTERED: lambda _: ForbiddenError(
        'You are not registered for this conference'
    ),
    RegistrationReason.ALREADY_IN_WISHLIST: lambda _: ConflictError(
        'You have already added to your wishlist'
    ),
    RegistrationReason.NOT_IN_WISHLIST: lambda _: ForbiddenError(
        "You've not added this session in your wishlist"
    ),
    RegistrationReason.UNKNOWN: lambda _: InternalTransactionError(UNKNOWN_EXCEPTION_MESSAGE),
    RegistrationReason.CONFLICT: lambda _: InternalTransactionError(UNKNOWN_EXCEPTION_MESSAGE),
}


def raise_for_outcome(outcome: TransactionOutcome) -> TransactionOutcome:
    if outcome.success:
        return outcome
    reason = outcome.reason or RegistrationReason.UNKNOWN
    raise OUTCOME_ERRORS[reason](outcome.detail)


async def transact_outcome(
    entity_store: IEntityStore,
    work: Callable[[ITransaction], Awaitable[TransactionOutcome]],
    *,
    operation: str,
) -> TransactionOutcome:
    """
    Run an outcome-returning body in a store transaction.

    Nothing is retried. A lost optimistic commit becomes CONFLICT, any other
    exception raised by the body becomes UNKNOWN; both are logged with their
    traceback and the transaction is not committed.
    """
    try:
        return await entity_store.run_in_transaction(work)
    except TransactionConflictError as e:
        Logger.base.opt(exception=e).warning(f'⚔️ [{operation}] Transaction conflict')
        return TransactionOutcome.fail(RegistrationReason.CONFLICT, str(e))
    except Exception as e:
        Logger.base.opt(exception=e).error(f'💥 [{operation}] Unexpected error: {e}')
        return TransactionOutcome.fail(RegistrationReason.UNKNOWN, str(e))
