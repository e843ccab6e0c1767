import logging

from .store import StoreError

logger = logging.getLogger(__name__)


class RecoveryError(Exception):
    """Pending reminders could not be loaded at startup."""


def recover(store, scheduler):
    """Re-register a timer for every event that has not been reminded yet.

    Fire times are computed fresh, so reminders that came due while the
    process was down go out immediately. Returns the number rescheduled.
    """
    try:
        pending = store.list_unreminded()
    except StoreError as e:
        raise RecoveryError(f'Could not load pending reminders: {e}') from e

    for event in pending:
        scheduler.schedule(event)

    logger.info('📅 Rescheduled %d pending reminder(s)', len(pending))
    return len(pending)
