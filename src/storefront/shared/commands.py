"""Synchronous command dispatch with store failures mapped to the domain taxonomy."""

import structlog
from protean.exceptions import ExpectedVersionError, TransactionError
from protean.utils.globals import current_domain
from sqlalchemy.exc import SQLAlchemyError

from storefront.errors import PersistenceFailure

logger = structlog.get_logger(__name__)


def process(command):
    """Process ``command`` in its own unit of work and return the handler's result.

    A store-level failure aborts the unit of work, so nothing the handler
    wrote survives; callers see ``PersistenceFailure``. Version conflicts are
    retried by Protean's handler wrapper first and only land here once its
    attempts are spent.
    """
    try:
        return current_domain.process(command, asynchronous=False)
    except (SQLAlchemyError, TransactionError, ExpectedVersionError) as exc:
        logger.error(
            "Transaction aborted by the store",
            command=command.__class__.__name__,
            error=str(exc),
        )
        raise PersistenceFailure("The request could not be saved, try again") from exc
