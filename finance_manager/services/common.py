"""Helpers shared by the services."""

import logging
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError

from finance_manager.errors import InternalError

logger = logging.getLogger(__name__)


@contextmanager
def store_errors(operation: str, message: str, **fields):
    """
    Turn a database failure into an InternalError.

    Use it around a whole unit of work: by the time the error
    reaches this block the unit of work has rolled back, so the
    caller sees either the full change or none of it.
    """
    try:
        yield
    except SQLAlchemyError as e:
        logger.error(
            message,
            exc_info=True,
            extra={"operation": operation, **fields},
        )
        raise InternalError(message, str(e)) from e
