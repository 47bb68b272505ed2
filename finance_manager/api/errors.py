"""
Mapping from service errors to HTTP responses.
"""

import logging
import uuid

from fastapi import HTTPException

from finance_manager.errors import AppError

logger = logging.getLogger(__name__)


def to_http_exception(error: AppError) -> HTTPException:
    """
    Convert a service error into an HTTPException.

    Internal errors never leak their details to the client. The
    client gets a correlation id instead, and the same id is logged
    next to the full error.
    """
    if error.status_code >= 500:
        correlation_id = str(uuid.uuid4())
        logger.error("internal error", extra={
            "correlation_id": correlation_id,
            "error_type": error.error_type,
            "error": str(error),
        })
        return HTTPException(
            status_code=error.status_code,
            detail={
                "error_type": error.error_type,
                "message": "internal server error",
                "correlation_id": correlation_id,
            },
        )

    return HTTPException(
        status_code=error.status_code,
        detail={"error_type": error.error_type, "message": error.message},
    )
