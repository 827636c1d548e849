"""
application error logging.

records errors in the app_logs table so they can be reviewed per tenant,
and mirrors them to the process log.
"""

import logging
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cdss.models.app_log import AppLog

logger = logging.getLogger(__name__)

LOG_TYPES = ("js_error", "api_error", "network_error", "auth_error")


def log_error(
    session: Session,
    log_type: str,
    message: str,
    metadata: Optional[Dict[str, Any]] = None,
    organization_id: Optional[str] = None,
    user_id: Optional[str] = None,
) -> Optional[AppLog]:
    """
    store an error log entry.

    a failure to write the entry is rolled back and reported through the
    process log; it never propagates to the caller.

    args:
        session: sqlalchemy session to write with
        log_type: one of LOG_TYPES
        message: error message
        metadata: extra json-serializable context
        organization_id: tenant identifier, if known
        user_id: user identifier, if known

    returns:
        the stored AppLog, or none if it could not be written

    raises:
        ValueError: if log_type is not one of LOG_TYPES
    """
    if log_type not in LOG_TYPES:
        raise ValueError(f"unknown log type: {log_type}")

    logger.error("%s: %s", log_type, message)

    entry = AppLog(
        organization_id=organization_id,
        user_id=user_id,
        log_type=log_type,
        message=message,
        log_metadata=metadata,
    )

    try:
        session.add(entry)
        session.commit()
    except SQLAlchemyError:
        session.rollback()
        logger.exception("failed to store error log entry")
        return None

    return entry
