"""Database setup utilities.

This module centralises the configuration of the SQLAlchemy
engine and session. It exposes the ``db`` object used by
models throughout the application, plus a single commit helper
so that every write in the service layer fails the same way.

Import ``db`` from ``couples_dashboard`` rather than from this
module directly. The application factory initialises ``db`` with
the Flask app.
"""
from __future__ import annotations

import logging

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy.exc import SQLAlchemyError

from .errors import DataAccessError

db = SQLAlchemy()

logger = logging.getLogger(__name__)


def commit_or_raise(action: str) -> None:
    """Commit the current session, surfacing failures as ``DataAccessError``.

    The session is rolled back before the error propagates so the
    request can still render an error response. Nothing is retried;
    retrying is left to the caller.
    """
    try:
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.exception("Database write failed while trying to %s", action)
        raise DataAccessError(f"Failed to {action}.") from exc
