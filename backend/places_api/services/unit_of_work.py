"""
Transactional unit of work over a SQLModel session.

All writes issued inside the ``with`` block are committed together when
the block exits normally.  Any exception rolls the whole transaction
back before it propagates, so callers never observe a partial write.
Database errors are logged with their cause and surfaced as
``PersistenceFailed``; domain errors pass through unchanged.
"""

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from places_api.errors import PersistenceFailed

logger = logging.getLogger(__name__)


@contextmanager
def unit_of_work(session: Session, action: str) -> Iterator[Session]:
    """Commit everything written in the block, or nothing.

    ``action`` is a gerund phrase ("creating place") used in the log line
    and in the client-facing message.
    """
    try:
        yield session
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        logger.exception("Transaction failed while %s", action)
        raise PersistenceFailed(f"Something went wrong, {action} failed, please try again.") from exc
    except Exception:
        session.rollback()
        raise
