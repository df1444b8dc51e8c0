"""Unit-of-work helper used by the allocation and categorization engines."""

import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from datadesk.core.exceptions import DashboardError, TransactionFailure

logger = logging.getLogger(__name__)


@contextmanager
def atomic(db: Session, operation: str) -> Iterator[Session]:
    """
    Run the block as one transaction: commit on success, roll back on any error.

    Domain errors (NotFoundError, InvalidTransitionError, ...) propagate
    unchanged after the rollback. Database errors are re-raised as
    TransactionFailure so callers see a typed 500.
    """
    try:
        yield db
        db.commit()
    except DashboardError:
        db.rollback()
        raise
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("%s failed, transaction rolled back", operation)
        raise TransactionFailure(f"{operation} failed") from exc
    except Exception:
        db.rollback()
        logger.exception("%s aborted, transaction rolled back", operation)
        raise
