"""
Database utilities shared by the ORM adapters.
"""

import contextlib
import logging
from typing import Iterator

from django.db import (
    DataError,
    DatabaseError,
    IntegrityError,
    OperationalError,
    ProgrammingError,
)

from core.domain.exceptions import StoreError, StoreErrorKind

logger = logging.getLogger(__name__)


@contextlib.contextmanager
def translate_database_errors(operation: str) -> Iterator[None]:
    """
    Map Django database exceptions to StoreError kinds.

    Usage:
        with translate_database_errors("create"):
            # Database operations
            pass

    Args:
        operation: Operation name used in log messages
    """
    try:
        yield
    except StoreError:
        raise
    except IntegrityError as e:
        raise StoreError(StoreErrorKind.CONDITION_FAILED, str(e)) from e
    except OperationalError as e:
        logger.error("Database unavailable during %s: %s", operation, e)
        raise StoreError(StoreErrorKind.UNAVAILABLE, str(e)) from e
    except ProgrammingError as e:
        logger.error("Database schema error during %s: %s", operation, e)
        raise StoreError(StoreErrorKind.MISSING_RESOURCE, str(e)) from e
    except DataError as e:
        raise StoreError(StoreErrorKind.INVALID_REQUEST, str(e)) from e
    except DatabaseError as e:
        logger.error("Database error during %s: %s", operation, e, exc_info=True)
        raise StoreError(StoreErrorKind.INTERNAL, str(e)) from e
