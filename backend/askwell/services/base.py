"""
Askwell Backend — Service Error Translation
===========================================

What:  One place that turns SQLAlchemy failures into application errors.
How:   Services wrap their store access in `translate_db_errors(...)`:

           async with translate_db_errors("cast_vote", target_id=7):
               ...

       - AskwellError subclasses (NotFound, Unauthorized, ...) pass through
       - IntegrityError  → ConflictError (unique/foreign-key collision)
       - SQLAlchemyError → DatabaseError (generic message, details logged)

The session is left for `get_db_session` to roll back; services never
commit or roll back themselves.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from askwell.exceptions import ConflictError, DatabaseError

logger = logging.getLogger(__name__)


@asynccontextmanager
async def translate_db_errors(operation: str, **context: Any) -> AsyncIterator[None]:
    try:
        yield
    except IntegrityError as e:
        logger.warning(
            "Integrity error during %s %s: %s", operation, context, e.orig,
        )
        raise ConflictError(
            message="The change collides with existing data. Please retry.",
            context={"operation": operation, **{k: str(v) for k, v in context.items()}},
        ) from e
    except SQLAlchemyError as e:
        logger.error(
            "Database error during %s %s: %s", operation, context, str(e), exc_info=True,
        )
        raise DatabaseError(context={"operation": operation}) from e
