"""
Action dispatch

Every mutating route runs its work through run_action, which turns the outcome
into an ActionResult:

- success: commit, {success: true, id}
- ActionRejected: roll back, {success: false, error: <sentinel code>}
- SQLAlchemyError: roll back, {success: false, error: <store message>}

Nothing is retried.
"""

import logging
from typing import Awaitable, Callable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from khata.core.exceptions import ActionRejected
from khata.schemas.action import ActionResult

logger = logging.getLogger(__name__)


def store_error_message(error: SQLAlchemyError) -> str:
    """Human readable message of a database error"""
    orig = getattr(error, "orig", None)
    message = str(orig) if orig is not None else str(error)
    return message.strip() or "Error"


async def run_action(
    db: AsyncSession,
    action: Callable[[], Awaitable[Optional[int]]],
) -> ActionResult:
    try:
        row_id = await action()
        await db.commit()
    except ActionRejected as e:
        await db.rollback()
        logger.info(f"Action rejected: {e.code} ({e.message})")
        return ActionResult.failed(e.code)
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(f"Database error: {e}")
        return ActionResult.failed(store_error_message(e))
    return ActionResult.ok(row_id)
