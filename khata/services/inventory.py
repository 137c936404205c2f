"""
Cylinder inventory reconciliation

CylinderType.no_of_cylinders is the unassigned stock. Every change to it goes
through shift_available, a single conditional UPDATE:

    UPDATE cylinder_types
       SET no_of_cylinders = no_of_cylinders - :delta
     WHERE id = :id AND no_of_cylinders >= :delta

so the availability check and the decrement cannot be split by a concurrent
request, and the stock never goes negative. A request that asks for exactly
what is available succeeds; asking for more raises InsufficientStockError
("not_enough") before any row is written.
"""

import logging
from datetime import date
from typing import List

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from khata.core.exceptions import InsufficientStockError, InvalidFormValue, RecordNotFoundError
from khata.models.client import Client
from khata.models.cylinder import CylinderAssignment, CylinderType

logger = logging.getLogger(__name__)


async def shift_available(db: AsyncSession, cylinder_type_id: int, delta: int) -> bool:
    """Take ``delta`` cylinders out of stock (negative ``delta`` puts them back)

    Returns False when nothing was updated: the type does not exist, or
    ``delta`` is positive and exceeds the current stock.
    """
    stmt = update(CylinderType).where(CylinderType.id == cylinder_type_id)
    if delta > 0:
        stmt = stmt.where(CylinderType.no_of_cylinders >= delta)
    stmt = (
        stmt.values(no_of_cylinders=CylinderType.no_of_cylinders - delta)
        .execution_options(synchronize_session=False)
    )
    result = await db.execute(stmt)
    return result.rowcount > 0


async def get_available(db: AsyncSession, cylinder_type_id: int) -> int:
    """Current unassigned stock, read straight from the table"""
    result = await db.execute(
        select(CylinderType.no_of_cylinders).where(CylinderType.id == cylinder_type_id)
    )
    available = result.scalar_one_or_none()
    if available is None:
        raise RecordNotFoundError(f"cylinder type {cylinder_type_id} not found")
    return available


async def assign_cylinders(
    db: AsyncSession,
    client_id: int,
    cylinder_type_id: int,
    quantity: int,
    assigned_on: date,
) -> CylinderAssignment:
    """Hand ``quantity`` cylinders of a type to a client

    A second assignment for the same (client, type, date) is merged into the
    existing row. The stock check covers only the newly requested quantity.
    """
    if quantity < 1:
        raise InvalidFormValue("quantity must be at least 1")

    if await db.get(Client, client_id) is None:
        raise RecordNotFoundError(f"client {client_id} not found")

    if not await shift_available(db, cylinder_type_id, quantity):
        logger.warning(
            f"Assignment rejected: type={cylinder_type_id} requested={quantity} exceeds stock"
        )
        raise InsufficientStockError(f"not enough cylinders of type {cylinder_type_id}")

    result = await db.execute(
        select(CylinderAssignment).where(
            CylinderAssignment.client_id == client_id,
            CylinderAssignment.cylinder_type_id == cylinder_type_id,
            CylinderAssignment.date == assigned_on,
        )
    )
    assignment = result.scalars().first()

    if assignment is not None:
        assignment.quantity += quantity
        logger.info(
            f"Merged assignment {assignment.id}: client={client_id} type={cylinder_type_id} "
            f"+{quantity} -> {assignment.quantity}"
        )
    else:
        assignment = CylinderAssignment(
            client_id=client_id,
            cylinder_type_id=cylinder_type_id,
            quantity=quantity,
            date=assigned_on,
        )
        db.add(assignment)
        await db.flush()
        logger.info(
            f"Assigned {quantity} x type={cylinder_type_id} to client={client_id} on {assigned_on}"
        )
    return assignment


async def update_assignment(db: AsyncSession, assignment_id: int, new_quantity: int) -> CylinderAssignment:
    """Change an assignment's quantity, moving the difference in or out of stock

    An increase is validated against the stock as it is now, not as it was
    when the assignment was made.
    """
    if new_quantity < 1:
        raise InvalidFormValue("quantity must be at least 1")

    assignment = await db.get(CylinderAssignment, assignment_id)
    if assignment is None:
        logger.warning(f"Assignment {assignment_id} not found for update")
        raise RecordNotFoundError(f"assignment {assignment_id} not found")

    diff = new_quantity - assignment.quantity
    if diff == 0:
        return assignment

    if not await shift_available(db, assignment.cylinder_type_id, diff):
        if diff > 0:
            logger.warning(
                f"Assignment {assignment_id} update rejected: +{diff} exceeds stock "
                f"of type={assignment.cylinder_type_id}"
            )
            raise InsufficientStockError(f"not enough cylinders of type {assignment.cylinder_type_id}")
        # The type row is gone; there is no stock left to return to
        logger.warning(f"Cylinder type {assignment.cylinder_type_id} missing, {-diff} not returned")

    assignment.quantity = new_quantity
    logger.info(f"Assignment {assignment_id} quantity changed by {diff:+d} -> {new_quantity}")
    return assignment


async def delete_assignment(db: AsyncSession, assignment_id: int) -> int:
    """Delete an assignment and return its cylinders to stock

    A missing assignment or cylinder type is tolerated. Returns the number of
    cylinders put back.
    """
    assignment = await db.get(CylinderAssignment, assignment_id)
    if assignment is None:
        logger.warning(f"Assignment {assignment_id} already deleted")
        return 0

    quantity = assignment.quantity
    cylinder_type_id = assignment.cylinder_type_id
    await db.delete(assignment)

    if not await shift_available(db, cylinder_type_id, -quantity):
        logger.warning(f"Cylinder type {cylinder_type_id} missing, {quantity} not returned")
        return 0

    logger.info(f"Deleted assignment {assignment_id}, returned {quantity} to type={cylinder_type_id}")
    return quantity


async def return_client_cylinders(db: AsyncSession, client_id: int) -> int:
    """Put every cylinder assigned to a client back into stock

    Called before a client is deleted so the deleted assignments do not take
    their cylinders with them.
    """
    result = await db.execute(
        select(CylinderAssignment).where(CylinderAssignment.client_id == client_id)
    )
    assignments: List[CylinderAssignment] = list(result.scalars().all())

    returned = 0
    for assignment in assignments:
        if await shift_available(db, assignment.cylinder_type_id, -assignment.quantity):
            returned += assignment.quantity
    if returned:
        logger.info(f"Returned {returned} cylinders from client={client_id} to stock")
    return returned
