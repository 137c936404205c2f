"""
Tests for cylinder inventory reconciliation.

Covers:
- assign_cylinders(): stock decrement, exact-availability, not_enough before
  any write, same-day merge, missing client / type
- update_assignment(): diff in both directions, re-validation against current
  stock, missing assignment
- delete_assignment(): full return, already-deleted assignment
- conservation of the fleet over a random sequence of operations
- two sessions that both read the stock before writing cannot oversubscribe it
"""

import random
from datetime import date
from decimal import Decimal

import pytest
import pytest_asyncio
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from khata.core.exceptions import InsufficientStockError, InvalidFormValue, RecordNotFoundError
from khata.db.base import Base
from khata.models.cylinder import CylinderAssignment, CylinderType
from khata.services import catalogue, inventory

DAY = date(2026, 3, 1)
NEXT_DAY = date(2026, 3, 2)


async def assignment_rows(db, cylinder_type_id):
    result = await db.execute(
        select(CylinderAssignment.id, CylinderAssignment.quantity)
        .where(CylinderAssignment.cylinder_type_id == cylinder_type_id)
        .order_by(CylinderAssignment.id)
    )
    return result.all()


async def assigned_total(db, cylinder_type_id):
    result = await db.execute(
        select(func.coalesce(func.sum(CylinderAssignment.quantity), 0))
        .where(CylinderAssignment.cylinder_type_id == cylinder_type_id)
    )
    return int(result.scalar_one())


# ---------------------------------------------------------------------------
# Assign / update / delete walkthrough
# ---------------------------------------------------------------------------


async def test_assign_update_delete_walkthrough(db, make_client, make_cylinder_type):
    client_id = await make_client()
    type_id = await make_cylinder_type(stock=10)

    assignment = await inventory.assign_cylinders(db, client_id, type_id, 6, DAY)
    await db.commit()
    assignment_id = assignment.id
    assert assignment.quantity == 6
    assert await inventory.get_available(db, type_id) == 4

    # Second request for 6 on the same day exceeds the 4 left
    with pytest.raises(InsufficientStockError):
        await inventory.assign_cylinders(db, client_id, type_id, 6, DAY)
    await db.rollback()
    assert await inventory.get_available(db, type_id) == 4
    assert await assignment_rows(db, type_id) == [(assignment_id, 6)]

    await inventory.update_assignment(db, assignment_id, 3)
    await db.commit()
    assert await inventory.get_available(db, type_id) == 7
    assert await assignment_rows(db, type_id) == [(assignment_id, 3)]

    returned = await inventory.delete_assignment(db, assignment_id)
    await db.commit()
    assert returned == 3
    assert await inventory.get_available(db, type_id) == 10
    assert await assignment_rows(db, type_id) == []


async def test_assign_exactly_available_is_allowed(db, make_client, make_cylinder_type):
    client_id = await make_client()
    type_id = await make_cylinder_type(stock=5)

    await inventory.assign_cylinders(db, client_id, type_id, 5, DAY)
    await db.commit()

    assert await inventory.get_available(db, type_id) == 0


async def test_assign_more_than_available_leaves_stock_untouched(db, make_client, make_cylinder_type):
    client_id = await make_client()
    type_id = await make_cylinder_type(stock=2)

    with pytest.raises(InsufficientStockError) as exc_info:
        await inventory.assign_cylinders(db, client_id, type_id, 3, DAY)

    assert exc_info.value.code == "not_enough"
    assert await inventory.get_available(db, type_id) == 2
    assert await assignment_rows(db, type_id) == []


async def test_assign_merges_same_client_type_and_date(db, make_client, make_cylinder_type):
    client_id = await make_client()
    type_id = await make_cylinder_type(stock=10)

    first = await inventory.assign_cylinders(db, client_id, type_id, 3, DAY)
    await db.commit()
    first_id = first.id
    second = await inventory.assign_cylinders(db, client_id, type_id, 2, DAY)
    await db.commit()

    assert second.id == first_id
    assert await assignment_rows(db, type_id) == [(first_id, 5)]
    assert await inventory.get_available(db, type_id) == 5


async def test_assign_on_another_date_creates_a_new_row(db, make_client, make_cylinder_type):
    client_id = await make_client()
    type_id = await make_cylinder_type(stock=10)

    await inventory.assign_cylinders(db, client_id, type_id, 3, DAY)
    await inventory.assign_cylinders(db, client_id, type_id, 2, NEXT_DAY)
    await db.commit()

    rows = await assignment_rows(db, type_id)
    assert [quantity for _, quantity in rows] == [3, 2]
    assert await inventory.get_available(db, type_id) == 5


async def test_assign_unknown_type_reports_not_enough(db, make_client):
    client_id = await make_client()

    with pytest.raises(InsufficientStockError):
        await inventory.assign_cylinders(db, client_id, 999, 1, DAY)


async def test_assign_unknown_client_is_not_found(db, make_cylinder_type):
    type_id = await make_cylinder_type(stock=10)

    with pytest.raises(RecordNotFoundError):
        await inventory.assign_cylinders(db, 999, type_id, 1, DAY)
    assert await inventory.get_available(db, type_id) == 10


@pytest.mark.parametrize("quantity", [0, -2])
async def test_assign_rejects_non_positive_quantity(db, make_client, make_cylinder_type, quantity):
    client_id = await make_client()
    type_id = await make_cylinder_type(stock=10)

    with pytest.raises(InvalidFormValue):
        await inventory.assign_cylinders(db, client_id, type_id, quantity, DAY)
    assert await inventory.get_available(db, type_id) == 10


# ---------------------------------------------------------------------------
# Update
# ---------------------------------------------------------------------------


async def test_update_increase_checks_current_stock(db, make_client, make_cylinder_type):
    client_a = await make_client("Client A")
    client_b = await make_client("Client B")
    type_id = await make_cylinder_type(stock=10)

    assignment = await inventory.assign_cylinders(db, client_a, type_id, 4, DAY)
    await db.commit()
    assignment_id = assignment.id

    # Someone else takes most of the remaining stock afterwards
    await inventory.assign_cylinders(db, client_b, type_id, 5, DAY)
    await db.commit()
    assert await inventory.get_available(db, type_id) == 1

    with pytest.raises(InsufficientStockError):
        await inventory.update_assignment(db, assignment_id, 6)
    await db.rollback()
    assert await inventory.get_available(db, type_id) == 1

    await inventory.update_assignment(db, assignment_id, 5)
    await db.commit()
    assert await inventory.get_available(db, type_id) == 0


async def test_update_with_same_quantity_is_a_no_op(db, make_client, make_cylinder_type):
    client_id = await make_client()
    type_id = await make_cylinder_type(stock=10)
    assignment = await inventory.assign_cylinders(db, client_id, type_id, 4, DAY)
    await db.commit()

    await inventory.update_assignment(db, assignment.id, 4)
    await db.commit()

    assert await inventory.get_available(db, type_id) == 6


async def test_update_missing_assignment_is_not_found(db):
    with pytest.raises(RecordNotFoundError):
        await inventory.update_assignment(db, 12345, 2)


# ---------------------------------------------------------------------------
# Delete
# ---------------------------------------------------------------------------


async def test_delete_missing_assignment_is_tolerated(db):
    assert await inventory.delete_assignment(db, 12345) == 0


async def test_returning_to_missing_type_is_a_no_op(db):
    assert await inventory.shift_available(db, 12345, -3) is False


async def test_deleting_client_returns_its_cylinders(db, make_client, make_cylinder_type):
    client_id = await make_client()
    type_id = await make_cylinder_type(stock=10)
    await inventory.assign_cylinders(db, client_id, type_id, 4, DAY)
    await inventory.assign_cylinders(db, client_id, type_id, 2, NEXT_DAY)
    await db.commit()
    assert await inventory.get_available(db, type_id) == 4

    assert await catalogue.delete_client(db, client_id) is True
    await db.commit()

    assert await inventory.get_available(db, type_id) == 10
    assert await assignment_rows(db, type_id) == []


# ---------------------------------------------------------------------------
# Conservation
# ---------------------------------------------------------------------------


async def test_fleet_is_conserved_over_random_operations(db, make_client, make_cylinder_type):
    fleet = 20
    client_ids = [await make_client(f"Client {n}") for n in range(3)]
    type_id = await make_cylinder_type(stock=fleet)
    rng = random.Random(20260301)
    days = [DAY, NEXT_DAY]

    for _ in range(120):
        live = [row_id for row_id, _ in await assignment_rows(db, type_id)]
        op = rng.choice(["assign", "assign", "update", "delete"]) if live else "assign"
        try:
            if op == "assign":
                await inventory.assign_cylinders(
                    db, rng.choice(client_ids), type_id, rng.randint(1, 8), rng.choice(days)
                )
            elif op == "update":
                await inventory.update_assignment(db, rng.choice(live), rng.randint(1, 10))
            else:
                await inventory.delete_assignment(db, rng.choice(live))
        except InsufficientStockError:
            await db.rollback()
        else:
            await db.commit()

        available = await inventory.get_available(db, type_id)
        assert available >= 0
        assert available == fleet - await assigned_total(db, type_id)


# ---------------------------------------------------------------------------
# Two sessions competing for the same stock
# ---------------------------------------------------------------------------


@pytest_asyncio.fixture
async def file_sessions(tmp_path):
    """Session factory on a SQLite file, so every session has its own connection"""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'khata.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(bind=engine, class_=AsyncSession, autoflush=False, expire_on_commit=False)
    await engine.dispose()


async def test_two_sessions_cannot_oversubscribe_stock(file_sessions):
    async with file_sessions() as setup:
        ali = await catalogue.add_client(setup, "Ali Traders", None)
        bilal = await catalogue.add_client(setup, "Bilal Gas", None)
        cylinder_type = await catalogue.add_cylinder_type(
            setup, "12kg", Decimal("12"), Decimal("3000"), Decimal("250"), 10
        )
        await setup.commit()
        ali_id, bilal_id, type_id = ali.id, bilal.id, cylinder_type.id

    async with file_sessions() as first, file_sessions() as second:
        # Both read 10 available before either writes
        assert await inventory.get_available(first, type_id) == 10
        assert await inventory.get_available(second, type_id) == 10
        assert (await second.get(CylinderType, type_id)).no_of_cylinders == 10

        outcomes = []
        for session, client_id in ((first, ali_id), (second, bilal_id)):
            try:
                await inventory.assign_cylinders(session, client_id, type_id, 6, DAY)
                await session.commit()
                outcomes.append("ok")
            except InsufficientStockError as e:
                await session.rollback()
                outcomes.append(e.code)

    assert outcomes == ["ok", "not_enough"]

    async with file_sessions() as check:
        assert await inventory.get_available(check, type_id) == 4
        assert await assigned_total(check, type_id) == 6
        rows = (await check.execute(select(CylinderAssignment.client_id))).scalars().all()
        assert rows == [ali_id]


async def test_two_sessions_can_share_stock_that_covers_both(file_sessions):
    async with file_sessions() as setup:
        ali = await catalogue.add_client(setup, "Ali Traders", None)
        bilal = await catalogue.add_client(setup, "Bilal Gas", None)
        cylinder_type = await catalogue.add_cylinder_type(
            setup, "12kg", Decimal("12"), Decimal("3000"), Decimal("250"), 10
        )
        await setup.commit()
        ali_id, bilal_id, type_id = ali.id, bilal.id, cylinder_type.id

    async with file_sessions() as first, file_sessions() as second:
        assert await inventory.get_available(first, type_id) == 10
        assert await inventory.get_available(second, type_id) == 10

        await inventory.assign_cylinders(first, ali_id, type_id, 6, DAY)
        await first.commit()
        await inventory.assign_cylinders(second, bilal_id, type_id, 4, DAY)
        await second.commit()

    async with file_sessions() as check:
        assert await inventory.get_available(check, type_id) == 0
        assert await assigned_total(check, type_id) == 10
