"""
Vegetable and chicken day books

Vegetables track bought / sold per row and are not stock-checked: a sale larger
than what was bought simply shows a negative remaining. Chicken sales are
checked against the day's remaining birds and weight.
"""

import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from khata.core.exceptions import InsufficientStockError, InvalidFormValue, RecordNotFoundError
from khata.models.produce import ChickenRecord, Vegetable
from khata.services.naming import normalize_name

logger = logging.getLogger(__name__)

CHICKEN_TYPES = ("bought", "sold")


# ===== Vegetables =====

async def add_vegetable(
    db: AsyncSession,
    name: str,
    qty_bought: Decimal,
    price_bought: Decimal,
    day: date,
) -> Vegetable:
    vegetable = Vegetable(
        name=normalize_name(name),
        qty_bought=qty_bought,
        price_bought=price_bought,
        qty_sold=Decimal("0"),
        price_sold=Decimal("0"),
        date=day,
    )
    db.add(vegetable)
    await db.flush()
    logger.info(f"Bought {qty_bought} {vegetable.name} for {price_bought} on {day}")
    return vegetable


async def update_vegetable(
    db: AsyncSession,
    vegetable_id: int,
    qty_sold: Decimal,
    price_sold: Decimal,
) -> Vegetable:
    vegetable = await db.get(Vegetable, vegetable_id)
    if vegetable is None:
        logger.warning(f"Vegetable {vegetable_id} not found")
        raise RecordNotFoundError(f"vegetable {vegetable_id} not found")
    vegetable.qty_sold = qty_sold
    vegetable.price_sold = price_sold
    if vegetable.remaining < 0:
        logger.warning(f"Vegetable {vegetable_id} ({vegetable.name}) sold more than bought: {vegetable.remaining}")
    logger.info(f"Sold {qty_sold} {vegetable.name} for {price_sold}")
    return vegetable


async def delete_vegetable(db: AsyncSession, vegetable_id: int) -> bool:
    vegetable = await db.get(Vegetable, vegetable_id)
    if vegetable is None:
        return False
    await db.delete(vegetable)
    logger.info(f"Deleted vegetable {vegetable_id}")
    return True


# ===== Chicken =====

@dataclass
class ChickenTotals:
    bought_qty: int = 0
    bought_weight: Decimal = Decimal("0")
    bought_price: Decimal = Decimal("0")
    sold_qty: int = 0
    sold_weight: Decimal = Decimal("0")
    sold_price: Decimal = Decimal("0")

    @property
    def remaining_qty(self) -> int:
        return self.bought_qty - self.sold_qty

    @property
    def remaining_weight(self) -> Decimal:
        return self.bought_weight - self.sold_weight

    @property
    def profit(self) -> Decimal:
        return self.sold_price - self.bought_price


async def chicken_totals(db: AsyncSession, day: date) -> ChickenTotals:
    result = await db.execute(
        select(
            ChickenRecord.type,
            func.coalesce(func.sum(ChickenRecord.quantity), 0),
            func.coalesce(func.sum(ChickenRecord.weight_kg), 0),
            func.coalesce(func.sum(ChickenRecord.price), 0),
        )
        .where(ChickenRecord.date == day)
        .group_by(ChickenRecord.type)
    )
    totals = ChickenTotals()
    for record_type, qty, weight, price in result.all():
        if record_type == "bought":
            totals.bought_qty = int(qty)
            totals.bought_weight = Decimal(str(weight))
            totals.bought_price = Decimal(str(price))
        elif record_type == "sold":
            totals.sold_qty = int(qty)
            totals.sold_weight = Decimal(str(weight))
            totals.sold_price = Decimal(str(price))
    return totals


async def add_chicken_record(
    db: AsyncSession,
    record_type: str,
    quantity: int,
    weight_kg: Decimal,
    price: Decimal,
    day: date,
) -> ChickenRecord:
    """Record chicken bought or sold; a sale may not exceed the day's remaining

    An oversell raises InsufficientStockError, so the route reports the same
    "not_enough" code as cylinders. The exception message keeps the wording
    "Sold cannot exceed remaining quantity" for the log.
    """
    if record_type not in CHICKEN_TYPES:
        raise InvalidFormValue(f"type must be one of {', '.join(CHICKEN_TYPES)}")

    if record_type == "sold":
        totals = await chicken_totals(db, day)
        if quantity > totals.remaining_qty or weight_kg > totals.remaining_weight:
            logger.warning(
                f"Chicken sale rejected on {day}: {quantity} / {weight_kg}kg requested, "
                f"{totals.remaining_qty} / {totals.remaining_weight}kg remaining"
            )
            raise InsufficientStockError("Sold cannot exceed remaining quantity")

    record = ChickenRecord(
        type=record_type,
        quantity=quantity,
        weight_kg=weight_kg,
        price=price,
        date=day,
    )
    db.add(record)
    await db.flush()
    logger.info(f"Chicken {record_type} on {day}: {quantity} birds, {weight_kg}kg, {price}")
    return record


async def delete_chicken_record(db: AsyncSession, record_id: int) -> bool:
    record = await db.get(ChickenRecord, record_id)
    if record is None:
        return False
    await db.delete(record)
    logger.info(f"Deleted chicken record {record_id}")
    return True
