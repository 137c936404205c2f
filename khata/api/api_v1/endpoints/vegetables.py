"""Vegetable day book API"""

from datetime import date as date_type
from decimal import Decimal
from typing import Any, List, Optional
from fastapi import APIRouter, Depends, Form, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from khata.api.actions import run_action
from khata.core.deps import get_db
from khata.models.produce import Vegetable
from khata.schemas.action import ActionResult
from khata.schemas.produce import VegetableResponse
from khata.services import produce
from khata.services.parsing import parse_date, parse_decimal

router = APIRouter()


@router.get("/", response_model=List[VegetableResponse])
async def list_vegetables(
    *,
    db: AsyncSession = Depends(get_db),
    date: Optional[date_type] = Query(None, description="Business date, defaults to today"),
) -> Any:
    day = date or date_type.today()
    result = await db.execute(
        select(Vegetable).where(Vegetable.date == day).order_by(Vegetable.name)
    )
    return result.scalars().all()


@router.post("/", response_model=ActionResult)
async def add_vegetable(
    *,
    db: AsyncSession = Depends(get_db),
    name: Optional[str] = Form(None),
    qty_bought: Optional[str] = Form(None),
    price_bought: Optional[str] = Form(None),
    date: Optional[str] = Form(None),
) -> Any:
    async def action():
        vegetable = await produce.add_vegetable(
            db,
            name,
            parse_decimal(qty_bought, "qty_bought", default=Decimal("0")),
            parse_decimal(price_bought, "price_bought", default=Decimal("0")),
            parse_date(date),
        )
        return vegetable.id
    return await run_action(db, action)


@router.put("/{vegetable_id}", response_model=ActionResult)
async def update_vegetable(
    *,
    db: AsyncSession = Depends(get_db),
    vegetable_id: int,
    qty_sold: Optional[str] = Form(None),
    price_sold: Optional[str] = Form(None),
) -> Any:
    async def action():
        vegetable = await produce.update_vegetable(
            db,
            vegetable_id,
            parse_decimal(qty_sold, "qty_sold", default=Decimal("0")),
            parse_decimal(price_sold, "price_sold", default=Decimal("0")),
        )
        return vegetable.id
    return await run_action(db, action)


@router.delete("/{vegetable_id}", response_model=ActionResult)
async def delete_vegetable(*, db: AsyncSession = Depends(get_db), vegetable_id: int) -> Any:
    async def action():
        await produce.delete_vegetable(db, vegetable_id)
    return await run_action(db, action)
