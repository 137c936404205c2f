"""Chicken day book API"""

from datetime import date as date_type
from decimal import Decimal
from typing import Any, List, Optional
from fastapi import APIRouter, Depends, Form, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from khata.api.actions import run_action
from khata.core.deps import get_db
from khata.models.produce import ChickenRecord
from khata.schemas.action import ActionResult
from khata.schemas.produce import ChickenRecordResponse
from khata.services import produce
from khata.services.parsing import clean_optional, parse_date, parse_decimal, parse_int

router = APIRouter()


@router.get("/", response_model=List[ChickenRecordResponse])
async def list_chicken_records(
    *,
    db: AsyncSession = Depends(get_db),
    date: Optional[date_type] = Query(None, description="Business date, defaults to today"),
) -> Any:
    day = date or date_type.today()
    result = await db.execute(
        select(ChickenRecord)
        .where(ChickenRecord.date == day)
        .order_by(ChickenRecord.created_at.desc(), ChickenRecord.id.desc())
    )
    return result.scalars().all()


@router.post("/", response_model=ActionResult)
async def add_chicken_record(
    *,
    db: AsyncSession = Depends(get_db),
    type: Optional[str] = Form(None),
    quantity: Optional[str] = Form(None),
    weight_kg: Optional[str] = Form(None),
    price: Optional[str] = Form(None),
    date: Optional[str] = Form(None),
) -> Any:
    async def action():
        record = await produce.add_chicken_record(
            db,
            clean_optional(type),
            parse_int(quantity, "quantity", minimum=0),
            parse_decimal(weight_kg, "weight_kg"),
            parse_decimal(price, "price", default=Decimal("0")),
            parse_date(date),
        )
        return record.id
    return await run_action(db, action)


@router.delete("/{record_id}", response_model=ActionResult)
async def delete_chicken_record(*, db: AsyncSession = Depends(get_db), record_id: int) -> Any:
    async def action():
        await produce.delete_chicken_record(db, record_id)
    return await run_action(db, action)
