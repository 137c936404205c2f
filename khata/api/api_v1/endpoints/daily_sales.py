"""Daily sales API - opening sheet, sales and customer balances"""

from datetime import date as date_type
from decimal import Decimal
from typing import Any, List, Optional
from fastapi import APIRouter, Depends, Form, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from khata.api.actions import run_action
from khata.core.deps import get_db
from khata.models.ledger import DailySale, DailySaleSheet
from khata.models.party import Customer
from khata.schemas.action import ActionResult
from khata.schemas.ledger import DailySaleDayResponse, DailySaleResponse, DailySaleSheetResponse
from khata.schemas.party import CustomerResponse
from khata.services import ledger
from khata.services.naming import name_key
from khata.services.parsing import clean_optional, parse_date, parse_decimal, parse_int

router = APIRouter()


@router.get("/", response_model=DailySaleDayResponse)
async def get_day(
    *,
    db: AsyncSession = Depends(get_db),
    date: Optional[date_type] = Query(None, description="Business date, defaults to today"),
) -> Any:
    """Opening sheet, sales and totals for one day"""
    day = date or date_type.today()

    opening = (await db.execute(
        select(DailySaleSheet).where(DailySaleSheet.date == day)
    )).scalars().first()

    result = await db.execute(
        select(DailySale, Customer.name, Customer.phone)
        .join(Customer, Customer.id == DailySale.customer_id)
        .where(DailySale.date == day)
        .order_by(DailySale.created_at, DailySale.id)
    )

    data = []
    total_amount = total_paid = total_remaining = total_gas = Decimal("0")
    for sale, customer_name, customer_phone in result.all():
        resp = DailySaleResponse.model_validate(sale)
        resp.customer_name = customer_name
        resp.customer_phone = customer_phone
        data.append(resp)
        total_amount += sale.total_amount
        total_paid += sale.paid
        total_remaining += sale.remaining
        total_gas += sale.gas_kg or Decimal("0")

    return DailySaleDayResponse(
        date=day,
        opening=DailySaleSheetResponse.model_validate(opening) if opening else None,
        data=data,
        total_amount=float(total_amount),
        total_paid=float(total_paid),
        total_remaining=float(total_remaining),
        total_gas_kg=float(total_gas),
    )


@router.get("/customers", response_model=List[CustomerResponse])
async def list_customers(
    *,
    db: AsyncSession = Depends(get_db),
    search: Optional[str] = Query(None, description="Name contains"),
) -> Any:
    query = select(Customer)
    if search:
        query = query.where(Customer.name_key.contains(name_key(search), autoescape=True))
    result = await db.execute(query.order_by(Customer.name))
    return result.scalars().all()


@router.post("/opening", response_model=ActionResult)
async def save_day_opening(
    *,
    db: AsyncSession = Depends(get_db),
    date: Optional[str] = Form(None),
    total_cylinders: Optional[str] = Form(None),
    total_gas_kg: Optional[str] = Form(None),
) -> Any:
    async def action():
        sheet = await ledger.save_day_opening(
            db,
            parse_date(date),
            parse_int(total_cylinders, "total_cylinders", default=0, minimum=0),
            parse_decimal(total_gas_kg, "total_gas_kg", default=Decimal("0")),
        )
        return sheet.id
    return await run_action(db, action)


@router.post("/", response_model=ActionResult)
async def add_daily_sale(
    *,
    db: AsyncSession = Depends(get_db),
    date: Optional[str] = Form(None),
    customer_name: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    sale_type: Optional[str] = Form(None),
    gas_kg: Optional[str] = Form(None),
    total_amount: Optional[str] = Form(None),
    paid: Optional[str] = Form(None),
) -> Any:
    async def action():
        sale = await ledger.record_daily_sale(
            db,
            parse_date(date),
            customer_name,
            clean_optional(phone),
            clean_optional(sale_type),
            parse_decimal(gas_kg, "gas_kg", default=None),
            parse_decimal(total_amount, "total_amount"),
            parse_decimal(paid, "paid", default=Decimal("0")),
        )
        return sale.id
    return await run_action(db, action)


@router.delete("/{sale_id}", response_model=ActionResult)
async def delete_daily_sale(*, db: AsyncSession = Depends(get_db), sale_id: int) -> Any:
    async def action():
        await ledger.DAILY_SALES.delete_line(db, sale_id)
    return await run_action(db, action)
