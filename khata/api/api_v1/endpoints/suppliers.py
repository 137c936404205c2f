"""Supplier API - one running bill per supplier"""

from decimal import Decimal
from typing import Any, List, Optional
from fastapi import APIRouter, Depends, Form
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from khata.api.actions import run_action
from khata.core.deps import get_db
from khata.models.party import Supplier
from khata.schemas.action import ActionResult
from khata.schemas.party import SupplierResponse
from khata.services.ledger import SUPPLIERS
from khata.services.parsing import clean_optional, parse_decimal

router = APIRouter()


@router.get("/", response_model=List[SupplierResponse])
async def list_suppliers(*, db: AsyncSession = Depends(get_db)) -> Any:
    result = await db.execute(select(Supplier).order_by(Supplier.name))
    return result.scalars().all()


@router.post("/", response_model=ActionResult)
async def add_supplier(
    *,
    db: AsyncSession = Depends(get_db),
    name: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    total_bill: Optional[str] = Form(None),
    paid: Optional[str] = Form(None),
) -> Any:
    async def action():
        supplier, _ = await SUPPLIERS.upsert_by_name(
            db,
            name,
            clean_optional(phone),
            parse_decimal(total_bill, "total_bill", default=Decimal("0")),
            parse_decimal(paid, "paid", default=Decimal("0")),
        )
        return supplier.id
    return await run_action(db, action)


@router.put("/{supplier_id}", response_model=ActionResult)
async def update_supplier(
    *,
    db: AsyncSession = Depends(get_db),
    supplier_id: int,
    phone: Optional[str] = Form(None),
    total_bill: Optional[str] = Form(None),
    paid: Optional[str] = Form(None),
) -> Any:
    async def action():
        supplier = await SUPPLIERS.update(
            db,
            supplier_id,
            clean_optional(phone),
            parse_decimal(total_bill, "total_bill", default=Decimal("0")),
            parse_decimal(paid, "paid", default=Decimal("0")),
        )
        return supplier.id
    return await run_action(db, action)


@router.delete("/{supplier_id}", response_model=ActionResult)
async def delete_supplier(*, db: AsyncSession = Depends(get_db), supplier_id: int) -> Any:
    async def action():
        await SUPPLIERS.delete(db, supplier_id)
    return await run_action(db, action)
