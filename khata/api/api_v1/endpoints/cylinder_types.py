"""Cylinder type API"""

from typing import Any, List, Optional
from fastapi import APIRouter, Depends, Form
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from khata.api.actions import run_action
from khata.core.deps import get_db
from khata.models.cylinder import CylinderType
from khata.schemas.action import ActionResult
from khata.schemas.cylinder import CylinderTypeResponse
from khata.services import catalogue
from khata.services.parsing import parse_decimal, parse_int

router = APIRouter()


@router.get("/", response_model=List[CylinderTypeResponse])
async def list_cylinder_types(*, db: AsyncSession = Depends(get_db)) -> Any:
    result = await db.execute(select(CylinderType).order_by(CylinderType.name))
    return result.scalars().all()


@router.post("/", response_model=ActionResult)
async def add_cylinder_type(
    *,
    db: AsyncSession = Depends(get_db),
    name: Optional[str] = Form(None),
    weight_kg: Optional[str] = Form(None),
    cylinder_price: Optional[str] = Form(None),
    gas_price: Optional[str] = Form(None),
    no_of_cylinders: Optional[str] = Form(None),
) -> Any:
    async def action():
        cylinder_type = await catalogue.add_cylinder_type(
            db,
            name,
            parse_decimal(weight_kg, "weight_kg"),
            parse_decimal(cylinder_price, "cylinder_price"),
            parse_decimal(gas_price, "gas_price"),
            parse_int(no_of_cylinders, "no_of_cylinders"),
        )
        return cylinder_type.id
    return await run_action(db, action)


@router.put("/{cylinder_type_id}", response_model=ActionResult)
async def update_cylinder_type(
    *,
    db: AsyncSession = Depends(get_db),
    cylinder_type_id: int,
    name: Optional[str] = Form(None),
    weight_kg: Optional[str] = Form(None),
    cylinder_price: Optional[str] = Form(None),
    gas_price: Optional[str] = Form(None),
    no_of_cylinders: Optional[str] = Form(None),
) -> Any:
    async def action():
        cylinder_type = await catalogue.update_cylinder_type(
            db,
            cylinder_type_id,
            name,
            parse_decimal(weight_kg, "weight_kg"),
            parse_decimal(cylinder_price, "cylinder_price"),
            parse_decimal(gas_price, "gas_price"),
            parse_int(no_of_cylinders, "no_of_cylinders"),
        )
        return cylinder_type.id
    return await run_action(db, action)


@router.delete("/{cylinder_type_id}", response_model=ActionResult)
async def delete_cylinder_type(*, db: AsyncSession = Depends(get_db), cylinder_type_id: int) -> Any:
    async def action():
        await catalogue.delete_cylinder_type(db, cylinder_type_id)
    return await run_action(db, action)
