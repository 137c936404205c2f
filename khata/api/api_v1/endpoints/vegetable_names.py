"""Vegetable name API"""

from typing import Any, List, Optional
from fastapi import APIRouter, Depends, Form
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from khata.api.actions import run_action
from khata.core.deps import get_db
from khata.models.produce import VegetableName
from khata.schemas.action import ActionResult
from khata.schemas.produce import VegetableNameResponse
from khata.services import catalogue
from khata.services.parsing import clean_optional

router = APIRouter()


@router.get("/", response_model=List[VegetableNameResponse])
async def list_vegetable_names(*, db: AsyncSession = Depends(get_db)) -> Any:
    result = await db.execute(select(VegetableName).order_by(VegetableName.name))
    return result.scalars().all()


@router.post("/", response_model=ActionResult)
async def add_vegetable_name(
    *,
    db: AsyncSession = Depends(get_db),
    name: Optional[str] = Form(None),
    unit: Optional[str] = Form(None),
) -> Any:
    async def action():
        vegetable_name = await catalogue.add_vegetable_name(db, name, clean_optional(unit))
        return vegetable_name.id
    return await run_action(db, action)


@router.put("/{vegetable_name_id}", response_model=ActionResult)
async def update_vegetable_name(
    *,
    db: AsyncSession = Depends(get_db),
    vegetable_name_id: int,
    name: Optional[str] = Form(None),
    unit: Optional[str] = Form(None),
) -> Any:
    async def action():
        vegetable_name = await catalogue.update_vegetable_name(
            db, vegetable_name_id, name, clean_optional(unit)
        )
        return vegetable_name.id
    return await run_action(db, action)


@router.delete("/{vegetable_name_id}", response_model=ActionResult)
async def delete_vegetable_name(*, db: AsyncSession = Depends(get_db), vegetable_name_id: int) -> Any:
    async def action():
        await catalogue.delete_vegetable_name(db, vegetable_name_id)
    return await run_action(db, action)
