"""Cylinder assignment API"""

from datetime import date as date_type
from typing import Any, List, Optional
from fastapi import APIRouter, Depends, Form, Query
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from khata.api.actions import run_action
from khata.core.deps import get_db
from khata.models.client import Client
from khata.models.cylinder import CylinderAssignment, CylinderType
from khata.schemas.action import ActionResult
from khata.schemas.cylinder import CylinderAssignmentResponse
from khata.services import inventory
from khata.services.parsing import parse_date, parse_id, parse_int

router = APIRouter()


@router.get("/assignments", response_model=List[CylinderAssignmentResponse])
async def list_assignments(
    *,
    db: AsyncSession = Depends(get_db),
    date: Optional[date_type] = Query(None, description="Only this date (YYYY-MM-DD)"),
    client_id: Optional[int] = Query(None),
) -> Any:
    """Assignments with client and cylinder type names, newest first"""
    query = (
        select(CylinderAssignment, Client.name, CylinderType.name)
        .join(Client, Client.id == CylinderAssignment.client_id)
        .join(CylinderType, CylinderType.id == CylinderAssignment.cylinder_type_id)
    )
    if date:
        query = query.where(CylinderAssignment.date == date)
    if client_id:
        query = query.where(CylinderAssignment.client_id == client_id)
    query = query.order_by(CylinderAssignment.date.desc(), CylinderAssignment.created_at.desc())

    result = await db.execute(query)
    data = []
    for assignment, client_name, type_name in result.all():
        resp = CylinderAssignmentResponse.model_validate(assignment)
        resp.client_name = client_name
        resp.cylinder_type_name = type_name
        data.append(resp)
    return data


@router.post("/assignments", response_model=ActionResult)
async def assign_cylinder(
    *,
    db: AsyncSession = Depends(get_db),
    client_id: Optional[str] = Form(None),
    cylinder_type_id: Optional[str] = Form(None),
    quantity: Optional[str] = Form(None),
    date: Optional[str] = Form(None),
) -> Any:
    async def action():
        assignment = await inventory.assign_cylinders(
            db,
            parse_id(client_id, "client_id"),
            parse_id(cylinder_type_id, "cylinder_type_id"),
            parse_int(quantity, "quantity", minimum=1),
            parse_date(date),
        )
        return assignment.id
    return await run_action(db, action)


@router.put("/assignments/{assignment_id}", response_model=ActionResult)
async def update_assignment(
    *,
    db: AsyncSession = Depends(get_db),
    assignment_id: int,
    quantity: Optional[str] = Form(None),
) -> Any:
    async def action():
        assignment = await inventory.update_assignment(
            db, assignment_id, parse_int(quantity, "quantity", minimum=1)
        )
        return assignment.id
    return await run_action(db, action)


@router.delete("/assignments/{assignment_id}", response_model=ActionResult)
async def delete_assignment(*, db: AsyncSession = Depends(get_db), assignment_id: int) -> Any:
    async def action():
        await inventory.delete_assignment(db, assignment_id)
    return await run_action(db, action)
