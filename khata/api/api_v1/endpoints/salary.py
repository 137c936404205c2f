"""Salary API"""

from decimal import Decimal
from typing import Any, List, Optional
from fastapi import APIRouter, Depends, Form, Query
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from khata.api.actions import run_action
from khata.core.deps import get_db
from khata.models.ledger import SalaryRecord
from khata.models.party import Employee
from khata.schemas.action import ActionResult
from khata.schemas.ledger import SalaryRecordResponse
from khata.schemas.party import EmployeeResponse
from khata.services import ledger
from khata.services.parsing import clean_optional, parse_decimal, parse_month

router = APIRouter()


@router.get("/", response_model=List[SalaryRecordResponse])
async def list_salaries(
    *,
    db: AsyncSession = Depends(get_db),
    month: Optional[str] = Query(None, description="YYYY-MM"),
    employee_id: Optional[int] = Query(None),
) -> Any:
    query = (
        select(SalaryRecord, Employee.name, Employee.phone)
        .join(Employee, Employee.id == SalaryRecord.employee_id)
    )
    if month:
        query = query.where(SalaryRecord.month == month)
    if employee_id:
        query = query.where(SalaryRecord.employee_id == employee_id)
    query = query.order_by(SalaryRecord.month.desc(), Employee.name)

    result = await db.execute(query)
    data = []
    for record, employee_name, employee_phone in result.all():
        resp = SalaryRecordResponse.model_validate(record)
        resp.employee_name = employee_name
        resp.employee_phone = employee_phone
        data.append(resp)
    return data


@router.get("/employees", response_model=List[EmployeeResponse])
async def list_employees(*, db: AsyncSession = Depends(get_db)) -> Any:
    """Employees with their outstanding salary (sum of remaining)"""
    outstanding = (
        select(
            SalaryRecord.employee_id,
            func.sum(SalaryRecord.remaining).label("balance"),
        )
        .group_by(SalaryRecord.employee_id)
        .subquery()
    )
    result = await db.execute(
        select(Employee, outstanding.c.balance)
        .join(outstanding, outstanding.c.employee_id == Employee.id, isouter=True)
        .order_by(Employee.name)
    )
    data = []
    for employee, balance in result.all():
        resp = EmployeeResponse.model_validate(employee)
        resp.balance = float(balance or 0)
        data.append(resp)
    return data


@router.post("/", response_model=ActionResult)
async def add_salary(
    *,
    db: AsyncSession = Depends(get_db),
    employee_name: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
    month: Optional[str] = Form(None),
    total_pay: Optional[str] = Form(None),
    paid: Optional[str] = Form(None),
) -> Any:
    async def action():
        record = await ledger.SALARIES.record_line(
            db,
            employee_name,
            clean_optional(phone),
            parse_month(month),
            parse_decimal(total_pay, "total_pay"),
            parse_decimal(paid, "paid", default=Decimal("0")),
        )
        return record.id
    return await run_action(db, action)


@router.put("/{record_id}", response_model=ActionResult)
async def update_salary(
    *,
    db: AsyncSession = Depends(get_db),
    record_id: int,
    total_pay: Optional[str] = Form(None),
    paid: Optional[str] = Form(None),
    phone: Optional[str] = Form(None),
) -> Any:
    async def action():
        record = await ledger.SALARIES.update_line(
            db,
            record_id,
            parse_decimal(total_pay, "total_pay"),
            parse_decimal(paid, "paid", default=Decimal("0")),
            phone=clean_optional(phone),
        )
        return record.id
    return await run_action(db, action)


@router.delete("/{record_id}", response_model=ActionResult)
async def delete_salary(*, db: AsyncSession = Depends(get_db), record_id: int) -> Any:
    async def action():
        await ledger.SALARIES.delete_line(db, record_id)
    return await run_action(db, action)
