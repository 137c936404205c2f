"""
Dashboard and daily report aggregates

Everything here is read-only and recomputed per request.
"""

from datetime import date
from decimal import Decimal
from typing import Dict

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from khata.models.client import Client, ClientItem
from khata.models.cylinder import CylinderAssignment, CylinderType
from khata.models.produce import ChickenRecord, Vegetable
from khata.schemas.produce import ChickenRecordResponse, VegetableResponse
from khata.schemas.report import (
    ChickenSummary, ClientItemLine, ClientItemsGroup, CylinderSummary, CylinderTypeSummary,
    DailyReportResponse, DashboardResponse, VegetableSummary,
)
from khata.services.produce import ChickenTotals, chicken_totals


def _chicken_summary(totals: ChickenTotals) -> ChickenSummary:
    return ChickenSummary(
        bought_qty=totals.bought_qty,
        bought_weight=float(totals.bought_weight),
        bought_price=float(totals.bought_price),
        sold_qty=totals.sold_qty,
        sold_weight=float(totals.sold_weight),
        sold_price=float(totals.sold_price),
        remaining_qty=totals.remaining_qty,
        remaining_weight=float(totals.remaining_weight),
        profit=float(totals.profit),
    )


async def cylinder_summary(db: AsyncSession, day: date) -> CylinderSummary:
    """Cylinder counts as shown on the dashboard for ``day``"""
    assigned_result = await db.execute(
        select(CylinderAssignment.cylinder_type_id, func.sum(CylinderAssignment.quantity))
        .where(CylinderAssignment.date == day)
        .group_by(CylinderAssignment.cylinder_type_id)
    )
    assigned_by_type: Dict[int, int] = {
        type_id: int(quantity or 0) for type_id, quantity in assigned_result.all()
    }

    types = (await db.execute(select(CylinderType).order_by(CylinderType.name))).scalars().all()

    summary = CylinderSummary()
    for cylinder_type in types:
        assigned = assigned_by_type.get(cylinder_type.id, 0)
        summary.by_type.append(CylinderTypeSummary(
            cylinder_type_id=cylinder_type.id,
            name=cylinder_type.name,
            assigned=assigned,
            unassigned=cylinder_type.no_of_cylinders,
            total=cylinder_type.no_of_cylinders + assigned,
        ))
        summary.assigned += assigned
        summary.unassigned += cylinder_type.no_of_cylinders
    summary.total = summary.assigned + summary.unassigned
    return summary


async def vegetable_summary(db: AsyncSession, day: date) -> VegetableSummary:
    result = await db.execute(
        select(
            func.coalesce(func.sum(Vegetable.price_bought), 0),
            func.coalesce(func.sum(Vegetable.price_sold), 0),
        ).where(Vegetable.date == day)
    )
    bought, sold = result.one()
    bought, sold = Decimal(str(bought)), Decimal(str(sold))
    return VegetableSummary(
        total_buy_price=float(bought),
        total_sell_price=float(sold),
        profit=float(sold - bought),
    )


async def build_dashboard(db: AsyncSession, day: date) -> DashboardResponse:
    return DashboardResponse(
        date=day,
        cylinders=await cylinder_summary(db, day),
        vegetables=await vegetable_summary(db, day),
        chicken=_chicken_summary(await chicken_totals(db, day)),
    )


async def build_daily_report(db: AsyncSession, day: date) -> DailyReportResponse:
    vegetables = (await db.execute(
        select(Vegetable).where(Vegetable.date == day).order_by(Vegetable.name)
    )).scalars().all()

    chicken_records = (await db.execute(
        select(ChickenRecord).where(ChickenRecord.date == day).order_by(ChickenRecord.created_at, ChickenRecord.id)
    )).scalars().all()

    item_rows = (await db.execute(
        select(ClientItem, Client.name)
        .join(Client, Client.id == ClientItem.client_id)
        .where(ClientItem.date == day)
        .order_by(ClientItem.created_at, ClientItem.id)
    )).all()

    # Group items by client, keeping first-seen order
    groups: Dict[int, ClientItemsGroup] = {}
    for item, client_name in item_rows:
        group = groups.get(item.client_id)
        if group is None:
            group = groups[item.client_id] = ClientItemsGroup(
                client_id=item.client_id,
                client_name=client_name,
                items=[],
                total_quantity=0.0,
            )
        group.items.append(ClientItemLine(item_name=item.item_name, quantity=float(item.quantity)))
        group.total_quantity += float(item.quantity)

    return DailyReportResponse(
        date=day,
        vegetables=[VegetableResponse.model_validate(v) for v in vegetables],
        chicken_records=[ChickenRecordResponse.model_validate(r) for r in chicken_records],
        chicken=_chicken_summary(await chicken_totals(db, day)),
        client_items=list(groups.values()),
    )
