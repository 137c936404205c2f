"""Dashboard and report API"""

from datetime import date as date_type
from typing import Any, Optional
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from khata.core.deps import get_db
from khata.schemas.report import DailyReportResponse, DashboardResponse
from khata.services.reports import build_daily_report, build_dashboard

router = APIRouter()


@router.get("/dashboard", response_model=DashboardResponse)
async def dashboard(
    *,
    db: AsyncSession = Depends(get_db),
    date: Optional[date_type] = Query(None, description="Defaults to today"),
) -> Any:
    return await build_dashboard(db, date or date_type.today())


@router.get("/daily", response_model=DailyReportResponse)
async def daily_report(
    *,
    db: AsyncSession = Depends(get_db),
    date: Optional[date_type] = Query(None, description="Defaults to today"),
) -> Any:
    return await build_daily_report(db, date or date_type.today())
