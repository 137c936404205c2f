"""System API - scheduler status and manual backup"""

from typing import Any
from fastapi import APIRouter, HTTPException
from fastapi.concurrency import run_in_threadpool

from khata.services.scheduler import auto_backup, get_scheduler_status

router = APIRouter()


@router.get("/scheduler")
async def scheduler_status() -> Any:
    return get_scheduler_status()


@router.post("/backup")
async def backup_now() -> Any:
    """Run the auto backup job immediately; the file copy runs in the threadpool"""
    backup_path = await run_in_threadpool(auto_backup)
    if backup_path is None:
        raise HTTPException(status_code=400, detail="Backup not available for this database")
    return {"message": "Backup written", "filename": backup_path.name}
