"""
Scheduled jobs
APScheduler runs the daily copy of the SQLite database file
"""

import logging
import shutil
from datetime import datetime
from pathlib import Path
from typing import Optional

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.cron import CronTrigger

from khata.core.config import settings

logger = logging.getLogger(__name__)

BACKUP_PREFIX = "auto_backup_"

scheduler: Optional[AsyncIOScheduler] = None


def get_db_path(uri: Optional[str] = None) -> Optional[Path]:
    """Database file behind a SQLite URI, None for any other database"""
    uri = uri or settings.SQLITE_DATABASE_URI
    for prefix in ("sqlite+aiosqlite:///", "sqlite:///"):
        if uri.startswith(prefix):
            path = uri[len(prefix):]
            if not path or path == ":memory:":
                return None
            return Path(path)
    return None


def get_backup_dir(db_path: Path) -> Path:
    backup_dir = db_path.resolve().parent / "backups"
    backup_dir.mkdir(parents=True, exist_ok=True)
    return backup_dir


def auto_backup(db_path: Optional[Path] = None, keep_count: Optional[int] = None) -> Optional[Path]:
    """Copy the database file into backups/ and prune old copies"""
    db_path = db_path or get_db_path()
    if db_path is None:
        logger.warning("Auto backup skipped: database is not a SQLite file")
        return None
    if not db_path.exists():
        logger.warning(f"Auto backup skipped: database file not found: {db_path}")
        return None

    backup_dir = get_backup_dir(db_path)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S_%f")
    backup_path = backup_dir / f"{BACKUP_PREFIX}{timestamp}.db"

    try:
        shutil.copy2(db_path, backup_path)
    except OSError as e:
        logger.error(f"❌ Auto backup failed: {e}")
        return None

    size_mb = backup_path.stat().st_size / 1024 / 1024
    logger.info(f"✅ Auto backup written: {backup_path.name} ({size_mb:.2f} MB)")

    cleanup_old_backups(backup_dir, keep_count=keep_count or settings.AUTO_BACKUP_KEEP_COUNT)
    return backup_path


def cleanup_old_backups(backup_dir: Path, keep_count: int = 7) -> int:
    """Keep the newest ``keep_count`` auto backups, returns how many were removed"""
    backups = sorted(
        (p for p in backup_dir.glob(f"{BACKUP_PREFIX}*.db") if p.is_file()),
        key=lambda p: (p.stat().st_mtime, p.name),
        reverse=True,
    )
    removed = 0
    for old in backups[keep_count:]:
        try:
            old.unlink()
        except OSError as e:
            logger.warning(f"Could not remove old backup {old.name}: {e}")
            continue
        removed += 1
        logger.info(f"🗑️ Removed old backup: {old.name}")
    return removed


def init_scheduler():
    """Start the scheduler if automatic backups are enabled"""
    global scheduler

    if not settings.AUTO_BACKUP_ENABLED:
        logger.info("📦 Automatic backup disabled")
        return
    if get_db_path() is None:
        logger.info("📦 Automatic backup only supports SQLite, not scheduled")
        return

    scheduler = AsyncIOScheduler()
    scheduler.add_job(
        auto_backup,
        trigger=CronTrigger(
            hour=settings.AUTO_BACKUP_HOUR,
            minute=settings.AUTO_BACKUP_MINUTE
        ),
        id="auto_backup",
        name="Database auto backup",
        replace_existing=True
    )
    scheduler.start()
    logger.info(
        f"⏰ Scheduler started - daily backup at {settings.AUTO_BACKUP_HOUR:02d}:{settings.AUTO_BACKUP_MINUTE:02d}"
    )


def shutdown_scheduler():
    global scheduler
    if scheduler:
        scheduler.shutdown()
        scheduler = None
        logger.info("⏰ Scheduler stopped")


def get_scheduler_status() -> dict:
    if not scheduler:
        return {
            "enabled": settings.AUTO_BACKUP_ENABLED,
            "running": False,
            "jobs": []
        }

    jobs = []
    for job in scheduler.get_jobs():
        jobs.append({
            "id": job.id,
            "name": job.name,
            "next_run_time": job.next_run_time.isoformat() if job.next_run_time else None
        })

    return {
        "enabled": settings.AUTO_BACKUP_ENABLED,
        "running": scheduler.running,
        "jobs": jobs
    }
