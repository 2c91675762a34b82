"""Periodic automatic full backups."""

import logging
from contextlib import AbstractContextManager, nullcontext
from datetime import datetime

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from .ports.backup_engine import BackupEngine

logger = logging.getLogger(__name__)

JOB_ID = "auto_full_backup"


def run_scheduled_backup(engine: BackupEngine, lock: AbstractContextManager | None = None) -> None:
    """Take a full backup, holding the session lock so no command is mid-flight."""
    with lock if lock is not None else nullcontext():
        logger.info("Running scheduled backup...")
        if engine.create_full_backup() is None:
            logger.error("Scheduled backup failed")


def setup_scheduler(
    engine: BackupEngine,
    interval_minutes: int,
    lock: AbstractContextManager | None = None,
) -> BackgroundScheduler | None:
    """Schedule full backups every interval_minutes, starting now.

    Returns None when the interval is 0 or negative. The caller starts and
    shuts down the scheduler.
    """
    if interval_minutes <= 0:
        logger.info("Automatic backups disabled")
        return None

    scheduler = BackgroundScheduler()
    scheduler.add_job(
        run_scheduled_backup,
        IntervalTrigger(minutes=interval_minutes),
        args=[engine, lock],
        id=JOB_ID,
        next_run_time=datetime.now(),
        max_instances=1,
        coalesce=True,
    )
    logger.info(f"Scheduling automatic backups every {interval_minutes} minutes")
    return scheduler
