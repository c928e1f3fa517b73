"""
Background task that refreshes app-meta.json once a day.
"""
from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timedelta
from typing import Optional

from app.core.dependencies import get_settings
from app.services.metadata_refresh import RefreshReport, run_refresh

logger = logging.getLogger(__name__)


async def refresh_metadata() -> Optional[RefreshReport]:
    """
    Single scheduled run. Errors are logged so a bad run (e.g. an unreadable
    catalog) does not stop the next day's run.
    """
    try:
        return await run_refresh(get_settings())
    except Exception as e:
        logger.error(f"Metadata refresh failed: {e}", exc_info=True)
        return None


def _seconds_until(hour: int, minute: int, now: Optional[datetime] = None) -> float:
    """
    Compute seconds until the next occurrence of the given local wall-clock time.
    """
    now = now or datetime.now()
    target = now.replace(hour=hour, minute=minute, second=0, microsecond=0)
    if target <= now:
        target = target + timedelta(days=1)
    return (target - now).total_seconds()


async def daily_update_loop(run_hour: int = 6, run_minute: int = 0):
    """
    Run the metadata refresh every day at a fixed local time (default 06:00).
    """
    while True:
        await asyncio.sleep(_seconds_until(run_hour, run_minute))
        await refresh_metadata()
