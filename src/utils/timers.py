"""
Single-shot timers backed by APScheduler
"""

import logging
import uuid
from datetime import datetime, timedelta
from typing import Any, Callable, Dict, List, Optional

import pytz

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.date import DateTrigger
from apscheduler.jobstores.base import JobLookupError
from apscheduler.jobstores.memory import MemoryJobStore
from apscheduler.executors.asyncio import AsyncIOExecutor
from apscheduler.job import Job

logger = logging.getLogger(__name__)


async def fire_timer(handle: "TimerHandle"):
    """Run a timer callback on the event loop unless it was cancelled"""
    # Coroutine jobs run on the loop itself; plain functions would be handed
    # to a thread pool by AsyncIOExecutor.
    # The executor drops a date job from the store before this task runs, so
    # a cancel in that gap can only be seen through the handle.
    if handle.cancelled:
        logger.debug(f"Skipping cancelled timer {handle.job_id}")
        return
    handle.fired = True
    handle.callback()


class TimerHandle:
    """Handle for one armed timer"""

    def __init__(self, callback: Callable[[], None], run_date: datetime):
        self.callback = callback
        self.run_date = run_date
        self.job: Optional[Job] = None
        self.cancelled = False
        self.fired = False

    @property
    def job_id(self) -> Optional[str]:
        return self.job.id if self.job else None

    def cancel(self) -> None:
        """Cancel the timer; a no-op once it has fired or been cancelled"""
        if self.cancelled:
            return
        self.cancelled = True
        if self.job is None:
            return
        try:
            self.job.remove()
        except JobLookupError:
            # Already handed to the executor or fired
            pass


class TimerService:
    """Creates and cancels single-shot timers on an AsyncIOScheduler"""

    def __init__(self):
        self.scheduler = AsyncIOScheduler(
            jobstores={"default": MemoryJobStore()},
            executors={"default": AsyncIOExecutor()},
            job_defaults={
                "coalesce": True,
                "max_instances": 1,
                # A late timer still has to flip the state
                "misfire_grace_time": None,
            },
            timezone=pytz.utc,
        )

    async def start(self):
        """Start the scheduler"""
        if not self.scheduler.running:
            self.scheduler.start()
            logger.info("TimerService started")

    async def shutdown(self):
        """Shutdown the scheduler"""
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("TimerService shutdown")

    def call_later(self, delay: timedelta, callback: Callable[[], None]) -> TimerHandle:
        """Arm a timer that runs callback once after delay"""
        run_date = datetime.now(pytz.utc) + delay
        handle = TimerHandle(callback, run_date)
        handle.job = self.scheduler.add_job(
            func=fire_timer,
            trigger=DateTrigger(run_date=run_date),
            args=[handle],
            id=f"timer_{uuid.uuid4().hex[:12]}",
            name=getattr(callback, "__qualname__", "timer"),
        )
        logger.debug(f"Armed timer {handle.job_id} for {run_date.isoformat()}")
        return handle

    def get_timers(self) -> List[Dict[str, Any]]:
        """Get all pending timers"""
        timers = []
        for job in self.scheduler.get_jobs():
            # Jobs added before start() have no next_run_time yet
            next_run_time = getattr(job, "next_run_time", None)
            timers.append(
                {
                    "id": job.id,
                    "name": job.name,
                    "next_run_time": (
                        next_run_time.isoformat() if next_run_time else None
                    ),
                }
            )
        return timers
