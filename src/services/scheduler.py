import asyncio
import logging
from datetime import datetime, timedelta
from typing import Any, Awaitable, Callable, Optional

logger = logging.getLogger(__name__)


def next_run_time(hour: int = 8, minute: int = 0, now: Optional[datetime] = None) -> datetime:
    now = now or datetime.now()
    run = now.replace(hour=hour, minute=minute, second=0, microsecond=0)
    if run <= now:
        run += timedelta(days=1)
    return run


class DailyScheduler:
    """
    Fires `job` once a day at hour:minute and on demand via run_now().

    At most one run is in flight at a time: a scheduled tick that finds a
    run in progress is skipped, and run_now() waits for its turn.
    """

    def __init__(
        self,
        job: Callable[[], Awaitable[Any]],
        hour: int = 8,
        minute: int = 0,
    ):
        self.job = job
        self.hour = hour
        self.minute = minute
        self._lock = asyncio.Lock()
        self._stopping = asyncio.Event()
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    def seconds_until_next_run(self) -> float:
        now = datetime.now()
        return (next_run_time(self.hour, self.minute, now) - now).total_seconds()

    def start(self) -> None:
        if self.running:
            logger.warning("Scheduler already running")
            return
        self._stopping.clear()
        self._task = asyncio.create_task(self._loop())
        logger.info(f"Scheduler started: daily at {self.hour:02d}:{self.minute:02d}")

    async def stop(self) -> None:
        """
        Stop the timer and let an in-flight run finish.
        """
        self._stopping.set()
        if self._task is not None:
            await self._task
            self._task = None
        async with self._lock:
            pass
        logger.info("Scheduler stopped")

    async def run_now(self) -> Any:
        """
        Run the job immediately. Errors propagate to the caller.
        """
        async with self._lock:
            logger.info("Running workflow on demand")
            return await self.job()

    async def _tick(self) -> None:
        if self._lock.locked():
            logger.warning("Previous run still in progress, skipping scheduled tick")
            return

        async with self._lock:
            started = datetime.now()
            logger.info(f"[{started.isoformat()}] Starting scheduled workflow run")
            try:
                result = await self.job()
                logger.info(f"Scheduled run completed successfully: {result}")
            except Exception as e:
                logger.exception(f"Scheduled run failed: {e}")

    async def _loop(self) -> None:
        while not self._stopping.is_set():
            delay = self.seconds_until_next_run()
            logger.info(f"Next run in {delay:.0f}s")
            try:
                await asyncio.wait_for(self._stopping.wait(), timeout=delay)
            except asyncio.TimeoutError:
                await self._tick()
