"""
Periodic wallet balance reconciliation.

The worker lives on the application's event loop. Each run hands
the (blocking, SQLAlchemy) sync to a thread and waits for it with a
timeout, so a slow database never stalls request handling.
"""

import asyncio
import logging
import threading
import uuid
from datetime import datetime, timedelta

from finance_manager.errors import AppError, ConflictError
from finance_manager.schemas.balance_sync import SyncResult, WorkerStatus
from finance_manager.services.balance_sync_service import BalanceSyncService

logger = logging.getLogger(__name__)


class BalanceSyncWorker:

    def __init__(
        self,
        service: BalanceSyncService,
        interval_seconds: float = 86400,
        timeout_seconds: float = 600,
        enabled: bool = True,
    ):
        self.service = service
        self.interval_seconds = interval_seconds
        self.timeout_seconds = timeout_seconds
        self.enabled = enabled

        self._task: asyncio.Task | None = None
        self._run_lock = asyncio.Lock()
        self.next_run_at: datetime | None = None
        self.last_run: SyncResult | None = None
        self.last_error: str | None = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        if self.is_running:
            logger.info("balance sync worker is already running")
            return

        self._schedule_next()
        self._task = asyncio.create_task(self._loop())
        logger.info("balance sync worker started", extra={
            "interval_seconds": self.interval_seconds,
            "timeout_seconds": self.timeout_seconds,
        })

    async def stop(self) -> None:
        if not self.is_running:
            logger.info("balance sync worker is not running")
            return

        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        self.next_run_at = None
        logger.info("balance sync worker stopped")

    def _schedule_next(self) -> None:
        self.next_run_at = datetime.utcnow() + timedelta(
            seconds=self.interval_seconds
        )

    async def _loop(self) -> None:
        while True:
            await asyncio.sleep(self.interval_seconds)
            try:
                await self.run_once()
            except ConflictError:
                logger.info("skipping scheduled wallet balance sync, a run is in progress")
            self._schedule_next()

    async def run_once(
        self, wallet_ids: list[uuid.UUID] | None = None
    ) -> SyncResult | None:
        """
        Run one sync and remember its outcome.

        Only one run happens at a time; starting another while one is
        in progress raises ConflictError. A run that fails as a whole
        (timeout, database down) is logged and kept in ``last_error``;
        the loop carries on with the next interval. Returns None in
        that case.

        On timeout the sync thread is told to stop and is waited for,
        so it finishes at most the wallet it is on and nothing it does
        overlaps the next run.
        """
        if self._run_lock.locked():
            raise ConflictError("balance sync is already running")

        async with self._run_lock:
            started = datetime.utcnow()
            logger.info("starting scheduled wallet balance sync", extra={
                "scheduled_time": started,
            })

            stop = threading.Event()
            job = asyncio.ensure_future(asyncio.to_thread(
                self.service.sync_all_wallet_balances, wallet_ids, stop.is_set
            ))
            try:
                result = await asyncio.wait_for(
                    asyncio.shield(job), timeout=self.timeout_seconds
                )
            except asyncio.TimeoutError:
                self.last_error = (
                    f"balance sync timed out after {self.timeout_seconds}s"
                )
                logger.error("wallet balance sync timed out", extra={
                    "timeout_seconds": self.timeout_seconds,
                    "job_duration": str(datetime.utcnow() - started),
                })
                return None
            except Exception as e:
                # Only the client-safe message; the details go to the log
                self.last_error = (
                    e.message if isinstance(e, AppError) else "balance sync failed"
                )
                logger.error("wallet balance sync failed", exc_info=True, extra={
                    "job_duration": str(datetime.utcnow() - started),
                })
                return None
            finally:
                if not job.done():
                    stop.set()
                    await asyncio.gather(job, return_exceptions=True)
                    logger.info("wallet balance sync thread stopped", extra={
                        "job_duration": str(datetime.utcnow() - started),
                    })

            self.last_run = result
            self.last_error = None
            logger.info("wallet balance sync completed", extra={
                "job_duration": str(datetime.utcnow() - started),
                "total_wallets": result.total,
                "corrected_count": result.corrected,
                "error_count": result.failed,
            })
            return result

    async def trigger_sync(
        self, wallet_ids: list[uuid.UUID] | None = None
    ) -> SyncResult | None:
        """Run a sync now, outside the schedule."""
        logger.info("manual wallet balance sync triggered", extra={
            "requested_wallets": len(wallet_ids) if wallet_ids is not None else None,
        })
        return await self.run_once(wallet_ids)

    def status(self) -> WorkerStatus:
        return WorkerStatus(
            is_running=self.is_running,
            enabled=self.enabled,
            interval_seconds=self.interval_seconds,
            next_run_at=self.next_run_at if self.is_running else None,
            last_run=self.last_run,
            last_error=self.last_error,
        )
