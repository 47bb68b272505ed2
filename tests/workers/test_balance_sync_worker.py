"""
Tests for the BalanceSyncWorker.

The worker is driven with asyncio.run(); the periodic loop is
exercised with a very short interval.
"""

import asyncio
import time
from decimal import Decimal

import pytest
from sqlalchemy import update

from finance_manager.errors import ConflictError
from finance_manager.models.wallet import Wallet
from finance_manager.schemas.balance_sync import SyncResult
from finance_manager.workers.balance_sync_worker import BalanceSyncWorker


def corrupt_balance(db_session, wallet, balance):
    db_session.execute(
        update(Wallet).where(Wallet.id == wallet.id).values(balance=Decimal(balance))
    )
    db_session.commit()


class ExplodingSyncService:
    """Stands in for a sync service whose whole run fails."""

    def sync_all_wallet_balances(self, wallet_ids=None, should_stop=None):
        raise RuntimeError("database unavailable")


class SteppingSyncService:
    """Syncs one pretend wallet every 20ms, checking for a stop first."""

    def __init__(self, wallets=50):
        self.wallets = wallets
        self.synced = 0

    def sync_all_wallet_balances(self, wallet_ids=None, should_stop=None):
        result = SyncResult()
        for _ in range(self.wallets):
            if should_stop is not None and should_stop():
                result.stopped = True
                break
            time.sleep(0.02)
            self.synced += 1
            result.total += 1
            result.synced += 1
        return result


def test_run_once_records_last_run(balance_sync_service, db_session, wallet):
    corrupt_balance(db_session, wallet, "10.00")
    worker = BalanceSyncWorker(balance_sync_service)

    result = asyncio.run(worker.run_once())

    assert result.corrected == 1
    assert worker.last_run == result
    assert worker.last_error is None


def test_trigger_sync_with_subset(balance_sync_service, db_session, wallet):
    corrupt_balance(db_session, wallet, "10.00")
    worker = BalanceSyncWorker(balance_sync_service)

    result = asyncio.run(worker.trigger_sync([wallet.id]))

    assert result.total == 1
    assert result.corrections[0].wallet_id == wallet.id


def test_failed_run_is_kept_not_raised():
    worker = BalanceSyncWorker(ExplodingSyncService())

    assert asyncio.run(worker.run_once()) is None
    assert worker.last_error == "balance sync failed"
    assert worker.last_run is None


def test_run_times_out():
    worker = BalanceSyncWorker(SteppingSyncService(), timeout_seconds=0.05)

    assert asyncio.run(worker.run_once()) is None
    assert "timed out" in worker.last_error


def test_timed_out_run_stops_its_thread():
    service = SteppingSyncService()
    worker = BalanceSyncWorker(service, timeout_seconds=0.05)

    assert asyncio.run(worker.run_once()) is None
    synced = service.synced
    time.sleep(0.1)

    # Nothing keeps syncing in the background after run_once returns
    assert service.synced == synced
    assert synced < service.wallets


def test_overlapping_runs_are_rejected():
    worker = BalanceSyncWorker(SteppingSyncService(wallets=5))

    async def scenario():
        first = asyncio.create_task(worker.run_once())
        await asyncio.sleep(0.01)
        with pytest.raises(ConflictError):
            await worker.trigger_sync()
        return await first

    result = asyncio.run(scenario())

    assert result.synced == 5
    assert worker.last_error is None


def test_start_runs_periodically_and_stop(balance_sync_service, db_session, wallet):
    corrupt_balance(db_session, wallet, "10.00")
    worker = BalanceSyncWorker(balance_sync_service, interval_seconds=0.01)

    async def scenario():
        await worker.start()
        running = worker.status()
        for _ in range(200):
            if worker.last_run is not None:
                break
            await asyncio.sleep(0.01)
        await worker.stop()
        return running

    running = asyncio.run(scenario())

    assert running.is_running is True
    assert running.next_run_at is not None
    assert worker.last_run.corrected == 1
    assert worker.is_running is False
    assert worker.status().next_run_at is None


def test_status_when_stopped(balance_sync_service):
    worker = BalanceSyncWorker(
        balance_sync_service, interval_seconds=3600, enabled=False,
    )

    status = worker.status()

    assert status.is_running is False
    assert status.enabled is False
    assert status.interval_seconds == 3600
    assert status.last_run is None


def test_stop_when_not_running_is_noop(balance_sync_service):
    worker = BalanceSyncWorker(balance_sync_service)
    asyncio.run(worker.stop())
    assert worker.is_running is False
