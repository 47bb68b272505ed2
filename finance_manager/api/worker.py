"""
Balance sync worker endpoints.
"""

from fastapi import APIRouter, Depends

from finance_manager.api.deps import get_container
from finance_manager.api.errors import to_http_exception
from finance_manager.container import ApplicationContainer
from finance_manager.errors import AppError, InternalError
from finance_manager.schemas.balance_sync import SyncRequest, SyncResult, WorkerStatus

router = APIRouter(prefix="/worker", tags=["Worker"])


@router.get("/status", response_model=WorkerStatus)
def worker_status(container: ApplicationContainer = Depends(get_container)):
    return container.worker.status()


@router.post("/balance-sync", response_model=SyncResult)
async def trigger_balance_sync(
    request: SyncRequest | None = None,
    container: ApplicationContainer = Depends(get_container),
):
    """
    Run a balance sync now.

    Send ``wallet_ids`` to re-run only the wallets that failed in a
    previous run. Per-wallet failures are reported in the result;
    only a run that fails as a whole returns an error, and a run
    already in progress returns 409.
    """
    wallet_ids = request.wallet_ids if request else None
    try:
        result = await container.worker.trigger_sync(wallet_ids)
        if result is None:
            raise InternalError(
                "failed to trigger balance sync", container.worker.last_error or ""
            )
        return result
    except AppError as e:
        raise to_http_exception(e)
