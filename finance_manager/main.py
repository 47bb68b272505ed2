"""
Finance Manager: FastAPI Application.

This is the entry point for the application.
All routers are registered here.
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from finance_manager.config import get_settings
from finance_manager.container import ApplicationContainer, build_container
from finance_manager.logging_config import setup_logging
from finance_manager.api.health import router as health_router
from finance_manager.api.users import router as users_router
from finance_manager.api.wallets import router as wallets_router
from finance_manager.api.transactions import router as transactions_router
from finance_manager.api.worker import router as worker_router
from finance_manager.api.dashboard import router as dashboard_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    container: ApplicationContainer = app.state.container
    setup_logging(container.settings.LOG_LEVEL)

    if container.settings.BALANCE_SYNC_ENABLED:
        await container.worker.start()
    else:
        logger.info("balance sync worker disabled")

    yield

    await container.worker.stop()


def create_app(container: ApplicationContainer | None = None) -> FastAPI:
    settings = get_settings()

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description="Personal finance ledger with wallet balance reconciliation",
        lifespan=lifespan,
    )
    app.state.container = container or build_container(settings)

    # Register routers
    app.include_router(health_router)
    app.include_router(users_router)
    app.include_router(wallets_router)
    app.include_router(transactions_router)
    app.include_router(worker_router)
    app.include_router(dashboard_router)

    return app


app = create_app()
