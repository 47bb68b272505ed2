"""
Health check endpoint.

Used by load balancers, monitoring systems, and humans
to verify the application is running and responsive.
"""

from fastapi import APIRouter, Depends
from sqlalchemy import text

from finance_manager.api.deps import get_container
from finance_manager.container import ApplicationContainer

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check(container: ApplicationContainer = Depends(get_container)):
    """
    Report database connectivity and the balance sync worker state.

    A failing database makes the service "degraded" rather than
    failing the request, so the load balancer can still read it.
    """
    try:
        with container.session_factory() as session:
            session.execute(text("SELECT 1"))
        db_status = "healthy"
    except Exception:
        db_status = "unhealthy"

    return {
        "status": "healthy" if db_status == "healthy" else "degraded",
        "service": "finance-manager",
        "database": db_status,
        "balance_sync_worker": (
            "running" if container.worker.is_running else "stopped"
        ),
    }
