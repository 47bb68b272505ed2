"""
Tests for the balance sync worker endpoints.
"""

import uuid

from sqlalchemy import update

from finance_manager.errors import InternalError
from finance_manager.models.wallet import Wallet


def make_drifted_wallet(client, db_session, email):
    user = client.post("/users", json={"name": "Worker", "email": email}).json()
    wallet = client.post("/wallets", json={
        "name": "Cash", "type": "cash", "category": "daily", "user_id": user["id"],
    }).json()
    db_session.execute(
        update(Wallet).where(Wallet.id == uuid.UUID(wallet["id"])).values(balance=15)
    )
    db_session.commit()
    return wallet


def test_status(client):
    response = client.get("/worker/status")

    assert response.status_code == 200
    data = response.json()
    assert data["is_running"] is False
    assert data["interval_seconds"] == 86400
    assert data["last_run"] is None


def test_trigger_sync_all(client, db_session):
    make_drifted_wallet(client, db_session, "a@test.com")
    make_drifted_wallet(client, db_session, "b@test.com")

    response = client.post("/worker/balance-sync")

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 2
    assert data["corrected"] == 2
    assert data["failed"] == 0

    status = client.get("/worker/status").json()
    assert status["last_run"]["corrected"] == 2


def test_trigger_sync_subset_reports_failures(client, db_session):
    wallet = make_drifted_wallet(client, db_session, "a@test.com")
    missing = str(uuid.uuid4())

    response = client.post(
        "/worker/balance-sync", json={"wallet_ids": [wallet["id"], missing]},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["total"] == 2
    assert data["corrected"] == 1
    assert data["failed"] == 1
    assert data["errors"][0]["wallet_id"] == missing


class FailingSyncService:
    def sync_all_wallet_balances(self, wallet_ids=None, should_stop=None):
        raise InternalError(
            "failed to get wallets", "(sqlite3.OperationalError) no such table: wallets"
        )


def test_failed_run_hides_internal_details(client, container):
    container.worker.service = FailingSyncService()

    response = client.post("/worker/balance-sync")

    assert response.status_code == 500
    detail = response.json()["detail"]
    assert detail["error_type"] == "INTERNAL_ERROR"
    assert detail["message"] == "internal server error"
    assert detail["correlation_id"]
    assert "sqlite3" not in response.text
    assert container.worker.status().last_error == "failed to get wallets"
    assert "sqlite3" not in client.get("/worker/status").text
