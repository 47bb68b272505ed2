"""
Tests for the dashboard endpoints.
"""

import uuid
from decimal import Decimal


def create_user(client, email, role="user"):
    response = client.post("/users", json={
        "name": "Dashboard User", "email": email, "role": role,
    })
    assert response.status_code == 201
    return response.json()


def create_wallet(client, user, name="Cash"):
    response = client.post("/wallets", json={
        "name": name, "type": "cash", "category": "daily", "user_id": user["id"],
    })
    assert response.status_code == 201
    return response.json()


def spend(client, user, wallet, cost):
    response = client.post("/transactions", json={
        "name": "Lunch",
        "cost": cost,
        "type": "expense",
        "t_category": "food",
        "user_id": user["id"],
        "wallet_id": wallet["id"],
    })
    assert response.status_code == 201
    return response.json()


def summary_url(user):
    return f"/dashboard/users/{user['id']}/monthly-summary"


class TestMonthlySummary:

    def test_own_summary(self, client):
        user = create_user(client, "owner@test.com")
        wallet = create_wallet(client, user)
        spend(client, user, wallet, "12.25")
        spend(client, user, wallet, "0.75")

        response = client.get(summary_url(user), headers={"X-User-ID": user["id"]})

        assert response.status_code == 200
        data = response.json()
        assert len(data) == 1
        assert data[0]["wallet_id"] == wallet["id"]
        assert data[0]["wallet_name"] == "Cash"
        assert data[0]["transaction_count"] == 2
        assert Decimal(data[0]["total_cost"]) == Decimal("13.00")

    def test_other_user_forbidden(self, client):
        owner = create_user(client, "owner@test.com")
        stranger = create_user(client, "stranger@test.com")

        response = client.get(summary_url(owner), headers={"X-User-ID": stranger["id"]})

        assert response.status_code == 403
        assert response.json()["detail"]["error_type"] == "FORBIDDEN_ERROR"

    def test_admin_allowed(self, client):
        owner = create_user(client, "owner@test.com")
        admin = create_user(client, "admin@test.com", role="admin")

        response = client.get(summary_url(owner), headers={"X-User-ID": admin["id"]})

        assert response.status_code == 200
        assert response.json() == []

    def test_requires_caller_header(self, client):
        owner = create_user(client, "owner@test.com")

        response = client.get(summary_url(owner))

        assert response.status_code == 422

    def test_invalid_user_id(self, client):
        response = client.get(
            "/dashboard/users/not-a-uuid/monthly-summary",
            headers={"X-User-ID": str(uuid.uuid4())},
        )

        assert response.status_code == 422
