"""
Tests for transaction API endpoints.

These test the HTTP layer: status codes, response format and
error mapping. Balance rules are tested in
test_transaction_service.py.
"""

import uuid


def create_user(client, email="api@test.com", name="Api User"):
    response = client.post("/users", json={"name": name, "email": email})
    assert response.status_code == 201
    return response.json()


def create_wallet(client, user, name="Cash", balance="0"):
    response = client.post("/wallets", json={
        "name": name,
        "type": "cash",
        "category": "daily",
        "balance": balance,
        "user_id": user["id"],
    })
    assert response.status_code == 201
    return response.json()


def create_transaction(client, user, wallet, cost="10.00", type="expense", name="Coffee"):
    return client.post("/transactions", json={
        "name": name,
        "cost": cost,
        "type": type,
        "t_category": "food",
        "user_id": user["id"],
        "wallet_id": wallet["id"],
    })


def as_user(user):
    return {"X-User-ID": user["id"]}


class TestCreateTransaction:

    def test_returns_201_and_updates_wallet(self, client):
        user = create_user(client)
        wallet = create_wallet(client, user, balance="100.00")

        response = create_transaction(client, user, wallet, cost="30.00")

        assert response.status_code == 201
        data = response.json()
        assert data["wallet"]["id"] == wallet["id"]
        assert data["user"]["id"] == user["id"]

        wallet_now = client.get(f"/wallets/{wallet['id']}", headers=as_user(user)).json()
        assert float(wallet_now["balance"]) == 70.0

    def test_negative_cost_returns_422(self, client):
        user = create_user(client)
        wallet = create_wallet(client, user)

        response = create_transaction(client, user, wallet, cost="-5.00")

        assert response.status_code == 422

    def test_unknown_type_returns_422(self, client):
        user = create_user(client)
        wallet = create_wallet(client, user)

        response = create_transaction(client, user, wallet, type="transfer")

        assert response.status_code == 422

    def test_other_users_wallet_returns_403(self, client):
        user = create_user(client)
        other = create_user(client, email="other@test.com")
        wallet = create_wallet(client, other)

        response = create_transaction(client, user, wallet)

        assert response.status_code == 403
        assert response.json()["detail"]["error_type"] == "FORBIDDEN_ERROR"

    def test_unknown_wallet_returns_404(self, client):
        user = create_user(client)

        response = create_transaction(client, user, {"id": str(uuid.uuid4())})

        assert response.status_code == 404


class TestReadTransactions:

    def test_get_requires_caller_header(self, client):
        user = create_user(client)
        wallet = create_wallet(client, user)
        txn = create_transaction(client, user, wallet).json()

        response = client.get(f"/transactions/{txn['id']}")

        assert response.status_code == 422

    def test_get_by_other_user_returns_404(self, client):
        user = create_user(client)
        other = create_user(client, email="other@test.com")
        wallet = create_wallet(client, user)
        txn = create_transaction(client, user, wallet).json()

        response = client.get(f"/transactions/{txn['id']}", headers=as_user(other))

        assert response.status_code == 404

    def test_list_with_filters(self, client):
        user = create_user(client)
        wallet = create_wallet(client, user)
        create_transaction(client, user, wallet, cost="10.00", name="Coffee")
        create_transaction(client, user, wallet, cost="900.00", type="income", name="Salary")

        response = client.get(
            "/transactions",
            params={"type": "income"},
            headers=as_user(user),
        )

        assert response.status_code == 200
        body = response.json()
        assert body["meta"]["total"] == 1
        assert body["data"][0]["name"] == "Salary"

    def test_list_with_invalid_sort_type_returns_422(self, client):
        response = client.get("/transactions", params={"sort_type": "sideways"})
        assert response.status_code == 422


class TestUpdateDeleteRestore:

    def test_patch_cost(self, client):
        user = create_user(client)
        wallet = create_wallet(client, user)
        txn = create_transaction(client, user, wallet, cost="20.00").json()

        response = client.patch(f"/transactions/{txn['id']}", json={"cost": "5.00"})

        assert response.status_code == 200
        wallet_now = client.get(f"/wallets/{wallet['id']}", headers=as_user(user)).json()
        assert float(wallet_now["balance"]) == -5.0

    def test_delete_returns_204_and_restore_brings_it_back(self, client):
        user = create_user(client)
        wallet = create_wallet(client, user)
        txn = create_transaction(client, user, wallet, cost="20.00").json()

        assert client.delete(f"/transactions/{txn['id']}").status_code == 204
        assert client.delete(f"/transactions/{txn['id']}").status_code == 404

        wallet_now = client.get(f"/wallets/{wallet['id']}", headers=as_user(user)).json()
        assert float(wallet_now["balance"]) == 0.0

        response = client.post(f"/transactions/{txn['id']}/restore")
        assert response.status_code == 200
        assert response.json()["is_deleted"] is False

        wallet_now = client.get(f"/wallets/{wallet['id']}", headers=as_user(user)).json()
        assert float(wallet_now["balance"]) == -20.0
