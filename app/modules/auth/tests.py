"""
Tests de autenticación, resolución de tenant y roles del equipo.
"""

from datetime import timedelta
from uuid import uuid4

import pytest

from app.modules.auth.utils import create_access_token


def _as_member(headers, owner):
    return {**headers, "X-Tenant-ID": str(owner.id)}


def _invite(client, headers, email="other@acme.co", role="viewer"):
    return client.post("/team/", json={"email": email, "role": role}, headers=headers)


class TestAuthentication:

    def test_me_defaults_to_own_tenant(self, client, auth_headers, sample_user):
        response = client.get("/auth/me", headers=auth_headers)
        assert response.status_code == 200
        data = response.json()
        assert data["user"]["email"] == "owner@acme.co"
        assert data["tenant_id"] == str(sample_user.id)
        assert data["role"] == "owner"

    def test_missing_token(self, client):
        assert client.get("/auth/me").status_code in (401, 403)

    def test_invalid_token(self, client):
        response = client.get("/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401

    def test_expired_token(self, client, sample_user):
        token = create_access_token({"sub": str(sample_user.id)}, expires_delta=timedelta(minutes=-1))
        response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_unknown_user(self, client):
        token = create_access_token({"sub": str(uuid4())})
        response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_update_profile(self, client, auth_headers):
        response = client.patch("/auth/me", json={"name": "Ana Wambui"}, headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["name"] == "Ana Wambui"


class TestTeam:

    def test_invite_member(self, client, auth_headers):
        response = _invite(client, auth_headers, email="Other@Acme.co", role="accountant")
        assert response.status_code == 201
        data = response.json()
        assert data["email"] == "other@acme.co"
        assert data["role"] == "accountant"
        assert "invited as a(n) accountant" in data["description"]

        team = client.get("/team/", headers=auth_headers).json()
        assert team["total"] == 1

    def test_cannot_invite_self(self, client, auth_headers):
        assert _invite(client, auth_headers, email="owner@acme.co").status_code == 400

    def test_owner_role_not_assignable(self, client, auth_headers):
        assert _invite(client, auth_headers, role="owner").status_code == 422

    def test_duplicate_invite(self, client, auth_headers):
        _invite(client, auth_headers)
        assert _invite(client, auth_headers).status_code == 409

    def test_removed_member_can_be_invited_again(self, client, auth_headers):
        member_id = _invite(client, auth_headers).json()["id"]
        assert client.delete(f"/team/{member_id}", headers=auth_headers).status_code == 204
        assert client.get("/team/", headers=auth_headers).json()["total"] == 0

        response = _invite(client, auth_headers, role="admin")
        assert response.status_code == 201
        assert response.json()["id"] == member_id
        assert response.json()["role"] == "admin"


class TestTenantAccess:

    def test_member_works_in_owner_tenant(self, client, auth_headers, other_auth_headers, sample_user):
        _invite(client, auth_headers, role="accountant")
        headers = _as_member(other_auth_headers, sample_user)

        me = client.get("/auth/me", headers=headers).json()
        assert me["tenant_id"] == str(sample_user.id)
        assert me["role"] == "accountant"

        response = client.post("/transactions/", json={
            "description": "Stationery", "amount": "12.00", "type": "Expense", "account": "Office"
        }, headers=headers)
        assert response.status_code == 201
        assert client.get("/transactions/", headers=auth_headers).json()["total"] == 1

    def test_viewer_is_read_only(self, client, auth_headers, other_auth_headers, sample_user):
        _invite(client, auth_headers, role="viewer")
        headers = _as_member(other_auth_headers, sample_user)

        assert client.get("/transactions/", headers=headers).status_code == 200
        response = client.post("/transactions/", json={
            "description": "Stationery", "amount": "12.00", "type": "Expense"
        }, headers=headers)
        assert response.status_code == 403
        assert _invite(client, headers, email="third@acme.co").status_code == 403

    def test_non_member_is_rejected(self, client, other_auth_headers, sample_user):
        response = client.get("/transactions/", headers=_as_member(other_auth_headers, sample_user))
        assert response.status_code == 403

    def test_deactivated_member_is_rejected(self, client, auth_headers, other_auth_headers, sample_user):
        member_id = _invite(client, auth_headers).json()["id"]
        client.patch(f"/team/{member_id}", json={"is_active": False}, headers=auth_headers)
        response = client.get("/transactions/", headers=_as_member(other_auth_headers, sample_user))
        assert response.status_code == 403

    def test_invalid_tenant_header(self, client, auth_headers):
        response = client.get("/transactions/", headers={**auth_headers, "X-Tenant-ID": "acme"})
        assert response.status_code == 400

    @pytest.mark.parametrize("path", ["/accounts/", "/products/", "/reports/dashboard"])
    def test_member_reads_owner_data(self, client, auth_headers, other_auth_headers, sample_user, path):
        _invite(client, auth_headers)
        assert client.get(path, headers=_as_member(other_auth_headers, sample_user)).status_code == 200
