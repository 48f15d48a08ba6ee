"""
Tests para el módulo de Contactos

Cubren:
- CRUD de clientes y proveedores sobre la misma tabla
- Email obligatorio para clientes y único por tipo dentro del tenant
- Soft delete y restore
- Aislamiento multi-tenant
"""

import pytest
from fastapi import HTTPException

from app.modules.contacts.models import Contact, ContactType
from app.modules.contacts.service import ContactService, get_customer


@pytest.fixture
def sample_customer_data():
    return {
        "name": "Globex Ltd",
        "email": "  Billing@Globex.co ",
        "phone": "+254 700 000 001",
        "address": "Moi Avenue, Nairobi",
    }


class TestCustomerAPI:

    def test_create_customer_normalizes_email(self, client, auth_headers, sample_customer_data):
        response = client.post("/customers/", json=sample_customer_data, headers=auth_headers)
        assert response.status_code == 201
        data = response.json()
        assert data["email"] == "billing@globex.co"
        assert data["type"] == "customer"

    def test_customer_requires_email(self, client, auth_headers):
        response = client.post("/customers/", json={"name": "No Mail"}, headers=auth_headers)
        assert response.status_code == 422

    def test_vendor_email_optional(self, client, auth_headers):
        response = client.post("/vendors/", json={"name": "Paper Supplies Co"}, headers=auth_headers)
        assert response.status_code == 201
        assert response.json()["email"] is None

    def test_duplicate_email_within_type(self, client, auth_headers, sample_customer_data):
        client.post("/customers/", json=sample_customer_data, headers=auth_headers)
        response = client.post("/customers/", json={**sample_customer_data, "name": "Other"}, headers=auth_headers)
        assert response.status_code == 409

        # El mismo email puede existir como proveedor
        response = client.post("/vendors/", json=sample_customer_data, headers=auth_headers)
        assert response.status_code == 201

    def test_customers_and_vendors_are_separate(self, client, auth_headers, sample_customer_data):
        customer_id = client.post("/customers/", json=sample_customer_data, headers=auth_headers).json()["id"]
        assert client.get(f"/vendors/{customer_id}", headers=auth_headers).status_code == 404
        assert client.get("/vendors/", headers=auth_headers).json()["total"] == 0

    def test_search(self, client, auth_headers):
        client.post("/customers/", json={"name": "Initech", "email": "ap@initech.co"}, headers=auth_headers)
        client.post("/customers/", json={"name": "Umbrella", "email": "pay@umbrella.co", "phone": "0711"},
                    headers=auth_headers)

        data = client.get("/customers/", params={"search": "umb"}, headers=auth_headers).json()
        assert [c["name"] for c in data["contacts"]] == ["Umbrella"]
        data = client.get("/customers/", params={"search": "0711"}, headers=auth_headers).json()
        assert data["total"] == 1

    def test_cannot_clear_customer_email(self, client, auth_headers, sample_customer_data):
        customer_id = client.post("/customers/", json=sample_customer_data, headers=auth_headers).json()["id"]
        response = client.patch(f"/customers/{customer_id}", json={"email": ""}, headers=auth_headers)
        assert response.status_code == 422

    def test_update_customer(self, client, auth_headers, sample_customer_data):
        customer_id = client.post("/customers/", json=sample_customer_data, headers=auth_headers).json()["id"]
        response = client.patch(f"/customers/{customer_id}", json={"phone": "0722"}, headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["phone"] == "0722"
        assert response.json()["name"] == "Globex Ltd"

    def test_soft_delete_and_restore(self, client, auth_headers, sample_customer_data):
        customer_id = client.post("/customers/", json=sample_customer_data, headers=auth_headers).json()["id"]

        assert client.delete(f"/customers/{customer_id}", headers=auth_headers).status_code == 204
        assert client.get(f"/customers/{customer_id}", headers=auth_headers).status_code == 404

        response = client.post(f"/customers/{customer_id}/restore", headers=auth_headers)
        assert response.status_code == 200
        assert client.get(f"/customers/{customer_id}", headers=auth_headers).status_code == 200

        # Restaurar un contacto activo es un error
        response = client.post(f"/customers/{customer_id}/restore", headers=auth_headers)
        assert response.status_code == 400

    def test_multi_tenant_isolation(self, client, auth_headers, other_auth_headers, sample_customer_data):
        customer_id = client.post("/customers/", json=sample_customer_data, headers=auth_headers).json()["id"]
        assert client.get(f"/customers/{customer_id}", headers=other_auth_headers).status_code == 404
        # Otro tenant puede registrar el mismo email
        response = client.post("/customers/", json=sample_customer_data, headers=other_auth_headers)
        assert response.status_code == 201


class TestContactService:

    def test_get_customer_ignores_vendors(self, db_session, sample_user):
        vendor = Contact(tenant_id=sample_user.id, type=ContactType.VENDOR, name="Vendor")
        db_session.add(vendor)
        db_session.commit()

        with pytest.raises(HTTPException) as exc:
            get_customer(db_session, vendor.id, sample_user.id)
        assert exc.value.status_code == 404

    def test_label_by_type(self, db_session):
        assert ContactService(db_session, ContactType.CUSTOMER).label == "Cliente"
        assert ContactService(db_session, ContactType.VENDOR).label == "Proveedor"
