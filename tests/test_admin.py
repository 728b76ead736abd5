"""Tests for admin management endpoints"""
from fastapi.testclient import TestClient

from zenovia.catalog import load_permission_catalog


def _login(client: TestClient, email: str, password: str) -> dict:
    response = client.post("/api/auth/admin/login", json={"email": email, "password": password})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}


def test_list_permissions_in_catalog_order(client: TestClient, admin_headers: dict):
    response = client.get("/api/admin/permissions", headers=admin_headers)
    assert response.status_code == 200

    data = response.json()
    catalog = load_permission_catalog()
    assert data["version"] == catalog.version
    assert [p["key"] for p in data["permissions"]] == catalog.keys
    assert {"key": "manage_subscriptions", "label": "Manage Subscriptions"} in data["permissions"]
    assert {"key": "view_analytics", "label": "View Analytics"} in data["permissions"]


def test_admin_routes_require_auth(client: TestClient):
    assert client.get("/api/admin/permissions").status_code == 401
    assert client.get("/api/admin/admins").status_code == 401


def test_create_and_list_admins(client: TestClient, admin_headers: dict):
    response = client.post(
        "/api/admin/admins",
        json={
            "name": "Ops",
            "email": "Ops@Zenovia.com",
            "password": "ops-password",
            "permissions": ["manage_users", "manage_users", "view_reports"],
        },
        headers=admin_headers,
    )
    assert response.status_code == 201

    admin = response.json()["admin"]
    assert admin["email"] == "ops@zenovia.com"
    assert admin["role"] == "admin"
    assert admin["isPrimary"] is False
    assert admin["isActive"] is True
    assert admin["permissions"] == ["manage_users", "view_reports"]

    response = client.get("/api/admin/admins", headers=admin_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["count"] == 2
    assert [a["email"] for a in data["admins"]] == ["root@zenovia.com", "ops@zenovia.com"]


def test_create_admin_duplicate_email(client: TestClient, admin_headers: dict):
    body = {"name": "Root", "email": "root@zenovia.com", "password": "another"}
    response = client.post("/api/admin/admins", json=body, headers=admin_headers)
    assert response.status_code == 409
    assert response.json()["success"] is False


def test_create_admin_unknown_permission(client: TestClient, admin_headers: dict):
    body = {"name": "Ops", "email": "ops@zenovia.com", "password": "ops-password",
            "permissions": ["launch_rockets"]}
    response = client.post("/api/admin/admins", json=body, headers=admin_headers)
    assert response.status_code == 400
    assert "launch_rockets" in response.json()["message"]


def test_create_admin_invalid_email(client: TestClient, admin_headers: dict):
    body = {"name": "Ops", "email": "not-an-email", "password": "ops-password"}
    response = client.post("/api/admin/admins", json=body, headers=admin_headers)
    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "email"


def test_plain_admin_permissions(client: TestClient, admin_headers: dict):
    for email, permissions in [("viewer@zenovia.com", []), ("manager@zenovia.com", ["manage_admins"])]:
        client.post(
            "/api/admin/admins",
            json={"name": "Staff", "email": email, "password": "staff-password",
                  "permissions": permissions},
            headers=admin_headers,
        )

    viewer = _login(client, "viewer@zenovia.com", "staff-password")
    assert client.get("/api/admin/permissions", headers=viewer).status_code == 200
    response = client.get("/api/admin/admins", headers=viewer)
    assert response.status_code == 403
    assert response.json()["message"] == "Permission 'manage_admins' required"

    manager = _login(client, "manager@zenovia.com", "staff-password")
    assert client.get("/api/admin/admins", headers=manager).status_code == 200

    body = {"name": "X", "email": "x@zenovia.com", "password": "x-password"}
    response = client.post("/api/admin/admins", json=body, headers=manager)
    assert response.status_code == 403
    assert "superadmin" in response.json()["message"]
