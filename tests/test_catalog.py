"""Tests for the permission catalog"""
import json

import pytest
from pydantic import ValidationError

from zenovia.catalog import load_permission_catalog


def test_bundled_catalog():
    catalog = load_permission_catalog()

    assert catalog.version == 2
    assert catalog.keys == [
        "manage_users",
        "manage_experts",
        "manage_admins",
        "manage_bookings",
        "manage_payments",
        "manage_subscriptions",
        "view_reports",
        "view_analytics",
        "manage_settings",
    ]
    assert "manage_users" in catalog
    assert "launch_rockets" not in catalog


def test_custom_catalog(tmp_path):
    path = tmp_path / "permissions.json"
    path.write_text(json.dumps({
        "version": 7,
        "permissions": [{"key": "manage_retreats", "label": "Manage Retreats"}],
    }))

    catalog = load_permission_catalog(path)
    assert catalog.version == 7
    assert catalog.keys == ["manage_retreats"]


def test_duplicate_keys_rejected(tmp_path):
    path = tmp_path / "permissions.json"
    path.write_text(json.dumps({
        "version": 1,
        "permissions": [
            {"key": "manage_users", "label": "Manage Users"},
            {"key": "manage_users", "label": "Manage All Users"},
        ],
    }))

    with pytest.raises(ValidationError, match="duplicate permission key"):
        load_permission_catalog(path)


def test_empty_key_rejected(tmp_path):
    path = tmp_path / "permissions.json"
    path.write_text(json.dumps({"version": 1, "permissions": [{"key": "", "label": "Nothing"}]}))

    with pytest.raises(ValidationError):
        load_permission_catalog(path)


def test_app_seeds_configured_catalog(make_settings, db, tmp_path):
    from fastapi.testclient import TestClient

    from zenovia.main import create_app

    path = tmp_path / "permissions.json"
    path.write_text(json.dumps({
        "version": 3,
        "permissions": [{"key": "manage_retreats", "label": "Manage Retreats"}],
    }))
    app = create_app(make_settings(PERMISSIONS_CATALOG_PATH=path), database=db)
    with TestClient(app):
        pass

    assert [d["key"] for d in db.collection("permissions").documents] == ["manage_retreats"]
