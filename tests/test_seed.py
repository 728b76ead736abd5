"""Tests for startup seeding"""
import pytest

from fakes import FakeDatabase
from zenovia.catalog import load_permission_catalog
from zenovia.context import AppContext
from zenovia.seed import (
    DEMO_ADMIN_EMAIL,
    run_seeds,
    seed_default_permissions,
    seed_dev_demo_admin,
    seed_initial_admin,
)
from zenovia.stores import AdminStore, PermissionStore
from zenovia.utils.passwords import verify_password


@pytest.fixture
async def admins(db: FakeDatabase) -> AdminStore:
    store = AdminStore(db.collection("admins"))
    await store.ensure_indexes()
    return store


@pytest.fixture
async def permissions(db: FakeDatabase) -> PermissionStore:
    store = PermissionStore(db.collection("permissions"))
    await store.ensure_indexes()
    return store


@pytest.mark.asyncio
async def test_seed_initial_admin_creates_primary_superadmin(admins, make_settings):
    settings = make_settings(INIT_ADMIN_EMAIL="a@b.com", INIT_ADMIN_PASSWORD="pw")

    admin = await seed_initial_admin(admins, settings)

    assert admin is not None
    documents = admins.collection.documents
    assert len(documents) == 1
    assert documents[0]["email"] == "a@b.com"
    assert documents[0]["role"] == "superadmin"
    assert documents[0]["isPrimary"] is True
    assert documents[0]["name"] == "Super Admin"
    assert documents[0]["password"] != "pw"
    assert verify_password("pw", documents[0]["password"])


@pytest.mark.asyncio
async def test_seed_initial_admin_reads_fallback_variables(admins, monkeypatch):
    from zenovia.config import Settings

    monkeypatch.setenv("ADMIN_EMAIL", "fallback@zenovia.com")
    monkeypatch.setenv("ADMIN_NAME", "Fallback")
    monkeypatch.setenv("ADMIN_PASSWORD", "secret")
    settings = Settings(_env_file=None)

    admin = await seed_initial_admin(admins, settings)

    assert admin.email == "fallback@zenovia.com"
    assert admin.name == "Fallback"


@pytest.mark.asyncio
@pytest.mark.parametrize("overrides", [
    {"INIT_ADMIN_EMAIL": "a@b.com"},
    {"INIT_ADMIN_PASSWORD": "pw"},
    {},
])
async def test_seed_initial_admin_needs_email_and_password(admins, make_settings, overrides):
    assert await seed_initial_admin(admins, make_settings(**overrides)) is None
    assert admins.collection.documents == []


@pytest.mark.asyncio
async def test_seed_initial_admin_leaves_existing_record(admins, make_settings):
    await admins.create(name="Existing", email="a@b.com", password="old", role="admin")
    settings = make_settings(INIT_ADMIN_EMAIL="A@B.com", INIT_ADMIN_PASSWORD="pw")

    assert await seed_initial_admin(admins, settings) is None

    documents = admins.collection.documents
    assert len(documents) == 1
    assert documents[0]["name"] == "Existing"
    assert documents[0]["isPrimary"] is False


@pytest.mark.asyncio
async def test_seed_initial_admin_survives_store_failure(admins, make_settings, caplog):
    admins.collection.fail_after = 0
    settings = make_settings(INIT_ADMIN_EMAIL="a@b.com", INIT_ADMIN_PASSWORD="pw")

    assert await seed_initial_admin(admins, settings) is None
    assert "Failed to seed initial admin" in caplog.text


@pytest.mark.asyncio
async def test_dev_demo_admin_only_in_development(admins, make_settings):
    for environment in ("production", "test", "Development", "staging"):
        admins.collection.operations = 0
        assert await seed_dev_demo_admin(admins, make_settings(NODE_ENV=environment)) is None
        assert admins.collection.operations == 0
    assert admins.collection.documents == []


@pytest.mark.asyncio
async def test_dev_demo_admin_is_non_primary_superadmin(admins, make_settings):
    admin = await seed_dev_demo_admin(admins, make_settings(NODE_ENV="development"))

    assert admin.email == DEMO_ADMIN_EMAIL
    assert admin.role == "superadmin"
    assert admin.is_primary is False
    assert verify_password("admin123", admin.password)

    assert await seed_dev_demo_admin(admins, make_settings(NODE_ENV="development")) is None
    assert len(admins.collection.documents) == 1


@pytest.mark.asyncio
async def test_seed_default_permissions_creates_catalog(permissions):
    catalog = load_permission_catalog()

    created = await seed_default_permissions(permissions, catalog)

    assert created == catalog.keys
    stored = [document["key"] for document in permissions.collection.documents]
    assert stored == catalog.keys


@pytest.mark.asyncio
async def test_seed_default_permissions_skips_existing(permissions):
    catalog = load_permission_catalog()
    await permissions.create("manage_users", "Manage Users")

    created = await seed_default_permissions(permissions, catalog)

    assert "manage_users" not in created
    assert len(created) == len(catalog.keys) - 1
    assert await permissions.count() == len(catalog.keys)


@pytest.mark.asyncio
async def test_seed_default_permissions_failure_stops_the_run(permissions, caplog):
    catalog = load_permission_catalog()
    # Index creation used one operation; allow one lookup + insert pair
    permissions.collection.fail_after = permissions.collection.operations + 2

    created = await seed_default_permissions(permissions, catalog)

    assert created == ["manage_users"]
    assert "Failed to seed default permissions" in caplog.text

    permissions.collection.fail_after = None
    created = await seed_default_permissions(permissions, catalog)
    assert created == catalog.keys[1:]


@pytest.mark.asyncio
async def test_run_seeds_twice_is_idempotent(db, make_settings):
    settings = make_settings(
        NODE_ENV="development",
        INIT_ADMIN_EMAIL="a@b.com",
        INIT_ADMIN_PASSWORD="pw",
    )
    context = AppContext.build(settings, db)
    await context.startup()

    await run_seeds(context)
    await run_seeds(context)

    emails = [document["email"] for document in db.collection("admins").documents]
    assert sorted(emails) == sorted(["a@b.com", DEMO_ADMIN_EMAIL])
    keys = [document["key"] for document in db.collection("permissions").documents]
    assert len(keys) == len(set(keys)) == len(context.catalog.keys)


@pytest.mark.asyncio
async def test_run_seeds_tolerates_records_outside_the_model(db, make_settings):
    db.collection("admins").documents.append(
        {"email": "a@b.com", "name": "Legacy", "role": "moderator"}
    )
    db.collection("permissions").documents.append({"key": "manage_users"})
    settings = make_settings(INIT_ADMIN_EMAIL="a@b.com", INIT_ADMIN_PASSWORD="pw")
    context = AppContext.build(settings, db)
    await context.startup()

    await run_seeds(context)

    admins = db.collection("admins").documents
    assert len(admins) == 1
    assert admins[0]["role"] == "moderator"
    keys = [document["key"] for document in db.collection("permissions").documents]
    assert sorted(keys) == sorted(context.catalog.keys)


@pytest.mark.asyncio
async def test_unexpected_seed_error_is_logged(admins, make_settings, monkeypatch, caplog):
    async def broken_create(**kwargs):
        raise ValueError("bad record")

    monkeypatch.setattr(admins, "create", broken_create)
    settings = make_settings(INIT_ADMIN_EMAIL="a@b.com", INIT_ADMIN_PASSWORD="pw")

    assert await seed_initial_admin(admins, settings) is None
    assert "Failed to seed initial admin: bad record" in caplog.text
