import os
import sys
from pathlib import Path

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("DATA_DIR", str(ROOT / "data"))
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("JWT_SECRET", "test-secret")

from warehouse.core.roles import ROLE_ADMIN, ROLE_MANAGER, ROLE_VIEWER  # noqa: E402
from warehouse.core.security import issue_token_pair  # noqa: E402
from warehouse.crud.categories import create_category  # noqa: E402
from warehouse.crud.products import create_product  # noqa: E402
from warehouse.crud.users import create_user  # noqa: E402
from warehouse.crud.warehouses import create_warehouse  # noqa: E402
from warehouse.db.session import Base, get_db  # noqa: E402

PASSWORD = "secret123"


@pytest.fixture()
def db_session():
    # StaticPool keeps one connection so TestClient threads see the same in-memory database.
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


def make_user(db, username, role=ROLE_VIEWER, **extra):
    payload = {
        "username": username,
        "email": f"{username}@warehouse.test",
        "password": PASSWORD,
        "first_name": username.title(),
        "last_name": "Tester",
        "role": role,
    }
    payload.update(extra)
    return create_user(db, payload)


@pytest.fixture()
def admin(db_session):
    return make_user(db_session, "admin", ROLE_ADMIN)


@pytest.fixture()
def manager(db_session):
    return make_user(db_session, "manager", ROLE_MANAGER)


@pytest.fixture()
def viewer(db_session):
    return make_user(db_session, "viewer", ROLE_VIEWER)


@pytest.fixture()
def catalog(db_session):
    """One category, two warehouses and one product with min stock 5."""

    category = create_category(db_session, {"name": "Electronics"})
    main = create_warehouse(db_session, {"name": "Main Warehouse", "code": "MW01", "city": "Tehran"})
    second = create_warehouse(db_session, {"name": "Secondary Warehouse", "code": "SW02", "city": "Isfahan"})
    product = create_product(
        db_session,
        {
            "code": "ELC001",
            "name": "Smartphone",
            "category_id": category.id,
            "unit": "piece",
            "unit_price": 250.0,
            "cost_price": 200.0,
            "min_stock_level": 5,
        },
    )
    return {"category": category, "main": main, "second": second, "product": product}


def auth_headers(user):
    pair = issue_token_pair(user.id, username=user.username, role=user.role)
    return {"Authorization": f"Bearer {pair.access_token}"}


@pytest.fixture()
def client(db_session):
    from fastapi.testclient import TestClient

    from warehouse.main import app

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.pop(get_db, None)
