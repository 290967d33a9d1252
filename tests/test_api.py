import inspect

from conftest import PASSWORD, auth_headers, make_user

from warehouse.crud import transactions as engine
from warehouse.deps.auth import get_current_user, require_admin, require_writer


def test_health_reports_database(client):
    response = client.get("/api/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "OK"
    assert body["database"] == "connected"
    assert response.headers["X-Request-ID"]


def test_register_then_login_by_email(client):
    response = client.post(
        "/api/auth/register",
        json={
            "username": "jdoe",
            "email": "JDoe@Example.com",
            "password": "s3cret!",
            "first_name": "John",
            "last_name": "Doe",
        },
    )
    assert response.status_code == 201
    body = response.json()
    assert body["user"]["role"] == "viewer"
    assert body["user"]["email"] == "jdoe@example.com"
    assert body["token"]

    duplicate = client.post(
        "/api/auth/register",
        json={
            "username": "jdoe",
            "email": "other@example.com",
            "password": "s3cret!",
            "first_name": "John",
            "last_name": "Doe",
        },
    )
    assert duplicate.status_code == 400
    assert duplicate.json()["code"] == "http_error"

    login = client.post("/api/auth/login", json={"username": "jdoe@example.com", "password": "s3cret!"})
    assert login.status_code == 200
    assert login.json()["user"]["last_login"]


def test_login_failures(client, db_session):
    make_user(db_session, "ghost", is_active=False)
    make_user(db_session, "alice")

    unknown = client.post("/api/auth/login", json={"username": "nobody", "password": "x"})
    assert unknown.status_code == 401
    assert unknown.json()["message"] == "Invalid credentials or inactive account"

    inactive = client.post("/api/auth/login", json={"username": "ghost", "password": PASSWORD})
    assert inactive.status_code == 401

    wrong = client.post("/api/auth/login", json={"username": "alice", "password": "wrong-password"})
    assert wrong.status_code == 401
    assert wrong.json()["message"] == "Invalid credentials"


def test_refresh_token_issues_new_pair(client, db_session):
    make_user(db_session, "alice")
    login = client.post("/api/auth/login", json={"username": "alice", "password": PASSWORD}).json()

    refreshed = client.post("/api/auth/refresh", json={"refresh_token": login["refresh_token"]})
    assert refreshed.status_code == 200

    misuse = client.post("/api/auth/refresh", json={"refresh_token": login["token"]})
    assert misuse.status_code == 401


def test_profile_and_password_change(client, viewer):
    headers = auth_headers(viewer)

    me = client.get("/api/auth/me", headers=headers)
    assert me.json()["username"] == "viewer"

    updated = client.put("/api/auth/me", headers=headers, json={"first_name": "Vera"})
    assert updated.json()["first_name"] == "Vera"

    bad = client.put(
        "/api/auth/change-password",
        headers=headers,
        json={"current_password": "nope", "new_password": "another1"},
    )
    assert bad.status_code == 400

    good = client.put(
        "/api/auth/change-password",
        headers=headers,
        json={"current_password": PASSWORD, "new_password": "another1"},
    )
    assert good.status_code == 200
    login = client.post("/api/auth/login", json={"username": "viewer", "password": "another1"})
    assert login.status_code == 200


def test_protected_routes_need_token_and_role(client, viewer, catalog):
    assert client.get("/api/products").status_code == 401
    assert client.get("/api/products", headers={"Authorization": "Bearer junk"}).status_code == 401

    headers = auth_headers(viewer)
    assert client.get("/api/products", headers=headers).status_code == 200
    forbidden = client.post(
        "/api/categories",
        headers=headers,
        json={"name": "Tools"},
    )
    assert forbidden.status_code == 403
    assert client.get("/api/users", headers=headers).status_code == 403


def test_product_endpoints(client, manager, catalog):
    headers = auth_headers(manager)

    created = client.post(
        "/api/products",
        headers=headers,
        json={
            "code": "clt001",
            "name": "T-Shirt",
            "category_id": catalog["category"].id,
            "unit": "piece",
            "unit_price": 5,
            "barcode": " 4006381333931 ",
            "tags": ["cotton"],
        },
    )
    assert created.status_code == 201
    product = created.json()
    assert product["code"] == "clt001"
    assert product["barcode"] == "4006381333931"

    cleared = client.put(f"/api/products/{product['id']}", headers=headers, json={"barcode": None})
    assert cleared.status_code == 200
    assert cleared.json()["barcode"] is None
    assert cleared.json()["name"] == "T-Shirt"
    assert product["category"]["name"] == "Electronics"

    bad_category = client.post(
        "/api/products",
        headers=headers,
        json={"code": "X1", "name": "Thing", "category_id": 999, "unit": "piece", "unit_price": 1},
    )
    assert bad_category.status_code == 400
    assert bad_category.json()["message"] == "Invalid category ID"

    negative = client.post(
        "/api/products",
        headers=headers,
        json={"code": "X2", "name": "Thing", "category_id": catalog["category"].id, "unit": "piece", "unit_price": -1},
    )
    assert negative.status_code == 422
    assert negative.json()["code"] == "validation_error"

    page = client.get("/api/products", headers=headers, params={"limit": 1}).json()
    assert page["pagination"] == {"page": 1, "limit": 1, "total": 2, "total_pages": 2}

    detail = client.get(f"/api/products/{product['id']}", headers=headers).json()
    assert detail["inventory"] == []

    assert client.get("/api/products/999", headers=headers).status_code == 404
    assert client.delete(f"/api/products/{product['id']}", headers=headers).status_code == 200


def test_transaction_flow(client, manager, catalog):
    headers = auth_headers(manager)
    base = {"product_id": catalog["product"].id, "warehouse_id": catalog["main"].id}

    inbound = client.post("/api/transactions", headers=headers, json={**base, "type": "inbound", "quantity": 8, "unit_cost": 3})
    assert inbound.status_code == 201
    assert inbound.json()["total_cost"] in ("24.00", 24.0)

    too_many = client.post("/api/transactions", headers=headers, json={**base, "type": "outbound", "quantity": 9})
    assert too_many.status_code == 400
    assert too_many.json()["message"] == "Insufficient inventory quantity"

    zero = client.post("/api/transactions", headers=headers, json={**base, "type": "outbound", "quantity": 0})
    assert zero.status_code == 400
    assert zero.json()["message"] == "quantity must be at least 1"

    same_place = client.post(
        "/api/transactions",
        headers=headers,
        json={**base, "type": "transfer", "quantity": 1, "destination_warehouse_id": catalog["main"].id},
    )
    assert same_place.status_code == 400
    no_destination = client.post("/api/transactions", headers=headers, json={**base, "type": "transfer", "quantity": 1})
    assert no_destination.status_code == 400

    transfer = client.post(
        "/api/transactions",
        headers=headers,
        json={**base, "type": "transfer", "quantity": 3, "destination_warehouse_id": catalog["second"].id},
    )
    assert transfer.status_code == 201

    listing = client.get("/api/transactions", headers=headers, params={"type": "transfer"}).json()
    assert listing["pagination"]["total"] == 1
    assert listing["transactions"][0]["destination_warehouse"]["code"] == "SW02"

    inventory = client.get("/api/inventory", headers=headers, params={"product_id": catalog["product"].id}).json()
    assert sorted(row["quantity"] for row in inventory) == [3, 5]

    summary = client.get("/api/inventory/summary", headers=headers).json()
    assert summary["total_items"] == 8

    assert client.get("/api/transactions", headers=headers, params={"limit": 101}).status_code == 422


def test_reference_collision_returns_400_and_keeps_stock(client, manager, catalog, monkeypatch):
    headers = auth_headers(manager)
    base = {"type": "inbound", "product_id": catalog["product"].id, "warehouse_id": catalog["main"].id, "quantity": 4}
    first = client.post("/api/transactions", headers=headers, json=base).json()
    monkeypatch.setattr(engine, "generate_reference_number", lambda tx_type, exists=None: first["reference_number"])

    response = client.post("/api/transactions", headers=headers, json=base)

    assert response.status_code == 400
    assert response.json()["message"] == "Transaction could not be recorded, please retry"
    inventory = client.get("/api/inventory", headers=headers, params={"product_id": catalog["product"].id}).json()
    assert [row["quantity"] for row in inventory] == [4]


def test_auth_dependencies_are_sync_so_db_lookups_run_in_threadpool():
    for dependency in (get_current_user, require_writer, require_admin):
        assert not inspect.iscoroutinefunction(dependency)


def test_viewer_cannot_post_transactions(client, viewer, catalog):
    response = client.post(
        "/api/transactions",
        headers=auth_headers(viewer),
        json={"type": "inbound", "product_id": catalog["product"].id, "warehouse_id": catalog["main"].id, "quantity": 1},
    )
    assert response.status_code == 403


def test_report_downloads(client, manager, catalog):
    headers = auth_headers(manager)
    client.post(
        "/api/transactions",
        headers=headers,
        json={"type": "inbound", "product_id": catalog["product"].id, "warehouse_id": catalog["main"].id, "quantity": 2},
    )

    as_json = client.get("/api/reports/inventory", headers=headers).json()
    assert as_json["rows"][0]["status"] == "Low Stock"

    as_csv = client.get("/api/reports/transactions", headers=headers, params={"format": "csv"})
    assert as_csv.status_code == 200
    assert as_csv.headers["content-type"].startswith("text/csv")
    assert 'filename="transaction-report-' in as_csv.headers["content-disposition"]

    as_excel = client.get("/api/reports/inventory", headers=headers, params={"format": "excel"})
    assert as_excel.status_code == 200
    assert as_excel.headers["content-type"].startswith("application/vnd.openxmlformats-officedocument.spreadsheetml")
    assert 'filename="inventory-report-' in as_excel.headers["content-disposition"]
    assert '.xlsx"' in as_excel.headers["content-disposition"]
    assert as_excel.content.startswith(b"PK")

    as_pdf = client.get("/api/reports/inventory", headers=headers, params={"format": "pdf"})
    assert as_pdf.content.startswith(b"%PDF")

    assert client.get("/api/reports/inventory", headers=headers, params={"format": "xlsx"}).status_code == 422


def test_dashboard_endpoints(client, viewer, catalog):
    headers = auth_headers(viewer)
    overview = client.get("/api/dashboard/overview", headers=headers).json()
    assert overview["overview"]["total_products"] == 1
    assert client.get("/api/dashboard/trends", headers=headers, params={"days": 7}).json() == []
    distribution = client.get("/api/dashboard/category-distribution", headers=headers).json()
    assert distribution[0]["name"] == "Electronics"


def test_admin_manages_users_but_not_self_demotion(client, admin, viewer):
    headers = auth_headers(admin)

    users = client.get("/api/users", headers=headers).json()
    assert {u["username"] for u in users} == {"admin", "viewer"}

    promoted = client.put(f"/api/users/{viewer.id}", headers=headers, json={"role": "warehouse_manager"})
    assert promoted.json()["role"] == "warehouse_manager"

    demote_self = client.put(f"/api/users/{admin.id}", headers=headers, json={"role": "viewer"})
    assert demote_self.status_code == 400

    created = client.post(
        "/api/users",
        headers=headers,
        json={
            "username": "clerk",
            "email": "clerk@warehouse.test",
            "password": "clerk123",
            "first_name": "Clerk",
            "last_name": "One",
        },
    )
    assert created.status_code == 201
