from warehouse.core.timestamps import day_floor_iso, utcnow_iso
from warehouse.crud.categories import create_category
from warehouse.crud.products import update_product
from warehouse.crud.transactions import create_transaction
from warehouse.services.dashboard import build_overview, category_distribution, transaction_trends


def _move(db, user, catalog, type_, quantity, when=None):
    payload = {
        "type": type_,
        "product_id": catalog["product"].id,
        "warehouse_id": catalog["main"].id,
        "quantity": quantity,
    }
    if when:
        payload["transaction_date"] = when
    return create_transaction(db, payload, user)


def test_overview_counts_recent_window(db_session, manager, catalog):
    _move(db_session, manager, catalog, "inbound", 10, when="2001-01-01T00:00:00Z")
    _move(db_session, manager, catalog, "inbound", 5)
    _move(db_session, manager, catalog, "outbound", 3)

    overview = build_overview(db_session)

    assert overview["overview"]["total_items"] == 12
    recent = overview["transactions"]["recent"]
    assert [tx.type for tx in recent] == ["outbound", "inbound"]
    assert overview["transactions"]["inbound_count"] == 1
    assert overview["transactions"]["outbound_count"] == 1


def test_overview_window_starts_at_midnight(db_session, manager, catalog):
    _move(db_session, manager, catalog, "inbound", 4, when=day_floor_iso(30))

    overview = build_overview(db_session, window_days=30)

    assert overview["transactions"]["inbound_count"] == 1


def test_overview_ignores_stock_of_inactive_products(db_session, manager, catalog):
    _move(db_session, manager, catalog, "inbound", 10)
    update_product(db_session, catalog["product"], {"is_active": False})

    counts = build_overview(db_session)["overview"]

    assert counts == {"total_products": 0, "total_warehouses": 2, "total_items": 0, "low_stock_items": 0}


def test_trends_group_by_day_and_type(db_session, manager, catalog):
    _move(db_session, manager, catalog, "inbound", 5)
    _move(db_session, manager, catalog, "inbound", 5)
    _move(db_session, manager, catalog, "outbound", 1)

    today = utcnow_iso()[:10]
    trends = transaction_trends(db_session, days=7)

    assert {"date": today, "type": "inbound", "count": 2} in trends
    assert {"date": today, "type": "outbound", "count": 1} in trends


def test_category_distribution_skips_categories_without_active_products(db_session, catalog):
    create_category(db_session, {"name": "Books"})

    assert category_distribution(db_session) == [
        {"category_id": catalog["category"].id, "name": "Electronics", "product_count": 1}
    ]

    update_product(db_session, catalog["product"], {"is_active": False})
    assert category_distribution(db_session) == []
