import pytest

from warehouse.core.errors import ConflictError, NotFoundError
from warehouse.crud.categories import create_category, list_categories, update_category
from warehouse.crud.inventory import get_inventory_summary, list_inventory, update_inventory
from warehouse.crud.products import (
    create_product,
    delete_product,
    get_product,
    list_products,
    update_product,
)
from warehouse.crud.transactions import create_transaction
from warehouse.crud.warehouses import create_warehouse, list_warehouses, update_warehouse


def _product_payload(category, code, **extra):
    payload = {
        "code": code,
        "name": f"Product {code}",
        "category_id": category.id,
        "unit": "piece",
        "unit_price": 10.0,
    }
    payload.update(extra)
    return payload


def test_category_names_are_unique(db_session):
    create_category(db_session, {"name": "Books"})
    with pytest.raises(ConflictError):
        create_category(db_session, {"name": "Books"})


def test_inactive_categories_are_hidden_from_listing(db_session):
    books = create_category(db_session, {"name": "Books"})
    create_category(db_session, {"name": "Art"})
    update_category(db_session, books, {"is_active": False})

    assert [c.name for c in list_categories(db_session)] == ["Art"]
    assert len(list_categories(db_session, include_inactive=True)) == 2


def test_warehouse_code_is_upper_cased_and_unique(db_session):
    wh = create_warehouse(db_session, {"name": "Depot", "code": "dp01"})
    assert wh.code == "DP01"
    assert wh.country == "Iran"
    with pytest.raises(ConflictError):
        create_warehouse(db_session, {"name": "Other", "code": "DP01"})
    with pytest.raises(ConflictError):
        create_warehouse(db_session, {"name": "Depot", "code": "DP02"})


def test_warehouse_update_keeps_own_name(db_session):
    wh = create_warehouse(db_session, {"name": "Depot", "code": "DP01"})
    updated = update_warehouse(db_session, wh, {"name": "Depot", "capacity": 500})
    assert updated.capacity == 500
    update_warehouse(db_session, wh, {"is_active": False})
    assert list_warehouses(db_session) == []


def test_create_product_checks_category_and_code(db_session, catalog):
    category = catalog["category"]
    with pytest.raises(ValueError, match="Invalid category ID"):
        create_product(db_session, _product_payload(category, "X1", category_id=999))
    with pytest.raises(ConflictError, match="Product code already exists"):
        create_product(db_session, _product_payload(category, " ELC001 "))


def test_product_code_and_barcode_are_stored_as_entered(db_session, catalog):
    product = create_product(
        db_session, _product_payload(catalog["category"], " abc1 ", barcode=" 036000291452 ", tags=["new", " "])
    )
    assert product.code == "abc1"
    assert product.barcode == "036000291452"
    assert product.tags == ["new"]

    items, total = list_products(db_session, barcode="0036000291452")
    assert [p.id for p in items] == [product.id]
    with pytest.raises(ConflictError):
        create_product(db_session, _product_payload(catalog["category"], "BC2", barcode="036000291452"))


def test_update_product_can_clear_optional_fields(db_session, catalog):
    product = create_product(
        db_session,
        _product_payload(catalog["category"], "CLR1", barcode="111", sku="SKU-1", weight=1.5, max_stock_level=40),
    )
    updated = update_product(
        db_session, product, {"barcode": None, "sku": None, "weight": None, "max_stock_level": None, "name": None}
    )
    assert updated.barcode is None
    assert updated.sku is None
    assert updated.weight is None
    assert updated.max_stock_level is None
    assert updated.name == "Product CLR1"


def test_update_product_validates_stock_levels(db_session, catalog):
    product = catalog["product"]
    with pytest.raises(ValueError, match="max_stock_level"):
        update_product(db_session, product, {"max_stock_level": 2})
    updated = update_product(db_session, product, {"name": "Phone", "max_stock_level": 50})
    assert updated.name == "Phone"
    assert updated.max_stock_level == 50


def test_list_products_search_and_pagination(db_session, catalog):
    category = catalog["category"]
    create_product(db_session, _product_payload(category, "LAP1", name="Laptop"))
    create_product(db_session, _product_payload(category, "LAP2", name="Laptop Pro", is_active=False))

    items, total = list_products(db_session, search="laptop")
    assert total == 2
    items, total = list_products(db_session, search="laptop", is_active=True)
    assert [p.code for p in items] == ["LAP1"]
    items, total = list_products(db_session, page=2, limit=2)
    assert total == 3
    assert len(items) == 1


def test_delete_product_refused_while_stock_on_hand(db_session, manager, catalog):
    product = catalog["product"]
    create_transaction(
        db_session,
        {"type": "inbound", "product_id": product.id, "warehouse_id": catalog["main"].id, "quantity": 2},
        manager,
    )
    with pytest.raises(ConflictError, match="Set as inactive instead"):
        delete_product(db_session, product)


def test_delete_product_without_history(db_session, catalog):
    product = create_product(db_session, _product_payload(catalog["category"], "TMP1"))
    delete_product(db_session, product)
    with pytest.raises(NotFoundError):
        get_product(db_session, product.id)


def test_inventory_summary_and_low_stock_filter(db_session, manager, catalog):
    product = catalog["product"]
    for warehouse, quantity in ((catalog["main"], 20), (catalog["second"], 3)):
        create_transaction(
            db_session,
            {"type": "inbound", "product_id": product.id, "warehouse_id": warehouse.id, "quantity": quantity},
            manager,
        )

    summary = get_inventory_summary(db_session)
    assert summary == {"total_products": 1, "total_warehouses": 2, "total_items": 23, "low_stock_items": 1}

    low = list_inventory(db_session, low_stock=True)
    assert [row.warehouse.code for row in low] == ["SW02"]
    assert low[0].is_low_stock
    assert len(list_inventory(db_session, category_id=catalog["category"].id)) == 2


def test_inventory_reservation_cannot_exceed_quantity(db_session, manager, catalog):
    product = catalog["product"]
    create_transaction(
        db_session,
        {"type": "inbound", "product_id": product.id, "warehouse_id": catalog["main"].id, "quantity": 4},
        manager,
    )
    row = list_inventory(db_session)[0]

    with pytest.raises(ValueError, match="reserved_quantity"):
        update_inventory(db_session, row, {"reserved_quantity": 5})

    row = update_inventory(db_session, row, {"reserved_quantity": 3, "location": "A-01", "last_count_date": "2024-02-01"})
    assert row.available_quantity == 1
    assert row.location == "A-01"
    assert row.last_count_date == "2024-02-01T00:00:00Z"
