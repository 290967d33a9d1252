"""Demo data for a fresh installation.

``seed_database`` is idempotent: when the admin account already exists it
does nothing, so it is safe to run on every deploy.
"""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session

from ..core.roles import ROLE_ADMIN, ROLE_MANAGER, TRANSACTION_INBOUND, TRANSACTION_OUTBOUND
from ..crud.categories import create_category
from ..crud.products import create_product
from ..crud.transactions import create_transaction
from ..crud.users import create_user
from ..crud.warehouses import create_warehouse
from ..db.migrate import run_migrations
from ..db.session import Base
from ..models.user import User

logger = logging.getLogger(__name__)

USERS = (
    {
        "username": "admin",
        "email": "admin@warehouse.com",
        "password": "admin123",
        "first_name": "System",
        "last_name": "Administrator",
        "role": ROLE_ADMIN,
    },
    {
        "username": "manager",
        "email": "manager@warehouse.com",
        "password": "manager123",
        "first_name": "Warehouse",
        "last_name": "Manager",
        "role": ROLE_MANAGER,
    },
)

CATEGORIES = (
    {"name": "Electronics", "description": "Electronic devices and components"},
    {"name": "Clothing", "description": "Apparel and fashion items"},
    {"name": "Books", "description": "Books and publications"},
    {"name": "Home & Garden", "description": "Home improvement and gardening items"},
    {"name": "Sports", "description": "Sports equipment and accessories"},
)

WAREHOUSES = (
    {
        "name": "Main Warehouse",
        "code": "MW01",
        "address": "123 Industrial Street",
        "city": "Tehran",
        "state": "Tehran",
        "postal_code": "1234567890",
        "country": "Iran",
        "phone": "+98-21-12345678",
        "email": "main@warehouse.com",
        "manager_name": "Ali Ahmadi",
        "capacity": 10000,
    },
    {
        "name": "Secondary Warehouse",
        "code": "SW02",
        "address": "456 Storage Avenue",
        "city": "Isfahan",
        "state": "Isfahan",
        "postal_code": "9876543210",
        "country": "Iran",
        "phone": "+98-31-87654321",
        "email": "secondary@warehouse.com",
        "manager_name": "Sara Rezaei",
        "capacity": 5000,
    },
)

# Category is given by name and resolved after the categories exist.
PRODUCTS = (
    {
        "code": "ELC001",
        "name": "Smartphone Samsung Galaxy",
        "description": "Latest Samsung Galaxy smartphone with advanced features",
        "category": "Electronics",
        "unit": "piece",
        "unit_price": 25000000,
        "cost_price": 20000000,
        "min_stock_level": 10,
        "max_stock_level": 100,
        "weight": 0.2,
    },
    {
        "code": "ELC002",
        "name": "Laptop Dell Inspiron",
        "description": "Dell Inspiron laptop for business and personal use",
        "category": "Electronics",
        "unit": "piece",
        "unit_price": 45000000,
        "cost_price": 38000000,
        "min_stock_level": 5,
        "max_stock_level": 50,
        "weight": 2.1,
    },
    {
        "code": "CLT001",
        "name": "T-Shirt Cotton",
        "description": "High-quality cotton t-shirt available in various colors",
        "category": "Clothing",
        "unit": "piece",
        "unit_price": 500000,
        "cost_price": 300000,
        "min_stock_level": 50,
        "max_stock_level": 500,
        "weight": 0.2,
    },
    {
        "code": "BK001",
        "name": "Programming Book - JavaScript",
        "description": "Complete guide to JavaScript programming",
        "category": "Books",
        "unit": "piece",
        "unit_price": 800000,
        "cost_price": 500000,
        "min_stock_level": 20,
        "max_stock_level": 200,
        "weight": 0.5,
    },
    {
        "code": "HG001",
        "name": "Garden Tool Set",
        "description": "Complete set of gardening tools for home use",
        "category": "Home & Garden",
        "unit": "set",
        "unit_price": 2500000,
        "cost_price": 1800000,
        "min_stock_level": 15,
        "max_stock_level": 100,
        "weight": 3.5,
    },
)

# Opening stock per (product code, warehouse code).
OPENING_STOCK = {
    ("ELC001", "MW01"): 60,
    ("ELC001", "SW02"): 25,
    ("ELC002", "MW01"): 30,
    ("ELC002", "SW02"): 12,
    ("CLT001", "MW01"): 120,
    ("CLT001", "SW02"): 40,
    ("BK001", "MW01"): 80,
    ("BK001", "SW02"): 35,
    ("HG001", "MW01"): 45,
    ("HG001", "SW02"): 20,
}

SAMPLE_SALES = (
    ("ELC001", "MW01", 8, "Acme Retail"),
    ("CLT001", "SW02", 15, "City Outfitters"),
    ("BK001", "MW01", 5, "University Bookshop"),
)


def reset_database(engine: Engine) -> None:
    """Drop and recreate every table."""

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    run_migrations(engine)
    logger.warning("database.reset", extra={"extra_data": {"url": engine.url.render_as_string(hide_password=True)}})


def seed_database(db: Session) -> dict[str, int]:
    """Create demo users, catalogue, warehouses and opening stock.

    Returns how many rows of each kind were created (all zero when the
    database had already been seeded).
    """

    created = {"users": 0, "categories": 0, "warehouses": 0, "products": 0, "transactions": 0}
    if db.execute(select(User.id).where(User.username == USERS[0]["username"])).first():
        logger.info("seed.skipped", extra={"extra_data": {"reason": "admin user exists"}})
        return created

    users = [create_user(db, payload) for payload in USERS]
    created["users"] = len(users)
    admin, manager = users

    categories = {payload["name"]: create_category(db, payload) for payload in CATEGORIES}
    created["categories"] = len(categories)

    warehouses = {payload["code"]: create_warehouse(db, payload) for payload in WAREHOUSES}
    created["warehouses"] = len(warehouses)

    products = {}
    for payload in PRODUCTS:
        data = dict(payload)
        data["category_id"] = categories[data.pop("category")].id
        products[data["code"]] = create_product(db, data)
    created["products"] = len(products)

    for (product_code, warehouse_code), quantity in OPENING_STOCK.items():
        product = products[product_code]
        create_transaction(
            db,
            {
                "type": TRANSACTION_INBOUND,
                "product_id": product.id,
                "warehouse_id": warehouses[warehouse_code].id,
                "quantity": quantity,
                "unit_cost": product.cost_price,
                "reason": "Opening stock",
            },
            admin,
        )
        created["transactions"] += 1

    for product_code, warehouse_code, quantity, customer in SAMPLE_SALES:
        product = products[product_code]
        create_transaction(
            db,
            {
                "type": TRANSACTION_OUTBOUND,
                "product_id": product.id,
                "warehouse_id": warehouses[warehouse_code].id,
                "quantity": quantity,
                "unit_cost": product.unit_price,
                "customer_name": customer,
            },
            manager,
        )
        created["transactions"] += 1

    logger.info("seed.completed", extra={"extra_data": created})
    return created
