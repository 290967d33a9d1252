"""Additive schema upgrades for SQLite databases created by older releases."""

from __future__ import annotations

import logging
from typing import Iterable

from sqlalchemy import text
from sqlalchemy.engine import Engine

logger = logging.getLogger(__name__)

# Columns introduced after the first release, per table. Only ADD COLUMN is
# used; nothing is dropped or rewritten.
ADDED_COLUMNS: dict[str, dict[str, str]] = {
    "inventory": {
        "reserved_quantity": "INTEGER DEFAULT 0 NOT NULL",
        "last_count_date": "TEXT",
        "location": "TEXT",
    },
    "products": {
        "tags": "TEXT DEFAULT '[]' NOT NULL",
        "image": "TEXT",
    },
    "transactions": {
        "destination_warehouse_id": "INTEGER",
        "quantity_before": "INTEGER",
        "quantity_after": "INTEGER",
        "attachments": "TEXT DEFAULT '[]' NOT NULL",
    },
    "users": {
        "avatar": "TEXT",
        "last_login": "TEXT",
    },
}

INDEXES: tuple[tuple[str, str, tuple[str, ...], bool], ...] = (
    ("transactions", "ix_transactions_reference_unique", ("reference_number",), True),
    ("inventory", "ix_inventory_product_warehouse_unique", ("product_id", "warehouse_id"), True),
)


def _column_names(engine: Engine, table: str) -> set[str]:
    with engine.connect() as conn:
        rows = conn.execute(text(f"PRAGMA table_info({table})")).mappings().all()
    return {row["name"] for row in rows}


def _add_column(engine: Engine, table: str, col_def: str) -> None:
    with engine.begin() as conn:
        conn.execute(text(f"ALTER TABLE {table} ADD COLUMN {col_def}"))


def _create_index_if_not_exists(engine: Engine, table: str, name: str, cols: Iterable[str], unique: bool = False) -> None:
    cols_sql = ", ".join(cols)
    unique_sql = "UNIQUE " if unique else ""
    with engine.begin() as conn:
        conn.execute(text(f"CREATE {unique_sql}INDEX IF NOT EXISTS {name} ON {table} ({cols_sql})"))


def run_migrations(engine: Engine) -> list[str]:
    """Bring an existing SQLite schema up to date; returns the applied steps.

    Other backends are expected to be managed out of band and are skipped.
    """

    if engine.dialect.name != "sqlite":
        return []

    applied: list[str] = []
    for table, columns in ADDED_COLUMNS.items():
        existing = _column_names(engine, table)
        if not existing:
            # Fresh database: create_all builds the current schema.
            continue
        for name, dtype in columns.items():
            if name not in existing:
                _add_column(engine, table, f"{name} {dtype}")
                applied.append(f"{table}.{name}")

    for table, name, cols, unique in INDEXES:
        if _column_names(engine, table):
            _create_index_if_not_exists(engine, table, name, cols, unique=unique)

    if applied:
        logger.info("schema.migrated", extra={"extra_data": {"columns": applied}})
    return applied
