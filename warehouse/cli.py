"""``warehouse-admin``: database setup and a development server."""

from __future__ import annotations

import argparse
import json
import logging
from typing import Sequence

from .core.config import settings
from .core.logging import configure_logging

logger = logging.getLogger("warehouse.cli")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="warehouse-admin", description="Manage the warehouse service.")
    sub = p.add_subparsers(dest="command", required=True)

    sub.add_parser("init-db", help="Create tables and apply additive schema upgrades.")

    seed = sub.add_parser("seed", help="Load demo users, catalogue, warehouses and opening stock.")
    seed.add_argument("--reset", action="store_true", help="Drop and recreate every table first (destroys data).")

    serve = sub.add_parser("serve", help="Run the API with uvicorn.")
    serve.add_argument("--host", default=settings.HOST)
    serve.add_argument("--port", type=int, default=settings.PORT)
    serve.add_argument("--reload", action="store_true", help="Restart on code changes (development only).")
    return p.parse_args(argv)


def init_db() -> list[str]:
    from .db.migrate import run_migrations
    from .db.session import Base, engine
    from .models import category, inventory, product, transaction, user, warehouse  # noqa: F401

    Base.metadata.create_all(bind=engine)
    applied = run_migrations(engine)
    logger.info("database.ready", extra={"extra_data": {"migrated": applied}})
    return applied


def seed(reset: bool = False) -> dict[str, int]:
    from .db.session import SessionLocal, engine
    from .services.seed import reset_database, seed_database

    if reset:
        reset_database(engine)
    else:
        init_db()
    with SessionLocal() as db:
        return seed_database(db)


def serve(host: str, port: int, reload: bool = False) -> None:
    import uvicorn

    uvicorn.run("warehouse.main:app", host=host, port=port, reload=reload, log_config=None)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(settings.LOG_LEVEL, environment=settings.APP_ENV)

    if args.command == "init-db":
        init_db()
    elif args.command == "seed":
        created = seed(reset=args.reset)
        print(json.dumps(created, indent=2))
        if created["users"]:
            print("Admin - username: admin, password: admin123")
            print("Manager - username: manager, password: manager123")
    elif args.command == "serve":
        serve(args.host, args.port, reload=args.reload)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
