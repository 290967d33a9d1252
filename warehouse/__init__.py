"""Application wiring for the warehouse service.

Importing this package builds the FastAPI ``app``: tables are created (and
older SQLite files upgraded), middleware and error handlers are installed and
every API router is mounted under ``/api``.
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import settings
from .core.errors import http_exception_handler, unhandled_exception_handler, validation_exception_handler
from .db.migrate import run_migrations
from .db.session import Base, engine
from .middlewares import RequestIdMiddleware, SecurityHeadersMiddleware

# Importing the models registers their tables on ``Base.metadata``.
from .models import category as _category  # noqa: F401
from .models import inventory as _inventory  # noqa: F401
from .models import product as _product  # noqa: F401
from .models import transaction as _transaction  # noqa: F401
from .models import user as _user  # noqa: F401
from .models import warehouse as _warehouse  # noqa: F401

app = FastAPI(title=settings.APP_NAME)

Base.metadata.create_all(bind=engine)
run_migrations(engine)

# Added last runs first: CORS answers preflights before anything else.
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestIdMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Request-ID", "Content-Disposition"],
)

app.add_exception_handler(StarletteHTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

from .routers import api_auth as api_auth_router  # noqa: E402

app.include_router(api_auth_router.router)

from .routers import api_users as api_users_router  # noqa: E402

app.include_router(api_users_router.router)

from .routers import api_categories as api_categories_router  # noqa: E402

app.include_router(api_categories_router.router)

from .routers import api_products as api_products_router  # noqa: E402

app.include_router(api_products_router.router)

from .routers import api_warehouses as api_warehouses_router  # noqa: E402

app.include_router(api_warehouses_router.router)

from .routers import api_inventory as api_inventory_router  # noqa: E402

app.include_router(api_inventory_router.router)

from .routers import api_transactions as api_transactions_router  # noqa: E402

app.include_router(api_transactions_router.router)

from .routers import api_dashboard as api_dashboard_router  # noqa: E402

app.include_router(api_dashboard_router.router)

from .routers import api_reports as api_reports_router  # noqa: E402

app.include_router(api_reports_router.router)


__all__ = ["app"]
