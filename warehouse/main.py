from __future__ import annotations

import logging

from fastapi import Depends
from prometheus_fastapi_instrumentator import Instrumentator
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from warehouse.core.config import settings
from warehouse.core.logging import configure_logging
from warehouse.core.timestamps import utcnow_iso
from warehouse.db.session import get_db

from . import app as wired_app

configure_logging(settings.LOG_LEVEL, environment=settings.APP_ENV)
logger = logging.getLogger("warehouse")

app = wired_app
instrumentator = Instrumentator(excluded_handlers=["/metrics", "/api/health"])
instrumentator.instrument(app).expose(app, include_in_schema=False)


@app.get("/api/health", tags=["health"])
def health(db: Session = Depends(get_db)) -> dict[str, str]:
    try:
        db.execute(text("SELECT 1"))
        database = "connected"
    except SQLAlchemyError:
        logger.warning("health.database_unavailable", exc_info=True)
        database = "unavailable"
    return {
        "status": "OK",
        "timestamp": utcnow_iso(),
        "environment": settings.APP_ENV,
        "database": database,
    }
