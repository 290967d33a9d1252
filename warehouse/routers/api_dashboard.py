from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..db.session import get_db
from ..deps.auth import get_current_user
from ..schemas.dashboard import CategoryShare, DashboardOverview, TrendPoint
from ..services.dashboard import build_overview, category_distribution, transaction_trends

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"], dependencies=[Depends(get_current_user)])


@router.get("/overview", response_model=DashboardOverview)
def api_dashboard_overview(db: Session = Depends(get_db)):
    return build_overview(db)


@router.get("/trends", response_model=list[TrendPoint])
def api_dashboard_trends(days: int = Query(30, ge=1, le=365), db: Session = Depends(get_db)):
    return transaction_trends(db, days=days)


@router.get("/category-distribution", response_model=list[CategoryShare])
def api_category_distribution(db: Session = Depends(get_db)):
    return category_distribution(db)
