from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.errors import as_http_error
from ..core.roles import TRANSACTION_STATUS_CHOICES, TRANSACTION_TYPE_CHOICES, choice_pattern
from ..crud.transactions import create_transaction, get_transaction, list_transactions
from ..db.session import get_db
from ..deps.auth import get_current_user, require_writer
from ..models.user import User
from ..schemas.common import Pagination
from ..schemas.transaction import TransactionCreate, TransactionOut, TransactionPage

router = APIRouter(prefix="/api/transactions", tags=["transactions"], dependencies=[Depends(get_current_user)])


@router.get("", response_model=TransactionPage)
def api_list_transactions(
    page: int = Query(1, ge=1),
    limit: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=100),
    type: Optional[str] = Query(None, pattern=choice_pattern(TRANSACTION_TYPE_CHOICES)),
    warehouse_id: Optional[int] = None,
    product_id: Optional[int] = None,
    status: Optional[str] = Query(None, pattern=choice_pattern(TRANSACTION_STATUS_CHOICES)),
    start_date: Optional[str] = Query(None, description="ISO-8601 date or timestamp, inclusive"),
    end_date: Optional[str] = Query(None, description="ISO-8601 date or timestamp, inclusive"),
    db: Session = Depends(get_db),
):
    try:
        items, total = list_transactions(
            db,
            page=page,
            limit=limit,
            type=type,
            warehouse_id=warehouse_id,
            product_id=product_id,
            status=status,
            start_date=start_date,
            end_date=end_date,
        )
    except ValueError as exc:
        raise as_http_error(exc) from exc
    return TransactionPage(
        transactions=[TransactionOut.model_validate(item) for item in items],
        pagination=Pagination.build(page=page, limit=limit, total=total),
    )


@router.get("/{transaction_id}", response_model=TransactionOut)
def api_get_transaction(transaction_id: int, db: Session = Depends(get_db)):
    try:
        return get_transaction(db, transaction_id)
    except ValueError as exc:
        raise as_http_error(exc) from exc


@router.post("", response_model=TransactionOut, status_code=status.HTTP_201_CREATED)
def api_create_transaction(
    payload: TransactionCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_writer),
):
    try:
        return create_transaction(db, payload.model_dump(), user)
    except ValueError as exc:
        raise as_http_error(exc) from exc
