from __future__ import annotations

import io
from typing import Any, Optional, Sequence

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from ..core.errors import as_http_error
from ..core.roles import TRANSACTION_TYPE_CHOICES, choice_pattern
from ..core.timestamps import utcnow_iso
from ..db.session import get_db
from ..deps.auth import get_current_user
from ..services.reports import (
    FILE_EXTENSIONS,
    INVENTORY_COLUMNS,
    MEDIA_TYPES,
    REPORT_FORMATS,
    TRANSACTION_COLUMNS,
    inventory_report_rows,
    render_csv,
    render_pdf,
    render_xlsx,
    report_filename,
    transaction_report_rows,
)

router = APIRouter(prefix="/api/reports", tags=["reports"], dependencies=[Depends(get_current_user)])

FORMAT_PATTERN = choice_pattern(REPORT_FORMATS)


def _render(
    *,
    name: str,
    title: str,
    fmt: str,
    rows: list[dict[str, Any]],
    columns: Sequence[tuple[str, str, int]],
):
    if fmt == "json":
        return {
            "report": name,
            "generated_at": utcnow_iso(),
            "columns": [{"key": key, "label": label} for key, label, _ in columns],
            "rows": rows,
        }
    if fmt == "csv":
        body = render_csv(rows, columns)
    elif fmt == "excel":
        body = render_xlsx(title, rows, columns)
    else:
        body = render_pdf(title, rows, columns)
    filename = report_filename(f"{name}-report", FILE_EXTENSIONS[fmt])
    return StreamingResponse(
        io.BytesIO(body),
        media_type=MEDIA_TYPES[fmt],
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/inventory", summary="Stock levels of active products")
def api_inventory_report(
    warehouse_id: Optional[int] = None,
    category_id: Optional[int] = None,
    format: str = Query("json", pattern=FORMAT_PATTERN),
    db: Session = Depends(get_db),
):
    rows = inventory_report_rows(db, warehouse_id=warehouse_id, category_id=category_id)
    return _render(name="inventory", title="Inventory Report", fmt=format, rows=rows, columns=INVENTORY_COLUMNS)


@router.get("/transactions", summary="Stock movements in a date range")
def api_transaction_report(
    start_date: Optional[str] = None,
    end_date: Optional[str] = None,
    type: Optional[str] = Query(None, pattern=choice_pattern(TRANSACTION_TYPE_CHOICES)),
    warehouse_id: Optional[int] = None,
    format: str = Query("json", pattern=FORMAT_PATTERN),
    db: Session = Depends(get_db),
):
    try:
        rows = transaction_report_rows(
            db, start_date=start_date, end_date=end_date, type=type, warehouse_id=warehouse_id
        )
    except ValueError as exc:
        raise as_http_error(exc) from exc
    return _render(name="transaction", title="Transaction Report", fmt=format, rows=rows, columns=TRANSACTION_COLUMNS)
