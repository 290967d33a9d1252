"""Inventory and transaction exports (JSON rows, CSV, Excel and PDF files)."""

from __future__ import annotations

import csv
import io
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable, Sequence

from fpdf import FPDF
from fpdf.enums import XPos, YPos
from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter
from sqlalchemy import select
from sqlalchemy.orm import Session

from ..core.timestamps import utcnow
from ..crud.transactions import export_transactions
from ..models.inventory import Inventory
from ..models.product import Product
from ..models.warehouse import Warehouse

TWOPLACES = Decimal("0.01")

REPORT_FORMATS = ("json", "csv", "excel", "pdf")
MEDIA_TYPES = {
    "csv": "text/csv; charset=utf-8",
    "excel": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    "pdf": "application/pdf",
}
FILE_EXTENSIONS = {"csv": "csv", "excel": "xlsx", "pdf": "pdf"}

# (row key, column heading, relative PDF width)
INVENTORY_COLUMNS: tuple[tuple[str, str, int], ...] = (
    ("product_code", "Product Code", 3),
    ("product_name", "Product Name", 6),
    ("category", "Category", 4),
    ("warehouse", "Warehouse", 5),
    ("quantity", "Quantity", 2),
    ("unit", "Unit", 2),
    ("min_stock_level", "Min Stock Level", 3),
    ("status", "Status", 2),
)

TRANSACTION_COLUMNS: tuple[tuple[str, str, int], ...] = (
    ("reference", "Reference", 5),
    ("date", "Date", 3),
    ("type", "Type", 3),
    ("product_code", "Product Code", 3),
    ("product_name", "Product Name", 5),
    ("warehouse", "Warehouse", 4),
    ("quantity", "Quantity", 2),
    ("unit_cost", "Unit Cost", 2),
    ("total_cost", "Total Cost", 3),
    ("user", "User", 3),
    ("notes", "Notes", 4),
)

STATUS_LOW = "Low Stock"
STATUS_OK = "OK"


def _money(value: Any) -> Decimal:
    return Decimal(str(value or 0)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def inventory_report_rows(
    db: Session,
    *,
    warehouse_id: int | None = None,
    category_id: int | None = None,
) -> list[dict[str, Any]]:
    """One row per stock record of an active product."""

    stmt = (
        select(Inventory)
        .join(Product, Product.id == Inventory.product_id)
        .join(Warehouse, Warehouse.id == Inventory.warehouse_id)
        .where(Product.is_active.is_(True))
    )
    if warehouse_id is not None:
        stmt = stmt.where(Inventory.warehouse_id == warehouse_id)
    if category_id is not None:
        stmt = stmt.where(Product.category_id == category_id)
    stmt = stmt.order_by(Warehouse.name, Product.code)

    rows: list[dict[str, Any]] = []
    for item in db.execute(stmt).unique().scalars():
        product = item.product
        rows.append(
            {
                "product_code": product.code,
                "product_name": product.name,
                "category": product.category.name if product.category else "",
                "warehouse": item.warehouse.name,
                "quantity": item.quantity,
                "unit": product.unit,
                "min_stock_level": product.min_stock_level,
                "status": STATUS_LOW if item.is_low_stock else STATUS_OK,
            }
        )
    return rows


def transaction_report_rows(
    db: Session,
    *,
    start_date: object | None = None,
    end_date: object | None = None,
    type: str | None = None,
    warehouse_id: int | None = None,
) -> list[dict[str, Any]]:
    rows: list[dict[str, Any]] = []
    for tx in export_transactions(
        db, start_date=start_date, end_date=end_date, type=type, warehouse_id=warehouse_id
    ):
        rows.append(
            {
                "reference": tx.reference_number,
                "date": (tx.transaction_date or "")[:10],
                "type": tx.type,
                "product_code": tx.product.code if tx.product else "",
                "product_name": tx.product.name if tx.product else "",
                "warehouse": tx.warehouse.name if tx.warehouse else "",
                "quantity": tx.quantity,
                "unit_cost": _money(tx.unit_cost),
                "total_cost": tx.total_cost,
                "user": tx.user.full_name if tx.user else "",
                "notes": tx.notes or "",
            }
        )
    return rows


def report_filename(prefix: str, fmt: str, today: date | None = None) -> str:
    stamp = (today or utcnow().date()).isoformat()
    return f"{prefix}-{stamp}.{fmt}"


def render_csv(rows: Iterable[dict[str, Any]], columns: Sequence[tuple[str, str, int]]) -> bytes:
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow([heading for _, heading, _ in columns])
    for row in rows:
        writer.writerow(["" if row.get(key) is None else row.get(key) for key, _, _ in columns])
    # BOM so spreadsheet programs pick UTF-8.
    return ("\ufeff" + buffer.getvalue()).encode("utf-8")


def _latin1(value: Any) -> str:
    # Core PDF fonts only cover Latin-1.
    return str("" if value is None else value).encode("latin-1", "replace").decode("latin-1")


def render_pdf(title: str, rows: Sequence[dict[str, Any]], columns: Sequence[tuple[str, str, int]]) -> bytes:
    """Render ``rows`` as a simple landscape table."""

    pdf = FPDF(orientation="L", unit="mm", format="A4")
    pdf.set_auto_page_break(auto=True, margin=12)
    pdf.add_page()

    effective_width = pdf.w - pdf.l_margin - pdf.r_margin
    total_weight = sum(weight for _, _, weight in columns)
    widths = [effective_width * weight / total_weight for _, _, weight in columns]

    pdf.set_font("Helvetica", "B", 14)
    pdf.cell(effective_width, 8, _latin1(title), new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.set_font("Helvetica", size=9)
    generated = utcnow().strftime("%Y-%m-%d %H:%M UTC")
    pdf.cell(effective_width, 5, f"Generated: {generated}  |  Rows: {len(rows)}", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
    pdf.ln(2)

    def header() -> None:
        pdf.set_font("Helvetica", "B", 8)
        pdf.set_fill_color(230, 230, 230)
        for (_, heading, _), width in zip(columns, widths):
            pdf.cell(width, 6, heading, border=1, fill=True)
        pdf.ln()
        pdf.set_font("Helvetica", size=8)

    header()
    for row in rows:
        if pdf.will_page_break(6):
            pdf.add_page()
            header()
        for (key, _, _), width in zip(columns, widths):
            text = _latin1(row.get(key))
            while text and pdf.get_string_width(text) > width - 2:
                text = text[:-1]
            pdf.cell(width, 6, text, border=1)
        pdf.ln()

    return bytes(pdf.output())


def _cell(value: Any) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    return "" if value is None else value


def render_xlsx(title: str, rows: Iterable[dict[str, Any]], columns: Sequence[tuple[str, str, int]]) -> bytes:
    """Render ``rows`` as a single-sheet workbook with a bold, shaded header row."""

    workbook = Workbook()
    sheet = workbook.active
    sheet.title = title[:31]
    sheet.append([heading for _, heading, _ in columns])
    header_fill = PatternFill(start_color="FFE0E0E0", end_color="FFE0E0E0", fill_type="solid")
    for cell in sheet[1]:
        cell.font = Font(bold=True)
        cell.fill = header_fill
    for row in rows:
        sheet.append([_cell(row.get(key)) for key, _, _ in columns])
    for index, (_, _, weight) in enumerate(columns, start=1):
        sheet.column_dimensions[get_column_letter(index)].width = 5 * weight
    sheet.freeze_panes = "A2"

    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()
