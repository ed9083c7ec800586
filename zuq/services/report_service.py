"""KPI report generation: aggregation, HTML rendering and PDF layout."""

import io
import logging
import re
from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from pathlib import Path
from typing import Any

import fitz  # PyMuPDF
from jinja2 import Environment, FileSystemLoader

from zuq.models import MaintenanceStatus, MovementType, OrderStatus, ReportStatus
from zuq.models.base import utcnow
from zuq.repositories import Repositories, Row

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"

KPI_LABELS = {
    "stock_summary": "Estoque",
    "movements_summary": "Movimentações",
    "orders_summary": "Pedidos",
    "readers_status": "Leitoras",
    "maintenance_summary": "Manutenção",
}
KPI_TYPES = tuple(KPI_LABELS)

MONTHS_PT = (
    "janeiro",
    "fevereiro",
    "março",
    "abril",
    "maio",
    "junho",
    "julho",
    "agosto",
    "setembro",
    "outubro",
    "novembro",
    "dezembro",
)

# Both spellings occur in stored maintenance records
_MAINTENANCE_DONE = {MaintenanceStatus.CONCLUIDO.value, "Concluída"}

_template_env = Environment(
    loader=FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=True,
)


@dataclass
class ReportData:
    """Rows fetched for one reporting period."""

    equipment: list[Row]
    movements: list[Row]
    orders: list[Row]
    readers: list[Row]
    maintenance: list[Row]
    suppliers: list[Row]


@dataclass
class GeneratedReport:
    filename: str
    content: bytes
    media_type: str
    history: Row


def period_bounds(start: date, end: date) -> tuple[datetime, datetime]:
    """Whole-day datetime bounds for an inclusive date range."""
    return datetime.combine(start, time.min), datetime.combine(end, time.max)


async def fetch_report_data(repos: Repositories, start: date, end: date) -> ReportData:
    """Load the rows a report needs; dated collections are limited to the period."""
    period_start, period_end = period_bounds(start, end)
    return ReportData(
        equipment=await repos.equipment.list_all(),
        movements=await repos.movements.list_range("movement_date", period_start, period_end),
        orders=await repos.orders.list_range("created_at", period_start, period_end),
        readers=await repos.readers.list_all(),
        maintenance=await repos.maintenance.list_range("send_date", period_start, period_end),
        suppliers=await repos.suppliers.list_all(),
    )


def _equipment_name(equipment: Row | None) -> str:
    if not equipment:
        return "N/A"
    return f"{equipment.get('brand', '')} {equipment.get('model', '')}"


def _quantity(row: Row, key: str = "quantity") -> int:
    return int(row.get(key) or 0)


def _stock_summary(data: ReportData) -> dict[str, Any]:
    balance: dict[str, int] = defaultdict(int)
    for mov in data.movements:
        sign = 1 if mov.get("movement_type") == MovementType.ENTRADA.value else -1
        balance[mov.get("equipment_id")] += sign * _quantity(mov)

    details = []
    by_category: dict[str, int] = {}
    low_stock = 0
    for item in data.equipment:
        current = balance.get(item["id"], 0)
        min_stock = int(item.get("min_stock") or 0)
        is_low = current < min_stock
        if is_low:
            low_stock += 1
        category = item.get("category") or "Sem Categoria"
        by_category[category] = by_category.get(category, 0) + current
        details.append(
            {
                "name": _equipment_name(item),
                "current_stock": current,
                "min_stock": min_stock,
                "status": "Baixo" if is_low else "Normal",
            }
        )

    return {
        "total_items": len(data.equipment),
        "total_stock": sum(d["current_stock"] for d in details),
        "low_stock_items": low_stock,
        "stock_by_category": by_category,
        "stock_details": details,
    }


def _movements_summary(data: ReportData) -> dict[str, Any]:
    summary = {"total_entries": 0, "total_exits": 0, "entries_count": 0, "exits_count": 0}
    by_date: dict[str, dict[str, int]] = {}
    for mov in data.movements:
        quantity = _quantity(mov)
        day = mov["movement_date"].strftime("%d/%m/%Y")
        bucket = by_date.setdefault(day, {"entries": 0, "exits": 0})
        if mov.get("movement_type") == MovementType.ENTRADA.value:
            summary["total_entries"] += quantity
            summary["entries_count"] += 1
            bucket["entries"] += quantity
        else:
            summary["total_exits"] += quantity
            summary["exits_count"] += 1
            bucket["exits"] += quantity
    summary["net_balance"] = summary["total_entries"] - summary["total_exits"]
    summary["movements_by_date"] = by_date
    return summary


def _orders_summary(data: ReportData) -> dict[str, Any]:
    suppliers = {s["id"]: s for s in data.suppliers}
    summary = {
        "total_orders": 0,
        "total_quantity": 0,
        "completed_orders": 0,
        "partial_orders": 0,
        "pending_orders": 0,
    }
    by_supplier: dict[str, dict[str, int]] = {}
    for order in data.orders:
        quantity = _quantity(order)
        summary["total_orders"] += 1
        summary["total_quantity"] += quantity
        status = order.get("status")
        if status == OrderStatus.RECEBIDO.value:
            summary["completed_orders"] += 1
        elif status == OrderStatus.PARCIALMENTE_RECEBIDO.value:
            summary["partial_orders"] += 1
        else:
            summary["pending_orders"] += 1

        supplier = suppliers.get(order.get("supplier_id"))
        name = supplier.get("name") if supplier else None
        bucket = by_supplier.setdefault(name or "Fornecedor não informado", {"count": 0, "quantity": 0})
        bucket["count"] += 1
        bucket["quantity"] += quantity
    summary["orders_by_supplier"] = by_supplier
    return summary


def _readers_status(data: ReportData) -> dict[str, Any]:
    equipment = {e["id"]: e for e in data.equipment}
    by_status: dict[str, int] = {}
    readers_list = []
    for reader in data.readers:
        status = reader.get("status")
        by_status[status] = by_status.get(status, 0) + 1
        eq = equipment.get(reader.get("equipment_id"))
        readers_list.append(
            {
                "code": reader.get("code"),
                "status": status,
                "condition": reader.get("condition"),
                "equipment": _equipment_name(eq),
            }
        )
    return {"total": len(data.readers), "by_status": by_status, "readers_list": readers_list}


def _maintenance_summary(data: ReportData) -> dict[str, Any]:
    summary = {"total_records": 0, "total_quantity": 0, "completed": 0, "in_progress": 0, "pending": 0}
    by_month: dict[str, int] = {}
    for record in data.maintenance:
        summary["total_records"] += 1
        summary["total_quantity"] += _quantity(record)
        status = record.get("status")
        if status in _MAINTENANCE_DONE:
            summary["completed"] += 1
        elif status == MaintenanceStatus.EM_ANDAMENTO.value:
            summary["in_progress"] += 1
        else:
            summary["pending"] += 1
        sent: datetime = record["send_date"]
        month = f"{MONTHS_PT[sent.month - 1]} de {sent.year}"
        by_month[month] = by_month.get(month, 0) + 1
    summary["maintenance_by_month"] = by_month
    return summary


_CALCULATORS = {
    "stock_summary": _stock_summary,
    "movements_summary": _movements_summary,
    "orders_summary": _orders_summary,
    "readers_status": _readers_status,
    "maintenance_summary": _maintenance_summary,
}


def calculate_kpis(data: ReportData, selected: list[str]) -> dict[str, Any]:
    """Compute only the selected KPIs; unknown names are ignored.

    Stock is the balance of the period's movements (entries minus exits),
    not an all-time figure.
    """
    return {kpi: calc(data) for kpi, calc in _CALCULATORS.items() if kpi in selected}


def report_filename(report_name: str, extension: str, now: datetime | None = None) -> str:
    """Report name with non-alphanumerics replaced by ``_`` plus a timestamp."""
    stamp = int((now or datetime.now(timezone.utc)).timestamp() * 1000)
    safe = re.sub(r"[^a-zA-Z0-9]", "_", report_name)
    return f"{safe}_{stamp}.{extension}"


def render_report_html(
    kpis: dict[str, Any],
    report_name: str,
    start: date,
    end: date,
    company_name: str = "ZUQ Performance",
    for_pdf: bool = False,
    generated_at: datetime | None = None,
) -> str:
    """Render the KPI report HTML page."""
    generated_at = generated_at or utcnow()
    template = _template_env.get_template("report.html")
    return template.render(
        report_name=report_name,
        company_name=company_name,
        start_date=start.strftime("%d/%m/%Y"),
        end_date=end.strftime("%d/%m/%Y"),
        generated_at=generated_at.strftime("%d/%m/%Y às %H:%M:%S"),
        year=generated_at.year,
        kpis=kpis,
        for_pdf=for_pdf,
    )


def render_pdf(html: str, paper_size: str = "a4", margin: int = 36) -> bytes:
    """Lay out HTML onto PDF pages with PyMuPDF's Story API."""
    story = fitz.Story(html=html)
    output = io.BytesIO()
    writer = fitz.DocumentWriter(output)
    mediabox = fitz.paper_rect(paper_size)
    where = mediabox + (margin, margin, -margin, -margin)

    more = 1
    while more:
        device = writer.begin_page(mediabox)
        more, _ = story.place(where)
        story.draw(device)
        writer.end_page()
    writer.close()
    return output.getvalue()


async def generate_report(
    repos: Repositories,
    user_id: str,
    report_name: str,
    start: date,
    end: date,
    kpis: list[str],
    file_format: str = "html",
    company_name: str = "ZUQ Performance",
    paper_size: str = "a4",
    margin: int = 36,
) -> GeneratedReport:
    """Build a KPI report and record it in the report history.

    A failed generation is recorded with status ``failed`` and re-raised.
    """
    period_start, period_end = period_bounds(start, end)
    history_base = {
        "user_id": user_id,
        "report_name": report_name,
        "period_start": period_start,
        "period_end": period_end,
        "kpis_included": list(kpis),
        "file_format": file_format,
        "created_at": utcnow(),
    }

    try:
        data = await fetch_report_data(repos, start, end)
        results = calculate_kpis(data, kpis)
        html = render_report_html(
            results, report_name, start, end, company_name=company_name, for_pdf=file_format == "pdf"
        )
        if file_format == "pdf":
            content = render_pdf(html, paper_size=paper_size, margin=margin)
            media_type = "application/pdf"
        else:
            content = html.encode("utf-8")
            media_type = "text/html; charset=utf-8"
    except Exception as e:
        logger.error("Report %r generation failed: %s", report_name, e)
        await repos.report_history.insert(
            {
                **history_base,
                "status": ReportStatus.FAILED.value,
                "error_message": str(e),
                "completed_at": utcnow(),
            }
        )
        raise

    history = await repos.report_history.insert(
        {**history_base, "status": ReportStatus.COMPLETED.value, "completed_at": utcnow()}
    )
    logger.info("Generated %s report %r for user %s", file_format, report_name, user_id)
    return GeneratedReport(
        filename=report_filename(report_name, file_format),
        content=content,
        media_type=media_type,
        history=history,
    )
