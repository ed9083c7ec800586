"""Export service for generating table exports in various formats."""

import csv
import io
from datetime import date, datetime
from typing import Any

import yaml
from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter

from zuq.models.base import utcnow
from zuq.repositories import EXPORT_TABLES, Repositories, Row
from zuq.schemas.export import ExportFormat, ExportMetadata
from zuq.services.import_service.converters import iso_to_br_date

SHEET_TITLES = {
    "equipment": "Equipamentos",
    "suppliers": "Fornecedores",
    "readers": "Leitoras",
    "movements": "Movimentações",
    "orders": "Pedidos",
    "maintenance": "Manutenções",
}


def _format_value(key: str, value: Any) -> Any:
    """Format one cell: timestamps and dates in pt-BR, None as blank."""
    if value is None:
        return ""
    if key.endswith("_at") and isinstance(value, datetime):
        return value.strftime("%d/%m/%Y %H:%M:%S")
    if "date" in key and isinstance(value, (datetime, date, str)):
        try:
            return iso_to_br_date(value)
        except ValueError:
            return value
    if isinstance(value, (list, dict)):
        return str(value)
    return value


def collect_columns(rows: list[Row]) -> list[str]:
    """Union of row keys in first-seen order."""
    columns: dict[str, None] = {}
    for row in rows:
        for key in row:
            columns.setdefault(key, None)
    return list(columns)


def format_rows(rows: list[Row]) -> tuple[list[str], list[list[Any]]]:
    """Turn rows into a header list and formatted value lists."""
    columns = collect_columns(rows)
    values = [[_format_value(col, row.get(col)) for col in columns] for row in rows]
    return columns, values


def generate_filename(table: str, export_format: ExportFormat) -> str:
    """Generate a standardized filename for exports."""
    timestamp = utcnow().strftime("%Y%m%d_%H%M%S")
    return f"zuq_{table}_{timestamp}.{export_format.value}"


def export_rows_to_csv(rows: list[Row]) -> bytes:
    """Export rows to CSV; an empty row list yields an empty file."""
    columns, values = format_rows(rows)
    if not columns:
        return b""

    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(columns)
    writer.writerows(values)
    return output.getvalue().encode("utf-8")


def export_rows_to_xlsx(rows: list[Row], title: str = "Export") -> bytes:
    """Export rows to Excel (XLSX) with a styled, frozen header row."""
    columns, values = format_rows(rows)

    wb = Workbook()
    ws = wb.active
    ws.title = title[:31]

    header_font = Font(bold=True, color="FFFFFF")
    header_fill = PatternFill(start_color="1F4E79", end_color="1F4E79", fill_type="solid")
    header_alignment = Alignment(horizontal="center")

    for col_idx, header in enumerate(columns, 1):
        cell = ws.cell(row=1, column=col_idx, value=header)
        cell.font = header_font
        cell.fill = header_fill
        cell.alignment = header_alignment

    for row_idx, row_values in enumerate(values, 2):
        for col_idx, value in enumerate(row_values, 1):
            ws.cell(row=row_idx, column=col_idx, value=value)

    # Auto-adjust column widths
    for col_idx, header in enumerate(columns, 1):
        max_length = len(header)
        for row_values in values:
            cell_value = row_values[col_idx - 1]
            if cell_value not in ("", None):
                max_length = max(max_length, len(str(cell_value)))
        ws.column_dimensions[get_column_letter(col_idx)].width = min(max_length + 2, 50)

    ws.freeze_panes = "A2"

    output = io.BytesIO()
    wb.save(output)
    return output.getvalue()


def _records(rows: list[Row]) -> tuple[list[str], list[dict[str, Any]]]:
    columns, values = format_rows(rows)
    return columns, [dict(zip(columns, row_values)) for row_values in values]


def export_rows_to_yaml(rows: list[Row], table: str) -> bytes:
    """Export rows to YAML with an export_info block."""
    columns, records = _records(rows)
    info = ExportMetadata(table=table, total_count=len(records), format="yaml", columns=columns)
    export_data = {
        table: records,
        "export_info": info.model_dump(mode="json"),
    }
    return yaml.dump(
        export_data, default_flow_style=False, allow_unicode=True, sort_keys=False
    ).encode("utf-8")


def export_rows_to_json(rows: list[Row], table: str) -> dict[str, Any]:
    """Export rows to a JSON-serializable dictionary with metadata."""
    columns, records = _records(rows)
    return {
        "rows": records,
        "export_info": ExportMetadata(
            table=table, total_count=len(records), format="json", columns=columns
        ).model_dump(mode="json"),
    }


def get_content_type(export_format: ExportFormat) -> str:
    """Get the MIME type for an export format."""
    content_types = {
        ExportFormat.CSV: "text/csv",
        ExportFormat.XLSX: "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        ExportFormat.YAML: "application/x-yaml",
        ExportFormat.JSON: "application/json",
    }
    return content_types[export_format]


async def load_table(repos: Repositories, table: str) -> list[Row]:
    """Load every row of an exportable table.

    Raises:
        KeyError: If the table is not exportable.
    """
    if table not in EXPORT_TABLES:
        raise KeyError(table)
    return await repos.table(table).list_all(sort="created_at")
