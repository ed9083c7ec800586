"""Import templates, the column guide and the per-import CSV report."""

import csv
import io
import re
from typing import Any

from openpyxl import Workbook
from openpyxl.styles import Font

from zuq.repositories import Row

from .constants import DATA_TYPE_LABELS, IMPORT_STATUS_LABELS, TEMPLATE_CONFIGS
from .converters import format_br_datetime
from .errors import TemplateNotFoundError

REPORT_HEADERS = [
    "Arquivo",
    "Tipo de Dados",
    "Status",
    "Total de Registros",
    "Registros Processados",
    "Registros com Erro",
    "Data de Criação",
    "Data de Conclusão",
]


def get_template_guide() -> list[dict[str, Any]]:
    """Column guide for every data type, without the sample rows."""
    return [
        {
            "data_type": data_type,
            "label": config["label"],
            "description": config["description"],
            "columns": [dict(column) for column in config["columns"]],
        }
        for data_type, config in TEMPLATE_CONFIGS.items()
    ]


def template_filename(data_type: str) -> str:
    return f"template_{data_type}.xlsx"


def build_template_workbook(data_type: str) -> bytes:
    """Build the XLSX template: one "Template" sheet, header plus a sample row.

    Raises:
        TemplateNotFoundError: If the data type has no template.
    """
    config = TEMPLATE_CONFIGS.get(data_type)
    if config is None:
        raise TemplateNotFoundError(data_type)

    wb = Workbook()
    ws = wb.active
    ws.title = "Template"

    headers = [column["name"] for column in config["columns"]]
    ws.append(headers)
    ws.append(list(config["sample"]))

    for cell in ws[1]:
        cell.font = Font(bold=True)

    output = io.BytesIO()
    wb.save(output)
    return output.getvalue()


def generate_import_report(history: Row) -> str:
    """Render one import history entry as a two-line CSV report.

    Text cells are quoted, counts are not; labels and dates are pt-BR.
    """
    output = io.StringIO()
    output.write(",".join(REPORT_HEADERS) + "\n")

    writer = csv.writer(output, quoting=csv.QUOTE_NONNUMERIC, lineterminator="")
    data_type = history.get("data_type", "")
    status = history.get("status", "")
    writer.writerow(
        [
            history.get("original_filename", ""),
            DATA_TYPE_LABELS.get(data_type, data_type),
            IMPORT_STATUS_LABELS.get(status, status),
            int(history.get("total_records") or 0),
            int(history.get("processed_records") or 0),
            int(history.get("failed_records") or 0),
            format_br_datetime(history.get("created_at")),
            format_br_datetime(history.get("completed_at")),
        ]
    )
    return output.getvalue()


def import_report_filename(history: Row, today: str) -> str:
    """Download name: ``relatorio-importacao-<file>-<YYYY-MM-DD>.csv``, ASCII only."""
    name = re.sub(r"[^A-Za-z0-9._-]", "_", history.get("original_filename") or "importacao")
    return f"relatorio-importacao-{name}-{today}.csv"
