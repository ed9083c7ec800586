"""File parsing functions for CSV and XLSX imports."""

import io
import logging
import zipfile
from datetime import date, datetime
from pathlib import PurePath
from typing import Any

from openpyxl import load_workbook
from openpyxl.utils.exceptions import InvalidFileException

from .constants import MAX_ROWS, SUPPORTED_EXTENSIONS
from .errors import ImportParseError

logger = logging.getLogger(__name__)


def _decode(file_content: bytes) -> str:
    """Decode bytes as UTF-8 (BOM tolerated), falling back to Latin-1."""
    try:
        return file_content.decode("utf-8-sig")
    except UnicodeDecodeError:
        return file_content.decode("latin-1")


def _split_csv_line(line: str) -> list[str]:
    # Naive split: quoted fields containing commas are not supported.
    return [value.strip().replace('"', "") for value in line.split(",")]


def parse_csv(
    file_content: bytes, max_rows: int = MAX_ROWS
) -> tuple[list[str], list[dict[str, Any]]]:
    """Parse CSV file content into headers and rows.

    The first non-blank line is the header. Every value is stripped and
    double quotes are removed; missing trailing values become ``""``.

    Raises:
        ImportParseError: If the file has no header or no data line.
    """
    text = _decode(file_content)
    lines = [line for line in text.splitlines() if line.strip()]
    if len(lines) < 2:
        raise ImportParseError(
            "Arquivo CSV deve ter pelo menos um cabeçalho e uma linha de dados"
        )

    headers = _split_csv_line(lines[0])

    rows: list[dict[str, Any]] = []
    for i, line in enumerate(lines[1:]):
        if i >= max_rows:
            logger.warning("CSV truncated at %d rows", max_rows)
            break
        values = _split_csv_line(line)
        rows.append(
            {header: values[j] if j < len(values) else "" for j, header in enumerate(headers)}
        )

    return headers, rows


def _cell_value(value: Any) -> Any:
    """Normalize an XLSX cell: dates to DD/MM/YYYY, text stripped, numbers kept."""
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.strftime("%d/%m/%Y")
    if isinstance(value, date):
        return value.strftime("%d/%m/%Y")
    if isinstance(value, bool):
        return str(value)
    if isinstance(value, (int, float)):
        return value
    return str(value).strip()


def parse_xlsx(
    file_content: bytes, max_rows: int = MAX_ROWS
) -> tuple[list[str], list[dict[str, Any]]]:
    """Parse XLSX file content into headers and rows (first sheet only).

    Uses openpyxl read_only mode and iterates rows lazily. Fully empty rows
    are skipped.

    Raises:
        ImportParseError: If the workbook is unreadable or has no data rows.
    """
    try:
        wb = load_workbook(filename=io.BytesIO(file_content), read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError) as e:
        raise ImportParseError(f"Arquivo Excel inválido: {e}") from e

    try:
        ws = wb.worksheets[0] if wb.worksheets else None
        if ws is None:
            raise ImportParseError("Arquivo Excel não possui planilhas")

        row_iter = ws.iter_rows(values_only=True)
        try:
            raw_headers = next(row_iter)
        except StopIteration:
            raise ImportParseError("Arquivo Excel deve ter cabeçalho e dados") from None

        headers = [str(h).strip() if h is not None else "" for h in raw_headers]
        if not any(headers):
            raise ImportParseError("Arquivo Excel deve ter cabeçalho e dados")

        rows: list[dict[str, Any]] = []
        for row_values in row_iter:
            if len(rows) >= max_rows:
                logger.warning("XLSX truncated at %d rows", max_rows)
                break
            row_dict: dict[str, Any] = {}
            for j, header in enumerate(headers):
                if not header:
                    continue
                row_dict[header] = _cell_value(row_values[j] if j < len(row_values) else None)
            if any(v != "" for v in row_dict.values()):
                rows.append(row_dict)
    finally:
        wb.close()

    if not rows:
        raise ImportParseError("Arquivo Excel deve ter cabeçalho e dados")

    return [h for h in headers if h], rows


def parse_import_file(
    file_content: bytes, filename: str, max_rows: int = MAX_ROWS
) -> list[dict[str, Any]]:
    """Parse an uploaded file into row dictionaries, dispatching on extension.

    Raises:
        ImportParseError: For unsupported extensions or unparseable content.
    """
    ext = PurePath(filename).suffix.lower()
    if ext not in SUPPORTED_EXTENSIONS:
        raise ImportParseError(
            f"Formato de arquivo não suportado: {ext or filename}. Use CSV ou XLSX."
        )

    if ext == ".csv":
        _, rows = parse_csv(file_content, max_rows=max_rows)
    else:
        _, rows = parse_xlsx(file_content, max_rows=max_rows)

    logger.info("Parsed %d rows from %s", len(rows), filename)
    return rows
