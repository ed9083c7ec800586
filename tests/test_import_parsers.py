"""Unit tests for CSV/XLSX parsing and value converters."""

import io
from datetime import date, datetime

import pytest
from openpyxl import Workbook

from zuq.services.import_service import (
    ImportParseError,
    br_date_to_iso,
    iso_to_br_date,
    parse_csv,
    parse_import_file,
    parse_number,
    parse_xlsx,
)
from zuq.services.import_service.converters import as_text, coerce_int, is_valid_br_date


def _make_xlsx(headers: list, rows: list[list]) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.append(headers)
    for row in rows:
        ws.append(row)
    output = io.BytesIO()
    wb.save(output)
    return output.getvalue()


# =============================================================================
# CSV Parsing Tests
# =============================================================================


def test_parse_csv_basic() -> None:
    content = "marca,modelo,categoria\nZebra,MC3300,Leitora\nImpinj,R700,Leitora\n"
    headers, rows = parse_csv(content.encode("utf-8"))
    assert headers == ["marca", "modelo", "categoria"]
    assert len(rows) == 2
    assert rows[0] == {"marca": "Zebra", "modelo": "MC3300", "categoria": "Leitora"}
    assert rows[1]["modelo"] == "R700"


def test_parse_csv_strips_values_and_quotes() -> None:
    content = 'marca , modelo\n "Zebra" ,  MC3300 \n'
    headers, rows = parse_csv(content.encode("utf-8"))
    assert headers == ["marca", "modelo"]
    assert rows[0] == {"marca": "Zebra", "modelo": "MC3300"}


def test_parse_csv_missing_trailing_values_are_blank() -> None:
    content = "marca,modelo,categoria\nZebra\n"
    _, rows = parse_csv(content.encode("utf-8"))
    assert rows[0] == {"marca": "Zebra", "modelo": "", "categoria": ""}


def test_parse_csv_skips_blank_lines() -> None:
    content = "marca,modelo\n\nZebra,MC3300\n   \nImpinj,R700\n"
    _, rows = parse_csv(content.encode("utf-8"))
    assert [r["marca"] for r in rows] == ["Zebra", "Impinj"]


def test_parse_csv_utf8_bom() -> None:
    content = "\ufeffnome,cnpj\nAcme,12.345.678/0001-90\n"
    headers, _ = parse_csv(content.encode("utf-8"))
    assert headers[0] == "nome"


def test_parse_csv_latin1_fallback() -> None:
    content = "tipo_movimento,observacoes\nSaída,Devolução\n"
    _, rows = parse_csv(content.encode("latin-1"))
    assert rows[0]["tipo_movimento"] == "Saída"
    assert rows[0]["observacoes"] == "Devolução"


def test_parse_csv_header_only_rejected() -> None:
    with pytest.raises(ImportParseError, match="pelo menos um cabeçalho"):
        parse_csv(b"marca,modelo,categoria\n")


def test_parse_csv_empty_rejected() -> None:
    with pytest.raises(ValueError):
        parse_csv(b"")


def test_parse_csv_respects_max_rows() -> None:
    lines = ["codigo"] + [f"LT{i:03d}" for i in range(10)]
    _, rows = parse_csv("\n".join(lines).encode("utf-8"), max_rows=3)
    assert [r["codigo"] for r in rows] == ["LT000", "LT001", "LT002"]


# =============================================================================
# XLSX Parsing Tests
# =============================================================================


def test_parse_xlsx_basic() -> None:
    content = _make_xlsx(
        ["marca", "modelo", "categoria", "preco_medio"],
        [["Zebra", "MC3300", "Leitora", 2500.5]],
    )
    headers, rows = parse_xlsx(content)
    assert headers == ["marca", "modelo", "categoria", "preco_medio"]
    assert rows == [
        {"marca": "Zebra", "modelo": "MC3300", "categoria": "Leitora", "preco_medio": 2500.5}
    ]


def test_parse_xlsx_date_cells_become_br_strings() -> None:
    content = _make_xlsx(["codigo", "data_aquisicao"], [["LT001", datetime(2024, 3, 5)]])
    _, rows = parse_xlsx(content)
    assert rows[0]["data_aquisicao"] == "05/03/2024"


def test_parse_xlsx_skips_empty_rows() -> None:
    content = _make_xlsx(["codigo"], [["LT001"], [None], ["LT002"]])
    _, rows = parse_xlsx(content)
    assert [r["codigo"] for r in rows] == ["LT001", "LT002"]


def test_parse_xlsx_blank_cells_are_empty_strings() -> None:
    content = _make_xlsx(["codigo", "status"], [["LT001", None]])
    _, rows = parse_xlsx(content)
    assert rows[0] == {"codigo": "LT001", "status": ""}


def test_parse_xlsx_header_only_rejected() -> None:
    with pytest.raises(ImportParseError):
        parse_xlsx(_make_xlsx(["codigo"], []))


def test_parse_xlsx_invalid_content_rejected() -> None:
    with pytest.raises(ImportParseError, match="inválido"):
        parse_xlsx(b"not a workbook")


# =============================================================================
# Dispatch
# =============================================================================


def test_parse_import_file_dispatches_on_extension() -> None:
    csv_rows = parse_import_file(b"codigo\nLT001\n", "leitoras.CSV")
    xlsx_rows = parse_import_file(_make_xlsx(["codigo"], [["LT001"]]), "leitoras.xlsx")
    assert csv_rows == xlsx_rows == [{"codigo": "LT001"}]


def test_parse_import_file_rejects_other_extensions() -> None:
    with pytest.raises(ImportParseError, match="não suportado"):
        parse_import_file(b"{}", "dados.json")


# =============================================================================
# Converters
# =============================================================================


def test_br_date_round_trip() -> None:
    assert br_date_to_iso("05/03/2024") == "2024-03-05"
    assert iso_to_br_date("2024-03-05") == "05/03/2024"


@pytest.mark.parametrize("value", ["2024-03-05", "5/3/2024", "31/02/2024", "", None, "abc"])
def test_invalid_br_dates(value) -> None:
    assert not is_valid_br_date(value)
    assert br_date_to_iso(value) is None


def test_iso_to_br_date_accepts_dates_and_blank() -> None:
    assert iso_to_br_date(date(2024, 12, 1)) == "01/12/2024"
    assert iso_to_br_date(datetime(2024, 12, 1, 15, 30)) == "01/12/2024"
    assert iso_to_br_date(None) == ""


@pytest.mark.parametrize(
    "value,expected",
    [("10", 10.0), (" 2.5 ", 2.5), (7, 7.0), ("abc", None), ("", None), ("inf", None), (True, None)],
)
def test_parse_number(value, expected) -> None:
    assert parse_number(value) == expected


def test_as_text() -> None:
    assert as_text("  Zebra ") == "Zebra"
    assert as_text(123.0) == "123"
    assert as_text("") is None


@pytest.mark.parametrize("value,expected", [("12", 12), ("3.0", 3), (4.9, 4), ("", None), ("doze", None)])
def test_coerce_int(value, expected) -> None:
    assert coerce_int(value) == expected
