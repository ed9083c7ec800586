"""End-to-end tests for the import endpoints."""

import io
from datetime import datetime

import pytest
from httpx import AsyncClient
from openpyxl import Workbook, load_workbook

from zuq.repositories import Repositories


@pytest.fixture
def repos(seeded_repos) -> Repositories:
    return seeded_repos


def _xlsx(headers: list[str], rows: list[list]) -> bytes:
    wb = Workbook()
    ws = wb.active
    ws.append(headers)
    for row in rows:
        ws.append(row)
    output = io.BytesIO()
    wb.save(output)
    return output.getvalue()


EQUIPMENT_CSV = (
    "marca,modelo,categoria,preco_medio\n"
    "Zebra,MC3300,Leitora,2500\n"
    "Zebra,FX9600,Antena,3100\n"
    "Impinj,R700,Leitora,4200\n"
).encode("utf-8")


async def _validate(client: AsyncClient, data_type: str, filename: str, content: bytes):
    return await client.post(
        "/api/import/validate",
        data={"data_type": data_type},
        files={"file": (filename, content, "application/octet-stream")},
    )


# =============================================================================
# Templates
# =============================================================================


@pytest.mark.asyncio
async def test_template_guide(client: AsyncClient) -> None:
    response = await client.get("/api/import/templates")
    assert response.status_code == 200
    data = response.json()
    assert [entry["data_type"] for entry in data] == [
        "equipamentos",
        "fornecedores",
        "leitoras",
        "movimentacoes",
        "pedidos",
    ]
    assert data[1]["columns"][1]["name"] == "cnpj"


@pytest.mark.asyncio
async def test_template_download(client: AsyncClient) -> None:
    response = await client.get("/api/import/templates/pedidos")
    assert response.status_code == 200
    assert "template_pedidos.xlsx" in response.headers["content-disposition"]

    ws = load_workbook(io.BytesIO(response.content))["Template"]
    assert ws["C1"].value == "fornecedor_nome"


@pytest.mark.asyncio
async def test_template_download_unknown_type(client: AsyncClient) -> None:
    response = await client.get("/api/import/templates/clientes")
    assert response.status_code == 404
    assert response.json()["detail"] == "Template não encontrado"


# =============================================================================
# Validation preview
# =============================================================================


@pytest.mark.asyncio
async def test_validate_csv(client: AsyncClient) -> None:
    response = await _validate(client, "equipamentos", "equipamentos.csv", EQUIPMENT_CSV)
    assert response.status_code == 200
    data = response.json()

    assert data["data_type"] == "equipamentos"
    assert data["filename"] == "equipamentos.csv"
    assert data["summary"] == {
        "total": 3,
        "valid": 1,
        "errors": 1,
        "duplicates": 1,
        "approved_duplicates": 0,
        "importable": 1,
    }
    first, second, third = data["records"]
    assert first["validation"]["is_duplicate"] is True
    assert first["validation"]["duplicate_id"] == "eq-1"
    assert second["validation"]["errors"] == [
        "Categoria deve ser: Leitora, Sensor, Rastreador, Acessório"
    ]
    assert third["data"]["marca"] == "Impinj"
    assert third["validation"]["has_errors"] is False


@pytest.mark.asyncio
async def test_validate_xlsx(client: AsyncClient) -> None:
    content = _xlsx(
        ["codigo", "equipamento_marca", "equipamento_modelo", "data_aquisicao"],
        [["LT900", "Zebra", "MC3300", "31/02/2024"]],
    )
    response = await _validate(client, "leitoras", "leitoras.xlsx", content)
    assert response.status_code == 200
    record = response.json()["records"][0]
    assert record["validation"]["errors"] == [
        "Data de aquisição deve estar no formato DD/MM/AAAA"
    ]


@pytest.mark.asyncio
async def test_validate_does_not_store(client: AsyncClient, repos: Repositories) -> None:
    await _validate(client, "equipamentos", "equipamentos.csv", EQUIPMENT_CSV)
    assert len(await repos.equipment.list_all()) == 1
    assert await repos.import_history.list_all() == []


@pytest.mark.asyncio
async def test_validate_unknown_data_type(client: AsyncClient) -> None:
    response = await _validate(client, "clientes", "c.csv", EQUIPMENT_CSV)
    assert response.status_code == 400
    assert response.json()["detail"] == "Tipo de dados não suportado: clientes"


@pytest.mark.asyncio
async def test_validate_unsupported_extension(client: AsyncClient) -> None:
    response = await _validate(client, "equipamentos", "equipamentos.txt", EQUIPMENT_CSV)
    assert response.status_code == 400
    assert "Unsupported file type" in response.json()["detail"]


@pytest.mark.asyncio
async def test_validate_header_only_csv(client: AsyncClient) -> None:
    response = await _validate(client, "equipamentos", "vazio.csv", b"marca,modelo,categoria\n")
    assert response.status_code == 400
    assert response.json()["detail"] == (
        "Arquivo CSV deve ter pelo menos um cabeçalho e uma linha de dados"
    )


# =============================================================================
# Commit
# =============================================================================


@pytest.mark.asyncio
async def test_commit_with_index_approval(client: AsyncClient, repos: Repositories) -> None:
    preview = (await _validate(client, "equipamentos", "equipamentos.csv", EQUIPMENT_CSV)).json()

    response = await client.post(
        "/api/import/commit",
        json={
            "data_type": "equipamentos",
            "filename": "equipamentos.csv",
            "records": [{"data": r["data"]} for r in preview["records"]],
            "approvals": {"0": True},
        },
    )
    assert response.status_code == 200
    history = response.json()
    assert history["status"] == "completed"
    assert history["total_records"] == 3
    assert history["processed_records"] == 2
    assert history["failed_records"] == 1

    models = sorted(e["model"] for e in await repos.equipment.list_all())
    assert models == ["MC3300", "MC3300", "R700"]


@pytest.mark.asyncio
async def test_commit_ignores_client_validation_flags(
    client: AsyncClient, repos: Repositories
) -> None:
    """Only the data and the explicit decisions sent by the client count."""
    response = await client.post(
        "/api/import/commit",
        json={
            "data_type": "equipamentos",
            "filename": "equipamentos.csv",
            "records": [
                {
                    "data": {"marca": "Zebra", "modelo": "MC3300", "categoria": "Leitora"},
                    "validation": {"user_approved": True},
                }
            ],
        },
    )
    assert response.status_code == 200
    assert response.json()["processed_records"] == 0
    assert len(await repos.equipment.list_all()) == 1


@pytest.mark.asyncio
async def test_commit_reject_all_then_approve_one(client: AsyncClient, repos: Repositories) -> None:
    row = {"marca": "Zebra", "modelo": "MC3300", "categoria": "Leitora"}
    response = await client.post(
        "/api/import/commit",
        json={
            "data_type": "equipamentos",
            "filename": "dup.csv",
            "records": [{"data": row}, {"data": row}],
            "duplicate_action": "reject_all",
            "approvals": {"1": True},
        },
    )
    assert response.status_code == 200
    assert response.json()["processed_records"] == 1


@pytest.mark.asyncio
async def test_commit_approval_index_out_of_range(client: AsyncClient) -> None:
    response = await client.post(
        "/api/import/commit",
        json={
            "data_type": "equipamentos",
            "filename": "equipamentos.csv",
            "records": [{"data": {"marca": "Zebra", "modelo": "X", "categoria": "Leitora"}}],
            "approvals": {"5": True},
        },
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_commit_missing_reference(client: AsyncClient, repos: Repositories) -> None:
    response = await client.post(
        "/api/import/commit",
        json={
            "data_type": "leitoras",
            "filename": "leitoras.csv",
            "records": [
                {"data": {"codigo": "LT1", "equipamento_marca": "Zebra", "equipamento_modelo": "MC3300"}},
                {"data": {"codigo": "LT2", "equipamento_marca": "Zebra", "equipamento_modelo": "TC52"}},
            ],
        },
    )
    assert response.status_code == 422
    assert response.json()["detail"] == "Equipamento não encontrado: Zebra TC52"

    assert [r["code"] for r in await repos.readers.list_all()] == ["LT1"]
    history = (await repos.import_history.list_all())[0]
    assert history["status"] == "error"


# =============================================================================
# History and report
# =============================================================================


@pytest.mark.asyncio
async def test_history_and_report(client: AsyncClient, repos: Repositories) -> None:
    await client.post(
        "/api/import/commit",
        json={
            "data_type": "fornecedores",
            "filename": "fornecedores.csv",
            "records": [{"data": {"nome": "Tags do Sul", "cnpj": "98.765.432/0001-10"}}],
        },
    )
    await repos.import_history.insert(
        {
            "user_id": "someone-else",
            "data_type": "equipamentos",
            "original_filename": "outro.csv",
            "total_records": 1,
            "processed_records": 1,
            "failed_records": 0,
            "status": "completed",
        }
    )

    response = await client.get("/api/import/history")
    assert response.status_code == 200
    entries = response.json()
    assert len(entries) == 1
    assert entries[0]["original_filename"] == "fornecedores.csv"

    report = await client.get(f"/api/import/history/{entries[0]['id']}/report")
    assert report.status_code == 200
    assert report.headers["content-type"].startswith("text/csv")
    assert "relatorio-importacao-fornecedores.csv-" in report.headers["content-disposition"]
    lines = report.text.split("\n")
    assert lines[0].startswith("Arquivo,Tipo de Dados,Status")
    assert lines[1].startswith('"fornecedores.csv","Fornecedores","Concluído",1,1,0,')


@pytest.mark.asyncio
async def test_report_of_other_user_not_found(client: AsyncClient, repos: Repositories) -> None:
    other = await repos.import_history.insert(
        {
            "user_id": "someone-else",
            "data_type": "equipamentos",
            "original_filename": "outro.csv",
            "total_records": 0,
            "processed_records": 0,
            "failed_records": 0,
            "status": "completed",
        }
    )
    response = await client.get(f"/api/import/history/{other['id']}/report")
    assert response.status_code == 404


# =============================================================================
# Auth and app
# =============================================================================


@pytest.mark.asyncio
async def test_import_requires_authentication(anon_client: AsyncClient) -> None:
    response = await anon_client.get("/api/import/templates")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_health_has_security_headers(anon_client: AsyncClient) -> None:
    response = await anon_client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "degraded"
    assert response.json()["database"] == "unavailable"
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["X-Frame-Options"] == "DENY"


@pytest.mark.asyncio
async def test_health_reports_latest_import(anon_client: AsyncClient, repos: Repositories, monkeypatch) -> None:
    async def _ping() -> bool:
        return True

    monkeypatch.setattr("zuq.main.ping_db", _ping)
    await repos.import_history.insert(
        {"data_type": "pedidos", "status": "completed", "created_at": datetime(2024, 3, 5, 10, 0)}
    )
    await repos.import_history.insert(
        {"data_type": "leitoras", "status": "error", "created_at": datetime(2024, 3, 6, 9, 30)}
    )

    data = (await anon_client.get("/health")).json()
    assert data["status"] == "healthy"
    assert data["database"] == "connected"
    assert data["last_import"] == {
        "data_type": "leitoras",
        "status": "error",
        "created_at": "2024-03-06T09:30:00",
    }


@pytest.mark.asyncio
async def test_me_returns_current_user(client: AsyncClient) -> None:
    response = await client.get("/api/auth/me")
    assert response.status_code == 200
    assert response.json()["username"] == "operador"
