"""Tests for the command line tools."""

import sys

import pytest

from zuq.cli import importer, server, user_admin
from zuq.services.import_service import MissingReferenceError

MOVEMENTS_CSV = (
    "equipamento_marca,equipamento_modelo,tipo_movimento,quantidade,data\n"
    "Zebra,MC3300,Entrada,10,05/03/2024\n"
    "Zebra,MC3300,Saída,-1,05/03/2024\n"
)


class TestServerCli:
    def test_command(self, tmp_path):
        cmd = server.ServerControl(tmp_path, "127.0.0.1", 9000).command(reload=True)
        assert cmd[:3] == [sys.executable, "-m", "uvicorn"]
        assert "zuq.main:app" in cmd
        assert cmd[cmd.index("--port") + 1] == "9000"
        assert cmd[-1] == "--reload"

    def test_files_live_in_data_dir(self, tmp_path):
        control = server.ServerControl(tmp_path, "0.0.0.0", 8000)
        assert control.pid_file == tmp_path / "zuq.pid"
        assert control.log_file == tmp_path / "zuq.log"
        assert control.health_url == "http://127.0.0.1:8000/health"

    def test_parser_start_options(self):
        args = server.build_parser().parse_args(["start", "--port", "8081", "--foreground"])
        assert args.command == "start"
        assert args.port == 8081
        assert args.host is None
        assert args.foreground is True

    def test_no_command_prints_help(self, capsys):
        assert server.main([]) == 1
        assert "zuq-server" in capsys.readouterr().out

    def test_running_pid_cleans_stale_pid_file(self, tmp_path, monkeypatch):
        monkeypatch.setattr(server, "_pgrep", lambda pattern: None)
        control = server.ServerControl(tmp_path, "127.0.0.1", 8000)
        control.pid_file.write_text("not-a-pid")

        assert control.running_pid() is None
        assert not control.pid_file.exists()

    def test_describe_health(self):
        lines = server.describe_health(
            {
                "status": "healthy",
                "version": "0.1.0",
                "database": "connected",
                "last_import": {"data_type": "pedidos", "status": "partial",
                                "created_at": "2024-03-06T09:30:00"},
            }
        )
        assert lines[2].split() == ["Database:", "connected"]
        assert lines[3].strip() == "Last import: pedidos (partial) at 2024-03-06T09:30:00"

    def test_describe_health_without_database(self):
        lines = server.describe_health({"status": "degraded", "database": "unavailable"})
        assert lines[0].split() == ["Status:", "degraded"]
        assert lines[-1].strip() == "Last import: none"

    def test_status_not_running(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setattr(server, "_pgrep", lambda pattern: None)
        assert server.ServerControl(tmp_path, "127.0.0.1", 8000).status() is False
        assert "not running" in capsys.readouterr().out

    def test_status_reports_health(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setattr(server, "_pgrep", lambda pattern: 4242)
        monkeypatch.setattr(
            server, "fetch_health",
            lambda url: {"status": "degraded", "version": "0.1.0", "database": "unavailable"},
        )
        assert server.ServerControl(tmp_path, "127.0.0.1", 8000).status() is True
        out = capsys.readouterr().out
        assert "PID: 4242" in out
        assert "unavailable" in out


class TestUserAdminCli:
    def test_add_requires_email(self):
        with pytest.raises(SystemExit):
            user_admin.build_parser().parse_args(["add", "maria"])

    def test_add_arguments(self):
        args = user_admin.build_parser().parse_args(
            ["add", "maria", "--email", "maria@zuq.com.br", "--admin", "-p", "segredo"]
        )
        assert args.username == "maria"
        assert args.admin is True
        assert args.password == "segredo"


class TestImporterCli:
    def test_parser_rejects_unknown_type(self):
        with pytest.raises(SystemExit):
            importer.build_parser().parse_args(["dados.csv", "--type", "clientes"])

    def test_missing_file(self, tmp_path, capsys):
        assert importer.main([str(tmp_path / "nao-existe.csv"), "--type", "pedidos"]) == 1
        assert "File not found" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_dry_run_saves_nothing(self, tmp_path, seeded_repos):
        path = tmp_path / "mov.csv"
        path.write_text(MOVEMENTS_CSV, encoding="utf-8")

        run = await importer.run_import(path, "movimentacoes", seeded_repos, None, dry_run=True)

        assert run.history is None
        assert [r.validation.has_errors for r in run.records] == [False, True]
        assert await seeded_repos.movements.list_all() == []
        assert await seeded_repos.import_history.list_all() == []

    @pytest.mark.asyncio
    async def test_import_saves_valid_rows(self, tmp_path, seeded_repos, capsys):
        path = tmp_path / "mov.csv"
        path.write_text(MOVEMENTS_CSV, encoding="utf-8")

        run = await importer.run_import(path, "movimentacoes", seeded_repos, "user-1")

        assert run.history["status"] == "completed"
        assert run.history["processed_records"] == 1
        assert run.history["original_filename"] == "mov.csv"
        assert len(await seeded_repos.movements.list_all()) == 1

        importer.print_preview(run.records)
        out = capsys.readouterr().out
        assert "Importable: 1" in out
        assert "Row 2: ERROR Quantidade deve ser um número inteiro positivo" in out

    @pytest.mark.asyncio
    async def test_approve_duplicates_flag(self, tmp_path, seeded_repos):
        path = tmp_path / "equip.csv"
        path.write_text("marca,modelo,categoria\nZebra,MC3300,Leitora\n", encoding="utf-8")

        skipped = await importer.run_import(path, "equipamentos", seeded_repos, "user-1")
        assert skipped.history["processed_records"] == 0

        approved = await importer.run_import(
            path, "equipamentos", seeded_repos, "user-1", approve_duplicates=True
        )
        assert approved.history["processed_records"] == 1

    @pytest.mark.asyncio
    async def test_missing_reference_propagates(self, tmp_path, repos):
        path = tmp_path / "leitoras.csv"
        path.write_text(
            "codigo,equipamento_marca,equipamento_modelo\nLT001,Zebra,MC3300\n", encoding="utf-8"
        )
        with pytest.raises(MissingReferenceError):
            await importer.run_import(path, "leitoras", repos, "user-1")
