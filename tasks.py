"""Invoke tasks for ZUQ application management."""

import sys
from pathlib import Path

from invoke import task
from invoke.context import Context

LOG_FILE = Path("data/zuq.log")


def _bind(host: str, port: int) -> str:
    """zuq-server bind options; empty values fall back to config.toml."""
    options = ""
    if host:
        options += f" --host {host}"
    if port:
        options += f" --port {port}"
    return options


@task
def start(ctx: Context, host: str = "", port: int = 0, reload: bool = False) -> None:
    """Start the ZUQ FastAPI server in the foreground.

    Args:
        ctx: Invoke context
        host: Host to bind to (default: server.host from config.toml)
        port: Port to bind to (default: server.port from config.toml)
        reload: Enable auto-reload for development
    """
    cmd = f"zuq-server start{_bind(host, port)} --foreground"
    if reload:
        cmd += " --reload"

    try:
        ctx.run(cmd, pty=True)
    except KeyboardInterrupt:
        print("\nServer stopped")
        sys.exit(0)


@task(name="start-background")
def start_background(ctx: Context, host: str = "", port: int = 0) -> None:
    """Start the ZUQ FastAPI server in the background."""
    ctx.run(f"zuq-server start{_bind(host, port)}")


@task
def stop(ctx: Context) -> None:
    """Stop the ZUQ FastAPI server."""
    ctx.run("zuq-server stop")


@task
def restart(ctx: Context, host: str = "", port: int = 0) -> None:
    """Restart the ZUQ FastAPI server."""
    ctx.run(f"zuq-server restart{_bind(host, port)}")


@task
def status(ctx: Context, port: int = 0) -> None:
    """Show process, database and last-import status of the ZUQ server."""
    ctx.run(f"zuq-server status{_bind('', port)}")


@task
def logs(ctx: Context, follow: bool = False, lines: int = 50) -> None:
    """View the ZUQ server logs.

    Args:
        ctx: Invoke context
        follow: Follow log output (like tail -f)
        lines: Number of lines to show (default: 50)
    """
    if not LOG_FILE.exists():
        print("No log file found. Server may not have been started in background mode.")
        return

    if follow:
        ctx.run(f"tail -f {LOG_FILE}", pty=True)
    else:
        ctx.run(f"tail -n {lines} {LOG_FILE}")


@task
def test(ctx: Context, verbose: bool = False, coverage: bool = False) -> None:
    """Run the test suite.

    Args:
        ctx: Invoke context
        verbose: Enable verbose output
        coverage: Run with coverage report
    """
    cmd = "pytest"
    if verbose:
        cmd += " -v"
    if coverage:
        cmd += " --cov=zuq --cov-report=term-missing"
    ctx.run(cmd, pty=True)


@task(name="import")
def import_file(ctx: Context, file: str, type: str, user: str = "admin", dry_run: bool = False) -> None:
    """Import a spreadsheet from the command line.

    Args:
        ctx: Invoke context
        file: CSV or XLSX file
        type: Data type (equipamentos, fornecedores, leitoras, movimentacoes, pedidos)
        user: Username recorded as importer
        dry_run: Validate only
    """
    cmd = f"zuq-import {file} --type {type} --user {user}"
    if dry_run:
        cmd += " --dry-run"
    ctx.run(cmd, pty=True)


@task
def clean(ctx: Context) -> None:
    """Clean up temporary files."""
    for pattern in ["__pycache__", "*.pyc", "*.pyo", ".pytest_cache"]:
        ctx.run(f"find . -name '{pattern}' -exec rm -rf {{}} + 2>/dev/null || true", warn=True)

    for path in ["build", "dist", "*.egg-info", ".eggs"]:
        ctx.run(f"rm -rf {path} 2>/dev/null || true", warn=True)

    print("Cleanup complete")
