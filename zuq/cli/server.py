"""Run and supervise the ZUQ API server process.

Usage:
    zuq-server start [--host HOST] [--port PORT] [--reload] [--foreground]
    zuq-server stop
    zuq-server restart [--host HOST] [--port PORT]
    zuq-server status [--host HOST] [--port PORT]

Host and port default to the [server] section of config.toml. The PID and
log files live in the configured data directory. ``status`` reads the
running server's /health endpoint to report MongoDB reachability and the
outcome of the most recent import.
"""

import argparse
import json
import os
import signal
import subprocess
import sys
import time
import urllib.request
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from urllib.error import URLError

from zuq.config import settings

APP_TARGET = "zuq.main:app"


def _alive(pid: int) -> bool:
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except PermissionError:
        # Exists, owned by someone else
        return True
    return True


def _pgrep(pattern: str) -> int | None:
    """First PID whose command line contains ``pattern``, if pgrep is available."""
    try:
        result = subprocess.run(["pgrep", "-f", pattern], capture_output=True, text=True)
    except FileNotFoundError:
        return None
    pids = result.stdout.split()
    return int(pids[0]) if result.returncode == 0 and pids else None


def fetch_health(url: str, timeout: float = 2.0) -> dict[str, Any] | None:
    """GET the /health document, or None when the server does not answer."""
    try:
        with urllib.request.urlopen(url, timeout=timeout) as response:
            return json.loads(response.read().decode())
    except (URLError, OSError, ValueError):
        return None


def describe_health(health: dict[str, Any]) -> list[str]:
    """Human-readable lines for a /health document."""
    lines = [
        f"  Status:      {health.get('status', 'unknown')}",
        f"  Version:     {health.get('version', 'unknown')}",
        f"  Database:    {health.get('database', 'unknown')}",
    ]
    last_import = health.get("last_import")
    if last_import:
        lines.append(
            f"  Last import: {last_import['data_type']} ({last_import['status']}) "
            f"at {last_import['created_at']}"
        )
    else:
        lines.append("  Last import: none")
    return lines


@dataclass
class ServerControl:
    """PID-file based control of one uvicorn process serving the ZUQ app."""

    data_dir: Path
    host: str
    port: int

    @classmethod
    def from_settings(cls, host: str | None = None, port: int | None = None) -> "ServerControl":
        return cls(
            data_dir=Path(settings.data_dir),
            host=host or settings.host,
            port=port or settings.port,
        )

    @property
    def pid_file(self) -> Path:
        return self.data_dir / "zuq.pid"

    @property
    def log_file(self) -> Path:
        return self.data_dir / "zuq.log"

    @property
    def health_url(self) -> str:
        host = "127.0.0.1" if self.host in ("", "0.0.0.0") else self.host
        return f"http://{host}:{self.port}/health"

    def command(self, reload: bool = False) -> list[str]:
        cmd = [sys.executable, "-m", "uvicorn", APP_TARGET, "--host", self.host, "--port", str(self.port)]
        if reload:
            cmd.append("--reload")
        return cmd

    def running_pid(self) -> int | None:
        """PID from the PID file, else any process serving the app.

        A PID file naming a dead process, or holding garbage, is removed.
        """
        try:
            pid = int(self.pid_file.read_text().strip())
        except FileNotFoundError:
            pid = None
        except ValueError:
            self.pid_file.unlink(missing_ok=True)
            pid = None

        if pid is not None and not _alive(pid):
            self.pid_file.unlink(missing_ok=True)
            pid = None
        return pid if pid is not None else _pgrep(f"uvicorn {APP_TARGET}")

    def start(self, reload: bool = False, foreground: bool = False) -> bool:
        pid = self.running_pid()
        if pid:
            print(f"ZUQ server is already running (PID: {pid})")
            return False

        self.data_dir.mkdir(parents=True, exist_ok=True)
        print(f"Starting ZUQ server on http://{self.host}:{self.port}")

        if foreground:
            try:
                subprocess.run(self.command(reload))
            except KeyboardInterrupt:
                print("\nServer stopped")
            return True

        with open(self.log_file, "w") as log:
            process = subprocess.Popen(
                self.command(reload),
                stdout=log,
                stderr=subprocess.STDOUT,
                start_new_session=True,
            )
        time.sleep(1)
        if process.poll() is not None:
            print(f"Server exited during startup; see {self.log_file}")
            return False

        self.pid_file.write_text(str(process.pid))
        print(f"Server started (PID: {process.pid}), logging to {self.log_file}")
        return True

    def stop(self, grace_seconds: float = 5.0) -> bool:
        """SIGTERM the server, escalating to SIGKILL after ``grace_seconds``."""
        pid = self.running_pid()
        if not pid:
            print("ZUQ server is not running")
            return False

        try:
            os.kill(pid, signal.SIGTERM)
            deadline = time.monotonic() + grace_seconds
            while _alive(pid) and time.monotonic() < deadline:
                time.sleep(0.25)
            if _alive(pid):
                print(f"PID {pid} ignored SIGTERM, sending SIGKILL")
                os.kill(pid, signal.SIGKILL)
        except ProcessLookupError:
            pass
        except PermissionError:
            print(f"Permission denied to stop process {pid}")
            return False

        self.pid_file.unlink(missing_ok=True)
        print(f"ZUQ server stopped (PID: {pid})")
        return True

    def status(self) -> bool:
        """Print process and service health; True when the process is running."""
        pid = self.running_pid()
        if not pid:
            print("ZUQ server is not running")
            return False

        print(f"ZUQ server is running (PID: {pid})")
        health = fetch_health(self.health_url)
        if health is None:
            print(f"  {self.health_url} did not answer")
        else:
            for line in describe_health(health):
                print(line)
        return True


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="zuq-server", description="Run and supervise the ZUQ API server")
    subparsers = parser.add_subparsers(dest="command")

    def bind_options(sub: argparse.ArgumentParser) -> None:
        sub.add_argument("--host", default=None, help="Bind address (default: config server.host)")
        sub.add_argument("--port", "-p", type=int, default=None, help="Port (default: config server.port)")

    start = subparsers.add_parser("start", help="Start the server")
    bind_options(start)
    start.add_argument("--reload", "-r", action="store_true", help="Reload on code changes")
    start.add_argument("--foreground", "-f", action="store_true", help="Stay attached to the terminal")

    subparsers.add_parser("stop", help="Stop the server")
    bind_options(subparsers.add_parser("restart", help="Stop, then start in the background"))
    bind_options(subparsers.add_parser("status", help="Show process, database and import status"))
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 1

    control = ServerControl.from_settings(getattr(args, "host", None), getattr(args, "port", None))
    try:
        if args.command == "start":
            ok = control.start(reload=args.reload, foreground=args.foreground)
        elif args.command == "stop":
            ok = control.stop()
        elif args.command == "restart":
            control.stop()
            ok = control.start()
        else:
            ok = control.status()
    except KeyboardInterrupt:
        print("\nInterrupted")
        return 130
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
