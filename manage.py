#!/usr/bin/env python3
"""
Stock Pilot management CLI.

Usage:
    python manage.py start       Start the API server in the background
    python manage.py stop        Graceful shutdown
    python manage.py restart     Stop + start
    python manage.py dev         Run the server in the foreground with reload
    python manage.py status      Check if server is running
    python manage.py init-db     Create or migrate the configured store
    python manage.py verify      Replay every item ledger and report mismatches
"""

import argparse
import asyncio
import os
import platform
import re
import signal
import socket
import subprocess
import sys
import time
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parent
PID_FILE = ROOT_DIR / ".stockpilot.pid"
APP_PATH = "stockpilot.api.main:app"

IS_WINDOWS = platform.system() == "Windows"


def _read_pid() -> int | None:
    """Read PID from the pid file, return None if missing or stale."""
    if not PID_FILE.exists():
        return None
    try:
        pid = int(PID_FILE.read_text().strip())
    except (ValueError, OSError):
        return None
    if _is_pid_alive(pid):
        return pid
    # Stale PID file
    PID_FILE.unlink(missing_ok=True)
    return None


def _is_pid_alive(pid: int) -> bool:
    if IS_WINDOWS:
        try:
            result = subprocess.run(
                ["tasklist", "/FI", f"PID eq {pid}", "/NH"],
                capture_output=True,
                text=True,
            )
            return str(pid) in result.stdout
        except OSError:
            return False
    try:
        os.kill(pid, 0)
        return True
    except OSError:
        return False


def _kill_pid(pid: int) -> bool:
    """Send termination signal to a process. Returns True if successful."""
    try:
        if IS_WINDOWS:
            subprocess.run(["taskkill", "/PID", str(pid), "/T", "/F"], capture_output=True)
        else:
            os.kill(pid, signal.SIGTERM)
        return True
    except OSError:
        return False


def _find_pid_on_port(port: int) -> int | None:
    """Find the PID of the process listening on the given port."""
    if IS_WINDOWS:
        try:
            result = subprocess.run(
                ["netstat", "-ano", "-p", "TCP"], capture_output=True, text=True
            )
        except OSError:
            return None
        for line in result.stdout.splitlines():
            if f":{port}" in line and "LISTENING" in line:
                try:
                    return int(line.split()[-1])
                except (ValueError, IndexError):
                    continue
        return None

    try:
        result = subprocess.run(
            ["lsof", "-ti", f"TCP:{port}", "-sTCP:LISTEN"], capture_output=True, text=True
        )
        if result.returncode == 0 and result.stdout.strip():
            return int(result.stdout.strip().splitlines()[0])
    except (OSError, ValueError):
        pass
    # Fall back to ss (Linux without lsof)
    try:
        result = subprocess.run(
            ["ss", "-tlnp", f"sport = :{port}"], capture_output=True, text=True
        )
        match = re.search(r"pid=(\d+)", result.stdout)
        if match:
            return int(match.group(1))
    except (OSError, ValueError):
        pass
    return None


def _is_port_free(port: int) -> bool:
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            s.bind(("127.0.0.1", port))
        return True
    except OSError:
        return False


def _wait_for_exit(pid: int, timeout: float = 3.0) -> bool:
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if not _is_pid_alive(pid):
            return True
        time.sleep(0.1)
    return not _is_pid_alive(pid)


def _uvicorn_cmd(host: str, port: int, reload: bool = False) -> list[str]:
    # One worker only: the store lock does not span processes
    cmd = [sys.executable, "-m", "uvicorn", APP_PATH, "--host", host, "--port", str(port)]
    if reload:
        cmd.append("--reload")
    return cmd


def cmd_start(args: argparse.Namespace) -> None:
    """Start the server in the background."""
    existing_pid = _read_pid()
    if existing_pid is not None:
        print(f"Server already running (PID {existing_pid}). Use 'restart' or 'stop' first.")
        sys.exit(1)

    if not _is_port_free(args.port):
        holder = _find_pid_on_port(args.port)
        print(f"Port {args.port} is in use" + (f" by PID {holder}." if holder else "."))
        sys.exit(1)

    print(f"Starting server on {args.host}:{args.port}...")
    kwargs: dict = {"cwd": str(ROOT_DIR)}
    if IS_WINDOWS:
        kwargs["creationflags"] = subprocess.CREATE_NEW_PROCESS_GROUP
    proc = subprocess.Popen(_uvicorn_cmd(args.host, args.port), **kwargs)

    PID_FILE.write_text(str(proc.pid))
    print(f"Server started (PID {proc.pid}).")
    print(f"  API:      http://{args.host}:{args.port}/api")
    print(f"  Health:   http://{args.host}:{args.port}/api/health")
    print(f"  PID file: {PID_FILE}")


def cmd_stop(args: argparse.Namespace) -> None:
    """Stop the running server."""
    port = getattr(args, "port", 8000)
    pid = _read_pid()

    if pid is None:
        pid = _find_pid_on_port(port)
        if pid is None:
            print("Server is not running.")
            return
        print(f"No PID file found. Detected server on port {port} (PID {pid}).")

    print(f"Stopping server (PID {pid})...")
    if _kill_pid(pid) and not _wait_for_exit(pid):
        print("Warning: Process did not exit within 3 seconds.")

    PID_FILE.unlink(missing_ok=True)
    print("Server stopped." if not _is_pid_alive(pid) else "Warning: Server may still be running.")


def cmd_restart(args: argparse.Namespace) -> None:
    """Stop then start the server."""
    if _read_pid() is not None:
        cmd_stop(args)
    cmd_start(args)


def cmd_dev(args: argparse.Namespace) -> None:
    """Run the server in the foreground with auto-reload."""
    print(f"Starting server on {args.host}:{args.port} (reload mode). Ctrl+C to stop.")
    try:
        subprocess.run(_uvicorn_cmd(args.host, args.port, reload=True), cwd=str(ROOT_DIR))
    except KeyboardInterrupt:
        print("\nServer stopped.")


def cmd_status(args: argparse.Namespace) -> None:
    """Check if the server is running."""
    port = getattr(args, "port", 8000)
    pid = _read_pid()

    if pid is not None:
        print(f"Server is running (PID {pid}).")
        return

    port_pid = _find_pid_on_port(port)
    if port_pid is not None:
        print(f"No PID file, but port {port} is held by PID {port_pid}.")
        print("  This may be a stale server. Use 'stop' to clean up.")
    elif not _is_port_free(port):
        print(f"No PID file. Port {port} is in use (process could not be identified).")
    else:
        print(f"Server is not running (port {port} is free).")


async def _init_db() -> None:
    from stockpilot.config import get_settings
    from stockpilot.infrastructure.storage import get_inventory_store, reset_inventory_store

    settings = get_settings()
    try:
        await get_inventory_store().initialize()
    finally:
        await reset_inventory_store()
    target = (
        settings.storage.db_path
        if settings.storage.backend == "sqlite"
        else settings.storage.json_path
    )
    print(f"Store ready ({settings.storage.backend}): {target}")


async def _verify() -> int:
    from stockpilot.core.exceptions import LedgerIntegrityError
    from stockpilot.core.services.ledger import verify_item
    from stockpilot.infrastructure.storage import get_inventory_store, reset_inventory_store

    try:
        items = await get_inventory_store().load_items()
    finally:
        await reset_inventory_store()

    problems = 0
    for item in items:
        try:
            verify_item(item)
        except LedgerIntegrityError as e:
            problems += 1
            print(f"  {item.id} ({item.name}): {e.details['reason']}")
    print(f"Checked {len(items)} item(s), {problems} inconsistent.")
    return problems


def cmd_init_db(args: argparse.Namespace) -> None:
    """Create or migrate the configured store."""
    asyncio.run(_init_db())


def cmd_verify(args: argparse.Namespace) -> None:
    """Replay every item's history against its stored quantity."""
    if asyncio.run(_verify()):
        sys.exit(1)


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Stock Pilot management CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    for name, func, help_text in (
        ("start", cmd_start, "Start the server"),
        ("restart", cmd_restart, "Restart the server"),
        ("dev", cmd_dev, "Run the server with auto-reload"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("--host", default="0.0.0.0", help="Bind host (default: 0.0.0.0)")
        p.add_argument("--port", type=int, default=8000, help="Bind port (default: 8000)")
        p.set_defaults(func=func)

    for name, func, help_text in (
        ("stop", cmd_stop, "Stop the server"),
        ("status", cmd_status, "Check if server is running"),
    ):
        p = sub.add_parser(name, help=help_text)
        p.add_argument("--port", type=int, default=8000, help="Port to check (default: 8000)")
        p.set_defaults(func=func)

    p_init = sub.add_parser("init-db", help="Create or migrate the configured store")
    p_init.set_defaults(func=cmd_init_db)

    p_verify = sub.add_parser("verify", help="Check every item ledger")
    p_verify.set_defaults(func=cmd_verify)

    args = parser.parse_args()
    args.func(args)


if __name__ == "__main__":
    main()
