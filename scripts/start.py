#!/usr/bin/env python3
"""
Production entry point: release phase (migrations + seed), then gunicorn.

Workers come from WEB_CONCURRENCY (default 2). With more than one worker the
listing cache needs a shared backend; create_app() refuses SimpleCache in
production.

Usage:
    python scripts/start.py
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


def resolve_port(raw: str | None) -> int:
    port = (raw or "").strip() or "8080"
    port_int = int(port)
    if port_int < 1 or port_int > 65535:
        raise ValueError("Port out of range")
    return port_int


def resolve_workers(raw: str | None) -> int:
    workers = int((raw or "").strip() or "2")
    if workers < 1:
        raise ValueError("WEB_CONCURRENCY must be at least 1")
    return workers


def gunicorn_argv(port: int, workers: int) -> list[str]:
    return [
        "gunicorn",
        "app.wsgi:app",
        "--bind", f"0.0.0.0:{port}",
        "--workers", str(workers),
        "--timeout", "60",
        "--preload",
        "--access-logfile", "-",
        "--error-logfile", "-",
    ]


def main() -> None:
    try:
        port = resolve_port(os.environ.get("PORT"))
        workers = resolve_workers(os.environ.get("WEB_CONCURRENCY"))
    except ValueError as e:
        print(f"ERROR: {e} (PORT={os.environ.get('PORT')!r}, WEB_CONCURRENCY={os.environ.get('WEB_CONCURRENCY')!r})", flush=True)
        sys.exit(1)

    from scripts.release import run_release
    try:
        run_release()
    except Exception as e:
        print(f"Release failed: {e}", flush=True)
        sys.exit(1)

    # exec so gunicorn becomes PID 1 and receives signals directly
    os.execvp("gunicorn", gunicorn_argv(port, workers))


if __name__ == "__main__":
    main()
