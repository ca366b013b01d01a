"""Daemon entrypoint that serves the TaskRelay dashboard locally."""

from __future__ import annotations

import argparse

from src.taskrelay.runtime.service import get_runtime_service


def run_daemon(*, host: str = "127.0.0.1", port: int = 8000) -> int:
    runtime = get_runtime_service()
    runtime.start(source="daemon")

    try:
        import uvicorn
    except Exception as exc:  # pragma: no cover - dependency error guard
        runtime.stop(source="daemon")
        raise RuntimeError("uvicorn is required to serve the dashboard") from exc

    try:
        uvicorn.run("app.main:app", host=host, port=port, reload=False)
    finally:
        runtime.stop(source="daemon")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Serve the TaskRelay delegation dashboard.")
    parser.add_argument("--host", default="127.0.0.1", help="Local bind host.")
    parser.add_argument("--port", type=int, default=8000, help="Local bind port.")
    args = parser.parse_args(argv)
    return run_daemon(host=args.host, port=args.port)


if __name__ == "__main__":
    raise SystemExit(main())
