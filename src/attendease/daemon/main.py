"""Entrypoint that serves the AttendEase app with uvicorn."""

from __future__ import annotations

import argparse
import logging

from src.attendease.core.config_loader import load_config

_LOG_LEVELS = ("debug", "info", "warning", "error")


def _config_check() -> str | None:
    try:
        load_config()
    except (FileNotFoundError, ValueError) as exc:
        return str(exc)
    return None


def run_server(*, host: str = "127.0.0.1", port: int = 8000, log_level: str = "info") -> int:
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    problem = _config_check()
    if problem:
        logging.getLogger(__name__).warning("starting without usable config: %s", problem)

    try:
        import uvicorn
    except Exception as exc:  # pragma: no cover - dependency error guard
        raise RuntimeError("uvicorn is required to serve the app") from exc

    uvicorn.run("app.main:app", host=host, port=port, reload=False, log_level=log_level)
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Serve the AttendEase app.")
    parser.add_argument("--host", default="127.0.0.1", help="Local bind host.")
    parser.add_argument("--port", type=int, default=8000, help="Local bind port.")
    parser.add_argument("--log-level", default="info", choices=_LOG_LEVELS, help="Root log level.")
    args = parser.parse_args(argv)
    return run_server(host=args.host, port=args.port, log_level=args.log_level)


if __name__ == "__main__":
    raise SystemExit(main())
