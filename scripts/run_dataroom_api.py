"""Launch the data room API, or run its one-shot maintenance tasks."""

from __future__ import annotations

import argparse
import errno
import logging
import socket
import sys
from pathlib import Path
from typing import Final

import uvicorn

LOG_LEVELS: Final[tuple[str, ...]] = ("critical", "error", "warning", "info", "debug", "trace")
LOG_FORMAT: Final[str] = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

LOGGER = logging.getLogger("dataroom_api.launcher")


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the data room API locally.")
    parser.add_argument("--host", default=None, help="Bind address (overrides DATAROOM_API_HOST).")
    parser.add_argument("--port", type=int, default=None, help="Port to bind to (overrides DATAROOM_API_PORT).")
    parser.add_argument("--reload", action="store_true", help="Enable uvicorn auto-reload.")
    parser.add_argument("--log-level", choices=LOG_LEVELS, default=None, help="Log level for the API and uvicorn.")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--migrate", action="store_true", help="Upgrade the schema to head and exit.")
    mode.add_argument(
        "--sweep-once",
        action="store_true",
        help="Archive rooms past the expiry grace window and exit (for cron).",
    )
    return parser.parse_args()


def configure_logging(log_level: str) -> None:
    # uvicorn's "trace" has no stdlib counterpart.
    level = logging.DEBUG if log_level == "trace" else getattr(logging, log_level.upper(), logging.INFO)
    logging.basicConfig(level=level, format=LOG_FORMAT)
    for logger_name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(logger_name).setLevel(level)


def ensure_port_available(host: str, port: int) -> None:
    try:
        candidates = socket.getaddrinfo(host, port, socket.AF_UNSPEC, socket.SOCK_STREAM)
    except socket.gaierror as exc:
        raise SystemExit(f"Unable to resolve host '{host}': {exc}") from exc

    for family, socktype, proto, _, sockaddr in candidates:
        try:
            with socket.socket(family, socktype, proto) as probe:
                probe.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
                probe.bind(sockaddr)
        except OSError as exc:
            if exc.errno == errno.EADDRINUSE:
                raise SystemExit(
                    f"Data room API failed to start: {host}:{port} is already in use. "
                    "Choose another port via --port or DATAROOM_API_PORT."
                ) from exc
            continue
        return
    raise SystemExit(f"No suitable address family found for {host}:{port}.")


def sweep_once() -> None:
    from dataroom_api.db.migrations import upgrade_database
    from dataroom_api.service.facade import get_data_room_services

    upgrade_database()
    sweeper = get_data_room_services().sweeper
    if not sweeper.enabled:
        raise SystemExit("DATAROOM_ARCHIVE_GRACE_DAYS is not set; nothing to sweep.")
    archived = sweeper.run_once()
    LOGGER.info("Sweep archived %d data room(s)", len(archived))


def main() -> None:
    args = parse_args()

    repo_root = Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(repo_root / "dataroom" / "src"))

    from dataroom_api.config.settings import get_api_settings

    api_settings = get_api_settings()
    log_level = (args.log_level or api_settings.log_level).lower()
    configure_logging(log_level)

    if args.migrate:
        from dataroom_api.db.migrations import upgrade_database

        upgrade_database()
        return
    if args.sweep_once:
        sweep_once()
        return

    host = args.host or api_settings.host
    port = args.port or api_settings.port
    ensure_port_available(host, port)
    uvicorn.run(
        "dataroom_api.app:app",
        host=host,
        port=port,
        reload=args.reload or api_settings.reload,
        log_level="debug" if log_level == "trace" else log_level,
        log_config=None,
    )


if __name__ == "__main__":
    main()
