from __future__ import annotations

import argparse
import asyncio
import logging
import os
from pathlib import Path
from typing import Dict, Optional, Sequence

from rich.console import Console

from . import __version__
from .banner import build_banner_info, print_startup_banner
from .config import AppConfig, load_config
from .errors import WatchlistarrError
from .logging_utils import configure_logging, parse_log_level
from .managers import ManagerAdapter, MovieManager, ShowManager
from .models import ItemKind
from .scheduler import Scheduler
from .transport import HttpTransport
from .watchlist import WatchlistReader

LOGGER = logging.getLogger(__name__)

CONFIG_ENV_VAR = "WATCHLISTARR_CONFIG"
DEFAULT_CONFIG_PATH = "config.yaml"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="watchlistarr",
        description="Mirror a Plex watchlist into Radarr and Sonarr.",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=Path(os.getenv(CONFIG_ENV_VAR, DEFAULT_CONFIG_PATH)),
        help=f"Path to the YAML configuration (default: ${CONFIG_ENV_VAR} or {DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument("-l", "--log-level", default="info", help="Log level (debug, info, warning, error)")
    parser.add_argument("--once", action="store_true", help="Run a single full sync and exit")
    parser.add_argument("--no-banner", action="store_true", help="Do not print the startup banner")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def build_managers(config: AppConfig, transport: HttpTransport) -> Dict[ItemKind, Optional[ManagerAdapter]]:
    return {
        ItemKind.MOVIE: MovieManager(transport, config.movies) if config.movies else None,
        ItemKind.SHOW: ShowManager(transport, config.shows) if config.shows else None,
    }


def build_scheduler(config: AppConfig, transport: HttpTransport) -> Scheduler:
    reader = WatchlistReader(transport, config.plex) if config.plex else None
    return Scheduler(config, reader, build_managers(config, transport))


async def run_once(scheduler: Scheduler) -> int:
    try:
        report = await scheduler.sync(include_collaborators=True)
    except WatchlistarrError as exc:
        LOGGER.error("Sync failed (%s): %s", exc.kind.value, exc)
        return 1
    if report is None or report.has_failures():
        return 1
    return 0


async def run(config: AppConfig, *, once: bool = False) -> int:
    async with HttpTransport(timeout=config.http.timeout) as transport:
        scheduler = build_scheduler(config, transport)
        if once:
            return await run_once(scheduler)
        await scheduler.run_forever()
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        level = parse_log_level(args.log_level)
    except ValueError as exc:
        parser.error(str(exc))
    configure_logging(level)

    LOGGER.info("Starting watchlistarr %s", __version__)
    try:
        config = load_config(args.config)
    except Exception as exc:  # noqa: BLE001
        LOGGER.error("Failed to load config %s: %s", args.config, exc)
        return 1
    LOGGER.info("Configuration loaded from: %s", args.config)

    if not args.no_banner:
        print_startup_banner(build_banner_info(config, str(args.config), once=args.once), Console(stderr=True))

    try:
        return asyncio.run(run(config, once=args.once))
    except KeyboardInterrupt:
        LOGGER.info("Interrupted; shutting down")
        return 0
