"""Periodic sync loops.

Four loops run as independent asyncio tasks in one process:

- **token-check**: reads the primary watchlist once a day so an expired token
  shows up in the logs early
- **watchlist-sync**: reconciles the primary watchlist every ``interval.seconds``
- **full-sync**: reconciles primary and collaborator watchlists every 19 minutes,
  starting one ``interval.seconds`` after watchlist-sync
- **removal-sync**: gated on the ``delete`` section; currently a no-op

A loop runs its job to completion before waiting for the next tick, so a loop
never overlaps itself. Failures are logged at the loop boundary and the loop
keeps ticking.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Mapping, Optional

from .config import FULL_SYNC_INTERVAL_SECONDS, TOKEN_CHECK_INTERVAL_SECONDS, AppConfig
from .errors import WatchlistarrError
from .logging_utils import render_fields_block
from .managers import ManagerAdapter
from .models import ItemKind
from .reconciler import ReconciliationReport, reconcile
from .watchlist import WatchlistReader

LOGGER = logging.getLogger(__name__)

SleepFunc = Callable[[float], Awaitable[None]]


@dataclass
class PeriodicTask:
    name: str
    interval: float
    job: Callable[[], Awaitable[object]]
    initial_delay: float = 0.0

    async def run_once(self) -> bool:
        """Run the job once, logging instead of raising. Returns True on success."""
        try:
            await self.job()
        except WatchlistarrError as exc:
            LOGGER.error("%s failed (%s): %s", self.name, exc.kind.value, exc)
            return False
        except Exception:  # noqa: BLE001 - a failed cycle must not stop the loop
            LOGGER.exception("%s failed with an unexpected error", self.name)
            return False
        return True

    async def run(
        self,
        *,
        iterations: Optional[int] = None,
        sleep: SleepFunc = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Tick forever (or ``iterations`` times), starting after ``initial_delay``."""
        if self.initial_delay > 0:
            await sleep(self.initial_delay)
        count = 0
        while iterations is None or count < iterations:
            started = clock()
            await self.run_once()
            count += 1
            if iterations is not None and count >= iterations:
                break
            remaining = self.interval - (clock() - started)
            await sleep(max(remaining, 0.0))


class Scheduler:
    """Owns the long-lived reader and adapters and drives the sync loops."""

    def __init__(
        self,
        config: AppConfig,
        reader: Optional[WatchlistReader],
        managers: Mapping[ItemKind, Optional[ManagerAdapter]],
        *,
        sleep: SleepFunc = asyncio.sleep,
    ) -> None:
        self.config = config
        self.reader = reader
        self.managers = dict(managers)
        self._sleep = sleep

    async def check_token(self) -> None:
        if self.reader is None:
            return
        LOGGER.info("Running Plex token check")
        try:
            entries = await self.reader.read(include_collaborators=False)
        except WatchlistarrError as exc:
            LOGGER.warning("Plex token check failed: %s", exc)
            return
        LOGGER.debug("Plex token check succeeded (%d watchlist item(s))", len(entries))

    async def sync(self, *, include_collaborators: bool) -> Optional[ReconciliationReport]:
        """Read the watchlist and reconcile it against the configured managers.

        Raises:
            SourceUnavailableError: If the watchlist cannot be fetched.
            ParseFailureError: If the watchlist cannot be decoded.
        """
        label = "full" if include_collaborators else "watchlist"
        if self.reader is None:
            LOGGER.warning("No Plex configuration found, skipping %s sync", label)
            return None

        LOGGER.info("Running %s sync", label)
        entries = await self.reader.read(include_collaborators=include_collaborators)
        LOGGER.info("Found %d item(s) in watchlist", len(entries))

        report = await reconcile(
            entries,
            self.managers,
            item_delay=self.config.http.item_delay,
            sleep=self._sleep,
        )
        if report.added or report.failures:
            LOGGER.info(report.render(f"{label.capitalize()} Sync Summary"))
        else:
            LOGGER.info("%s sync completed; nothing new to add", label.capitalize())
        return report

    async def removal_sync(self) -> None:
        removal = self.config.removal
        if not removal.enabled:
            LOGGER.debug("Removal sync disabled; nothing to do")
            return
        # Gates are honoured but pruning itself is not implemented yet.
        LOGGER.info(
            render_fields_block(
                "Removal Sync Not Implemented",
                {
                    "Movies": removal.movie,
                    "Ended Shows": removal.ended_show,
                    "Continuing Shows": removal.continuing_show,
                    "Delete Files": removal.delete_files,
                    "Result": "no library entries were removed",
                },
            )
        )

    def build_tasks(self) -> List[PeriodicTask]:
        return [
            PeriodicTask("token-check", TOKEN_CHECK_INTERVAL_SECONDS, self.check_token),
            PeriodicTask(
                "watchlist-sync",
                self.config.refresh_interval_seconds,
                lambda: self.sync(include_collaborators=False),
            ),
            # First tick trails watchlist-sync by one refresh interval
            PeriodicTask(
                "full-sync",
                FULL_SYNC_INTERVAL_SECONDS,
                lambda: self.sync(include_collaborators=True),
                initial_delay=self.config.refresh_interval_seconds,
            ),
            PeriodicTask("removal-sync", self.config.removal_interval_seconds, self.removal_sync),
        ]

    async def run_forever(self) -> None:
        tasks = [
            asyncio.create_task(task.run(sleep=self._sleep), name=task.name)
            for task in self.build_tasks()
        ]
        LOGGER.debug("Started %d sync loop(s)", len(tasks))
        try:
            await asyncio.gather(*tasks)
        finally:
            for task in tasks:
                task.cancel()


__all__ = ["PeriodicTask", "Scheduler"]
