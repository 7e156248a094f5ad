"""Reconciliation of a watchlist snapshot against the library managers.

Each entry is routed by kind to the adapter registered for it and added
unless already present. Entries are processed strictly in watchlist order,
one at a time, with a short pause between manager calls. A failure is
recorded against its entry and never stops the rest of the batch; retrying
is left to the next scheduled cycle.
"""

from __future__ import annotations

import asyncio
import logging
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, Dict, Iterable, List, Mapping, Optional

from .errors import ErrorKind, WatchlistarrError
from .logging_utils import render_fields_block
from .managers import ManagerAdapter
from .models import AddOutcome, ItemKind, WatchlistEntry

LOGGER = logging.getLogger(__name__)

DEFAULT_ITEM_DELAY = 0.1

_FAILURE_LOG_LEVELS = {
    ErrorKind.NOT_FOUND: logging.WARNING,
    ErrorKind.KIND_MISMATCH: logging.WARNING,
}


class OutcomeStatus(str, Enum):
    ADDED = "added"
    ALREADY_EXISTS = "already-exists"
    SKIPPED = "skipped"
    FAILED = "failed"


_ADD_STATUS = {
    AddOutcome.ADDED: OutcomeStatus.ADDED,
    AddOutcome.ALREADY_EXISTS: OutcomeStatus.ALREADY_EXISTS,
}


@dataclass(frozen=True, slots=True)
class ItemOutcome:
    entry: WatchlistEntry
    status: OutcomeStatus
    reason: Optional[str] = None
    error_kind: Optional[ErrorKind] = None


@dataclass(slots=True)
class ReconciliationReport:
    """Per-entry outcomes of one reconciliation pass."""

    outcomes: List[ItemOutcome] = field(default_factory=list)

    def record(self, outcome: ItemOutcome) -> None:
        self.outcomes.append(outcome)

    def counts(self) -> Dict[OutcomeStatus, int]:
        counter = Counter(outcome.status for outcome in self.outcomes)
        return {status: counter.get(status, 0) for status in OutcomeStatus}

    @property
    def failures(self) -> List[ItemOutcome]:
        return [outcome for outcome in self.outcomes if outcome.status is OutcomeStatus.FAILED]

    @property
    def added(self) -> List[ItemOutcome]:
        return [outcome for outcome in self.outcomes if outcome.status is OutcomeStatus.ADDED]

    def has_failures(self) -> bool:
        return bool(self.failures)

    def render(self, title: str = "Reconciliation Summary") -> str:
        counts = self.counts()
        fields: Dict[str, object] = {
            "Entries": len(self.outcomes),
            "Added": counts[OutcomeStatus.ADDED],
            "Already Present": counts[OutcomeStatus.ALREADY_EXISTS],
            "Skipped": counts[OutcomeStatus.SKIPPED],
            "Failed": counts[OutcomeStatus.FAILED],
        }
        if self.added:
            fields["New Titles"] = [outcome.entry.label for outcome in self.added]
        if self.failures:
            fields["Failures"] = [
                f"{outcome.entry.label}: {outcome.error_kind.value if outcome.error_kind else 'unexpected'}"
                for outcome in self.failures
            ]
        return render_fields_block(title, fields)


async def _add_entry(adapter: ManagerAdapter, entry: WatchlistEntry) -> ItemOutcome:
    try:
        result = await adapter.add(entry)
    except WatchlistarrError as exc:
        level = _FAILURE_LOG_LEVELS.get(exc.kind, logging.ERROR)
        if exc.detail is not None and level >= logging.ERROR:
            LOGGER.log(level, "Failed to add '%s' to %s: %s\n%s", entry.label, adapter.name, exc, exc.detail)
        else:
            LOGGER.log(level, "Failed to add '%s' to %s: %s", entry.label, adapter.name, exc)
        return ItemOutcome(entry, OutcomeStatus.FAILED, reason=str(exc), error_kind=exc.kind)
    except Exception as exc:  # noqa: BLE001 - one entry must not abort the batch
        LOGGER.exception("Unexpected error while adding '%s' to %s", entry.label, adapter.name)
        return ItemOutcome(entry, OutcomeStatus.FAILED, reason=f"unexpected error: {exc}")
    return ItemOutcome(entry, _ADD_STATUS[result])


async def reconcile(
    entries: Iterable[WatchlistEntry],
    managers: Mapping[ItemKind, Optional[ManagerAdapter]],
    *,
    item_delay: float = DEFAULT_ITEM_DELAY,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> ReconciliationReport:
    """Add every entry missing from its manager and report per-entry outcomes.

    Args:
        entries: Watchlist snapshot, processed in the given order.
        managers: Adapter per item kind; kinds without an adapter are skipped.
        item_delay: Seconds to wait between consecutive manager calls.
        sleep: Awaitable used for the pause (injected by tests).

    Returns:
        A report with one outcome per entry.
    """
    report = ReconciliationReport()
    called_manager = False
    for entry in entries:
        adapter = managers.get(entry.kind)
        if adapter is None:
            LOGGER.debug("No manager configured for %s '%s'; skipping", entry.kind.value, entry.label)
            report.record(ItemOutcome(entry, OutcomeStatus.SKIPPED, reason=f"no {entry.kind.value} manager configured"))
            continue

        if called_manager and item_delay > 0:
            await sleep(item_delay)
        called_manager = True
        report.record(await _add_entry(adapter, entry))
    return report


__all__ = [
    "DEFAULT_ITEM_DELAY",
    "ItemOutcome",
    "OutcomeStatus",
    "ReconciliationReport",
    "reconcile",
]
