from __future__ import annotations

import threading
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterable, Sequence

from .aggregate import Summary, merge, summarize
from .collector import ResultCollector
from .config import RunConfig
from .errors import Cancelled
from .locators import Locator, load_index
from .log import get_logger
from .pool import run_pool
from .sources.base import FetchFn, Outcome
from .sources.factory import build_fetcher
from .utils import Timer, environment_info, exception_payload, utc_now_iso, utc_run_id, write_json

log = get_logger(__name__)


@dataclass(frozen=True)
class FetchReport:
    succeeded: list[Outcome]
    fatal: list[Outcome] = field(default_factory=list)
    # Still retryable when the cycle bound, deadline or cancel signal ended the loop.
    exhausted: list[Outcome] = field(default_factory=list)
    cycles: int = 0
    elapsed_ms: int = 0

    def outcomes(self) -> list[Outcome]:
        return [*self.succeeded, *self.fatal, *self.exhausted]


@dataclass(frozen=True)
class PipelineResult:
    summary: Summary
    report: FetchReport
    run_dir: Path | None
    exit_code: int


def partition(outcomes: Iterable[Outcome]) -> tuple[list[Outcome], list[Outcome], list[Outcome]]:
    """Split outcomes into (succeeded, retryable, fatal)."""
    succeeded: list[Outcome] = []
    retryable: list[Outcome] = []
    fatal: list[Outcome] = []
    for o in outcomes:
        if o.ok:
            succeeded.append(o)
        elif o.retryable:
            retryable.append(o)
        else:
            fatal.append(o)
    return succeeded, retryable, fatal


def fetch_all(
    locators: Sequence[Locator],
    fetch: FetchFn,
    *,
    pool_size: int,
    max_cycles: int | None = None,
    deadline_seconds: float | None = None,
    cancel: threading.Event | None = None,
) -> FetchReport:
    """
    Fetch every locator, re-running a fresh pool over the retryable failures
    until none are left.

    Each cycle is a full pool run; outcomes accumulate in one collector so a
    retried source's latest outcome replaces its earlier failure. With
    ``max_cycles`` unset the loop only ends once no source is retryable.
    Sources still waiting for a retry when the cycle bound, deadline or
    cancel signal ends the loop are reported as ``exhausted``.
    """
    t = Timer.start_new()
    deadline_at = None if deadline_seconds is None else time.monotonic() + deadline_seconds

    def should_stop() -> bool:
        if cancel is not None and cancel.is_set():
            return True
        return deadline_at is not None and time.monotonic() >= deadline_at

    collector = ResultCollector()
    remaining = list(locators)
    requeued: set[str] = set()
    cycles = 0
    exhausted: list[Outcome] = []

    while True:
        run_pool(remaining, fetch, collector, pool_size=pool_size, generation=cycles, should_stop=should_stop)
        cycles += 1

        succeeded, retryable, fatal = partition(collector.snapshot().values())
        # A requeued source that the stop signal kept from its retry is still retryable.
        stopped = [o for o in fatal if isinstance(o.error, Cancelled) and o.key in requeued]
        if stopped:
            fatal = [o for o in fatal if o.key not in requeued or not isinstance(o.error, Cancelled)]

        if not retryable and not stopped:
            break
        if max_cycles is not None and cycles >= max_cycles:
            log.warning(
                "%d retryable sources left after %d cycles - giving up",
                len(retryable) + len(stopped),
                cycles,
            )
            exhausted = retryable + stopped
            break
        if stopped or should_stop():
            log.warning(
                "%d retryable sources left when the run was stopped - giving up",
                len(retryable) + len(stopped),
            )
            exhausted = retryable + stopped
            break

        log.info("%d retryable sources left - cycling again", len(retryable))
        remaining = [o.source for o in retryable]
        requeued.update(o.key for o in retryable)

    for o in fatal:
        log.warning("skipping %s", o.describe())
    for o in exhausted:
        log.warning("skipping %s (retries exhausted)", o.describe())

    return FetchReport(
        succeeded=succeeded,
        fatal=fatal,
        exhausted=exhausted,
        cycles=cycles,
        elapsed_ms=t.elapsed_ms(),
    )


def _source_entry(o: Outcome, *, status: str, debug: bool) -> dict[str, Any]:
    return {
        "id": o.key,
        "status": status,
        "records": len(o.records),
        "skipped": o.skipped,
        "elapsed_ms": o.elapsed_ms,
        "error": exception_payload(o.error, debug=debug) if o.error is not None else None,
    }


def _write_report(
    run_dir: Path,
    *,
    config: RunConfig,
    started_at: str,
    report: FetchReport,
    summary: Summary,
) -> None:
    sources = [_source_entry(o, status="ok", debug=config.debug) for o in report.succeeded]
    sources += [_source_entry(o, status="failed", debug=config.debug) for o in report.fatal]
    sources += [_source_entry(o, status="exhausted", debug=config.debug) for o in report.exhausted]
    write_json(
        run_dir / "summary.json",
        {
            "started_at": started_at,
            "ended_at": utc_now_iso(),
            "elapsed_ms": report.elapsed_ms,
            "cycles": report.cycles,
            "settings": config.settings(),
            "environment": environment_info(),
            "sources": sorted(sources, key=lambda s: s["id"]),
            "summary": summary.to_dict(),
        },
    )


def run_pipeline(
    config: RunConfig,
    *,
    base_dir: Path | None = None,
    session: Any = None,
    cancel: threading.Event | None = None,
) -> PipelineResult:
    started_at = utc_now_iso()
    base_dir = base_dir or Path.cwd()

    index_path = config.index_path if config.index_path.is_absolute() else base_dir / config.index_path
    locators = load_index(index_path, data_root=config.data_root)
    log.info("%d sources listed in %s", len(locators), index_path)

    fetcher = build_fetcher(
        base_dir=base_dir,
        timeout_seconds=config.timeout_seconds,
        encoding=config.encoding,
        session=session,
    )
    report = fetch_all(
        locators,
        fetcher.fetch,
        pool_size=config.pool_size,
        max_cycles=config.max_cycles,
        deadline_seconds=config.deadline_seconds,
        cancel=cancel,
    )

    log.info(
        "%d files read in %dms over %d cycles (poolsize %d)",
        len(report.succeeded),
        report.elapsed_ms,
        report.cycles,
        config.pool_size,
    )
    for o in report.succeeded:
        log.info("%s", o.describe())

    summary = summarize(merge(report.succeeded))
    for line in summary.lines():
        log.info("%s", line)

    run_dir = None
    if config.out_dir is not None:
        run_dir = config.out_dir / f"run_{utc_run_id()}"
        _write_report(run_dir, config=config, started_at=started_at, report=report, summary=summary)
        log.info("report written to %s", run_dir / "summary.json")

    return PipelineResult(summary=summary, report=report, run_dir=run_dir, exit_code=0)
