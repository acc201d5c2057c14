from __future__ import annotations

import queue
import threading
from typing import Callable, Sequence

from .collector import ResultCollector
from .errors import Cancelled, SourceError
from .locators import Locator
from .log import get_logger
from .sources.base import FetchFn, Outcome
from .utils import Timer

log = get_logger(__name__)

# One per worker, queued after the real work.
_SENTINEL = None


def _fetch_one(fetch: FetchFn, locator: Locator) -> Outcome:
    try:
        return fetch(locator)
    except Exception as exc:
        # Fetchers report their own failures; anything reaching here is a bug in one.
        log.exception("fetch of %s raised unexpectedly", locator)
        return Outcome.failure(
            locator,
            SourceError(str(locator), f"unexpected {type(exc).__name__}: {exc}"),
        )


def _worker(
    worker_id: int,
    todo: queue.Queue,
    fetch: FetchFn,
    collector: ResultCollector,
    should_stop: Callable[[], bool] | None,
) -> None:
    while True:
        locator = todo.get()
        if locator is _SENTINEL:
            break

        if should_stop is not None and should_stop():
            collector.upsert(Outcome.failure(locator, Cancelled(str(locator), "run stopped before fetch")))
            continue

        log.debug("worker %d got %s", worker_id, locator)
        t = Timer.start_new()
        outcome = _fetch_one(fetch, locator)
        collector.upsert(outcome.with_elapsed(t.elapsed_ms()))


def run_pool(
    locators: Sequence[Locator],
    fetch: FetchFn,
    collector: ResultCollector,
    *,
    pool_size: int,
    generation: int = 0,
    should_stop: Callable[[], bool] | None = None,
) -> None:
    """
    Fetch every locator once with ``pool_size`` worker threads sharing one queue.

    Blocks until all workers have drained the queue and written their last
    outcome into ``collector``. Completion order is unspecified.
    """
    if pool_size < 1:
        raise ValueError("pool_size must be >= 1")
    if not locators:
        return

    todo: queue.Queue = queue.Queue()
    for locator in locators:
        todo.put(locator)
    for _ in range(pool_size):
        todo.put(_SENTINEL)

    threads = []
    for i in range(pool_size):
        t = threading.Thread(
            target=_worker,
            args=(i, todo, fetch, collector, should_stop),
            name=f"age-summary-g{generation}-w{i}",
            daemon=True,
        )
        t.start()
        threads.append(t)

    for t in threads:
        t.join()
