from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable, Protocol

from ..errors import SourceError
from ..locators import Locator
from ..records import User


@dataclass(frozen=True)
class Outcome:
    """Result of one fetch+parse attempt for one source."""

    source: Locator
    records: tuple[User, ...] = ()
    skipped: int = 0
    error: SourceError | None = None
    elapsed_ms: int = 0

    @classmethod
    def success(cls, source: Locator, records: list[User], skipped: int) -> "Outcome":
        return cls(source=source, records=tuple(records), skipped=skipped)

    @classmethod
    def failure(cls, source: Locator, error: SourceError) -> "Outcome":
        return cls(source=source, error=error)

    @property
    def key(self) -> str:
        return str(self.source)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def retryable(self) -> bool:
        return self.error is not None and self.error.retryable

    def with_elapsed(self, elapsed_ms: int) -> "Outcome":
        return replace(self, elapsed_ms=elapsed_ms)

    def describe(self) -> str:
        if self.retryable:
            return f"{self.source} - retryable error - {self.error}"
        if self.error is not None:
            return f"{self.source} - non retryable error - {self.error}"
        return f"{self.source} {len(self.records)} users ({self.skipped} skipped) elapsed:{self.elapsed_ms}ms"


class Fetcher(Protocol):
    def fetch(self, locator: Locator) -> Outcome: ...


FetchFn = Callable[[Locator], Outcome]
