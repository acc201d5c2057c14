from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..errors import TransportFatal
from ..locators import Locator
from .base import Fetcher, Outcome
from .file_csv import FileCsvFetcher
from .http_csv import HttpCsvFetcher


@dataclass(frozen=True)
class SchemeFetcher:
    """Delegates each locator to the fetcher registered for its scheme."""

    fetchers: dict[str, Fetcher] = field(default_factory=dict)

    def fetch(self, locator: Locator) -> Outcome:
        fetcher = self.fetchers.get(locator.scheme)
        if fetcher is None:
            return Outcome.failure(
                locator,
                TransportFatal(str(locator), f"unknown url scheme: {locator.scheme}"),
            )
        return fetcher.fetch(locator)


def build_fetcher(
    *,
    base_dir: Path,
    timeout_seconds: float,
    encoding: str = "utf-8",
    session: Any = None,
) -> SchemeFetcher:
    file_fetcher = FileCsvFetcher(base_dir=base_dir, encoding=encoding)
    http_fetcher = HttpCsvFetcher(timeout_seconds=timeout_seconds, encoding=encoding, session=session)
    return SchemeFetcher(
        fetchers={
            "file": file_fetcher,
            "http": http_fetcher,
            "https": http_fetcher,
        }
    )
