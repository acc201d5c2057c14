from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ..errors import SourceError, TransportFatal
from ..locators import Locator
from ..records import parse_users
from .base import Outcome


@dataclass(frozen=True)
class FileCsvFetcher:
    base_dir: Path
    encoding: str = "utf-8"

    def resolve(self, locator: Locator) -> Path:
        path = Path(locator.location)
        return path if path.is_absolute() else (self.base_dir / path)

    def fetch(self, locator: Locator) -> Outcome:
        source_id = str(locator)
        try:
            try:
                data = self.resolve(locator).read_bytes()
            except OSError as exc:
                raise TransportFatal(source_id, f"unable to read file: {exc}") from exc
            users, skipped = parse_users(data, source_id, encoding=self.encoding)
            return Outcome.success(locator, users, skipped)
        except SourceError as exc:
            return Outcome.failure(locator, exc)
