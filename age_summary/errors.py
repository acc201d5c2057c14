from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar


@dataclass(frozen=True)
class SourceError(Exception):
    source_id: str
    message: str
    status_code: int | None = None

    retryable: ClassVar[bool] = False

    def __str__(self) -> str:
        return f"[{self.source_id}] {self.message}"


class ParseError(SourceError):
    """Payload is not a CSV file with the expected ``fname, lname, age`` header."""


class TransportFatal(SourceError):
    """Bytes could not be retrieved and asking again will not help."""


class TransportRetryable(SourceError):
    """Transient failure (5xx, timeout, dropped connection)."""

    retryable: ClassVar[bool] = True


class Cancelled(SourceError):
    """The source was never attempted because the run was stopped."""


class ConfigError(Exception):
    pass
