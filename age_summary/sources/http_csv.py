from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import requests

from ..errors import SourceError, TransportFatal, TransportRetryable
from ..locators import Locator
from ..records import parse_users
from .base import Outcome


@dataclass(frozen=True)
class HttpCsvFetcher:
    timeout_seconds: float = 20
    encoding: str = "utf-8"
    # Anything with a requests-style ``get``; the requests module itself by default.
    session: Any = None

    def fetch(self, locator: Locator) -> Outcome:
        source_id = str(locator)
        try:
            body = self._get(source_id)
            users, skipped = parse_users(body, source_id, encoding=self.encoding)
            return Outcome.success(locator, users, skipped)
        except SourceError as exc:
            return Outcome.failure(locator, exc)

    def _get(self, url: str) -> bytes:
        client = self.session if self.session is not None else requests
        try:
            resp = client.get(url, timeout=self.timeout_seconds)
        except (requests.Timeout, requests.ConnectionError) as exc:
            raise TransportRetryable(url, f"request failed: {exc}") from exc
        except requests.RequestException as exc:
            raise TransportFatal(url, f"request failed: {exc}") from exc

        status = resp.status_code
        if status == 200:
            return resp.content
        if status >= 500:
            raise TransportRetryable(url, f"server error (status code {status})", status_code=status)
        raise TransportFatal(url, f"unable to load file (status code {status})", status_code=status)
