from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from .errors import ConfigError


@dataclass(frozen=True)
class Locator:
    """Address of one CSV source: ``file://data/a.csv`` or ``http://host/a.csv``."""

    scheme: str
    location: str

    @classmethod
    def parse(cls, text: str) -> "Locator":
        scheme, sep, location = text.strip().partition("://")
        if not sep or not scheme or not location:
            raise ValueError(f"Not a locator (expected scheme://location): {text!r}")
        return cls(scheme=scheme.lower(), location=location)

    def __str__(self) -> str:
        return f"{self.scheme}://{self.location}"


def load_index(index_path: Path, data_root: str = "data") -> list[Locator]:
    """
    Read a newline-delimited index into locators, in file order.

    Bare names are resolved against ``data_root`` as ``file`` locators; lines
    that already carry a scheme are kept as they are. Blank lines are ignored.
    """
    try:
        text = index_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"unable to read csv index file {index_path}: {exc}") from exc

    root = data_root.rstrip("/") or "/"
    locators: list[Locator] = []
    for line in text.splitlines():
        name = line.strip()
        if not name:
            continue
        if "://" in name:
            locators.append(Locator.parse(name))
        elif root == "/":
            locators.append(Locator(scheme="file", location=f"/{name.lstrip('/')}"))
        else:
            locators.append(Locator(scheme="file", location=f"{root}/{name.lstrip('/')}"))
    return locators
