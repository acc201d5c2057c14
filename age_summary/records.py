from __future__ import annotations

import csv
import io
import re
from dataclasses import dataclass

from .errors import ParseError

EXPECTED_HEADER = "fname, lname, age"

_AGE_RE = re.compile(r"[+-]?\d+")

# Ages must fit a signed 64-bit integer; anything wider is a bad row.
_AGE_MIN = -(2**63)
_AGE_MAX = 2**63 - 1
_AGE_MAX_DIGITS = len(str(_AGE_MAX))


@dataclass(frozen=True)
class User:
    first: str
    last: str
    age: int

    def __str__(self) -> str:
        return f"{self.first} {self.last} {self.age}"

    def to_dict(self) -> dict[str, object]:
        return {"fname": self.first, "lname": self.last, "age": self.age}


def _parse_age(cell: str) -> int | None:
    if not _AGE_RE.fullmatch(cell):
        return None
    if len(cell.lstrip("+-").lstrip("0")) > _AGE_MAX_DIGITS:
        return None
    age = int(cell)
    if not _AGE_MIN <= age <= _AGE_MAX:
        return None
    return age


def parse_users(data: bytes, source_id: str, encoding: str = "utf-8") -> tuple[list[User], int]:
    """
    Parse a raw CSV payload into validated users.

    Returns ``(users, skipped)``. Bad rows (non-integer age, empty name, age 0)
    only bump ``skipped``; a bad file (wrong header, broken quoting, rows with
    a different number of fields than the header) raises ParseError.
    """
    try:
        text = data.decode(encoding)
    except UnicodeDecodeError as exc:
        raise ParseError(source_id, f"payload is not valid {encoding}: {exc}") from exc

    try:
        rows = [r for r in csv.reader(io.StringIO(text, newline="")) if r]
    except csv.Error as exc:
        raise ParseError(source_id, f"malformed CSV: {exc}") from exc

    if not rows:
        raise ParseError(source_id, "empty CSV payload")

    header = rows[0]
    if ",".join(header) != EXPECTED_HEADER:
        raise ParseError(source_id, f"{source_id} does not have proper CSV headers")

    users: list[User] = []
    skipped = 0
    for line_no, raw in enumerate(rows[1:], start=1):
        if len(raw) != len(header):
            raise ParseError(
                source_id,
                f"record {line_no}: wrong number of fields ({len(raw)} != {len(header)})",
            )
        first, last, age_cell = (cell.strip() for cell in raw)
        age = _parse_age(age_cell)
        if age is None or not first or not last or age == 0:
            skipped += 1
            continue
        users.append(User(first=first, last=last, age=age))

    return users, skipped
