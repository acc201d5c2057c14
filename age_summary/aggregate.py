from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Iterator

from .records import User
from .sources.base import Outcome


@dataclass(frozen=True)
class Summary:
    count: int
    mean: int | None = None
    median: int | None = None
    median_users: tuple[User, ...] = ()

    def lines(self) -> Iterator[str]:
        yield f"{self.count} users"
        if self.mean is None:
            return
        yield f"mean {self.mean}"
        if self.median is None:
            return
        yield f"median {self.median} users:"
        for u in self.median_users:
            yield str(u)

    def to_dict(self) -> dict[str, Any]:
        return {
            "count": self.count,
            "mean": self.mean,
            "median": self.median,
            "median_users": [u.to_dict() for u in self.median_users],
        }


def merge(outcomes: Iterable[Outcome]) -> list[User]:
    """Concatenate the users of every successful outcome, in outcome order."""
    users: list[User] = []
    for o in outcomes:
        if o.ok:
            users.extend(o.records)
    return users


def summarize(users: list[User]) -> Summary:
    """
    Mean and median age of ``users``.

    The mean is truncated to an int. The median is the sorted age at index
    ``ceil(n / 2)`` (0-based), which is the upper-middle element for even n
    and one past the middle for odd n; with a single user that index is out
    of range and no median is reported. Every user at the median age is
    listed, in input order.
    """
    n = len(users)
    if n == 0:
        return Summary(count=0)

    ages = sorted(u.age for u in users)
    total = sum(ages)
    q = abs(total) // n
    mean = q if total >= 0 else -q

    mid = (n + 1) // 2
    if mid >= n:
        return Summary(count=n, mean=mean)

    median = ages[mid]
    tied = tuple(u for u in users if u.age == median)
    return Summary(count=n, mean=mean, median=median, median_users=tied)
