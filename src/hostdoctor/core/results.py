"""Collecting check results and filtered views over them."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Iterator

from hostdoctor.core.schema import ResultRecord, Status

log = logging.getLogger(__name__)

SPOTLIGHT_STATUSES = frozenset({Status.WARNING, Status.ERROR})


@dataclass
class ResultView:
    """A filtered, ordered slice of a run's results.

    ``total`` is the unfiltered count, so an empty view of a non-empty run
    can be told apart from a run that produced nothing.
    """

    records: list[ResultRecord]
    total: int

    @property
    def all_clear(self) -> bool:
        return not self.records and self.total > 0

    def summary(self) -> str:
        if self.total == 1:
            return "The check reports 'success'."
        return f"All {self.total} checks report 'success'."

    def __iter__(self) -> Iterator[ResultRecord]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self.records)


class ResultCollector:
    """Accumulates one record per check.

    Records come back in ``order`` (the order checks were resolved in) when
    given, otherwise in the order they were recorded.
    """

    def __init__(self, order: Iterable[str] | None = None) -> None:
        self._records: dict[str, ResultRecord] = {}
        self._order = {name: i for i, name in enumerate(order or ())}

    def record(self, name: str, status: Status | str, message: str) -> ResultRecord:
        if name in self._records:
            log.warning("Check %s reported twice; keeping the last result", name)
        rec = ResultRecord(name=name, status=Status(status), message=message)
        self._records[name] = rec
        return rec

    @property
    def records(self) -> list[ResultRecord]:
        records = list(self._records.values())
        if self._order:
            last = len(self._order)
            records.sort(key=lambda r: self._order.get(r.name, last))
        return records

    def filter(self, predicate: Callable[[ResultRecord], bool]) -> ResultView:
        return ResultView(records=[r for r in self.records if predicate(r)], total=len(self))

    def spotlight(self) -> ResultView:
        """Only warnings and errors."""
        return self.filter(lambda r: r.status in SPOTLIGHT_STATUSES)

    def all(self) -> ResultView:
        return self.filter(lambda r: True)

    def __iter__(self) -> Iterator[ResultRecord]:
        return iter(self.records)

    def __len__(self) -> int:
        return len(self._records)
