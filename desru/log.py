"""Execution history of an EventScheduler.

Each executed event leaves an ExecutionRecord behind: the time it ran, a
snapshot of its context and the outcome returned by its action. The event
itself, and with it the action, is not retained.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass
from types import MappingProxyType
from typing import overload

import numpy as np
import pandas as pd

__all__ = ["EventLog", "ExecutionRecord"]

BASE_COLUMNS = ["time", "sequence", "outcome"]


@dataclass(frozen=True, slots=True)
class ExecutionRecord:
    """The outcome of one executed event.

    Attributes:
        time: simulated time at which the event executed
        context: read-only snapshot of the event's context
        outcome: value returned by the action, None if there was none
        sequence: the sequence number the scheduler assigned to the event
    """

    time: float
    context: Mapping[str, str]
    outcome: str | None
    sequence: int

    def __post_init__(self):
        """Freeze the context snapshot."""
        object.__setattr__(self, "context", MappingProxyType(dict(self.context)))


class EventLog(Sequence[ExecutionRecord]):
    """Append-only, ordered sequence of execution records.

    Only the owning scheduler appends to the log; callers get a read-only view.
    """

    def __init__(self) -> None:
        """Initialize an empty log."""
        self._records: list[ExecutionRecord] = []

    def _append(self, record: ExecutionRecord) -> None:
        self._records.append(record)

    def _clear(self) -> None:
        self._records.clear()

    @overload
    def __getitem__(self, index: int) -> ExecutionRecord: ...

    @overload
    def __getitem__(self, index: slice) -> list[ExecutionRecord]: ...

    def __getitem__(self, index):  # noqa: D105
        return self._records[index]

    def __len__(self) -> int:  # noqa: D105
        return len(self._records)

    def __iter__(self) -> Iterator[ExecutionRecord]:  # noqa: D105
        return iter(self._records)

    def __repr__(self) -> str:
        """Return a string representation of the log."""
        return f"EventLog({len(self._records)} records)"

    @property
    def times(self) -> np.ndarray:
        """Return the execution times as a float array."""
        return np.fromiter(
            (record.time for record in self._records),
            dtype=np.float64,
            count=len(self._records),
        )

    @property
    def outcomes(self) -> list[str | None]:
        """Return the outcomes in execution order."""
        return [record.outcome for record in self._records]

    def to_dataframe(self) -> pd.DataFrame:
        """Return the log as a DataFrame.

        Returns:
            pd.DataFrame: one row per record with columns time, sequence, outcome and
            one column per context key. Context keys missing from a record are NaN.

        """
        if not self._records:
            return pd.DataFrame(columns=BASE_COLUMNS)

        rows = [
            {
                **record.context,
                "time": record.time,
                "sequence": record.sequence,
                "outcome": record.outcome,
            }
            for record in self._records
        ]
        df = pd.DataFrame(rows)
        context_columns = [column for column in df.columns if column not in BASE_COLUMNS]
        return df[BASE_COLUMNS + context_columns]
