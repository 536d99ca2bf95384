"""Index generation and the lazy indicator sequence.

Every series in the engine is newest-first: index 0 is the latest bar and
higher indices are older. Windowed indicators have no carry and walk
NEW_TO_OLD. Recurrences must accumulate from the oldest bar toward index 0,
so they walk OLD_TO_NEW; results always come back in ascending index order.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from enum import Enum
from typing import TypeVar, overload

import numpy as np
import numpy.typing as npt

from chartsignal.engine.errors import InsufficientDataError, SeriesLengthMismatchError

S = TypeVar("S")


class Walk(str, Enum):
    """Order in which per-index computations are evaluated."""

    NEW_TO_OLD = "new_to_old"
    OLD_TO_NEW = "old_to_new"


def index_range(
    count: int,
    compute: Callable[[int], float],
    walk: Walk = Walk.NEW_TO_OLD,
) -> npt.NDArray[np.float32]:
    """Evaluate compute(i) for i in [0, count), returned in ascending order.

    With OLD_TO_NEW the indices are visited count-1 first and the results
    are reversed back before returning.
    """
    if walk is Walk.NEW_TO_OLD:
        values = [compute(i) for i in range(count)]
    else:
        values = [compute(i) for i in reversed(range(count))]
        values.reverse()
    return np.array(values, dtype=np.float32)


def fold_old_to_new(count: int, seed: S, step: Callable[[int, S], S]) -> list[S]:
    """Left fold from the oldest index toward index 0.

    Index count-1 holds seed; every newer index i holds
    step(i, state at i + 1). States are returned in ascending index order.
    """
    if count < 1:
        raise ValueError(f"fold needs at least one slot, got {count}")
    state = seed
    states = [state]
    for i in range(count - 2, -1, -1):
        state = step(i, state)
        states.append(state)
    states.reverse()
    return states


class IndicatorSequence(Sequence[float]):
    """Read-only, newest-first indicator output.

    The length is known up front. Values are computed on first access and
    cached, so iterating twice gives the same floats and never recomputes.
    """

    __slots__ = ("_compute", "_length", "_values")

    def __init__(
        self,
        length: int,
        compute: Callable[[], npt.NDArray[np.float32]],
    ) -> None:
        self._length = length
        self._compute = compute
        self._values: npt.NDArray[np.float32] | None = None

    def _materialize(self) -> npt.NDArray[np.float32]:
        if self._values is None:
            # Flat windows and zero denominators propagate as inf/NaN
            with np.errstate(divide="ignore", invalid="ignore", over="ignore"):
                values = np.asarray(self._compute(), dtype=np.float32)
            if values.shape != (self._length,):
                raise RuntimeError(
                    f"indicator produced {values.shape} values, "
                    f"expected {self._length}"
                )
            values.flags.writeable = False
            self._values = values
        return self._values

    def __len__(self) -> int:
        return self._length

    @overload
    def __getitem__(self, index: int) -> float: ...

    @overload
    def __getitem__(self, index: slice) -> list[float]: ...

    def __getitem__(self, index: int | slice) -> float | list[float]:
        values = self._materialize()
        if isinstance(index, slice):
            return [float(v) for v in values[index]]
        return float(values[index])

    def __iter__(self) -> Iterator[float]:
        for value in self._materialize():
            yield float(value)

    def latest(self) -> float:
        """Value at index 0 (the newest bar)."""
        return self[0]

    def to_numpy(self) -> npt.NDArray[np.float32]:
        """Writable float32 copy of the values."""
        return self._materialize().copy()

    def __repr__(self) -> str:
        if self._values is None:
            return f"IndicatorSequence(length={self._length}, pending)"
        return f"IndicatorSequence({self._values.tolist()!r})"


# --- Input validation ---


def as_series(values: npt.ArrayLike) -> npt.NDArray[np.float32]:
    """View input as a 1-D float32 array. Never copies a float32 array."""
    series = np.asarray(values, dtype=np.float32)
    if series.ndim != 1:
        raise ValueError(f"price series must be 1-D, got shape {series.shape}")
    return series


def check_length(length: int) -> None:
    if length < 1:
        raise ValueError(f"length must be >= 1, got {length}")


def require_bars(
    indicator: str, series: npt.NDArray[np.float32], required: int
) -> None:
    """Raise InsufficientDataError if series has fewer than required bars."""
    if len(series) < required:
        raise InsufficientDataError(indicator, required, len(series))


def require_aligned(indicator: str, **series: npt.NDArray[np.float32]) -> None:
    """Raise SeriesLengthMismatchError unless all series share one length."""
    lengths = {name: len(values) for name, values in series.items()}
    if len(set(lengths.values())) > 1:
        raise SeriesLengthMismatchError(indicator, lengths)
