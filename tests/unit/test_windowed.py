"""Tests for Higher, Lower, SMA and WMA."""

from __future__ import annotations

import random

import numpy as np
import pytest

from chartsignal.engine import InsufficientDataError, higher, lower, sma, wma


class TestSMA:
    """Rolling mean over newest-first windows."""

    def test_known_series(self) -> None:
        """close=[5,4,3,2,1]: windows [5,4,3], [4,3,2], [3,2,1]."""
        assert list(sma([5, 4, 3, 2, 1], 3)) == pytest.approx([4.0, 3.0, 2.0])

    def test_output_length(self) -> None:
        series = [float(i) for i in range(20)]
        for n in range(1, 21):
            assert len(sma(series, n)) == len(series) - n + 1

    def test_constant_series(self) -> None:
        assert list(sma([42.5] * 15, 10)) == pytest.approx([42.5] * 6)

    def test_length_equal_to_input(self) -> None:
        assert list(sma([1, 2, 3, 4], 4)) == pytest.approx([2.5])

    def test_insufficient_data_raises_on_call(self) -> None:
        with pytest.raises(InsufficientDataError) as exc_info:
            sma([1.0, 2.0], 3)
        assert exc_info.value.required == 3
        assert exc_info.value.actual == 2
        assert exc_info.value.indicator == "SMA"

    def test_zero_length_rejected(self) -> None:
        with pytest.raises(ValueError, match="length must be >= 1"):
            sma([1.0, 2.0], 0)

    def test_input_not_mutated(self) -> None:
        close = np.array([5, 4, 3, 2, 1], dtype=np.float32)
        before = close.copy()
        list(sma(close, 2))
        np.testing.assert_array_equal(close, before)


class TestHigherLower:
    """Rolling max and min."""

    def test_higher_pairs(self) -> None:
        assert list(higher([1, 5, 3, 9, 2], 2)) == [5.0, 5.0, 9.0, 9.0]

    def test_lower_pairs(self) -> None:
        assert list(lower([1, 5, 3, 9, 2], 2)) == [1.0, 3.0, 3.0, 2.0]

    def test_window_of_one_is_identity(self) -> None:
        assert list(higher([3, 1, 2], 1)) == [3.0, 1.0, 2.0]

    def test_higher_not_below_lower(self) -> None:
        rng = random.Random(7)
        lows = [rng.uniform(50, 150) for _ in range(60)]
        highs = [lo + rng.uniform(0, 5) for lo in lows]
        for n in (1, 5, 14, 60):
            hi_seq = list(higher(highs, n))
            lo_seq = list(lower(lows, n))
            assert all(h >= lo for h, lo in zip(hi_seq, lo_seq, strict=True))

    def test_insufficient_data(self) -> None:
        with pytest.raises(InsufficientDataError):
            higher([1.0], 2)
        with pytest.raises(InsufficientDataError):
            lower([1.0], 2)


class TestWMA:
    """Weighted mean, newest bar weighs most."""

    def test_known_window(self) -> None:
        # weights 9, 6, 3 -> (3*9 + 2*6 + 1*3) / 18
        assert list(wma([3, 2, 1], 3)) == pytest.approx([42.0 / 18.0])

    def test_constant_series(self) -> None:
        assert list(wma([7.25] * 12, 5)) == pytest.approx([7.25] * 8)

    def test_newest_bar_dominates(self) -> None:
        close = [10.0, 0.0, 0.0, 0.0]
        assert wma(close, 4).latest() > sma(close, 4).latest()

    def test_output_length(self) -> None:
        assert len(wma([1.0] * 10, 4)) == 7

    def test_insufficient_data(self) -> None:
        with pytest.raises(InsufficientDataError):
            wma([1.0, 2.0], 3)


class TestDeterminism:
    """Repeated calls give bit-identical output."""

    def test_repeated_calls_identical(self) -> None:
        rng = random.Random(11)
        close = [rng.uniform(1, 100) for _ in range(40)]
        for fn in (higher, lower, sma, wma):
            a = fn(close, 9).to_numpy()
            b = fn(close, 9).to_numpy()
            assert a.tobytes() == b.tobytes()
