"""Tests for true range and ATR."""

from __future__ import annotations

import pytest

from chartsignal.engine import (
    InsufficientDataError,
    SeriesLengthMismatchError,
    atr,
    true_range,
)


class TestTrueRange:
    """Per-bar range against the older close."""

    def test_two_bars(self) -> None:
        result = true_range(close=[10, 9], high=[11, 10], low=[9, 8])
        assert list(result) == [2.0]

    def test_gap_up_uses_previous_close(self) -> None:
        # high - low = 1, |12 - 5| = 7, |11 - 5| = 6
        result = true_range(close=[10, 5], high=[12, 6], low=[11, 4])
        assert list(result) == [7.0]

    def test_gap_down_uses_previous_close(self) -> None:
        # high - low = 2, |6 - 30| = 24, |4 - 30| = 26
        result = true_range(close=[5, 30], high=[6, 31], low=[4, 29])
        assert list(result) == [26.0]

    def test_output_length(self) -> None:
        assert len(true_range([1.0] * 9, [2.0] * 9, [0.5] * 9)) == 8

    def test_single_bar_raises(self) -> None:
        with pytest.raises(InsufficientDataError) as exc_info:
            true_range([1.0], [2.0], [0.5])
        assert exc_info.value.required == 2

    def test_mismatched_lengths(self) -> None:
        with pytest.raises(SeriesLengthMismatchError):
            true_range([1.0, 2.0], [2.0, 3.0], [0.5])


class TestATR:
    """RMA of true range."""

    def test_constant_range(self) -> None:
        result = atr([10.0] * 7, [11.0] * 7, [9.0] * 7, 2)
        assert list(result) == pytest.approx([2.0] * 5)

    def test_output_length(self) -> None:
        assert len(atr([10.0] * 40, [11.0] * 40, [9.0] * 40, 10)) == 30

    def test_length_one_is_true_range(self) -> None:
        close = [5.0, 30.0, 10.0, 10.0]
        high = [6.0, 31.0, 10.5, 10.5]
        low = [4.0, 29.0, 9.5, 9.5]
        assert list(atr(close, high, low, 1)) == list(true_range(close, high, low))

    def test_warmup(self) -> None:
        atr([10.0] * 7, [11.0] * 7, [9.0] * 7, 2)
        with pytest.raises(InsufficientDataError) as exc_info:
            atr([10.0] * 6, [11.0] * 6, [9.0] * 6, 2)
        assert exc_info.value.required == 7
