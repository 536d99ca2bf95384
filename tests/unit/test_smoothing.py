"""Tests for the seeded EMA/RMA recurrences."""

from __future__ import annotations

import random

import pytest

from chartsignal.engine import InsufficientDataError, ema, rma

# Newest-first: the price rose by 1 every bar
_RISING = [6.0, 5.0, 4.0, 3.0, 2.0, 1.0]


class TestWarmup:
    """EMA/RMA need 3 * length bars."""

    @pytest.mark.parametrize("fn", [ema, rma])
    def test_exactly_three_lengths_succeeds(self, fn) -> None:
        result = fn([1.0] * 15, 5)
        assert len(result) == 11

    @pytest.mark.parametrize("fn", [ema, rma])
    def test_one_short_raises(self, fn) -> None:
        with pytest.raises(InsufficientDataError) as exc_info:
            fn([1.0] * 14, 5)
        assert exc_info.value.required == 15
        assert exc_info.value.actual == 14

    @pytest.mark.parametrize("fn", [ema, rma])
    def test_zero_length_rejected(self, fn) -> None:
        with pytest.raises(ValueError):
            fn([1.0] * 10, 0)


class TestEMA:
    """EMA with mult = 2 / (length + 1)."""

    def test_seed_is_oldest_window_sma(self) -> None:
        result = ema(_RISING, 2)
        # Oldest window [2, 1] -> 1.5 at index len - length
        assert result[-1] == pytest.approx(1.5)

    def test_recurrence_old_to_new(self) -> None:
        # mult 2/3: 2/3*3 + 1/3*1.5 = 2.5, then 3.5, 4.5, 5.5
        assert list(ema(_RISING, 2)) == pytest.approx([5.5, 4.5, 3.5, 2.5, 1.5])

    def test_constant_series(self) -> None:
        assert list(ema([3.0] * 30, 10)) == pytest.approx([3.0] * 21)

    def test_output_length(self) -> None:
        assert len(ema([1.0] * 40, 10)) == 31


class TestRMA:
    """RMA with mult = 1 / length."""

    def test_recurrence_old_to_new(self) -> None:
        # mult 1/2: 0.5*3 + 0.5*1.5 = 2.25, then 3.125, 4.0625, 5.03125
        assert list(rma(_RISING, 2)) == pytest.approx(
            [5.03125, 4.0625, 3.125, 2.25, 1.5]
        )

    def test_length_one_tracks_input(self) -> None:
        assert list(rma([4.0, 2.0, 9.0], 1)) == pytest.approx([4.0, 2.0, 9.0])

    def test_rma_lags_ema(self) -> None:
        """RMA's smaller multiplier reacts more slowly to the rise."""
        assert rma(_RISING, 2).latest() < ema(_RISING, 2).latest()


class TestDeterminism:
    """No carry leaks between calls."""

    def test_repeated_calls_identical(self) -> None:
        rng = random.Random(3)
        close = [rng.uniform(10, 20) for _ in range(60)]
        for fn in (ema, rma):
            assert fn(close, 14).to_numpy().tobytes() == (
                fn(close, 14).to_numpy().tobytes()
            )

    def test_reiteration_does_not_restart_carry(self) -> None:
        result = ema(_RISING, 2)
        assert list(result) == list(result)
