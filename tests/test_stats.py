"""Tests for the scalar statistics primitives in indicators.stats."""

from __future__ import annotations

import math

import numpy as np
import pytest

from indicators.errors import LengthMismatchError
from indicators.stats import cor, cov, mad, mae, mean, sd, variance


class TestMoments:
    def test_mean(self) -> None:
        assert mean([1.0, 2.0, 3.0, 4.0]) == pytest.approx(2.5)

    def test_mean_empty_is_nan(self) -> None:
        assert math.isnan(mean([]))

    def test_variance_is_population(self) -> None:
        """Population variance of 1..4 is 1.25 (sample variance would be 5/3)."""
        assert variance([1.0, 2.0, 3.0, 4.0]) == pytest.approx(1.25)

    def test_sd(self) -> None:
        assert sd([1.0, 2.0, 3.0, 4.0]) == pytest.approx(math.sqrt(1.25))

    def test_sd_constant_is_zero(self) -> None:
        assert sd(np.full(5, 7.0)) == pytest.approx(0.0)

    def test_returns_python_float(self) -> None:
        assert type(mean(np.array([1.0, 2.0]))) is float


class TestCovariance:
    def test_cov_scaled_copy(self) -> None:
        """cov(f, 2f) is twice the population variance of f."""
        assert cov([1.0, 2.0, 3.0], [2.0, 4.0, 6.0]) == pytest.approx(4.0 / 3.0)

    def test_cor_perfect_positive(self) -> None:
        assert cor([1.0, 2.0, 3.0], [2.0, 4.0, 6.0]) == pytest.approx(1.0)

    def test_cor_perfect_negative(self) -> None:
        assert cor([1.0, 2.0, 3.0], [3.0, 2.0, 1.0]) == pytest.approx(-1.0)

    def test_cor_constant_input_is_nan(self) -> None:
        """A zero-variance input gives 0/0, which is propagated, not raised."""
        assert math.isnan(cor([1.0, 1.0, 1.0], [1.0, 2.0, 3.0]))

    def test_length_mismatch_raises(self) -> None:
        with pytest.raises(LengthMismatchError):
            cov([1.0, 2.0], [1.0, 2.0, 3.0])


class TestAbsoluteDeviation:
    def test_mae(self) -> None:
        assert mae([1.0, 2.0, 3.0], [2.0, 2.0, 2.0]) == pytest.approx(2.0 / 3.0)

    def test_mae_identical_is_zero(self) -> None:
        assert mae([4.0, 5.0], [4.0, 5.0]) == 0.0

    def test_mae_length_mismatch_raises(self) -> None:
        with pytest.raises(LengthMismatchError):
            mae([1.0], [1.0, 2.0])

    def test_mad(self) -> None:
        """MAD of [1, 2, 3] around the mean 2 is (1 + 0 + 1) / 3."""
        assert mad([1.0, 2.0, 3.0]) == pytest.approx(2.0 / 3.0)

    def test_mad_single_value_is_zero(self) -> None:
        assert mad([42.0]) == 0.0
