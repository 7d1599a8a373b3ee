import os, sys
import numpy as np
import pytest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from utils.stats import mean, variance, standard_deviation, linear_regression, autocorrelation

def test_mean_and_population_std():
    xs = [2, 4, 4, 4, 5, 5, 7, 9]
    assert mean(xs) == pytest.approx(5.0)
    assert variance(xs) == pytest.approx(4.0)
    assert standard_deviation(xs) == pytest.approx(2.0)

def test_std_single_value_is_zero():
    assert standard_deviation([500]) == 0.0

def test_empty_input_is_rejected():
    with pytest.raises(ValueError):
        mean([])
    with pytest.raises(ValueError):
        standard_deviation([])

def test_linear_regression_exact_line():
    slope, intercept = linear_regression([0, 1, 2, 3], [1, 3, 5, 7])
    assert slope == pytest.approx(2.0)
    assert intercept == pytest.approx(1.0)

def test_linear_regression_single_point_is_flat():
    slope, intercept = linear_regression([5], [3])
    assert slope == 0.0
    assert intercept == 3.0

def test_linear_regression_identical_xs():
    """No spread in xs: slope 0, intercept is the mean of ys."""
    slope, intercept = linear_regression([2, 2, 2], [1, 2, 3])
    assert slope == 0.0
    assert intercept == pytest.approx(2.0)

def test_linear_regression_length_mismatch():
    with pytest.raises(ValueError):
        linear_regression([0, 1, 2], [1, 2])

def test_autocorrelation_known_value():
    assert autocorrelation([1, 2, 3, 4], 1) == pytest.approx(0.25)

def test_autocorrelation_alternating_series():
    assert autocorrelation([1, -1, 1, -1, 1, -1], 1) == pytest.approx(-5 / 6)

def test_autocorrelation_degenerate_cases():
    assert autocorrelation([1, 2, 3], 3) == 0.0
    assert autocorrelation([1, 2, 3], 10) == 0.0
    assert autocorrelation([7, 7, 7, 7], 1) == 0.0
    assert autocorrelation([], 1) == 0.0

def test_autocorrelation_lag_zero():
    assert autocorrelation(np.array([3.0, 1.0, 4.0, 1.0]), 0) == pytest.approx(1.0)
