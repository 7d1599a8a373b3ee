import os, sys
import numpy as np
import pytest

sys.path.append(os.path.dirname(os.path.dirname(__file__)))
from decomposition import decompose, trend_window, seasonal_period, centered_moving_average
from trend import fit_trend

def _make_values(n=36, seed=0):
    rng = np.random.default_rng(seed)
    t = np.arange(n)
    return 200 + 1.5 * t + 20 * np.sin(2 * np.pi * t / 12) + rng.normal(0, 3, n)

@pytest.mark.parametrize("n", [1, 2, 3, 5, 11, 12, 13, 24, 37, 60])
def test_components_reconstruct_series(n):
    values = _make_values(n, seed=n)
    parts = decompose(values)
    assert len(parts) == n
    np.testing.assert_allclose(parts.trend + parts.seasonal + parts.residual, values, atol=1e-9)
    np.testing.assert_allclose(parts.reconstruct(), values, atol=1e-9)

def test_window_and_period_caps():
    assert trend_window(1) == 0
    assert trend_window(24) == 8
    assert trend_window(100) == 12
    assert seasonal_period(5) == 5
    assert seasonal_period(24) == 12

def test_moving_average_truncates_at_edges():
    trend = centered_moving_average(np.array([1, 2, 3, 4, 5, 6], dtype=float), window=2)
    np.testing.assert_allclose(trend, [1.5, 2.0, 3.0, 4.0, 5.0, 5.5])

def test_zero_window_keeps_values():
    values = np.array([4.0, 8.0])
    np.testing.assert_allclose(centered_moving_average(values, 0), values)

def test_constant_series_has_no_seasonality():
    parts = decompose([42.0] * 30)
    np.testing.assert_allclose(parts.trend, 42.0)
    np.testing.assert_allclose(parts.seasonal, 0.0)
    np.testing.assert_allclose(parts.residual, 0.0, atol=1e-12)

def test_seasonal_is_phase_aligned():
    parts = decompose(_make_values(48))
    np.testing.assert_allclose(parts.seasonal[:-12], parts.seasonal[12:])

def test_single_point():
    parts = decompose([500.0])
    assert parts.trend.tolist() == [500.0]
    assert parts.seasonal.tolist() == [0.0]
    assert parts.residual.tolist() == [0.0]

def test_zero_trend_points_are_skipped():
    """Points whose trend is exactly zero do not contribute to the seasonal average."""
    parts = decompose([0.0, 0.0, 0.0])
    np.testing.assert_allclose(parts.seasonal, 0.0)

def test_decomposition_is_deterministic():
    values = _make_values(30)
    a = decompose(values)
    b = decompose(values)
    np.testing.assert_array_equal(a.trend, b.trend)
    np.testing.assert_array_equal(a.seasonal, b.seasonal)
    np.testing.assert_array_equal(a.residual, b.residual)

def test_fit_trend_extrapolates_line():
    model = fit_trend([10.0, 12.0, 14.0, 16.0])
    assert model.slope == pytest.approx(2.0)
    np.testing.assert_allclose(model.extrapolate(3), [18.0, 20.0, 22.0])
    np.testing.assert_allclose(model.fitted(), [10.0, 12.0, 14.0, 16.0])

def test_fit_trend_single_point_is_flat():
    model = fit_trend([500.0])
    assert model.slope == 0.0
    np.testing.assert_allclose(model.extrapolate(3), [500.0, 500.0, 500.0])
