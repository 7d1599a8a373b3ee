from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from config import MAX_SEASONAL_PERIOD, MAX_TREND_WINDOW, TREND_WINDOW_DIVISOR


@dataclass
class DecomposedSeries:
    """Additive split of a series into trend, seasonal and residual parts.

    All three arrays have the length of the input series and satisfy
    value[i] == trend[i] + seasonal[i] + residual[i].
    """

    trend: np.ndarray
    seasonal: np.ndarray
    residual: np.ndarray
    period: int
    window: int

    def __len__(self) -> int:
        return int(self.trend.size)

    def reconstruct(self) -> np.ndarray:
        return self.trend + self.seasonal + self.residual


def trend_window(n: int) -> int:
    return min(MAX_TREND_WINDOW, n // TREND_WINDOW_DIVISOR)


def seasonal_period(n: int) -> int:
    return min(MAX_SEASONAL_PERIOD, n)


def centered_moving_average(values: np.ndarray, window: int) -> np.ndarray:
    """Centered moving average, truncated at both ends of the series.

    Edge points average over fewer neighbours, so the trend is biased near
    the boundaries.
    """
    n = values.size
    half = window // 2
    trend = np.empty(n, dtype=float)
    for i in range(n):
        start = max(0, i - half)
        end = min(n, i + half + 1)
        trend[i] = values[start:end].mean()
    return trend


def phase_averages(deviations: np.ndarray, trend: np.ndarray, period: int) -> np.ndarray:
    """Mean deviation per phase, skipping points where the trend is zero."""
    n = deviations.size
    seasonal = np.zeros(n, dtype=float)
    for phase in range(min(period, n)):
        idx = np.arange(phase, n, period)
        idx = idx[trend[idx] != 0]
        if idx.size:
            seasonal[phase::period] = deviations[idx].mean()
    return seasonal


def decompose(values: Sequence[float]) -> DecomposedSeries:
    y = np.asarray(values, dtype=float).ravel()
    n = y.size
    if n == 0:
        raise ValueError("Cannot decompose an empty series")

    window = trend_window(n)
    period = seasonal_period(n)

    trend = centered_moving_average(y, window)
    seasonal = phase_averages(y - trend, trend, period)
    residual = y - trend - seasonal

    return DecomposedSeries(trend=trend, seasonal=seasonal, residual=residual, period=period, window=window)
