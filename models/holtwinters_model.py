from dataclasses import dataclass
from typing import Optional, Tuple
import logging

import numpy as np
import pandas as pd

from config import (
    HOLT_WINTERS_ALPHA,
    HOLT_WINTERS_BETA,
    HOLT_WINTERS_GAMMA,
    HOLT_WINTERS_UNCERTAINTY_SCALE,
)
from decomposition import seasonal_period
from models.common import extrapolation_frame, uncertainty_scale

logger = logging.getLogger(__name__)


def _nonzero(x: float) -> float:
    return x if x != 0 else 1.0


@dataclass
class HoltWintersState:
    level: np.ndarray
    trend: np.ndarray
    factors: np.ndarray  # final multiplicative factor per phase
    period: int


def initial_factors(values: np.ndarray, period: int, level0: float) -> np.ndarray:
    """Per-phase mean divided by the initial level; 1.0 where a phase has no data."""
    factors = np.ones(period, dtype=float)
    if values.size < period:
        return factors
    base = _nonzero(level0)
    for phase in range(period):
        members = values[phase::period]
        if members.size:
            factors[phase] = members.mean() / base
    return factors


def holt_winters(values: np.ndarray, alpha: float = HOLT_WINTERS_ALPHA, beta: float = HOLT_WINTERS_BETA,
                 gamma: float = HOLT_WINTERS_GAMMA, period: Optional[int] = None) -> HoltWintersState:
    """
    Triple exponential smoothing with additive trend and multiplicative seasonality.

    Seasonal factors are only updated once a full period has been observed.
    Zero divisors (level or factor) are treated as 1.
    """
    y = np.asarray(values, dtype=float)
    n = y.size
    m = period if period is not None else seasonal_period(n)

    level = np.empty(n, dtype=float)
    trend = np.empty(n, dtype=float)
    level[0] = y[0]
    trend[0] = y[1] - y[0] if n > 1 else 0.0
    factors = initial_factors(y, m, level[0])

    for t in range(1, n):
        phase = t % m
        prev_factor = _nonzero(factors[phase])
        level[t] = alpha * (y[t] / prev_factor) + (1 - alpha) * (level[t - 1] + trend[t - 1])
        trend[t] = beta * (level[t] - level[t - 1]) + (1 - beta) * trend[t - 1]
        if t >= m:
            factors[phase] = gamma * (y[t] / _nonzero(level[t])) + (1 - gamma) * prev_factor

    return HoltWintersState(level=level, trend=trend, factors=factors, period=m)


def forecast(values: np.ndarray, horizon: int) -> Tuple[pd.DataFrame, Optional[pd.DataFrame]]:
    """Holt-Winters forecast. Returns (future_df, None)."""
    y = np.asarray(values, dtype=float)
    n = y.size
    state = holt_winters(y)
    last_level = float(state.level[-1])
    last_trend = float(state.trend[-1])

    logger.debug("Holt-Winters fit: level=%.4f trend=%.4f period=%d", last_level, last_trend, state.period)

    steps = np.arange(horizon)
    factors = state.factors[(n + steps) % state.period]
    yhat = (last_level + (steps + 1) * last_trend) * factors

    spread = uncertainty_scale(y, y)
    uncertainty = spread * np.sqrt(steps + 1.0) * HOLT_WINTERS_UNCERTAINTY_SCALE
    return extrapolation_frame(yhat, uncertainty), None
