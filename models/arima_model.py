from typing import Optional, Tuple
import logging

import numpy as np
import pandas as pd

from config import ARMA_COEFFICIENT_LIMIT
from models.common import extrapolation_frame, finite, published_value, uncertainty_scale
from utils.stats import autocorrelation

logger = logging.getLogger(__name__)


def difference(values: np.ndarray) -> np.ndarray:
    """First differences: diff[i] = values[i+1] - values[i]."""
    return np.diff(np.asarray(values, dtype=float))


def _clamp(coef: float) -> float:
    return float(np.clip(coef, -ARMA_COEFFICIENT_LIMIT, ARMA_COEFFICIENT_LIMIT))


def fit_arma(diff: np.ndarray) -> Tuple[float, float]:
    """
    Fit ARMA(1,1) coefficients on a differenced series.

    AR is the lag-1 regression of the series on itself through the origin;
    MA is the lag-1 autocorrelation of the AR residuals. Both are clamped to
    [-0.9, 0.9] so the recursion cannot explode.
    """
    d = np.asarray(diff, dtype=float)
    if d.size < 2:
        return 0.0, 0.0

    current, lagged = d[1:], d[:-1]
    denominator = float(np.sum(lagged ** 2))
    ar = float(np.sum(current * lagged)) / denominator if denominator != 0 else 0.0

    residuals = current - ar * lagged
    ma = autocorrelation(residuals, 1) if residuals.size > 1 else 0.0

    return _clamp(ar), _clamp(ma)


def forecast(values: np.ndarray, horizon: int) -> Tuple[pd.DataFrame, Optional[pd.DataFrame]]:
    """
    ARIMA(1,1,1)-style recursive forecast.
    Returns (future_df, None); this strategy has no in-sample backfit.
    """
    y = np.asarray(values, dtype=float)
    diff = difference(y)
    ar, ma = fit_arma(diff)
    last_diff = float(diff[-1]) if diff.size else 0.0

    logger.debug("ARMA fit: ar=%.4f ma=%.4f over %d differences", ar, ma, diff.size)

    current = float(y[-1])
    previous = float(y[-1])
    yhat = np.empty(horizon, dtype=float)
    for i in range(horizon):
        # held at the float ceiling once the recursion outgrows it
        current = float(finite(current + ar * previous + ma * last_diff))
        yhat[i] = current
        previous = float(published_value(current))

    spread = uncertainty_scale(diff, y)
    uncertainty = spread * np.sqrt(np.arange(horizon) + 1.0)
    return extrapolation_frame(yhat, uncertainty), None
