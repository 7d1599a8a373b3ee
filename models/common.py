from typing import Sequence

import numpy as np
import pandas as pd

from config import DEGENERATE_SPREAD_FRACTION, MIN_SPREAD
from utils.stats import standard_deviation

MAX_MAGNITUDE = float(np.finfo(float).max)


def uncertainty_scale(spread_source: Sequence[float], level_values: Sequence[float]) -> float:
    """
    One-sigma spread used to size confidence bands.

    Falls back to a fraction of the mean level when `spread_source` is empty or
    shows no variation, and never goes below MIN_SPREAD, so a band never
    collapses to zero width.
    """
    src = np.asarray(spread_source, dtype=float).ravel()
    spread = standard_deviation(src) if src.size > 0 else 0.0
    if not np.isfinite(spread) or spread <= 0.0:
        level = np.asarray(level_values, dtype=float).ravel()
        spread = DEGENERATE_SPREAD_FRACTION * abs(float(level.mean())) if level.size else 0.0
    return max(float(spread), MIN_SPREAD)


def extrapolation_frame(yhat: np.ndarray, uncertainty: np.ndarray) -> pd.DataFrame:
    """Frame with one row per step: raw point forecast and its one-sigma spread."""
    yhat = np.asarray(yhat, dtype=float)
    uncertainty = np.asarray(uncertainty, dtype=float)
    return pd.DataFrame({
        "step": np.arange(yhat.size),
        "yhat": yhat,
        "uncertainty": uncertainty,
    })


def finite(x):
    """Replace NaN with 0 and infinities with the largest representable float."""
    return np.nan_to_num(np.asarray(x, dtype=float), nan=0.0, posinf=MAX_MAGNITUDE, neginf=-MAX_MAGNITUDE)


def round_half_up(x):
    """Round to the nearest integer with halves rounded up (2.5 -> 3)."""
    return np.floor(np.asarray(x, dtype=float) + 0.5)


def published_value(x):
    """Forecast magnitude as reported: whole counts, never negative, always finite."""
    return np.maximum(0.0, round_half_up(finite(x)))
