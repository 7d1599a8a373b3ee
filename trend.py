from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from utils.stats import linear_regression


@dataclass
class TrendModel:
    """Straight-line trend over the integer time index.

    Index 0 is the first historical observation; index n is the first
    future step.
    """

    slope: float
    intercept: float
    n_obs: int

    def at(self, index: np.ndarray) -> np.ndarray:
        return self.slope * np.asarray(index, dtype=float) + self.intercept

    def fitted(self) -> np.ndarray:
        return self.at(np.arange(self.n_obs))

    def extrapolate(self, horizon: int) -> np.ndarray:
        return self.at(np.arange(self.n_obs, self.n_obs + horizon))


def fit_trend(trend_values: Sequence[float]) -> TrendModel:
    """Fit a line through (index, trend value) pairs by least squares.

    A single point gives a flat line through that point.
    """
    y = np.asarray(trend_values, dtype=float).ravel()
    slope, intercept = linear_regression(np.arange(y.size), y)
    return TrendModel(slope=slope, intercept=intercept, n_obs=int(y.size))
