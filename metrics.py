"""
Forecast accuracy metrics.

Two ways to fill the {mape, rmse, mae} contract:
- backtest: rolling-origin one-step-ahead validation of the chosen strategy
  against the history (default).
- estimate: synthetic numbers scaled from the mean level and a per-strategy
  accuracy multiplier. Randomness comes from a seedable numpy Generator.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Callable, Dict, Optional, Tuple
import logging

import numpy as np
import pandas as pd
from sklearn.metrics import mean_absolute_error, mean_squared_error

from config import (
    BACKTEST_FOLDS,
    ESTIMATE_MAE_FRACTION,
    ESTIMATE_RMSE_RATIO,
    METRICS_METHOD,
    MIN_BACKTEST_TRAIN,
    STRATEGY_ACCURACY_MULTIPLIERS,
)

logger = logging.getLogger(__name__)

StrategyForecast = Callable[[np.ndarray, int], Tuple[pd.DataFrame, Optional[pd.DataFrame]]]


@dataclass(frozen=True)
class ForecastMetrics:
    mape: float
    rmse: float
    mae: float
    method: str = METRICS_METHOD

    def to_dict(self) -> Dict[str, float]:
        out = asdict(self)
        out.pop("method")
        return out


def _rounded(mape: float, rmse: float, mae: float, method: str) -> ForecastMetrics:
    return ForecastMetrics(
        mape=round(float(mape), 2),
        rmse=round(float(rmse), 1),
        mae=round(float(mae), 1),
        method=method,
    )


def masked_mape(y_true: np.ndarray, y_pred: np.ndarray) -> float:
    """MAPE in percent over non-zero actuals; 0.0 when every actual is zero."""
    y_true = np.asarray(y_true, dtype=float)
    y_pred = np.asarray(y_pred, dtype=float)
    mask = np.abs(y_true) > 1e-12
    if not np.any(mask):
        return 0.0
    return float(np.mean(np.abs(y_true[mask] - y_pred[mask]) / np.abs(y_true[mask])) * 100.0)


def backtest_folds(n: int, folds: int = BACKTEST_FOLDS, min_train: int = MIN_BACKTEST_TRAIN) -> int:
    return max(0, min(folds, n - min_train))


def backtest_metrics(values: np.ndarray, strategy_forecast: StrategyForecast,
                     folds: int = BACKTEST_FOLDS, min_train: int = MIN_BACKTEST_TRAIN) -> ForecastMetrics:
    """
    Rolling-origin validation: for each of the last `folds` observations, fit on
    everything before it and forecast one step ahead.
    """
    y = np.asarray(values, dtype=float)
    n = y.size
    k = backtest_folds(n, folds, min_train)
    if k < 1:
        raise ValueError(f"Backtest needs more than {min_train} observations (got {n})")

    actual = []
    predicted = []
    for origin in range(n - k, n):
        future_df, _ = strategy_forecast(y[:origin], 1)
        predicted.append(max(0.0, float(future_df["yhat"].iloc[0])))
        actual.append(float(y[origin]))

    y_true = np.array(actual)
    y_pred = np.array(predicted)
    mae = mean_absolute_error(y_true, y_pred)
    rmse = np.sqrt(mean_squared_error(y_true, y_pred))
    mape = masked_mape(y_true, y_pred)
    return _rounded(mape, rmse, mae, "backtest")


def estimate_metrics(values: np.ndarray, strategy: str, rng: Optional[np.random.Generator] = None) -> ForecastMetrics:
    """
    Synthetic accuracy estimate. Not a real evaluation: the base error is a
    random fraction of the mean level, scaled by a fixed per-strategy
    multiplier (smoothing best, decomposition second, autoregression baseline).
    """
    rng = rng if rng is not None else np.random.default_rng()
    level = abs(float(np.mean(np.asarray(values, dtype=float))))
    mult = STRATEGY_ACCURACY_MULTIPLIERS.get(strategy, STRATEGY_ACCURACY_MULTIPLIERS["arima"])

    base_mae = level * rng.uniform(*ESTIMATE_MAE_FRACTION)
    base_rmse = base_mae * rng.uniform(*ESTIMATE_RMSE_RATIO)
    base_mape = base_mae / level * 100.0 if level > 0 else 0.0

    return _rounded(base_mape * mult["mape"], base_rmse * mult["rmse"], base_mae * mult["mae"], "estimate")


def calculate_metrics(values: np.ndarray, strategy: str, strategy_forecast: StrategyForecast,
                      method: str = METRICS_METHOD, seed: Optional[int] = None) -> ForecastMetrics:
    """Compute accuracy metrics with the requested method, falling back to estimation for short series."""
    if method not in ("backtest", "estimate"):
        raise ValueError(f"Unknown metrics method '{method}' (expected 'backtest' or 'estimate')")

    y = np.asarray(values, dtype=float)
    if method == "backtest":
        if backtest_folds(y.size) >= 1:
            return backtest_metrics(y, strategy_forecast)
        logger.warning(
            "Series of %d observations is too short to backtest; estimating %s metrics instead",
            y.size, strategy,
        )
    return estimate_metrics(y, strategy, np.random.default_rng(seed))
