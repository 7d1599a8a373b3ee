from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional
import logging

import numpy as np
import pandas as pd

from config import (
    CONFIDENCE_Z,
    DEFAULT_FREQUENCY,
    DEFAULT_STRATEGY,
    MAX_HORIZON,
    MIN_HALF_WIDTH,
    METRICS_METHOD,
)
from data_utils import format_dates, future_dates, series_frame
from metrics import ForecastMetrics, calculate_metrics
from models import arima_model, holtwinters_model, prophet_model
from models.common import finite, published_value, round_half_up

logger = logging.getLogger(__name__)


class DataError(ValueError):
    """Raised for user-facing, recoverable data errors."""


class InvalidInputError(DataError):
    """The request cannot be served as given (bad container, frequency or option)."""


class EmptyInputError(InvalidInputError):
    """The series holds no usable observation."""


class InvalidHorizonError(InvalidInputError):
    """The horizon is not an integer between 1 and MAX_HORIZON."""


class Strategy(str, Enum):
    PROPHET = "prophet"  # trend/seasonal decomposition
    ARIMA = "arima"      # ARIMA(1,1,1)-style autoregression
    LSTM = "lstm"        # Holt-Winters triple exponential smoothing

    @classmethod
    def parse(cls, name) -> "Strategy":
        """Resolve a strategy name; unknown or missing names fall back to the default."""
        if isinstance(name, cls):
            return name
        if name is None:
            return cls(DEFAULT_STRATEGY)
        try:
            return cls(str(name).strip().lower())
        except ValueError:
            logger.warning("Unknown forecasting strategy %r, using '%s'", name, DEFAULT_STRATEGY)
            return cls(DEFAULT_STRATEGY)


class Frequency(str, Enum):
    MONTHLY = "M"
    WEEKLY_MONDAY = "W-MON"

    @classmethod
    def parse(cls, name) -> "Frequency":
        if isinstance(name, cls):
            return name
        if name is None:
            return cls(DEFAULT_FREQUENCY)
        try:
            return cls(str(name).strip().upper())
        except ValueError:
            raise InvalidInputError(
                f"Unsupported frequency {name!r}. Use 'M' (monthly) or 'W-MON' (weekly, Mondays)."
            ) from None


@dataclass(frozen=True)
class ForecastPoint:
    date: pd.Timestamp
    value: int
    upper_bound: int
    lower_bound: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "date": self.date.strftime("%Y-%m-%d"),
            "value": self.value,
            "upperBound": self.upper_bound,
            "lowerBound": self.lower_bound,
        }


def _series_dict(points: List[ForecastPoint]) -> Dict[str, list]:
    return {
        "dates": format_dates(p.date for p in points),
        "values": [p.value for p in points],
        "confidenceUpper": [p.upper_bound for p in points],
        "confidenceLower": [p.lower_bound for p in points],
    }


@dataclass
class ForecastResult:
    """Everything one forecast call produces. Owned by the caller; the engine keeps no reference."""

    future_points: List[ForecastPoint]
    metrics: ForecastMetrics
    strategy: Strategy
    frequency: Frequency
    historical_dates: List[pd.Timestamp]
    historical_values: List[float]
    past_fitted_points: Optional[List[ForecastPoint]] = None
    category: Optional[str] = None

    @property
    def horizon(self) -> int:
        return len(self.future_points)

    @property
    def dates(self) -> List[str]:
        return format_dates(p.date for p in self.future_points)

    @property
    def values(self) -> List[int]:
        return [p.value for p in self.future_points]

    def to_dict(self) -> Dict[str, Any]:
        """JSON-ready payload: historical, optional past forecast, forecast and metrics."""
        historical_dates = format_dates(self.historical_dates)
        out: Dict[str, Any] = {}
        if self.category is not None:
            out["category"] = self.category
        out.update({
            "model": self.strategy.value,
            "forecastPeriod": self.horizon,
            "frequency": self.frequency.value,
            "dates": historical_dates + self.dates,
            "historical": {"dates": historical_dates, "values": list(self.historical_values)},
        })
        if self.past_fitted_points is not None:
            out["pastForecast"] = _series_dict(self.past_fitted_points)
        out["forecast"] = _series_dict(self.future_points)
        out["metrics"] = self.metrics.to_dict()
        return out

    def to_frame(self) -> pd.DataFrame:
        """Long table with one row per historical and forecast date."""
        n_hist = len(self.historical_dates)
        past = self.past_fitted_points or []
        hist_yhat = [p.value for p in past] if past else [np.nan] * n_hist
        hist_lower = [p.lower_bound for p in past] if past else [np.nan] * n_hist
        hist_upper = [p.upper_bound for p in past] if past else [np.nan] * n_hist

        return pd.DataFrame({
            "date": list(self.historical_dates) + [p.date for p in self.future_points],
            "y": list(self.historical_values) + [np.nan] * self.horizon,
            "yhat": hist_yhat + [p.value for p in self.future_points],
            "yhat_lower": hist_lower + [p.lower_bound for p in self.future_points],
            "yhat_upper": hist_upper + [p.upper_bound for p in self.future_points],
            "kind": ["historical"] * n_hist + ["forecast"] * self.horizon,
        })


def _validate_horizon(horizon) -> int:
    if isinstance(horizon, bool) or not isinstance(horizon, (int, np.integer)):
        raise InvalidHorizonError(f"horizon must be an integer number of periods (got {horizon!r})")
    if horizon < 1 or horizon > MAX_HORIZON:
        raise InvalidHorizonError(f"Invalid horizon {horizon}. Must be between 1 and {MAX_HORIZON}.")
    return int(horizon)


def _prepare_data(series) -> pd.DataFrame:
    """Private, sorted, de-duplicated copy of the caller's series."""
    try:
        df = series_frame(series)
    except ValueError as e:
        raise InvalidInputError(str(e)) from e

    if df.empty:
        raise EmptyInputError("series must contain at least one observation")

    df = df.dropna(subset=["ds", "y"])
    if df.empty:
        raise EmptyInputError("series must contain at least one observation with a valid date and numeric value")

    df = df.sort_values("ds", kind="mergesort")
    duplicated = df["ds"].duplicated(keep="last")
    if duplicated.any():
        logger.warning("Dropping %d observation(s) with duplicate dates (keeping the last)", int(duplicated.sum()))
        df = df[~duplicated]
    return df.reset_index(drop=True)


def _strategy_forecast(strategy: Strategy) -> Callable:
    if strategy is Strategy.ARIMA:
        return arima_model.forecast
    if strategy is Strategy.LSTM:
        return holtwinters_model.forecast
    return prophet_model.forecast


def confidence_bounds(values: np.ndarray, uncertainty: np.ndarray, monotonic: bool = True):
    """
    95% band around published (whole-count) values, in whole counts.

    The half-width is rounded half-up and never below MIN_HALF_WIDTH; the lower
    bound is clamped at zero. With `monotonic`, band width never shrinks from
    one step to the next: width lost to clamping the lower bound is added to
    the upper bound.
    """
    values = finite(values)
    with np.errstate(over="ignore"):
        half = np.maximum(MIN_HALF_WIDTH, round_half_up(finite(CONFIDENCE_Z * np.asarray(uncertainty, dtype=float))))
        lower = np.maximum(0.0, values - half)
        upper = finite(values + half)
        if monotonic and upper.size:
            width = np.maximum.accumulate(upper - lower)
            upper = finite(np.maximum(upper, lower + width))
    return lower, upper


def _to_points(dates, frame: pd.DataFrame, monotonic: bool) -> List[ForecastPoint]:
    values = published_value(frame["yhat"].to_numpy(dtype=float))
    lower, upper = confidence_bounds(values, frame["uncertainty"].to_numpy(dtype=float), monotonic=monotonic)
    return [
        ForecastPoint(date=pd.Timestamp(d), value=int(v), upper_bound=int(u), lower_bound=int(lo))
        for d, v, u, lo in zip(dates, values, upper, lower)
    ]


def generate_forecast(series, horizon: int, strategy=DEFAULT_STRATEGY, frequency=DEFAULT_FREQUENCY, *,
                      category: Optional[str] = None, metrics_method: str = METRICS_METHOD,
                      seed: Optional[int] = None) -> ForecastResult:
    """
    Forecast one series `horizon` periods ahead.

    Args:
        series: observations as a DataFrame ('ds'/'y' or 'date'/'value'), a
            sequence of {'date', 'value'} mappings, or (date, value) pairs.
        horizon: number of future periods, 1..MAX_HORIZON.
        strategy: 'prophet', 'arima' or 'lstm'; anything else falls back to 'prophet'.
        frequency: 'M' (monthly) or 'W-MON' (weekly on Mondays).
        category: optional label carried through to the result.
        metrics_method: 'backtest' (rolling-origin validation) or 'estimate'.
        seed: seed for the estimated metrics.

    Raises:
        EmptyInputError: no usable observation.
        InvalidHorizonError: horizon out of range.
        InvalidInputError: unsupported frequency, metrics method or container.
    """
    n_steps = _validate_horizon(horizon)
    freq = Frequency.parse(frequency)
    if metrics_method not in ("backtest", "estimate"):
        raise InvalidInputError(f"Unknown metrics method {metrics_method!r}. Use 'backtest' or 'estimate'.")
    model = Strategy.parse(strategy)

    df = _prepare_data(series)
    values = df["y"].to_numpy(dtype=float)
    run = _strategy_forecast(model)

    future_df, past_df = run(values, n_steps)
    dates = future_dates(df["ds"].iloc[-1], n_steps, freq.value)
    future_points = _to_points(dates, future_df, monotonic=True)
    past_points = _to_points(df["ds"], past_df, monotonic=False) if past_df is not None else None

    metrics = calculate_metrics(values, model.value, run, method=metrics_method, seed=seed)

    logger.info(
        "Forecast %s: strategy=%s frequency=%s history=%d horizon=%d mape=%.2f",
        category or "series", model.value, freq.value, len(values), n_steps, metrics.mape,
    )

    return ForecastResult(
        future_points=future_points,
        metrics=metrics,
        strategy=model,
        frequency=freq,
        historical_dates=list(df["ds"]),
        historical_values=[float(v) for v in values],
        past_fitted_points=past_points,
        category=category,
    )


def forecast_categories(data_by_category: Mapping[str, Any], horizon: int, strategy=DEFAULT_STRATEGY,
                        frequency=DEFAULT_FREQUENCY, **kwargs) -> Dict[str, ForecastResult]:
    """Forecast every category independently. Errors for any category propagate."""
    return {
        category: generate_forecast(series, horizon, strategy, frequency, category=category, **kwargs)
        for category, series in data_by_category.items()
    }
