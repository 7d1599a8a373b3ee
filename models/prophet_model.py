from typing import Optional, Tuple
import logging

import numpy as np
import pandas as pd

from config import PROPHET_UNCERTAINTY_GROWTH
from decomposition import DecomposedSeries, decompose
from models.common import extrapolation_frame, uncertainty_scale
from trend import fit_trend

logger = logging.getLogger(__name__)


def project_seasonality(seasonal: np.ndarray, horizon: int) -> np.ndarray:
	"""Repeat the fitted seasonal pattern cyclically past the end of the history."""
	n = seasonal.size
	if n == 0:
		return np.zeros(horizon)
	return np.array([seasonal[(n + i) % n] for i in range(horizon)], dtype=float)


def backfit(parts: DecomposedSeries, spread: float) -> pd.DataFrame:
	"""
	In-sample fit over the historical range: trend plus seasonal at each index,
	with the first-step band width. Used to compare the fit against the data.
	"""
	yhat = parts.trend + parts.seasonal
	return extrapolation_frame(yhat, np.full(yhat.size, spread))


def forecast(values: np.ndarray, horizon: int) -> Tuple[pd.DataFrame, Optional[pd.DataFrame]]:
	"""
	Decomposition forecast: linear trend on the moving-average trend plus the
	repeated seasonal pattern.

	Returns (future_df, past_df) with columns ['step', 'yhat', 'uncertainty'].
	"""
	y = np.asarray(values, dtype=float)
	parts = decompose(y)

	trend_model = fit_trend(parts.trend)
	trend_future = trend_model.extrapolate(horizon)
	seasonal_future = project_seasonality(parts.seasonal, horizon)

	spread = uncertainty_scale(parts.residual, y)
	steps = np.arange(horizon)
	uncertainty = spread * (1.0 + steps * PROPHET_UNCERTAINTY_GROWTH)

	logger.debug(
		"Decomposition fit: window=%d period=%d slope=%.4f intercept=%.4f spread=%.4f",
		parts.window, parts.period, trend_model.slope, trend_model.intercept, spread,
	)

	future_df = extrapolation_frame(trend_future + seasonal_future, uncertainty)
	past_df = backfit(parts, spread)
	return future_df, past_df
