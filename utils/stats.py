from typing import Sequence, Tuple

import numpy as np
from sklearn.linear_model import LinearRegression
from statsmodels.tsa.stattools import acf


def _as_array(xs: Sequence[float]) -> np.ndarray:
    arr = np.asarray(xs, dtype=float).ravel()
    if arr.size == 0:
        raise ValueError("Statistics require at least one value")
    return arr


def mean(xs: Sequence[float]) -> float:
    """Arithmetic mean of a non-empty sequence."""
    return float(np.mean(_as_array(xs)))


def variance(xs: Sequence[float]) -> float:
    """Population variance (divides by n, not n-1)."""
    arr = _as_array(xs)
    return float(np.mean((arr - arr.mean()) ** 2))


def standard_deviation(xs: Sequence[float]) -> float:
    """Population standard deviation."""
    return float(np.sqrt(variance(xs)))


def linear_regression(xs: Sequence[float], ys: Sequence[float]) -> Tuple[float, float]:
    """
    Ordinary least squares fit of ys on xs.
    Returns (slope, intercept). When xs has no spread (a single point or all
    identical) the line is flat through mean(ys).
    """
    x = _as_array(xs)
    y = _as_array(ys)
    if x.size != y.size:
        raise ValueError(f"xs and ys differ in length ({x.size} != {y.size})")

    ss_xx = float(np.sum((x - x.mean()) ** 2))
    if ss_xx == 0.0:
        return 0.0, float(y.mean())

    model = LinearRegression()
    model.fit(x.reshape(-1, 1), y)
    return float(model.coef_[0]), float(model.intercept_)


def autocorrelation(xs: Sequence[float], lag: int) -> float:
    """
    Sample autocorrelation at `lag`, normalised by the total sum of squares.
    Returns 0.0 when the lag does not fit in the series or the series has no variance.
    """
    x = np.asarray(xs, dtype=float).ravel()
    n = x.size
    if lag < 0:
        raise ValueError("lag must be non-negative")
    if n == 0 or lag >= n:
        return 0.0
    if float(np.sum((x - x.mean()) ** 2)) == 0.0:
        return 0.0
    if lag == 0:
        return 1.0
    return float(acf(x, nlags=lag, fft=False)[lag])
