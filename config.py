"""
Configuration constants for the time series forecasting engine.
"""

# Request defaults
DEFAULT_STRATEGY = "prophet"
DEFAULT_FREQUENCY = "W-MON"
MAX_HORIZON = 1000

# Decomposition parameters
MAX_SEASONAL_PERIOD = 12  # One "year" of monthly periods
MAX_TREND_WINDOW = 12
TREND_WINDOW_DIVISOR = 3  # Window never exceeds a third of the series

# Confidence bands
CONFIDENCE_Z = 1.96  # 95% two-sided
PROPHET_UNCERTAINTY_GROWTH = 0.1  # Per-step widening of the decomposition band
HOLT_WINTERS_UNCERTAINTY_SCALE = 0.1
DEGENERATE_SPREAD_FRACTION = 0.05  # Spread used when the series shows no variation
MIN_SPREAD = 1.0  # Bands narrower than one count are not meaningful
MIN_HALF_WIDTH = 1  # Whole counts either side of the value

# Autoregressive parameters
ARMA_COEFFICIENT_LIMIT = 0.9

# Holt-Winters smoothing constants
HOLT_WINTERS_ALPHA = 0.3  # Level
HOLT_WINTERS_BETA = 0.2   # Trend
HOLT_WINTERS_GAMMA = 0.1  # Seasonal

# Accuracy metrics
METRICS_METHOD = "backtest"  # "backtest" or "estimate"
BACKTEST_FOLDS = 6
MIN_BACKTEST_TRAIN = 3
ESTIMATE_MAE_FRACTION = (0.03, 0.08)  # Base MAE as a fraction of the mean level
ESTIMATE_RMSE_RATIO = (1.2, 2.0)
STRATEGY_ACCURACY_MULTIPLIERS = {
    "prophet": {"mae": 0.9, "rmse": 0.95, "mape": 0.85},
    "arima": {"mae": 1.0, "rmse": 1.0, "mape": 1.0},
    "lstm": {"mae": 0.8, "rmse": 0.85, "mape": 0.75},
}
