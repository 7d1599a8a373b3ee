"""
Series preparation and date helpers shared by the forecasting engine.
"""

from typing import Iterable, List, Mapping

import numpy as np
import pandas as pd

_DATE_COLUMNS = ("ds", "date")
_VALUE_COLUMNS = ("y", "value")


def _frame_from_dataframe(raw_df: pd.DataFrame) -> pd.DataFrame:
    date_col = next((c for c in _DATE_COLUMNS if c in raw_df.columns), None)
    value_col = next((c for c in _VALUE_COLUMNS if c in raw_df.columns), None)
    if date_col is None or value_col is None:
        raise ValueError(
            f"DataFrame needs a date column {list(_DATE_COLUMNS)} and a value column {list(_VALUE_COLUMNS)}; "
            f"got {list(raw_df.columns)}"
        )
    return pd.DataFrame({"ds": raw_df[date_col].to_numpy(), "y": raw_df[value_col].to_numpy()})


def _frame_from_records(observations: Iterable) -> pd.DataFrame:
    dates = []
    values = []
    for obs in observations:
        if isinstance(obs, Mapping):
            if "date" not in obs or "value" not in obs:
                raise ValueError(f"Observation is missing 'date' or 'value': {dict(obs)}")
            dates.append(obs["date"])
            values.append(obs["value"])
        elif isinstance(obs, (tuple, list)) and len(obs) == 2:
            dates.append(obs[0])
            values.append(obs[1])
        else:
            raise ValueError(f"Unsupported observation {obs!r}; expected a mapping or a (date, value) pair")
    return pd.DataFrame({"ds": dates, "y": values})


def _wall_time(value):
    ts = pd.to_datetime(value, errors="coerce")
    if isinstance(ts, pd.Timestamp) and ts.tz is not None:
        return ts.tz_localize(None)
    return ts


def parse_dates(dates: pd.Series) -> pd.Series:
    """
    Naive datetimes in each observation's own local time; unparseable entries
    become NaT. Text entries are parsed one by one, so formats and UTC offsets
    may differ between observations.
    """
    if pd.api.types.is_datetime64_any_dtype(dates):
        parsed = pd.to_datetime(dates)
        return parsed.dt.tz_localize(None) if parsed.dt.tz is not None else parsed
    return pd.to_datetime(dates.map(_wall_time), errors="coerce")


def series_frame(observations) -> pd.DataFrame:
    """
    Convert caller observations into a fresh DataFrame with 'ds' and 'y' columns.

    Accepts a DataFrame ('ds'/'y' or 'date'/'value' columns), a sequence of
    mappings with 'date' and 'value' keys, or a sequence of (date, value) pairs.
    The caller's object is never modified.
    """
    if observations is None:
        return pd.DataFrame({"ds": [], "y": []})
    if isinstance(observations, pd.DataFrame):
        frame = _frame_from_dataframe(observations)
    elif isinstance(observations, (str, bytes)) or not isinstance(observations, Iterable):
        raise ValueError(f"Unsupported series container: {type(observations).__name__}")
    else:
        frame = _frame_from_records(observations)

    frame["ds"] = parse_dates(frame["ds"]).dt.normalize()
    frame["y"] = pd.to_numeric(frame["y"], errors="coerce").astype(float)
    frame["y"] = frame["y"].replace([np.inf, -np.inf], np.nan)
    return frame


def roll_forward_to_monday(ts: pd.Timestamp) -> pd.Timestamp:
    """Next Monday on or after `ts`."""
    return ts + pd.Timedelta(days=(7 - ts.weekday()) % 7)


def future_dates(last_date, horizon: int, frequency: str) -> pd.DatetimeIndex:
    """
    Dates for the next `horizon` periods after `last_date`.

    'M'     -> one calendar month per step (month-end clamped, e.g. Jan 31 -> Feb 28).
    'W-MON' -> seven days per step, rolled forward onto a Monday.
    """
    last = pd.Timestamp(last_date).normalize()
    if frequency == "M":
        dates = [last + pd.DateOffset(months=i + 1) for i in range(horizon)]
    elif frequency == "W-MON":
        dates = [roll_forward_to_monday(last + pd.Timedelta(days=7 * (i + 1))) for i in range(horizon)]
    else:
        raise ValueError(f"Unsupported frequency '{frequency}' (expected 'M' or 'W-MON')")
    return pd.DatetimeIndex(dates)


def format_dates(dates) -> List[str]:
    """ISO 'YYYY-MM-DD' strings."""
    return [pd.Timestamp(d).strftime("%Y-%m-%d") for d in dates]
