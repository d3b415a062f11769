"""
Shared date helpers.
Single source of truth for calendar-day normalisation of sample dates.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Iterable, Iterator, Mapping, Set, Tuple

import pandas as pd


def to_calendar_day(value: Any) -> date:
    """Drop the time-of-day from a date-like value.

    Accepts date, datetime, pandas/numpy timestamps and ISO strings.
    Timezone-aware values keep their own local calendar day.
    """
    try:
        ts = pd.Timestamp(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Unparseable sample date: {value!r}") from exc
    if pd.isna(ts):
        raise ValueError(f"Missing sample date: {value!r}")
    return ts.date()


def calendar_days(values: Iterable[Any]) -> Set[date]:
    return {to_calendar_day(v) for v in values}


def iter_samples(metric_series: Any) -> Iterator[Tuple[date, float]]:
    """Yield (calendar day, value) pairs in input order.

    metric_series may be a pandas Series indexed by date, a mapping of
    date -> value, or an iterable of (date, value) pairs.
    """
    if isinstance(metric_series, pd.Series):
        pairs = metric_series.items()
    elif isinstance(metric_series, Mapping):
        pairs = metric_series.items()
    else:
        pairs = metric_series
    for when, value in pairs:
        yield to_calendar_day(when), float(value)
