"""
Lag analyzer: does a habit move a metric on the same day, the next day,
or a few days later?

For each lag L in 0..max_lag every metric sample (day D, value v) becomes
one pair

    x = 1.0 if the habit was done on day D − L else 0.0,    y = v

and the pairs are correlated with pearson_correlation.  The optimal lag
is the significant entry with the largest |r|; ties go to the smaller
lag (the more immediate effect).  "No significant lag" is returned as
None and is a normal outcome, not an error.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Iterable, List, Optional

from config import get_default_max_lag
from correlation_engine import CorrelationResult, pearson_correlation
from date_utils import calendar_days, iter_samples

log = logging.getLogger("lag_analyzer")


@dataclass(frozen=True)
class LaggedCorrelation:
    lag_days: int
    result: CorrelationResult

    @property
    def description(self) -> str:
        if self.lag_days == 0:
            return "Same day"
        if self.lag_days == 1:
            return "Next day"
        return f"{self.lag_days} days later"


def lagged_correlations(predictor_dates: Iterable[Any],
                        metric_series: Any,
                        max_lag: Optional[int] = None) -> List[LaggedCorrelation]:
    """Correlate habit presence against the metric for lags 0..max_lag.

    predictor_dates: days the habit happened (any date-like values).
    metric_series: (date, value) pairs, a date-indexed pandas Series,
        or a date -> value mapping.  Input order is preserved.
    max_lag: inclusive upper bound in days; None uses the configured
        default (INSIGHTS_MAX_LAG_DAYS).

    Lags whose correlation cannot be computed are omitted.
    """
    if max_lag is None:
        max_lag = get_default_max_lag()
    if max_lag < 0:
        raise ValueError(f"max_lag must be >= 0, got {max_lag}")

    habit_days = calendar_days(predictor_dates)
    samples = list(iter_samples(metric_series))

    results: List[LaggedCorrelation] = []
    for lag in range(max_lag + 1):
        shift = timedelta(days=lag)
        x = [1.0 if (day - shift) in habit_days else 0.0 for day, _ in samples]
        y = [value for _, value in samples]

        result = pearson_correlation(x, y)
        if result is None:
            log.debug(f"lag-{lag}: not enough data ({len(samples)} samples)")
            continue
        results.append(LaggedCorrelation(lag_days=lag, result=result))

    return results


def optimal_lag(results: Iterable[LaggedCorrelation]) -> Optional[LaggedCorrelation]:
    """Strongest significant lag; smallest lag wins ties; None if none is significant."""
    significant = [lc for lc in results if lc.result.is_significant]
    if not significant:
        return None
    return min(significant, key=lambda lc: (-abs(lc.result.coefficient), lc.lag_days))
