"""
Insight Engine
==============
Entry points for health-insight screens.  Callers hand over raw habit
dates and (date, value) metric series; this module does the calendar-day
alignment and routes to the pure statistics modules:

  analyze_habit          one habit × one metric: same-day correlation,
                         lag sweep + optimal lag, habit-day impact
  stratified_correlation same-day correlation split by a confounder
                         (e.g. workout day vs rest day)
  attribute_habits       several habits × one metric: per-day 0/1 frame
                         → multiple regression

No state is kept between calls.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

import pandas as pd

from correlation_engine import CorrelationResult, pearson_correlation
from date_utils import calendar_days, iter_samples, to_calendar_day
from habit_impact import HabitImpact, habit_impact
from lag_analyzer import LaggedCorrelation, lagged_correlations, optimal_lag
from regression import RegressionResult, multiple_regression

log = logging.getLogger("insight_engine")

OUTCOME_COLUMN = "outcome"
UNKNOWN_STRATUM = "unknown"


@dataclass(frozen=True)
class HabitInsight:
    habit_name: str
    metric_name: str
    same_day: Optional[CorrelationResult]
    lagged: List[LaggedCorrelation] = field(default_factory=list)
    optimal: Optional[LaggedCorrelation] = None
    impact: Optional[HabitImpact] = None

    @property
    def has_signal(self) -> bool:
        return self.optimal is not None


# ─── Single habit ──────────────────────────────────────────────────────

def analyze_habit(habit_name: str,
                  habit_dates: Iterable[Any],
                  metric_name: str,
                  metric_series: Any,
                  max_lag: Optional[int] = None) -> HabitInsight:
    """Full single-habit analysis against one metric."""
    habit_dates = list(habit_dates)
    samples = list(iter_samples(metric_series))

    lagged = lagged_correlations(habit_dates, samples, max_lag)
    same_day = next((lc.result for lc in lagged if lc.lag_days == 0), None)
    best = optimal_lag(lagged)
    impact = habit_impact(habit_dates, samples, metric_name=metric_name)

    if best is not None:
        r = best.result
        log.info(
            f"{habit_name} → {metric_name}: {best.description.lower()} "
            f"r={r.coefficient:+.3f} (p={r.p_value:.4f}, n={r.sample_size}, "
            f"{r.confidence_level})"
        )
    else:
        log.info(f"{habit_name} → {metric_name}: no significant lag "
                 f"({len(lagged)} lags computed, {len(samples)} days)")

    return HabitInsight(
        habit_name=habit_name,
        metric_name=metric_name,
        same_day=same_day,
        lagged=lagged,
        optimal=best,
        impact=impact,
    )


def stratified_correlation(habit_dates: Iterable[Any],
                           metric_series: Any,
                           strata: Mapping[Any, str]) -> Dict[str, CorrelationResult]:
    """Same-day habit/metric correlation computed separately per stratum.

    strata maps a day to its stratum label; unassigned days fall into
    "unknown".  Strata whose correlation cannot be computed are omitted.
    """
    habit_days = calendar_days(habit_dates)
    stratum_of = {to_calendar_day(d): label for d, label in strata.items()}

    grouped: Dict[str, Tuple[List[float], List[float]]] = {}
    for day, value in iter_samples(metric_series):
        label = stratum_of.get(day, UNKNOWN_STRATUM)
        xs, ys = grouped.setdefault(label, ([], []))
        xs.append(1.0 if day in habit_days else 0.0)
        ys.append(value)

    results: Dict[str, CorrelationResult] = {}
    for label, (xs, ys) in grouped.items():
        result = pearson_correlation(xs, ys)
        if result is not None:
            results[label] = result
    return results


# ─── Multiple habits ───────────────────────────────────────────────────

def build_predictor_frame(habit_dates_by_name: Mapping[str, Iterable[Any]],
                          metric_series: Any,
                          lag: int = 0) -> pd.DataFrame:
    """Per-day frame: one 0/1 column per habit plus the outcome column.

    Rows are the metric's calendar days in ascending order; several
    samples on one day are averaged.  A habit column is 1.0 when the
    habit was done `lag` days before the row's day.
    """
    if lag < 0:
        raise ValueError(f"lag must be >= 0, got {lag}")
    names = list(habit_dates_by_name)
    if OUTCOME_COLUMN in names:
        raise ValueError(f"'{OUTCOME_COLUMN}' is reserved and cannot name a habit")

    samples = list(iter_samples(metric_series))
    if not samples:
        return pd.DataFrame(columns=names + [OUTCOME_COLUMN], dtype=float)

    raw = pd.DataFrame(samples, columns=["day", OUTCOME_COLUMN])
    frame = raw.groupby("day", sort=True)[[OUTCOME_COLUMN]].mean()

    shift = timedelta(days=lag)
    for name in names:
        days = calendar_days(habit_dates_by_name[name])
        frame[name] = [1.0 if (day - shift) in days else 0.0 for day in frame.index]

    return frame[names + [OUTCOME_COLUMN]]


def attribute_habits(habit_dates_by_name: Mapping[str, Iterable[Any]],
                     metric_series: Any,
                     lag: int = 0) -> Optional[RegressionResult]:
    """Split one metric's variation across several habits via regression."""
    frame = build_predictor_frame(habit_dates_by_name, metric_series, lag)
    names = [c for c in frame.columns if c != OUTCOME_COLUMN]

    result = multiple_regression(
        frame[names].to_numpy(dtype=float).tolist(),
        frame[OUTCOME_COLUMN].to_numpy(dtype=float).tolist(),
        names,
    )
    if result is None:
        log.info(f"Attribution skipped: {len(frame)} days, {len(names)} habits")
    else:
        log.info(
            f"Attribution over {result.sample_size} days: "
            f"R²={result.r_squared:.3f}, adj R²={result.adjusted_r_squared:.3f}, "
            f"p={result.p_value:.4f}"
        )
    return result
