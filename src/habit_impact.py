"""
Habit-day vs baseline comparison.

Splits a metric's daily samples into habit days and non-habit (baseline)
days and reports how far the habit-day mean sits from the baseline mean,
as a percentage of the baseline.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional

from constants import MIN_IMPACT_DAYS
from date_utils import calendar_days, iter_samples
from descriptive_stats import mean

log = logging.getLogger("habit_impact")


def percentage_change(baseline: float, new: float) -> float:
    """(new − baseline) / |baseline| · 100; 0 for a zero baseline."""
    if baseline == 0:
        return 0.0
    return (new - baseline) / abs(baseline) * 100.0


@dataclass(frozen=True)
class HabitImpact:
    metric_name: str
    baseline_value: float
    habit_value: float
    percentage_change: float
    sample_size: int
    baseline_size: int

    @property
    def is_positive(self) -> bool:
        return self.habit_value > self.baseline_value

    @property
    def change_description(self) -> str:
        sign = "+" if self.percentage_change >= 0 else ""
        return f"{sign}{int(self.percentage_change)}%"

    @property
    def impact_score(self) -> float:
        return abs(self.percentage_change)


def habit_impact(habit_dates: Iterable[Any],
                 metric_series: Any,
                 metric_name: str = "",
                 min_days: int = MIN_IMPACT_DAYS) -> Optional[HabitImpact]:
    """Compare the metric's mean on habit days against all other days.

    Returns None when either side has fewer than min_days samples or the
    baseline mean is 0 (no relative change can be expressed).
    """
    habit_days = calendar_days(habit_dates)
    on_values: List[float] = []
    off_values: List[float] = []
    for day, value in iter_samples(metric_series):
        if day in habit_days:
            on_values.append(value)
        else:
            off_values.append(value)

    if len(on_values) < min_days or len(off_values) < min_days:
        log.debug(
            f"{metric_name or 'metric'}: {len(on_values)} habit / "
            f"{len(off_values)} baseline days, need {min_days} each"
        )
        return None

    baseline = mean(off_values)
    if baseline == 0:
        log.debug(f"{metric_name or 'metric'}: zero baseline, change undefined")
        return None

    habit_value = mean(on_values)
    return HabitImpact(
        metric_name=metric_name,
        baseline_value=baseline,
        habit_value=habit_value,
        percentage_change=percentage_change(baseline, habit_value),
        sample_size=len(on_values),
        baseline_size=len(off_values),
    )
