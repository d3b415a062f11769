"""
Descriptive statistics and Tukey outlier filtering.

These are the leaf helpers every other inference module builds on:

  • mean / standard_deviation return 0 for inputs too small to describe,
    so callers must already know when an input was empty.
  • percentile uses linear interpolation between closest ranks
    (NumPy's default "linear" method) over an already-sorted sequence.
  • remove_outliers / remove_outliers_paired apply Tukey's fences

        [Q1 − k·IQR,  Q3 + k·IQR]      (k = 1.5 by default)

    and are no-ops below MIN_OUTLIER_SAMPLE values, where quartiles
    are not meaningful.  The paired variant computes independent fences
    for x and y but filters by index, so a pair is dropped if either
    side is an outlier.
"""

from __future__ import annotations

from typing import List, Sequence, Tuple

import numpy as np

from constants import IQR_MULTIPLIER, MIN_OUTLIER_SAMPLE


def mean(values: Sequence[float]) -> float:
    if len(values) == 0:
        return 0.0
    return float(np.mean(np.asarray(values, dtype=np.float64)))


def standard_deviation(values: Sequence[float]) -> float:
    """Sample standard deviation (n − 1 denominator); 0 when n ≤ 1."""
    if len(values) <= 1:
        return 0.0
    return float(np.std(np.asarray(values, dtype=np.float64), ddof=1))


def percentile(sorted_values: Sequence[float], p: float) -> float:
    """Linear-interpolation percentile, p in [0, 100]. Caller sorts first."""
    if len(sorted_values) == 0:
        return 0.0
    return float(np.percentile(np.asarray(sorted_values, dtype=np.float64), p))


def _tukey_fences(values: Sequence[float], multiplier: float) -> Tuple[float, float]:
    ordered = sorted(values)
    q1 = percentile(ordered, 25)
    q3 = percentile(ordered, 75)
    iqr = q3 - q1
    return q1 - multiplier * iqr, q3 + multiplier * iqr


def remove_outliers(values: Sequence[float],
                    multiplier: float = IQR_MULTIPLIER) -> List[float]:
    """Drop values outside Tukey's fences, preserving input order."""
    if len(values) < MIN_OUTLIER_SAMPLE:
        return list(values)
    lower, upper = _tukey_fences(values, multiplier)
    return [v for v in values if lower <= v <= upper]


def remove_outliers_paired(x: Sequence[float], y: Sequence[float],
                           multiplier: float = IQR_MULTIPLIER
                           ) -> Tuple[List[float], List[float]]:
    """Drop every pair where either element is outside its own fences."""
    if len(x) != len(y) or len(x) < MIN_OUTLIER_SAMPLE:
        return list(x), list(y)

    x_lower, x_upper = _tukey_fences(x, multiplier)
    y_lower, y_upper = _tukey_fences(y, multiplier)

    clean_x: List[float] = []
    clean_y: List[float] = []
    for xi, yi in zip(x, y):
        if x_lower <= xi <= x_upper and y_lower <= yi <= y_upper:
            clean_x.append(xi)
            clean_y.append(yi)
    return clean_x, clean_y
