"""
Correlation Engine
==================
Pearson correlation between two aligned daily series (typically
"habit done on day D" vs "metric value on day D") with everything a
caller needs to judge whether the association is real:

  • coefficient r, clamped to [-1, 1]
  • two-tailed p-value from the t-statistic

        t = r · √((n − 2) / (1 − r²)),   df = n − 2

  • 95% confidence interval via Fisher's z-transform (99% on request)

        z = atanh(r),  se = 1/√(n − 3),  CI = tanh(z ± 1.96·se)

  • confidence tier (insufficient / low / moderate / high) and a verbal
    strength label that is independent of significance.

Paired Tukey outlier removal runs before anything is computed, so the
reported sample_size is the cleaned n.

Sparse input returns None (cannot compute).  Zero variance in either
series is a valid "no correlation" result: r = 0, p = 1, CI = (-1, 1).
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np

from constants import (
    FISHER_Z_SCORES,
    HIGH_CONFIDENCE_ALPHA,
    HIGH_CONFIDENCE_SAMPLE_SIZE,
    LOW_CONFIDENCE_ALPHA,
    MIN_CORRELATION_PAIRS,
    MINIMUM_SAMPLE_SIZE,
    SIGNIFICANCE_ALPHA,
    STRENGTH_THRESHOLDS,
    WEAKEST_STRENGTH,
    ZERO_VARIANCE_TOLERANCE,
)
from descriptive_stats import remove_outliers_paired
from significance import t_distribution_p_value

log = logging.getLogger("correlation_engine")


# ══════════════════════════════════════════════════════════════════════
#  CONFIDENCE TIERS
# ══════════════════════════════════════════════════════════════════════

CONFIDENCE_HIGH = "high"
CONFIDENCE_MODERATE = "moderate"
CONFIDENCE_LOW = "low"
CONFIDENCE_INSUFFICIENT = "insufficient"

CONFIDENCE_LABELS = {
    CONFIDENCE_HIGH: "High Confidence",
    CONFIDENCE_MODERATE: "Moderate Confidence",
    CONFIDENCE_LOW: "Low Confidence",
    CONFIDENCE_INSUFFICIENT: "Insufficient Data",
}


def classify_confidence(p_value: float, sample_size: int) -> str:
    """Confidence tier; first matching rule wins."""
    if sample_size < MINIMUM_SAMPLE_SIZE:
        return CONFIDENCE_INSUFFICIENT
    if p_value < HIGH_CONFIDENCE_ALPHA and sample_size >= HIGH_CONFIDENCE_SAMPLE_SIZE:
        return CONFIDENCE_HIGH
    if p_value < SIGNIFICANCE_ALPHA and sample_size >= MINIMUM_SAMPLE_SIZE:
        return CONFIDENCE_MODERATE
    if p_value < LOW_CONFIDENCE_ALPHA:
        return CONFIDENCE_LOW
    return CONFIDENCE_INSUFFICIENT


def describe_strength(coefficient: float) -> str:
    abs_r = abs(coefficient)
    for threshold, label in STRENGTH_THRESHOLDS:
        if abs_r >= threshold:
            return label
    return WEAKEST_STRENGTH


# ══════════════════════════════════════════════════════════════════════
#  RESULT
# ══════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class CorrelationResult:
    coefficient: float
    p_value: float
    sample_size: int
    confidence_interval: Tuple[float, float]

    @property
    def is_significant(self) -> bool:
        return self.p_value < SIGNIFICANCE_ALPHA and self.sample_size >= MINIMUM_SAMPLE_SIZE

    @property
    def confidence_level(self) -> str:
        return classify_confidence(self.p_value, self.sample_size)

    @property
    def confidence_label(self) -> str:
        return CONFIDENCE_LABELS[self.confidence_level]

    @property
    def strength_description(self) -> str:
        # Independent of significance
        return describe_strength(self.coefficient)


# ══════════════════════════════════════════════════════════════════════
#  PEARSON
# ══════════════════════════════════════════════════════════════════════

def correlation_p_value(r: float, n: int) -> float:
    """Two-tailed p-value for H₀: ρ = 0 given r over n pairs."""
    df = n - 2
    if df <= 0:
        return 1.0
    one_minus_r2 = 1.0 - r * r
    if one_minus_r2 <= 0:
        # |r| = 1 → t is infinite
        return 0.0
    t_stat = r * math.sqrt(df / one_minus_r2)
    return t_distribution_p_value(t_stat, df)


def fisher_confidence_interval(r: float, n: int,
                               confidence: float = 0.95) -> Tuple[float, float]:
    """CI for ρ at 95% or 99%; full range when n ≤ 3, degenerate when |r| = 1."""
    if confidence not in FISHER_Z_SCORES:
        raise ValueError(
            f"confidence must be one of {sorted(FISHER_Z_SCORES)}, got {confidence}"
        )
    if n <= 3:
        return (-1.0, 1.0)
    if abs(r) >= 1.0:
        return (r, r)
    z_score = FISHER_Z_SCORES[confidence]
    z = math.atanh(r)
    se = 1.0 / math.sqrt(n - 3)
    lower = math.tanh(z - z_score * se)
    upper = math.tanh(z + z_score * se)
    return (max(-1.0, lower), min(1.0, upper))


def _is_constant(values: np.ndarray) -> bool:
    # Range relative to the largest magnitude
    return float(np.ptp(values)) <= ZERO_VARIANCE_TOLERANCE * float(np.abs(values).max())


def pearson_correlation(x: Sequence[float],
                        y: Sequence[float]) -> Optional[CorrelationResult]:
    """Pearson r with p-value and Fisher-z CI, after paired outlier removal.

    Returns None when len(x) != len(y) or fewer than 3 pairs survive.
    """
    if len(x) != len(y):
        log.debug(f"Pearson skipped: length mismatch ({len(x)} vs {len(y)})")
        return None
    if len(x) < MIN_CORRELATION_PAIRS:
        log.debug(f"Pearson skipped: only {len(x)} pairs")
        return None

    clean_x, clean_y = remove_outliers_paired(x, y)
    n = len(clean_x)
    if n < MIN_CORRELATION_PAIRS:
        log.debug(f"Pearson skipped: {n} pairs left after outlier removal")
        return None

    xs = np.asarray(clean_x, dtype=np.float64)
    ys = np.asarray(clean_y, dtype=np.float64)

    # Skip constant arrays (all same value → no correlation)
    if _is_constant(xs) or _is_constant(ys):
        return CorrelationResult(
            coefficient=0.0, p_value=1.0, sample_size=n,
            confidence_interval=(-1.0, 1.0),
        )

    # Sums of products about the mean; same r as the raw-sum formula
    dx = xs - xs.mean()
    dy = ys - ys.mean()
    numerator = float(np.dot(dx, dy))
    ss_x = float(np.dot(dx, dx))
    ss_y = float(np.dot(dy, dy))
    if ss_x <= 0 or ss_y <= 0:
        return CorrelationResult(
            coefficient=0.0, p_value=1.0, sample_size=n,
            confidence_interval=(-1.0, 1.0),
        )
    denominator = math.sqrt(ss_x) * math.sqrt(ss_y)

    r = max(-1.0, min(1.0, numerator / denominator))
    return CorrelationResult(
        coefficient=r,
        p_value=correlation_p_value(r, n),
        sample_size=n,
        confidence_interval=fisher_confidence_interval(r, n),
    )
