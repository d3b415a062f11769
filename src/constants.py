"""
Shared constants used across the inference modules.
Single source of truth for sample-size gates and numeric tolerances.
"""

# Sample-size gates for significance and confidence tiers
MINIMUM_SAMPLE_SIZE = 14
HIGH_CONFIDENCE_SAMPLE_SIZE = 30

# Alpha levels (two-tailed)
SIGNIFICANCE_ALPHA = 0.05
HIGH_CONFIDENCE_ALPHA = 0.01
LOW_CONFIDENCE_ALPHA = 0.10

# Tukey fences: quartiles are unreliable below MIN_OUTLIER_SAMPLE values
IQR_MULTIPLIER = 1.5
MIN_OUTLIER_SAMPLE = 4

# Correlation needs at least 3 pairs (df = n - 2 > 0)
MIN_CORRELATION_PAIRS = 3

# Two-sided normal quantiles for the Fisher-z interval, keyed by confidence level
FISHER_Z_SCORES = {
    0.95: 1.96,
    0.99: 2.576,
}

# Numeric guards (variance tolerance is relative to the series magnitude)
ZERO_VARIANCE_TOLERANCE = 1e-10
SINGULAR_PIVOT_TOLERANCE = 1e-10

# |r| thresholds for the verbal strength label, strongest first
STRENGTH_THRESHOLDS = [
    (0.7, "Strong"),
    (0.4, "Moderate"),
    (0.2, "Weak"),
]
WEAKEST_STRENGTH = "Very weak"

# Habit-vs-baseline comparison needs this many days on each side
MIN_IMPACT_DAYS = 3

# Lag sweep: same day, next day, 2 days later
DEFAULT_MAX_LAG_DAYS = 2
