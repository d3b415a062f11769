"""
Tests for the insight engine entry points.

Covers: analyze_habit bundling, stratified_correlation, predictor-frame
alignment and multi-habit attribution from date sets.
"""
import math
from datetime import date, timedelta

import pandas as pd
import pytest

from insight_engine import (
    OUTCOME_COLUMN,
    UNKNOWN_STRATUM,
    analyze_habit,
    attribute_habits,
    build_predictor_frame,
    stratified_correlation,
)

START = date(2026, 2, 1)


def _day(i):
    return START + timedelta(days=i)


def _lag1_data(n_days=60):
    habit = [_day(i) for i in range(n_days) if (7 * i) % 11 < 5]
    habit_set = set(habit)
    metric = [
        (_day(i), 40.0 + (8.0 if (_day(i) - timedelta(days=1)) in habit_set else 0.0)
         + 0.4 * math.cos(0.9 * i))
        for i in range(n_days)
    ]
    return habit, metric


# ─── analyze_habit ───────────────────────────────────────────


class TestAnalyzeHabit:

    def test_bundles_lag_sweep(self):
        habit, metric = _lag1_data()
        insight = analyze_habit("Sauna", habit, "HRV", metric, max_lag=2)
        assert insight.habit_name == "Sauna"
        assert insight.metric_name == "HRV"
        assert [lc.lag_days for lc in insight.lagged] == [0, 1, 2]
        assert insight.same_day is insight.lagged[0].result
        assert insight.has_signal
        assert insight.optimal.lag_days == 1
        assert insight.optimal.description == "Next day"
        assert insight.impact is not None

    def test_sparse_data_has_no_signal(self):
        metric = [(_day(i), 50.0 + i % 3) for i in range(8)]
        insight = analyze_habit("Cold plunge", [_day(0), _day(4)], "RHR", metric, max_lag=1)
        assert not insight.has_signal
        assert insight.optimal is None
        assert insight.impact is None

    def test_too_few_samples(self):
        insight = analyze_habit("Yoga", [_day(0)], "Steps", [(_day(0), 9000.0)], max_lag=1)
        assert insight.lagged == []
        assert insight.same_day is None


# ─── stratified_correlation ──────────────────────────────────


class TestStratifiedCorrelation:

    def test_separate_strata(self):
        habit, metric = [], []
        strata = {}
        for i in range(40):
            done = i % 4 in (0, 1)
            if done:
                habit.append(_day(i))
            workout = i % 2 == 0
            strata[_day(i)] = "workout_day" if workout else "rest_day"
            # Habit helps only on workout days
            bump = 5.0 if (done and workout) else 0.0
            metric.append((_day(i), 50.0 + bump + 0.1 * (i % 5)))

        results = stratified_correlation(habit, metric, strata)
        assert set(results) == {"workout_day", "rest_day"}
        assert results["workout_day"].coefficient > 0.9
        assert abs(results["rest_day"].coefficient) < 0.5

    def test_unassigned_days_are_unknown(self):
        metric = [(_day(i), float(i % 4)) for i in range(6)]
        results = stratified_correlation([_day(1), _day(3)], metric, {})
        assert list(results) == [UNKNOWN_STRATUM]
        assert results[UNKNOWN_STRATUM].sample_size <= 6

    def test_tiny_strata_omitted(self):
        metric = [(_day(i), float(i)) for i in range(6)]
        strata = {_day(0): "a", _day(1): "a"}
        results = stratified_correlation([_day(0)], metric, strata)
        assert "a" not in results


# ─── Predictor frame ─────────────────────────────────────────


class TestBuildPredictorFrame:

    def test_columns_and_alignment(self):
        metric = [(_day(2), 3.0), (_day(0), 1.0), (_day(1), 2.0)]
        frame = build_predictor_frame({"walk": [_day(1)], "nap": [_day(0), _day(2)]}, metric)
        assert list(frame.columns) == ["walk", "nap", OUTCOME_COLUMN]
        assert list(frame.index) == [_day(0), _day(1), _day(2)]
        assert frame["walk"].tolist() == [0.0, 1.0, 0.0]
        assert frame["nap"].tolist() == [1.0, 0.0, 1.0]
        assert frame[OUTCOME_COLUMN].tolist() == [1.0, 2.0, 3.0]

    def test_lag_shifts_habits(self):
        metric = [(_day(i), float(i)) for i in range(3)]
        frame = build_predictor_frame({"walk": [_day(0)]}, metric, lag=1)
        assert frame["walk"].tolist() == [0.0, 1.0, 0.0]

    def test_duplicate_days_averaged(self):
        metric = [(_day(0), 2.0), (_day(0), 4.0), (_day(1), 5.0)]
        frame = build_predictor_frame({"walk": []}, metric)
        assert frame[OUTCOME_COLUMN].tolist() == [3.0, 5.0]

    def test_empty_metric(self):
        frame = build_predictor_frame({"walk": [_day(0)]}, [])
        assert frame.empty
        assert list(frame.columns) == ["walk", OUTCOME_COLUMN]

    def test_reserved_name_rejected(self):
        with pytest.raises(ValueError):
            build_predictor_frame({OUTCOME_COLUMN: []}, [(_day(0), 1.0)])

    def test_negative_lag_rejected(self):
        with pytest.raises(ValueError):
            build_predictor_frame({"walk": []}, [(_day(0), 1.0)], lag=-1)

    def test_accepts_series(self):
        series = pd.Series([1.0, 2.0], index=pd.to_datetime([_day(0), _day(1)]))
        frame = build_predictor_frame({"walk": [_day(1)]}, series)
        assert frame["walk"].tolist() == [0.0, 1.0]


# ─── attribute_habits ────────────────────────────────────────


class TestAttributeHabits:

    def test_recovers_habit_effects(self):
        n = 28
        sauna = [_day(i) for i in range(n) if i % 2 == 0]
        alcohol = [_day(i) for i in range(n) if i % 3 == 0]
        sauna_set, alcohol_set = set(sauna), set(alcohol)
        metric = [
            (_day(i), 2.0 + 3.0 * (_day(i) in sauna_set) - 1.0 * (_day(i) in alcohol_set))
            for i in range(n)
        ]
        res = attribute_habits({"sauna": sauna, "alcohol": alcohol}, metric)
        assert res.intercept == pytest.approx(2.0, abs=1e-8)
        assert res.coefficients["sauna"] == pytest.approx(3.0, abs=1e-8)
        assert res.coefficients["alcohol"] == pytest.approx(-1.0, abs=1e-8)
        assert res.r_squared == pytest.approx(1.0, abs=1e-9)

    def test_too_few_days(self):
        metric = [(_day(i), float(i)) for i in range(10)]
        assert attribute_habits({"sauna": [_day(0), _day(2)]}, metric) is None

    def test_collinear_habits(self):
        days = [_day(i) for i in range(20) if i % 2 == 0]
        metric = [(_day(i), float(i % 5)) for i in range(20)]
        assert attribute_habits({"a": days, "b": list(days)}, metric) is None

    def test_no_habits(self):
        metric = [(_day(i), float(i)) for i in range(20)]
        assert attribute_habits({}, metric) is None
