"""Tests for daily nutrition summaries and weekly adherence."""
from datetime import date, timedelta
from typing import List, Optional

import pytest

from coach.analysis.nutrition import (
    TargetStatus,
    WeeklyAdherence,
    classify_calories,
    daily_summary,
    round_half_up,
    weekly_adherence,
)
from coach.analysis.records import NutritionRecord

WEEK_START = date(2025, 1, 9)


def meal(day: date, calories: int, protein: Optional[float] = None,
         carbs: Optional[float] = None, fats: Optional[float] = None,
         name: Optional[str] = None) -> NutritionRecord:
    return NutritionRecord(
        date=day, calories=calories, protein=protein, carbs=carbs, fats=fats, meal_name=name,
    )


def one_meal_per_day(calories_by_offset: List[int], start: date = WEEK_START) -> List[NutritionRecord]:
    """A single meal on each consecutive day from `start`."""
    return [meal(start + timedelta(days=i), c, protein=100) for i, c in enumerate(calories_by_offset)]


class TestClassifyCalories:
    @pytest.mark.parametrize("calories,expected", [
        (1800, TargetStatus.ON_TRACK),   # exactly 90%
        (1799, TargetStatus.UNDER),
        (2000, TargetStatus.ON_TRACK),
        (2200, TargetStatus.ON_TRACK),   # exactly 110%
        (2201, TargetStatus.OVER),
        (0, TargetStatus.UNDER),
    ])
    def test_banding_around_2000(self, calories, expected):
        assert classify_calories(calories, 2000) == expected


class TestDailySummary:
    def test_sums_meals_on_the_day(self):
        day = WEEK_START
        records = [
            meal(day, 600, protein=40, carbs=70, fats=20, name="Breakfast"),
            meal(day, 1200, protein=80, carbs=None, fats=35.5, name="Dinner"),
            meal(day + timedelta(days=1), 3000, protein=200),
        ]
        summary = daily_summary(records, day, 2000)
        assert summary.total_calories == 1800
        assert summary.total_protein == pytest.approx(120.0)
        assert summary.total_carbs == pytest.approx(70.0)
        assert summary.total_fats == pytest.approx(55.5)
        assert summary.meal_count == 2
        assert summary.meals == ("Breakfast", "Dinner")
        assert summary.target_status == TargetStatus.ON_TRACK
        assert summary.target_calories == 2000

    def test_null_macros_count_as_zero(self):
        summary = daily_summary([meal(WEEK_START, 500)], WEEK_START, 2000)
        assert summary.total_protein == 0
        assert summary.total_carbs == 0
        assert summary.total_fats == 0

    def test_day_without_meals(self):
        summary = daily_summary([], WEEK_START, 2000)
        assert summary.meal_count == 0
        assert summary.total_calories == 0
        assert summary.target_status == TargetStatus.UNDER
        assert summary.meals == ()

    def test_unnamed_meals_left_out_of_names(self):
        summary = daily_summary([meal(WEEK_START, 500), meal(WEEK_START, 500, name="Snack")], WEEK_START, 2000)
        assert summary.meal_count == 2
        assert summary.meals == ("Snack",)

    def test_meal_names_are_immutable(self):
        summary = daily_summary([meal(WEEK_START, 500, name="Lunch")], WEEK_START, 2000)
        with pytest.raises(AttributeError):
            summary.meals.append("Dessert")

    @pytest.mark.parametrize("calories,expected", [
        (1799, TargetStatus.UNDER),
        (2201, TargetStatus.OVER),
    ])
    def test_status_outside_band(self, calories, expected):
        assert daily_summary([meal(WEEK_START, calories)], WEEK_START, 2000).target_status == expected

    def test_rejects_unresolved_target(self):
        with pytest.raises(ValueError):
            daily_summary([], WEEK_START, 0)


class TestWeeklyAdherence:
    def test_no_logged_days(self):
        result = weekly_adherence([], 2000, WEEK_START)
        assert result == WeeklyAdherence(0, 0, 0, 0, 0, 0, 0)

    def test_counts_each_status(self):
        records = one_meal_per_day([2000, 1000, 3000, 1900])
        result = weekly_adherence(records, 2000, WEEK_START)
        assert result.days_on_track == 2
        assert result.days_under == 1
        assert result.days_over == 1
        assert result.total_days == 4
        assert result.adherence_pct == 50

    def test_meals_on_same_day_are_summed(self):
        records = [meal(WEEK_START, 900, protein=50), meal(WEEK_START, 1000, protein=60)]
        result = weekly_adherence(records, 2000, WEEK_START)
        assert result.total_days == 1
        assert result.days_on_track == 1
        assert result.avg_calories == 1900
        assert result.avg_protein == 110

    def test_unlogged_days_do_not_lower_averages(self):
        records = [meal(WEEK_START, 2000, protein=150), meal(WEEK_START + timedelta(days=5), 2200, protein=151)]
        result = weekly_adherence(records, 2000, WEEK_START)
        assert result.total_days == 2
        assert result.avg_calories == 2100
        assert result.avg_protein == 151   # 150.5 rounds half up

    def test_window_is_seven_days_from_start(self):
        records = [
            meal(WEEK_START - timedelta(days=1), 2000),
            meal(WEEK_START, 2000),
            meal(WEEK_START + timedelta(days=6), 2000),
            meal(WEEK_START + timedelta(days=7), 2000),
        ]
        assert weekly_adherence(records, 2000, WEEK_START).total_days == 2

    def test_percentage_rounds_to_nearest(self):
        # 33.3 and 66.7
        assert weekly_adherence(one_meal_per_day([2000, 500, 500]), 2000, WEEK_START).adherence_pct == 33
        assert weekly_adherence(one_meal_per_day([2000, 2000, 500]), 2000, WEEK_START).adherence_pct == 67

    def test_idempotent(self):
        records = one_meal_per_day([2000, 1500, 2500])
        assert weekly_adherence(records, 2000, WEEK_START) == weekly_adherence(records, 2000, WEEK_START)


class TestRoundHalfUp:
    @pytest.mark.parametrize("value,expected", [(0.5, 1), (1.5, 2), (2.5, 3), (2.49, 2), (0.0, 0)])
    def test_rounds_half_away_from_zero(self, value, expected):
        assert round_half_up(value) == expected
