"""
Test suite for the PeakScore scoring engine.

Covers the deviation scorer, the weighted-average helper, the five category
aggregators, the overall score and the display helpers built on top of them.
"""

import copy
import math
import unittest

from core import (
    calculate_category_breakdowns,
    calculate_mental_score,
    calculate_nutrition_breakdown,
    calculate_nutrition_score,
    calculate_overall_progress,
    calculate_physical_breakdown,
    calculate_physical_score,
    calculate_score_trends,
    calculate_tactical_score,
    calculate_technical_breakdown,
    calculate_technical_score,
    closeness,
    compare_with_cohort,
    get_benchmark,
    get_score_band,
    is_present,
    normalize_to_range,
    score_against_benchmark,
    validate_user_input,
    weighted_average,
)
from shared_models import (
    ActivityLevel,
    AthleteProfile,
    NutritionGoal,
    RawSkillRecord,
    ScoringConfig,
    Sex,
    SkillCategory,
)

REFERENCE_ATHLETE = AthleteProfile(age=20, height_cm=175, weight_kg=70)


class TestDeviationScorer(unittest.TestCase):
    """Exponential closeness curve for nutrition intake."""

    def test_exact_match_scores_100(self):
        self.assertEqual(closeness(2664, 2664), 100.0)

    def test_half_under_target(self):
        """A 50% miss scores 100 * e^-0.75."""
        self.assertAlmostEqual(closeness(1332, 2664), 100 * math.exp(-0.75), places=6)
        self.assertAlmostEqual(closeness(1332, 2664), 47.2, places=1)

    def test_symmetric_around_target(self):
        self.assertAlmostEqual(closeness(80, 100), closeness(120, 100))

    def test_zero_or_missing_target(self):
        """Division by a zero target is never attempted."""
        self.assertEqual(closeness(100, 0), 0.0)
        self.assertEqual(closeness(100, None), 0.0)
        self.assertEqual(closeness(None, 100), 0.0)

    def test_monotonic_in_deviation(self):
        """Score falls as the intake moves away from the target."""
        scores = [closeness(actual, 100) for actual in (100, 110, 125, 150, 200, 400)]
        for closer, further in zip(scores, scores[1:]):
            self.assertGreater(closer, further)
        self.assertGreaterEqual(scores[-1], 0.0)


class TestWeightedAverage(unittest.TestCase):
    """Re-normalized weighted average over present sub-scores."""

    def test_empty_input_scores_zero(self):
        self.assertEqual(weighted_average([], []), 0.0)

    def test_renormalizes_over_present_weights(self):
        """A single perfect group reaches 100 regardless of its weight."""
        self.assertEqual(weighted_average([10], [30]), 100.0)
        self.assertAlmostEqual(weighted_average([10, 5], [40, 30]), 55 / 70 * 100)

    def test_percent_scale(self):
        self.assertAlmostEqual(
            weighted_average([50, 100], [25, 12.5], scale=100.0), 25 / 37.5 * 100
        )

    def test_sub_scores_are_clamped(self):
        self.assertEqual(weighted_average([15, 10], [1, 1]), 100.0)
        self.assertEqual(weighted_average([-3], [1]), 0.0)

    def test_length_mismatch(self):
        with self.assertRaises(ValueError):
            weighted_average([1, 2], [1])


class TestBenchmarks(unittest.TestCase):
    """Age tiers and benchmark ratios."""

    def test_pushup_age_tiers(self):
        self.assertEqual(get_benchmark("pushup_score", 15), 60)
        self.assertEqual(get_benchmark("pushup_score", 17), 70)
        self.assertEqual(get_benchmark("pushup_score", 18), 80)
        self.assertEqual(get_benchmark("pushup_score", 35), 80)

    def test_missing_age_uses_adult_tier(self):
        self.assertEqual(get_benchmark("pushup_score", None), 80)
        self.assertEqual(get_benchmark("run_5k_time"), 16)

    def test_run_5k_tiers(self):
        self.assertEqual(get_benchmark("run_5k_time", 14), 18)
        self.assertEqual(get_benchmark("run_5k_time", 17), 17)

    def test_lower_is_better_ratio(self):
        self.assertAlmostEqual(score_against_benchmark(13, 6.5, True), 5.0)
        self.assertEqual(score_against_benchmark(5.0, 6.5, True), 10.0)

    def test_non_positive_time_is_best(self):
        self.assertEqual(score_against_benchmark(0, 6.5, True), 10.0)
        self.assertEqual(score_against_benchmark(-1, 6.5, True), 10.0)


class TestPhysicalScore(unittest.TestCase):
    """Strength, speed & agility and endurance groups."""

    def test_pushups_at_benchmark_score_full(self):
        """Age 17 with 70 push-ups meets the benchmark exactly."""
        record = RawSkillRecord(pushup_score=70, athlete=AthleteProfile(age=17))
        breakdown = calculate_physical_breakdown(record)
        self.assertTrue(breakdown.populated)
        self.assertEqual(breakdown.components["strength"], 100.0)
        self.assertEqual(breakdown.score, 100.0)

    def test_over_benchmark_is_capped(self):
        record = RawSkillRecord(pushup_score=160, athlete=AthleteProfile(age=17))
        self.assertEqual(calculate_physical_score(record), 100.0)

    def test_missing_age_defaults_to_adult_benchmark(self):
        record = RawSkillRecord(pushup_score=40)
        self.assertAlmostEqual(calculate_physical_score(record), 50.0)

    def test_zero_time_scores_best(self):
        record = RawSkillRecord(sprint_50m=0)
        self.assertEqual(calculate_physical_score(record), 100.0)

    def test_renormalizes_over_populated_groups(self):
        """Strength at 10/10 and speed at 5/10 with no endurance data."""
        record = RawSkillRecord(
            pushup_score=70, sprint_50m=13, athlete=AthleteProfile(age=17)
        )
        breakdown = calculate_physical_breakdown(record)
        self.assertNotIn("endurance", breakdown.components)
        self.assertAlmostEqual(breakdown.components["speed_agility"], 50.0)
        self.assertAlmostEqual(breakdown.score, 55 / 70 * 100)

    def test_group_mean_within_strength(self):
        """Pull-ups 10/20 and vertical jump 90/90 average to 7.5/10."""
        record = RawSkillRecord(pullup_score=10, vertical_jump=90)
        self.assertAlmostEqual(calculate_physical_score(record), 75.0)

    def test_endurance_uses_age_tier(self):
        record = RawSkillRecord(run_5k_time=18, athlete=AthleteProfile(age=15))
        self.assertEqual(calculate_physical_score(record), 100.0)

    def test_no_data_and_nan(self):
        self.assertFalse(calculate_physical_breakdown(RawSkillRecord()).populated)
        record = RawSkillRecord(pushup_score=float("nan"))
        breakdown = calculate_physical_breakdown(record)
        self.assertFalse(breakdown.populated)
        self.assertEqual(breakdown.score, 0.0)

    def test_true_zero_is_present(self):
        """Zero push-ups is a real result, not missing data."""
        breakdown = calculate_physical_breakdown(RawSkillRecord(pushup_score=0))
        self.assertTrue(breakdown.populated)
        self.assertEqual(breakdown.score, 0.0)


class TestMentalScore(unittest.TestCase):
    def test_mood_and_sleep(self):
        record = RawSkillRecord(mood_score=8, sleep_score=6)
        self.assertAlmostEqual(calculate_mental_score(record), 70.0)

    def test_single_rating(self):
        self.assertAlmostEqual(calculate_mental_score(RawSkillRecord(mood_score=9)), 90.0)

    def test_empty(self):
        self.assertEqual(calculate_mental_score(RawSkillRecord()), 0.0)


class TestNutritionScore(unittest.TestCase):
    """Personalized deviation scoring and the generic range fallback."""

    def test_on_target_calories(self):
        record = RawSkillRecord(total_calories=2633, athlete=REFERENCE_ATHLETE)
        breakdown = calculate_nutrition_breakdown(
            record, NutritionGoal.MAINTAINING, ActivityLevel.MODERATE, Sex.MALE
        )
        self.assertEqual(breakdown.components["total_calories"], 100.0)
        self.assertEqual(breakdown.score, 100.0)

    def test_personalized_weights(self):
        """Protein on target (25 pts) and fats way off (12.5 pts)."""
        record = RawSkillRecord(protein=112, fats=0, athlete=REFERENCE_ATHLETE)
        fats_score = 100 * math.exp(-1.5)
        expected = (100 * 25 + fats_score * 12.5) / 37.5
        self.assertAlmostEqual(calculate_nutrition_score(record), expected, places=6)

    def test_selectors_change_targets(self):
        record = RawSkillRecord(total_calories=2633, athlete=REFERENCE_ATHLETE)
        maintaining = calculate_nutrition_score(record, "maintaining", "moderate")
        bulking = calculate_nutrition_score(record, "bulking", "moderate")
        self.assertGreater(maintaining, bulking)

    def test_generic_ranges_without_body_metrics(self):
        """Protein 100 g sits halfway through the 50-150 g range."""
        record = RawSkillRecord(protein=100)
        self.assertAlmostEqual(calculate_nutrition_score(record), 50.0)

    def test_generic_ranges_mixed_weights(self):
        record = RawSkillRecord(total_calories=2250, water_intake=3.0)
        self.assertAlmostEqual(calculate_nutrition_score(record), 25 / 37.5 * 100)

    def test_incomplete_profile_uses_generic_ranges(self):
        athlete = AthleteProfile(age=0, height_cm=175, weight_kg=70)
        record = RawSkillRecord(protein=100, athlete=athlete)
        self.assertAlmostEqual(calculate_nutrition_score(record), 50.0)

    def test_generic_range_is_clamped(self):
        record = RawSkillRecord(total_calories=3500, fats=20)
        breakdown = calculate_nutrition_breakdown(record)
        self.assertEqual(breakdown.components["total_calories"], 100.0)
        self.assertEqual(breakdown.components["fats"], 0.0)

    def test_no_intake_recorded(self):
        breakdown = calculate_nutrition_breakdown(RawSkillRecord(athlete=REFERENCE_ATHLETE))
        self.assertFalse(breakdown.populated)
        self.assertEqual(breakdown.score, 0.0)


class TestTechnicalAndTactical(unittest.TestCase):
    def test_technical_groups(self):
        """Batting mean 7/10 at 35 pts and fielding 10/10 at 30 pts."""
        record = RawSkillRecord(batting_grip=8, batting_stance=6, aim=10)
        breakdown = calculate_technical_breakdown(record)
        self.assertAlmostEqual(breakdown.components["batting"], 70.0)
        self.assertNotIn("bowling", breakdown.components)
        self.assertAlmostEqual(breakdown.score, 54.5 / 65 * 100)

    def test_technical_empty(self):
        self.assertEqual(calculate_technical_score(RawSkillRecord()), 0.0)

    def test_tactical_placeholder(self):
        self.assertEqual(calculate_tactical_score(), 65.0)
        self.assertEqual(
            calculate_tactical_score(
                RawSkillRecord(mood_score=1), ScoringConfig(tactical_placeholder_score=50)
            ),
            50.0,
        )

    def test_scoring_config_rejects_out_of_range(self):
        with self.assertRaises(ValueError):
            ScoringConfig(tactical_placeholder_score=120)


class TestOverallProgress(unittest.TestCase):
    """Mean of populated categories plus the tactical placeholder."""

    def test_empty_record_scores_zero(self):
        self.assertEqual(calculate_overall_progress(RawSkillRecord()), 0)
        self.assertEqual(calculate_overall_progress(None), 0)

    def test_includes_tactical_placeholder(self):
        """Mental 75 and tactical 65 average to 70."""
        record = RawSkillRecord(mood_score=8, sleep_score=7)
        self.assertEqual(calculate_overall_progress(record), 70)

    def test_excluding_tactical(self):
        record = RawSkillRecord(mood_score=8, sleep_score=7)
        config = ScoringConfig(include_tactical_placeholder=False)
        self.assertEqual(calculate_overall_progress(record, config=config), 75)

    def test_overall_is_integer_in_range(self):
        record = RawSkillRecord(
            pushup_score=500,
            mood_score=10,
            sleep_score=10,
            protein=150,
            batting_grip=10,
        )
        overall = calculate_overall_progress(record)
        self.assertIsInstance(overall, int)
        self.assertGreaterEqual(overall, 0)
        self.assertLessEqual(overall, 100)
        self.assertEqual(overall, round((100 * 4 + 65) / 5))

    def test_scores_are_pure_and_repeatable(self):
        """Scoring never mutates the record and gives the same answer twice."""
        record = RawSkillRecord(
            pushup_score=55,
            sprint_50m=7.2,
            mood_score=6,
            total_calories=2100,
            protein=90,
            high_catch=7,
            athlete=REFERENCE_ATHLETE,
        )
        snapshot = copy.deepcopy(record)
        first = calculate_category_breakdowns(record, "cutting", "intense", "female")
        second = calculate_category_breakdowns(record, "cutting", "intense", "female")
        self.assertEqual(record, snapshot)
        for category in SkillCategory:
            self.assertEqual(first[category].score, second[category].score)
            self.assertGreaterEqual(first[category].score, 0.0)
            self.assertLessEqual(first[category].score, 100.0)


class TestDisplayHelpers(unittest.TestCase):
    """Cohort comparison, trends, bands and input validation."""

    def test_lower_is_better_comparison_is_inverted(self):
        """A faster sprint maps to a higher percentage."""
        athlete_pct, cohort_pct = compare_with_cohort("sprint_50m", 6, 8)
        self.assertAlmostEqual(athlete_pct, 6 / 7 * 100)
        self.assertAlmostEqual(cohort_pct, 4 / 7 * 100)
        self.assertGreater(athlete_pct, cohort_pct)

    def test_comparison_with_missing_cohort_value(self):
        athlete_pct, cohort_pct = compare_with_cohort("pushup_score", 50, None)
        self.assertEqual(athlete_pct, 50.0)
        self.assertIsNone(cohort_pct)

    def test_normalize_clamps(self):
        self.assertEqual(normalize_to_range(200, "pushup_score"), 100.0)
        self.assertEqual(normalize_to_range(40, "sprint_50m"), 0.0)

    def test_is_present(self):
        self.assertTrue(is_present(0))
        self.assertFalse(is_present(None))
        self.assertFalse(is_present(float("nan")))
        self.assertFalse(is_present(float("inf")))
        self.assertFalse(is_present(True))

    def test_score_trends(self):
        trends = calculate_score_trends({"physical": 70, "mental": 50}, {"physical": 60})
        self.assertEqual(trends, {"physical": 10, "mental": 50})

    def test_score_bands(self):
        self.assertEqual(get_score_band(80), "excellent")
        self.assertEqual(get_score_band(79.9), "good")
        self.assertEqual(get_score_band(40), "fair")
        self.assertEqual(get_score_band(12), "needs_work")

    def test_validate_profile_fields(self):
        self.assertEqual(validate_user_input("age", 4), (False, "Age must be at least 5 years"))
        self.assertEqual(validate_user_input("age", 17), (True, ""))
        self.assertFalse(validate_user_input("weight_kg", "heavy")[0])

    def test_validate_metric_fields(self):
        self.assertEqual(
            validate_user_input("sprint50m", 0),
            (False, "50m Sprint must be greater than 0"),
        )
        self.assertEqual(
            validate_user_input("moodScore", 11), (False, "Mood Score must be at most 10")
        )
        self.assertEqual(validate_user_input("moodScore", ""), (True, ""))
        self.assertEqual(validate_user_input("pushup_score", 45), (True, ""))
        self.assertFalse(validate_user_input("pushupScore", "abc")[0])


if __name__ == "__main__":
    unittest.main()
