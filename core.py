"""
Core PeakScore Scoring Logic

This module contains the scoring engine that turns a raw skill record (reps,
times, distances, self-ratings, macronutrient grams, technique ratings) into
0-100 category scores and one overall performance score. Every scoring
function is pure: it only reads its arguments and returns new values.

Sections:
- Presence checks, benchmarks and range normalization
- Deviation scoring and the shared weighted-average helper
- Category aggregators (physical, mental, nutrition, technical, tactical)
- Overall progress, cohort comparison, trends and score bands
- Input validation and configuration loading
- Main scoring functions
"""

import json
import logging
import os

import numpy as np
import pandas as pd
from jsonschema import ValidationError, validate

from metabolic import calculate_bmi, compute_targets, get_bmi_category
from shared_models import (
    DEFAULT_BENCHMARK_AGE,
    DEVIATION_DECAY_RATE,
    MENTAL_WEIGHTS,
    METRIC_RANGES,
    NUTRITION_WEIGHTS,
    PHYSICAL_GROUPS,
    TECHNICAL_GROUPS,
    ActivityLevel,
    CategoryBreakdown,
    CohortComparison,
    NutritionGoal,
    PerformanceReport,
    ScoringConfig,
    Sex,
    SkillCategory,
    convert_dict_to_cohort_averages,
    convert_dict_to_skill_record,
    to_snake_case,
)

logger = logging.getLogger(__name__)

# Lower bound of each score band, checked from the top
SCORE_BANDS = (
    (80, "excellent"),
    (60, "good"),
    (40, "fair"),
)

# Profile field bounds for input validation
PROFILE_LIMITS = {
    "age": (5, 100, "Age", "years"),
    "height_cm": (50, 250, "Height", "cm"),
    "weight_kg": (15, 250, "Weight", "kg"),
}

_GOAL_ALIASES = {
    "bulk": NutritionGoal.BULKING,
    "bulking": NutritionGoal.BULKING,
    "maintain": NutritionGoal.MAINTAINING,
    "maintaining": NutritionGoal.MAINTAINING,
    "maintenance": NutritionGoal.MAINTAINING,
    "cut": NutritionGoal.CUTTING,
    "cutting": NutritionGoal.CUTTING,
}

_SEX_ALIASES = {
    "m": Sex.MALE,
    "male": Sex.MALE,
    "f": Sex.FEMALE,
    "female": Sex.FEMALE,
}

# JSON Schema for configuration validation
CONFIG_SCHEMA = {
    "type": "object",
    "required": ["skills"],
    "properties": {
        "athlete": {
            "type": "object",
            "properties": {
                "name": {"type": "string"},
                "age": {"type": "number", "minimum": 5, "maximum": 100},
                "height": {"type": "number", "exclusiveMinimum": 0},
                "weight": {"type": "number", "exclusiveMinimum": 0},
            },
            "additionalProperties": False,
        },
        "skills": {
            "type": "object",
            "additionalProperties": {"type": ["number", "null"], "minimum": 0},
        },
        "selectors": {
            "type": "object",
            "properties": {
                "goal": {
                    "type": "string",
                    "enum": [goal.value for goal in NutritionGoal],
                },
                "activity_level": {
                    "type": "string",
                    "enum": [level.value for level in ActivityLevel],
                },
                "sex": {"type": "string", "enum": [sex.value for sex in Sex]},
            },
            "additionalProperties": False,
        },
        "cohort": {
            "type": "object",
            "required": ["averages", "sampleSize"],
            "properties": {
                "ageGroup": {"type": "string"},
                "averages": {
                    "type": "object",
                    "additionalProperties": {"type": "number"},
                },
                "sampleSize": {"type": "integer", "minimum": 0},
            },
            "additionalProperties": False,
        },
    },
    "additionalProperties": False,
}


class ScoringInputError(ValueError):
    """Raised when a configuration passes the schema but cannot be scored"""

    pass


# ---------------------------------------------------------------------------
# PRESENCE CHECKS, BENCHMARKS AND NORMALIZATION
# ---------------------------------------------------------------------------


def is_present(value):
    """
    Checks whether a metric value was actually recorded.

    None, NaN and infinite values count as absent. Zero is a real value.
    """
    if value is None or isinstance(value, bool):
        return False
    try:
        return bool(np.isfinite(value))
    except TypeError:
        return False


def clamp_score(value, lower=0.0, upper=100.0):
    """Clamps a score into [lower, upper]; absent or NaN input becomes lower."""
    if not is_present(value):
        return float(lower)
    return float(np.clip(value, lower, upper))


def get_benchmark(metric, age=None):
    """
    Returns the value that earns a full 10/10 for a metric.

    Age-tiered benchmarks use the first tier whose upper age bound is above
    the athlete's age. Missing age falls back to DEFAULT_BENCHMARK_AGE.

    Args:
        metric (str): Metric key from METRIC_RANGES.
        age (float): Athlete age in years (optional).

    Returns:
        float: Benchmark value, or None if the metric has no benchmark.
    """
    metric_range = METRIC_RANGES[metric]
    if not metric_range.age_benchmarks:
        return metric_range.benchmark

    if not is_present(age):
        age = DEFAULT_BENCHMARK_AGE
    for upper_age, benchmark in metric_range.age_benchmarks:
        if age < upper_age:
            return benchmark
    return metric_range.age_benchmarks[-1][1]


def score_against_benchmark(value, benchmark, lower_is_better=False):
    """
    Scores a raw value on a 0-10 scale relative to its benchmark.

    Higher-is-better metrics score value/benchmark*10. Lower-is-better metrics
    (times) score benchmark/value*10, and a recorded time of 0 or less counts
    as the best possible result. The result is clamped to [0, 10].
    """
    if lower_is_better:
        if value <= 0:
            return 10.0
        ratio = benchmark / value
    else:
        ratio = value / benchmark
    return float(np.clip(ratio * 10, 0, 10))


def normalize_to_range(value, metric):
    """
    Maps a raw value onto the metric's [min, max] range as a 0-100 percentage.

    Lower-is-better metrics are inverted so that 100 always means "best".
    Returns None for absent values.
    """
    if not is_present(value):
        return None
    metric_range = METRIC_RANGES[metric]
    span = metric_range.max_value - metric_range.min_value
    if span <= 0:
        return 0.0

    if metric_range.lower_is_better:
        pct = (metric_range.max_value - value) / span * 100
    else:
        pct = (value - metric_range.min_value) / span * 100
    return clamp_score(pct)


# ---------------------------------------------------------------------------
# DEVIATION SCORING AND WEIGHTED AVERAGING
# ---------------------------------------------------------------------------


def closeness(actual, target):
    """
    Scores how close an intake is to its target with exponential decay.

    score = 100 * exp(-1.5 * |actual - target| / target)

    The curve is forgiving near the target (12% off scores about 83) and
    punishes large misses (50% off scores about 47).

    Args:
        actual (float): Recorded intake.
        target (float): Personalized target.

    Returns:
        float: Score in [0, 100]; 0 when the target is zero or missing.
    """
    if not is_present(actual) or not is_present(target) or target <= 0:
        return 0.0
    deviation = abs(actual - target) / target
    return clamp_score(100 * np.exp(-DEVIATION_DECAY_RATE * deviation))


def weighted_average(scores, weights, scale=10.0):
    """
    Combines present sub-scores into a 0-100 score re-normalized over the
    weights that are actually present.

    Each score is clamped to [0, scale] and contributes score/scale of its
    weight. The awarded points are divided by the sum of present weights, so
    a record with data in only one group can still reach 100.

    Args:
        scores (iterable): Sub-scores on a 0-scale range.
        weights (iterable): Point budget of each sub-score.
        scale (float): Maximum of the sub-score scale (10 or 100).

    Returns:
        float: Score in [0, 100]; 0 for empty input.
    """
    scores = np.asarray(list(scores), dtype=float)
    weights = np.asarray(list(weights), dtype=float)
    if scores.shape != weights.shape:
        raise ValueError("scores and weights must have the same length")
    if scores.size == 0:
        return 0.0

    total_weight = weights.sum()
    if total_weight <= 0:
        return 0.0

    fractions = np.clip(scores, 0, scale) / scale
    return clamp_score(100 * float((fractions * weights).sum()) / total_weight)


# ---------------------------------------------------------------------------
# CATEGORY AGGREGATORS
# ---------------------------------------------------------------------------


def _present_metrics(record, metrics):
    """Returns {metric: value} for the metrics the record actually has."""
    if record is None:
        return {}
    present = {}
    for metric in metrics:
        value = record.value(metric)
        if is_present(value):
            present[metric] = float(value)
    return present


def _athlete_age(record):
    if record is None or record.athlete is None:
        return None
    return record.athlete.age


def _score_groups(groups, sub_scores):
    """Averages 0-10 sub-scores per group and weights groups by their points."""
    group_means = []
    group_points = []
    components = {}
    for group in groups:
        present = [
            sub_scores[metric] for metric in group.metrics if metric in sub_scores
        ]
        if not present:
            continue
        group_mean = float(np.mean(present))
        group_means.append(group_mean)
        group_points.append(group.points)
        components[group.name] = group_mean * 10

    return weighted_average(group_means, group_points, scale=10.0), components


def _group_metrics(groups):
    return [metric for group in groups for metric in group.metrics]


def calculate_physical_breakdown(record):
    """
    Physical score from strength (40 pts), speed & agility (30 pts) and
    endurance (30 pts).

    Each metric is scored 0-10 against its (possibly age-tiered) benchmark,
    averaged within its group, and the groups are re-normalized over the ones
    that have data.
    """
    age = _athlete_age(record)
    sub_scores = {}
    present = _present_metrics(record, _group_metrics(PHYSICAL_GROUPS))
    for metric, value in present.items():
        sub_scores[metric] = score_against_benchmark(
            value,
            get_benchmark(metric, age),
            METRIC_RANGES[metric].lower_is_better,
        )

    score, components = _score_groups(PHYSICAL_GROUPS, sub_scores)
    return CategoryBreakdown(
        category=SkillCategory.PHYSICAL,
        score=score,
        populated=bool(sub_scores),
        components=components,
    )


def calculate_mental_breakdown(record):
    """Mental score: mood and sleep ratings (1-10) at 40 points each."""
    present = _present_metrics(record, MENTAL_WEIGHTS.keys())
    sub_scores = {
        metric: clamp_score(value, 0, 10) for metric, value in present.items()
    }

    score = weighted_average(
        sub_scores.values(), [MENTAL_WEIGHTS[metric] for metric in sub_scores]
    )
    return CategoryBreakdown(
        category=SkillCategory.MENTAL,
        score=score,
        populated=bool(sub_scores),
        components={metric: value * 10 for metric, value in sub_scores.items()},
    )


def get_nutrition_targets(
    record,
    goal=NutritionGoal.MAINTAINING,
    activity_level=ActivityLevel.MODERATE,
    sex=Sex.MALE,
):
    """
    Personalized nutrition targets for the record's athlete.

    Returns None when the profile lacks weight, height or age, in which case
    nutrition is scored against generic ranges instead.
    """
    if record is None or record.athlete is None or not record.athlete.has_body_metrics:
        return None
    athlete = record.athlete
    return compute_targets(
        athlete.weight_kg, athlete.height_cm, athlete.age, goal, activity_level, sex
    )


def calculate_nutrition_breakdown(
    record,
    goal=NutritionGoal.MAINTAINING,
    activity_level=ActivityLevel.MODERATE,
    sex=Sex.MALE,
):
    """
    Nutrition score from calories, protein, carbs (25 pts each), fats and
    water (12.5 pts each).

    With body metrics every present intake is scored with the deviation curve
    against its personalized target. Without them each intake is mapped
    linearly onto a generic min-max range.
    """
    present = _present_metrics(record, NUTRITION_WEIGHTS.keys())
    if not present:
        return CategoryBreakdown(SkillCategory.NUTRITION, 0.0, False)

    targets = get_nutrition_targets(record, goal, activity_level, sex)
    if targets is None:
        logger.debug("No body metrics available, using generic nutrition ranges")
        sub_scores = {
            metric: normalize_to_range(value, metric)
            for metric, value in present.items()
        }
    else:
        sub_scores = {
            metric: closeness(value, targets.for_metric(metric))
            for metric, value in present.items()
        }

    score = weighted_average(
        sub_scores.values(),
        [NUTRITION_WEIGHTS[metric] for metric in sub_scores],
        scale=100.0,
    )
    return CategoryBreakdown(
        category=SkillCategory.NUTRITION,
        score=score,
        populated=True,
        components=sub_scores,
    )


def calculate_technical_breakdown(record):
    """
    Technical score from batting (35 pts), bowling (35 pts) and fielding
    (30 pts) technique ratings, each already on a 0-10 scale.
    """
    present = _present_metrics(record, _group_metrics(TECHNICAL_GROUPS))
    sub_scores = {
        metric: clamp_score(value, 0, 10) for metric, value in present.items()
    }

    score, components = _score_groups(TECHNICAL_GROUPS, sub_scores)
    return CategoryBreakdown(
        category=SkillCategory.TECHNICAL,
        score=score,
        populated=bool(sub_scores),
        components=components,
    )


def calculate_tactical_breakdown(record=None, config=None):
    """
    Tactical placeholder.

    There are no measured tactical inputs yet, so the score is the configured
    constant (65 by default) whatever the record holds.
    """
    config = config or ScoringConfig()
    return CategoryBreakdown(
        category=SkillCategory.TACTICAL,
        score=clamp_score(config.tactical_placeholder_score),
        populated=config.include_tactical_placeholder,
    )


def calculate_physical_score(record):
    return calculate_physical_breakdown(record).score


def calculate_mental_score(record):
    return calculate_mental_breakdown(record).score


def calculate_nutrition_score(
    record,
    goal=NutritionGoal.MAINTAINING,
    activity_level=ActivityLevel.MODERATE,
    sex=Sex.MALE,
):
    return calculate_nutrition_breakdown(record, goal, activity_level, sex).score


def calculate_technical_score(record):
    return calculate_technical_breakdown(record).score


def calculate_tactical_score(record=None, config=None):
    return calculate_tactical_breakdown(record, config).score


def calculate_category_breakdowns(
    record,
    goal=NutritionGoal.MAINTAINING,
    activity_level=ActivityLevel.MODERATE,
    sex=Sex.MALE,
    config=None,
):
    """Runs all five category aggregators, keyed by SkillCategory."""
    return {
        SkillCategory.PHYSICAL: calculate_physical_breakdown(record),
        SkillCategory.MENTAL: calculate_mental_breakdown(record),
        SkillCategory.NUTRITION: calculate_nutrition_breakdown(
            record, goal, activity_level, sex
        ),
        SkillCategory.TECHNICAL: calculate_technical_breakdown(record),
        SkillCategory.TACTICAL: calculate_tactical_breakdown(record, config),
    }


# ---------------------------------------------------------------------------
# OVERALL PROGRESS, COHORT COMPARISON AND TRENDS
# ---------------------------------------------------------------------------


def overall_from_breakdowns(breakdowns, config=None):
    """
    Averages the populated category scores into one rounded 0-100 figure.

    The tactical placeholder only counts when the config includes it and at
    least one measured category has data, so an empty record scores 0.
    """
    config = config or ScoringConfig()
    measured = [
        breakdown.score
        for category, breakdown in breakdowns.items()
        if category != SkillCategory.TACTICAL and breakdown.populated
    ]
    if not measured:
        return 0

    tactical = breakdowns.get(SkillCategory.TACTICAL)
    if config.include_tactical_placeholder and tactical is not None:
        measured.append(tactical.score)

    return int(round(clamp_score(np.mean(measured))))


def calculate_overall_progress(
    record,
    goal=NutritionGoal.MAINTAINING,
    activity_level=ActivityLevel.MODERATE,
    sex=Sex.MALE,
    config=None,
):
    """
    Overall performance score for a record.

    Args:
        record (RawSkillRecord): Skill snapshot (may be None).
        goal (NutritionGoal or str): Nutrition goal selector.
        activity_level (ActivityLevel or str): Activity level selector.
        sex (Sex or str): Sex selector.
        config (ScoringConfig): Tactical placeholder options.

    Returns:
        int: Mean of populated category scores, rounded, in [0, 100].
    """
    breakdowns = calculate_category_breakdowns(
        record, goal, activity_level, sex, config
    )
    return overall_from_breakdowns(breakdowns, config)


def compare_with_cohort(metric, value, cohort_value):
    """
    Maps an athlete value and a cohort mean onto the same percentage scale.

    Uses the metric's range from METRIC_RANGES, inverted for lower-is-better
    metrics. Display only: the result never feeds back into scoring.

    Returns:
        tuple: (athlete_pct, cohort_pct), each None when its value is absent.
    """
    return normalize_to_range(value, metric), normalize_to_range(cohort_value, metric)


def build_cohort_comparisons(record, cohort):
    """
    Side-by-side comparisons for every metric where the athlete or the
    cohort has a value. An empty cohort (sample size 0) yields no comparisons.
    """
    if cohort is None or cohort.sample_size <= 0:
        return []

    comparisons = []
    for metric, metric_range in METRIC_RANGES.items():
        value = record.value(metric) if record is not None else None
        value = float(value) if is_present(value) else None
        cohort_value = cohort.get(metric)
        cohort_value = float(cohort_value) if is_present(cohort_value) else None
        if value is None and cohort_value is None:
            continue

        athlete_pct, cohort_pct = compare_with_cohort(metric, value, cohort_value)
        comparisons.append(
            CohortComparison(
                metric=metric,
                label=metric_range.label,
                unit=metric_range.unit,
                athlete_value=value,
                cohort_value=cohort_value,
                athlete_pct=athlete_pct,
                cohort_pct=cohort_pct,
                lower_is_better=metric_range.lower_is_better,
                age_group=cohort.age_group,
                sample_size=cohort.sample_size,
            )
        )
    return comparisons


def calculate_score_trends(current_scores, previous_scores):
    """
    Per-category change between two snapshots.

    Args:
        current_scores (dict): Category name -> score for the latest snapshot.
        previous_scores (dict): Category name -> score for the earlier one.
            Missing categories count as 0.

    Returns:
        dict: Category name -> current minus previous.
    """
    previous_scores = previous_scores or {}
    return {
        category: score - previous_scores.get(category, 0)
        for category, score in current_scores.items()
    }


def get_score_band(score):
    """Labels a 0-100 score as excellent, good, fair or needs_work."""
    for lower_bound, band in SCORE_BANDS:
        if score >= lower_bound:
            return band
    return "needs_work"


# ---------------------------------------------------------------------------
# INPUT VALIDATION AND CONFIGURATION
# ---------------------------------------------------------------------------


def _format_bound(value):
    return f"{value:g}"


def validate_user_input(field_name, value):
    """
    Validates user input for real-time feedback in the score entry forms.

    Metric fields are checked against the input bounds of METRIC_RANGES,
    profile fields against PROFILE_LIMITS. Empty metric input is valid since
    every metric is optional.

    Args:
        field_name (str): Metric key (snake_case or camelCase) or profile field
        value: The value to validate

    Returns:
        tuple: (is_valid, error_message)
    """
    if field_name in PROFILE_LIMITS:
        minimum, maximum, label, unit = PROFILE_LIMITS[field_name]
        try:
            number = float(value)
        except (ValueError, TypeError):
            return False, "Please enter a valid number"
        if number < minimum:
            return False, f"{label} must be at least {_format_bound(minimum)} {unit}"
        if number > maximum:
            return False, f"{label} must be at most {_format_bound(maximum)} {unit}"
        return True, ""

    metric = to_snake_case(field_name)
    if metric not in METRIC_RANGES:
        return True, ""

    if value is None or value == "":
        return True, ""

    metric_range = METRIC_RANGES[metric]
    try:
        number = float(value)
    except (ValueError, TypeError):
        return False, "Please enter a valid number"
    if not np.isfinite(number):
        return False, "Please enter a valid number"

    if metric_range.lower_is_better and number <= 0:
        return False, f"{metric_range.label} must be greater than 0"
    if number < metric_range.input_min:
        return (
            False,
            f"{metric_range.label} must be at least "
            f"{_format_bound(metric_range.input_min)}",
        )
    if number > metric_range.input_max:
        return (
            False,
            f"{metric_range.label} must be at most "
            f"{_format_bound(metric_range.input_max)}",
        )
    return True, ""


def parse_goal(goal_str):
    """
    Converts a user-friendly goal string to NutritionGoal.

    Raises:
        ValueError: If the goal string is not recognized
    """
    if isinstance(goal_str, NutritionGoal):
        return goal_str
    goal = _GOAL_ALIASES.get(str(goal_str).strip().lower())
    if goal is None:
        raise ValueError(
            f"Unrecognized goal: {goal_str}. "
            "Use 'bulking', 'maintaining', or 'cutting'."
        )
    return goal


def parse_activity_level(activity_str):
    """
    Converts a user-friendly activity level string to ActivityLevel.

    Accepts spaces or dashes in place of underscores (e.g. "very intense").

    Raises:
        ValueError: If the activity level is not recognized
    """
    if isinstance(activity_str, ActivityLevel):
        return activity_str
    normalized = str(activity_str).strip().lower().replace("-", "_").replace(" ", "_")
    try:
        return ActivityLevel(normalized)
    except ValueError:
        valid = ", ".join(level.value for level in ActivityLevel)
        raise ValueError(
            f"Unrecognized activity level: {activity_str}. Use one of: {valid}."
        )


def parse_sex(sex_str):
    """
    Converts a user-friendly sex string to Sex.

    Raises:
        ValueError: If the string is not recognized
    """
    if isinstance(sex_str, Sex):
        return sex_str
    sex = _SEX_ALIASES.get(str(sex_str).strip().lower())
    if sex is None:
        raise ValueError(
            f"Unrecognized sex: {sex_str}. Use 'm', 'f', 'male', or 'female'."
        )
    return sex


def load_config_json(config_path, quiet=False):
    """
    Loads and validates a JSON scoring configuration file.

    Args:
        config_path (str): Path to the JSON configuration file.
        quiet (bool): If True, suppress print statements

    Returns:
        dict: Configuration with athlete, skills, selectors and cohort sections.

    Raises:
        FileNotFoundError: If the config file doesn't exist.
        json.JSONDecodeError: If the JSON is malformed.
        ValidationError: If the JSON doesn't match the required schema.
    """
    if not quiet:
        print(f"Loading configuration from {config_path}...")

    if not os.path.exists(config_path):
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, "r") as f:
        config = json.load(f)

    validate(config, CONFIG_SCHEMA)

    if not quiet:
        print(f"Successfully loaded config with {len(config['skills'])} skill entries")
    return config


def extract_data_from_config(config):
    """
    Extracts the skill record, selectors and cohort averages from a config.

    Args:
        config (dict): Validated configuration dictionary

    Returns:
        tuple: (record, goal, activity_level, sex, cohort)

    Raises:
        ScoringInputError: If the skills section names unknown metrics
    """
    skills = config["skills"]
    unknown = sorted(key for key in skills if to_snake_case(key) not in METRIC_RANGES)
    if unknown:
        raise ScoringInputError(f"Unknown skill metrics: {', '.join(unknown)}")

    record = convert_dict_to_skill_record(skills, athlete=config.get("athlete"))

    selectors = config.get("selectors", {})
    goal = parse_goal(selectors.get("goal", NutritionGoal.MAINTAINING.value))
    activity_level = parse_activity_level(
        selectors.get("activity_level", ActivityLevel.MODERATE.value)
    )
    sex = parse_sex(selectors.get("sex", Sex.MALE.value))

    cohort = None
    if "cohort" in config:
        cohort = convert_dict_to_cohort_averages(config["cohort"])

    return record, goal, activity_level, sex, cohort


# ---------------------------------------------------------------------------
# MAIN SCORING FUNCTIONS
# ---------------------------------------------------------------------------


def run_scoring_from_data(
    record,
    goal=NutritionGoal.MAINTAINING,
    activity_level=ActivityLevel.MODERATE,
    sex=Sex.MALE,
    cohort=None,
    config=None,
):
    """
    Scores one record directly from data objects (for the dashboard API).

    Args:
        record (RawSkillRecord): Skill snapshot to score
        goal, activity_level, sex: Session selectors (enum or string)
        cohort (CohortAverages): Age-bracket averages for comparison (optional)
        config (ScoringConfig): Engine switches (optional)

    Returns:
        PerformanceReport: Category breakdowns, overall score, targets,
            BMI, cohort comparisons and explanation messages.
    """
    goal = parse_goal(goal)
    activity_level = parse_activity_level(activity_level)
    sex = parse_sex(sex)
    config = config or ScoringConfig()

    breakdowns = calculate_category_breakdowns(
        record, goal, activity_level, sex, config
    )
    overall = overall_from_breakdowns(breakdowns, config)
    targets = get_nutrition_targets(record, goal, activity_level, sex)

    athlete = record.athlete if record is not None else None
    bmi = None
    if (
        athlete is not None
        and is_present(athlete.weight_kg)
        and is_present(athlete.height_cm)
    ):
        bmi = calculate_bmi(athlete.weight_kg, athlete.height_cm)

    messages = []
    empty = [
        category.value
        for category, breakdown in breakdowns.items()
        if category != SkillCategory.TACTICAL and not breakdown.populated
    ]
    if empty:
        messages.append(f"No data recorded for: {', '.join(empty)}")
    if breakdowns[SkillCategory.NUTRITION].populated:
        if targets is None:
            messages.append(
                "Nutrition scored against generic ranges (add age, height and weight "
                "for personalized targets)"
            )
        else:
            messages.append(
                f"Nutrition scored against personalized {goal.value} targets "
                f"({activity_level.value} activity)"
            )
    if config.include_tactical_placeholder and overall > 0:
        messages.append(
            f"Overall includes the tactical placeholder score of "
            f"{config.tactical_placeholder_score:g}"
        )

    comparisons = build_cohort_comparisons(record, cohort)
    if cohort is not None and not comparisons:
        logger.info(
            f"No cohort comparison available for age group '{cohort.age_group}'"
        )

    logger.info(f"Scored record: overall {overall}")
    return PerformanceReport(
        record=record,
        goal=goal,
        activity_level=activity_level,
        sex=sex,
        categories=breakdowns,
        overall_score=overall,
        nutrition_targets=targets,
        bmi=bmi,
        bmi_category=get_bmi_category(bmi),
        comparisons=comparisons,
        messages=messages,
    )


def create_category_table(report):
    """
    Builds a DataFrame with one row per category: score, band, whether it
    had data, and its sub-group scores.
    """
    rows = []
    for category, breakdown in report.categories.items():
        row = {
            "category": category.value,
            "score": round(breakdown.score, 1),
            "band": get_score_band(breakdown.score),
            "populated": breakdown.populated,
        }
        for name, value in breakdown.components.items():
            row[name] = round(value, 1)
        rows.append(row)
    rows.append(
        {
            "category": "overall",
            "score": report.overall_score,
            "band": get_score_band(report.overall_score),
            "populated": report.overall_score > 0,
        }
    )
    return pd.DataFrame(rows)


def create_comparison_table(report):
    """DataFrame of cohort comparisons (empty when no cohort was supplied)."""
    columns = ["metric", "unit", "athlete", "cohort", "athlete_pct", "cohort_pct"]
    rows = [
        {
            "metric": comparison.label,
            "unit": comparison.unit,
            "athlete": comparison.athlete_value,
            "cohort": comparison.cohort_value,
            "athlete_pct": comparison.athlete_pct,
            "cohort_pct": comparison.cohort_pct,
        }
        for comparison in report.comparisons
    ]
    return pd.DataFrame(rows, columns=columns)


def _display(value):
    return value if value is not None else "N/A"


def _print_report(report):
    athlete = report.record.athlete
    print("Athlete:")
    if athlete is not None:
        print(f"  - Name: {athlete.name or 'N/A'}")
        print(f"  - Age: {_display(athlete.age)}")
        print(f"  - Height: {_display(athlete.height_cm)} cm")
        print(f"  - Weight: {_display(athlete.weight_kg)} kg")
    else:
        print("  - No profile supplied")
    if report.bmi is not None:
        print(f"  - BMI: {report.bmi} ({report.bmi_category})")

    print("\nSelectors:")
    print(f"  - Goal: {report.goal.value}")
    print(f"  - Activity Level: {report.activity_level.value}")
    print(f"  - Sex: {report.sex.value}")

    if report.nutrition_targets is not None:
        targets = report.nutrition_targets
        print("\n--- Nutrition Targets ---")
        print(f"  Calories: {targets.calories} kcal")
        print(f"  Protein:  {targets.protein} g")
        print(f"  Carbs:    {targets.carbs} g")
        print(f"  Fats:     {targets.fats} g")
        print(f"  Water:    {targets.water} L")

    print("\n--- Category Scores ---")
    table = create_category_table(report)
    print(table.to_string(index=False, na_rep=""))

    if report.comparisons:
        print("\n--- Cohort Comparison ---")
        comparisons = create_comparison_table(report)
        print(comparisons.to_string(index=False, na_rep="N/A", float_format="%.1f"))

    if report.messages:
        print("\nNotes:")
        for message in report.messages:
            print(f"  - {message}")


def run_scoring(
    config_path="example_skills.json",
    goal_override=None,
    activity_override=None,
    sex_override=None,
    scoring_config=None,
    csv_path=None,
    return_results=False,
):
    """
    Main function that scores a skill record from a JSON configuration file.

    Args:
        config_path (str): Path to JSON configuration file
        goal_override (str): Replace the goal selector from the file
        activity_override (str): Replace the activity level selector
        sex_override (str): Replace the sex selector
        scoring_config (ScoringConfig): Engine switches
        csv_path (str): If given, write the category table to this CSV file
        return_results (bool): If True, return the PerformanceReport instead
            of printing it

    Returns:
        int or PerformanceReport: Exit code (0 for success, 1 for error) if
            return_results=False, otherwise the report.
    """
    if not return_results:
        print("PeakScore Athlete Performance Scoring")
        print("=" * 40)

    try:
        config = load_config_json(config_path, quiet=return_results)
        record, goal, activity_level, sex, cohort = extract_data_from_config(config)

        if goal_override:
            goal = parse_goal(goal_override)
        if activity_override:
            activity_level = parse_activity_level(activity_override)
        if sex_override:
            sex = parse_sex(sex_override)

        report = run_scoring_from_data(
            record, goal, activity_level, sex, cohort=cohort, config=scoring_config
        )

        if csv_path:
            create_category_table(report).to_csv(csv_path, index=False)

        if return_results:
            return report

        print()
        _print_report(report)
        print(
            f"\nOverall PeakScore: {report.overall_score}/100 "
            f"({get_score_band(report.overall_score)})"
        )
        if csv_path:
            print(f"Category table written to {csv_path}")
        return 0

    except (
        FileNotFoundError,
        json.JSONDecodeError,
        ValidationError,
        ValueError,
    ) as e:
        if return_results:
            raise e
        print(f"Error: {e}")
        print(f"\nPlease check your configuration file: {config_path}")
        return 1
