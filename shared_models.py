"""
Shared Data Models for PeakScore

This module contains all shared dataclasses, enums and constant tables used
throughout the PeakScore scoring engine, including the metabolic calculator,
the category aggregators, cohort averaging and the command line interface.

Unified data models provide:
- One metric range table used for validation, normalization and comparison
- Immutable benchmark and multiplier tables
- Conversion from the camelCase records stored by the dashboard backend
"""

import re
from dataclasses import dataclass, field, fields
from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Optional, Tuple

# ============================================================================
# ENUMS
# ============================================================================


class NutritionGoal(Enum):
    """Body weight goal selected for nutrition targets"""

    BULKING = "bulking"
    MAINTAINING = "maintaining"
    CUTTING = "cutting"


class ActivityLevel(Enum):
    """Self-reported weekly activity level"""

    SEDENTARY = "sedentary"
    LIGHT = "light"
    MODERATE = "moderate"
    INTENSE = "intense"
    VERY_INTENSE = "very_intense"


class Sex(Enum):
    """Sex used by the Mifflin-St Jeor equation"""

    MALE = "male"
    FEMALE = "female"


class SkillCategory(Enum):
    """Skill domains summarized by a category aggregate score"""

    PHYSICAL = "physical"
    MENTAL = "mental"
    NUTRITION = "nutrition"
    TECHNICAL = "technical"
    TACTICAL = "tactical"


# ============================================================================
# CORE DATA STRUCTURES
# ============================================================================


@dataclass
class AthleteProfile:
    """Athlete demographic and anthropometric data"""

    age: Optional[float] = None  # years
    height_cm: Optional[float] = None
    weight_kg: Optional[float] = None
    name: Optional[str] = None

    @property
    def has_body_metrics(self) -> bool:
        """True when weight, height and age are all usable for metabolic formulas"""
        for value in (self.weight_kg, self.height_cm, self.age):
            if value is None or value != value or value <= 0:
                return False
        return True


@dataclass
class RawSkillRecord:
    """
    One snapshot of athlete test results.

    Every metric is optional. None means "not recorded" and is never treated
    as a zero score.
    """

    # Physical
    pushup_score: Optional[float] = None
    pullup_score: Optional[float] = None
    vertical_jump: Optional[float] = None  # cm
    grip_strength: Optional[float] = None  # kg
    sprint_time: Optional[float] = None  # 100m, seconds
    sprint_50m: Optional[float] = None  # seconds
    shuttle_run: Optional[float] = None  # seconds
    run_5k_time: Optional[float] = None  # minutes
    yoyo_test: Optional[float] = None  # level

    # Mental (1-10)
    mood_score: Optional[float] = None
    sleep_score: Optional[float] = None

    # Nutrition
    total_calories: Optional[float] = None  # kcal
    protein: Optional[float] = None  # g
    carbohydrates: Optional[float] = None  # g
    fats: Optional[float] = None  # g
    water_intake: Optional[float] = None  # L

    # Technical - Batting (0-10)
    batting_grip: Optional[float] = None
    batting_stance: Optional[float] = None
    batting_balance: Optional[float] = None
    cocking_of_wrist: Optional[float] = None
    back_lift: Optional[float] = None
    top_hand_dominance: Optional[float] = None
    high_elbow: Optional[float] = None
    running_between_wickets: Optional[float] = None
    calling: Optional[float] = None

    # Technical - Bowling (0-10)
    bowling_grip: Optional[float] = None
    run_up: Optional[float] = None
    back_foot_landing: Optional[float] = None
    front_foot_landing: Optional[float] = None
    hip_drive: Optional[float] = None
    back_foot_drag: Optional[float] = None
    non_bowling_arm: Optional[float] = None
    release: Optional[float] = None
    follow_through: Optional[float] = None

    # Technical - Fielding (0-10)
    positioning_of_ball: Optional[float] = None
    pick_up: Optional[float] = None
    aim: Optional[float] = None
    throw: Optional[float] = None
    soft_hands: Optional[float] = None
    receiving: Optional[float] = None
    high_catch: Optional[float] = None
    flat_catch: Optional[float] = None

    athlete: Optional[AthleteProfile] = None

    def value(self, metric: str) -> Optional[float]:
        """Raw value for a metric key, None when the metric is unknown or unset"""
        return getattr(self, metric, None) if metric in METRIC_RANGES else None


@dataclass
class CohortAverages:
    """Age-bracket mean of each metric, used for comparison display only"""

    age_group: str
    averages: Dict[str, float] = field(default_factory=dict)
    sample_size: int = 0

    def get(self, metric: str) -> Optional[float]:
        """Cohort mean for a metric, None if the cohort has no data for it"""
        if self.sample_size <= 0:
            return None
        return self.averages.get(metric)


@dataclass
class NutritionTargets:
    """Personalized daily intake targets (derived, never stored)"""

    calories: int
    protein: int  # g
    carbs: int  # g
    fats: int  # g
    water: float  # L

    def for_metric(self, metric: str) -> Optional[float]:
        """Target matching a nutrition metric key of RawSkillRecord"""
        attr = NUTRITION_TARGET_FIELDS.get(metric)
        return getattr(self, attr) if attr else None


@dataclass(frozen=True)
class MetricRange:
    """
    One row of the unit/range table.

    min_value/max_value bound the display and normalization scale,
    input_min/input_max bound what the input forms accept. The benchmark is
    the value that earns a full 10/10 in category scoring; age_benchmarks
    holds (upper age bound exclusive, benchmark) tiers in ascending order.
    """

    key: str
    label: str
    unit: str
    category: SkillCategory
    min_value: float
    max_value: float
    input_min: float
    input_max: float
    step: float = 1.0
    lower_is_better: bool = False
    benchmark: Optional[float] = None
    age_benchmarks: Tuple[Tuple[float, float], ...] = ()
    display_decimals: int = 1


@dataclass(frozen=True)
class MacroSplit:
    """Macronutrient allocation for one nutrition goal"""

    protein_g_per_kg: float
    carbs_g_per_kg: float
    fat_pct: float  # fraction of target calories


@dataclass(frozen=True)
class SkillGroup:
    """Named group of metrics sharing one point budget inside a category"""

    name: str
    points: float
    metrics: Tuple[str, ...]


@dataclass(frozen=True)
class ScoringConfig:
    """
    Explicit engine switches.

    The tactical category has no measured inputs; its placeholder score is
    counted in the overall score only when include_tactical_placeholder is set
    and at least one measured category has data.
    """

    include_tactical_placeholder: bool = True
    tactical_placeholder_score: float = 65.0

    def __post_init__(self):
        """Validate placeholder score range"""
        if not 0 <= self.tactical_placeholder_score <= 100:
            raise ValueError("tactical_placeholder_score must be between 0 and 100")


@dataclass
class CategoryBreakdown:
    """Category aggregate score with its sub-group scores (0-100 each)"""

    category: SkillCategory
    score: float
    populated: bool
    components: Dict[str, float] = field(default_factory=dict)


@dataclass
class CohortComparison:
    """Athlete value and cohort mean mapped onto the same percentage scale"""

    metric: str
    label: str
    unit: str
    athlete_value: Optional[float]
    cohort_value: Optional[float]
    athlete_pct: Optional[float]
    cohort_pct: Optional[float]
    lower_is_better: bool
    age_group: str
    sample_size: int


@dataclass
class PerformanceReport:
    """Complete scoring results for one skill record"""

    record: RawSkillRecord
    goal: NutritionGoal
    activity_level: ActivityLevel
    sex: Sex
    categories: Dict[SkillCategory, CategoryBreakdown]
    overall_score: int
    nutrition_targets: Optional[NutritionTargets] = None
    bmi: Optional[float] = None
    bmi_category: Optional[str] = None
    comparisons: List[CohortComparison] = field(default_factory=list)
    messages: List[str] = field(default_factory=list)  # Calculation explanations

    @property
    def category_scores(self) -> Dict[str, float]:
        return {
            category.value: breakdown.score
            for category, breakdown in self.categories.items()
        }


# ============================================================================
# CONSTANTS AND CONFIGURATIONS
# ============================================================================

# Total daily energy expenditure multipliers
ACTIVITY_MULTIPLIERS = MappingProxyType(
    {
        ActivityLevel.SEDENTARY: 1.20,
        ActivityLevel.LIGHT: 1.375,
        ActivityLevel.MODERATE: 1.55,
        ActivityLevel.INTENSE: 1.725,
        ActivityLevel.VERY_INTENSE: 1.90,
    }
)

# Calorie surplus/deficit applied to TDEE
GOAL_CALORIE_FACTORS = MappingProxyType(
    {
        NutritionGoal.BULKING: 1.15,
        NutritionGoal.MAINTAINING: 1.0,
        NutritionGoal.CUTTING: 0.85,
    }
)

MACRO_SPLITS = MappingProxyType(
    {
        NutritionGoal.BULKING: MacroSplit(2.0, 5.0, 0.20),
        NutritionGoal.MAINTAINING: MacroSplit(1.6, 4.0, 0.25),
        NutritionGoal.CUTTING: MacroSplit(2.2, 3.0, 0.20),
    }
)

# Mifflin-St Jeor sex constant
BMR_SEX_OFFSETS = MappingProxyType({Sex.MALE: 5.0, Sex.FEMALE: -161.0})

CALORIES_PER_GRAM_FAT = 9
WATER_LITERS_PER_KG = 0.035
HIGH_ACTIVITY_WATER_BONUS_L = 0.5
HIGH_ACTIVITY_LEVELS = frozenset({ActivityLevel.INTENSE, ActivityLevel.VERY_INTENSE})

# Exponential decay rate of the deviation scorer
DEVIATION_DECAY_RATE = 1.5

# Age used for age-tiered benchmarks when the profile has no age
DEFAULT_BENCHMARK_AGE = 18

PHYSICAL_GROUPS = (
    SkillGroup(
        "strength",
        40,
        ("pushup_score", "pullup_score", "vertical_jump", "grip_strength"),
    ),
    SkillGroup("speed_agility", 30, ("sprint_50m", "shuttle_run", "sprint_time")),
    SkillGroup("endurance", 30, ("run_5k_time", "yoyo_test")),
)

MENTAL_WEIGHTS = MappingProxyType({"mood_score": 40, "sleep_score": 40})

NUTRITION_WEIGHTS = MappingProxyType(
    {
        "total_calories": 25,
        "protein": 25,
        "carbohydrates": 25,
        "fats": 12.5,
        "water_intake": 12.5,
    }
)

NUTRITION_TARGET_FIELDS = MappingProxyType(
    {
        "total_calories": "calories",
        "protein": "protein",
        "carbohydrates": "carbs",
        "fats": "fats",
        "water_intake": "water",
    }
)

TECHNICAL_GROUPS = (
    SkillGroup(
        "batting",
        35,
        (
            "batting_grip",
            "batting_stance",
            "batting_balance",
            "cocking_of_wrist",
            "back_lift",
            "top_hand_dominance",
            "high_elbow",
            "running_between_wickets",
            "calling",
        ),
    ),
    SkillGroup(
        "bowling",
        35,
        (
            "bowling_grip",
            "run_up",
            "back_foot_landing",
            "front_foot_landing",
            "hip_drive",
            "back_foot_drag",
            "non_bowling_arm",
            "release",
            "follow_through",
        ),
    ),
    SkillGroup(
        "fielding",
        30,
        (
            "positioning_of_ball",
            "pick_up",
            "aim",
            "throw",
            "soft_hands",
            "receiving",
            "high_catch",
            "flat_catch",
        ),
    ),
)

_INF = float("inf")


def _build_metric_ranges():
    # fmt: off
    ranges = [
        # Physical - strength (higher is better)
        MetricRange(
            "pushup_score", "Push-ups", "reps", SkillCategory.PHYSICAL,
            0, 100, 0, 100,
            age_benchmarks=((16, 60), (18, 70), (_INF, 80)),
            display_decimals=0,
        ),
        MetricRange(
            "pullup_score", "Pull-ups", "reps", SkillCategory.PHYSICAL,
            0, 40, 0, 100,
            benchmark=20, display_decimals=0,
        ),
        MetricRange(
            "vertical_jump", "Vertical Jump", "cm", SkillCategory.PHYSICAL,
            0, 120, 0, 150,
            benchmark=90,
        ),
        MetricRange(
            "grip_strength", "Grip Strength", "kg", SkillCategory.PHYSICAL,
            0, 100, 0, 150, step=0.5,
            age_benchmarks=((16, 50), (18, 60), (_INF, 70)),
        ),
        # Physical - speed & agility (lower is better)
        MetricRange(
            "sprint_50m", "50m Sprint", "s", SkillCategory.PHYSICAL,
            5, 12, 0, 60, step=0.1, lower_is_better=True,
            benchmark=6.5, display_decimals=2,
        ),
        MetricRange(
            "shuttle_run", "Shuttle Run", "s", SkillCategory.PHYSICAL,
            8, 20, 0, 120, step=0.1, lower_is_better=True,
            benchmark=12, display_decimals=2,
        ),
        MetricRange(
            "sprint_time", "100m Sprint", "s", SkillCategory.PHYSICAL,
            10, 20, 0, 60, step=0.1, lower_is_better=True,
            benchmark=10, display_decimals=2,
        ),
        # Physical - endurance
        MetricRange(
            "run_5k_time", "5K Run", "min", SkillCategory.PHYSICAL,
            15, 30, 0, 120, step=0.1, lower_is_better=True,
            age_benchmarks=((16, 18), (18, 17), (_INF, 16)),
            display_decimals=2,
        ),
        MetricRange(
            "yoyo_test", "Yo-Yo Test", "level", SkillCategory.PHYSICAL,
            0, 25, 0, 30, step=0.1,
            benchmark=25,
        ),
        # Mental
        MetricRange(
            "mood_score", "Mood Score", "/10", SkillCategory.MENTAL,
            1, 10, 1, 10,
        ),
        MetricRange(
            "sleep_score", "Sleep Quality", "/10", SkillCategory.MENTAL,
            1, 10, 1, 10,
        ),
        # Nutrition - generic ranges used when no body metrics are available
        MetricRange(
            "total_calories", "Total Calories", "kcal", SkillCategory.NUTRITION,
            1500, 3000, 0, 10000, step=10, display_decimals=0,
        ),
        MetricRange(
            "protein", "Protein", "g", SkillCategory.NUTRITION,
            50, 150, 0, 1000,
        ),
        MetricRange(
            "carbohydrates", "Carbohydrates", "g", SkillCategory.NUTRITION,
            150, 400, 0, 2000,
        ),
        MetricRange(
            "fats", "Fats", "g", SkillCategory.NUTRITION,
            50, 100, 0, 500,
        ),
        MetricRange(
            "water_intake", "Water Intake", "L", SkillCategory.NUTRITION,
            0, 3, 0, 15, step=0.1,
        ),
    ]
    # fmt: on

    for group in TECHNICAL_GROUPS:
        for key in group.metrics:
            ranges.append(
                MetricRange(
                    key,
                    key.replace("_", " ").title(),
                    "/10",
                    SkillCategory.TECHNICAL,
                    0, 10, 0, 10,
                )
            )

    return MappingProxyType({metric.key: metric for metric in ranges})


# Single source of truth for every metric: display range, input bounds,
# direction and scoring benchmark
METRIC_RANGES = _build_metric_ranges()

# camelCase keys whose snake_case form is not a plain split on capitals
_FIELD_ALIASES = {
    "sprint50m": "sprint_50m",
    "run5kTime": "run_5k_time",
}

_PROFILE_ALIASES = {
    "age": "age",
    "height": "height_cm",
    "height_cm": "height_cm",
    "heightCm": "height_cm",
    "weight": "weight_kg",
    "weight_kg": "weight_kg",
    "weightKg": "weight_kg",
    "name": "name",
    "studentName": "name",
}


# ============================================================================
# UTILITY FUNCTIONS
# ============================================================================


def to_snake_case(key: str) -> str:
    """Convert a dashboard camelCase metric key to the record field name"""
    if key in _FIELD_ALIASES:
        return _FIELD_ALIASES[key]
    return re.sub(r"(?<!^)(?=[A-Z])", "_", key).lower()


def _coerce_number(key, value):
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError(f"Invalid value for {key}: {value!r}")
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid value for {key}: {value!r}")


def convert_dict_to_athlete_profile(profile_dict: dict) -> AthleteProfile:
    """Convert a student/athlete dict (camelCase or snake_case) to AthleteProfile"""
    values = {}
    for key, value in profile_dict.items():
        attr = _PROFILE_ALIASES.get(key)
        if attr is None:
            continue
        values[attr] = value if attr == "name" else _coerce_number(key, value)
    return AthleteProfile(**values)


def convert_dict_to_skill_record(
    skill_dict: dict, athlete: Optional[dict] = None
) -> RawSkillRecord:
    """
    Convert a stored skills dict to a RawSkillRecord.

    Accepts camelCase or snake_case metric keys and ignores keys that are not
    metrics (ids, timestamps). The athlete profile may be embedded under
    "student"/"athlete" or passed separately.
    """
    record_fields = {f.name for f in fields(RawSkillRecord)}
    values = {}
    for key, value in skill_dict.items():
        if key in ("student", "athlete"):
            continue
        attr = to_snake_case(key)
        if attr in record_fields and attr in METRIC_RANGES:
            values[attr] = _coerce_number(key, value)

    profile_dict = athlete
    if profile_dict is None:
        profile_dict = skill_dict.get("athlete") or skill_dict.get("student")
    if isinstance(profile_dict, AthleteProfile):
        values["athlete"] = profile_dict
    elif profile_dict:
        values["athlete"] = convert_dict_to_athlete_profile(profile_dict)

    return RawSkillRecord(**values)


def convert_dict_to_cohort_averages(cohort_dict: dict) -> CohortAverages:
    """Convert an analytics payload ({ageGroup, averages, sampleSize}) to CohortAverages"""
    averages = {}
    for key, value in (cohort_dict.get("averages") or {}).items():
        attr = to_snake_case(key)
        if attr in METRIC_RANGES and value is not None:
            averages[attr] = _coerce_number(key, value)

    return CohortAverages(
        age_group=cohort_dict.get("ageGroup", cohort_dict.get("age_group", "")),
        averages=averages,
        sample_size=int(
            cohort_dict.get("sampleSize", cohort_dict.get("sample_size", 0))
        ),
    )
