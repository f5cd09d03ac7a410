"""
Metabolic Calculator for Personalized Nutrition Targets

Derives daily calorie, macronutrient and water targets from body metrics using
standard sports nutrition formulas:

- BMR: Mifflin-St Jeor equation (Mifflin et al., 1990)
- TDEE: BMR scaled by an activity multiplier (1.2 sedentary to 1.9 very intense)
- Goal adjustment: +15% surplus for bulking, -15% deficit for cutting
- Protein/carbohydrate targets in g/kg bodyweight, fat as a share of calories
- Water: 35 ml/kg bodyweight plus 0.5 L on high activity days

Calorie and macro targets are computed independently: protein and carbohydrate
grams come from bodyweight, calories come from TDEE, and the macro calories are
not reconciled against the calorie target.
"""

import logging
from typing import Dict, Optional

from shared_models import (
    ACTIVITY_MULTIPLIERS,
    BMR_SEX_OFFSETS,
    CALORIES_PER_GRAM_FAT,
    GOAL_CALORIE_FACTORS,
    HIGH_ACTIVITY_LEVELS,
    HIGH_ACTIVITY_WATER_BONUS_L,
    MACRO_SPLITS,
    WATER_LITERS_PER_KG,
    ActivityLevel,
    NutritionGoal,
    NutritionTargets,
    Sex,
)

logger = logging.getLogger(__name__)

# BMI category upper bounds (WHO adult classification)
BMI_CATEGORIES = (
    (18.5, "Underweight"),
    (25.0, "Normal"),
    (30.0, "Overweight"),
)


def calculate_bmr(weight_kg, height_cm, age_years, sex=Sex.MALE):
    """
    Calculates Basal Metabolic Rate with the Mifflin-St Jeor equation.

    Args:
        weight_kg (float): Body weight in kilograms.
        height_cm (float): Height in centimeters.
        age_years (float): Age in years.
        sex (Sex or str): 'male' adds 5 kcal, 'female' subtracts 161 kcal.

    Returns:
        float: BMR in kcal/day.
    """
    base = 10 * weight_kg + 6.25 * height_cm - 5 * age_years
    return base + BMR_SEX_OFFSETS[Sex(sex)]


def calculate_tdee(bmr, activity_level=ActivityLevel.MODERATE):
    """Total daily energy expenditure: BMR times the activity multiplier."""
    return bmr * ACTIVITY_MULTIPLIERS[ActivityLevel(activity_level)]


def calculate_goal_calories(tdee, goal=NutritionGoal.MAINTAINING):
    """Target calorie intake after the goal surplus/deficit."""
    return tdee * GOAL_CALORIE_FACTORS[NutritionGoal(goal)]


def calculate_macro_targets(weight_kg, target_calories, goal) -> Dict[str, float]:
    """
    Calculates unrounded macronutrient targets in grams.

    Protein and carbohydrates scale with bodyweight; fat takes a fixed share
    of the calorie target at 9 kcal/g.
    """
    split = MACRO_SPLITS[NutritionGoal(goal)]
    return {
        "protein": split.protein_g_per_kg * weight_kg,
        "carbs": split.carbs_g_per_kg * weight_kg,
        "fats": target_calories * split.fat_pct / CALORIES_PER_GRAM_FAT,
    }


def calculate_water_target(weight_kg, activity_level=ActivityLevel.MODERATE):
    """Daily water target in liters, rounded to 0.1 L."""
    water = weight_kg * WATER_LITERS_PER_KG
    if ActivityLevel(activity_level) in HIGH_ACTIVITY_LEVELS:
        water += HIGH_ACTIVITY_WATER_BONUS_L
    return round(water, 1)


def compute_targets(
    weight_kg: float,
    height_cm: float,
    age_years: float,
    goal=NutritionGoal.MAINTAINING,
    activity_level=ActivityLevel.MODERATE,
    sex=Sex.MALE,
) -> NutritionTargets:
    """
    Computes personalized daily nutrition targets.

    Callers must check that weight, height and age are present and positive
    before calling; no validation happens here.

    Args:
        weight_kg (float): Body weight in kilograms.
        height_cm (float): Height in centimeters.
        age_years (float): Age in years.
        goal (NutritionGoal or str): bulking, maintaining or cutting.
        activity_level (ActivityLevel or str): sedentary to very_intense.
        sex (Sex or str): male or female.

    Returns:
        NutritionTargets: calories and macro grams as integers, water in liters.

    Example:
        70 kg, 175 cm, 20 y, male, maintaining, moderate:
        BMR 1698.75 -> TDEE 2633 kcal, protein 112 g, carbs 280 g, fats 73 g.
    """
    bmr = calculate_bmr(weight_kg, height_cm, age_years, sex)
    tdee = calculate_tdee(bmr, activity_level)
    calories = calculate_goal_calories(tdee, goal)
    macros = calculate_macro_targets(weight_kg, calories, goal)

    targets = NutritionTargets(
        calories=int(round(calories)),
        protein=int(round(macros["protein"])),
        carbs=int(round(macros["carbs"])),
        fats=int(round(macros["fats"])),
        water=calculate_water_target(weight_kg, activity_level),
    )
    logger.debug(
        f"Nutrition targets for {NutritionGoal(goal).value}/"
        f"{ActivityLevel(activity_level).value}: BMR {bmr:.1f}, TDEE {tdee:.1f}, "
        f"{targets}"
    )
    return targets


def calculate_bmi(weight_kg, height_cm) -> Optional[float]:
    """
    Calculates BMI from weight (kg) and height (cm), rounded to 1 decimal.

    Returns None when either input is missing or non-positive.
    """
    if weight_kg is None or height_cm is None:
        return None
    if weight_kg <= 0 or height_cm <= 0:
        return None

    height_m = height_cm / 100.0
    return round(weight_kg / (height_m**2), 1)


def get_bmi_category(bmi):
    """Maps a BMI value to Underweight / Normal / Overweight / Obese."""
    if bmi is None:
        return None
    for upper_bound, label in BMI_CATEGORIES:
        if bmi < upper_bound:
            return label
    return "Obese"
