#!/usr/bin/env python3
"""
PeakScore - Main CLI Script

This is the main entry point for PeakScore athlete performance scoring. It
provides a command-line interface with helpful error messages and delegates
the scoring logic to the core module.
"""

import argparse
import logging
import os

from core import run_scoring
from shared_models import ScoringConfig


def main():
    """Main CLI function with comprehensive argument parsing."""
    parser = argparse.ArgumentParser(
        description="PeakScore Athlete Performance Scoring",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run_scoring.py                            # Use example_skills.json
  python run_scoring.py my_skills.json             # Use custom config
  python run_scoring.py --config my_skills.json    # Alternative syntax
  python run_scoring.py --goal cutting --activity intense
  python run_scoring.py --csv scores.csv           # Also write category table

JSON config format:
  {
    "athlete": {"name": "Asha", "age": 17, "height": 172, "weight": 64},
    "skills": {
      "pushupScore": 70,
      "sprint50m": 7.1,
      "moodScore": 8,
      "totalCalories": 2600,
      "battingGrip": 7
    },
    "selectors": {"goal": "maintaining", "activity_level": "moderate", "sex": "male"},
    "cohort": {"ageGroup": "14-18", "averages": {"pushupScore": 45}, "sampleSize": 12}
  }

Notes:
  - Only "skills" is required; every metric inside it is optional
  - Without age, height and weight, nutrition uses generic ranges
  - The cohort section only feeds the comparison table, never the scores
        """,
    )

    parser.add_argument(
        "config_file",
        nargs="?",
        default="example_skills.json",
        help="Path to JSON configuration file (default: example_skills.json)",
    )

    parser.add_argument(
        "--config",
        "-c",
        dest="config_file_alt",
        help="Alternative way to specify config file path",
    )

    parser.add_argument(
        "--goal",
        "-g",
        help="Override nutrition goal (bulking, maintaining, cutting)",
    )

    parser.add_argument(
        "--activity",
        "-a",
        help="Override activity level (sedentary, light, moderate, intense, very_intense)",
    )

    parser.add_argument(
        "--sex",
        help="Override sex used for BMR (male, female, m, f)",
    )

    parser.add_argument(
        "--csv",
        dest="csv_path",
        help="Write the category score table to this CSV file",
    )

    parser.add_argument(
        "--exclude-tactical",
        action="store_true",
        help="Leave the tactical placeholder out of the overall score",
    )

    parser.add_argument(
        "--tactical-score",
        type=float,
        default=65.0,
        help="Tactical placeholder score (default: 65)",
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Show informational log messages",
    )

    parser.add_argument(
        "--help-config",
        action="store_true",
        help="Show detailed help about the JSON configuration format",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.help_config:
        show_config_help()
        return 0

    # Determine which config file to use
    config_file = args.config_file_alt if args.config_file_alt else args.config_file

    # Validate config file exists
    if not os.path.exists(config_file):
        print(f"Error: Configuration file not found: {config_file}")
        print()

        if config_file == "example_skills.json":
            print("The example configuration file is missing.")
            print("Please ensure example_skills.json exists in the current directory.")
        else:
            print("Please check the file path and try again.")

        print()
        print("Run with --help-config to see the expected JSON format.")
        return 1

    try:
        scoring_config = ScoringConfig(
            include_tactical_placeholder=not args.exclude_tactical,
            tactical_placeholder_score=args.tactical_score,
        )
    except ValueError as e:
        print(f"Error: {e}")
        return 1

    try:
        exit_code = run_scoring(
            config_path=config_file,
            goal_override=args.goal,
            activity_override=args.activity,
            sex_override=args.sex,
            scoring_config=scoring_config,
            csv_path=args.csv_path,
        )

        if exit_code == 0:
            print()
            print("Scoring completed successfully!")

        return exit_code

    except KeyboardInterrupt:
        print("\nScoring interrupted by user.")
        return 1


def show_config_help():
    """Show detailed help about the JSON configuration format."""
    help_text = """
JSON Configuration Format
=========================

The configuration file should be a JSON file with the following structure:

{
  "athlete": {
    "name": "<optional name>",
    "age": <age in years>,
    "height": <height in cm>,
    "weight": <weight in kg>
  },
  "skills": {
    "<metricKey>": <number or null>
  },
  "selectors": {
    "goal": "<bulking|maintaining|cutting>",
    "activity_level": "<sedentary|light|moderate|intense|very_intense>",
    "sex": "<male|female>"
  },
  "cohort": {
    "ageGroup": "<10 and below|11-13|14-18|18+>",
    "averages": {"<metricKey>": <number>},
    "sampleSize": <number of records averaged>
  }
}

Field Descriptions:
------------------

athlete (optional):
  - age: 5-100 years; selects age-tiered benchmarks (defaults to 18)
  - height / weight: cm / kg; with age they enable personalized nutrition

skills (required, every metric optional):
  Physical:  pushupScore, pullupScore, verticalJump (cm), gripStrength (kg),
             sprint50m, shuttleRun, sprintTime (seconds),
             run5kTime (minutes), yoyoTest (level)
  Mental:    moodScore, sleepScore (1-10)
  Nutrition: totalCalories (kcal), protein, carbohydrates, fats (g),
             waterIntake (L)
  Technical: batting, bowling and fielding ratings (0-10), e.g.
             battingGrip, runUp, hipDrive, softHands, highCatch

  snake_case keys (pushup_score, sprint_50m, ...) are accepted too.
  null or missing means "not recorded" and never counts as zero.

selectors (optional):
  Defaults are maintaining / moderate / male.

cohort (optional):
  Age-bracket averages shown next to the athlete's values.

Example:
--------
{
  "athlete": {"name": "Asha", "age": 17, "height": 172, "weight": 64},
  "skills": {
    "pushupScore": 70,
    "run5kTime": 19.5,
    "sleepScore": 7,
    "protein": 110,
    "highCatch": 8
  },
  "selectors": {"goal": "cutting", "activity_level": "intense", "sex": "female"}
}
"""
    print(help_text)


if __name__ == "__main__":
    exit(main())
