"""
Cohort Averages for Peer Comparison

Groups skill records into age brackets and averages each metric over the
records in a bracket that actually recorded it. The averages are display
context for the comparison view and never feed into scoring.
"""

import logging
from dataclasses import asdict

import pandas as pd

from shared_models import METRIC_RANGES, CohortAverages

logger = logging.getLogger(__name__)

# (inclusive upper age bound, label); ages above the last bound are "18+"
AGE_GROUPS = (
    (10, "10 and below"),
    (13, "11-13"),
    (18, "14-18"),
)
ADULT_AGE_GROUP = "18+"


def get_age_group(age):
    """
    Maps an age in years to its cohort bracket label.

    Args:
        age (float): Age in years

    Returns:
        str: "10 and below", "11-13", "14-18" or "18+"
    """
    for upper_age, label in AGE_GROUPS:
        if age <= upper_age:
            return label
    return ADULT_AGE_GROUP


def _records_to_dataframe(records):
    rows = []
    for record in records:
        age = record.athlete.age if record.athlete is not None else None
        if age is None or pd.isna(age):
            continue
        row = {metric: record.value(metric) for metric in METRIC_RANGES}
        row["age"] = age
        rows.append(row)

    columns = ["age"] + list(METRIC_RANGES)
    return pd.DataFrame(rows, columns=columns, dtype=float)


def calculate_cohort_averages(records, age):
    """
    Averages every metric over the records in the same age bracket as `age`.

    Records without an athlete age are skipped. Each metric's mean only uses
    records where that metric is present, and metrics nobody in the bracket
    recorded are left out. Means are rounded to the metric's display decimals
    (counts to whole numbers, times to 0.01, everything else to 0.1).

    Args:
        records (list): RawSkillRecord objects with athlete profiles
        age (float): Age of the athlete being compared

    Returns:
        CohortAverages: sample_size 0 and all-zero averages when the bracket
            is empty
    """
    age_group = get_age_group(age)
    df = _records_to_dataframe(records)
    if not df.empty:
        df = df[df["age"].apply(get_age_group) == age_group]

    if df.empty:
        logger.info(f"No records found for age group {age_group}")
        return CohortAverages(
            age_group=age_group,
            averages={metric: 0.0 for metric in METRIC_RANGES},
            sample_size=0,
        )

    means = df[list(METRIC_RANGES)].mean(skipna=True).dropna()
    averages = {}
    for metric, mean in means.items():
        decimals = METRIC_RANGES[metric].display_decimals
        averages[metric] = float(round(mean, decimals))

    logger.info(
        f"Cohort {age_group}: {len(df)} records, {len(averages)} metrics averaged"
    )
    return CohortAverages(age_group=age_group, averages=averages, sample_size=len(df))


def cohort_averages_to_dict(cohort):
    """Serializes CohortAverages to the {ageGroup, averages, sampleSize} payload."""
    data = asdict(cohort)
    return {
        "ageGroup": data["age_group"],
        "averages": data["averages"],
        "sampleSize": data["sample_size"],
    }
