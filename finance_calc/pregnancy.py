"""Due date and gestational age from the last menstrual period (LMP).

The due date follows Naegele's rule: 280 days (40 weeks) after the LMP.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional

GESTATION_DAYS = 280
GESTATION_WEEKS = 40


@dataclass(frozen=True)
class PregnancyEstimate:
    last_menstrual_period: date
    due_date: date
    gestational_weeks: int
    trimester: int
    weeks_remaining: int
    days_remaining: int


def due_date(lmp: date) -> date:
    return lmp + timedelta(days=GESTATION_DAYS)


def trimester_for(weeks: int) -> int:
    if weeks < 13:
        return 1
    if weeks < 27:
        return 2
    return 3


def trimester_label(trimester: int) -> str:
    labels = {
        1: "First trimester (weeks 1-12)",
        2: "Second trimester (weeks 13-26)",
        3: "Third trimester (weeks 27-40)",
    }
    return labels.get(trimester, "Post-partum period")


def estimate_pregnancy(lmp: date, today: Optional[date] = None) -> PregnancyEstimate:
    """Estimate due date and gestational age as of ``today``.

    Raises
    ------
    ValueError
        If the LMP is later than ``today``.
    """
    today = today or date.today()
    if lmp > today:
        raise ValueError("Last menstrual period cannot be in the future")
    expected = due_date(lmp)
    weeks = (today - lmp).days // 7
    return PregnancyEstimate(
        last_menstrual_period=lmp,
        due_date=expected,
        gestational_weeks=weeks,
        trimester=trimester_for(weeks),
        weeks_remaining=max(0, GESTATION_WEEKS - weeks),
        days_remaining=max(0, (expected - today).days),
    )
