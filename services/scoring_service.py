from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

MOOD_POINTS: dict[str, int] = {"great": 10, "good": 8, "ok": 6, "low": 4, "struggling": 2}
SWELLING_POINTS: dict[str, int] = {"none": 10, "mild": 7, "moderate": 4, "severe": 1}

# Neutral values for fields a patient leaves out of a check-in.
DEFAULT_ADHERENCE = 0
DEFAULT_EXERCISE = 0
DEFAULT_PAIN = 5
DEFAULT_MOOD = "ok"
DEFAULT_SWELLING = "mild"

MIN_TREND_HISTORY = 3


@dataclass(frozen=True)
class DailyRecoveryInput:
    medicine_adherence_percent: int = DEFAULT_ADHERENCE
    exercise_completion_percent: int = DEFAULT_EXERCISE
    pain_score: int = DEFAULT_PAIN
    mood: str = DEFAULT_MOOD
    swelling: str = DEFAULT_SWELLING

    @classmethod
    def with_defaults(
        cls,
        medicine_adherence_percent: int | None = None,
        exercise_completion_percent: int | None = None,
        pain_score: int | None = None,
        mood: str | None = None,
        swelling: str | None = None,
    ) -> "DailyRecoveryInput":
        return cls(
            medicine_adherence_percent=DEFAULT_ADHERENCE if medicine_adherence_percent is None else medicine_adherence_percent,
            exercise_completion_percent=DEFAULT_EXERCISE if exercise_completion_percent is None else exercise_completion_percent,
            pain_score=DEFAULT_PAIN if pain_score is None else pain_score,
            mood=mood or DEFAULT_MOOD,
            swelling=swelling or DEFAULT_SWELLING,
        )


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def compute_score(data: DailyRecoveryInput) -> int:
    """
    Daily recovery score in [0, 100].

    Baseline 50, adherence and exercise weighted around their 50% midpoint,
    pain inverted, plus fixed mood and swelling points. The raw sum can leave
    the range at either extreme, so it is rounded half-up and clamped.
    """
    raw = (
        50
        + (data.medicine_adherence_percent - 50) * 30 / 100
        + (data.exercise_completion_percent - 50) * 25 / 100
        + (10 - data.pain_score) * 2.5
        + MOOD_POINTS.get(data.mood, MOOD_POINTS[DEFAULT_MOOD])
        + SWELLING_POINTS.get(data.swelling, SWELLING_POINTS[DEFAULT_SWELLING])
    )
    return max(0, min(100, round_half_up(raw)))


def compute_trend(current_score: int, history: Sequence[int]) -> str:
    """Compare today's score against the mean of the trailing window."""
    if len(history) < MIN_TREND_HISTORY:
        return "stable"

    avg = sum(history) / len(history)
    if current_score >= avg + 5:
        return "improving"
    if current_score <= avg - 20:
        return "critical"
    if current_score <= avg - 10:
        return "warning"
    return "stable"
