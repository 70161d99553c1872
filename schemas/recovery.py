from datetime import date
from typing import Literal

from pydantic import BaseModel, Field

Mood = Literal["great", "good", "ok", "low", "struggling"]
Swelling = Literal["none", "mild", "moderate", "severe"]


class DailyLogCreate(BaseModel):
    # Missing fields fall back to neutral values when scored.
    log_date: date | None = None  # defaults to today
    day_number: int | None = Field(None, ge=1, le=3650)
    medicine_adherence_percent: int | None = Field(None, ge=0, le=100)
    exercise_completion_percent: int | None = Field(None, ge=0, le=100)
    pain_score: int | None = Field(None, ge=0, le=10)
    mood: Mood | None = None
    swelling: Swelling | None = None
    notes: str | None = Field(None, max_length=2000)
    symptoms: list[str] = Field(default_factory=list)


class DailyLogResponse(BaseModel):
    id: str
    patient_id: str
    log_date: date
    day_number: int
    medicine_adherence_percent: int
    exercise_completion_percent: int
    pain_score: int
    mood: str
    swelling: str
    recovery_score: int
    trend: str  # improving | stable | warning | critical
    notes: str | None = None
    symptoms: list[str] = Field(default_factory=list)


class DailyLogListResponse(BaseModel):
    logs: list[DailyLogResponse]


class WeeklyProgress(BaseModel):
    medicine_adherence: int
    exercise_completion: int
    average_pain_score: int


class DashboardResponse(BaseModel):
    days_since_surgery: int
    recovery_score: int
    recovery_trend: str
    weekly_progress: WeeklyProgress
