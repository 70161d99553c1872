from datetime import date
from typing import Annotated, Literal

from pydantic import BaseModel, Field

Weekday = Annotated[int, Field(ge=0, le=6)]  # 0=Monday


class ExerciseCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    description: str = Field("", max_length=2000)
    duration_minutes: int = Field(5, ge=1, le=240)
    frequency: str = Field("daily", max_length=40)
    days_of_week: list[Weekday] = Field(default_factory=lambda: [0, 1, 2, 3, 4, 5, 6])
    instructions: list[str] = Field(default_factory=list)
    max_pain_threshold: int = Field(6, ge=0, le=10)


class ExerciseUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=120)
    description: str | None = Field(None, max_length=2000)
    duration_minutes: int | None = Field(None, ge=1, le=240)
    frequency: str | None = Field(None, max_length=40)
    days_of_week: list[Weekday] | None = None
    instructions: list[str] | None = None
    max_pain_threshold: int | None = Field(None, ge=0, le=10)
    is_active: bool | None = None


class ExerciseResponse(BaseModel):
    id: str
    patient_id: str
    name: str
    description: str
    duration_minutes: int
    frequency: str
    days_of_week: list[int]
    instructions: list[str]
    max_pain_threshold: int
    is_active: bool


class ExerciseListResponse(BaseModel):
    exercises: list[ExerciseResponse]


class ExerciseLogCreate(BaseModel):
    status: Literal["completed", "partial", "skipped"]
    pain_level: int | None = Field(None, ge=0, le=10)
    notes: str | None = Field(None, max_length=1000)


class ExerciseLogResponse(BaseModel):
    id: str
    exercise_id: str
    scheduled_date: date
    status: str
    completed_at: str | None
    pain_level: int | None
    notes: str | None
    pain_over_threshold: bool = False


class ExerciseScheduleItem(BaseModel):
    exercise_id: str
    exercise: str
    duration_minutes: int
    status: str  # pending | completed | partial | skipped


class ExerciseScheduleResponse(BaseModel):
    items: list[ExerciseScheduleItem]
