from datetime import date
from typing import Annotated, Literal

from pydantic import BaseModel, Field

TimeSlot = Annotated[str, Field(pattern=r"^([01]\d|2[0-3]):[0-5]\d$")]  # "HH:MM"


class MedicationCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    dosage: str = Field("", max_length=60)
    frequency: str = Field("daily", max_length=40)
    times: list[TimeSlot] = Field(default_factory=lambda: ["08:00"])
    with_food: bool = False
    instructions: str | None = Field(None, max_length=1000)
    end_date: date | None = None


class MedicationUpdate(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=120)
    dosage: str | None = Field(None, max_length=60)
    frequency: str | None = Field(None, max_length=40)
    times: list[TimeSlot] | None = None
    with_food: bool | None = None
    instructions: str | None = Field(None, max_length=1000)
    is_active: bool | None = None
    end_date: date | None = None


class MedicationResponse(BaseModel):
    id: str
    patient_id: str
    name: str
    dosage: str
    frequency: str
    times: list[str]
    with_food: bool
    instructions: str | None
    is_active: bool
    start_date: date
    end_date: date | None


class MedicationListResponse(BaseModel):
    medications: list[MedicationResponse]


class MedicationLogCreate(BaseModel):
    status: Literal["taken", "missed", "skipped"]
    # Omitted => the first slot of today without a log.
    scheduled_time: TimeSlot | None = None


class MedicationLogResponse(BaseModel):
    id: str
    medication_id: str
    scheduled_date: date
    scheduled_time: str
    status: str
    taken_at: str | None


class MedicationScheduleItem(BaseModel):
    medication_id: str
    medication: str
    time: str
    status: str  # pending | taken | missed | skipped


class MedicationScheduleResponse(BaseModel):
    items: list[MedicationScheduleItem]
