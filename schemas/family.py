from typing import Literal

from pydantic import BaseModel, Field

UpdateFrequency = Literal["realtime", "daily", "weekly", "milestone_only"]


class ViewerPermissions(BaseModel):
    can_view_progress: bool = True
    can_view_medications: bool = False
    can_view_exercises: bool = False
    can_view_mood: bool = True
    can_view_pain_score: bool = False
    update_frequency: UpdateFrequency = "daily"


class ViewerPermissionsUpdate(BaseModel):
    can_view_progress: bool | None = None
    can_view_medications: bool | None = None
    can_view_exercises: bool | None = None
    can_view_mood: bool | None = None
    can_view_pain_score: bool | None = None
    update_frequency: UpdateFrequency | None = None


class ViewerCreate(BaseModel):
    email: str = Field(..., min_length=3, max_length=320, pattern=r"^[^@\s]+@[^@\s]+$")
    name: str | None = Field(None, max_length=100)
    relationship: str | None = Field(None, max_length=50)
    permissions: ViewerPermissions = Field(default_factory=ViewerPermissions)


class ViewerItem(BaseModel):
    id: str
    patient_id: str
    email: str
    name: str | None
    relationship: str | None
    permissions: ViewerPermissions
    is_linked: bool
    created_at: str


class ViewerListResponse(BaseModel):
    viewers: list[ViewerItem]


class FamilySummaryResponse(BaseModel):
    # Only the fields allowed by the viewer's permissions are filled in.
    patient_name: str | None = None
    recovery_score: int | None = None
    days_since_surgery: int | None = None
    trend: str | None = None
    medicine_adherence_percent: int | None = None
    exercise_completion_percent: int | None = None
    current_mood: str | None = None
    pain_score: int | None = None
    last_check_in: str | None = None
