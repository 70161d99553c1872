from datetime import date

from pydantic import BaseModel, Field


class UserProfile(BaseModel):
    id: str
    email: str
    name: str
    role: str  # patient | family_viewer
    phone: str | None = None
    recovery_start_date: date | None = None
    recovery_type: str | None = None
    recovery_score: int = 0


class UserProfileUpdate(BaseModel):
    name: str | None = Field(None, min_length=2, max_length=100)
    phone: str | None = Field(None, max_length=32)
    recovery_start_date: date | None = None
    recovery_type: str | None = Field(None, max_length=50)
