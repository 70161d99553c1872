import uuid
from datetime import date, datetime

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base


class Exercise(Base):
    __tablename__ = "exercises"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    patient_id: Mapped[str] = mapped_column(String, ForeignKey("users.id"), index=True, nullable=False)
    name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False, default=5)
    frequency: Mapped[str] = mapped_column(String, nullable=False, default="daily")
    # 0=Monday .. 6=Sunday, JSON array
    days_of_week_json: Mapped[str] = mapped_column(Text, nullable=False, default="[0, 1, 2, 3, 4, 5, 6]")
    instructions_json: Mapped[str] = mapped_column(Text, nullable=False, default="[]")
    # Stop the exercise above this pain level.
    max_pain_threshold: Mapped[int] = mapped_column(Integer, nullable=False, default=6)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


class ExerciseLog(Base):
    __tablename__ = "exercise_logs"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    exercise_id: Mapped[str] = mapped_column(String, ForeignKey("exercises.id"), index=True, nullable=False)
    patient_id: Mapped[str] = mapped_column(String, ForeignKey("users.id"), index=True, nullable=False)
    scheduled_date: Mapped[date] = mapped_column(Date, index=True, nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False)  # completed | partial | skipped
    completed_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    pain_level: Mapped[int | None] = mapped_column(Integer, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
