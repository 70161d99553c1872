import uuid
from datetime import date, datetime

from sqlalchemy import Date, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base


class DailyRecoveryLog(Base):
    """
    One check-in per patient per calendar day.
    Re-logging the same day overwrites the row (upsert on patient_id + log_date).
    """

    __tablename__ = "daily_recovery_logs"
    __table_args__ = (UniqueConstraint("patient_id", "log_date", name="uq_recovery_log_patient_date"),)

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    patient_id: Mapped[str] = mapped_column(String, ForeignKey("users.id"), index=True, nullable=False)
    log_date: Mapped[date] = mapped_column(Date, index=True, nullable=False)
    day_number: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    mood: Mapped[str] = mapped_column(String, nullable=False)  # great | good | ok | low | struggling
    pain_score: Mapped[int] = mapped_column(Integer, nullable=False)  # 0-10
    swelling: Mapped[str] = mapped_column(String, nullable=False)  # none | mild | moderate | severe
    medicine_adherence_percent: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    exercise_completion_percent: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    recovery_score: Mapped[int] = mapped_column(Integer, nullable=False)  # 0-100
    trend: Mapped[str] = mapped_column(String, nullable=False, default="stable")

    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    symptoms_json: Mapped[str] = mapped_column(Text, nullable=False, default="[]")

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
