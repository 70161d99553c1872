import uuid
from datetime import date, datetime

from sqlalchemy import Boolean, Date, DateTime, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base


class Medication(Base):
    __tablename__ = "medications"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    patient_id: Mapped[str] = mapped_column(String, ForeignKey("users.id"), index=True, nullable=False)
    name: Mapped[str] = mapped_column(String, nullable=False)
    dosage: Mapped[str] = mapped_column(String, nullable=False, default="")
    frequency: Mapped[str] = mapped_column(String, nullable=False, default="daily")
    # "HH:MM" slots as a JSON array (SQLite MVP)
    times_json: Mapped[str] = mapped_column(Text, nullable=False, default='["08:00"]')
    with_food: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    instructions: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    start_date: Mapped[date] = mapped_column(Date, nullable=False, default=date.today)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)


class MedicationLog(Base):
    __tablename__ = "medication_logs"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    medication_id: Mapped[str] = mapped_column(String, ForeignKey("medications.id"), index=True, nullable=False)
    patient_id: Mapped[str] = mapped_column(String, ForeignKey("users.id"), index=True, nullable=False)
    scheduled_date: Mapped[date] = mapped_column(Date, index=True, nullable=False)
    scheduled_time: Mapped[str] = mapped_column(String, nullable=False)  # "HH:MM" slot of the dose
    status: Mapped[str] = mapped_column(String, nullable=False)  # taken | missed | skipped
    taken_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
