import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base


class ViewerAccess(Base):
    """
    Family/friend read access to a patient's recovery summary.
    The viewer is matched by user id once linked, otherwise by email.
    """

    __tablename__ = "viewer_access"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    patient_id: Mapped[str] = mapped_column(String, ForeignKey("users.id"), index=True, nullable=False)
    viewer_user_id: Mapped[str | None] = mapped_column(String, ForeignKey("users.id"), nullable=True)
    viewer_email: Mapped[str] = mapped_column(String, index=True, nullable=False)
    viewer_name: Mapped[str | None] = mapped_column(String, nullable=True)
    relationship: Mapped[str | None] = mapped_column(String, nullable=True)

    can_view_progress: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    can_view_medications: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    can_view_exercises: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    can_view_mood: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    can_view_pain_score: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    update_frequency: Mapped[str] = mapped_column(String, nullable=False, default="daily")  # realtime | daily | weekly | milestone_only

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
