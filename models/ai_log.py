import uuid
from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base


class AIInteractionLog(Base):
    __tablename__ = "ai_interaction_logs"

    id: Mapped[str] = mapped_column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    patient_id: Mapped[str] = mapped_column(String, ForeignKey("users.id"), index=True, nullable=False)

    intent_type: Mapped[str] = mapped_column(String, nullable=False)  # education | emotional_support | warning | blocked
    risk_level: Mapped[str] = mapped_column(String, nullable=False)  # low | medium | high
    user_message: Mapped[str] = mapped_column(Text, nullable=False)
    ai_response: Mapped[str | None] = mapped_column(Text, nullable=True)

    was_blocked: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    blocked_reason: Mapped[str | None] = mapped_column(String, nullable=True)
    safety_warning_shown: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    ai_provider: Mapped[str | None] = mapped_column(String, nullable=True)  # local | openai | groq
    model_used: Mapped[str | None] = mapped_column(String, nullable=True)
    response_time_ms: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, index=True)
