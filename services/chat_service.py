from __future__ import annotations

import logging
import time

from sqlalchemy import desc
from sqlalchemy.orm import Session

from models.ai_log import AIInteractionLog
from schemas.ai import ChatHistoryItem, ChatHistoryResponse, ChatResponse
from services.responder_service import Responder
from services.safety_service import SafetyFlag, audit_fields_for, classify

logger = logging.getLogger(__name__)

TOPIC_INTENTS = {"anxiety": "emotional_support"}


def handle_chat(db: Session, patient_id: str, message: str, responder: Responder) -> ChatResponse:
    # Safety rules run before any responder sees the message.
    started = time.perf_counter()
    result = classify(message)
    audit = audit_fields_for(result.flag)

    provider: str | None = None
    model: str | None = None
    if result.flag is SafetyFlag.SAFE:
        reply = responder.respond(message)
        text = reply.text
        provider, model = reply.provider, reply.model
        intent_type = TOPIC_INTENTS.get(reply.topic, "education")
    else:
        text = result.message or ""
        intent_type = audit.intent_type or "warning"

    elapsed_ms = int((time.perf_counter() - started) * 1000)

    db.add(
        AIInteractionLog(
            patient_id=patient_id,
            intent_type=intent_type,
            risk_level=audit.risk_level,
            user_message=message,
            ai_response=text,
            was_blocked=audit.was_blocked,
            blocked_reason=audit.blocked_reason,
            safety_warning_shown=audit.safety_warning_shown,
            ai_provider=provider,
            model_used=model,
            response_time_ms=elapsed_ms,
        )
    )
    db.commit()

    # Message text is patient data; log only metadata.
    if audit.was_blocked:
        logger.warning("Assistant request blocked patient=%s flag=%s", patient_id, result.flag.value)
    else:
        logger.info(
            "Assistant reply patient=%s flag=%s provider=%s elapsed_ms=%d",
            patient_id,
            result.flag.value,
            provider or "safety_rules",
            elapsed_ms,
        )

    return ChatResponse(message=text, safety_flag=result.flag.value)


def list_chat_history(db: Session, patient_id: str, limit: int = 50) -> ChatHistoryResponse:
    rows = (
        db.query(AIInteractionLog)
        .filter(AIInteractionLog.patient_id == patient_id)
        .order_by(desc(AIInteractionLog.created_at))
        .limit(limit)
        .all()
    )
    return ChatHistoryResponse(
        items=[
            ChatHistoryItem(
                id=str(r.id),
                created_at=r.created_at.isoformat(),
                user_message=r.user_message,
                ai_response=r.ai_response,
                intent_type=r.intent_type,
                risk_level=r.risk_level,
                was_blocked=bool(r.was_blocked),
            )
            for r in rows
        ]
    )
