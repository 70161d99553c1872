from __future__ import annotations

import json
import logging
from datetime import date, datetime

from sqlalchemy import desc
from sqlalchemy.orm import Session

from models.exercise import Exercise, ExerciseLog
from schemas.exercise import (
    ExerciseCreate,
    ExerciseLogCreate,
    ExerciseLogResponse,
    ExerciseResponse,
    ExerciseScheduleItem,
    ExerciseScheduleResponse,
    ExerciseUpdate,
)

logger = logging.getLogger(__name__)


def create_exercise(db: Session, patient_id: str, payload: ExerciseCreate) -> Exercise:
    ex = Exercise(
        patient_id=patient_id,
        name=payload.name.strip(),
        description=payload.description,
        duration_minutes=payload.duration_minutes,
        frequency=payload.frequency,
        days_of_week_json=json.dumps(sorted(set(payload.days_of_week))),
        instructions_json=json.dumps(payload.instructions),
        max_pain_threshold=payload.max_pain_threshold,
    )
    db.add(ex)
    db.commit()
    db.refresh(ex)
    return ex


def list_exercises(db: Session, patient_id: str) -> list[Exercise]:
    return (
        db.query(Exercise)
        .filter(Exercise.patient_id == patient_id)
        .order_by(Exercise.created_at.asc())
        .all()
    )


def get_exercise(db: Session, patient_id: str, exercise_id: str) -> Exercise | None:
    return db.query(Exercise).filter(Exercise.id == exercise_id, Exercise.patient_id == patient_id).first()


def update_exercise(db: Session, ex: Exercise, patch: ExerciseUpdate) -> Exercise:
    changes = patch.model_dump(exclude_none=True)
    if "days_of_week" in changes:
        ex.days_of_week_json = json.dumps(sorted(set(changes.pop("days_of_week"))))
    if "instructions" in changes:
        ex.instructions_json = json.dumps(changes.pop("instructions"))
    for field, value in changes.items():
        setattr(ex, field, value)
    db.add(ex)
    db.commit()
    db.refresh(ex)
    return ex


def delete_exercise(db: Session, ex: Exercise) -> None:
    db.query(ExerciseLog).filter(ExerciseLog.exercise_id == ex.id).delete()
    db.delete(ex)
    db.commit()


def log_session(db: Session, ex: Exercise, payload: ExerciseLogCreate) -> ExerciseLogResponse:
    entry = ExerciseLog(
        exercise_id=ex.id,
        patient_id=ex.patient_id,
        scheduled_date=date.today(),
        status=payload.status,
        completed_at=datetime.utcnow() if payload.status == "completed" else None,
        pain_level=payload.pain_level,
        notes=payload.notes,
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)

    over = payload.pain_level is not None and payload.pain_level > int(ex.max_pain_threshold)
    if over:
        logger.warning(
            "Exercise pain above threshold patient=%s exercise=%s pain=%d threshold=%d",
            ex.patient_id,
            ex.id,
            payload.pain_level,
            ex.max_pain_threshold,
        )
    return to_log_response(entry, pain_over_threshold=over)


def build_today_schedule(db: Session, patient_id: str) -> ExerciseScheduleResponse:
    today = date.today()
    weekday = today.weekday()
    logs = (
        db.query(ExerciseLog)
        .filter(ExerciseLog.patient_id == patient_id, ExerciseLog.scheduled_date == today)
        .order_by(desc(ExerciseLog.created_at))
        .all()
    )
    latest_status: dict[str, str] = {}
    for entry in logs:
        latest_status.setdefault(entry.exercise_id, entry.status)

    items: list[ExerciseScheduleItem] = []
    for ex in list_exercises(db, patient_id):
        if not ex.is_active or weekday not in json.loads(ex.days_of_week_json or "[]"):
            continue
        items.append(
            ExerciseScheduleItem(
                exercise_id=str(ex.id),
                exercise=ex.name,
                duration_minutes=int(ex.duration_minutes),
                status=latest_status.get(ex.id, "pending"),
            )
        )
    return ExerciseScheduleResponse(items=items)


def to_response(ex: Exercise) -> ExerciseResponse:
    return ExerciseResponse(
        id=str(ex.id),
        patient_id=str(ex.patient_id),
        name=ex.name,
        description=ex.description,
        duration_minutes=int(ex.duration_minutes),
        frequency=ex.frequency,
        days_of_week=json.loads(ex.days_of_week_json or "[]"),
        instructions=json.loads(ex.instructions_json or "[]"),
        max_pain_threshold=int(ex.max_pain_threshold),
        is_active=bool(ex.is_active),
    )


def to_log_response(entry: ExerciseLog, pain_over_threshold: bool = False) -> ExerciseLogResponse:
    return ExerciseLogResponse(
        id=str(entry.id),
        exercise_id=str(entry.exercise_id),
        scheduled_date=entry.scheduled_date,
        status=entry.status,
        completed_at=entry.completed_at.isoformat() if entry.completed_at else None,
        pain_level=entry.pain_level,
        notes=entry.notes,
        pain_over_threshold=pain_over_threshold,
    )
