from __future__ import annotations

import json
import logging
import uuid
from datetime import date, datetime, timedelta

from sqlalchemy import desc
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from core.config import settings
from models.recovery_log import DailyRecoveryLog
from models.user import User
from schemas.recovery import DailyLogCreate, DailyLogResponse, DashboardResponse, WeeklyProgress
from services.scoring_service import DailyRecoveryInput, compute_score, compute_trend, round_half_up

logger = logging.getLogger(__name__)

# Columns overwritten when the same patient logs the same day again.
_UPSERT_COLUMNS = (
    "day_number",
    "mood",
    "pain_score",
    "swelling",
    "medicine_adherence_percent",
    "exercise_completion_percent",
    "recovery_score",
    "trend",
    "notes",
    "symptoms_json",
    "updated_at",
)


def _insert_for(db: Session):
    # Native INSERT ... ON CONFLICT DO UPDATE; both dialects share the API.
    if db.get_bind().dialect.name == "postgresql":
        return postgresql.insert
    return sqlite.insert


def _day_number(user: User | None, log_date: date, explicit: int | None) -> int:
    if explicit:
        return explicit
    if user and user.recovery_start_date:
        return max(1, (log_date - user.recovery_start_date).days + 1)
    return 1


def trailing_scores(db: Session, patient_id: str, log_date: date, window_days: int | None = None) -> list[int]:
    """Scores logged in the window_days calendar days before log_date (log_date excluded)."""
    window = window_days or settings.trend_window_days
    rows = (
        db.query(DailyRecoveryLog.recovery_score)
        .filter(
            DailyRecoveryLog.patient_id == patient_id,
            DailyRecoveryLog.log_date >= log_date - timedelta(days=window),
            DailyRecoveryLog.log_date < log_date,
        )
        .all()
    )
    return [int(r[0]) for r in rows]


def log_daily_recovery(db: Session, patient_id: str, payload: DailyLogCreate) -> DailyRecoveryLog:
    user = db.query(User).filter(User.id == patient_id).first()
    log_date = payload.log_date or date.today()

    data = DailyRecoveryInput.with_defaults(
        medicine_adherence_percent=payload.medicine_adherence_percent,
        exercise_completion_percent=payload.exercise_completion_percent,
        pain_score=payload.pain_score,
        mood=payload.mood,
        swelling=payload.swelling,
    )
    score = compute_score(data)
    trend = compute_trend(score, trailing_scores(db, patient_id, log_date))

    now = datetime.utcnow()
    insert = _insert_for(db)
    stmt = insert(DailyRecoveryLog).values(
        id=str(uuid.uuid4()),
        patient_id=patient_id,
        log_date=log_date,
        day_number=_day_number(user, log_date, payload.day_number),
        mood=data.mood,
        pain_score=data.pain_score,
        swelling=data.swelling,
        medicine_adherence_percent=data.medicine_adherence_percent,
        exercise_completion_percent=data.exercise_completion_percent,
        recovery_score=score,
        trend=trend,
        notes=payload.notes,
        symptoms_json=json.dumps(payload.symptoms),
        created_at=now,
        updated_at=now,
    )
    stmt = stmt.on_conflict_do_update(
        index_elements=["patient_id", "log_date"],
        set_={col: stmt.excluded[col] for col in _UPSERT_COLUMNS},
    )
    db.execute(stmt)

    # The cached score follows the most recent day; a backfilled older day leaves it alone.
    newer = (
        db.query(DailyRecoveryLog.id)
        .filter(DailyRecoveryLog.patient_id == patient_id, DailyRecoveryLog.log_date > log_date)
        .first()
    )
    if user and newer is None:
        user.recovery_score = score
        db.add(user)
    db.commit()

    row = (
        db.query(DailyRecoveryLog)
        .filter(DailyRecoveryLog.patient_id == patient_id, DailyRecoveryLog.log_date == log_date)
        .one()
    )

    logger.info("Recovery check-in stored patient=%s date=%s score=%d trend=%s", patient_id, log_date, score, trend)
    if trend in ("warning", "critical"):
        logger.warning("Recovery trend %s for patient=%s on %s", trend, patient_id, log_date)
    return row


def list_recovery_logs(db: Session, patient_id: str, limit: int = 60) -> list[DailyRecoveryLog]:
    return (
        db.query(DailyRecoveryLog)
        .filter(DailyRecoveryLog.patient_id == patient_id)
        .order_by(desc(DailyRecoveryLog.log_date))
        .limit(limit)
        .all()
    )


def get_latest_log(db: Session, patient_id: str) -> DailyRecoveryLog | None:
    return (
        db.query(DailyRecoveryLog)
        .filter(DailyRecoveryLog.patient_id == patient_id)
        .order_by(desc(DailyRecoveryLog.log_date))
        .first()
    )


def days_since_surgery(user: User | None, latest: DailyRecoveryLog | None) -> int:
    if user and user.recovery_start_date:
        return max(0, (date.today() - user.recovery_start_date).days)
    if latest:
        return int(latest.day_number)
    return 0


def _average(values: list[int]) -> int:
    if not values:
        return 0
    return round_half_up(sum(values) / len(values))


def build_dashboard_stats(db: Session, patient_id: str) -> DashboardResponse:
    user = db.query(User).filter(User.id == patient_id).first()
    week = list_recovery_logs(db, patient_id, limit=7)
    latest = week[0] if week else None

    return DashboardResponse(
        days_since_surgery=days_since_surgery(user, latest),
        recovery_score=int(latest.recovery_score) if latest else 0,
        recovery_trend=latest.trend if latest else "stable",
        weekly_progress=WeeklyProgress(
            medicine_adherence=_average([log.medicine_adherence_percent for log in week]),
            exercise_completion=_average([log.exercise_completion_percent for log in week]),
            average_pain_score=_average([log.pain_score for log in week]),
        ),
    )


def to_response(log: DailyRecoveryLog) -> DailyLogResponse:
    return DailyLogResponse(
        id=str(log.id),
        patient_id=str(log.patient_id),
        log_date=log.log_date,
        day_number=int(log.day_number),
        medicine_adherence_percent=int(log.medicine_adherence_percent),
        exercise_completion_percent=int(log.exercise_completion_percent),
        pain_score=int(log.pain_score),
        mood=log.mood,
        swelling=log.swelling,
        recovery_score=int(log.recovery_score),
        trend=log.trend,
        notes=log.notes,
        symptoms=json.loads(log.symptoms_json or "[]"),
    )
