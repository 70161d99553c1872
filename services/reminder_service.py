from __future__ import annotations

import logging
from datetime import datetime, timedelta

from sqlalchemy.orm import Session

from models.reminder import Reminder
from schemas.reminder import ReminderCreate, ReminderListResponse, ReminderResponse

logger = logging.getLogger(__name__)

UPCOMING_LIMIT = 5


def create_reminder(db: Session, patient_id: str, payload: ReminderCreate) -> Reminder:
    reminder = Reminder(
        patient_id=patient_id,
        type=payload.type,
        title=payload.title.strip(),
        message=payload.message,
        # Stored naive UTC like every other timestamp column.
        scheduled_at=payload.scheduled_at.replace(tzinfo=None),
        recurring=payload.recurring,
    )
    db.add(reminder)
    db.commit()
    db.refresh(reminder)
    return reminder


def list_reminders(db: Session, patient_id: str) -> list[Reminder]:
    return (
        db.query(Reminder)
        .filter(Reminder.patient_id == patient_id)
        .order_by(Reminder.scheduled_at.asc())
        .all()
    )


def get_reminder(db: Session, patient_id: str, reminder_id: str) -> Reminder | None:
    return db.query(Reminder).filter(Reminder.id == reminder_id, Reminder.patient_id == patient_id).first()


def next_occurrence(reminder: Reminder, now: datetime) -> datetime | None:
    at = reminder.scheduled_at
    if at >= now:
        return at
    if not reminder.recurring:
        return None
    at = datetime.combine(now.date(), at.time())
    return at if at >= now else at + timedelta(days=1)


def upcoming_reminders(db: Session, patient_id: str, now: datetime | None = None) -> ReminderListResponse:
    """The next active reminders by firing time, at most UPCOMING_LIMIT."""
    now = now or datetime.utcnow()
    due = []
    for reminder in list_reminders(db, patient_id):
        if not reminder.is_active:
            continue
        at = next_occurrence(reminder, now)
        if at is not None:
            due.append((at, reminder))
    due.sort(key=lambda pair: pair[0])
    return ReminderListResponse(reminders=[to_response(r, now) for _, r in due[:UPCOMING_LIMIT]])


def toggle_reminder(db: Session, reminder: Reminder) -> Reminder:
    reminder.is_active = not reminder.is_active
    db.add(reminder)
    db.commit()
    db.refresh(reminder)
    logger.info("Reminder %s patient=%s active=%s", reminder.id, reminder.patient_id, reminder.is_active)
    return reminder


def delete_reminder(db: Session, reminder: Reminder) -> None:
    db.delete(reminder)
    db.commit()


def to_response(reminder: Reminder, now: datetime | None = None) -> ReminderResponse:
    return ReminderResponse(
        id=str(reminder.id),
        type=reminder.type,
        title=reminder.title,
        message=reminder.message,
        scheduled_at=reminder.scheduled_at,
        recurring=bool(reminder.recurring),
        is_active=bool(reminder.is_active),
        next_at=next_occurrence(reminder, now or datetime.utcnow()),
    )
