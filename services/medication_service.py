from __future__ import annotations

import json
import logging
from datetime import date, datetime

from sqlalchemy.orm import Session

from models.medication import Medication, MedicationLog
from schemas.medication import (
    MedicationCreate,
    MedicationLogCreate,
    MedicationLogResponse,
    MedicationResponse,
    MedicationScheduleItem,
    MedicationScheduleResponse,
    MedicationUpdate,
)

logger = logging.getLogger(__name__)


def _times(med: Medication) -> list[str]:
    return sorted(json.loads(med.times_json or "[]"))


def create_medication(db: Session, patient_id: str, payload: MedicationCreate) -> Medication:
    med = Medication(
        patient_id=patient_id,
        name=payload.name.strip(),
        dosage=payload.dosage,
        frequency=payload.frequency,
        times_json=json.dumps(sorted(set(payload.times))),
        with_food=payload.with_food,
        instructions=payload.instructions,
        start_date=date.today(),
        end_date=payload.end_date,
    )
    db.add(med)
    db.commit()
    db.refresh(med)
    return med


def list_medications(db: Session, patient_id: str) -> list[Medication]:
    return (
        db.query(Medication)
        .filter(Medication.patient_id == patient_id)
        .order_by(Medication.created_at.asc())
        .all()
    )


def get_medication(db: Session, patient_id: str, medication_id: str) -> Medication | None:
    return (
        db.query(Medication)
        .filter(Medication.id == medication_id, Medication.patient_id == patient_id)
        .first()
    )


def update_medication(db: Session, med: Medication, patch: MedicationUpdate) -> Medication:
    changes = patch.model_dump(exclude_unset=True)
    if "times" in changes:
        times = changes.pop("times")
        if times is not None:
            med.times_json = json.dumps(sorted(set(times)))
    for field, value in changes.items():
        if value is None and field != "end_date":
            continue
        setattr(med, field, value)
    db.add(med)
    db.commit()
    db.refresh(med)
    return med


def delete_medication(db: Session, med: Medication) -> None:
    db.query(MedicationLog).filter(MedicationLog.medication_id == med.id).delete()
    db.delete(med)
    db.commit()


def _logs_for_day(db: Session, patient_id: str, day: date) -> list[MedicationLog]:
    return (
        db.query(MedicationLog)
        .filter(MedicationLog.patient_id == patient_id, MedicationLog.scheduled_date == day)
        .order_by(MedicationLog.created_at.asc())
        .all()
    )


def log_dose(db: Session, med: Medication, payload: MedicationLogCreate) -> MedicationLog:
    today = date.today()
    slot = payload.scheduled_time
    if slot is None:
        logged = {e.scheduled_time for e in _logs_for_day(db, med.patient_id, today) if e.medication_id == med.id}
        times = _times(med) or [datetime.utcnow().strftime("%H:%M")]
        open_slots = [t for t in times if t not in logged]
        slot = open_slots[0] if open_slots else times[-1]

    entry = MedicationLog(
        medication_id=med.id,
        patient_id=med.patient_id,
        scheduled_date=today,
        scheduled_time=slot,
        status=payload.status,
        taken_at=datetime.utcnow() if payload.status == "taken" else None,
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)
    if payload.status != "taken":
        logger.info("Medication dose %s patient=%s medication=%s slot=%s", payload.status, med.patient_id, med.id, slot)
    return entry


def build_today_schedule(db: Session, patient_id: str) -> MedicationScheduleResponse:
    today = date.today()
    # Later logs for the same slot win.
    status_by_slot = {(e.medication_id, e.scheduled_time): e.status for e in _logs_for_day(db, patient_id, today)}

    items: list[MedicationScheduleItem] = []
    for med in list_medications(db, patient_id):
        if not med.is_active:
            continue
        if med.end_date and med.end_date < today:
            continue
        label = f"{med.name} {med.dosage}".strip()
        for t in _times(med):
            items.append(
                MedicationScheduleItem(
                    medication_id=str(med.id),
                    medication=label,
                    time=t,
                    status=status_by_slot.get((med.id, t), "pending"),
                )
            )

    items.sort(key=lambda i: i.time)
    return MedicationScheduleResponse(items=items)


def to_response(med: Medication) -> MedicationResponse:
    return MedicationResponse(
        id=str(med.id),
        patient_id=str(med.patient_id),
        name=med.name,
        dosage=med.dosage,
        frequency=med.frequency,
        times=_times(med),
        with_food=bool(med.with_food),
        instructions=med.instructions,
        is_active=bool(med.is_active),
        start_date=med.start_date,
        end_date=med.end_date,
    )


def to_log_response(entry: MedicationLog) -> MedicationLogResponse:
    return MedicationLogResponse(
        id=str(entry.id),
        medication_id=str(entry.medication_id),
        scheduled_date=entry.scheduled_date,
        scheduled_time=entry.scheduled_time,
        status=entry.status,
        taken_at=entry.taken_at.isoformat() if entry.taken_at else None,
    )
