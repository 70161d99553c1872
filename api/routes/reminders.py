from fastapi import APIRouter, HTTPException, status

from api.deps import DbDep, PatientDep
from schemas.reminder import ReminderCreate, ReminderListResponse, ReminderResponse
from services.reminder_service import (
    create_reminder,
    delete_reminder,
    get_reminder,
    list_reminders,
    to_response,
    toggle_reminder,
    upcoming_reminders,
)

router = APIRouter()


def _get_or_404(db, patient_id: str, reminder_id: str):
    reminder = get_reminder(db, patient_id, reminder_id)
    if not reminder:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Reminder not found.")
    return reminder


@router.get("", response_model=ReminderListResponse)
def get_reminders(db: DbDep, user: PatientDep):
    return ReminderListResponse(reminders=[to_response(r) for r in list_reminders(db, user.id)])


@router.get("/upcoming", response_model=ReminderListResponse)
def get_upcoming(db: DbDep, user: PatientDep):
    return upcoming_reminders(db, user.id)


@router.post("", response_model=ReminderResponse, status_code=status.HTTP_201_CREATED)
def post_reminder(payload: ReminderCreate, db: DbDep, user: PatientDep):
    return to_response(create_reminder(db, user.id, payload))


@router.post("/{reminder_id}/toggle", response_model=ReminderResponse)
def post_toggle(reminder_id: str, db: DbDep, user: PatientDep):
    return to_response(toggle_reminder(db, _get_or_404(db, user.id, reminder_id)))


@router.delete("/{reminder_id}")
def remove_reminder(reminder_id: str, db: DbDep, user: PatientDep):
    delete_reminder(db, _get_or_404(db, user.id, reminder_id))
    return {"message": "Reminder deleted"}
