from fastapi import APIRouter, HTTPException, status

from api.deps import DbDep, PatientDep
from schemas.medication import (
    MedicationCreate,
    MedicationListResponse,
    MedicationLogCreate,
    MedicationLogResponse,
    MedicationResponse,
    MedicationScheduleResponse,
    MedicationUpdate,
)
from services.medication_service import (
    build_today_schedule,
    create_medication,
    delete_medication,
    get_medication,
    list_medications,
    log_dose,
    to_log_response,
    to_response,
    update_medication,
)

router = APIRouter()


def _get_or_404(db, patient_id: str, medication_id: str):
    med = get_medication(db, patient_id, medication_id)
    if not med:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Medication not found.")
    return med


@router.get("", response_model=MedicationListResponse)
def get_medications(db: DbDep, user: PatientDep):
    return MedicationListResponse(medications=[to_response(m) for m in list_medications(db, user.id)])


@router.get("/schedule/today", response_model=MedicationScheduleResponse)
def get_today_schedule(db: DbDep, user: PatientDep):
    return build_today_schedule(db, user.id)


@router.post("", response_model=MedicationResponse, status_code=status.HTTP_201_CREATED)
def post_medication(payload: MedicationCreate, db: DbDep, user: PatientDep):
    return to_response(create_medication(db, user.id, payload))


@router.get("/{medication_id}", response_model=MedicationResponse)
def get_one(medication_id: str, db: DbDep, user: PatientDep):
    return to_response(_get_or_404(db, user.id, medication_id))


@router.put("/{medication_id}", response_model=MedicationResponse)
def put_medication(medication_id: str, payload: MedicationUpdate, db: DbDep, user: PatientDep):
    med = _get_or_404(db, user.id, medication_id)
    return to_response(update_medication(db, med, payload))


@router.delete("/{medication_id}")
def remove_medication(medication_id: str, db: DbDep, user: PatientDep):
    delete_medication(db, _get_or_404(db, user.id, medication_id))
    return {"message": "Medication deleted"}


@router.post("/{medication_id}/log", response_model=MedicationLogResponse)
def post_dose_log(medication_id: str, payload: MedicationLogCreate, db: DbDep, user: PatientDep):
    med = _get_or_404(db, user.id, medication_id)
    return to_log_response(log_dose(db, med, payload))
