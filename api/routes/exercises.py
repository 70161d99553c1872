from fastapi import APIRouter, HTTPException, status

from api.deps import DbDep, PatientDep
from schemas.exercise import (
    ExerciseCreate,
    ExerciseListResponse,
    ExerciseLogCreate,
    ExerciseLogResponse,
    ExerciseResponse,
    ExerciseScheduleResponse,
    ExerciseUpdate,
)
from services.exercise_service import (
    build_today_schedule,
    create_exercise,
    delete_exercise,
    get_exercise,
    list_exercises,
    log_session,
    to_response,
    update_exercise,
)

router = APIRouter()


def _get_or_404(db, patient_id: str, exercise_id: str):
    ex = get_exercise(db, patient_id, exercise_id)
    if not ex:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Exercise not found.")
    return ex


@router.get("", response_model=ExerciseListResponse)
def get_exercises(db: DbDep, user: PatientDep):
    return ExerciseListResponse(exercises=[to_response(e) for e in list_exercises(db, user.id)])


@router.get("/schedule/today", response_model=ExerciseScheduleResponse)
def get_today_schedule(db: DbDep, user: PatientDep):
    return build_today_schedule(db, user.id)


@router.post("", response_model=ExerciseResponse, status_code=status.HTTP_201_CREATED)
def post_exercise(payload: ExerciseCreate, db: DbDep, user: PatientDep):
    return to_response(create_exercise(db, user.id, payload))


@router.get("/{exercise_id}", response_model=ExerciseResponse)
def get_one(exercise_id: str, db: DbDep, user: PatientDep):
    return to_response(_get_or_404(db, user.id, exercise_id))


@router.put("/{exercise_id}", response_model=ExerciseResponse)
def put_exercise(exercise_id: str, payload: ExerciseUpdate, db: DbDep, user: PatientDep):
    ex = _get_or_404(db, user.id, exercise_id)
    return to_response(update_exercise(db, ex, payload))


@router.delete("/{exercise_id}")
def remove_exercise(exercise_id: str, db: DbDep, user: PatientDep):
    delete_exercise(db, _get_or_404(db, user.id, exercise_id))
    return {"message": "Exercise deleted"}


@router.post("/{exercise_id}/log", response_model=ExerciseLogResponse)
def post_session_log(exercise_id: str, payload: ExerciseLogCreate, db: DbDep, user: PatientDep):
    ex = _get_or_404(db, user.id, exercise_id)
    return log_session(db, ex, payload)
