import base64

from fastapi import APIRouter, HTTPException, status

from api.deps import DbDep, PatientDep
from schemas.recovery import DailyLogCreate, DailyLogListResponse, DailyLogResponse, DashboardResponse
from services.recovery_service import (
    build_dashboard_stats,
    get_latest_log,
    list_recovery_logs,
    log_daily_recovery,
    to_response,
)
from services.report_service import build_recovery_export_json, build_recovery_pdf_bytes

router = APIRouter()


@router.post("", response_model=DailyLogResponse)
def log_progress(payload: DailyLogCreate, db: DbDep, user: PatientDep):
    return to_response(log_daily_recovery(db, patient_id=user.id, payload=payload))


@router.get("", response_model=DailyLogListResponse)
def get_progress(db: DbDep, user: PatientDep):
    return DailyLogListResponse(logs=[to_response(log) for log in list_recovery_logs(db, user.id)])


@router.get("/latest", response_model=DailyLogResponse)
def get_latest_progress(db: DbDep, user: PatientDep):
    latest = get_latest_log(db, user.id)
    if not latest:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No check-ins yet.")
    return to_response(latest)


@router.get("/dashboard", response_model=DashboardResponse)
def get_dashboard(db: DbDep, user: PatientDep):
    return build_dashboard_stats(db, user.id)


@router.get("/export.json")
def export_json(db: DbDep, user: PatientDep):
    return build_recovery_export_json(db, patient=user)


@router.get("/export.pdf")
def export_pdf(db: DbDep, user: PatientDep):
    pdf = build_recovery_pdf_bytes(db, patient=user)
    return {
        "filename": f"recovery_report_{user.id}.pdf",
        "content_type": "application/pdf",
        "base64": base64.b64encode(pdf).decode("utf-8"),
    }
