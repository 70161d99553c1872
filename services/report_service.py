from __future__ import annotations

from io import BytesIO

from reportlab.lib.pagesizes import letter
from reportlab.lib.units import inch
from reportlab.pdfgen import canvas
from sqlalchemy.orm import Session

from models.user import User
from services.recovery_service import build_dashboard_stats, list_recovery_logs, to_response

DISCLAIMER = "Patient-reported recovery log. Not medical advice, not a diagnosis. Share with your care team."
EXPORT_DAYS = 30


def build_recovery_export_json(db: Session, patient: User) -> dict:
    logs = list_recovery_logs(db, patient.id, limit=EXPORT_DAYS)
    dashboard = build_dashboard_stats(db, patient.id)
    return {
        "disclaimer": DISCLAIMER,
        "patient": {
            "id": str(patient.id),
            "name": patient.name,
            "recovery_type": patient.recovery_type,
            "recovery_start_date": patient.recovery_start_date.isoformat() if patient.recovery_start_date else None,
        },
        "dashboard": dashboard.model_dump(),
        # oldest first, the order a clinician reads a log
        "logs": [to_response(log).model_dump(mode="json") for log in reversed(logs)],
    }


def build_recovery_pdf_bytes(db: Session, patient: User) -> bytes:
    export = build_recovery_export_json(db, patient)
    info = export["patient"]
    dash = export["dashboard"]

    buf = BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    w, h = letter

    y = h - 0.75 * inch
    c.setFont("Helvetica-Bold", 16)
    c.drawString(0.75 * inch, y, "Recovery Companion - Recovery Report")

    y -= 0.3 * inch
    c.setFont("Helvetica", 9)
    c.setFillGray(0.25)
    c.drawString(0.75 * inch, y, export["disclaimer"])
    c.setFillGray(0)

    y -= 0.45 * inch
    c.setFont("Helvetica-Bold", 11)
    c.drawString(0.75 * inch, y, "Summary")

    y -= 0.25 * inch
    c.setFont("Helvetica", 10)
    weekly = dash["weekly_progress"]
    lines = [
        f"Patient: {info['name']} ({info['id']})",
        f"Recovery type: {info.get('recovery_type') or '-'}",
        f"Recovery start: {info.get('recovery_start_date') or '-'}",
        f"Days since surgery: {dash['days_since_surgery']}",
        f"Recovery score: {dash['recovery_score']} / 100 ({dash['recovery_trend']})",
        f"7-day medicine adherence: {weekly['medicine_adherence']}%",
        f"7-day exercise completion: {weekly['exercise_completion']}%",
        f"7-day average pain: {weekly['average_pain_score']} / 10",
    ]
    for line in lines:
        c.drawString(0.75 * inch, y, line)
        y -= 0.2 * inch

    y -= 0.1 * inch
    c.setFont("Helvetica-Bold", 11)
    c.drawString(0.75 * inch, y, f"Daily Check-ins (last {EXPORT_DAYS})")
    y -= 0.25 * inch
    c.setFont("Helvetica", 9)

    for log in export["logs"]:
        row = (
            f"{log['log_date']} • day {log['day_number']} • score {log['recovery_score']} ({log['trend']}) • "
            f"pain {log['pain_score']} • mood {log['mood']} • swelling {log['swelling']} • "
            f"meds {log['medicine_adherence_percent']}% • exercise {log['exercise_completion_percent']}%"
        )
        c.drawString(0.75 * inch, y, row[:130])
        y -= 0.18 * inch
        if y < 1.2 * inch:
            c.showPage()
            c.setFont("Helvetica", 9)
            y = h - 0.75 * inch

    c.showPage()
    c.save()
    return buf.getvalue()
