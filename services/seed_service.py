import json
from datetime import date, datetime, timedelta

from sqlalchemy.orm import Session

from models.exercise import Exercise
from models.medication import Medication
from models.recovery_log import DailyRecoveryLog
from models.user import User
from models.viewer import ViewerAccess
from services.auth_service import hash_password
from services.scoring_service import DailyRecoveryInput, compute_score, compute_trend

DEMO_PASSWORD = "Password123!"
DEMO_PATIENT_EMAIL = "demo.patient@recoverycompanion.app"
DEMO_VIEWER_EMAIL = "demo.family@recoverycompanion.app"

# (days ago, adherence, exercise, pain, mood, swelling)
_DEMO_CHECKINS = [
    (6, 70, 40, 6, "low", "moderate"),
    (5, 80, 50, 5, "ok", "moderate"),
    (4, 85, 60, 5, "ok", "mild"),
    (3, 90, 60, 4, "good", "mild"),
    (2, 100, 70, 4, "good", "mild"),
    (1, 100, 80, 3, "good", "none"),
]


def seed_demo_data(db: Session) -> None:
    # Users
    patient = db.query(User).filter(User.email == DEMO_PATIENT_EMAIL).first()
    if not patient:
        patient = User(
            email=DEMO_PATIENT_EMAIL,
            name="Demo Patient",
            role="patient",
            hashed_password=hash_password(DEMO_PASSWORD),
            recovery_start_date=date.today() - timedelta(days=14),
            recovery_type="surgery",
        )
        db.add(patient)

    viewer = db.query(User).filter(User.email == DEMO_VIEWER_EMAIL).first()
    if not viewer:
        viewer = User(
            email=DEMO_VIEWER_EMAIL,
            name="Demo Family",
            role="family_viewer",
            hashed_password=hash_password(DEMO_PASSWORD),
        )
        db.add(viewer)

    db.commit()
    db.refresh(patient)
    db.refresh(viewer)

    grant = (
        db.query(ViewerAccess)
        .filter(ViewerAccess.patient_id == patient.id, ViewerAccess.viewer_email == DEMO_VIEWER_EMAIL)
        .first()
    )
    if not grant:
        db.add(
            ViewerAccess(
                patient_id=patient.id,
                viewer_user_id=viewer.id,
                viewer_email=DEMO_VIEWER_EMAIL,
                viewer_name="Demo Family",
                relationship="spouse",
            )
        )
        db.commit()

    if db.query(Medication).filter(Medication.patient_id == patient.id).count() == 0:
        db.add_all(
            [
                Medication(
                    patient_id=patient.id,
                    name="Paracetamol",
                    dosage="500mg",
                    frequency="twice_daily",
                    times_json=json.dumps(["08:00", "20:00"]),
                    with_food=True,
                ),
                Medication(
                    patient_id=patient.id,
                    name="Vitamin D",
                    dosage="1000IU",
                    times_json=json.dumps(["09:00"]),
                ),
            ]
        )
        db.add(
            Exercise(
                patient_id=patient.id,
                name="Ankle Pumps",
                description="Point and flex the foot slowly while lying down.",
                duration_minutes=5,
                instructions_json=json.dumps(["10 slow pumps", "Rest 30 seconds", "Repeat 3 times"]),
                max_pain_threshold=5,
            )
        )
        db.commit()

    # Seed a week of check-ins if none exist.
    existing = db.query(DailyRecoveryLog).filter(DailyRecoveryLog.patient_id == patient.id).count()
    if existing == 0:
        history: list[int] = []
        score = 0
        for days_ago, adherence, exercise, pain, mood, swelling in _DEMO_CHECKINS:
            log_date = date.today() - timedelta(days=days_ago)
            score = compute_score(DailyRecoveryInput(adherence, exercise, pain, mood, swelling))
            db.add(
                DailyRecoveryLog(
                    patient_id=patient.id,
                    log_date=log_date,
                    day_number=(log_date - patient.recovery_start_date).days + 1 if patient.recovery_start_date else 1,
                    mood=mood,
                    pain_score=pain,
                    swelling=swelling,
                    medicine_adherence_percent=adherence,
                    exercise_completion_percent=exercise,
                    recovery_score=score,
                    trend=compute_trend(score, history[-7:]),
                    symptoms_json="[]",
                    created_at=datetime.utcnow() - timedelta(days=days_ago),
                )
            )
            history.append(score)
        patient.recovery_score = score
        db.add(patient)
        db.commit()
