from __future__ import annotations

import logging

from sqlalchemy import or_
from sqlalchemy.orm import Session

from models.user import User
from models.viewer import ViewerAccess
from schemas.family import (
    FamilySummaryResponse,
    ViewerCreate,
    ViewerItem,
    ViewerListResponse,
    ViewerPermissions,
    ViewerPermissionsUpdate,
)
from services.recovery_service import days_since_surgery, get_latest_log

logger = logging.getLogger(__name__)

_PERMISSION_FIELDS = tuple(ViewerPermissions.model_fields.keys())


def _normalize_email(email: str) -> str:
    return email.lower().strip()


def add_viewer(db: Session, patient_id: str, payload: ViewerCreate) -> ViewerAccess | None:
    """Grant access to an email; None when that email already has an active grant."""
    email = _normalize_email(payload.email)
    duplicate = (
        db.query(ViewerAccess.id)
        .filter(
            ViewerAccess.patient_id == patient_id,
            ViewerAccess.viewer_email == email,
            ViewerAccess.is_active.is_(True),
        )
        .first()
    )
    if duplicate:
        return None

    existing_user = db.query(User).filter(User.email == email).first()

    grant = ViewerAccess(
        patient_id=patient_id,
        viewer_email=email,
        viewer_name=payload.name,
        relationship=payload.relationship,
        viewer_user_id=existing_user.id if existing_user and existing_user.role == "family_viewer" else None,
        **payload.permissions.model_dump(),
    )
    db.add(grant)
    db.commit()
    db.refresh(grant)
    logger.info("Viewer access granted patient=%s grant=%s", patient_id, grant.id)
    return grant


def list_viewers(db: Session, patient_id: str) -> ViewerListResponse:
    grants = (
        db.query(ViewerAccess)
        .filter(ViewerAccess.patient_id == patient_id, ViewerAccess.is_active.is_(True))
        .order_by(ViewerAccess.created_at.asc())
        .all()
    )
    return ViewerListResponse(viewers=[to_response(g) for g in grants])


def _get_active_grant(db: Session, patient_id: str, grant_id: str) -> ViewerAccess | None:
    return (
        db.query(ViewerAccess)
        .filter(
            ViewerAccess.id == grant_id,
            ViewerAccess.patient_id == patient_id,
            ViewerAccess.is_active.is_(True),
        )
        .first()
    )


def update_permissions(
    db: Session, patient_id: str, grant_id: str, patch: ViewerPermissionsUpdate
) -> ViewerAccess | None:
    grant = _get_active_grant(db, patient_id, grant_id)
    if not grant:
        return None

    for field, value in patch.model_dump(exclude_none=True).items():
        setattr(grant, field, value)
    db.add(grant)
    db.commit()
    db.refresh(grant)
    return grant


def revoke_viewer(db: Session, patient_id: str, grant_id: str) -> bool:
    grant = _get_active_grant(db, patient_id, grant_id)
    if not grant:
        return False
    grant.is_active = False
    db.add(grant)
    db.commit()
    logger.info("Viewer access revoked patient=%s grant=%s", patient_id, grant_id)
    return True


def find_grant_for_viewer(db: Session, patient_id: str, viewer: User) -> ViewerAccess | None:
    # Same rule as add_viewer: only family_viewer accounts hold grants.
    if viewer.role != "family_viewer":
        return None

    grant = (
        db.query(ViewerAccess)
        .filter(
            ViewerAccess.patient_id == patient_id,
            ViewerAccess.is_active.is_(True),
            or_(ViewerAccess.viewer_user_id == viewer.id, ViewerAccess.viewer_email == _normalize_email(viewer.email)),
        )
        .first()
    )
    if grant and grant.viewer_user_id is None:
        # First visit by an invited email: link the grant to the account.
        grant.viewer_user_id = viewer.id
        db.add(grant)
        db.commit()
        db.refresh(grant)
    return grant


def build_family_summary(db: Session, grant: ViewerAccess) -> FamilySummaryResponse:
    patient = db.query(User).filter(User.id == grant.patient_id).first()
    latest = get_latest_log(db, grant.patient_id)

    summary = FamilySummaryResponse(patient_name=patient.name if patient else None)
    if latest:
        summary.last_check_in = latest.log_date.isoformat()

    if grant.can_view_progress:
        summary.recovery_score = int(latest.recovery_score) if latest else 0
        summary.days_since_surgery = days_since_surgery(patient, latest)
        summary.trend = latest.trend if latest else "stable"
    if grant.can_view_medications and latest:
        summary.medicine_adherence_percent = int(latest.medicine_adherence_percent)
    if grant.can_view_exercises and latest:
        summary.exercise_completion_percent = int(latest.exercise_completion_percent)
    if grant.can_view_mood and latest:
        summary.current_mood = latest.mood
    if grant.can_view_pain_score and latest:
        summary.pain_score = int(latest.pain_score)
    return summary


def to_response(grant: ViewerAccess) -> ViewerItem:
    return ViewerItem(
        id=str(grant.id),
        patient_id=str(grant.patient_id),
        email=grant.viewer_email,
        name=grant.viewer_name,
        relationship=grant.relationship,
        permissions=ViewerPermissions(**{f: getattr(grant, f) for f in _PERMISSION_FIELDS}),
        is_linked=grant.viewer_user_id is not None,
        created_at=grant.created_at.isoformat(),
    )
