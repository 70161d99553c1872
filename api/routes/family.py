from fastapi import APIRouter, HTTPException, status

from api.deps import CurrentUserDep, DbDep, PatientDep
from schemas.family import FamilySummaryResponse, ViewerCreate, ViewerItem, ViewerListResponse, ViewerPermissionsUpdate
from services.family_service import (
    add_viewer,
    build_family_summary,
    find_grant_for_viewer,
    list_viewers,
    revoke_viewer,
    to_response,
    update_permissions,
)

router = APIRouter()


@router.get("", response_model=ViewerListResponse)
def get_viewers(db: DbDep, user: PatientDep):
    return list_viewers(db, user.id)


@router.post("", response_model=ViewerItem, status_code=status.HTTP_201_CREATED)
def create_viewer(payload: ViewerCreate, db: DbDep, user: PatientDep):
    grant = add_viewer(db, user.id, payload)
    if not grant:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Family member already added.")
    return to_response(grant)


@router.put("/{viewer_id}/permissions", response_model=ViewerItem)
def put_permissions(viewer_id: str, payload: ViewerPermissionsUpdate, db: DbDep, user: PatientDep):
    grant = update_permissions(db, user.id, viewer_id, payload)
    if not grant:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Family member not found.")
    return to_response(grant)


@router.delete("/{viewer_id}")
def delete_viewer(viewer_id: str, db: DbDep, user: PatientDep):
    if not revoke_viewer(db, user.id, viewer_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Family member not found.")
    return {"message": "Family member removed"}


@router.get("/progress/{patient_id}", response_model=FamilySummaryResponse)
def get_patient_progress(patient_id: str, db: DbDep, user: CurrentUserDep):
    grant = find_grant_for_viewer(db, patient_id, user)
    if not grant:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied.")
    return build_family_summary(db, grant)
