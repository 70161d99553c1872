from fastapi import APIRouter

from api.deps import CurrentUserDep, DbDep
from models.user import User
from schemas.user import UserProfile, UserProfileUpdate

router = APIRouter()


def _profile(user: User) -> UserProfile:
    return UserProfile(
        id=str(user.id),
        email=user.email,
        name=user.name,
        role=user.role,
        phone=user.phone,
        recovery_start_date=user.recovery_start_date,
        recovery_type=user.recovery_type,
        recovery_score=int(user.recovery_score or 0),
    )


@router.get("/me", response_model=UserProfile)
def get_me(user: CurrentUserDep):
    return _profile(user)


@router.put("/me", response_model=UserProfile)
def update_me(payload: UserProfileUpdate, db: DbDep, user: CurrentUserDep):
    for field, value in payload.model_dump(exclude_none=True).items():
        setattr(user, field, value)
    db.add(user)
    db.commit()
    db.refresh(user)
    return _profile(user)
