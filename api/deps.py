import logging
from collections.abc import Generator
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError # type: ignore
from sqlalchemy.orm import Session

from core.config import settings
from database.session import SessionLocal
from models.user import User
from services.auth_service import decode_token
from services.responder_service import Responder, build_responder
from services.seed_service import DEMO_PATIENT_EMAIL

logger = logging.getLogger(__name__)

bearer = HTTPBearer(auto_error=False)

# Tokens the dev frontend sends before a real login.
DEV_TOKENS = (None, "", "mock-token")


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


DbDep = Annotated[Session, Depends(get_db)]


def _demo_patient(db: Session) -> User:
    user = db.query(User).filter(User.email == DEMO_PATIENT_EMAIL).first()
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated.")
    return user


def get_current_user(
    db: DbDep, creds: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer)]
) -> User:
    token = creds.credentials if creds else None
    if token in DEV_TOKENS:
        # Only dev builds fall back to the seeded demo patient.
        if settings.env == "dev" and settings.seed_demo_data:
            return _demo_patient(db)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated.")

    try:
        claims = decode_token(token)
    except JWTError:
        logger.info("Rejected bearer token")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token.")

    user_id = claims.get("sub")
    user = db.query(User).filter(User.id == user_id).first() if user_id else None
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token.")
    return user


CurrentUserDep = Annotated[User, Depends(get_current_user)]


def get_current_patient(user: CurrentUserDep) -> User:
    if user.role != "patient":
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Patient access required.")
    return user


PatientDep = Annotated[User, Depends(get_current_patient)]


def get_responder() -> Responder:
    return build_responder(settings)


ResponderDep = Annotated[Responder, Depends(get_responder)]
