import logging
from datetime import datetime, timedelta, timezone
from typing import Any

from jose import jwt # type: ignore
from passlib.context import CryptContext # type: ignore
from sqlalchemy.orm import Session

from core.config import settings
from models.user import User
from schemas.auth import LoginResponse, RegisterRequest

logger = logging.getLogger(__name__)

# PBKDF2 avoids the native bcrypt build on some platforms.
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def normalize_email(email: str) -> str:
    return email.lower().strip()


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    return pwd_context.verify(password, hashed)


def create_access_token(sub: str, role: str, email: str) -> str:
    exp = datetime.now(timezone.utc) + timedelta(minutes=settings.access_token_expire_minutes)
    payload: dict[str, Any] = {"sub": sub, "role": role, "email": email, "exp": exp}
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> dict[str, Any]:
    return jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])


def issue_login(user: User) -> LoginResponse:
    token = create_access_token(sub=str(user.id), role=user.role, email=user.email)
    return LoginResponse(access_token=token, token_type="bearer", role=user.role, email=user.email)


def authenticate(db: Session, email: str, password: str) -> User | None:
    user = db.query(User).filter(User.email == normalize_email(email)).first()
    if not user or not verify_password(password, user.hashed_password):
        logger.info("Failed login attempt")
        return None
    return user


def register_user(db: Session, payload: RegisterRequest) -> User | None:
    """Create an account; None when the email is already registered."""
    email = normalize_email(payload.email)
    if db.query(User).filter(User.email == email).first():
        return None

    user = User(
        email=email,
        name=payload.name.strip(),
        role=payload.role,
        hashed_password=hash_password(payload.password),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Registered %s account id=%s", user.role, user.id)
    return user
