from fastapi import APIRouter, HTTPException, status

from api.deps import DbDep
from schemas.auth import LoginRequest, LoginResponse, RegisterRequest
from services.auth_service import authenticate, issue_login, register_user

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
def login(payload: LoginRequest, db: DbDep):
    user = authenticate(db, payload.email, payload.password)
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials.")
    return issue_login(user)


@router.post("/register", response_model=LoginResponse, status_code=status.HTTP_201_CREATED)
def register(payload: RegisterRequest, db: DbDep):
    user = register_user(db, payload)
    if not user:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="User already exists.")
    return issue_login(user)
