from fastapi import APIRouter

from api.routes import ai, auth, exercises, family, medications, recovery, reminders, users

api_router = APIRouter()

api_router.include_router(auth.router, tags=["auth"], prefix="/auth")
api_router.include_router(users.router, tags=["users"], prefix="/users")
api_router.include_router(ai.router, tags=["ai"], prefix="/ai")
api_router.include_router(recovery.router, tags=["recovery"], prefix="/recovery")
api_router.include_router(family.router, tags=["family"], prefix="/family")
api_router.include_router(medications.router, tags=["medications"], prefix="/medications")
api_router.include_router(exercises.router, tags=["exercises"], prefix="/exercises")
api_router.include_router(reminders.router, tags=["reminders"], prefix="/reminders")
