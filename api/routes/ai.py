from fastapi import APIRouter

from api.deps import DbDep, PatientDep, ResponderDep
from schemas.ai import ChatHistoryResponse, ChatRequest, ChatResponse
from services.chat_service import handle_chat, list_chat_history

router = APIRouter()


@router.post("/chat", response_model=ChatResponse)
def chat(payload: ChatRequest, db: DbDep, user: PatientDep, responder: ResponderDep):
    return handle_chat(db, patient_id=user.id, message=payload.message, responder=responder)


@router.get("/history", response_model=ChatHistoryResponse)
def chat_history(db: DbDep, user: PatientDep):
    return list_chat_history(db, patient_id=user.id)
