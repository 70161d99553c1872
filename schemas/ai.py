from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    message: str = Field(..., max_length=4000)


class ChatResponse(BaseModel):
    message: str
    safety_flag: str  # safe | redirect_to_doctor | pain_warning | blocked_request


class ChatHistoryItem(BaseModel):
    id: str
    created_at: str
    user_message: str
    ai_response: str | None
    intent_type: str
    risk_level: str
    was_blocked: bool


class ChatHistoryResponse(BaseModel):
    items: list[ChatHistoryItem]
