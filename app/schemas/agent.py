"""
Esquemas Pydantic para el agente de IA
"""
from pydantic import BaseModel, Field
from typing import List, Optional
from enum import Enum

from app.schemas.medication import MedicationResponse


class ChatRole(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class ChatMessage(BaseModel):
    role: ChatRole
    content: str


class ChatRequest(BaseModel):
    message: str = Field(..., min_length=1, max_length=4000)


class ChatResponse(BaseModel):
    """Turno del agente: mensajes, voz y acciones ejecutadas"""
    messages: List[ChatMessage] = []
    speech: Optional[str] = None
    actions: List[str] = []
    notifications_created: int = 0


class SummaryResponse(BaseModel):
    summary: str


class InsightResponse(BaseModel):
    insight: str
    next_dose: Optional[MedicationResponse] = None
    mood: str
    throttled: bool = False


class DistressResponse(BaseModel):
    handled: bool
    reason: Optional[str] = None
    message: Optional[str] = None
    mood: Optional[str] = None
    wake_up: Optional[ChatResponse] = None


class VerifyRequest(BaseModel):
    frame: str = Field(..., min_length=1, description="Cuadro JPEG en base64")
    mime_type: str = "image/jpeg"


class VerifyResponse(BaseModel):
    verified: bool
    medication_id: Optional[int] = None
    log_id: Optional[int] = None


class LoginRequest(BaseModel):
    code: str = Field(..., min_length=1, max_length=64)


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
