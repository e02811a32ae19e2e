"""
Endpoints del agente de IA
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.core.dependencies import get_runtime
from app.schemas.agent import (
    ChatRequest,
    ChatResponse,
    DistressResponse,
    InsightResponse,
    SummaryResponse,
    VerifyRequest,
    VerifyResponse
)
from app.services.agent_service import AgentService, InvalidFrameError, VerificationInProgressError

router = APIRouter()


@router.post("/chat", response_model=ChatResponse)
def chat(
        chat_request: ChatRequest,
        db: Session = Depends(get_db),
        runtime=Depends(get_runtime)
):
    """
    Conversar con el agente
    """
    return AgentService(runtime, db).chat(chat_request.message.strip())


@router.post("/summary", response_model=SummaryResponse)
def generate_summary(
        db: Session = Depends(get_db),
        runtime=Depends(get_runtime)
):
    """
    Resumen de salud para el médico
    """
    return {"summary": AgentService(runtime, db).summary()}


@router.get("/insight", response_model=InsightResponse)
def get_insight(
        db: Session = Depends(get_db),
        runtime=Depends(get_runtime)
):
    """
    Siguiente toma e insight del día
    """
    return AgentService(runtime, db).insight()


@router.post("/distress", response_model=DistressResponse)
def report_distress(
        db: Session = Depends(get_db),
        runtime=Depends(get_runtime)
):
    """
    Señal de angustia detectada por el micrófono del cliente
    """
    return AgentService(runtime, db).distress()


@router.post("/verify", response_model=VerifyResponse)
def verify_ingestion(
        verify_request: VerifyRequest,
        db: Session = Depends(get_db),
        runtime=Depends(get_runtime)
):
    """
    Verificar la ingesta con un cuadro de la cámara
    """
    try:
        return AgentService(runtime, db).verify_ingestion(verify_request.frame, verify_request.mime_type)
    except InvalidFrameError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
    except VerificationInProgressError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e)
        )
