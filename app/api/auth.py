"""
Endpoints de autenticación con código de acceso
"""
from fastapi import APIRouter, Depends, HTTPException, status

from app.core.dependencies import get_current_session, SESSION_SUBJECT
from app.core.security import verify_access_code, create_access_token
from app.schemas.agent import LoginRequest, TokenResponse
import logging

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/login", response_model=TokenResponse)
async def login(credentials: LoginRequest):
    """
    Login con el código de acceso del paciente
    """
    if not verify_access_code(credentials.code):
        logger.warning("Intento de login con código inválido")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Código de acceso incorrecto",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token = create_access_token(data={"sub": SESSION_SUBJECT})
    return {"access_token": access_token, "token_type": "bearer"}


@router.get("/me")
async def get_session(session: dict = Depends(get_current_session)):
    """
    Sesión actual
    """
    return {"subject": session["sub"], "expires_at": session.get("exp")}
