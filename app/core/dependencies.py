"""
Dependencias globales de la aplicación
"""
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from typing import Optional

from app.core.security import verify_token

# Configurar OAuth2
oauth2_scheme = OAuth2PasswordBearer(
    tokenUrl="api/auth/login",
    auto_error=False
)

SESSION_SUBJECT = "patient"


async def get_current_session(
        token: Optional[str] = Depends(oauth2_scheme)
) -> dict:
    """
    Obtener la sesión del paciente a partir del token JWT
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="No se pudo validar las credenciales",
        headers={"WWW-Authenticate": "Bearer"},
    )

    if not token:
        raise credentials_exception

    payload = verify_token(token)
    if payload.get("sub") != SESSION_SUBJECT:
        raise credentials_exception

    return payload


def get_runtime(request: Request):
    """
    Estado en memoria del acompañante
    """
    runtime = getattr(request.app.state, "runtime", None)
    if runtime is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="El acompañante no está inicializado"
        )
    return runtime
