# app/api/__init__.py
"""
Router principal de la API
"""
from fastapi import APIRouter, Depends

from app.core.config import get_settings
from app.core.dependencies import get_current_session

# Importar todos los routers
from . import auth, medications, logs, profile, medbox, ai_notifications, settings
from . import schedule, feed, agent

app_settings = get_settings()

# Router principal de la API
api_router = APIRouter()

api_router.include_router(
    auth.router,
    prefix="/auth",
    tags=["authentication"]
)

# CRUD abierto
api_router.include_router(
    medications.router,
    prefix="/medications",
    tags=["medications"]
)

api_router.include_router(
    logs.router,
    prefix="/logs",
    tags=["logs"]
)

api_router.include_router(
    profile.router,
    prefix="/profile",
    tags=["profile"]
)

api_router.include_router(
    medbox.router,
    prefix="/medbox",
    tags=["medbox"]
)

api_router.include_router(
    ai_notifications.router,
    prefix="/ai-notifications",
    tags=["ai-notifications"]
)

api_router.include_router(
    settings.router,
    prefix="/settings",
    tags=["settings"]
)

# Acompañante (requiere sesión)
api_router.include_router(
    schedule.router,
    prefix="/schedule",
    tags=["schedule"],
    dependencies=[Depends(get_current_session)]
)

api_router.include_router(
    feed.router,
    prefix="/feed",
    tags=["feed"],
    dependencies=[Depends(get_current_session)]
)

api_router.include_router(
    agent.router,
    prefix="/agent",
    tags=["agent"],
    dependencies=[Depends(get_current_session)]
)


@api_router.get("/health")
async def api_health():
    """Health check específico de la API"""
    return {
        "status": "healthy",
        "service": app_settings.PROJECT_NAME,
        "version": app_settings.VERSION
    }
