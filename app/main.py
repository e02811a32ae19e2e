"""
Archivo principal de la aplicación FastAPI - MediSafe
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from app.core.config import get_settings
from app.core.database import SessionLocal, create_tables, test_connection, get_db_info
from app.api import api_router
from app.services.background import BackgroundJobs
from app.services.notification_service import NotificationService
from app.services.runtime import CompanionRuntime
import logging

settings = get_settings()

# Configurar logging
logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def load_persisted_notifications(runtime: CompanionRuntime):
    """Cargar las notificaciones del agente en el feed al arrancar"""
    db = SessionLocal()
    try:
        runtime.feed.merge_persisted(NotificationService(db).get_recent(settings.AI_NOTIFICATIONS_LIMIT))
    except Exception as e:
        logger.error(f"❌ Error cargando notificaciones: {e}")
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Gestión del ciclo de vida de la aplicación"""
    # Startup
    logger.info("🚀 Iniciando MediSafe API...")
    logger.info(f"🌍 Ambiente: {settings.ENVIRONMENT}")

    if test_connection():
        db_info = get_db_info()
        if db_info:
            logger.info(f"📊 {db_info['engine']} {db_info['version']} - DB: {db_info['database_name']}")
        try:
            create_tables()
            logger.info("✅ Esquema de base de datos verificado")
        except Exception as e:
            logger.error(f"❌ Error al verificar esquema: {e}")
    else:
        logger.warning("⚠️ La aplicación continuará pero sin base de datos")

    if getattr(app.state, "runtime", None) is None:
        app.state.runtime = CompanionRuntime(settings)
    load_persisted_notifications(app.state.runtime)

    jobs = None
    if settings.SCHEDULER_ENABLED:
        jobs = BackgroundJobs(app.state.runtime)
        jobs.start()

    if not app.state.runtime.ai.enabled:
        logger.warning("⚠️ GEMINI_API_KEY no configurada: el agente usará respuestas de respaldo")

    logger.info("🎯 MediSafe API lista para recibir requests")
    yield

    # Shutdown
    if jobs is not None:
        jobs.shutdown()
    logger.info("🛑 Cerrando MediSafe API...")


def create_application() -> FastAPI:
    """Factory function para crear la aplicación FastAPI"""

    app = FastAPI(
        title=settings.PROJECT_NAME,
        description="""
## MediSafe API

Acompañante de adherencia a medicamentos.

### Características principales:
- 💊 Medicamentos y horarios de toma
- 📋 Historial de dosis y comparación de adherencia
- ⏰ Recordatorios y alertas urgentes con posposición
- 🔔 Feed de notificaciones
- 🤖 Agente de IA (chat, resumen médico, angustia, verificación por cámara)
- ⚖️ MedBox con báscula
        """,
        version=settings.VERSION,
        lifespan=lifespan,
    )

    setup_middlewares(app)
    setup_routes(app)

    return app


def setup_middlewares(app: FastAPI):
    """Configurar middlewares de la aplicación"""

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )
    logger.info(f"🌐 Orígenes permitidos: {settings.CORS_ORIGINS}")


def setup_routes(app: FastAPI):
    """Configurar rutas de la aplicación"""

    @app.get("/")
    async def root():
        return {
            "message": "💊 MediSafe API",
            "version": settings.VERSION,
            "environment": settings.ENVIRONMENT,
            "documentation": "/docs",
            "health": "/health",
            "api": "/api"
        }

    @app.get("/health")
    async def health_check():
        """Health check completo de la aplicación"""
        db_status = "connected" if test_connection() else "disconnected"

        health_status = {
            "status": "healthy" if db_status == "connected" else "degraded",
            "service": settings.PROJECT_NAME,
            "version": settings.VERSION,
            "environment": settings.ENVIRONMENT,
            "database": {"status": db_status},
            "timestamp": datetime.now(timezone.utc).isoformat()
        }

        if settings.DEBUG:
            db_info = get_db_info()
            if db_info:
                health_status["database"].update(db_info)

        return health_status

    app.include_router(api_router, prefix="/api")


# Crear la aplicación
app = create_application()


# Solo para desarrollo con uvicorn run
if __name__ == "__main__":
    import uvicorn

    logger.info(f"🌐 URL: http://{settings.HOST}:{settings.PORT}")
    uvicorn.run(
        "app.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower(),
    )
