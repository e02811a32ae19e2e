"""
Configuración de base de datos con SQLAlchemy
"""
from sqlalchemy import create_engine, text
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
import logging

# Crear Base ANTES de importar config para evitar import circular
Base = declarative_base()

from app.core.config import get_settings

logger = logging.getLogger(__name__)

settings = get_settings()


def _engine_options(url: str) -> dict:
    """Opciones del engine según el motor"""
    if not url.startswith("sqlite"):
        return {
            "pool_size": 20,
            "max_overflow": 30,
            "pool_pre_ping": True,
            "pool_recycle": 3600,  # Reciclar conexiones cada hora
        }

    options = {"connect_args": {"check_same_thread": False}}
    # Base en memoria: una sola conexión compartida
    if url in ("sqlite://", "sqlite:///:memory:"):
        options["poolclass"] = StaticPool
    return options


engine = create_engine(
    settings.database_url,
    echo=settings.DEBUG,
    **_engine_options(settings.database_url)
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    """
    Dependency para obtener sesión de base de datos
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def create_tables():
    """
    Crear todas las tablas si no existen
    """
    try:
        # Importar todos los modelos para que se registren
        from app.models import medication, dose_log, profile, medbox, notification, app_settings  # noqa: F401

        Base.metadata.create_all(bind=engine)
        logger.info("✅ Tablas creadas/verificadas exitosamente")

    except Exception as e:
        logger.error(f"❌ Error al crear tablas: {e}")
        raise


def drop_tables():
    """
    Eliminar todas las tablas (usar con cuidado)
    """
    try:
        Base.metadata.drop_all(bind=engine)
        logger.warning("⚠️ Todas las tablas han sido eliminadas")
    except Exception as e:
        logger.error(f"❌ Error al eliminar tablas: {e}")
        raise


def test_connection() -> bool:
    """
    Probar conexión a la base de datos
    """
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1")).fetchone()
        return True
    except Exception as e:
        logger.error(f"❌ Error de conexión a la base de datos: {e}")
        return False


def get_db_info():
    """
    Obtener información de la base de datos
    """
    try:
        with engine.connect() as conn:
            if settings.is_sqlite:
                version = conn.execute(text("SELECT sqlite_version()")).fetchone()[0]
                engine_name = "SQLite"
            else:
                version = conn.execute(text("SELECT VERSION()")).fetchone()[0]
                engine_name = engine.dialect.name

            return {
                "engine": engine_name,
                "version": version,
                "database_name": engine.url.database,
            }
    except Exception as e:
        logger.error(f"Error al obtener info de DB: {e}")
        return None
