"""
Configuración de la aplicación MediSafe
"""
from functools import lru_cache
from typing import List
from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Configuración de la aplicación"""

    # Información del proyecto
    PROJECT_NAME: str = Field(default="MediSafe API")
    VERSION: str = "1.0.0"
    ENVIRONMENT: str = Field(default="development")
    DEBUG: bool = Field(default=False)

    # Configuración del servidor
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=3000)

    # Seguridad (login con código de acceso)
    SECRET_KEY: str = Field(default="change-me-medisafe")
    ALGORITHM: str = Field(default="HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(default=720)
    ACCESS_CODE: str = Field(default="1234")

    # Base de datos
    DATABASE_URL: str = Field(default="sqlite:///./medisafe.db")

    # CORS
    CORS_ORIGINS: List[str] = Field(
        default=[
            "http://localhost:3000",
            "http://localhost:5173"
        ]
    )

    # Gemini
    GEMINI_API_KEY: str = Field(default="")
    GEMINI_MODEL: str = Field(default="gemini-2.5-flash")
    GEMINI_SUMMARY_MODEL: str = Field(default="gemini-2.0-flash")

    # Temporizadores en segundo plano
    SCHEDULER_ENABLED: bool = Field(default=True)
    REMINDER_CHECK_INTERVAL: int = Field(default=60)
    MEDBOX_SIMULATION_INTERVAL: int = Field(default=10)
    MEDBOX_SIMULATION_PROBABILITY: float = Field(default=0.05)
    MEDBOX_PILL_WEIGHT_GRAMS: float = Field(default=5.0)

    # Recordatorios
    URGENT_AFTER_MINUTES: int = Field(default=15)
    URGENT_CATCH_UP_MINUTES: int = Field(default=60)

    # Agente
    INSIGHT_MIN_INTERVAL: int = Field(default=30)
    DISTRESS_COOLDOWN: int = Field(default=10)
    AI_NOTIFICATIONS_LIMIT: int = Field(default=20)
    FEED_MAX_ENTRIES: int = Field(default=100)

    # Logging
    LOG_LEVEL: str = Field(default="INFO")

    @property
    def database_url(self) -> str:
        return self.DATABASE_URL

    @property
    def is_sqlite(self) -> bool:
        return self.DATABASE_URL.startswith("sqlite")

    @property
    def is_production(self) -> bool:
        """Verificar si estamos en producción"""
        return self.ENVIRONMENT.lower() == "production"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """Obtener configuración con cache"""
    return Settings()
