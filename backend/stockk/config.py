import logging
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# Charger les variables d'environnement AVANT de définir la classe Settings
load_dotenv()


# Classe de configuration utilisant Pydantic BaseSettings
class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignorer les variables d'env non définies dans le modèle
    )

    ENVIRONMENT: str = "development"

    # --- Serveur HTTP ---
    HTTP_HOST: str = "0.0.0.0"
    HTTP_PORT: int = 8000
    API_V1_PREFIX: str = "/api/v1"

    # --- Base de Données ---
    # DATABASE_URL a priorité sur les variables POSTGRES_* si elle est définie
    DATABASE_URL: Optional[str] = None
    POSTGRES_DB: str = "stockk"
    POSTGRES_USER: str = "stockk"
    POSTGRES_PASSWORD: str = ""
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: str = "5432"
    DB_ECHO_LOG: bool = False
    DB_POOL_SIZE: int = 5
    DB_MAX_OVERFLOW: int = 10

    # --- Commandes ---
    # Durée maximale de la transaction de création de commande (None = pas de limite)
    ORDER_TIMEOUT_SECONDS: Optional[float] = 30.0

    # --- File de tâches (Celery / Redis) ---
    REDIS_URL: str = "redis://localhost:6379/0"
    ALERT_QUEUE: str = "critical"
    # Broker Redis: 0 est la priorité la plus haute
    ALERT_PRIORITY: int = 0
    ALERT_MAX_RETRY: int = 10
    ALERT_RETRY_DELAY_SECONDS: int = 60

    # --- SMTP ---
    SMTP_HOST: str = "smtp.gmail.com"
    SMTP_PORT: int = 587
    SMTP_USE_TLS: bool = True
    SENDER_NAME: str = "Stockk"
    SENDER_EMAIL: str = ""
    SENDER_PASSWORD: str = ""
    # Destinataire des alertes de stock bas
    MERCHANT_EMAIL: str = ""

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@"
            f"{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"


@lru_cache
def get_settings() -> Settings:
    """Charge la configuration une seule fois et la met en cache."""
    settings = Settings()

    # Les secrets vides ne bloquent pas le démarrage (tests, dev) mais sont signalés
    if not settings.DATABASE_URL and not settings.POSTGRES_PASSWORD:
        logger.warning("POSTGRES_PASSWORD n'est pas définie et DATABASE_URL est absente.")
    if not settings.SENDER_EMAIL or not settings.SENDER_PASSWORD:
        logger.warning("SENDER_EMAIL ou SENDER_PASSWORD non définie: l'envoi des alertes email échouera.")
    if not settings.MERCHANT_EMAIL:
        logger.warning("MERCHANT_EMAIL non définie: aucun destinataire pour les alertes de stock.")

    logger.info(
        f"Configuration chargée: env={settings.ENVIRONMENT}, DB={settings.POSTGRES_DB}@{settings.POSTGRES_HOST}, "
        f"Redis={settings.REDIS_URL}, file alertes={settings.ALERT_QUEUE}"
    )
    return settings
