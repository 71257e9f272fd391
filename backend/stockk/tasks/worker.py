"""Worker Celery des alertes de stock bas.

Lancement: ``celery -A stockk.tasks.worker worker -Q critical,default,low``
"""
import asyncio
import logging

from celery.exceptions import Reject
from celery.signals import setup_logging
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from stockk.config import Settings, get_settings
from stockk.core.exceptions import StockkException
from stockk.core.logging import configure_logging
from stockk.database import create_engine_from_settings, create_session_factory
from stockk.email.application.services import EmailService
from stockk.email.infrastructure.smtp_sender import SmtpEmailSender
from stockk.ingredients.infrastructure.persistence import SQLAlchemyIngredientRepository
from stockk.tasks.application.processors import LowStockAlertProcessor
from stockk.tasks.domain.exceptions import MalformedTaskPayloadException
from stockk.tasks.domain.queue import TASK_SEND_LOW_STOCK_ALERT
from stockk.tasks.infrastructure.celery_app import celery_app

logger = logging.getLogger(__name__)

app = celery_app


@setup_logging.connect
def _configure_worker_logging(**kwargs):
    configure_logging(get_settings().ENVIRONMENT)


def build_alert_processor(
    settings: Settings,
    session_factory: async_sessionmaker[AsyncSession],
) -> LowStockAlertProcessor:
    email_sender = SmtpEmailSender(
        smtp_host=settings.SMTP_HOST,
        smtp_port=settings.SMTP_PORT,
        smtp_user=settings.SENDER_EMAIL,
        smtp_password=settings.SENDER_PASSWORD,
        default_sender=settings.SENDER_EMAIL,
        sender_name=settings.SENDER_NAME,
        use_tls=settings.SMTP_USE_TLS,
    )
    return LowStockAlertProcessor(
        ingredient_repo=SQLAlchemyIngredientRepository(session_factory),
        email_service=EmailService(email_sender, sender_name=settings.SENDER_NAME),
        merchant_email=settings.MERCHANT_EMAIL,
    )


async def _process_payload(payload: str) -> None:
    # Chaque exécution a sa propre boucle asyncio: moteur dédié, sans pool partagé
    settings = get_settings()
    engine = create_engine_from_settings(settings, use_null_pool=True)
    try:
        processor = build_alert_processor(settings, create_session_factory(engine))
        await processor.process(payload)
    finally:
        await engine.dispose()


@celery_app.task(bind=True, name=TASK_SEND_LOW_STOCK_ALERT)
def send_low_stock_alert(self, payload: str, max_retry: int = 10):
    """Tâche Celery: échec définitif rejeté sans remise en file, échec transitoire rejoué."""
    try:
        asyncio.run(_process_payload(payload))
    except MalformedTaskPayloadException as e:
        logger.error(f"[send_low_stock_alert] Tâche {self.request.id} rejetée définitivement: {e}")
        raise Reject(str(e), requeue=False)
    except StockkException as e:
        logger.warning(
            f"[send_low_stock_alert] Tâche {self.request.id} en échec "
            f"(tentative {self.request.retries + 1}/{max_retry + 1}): {e}"
        )
        raise self.retry(exc=e, countdown=get_settings().ALERT_RETRY_DELAY_SECONDS, max_retries=max_retry)
