import logging
from typing import Union

from pydantic import ValidationError

from stockk.core.exceptions import StockkException
from stockk.email.application.services import EmailService
from stockk.ingredients.domain.repositories import AbstractIngredientRepository
from stockk.tasks.domain.exceptions import AlertTaskFailedException, MalformedTaskPayloadException
from stockk.tasks.domain.payloads import LowStockAlertPayload

logger = logging.getLogger(__name__)


class LowStockAlertProcessor:
    """Traite une tâche d'alerte stock bas.

    Positionne le verrou ``alert_sent`` de chaque ingrédient reçu puis envoie un
    seul email agrégé au commerçant. Rejouable sans risque: re-marquer un
    ingrédient déjà signalé est sans effet.
    """

    def __init__(
        self,
        ingredient_repo: AbstractIngredientRepository,
        email_service: EmailService,
        merchant_email: str,
    ):
        self.ingredient_repo = ingredient_repo
        self.email_service = email_service
        self.merchant_email = merchant_email

    async def process(self, payload: Union[bytes, str]) -> None:
        """
        Raises:
            MalformedTaskPayloadException: charge utile illisible (échec définitif).
            AlertTaskFailedException: un marquage ou l'envoi a échoué (rejouable).
            EmailSendingException: le transport email a échoué (rejouable).
        """
        try:
            alert = LowStockAlertPayload.model_validate_json(payload)
        except ValidationError as e:
            logger.error(f"[LowStockAlertProcessor] Charge utile invalide: {e}")
            raise MalformedTaskPayloadException(f"Charge utile d'alerte invalide: {e.error_count()} erreur(s).") from e

        if not alert.ingredients:
            logger.warning("[LowStockAlertProcessor] Tâche reçue sans ingrédient, rien à faire.")
            return

        # Tous les marquages sont tentés avant de décider du sort de la tâche
        failed_ids = []
        for ingredient in alert.ingredients:
            logger.info(
                f"[LowStockAlertProcessor] {ingredient.name}: {ingredient.remaining_percentage:.2f}% restant"
            )
            try:
                await self.ingredient_repo.mark_alert_sent(ingredient.id)
            except StockkException as e:
                logger.error(f"[LowStockAlertProcessor] Échec du marquage de l'ingrédient {ingredient.id}: {e}")
                failed_ids.append(ingredient.id)

        if failed_ids:
            raise AlertTaskFailedException(f"marquage impossible pour les ingrédients {failed_ids}")

        sent = await self.email_service.send_low_stock_alert_email([self.merchant_email], alert.ingredients)
        if not sent:
            raise AlertTaskFailedException(f"email refusé pour {self.merchant_email or '(aucun destinataire)'}")
        logger.info(f"[LowStockAlertProcessor] Alerte envoyée pour {len(alert.ingredients)} ingrédient(s).")
