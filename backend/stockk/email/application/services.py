import logging
from pathlib import Path
from typing import Any, Dict, List

import jinja2  # Pour le templating HTML

# Domain
from stockk.email.domain.sender import AbstractEmailSender
from stockk.email.domain.exceptions import EmailTemplateException
from stockk.ingredients.constants import LOW_STOCK_THRESHOLD_PERCENT

logger = logging.getLogger(__name__)

# Configuration du moteur de templates Jinja2
TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"

env = jinja2.Environment(
    loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR)),
    autoescape=jinja2.select_autoescape(["html", "xml"]),
)


class EmailService:
    """Service applicatif pour l'envoi d'emails métier."""

    def __init__(self, email_sender: AbstractEmailSender, sender_name: str = "Stockk"):
        self.email_sender = email_sender
        self.sender_name = sender_name
        logger.info("[EmailService] Initialisé.")

    def _render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """Charge et rend un template Jinja2."""
        try:
            template = env.get_template(template_name)
            return template.render(context)
        except jinja2.TemplateNotFound as e:
            logger.error(f"[EmailService] Template email non trouvé: {template_name} dans {TEMPLATE_DIR}")
            raise EmailTemplateException(f"Template '{template_name}' non trouvé.") from e
        except jinja2.TemplateError as e:
            logger.error(f"[EmailService] Erreur rendu template {template_name}: {e}", exc_info=True)
            raise EmailTemplateException(f"Erreur lors du rendu du template {template_name}.") from e

    async def send_low_stock_alert_email(self, recipients: List[str], ingredients: List[Any]) -> bool:
        """Envoie l'alerte de stock bas agrégée à chaque destinataire.

        ``ingredients``: objets exposant ``name`` et ``remaining_percentage``.
        Retourne False si aucun destinataire ou si un envoi a été refusé.

        Raises:
            EmailSendingException: si le transport échoue.
        """
        if not recipients:
            logger.warning("[EmailService] Aucun destinataire pour l'alerte de stock bas.")
            return False

        subject = f"Alerte stock bas - {len(ingredients)} ingrédient(s) à réapprovisionner"
        html_content = self._render_template(
            "low_stock_alert.html",
            {
                "ingredients": ingredients,
                "threshold": LOW_STOCK_THRESHOLD_PERCENT,
                "sender_name": self.sender_name,
            },
        )

        success = True
        for recipient in recipients:
            sent = await self.email_sender.send_email(
                recipient_email=recipient,
                subject=subject,
                html_content=html_content,
            )
            if sent:
                logger.info(f"[EmailService] Alerte stock bas envoyée à {recipient}")
            else:
                logger.warning(f"[EmailService] L'envoi de l'alerte stock bas a échoué (retour sender: False) pour {recipient}")
                success = False
        return success
