from abc import ABC, abstractmethod
from typing import Optional


class AbstractEmailSender(ABC):
    """Canal d'envoi des alertes de stock bas.

    Le worker d'alertes envoie un message HTML par destinataire configuré.
    Un refus du destinataire est signalé par ``False`` afin que la tâche
    puisse être rejouée; une panne du transport lève une exception.
    """

    @abstractmethod
    async def send_email(
        self,
        recipient_email: str,
        subject: str,
        html_content: str,
        sender_email: Optional[str] = None,
    ) -> bool:
        """Envoie une alerte au format HTML.

        Args:
            recipient_email: Adresse du responsable des stocks.
            subject: Sujet de l'alerte.
            html_content: Rendu du gabarit ``low_stock_alert.html``.
            sender_email: Expéditeur; par défaut celui de la configuration SMTP.

        Returns:
            True si le serveur a accepté le message, False s'il a refusé le destinataire.

        Raises:
            EmailSendingException: connexion, authentification ou transport en échec.
        """
        raise NotImplementedError
