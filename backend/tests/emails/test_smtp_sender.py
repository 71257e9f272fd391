import smtplib
from unittest.mock import patch

import pytest

from stockk.email.domain.exceptions import EmailConfigurationException, EmailSendingException
from stockk.email.infrastructure.smtp_sender import SmtpEmailSender


@pytest.fixture
def smtp_sender():
    """Fixture pour l'instance SmtpEmailSender."""
    return SmtpEmailSender(
        smtp_host="smtp.test.com",
        smtp_port=587,
        smtp_user="alerts@stockk.test",
        smtp_password="test_password",
        sender_name="Stockk",
    )


def test_smtp_sender_initialization(smtp_sender):
    assert smtp_sender.smtp_host == "smtp.test.com"
    assert smtp_sender.smtp_port == 587
    # L'expéditeur par défaut est l'utilisateur SMTP
    assert smtp_sender.default_sender == "alerts@stockk.test"
    assert smtp_sender.use_tls is True


def test_smtp_sender_initialization_missing_config():
    """Test que l'initialisation échoue si la configuration est incomplète."""
    with pytest.raises(EmailConfigurationException):
        SmtpEmailSender(smtp_host="smtp.test.com", smtp_port=587, smtp_user="", smtp_password="test")


@pytest.mark.asyncio
async def test_send_email_success(smtp_sender):
    """Test l'envoi réussi d'un email."""
    with patch("smtplib.SMTP") as mock_smtp:
        mock_server = mock_smtp.return_value.__enter__.return_value

        result = await smtp_sender.send_email(
            recipient_email="chef@stockk.test",
            subject="Alerte stock bas",
            html_content="<h1>Test</h1>",
        )

    assert result is True
    mock_smtp.assert_called_once_with("smtp.test.com", 587)
    mock_server.starttls.assert_called_once()
    mock_server.login.assert_called_once_with("alerts@stockk.test", "test_password")
    sender, recipients, message = mock_server.sendmail.call_args.args
    assert sender == "alerts@stockk.test"
    assert recipients == ["chef@stockk.test"]
    assert "Subject: Alerte stock bas" in message
    assert "Stockk <alerts@stockk.test>" in message


@pytest.mark.asyncio
async def test_send_email_without_tls():
    sender = SmtpEmailSender(
        smtp_host="localhost", smtp_port=25, smtp_user="u@stockk.test", smtp_password="p", use_tls=False
    )
    with patch("smtplib.SMTP") as mock_smtp:
        mock_server = mock_smtp.return_value.__enter__.return_value
        assert await sender.send_email("chef@stockk.test", "Sujet", "<p>x</p>") is True
    mock_server.starttls.assert_not_called()


@pytest.mark.asyncio
async def test_send_email_authentication_error(smtp_sender):
    with patch("smtplib.SMTP") as mock_smtp:
        mock_server = mock_smtp.return_value.__enter__.return_value
        mock_server.login.side_effect = smtplib.SMTPAuthenticationError(535, b"Authentication failed")

        with pytest.raises(EmailSendingException):
            await smtp_sender.send_email("chef@stockk.test", "Sujet", "<p>x</p>")


@pytest.mark.asyncio
async def test_send_email_recipient_refused(smtp_sender):
    with patch("smtplib.SMTP") as mock_smtp:
        mock_server = mock_smtp.return_value.__enter__.return_value
        mock_server.sendmail.side_effect = smtplib.SMTPRecipientsRefused({"chef@stockk.test": (550, b"unknown")})

        assert await smtp_sender.send_email("chef@stockk.test", "Sujet", "<p>x</p>") is False


@pytest.mark.asyncio
async def test_send_email_server_unreachable(smtp_sender):
    with patch("smtplib.SMTP", side_effect=ConnectionRefusedError("refused")):
        with pytest.raises(EmailSendingException):
            await smtp_sender.send_email("chef@stockk.test", "Sujet", "<p>x</p>")
