"""Unit tests for OTP email rendering and SMTP delivery."""

import smtplib
from unittest.mock import patch

import pytest

from gradii.access.mailer import EmailService, render_otp_email
from gradii.server.core.config import SMTPConfig


@pytest.fixture
def smtp_config() -> SMTPConfig:
    return SMTPConfig(host="smtp.test", port=587, user="mailer", password="secret", sender="noreply@gradii.test")


class TestRenderOtpEmail:
    def test_candidate_access_email(self):
        rendered = render_otp_email(
            "123456", "candidate_access", "Casey", "http://localhost:3000/interview/int-1", ttl_minutes=5
        )

        assert rendered.subject == "Your interview access code"
        assert "Hi Casey," in rendered.text
        assert "Code: 123456" in rendered.text
        assert "Interview link: http://localhost:3000/interview/int-1" in rendered.text
        assert "123456" in rendered.html

    def test_html_is_escaped(self):
        rendered = render_otp_email("123456", "signin", "<script>")

        assert "<script>" not in rendered.html
        assert "&lt;script&gt;" in rendered.html


class TestEmailService:
    """Test suite for ``EmailService.send_otp_email``."""

    @pytest.mark.asyncio
    async def test_disabled_without_credentials(self):
        service = EmailService(SMTPConfig())

        with patch("gradii.access.mailer.smtplib.SMTP") as mock_smtp:
            sent = await service.send_otp_email("candidate@example.com", "123456", "candidate_access")

        assert service.enabled is False
        assert sent is False
        mock_smtp.assert_not_called()

    @pytest.mark.asyncio
    async def test_sends_with_starttls(self, smtp_config):
        service = EmailService(smtp_config, otp_ttl_seconds=600)

        with patch("gradii.access.mailer.smtplib.SMTP") as mock_smtp:
            sent = await service.send_otp_email("candidate@example.com", "123456", "candidate_access", "Casey")

        assert sent is True
        mock_smtp.assert_called_once_with("smtp.test", 587, timeout=smtp_config.timeout_seconds)
        server = mock_smtp.return_value.__enter__.return_value
        server.starttls.assert_called_once()
        server.login.assert_called_once_with("mailer", "secret")
        message = server.send_message.call_args[0][0]
        assert message["To"] == "candidate@example.com"
        assert message["From"] == "Gradii <noreply@gradii.test>"
        assert "10 minutes" in message.get_body(preferencelist=("plain",)).get_content()

    @pytest.mark.asyncio
    async def test_port_465_uses_ssl(self, smtp_config):
        service = EmailService(smtp_config.model_copy(update={"port": 465}))

        with patch("gradii.access.mailer.smtplib.SMTP_SSL") as mock_ssl:
            sent = await service.send_otp_email("candidate@example.com", "123456", "candidate_access")

        assert sent is True
        mock_ssl.return_value.__enter__.return_value.send_message.assert_called_once()

    @pytest.mark.asyncio
    async def test_smtp_failure_is_reported_not_raised(self, smtp_config):
        service = EmailService(smtp_config)

        with patch("gradii.access.mailer.smtplib.SMTP") as mock_smtp:
            server = mock_smtp.return_value.__enter__.return_value
            server.login.side_effect = smtplib.SMTPAuthenticationError(535, b"bad credentials")
            sent = await service.send_otp_email("candidate@example.com", "123456", "candidate_access")

        assert sent is False

    @pytest.mark.asyncio
    async def test_network_failure_is_reported_not_raised(self, smtp_config):
        service = EmailService(smtp_config)

        with patch("gradii.access.mailer.smtplib.SMTP", side_effect=OSError("unreachable")):
            sent = await service.send_otp_email("candidate@example.com", "123456", "candidate_access")

        assert sent is False
