import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr
from typing import Optional

import requests
from fastapi import Request

from a11ycheck.platform.config import Settings
from a11ycheck.platform.logger import get_logger

logger = get_logger("email_service")


class MailTransport:
    """
    Sends HTML email via an HTTP relay service when one is configured,
    falling back to direct SMTP. Built once at startup by build_mail_transport.
    """

    def __init__(self, settings: Settings):
        self.settings = settings

    @property
    def from_address(self) -> str:
        return self.settings.MAIL_FROM_ADDRESS or self.settings.MAIL_USERNAME or ""

    @property
    def relay_enabled(self) -> bool:
        return bool(self.settings.EMAIL_RELAY_URL and self.settings.EMAIL_RELAY_API_KEY)

    @property
    def smtp_enabled(self) -> bool:
        return bool(self.settings.MAIL_USERNAME and self.settings.MAIL_PASSWORD)

    def send(self, to_email: str, subject: str, body: str):
        if self.relay_enabled:
            try:
                self.send_via_relay(to_email, subject, body)
                return
            except Exception as e:
                logger.error(f"Email relay failed: {str(e)}")
                if not self.smtp_enabled:
                    raise
                logger.info("Attempting direct SMTP as fallback...")

        self.send_direct_smtp(to_email, subject, body)

    def send_via_relay(self, to_email: str, subject: str, body: str):
        payload = {
            "to_email": to_email,
            "subject": subject,
            "body": body,
            "from_address": self.from_address,
        }
        headers = {
            "X-API-Key": self.settings.EMAIL_RELAY_API_KEY,
            "Content-Type": "application/json",
        }

        try:
            response = requests.post(
                self.settings.EMAIL_RELAY_URL,
                json=payload,
                headers=headers,
                timeout=self.settings.EMAIL_RELAY_TIMEOUT,
            )
            response.raise_for_status()
        except requests.exceptions.Timeout:
            logger.error(f"Email relay timeout for {to_email}")
            raise Exception("Email relay service timeout")
        except requests.exceptions.RequestException as e:
            if getattr(e, "response", None) is not None:
                logger.error(f"Relay responded {e.response.status_code}: {e.response.text}")
            raise Exception(f"Email relay service error: {str(e)}")

        logger.info(f"Email sent via relay to {to_email}")

    def send_direct_smtp(self, to_email: str, subject: str, body: str):
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = formataddr((self.settings.MAIL_FROM_NAME, self.from_address))
        msg["To"] = to_email
        msg.attach(MIMEText(body, "html"))

        host, port = self.settings.MAIL_HOST, self.settings.MAIL_PORT
        username, password = self.settings.MAIL_USERNAME, self.settings.MAIL_PASSWORD

        if port == 465:
            context = ssl.create_default_context()
            with smtplib.SMTP_SSL(host, port, context=context) as server:
                server.login(username, password)
                server.sendmail(self.from_address, to_email, msg.as_string())
        else:
            with smtplib.SMTP(host, port) as server:
                server.ehlo()
                if str(self.settings.MAIL_ENCRYPTION).upper() in ["TLS", "TRUE"]:
                    server.starttls()
                    server.ehlo()
                server.login(username, password)
                server.sendmail(self.from_address, to_email, msg.as_string())

        logger.info(f"Email sent via SMTP to {to_email}")


def build_mail_transport(settings: Settings) -> Optional[MailTransport]:
    if not settings.mail_configured:
        return None
    return MailTransport(settings)


def get_mail_transport(request: Request) -> Optional[MailTransport]:
    return getattr(request.app.state, "mail_transport", None)
