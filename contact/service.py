"""
Contact form delivery using Resend.

Every landing page inquiry becomes one plain-text email to the studio,
with reply-to set to the visitor.
"""

import os
import logging
from datetime import datetime
from typing import Dict, Any
import resend
from shared.permissions import ValidationError

logger = logging.getLogger(__name__)


class EmailNotConfiguredError(Exception):
    """Raised when the Resend key or contact addresses are missing."""
    pass


class EmailDeliveryError(Exception):
    """Raised when Resend rejects or fails to send a message."""
    pass


class ContactService:
    """Service for sending contact form inquiries."""

    def __init__(self):
        self.api_key = os.environ.get("RESEND_API_KEY")
        self.from_email = os.environ.get("CONTACT_FROM_EMAIL")
        self.to_email = os.environ.get("CONTACT_TO_EMAIL")
        self.enabled = bool(self.api_key and self.from_email and self.to_email)

        if self.enabled:
            resend.api_key = self.api_key

    async def send_inquiry(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Send a contact inquiry to the studio.

        Args:
            data: {"name", "email", "phone"?, "details"}

        Returns:
            Dict with the provider message id and send time

        Raises:
            ValidationError: If name, email or details is missing
            EmailNotConfiguredError: If Resend is not configured
            EmailDeliveryError: If sending fails
        """
        name = str(data.get("name") or "").strip()
        email = str(data.get("email") or "").strip()
        phone = str(data.get("phone") or "").strip()
        details = str(data.get("details") or "").strip()

        if not name or not email or not details:
            raise ValidationError("Faltan campos requeridos.", [
                {"field": field, "message": "Required"}
                for field, value in (("name", name), ("email", email), ("details", details))
                if not value
            ])

        if not self.enabled:
            logger.warning("Contact email not sent: RESEND_API_KEY or contact addresses not set")
            raise EmailNotConfiguredError("Configuración de email incompleta.")

        params = {
            "from": self.from_email,
            "to": [self.to_email],
            "subject": f"Nueva consulta web - {name}",
            "reply_to": email,
            "text": self._build_text(name, email, phone, details),
        }

        try:
            email_response = resend.Emails.send(params)
        except Exception as e:
            logger.error(f"Failed to send contact inquiry from {email}: {str(e)}")
            raise EmailDeliveryError(str(e)) from e

        message_id = email_response.get("id") if email_response else None
        logger.info(f"Contact inquiry from {email} sent: {message_id}")

        return {
            "message_id": message_id,
            "sent_at": datetime.utcnow().isoformat() + "Z",
        }

    def _build_text(self, name: str, email: str, phone: str, details: str) -> str:
        return (
            f"Nombre: {name}\n"
            f"Email: {email}\n"
            f"Teléfono: {phone or '-'}\n"
            f"\n"
            f"Mensaje:\n"
            f"{details}"
        )
