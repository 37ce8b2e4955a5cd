"""
HTTP route handler for the landing page contact form.
"""

import logging
import azure.functions as func
from shared.responses import success_response, error_response, validation_error_response
from shared.permissions import ValidationError
from .service import ContactService, EmailNotConfiguredError, EmailDeliveryError

logger = logging.getLogger(__name__)


def register_contact_routes(app: func.FunctionApp):
    """Register the contact route with the function app."""

    @app.route(route="contact", methods=["POST"], auth_level=func.AuthLevel.ANONYMOUS)
    async def send_contact(req: func.HttpRequest) -> func.HttpResponse:
        """
        POST /api/contact
        Email a contact form inquiry to the studio.
        """
        try:
            try:
                body = req.get_json()
            except ValueError:
                return error_response("Invalid JSON body", 400)

            service = ContactService()
            await service.send_inquiry(body or {})

            return success_response({"success": True})

        except ValidationError as e:
            return validation_error_response(e.errors, e.message, 400)
        except (EmailNotConfiguredError, EmailDeliveryError) as e:
            return error_response(str(e), 500)
        except Exception as e:
            logger.error(f"Error sending contact inquiry: {str(e)}")
            return error_response("Error inesperado.", 500)
