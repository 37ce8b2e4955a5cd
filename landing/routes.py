"""
HTTP route handlers for landing page endpoints.
"""

import logging
import azure.functions as func
from shared.auth import UnauthorizedError
from shared.responses import success_response, error_response, forbidden_response, validation_error_response
from shared.permissions import require_admin, ForbiddenError, ValidationError
from shared.supabase_client import PlatformError
from shared.uploads import is_multipart, read_uploads, form_value
from .service import LandingService

logger = logging.getLogger(__name__)


def register_landing_routes(app: func.FunctionApp):
    """Register landing page routes with the function app."""

    @app.route(route="landing", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
    async def get_landing(req: func.HttpRequest) -> func.HttpResponse:
        """
        GET /api/landing
        Public landing page content.
        """
        try:
            service = LandingService()
            landing = await service.get_landing()

            return success_response(landing)

        except PlatformError as e:
            return error_response(str(e), 400)
        except Exception as e:
            logger.error(f"Error loading landing page: {str(e)}")
            return error_response("Failed to load landing page", 500)

    @app.route(
        route="manage/landing-sections",
        methods=["GET"],
        auth_level=func.AuthLevel.ANONYMOUS
    )
    async def list_landing_sections(req: func.HttpRequest) -> func.HttpResponse:
        """
        GET /api/manage/landing-sections
        List CMS rows for the landing page.
        """
        try:
            require_admin(req)

            service = LandingService()
            sections = await service.list_sections()

            return success_response({"sections": sections})

        except UnauthorizedError as e:
            return error_response(str(e), 401)
        except ForbiddenError as e:
            return forbidden_response(str(e))
        except PlatformError as e:
            return error_response(str(e), 400)
        except Exception as e:
            logger.error(f"Error listing landing sections: {str(e)}")
            return error_response("Failed to list landing sections", 500)

    @app.route(
        route="manage/landing-sections",
        methods=["POST"],
        auth_level=func.AuthLevel.ANONYMOUS
    )
    async def update_landing_section(req: func.HttpRequest) -> func.HttpResponse:
        """
        POST /api/manage/landing-sections
        Replace the image of one landing slot (multipart/form-data).
        """
        try:
            require_admin(req)

            if not is_multipart(req):
                return error_response("Content-Type must be multipart/form-data", 400)

            uploads = read_uploads(req, "file")

            service = LandingService()
            section = await service.replace_section_image(
                form_value(req, "sectionKey"),
                form_value(req, "sortOrder"),
                form_value(req, "title"),
                uploads[0] if uploads else None
            )

            return success_response({"ok": True, "section": section})

        except UnauthorizedError as e:
            return error_response(str(e), 401)
        except ForbiddenError as e:
            return forbidden_response(str(e))
        except ValidationError as e:
            return validation_error_response(e.errors, e.message, 400)
        except PlatformError as e:
            return error_response(str(e), 400)
        except Exception as e:
            logger.error(f"Error updating landing section: {str(e)}")
            return error_response("Failed to update landing section", 500)
