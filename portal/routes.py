"""
HTTP route handlers for the client portal.
"""

import logging
import azure.functions as func
from shared.auth import UnauthorizedError
from shared.responses import success_response, error_response, forbidden_response, redirect_response
from shared.permissions import require_user, ForbiddenError
from shared.supabase_client import PlatformError
from .service import PortalService, SlugMismatch

logger = logging.getLogger(__name__)


def register_portal_routes(app: func.FunctionApp):
    """Register client portal routes with the function app."""

    @app.route(route="clientes/{slug}", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
    async def get_client_dashboard(req: func.HttpRequest) -> func.HttpResponse:
        """
        GET /api/clientes/{slug}
        Project dashboard for the signed-in client. A slug that isn't the
        caller's own redirects to the right one.
        """
        try:
            user = require_user(req)
            slug = req.route_params.get("slug") or ""

            service = PortalService()
            dashboard = await service.get_dashboard(user["id"], slug)

            return success_response(dashboard)

        except UnauthorizedError as e:
            return error_response(str(e), 401)
        except SlugMismatch as e:
            return redirect_response(f"/api/clientes/{e.expected_slug}")
        except ForbiddenError as e:
            return forbidden_response(str(e))
        except PlatformError as e:
            return error_response(str(e), 400)
        except Exception as e:
            logger.error(f"Error loading client dashboard: {str(e)}")
            return error_response("Failed to load client dashboard", 500)
