"""
HTTP route handlers for login, logout and the current user.
"""

import logging
import azure.functions as func
from shared.auth import UnauthorizedError, get_bearer_token
from shared.responses import (
    success_response, no_content_response, error_response,
    forbidden_response, validation_error_response
)
from shared.permissions import require_user, ForbiddenError, ValidationError
from shared.supabase_client import PlatformError
from .service import SessionService

logger = logging.getLogger(__name__)


def register_session_routes(app: func.FunctionApp):
    """Register session routes with the function app."""

    @app.route(route="auth/login", methods=["POST"], auth_level=func.AuthLevel.ANONYMOUS)
    async def login(req: func.HttpRequest) -> func.HttpResponse:
        """
        POST /api/auth/login
        Sign in with {"email", "password"} and get the landing route for the role.
        """
        try:
            try:
                body = req.get_json()
            except ValueError:
                return error_response("Invalid JSON body", 400)

            body = body or {}
            service = SessionService()
            result = await service.sign_in(body.get("email"), body.get("password"))

            return success_response(result)

        except ValidationError as e:
            return validation_error_response(e.errors, e.message, 400)
        except UnauthorizedError as e:
            return error_response(str(e), 401)
        except ForbiddenError as e:
            return forbidden_response(str(e))
        except PlatformError as e:
            return error_response(str(e), 400)
        except Exception as e:
            logger.error(f"Error signing in: {str(e)}")
            return error_response("Failed to sign in", 500)

    @app.route(route="auth/logout", methods=["POST"], auth_level=func.AuthLevel.ANONYMOUS)
    async def logout(req: func.HttpRequest) -> func.HttpResponse:
        """
        POST /api/auth/logout
        Revoke the caller's sessions.
        """
        try:
            require_user(req)

            service = SessionService()
            await service.sign_out(get_bearer_token(req))

            return no_content_response()

        except UnauthorizedError as e:
            return error_response(str(e), 401)
        except PlatformError as e:
            return error_response(str(e), 400)
        except Exception as e:
            logger.error(f"Error signing out: {str(e)}")
            return error_response("Failed to sign out", 500)

    @app.route(route="auth/me", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
    async def current_user(req: func.HttpRequest) -> func.HttpResponse:
        """
        GET /api/auth/me
        Identity and role of the caller.
        """
        try:
            user = require_user(req)

            service = SessionService()
            me = await service.describe_user(user)

            return success_response(me)

        except UnauthorizedError as e:
            return error_response(str(e), 401)
        except PlatformError as e:
            return error_response(str(e), 400)
        except Exception as e:
            logger.error(f"Error loading current user: {str(e)}")
            return error_response("Failed to load current user", 500)
