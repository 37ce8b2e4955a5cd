"""
HTTP route handlers for admin client endpoints.
"""

import logging
import azure.functions as func
from shared.auth import UnauthorizedError
from shared.responses import (
    success_response, created_response, error_response,
    forbidden_response, validation_error_response
)
from shared.permissions import require_admin, ForbiddenError, ValidationError
from shared.supabase_client import PlatformError
from .service import ClientService

logger = logging.getLogger(__name__)


def register_client_routes(app: func.FunctionApp):
    """Register all admin client routes with the function app."""

    @app.route(route="manage/clients", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
    async def list_clients(req: func.HttpRequest) -> func.HttpResponse:
        """
        GET /api/manage/clients
        List all clients.
        """
        try:
            require_admin(req)

            service = ClientService()
            clients = await service.list_clients()

            return success_response({"clients": clients})

        except UnauthorizedError as e:
            return error_response(str(e), 401)
        except ForbiddenError as e:
            return forbidden_response(str(e))
        except PlatformError as e:
            return error_response(str(e), 400)
        except Exception as e:
            logger.error(f"Error listing clients: {str(e)}")
            return error_response("Failed to list clients", 500)

    @app.route(route="manage/clients", methods=["POST"], auth_level=func.AuthLevel.ANONYMOUS)
    async def create_client(req: func.HttpRequest) -> func.HttpResponse:
        """
        POST /api/manage/clients
        Create a client account with its profile and links.
        """
        try:
            require_admin(req)

            try:
                body = req.get_json()
            except ValueError:
                return error_response("Invalid JSON body", 400)

            service = ClientService()
            created = await service.create_client(body or {})

            return created_response({"ok": True, **created})

        except UnauthorizedError as e:
            return error_response(str(e), 401)
        except ForbiddenError as e:
            return forbidden_response(str(e))
        except ValidationError as e:
            return validation_error_response(e.errors, e.message, 400)
        except PlatformError as e:
            return error_response(str(e), 400)
        except Exception as e:
            logger.error(f"Error creating client: {str(e)}")
            return error_response("Failed to create client", 500)

    @app.route(route="manage/clients", methods=["DELETE"], auth_level=func.AuthLevel.ANONYMOUS)
    async def delete_client(req: func.HttpRequest) -> func.HttpResponse:
        """
        DELETE /api/manage/clients
        Delete a client. The id comes in the JSON body ({"userId": ...}) or ?userId=.
        """
        try:
            require_admin(req)

            user_id = req.params.get("userId")
            if not user_id and req.get_body():
                try:
                    body = req.get_json()
                except ValueError:
                    return error_response("Invalid JSON body", 400)
                user_id = (body or {}).get("userId")

            service = ClientService()
            await service.delete_client(user_id)

            return success_response({"ok": True})

        except UnauthorizedError as e:
            return error_response(str(e), 401)
        except ForbiddenError as e:
            return forbidden_response(str(e))
        except ValidationError as e:
            return validation_error_response(e.errors, e.message, 400)
        except PlatformError as e:
            return error_response(str(e), 400)
        except Exception as e:
            logger.error(f"Error deleting client: {str(e)}")
            return error_response("Failed to delete client", 500)

    @app.route(
        route="manage/clients/{user_id}",
        methods=["GET"],
        auth_level=func.AuthLevel.ANONYMOUS
    )
    async def get_client(req: func.HttpRequest) -> func.HttpResponse:
        """
        GET /api/manage/clients/{user_id}
        Get a client's profile and editable links.
        """
        try:
            require_admin(req)
            user_id = req.route_params.get("user_id")

            if not user_id:
                return error_response("User ID is required", 400)

            service = ClientService()
            client = await service.get_client(user_id)

            return success_response(client)

        except UnauthorizedError as e:
            return error_response(str(e), 401)
        except ForbiddenError as e:
            return forbidden_response(str(e))
        except PlatformError as e:
            return error_response(str(e), 400)
        except Exception as e:
            logger.error(f"Error getting client: {str(e)}")
            return error_response("Failed to get client", 500)

    @app.route(
        route="manage/clients/{user_id}",
        methods=["PATCH"],
        auth_level=func.AuthLevel.ANONYMOUS
    )
    async def update_client(req: func.HttpRequest) -> func.HttpResponse:
        """
        PATCH /api/manage/clients/{user_id}
        Update project status and editable links.
        """
        try:
            require_admin(req)
            user_id = req.route_params.get("user_id")

            if not user_id:
                return error_response("User ID is required", 400)

            try:
                body = req.get_json()
            except ValueError:
                return error_response("Invalid JSON body", 400)

            service = ClientService()
            await service.update_client(user_id, body or {})

            return success_response({"ok": True})

        except UnauthorizedError as e:
            return error_response(str(e), 401)
        except ForbiddenError as e:
            return forbidden_response(str(e))
        except ValidationError as e:
            return validation_error_response(e.errors, e.message, 400)
        except PlatformError as e:
            return error_response(str(e), 400)
        except Exception as e:
            logger.error(f"Error updating client: {str(e)}")
            return error_response("Failed to update client", 500)
