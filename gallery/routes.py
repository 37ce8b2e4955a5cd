"""
HTTP route handlers for the admin image gallery.
"""

import logging
import azure.functions as func
from shared.auth import UnauthorizedError
from shared.responses import (
    success_response, created_response, no_content_response,
    error_response, forbidden_response, validation_error_response
)
from shared.permissions import require_admin, ForbiddenError, ValidationError
from shared.supabase_client import PlatformError
from shared.uploads import is_multipart, read_uploads
from .service import GalleryService

logger = logging.getLogger(__name__)


def register_gallery_routes(app: func.FunctionApp):
    """Register gallery routes with the function app."""

    @app.route(route="manage/gallery", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
    async def list_gallery_images(req: func.HttpRequest) -> func.HttpResponse:
        """GET /api/manage/gallery - List gallery images."""
        try:
            require_admin(req)

            service = GalleryService()
            images = await service.list_images()

            return success_response({"images": images})

        except UnauthorizedError as e:
            return error_response(str(e), 401)
        except ForbiddenError as e:
            return forbidden_response(str(e))
        except PlatformError as e:
            return error_response(str(e), 400)
        except Exception as e:
            logger.error(f"Error listing gallery images: {str(e)}")
            return error_response("Failed to list gallery images", 500)

    @app.route(route="manage/gallery", methods=["POST"], auth_level=func.AuthLevel.ANONYMOUS)
    async def upload_gallery_image(req: func.HttpRequest) -> func.HttpResponse:
        """POST /api/manage/gallery - Upload an image (multipart/form-data)."""
        try:
            require_admin(req)

            if not is_multipart(req):
                return error_response("Content-Type must be multipart/form-data", 400)

            uploads = read_uploads(req, "file")

            service = GalleryService()
            image = await service.upload_image(uploads[0] if uploads else None)

            return created_response(image)

        except UnauthorizedError as e:
            return error_response(str(e), 401)
        except ForbiddenError as e:
            return forbidden_response(str(e))
        except ValidationError as e:
            return validation_error_response(e.errors, e.message, 400)
        except PlatformError as e:
            return error_response(str(e), 400)
        except Exception as e:
            logger.error(f"Error uploading gallery image: {str(e)}")
            return error_response("Failed to upload gallery image", 500)

    @app.route(
        route="manage/gallery/{name}",
        methods=["DELETE"],
        auth_level=func.AuthLevel.ANONYMOUS
    )
    async def delete_gallery_image(req: func.HttpRequest) -> func.HttpResponse:
        """DELETE /api/manage/gallery/{name} - Remove an image."""
        try:
            require_admin(req)

            service = GalleryService()
            await service.delete_image(req.route_params.get("name"))

            return no_content_response()

        except UnauthorizedError as e:
            return error_response(str(e), 401)
        except ForbiddenError as e:
            return forbidden_response(str(e))
        except ValidationError as e:
            return validation_error_response(e.errors, e.message, 400)
        except PlatformError as e:
            return error_response(str(e), 400)
        except Exception as e:
            logger.error(f"Error deleting gallery image: {str(e)}")
            return error_response("Failed to delete gallery image", 500)
