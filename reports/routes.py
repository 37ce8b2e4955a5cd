"""
HTTP route handlers for weekly report endpoints.
"""

import logging
import azure.functions as func
from shared.auth import UnauthorizedError
from shared.responses import (
    success_response, created_response, no_content_response, error_response,
    not_found_response, forbidden_response, validation_error_response
)
from shared.permissions import require_admin, NotFoundError, ForbiddenError, ValidationError
from shared.supabase_client import PlatformError
from shared.uploads import is_multipart, read_uploads, form_value
from .service import ReportService

logger = logging.getLogger(__name__)


def register_report_routes(app: func.FunctionApp):
    """Register all weekly report routes with the function app."""

    @app.route(route="manage/reports", methods=["POST"], auth_level=func.AuthLevel.ANONYMOUS)
    async def create_reports(req: func.HttpRequest) -> func.HttpResponse:
        """
        POST /api/manage/reports
        Multipart: upload one or more photos with userId and description.
        JSON: {"userId", "reports": [...]} for photos already in storage.
        """
        try:
            require_admin(req)
            service = ReportService()

            if is_multipart(req):
                reports = await service.upload_reports(
                    form_value(req, "userId"),
                    form_value(req, "description"),
                    read_uploads(req, "file")
                )
                return created_response({"ok": True, "reportsCreated": len(reports), "reports": reports})

            try:
                body = req.get_json()
            except ValueError:
                return error_response("Invalid JSON body", 400)

            count = await service.create_reports_batch(body or {})
            return created_response({"ok": True, "reportsCreated": count})

        except UnauthorizedError as e:
            return error_response(str(e), 401)
        except ForbiddenError as e:
            return forbidden_response(str(e))
        except ValidationError as e:
            return validation_error_response(e.errors, e.message, 400)
        except PlatformError as e:
            return error_response(str(e), 400)
        except Exception as e:
            logger.error(f"Error creating weekly reports: {str(e)}")
            return error_response("Failed to create weekly reports", 500)

    @app.route(route="manage/upload", methods=["POST"], auth_level=func.AuthLevel.ANONYMOUS)
    async def upload_report(req: func.HttpRequest) -> func.HttpResponse:
        """
        POST /api/manage/upload
        Upload a single report photo (multipart/form-data) and return the report.
        """
        try:
            require_admin(req)

            if not is_multipart(req):
                return error_response("Content-Type must be multipart/form-data", 400)

            uploads = read_uploads(req, "file")[:1]

            service = ReportService()
            reports = await service.upload_reports(
                form_value(req, "userId"),
                form_value(req, "description"),
                uploads
            )
            report = reports[0]

            return success_response({
                "ok": True,
                "report": {
                    "user_id": report["user_id"],
                    "description": report["description"],
                    "photo_url": report["photo_url"],
                }
            })

        except UnauthorizedError as e:
            return error_response(str(e), 401)
        except ForbiddenError as e:
            return forbidden_response(str(e))
        except ValidationError as e:
            return validation_error_response(e.errors, e.message, 400)
        except PlatformError as e:
            return error_response(str(e), 400)
        except Exception as e:
            logger.error(f"Error uploading weekly report: {str(e)}")
            return error_response("Failed to upload weekly report", 500)

    @app.route(route="manage/reports", methods=["GET"], auth_level=func.AuthLevel.ANONYMOUS)
    async def list_reports(req: func.HttpRequest) -> func.HttpResponse:
        """
        GET /api/manage/reports?userId=...
        List a client's weekly reports.
        """
        try:
            require_admin(req)
            user_id = (req.params.get("userId") or "").strip()

            if not user_id:
                return error_response("userId es obligatorio.", 400)

            service = ReportService()
            reports = await service.list_reports(user_id)

            return success_response({"reports": reports})

        except UnauthorizedError as e:
            return error_response(str(e), 401)
        except ForbiddenError as e:
            return forbidden_response(str(e))
        except PlatformError as e:
            return error_response(str(e), 400)
        except Exception as e:
            logger.error(f"Error listing weekly reports: {str(e)}")
            return error_response("Failed to list weekly reports", 500)

    @app.route(
        route="manage/reports/{report_id}",
        methods=["DELETE"],
        auth_level=func.AuthLevel.ANONYMOUS
    )
    async def delete_report(req: func.HttpRequest) -> func.HttpResponse:
        """
        DELETE /api/manage/reports/{report_id}
        Delete a weekly report and its photo.
        """
        try:
            require_admin(req)
            report_id = req.route_params.get("report_id")

            if not report_id:
                return error_response("Report ID is required", 400)

            service = ReportService()
            await service.delete_report(report_id)

            return no_content_response()

        except UnauthorizedError as e:
            return error_response(str(e), 401)
        except ForbiddenError as e:
            return forbidden_response(str(e))
        except NotFoundError as e:
            return not_found_response("Report", str(e))
        except PlatformError as e:
            return error_response(str(e), 400)
        except Exception as e:
            logger.error(f"Error deleting weekly report: {str(e)}")
            return error_response("Failed to delete weekly report", 500)
