"""
Estudio Backend - Azure Functions Application

A Python-based Azure Functions backend for an architecture studio website:
public landing page content and contact form, a password-protected client
portal, and the admin dashboard API. Supabase provides the database, auth
and file storage.
"""

import azure.functions as func
import datetime
import json
import logging
import os

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Create the main Function App instance; authorization is done per route with Supabase JWTs
app = func.FunctionApp(http_auth_level=func.AuthLevel.ANONYMOUS)

from clients.routes import register_client_routes
from contact.routes import register_contact_routes
from gallery.routes import register_gallery_routes
from landing.routes import register_landing_routes
from portal.routes import register_portal_routes
from reports.routes import register_report_routes
from sessions.routes import register_session_routes

# =============================================================================
# Health Check Endpoint
# =============================================================================

@app.route(route="health", methods=["GET"])
def health_check(req: func.HttpRequest) -> func.HttpResponse:
    """Health check endpoint to verify the Azure Function is running."""
    logger.info("Health check endpoint called.")

    health_status = {
        "status": "healthy",
        "timestamp": datetime.datetime.utcnow().isoformat() + "Z",
        "service": "Estudio Backend",
        "version": "1.0.0",
        "environment": os.environ.get("AZURE_FUNCTIONS_ENVIRONMENT", "Development")
    }

    return func.HttpResponse(
        json.dumps(health_status),
        status_code=200,
        mimetype="application/json"
    )

# =============================================================================
# Public site, client portal and admin dashboard
# =============================================================================

register_landing_routes(app)
register_contact_routes(app)
register_session_routes(app)
register_portal_routes(app)
register_client_routes(app)
register_report_routes(app)
register_gallery_routes(app)
