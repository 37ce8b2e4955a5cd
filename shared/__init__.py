# Shared utilities for the Estudio backend
from .auth import get_user_from_token, UnauthorizedError
from .supabase_client import get_supabase_client, PlatformError, SupabaseService
from .responses import success_response, error_response, created_response, no_content_response, not_found_response, forbidden_response, validation_error_response
from .permissions import require_admin, require_user, ForbiddenError, NotFoundError, ValidationError

__all__ = [
    "get_user_from_token",
    "UnauthorizedError",
    "get_supabase_client",
    "PlatformError",
    "SupabaseService",
    "success_response",
    "error_response",
    "created_response",
    "no_content_response",
    "not_found_response",
    "forbidden_response",
    "validation_error_response",
    "require_admin",
    "require_user",
    "ForbiddenError",
    "NotFoundError",
    "ValidationError",
]
