"""
Role resolution and access control for the admin dashboard and client portal.
"""

import logging
import re
import unicodedata
from typing import Any, Dict, List, Optional
import azure.functions as func
from .auth import get_user_from_token
from .supabase_client import PlatformError, error_message, get_supabase_client

logger = logging.getLogger(__name__)

ROLE_ADMIN = "admin"
ROLE_CLIENT = "client"

_ROLE_ALIASES = {
    "admin": ROLE_ADMIN,
    "administrator": ROLE_ADMIN,
    "client": ROLE_CLIENT,
    "cliente": ROLE_CLIENT,
}

_SLUG_SEPARATORS = re.compile(r"[^a-z0-9]+")


class ForbiddenError(Exception):
    """Raised when a user doesn't have permission to access a resource."""
    pass


class NotFoundError(Exception):
    """Raised when a resource is not found."""
    pass


class ValidationError(Exception):
    """Raised when request data is missing or malformed."""

    def __init__(self, message: str, errors: Optional[List[Dict[str, str]]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or []


def normalize_role(value: Any) -> Optional[str]:
    """
    Map a free-form role value onto "admin", "client" or None.

    Matching ignores case and surrounding whitespace; Spanish "cliente"
    and "administrator" are accepted aliases.
    """
    if not isinstance(value, str):
        return None
    return _ROLE_ALIASES.get(value.strip().lower())


def resolve_role_from_metadata(user: Optional[Dict]) -> Optional[str]:
    """
    Resolve the role stored on the auth user itself.
    user_metadata wins over app_metadata.
    """
    if not user:
        return None

    role = normalize_role((user.get("user_metadata") or {}).get("role"))
    if role:
        return role

    return normalize_role((user.get("app_metadata") or {}).get("role"))


def to_client_slug(client_name: str) -> str:
    """
    URL slug for a client name: "José Pérez & Hnos." -> "jose-perez-hnos".
    """
    decomposed = unicodedata.normalize("NFD", client_name.strip().lower())
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return _SLUG_SEPARATORS.sub("-", stripped).strip("-")


def fetch_role_row(user_id: str) -> Optional[str]:
    """
    Look up a user's role in the user_roles table.

    Returns:
        Normalized role, or None when there is no usable row

    Raises:
        PlatformError: If the user_roles query fails
    """
    client = get_supabase_client()

    try:
        result = client.table("user_roles") \
            .select("role") \
            .eq("user_id", user_id) \
            .limit(1) \
            .execute()
    except Exception as e:
        logger.error(f"Failed to load role for user {user_id}: {error_message(e)}")
        raise PlatformError(error_message(e)) from e

    if not result.data:
        return None

    return normalize_role(result.data[0].get("role"))


def resolve_user_role(user: Dict) -> Optional[str]:
    """Role from token metadata, falling back to the user_roles table."""
    role = resolve_role_from_metadata(user)
    if role:
        return role
    return fetch_role_row(user["id"])


def require_user(req: func.HttpRequest) -> Dict:
    """
    Authenticate the request.

    Raises:
        UnauthorizedError: If the bearer token is missing or invalid
    """
    return get_user_from_token(req)


def require_admin(req: func.HttpRequest) -> Dict:
    """
    Authenticate the request and check the caller is an admin.

    Returns:
        The authenticated user dict

    Raises:
        UnauthorizedError: If the bearer token is missing or invalid
        ForbiddenError: If the user's role is not admin
    """
    user = get_user_from_token(req)

    if resolve_user_role(user) != ROLE_ADMIN:
        logger.warning(f"Non-admin user {user['id']} attempted an admin operation")
        raise ForbiddenError("Unauthorized")

    return user
