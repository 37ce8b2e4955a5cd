"""
Business logic for password sign-in and sign-out.
"""

import logging
from typing import Dict, Optional
from shared.auth import UnauthorizedError
from shared.supabase_client import SupabaseService, PlatformError, create_auth_client, error_message
from shared.permissions import (
    ForbiddenError, ValidationError, ROLE_ADMIN, ROLE_CLIENT,
    fetch_role_row, normalize_role, resolve_role_from_metadata, to_client_slug
)

logger = logging.getLogger(__name__)

INVALID_PROFILE_MESSAGE = "Tu usuario no tiene un perfil válido para ingresar."


class SessionService(SupabaseService):
    """Service class for user sessions."""

    def _load_profile(self, user_id: str) -> Optional[Dict]:
        result = self.execute(
            self.table("client_profiles").select("*").eq("user_id", user_id).limit(1),
            "load client profile"
        )
        return result.data[0] if result.data else None

    def resolve_destination(self, user: Dict) -> Dict:
        """
        Decide where a signed-in user lands.

        Role order: auth metadata, user_roles, client_profiles.role, and
        finally any profile with a client name counts as a client.

        Returns:
            {"role", "redirect", "client_name"}

        Raises:
            ForbiddenError: If the user is neither an admin nor a named client
        """
        role = resolve_role_from_metadata(user) or fetch_role_row(user["id"])
        profile = self._load_profile(user["id"]) or {}

        if not role:
            role = normalize_role(profile.get("role"))

        client_name = (profile.get("client_name") or "").strip() or None
        if client_name and not role:
            role = ROLE_CLIENT

        if role == ROLE_ADMIN:
            return {"role": role, "redirect": "/admin", "client_name": client_name}

        if role == ROLE_CLIENT and client_name and to_client_slug(client_name):
            return {
                "role": role,
                "redirect": f"/clientes/{to_client_slug(client_name)}",
                "client_name": client_name,
            }

        raise ForbiddenError(INVALID_PROFILE_MESSAGE)

    async def sign_in(self, email: str, password: str) -> Dict:
        """
        Sign in with email and password.

        Returns:
            {"role", "redirect", "client_name", "session": {...}}

        Raises:
            ValidationError: If email or password is empty
            UnauthorizedError: If Supabase rejects the credentials
            ForbiddenError: If the account has no valid profile (it is signed out)
        """
        email = (email or "").strip()
        if not email or not password:
            raise ValidationError("Email y contraseña son obligatorios.", [
                {"field": field, "message": "Required"}
                for field, value in (("email", email), ("password", password))
                if not value
            ])

        auth_client = create_auth_client()
        try:
            auth_result = auth_client.auth.sign_in_with_password({"email": email, "password": password})
        except Exception as e:
            logger.warning(f"Sign-in failed for {email}: {str(e)}")
            raise UnauthorizedError(error_message(e)) from e

        if not auth_result or not auth_result.user or not auth_result.session:
            raise UnauthorizedError("No pudimos iniciar sesión. Intentá nuevamente.")

        auth_user = auth_result.user
        user = {
            "id": auth_user.id,
            "email": auth_user.email,
            "user_metadata": auth_user.user_metadata or {},
            "app_metadata": auth_user.app_metadata or {},
        }

        try:
            destination = self.resolve_destination(user)
        except Exception:
            auth_client.auth.sign_out()
            raise

        session = auth_result.session
        logger.info(f"User {user['id']} signed in as {destination['role']}")

        return {
            **destination,
            "session": {
                "access_token": session.access_token,
                "refresh_token": session.refresh_token,
                "expires_at": session.expires_at,
            },
        }

    async def sign_out(self, access_token: str) -> None:
        """
        Revoke every session of the token's user.

        Raises:
            PlatformError: If Supabase refuses the sign-out
        """
        try:
            self.client.auth.admin.sign_out(access_token)
        except Exception as e:
            logger.error(f"Error signing out: {str(e)}")
            raise PlatformError(error_message(e)) from e

    async def describe_user(self, user: Dict) -> Dict:
        """Identity and resolved role of an authenticated user."""
        role = resolve_role_from_metadata(user) or fetch_role_row(user["id"])
        return {"id": user["id"], "email": user.get("email"), "role": role}
