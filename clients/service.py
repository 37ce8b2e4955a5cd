"""
Business logic for admin client management.

A client is spread over four records: the Supabase auth user, a
user_roles row, a client_profiles row and one client_links row per
category. Creation writes them in that order and undoes the earlier
writes when a later one fails.
"""

import logging
from typing import Dict, List, Optional
from shared.supabase_client import SupabaseService, PlatformError, error_message
from shared.permissions import ValidationError, ROLE_CLIENT

logger = logging.getLogger(__name__)

EDITABLE_CATEGORIES = ["DOCUMENTACION", "PLANOS", "RENDERS", "CONTRATOS", "PAGOS"]
LINK_CATEGORIES = EDITABLE_CATEGORIES + ["FOTOS"]


def _clean(value) -> str:
    return value.strip() if isinstance(value, str) else ""


def _clean_links(links) -> Dict[str, str]:
    if not isinstance(links, dict):
        return {}
    return {str(category): _clean(url) for category, url in links.items()}


class ClientService(SupabaseService):
    """Service class for client CRUD operations."""

    async def list_clients(self) -> List[Dict]:
        """List every client profile ordered by name."""
        result = self.execute(
            self.table("client_profiles")
                .select("id, user_id, client_name, project_status")
                .order("client_name"),
            "list client profiles"
        )
        return result.data or []

    async def get_client(self, user_id: str) -> Dict:
        """
        Get a client's profile and editable links.

        A user without a profile row comes back with profile None.
        """
        profile_result = self.execute(
            self.table("client_profiles")
                .select("id, user_id, client_name, project_status")
                .eq("user_id", user_id)
                .limit(1),
            "load client profile"
        )

        links_result = self.execute(
            self.table("client_links")
                .select("category, url")
                .eq("user_id", user_id)
                .in_("category", EDITABLE_CATEGORIES),
            "load client links"
        )

        return {
            "profile": profile_result.data[0] if profile_result.data else None,
            "links": links_result.data or [],
        }

    async def create_client(self, data: Dict) -> Dict:
        """
        Create the auth user, role, profile and links for a new client.

        Args:
            data: {"email", "password", "clientName", "projectStatus", "links"}

        Returns:
            {"user_id": str}

        Raises:
            ValidationError: If required fields or links are missing
            PlatformError: If any Supabase step fails (earlier steps are undone)
        """
        email = _clean(data.get("email"))
        password = _clean(data.get("password"))
        client_name = _clean(data.get("clientName"))
        project_status = _clean(data.get("projectStatus")) or None
        links = _clean_links(data.get("links"))

        if not email or not password or not client_name:
            raise ValidationError(
                "Email, password y client_name son obligatorios.",
                [
                    {"field": field, "message": "Required"}
                    for field, value in (("email", email), ("password", password), ("clientName", client_name))
                    if not value
                ]
            )

        missing = next((c for c in LINK_CATEGORIES if not links.get(c)), None)
        if missing:
            raise ValidationError(
                f"Falta el link para la categoría {missing}.",
                [{"field": f"links.{missing}", "message": "Required"}]
            )

        try:
            auth_result = self.client.auth.admin.create_user({
                "email": email,
                "password": password,
                "email_confirm": True,
                "user_metadata": {"role": ROLE_CLIENT},
            })
        except Exception as e:
            logger.error(f"Error creating auth user for {email}: {str(e)}")
            raise PlatformError(error_message(e)) from e

        if not auth_result or not auth_result.user:
            raise PlatformError("No se pudo crear el usuario.")

        user_id = auth_result.user.id
        logger.info(f"Created auth user {user_id} for client {client_name}")

        try:
            self.execute(
                self.table("user_roles").insert({"user_id": user_id, "role": ROLE_CLIENT}),
                "insert client role"
            )
        except PlatformError:
            self._undo_create(user_id, [])
            raise

        try:
            self.execute(
                self.table("client_profiles").insert({
                    "user_id": user_id,
                    "client_name": client_name,
                    "project_status": project_status,
                }),
                "insert client profile"
            )
        except PlatformError:
            self._undo_create(user_id, ["user_roles"])
            raise

        try:
            self.execute(
                self.table("client_links").insert([
                    {"user_id": user_id, "category": category, "url": links[category]}
                    for category in LINK_CATEGORIES
                ]),
                "insert client links"
            )
        except PlatformError:
            self._undo_create(user_id, ["client_profiles", "user_roles"])
            raise

        return {"user_id": user_id}

    def _undo_create(self, user_id: str, tables: List[str]) -> None:
        """
        Remove rows written for a half-created client, then its auth user.
        Cleanup failures are logged; the original error is what the caller sees.
        """
        for table_name in tables:
            try:
                self.table(table_name).delete().eq("user_id", user_id).execute()
            except Exception as e:
                logger.warning(f"Rollback: could not delete {table_name} rows for {user_id}: {str(e)}")

        try:
            self.client.auth.admin.delete_user(user_id)
            logger.warning(f"Rollback: removed auth user {user_id}")
        except Exception as e:
            logger.warning(f"Rollback: could not delete auth user {user_id}: {str(e)}")

    async def update_client(self, user_id: str, data: Dict) -> None:
        """
        Update project status and replace the editable links.

        Raises:
            ValidationError: If any editable link is missing
            PlatformError: If a Supabase step fails
        """
        project_status = _clean(data.get("projectStatus")) or None
        links = _clean_links(data.get("links"))

        missing = next((c for c in EDITABLE_CATEGORIES if not links.get(c)), None)
        if missing:
            raise ValidationError(
                f"Falta el link para {missing}.",
                [{"field": f"links.{missing}", "message": "Required"}]
            )

        self.execute(
            self.table("client_profiles")
                .update({"project_status": project_status})
                .eq("user_id", user_id),
            "update project status"
        )

        self.execute(
            self.table("client_links")
                .delete()
                .eq("user_id", user_id)
                .in_("category", EDITABLE_CATEGORIES),
            "clear editable links"
        )

        self.execute(
            self.table("client_links").insert([
                {"user_id": user_id, "category": category, "url": links[category]}
                for category in EDITABLE_CATEGORIES
            ]),
            "insert editable links"
        )

    async def delete_client(self, user_id: Optional[str]) -> None:
        """
        Delete every record of a client, auth user last.

        Raises:
            ValidationError: If user_id is empty
            PlatformError: On the first Supabase step that fails
        """
        user_id = _clean(user_id)
        if not user_id:
            raise ValidationError(
                "userId es obligatorio.",
                [{"field": "userId", "message": "Required"}]
            )

        for table_name in ("client_links", "weekly_reports", "client_profiles", "user_roles"):
            self.execute(
                self.table(table_name).delete().eq("user_id", user_id),
                f"delete {table_name} rows"
            )

        try:
            self.client.auth.admin.delete_user(user_id)
        except Exception as e:
            logger.error(f"Error deleting auth user {user_id}: {str(e)}")
            raise PlatformError(error_message(e)) from e

        logger.info(f"Deleted client {user_id}")
