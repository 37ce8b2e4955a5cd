"""
Business logic for the client portal: one client's project dashboard.
"""

import logging
from datetime import date
from typing import Dict, List, Optional
from shared.supabase_client import SupabaseService
from shared.permissions import ForbiddenError, to_client_slug

logger = logging.getLogger(__name__)

RESOURCE_CARDS = [
    ("DOCUMENTACIÓN DE LA OBRA", "DOCUMENTACION"),
    ("PLANOS", "PLANOS"),
    ("RENDERS", "RENDERS"),
    ("CONTRATOS", "CONTRATOS"),
    ("SEGUIMIENTO DE PAGOS", "PAGOS"),
]

NO_STATUS = "Sin estado"
NO_DATE = "sin-fecha"
NO_DATE_LABEL = "FECHA NO DISPONIBLE"

SPANISH_MONTHS = [
    "enero", "febrero", "marzo", "abril", "mayo", "junio",
    "julio", "agosto", "septiembre", "octubre", "noviembre", "diciembre",
]


class SlugMismatch(Exception):
    """Raised when the requested slug is not the caller's own."""

    def __init__(self, expected_slug: str):
        super().__init__(expected_slug)
        self.expected_slug = expected_slug


def _first_text(row: Dict, *keys: str) -> str:
    for key in keys:
        value = row.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return ""


def format_report_date(date_key: str) -> str:
    """
    "2026-10-18" -> "18 DE OCTUBRE DE 2026".
    """
    if not date_key or date_key == NO_DATE:
        return NO_DATE_LABEL
    try:
        parsed = date.fromisoformat(date_key)
    except ValueError:
        return NO_DATE_LABEL
    return f"{parsed.day:02d} de {SPANISH_MONTHS[parsed.month - 1]} de {parsed.year}".upper()


def build_cards(link_rows: List[Dict]) -> List[Dict]:
    """Resource cards in display order; url is None when no link was set."""
    links = {}
    for row in link_rows:
        category = (row.get("category") or "").strip().upper()
        url = (row.get("url") or "").strip()
        if category and url:
            links[category] = url

    return [
        {"title": label, "category": category, "url": links.get(category)}
        for label, category in RESOURCE_CARDS
    ]


def build_reports(report_rows: List[Dict]) -> List[Dict]:
    """Normalize report rows, dropping those with no image."""
    reports = []
    for index, row in enumerate(report_rows):
        image_url = _first_text(row, "photo_url", "image_url", "url")
        if not image_url:
            continue

        created_at = row.get("created_at") or row.get("report_date")
        reports.append({
            "id": str(row["id"]) if row.get("id") is not None else f"{created_at or 'report'}-{index}",
            "image_url": image_url,
            "description": _first_text(row, "description", "summary", "notes"),
            "created_at": created_at,
        })
    return reports


def group_reports(reports: List[Dict]) -> List[Dict]:
    """
    Group report photos by (day, description), keeping first-seen order.
    """
    groups: Dict[str, Dict] = {}
    for report in reports:
        date_key = str(report.get("created_at") or "")[:10] or NO_DATE
        description = report["description"].strip()
        group_key = f"{date_key}::{description or 'sin-descripcion'}"

        group = groups.get(group_key)
        if group is None:
            group = groups[group_key] = {
                "id": group_key,
                "date_key": date_key,
                "date_label": format_report_date(date_key),
                "description": description,
                "photos": [],
            }
        group["photos"].append({"id": report["id"], "image_url": report["image_url"]})

    return list(groups.values())


class PortalService(SupabaseService):
    """Service class for the client dashboard."""

    async def get_profile(self, user_id: str) -> Optional[Dict]:
        result = self.execute(
            self.table("client_profiles")
                .select("*")
                .eq("user_id", user_id)
                .limit(1),
            "load client profile"
        )
        return result.data[0] if result.data else None

    async def get_dashboard(self, user_id: str, slug: str) -> Dict:
        """
        Build the dashboard for the authenticated client.

        Args:
            user_id: The authenticated user's ID
            slug: Slug from the URL

        Returns:
            {"client_name", "slug", "project_status", "cards", "report_groups"}

        Raises:
            ForbiddenError: If the user has no usable client profile
            SlugMismatch: If slug is not this client's slug
        """
        profile = await self.get_profile(user_id)
        client_name = _first_text(profile or {}, "client_name")

        if not client_name:
            raise ForbiddenError("Tu usuario no tiene un perfil de cliente.")

        expected_slug = to_client_slug(client_name)
        if not expected_slug:
            raise ForbiddenError("Tu usuario no tiene un perfil de cliente.")
        if slug != expected_slug:
            raise SlugMismatch(expected_slug)

        links_result = self.execute(
            self.table("client_links")
                .select("category, url")
                .eq("user_id", user_id),
            "load client links"
        )

        reports_result = self.execute(
            self.table("weekly_reports")
                .select("*")
                .eq("user_id", user_id)
                .order("report_date", desc=True)
                .order("created_at", desc=True),
            "load weekly reports"
        )
        report_rows = reports_result.data or []
        logger.info(f"Portal for {user_id}: {len(report_rows)} weekly report row(s)")

        return {
            "client_name": client_name,
            "slug": expected_slug,
            "project_status": _first_text(profile, "project_status") or NO_STATUS,
            "cards": build_cards(links_result.data or []),
            "report_groups": group_reports(build_reports(report_rows)),
        }
