from datetime import date

import pytest

from reports.routes import register_report_routes
from reports.service import ReportService, MISSING_DATA_MESSAGE
from shared.permissions import NotFoundError, ValidationError
from shared.supabase_client import PlatformError
from shared.uploads import ImageUpload

from helpers import (
    SUPABASE_URL, json_body, make_multipart_request, make_request, make_token, route_handlers
)

routes = route_handlers(register_report_routes)

ADMIN_TOKEN = make_token("admin-1", role="admin")
JPEG = ImageUpload(name="obra.JPG", data=b"\xff\xd8jpeg", content_type="image/jpeg")
WEBP = ImageUpload(name="obra.webp", data=b"RIFFwebp", content_type="image/webp")


async def test_upload_reports_stores_photos_then_rows(supabase):
    rows = await ReportService().upload_reports("u-1", " Hormigonado de losa ", [JPEG, WEBP])

    stored = supabase.storage.objects["proyectos"]
    assert len(stored) == 2
    assert all(path.startswith("weekly-reports/u-1/") for path in stored)
    assert sorted(path.rsplit(".", 1)[1] for path in stored) == ["jpg", "webp"]
    assert all(obj["options"]["upsert"] == "false" for obj in stored.values())

    assert len(rows) == 2
    assert all(row["description"] == "Hormigonado de losa" for row in rows)
    assert all(row["report_date"] == date.today().isoformat() for row in rows)
    assert all(row["photo_url"].startswith(f"{SUPABASE_URL}/storage/v1/object/public/proyectos/") for row in rows)
    assert len(supabase.tables["weekly_reports"]) == 2


async def test_upload_reports_requires_all_fields(supabase):
    with pytest.raises(ValidationError) as exc:
        await ReportService().upload_reports("u-1", "   ", [])

    assert exc.value.message == MISSING_DATA_MESSAGE
    assert {e["field"] for e in exc.value.errors} == {"description", "file"}


async def test_upload_reports_rejects_non_images(supabase):
    pdf = ImageUpload(name="plano.pdf", data=b"%PDF", content_type="application/pdf")

    with pytest.raises(ValidationError, match="Solo JPG, PNG o WEBP"):
        await ReportService().upload_reports("u-1", "Avance", [JPEG, pdf])

    assert "proyectos" not in supabase.storage.objects


async def test_insert_failure_removes_uploaded_photos(supabase):
    supabase.fail("weekly_reports", "insert", "insert denied")

    with pytest.raises(PlatformError, match="insert denied"):
        await ReportService().upload_reports("u-1", "Avance", [JPEG, WEBP])

    assert len(supabase.storage.removed) == 2
    assert supabase.storage.objects["proyectos"] == {}


async def test_upload_failure_skips_insert(supabase):
    supabase.storage.fail_upload = "bucket not found"

    with pytest.raises(PlatformError, match="bucket not found"):
        await ReportService().upload_reports("u-1", "Avance", [JPEG])

    assert ("weekly_reports", "insert") not in supabase.calls


async def test_batch_insert_uses_defaults(supabase):
    count = await ReportService().create_reports_batch({
        "userId": "u-1",
        "description": "Colocación de aberturas",
        "reports": [
            {"photo_url": "https://cdn/1.jpg"},
            {"photo_url": "https://cdn/2.jpg", "description": "Fachada", "report_date": "2026-10-01"},
        ],
    })

    assert count == 2
    first, second = supabase.tables["weekly_reports"]
    assert first["user_id"] == "u-1"
    assert first["description"] == "Colocación de aberturas"
    assert first["report_date"] == date.today().isoformat()
    assert second["description"] == "Fachada"
    assert second["report_date"] == "2026-10-01"


async def test_batch_requires_photo_urls(supabase):
    with pytest.raises(ValidationError):
        await ReportService().create_reports_batch({"userId": "u-1", "reports": [{"photo_url": " "}]})


async def test_batch_requires_entries(supabase):
    with pytest.raises(ValidationError):
        await ReportService().create_reports_batch({"userId": "u-1", "reports": []})


async def test_delete_report_removes_stored_photo(supabase):
    url = f"{SUPABASE_URL}/storage/v1/object/public/proyectos/weekly-reports/u-1/1-a.jpg"
    supabase.tables["weekly_reports"] = [{"id": 7, "user_id": "u-1", "photo_url": url}]

    await ReportService().delete_report(7)

    assert supabase.tables["weekly_reports"] == []
    assert supabase.storage.removed == ["weekly-reports/u-1/1-a.jpg"]


async def test_delete_report_keeps_foreign_urls(supabase):
    supabase.tables["weekly_reports"] = [{"id": 8, "photo_url": "https://images.example.com/a.jpg"}]

    await ReportService().delete_report(8)

    assert supabase.storage.removed == []


async def test_delete_unknown_report(supabase):
    with pytest.raises(NotFoundError):
        await ReportService().delete_report(99)


async def test_multipart_route_uploads_every_file(supabase):
    req = make_multipart_request(
        "/api/manage/reports",
        {"userId": "u-1", "description": "Avance semanal"},
        [
            ("file", "a.png", "image/png", b"\x89PNGa"),
            ("file", "b.jpg", "image/jpeg", b"\xff\xd8b"),
        ],
        token=ADMIN_TOKEN,
    )

    response = await routes.create_reports(req)

    assert response.status_code == 201
    assert json_body(response)["reportsCreated"] == 2
    assert len(supabase.tables["weekly_reports"]) == 2


async def test_json_route_inserts_batch(supabase):
    req = make_request(
        "POST", "/api/manage/reports", token=ADMIN_TOKEN,
        body={"userId": "u-1", "reports": [{"photo_url": "https://cdn/x.jpg"}]}
    )

    response = await routes.create_reports(req)

    assert response.status_code == 201
    assert json_body(response) == {"ok": True, "reportsCreated": 1}


async def test_upload_route_returns_single_report(supabase):
    req = make_multipart_request(
        "/api/manage/upload",
        {"userId": "u-1", "description": "Losa"},
        [("file", "losa.webp", "image/webp", b"RIFF")],
        token=ADMIN_TOKEN,
    )

    response = await routes.upload_report(req)

    body = json_body(response)
    assert response.status_code == 200
    assert body["report"]["user_id"] == "u-1"
    assert body["report"]["photo_url"].endswith(".webp")


async def test_upload_route_missing_file_is_400(supabase):
    req = make_multipart_request(
        "/api/manage/upload", {"userId": "u-1", "description": "Losa"}, [], token=ADMIN_TOKEN
    )

    response = await routes.upload_report(req)

    assert response.status_code == 400
    assert json_body(response)["message"] == MISSING_DATA_MESSAGE


async def test_list_route_requires_user_id(supabase):
    response = await routes.list_reports(make_request(url="/api/manage/reports", token=ADMIN_TOKEN))
    assert response.status_code == 400


async def test_delete_route_succeeds_when_photo_removal_fails(supabase):
    url = f"{SUPABASE_URL}/storage/v1/object/public/proyectos/weekly-reports/u-1/1-a.jpg"
    supabase.tables["weekly_reports"] = [{"id": "7", "user_id": "u-1", "photo_url": url}]
    supabase.storage.fail_remove = "storage down"

    response = await routes.delete_report(
        make_request("DELETE", "/api/manage/reports/7", token=ADMIN_TOKEN, route_params={"report_id": "7"})
    )

    assert response.status_code == 204
    assert supabase.tables["weekly_reports"] == []
