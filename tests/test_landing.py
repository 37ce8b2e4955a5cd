import pytest

from landing import content
from landing.routes import register_landing_routes
from landing.service import LandingService, parse_sort_order
from shared.permissions import ValidationError
from shared.supabase_client import PlatformError
from shared.uploads import ImageUpload

from helpers import json_body, make_multipart_request, make_request, make_token, route_handlers

routes = route_handlers(register_landing_routes)

ADMIN_TOKEN = make_token("admin-1", role="admin")
PNG = ImageUpload(name="casa.png", data=b"\x89PNG", content_type="image/png")


@pytest.mark.parametrize("value, expected", [
    (None, 1),
    ("", 1),
    ("3", 3),
    (" 20 ", 20),
    ("2.0", 2),
    ("2.5", None),
    ("abc", None),
])
def test_parse_sort_order(value, expected):
    assert parse_sort_order(value) == expected


async def test_landing_defaults_when_cms_is_empty(supabase):
    landing = await LandingService().get_landing()

    assert landing["hero"] == content.HERO
    assert landing["obras"] == content.OBRAS
    assert landing["detalles"] == content.DETALLES
    assert landing["servicios"] == content.SERVICIOS
    assert landing["contacto"]["phone"] == content.CONTACTO["phone"]


async def test_cms_rows_override_their_section_only(supabase):
    supabase.tables["landing_sections"] = [
        {"section_key": "obras", "sort_order": 2, "title": "Casa B", "image_url": "https://cdn/b.jpg"},
        {"section_key": "obras", "sort_order": 1, "title": "Casa A", "image_url": "https://cdn/a.jpg"},
        {"section_key": "hero", "sort_order": 1, "title": None, "image_url": "https://cdn/hero.jpg"},
    ]

    landing = await LandingService().get_landing()

    assert landing["obras"] == [
        {"caption": "Casa A", "image_url": "https://cdn/a.jpg"},
        {"caption": "Casa B", "image_url": "https://cdn/b.jpg"},
    ]
    assert landing["hero"]["image_url"] == "https://cdn/hero.jpg"
    assert landing["hero"]["title"] == content.HERO["title"]
    assert landing["detalles"] == content.DETALLES


async def test_replace_section_image_swaps_the_row(supabase):
    supabase.tables["landing_sections"] = [
        {"section_key": "detalles", "sort_order": 2, "title": "Viejo", "image_url": "https://cdn/old.jpg"},
        {"section_key": "detalles", "sort_order": 3, "title": "Otro", "image_url": "https://cdn/other.jpg"},
    ]

    row = await LandingService().replace_section_image(" Detalles ", "2", " Escalera ", PNG)

    assert row["section_key"] == "detalles"
    assert row["title"] == "Escalera"
    path = next(iter(supabase.storage.objects["proyectos"]))
    assert path.startswith("landing/detalles/2-") and path.endswith(".png")
    assert supabase.storage.objects["proyectos"][path]["options"]["upsert"] == "true"

    slot_two = [r for r in supabase.tables["landing_sections"] if r["sort_order"] == 2]
    assert len(slot_two) == 1
    assert slot_two[0]["image_url"].endswith(path)
    assert len(supabase.tables["landing_sections"]) == 2


@pytest.mark.parametrize("key, order", [("footer", "1"), ("hero", "2"), ("obras", "21"), ("obras", "0")])
async def test_replace_section_image_rejects_bad_slots(supabase, key, order):
    with pytest.raises(ValidationError):
        await LandingService().replace_section_image(key, order, "", PNG)


async def test_replace_section_image_only_accepts_jpeg_and_png(supabase):
    webp = ImageUpload(name="x.webp", data=b"RIFF", content_type="image/webp")

    with pytest.raises(ValidationError, match="Solo JPG o PNG"):
        await LandingService().replace_section_image("obras", "1", "", webp)


async def test_replace_section_image_requires_file(supabase):
    with pytest.raises(ValidationError, match="Faltan datos"):
        await LandingService().replace_section_image("obras", "1", "", None)


async def test_insert_failure_removes_uploaded_image(supabase):
    supabase.fail("landing_sections", "insert", "nope")

    with pytest.raises(PlatformError):
        await LandingService().replace_section_image("obras", "1", "", PNG)

    assert len(supabase.storage.removed) == 1


async def test_public_landing_route(supabase):
    response = await routes.get_landing(make_request(url="/api/landing"))

    assert response.status_code == 200
    assert json_body(response)["servicios"] == content.SERVICIOS


async def test_admin_sections_route_orders_rows(supabase):
    supabase.tables["landing_sections"] = [
        {"section_key": "obras", "sort_order": 2, "title": None, "image_url": "b"},
        {"section_key": "hero", "sort_order": 1, "title": None, "image_url": "h"},
        {"section_key": "obras", "sort_order": 1, "title": None, "image_url": "a"},
    ]

    response = await routes.list_landing_sections(
        make_request(url="/api/manage/landing-sections", token=ADMIN_TOKEN)
    )

    assert [s["image_url"] for s in json_body(response)["sections"]] == ["h", "a", "b"]


async def test_admin_upload_route(supabase):
    req = make_multipart_request(
        "/api/manage/landing-sections",
        {"sectionKey": "hero", "sortOrder": "1", "title": "Portada"},
        [("file", "hero.jpg", "image/jpeg", b"\xff\xd8")],
        token=ADMIN_TOKEN,
    )

    response = await routes.update_landing_section(req)

    assert response.status_code == 200
    assert json_body(response)["section"]["title"] == "Portada"


async def test_admin_upload_route_requires_multipart(supabase):
    response = await routes.update_landing_section(
        make_request("POST", "/api/manage/landing-sections", body={}, token=ADMIN_TOKEN)
    )
    assert response.status_code == 400
