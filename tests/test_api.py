import pytest
from fastapi.testclient import TestClient

from site_variant_engine.api import create_app
from site_variant_engine.errors import PersistenceFailure
from site_variant_engine.override_tracker import InMemoryOverrideLog, OverrideTracker
from site_variant_engine.service import VariantService
from site_variant_engine.site_store import InMemorySiteStore

SITE_PAYLOAD = {
    "sessionId": "session-42",
    "businessProfile": {
        "name": "Maison Lune",
        "industry": "service",
        "brandPersonality": ["elegant", "luxury", "sophisticated"],
    },
    "sections": [
        {"id": "sec-hero", "type": "hero", "order": 0, "variant": 1, "content": {}},
        {"id": "sec-about", "type": "about", "order": 1, "variant": 2, "content": {}},
    ],
}


class BrokenSiteStore(InMemorySiteStore):
    def save_site(self, site):
        raise PersistenceFailure("Failed to save site", {"siteId": site.id})


def build_client(store=None) -> TestClient:
    service = VariantService(
        site_store=store or InMemorySiteStore(),
        tracker=OverrideTracker(InMemoryOverrideLog()),
    )
    return TestClient(create_app(service))


@pytest.fixture
def client() -> TestClient:
    return build_client()


@pytest.fixture
def site_id(client: TestClient) -> str:
    response = client.post("/v1/sites", json=SITE_PAYLOAD)
    assert response.status_code == 201
    return response.json()["siteId"]


def test_healthcheck(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_get_site(client, site_id):
    body = client.get(f"/v1/sites/{site_id}").json()

    assert body["sessionId"] == "session-42"
    assert [section["id"] for section in body["sections"]] == ["sec-hero", "sec-about"]


def test_unknown_site_returns_404(client):
    response = client.get("/v1/sites/site_missing")

    assert response.status_code == 404
    assert response.json()["error"] == "Site not found"


def test_single_section_recommendation(client, site_id):
    response = client.post(f"/v1/sites/{site_id}/variants", json={"sectionType": "hero"})

    body = response.json()
    assert response.status_code == 200
    assert body["sectionType"] == "hero"
    assert body["recommendation"]["selectedVariant"] == 4
    assert body["recommendation"]["score"] > 0.5
    assert len(body["alternatives"]) == 4
    assert len(body["allVariants"]) == 5
    assert [item["variant"] for item in body["allVariants"] if item["isRecommended"]] == [4]


def test_batch_recommendation_defaults_to_seven_sections(client, site_id):
    body = client.post(f"/v1/sites/{site_id}/variants").json()

    assert len(body["selections"]) == 7
    assert {selection["selectedVariant"] for selection in body["selections"]} == {4}
    assert all(len(selection["alternatives"]) == 2 for selection in body["selections"])
    assert body["selections"][0]["score"] == 100
    assert body["overallReasoning"].startswith("100% overall match.")


def test_batch_recommendation_for_requested_sections(client, site_id):
    body = client.post(f"/v1/sites/{site_id}/variants", json={"sections": ["menu", "gallery"]}).json()

    assert [selection["sectionType"] for selection in body["selections"]] == ["menu", "gallery"]


def test_unknown_section_type_returns_400(client, site_id):
    response = client.post(f"/v1/sites/{site_id}/variants", json={"sectionType": "footer"})

    assert response.status_code == 400
    assert response.json()["error"] == "Unknown section type: footer"


def test_list_variants_requires_section_type(client, site_id):
    response = client.get(f"/v1/sites/{site_id}/variants")

    assert response.status_code == 400
    assert response.json()["error"] == "sectionType query parameter is required"


def test_list_variants_marks_current(client, site_id):
    body = client.get(f"/v1/sites/{site_id}/variants", params={"sectionType": "about"}).json()

    assert body["currentVariant"] == 2
    assert [item["variant"] for item in body["variants"] if item["isCurrent"]] == [2]
    assert body["variants"][0]["matchScore"] == 100


@pytest.mark.parametrize("new_variant", [0, 6])
def test_switch_variant_rejects_out_of_range(client, site_id, new_variant):
    response = client.patch(
        f"/v1/sites/{site_id}/variants",
        json={"sectionId": "sec-hero", "sectionType": "hero", "newVariant": new_variant},
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request data"
    assert client.get("/v1/analytics/overrides").json()["totalOverrides"] == 0


def test_switch_variant_records_override(client, site_id):
    response = client.patch(
        f"/v1/sites/{site_id}/variants",
        json={"sectionId": "sec-about", "sectionType": "about", "newVariant": 3},
    )

    body = response.json()
    assert response.status_code == 200
    assert body["previousVariant"] == 2
    assert body["newVariant"] == 3
    assert body["isOverride"] is True
    assert body["variantInfo"]["traits"] == ["bold", "creative", "artistic", "unique", "expressive", "vibrant"]
    assert body["variantInfo"]["matchScore"] == 0

    stats = client.get("/v1/analytics/overrides", params={"siteId": site_id}).json()
    assert stats["totalOverrides"] == 1
    assert stats["overridesBySection"] == {"about": 1}
    assert stats["overridesByVariant"] == {"3": 1}
    assert stats["mostOverriddenSection"] == "about"


def test_switch_variant_unknown_section_returns_404(client, site_id):
    response = client.patch(
        f"/v1/sites/{site_id}/variants",
        json={"sectionId": "missing", "sectionType": "contact", "newVariant": 2},
    )

    assert response.status_code == 404
    assert response.json()["error"] == "Section not found"


def test_apply_recommendations(client, site_id):
    body = client.post(f"/v1/sites/{site_id}/variants:apply").json()

    assert [section["variant"] for section in body["sections"]] == [4, 4]
    assert client.get("/v1/analytics/overrides").json()["totalOverrides"] == 0


def test_section_crud(client, site_id):
    created = client.post(
        f"/v1/sites/{site_id}/sections",
        json={"type": "contact", "content": {"showForm": True}},
    )
    section = created.json()["section"]

    assert created.status_code == 201
    assert created.json()["totalSections"] == 3
    assert section["order"] == 2
    assert section["variant"] == 4

    conflict = client.post(f"/v1/sites/{site_id}/sections", json={"type": "hero", "content": {}})
    assert conflict.status_code == 409
    assert conflict.json()["details"] == {"existingSectionId": "sec-hero"}

    updated = client.patch(f"/v1/sites/{site_id}/sections/{section['id']}", json={"order": 0, "isVisible": False})
    assert updated.json()["section"]["order"] == 0
    assert updated.json()["section"]["isVisible"] is False

    component = client.get(f"/v1/sites/{site_id}/sections/{section['id']}/component").json()
    assert component["componentName"] == "shared-contact-4"

    deleted = client.delete(f"/v1/sites/{site_id}/sections/sec-hero")
    assert deleted.json() == {"deleted": "sec-hero", "remainingSections": 2}

    listed = client.get(f"/v1/sites/{site_id}/sections").json()
    assert listed["total"] == 2
    assert [item["order"] for item in listed["sections"]] == [0, 1]


def test_invalid_section_body_returns_400(client, site_id):
    response = client.post(f"/v1/sites/{site_id}/sections", json={"type": "footer", "content": {}})

    assert response.status_code == 400


def test_persistence_failure_returns_500():
    client = build_client(store=BrokenSiteStore())
    site_id = client.post("/v1/sites", json=SITE_PAYLOAD).json()["siteId"]

    response = client.patch(
        f"/v1/sites/{site_id}/variants",
        json={"sectionId": "sec-hero", "sectionType": "hero", "newVariant": 2},
    )

    assert response.status_code == 500
    assert response.json()["error"] == "Failed to save site"
    assert client.get("/v1/analytics/overrides").json()["totalOverrides"] == 0
