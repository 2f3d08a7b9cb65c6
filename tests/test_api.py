import pytest
from fastapi.testclient import TestClient

from backend.api import app
from backend.db.mardel_client import UpstreamError
from backend.services.listings_service import (
    ListingsService,
    get_listings_service,
    listing_image_urls,
    reset_listings_service,
)

THUMBS = "https://api.mardelinmueble.com/uploads/inmuebles/thumbnails/"

RAW_LISTINGS = [
    {"id": 1, "titulo": "Casa", "latitud": -38.0, "longitud": -57.5, "precio": "100000", "moneda": 2,
     "casa_sup_cubierta": "50", "casa_sup_terreno": "80", "barrio_nombre": "Centro", "imagen_principal": "c1.jpg"},
    {"id": 2, "titulo": "Sin coordenadas", "latitud": None, "longitud": -57.5, "precio": "90000"},
    {"id": 3, "titulo": "Chalet", "latitud": -38.01, "longitud": -57.53, "precio": "300000", "moneda": 2,
     "casa_sup_cubierta": "100", "barrio_nombre": "Playa Grande", "fecha_alta": "2024-05-02"},
    {"id": 4, "titulo": "Lote", "latitud": -38.02, "longitud": -57.56, "precio": "40000",
     "casa_sup_terreno": "300", "barrio_nombre": ""},
]


class FakeClient:
    def __init__(self, raws=None, detail=None, error=None):
        self.raws = raws if raws is not None else RAW_LISTINGS
        self.detail = detail or {}
        self.error = error
        self.list_calls = 0

    def list_raw_listings(self):
        self.list_calls += 1
        if self.error:
            raise self.error
        return self.raws

    def get_listing_detail(self, listing_id):
        if self.error:
            raise self.error
        return self.detail


@pytest.fixture
def make_client():
    def _make(fake):
        service = ListingsService(fake)
        app.dependency_overrides[get_listings_service] = lambda: service
        return TestClient(app, raise_server_exceptions=False)

    yield _make
    app.dependency_overrides.clear()


def test_health(make_client):
    assert make_client(FakeClient()).get("/api/health").json() == {"status": "ok"}


def test_listings_payload(make_client):
    resp = make_client(FakeClient()).get("/api/listings")
    assert resp.status_code == 200
    payload = resp.json()
    assert [listing["id"] for listing in payload["listings"]] == [1, 3, 4]
    first = payload["listings"][0]
    assert first["price_usd"] == 100000
    assert first["weighted_area_m2"] == pytest.approx(59)
    assert first["price_per_m2"] == pytest.approx(1694.915, rel=1e-4)
    assert first["cover_image_url"] == THUMBS + "c1.jpg"
    assert payload["listings"][2]["price_per_m2"] is None
    assert payload["listings"][1]["created_at"].startswith("2024-05-02")
    assert [group["name"] for group in payload["neighborhoods"]] == ["Playa Grande", "Centro", "Sin barrio"]
    assert payload["neighborhoods"][2] == {"name": "Sin barrio", "listing_count": 1, "avg_price_per_m2": None}


def test_raw_fetch_is_cached(make_client):
    fake = FakeClient()
    client = make_client(fake)
    client.get("/api/listings")
    client.get("/api/listings")
    assert fake.list_calls == 1


def test_raw_fetch_cache_disabled_with_zero_ttl(make_client, monkeypatch):
    monkeypatch.setenv("LISTINGS_CACHE_TTL", "0")
    fake = FakeClient()
    client = make_client(fake)
    client.get("/api/listings")
    client.get("/api/listings")
    assert fake.list_calls == 2


def test_failed_fetch_is_retried(make_client):
    fake = FakeClient(error=UpstreamError("Upstream answered 503", status_code=503))
    client = make_client(fake)
    assert client.get("/api/listings").status_code == 502
    fake.error = None
    resp = client.get("/api/listings")
    assert resp.status_code == 200
    assert len(resp.json()["listings"]) == 3
    assert fake.list_calls == 2


def test_invalidate_forces_refetch():
    fake = FakeClient()
    service = ListingsService(fake)
    service.build_payload()
    service.invalidate()
    service.build_payload()
    assert fake.list_calls == 2


def test_reset_listings_service_builds_a_new_singleton():
    reset_listings_service()
    first = get_listings_service()
    assert get_listings_service() is first
    reset_listings_service()
    assert get_listings_service() is not first
    reset_listings_service()


def test_upstream_failure_maps_to_502(make_client):
    error = UpstreamError("Upstream answered 503", status_code=503, body="maintenance")
    resp = make_client(FakeClient(error=error)).get("/api/listings")
    assert resp.status_code == 502
    detail = resp.json()["detail"]
    assert detail["upstream_status"] == 503
    assert detail["upstream_body"] == "maintenance"


def test_unexpected_failure_maps_to_500(make_client):
    resp = make_client(FakeClient(error=KeyError("boom"))).get("/api/listings")
    assert resp.status_code == 500
    assert "error" in resp.json()["detail"]


def test_listing_images(make_client):
    detail = {
        "success": True,
        "inmueble": {"id": 7, "imagen_principal": "cover.jpg"},
        "imagenes": [{"nombre": "a.jpg"}, {"nombre": "cover.jpg"}, {"nombre": ""}, {"nombre": None}, {"nombre": "b.jpg"}],
    }
    resp = make_client(FakeClient(detail=detail)).get("/api/listings/7/images")
    assert resp.status_code == 200
    assert resp.json() == {"id": 7, "images": [THUMBS + "cover.jpg", THUMBS + "a.jpg", THUMBS + "b.jpg"]}


def test_listing_images_falls_back_to_requested_id(make_client):
    resp = make_client(FakeClient(detail={"success": True, "imagenes": [{"nombre": "x.jpg"}]})).get("/api/listings/12/images")
    assert resp.json() == {"id": 12, "images": [THUMBS + "x.jpg"]}


def test_image_urls_without_gallery():
    assert listing_image_urls({"inmueble": {"imagen_principal": None}}) == []
    assert listing_image_urls({"inmueble": {"imagen_principal": "p.jpg"}, "imagenes": "nope"}) == [THUMBS + "p.jpg"]
