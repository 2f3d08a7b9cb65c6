import logging

from app import backend_client
from app.backend_client import BackendClient
from backend.db.mardel_client import UpstreamError
from backend.services.listings_service import ListingsService


class FailingDetailClient:
    def list_raw_listings(self):
        return []

    def get_listing_detail(self, listing_id):
        raise UpstreamError("Upstream answered 500", status_code=500)


class DetailClient(FailingDetailClient):
    def get_listing_detail(self, listing_id):
        return {"success": True, "inmueble": {"id": listing_id, "imagen_principal": "p.jpg"}}


def _local_client(monkeypatch, upstream):
    monkeypatch.setattr(BackendClient, "_ping_api", lambda self: False)
    monkeypatch.setattr(backend_client, "get_listings_service", lambda: ListingsService(upstream))
    return BackendClient()


def test_gallery_images_logs_and_falls_back_to_empty(monkeypatch, caplog):
    monkeypatch.setattr(logging.getLogger("valor_m2"), "propagate", True)
    client = _local_client(monkeypatch, FailingDetailClient())
    with caplog.at_level(logging.WARNING, logger="valor_m2"):
        assert client.gallery_images(9) == []
    record = next(r for r in caplog.records if r.name == "valor_m2.app.backend_client")
    assert record.levelno == logging.WARNING
    assert "listing_images_failed" in record.getMessage()
    assert "id=9" in record.getMessage()


def test_gallery_images_in_local_mode(monkeypatch):
    client = _local_client(monkeypatch, DetailClient())
    assert client.use_api is False
    assert client.gallery_images(9) == ["https://api.mardelinmueble.com/uploads/inmuebles/thumbnails/p.jpg"]
