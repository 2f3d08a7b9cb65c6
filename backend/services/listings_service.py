"""Fetch raw listings, normalize them and assemble the dashboard payload."""

from __future__ import annotations

import os
from typing import Any, Dict, List, Mapping, Optional

from ..db.mardel_client import MardelClient
from ..models.listing import ListingImages, ListingsResponse
from ..utils.caching import clear_prefix, ttl_memoize
from ..utils.logging import get_logger
from .aggregator import aggregate_by_neighborhood
from .normalizer import normalize_many, thumbnail_url

LOGGER = get_logger("services.listings")

RAW_CACHE_PREFIX = "listings.raw"


def _cache_ttl() -> float:
    return float(os.getenv("LISTINGS_CACHE_TTL", "60"))


def listing_image_urls(detail: Mapping[str, Any]) -> List[str]:
    """Principal image first, then the gallery, without duplicates."""

    listing = detail.get("inmueble")
    cover = listing.get("imagen_principal") if isinstance(listing, Mapping) else None
    gallery = detail.get("imagenes")
    names = [cover]
    if isinstance(gallery, list):
        names.extend(image.get("nombre") for image in gallery if isinstance(image, Mapping))

    unique = dict.fromkeys(name for name in names if isinstance(name, str) and name)
    return [thumbnail_url(name) for name in unique]


class ListingsService:
    def __init__(self, client: MardelClient) -> None:
        self.client = client

    @ttl_memoize(RAW_CACHE_PREFIX, _cache_ttl)
    def fetch_raw(self) -> List[Dict[str, Any]]:
        return self.client.list_raw_listings()

    def build_payload(self) -> ListingsResponse:
        raws = self.fetch_raw()
        listings = normalize_many(raws)
        dropped = len(raws) - len(listings)
        if dropped:
            LOGGER.info("listings_normalized total=%s kept=%s dropped=%s", len(raws), len(listings), dropped)
        return ListingsResponse(listings=listings, neighborhoods=aggregate_by_neighborhood(listings))

    def listing_images(self, listing_id: int) -> ListingImages:
        detail = self.client.get_listing_detail(listing_id)
        listing = detail.get("inmueble")
        source_id = listing.get("id") if isinstance(listing, Mapping) else None
        resolved_id = source_id if isinstance(source_id, int) and not isinstance(source_id, bool) else listing_id
        return ListingImages(id=resolved_id, images=listing_image_urls(detail))

    def invalidate(self) -> None:
        clear_prefix(RAW_CACHE_PREFIX)


_service_singleton: Optional[ListingsService] = None


def get_listings_service() -> ListingsService:
    global _service_singleton
    if _service_singleton is None:
        _service_singleton = ListingsService(MardelClient())
    return _service_singleton


def reset_listings_service() -> None:
    global _service_singleton
    if _service_singleton is not None:
        _service_singleton.invalidate()
    _service_singleton = None
