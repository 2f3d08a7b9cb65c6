"""Helper client used by the Streamlit app to talk to the API or fall back to local services."""

from __future__ import annotations

import os
from typing import List, Optional

import requests
from requests import Response

from backend.models.listing import ListingImages, ListingsResponse
from backend.services.listings_service import ListingsService, get_listings_service
from backend.utils.logging import get_logger, kv

LOGGER = get_logger("app.backend_client")


class BackendClient:
    def __init__(self) -> None:
        self.base_url = os.getenv("API_BASE_URL", "http://localhost:8000")
        self.session = requests.Session()
        self.service: Optional[ListingsService] = None
        self.use_api = self._ping_api()
        if not self.use_api:
            self._enable_local_mode()

    def _ping_api(self) -> bool:
        try:
            resp = self.session.get(f"{self.base_url}/api/health", timeout=2)
            return resp.status_code == 200
        except requests.RequestException:
            return False

    def load_listings(self) -> ListingsResponse:
        if self.use_api:
            try:
                resp = self.session.get(f"{self.base_url}/api/listings", timeout=60)
                if resp.status_code == 502:
                    raise RuntimeError(self._error_message(resp))
                self._raise_for_status(resp)
                return ListingsResponse.model_validate(resp.json())
            except requests.RequestException:
                self._enable_local_mode()
        return self.service.build_payload()  # type: ignore[union-attr]

    def listing_images(self, listing_id: int) -> List[str]:
        if self.use_api:
            try:
                resp = self.session.get(f"{self.base_url}/api/listings/{listing_id}/images", timeout=20)
                self._raise_for_status(resp)
                return ListingImages.model_validate(resp.json()).images
            except requests.RequestException:
                self._enable_local_mode()
        return self.service.listing_images(listing_id).images  # type: ignore[union-attr]

    def gallery_images(self, listing_id: int) -> List[str]:
        """Image URLs for the detail card, or an empty list when they cannot be fetched."""
        try:
            return self.listing_images(listing_id)
        except Exception as exc:
            LOGGER.warning("listing_images_failed %s", kv(id=listing_id, error=exc))
            return []

    def _enable_local_mode(self) -> None:
        if self.service is None:
            LOGGER.info("api_unreachable base_url=%s; using in-process service", self.base_url)
            self.service = get_listings_service()
        self.use_api = False

    @staticmethod
    def _error_message(response: Response) -> str:
        try:
            detail = response.json().get("detail") or {}
        except ValueError:
            return f"API error {response.status_code}"
        if isinstance(detail, dict):
            return str(detail.get("error") or detail)
        return str(detail)

    def _raise_for_status(self, response: Response) -> None:
        try:
            response.raise_for_status()
        except requests.RequestException:
            self._enable_local_mode()
            raise
